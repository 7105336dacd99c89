# annealpath_jax/potentials/gaussian.py
"""
Diagonal Gaussian log-density with a hand-written gradient.

Typical use is as the reference (beta = 0) of an annealing path, possibly
paired with a target differentiated by JAX:

    log N(x; m, diag(s^2)) = -0.5 * sum(((x - m) / s)^2) - sum(log s) - 0.5 * d * log(2π)
    grad                   = -(x - m) / s^2

The gradient is written straight into caller storage, so evaluating it
through an InPlaceBufferedEvaluator never allocates.
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import jax.numpy as jnp


@dataclass(frozen=True, eq=False)
class GaussianLogPotential:
    """
    N(mean, diag(std^2)) on R^d.

    Also callable with JAX arrays, so the "jax" backend can differentiate it
    as well (useful to cross-check the hand-written gradient).
    """
    mean: np.ndarray
    std: np.ndarray

    def __post_init__(self):
        mean = np.array(self.mean, dtype=np.float64, ndmin=1)
        std = np.broadcast_to(np.asarray(self.std, dtype=np.float64), mean.shape).copy()
        if mean.ndim != 1:
            raise ValueError(f"mean must be a vector, got shape {mean.shape}.")
        if np.any(std <= 0.0):
            raise ValueError("std must be strictly positive.")
        mean.setflags(write=False)
        std.setflags(write=False)
        object.__setattr__(self, "mean", mean)
        object.__setattr__(self, "std", std)
        object.__setattr__(
            self,
            "_log_norm",
            float(-np.sum(np.log(std)) - 0.5 * mean.shape[0] * np.log(2.0 * np.pi)),
        )

    @classmethod
    def standard(cls, dim: int, mean: float = 0.0) -> GaussianLogPotential:
        """Isotropic unit-variance Gaussian centred at `mean` in every coordinate."""
        return cls(mean=np.full(dim, mean), std=np.ones(dim))

    def __call__(self, x) -> jnp.ndarray:
        z = (x - self.mean) / self.std
        return -0.5 * jnp.sum(z ** 2) + self._log_norm

    def dimension(self) -> int:
        return self.mean.shape[0]

    def evaluate(self, x) -> float:
        z = (np.asarray(x) - self.mean) / self.std
        return float(-0.5 * np.dot(z, z) + self._log_norm)

    def evaluate_with_gradient_into(self, x, out: np.ndarray) -> float:
        x = np.asarray(x)
        # out holds z = (x - m) / s, then grad = -z / s
        np.subtract(x, self.mean, out=out)
        np.divide(out, self.std, out=out)
        sq = float(np.dot(out, out))
        np.divide(out, self.std, out=out)
        np.negative(out, out=out)
        return -0.5 * sq + self._log_norm

    def evaluate_with_gradient(self, x):
        out = np.empty(self.dimension(), dtype=np.float64)
        value = self.evaluate_with_gradient_into(x, out)
        return value, out
