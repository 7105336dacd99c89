# annealpath_jax/inference/autodiff/jax_backend.py
"""
JAX gradient backend.

Differentiates any LogPotential whose __call__ is JAX-traceable with
jax.value_and_grad. Values come back as Python floats and gradients as numpy
arrays, so results can be written into the float64 scratch buffers owned by
the evaluators.
"""
from __future__ import annotations

from dataclasses import dataclass

import jax
import numpy as np

from ...core.typing import LogPotential


@dataclass(frozen=True)
class JaxGradientCFG:
    """Configuration for the JAX backend."""
    jit: bool = True


class JaxGradient:
    """
    Differentiable log-density backed by jax.value_and_grad.

    Args:
        log_potential: JAX-traceable model with a dimension()
        cfg: JaxGradientCFG
    """

    def __init__(self, log_potential: LogPotential, cfg: JaxGradientCFG = JaxGradientCFG()):
        self.log_potential = log_potential
        self.cfg = cfg

        def logdensity_fn(x):
            return log_potential(x)

        value_and_grad_fn = jax.value_and_grad(logdensity_fn)
        if cfg.jit:
            logdensity_fn = jax.jit(logdensity_fn)
            value_and_grad_fn = jax.jit(value_and_grad_fn)
        self._logdensity_fn = logdensity_fn
        self._value_and_grad_fn = value_and_grad_fn

    def dimension(self) -> int:
        return self.log_potential.dimension()

    def evaluate(self, x) -> float:
        return float(self._logdensity_fn(x))

    def evaluate_with_gradient(self, x):
        value, grad = self._value_and_grad_fn(x)
        return float(value), np.asarray(grad)

    def evaluate_with_gradient_into(self, x, out: np.ndarray) -> float:
        value, grad = self._value_and_grad_fn(x)
        np.copyto(out, grad)
        return float(value)
