# annealpath_jax/potentials/base.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import jax.numpy as jnp


@dataclass(frozen=True)
class FunctionLogPotential:
    """
    A JAX-traceable log-density with a declared dimension.

    fn: (x: (d,)) -> scalar log-density
    dim: d

    This is the plain model type: it has no gradient of its own and is
    differentiated by a registered backend (e.g. "jax").
    """
    fn: Callable
    dim: int

    def __post_init__(self):
        if self.dim < 1:
            raise ValueError(f"dim must be >= 1, got {self.dim}.")

    def __call__(self, x) -> jnp.ndarray:
        return self.fn(x)

    def dimension(self) -> int:
        return self.dim
