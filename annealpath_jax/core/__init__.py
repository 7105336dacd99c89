# annealpath_jax/core/__init__.py
from .typing import Array, LogPotential, DifferentiableLogDensity, InPlaceDifferentiable
from .buffers import BufferPool, as_buffer_pool

__all__ = [
    "Array",
    "LogPotential",
    "DifferentiableLogDensity",
    "InPlaceDifferentiable",
    "BufferPool",
    "as_buffer_pool",
]
