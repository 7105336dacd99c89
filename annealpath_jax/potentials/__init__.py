"""
Log-density models.

  - base.py: FunctionLogPotential (JAX-traceable model, differentiated by a backend)
  - gaussian.py: GaussianLogPotential (hand-written in-place gradient)
"""
from .base import FunctionLogPotential
from .gaussian import GaussianLogPotential

__all__ = [
    "FunctionLogPotential",
    "GaussianLogPotential",
]
