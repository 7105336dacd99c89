"""
Allocation-free gradient evaluation.

  - base.py: registry of gradient backends
  - jax_backend.py: "jax" backend (jax.value_and_grad)
  - buffered.py: BufferedEvaluator, one log-density + scratch vector
  - interpolated.py: InterpolatedGradientEvaluator, (1 - β) ref + β target
  - factory.py: differentiate(), builds the right evaluator for a chain
"""
from .base import register, get
from .jax_backend import JaxGradient, JaxGradientCFG
from .buffered import BufferedEvaluator, InPlaceBufferedEvaluator, buffered_evaluator
from .interpolated import InterpolatedGradientEvaluator
from .factory import differentiate

# --------------------------------------------------
# Registry
# --------------------------------------------------
register("jax", JaxGradient)

__all__ = [
    "register",
    "get",
    "JaxGradient",
    "JaxGradientCFG",
    "BufferedEvaluator",
    "InPlaceBufferedEvaluator",
    "buffered_evaluator",
    "InterpolatedGradientEvaluator",
    "differentiate",
]
