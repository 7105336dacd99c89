"""
annealpath-jax: annealing schedules and interpolated gradients for
tempered samplers.
"""
from .core import BufferPool, as_buffer_pool
from .potentials import FunctionLogPotential, GaussianLogPotential
from .paths import LinearInterpolator, InterpolatingPath, InterpolatedLogPotential, interpolate, discretize
from .inference import (
    Schedule,
    equally_spaced_schedule,
    adapted_schedule,
    BarrierInversionCFG,
    update_schedule,
    JaxGradient,
    JaxGradientCFG,
    BufferedEvaluator,
    InPlaceBufferedEvaluator,
    buffered_evaluator,
    InterpolatedGradientEvaluator,
    differentiate,
)

__version__ = "0.1.0"

__all__ = [
    "BufferPool",
    "as_buffer_pool",
    "FunctionLogPotential",
    "GaussianLogPotential",
    "LinearInterpolator",
    "InterpolatingPath",
    "InterpolatedLogPotential",
    "interpolate",
    "discretize",
    "Schedule",
    "equally_spaced_schedule",
    "adapted_schedule",
    "BarrierInversionCFG",
    "update_schedule",
    "JaxGradient",
    "JaxGradientCFG",
    "BufferedEvaluator",
    "InPlaceBufferedEvaluator",
    "buffered_evaluator",
    "InterpolatedGradientEvaluator",
    "differentiate",
]
