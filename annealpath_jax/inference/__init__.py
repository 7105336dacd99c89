# annealpath_jax/inference/__init__.py
from __future__ import annotations

"""
Inference layer.

Two pieces of an annealing sampler live here:
  - schedules.*: where along the path chains are placed (Schedule,
    equally spaced and equal-barrier constructions),
  - autodiff.*: allocation-free gradients of endpoint and interpolated
    log potentials, evaluated once per proposal per chain.

Sampling, swapping, barrier estimation and parallel execution belong to the
sampler driving these pieces.
"""

from .schedules import (
    Schedule,
    equally_spaced_schedule,
    adapted_schedule,
    BarrierInversionCFG,
    update_schedule,
)
from .autodiff import (
    JaxGradient, JaxGradientCFG,
    BufferedEvaluator, InPlaceBufferedEvaluator, buffered_evaluator,
    InterpolatedGradientEvaluator,
    differentiate,
)

__all__ = [
    "Schedule",
    "equally_spaced_schedule",
    "adapted_schedule",
    "BarrierInversionCFG",
    "update_schedule",
    "JaxGradient", "JaxGradientCFG",
    "BufferedEvaluator", "InPlaceBufferedEvaluator", "buffered_evaluator",
    "InterpolatedGradientEvaluator",
    "differentiate",
]
