# annealpath_jax/paths/__init__.py
from .interpolating import (
    LinearInterpolator,
    InterpolatingPath,
    InterpolatedLogPotential,
    interpolate,
    discretize,
)

__all__ = [
    "LinearInterpolator",
    "InterpolatingPath",
    "InterpolatedLogPotential",
    "interpolate",
    "discretize",
]
