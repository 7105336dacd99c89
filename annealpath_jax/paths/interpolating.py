# annealpath_jax/paths/interpolating.py
"""
Annealing paths between a reference (β = 0) and a target (β = 1).

A path is a pair of endpoint log potentials plus an interpolator:

    log π_β(x) = interpolator(log π_ref(x), log π_target(x), β)

Only the linear interpolator is provided:

    log π_β(x) = (1 - β) log π_ref(x) + β log π_target(x)

The path is instantiated at the grid points of a Schedule (see `discretize`),
giving one InterpolatedLogPotential per chain.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from ..core.typing import LogPotential


@dataclass(frozen=True)
class LinearInterpolator:
    """(1 - β) * ref + β * target."""

    def __call__(self, ref_value, target_value, beta):
        return (1.0 - beta) * ref_value + beta * target_value


@dataclass(frozen=True)
class InterpolatingPath:
    """
    Endpoints of an annealing path.

    ref: log potential at β = 0 (tractable reference)
    target: log potential at β = 1 (distribution of interest)
    interpolator: how endpoint values are combined at intermediate β
    """
    ref: LogPotential
    target: LogPotential
    interpolator: Any = field(default_factory=LinearInterpolator)

    def __post_init__(self):
        d_ref = self.ref.dimension()
        d_target = self.target.dimension()
        if d_ref != d_target:
            raise ValueError(
                f"Reference and target dimensions differ: {d_ref} != {d_target}."
            )

    def dimension(self) -> int:
        return self.ref.dimension()


class InterpolatedLogPotential:
    """
    The path evaluated at a single β.

    `beta` is a plain attribute: outer adaptation may move it between
    iterations, and gradient evaluators built on top of this object read it
    on every call.
    """

    def __init__(self, path: InterpolatingPath, beta: float):
        beta = float(beta)
        if not 0.0 <= beta <= 1.0:
            raise ValueError(f"beta must lie in [0, 1], got {beta}.")
        self.path = path
        self.beta = beta

    def __call__(self, x):
        path = self.path
        return path.interpolator(path.ref(x), path.target(x), self.beta)

    def dimension(self) -> int:
        return self.path.dimension()

    def __repr__(self) -> str:
        return f"InterpolatedLogPotential(beta={self.beta})"


def interpolate(path: InterpolatingPath, beta: float) -> InterpolatedLogPotential:
    """Instantiate `path` at inverse temperature `beta`."""
    return InterpolatedLogPotential(path, beta)


def discretize(path: InterpolatingPath, schedule) -> List[InterpolatedLogPotential]:
    """
    One log potential per grid point of `schedule` (chain i targets grids[i]).

    Args:
        path: Annealing path
        schedule: Schedule with n_chains grid points

    Returns:
        List of length schedule.n_chains()
    """
    return [interpolate(path, beta) for beta in schedule.grids]
