# annealpath_jax/inference/schedules/schedule.py
"""
Annealing schedules.

A Schedule is a partition of [0, 1] by non-decreasing grid points starting at
0 and ending at 1. Chain i of a round targets the path at grids[i].

Two constructions:
  - equally_spaced_schedule: cold start, grids[i] = i / (n - 1)
  - adapted_schedule: equal-barrier placement from the previous round's
    cumulative barrier (see update.py)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from .update import BarrierInversionCFG, update_schedule


@dataclass(frozen=True, eq=False)
class Schedule:
    """
    Monotone grid on [0, 1] with endpoints exactly 0.0 and 1.0.

    `grids` is stored as a read-only float64 array, so a Schedule can be
    shared freely between chains.
    """
    grids: np.ndarray

    def __post_init__(self):
        grids = np.array(self.grids, dtype=np.float64)
        if grids.ndim != 1 or grids.shape[0] < 2:
            raise ValueError(
                f"A schedule needs a 1-D grid with at least 2 points, got shape {grids.shape}."
            )
        if not np.all(np.diff(grids) >= 0.0):
            raise ValueError(f"Schedule grid must be sorted ascending: {grids}.")
        if grids[0] != 0.0:
            raise ValueError(f"Schedule grid must start at 0.0, got {grids[0]}.")
        if grids[-1] != 1.0:
            raise ValueError(f"Schedule grid must end at 1.0, got {grids[-1]}.")
        grids.setflags(write=False)
        object.__setattr__(self, "grids", grids)

    def n_chains(self) -> int:
        """Number of chains, one per grid point."""
        return self.grids.shape[0]

    def __len__(self) -> int:
        return self.n_chains()

    def __eq__(self, other) -> bool:
        if not isinstance(other, Schedule):
            return NotImplemented
        return np.array_equal(self.grids, other.grids)

    def __hash__(self) -> int:
        return hash(self.grids.tobytes())


def equally_spaced_schedule(n_chains: int) -> Schedule:
    """
    Schedule with `n_chains` equally spaced grid points.

    Args:
        n_chains: Number of grid points (>= 2)

    Returns:
        Schedule with grids[i] = i / (n_chains - 1)
    """
    if n_chains < 2:
        raise ValueError(f"n_chains must be >= 2, got {n_chains}.")
    grids = np.arange(n_chains, dtype=np.float64) / (n_chains - 1)
    return Schedule(grids)


def adapted_schedule(
    n_chains: int,
    cumulative_barrier: Callable[[float], float],
    cfg: BarrierInversionCFG = BarrierInversionCFG(),
) -> Schedule:
    """
    Schedule with `n_chains` grid points equally spaced in barrier coordinates.

    Grid points crowd where the barrier grows fastest, i.e. where neighbouring
    chains would otherwise struggle to communicate.

    Args:
        n_chains: Number of grid points (>= 2)
        cumulative_barrier: Monotone non-decreasing Λ on [0, 1] with Λ(0) = 0
        cfg: Bisection settings for the inversion

    Returns:
        Schedule
    """
    if n_chains < 2:
        raise ValueError(f"n_chains must be >= 2, got {n_chains}.")
    return Schedule(update_schedule(cumulative_barrier, n_chains - 1, cfg))
