# annealpath_jax/inference/schedules/update.py
"""
Equal-barrier schedule update.

Given a cumulative barrier Λ(β), monotone non-decreasing on [0, 1] with
Λ(0) = 0, grid points are placed so that consecutive chains are separated by
the same amount of barrier:

    β_i = inf { β : Λ(β) >= i * Λ(1) / N },   i = 0, ..., N

Each inverse is found by bisection. Over a flat stretch of Λ every point is
an inverse; the smallest one is returned, which keeps the result
deterministic and monotone.
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Callable

import numpy as np


@dataclass(frozen=True)
class BarrierInversionCFG:
    """Configuration for inverting the cumulative barrier."""
    max_bisection_steps: int = 60
    xtol: float = 1e-12


def _smallest_preimage(
    cumulative_barrier: Callable[[float], float],
    level: float,
    cfg: BarrierInversionCFG,
) -> float:
    """Smallest β in [0, 1] with Λ(β) >= level (up to cfg.xtol)."""
    if cumulative_barrier(0.0) >= level:
        return 0.0

    # Invariant: Λ(lo) < level <= Λ(hi)
    lo, hi = 0.0, 1.0
    for _ in range(cfg.max_bisection_steps):
        if hi - lo <= cfg.xtol:
            break
        mid = 0.5 * (lo + hi)
        if cumulative_barrier(mid) >= level:
            hi = mid
        else:
            lo = mid
    if hi - lo > cfg.xtol:
        warnings.warn(
            f"Barrier inversion did not reach xtol={cfg.xtol} within "
            f"{cfg.max_bisection_steps} bisection steps (interval width {hi - lo:.3e}).",
            RuntimeWarning,
        )
    return hi


def update_schedule(
    cumulative_barrier: Callable[[float], float],
    n_intervals: int,
    cfg: BarrierInversionCFG = BarrierInversionCFG(),
) -> np.ndarray:
    """
    Grid points equally spaced in barrier coordinates.

    Args:
        cumulative_barrier: Monotone non-decreasing Λ: [0, 1] -> R with Λ(0) = 0
        n_intervals: Number of intervals N (the grid has N + 1 points)
        cfg: Bisection settings

    Returns:
        Array of shape (n_intervals + 1,), non-decreasing, first entry 0.0 and
        last entry 1.0

    Raises:
        ValueError: If n_intervals < 1 or Λ(1) is not a finite, non-negative number
    """
    if n_intervals < 1:
        raise ValueError(f"n_intervals must be >= 1, got {n_intervals}.")

    total = float(cumulative_barrier(1.0))
    if not np.isfinite(total) or total < 0.0:
        raise ValueError(f"Cumulative barrier at 1 must be finite and >= 0, got {total}.")
    if total == 0.0:
        warnings.warn(
            "Cumulative barrier is flat on [0, 1]; the adapted schedule is degenerate.",
            RuntimeWarning,
        )

    grids = np.empty(n_intervals + 1, dtype=np.float64)
    grids[0] = 0.0
    for i in range(1, n_intervals):
        level = total * i / n_intervals
        grids[i] = _smallest_preimage(cumulative_barrier, level, cfg)
    grids[-1] = 1.0

    # Guard against a barrier that is only approximately monotone
    return np.maximum.accumulate(grids)
