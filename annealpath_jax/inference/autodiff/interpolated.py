# annealpath_jax/inference/autodiff/interpolated.py
"""
Gradient of a linearly interpolated log potential.

    log π_β(x)      = (1 - β) log π_ref(x)      + β log π_target(x)
    ∇ log π_β(x)    = (1 - β) ∇ log π_ref(x)    + β ∇ log π_target(x)

Reference and target are differentiated by their own evaluators, which may
use different backends (e.g. a hand-written Gaussian reference and a JAX
target). Provided both endpoints are allocation-free, so is this evaluator:
the weighted sum is accumulated in a combination buffer, with the scaled
target gradient staged in a second scratch buffer, both living as long as the
evaluator. Endpoint gradients are read, never written.

β is read from the enclosed InterpolatedLogPotential on every call.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from ...core.typing import DifferentiableLogDensity
from ...paths.interpolating import InterpolatedLogPotential


def _shares_memory(a: np.ndarray, evaluator) -> bool:
    other = getattr(evaluator, "buffer", None)
    return isinstance(other, np.ndarray) and np.shares_memory(a, other)


class InterpolatedGradientEvaluator:
    """
    Differentiable log-density of an InterpolatedLogPotential.

    Attributes:
        enclosed: The InterpolatedLogPotential (source of β)
        ref_ad: Evaluator of the reference, often a BufferedEvaluator
        target_ad: Evaluator of the target, often a BufferedEvaluator
        buffer: Combination buffer, shape (dimension,)
        scratch: Holds β * target gradient during a call, shape (dimension,)
    """

    def __init__(
        self,
        enclosed: InterpolatedLogPotential,
        ref_ad: DifferentiableLogDensity,
        target_ad: DifferentiableLogDensity,
        buffer: np.ndarray,
        scratch: np.ndarray,
    ):
        d_ref = ref_ad.dimension()
        d_target = target_ad.dimension()
        if d_ref != d_target:
            raise ValueError(
                f"Reference and target evaluators disagree on dimension: {d_ref} != {d_target}."
            )
        for name, array in (("Combination", buffer), ("Scratch", scratch)):
            if array.shape != (d_ref,):
                raise ValueError(
                    f"{name} buffer has shape {array.shape}, expected ({d_ref},)."
                )
            if _shares_memory(array, ref_ad) or _shares_memory(array, target_ad):
                raise ValueError(f"{name} buffer aliases an endpoint scratch buffer.")
        if np.shares_memory(buffer, scratch):
            raise ValueError("Combination and scratch buffers alias each other.")
        self.enclosed = enclosed
        self.ref_ad = ref_ad
        self.target_ad = target_ad
        self.buffer = buffer
        self.scratch = scratch

    def dimension(self) -> int:
        return self.ref_ad.dimension()

    def evaluate(self, x) -> float:
        l1 = self.ref_ad.evaluate(x)
        l2 = self.target_ad.evaluate(x)
        beta = self.enclosed.beta
        return (1.0 - beta) * l1 + beta * l2

    def evaluate_with_gradient(self, x, out: Optional[np.ndarray] = None):
        """
        Log-density and gradient at `x` for the current β.

        Returns:
            (logdens, grad). Without `out`, grad IS the combination buffer and
            is overwritten by the next call; copy it if it must outlive that.
            With `out`, grad is `out`.
        """
        beta = self.enclosed.beta
        w_ref = 1.0 - beta
        buffer = self.buffer if out is None else out

        l, g = self.ref_ad.evaluate_with_gradient(x)
        logdens = l * w_ref
        np.multiply(g, w_ref, out=buffer)

        l, g = self.target_ad.evaluate_with_gradient(x)
        logdens += l * beta
        np.multiply(g, beta, out=self.scratch)
        np.add(buffer, self.scratch, out=buffer)

        return logdens, buffer

    def __repr__(self) -> str:
        return f"InterpolatedGradientEvaluator(beta={self.enclosed.beta}, dimension={self.dimension()})"
