# annealpath_jax/inference/autodiff/buffered.py
"""
Buffered evaluators.

A BufferedEvaluator pairs one differentiable log-density with a scratch
vector taken from the chain's BufferPool, so that repeated gradient
evaluations reuse the same storage instead of allocating.

  - BufferedEvaluator: forwards every call to the enclosed backend; the
    gradient is whatever the backend returns.
  - InPlaceBufferedEvaluator: for backends implementing
    evaluate_with_gradient_into; the gradient is written into the scratch
    vector and the scratch vector itself is returned.

In both cases the returned gradient is only valid until the next call on the
same evaluator. Pass `out=` to receive the gradient in caller storage instead.
"""
from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ...core.buffers import as_buffer_pool
from ...core.typing import DifferentiableLogDensity, InPlaceDifferentiable


class BufferedEvaluator:
    """
    A differentiable log-density plus reusable scratch storage.

    Attributes:
        enclosed: Backend satisfying DifferentiableLogDensity
        buffer: Gradient scratch vector, shape (dimension,); never resized
        logd_buffer: Optional 1-element array receiving the last log-density
        err_buffer: Optional 1-element flag array, set to 1 when the last
            log-density was not finite and 0 otherwise
    """

    def __init__(
        self,
        enclosed: DifferentiableLogDensity,
        buffer: np.ndarray,
        logd_buffer: Optional[np.ndarray] = None,
        err_buffer: Optional[np.ndarray] = None,
    ):
        d = enclosed.dimension()
        if buffer.shape != (d,):
            raise ValueError(
                f"Scratch buffer has shape {buffer.shape}, expected ({d},)."
            )
        self.enclosed = enclosed
        self.buffer = buffer
        self.logd_buffer = logd_buffer
        self.err_buffer = err_buffer

    def dimension(self) -> int:
        return self.buffer.shape[0]

    def evaluate(self, x) -> float:
        return self.enclosed.evaluate(x)

    def evaluate_with_gradient(self, x, out: Optional[np.ndarray] = None):
        value, grad = self.enclosed.evaluate_with_gradient(x)
        self._record(value)
        if out is not None:
            np.copyto(out, grad)
            return value, out
        return value, grad

    def _record(self, value) -> None:
        if self.logd_buffer is not None:
            self.logd_buffer[0] = value
        if self.err_buffer is not None:
            self.err_buffer[0] = not np.isfinite(value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(enclosed={self.enclosed!r}, dimension={self.dimension()})"


class InPlaceBufferedEvaluator(BufferedEvaluator):
    """BufferedEvaluator whose backend writes the gradient into the scratch vector."""

    def evaluate_with_gradient(self, x, out: Optional[np.ndarray] = None):
        grad = self.buffer if out is None else out
        value = self.enclosed.evaluate_with_gradient_into(x, grad)
        self._record(value)
        return value, grad


def buffered_evaluator(
    enclosed: DifferentiableLogDensity,
    buffers: Any,
    tag: str = "gradient_buffer",
    logd_buffer: Optional[np.ndarray] = None,
    err_buffer: Optional[np.ndarray] = None,
) -> BufferedEvaluator:
    """
    Wrap `enclosed` with scratch storage taken from a pool.

    Args:
        enclosed: Differentiable backend
        buffers: BufferPool, or a replica carrying one on `.buffers`
        tag: Pool tag of the scratch vector
        logd_buffer: Optional 1-element array for the last log-density
        err_buffer: Optional 1-element array for a non-finite flag

    Returns:
        InPlaceBufferedEvaluator when the backend can write gradients in
        place, BufferedEvaluator otherwise
    """
    pool = as_buffer_pool(buffers)
    buffer = pool.get_buffer(tag, enclosed.dimension())
    cls = InPlaceBufferedEvaluator if isinstance(enclosed, InPlaceDifferentiable) else BufferedEvaluator
    return cls(enclosed, buffer, logd_buffer, err_buffer)
