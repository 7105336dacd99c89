# annealpath_jax/core/typing.py
from __future__ import annotations

from typing import Protocol, Tuple, Any, runtime_checkable

import numpy as np

try:
    from jax import Array as JaxArray
except Exception:
    JaxArray = Any  # Fallback type for older JAX
Array = JaxArray


@runtime_checkable
class LogPotential(Protocol):
    """
    An unnormalised log-density on R^d.

    Models only need to be callable and report their dimension.
    Evaluators MUST treat a LogPotential as a black box.
    """

    def __call__(self, x) -> Any:
        ...

    def dimension(self) -> int:
        ...


@runtime_checkable
class DifferentiableLogDensity(Protocol):
    """
    Capability consumed by every evaluator in this package.

    Canonical contract
    ------------------
    * evaluate(x) -> float
    * evaluate_with_gradient(x) -> (float, gradient array of shape (d,))
    * dimension() -> d

    The gradient returned by evaluate_with_gradient MAY be a view of storage
    owned by the implementation; it is only valid until the next call on the
    same instance.
    """

    def evaluate(self, x) -> float:
        ...

    def evaluate_with_gradient(self, x) -> Tuple[float, Any]:
        ...

    def dimension(self) -> int:
        ...


@runtime_checkable
class InPlaceDifferentiable(DifferentiableLogDensity, Protocol):
    """
    A differentiable log-density able to write its gradient into caller storage.

    evaluate_with_gradient_into(x, out) writes the gradient into `out`
    (shape (d,), float64) and returns the log-density value.
    """

    def evaluate_with_gradient_into(self, x, out: np.ndarray) -> float:
        ...
