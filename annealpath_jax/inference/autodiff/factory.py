# annealpath_jax/inference/autodiff/factory.py
"""
Build the gradient evaluator of a log potential for one chain.

    differentiate("jax", log_potential, replica_or_pool)

  - InterpolatedLogPotential (linear path): both endpoints are differentiated
    recursively, each with its own scratch tag, and combined by an
    InterpolatedGradientEvaluator.
  - A log potential that is already differentiable (e.g. GaussianLogPotential)
    is used as is, whatever `kind` says.
  - Anything else goes through the backend registered under `kind`.

Buffers are looked up in the pool here, once; evaluators keep them as fields.
"""
from __future__ import annotations

from typing import Any

from ...core.buffers import as_buffer_pool
from ...core.typing import DifferentiableLogDensity
from ...paths.interpolating import InterpolatedLogPotential, LinearInterpolator
from .base import get
from .buffered import buffered_evaluator
from .interpolated import InterpolatedGradientEvaluator


def _interpolated_tag(tag: str, suffix: str = "interpolated") -> str:
    stem = tag[: -len("_buffer")] if tag.endswith("_buffer") else tag
    return f"{stem}_{suffix}_buffer"


def differentiate(kind: str, log_potential: Any, buffers: Any, *, tag: str = "gradient_buffer", **kwargs):
    """
    Gradient evaluator for `log_potential`.

    Args:
        kind: Name of a registered backend (e.g. "jax")
        log_potential: LogPotential, differentiable log-density, or
            InterpolatedLogPotential
        buffers: BufferPool, or a replica carrying one on `.buffers`
        tag: Pool tag for the scratch vector ("gradient_buffer" at top level)
        **kwargs: Forwarded to the backend constructor (e.g. cfg=JaxGradientCFG())

    Returns:
        Object satisfying DifferentiableLogDensity

    Raises:
        KeyError: Unknown backend
        ValueError: Non-linear interpolation, or endpoint dimensions differ
    """
    pool = as_buffer_pool(buffers)

    if isinstance(log_potential, InterpolatedLogPotential):
        path = log_potential.path
        if not isinstance(path.interpolator, LinearInterpolator):
            raise ValueError(
                f"Gradient evaluation requires a linear interpolator, "
                f"got {type(path.interpolator).__name__}."
            )
        ref_ad = differentiate(kind, path.ref, pool, tag=f"reference_{tag}", **kwargs)
        target_ad = differentiate(kind, path.target, pool, tag=f"target_{tag}", **kwargs)
        d = ref_ad.dimension()
        buffer = pool.get_buffer(_interpolated_tag(tag), d)
        scratch = pool.get_buffer(_interpolated_tag(tag, "interpolated_scratch"), d)
        return InterpolatedGradientEvaluator(log_potential, ref_ad, target_ad, buffer, scratch)

    if isinstance(log_potential, DifferentiableLogDensity):
        backend = log_potential
    else:
        backend = get(kind)(log_potential, **kwargs)
    return buffered_evaluator(backend, pool, tag=tag)
