# annealpath_jax/inference/autodiff/base.py
from __future__ import annotations

from typing import Callable, Dict

_REGISTRY: Dict[str, Callable] = {}


def register(name: str, factory: Callable) -> None:
    """Register a backend factory: (log_potential, **kwargs) -> differentiable log-density."""
    _REGISTRY[name] = factory


def get(name: str) -> Callable:
    if name not in _REGISTRY:
        raise KeyError(f"Unknown gradient backend '{name}'.")
    return _REGISTRY[name]
