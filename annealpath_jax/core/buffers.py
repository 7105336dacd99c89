"""
Scratch storage shared by the evaluators of one chain.

A BufferPool hands out float64 numpy vectors keyed by a semantic tag.
The first request for a tag allocates; every later request for the same tag
returns the same array, so evaluators rebuilt each round reuse storage.
Distinct tags never alias.

Evaluators look their buffer up ONCE, at construction, and keep it as a
field afterwards; nothing on the evaluation path touches the pool.
"""
from __future__ import annotations

from typing import Dict, Any

import numpy as np


class BufferPool:
    """
    Tagged scratch vectors for a single replica / chain.

    A pool MUST NOT be shared between chains that evaluate concurrently.
    """

    def __init__(self):
        self._buffers: Dict[str, np.ndarray] = {}

    def get_buffer(self, tag: str, size: int) -> np.ndarray:
        """
        Return the vector stored under `tag`, allocating it on first use.

        Args:
            tag: Semantic name of the buffer (e.g. "gradient_buffer")
            size: Required number of elements

        Returns:
            Mutable float64 array of shape (size,)

        Raises:
            ValueError: If size is negative or `tag` already holds a
                buffer of a different size
        """
        size = int(size)
        if size < 0:
            raise ValueError(f"Buffer size must be non-negative, got {size}.")
        buffer = self._buffers.get(tag)
        if buffer is None:
            buffer = np.zeros(size, dtype=np.float64)
            self._buffers[tag] = buffer
        elif buffer.shape[0] != size:
            raise ValueError(
                f"Buffer '{tag}' already holds {buffer.shape[0]} elements; "
                f"requested {size}."
            )
        return buffer

    def __contains__(self, tag: str) -> bool:
        return tag in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def tags(self) -> list[str]:
        """List the tags allocated so far."""
        return list(self._buffers.keys())


def as_buffer_pool(buffers: Any) -> BufferPool:
    """
    Resolve a pool from either a BufferPool or a replica-like object.

    Replicas carry their pool on a `buffers` attribute.
    """
    if isinstance(buffers, BufferPool):
        return buffers
    pool = getattr(buffers, "buffers", None)
    if isinstance(pool, BufferPool):
        return pool
    raise TypeError(
        f"Expected a BufferPool or an object with a 'buffers' BufferPool, "
        f"got {type(buffers).__name__}."
    )
