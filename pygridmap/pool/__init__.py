"""
Layer buffer pooling for PyGridMap.

Every GridMap layer lives in a 2D taichi ndarray obtained from a global pool.
Resizing a map or erasing a layer returns its buffers to the pool, and
the next allocation of the same dtype and shape reuses them.
At most constants.POOL_MAX_AVAILABLE released buffers are kept; the least
recently released ones beyond that are destroyed.

Core Classes:
- LayerBuffer: Wrapper around a 2D taichi ndarray with acquire/release tracking
- BufferPool: Pool manager organising buffers by (dtype, shape)

Pool Management Functions:
- get_buffer: Acquire a buffer from the global pool
- release_buffer: Return a buffer to the global pool
- pool_stats: Usage statistics of the global pool
- clear_pool: Destroy unused buffers and free device memory

Usage:
    import pygridmap as pgm

    with pgm.pool.get_buffer((64, 64)) as buf:
        buf.fill(0.0)
        values = buf.to_numpy()
    # Buffer released here

Author: B. Gailleton
"""

from .pool import (
    LayerBuffer,
    BufferPool,
    get_buffer,
    release_buffer,
    pool_stats,
    clear_pool,
    bufferpool
)

__all__ = [
    "LayerBuffer",
    "BufferPool",
    "get_buffer",
    "release_buffer",
    "pool_stats",
    "clear_pool",
    "bufferpool"
]
