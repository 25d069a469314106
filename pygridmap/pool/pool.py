"""
Layer Buffer Pool Module

Pooling system for the 2D taichi ndarrays backing GridMap layers. Geometry
changes and layer removal hand buffers back to the pool instead of freeing
them, and buffers of the same type and shape are reused by the next
allocation, so a map that is repeatedly resized (or submaps that are
repeatedly extracted with the same size) do not pay for device allocation
every time.

The pool organizes buffers by (dtype, shape), enabling O(1) lookup of the
candidate list. Buffers are taichi ndarrays rather than SNode fields: they
can be created and freed at any time without limit on their number, and
kernels taking them as ti.types.ndarray arguments compile once per dtype
instead of once per buffer.

The pool is bounded: at most constants.POOL_MAX_AVAILABLE released buffers
are kept, the least recently released ones beyond that are destroyed. A map
producing ever new shapes (clipped submaps near a map border) therefore
does not accumulate device memory.

A reused buffer still holds the values of its previous owner. Callers are
expected to overwrite or fill it right after acquisition.

Author: B. Gailleton
"""

import taichi as ti
import numpy as np
from typing import Tuple, Any
from .. import constants as cte
from .. import environment as env


class LayerBuffer:
    """
    Pooled 2D taichi ndarray holding the cells of one map layer.

    Attributes:
        id: Unique buffer identifier
        field: Underlying taichi ndarray of shape (rows, cols), None once destroyed
        in_use: Current usage status
        released_at: Pool clock value of the last release (reuse order)
        dtype: Data type of the cells
        shape: Buffer dimensions (rows, cols)

    Author: B. Gailleton
    """

    _next_id = 0

    def __init__(self, dtype: Any, shape: Tuple[int, int]):
        """
        Initialize LayerBuffer with specified data type and 2D shape.

        Args:
            dtype: Taichi data type (ti.f32, ti.f64)
            shape: (rows, cols), both strictly positive

        Raises:
            ValueError: If the shape is not 2D or has an empty axis

        Author: B. Gailleton
        """
        shape = tuple(int(s) for s in shape)
        if len(shape) != 2 or min(shape) < 1:
            raise ValueError(f"Layer buffers must be 2D with a positive extent, got shape {shape}.")

        LayerBuffer._next_id += 1
        self.id = LayerBuffer._next_id
        self.in_use = False
        self.released_at = 0
        self.dtype = dtype
        self.shape = shape

        self.field = ti.ndarray(dtype = dtype, shape = shape)

    def acquire(self):
        """Mark buffer as in use and unavailable for other requests."""
        self.in_use = True

    def release(self):
        """
        Mark buffer as available for reuse in the pool.

        Does not free the ndarray and does not clear its contents.

        Author: B. Gailleton
        """
        self.in_use = False

    def destroy(self):
        """
        Drop the ndarray so its device memory can be freed.

        Should only be called when permanently removing buffers from the pool.

        Author: B. Gailleton
        """
        self.field = None

    def fill(self, value: float):
        self.field.fill(value)

    def to_numpy(self) -> np.ndarray:
        return self.field.to_numpy()

    def from_numpy(self, values):
        values = np.ascontiguousarray(values, dtype = cte.NUMPY_DTYPE)
        if values.shape != self.shape:
            raise ValueError(f"Cannot load array of shape {values.shape} into buffer of shape {self.shape}.")
        self.field.from_numpy(values)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
        return False

    def __str__(self):
        return f"Layer buffer id:{self.id} - in_use:{self.in_use} - dtype:{self.dtype} - shape:{self.shape}"


class BufferPool:
    """
    Pool manager for layer buffers.

    Manages pools of LayerBuffer objects organized by data type and shape,
    reusing released buffers whenever one of the requested type and shape is
    available, and destroying the least recently released ones when more
    than max_available are waiting for reuse.

    Attributes:
        _pools: Dictionary mapping (dtype, shape) tuples to lists of LayerBuffer objects
        max_available: Maximum number of released buffers kept. Defaults to
            constants.POOL_MAX_AVAILABLE

    Usage:
        pool = BufferPool()
        buf = pool.get_buffer((100, 200))
        buf.fill(float('nan'))
        # ...
        pool.release_buffer(buf)

    Author: B. Gailleton
    """

    def __init__(self, max_available: int = None):
        self._pools = {}  # (dtype, shape) -> [LayerBuffer]
        self._clock = 0
        self.max_available = max_available

    def _capacity(self) -> int:
        return cte.POOL_MAX_AVAILABLE if self.max_available is None else self.max_available

    def get_buffer(self, shape: Tuple[int, int], dtype: Any = None) -> LayerBuffer:
        """
        Get an available LayerBuffer or create a new one.

        Initialises the taichi backend with the default configuration if
        nothing did it before. The returned buffer is marked as in use.

        Args:
            shape: (rows, cols) of the buffer
            dtype: Taichi data type. Defaults to constants.FLOAT_DTYPE

        Returns:
            LayerBuffer: Ready-to-use buffer with undefined content

        Author: B. Gailleton
        """
        if not cte.INITIALISED:
            env.initialise()

        dtype = cte.FLOAT_DTYPE if dtype is None else dtype
        key = (dtype, tuple(int(s) for s in shape))

        if key not in self._pools:
            self._pools[key] = []

        pool = self._pools[key]

        for buf in pool:
            if not buf.in_use:
                buf.acquire()
                return buf

        buf = LayerBuffer(dtype, key[1])
        pool.append(buf)
        buf.acquire()
        return buf

    def release_buffer(self, buf: LayerBuffer):
        """
        Release a LayerBuffer back to the pool for reuse.

        Destroys the least recently released buffers once more than the
        pool capacity are available.

        Author: B. Gailleton
        """
        buf.release()
        self._clock += 1
        buf.released_at = self._clock
        self._trim(self._capacity())

    def _trim(self, capacity: int):
        available = [buf for pool in self._pools.values() for buf in pool if not buf.in_use]
        if len(available) <= capacity:
            return

        available.sort(key = lambda buf: buf.released_at)
        for buf in available[:len(available) - capacity]:
            buf.destroy()
            self._pools[(buf.dtype, buf.shape)].remove(buf)

        # Forget the shapes nothing holds anymore
        for key in [key for key, pool in self._pools.items() if not pool]:
            del self._pools[key]

    def clear_unused(self):
        """
        Remove unused buffers and free their device memory.

        Author: B. Gailleton
        """
        self._trim(0)

    def forget_all(self):
        """
        Drop every buffer without destroying it.

        Used after the taichi runtime was reset, when the underlying ndarrays
        no longer exist.

        Author: B. Gailleton
        """
        self._pools = {}

    def stats(self) -> dict:
        """
        Get pool usage statistics.

        Returns:
            dict: Statistics containing:
                - total: Total number of buffers across all pools
                - in_use: Number of buffers currently in use
                - available: Number of buffers available for reuse
                - shapes: Number of distinct (dtype, shape) keys held

        Author: B. Gailleton
        """
        total = sum(len(pool) for pool in self._pools.values())
        in_use = sum(1 for pool in self._pools.values() for buf in pool if buf.in_use)
        return {"total": total, "in_use": in_use, "available": total - in_use, "shapes": len(self._pools)}


# Global pool instance shared by every GridMap
bufferpool = BufferPool()


def get_buffer(shape: Tuple[int, int], dtype: Any = None) -> LayerBuffer:
    """Get a LayerBuffer from the global pool."""
    return bufferpool.get_buffer(shape, dtype)

def release_buffer(buf: LayerBuffer):
    """Release a LayerBuffer back to the global pool."""
    bufferpool.release_buffer(buf)

def pool_stats() -> dict:
    """Get statistics from the global pool."""
    return bufferpool.stats()

def clear_pool():
    """Destroy the unused buffers of the global pool to free memory."""
    bufferpool.clear_unused()
