"""
General-purpose taichi kernels for PyGridMap.

Core Modules:
- util_taichi: Block fill and block copy kernels on 2D layer buffers

Usage:
    import pygridmap as pgm

    buf = pgm.pool.get_buffer((10, 10))
    pgm.general_algorithms.fill_block(buf.field, 2, 0, 3, 10, float('nan'))

Author: B.G.
"""

from .util_taichi import fill_block, copy_block

__all__ = [
    "fill_block",
    "copy_block"
]
