"""
Utility kernels for 2D layer buffers.

Block-wise fill and copy operations on 2D taichi ndarrays. GridMap uses them
to invalidate the strips vacated by a move and to assemble submaps out of
the quadrants of a wrapped buffer, so both touch only the cells of the
requested block.

The buffers are passed as ti.types.ndarray arguments: each kernel is
compiled once per cell dtype and reused for every buffer shape.

Author: B.G.
"""

import taichi as ti


#########################################
###### FILL, COPY AND STUFF #############
#########################################


@ti.kernel
def fill_block(array: ti.types.ndarray(ndim=2), row: int, col: int, nrows: int, ncols: int, value: float):
    """
    Set every cell of a rectangular block to a constant value in parallel.

    Args:
        array: 2D ndarray to modify
        row, col: Top left cell of the block
        nrows, ncols: Extent of the block (must fit inside array)
        value: Value written to every cell of the block

    Author: B.G.
    """
    for i, j in ti.ndrange(nrows, ncols):
        array[row + i, col + j] = value


@ti.kernel
def copy_block(src: ti.types.ndarray(ndim=2), dst: ti.types.ndarray(ndim=2), src_row: int, src_col: int,
               dst_row: int, dst_col: int, nrows: int, ncols: int):
    """
    Copy a rectangular block of src into dst in parallel.

    Args:
        src: 2D ndarray to read from
        dst: 2D ndarray to write to (can differ in shape from src)
        src_row, src_col: Top left cell of the block in src
        dst_row, dst_col: Top left cell of the block in dst
        nrows, ncols: Extent of the block (must fit inside both ndarrays)

    Author: B.G.
    """
    for i, j in ti.ndrange(nrows, ncols):
        dst[dst_row + i, dst_col + j] = src[src_row + i, src_col + j]
