"""
Buffer region value type.

A BufferRegion names a rectangular block of a (possibly wrapped) layer
buffer by its top left physical index and its size. When a submap is
extracted from a wrapped buffer, each region also carries the quadrant of
the contiguous destination it has to be copied to.

Author: B.G.
"""

from enum import Enum
import numpy as np


class Quadrant(Enum):
	"""Corner of a contiguous buffer a region maps to."""
	UNDEFINED = 0
	TOP_LEFT = 1
	TOP_RIGHT = 2
	BOTTOM_LEFT = 3
	BOTTOM_RIGHT = 4


class BufferRegion:
	"""
	Rectangular block of a 2D buffer.

	Attributes:
		index (np.ndarray): Top left cell (row, col) of the block in the buffer
		size (np.ndarray): Number of (rows, cols) in the block
		quadrant (Quadrant): Destination corner when used for submap assembly

	Author: B.G.
	"""

	__slots__ = ("index", "size", "quadrant")

	def __init__(self, index, size, quadrant = Quadrant.UNDEFINED):
		self.index = np.asarray(index, dtype = int).copy()
		self.size = np.asarray(size, dtype = int).copy()
		self.quadrant = quadrant

	def n_cells(self) -> int:
		return int(self.size[0] * self.size[1])

	def destination_corner(self, destination_size):
		"""
		Top left cell of this region once copied into a contiguous buffer.

		Args:
			destination_size: (rows, cols) of the destination buffer

		Returns:
			tuple: (row, col) in the destination

		Author: B.G.
		"""
		rows, cols = int(destination_size[0]), int(destination_size[1])
		if self.quadrant == Quadrant.TOP_LEFT:
			return (0, 0)
		if self.quadrant == Quadrant.TOP_RIGHT:
			return (0, cols - int(self.size[1]))
		if self.quadrant == Quadrant.BOTTOM_LEFT:
			return (rows - int(self.size[0]), 0)
		if self.quadrant == Quadrant.BOTTOM_RIGHT:
			return (rows - int(self.size[0]), cols - int(self.size[1]))
		raise ValueError("Region without quadrant has no destination corner.")

	def __eq__(self, other):
		if not isinstance(other, BufferRegion):
			return NotImplemented
		return (np.array_equal(self.index, other.index) and np.array_equal(self.size, other.size)
			and self.quadrant == other.quadrant)

	def __repr__(self):
		return (f"BufferRegion(index=({self.index[0]}, {self.index[1]}), "
			f"size=({self.size[0]}, {self.size[1]}), quadrant={self.quadrant.name})")
