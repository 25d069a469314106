"""
Borrowed views on GridMap layer buffers.

Author: B.G.
"""

import numpy as np
from .. import constants as cte
from ..exceptions import StaleViewError, OutOfRangeError


class LayerView:
	"""
	Direct access to the live buffer of one layer of a GridMap.

	Unlike GridMap.get(), which copies, a view reads and writes the buffer
	in place (physical order, no wraparound resolution). It is tied to the
	structural generation of its map: any reallocation of the map
	(set_geometry, resize) or erasing of the layer makes the view stale and
	every further access raises StaleViewError. move() does not reallocate,
	so the view survives it, but its physical indices then cover other
	world positions.

	Author: B.G.
	"""

	def __init__(self, gridmap, layer):
		self._gridmap = gridmap
		self._layer = layer
		self._generation = gridmap._generation

	@property
	def layer(self):
		return self._layer

	@property
	def is_stale(self):
		return self._generation != self._gridmap._generation or not self._gridmap.exists(self._layer)

	def _buffer(self):
		if self.is_stale:
			raise StaleViewError(f"LayerView of '{self._layer}' used after its map was reallocated.")
		return self._gridmap._data[self._layer]

	@property
	def field(self):
		"""Underlying taichi ndarray, for use in kernels. Do not keep it past the view."""
		buf = self._buffer()
		return None if buf is None else buf.field

	@property
	def shape(self):
		buf = self._buffer()
		return (0, 0) if buf is None else buf.shape

	def _cell(self, index):
		shape = self.shape
		i, j = int(index[0]), int(index[1])
		if not (0 <= i < shape[0] and 0 <= j < shape[1]):
			raise OutOfRangeError(f"LayerView: index ({i}, {j}) is outside of buffer of size {shape}.")
		return i, j

	def __getitem__(self, index):
		i, j = self._cell(index)
		return float(self.field[i, j])

	def __setitem__(self, index, value):
		i, j = self._cell(index)
		self.field[i, j] = value

	def to_numpy(self):
		buf = self._buffer()
		if buf is None:
			return np.empty((0, 0), dtype = cte.NUMPY_DTYPE)
		return buf.to_numpy()

	def fill(self, value):
		buf = self._buffer()
		if buf is not None:
			buf.fill(value)

	def __repr__(self):
		return f"LayerView(layer={self._layer!r}, shape={self.shape if not self.is_stale else 'stale'})"
