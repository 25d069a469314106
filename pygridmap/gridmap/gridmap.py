import math
import numpy as np
from .. import constants as cte
from .. import general_algorithms as gena
from .. import geometry as geo
from ..exceptions import ContractViolation, LayerNotFoundError, OutOfRangeError
from .layer_view import LayerView
import pygridmap as pgm


class GridMap:
	"""
	Multi-layer 2D grid map stored in circular buffers.

	A GridMap holds any number of named layers of floating point cells, all
	sharing the same geometry: a window of `length` metres centred on
	`position`, divided into `size` cells of edge `resolution`. Every layer
	lives in a pooled 2D taichi ndarray. The buffers are addressed circularly
	around `start_index` so the window can be re-centred with move() without
	shifting data: only the cells vacated by the shift are invalidated.

	A cell holding constants.NO_DATA (NaN) has no data for that layer. The
	`basic_layers` designate the layers holding primary data; they drive the
	default validity check and are the only layers invalidated by move().

	Physical buffer indices change world meaning on every move. Re-derive
	them from a position (get_index) after each move instead of caching them.

	Attributes:
		timestamp: Opaque time stamp, copied to submaps
		frame_id (str): Opaque frame name, copied to submaps

	Author: B.G.
	"""

	def __init__(self, layers = None):
		"""
		Create a map with the given layers and an empty geometry.

		The layers have no cells until set_geometry() is called.

		Args:
			layers (list of str, optional): Layer names, in order. Default: no layers

		Author: B.G.
		"""
		self._position = np.zeros(2)
		self._length = np.zeros(2)
		self._resolution = 0.0
		self._size = np.zeros(2, dtype = int)
		self._start_index = np.zeros(2, dtype = int)
		self.timestamp = 0
		self.frame_id = ""

		# Bumped on every reallocation so LayerViews can detect they are stale
		self._generation = 0

		self._layers = []
		self._basic_layers = []
		self._data = {}  # layer -> LayerBuffer, None while the map has no cells
		for layer in (layers or []):
			if layer not in self._data:
				self._layers.append(layer)
				self._data[layer] = None

	def __del__(self):
		try:
			self._release_buffers()
		except (AttributeError, TypeError):
			pass

	def _release_buffers(self):
		for layer, buf in self._data.items():
			if buf is not None:
				pgm.pool.release_buffer(buf)
				self._data[layer] = None

	def __copy__(self):
		"""
		Independent copy of the map, with its own buffers.

		Pooled buffers belong to exactly one map (they go back to the pool
		when the map is dropped), so even a shallow copy duplicates every
		layer. Geometry, start index, layers, basic layers and metadata are
		copied as they are.

		Author: B.G.
		"""
		duplicate = GridMap(self._layers)
		duplicate._basic_layers = list(self._basic_layers)
		duplicate.timestamp = self.timestamp
		duplicate.frame_id = self.frame_id

		if self._size.min() < 1:
			return duplicate

		duplicate.resize(self._size)
		duplicate._resolution = self._resolution
		duplicate._length = self._length.copy()
		duplicate._position = self._position.copy()
		duplicate._start_index = self._start_index.copy()
		for layer in self._layers:
			duplicate._data[layer].from_numpy(self._data[layer].to_numpy())
		return duplicate

	def __deepcopy__(self, memo):
		return self.__copy__()

	def _buffer(self, layer, where):
		try:
			return self._data[layer]
		except KeyError:
			raise LayerNotFoundError(layer, where) from None

	#########################################
	###### GEOMETRY #########################
	#########################################

	@property
	def position(self):
		return self._position.copy()

	@property
	def length(self):
		return self._length.copy()

	@property
	def resolution(self):
		return self._resolution

	@property
	def size(self):
		return self._size.copy()

	@property
	def start_index(self):
		return self._start_index.copy()

	def set_geometry(self, length, resolution, position = (0., 0.)):
		"""
		Set the geometry of the map and reallocate every layer.

		The size is the nearest integer to length / resolution on each axis
		and the stored length is snapped to size * resolution, so it can
		differ slightly from the requested one. All layers are cleared to
		NO_DATA and the start index is reset to zero.

		Args:
			length: Extent of the map (x, y), strictly positive
			resolution (float): Cell edge length, strictly positive
			position: Centre of the map in the map frame. Default: (0, 0)

		Raises:
			ContractViolation: On non-positive length or resolution, or when
				the length rounds to zero cells on an axis

		Author: B.G.
		"""
		length = np.asarray(length, dtype = float).reshape(2)
		resolution = float(resolution)
		if not (length[0] > 0.0 and length[1] > 0.0):
			raise ContractViolation(f"GridMap.set_geometry(...): length must be positive, got {tuple(length)}.")
		if not resolution > 0.0:
			raise ContractViolation(f"GridMap.set_geometry(...): resolution must be positive, got {resolution}.")

		# Round half away from zero, python's round() would round half to even
		size = np.floor(length / resolution + 0.5).astype(int)
		if np.any(size < 1):
			raise ContractViolation(f"GridMap.set_geometry(...): length {tuple(length)} is smaller than one cell of {resolution}.")

		self.resize(size)
		self.clear_all()

		self._resolution = resolution
		self._length = self._size.astype(float) * resolution
		self._position = np.asarray(position, dtype = float).reshape(2).copy()
		self._start_index = np.zeros(2, dtype = int)

	def set_geometry_from_submap(self, geometry):
		"""
		Set the geometry from a SubmapGeometry (see set_geometry).

		Author: B.G.
		"""
		self.set_geometry(geometry.length, geometry.resolution, geometry.position)

	def resize(self, size):
		"""
		Reallocate every layer to a new size.

		The content of the new buffers is undefined. Invalidates every
		LayerView of this map.

		Args:
			size: (rows, cols), strictly positive

		Author: B.G.
		"""
		size = np.asarray(size, dtype = int).reshape(2)
		if np.any(size < 1):
			raise ContractViolation(f"GridMap.resize(...): size must be positive, got {tuple(size)}.")

		self._release_buffers()
		self._size = size.copy()
		for layer in self._layers:
			self._data[layer] = pgm.pool.get_buffer(tuple(self._size))
		self._generation += 1

	def reset_timestamp(self):
		self.timestamp = 0

	#########################################
	###### LAYERS ###########################
	#########################################

	@property
	def layers(self):
		return list(self._layers)

	def get_layers(self):
		"""Layer names in insertion order."""
		return list(self._layers)

	@property
	def basic_layers(self):
		return list(self._basic_layers)

	def get_basic_layers(self):
		return list(self._basic_layers)

	def set_basic_layers(self, basic_layers):
		"""
		Replace the basic layers.

		The names are not checked against the existing layers; callers keep
		basic_layers a subset of layers.

		Author: B.G.
		"""
		self._basic_layers = list(basic_layers)

	def add(self, layer, data = cte.NO_DATA):
		"""
		Add a layer, or overwrite the content of an existing one.

		Args:
			layer (str): Layer name
			data (float or array-like): Constant value for every cell, or a
				2D array of exactly the map size in physical buffer order.
				Default: NO_DATA

		Raises:
			ContractViolation: If an array does not match the map size

		Author: B.G.
		"""
		if np.ndim(data) == 0:
			value = float(data)
			values = None
		else:
			values = np.asarray(data, dtype = cte.NUMPY_DTYPE)
			if values.shape != tuple(self._size):
				raise ContractViolation(f"GridMap.add(...): data of shape {values.shape} does not match map size {tuple(self._size)}.")

		if layer not in self._data:
			self._layers.append(layer)
			self._data[layer] = None if self._size.min() < 1 else pgm.pool.get_buffer(tuple(self._size))

		buf = self._data[layer]
		if buf is None:
			return
		if values is None:
			buf.fill(value)
		else:
			buf.from_numpy(values)

	def exists(self, layer):
		return layer in self._data

	def __contains__(self, layer):
		return self.exists(layer)

	def get(self, layer):
		"""
		Copy of the cells of a layer, in physical buffer order.

		Use get_logical() for a copy ordered from the logical origin, or
		layer_view() for direct access to the buffer.

		Raises:
			LayerNotFoundError: If the layer does not exist

		Author: B.G.
		"""
		buf = self._buffer(layer, "GridMap.get(...)")
		if buf is None:
			return np.empty((0, 0), dtype = cte.NUMPY_DTYPE)
		return buf.to_numpy()

	def __getitem__(self, layer):
		return self.get(layer)

	def __setitem__(self, layer, data):
		self.add(layer, data)

	def get_logical(self, layer):
		"""
		Copy of a layer reordered so that [0, 0] is the logical origin.

		The result is what the layer would hold with a zero start index:
		row i / column j is the cell i / j steps from the (+x, +y) corner
		towards -x / -y.

		Author: B.G.
		"""
		values = self.get(layer)
		if values.size == 0:
			return values
		return np.roll(values, shift = (-int(self._start_index[0]), -int(self._start_index[1])), axis = (0, 1))

	def layer_view(self, layer):
		"""
		Borrowed view on the buffer of a layer.

		The view reads and writes the live buffer in physical order and
		becomes stale (raising StaleViewError) after set_geometry(),
		resize() or erase() of its layer.

		Raises:
			LayerNotFoundError: If the layer does not exist

		Author: B.G.
		"""
		self._buffer(layer, "GridMap.layer_view(...)")
		return LayerView(self, layer)

	def erase(self, layer):
		"""
		Remove a layer from the map and from the basic layers.

		Returns:
			bool: False if the layer did not exist, True otherwise

		Author: B.G.
		"""
		if layer not in self._data:
			return False

		buf = self._data.pop(layer)
		if buf is not None:
			pgm.pool.release_buffer(buf)
		self._layers.remove(layer)
		if layer in self._basic_layers:
			self._basic_layers.remove(layer)
		self._generation += 1
		return True

	#########################################
	###### INDEXING #########################
	#########################################

	def set_start_index(self, start_index):
		"""Set the start index, wrapped into [0, size)."""
		self._start_index = geo.wrap_index_to_range(start_index, self._size)

	def get_index(self, position):
		"""
		Physical buffer index of the cell containing a position.

		Returns:
			tuple: (index, is_success); is_success is False when the
				position is outside the map

		Author: B.G.
		"""
		return geo.get_index_from_position(position, self._length, self._position, self._resolution,
			self._size, self._start_index)

	def get_position(self, index):
		"""
		Position of the centre of the cell at a physical buffer index.

		Returns:
			tuple: (position, is_success); is_success is False when the
				index is outside the buffer

		Author: B.G.
		"""
		return geo.get_position_from_index(index, self._length, self._position, self._resolution,
			self._size, self._start_index)

	def is_inside(self, position):
		return geo.check_if_position_within_map(position, self._length, self._position)

	def _cell(self, index):
		i, j = int(index[0]), int(index[1])
		if not (0 <= i < self._size[0] and 0 <= j < self._size[1]):
			raise OutOfRangeError(f"GridMap: index ({i}, {j}) is outside of buffer of size {tuple(self._size)}.")
		return i, j

	def at(self, layer, index):
		"""
		Value of a layer at a physical buffer index.

		Raises:
			LayerNotFoundError: If the layer does not exist
			OutOfRangeError: If the index is outside the buffer

		Author: B.G.
		"""
		buf = self._buffer(layer, "GridMap.at(...)")
		i, j = self._cell(index)
		return float(buf.field[i, j])

	def set_at(self, layer, index, value):
		buf = self._buffer(layer, "GridMap.set_at(...)")
		i, j = self._cell(index)
		buf.field[i, j] = value

	def _index_at_position(self, position, where):
		index, ok = self.get_index(position)
		if not ok:
			raise OutOfRangeError(f"{where}: Position is out of range.")
		return index

	def at_position(self, layer, position):
		"""
		Value of a layer at the cell containing a position.

		Raises:
			LayerNotFoundError: If the layer does not exist
			OutOfRangeError: If the position is outside the map

		Author: B.G.
		"""
		self._buffer(layer, "GridMap.at_position(...)")
		return self.at(layer, self._index_at_position(position, "GridMap.at_position(...)"))

	def set_at_position(self, layer, position, value):
		self._buffer(layer, "GridMap.set_at_position(...)")
		self.set_at(layer, self._index_at_position(position, "GridMap.set_at_position(...)"), value)

	def convert_to_default_start_index(self):
		"""
		Rotate every buffer so that the start index becomes (0, 0).

		World meaning of every cell is preserved; only physical indices
		change. Touches every cell of every layer.

		Author: B.G.
		"""
		if geo.check_if_start_index_at_default_position(self._start_index):
			return
		for layer in self._layers:
			if self._data[layer] is not None:
				self._data[layer].from_numpy(self.get_logical(layer))
		self._start_index = np.zeros(2, dtype = int)

	#########################################
	###### VALIDITY #########################
	#########################################

	def is_valid(self, index, layers = None):
		"""
		Check whether a cell holds finite data.

		Args:
			index: Physical buffer index
			layers (str or list of str, optional): Layer or layers to check.
				Default: the basic layers. An empty list is never valid.

		Returns:
			bool: True if every checked layer is finite at index

		Author: B.G.
		"""
		if layers is None:
			layers = self._basic_layers
		if isinstance(layers, str):
			return math.isfinite(self.at(layers, index))
		if len(layers) == 0:
			return False
		for layer in layers:
			if not math.isfinite(self.at(layer, index)):
				return False
		return True

	def valid_mask(self, layers = None):
		"""
		Boolean mask (physical order) of the cells valid in every layer.

		Same semantics as is_valid, for all cells at once.

		Author: B.G.
		"""
		if layers is None:
			layers = self._basic_layers
		if isinstance(layers, str):
			layers = [layers]
		mask = np.full(tuple(self._size), len(layers) > 0, dtype = bool)
		for layer in layers:
			mask &= np.isfinite(self.get(layer))
		return mask

	def get_position3(self, layer, index):
		"""
		3D point made of the cell centre and the value of a layer.

		Returns:
			np.ndarray or None: (x, y, value), None if the cell is invalid

		Author: B.G.
		"""
		if not self.is_valid(index, layer):
			return None
		position, ok = self.get_position(index)
		if not ok:
			return None
		return np.array([position[0], position[1], self.at(layer, index)])

	def get_vector(self, layer_prefix, index):
		"""
		3-vector read from the layers prefix+'x', prefix+'y' and prefix+'z'.

		Returns:
			np.ndarray or None: None unless all three layers are valid at index

		Author: B.G.
		"""
		layers = [layer_prefix + "x", layer_prefix + "y", layer_prefix + "z"]
		if not self.is_valid(index, layers):
			return None
		return np.array([self.at(layer, index) for layer in layers])

	def clear(self, layer):
		"""
		Set every cell of a layer to NO_DATA.

		Raises:
			LayerNotFoundError: If the layer does not exist

		Author: B.G.
		"""
		buf = self._buffer(layer, "GridMap.clear(...)")
		if buf is not None:
			buf.fill(cte.NO_DATA)

	def clear_basic(self):
		for layer in self._basic_layers:
			self.clear(layer)

	def clear_all(self):
		"""Set every cell of every layer (basic or not) to NO_DATA."""
		for buf in self._data.values():
			if buf is not None:
				buf.fill(cte.NO_DATA)

	def _clear_rows(self, index, n_rows):
		# Buffer rows [index, index + n_rows) of the basic layers only
		for layer in self._basic_layers:
			gena.fill_block(self._buffer(layer, "GridMap.move(...)").field, int(index), 0,
				int(n_rows), int(self._size[1]), cte.NO_DATA)

	def _clear_cols(self, index, n_cols):
		# Buffer columns [index, index + n_cols) of the basic layers only
		for layer in self._basic_layers:
			gena.fill_block(self._buffer(layer, "GridMap.move(...)").field, 0, int(index),
				int(self._size[0]), int(n_cols), cte.NO_DATA)

	#########################################
	###### MOVE #############################
	#########################################

	def move(self, position, new_regions = None):
		"""
		Re-centre the map on a new position without moving stored data.

		The shift is quantised to whole cells (half away from zero) and the
		map position advances by that aligned shift, so cell borders stay on
		the resolution grid. Only the cells that leave the window are
		touched: the strips of the basic layers they occupied are set to
		NO_DATA, ready to receive the newly covered area. Non-basic layers
		keep their (now stale) values there and are expected to be
		recomputed from the basic layers. If the shift is at least the map
		size on an axis, every cell of every layer is cleared instead.

		Args:
			position: Target centre in the map frame
			new_regions (list, optional): When given, extended with a
				BufferRegion per invalidated strip (full extent on the other
				axis), buffer axis 0 strips first. Nothing is appended for an
				axis that cleared the whole map.

		Returns:
			bool: True if the map moved by at least one cell

		Author: B.G.
		"""
		if not self._resolution > 0.0:
			raise ContractViolation("GridMap.move(...): the map has no geometry, call set_geometry first.")

		position_shift = np.asarray(position, dtype = float).reshape(2) - self._position
		index_shift = geo.get_index_shift_from_position_shift(position_shift, self._resolution)
		aligned_position_shift = geo.get_position_shift_from_index_shift(index_shift, self._resolution)

		row_lines, col_lines = [], []

		for axis in range(2):
			shift = int(index_shift[axis])
			if shift == 0:
				continue

			n_axis = int(self._size[axis])
			if abs(shift) >= n_axis:
				# Entire map is dropped
				self.clear_all()
				continue

			sign = 1 if shift > 0 else -1
			start = int(self._start_index[axis]) - (1 if sign < 0 else 0)
			end = start - sign + shift
			n_cells = abs(shift)
			index = geo.wrap_index_to_range(start if sign > 0 else end, n_axis)

			if index + n_cells <= n_axis:
				lines = [(index, n_cells)]
			else:
				# Vacated strip wraps past the buffer end
				first = n_axis - index
				lines = [(index, first), (0, n_cells - first)]

			for line_index, line_count in lines:
				if axis == 0:
					self._clear_rows(line_index, line_count)
					row_lines.append((line_index, line_count))
				else:
					self._clear_cols(line_index, line_count)
					col_lines.append((line_index, line_count))

		self._start_index = geo.wrap_index_to_range(self._start_index + index_shift, self._size)
		self._position = self._position + aligned_position_shift

		if new_regions is not None:
			for line_index, line_count in row_lines:
				new_regions.append(geo.BufferRegion((line_index, 0), (line_count, self._size[1])))
			for line_index, line_count in col_lines:
				new_regions.append(geo.BufferRegion((0, line_index), (self._size[0], line_count)))

		return bool(np.any(index_shift != 0))

	#########################################
	###### SUBMAPS ##########################
	#########################################

	def get_submap(self, position, length):
		"""
		Independent copy of a rectangular region of the map.

		The query is clipped to the map, so the result can be smaller than
		requested. The submap has its own buffers with a zero start index,
		the same layers, basic layers, timestamp and frame id.

		Args:
			position: Centre of the region in the map frame
			length: Requested extent

		Returns:
			tuple: (submap, is_success). On failure (query not overlapping
				the map around its centre, or not representable) the submap
				only carries the layer names.

		Author: B.G.
		"""
		submap, _, is_success = self.get_submap_and_index(position, length)
		return submap, is_success

	def get_submap_and_index(self, position, length):
		"""
		Same as get_submap, also returning the index of `position` in the submap.

		Returns:
			tuple: (submap, index_in_submap, is_success); index_in_submap is
				None on failure

		Author: B.G.
		"""
		from ._submap import extract_submap
		return extract_submap(self, position, length)

	def __repr__(self):
		return (f"GridMap(layers={self._layers}, size={tuple(int(s) for s in self._size)}, "
			f"resolution={self._resolution}, position={tuple(float(p) for p in self._position)})")
