"""
Coordinate transforms between the map frame and circular layer buffers.

All functions are pure and operate on 2-vectors (numpy arrays or any
2-sequence). Positions and lengths are floats in the map frame, indices and
sizes are integers in buffer order.

Conventions:
- The map is centred on `map_position` and extends `map_length / 2` on each
  side. A position is inside when `position - map_position` lies in
  `(-length/2, length/2]` per axis.
- Buffer axis 0 points towards -x and buffer axis 1 towards -y: buffer index
  (0, 0) of an unwrapped map is the cell at the (+x, +y) corner.
- A buffer wraps around `start_index`, the physical cell holding logical
  index (0, 0). Every wraparound goes through wrap_index_to_range so moving
  and submap extraction agree on the modular arithmetic.

Author: B.G.
"""

import numpy as np
from .. import constants as cte
from .buffer_region import BufferRegion, Quadrant


# Buffer order is the map frame mirrored on both axes
_BUFFER_TO_MAP = -np.identity(2, dtype = int)
_MAP_TO_BUFFER = _BUFFER_TO_MAP.T


def _vec(value, dtype = float):
	return np.asarray(value, dtype = dtype).reshape(2)


def _vector_to_origin(map_length):
	# From the map centre to the (+x, +y) corner
	return 0.5 * _vec(map_length)


def _vector_to_first_cell(map_length, resolution):
	# From the map centre to the centre of the (+x, +y) cell
	return _vector_to_origin(map_length) - 0.5 * resolution


def transform_map_frame_to_buffer_order(vector):
	return _MAP_TO_BUFFER @ np.asarray(vector)


def transform_buffer_order_to_map_frame(index):
	return _BUFFER_TO_MAP @ np.asarray(index)


#########################################
###### INDEX WRAPPING ###################
#########################################


def wrap_index_to_range(index, buffer_size):
	"""
	Wrap an index into [0, buffer_size) per axis.

	Args:
		index (int or array-like): Index to wrap, may be negative or past the end
		buffer_size (int or array-like): Buffer extent, matching index

	Returns:
		int or np.ndarray: Wrapped index with the same structure as the input

	Author: B.G.
	"""
	if np.ndim(index) == 0:
		return int(index) % int(buffer_size)
	return np.mod(_vec(index, int), _vec(buffer_size, int))


def check_if_index_in_range(index, buffer_size) -> bool:
	index = _vec(index, int)
	buffer_size = _vec(buffer_size, int)
	return bool(np.all(index >= 0) and np.all(index < buffer_size))


def check_if_start_index_at_default_position(buffer_start_index) -> bool:
	return bool(np.all(_vec(buffer_start_index, int) == 0))


def get_index_from_buffer_index(buffer_index, buffer_size, buffer_start_index):
	"""
	Logical index (relative to the start index) of a physical buffer index.

	Author: B.G.
	"""
	buffer_index = _vec(buffer_index, int)
	if check_if_start_index_at_default_position(buffer_start_index):
		return buffer_index
	return wrap_index_to_range(buffer_index - _vec(buffer_start_index, int), buffer_size)


def get_buffer_index_from_index(index, buffer_size, buffer_start_index):
	"""
	Physical buffer index of a logical index (relative to the start index).

	Author: B.G.
	"""
	index = _vec(index, int)
	if check_if_start_index_at_default_position(buffer_start_index):
		return index
	return wrap_index_to_range(index + _vec(buffer_start_index, int), buffer_size)


#########################################
###### POSITION <-> INDEX ###############
#########################################


def check_if_position_within_map(position, map_length, map_position) -> bool:
	"""
	Check whether a position lies inside the map window.

	Args:
		position: Query position in the map frame
		map_length: Extent of the map
		map_position: Centre of the map

	Returns:
		bool: True if inside (the +x/+y borders are inclusive, -x/-y exclusive)

	Author: B.G.
	"""
	map_length = _vec(map_length)
	offset = _vector_to_origin(map_length)
	transformed = _MAP_TO_BUFFER @ (_vec(position) - _vec(map_position) - offset)
	return bool(np.all(transformed >= 0.0) and np.all(transformed < map_length))


def get_position_from_index(index, map_length, map_position, resolution, buffer_size, buffer_start_index = (0, 0)):
	"""
	Position of the centre of the cell at a physical buffer index.

	Args:
		index: Physical buffer index
		map_length: Extent of the map
		map_position: Centre of the map
		resolution (float): Cell edge length
		buffer_size: Buffer extent in cells
		buffer_start_index: Physical index of the logical origin

	Returns:
		tuple: (position, is_success); is_success is False when the index is
			outside the buffer, position is None in that case

	Author: B.G.
	"""
	if not check_if_index_in_range(index, buffer_size):
		return None, False
	unwrapped = get_index_from_buffer_index(index, buffer_size, buffer_start_index)
	offset = _vector_to_first_cell(map_length, resolution)
	position = _vec(map_position) + offset + resolution * transform_buffer_order_to_map_frame(unwrapped)
	return position, True


def get_index_from_position(position, map_length, map_position, resolution, buffer_size, buffer_start_index = (0, 0)):
	"""
	Physical buffer index of the cell containing a position.

	Args:
		position: Query position in the map frame
		map_length: Extent of the map
		map_position: Centre of the map
		resolution (float): Cell edge length
		buffer_size: Buffer extent in cells
		buffer_start_index: Physical index of the logical origin

	Returns:
		tuple: (index, is_success); the index is only meaningful when
			is_success is True, i.e. when the position is inside the map

	Author: B.G.
	"""
	offset = _vector_to_origin(map_length)
	index_vector = (_vec(position) - offset - _vec(map_position)) / resolution
	# astype truncates towards zero, which is a floor once mirrored for in-map positions
	index = _MAP_TO_BUFFER @ index_vector.astype(int)
	index = get_buffer_index_from_index(index, buffer_size, buffer_start_index)
	if not check_if_position_within_map(position, map_length, map_position):
		return index, False
	return index, True


def bound_position_to_range(position, map_length, map_position):
	"""
	Clamp a position to the closest position strictly inside the map.

	Author: B.G.
	"""
	position = _vec(position)
	map_length = _vec(map_length)
	vector_to_origin = _vector_to_origin(map_length)
	shifted = position - _vec(map_position) + vector_to_origin

	for i in range(2):
		epsilon = cte.BOUND_EPSILON_FACTOR * np.finfo(float).eps
		if abs(position[i]) > 1.0:
			epsilon *= abs(position[i])

		if shifted[i] <= 0.0:
			shifted[i] = epsilon
		elif shifted[i] >= map_length[i]:
			shifted[i] = map_length[i] - epsilon

	return shifted + _vec(map_position) - vector_to_origin


#########################################
###### SHIFTS ###########################
#########################################


def get_index_shift_from_position_shift(position_shift, resolution):
	"""
	Quantize a position shift into a whole number of cells in buffer order.

	Rounds half away from zero on each axis.

	Author: B.G.
	"""
	cells = _vec(position_shift) / resolution
	rounded = np.trunc(cells + 0.5 * np.where(cells > 0, 1.0, -1.0)).astype(int)
	return transform_map_frame_to_buffer_order(rounded)


def get_position_shift_from_index_shift(index_shift, resolution):
	"""Map frame position shift matching a buffer order index shift."""
	return transform_buffer_order_to_map_frame(_vec(index_shift, int)).astype(float) * resolution


#########################################
###### SUBMAPS ##########################
#########################################


def get_submap_information(requested_position, requested_length, map_length, map_position,
                           resolution, buffer_size, buffer_start_index):
	"""
	Clip a requested submap to a map and compute its geometry.

	The corners of the request are clamped into the map, so the resulting
	submap can be smaller than requested. The request fails when its centre
	does not fall inside the clipped submap, which includes every request
	disjoint from the map.

	Args:
		requested_position: Centre of the requested submap
		requested_length: Requested extent
		map_length, map_position, resolution, buffer_size, buffer_start_index:
			Geometry of the source map

	Returns:
		dict or None: None on failure, otherwise a dict with keys
			- top_left_index: physical buffer index of the submap's first cell
			- size: submap extent in cells
			- position: centre of the submap
			- length: extent of the submap
			- requested_index_in_submap: index of requested_position in the submap

	Author: B.G.
	"""
	transform = _MAP_TO_BUFFER.astype(float)
	half_request = 0.5 * _vec(requested_length)
	requested_position = _vec(requested_position)

	# Top left / bottom right refer to the buffer, not to the map frame
	top_left_position = bound_position_to_range(requested_position - transform @ half_request, map_length, map_position)
	top_left_buffer_index, ok = get_index_from_position(top_left_position, map_length, map_position,
		resolution, buffer_size, buffer_start_index)
	if not ok:
		return None
	top_left_index = get_index_from_buffer_index(top_left_buffer_index, buffer_size, buffer_start_index)

	bottom_right_position = bound_position_to_range(requested_position + transform @ half_request, map_length, map_position)
	bottom_right_buffer_index, ok = get_index_from_position(bottom_right_position, map_length, map_position,
		resolution, buffer_size, buffer_start_index)
	if not ok:
		return None
	bottom_right_index = get_index_from_buffer_index(bottom_right_buffer_index, buffer_size, buffer_start_index)

	top_left_corner, ok = get_position_from_index(top_left_buffer_index, map_length, map_position,
		resolution, buffer_size, buffer_start_index)
	if not ok:
		return None
	top_left_corner = top_left_corner - transform @ np.full(2, 0.5 * resolution)

	size = bottom_right_index - top_left_index + 1
	length = size.astype(float) * resolution
	position = top_left_corner - _vector_to_origin(length)

	requested_index, ok = get_index_from_position(requested_position, length, position, resolution, size)
	if not ok:
		return None

	return {
		"top_left_index": top_left_buffer_index,
		"size": size,
		"position": position,
		"length": length,
		"requested_index_in_submap": requested_index,
	}


def get_quadrant(index, buffer_start_index) -> Quadrant:
	"""
	Quadrant of a wrapped buffer a physical index falls into.

	The top left quadrant starts at the start index and holds the first
	logical cells; the other quadrants are the parts wrapped past the
	buffer end on one or both axes.

	Author: B.G.
	"""
	index = _vec(index, int)
	start = _vec(buffer_start_index, int)
	if index[0] >= start[0] and index[1] >= start[1]:
		return Quadrant.TOP_LEFT
	if index[0] >= start[0] and index[1] < start[1]:
		return Quadrant.TOP_RIGHT
	if index[0] < start[0] and index[1] >= start[1]:
		return Quadrant.BOTTOM_LEFT
	return Quadrant.BOTTOM_RIGHT


def get_buffer_regions_for_submap(submap_index, submap_size, buffer_size, buffer_start_index):
	"""
	Split a submap of a wrapped buffer into contiguous physical blocks.

	Args:
		submap_index: Physical buffer index of the submap's first cell
		submap_size: Submap extent in cells
		buffer_size: Source buffer extent
		buffer_start_index: Source start index

	Returns:
		list[BufferRegion] or None: One to four regions, each tagged with the
			corner of the contiguous submap it fills; None when the submap
			does not fit into the buffer

	Author: B.G.
	"""
	submap_index = _vec(submap_index, int)
	submap_size = _vec(submap_size, int)
	buffer_size = _vec(buffer_size, int)

	if np.any(get_index_from_buffer_index(submap_index, buffer_size, buffer_start_index) + submap_size > buffer_size):
		return None
	if np.any(submap_size < 1):
		return None

	bottom_right_index = wrap_index_to_range(submap_index + submap_size - 1, buffer_size)

	quadrant_of_top_left = get_quadrant(submap_index, buffer_start_index)
	quadrant_of_bottom_right = get_quadrant(bottom_right_index, buffer_start_index)

	regions = []

	if quadrant_of_top_left == Quadrant.TOP_LEFT:

		if quadrant_of_bottom_right == Quadrant.TOP_LEFT:
			regions.append(BufferRegion(submap_index, submap_size, Quadrant.TOP_LEFT))
			return regions

		if quadrant_of_bottom_right == Quadrant.TOP_RIGHT:
			top_left_size = (submap_size[0], buffer_size[1] - submap_index[1])
			regions.append(BufferRegion(submap_index, top_left_size, Quadrant.TOP_LEFT))
			top_right_index = (submap_index[0], 0)
			top_right_size = (submap_size[0], submap_size[1] - top_left_size[1])
			regions.append(BufferRegion(top_right_index, top_right_size, Quadrant.TOP_RIGHT))
			return regions

		if quadrant_of_bottom_right == Quadrant.BOTTOM_LEFT:
			top_left_size = (buffer_size[0] - submap_index[0], submap_size[1])
			regions.append(BufferRegion(submap_index, top_left_size, Quadrant.TOP_LEFT))
			bottom_left_index = (0, submap_index[1])
			bottom_left_size = (submap_size[0] - top_left_size[0], submap_size[1])
			regions.append(BufferRegion(bottom_left_index, bottom_left_size, Quadrant.BOTTOM_LEFT))
			return regions

		if quadrant_of_bottom_right == Quadrant.BOTTOM_RIGHT:
			top_left_size = (buffer_size[0] - submap_index[0], buffer_size[1] - submap_index[1])
			regions.append(BufferRegion(submap_index, top_left_size, Quadrant.TOP_LEFT))
			top_right_index = (submap_index[0], 0)
			top_right_size = (buffer_size[0] - submap_index[0], submap_size[1] - top_left_size[1])
			regions.append(BufferRegion(top_right_index, top_right_size, Quadrant.TOP_RIGHT))
			bottom_left_index = (0, submap_index[1])
			bottom_left_size = (submap_size[0] - top_left_size[0], buffer_size[1] - submap_index[1])
			regions.append(BufferRegion(bottom_left_index, bottom_left_size, Quadrant.BOTTOM_LEFT))
			bottom_right_size = (bottom_left_size[0], top_right_size[1])
			regions.append(BufferRegion((0, 0), bottom_right_size, Quadrant.BOTTOM_RIGHT))
			return regions

	elif quadrant_of_top_left == Quadrant.TOP_RIGHT:

		if quadrant_of_bottom_right == Quadrant.TOP_RIGHT:
			regions.append(BufferRegion(submap_index, submap_size, Quadrant.TOP_RIGHT))
			return regions

		if quadrant_of_bottom_right == Quadrant.BOTTOM_RIGHT:
			top_right_size = (buffer_size[0] - submap_index[0], submap_size[1])
			regions.append(BufferRegion(submap_index, top_right_size, Quadrant.TOP_RIGHT))
			bottom_right_index = (0, submap_index[1])
			bottom_right_size = (submap_size[0] - top_right_size[0], submap_size[1])
			regions.append(BufferRegion(bottom_right_index, bottom_right_size, Quadrant.BOTTOM_RIGHT))
			return regions

	elif quadrant_of_top_left == Quadrant.BOTTOM_LEFT:

		if quadrant_of_bottom_right == Quadrant.BOTTOM_LEFT:
			regions.append(BufferRegion(submap_index, submap_size, Quadrant.BOTTOM_LEFT))
			return regions

		if quadrant_of_bottom_right == Quadrant.BOTTOM_RIGHT:
			bottom_left_size = (submap_size[0], buffer_size[1] - submap_index[1])
			regions.append(BufferRegion(submap_index, bottom_left_size, Quadrant.BOTTOM_LEFT))
			bottom_right_index = (submap_index[0], 0)
			bottom_right_size = (submap_size[0], submap_size[1] - bottom_left_size[1])
			regions.append(BufferRegion(bottom_right_index, bottom_right_size, Quadrant.BOTTOM_RIGHT))
			return regions

	elif quadrant_of_top_left == Quadrant.BOTTOM_RIGHT:

		if quadrant_of_bottom_right == Quadrant.BOTTOM_RIGHT:
			regions.append(BufferRegion(submap_index, submap_size, Quadrant.BOTTOM_RIGHT))
			return regions

	return None
