"""
Internal submap extraction for the GridMap class.

Builds a contiguous, independent copy of a region of a circular map. The
region is clipped against the source, split into up to four physical blocks
of the wrapped source buffers, and each block is copied into the matching
corner of the new map's buffers.

This is an internal module - users should call gridmap.get_submap() instead.

Author: B.G.
"""

import warnings
from .. import general_algorithms as gena
from .. import geometry as geo


def extract_submap(gridmap, position, length):
	"""
	Extract a submap from a GridMap.

	Args:
		gridmap (GridMap): Source map, left untouched
		position: Centre of the requested region
		length: Requested extent

	Returns:
		tuple: (submap, index_in_submap, is_success). On failure the submap
			is an empty GridMap carrying only the layer names and
			index_in_submap is None.

	Author: B.G.
	"""
	from .gridmap import GridMap

	submap = GridMap(gridmap.layers)
	submap.set_basic_layers(gridmap.basic_layers)
	submap.timestamp = gridmap.timestamp
	submap.frame_id = gridmap.frame_id

	if not gridmap.resolution > 0.0:
		return GridMap(gridmap.layers), None, False

	geometry = geo.SubmapGeometry(gridmap, position, length)
	if not geometry.is_success:
		return GridMap(gridmap.layers), None, False

	submap.set_geometry_from_submap(geometry)
	submap.set_start_index((0, 0))

	regions = geo.get_buffer_regions_for_submap(geometry.top_left_index, submap.size,
		gridmap.size, gridmap.start_index)
	if regions is None:
		warnings.warn("GridMap.get_submap(...): Cannot access submap of this size.")
		return GridMap(gridmap.layers), None, False

	destination_size = submap.size
	for layer in gridmap.layers:
		src = gridmap._data[layer].field
		dst = submap._data[layer].field
		for region in regions:
			dst_row, dst_col = region.destination_corner(destination_size)
			gena.copy_block(src, dst, int(region.index[0]), int(region.index[1]),
				dst_row, dst_col, int(region.size[0]), int(region.size[1]))

	return submap, geometry.requested_index_in_submap, True
