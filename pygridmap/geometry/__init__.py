"""
Geometry helpers for PyGridMap.

Pure coordinate transforms between the map frame and circular layer
buffers, plus the value types describing buffer blocks and clipped submaps.
GridMap delegates all of its index arithmetic to this submodule.

Core Modules:
- gridmath: position <-> index transforms, shift quantisation, index wrapping,
  submap clipping and buffer region decomposition
- buffer_region: BufferRegion blocks and their destination Quadrant
- submap_geometry: SubmapGeometry, the clipped geometry of a submap query

Usage:
    import pygridmap as pgm

    index, ok = pgm.geometry.get_index_from_position(
        (0.2, -1.3), map_length=(5., 5.), map_position=(0., 0.),
        resolution=1., buffer_size=(5, 5), buffer_start_index=(3, 1))

Author: B.G.
"""

from .buffer_region import BufferRegion, Quadrant
from .gridmath import (
	wrap_index_to_range,
	check_if_index_in_range,
	check_if_start_index_at_default_position,
	get_index_from_buffer_index,
	get_buffer_index_from_index,
	check_if_position_within_map,
	get_position_from_index,
	get_index_from_position,
	bound_position_to_range,
	get_index_shift_from_position_shift,
	get_position_shift_from_index_shift,
	get_submap_information,
	get_quadrant,
	get_buffer_regions_for_submap,
)
from .submap_geometry import SubmapGeometry

__all__ = [
	"BufferRegion",
	"Quadrant",
	"SubmapGeometry",
	"wrap_index_to_range",
	"check_if_index_in_range",
	"check_if_start_index_at_default_position",
	"get_index_from_buffer_index",
	"get_buffer_index_from_index",
	"check_if_position_within_map",
	"get_position_from_index",
	"get_index_from_position",
	"bound_position_to_range",
	"get_index_shift_from_position_shift",
	"get_position_shift_from_index_shift",
	"get_submap_information",
	"get_quadrant",
	"get_buffer_regions_for_submap",
]
