"""
Circular multi-layer grid maps for PyGridMap.

This submodule provides the GridMap container: a stack of named 2D layers
sharing one geometry, stored in circular buffers so that the map window can
follow a moving robot without shifting its data.

Core Classes:
- GridMap: multi-layer grid map with geometry, circular indexing, moving,
  submap extraction and validity checks
- LayerView: borrowed in-place view on one layer buffer

Key Features:
- Insertion-ordered, string-keyed layers (e.g. 'elevation', 'traversability')
- Basic layers driving validity checks and partial invalidation on move
- O(vacated cells) re-centring through a wrapping start index
- Submap extraction reassembling wrapped buffers into contiguous copies
- NaN sentinel for cells without data
- Pool-based buffer management

Usage:
    import pygridmap as pgm

    gmap = pgm.gridmap.GridMap(['elevation', 'variance'])
    gmap.set_basic_layers(['elevation'])
    gmap.set_geometry(length=(10., 10.), resolution=0.1, position=(0., 0.))
    gmap.add('elevation', 0.)

    # Write and read through world positions
    gmap.set_at_position('elevation', (1.23, -0.4), 0.25)
    z = gmap.at_position('elevation', (1.23, -0.4))

    # Follow the robot: only the 5 vacated buffer lines of 'elevation' are cleared
    regions = []
    gmap.move((0.5, 0.), regions)

    # Independent contiguous copy of a 2m x 2m window
    submap, ok = gmap.get_submap((0.5, 0.), (2., 2.))

Author: B.G.
"""

from .layer_view import LayerView
from .gridmap import GridMap

# Export main classes
__all__ = [
    "GridMap",
    "LayerView"
]
