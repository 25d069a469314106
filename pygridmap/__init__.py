"""
PyGridMap - circular multi-layer grid maps for mobile robots.

A Python package for robot-centric 2D grid maps (elevation, cost,
traversability, ...) that follow a moving agent. Layers live in pooled
taichi buffers addressed circularly, so re-centring the map only touches the
cells that leave the window instead of shifting every buffer.

Key Features:
- Named, insertion-ordered layers sharing one geometry
- Geometry management (length snapped to the resolution, world position)
- Circular indexing: position <-> buffer index with a wrapping start index
- O(vacated cells) window moves with partial invalidation of basic layers
- Submap extraction reassembling wrapped buffers into independent copies
- NaN sentinel and per-cell / per-layer validity queries
- Pool-based buffer management and block kernels on the taichi backend
- Matplotlib rendering of layers in world coordinates

Core Components:
- gridmap: GridMap container and borrowed LayerViews
- geometry: coordinate transforms, buffer regions and submap geometry
- pool: layer buffer pooling
- general_algorithms: block fill / copy kernels
- visu: plotting and hillshading of layers
- constants: global configuration (dtype, sentinel, backend)
- environment: taichi backend initialisation
- exceptions: error taxonomy

Basic Usage:
    import pygridmap as pgm

    pgm.environment.initialise(arch='cpu')

    gmap = pgm.gridmap.GridMap(['elevation'])
    gmap.set_basic_layers(['elevation'])
    gmap.set_geometry(length=(5., 5.), resolution=1., position=(0., 0.))
    gmap.add('elevation', 0.)

    gmap.move((1., 0.))            # one buffer line of 'elevation' becomes NaN
    submap, ok = gmap.get_submap((0.5, 0.), (2.9, 2.9))

Author: B.G.
"""

__version__ = "0.1.0"
__author__ = "B.G."

# Import all submodules in dependency order
from . import constants
from . import environment
from . import exceptions
from . import pool
from . import general_algorithms
from . import geometry
from . import gridmap
from . import visu

from .gridmap import GridMap
from .exceptions import (
    GridMapError,
    ContractViolation,
    LayerNotFoundError,
    OutOfRangeError,
    StaleViewError
)

# Export all submodules
__all__ = [
    "constants",
    "environment",
    "exceptions",
    "pool",
    "general_algorithms",
    "geometry",
    "gridmap",
    "visu",
    "GridMap",
    "GridMapError",
    "ContractViolation",
    "LayerNotFoundError",
    "OutOfRangeError",
    "StaleViewError"
]
