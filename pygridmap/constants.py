"""
Global constants and configuration parameters for PyGridMap.

This module centralises the runtime parameters shared by every GridMap: the
floating point type of the layer buffers, the sentinel marking cells without
data, the taichi backend used at initialisation and the numerical tolerance
used when clamping positions into a map.

The values are plain module globals. Change them before the first call to
pygridmap.environment.initialise() (or before the first GridMap allocates a
buffer, which initialises the backend lazily).

Constant Categories:
- Backend Constants: taichi architecture and initialisation state
- Buffer Constants: cell dtype on the device and on the host, pool capacity
- Data Constants: sentinel value meaning "no data"
- Geometry Constants: tolerance used to keep clamped positions inside a map

Usage:
    import pygridmap.constants as cte
    import taichi as ti

    # Use double precision cells for every map created afterwards
    cte.FLOAT_DTYPE = ti.f64
    cte.NUMPY_DTYPE = np.float64

Author: B.G.
"""

import taichi as ti
import numpy as np

#########################################
###### BACKEND CONSTANTS ################
#########################################

# Set to True by pygridmap.environment.initialise()
INITIALISED = False

# Architecture handed to ti.init (name of a taichi arch: 'cpu', 'gpu', 'cuda', 'vulkan' ...)
ARCH = 'cpu'


#########################################
###### BUFFER CONSTANTS #################
#########################################

# Cell type of every layer buffer. Also used as taichi default_fp so kernels
# receiving python floats agree with the buffers.
FLOAT_DTYPE = ti.f32

# Host-side mirror of FLOAT_DTYPE, used for from_numpy/to_numpy transfers
NUMPY_DTYPE = np.float32

# Released buffers kept for reuse by the pool. Beyond this count the least
# recently released ones are dropped and their device memory freed.
POOL_MAX_AVAILABLE = 64


#########################################
###### DATA CONSTANTS ###################
#########################################

# Sentinel for "no data at this cell for this layer"
NO_DATA = float('nan')


#########################################
###### GEOMETRY CONSTANTS ###############
#########################################

# Positions clamped into a map are moved this many machine epsilons away from
# the border (scaled by |position| when |position| > 1)
BOUND_EPSILON_FACTOR = 10.0
