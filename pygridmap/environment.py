"""
Environment initialization and management for PyGridMap.

Handles the taichi backend start-up used by the layer buffers and kernels,
and resets the global state when the backend has to be restarted.

Author: B.G.
"""

import taichi as ti
from . import constants as cte


def initialise(arch=None, force=False):
	"""
	Initialize the taichi backend used by PyGridMap.

	Calls ti.init once with the configured architecture and with
	default_fp matching constants.FLOAT_DTYPE so that python floats handed
	to kernels have the same precision as the layer buffers. Subsequent calls
	are no-ops unless force is True.

	Args:
		arch (str or taichi arch, optional): Backend to use. Defaults to constants.ARCH
		force (bool, optional): Reinitialise even when already initialised.
			Every existing buffer becomes invalid. Default: False

	Author: B.G.
	"""
	if(cte.INITIALISED and not force):
		return

	if(force):
		reboot()

	arch = cte.ARCH if arch is None else arch
	if isinstance(arch, str):
		arch = getattr(ti, arch)

	ti.init(arch = arch, default_fp = cte.FLOAT_DTYPE)

	# Mark as initialized
	cte.INITIALISED = True


def reboot():
	"""
	Reset the taichi environment.

	Clears all device memory and forgets every pooled buffer, which are all
	invalid after the reset. GridMaps created before a reboot must not be
	used afterwards.

	Author: B.G.
	"""
	from .pool import bufferpool
	ti.reset()
	bufferpool.forget_all()
	cte.INITIALISED = False
