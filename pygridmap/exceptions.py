"""
Error taxonomy for PyGridMap.

Two families of errors are raised:

- ContractViolation: malformed geometry or mismatching data handed to the
  map. These are programming errors and are not meant to be caught.
- LayerNotFoundError, OutOfRangeError, StaleViewError: recoverable lookup
  failures that callers of a moving map routinely handle.

Failed submap queries are not errors; GridMap.get_submap reports them
through its success flag.

Author: B.G.
"""


class GridMapError(Exception):
	"""Base class of every error raised by PyGridMap."""


class ContractViolation(GridMapError, AssertionError):
	"""Precondition violated by the caller (bad geometry, size mismatch)."""


class LayerNotFoundError(GridMapError, KeyError):
	"""Operation on a layer name that does not exist in the map."""

	def __init__(self, layer, where = "GridMap"):
		self.layer = layer
		super().__init__(f"{where}: No map layer '{layer}' available.")

	def __str__(self):
		return self.args[0]


class OutOfRangeError(GridMapError, IndexError):
	"""Position or buffer index outside of the current map window."""


class StaleViewError(GridMapError, RuntimeError):
	"""LayerView used after a structural mutation of its map."""
