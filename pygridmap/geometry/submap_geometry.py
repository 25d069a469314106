"""
Geometry of a submap clipped to its source map.

Author: B.G.
"""

import numpy as np
from . import gridmath as gm


class SubmapGeometry:
	"""
	Clipped geometry of a rectangular query against a GridMap.

	Computed once at construction from the current geometry of the source
	map. When the query cannot be honoured, is_success is False and the
	geometric attributes are None.

	Attributes:
		is_success (bool): Whether the query overlaps the source suitably
		position (np.ndarray): Centre of the clipped submap
		length (np.ndarray): Extent of the clipped submap (a multiple of the resolution)
		resolution (float): Resolution of the source map
		size (np.ndarray): Extent of the clipped submap in cells
		top_left_index (np.ndarray): Physical index in the source buffer of the submap's first cell
		requested_index_in_submap (np.ndarray): Index of the query centre in the submap

	Author: B.G.
	"""

	def __init__(self, gridmap, position, length):
		"""
		Args:
			gridmap (GridMap): Source map
			position: Centre of the query in the map frame
			length: Extent of the query

		Author: B.G.
		"""
		self.resolution = gridmap.resolution

		info = gm.get_submap_information(position, length, gridmap.length, gridmap.position,
			gridmap.resolution, gridmap.size, gridmap.start_index)

		self.is_success = info is not None
		if not self.is_success:
			self.position = self.length = self.size = None
			self.top_left_index = self.requested_index_in_submap = None
			return

		self.position = np.asarray(info["position"], dtype = float)
		self.length = np.asarray(info["length"], dtype = float)
		self.size = np.asarray(info["size"], dtype = int)
		self.top_left_index = np.asarray(info["top_left_index"], dtype = int)
		self.requested_index_in_submap = np.asarray(info["requested_index_in_submap"], dtype = int)

	def __bool__(self):
		return self.is_success
