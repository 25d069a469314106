"""
Matplotlib rendering of GridMap layers in world coordinates.

Layers are stored in buffer order (axis 0 towards -x, axis 1 towards -y,
wrapped around the start index). The helpers here unwrap and reorient them
into images with x to the right and y up, with the map extent attached, so
they overlay correctly on other map-frame plots.

Author: B. Gailleton
"""

import math
import numpy as np


def world_image(gridmap, layer):
	"""
	Layer as an image array in world orientation.

	Args:
		gridmap (GridMap): Source map
		layer (str): Layer name

	Returns:
		tuple: (image, extent) where image[r, c] is the cell at the r-th row
			from the bottom (-y) and c-th column from the left (-x), and extent
			is (xmin, xmax, ymin, ymax) for imshow(origin='lower')

	Author: B. Gailleton
	"""
	logical = gridmap.get_logical(layer)
	image = logical[::-1, ::-1].T

	half = 0.5 * gridmap.length
	position = gridmap.position
	extent = (position[0] - half[0], position[0] + half[0], position[1] - half[1], position[1] + half[1])
	return image, extent


def hillshade_layer(gridmap, layer, altitude_deg = 45.0, azimuth_deg = 315.0, z_factor = 1.0):
	"""
	Hillshade of an elevation-like layer, in world orientation.

	Cells without data (and their missing gradients) come out as NaN.

	Args:
		gridmap (GridMap): Source map
		layer (str): Layer holding heights
		altitude_deg (float): Sun altitude angle in degrees (0-90). Default: 45
		azimuth_deg (float): Sun azimuth in degrees (0 = North, clockwise). Default: 315 (NW)
		z_factor (float): Vertical exaggeration. Default: 1

	Returns:
		tuple: (hillshade, extent) with hillshade values in [0, 1] or NaN

	Author: B. Gailleton
	"""
	image, extent = world_image(gridmap, layer)
	image = image.astype(np.float64) * z_factor

	zenith_rad = math.radians(90.0 - altitude_deg)
	azimuth_rad = math.radians(azimuth_deg)

	if min(image.shape) < 2:
		return np.full(image.shape, np.nan), extent

	# Rows go north (+y), columns go east (+x)
	dz_dy, dz_dx = np.gradient(image, gridmap.resolution, gridmap.resolution)
	slope = np.arctan(np.hypot(dz_dx, dz_dy))
	aspect = np.arctan2(dz_dy, -dz_dx)

	shade = (math.cos(zenith_rad) * np.cos(slope)
		+ math.sin(zenith_rad) * np.sin(slope) * np.cos(azimuth_rad - math.pi / 2.0 - aspect))
	return np.clip(shade, 0.0, 1.0), extent


def plot_layer(gridmap, layer, ax = None, cmap = "viridis", hillshade = False, **kwargs):
	"""
	Draw a layer on a matplotlib axis in world coordinates.

	Cells without data are left transparent.

	Args:
		gridmap (GridMap): Source map
		layer (str): Layer name
		ax (matplotlib.axes.Axes, optional): Target axis. Default: current axis
		cmap (str): Colormap of the layer values. Default: 'viridis'
		hillshade (bool): Overlay a semi-transparent hillshade of the layer. Default: False
		**kwargs: Forwarded to imshow

	Returns:
		matplotlib.image.AxesImage: Image of the layer values

	Author: B. Gailleton
	"""
	import matplotlib.pyplot as plt

	if ax is None:
		ax = plt.gca()

	image, extent = world_image(gridmap, layer)
	artist = ax.imshow(np.ma.masked_invalid(image), origin = "lower", extent = extent, cmap = cmap, **kwargs)

	if hillshade:
		shade, _ = hillshade_layer(gridmap, layer)
		ax.imshow(np.ma.masked_invalid(shade), origin = "lower", extent = extent, cmap = "gray",
			alpha = 0.35, vmin = 0.0, vmax = 1.0)

	ax.set_xlabel("x")
	ax.set_ylabel("y")
	ax.set_title(layer)
	return artist
