"""
Visualization helpers for PyGridMap.

Core Modules:
- plotting: world-oriented images, hillshading and matplotlib plotting of layers

Available Functions:
- world_image: Unwrapped layer reoriented with x right / y up, plus its extent
- hillshade_layer: Hillshade of an elevation-like layer
- plot_layer: imshow of a layer in world coordinates (NaN cells transparent)

Usage:
    import matplotlib.pyplot as plt
    import pygridmap as pgm

    fig, ax = plt.subplots()
    pgm.visu.plot_layer(gmap, 'elevation', ax=ax, hillshade=True)
    plt.show()

Author: B.G.
"""

from .plotting import world_image, hillshade_layer, plot_layer

__all__ = [
    "world_image",
    "hillshade_layer",
    "plot_layer"
]
