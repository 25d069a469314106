#!/usr/bin/env python3
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

import pygridmap as pgm
from pygridmap import GridMap

pgm.environment.initialise(arch='cpu')


def make_map():
    gmap = GridMap(["elevation"])
    gmap.set_geometry((5., 5.), 1., (0., 0.))
    gmap.add("elevation", 0.)
    return gmap


def test_world_image_orientation():
    """Image rows go towards +y, columns towards +x"""
    gmap = make_map()
    gmap.set_at_position("elevation", (2., -2.), 3.)
    image, extent = pgm.visu.world_image(gmap, "elevation")
    assert image.shape == (5, 5)
    assert image[0, 4] == 3.
    assert np.count_nonzero(image) == 1
    assert extent == (-2.5, 2.5, -2.5, 2.5)


def test_world_image_after_move():
    gmap = make_map()
    gmap.set_basic_layers(["elevation"])
    gmap.move((1., 0.))
    gmap.set_at_position("elevation", (3., 0.), 5.)
    image, extent = pgm.visu.world_image(gmap, "elevation")
    assert extent == (-1.5, 3.5, -2.5, 2.5)
    assert image[2, 4] == 5.
    assert np.all(np.isnan(image[[0, 1, 3, 4], 4]))


def test_hillshade_layer():
    gmap = make_map()
    values = np.arange(25, dtype = np.float32).reshape(5, 5)
    gmap.add("elevation", values)
    shade, extent = pgm.visu.hillshade_layer(gmap, "elevation")
    assert shade.shape == (5, 5)
    assert np.all((shade >= 0.) & (shade <= 1.))
    assert extent == (-2.5, 2.5, -2.5, 2.5)


def test_hillshade_flat_layer():
    gmap = make_map()
    shade, _ = pgm.visu.hillshade_layer(gmap, "elevation", altitude_deg = 90.)
    np.testing.assert_allclose(shade, 1.)


def test_hillshade_too_small():
    gmap = GridMap(["elevation"])
    gmap.set_geometry((1., 3.), 1.)
    gmap.add("elevation", 0.)
    shade, _ = pgm.visu.hillshade_layer(gmap, "elevation")
    assert np.all(np.isnan(shade))


def test_plot_layer():
    gmap = make_map()
    gmap.set_at("elevation", (0, 0), np.nan)
    fig, ax = plt.subplots()
    artist = pgm.visu.plot_layer(gmap, "elevation", ax = ax, hillshade = True)
    np.testing.assert_allclose(artist.get_extent(), [-2.5, 2.5, -2.5, 2.5])
    assert ax.get_title() == "elevation"
    assert len(ax.images) == 2
    plt.close(fig)
