#!/usr/bin/env python3
import math
import numpy as np
import pytest

import pygridmap as pgm
from pygridmap import GridMap, LayerNotFoundError

pgm.environment.initialise(arch='cpu')


def make_map():
    gmap = GridMap(["elevation", "variance", "normal_x", "normal_y", "normal_z"])
    gmap.set_geometry((3., 3.), 0.5, (1., 1.))
    return gmap


def test_no_data_is_invalid():
    gmap = make_map()
    gmap.set_basic_layers(["elevation"])
    assert not gmap.is_valid((0, 0))
    gmap.set_at("elevation", (0, 0), 1.)
    assert gmap.is_valid((0, 0))
    assert not gmap.is_valid((0, 1))


def test_infinite_is_invalid():
    gmap = make_map()
    gmap.add("elevation", 0.)
    gmap.set_at("elevation", (2, 2), math.inf)
    assert not gmap.is_valid((2, 2), "elevation")
    gmap.set_at("elevation", (2, 3), -math.inf)
    assert not gmap.is_valid((2, 3), "elevation")
    assert gmap.is_valid((2, 4), "elevation")


def test_no_basic_layers_is_invalid():
    """With nothing to check, no cell is valid"""
    gmap = make_map()
    gmap.add("elevation", 0.)
    assert gmap.basic_layers == []
    assert not gmap.is_valid((0, 0))
    assert not gmap.is_valid((0, 0), [])


def test_is_valid_layer_list():
    gmap = make_map()
    gmap.add("elevation", 0.)
    assert gmap.is_valid((1, 1), ["elevation"])
    assert not gmap.is_valid((1, 1), ["elevation", "variance"])
    gmap.add("variance", 0.01)
    assert gmap.is_valid((1, 1), ["elevation", "variance"])


def test_is_valid_missing_layer():
    gmap = make_map()
    with pytest.raises(LayerNotFoundError):
        gmap.is_valid((0, 0), "cost")


def test_valid_mask():
    gmap = make_map()
    gmap.set_basic_layers(["elevation", "variance"])
    gmap.add("elevation", 0.)
    gmap.set_at("variance", (1, 2), 0.5)
    gmap.set_at("variance", (3, 0), 0.5)
    mask = gmap.valid_mask()
    assert mask.shape == (6, 6)
    assert np.count_nonzero(mask) == 2
    assert mask[1, 2] and mask[3, 0]
    assert np.all(gmap.valid_mask("elevation"))
    assert not np.any(gmap.valid_mask([]))


def test_get_position3():
    gmap = make_map()
    assert gmap.get_position3("elevation", (0, 0)) is None
    gmap.set_at("elevation", (0, 0), 0.75)
    point = gmap.get_position3("elevation", (0, 0))
    np.testing.assert_allclose(point, [2.25, 2.25, 0.75])


def test_get_vector():
    gmap = make_map()
    index = (2, 3)
    gmap.set_at("normal_x", index, 0.)
    gmap.set_at("normal_y", index, 0.)
    assert gmap.get_vector("normal_", index) is None
    gmap.set_at("normal_z", index, 1.)
    np.testing.assert_allclose(gmap.get_vector("normal_", index), [0., 0., 1.])


def test_get_vector_missing_layer():
    gmap = GridMap(["normal_x", "normal_y"])
    gmap.set_geometry((1., 1.), 1.)
    gmap.add("normal_x", 0.)
    gmap.add("normal_y", 0.)
    with pytest.raises(LayerNotFoundError):
        gmap.get_vector("normal_", (0, 0))


def test_clear():
    gmap = make_map()
    gmap.add("elevation", 1.)
    gmap.add("variance", 1.)
    gmap.clear("elevation")
    assert np.all(np.isnan(gmap.get("elevation")))
    assert np.all(gmap.get("variance") == 1.)


def test_clear_basic_only_touches_basic_layers():
    gmap = make_map()
    gmap.set_basic_layers(["variance"])
    gmap.add("elevation", 1.)
    gmap.add("variance", 1.)
    gmap.clear_basic()
    assert np.all(gmap.get("elevation") == 1.)
    assert np.all(np.isnan(gmap.get("variance")))


def test_clear_all():
    gmap = make_map()
    for layer in gmap.layers:
        gmap.add(layer, 1.)
    gmap.clear_all()
    for layer in gmap.layers:
        assert np.all(np.isnan(gmap.get(layer)))
