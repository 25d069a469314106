#!/usr/bin/env python3
import numpy as np

import pygridmap as pgm
from pygridmap import GridMap

pgm.environment.initialise(arch='cpu')


def make_map():
    gmap = GridMap(["elevation", "variance"])
    gmap.set_basic_layers(["elevation"])
    gmap.set_geometry((5., 5.), 1., (0., 0.))
    values = (10. * np.arange(5)[:, None] + np.arange(5)[None, :]).astype(np.float32)
    gmap.add("elevation", values)
    gmap.add("variance", -values)
    gmap.timestamp = 42
    gmap.frame_id = "map"
    return gmap


def world_value(position):
    return 10. * position[0] + position[1]


def make_moved_map():
    """Map moved to (2, 1) so that its buffers wrap on both axes, filled with world_value"""
    gmap = make_map()
    gmap.move((2., 1.))
    np.testing.assert_array_equal(gmap.start_index, [3, 4])
    for i in range(5):
        for j in range(5):
            position, _ = gmap.get_position((i, j))
            gmap.set_at("elevation", (i, j), world_value(position))
            gmap.set_at("variance", (i, j), -world_value(position))
    return gmap


def test_submap_inside():
    gmap = make_map()
    submap, ok = gmap.get_submap((0., 0.), (2.9, 2.9))
    assert ok
    np.testing.assert_array_equal(submap.size, [3, 3])
    np.testing.assert_allclose(submap.length, [3., 3.])
    np.testing.assert_allclose(submap.position, [0., 0.])
    np.testing.assert_array_equal(submap.start_index, [0, 0])
    assert submap.resolution == 1.
    np.testing.assert_array_equal(submap.get("elevation"), gmap.get("elevation")[1:4, 1:4])
    np.testing.assert_array_equal(submap.get("variance"), gmap.get("variance")[1:4, 1:4])


def test_submap_metadata():
    gmap = make_map()
    submap, ok = gmap.get_submap((0., 0.), (2.9, 2.9))
    assert ok
    assert submap.layers == ["elevation", "variance"]
    assert submap.basic_layers == ["elevation"]
    assert submap.timestamp == 42
    assert submap.frame_id == "map"


def test_submap_matches_source_at_world_positions():
    gmap = make_map()
    submap, ok = gmap.get_submap((0.5, -0.5), (3.9, 2.9))
    assert ok
    for i in range(submap.size[0]):
        for j in range(submap.size[1]):
            position, _ = submap.get_position((i, j))
            assert submap.at("elevation", (i, j)) == gmap.at_position("elevation", position)


def test_submap_of_wrapped_map():
    """Submap spanning the four wrapped quadrants of the source buffers"""
    gmap = make_moved_map()
    submap, ok = gmap.get_submap((3., 2.), (2.9, 2.9))
    assert ok
    np.testing.assert_array_equal(submap.size, [3, 3])
    np.testing.assert_allclose(submap.position, [3., 2.])
    for x in [4., 3., 2.]:
        for y in [3., 2., 1.]:
            assert submap.at_position("elevation", (x, y)) == world_value((x, y))
            assert submap.at_position("variance", (x, y)) == -world_value((x, y))


def test_full_submap_of_wrapped_map():
    gmap = make_moved_map()
    submap, ok = gmap.get_submap((2., 1.), (4.9, 4.9))
    assert ok
    np.testing.assert_array_equal(submap.size, [5, 5])
    np.testing.assert_allclose(submap.position, gmap.position)
    np.testing.assert_array_equal(submap.get("elevation"), gmap.get_logical("elevation"))


def test_submap_clipped():
    gmap = make_map()
    submap, ok = gmap.get_submap((2., 2.), (2.9, 2.9))
    assert ok
    np.testing.assert_array_equal(submap.size, [2, 2])
    np.testing.assert_allclose(submap.position, [1.5, 1.5])
    np.testing.assert_array_equal(submap.get("elevation"), gmap.get("elevation")[0:2, 0:2])


def test_submap_aligned_on_cell_borders():
    """A request ending exactly on cell borders also takes the cell past its -x / -y border"""
    gmap = make_map()
    submap, ok = gmap.get_submap((0., 0.), (3., 3.))
    assert ok
    np.testing.assert_array_equal(submap.size, [4, 4])


def test_submap_disjoint():
    gmap = make_map()
    submap, index, ok = gmap.get_submap_and_index((10., 10.), (1., 1.))
    assert not ok
    assert index is None
    assert submap.layers == gmap.layers
    np.testing.assert_array_equal(submap.size, [0, 0])


def test_submap_centre_outside():
    gmap = make_map()
    _, ok = gmap.get_submap((3., 0.), (2., 2.))
    assert not ok


def test_submap_without_geometry():
    gmap = GridMap(["elevation"])
    submap, ok = gmap.get_submap((0., 0.), (1., 1.))
    assert not ok
    assert submap.layers == ["elevation"]


def test_submap_is_independent():
    gmap = make_map()
    submap, ok = gmap.get_submap((0., 0.), (2.9, 2.9))
    assert ok
    before = gmap.get("elevation")

    submap.set_at("elevation", (0, 0), -1.)
    np.testing.assert_array_equal(gmap.get("elevation"), before)

    gmap.set_at_position("elevation", (0., 0.), 99.)
    assert submap.at_position("elevation", (0., 0.)) == 22.

    gmap.move((1., 0.))
    assert submap.at_position("elevation", (0., 0.)) == 22.


def test_submap_and_index():
    gmap = make_map()
    submap, index, ok = gmap.get_submap_and_index((0.2, -0.3), (2.9, 2.9))
    assert ok
    np.testing.assert_array_equal(submap.size, [4, 4])
    np.testing.assert_allclose(submap.position, [0.5, -0.5])
    np.testing.assert_array_equal(index, [2, 1])
    position, _ = submap.get_position(index)
    np.testing.assert_allclose(position, [0., 0.])


def test_submap_geometry():
    gmap = make_map()
    geometry = pgm.geometry.SubmapGeometry(gmap, (0., 0.), (2.9, 2.9))
    assert geometry
    np.testing.assert_array_equal(geometry.top_left_index, [1, 1])
    np.testing.assert_array_equal(geometry.requested_index_in_submap, [1, 1])
    assert geometry.resolution == 1.
    assert not hasattr(geometry, "gridmap")

    geometry = pgm.geometry.SubmapGeometry(gmap, (10., 10.), (1., 1.))
    assert not geometry
    assert geometry.size is None


def test_submaps_of_many_sizes():
    """Every clipped size of a wrapped source copies the right cells"""
    gmap = make_moved_map()
    for rows in range(1, 8):
        for cols in range(1, 8):
            submap, ok = gmap.get_submap((3.2, 1.7), (rows - 0.1, cols - 0.1))
            assert ok
            for i in range(submap.size[0]):
                for j in range(submap.size[1]):
                    position, _ = submap.get_position((i, j))
                    assert submap.at("elevation", (i, j)) == gmap.at_position("elevation", position)
