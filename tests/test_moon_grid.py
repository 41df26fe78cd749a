import numpy as np
import pytest

from moonmap.moon_grid import (create_latitude_line, create_longitude_line, create_moon_grid,
                               create_terminator_line, line_segments, terminator_longitude)
from moonmap.projection import project


def test_default_grid_layout(config):
    grid = create_moon_grid(config)
    assert len(grid.lat_lines) == 19
    assert len(grid.lon_lines) == 19
    for line in grid.lat_lines + grid.lon_lines:
        assert line.shape == (91, 2)
    assert grid.terminator.shape == (91, 2)
    assert [label.text for label in grid.lat_labels] == [str(v) for v in range(-90, 91, 10)]
    assert [label.text for label in grid.lon_labels] == [str(v) for v in range(-90, 91, 10)]


def test_latitude_labels_are_anchored_at_westmost_sample(config):
    grid = create_moon_grid(config)
    for label, line in zip(grid.lat_labels, grid.lat_lines):
        assert label.longitude == -90.0
        assert label.position.x == pytest.approx(line[0][0])
        assert label.position.y == pytest.approx(line[0][1])
    equator = grid.lat_labels[9]
    assert equator.text == "0"
    assert (int(equator.position.x), int(equator.position.y)) == (540, 300)


def test_longitude_labels_are_anchored_on_equator(config):
    grid = create_moon_grid(config)
    for label in grid.lon_labels:
        assert label.latitude == 0.0
        expected = project(0, label.longitude, config)
        assert label.position == expected
    prime_meridian = grid.lon_labels[9]
    assert prime_meridian.text == "0"
    assert (int(prime_meridian.position.x), int(prime_meridian.position.y)) == (300, 300)


def test_lines_follow_projection(config):
    config = config._replace(rotation=-16.0, libration_latitude=-6.6, libration_longitude=-6.5)
    parallel = create_latitude_line(30, config)
    meridian = create_longitude_line(-40, config)
    for i, longitude in enumerate(range(-90, 91, 2)):
        expected = project(30, longitude, config)
        assert tuple(parallel[i]) == pytest.approx((expected.x, expected.y))
    for i, latitude in enumerate(range(-90, 91, 2)):
        expected = project(latitude, -40, config)
        assert tuple(meridian[i]) == pytest.approx((expected.x, expected.y))


@pytest.mark.parametrize("phase, longitude", [(-1.0, -90.0), (-0.5, 0.0), (0.0, 90.0), (0.6, 198.0), (1.0, 270.0)])
def test_terminator_longitude(phase, longitude):
    assert terminator_longitude(phase) == pytest.approx(longitude)


def test_terminator_is_a_meridian_at_phase_longitude(config):
    config = config._replace(phase=-0.5)
    np.testing.assert_allclose(create_terminator_line(config), create_longitude_line(0.0, config))

    grid = create_moon_grid(config._replace(phase=-1.0))
    np.testing.assert_allclose(grid.terminator, grid.lon_lines[0])


def test_custom_sampling(config):
    grid = create_moon_grid(config, line_step=30, sample_step=5)
    assert len(grid.lat_lines) == 7
    assert len(grid.lon_lines) == 7
    assert grid.lat_lines[0].shape == (37, 2)
    assert [label.text for label in grid.lon_labels] == ["-90", "-60", "-30", "0", "30", "60", "90"]


def test_line_segments_connect_consecutive_vertices():
    line = np.array([[0.0, 0.0], [1.0, 1.0], [2.0, 0.0]])
    segments = list(line_segments(line))
    assert len(segments) == 2
    assert list(segments[0][0]) == [0.0, 0.0]
    assert list(segments[0][1]) == [1.0, 1.0]
    assert list(segments[1][1]) == [2.0, 0.0]
    assert list(line_segments(line[:1])) == []
