import pytest
import numpy as np
from menger_sponge_framework import (
    InvalidArgument,
    ascii_slice,
    generate,
    is_menger_solid,
    menger_membership,
    rasterize,
    sample_membership_field,
)


def test_level_zero_is_solid_everywhere():
    assert is_menger_solid(0.5, 0.5, 0.5, 0)
    assert is_menger_solid(0.0, 0.99, 0.3, 0)


@pytest.mark.parametrize("point,level,expected", [
    ((0.5, 0.5, 0.5), 1, False),   # body center
    ((0.5, 0.5, 0.1), 1, False),   # face center tunnel
    ((0.5, 0.1, 0.1), 1, True),    # edge cube
    ((0.1, 0.1, 0.1), 1, True),    # corner cube
    ((0.1, 0.1, 0.1), 3, True),    # digits 0, 0, 2 on every axis
    ((0.15, 0.15, 0.05), 2, False),  # second-level hole inside the corner cube
])
def test_known_points(point, level, expected):
    assert is_menger_solid(*point, level) is expected


@pytest.mark.parametrize("level", [0, 1, 2, 3, 4])
def test_vectorised_matches_scalar(level):
    pts = np.random.default_rng(level).random((500, 3))
    vec = menger_membership(pts, level)
    scalar = np.array([is_menger_solid(x, y, z, level) for x, y, z in pts])
    assert np.array_equal(vec, scalar)


def test_membership_is_monotone_in_level():
    """Carving only removes material: solid at level n+1 implies solid at n."""
    pts = np.random.default_rng(0).random((2000, 3))
    prev = menger_membership(pts, 0)
    for level in range(1, 5):
        cur = menger_membership(pts, level)
        assert not np.any(cur & ~prev)
        prev = cur


@pytest.mark.parametrize("level,resolution", [(1, 9), (2, 27), (3, 27)])
def test_sampled_field_matches_rasterized_cells(level, resolution):
    """Point membership and enumeration describe the same solid."""
    sampled = sample_membership_field(level, resolution)
    painted = rasterize(generate(level), resolution)
    assert np.array_equal(sampled.data, painted.data)


def test_points_shape_checked():
    with pytest.raises(InvalidArgument):
        menger_membership(np.zeros((4, 2)), 1)
    with pytest.raises(InvalidArgument):
        menger_membership(np.zeros(3), 1)


def test_ascii_slice_through_middle():
    text = ascii_slice(1, z=0.5, width=9, height=9)
    lines = text.split("\n")
    assert len(lines) == 9
    for row in (0, 1, 2, 6, 7, 8):
        assert lines[row] == "###   ###"
    for row in (3, 4, 5):
        assert lines[row] == " " * 9


def test_ascii_slice_near_face():
    """Off the middle layer only the face tunnels show."""
    text = ascii_slice(1, z=0.1, width=9, height=9, solid="X", empty=".")
    lines = text.split("\n")
    assert lines[0] == "XXXXXXXXX"
    assert lines[4] == "XXX...XXX"


def test_ascii_slice_rejects_empty_canvas():
    with pytest.raises(InvalidArgument):
        ascii_slice(1, width=0)


@pytest.mark.parametrize("kwargs", [{"width": 2.5}, {"height": 9.0}, {"width": -3}, {"height": True}])
def test_ascii_slice_needs_integer_canvas(kwargs):
    with pytest.raises(InvalidArgument):
        ascii_slice(1, **kwargs)
