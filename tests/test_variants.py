import pytest
import numpy as np
from menger_sponge_framework import InvalidArgument
from tools.variants import (
    TRIANGLE_VERTICES,
    cantor_segments,
    chaos_triangle,
    expected_count,
    get_variant,
    get_variants,
    sierpinski_carpet,
)


def test_registry_contents():
    names = [v.name for v in get_variants()]
    assert names == ["Cantor Dust", "Sierpinski Carpet", "Chaos Triangle",
                     "Menger Sponge", "Center-Only Sponge"]
    assert [v.name for v in get_variants(dimension=3)] == ["Menger Sponge", "Center-Only Sponge"]
    assert get_variants(dimension=4) == []


def test_unknown_variant():
    with pytest.raises(InvalidArgument):
        get_variant("Koch Snowflake")


@pytest.mark.parametrize("name", [v.name for v in get_variants()])
@pytest.mark.parametrize("iterations", [0, 1, 2])
def test_counts_match_closed_form(name, iterations):
    v = get_variant(name)
    data = v.gen_fn(iterations, np.random.default_rng(0))
    assert len(data) == expected_count(name, iterations)


@pytest.mark.parametrize("n", [0, 1, 2, 3])
def test_carpet_squares(n):
    squares = sierpinski_carpet(n)
    assert squares.shape == (8 ** n, 3)
    assert np.allclose(squares[:, 2], 3.0 ** -n)
    assert np.all(squares[:, :2] >= 0)
    assert np.all(squares[:, :2] + squares[:, 2:3] <= 1 + 1e-12)


def test_carpet_removes_center():
    squares = sierpinski_carpet(1)
    corners = {tuple(np.round(s[:2] * 3).astype(int)) for s in squares}
    assert (1, 1) not in corners
    assert len(corners) == 8


def test_cantor_segments():
    segs = cantor_segments(2)
    assert segs.shape == (4, 3)
    assert np.allclose(segs[:, 1], 0.1)
    assert np.all(segs[:, 2] == 2)
    assert segs[0, 0] == pytest.approx(0.05)
    assert segs[-1, 0] + segs[-1, 1] == pytest.approx(0.95)
    # left to right, no overlap
    assert np.all(np.diff(segs[:, 0]) > 0)


def test_chaos_triangle_is_seeded():
    a = chaos_triangle(1, np.random.default_rng(42))
    b = chaos_triangle(1, np.random.default_rng(42))
    assert a.shape == (850, 2)
    assert np.array_equal(a, b)


def test_chaos_triangle_stays_in_hull():
    pts = chaos_triangle(3, np.random.default_rng(0))
    lo = TRIANGLE_VERTICES.min(axis=0)
    hi = TRIANGLE_VERTICES.max(axis=0)
    assert np.all(pts >= lo - 1e-12)
    assert np.all(pts <= hi + 1e-12)


def test_sponge_variants_use_generator():
    sponge = get_variant("Menger Sponge").gen_fn(1, None)
    assert sponge.shape == (20, 4)
    assert np.allclose(sponge[:, 3], 1 / 3)
    center_only = get_variant("Center-Only Sponge").gen_fn(1, None)
    assert center_only.shape == (26, 4)


def test_bad_iterations():
    with pytest.raises(InvalidArgument):
        sierpinski_carpet(-1)
    with pytest.raises(InvalidArgument):
        expected_count("Cantor Dust", 1.5)
