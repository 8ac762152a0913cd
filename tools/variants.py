"""
Registry of fractal variants built on the same subdivide-and-carve idea.

The sponge itself comes from the framework generator; the lower-dimensional
relatives (carpet, Cantor dust, chaos-game triangle) are small enough to
build here directly.

Canonical generator signature:
    (iterations: int, rng: np.random.Generator) -> np.ndarray

Usage:
    from tools.variants import get_variants, get_variant, expected_count

    for v in get_variants():
        data = v.gen_fn(2, np.random.default_rng(0))

    carpet = get_variant("Sierpinski Carpet").gen_fn(3, None)
"""

import sys
import numpy as np
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))
from menger_sponge_framework import InvalidArgument, _check_order, generate


# ================================================================
# Registry infrastructure
# ================================================================


@dataclass
class Variant:
    name: str
    gen_fn: Callable  # (iterations, rng) -> ndarray
    dimension: int
    description: str = ""
    count_fn: Optional[Callable[[int], int]] = None


_REGISTRY: List[Variant] = []


def variant(name, dimension, description="", count_fn=None):
    """Decorator that registers a variant generator."""

    def decorator(fn):
        _REGISTRY.append(
            Variant(
                name=name,
                gen_fn=fn,
                dimension=dimension,
                description=description,
                count_fn=count_fn,
            )
        )
        return fn

    return decorator


def get_variants(dimension=None):
    """Return registered variants, optionally filtered by dimension."""
    if dimension is None:
        return list(_REGISTRY)
    return [v for v in _REGISTRY if v.dimension == dimension]


def get_variant(name):
    for v in _REGISTRY:
        if v.name == name:
            return v
    raise InvalidArgument(f"Unknown variant {name!r}. Use one of: {[v.name for v in _REGISTRY]}")


def expected_count(name, iterations):
    """Closed-form element count of a variant, or None if it has none."""
    v = get_variant(name)
    if v.count_fn is None:
        return None
    return v.count_fn(_check_order(iterations, "iterations"))


# ================================================================
# 1D
# ================================================================


@variant("Cantor Dust", dimension=1,
         description="Middle-third removal on a segment; columns [x, width, level]",
         count_fn=lambda n: 2 ** n)
def cantor_segments(iterations, rng=None, start=0.05, width=0.9):
    n = _check_order(iterations, "iterations")
    segs = np.array([[start, width, 0.0]])
    for _ in range(n):
        w = segs[:, 1] / 3
        left = np.column_stack([segs[:, 0], w, segs[:, 2] + 1])
        right = np.column_stack([segs[:, 0] + 2 * w, w, segs[:, 2] + 1])
        # keep left/right children adjacent, as the recursion would emit them
        segs = np.stack([left, right], axis=1).reshape(-1, 3)
    return segs


# ================================================================
# 2D
# ================================================================


@variant("Sierpinski Carpet", dimension=2,
         description="Center-square removal on the unit square; columns [x, y, size]",
         count_fn=lambda n: 8 ** n)
def sierpinski_carpet(iterations, rng=None):
    n = _check_order(iterations, "iterations")
    offsets = np.array([(dx, dy) for dx in range(3) for dy in range(3)
                        if not (dx == 1 and dy == 1)], dtype=np.float64)
    squares = np.array([[0.0, 0.0, 1.0]])
    for _ in range(n):
        third = squares[:, 2:3] / 3
        xy = squares[:, None, :2] + offsets[None, :, :] * third[:, None, :]
        size = np.repeat(third, len(offsets), axis=0)
        squares = np.column_stack([xy.reshape(-1, 2), size])
    return squares


TRIANGLE_VERTICES = np.array([[0.1, 0.85], [0.9, 0.85], [0.5, 0.15]])


@variant("Chaos Triangle", dimension=2,
         description="Chaos-game Sierpinski triangle; 500 + 350 * n points",
         count_fn=lambda n: 500 + 350 * n)
def chaos_triangle(iterations, rng=None):
    n = _check_order(iterations, "iterations")
    if rng is None:
        rng = np.random.default_rng()
    steps = 500 + 350 * n
    choices = rng.integers(0, 3, size=steps)
    points = np.empty((steps, 2))
    p = np.array([0.5, 0.5])
    for i, c in enumerate(choices):
        p = (p + TRIANGLE_VERTICES[c]) / 2
        points[i] = p
    return points


# ================================================================
# 3D
# ================================================================


@variant("Menger Sponge", dimension=3,
         description="Classic sponge from the framework generator; columns [x, y, z, size]",
         count_fn=lambda n: 20 ** n)
def menger_sponge(iterations, rng=None):
    cells = generate(iterations)
    return np.column_stack([cells.centers, cells.sizes])


@variant("Center-Only Sponge", dimension=3,
         description="Only the central sub-cube removed; columns [x, y, z, size]",
         count_fn=lambda n: 26 ** n)
def center_only_sponge(iterations, rng=None):
    cells = generate(iterations, rule="center-only")
    return np.column_stack([cells.centers, cells.sizes])
