"""
Menger Sponge Framework

Recursive subdivision geometry for the Menger sponge and its relatives.
Every piece is a pure function of (order, rule, subdivision factor): nothing
is cached between calls except the per-factor rule tables.

COMPONENTS:

  Subdivision rules:
    - MengerRule ("menger"): removes the center and the six face-center
      sub-cubes, keeping 20 of 27
    - CenterOnlyRule ("center-only"): removes only the center, keeping 26
    - keep_by_ternary_digits / keep_by_offsets: the two classic algebraic
      forms of the Menger rule

  Position generator:
    - generate(order, ...): flat CellArray of surviving leaf cubes
    - GenerationRequest: bundled parameters, validated at the boundary

  Point membership:
    - is_menger_solid(x, y, z, level): base-3 digit test for one point
    - menger_membership(points, level): vectorised version
    - ascii_slice(level, ...): text cross-section built from membership

  Voxel field:
    - rasterize(cells, resolution): dense uint8 occupancy grid
    - sample_membership_field(level, resolution): same grid by point sampling
    - VoxelField: occupancy, exposed area, components, box-counting dimension

  Analytic formulas:
    - formulas(order, constants, medium): FormulaContext of closed forms
    - cross_check(order): enumeration vs closed form agreement

Usage:
    from menger_sponge_framework import generate, rasterize, formulas

    cells = generate(2)                     # 400 cells of edge 1/9
    field = rasterize(cells, resolution=27)
    field.is_solid(13, 13, 13)              # False, the center is carved
    ctx = formulas(2)
    print(ctx.summary())

    # Alternate rule and factor
    generate(1, rule="center-only")         # 26 cells
    generate(2, subdivision=5)

    # Safety valve for interactive callers
    generate(6, max_cells=200_000)          # raises CapacityExceeded
"""

import logging
import math
import numbers
import warnings
import numpy as np
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import List, Dict, Any, Optional, Tuple, Union, Iterable, Iterator

logger = logging.getLogger("menger_sponge_framework")

Vec3 = Tuple[float, float, float]

# Faces lying exactly on a voxel boundary must not spill into the neighbour.
_EDGE_TOL = 1e-9


# =============================================================================
# ERRORS
# =============================================================================

class InvalidArgument(ValueError):
    """A request parameter lies outside its domain."""


class CapacityExceeded(RuntimeError):
    """The requested cell count is above the caller's ceiling."""

    def __init__(self, requested: int, ceiling: int):
        self.requested = requested
        self.ceiling = ceiling
        super().__init__(
            f"Requested {requested} cells exceeds the ceiling of {ceiling} cells"
        )

    def __reduce__(self):
        return (type(self), (self.requested, self.ceiling))


def _check_order(order, name: str = "order") -> int:
    if isinstance(order, bool) or not isinstance(order, numbers.Integral):
        raise InvalidArgument(f"{name} must be an integer, got {order!r}")
    if order < 0:
        raise InvalidArgument(f"{name} must be >= 0, got {order}")
    return int(order)


def _check_subdivision(factor) -> int:
    if isinstance(factor, bool) or not isinstance(factor, numbers.Integral):
        raise InvalidArgument(f"subdivision must be an integer, got {factor!r}")
    if factor < 2:
        raise InvalidArgument(f"subdivision must be >= 2, got {factor}")
    return int(factor)


def _check_positive(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgument(f"{name} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgument(f"{name} must be a positive finite number, got {value}")
    return value


def _check_vec3(value, name: str) -> Vec3:
    try:
        vec = tuple(float(v) for v in value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be three numbers, got {value!r}")
    if len(vec) != 3 or not all(math.isfinite(v) for v in vec):
        raise InvalidArgument(f"{name} must be three finite numbers, got {value!r}")
    return vec


# =============================================================================
# SUBDIVISION RULES
# =============================================================================

def keep_by_ternary_digits(xi: int, yi: int, zi: int) -> bool:
    """Classic rule on base-3 digits: removed iff two or more digits are 1."""
    ones = (xi == 1) + (yi == 1) + (zi == 1)
    return ones < 2


def keep_by_offsets(dx: int, dy: int, dz: int) -> bool:
    """Classic rule on centered offsets in {-1, 0, 1}: removed iff |d|_1 <= 1."""
    return abs(dx) + abs(dy) + abs(dz) > 1


def _center_hits(x: int, y: int, z: int, factor: int) -> int:
    """How many of the three indices sit on the center (factor - 1) / 2."""
    c2 = factor - 1
    return (2 * x == c2) + (2 * y == c2) + (2 * z == c2)


class SubdivisionRule(ABC):
    """Base class for keep/remove predicates over one subdivision step.

    Indices are local to the parent cube, each in ``0 .. factor-1``. The
    derived tables (mask, offsets, counts) are built once per factor.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of this rule."""
        pass

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    def keeps(self, x: int, y: int, z: int, factor: int = 3) -> bool:
        """True if sub-cell (x, y, z) survives."""
        pass

    def mask(self, factor: int = 3) -> np.ndarray:
        """Read-only boolean keep table of shape (factor, factor, factor)."""
        factor = _check_subdivision(factor)
        cache = self.__dict__.setdefault("_masks", {})
        if factor not in cache:
            idx = range(factor)
            table = np.array(
                [[[self.keeps(x, y, z, factor) for z in idx] for y in idx] for x in idx],
                dtype=bool,
            )
            table.setflags(write=False)
            cache[factor] = table
        return cache[factor]

    def kept_offsets(self, factor: int = 3) -> np.ndarray:
        """Centered lattice offsets of kept sub-cells, shape (k, 3)."""
        center = (factor - 1) / 2
        return np.argwhere(self.mask(factor)).astype(np.float64) - center

    def kept_per_step(self, factor: int = 3) -> int:
        return int(self.mask(factor).sum())

    def removed_per_step(self, factor: int = 3) -> int:
        return factor ** 3 - self.kept_per_step(factor)

    def similarity_dimension(self, factor: int = 3) -> float:
        """log(kept) / log(factor); 3.0 when nothing is removed."""
        kept = self.kept_per_step(factor)
        if kept == 0:
            return 0.0
        return math.log(kept) / math.log(factor)

    def __repr__(self):
        return f"{type(self).__name__}()"


class MengerRule(SubdivisionRule):
    """
    Menger carving - removes the center and the face-center sub-cubes.

    A sub-cell is dropped when at least two of its indices sit on the center
    of the axis. For factor 3 that is the classic 7-of-27 removal; for odd
    factors above 3 it carves the three axis-aligned tunnels; even factors
    have no center index and keep everything.
    """

    @property
    def name(self) -> str:
        return "menger"

    @property
    def description(self) -> str:
        return "Remove center + faces"

    def keeps(self, x: int, y: int, z: int, factor: int = 3) -> bool:
        return _center_hits(x, y, z, factor) < 2


class CenterOnlyRule(SubdivisionRule):
    """Drops only the single central sub-cube (26 of 27 kept for factor 3)."""

    @property
    def name(self) -> str:
        return "center-only"

    @property
    def description(self) -> str:
        return "Remove center"

    def keeps(self, x: int, y: int, z: int, factor: int = 3) -> bool:
        return _center_hits(x, y, z, factor) < 3


RULES: Dict[str, SubdivisionRule] = {
    "menger": MengerRule(),
    "center-only": CenterOnlyRule(),
}


def get_rule(rule: Union[str, SubdivisionRule]) -> SubdivisionRule:
    """Resolve a rule name, or pass a SubdivisionRule through."""
    if isinstance(rule, SubdivisionRule):
        return rule
    if isinstance(rule, str) and rule in RULES:
        return RULES[rule]
    raise InvalidArgument(f"Unknown rule {rule!r}. Use one of: {list(RULES)}")


# =============================================================================
# POSITION GENERATOR
# =============================================================================

@dataclass
class Cell:
    """One finalized cube."""
    center: Vec3
    edge_length: float
    depth: int

    def to_record(self) -> Dict[str, Any]:
        return {"position": list(self.center), "size": self.edge_length}


@dataclass
class GenerationRequest:
    """Parameters for one generator invocation."""
    order: int
    subdivision: int = 3
    rule: Union[str, SubdivisionRule] = "menger"
    root_size: float = 1.0
    root_center: Vec3 = (0.0, 0.0, 0.0)
    max_cells: Optional[int] = None

    def validate(self) -> 'GenerationRequest':
        """Check every field; returns self so calls can chain."""
        self.order = _check_order(self.order)
        self.subdivision = _check_subdivision(self.subdivision)
        self.root_size = _check_positive(self.root_size, "root_size")
        self.root_center = _check_vec3(self.root_center, "root_center")
        get_rule(self.rule)
        if self.max_cells is not None:
            self.max_cells = _check_order(self.max_cells, "max_cells")
        return self

    def predicted_cell_count(self) -> int:
        return get_rule(self.rule).kept_per_step(self.subdivision) ** self.order


@dataclass(eq=False)
class CellArray:
    """Generator output: N cubes sharing one edge length.

    Behaves as a sequence of Cell. The order of cells is arbitrary; compare
    results as sets.
    """
    centers: np.ndarray
    edge_length: float
    depth: int
    request: Optional[GenerationRequest] = None

    def __len__(self) -> int:
        return len(self.centers)

    def __iter__(self) -> Iterator[Cell]:
        for c in self.centers:
            yield Cell((float(c[0]), float(c[1]), float(c[2])), self.edge_length, self.depth)

    def __getitem__(self, i: int) -> Cell:
        c = self.centers[i]
        return Cell((float(c[0]), float(c[1]), float(c[2])), self.edge_length, self.depth)

    def __repr__(self):
        return f"CellArray(n={len(self)}, edge_length={self.edge_length:.6g}, depth={self.depth})"

    @property
    def sizes(self) -> np.ndarray:
        return np.full(len(self), self.edge_length)

    def to_records(self) -> List[Dict[str, Any]]:
        return [cell.to_record() for cell in self]

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        """(min_corner, max_corner) of the union of all cells."""
        if len(self) == 0:
            raise InvalidArgument("An empty CellArray has no bounds")
        half = self.edge_length / 2
        return self.centers.min(axis=0) - half, self.centers.max(axis=0) + half

    def total_volume(self) -> float:
        return len(self) * self.edge_length ** 3

    def total_surface_area(self) -> float:
        """Sum of all cube faces, shared faces included."""
        return len(self) * 6 * self.edge_length ** 2


def generate_from_request(request: GenerationRequest) -> CellArray:
    """Expand the request breadth-first, one subdivision level at a time.

    Each pass replaces every pending cube by its kept children, so the
    worklist is an (N, 3) array rather than a call stack.
    """
    request.validate()
    rule = get_rule(request.rule)
    factor = request.subdivision

    predicted = request.predicted_cell_count()
    if request.max_cells is not None and predicted > request.max_cells:
        raise CapacityExceeded(predicted, request.max_cells)

    offsets = rule.kept_offsets(factor)
    centers = np.array([request.root_center], dtype=np.float64)
    size = request.root_size
    for _ in range(request.order):
        size = size / factor
        centers = (centers[:, None, :] + offsets[None, :, :] * size).reshape(-1, 3)

    logger.debug("generated %d cells (order=%d, factor=%d, rule=%s)",
                 len(centers), request.order, factor, rule.name)
    return CellArray(centers=centers, edge_length=size, depth=request.order, request=request)


def generate(order: int, subdivision: int = 3,
             rule: Union[str, SubdivisionRule] = "menger",
             root_size: float = 1.0, root_center: Vec3 = (0.0, 0.0, 0.0),
             max_cells: Optional[int] = None) -> CellArray:
    """Surviving leaf cubes of the fractal at the given order.

    Parameters
    ----------
    order : int
        Number of subdivide-and-carve steps (>= 0). Cell count grows as
        kept_per_step ** order (20 ** order for the classic rule).
    subdivision : int
        Sub-cells per axis per step (>= 2).
    rule : str or SubdivisionRule
        "menger" (default), "center-only", or a custom rule instance.
    root_size, root_center :
        Edge length and center of the order-0 cube.
    max_cells : int, optional
        Refuse with CapacityExceeded when the exact predicted count is above
        this value. No limit when None.
    """
    return generate_from_request(GenerationRequest(
        order=order, subdivision=subdivision, rule=rule,
        root_size=root_size, root_center=root_center, max_cells=max_cells,
    ))


# =============================================================================
# POINT MEMBERSHIP
# =============================================================================

def is_menger_solid(x: float, y: float, z: float, level: int) -> bool:
    """Whether a point of [0, 1]^3 is solid in the level-n sponge.

    Peels one base-3 digit per axis per level and applies the digit form of
    the rule; this never builds the cell list.
    """
    level = _check_order(level, "level")
    for _ in range(level):
        xi = math.floor(x * 3) % 3
        yi = math.floor(y * 3) % 3
        zi = math.floor(z * 3) % 3
        if not keep_by_ternary_digits(xi, yi, zi):
            return False
        x = (x * 3) % 1
        y = (y * 3) % 1
        z = (z * 3) % 1
    return True


def menger_membership(points: np.ndarray, level: int) -> np.ndarray:
    """Vectorised is_menger_solid over an (M, 3) array of points."""
    level = _check_order(level, "level")
    pts = np.array(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise InvalidArgument(f"points must have shape (M, 3), got {pts.shape}")
    solid = np.ones(len(pts), dtype=bool)
    for _ in range(level):
        digits = np.floor(pts * 3).astype(np.int64) % 3
        solid &= (digits == 1).sum(axis=1) < 2
        pts = (pts * 3) % 1.0
    return solid


def ascii_slice(level: int, z: float = 0.5, width: int = 54, height: int = 27,
                solid: str = "#", empty: str = " ") -> str:
    """Cross-section of the sponge at height z, one character per sample."""
    width = _check_order(width, "width")
    height = _check_order(height, "height")
    if width < 1 or height < 1:
        raise InvalidArgument(f"width and height must be >= 1, got {width}x{height}")
    xs = (np.arange(width) + 0.5) / width
    ys = (np.arange(height) + 0.5) / height
    gx, gy = np.meshgrid(xs, ys)
    pts = np.column_stack([gx.ravel(), gy.ravel(), np.full(gx.size, z)])
    mask = menger_membership(pts, level).reshape(height, width)
    return "\n".join("".join(solid if v else empty for v in row) for row in mask)


# =============================================================================
# VOXEL FIELD
# =============================================================================

@dataclass(eq=False)
class VoxelField:
    """Dense occupancy grid; data[(ix * res + iy) * res + iz] is 0 or 1."""
    resolution: int
    data: np.ndarray
    voxel_size: float
    origin: Vec3 = (-0.5, -0.5, -0.5)

    @property
    def grid(self) -> np.ndarray:
        r = self.resolution
        return self.data.reshape(r, r, r)

    def index(self, ix: int, iy: int, iz: int) -> int:
        r = self.resolution
        for i in (ix, iy, iz):
            if isinstance(i, bool) or not isinstance(i, numbers.Integral) or not 0 <= i < r:
                raise InvalidArgument(f"voxel index ({ix}, {iy}, {iz}) outside 0..{r - 1}")
        return (ix * r + iy) * r + iz

    def is_solid(self, ix: int, iy: int, iz: int) -> bool:
        return bool(self.data[self.index(ix, iy, iz)])

    def solid_count(self) -> int:
        return int(np.count_nonzero(self.data))

    def occupancy(self) -> float:
        return self.solid_count() / self.data.size

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def exposed_surface_area(self) -> float:
        """Area of faces between solid and empty voxels (grid border is empty)."""
        padded = np.pad(self.grid.astype(np.int8), 1)
        faces = sum(int(np.count_nonzero(np.diff(padded, axis=a))) for a in range(3))
        return faces * self.voxel_size ** 2

    def connected_components(self, solid: bool = True) -> int:
        """Face-connected components of the solid (or empty) voxels."""
        from scipy.ndimage import label
        _, n = label(self.grid == (1 if solid else 0))
        return int(n)

    def box_counting_dimension(self) -> float:
        """Box-counting dimension over base-3 aligned box sizes.

        Boxes of 3^k voxels line up with the subdivision lattice, so a grid
        holding one voxel per order-n cell recovers log(kept)/log(3) exactly.
        Misaligned box sizes straddle the holes and overcount.
        """
        res = self.resolution
        k_max = round(math.log(res, 3)) if res > 1 else 0
        if 3 ** k_max != res or k_max < 1:
            raise InvalidArgument(f"resolution must be a power of 3 (>= 3), got {res}")
        occupied_grid = self.grid.astype(bool)

        log_inv_eps = []
        log_n = []
        for k in range(k_max + 1):
            b = 3 ** k
            n = res // b
            blocks = occupied_grid.reshape(n, b, n, b, n, b)
            occupied = int(np.any(blocks, axis=(1, 3, 5)).sum())
            if occupied > 0:
                log_inv_eps.append(math.log(n))
                log_n.append(math.log(occupied))

        if len(log_inv_eps) < 2:
            return 0.0
        slope, _ = np.polyfit(log_inv_eps, log_n, 1)
        return float(slope)


def _cell_extents(cells) -> Tuple[np.ndarray, np.ndarray]:
    """(mins, maxs) arrays of shape (N, 3) for a CellArray or Cell iterable."""
    if isinstance(cells, CellArray):
        half = cells.edge_length / 2
        return cells.centers - half, cells.centers + half

    centers = []
    halves = []
    for cell in cells:
        if isinstance(cell, Cell):
            centers.append(cell.center)
            halves.append(cell.edge_length / 2)
        else:
            # {"position": [...], "size": s} records
            centers.append(cell["position"])
            halves.append(cell["size"] / 2)
    if not centers:
        empty = np.zeros((0, 3))
        return empty, empty
    c = np.asarray(centers, dtype=np.float64)
    h = np.asarray(halves, dtype=np.float64)[:, None]
    return c - h, c + h


def rasterize(cells: Union[CellArray, Iterable[Cell]], resolution: int,
              origin: Vec3 = (-0.5, -0.5, -0.5), extent: float = 1.0) -> VoxelField:
    """Paint cells into a resolution^3 occupancy grid.

    The grid covers the cube [origin, origin + extent]^3 (the unit cube
    centered at the origin by default). Each cell marks every voxel its box
    overlaps; marking only ever sets bits, so repeated or reordered input
    yields the same field.

    Unlike the plain floor(min)..floor(max) corner mapping, the upper index
    is ceil(max) - 1 (both with a 1e-9 tolerance), so a face lying exactly
    on a voxel boundary does not mark the neighbour. Order 2 at resolution
    27 marks 400 * 27 voxels rather than the 13635 the floor/floor mapping
    gives.
    """
    resolution = _check_order(resolution, "resolution")
    if resolution < 1:
        raise InvalidArgument(f"resolution must be >= 1, got {resolution}")
    extent = _check_positive(extent, "extent")
    origin = _check_vec3(origin, "origin")

    voxel_size = extent / resolution
    grid = np.zeros((resolution, resolution, resolution), dtype=np.uint8)
    mins, maxs = _cell_extents(cells)

    o = np.asarray(origin)
    lo = np.floor((mins - o) / voxel_size + _EDGE_TOL).astype(np.int64)
    hi = np.ceil((maxs - o) / voxel_size - _EDGE_TOL).astype(np.int64) - 1

    inside = np.all((hi >= 0) & (lo <= resolution - 1), axis=1)
    n_outside = int(len(lo) - inside.sum())
    if n_outside:
        warnings.warn(f"{n_outside} cells lie outside the voxel frame and were skipped")

    lo = np.clip(lo[inside], 0, resolution - 1)
    hi = np.clip(hi[inside], 0, resolution - 1)
    for (x0, y0, z0), (x1, y1, z1) in zip(lo, hi):
        grid[x0:x1 + 1, y0:y1 + 1, z0:z1 + 1] = 1

    logger.debug("rasterized %d cells at resolution %d", len(lo), resolution)
    return VoxelField(resolution=resolution, data=grid.ravel(),
                      voxel_size=voxel_size, origin=origin)


def sample_membership_field(level: int, resolution: int) -> VoxelField:
    """Voxel field of the unit sponge built by testing each voxel center."""
    resolution = _check_order(resolution, "resolution")
    if resolution < 1:
        raise InvalidArgument(f"resolution must be >= 1, got {resolution}")
    axis = (np.arange(resolution) + 0.5) / resolution
    gx, gy, gz = np.meshgrid(axis, axis, axis, indexing="ij")
    pts = np.column_stack([gx.ravel(), gy.ravel(), gz.ravel()])
    data = menger_membership(pts, level).astype(np.uint8)
    return VoxelField(resolution=resolution, data=data, voxel_size=1.0 / resolution)


# =============================================================================
# ANALYTIC FORMULAS
# =============================================================================

MENGER_DIMENSION = math.log(20) / math.log(3)


@dataclass
class FormulaConstants:
    """Tunable physical-analogy constants for the derived quantities."""
    k0: float = 1.0          # base thermal conductivity
    delta_t: float = 1.0     # temperature difference
    mu: float = 0.12         # optical attenuation coefficient
    L0: float = 1.0          # base optical path
    I0: float = 1.0          # input intensity
    scatter_k: float = 0.05  # scattering coefficient
    f0: float = 1000.0       # base resonance frequency
    R0: float = 0.82         # base electrical resistance


@dataclass(frozen=True)
class Medium:
    """Multipliers a surrounding medium applies to the physical formulas."""
    key: str
    label: str
    optical_scatter: float = 1.0
    optical_atten: float = 1.0
    thermal_cond: float = 1.0
    electrical_resist: float = 1.0
    fluid_resist: float = 1.0
    acoustic_absorb: float = 1.0


MEDIUMS: Dict[str, Medium] = {
    "air": Medium("air", "Air"),
    "water": Medium("water", "Water", 1.3, 1.8, 0.6, 0.2, 1.6, 1.2),
    "glass": Medium("glass", "Glass", 0.8, 1.5, 0.5, 1.5, 1.2, 0.9),
    "metal": Medium("metal", "Metal", 1.5, 2.0, 2.5, 0.05, 1.0, 1.4),
    "foam": Medium("foam", "Foam", 1.8, 1.4, 0.3, 2.0, 1.8, 2.2),
}


@dataclass
class FormulaContext:
    """Closed-form properties of the classic sponge at one order."""
    order: int
    medium: str
    constants: FormulaConstants
    # core geometry
    cube_count: int
    edge_length: float
    volume: float
    removed_volume: float
    surface_area: float
    surface_to_volume: float
    surface_to_volume_closed: float
    dimension: float
    density: float
    porosity: float
    holes: int
    total_holes: int
    # physical-analogy scalings
    reflections: float
    acoustic_absorption: float
    resonance_frequency: float
    conductivity: float
    resistance: float
    fluid_resistance: float
    optical_path: float
    transmittance: float
    scattered_intensity: float
    heat_flux: float

    def as_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out.pop("constants")
        return out

    def summary(self) -> str:
        lines = ["=" * 60, f"MENGER SPONGE FORMULAS @ n={self.order} ({self.medium})", "=" * 60]
        for k, v in self.as_dict().items():
            if k in ("order", "medium"):
                continue
            if isinstance(v, int):
                lines.append(f"  {k:<26s} {v:d}")
            else:
                lines.append(f"  {k:<26s} {v:.6g}")
        return "\n".join(lines)


def get_medium(medium: Union[str, Medium]) -> Medium:
    if isinstance(medium, Medium):
        return medium
    if medium in MEDIUMS:
        return MEDIUMS[medium]
    raise InvalidArgument(f"Unknown medium {medium!r}. Use one of: {list(MEDIUMS)}")


def _power_law(base: float, n: int) -> float:
    """base ** n in float64, saturating to inf or 0.0 instead of raising."""
    with np.errstate(over='ignore', under='ignore'):
        return float(np.power(np.float64(base), np.float64(n)))


def formulas(order: int, constants: Optional[FormulaConstants] = None,
             medium: Union[str, Medium] = "air") -> FormulaContext:
    """Aggregate properties at order n, without enumerating cells."""
    n = _check_order(order)
    c = constants if constants is not None else FormulaConstants()
    m = get_medium(medium)

    cube_count = 20 ** n
    edge = _power_law(1 / 3, n)
    volume = _power_law(20 / 27, n)
    area = 6 * _power_law(20 / 9, n)
    grow = _power_law(3.0, n)

    conductivity = c.k0 * m.thermal_cond * volume
    optical_path = c.L0 * grow
    attenuation = c.mu * m.optical_atten
    scatter = c.scatter_k * m.optical_scatter

    return FormulaContext(
        order=n,
        medium=m.key,
        constants=c,
        cube_count=cube_count,
        edge_length=edge,
        volume=volume,
        removed_volume=1 - volume,
        surface_area=area,
        surface_to_volume=area / volume if volume > 0 else math.inf,
        surface_to_volume_closed=6 * grow,
        dimension=MENGER_DIMENSION,
        density=volume,
        porosity=1 - volume,
        holes=7 * 20 ** (n - 1) if n >= 1 else 0,
        # 20 = 1 (mod 19), so the division is exact
        total_holes=7 * (cube_count - 1) // 19,
        reflections=grow,
        acoustic_absorption=grow * m.acoustic_absorb,
        resonance_frequency=c.f0 * grow,
        conductivity=conductivity,
        resistance=c.R0 * m.electrical_resist * _power_law(3 / 20, n),
        fluid_resistance=grow * m.fluid_resist,
        optical_path=optical_path,
        transmittance=math.exp(-attenuation * optical_path) if attenuation else 1.0,
        scattered_intensity=c.I0 / (1 + scatter * area) if scatter else c.I0,
        # V * A / l collapses to 6 (400/81)^n, which stays finite longer than its factors
        heat_flux=c.k0 * m.thermal_cond * 6 * c.delta_t * _power_law(400 / 81, n),
    )


def cross_check(order: int, rel_tol: float = 1e-9) -> Dict[str, bool]:
    """Compare brute-force enumeration against the closed forms.

    Returns one boolean per reconciled quantity; all should be True.
    """
    n = _check_order(order)
    ctx = formulas(n)
    cells = generate(n)
    rule = RULES["menger"]
    holes = len(generate(n - 1)) * rule.removed_per_step(3) if n >= 1 else 0
    total_holes = sum(len(generate(k)) * rule.removed_per_step(3) for k in range(n))
    return {
        "cube_count": len(cells) == ctx.cube_count,
        "edge_length": math.isclose(cells.edge_length, ctx.edge_length, rel_tol=rel_tol),
        "volume": math.isclose(cells.total_volume(), ctx.volume, rel_tol=rel_tol),
        "surface_area": math.isclose(cells.total_surface_area(), ctx.surface_area, rel_tol=rel_tol),
        "holes": holes == ctx.holes,
        "total_holes": total_holes == ctx.total_holes,
    }
