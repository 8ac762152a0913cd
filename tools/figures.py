"""
Static previews of the sponge and its scaling laws (PNG output).

    from tools.figures import plot_voxel_slices, plot_scaling_laws
    plot_voxel_slices(rasterize(generate(2), 27), "figures/slices.png")
    plot_scaling_laws(6, "figures/scaling.png")
"""

import sys
import numpy as np
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))
from menger_sponge_framework import VoxelField, _check_order, formulas

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

BG = '#181818'
FG = '#cccccc'
ACCENT = '#f0abfc'


def _dark_axes(ax):
    ax.set_facecolor(BG)
    ax.tick_params(colors=FG, labelsize=7)
    for spine in ax.spines.values():
        spine.set_color('#444444')


def _save(fig, path):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path, dpi=120, bbox_inches='tight', facecolor=BG)
    plt.close(fig)
    return path


def plot_voxel_slices(field: VoxelField, path, n_slices=3):
    """Evenly spaced z-slices of the occupancy grid side by side."""
    grid = field.grid
    res = field.resolution
    zs = np.linspace(0, res - 1, n_slices + 2)[1:-1].round().astype(int)

    fig, axes = plt.subplots(1, n_slices, figsize=(3 * n_slices, 3.2), facecolor=BG)
    axes = np.atleast_1d(axes)
    for ax, z in zip(axes, zs):
        _dark_axes(ax)
        ax.imshow(grid[:, :, z].T, origin='lower', cmap='magma', vmin=0, vmax=1,
                  interpolation='nearest')
        ax.set_title(f"z = {z}/{res - 1}", color=FG, fontsize=9)
    fig.suptitle(f"Voxel field {res}^3  occupancy={field.occupancy():.3f}",
                 color=FG, fontsize=10)
    return _save(fig, path)


def plot_voxels_3d(field: VoxelField, path):
    """Direct voxel rendering; keep the resolution small (<= 27)."""
    fig = plt.figure(figsize=(6, 6), facecolor=BG)
    ax = fig.add_subplot(111, projection='3d')
    ax.set_facecolor(BG)
    ax.voxels(field.grid.astype(bool), facecolors=ACCENT, edgecolor='#222222', linewidth=0.2)
    ax.set_axis_off()
    return _save(fig, path)


def plot_scaling_laws(max_order, path, medium="air"):
    """Log-scale curves of N, V, A and S/V for n = 0..max_order."""
    max_order = _check_order(max_order, "max_order")
    ns = np.arange(max_order + 1)
    ctxs = [formulas(int(n), medium=medium) for n in ns]
    series = {
        'N = 20^n': [c.cube_count for c in ctxs],
        'V = (20/27)^n': [c.volume for c in ctxs],
        'A = 6(20/9)^n': [c.surface_area for c in ctxs],
        'S/V = 6*3^n': [c.surface_to_volume for c in ctxs],
    }

    fig, ax = plt.subplots(figsize=(6, 4), facecolor=BG)
    _dark_axes(ax)
    for label, values in series.items():
        ax.semilogy(ns, values, marker='o', markersize=3, label=label)
    ax.set_xlabel('order n', color=FG)
    ax.legend(fontsize=7, facecolor='#222222', labelcolor=FG)
    ax.set_title(f"Menger sponge scaling (D = {ctxs[0].dimension:.4f})", color=FG, fontsize=10)
    return _save(fig, path)
