#!/usr/bin/env python3
"""
Menger Sponge Quickstart - Run this to verify the framework and see examples.

Usage:
    pip install -e .
    python quickstart.py
"""

print("=" * 70)
print("MENGER SPONGE FRAMEWORK - QUICKSTART")
print("=" * 70)

from menger_sponge_framework import (
    RULES, CapacityExceeded, ascii_slice, cross_check, formulas, generate, rasterize,
)
print("\n[OK] Framework imported successfully")
print(f"[OK] Rules: {', '.join(RULES)}")

# Generation
print("\n" + "-" * 70)
print("GENERATION")
print("-" * 70)
for n in range(4):
    cells = generate(n)
    print(f"  order {n}: {len(cells):>6d} cells, edge {cells.edge_length:.6f}")
print(f"  center-only order 1: {len(generate(1, rule='center-only'))} cells")

try:
    generate(6, max_cells=200_000)
except CapacityExceeded as e:
    print(f"  [OK] guard: {e}")

# Voxels
print("\n" + "-" * 70)
print("VOXEL FIELD")
print("-" * 70)
field = rasterize(generate(2), resolution=27)
print(f"  occupancy:        {field.occupancy():.4f} (expected {(20 / 27) ** 2:.4f})")
print(f"  center (13,13,13) solid: {field.is_solid(13, 13, 13)}")
print(f"  corner (0,0,0) solid:    {field.is_solid(0, 0, 0)}")
print(f"  box-counting D:   {rasterize(generate(3), 27).box_counting_dimension():.4f}")

# Formulas
print("\n" + "-" * 70)
print("FORMULAS")
print("-" * 70)
print(formulas(3).summary())

print("\nCross-check (enumeration vs closed form):")
for n in range(3):
    result = cross_check(n)
    flag = "OK" if all(result.values()) else "MISMATCH"
    print(f"  n={n}: [{flag}] {result}")

print("\nSlice through the middle of a level-2 sponge:")
print(ascii_slice(2, z=0.5, width=27, height=27))

print("\n" + "=" * 70)
print("Done.")
print("=" * 70)
