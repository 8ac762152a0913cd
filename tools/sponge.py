#!/usr/bin/env python3
"""
CLI for the Menger Sponge Framework.

Usage:
    python tools/sponge.py generate 3                    # cell count + edge length
    python tools/sponge.py generate 2 --json cells.json  # dump {position, size} records
    python tools/sponge.py generate 5 --tier mobile-low  # clamp like a phone would
    python tools/sponge.py voxelize 2 --resolution 27    # occupancy statistics
    python tools/sponge.py formulas 3 --medium water     # closed-form table
    python tools/sponge.py check 3                       # enumeration vs formulas
    python tools/sponge.py slice 3 --z 0.5               # ASCII cross-section
    python tools/sponge.py variants --iterations 2       # registered variants
    python tools/sponge.py plot 2 --out figures          # PNG previews
"""

import argparse
import json
import logging
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from menger_sponge_framework import (
    CapacityExceeded, FormulaConstants, InvalidArgument, MEDIUMS, RULES,
    ascii_slice, cross_check, formulas, generate, rasterize,
)
from tools.logging_config import setup_logging
from tools.render_budget import DEVICE_TIERS, clamp_order


def cmd_generate(args):
    """Generate cells and report (or dump) them."""
    order = args.order
    if args.tier:
        plan = clamp_order(order, args.tier)
        if plan.notice:
            print(f"[{plan.tier}] {plan.notice} (order {plan.requested} -> {plan.effective})")
        order = plan.effective

    cells = generate(order, subdivision=args.subdivision, rule=args.rule,
                     max_cells=args.max_cells)
    print(f"order={order}  rule={args.rule}  subdivision={args.subdivision}")
    print(f"  cells:       {len(cells)}")
    print(f"  edge length: {cells.edge_length:.9g}")
    if args.json:
        with open(args.json, "w") as f:
            json.dump(cells.to_records(), f)
        print(f"  wrote {args.json}")
    return 0


def cmd_voxelize(args):
    """Rasterize and print occupancy statistics."""
    cells = generate(args.order, subdivision=args.subdivision, rule=args.rule,
                     max_cells=args.max_cells)
    field = rasterize(cells, args.resolution)
    print(f"order={args.order}  resolution={field.resolution}")
    print(f"  solid voxels:     {field.solid_count()} / {field.data.size}")
    print(f"  occupancy:        {field.occupancy():.6f}")
    print(f"  exposed area:     {field.exposed_surface_area():.6f}")
    print(f"  solid components: {field.connected_components()}")
    if args.save:
        import numpy as np
        np.save(args.save, field.grid)
        print(f"  wrote {args.save}")
    return 0


def cmd_formulas(args):
    """Print the closed-form table for one order."""
    constants = FormulaConstants(
        k0=args.k0, delta_t=args.delta_t, mu=args.mu, L0=args.L0,
        I0=args.I0, scatter_k=args.scatter_k, f0=args.f0, R0=args.R0,
    )
    ctx = formulas(args.order, constants=constants, medium=args.medium)
    print(ctx.summary())
    return 0


def cmd_check(args):
    """Cross-check enumeration against the closed forms for 0..max_order."""
    failures = 0
    print(f"\n{'n':<4s} {'cells':>8s}  checks")
    print("-" * 60)
    for n in range(args.max_order + 1):
        result = cross_check(n)
        bad = [k for k, ok in result.items() if not ok]
        failures += len(bad)
        status = "ok" if not bad else "FAILED: " + ", ".join(bad)
        print(f"{n:<4d} {20 ** n:>8d}  {status}")
    return 1 if failures else 0


def cmd_slice(args):
    """ASCII cross-section by point membership."""
    print(ascii_slice(args.level, z=args.z, width=args.width, height=args.height))
    return 0


def cmd_variants(args):
    """List registered variants with their element counts."""
    from tools.variants import get_variants
    import numpy as np

    rng = np.random.default_rng(args.seed)
    print(f"\n{'Name':<22s} {'Dim':<4s} {'Count':>8s}  Description")
    print("-" * 90)
    for v in get_variants():
        data = v.gen_fn(args.iterations, rng)
        print(f"  {v.name:<20s} {v.dimension:<4d} {len(data):>8d}  {v.description}")
    return 0


def cmd_plot(args):
    """Save voxel slices and the scaling-law figure."""
    from tools.figures import plot_scaling_laws, plot_voxel_slices

    field = rasterize(generate(args.order), args.resolution)
    slices = plot_voxel_slices(field, os.path.join(args.out, f"sponge_slices_n{args.order}.png"))
    scaling = plot_scaling_laws(args.max_order, os.path.join(args.out, "sponge_scaling.png"))
    print(f"Saved: {slices}")
    print(f"Saved: {scaling}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        description="Menger Sponge Framework CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', default=None, help='Also write logs to this file')
    sub = parser.add_subparsers(dest='command')

    def add_shape_args(p):
        p.add_argument('order', type=int, help='Iteration order (>= 0)')
        p.add_argument('--rule', default='menger', choices=list(RULES))
        p.add_argument('--subdivision', type=int, default=3)
        p.add_argument('--max-cells', type=int, default=None,
                       help='Refuse requests above this many cells')

    p_gen = sub.add_parser('generate', help='Generate cells')
    add_shape_args(p_gen)
    p_gen.add_argument('--json', default=None, help='Write {position, size} records here')
    p_gen.add_argument('--tier', default=None,
                       choices=list(DEVICE_TIERS),
                       help='Clamp the order for this device class')

    p_vox = sub.add_parser('voxelize', help='Rasterize into a voxel field')
    add_shape_args(p_vox)
    p_vox.add_argument('--resolution', type=int, default=48)
    p_vox.add_argument('--save', default=None, help='Save the grid as .npy')

    defaults = FormulaConstants()
    p_for = sub.add_parser('formulas', help='Closed-form properties')
    p_for.add_argument('order', type=int)
    p_for.add_argument('--medium', default='air', choices=list(MEDIUMS))
    for name in ('k0', 'delta_t', 'mu', 'L0', 'I0', 'scatter_k', 'f0', 'R0'):
        p_for.add_argument(f'--{name}', type=float, default=getattr(defaults, name))

    p_chk = sub.add_parser('check', help='Enumeration vs closed forms')
    p_chk.add_argument('max_order', type=int)

    p_sl = sub.add_parser('slice', help='ASCII cross-section')
    p_sl.add_argument('level', type=int)
    p_sl.add_argument('--z', type=float, default=0.5)
    p_sl.add_argument('--width', type=int, default=54)
    p_sl.add_argument('--height', type=int, default=27)

    p_var = sub.add_parser('variants', help='List fractal variants')
    p_var.add_argument('--iterations', type=int, default=2)
    p_var.add_argument('--seed', type=int, default=42)

    p_plot = sub.add_parser('plot', help='Save PNG previews')
    p_plot.add_argument('order', type=int)
    p_plot.add_argument('--resolution', type=int, default=27)
    p_plot.add_argument('--max-order', type=int, default=6)
    p_plot.add_argument('--out', default=os.path.join(ROOT, 'figures'))

    return parser


COMMANDS = {
    'generate': cmd_generate,
    'voxelize': cmd_voxelize,
    'formulas': cmd_formulas,
    'check': cmd_check,
    'slice': cmd_slice,
    'variants': cmd_variants,
    'plot': cmd_plot,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING,
                  log_file=args.log_file)

    if args.command not in COMMANDS:
        parser.print_help()
        return 0
    try:
        return COMMANDS[args.command](args)
    except CapacityExceeded as e:
        print(f"Refused: {e}. Lower the order or raise --max-cells.")
        return 1
    except InvalidArgument as e:
        print(f"Error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
