"""
CLI entry point for hictools.

Usage:
    python -m hictools --demo -o out/                   # Synthetic events to out/demo.h5
    python -m hictools --demo --events 10 --collisions 5 --extended
    python -m hictools --summary out/demo.h5            # Row counts of an output file
    python -m hictools --interpolate table.txt 0.5 1.5  # Cubic spline of a 2-column table
"""
import argparse
import logging
import sys
from pathlib import Path

import numpy as np

from .errors import HicToolsError

logger = logging.getLogger(__name__)


def configure_logging(level: int) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)


def _summary(filename):
    from .output import read_tables

    tables = read_tables(filename)
    attrs = tables["attrs"]
    print(f"File: {filename}")
    print(f"  Schema version: {attrs.get('schema_version', 'unknown')}")
    if str(filename).endswith(".unfinished"):
        print("  Status: UNFINISHED (run did not close the file)")
    for name in ("particles", "collisions"):
        if name not in tables:
            print(f"  {name:<11} disabled")
            continue
        table = tables[name]
        n_rows = len(table["ev"])
        n_events = len(np.unique(table["ev"]))
        print(f"  {name:<11} {n_rows:>10,} rows  {n_events:>6} events  {len(table)} columns")
    return 0


def _demo(args):
    from .output import OutputParameters, create_output
    from .synthetic import run_synthetic_events

    params = OutputParameters(
        write_collisions=args.collisions > 0,
        particles_only_final=args.only_final,
        extended_particle_output=args.extended,
        extended_collision_output=args.extended,
        autosave_frequency=args.autosave,
    )
    outdir = Path(args.output_dir)
    outdir.mkdir(parents=True, exist_ok=True)

    with create_output("hdf5", outdir, args.name, params) as output:
        run = run_synthetic_events(
            output,
            n_events=args.events,
            n_particles=args.particles,
            n_interactions=args.collisions,
            seed=args.seed,
        )
    logger.info("Wrote %d events (%d blocks, %d interactions) to %s",
                run.n_events, run.n_blocks, run.n_interactions, output.filename)
    if not args.quiet:
        _summary(output.filename)
    return 0


def _interpolate(args):
    from .interpolation import CubicSplineInterpolator

    data = np.loadtxt(args.interpolate, ndmin=2)
    if data.shape[1] < 2:
        raise HicToolsError(f"{args.interpolate} needs two columns (x y)")
    spline = CubicSplineInterpolator(data[:, 0], data[:, 1])
    for xi in args.points:
        print(f"{xi:.6g} {spline(xi):.10g}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Output and interpolation tools for heavy-ion collision simulations',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m hictools --demo -o out/ --events 5      Write 5 synthetic events
  python -m hictools --summary out/demo.h5          Inspect an output file
  python -m hictools --interpolate xy.txt 0.3 0.7   Evaluate a cubic spline
        """,
    )

    parser.add_argument('--demo', action='store_true', help='Write synthetic events to an HDF5 file')
    parser.add_argument('--summary', type=str, default=None, metavar='FILE',
                        help='Print table summary of an output file')
    parser.add_argument('--interpolate', type=str, default=None, metavar='FILE',
                        help='Two-column (x y) text file to interpolate')
    parser.add_argument('points', nargs='*', type=float, help='Points for --interpolate')

    parser.add_argument('--output-dir', '-o', type=str, default='results', help='Output directory')
    parser.add_argument('--name', type=str, default='demo', help='Output base name')
    parser.add_argument('--events', '-e', type=int, default=3, help='Number of events')
    parser.add_argument('--particles', '-n', type=int, default=200, help='Particles per event')
    parser.add_argument('--collisions', type=int, default=0,
                        help='Interactions per time step (enables collisions table)')
    parser.add_argument('--extended', action='store_true', help='Extended output columns')
    parser.add_argument('--only-final', choices=['no', 'yes', 'if_not_empty'], default='no',
                        help='Write only final particle blocks')
    parser.add_argument('--autosave', type=int, default=1000, help='Events between checkpoints')
    parser.add_argument('--seed', type=int, default=42, help='Random seed')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Minimal output')

    args = parser.parse_args(argv)

    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging(logging.INFO)

    try:
        if args.summary:
            return _summary(args.summary)
        if args.interpolate:
            return _interpolate(args)
        if args.demo:
            return _demo(args)
    except HicToolsError as exc:
        logger.error("%s", exc)
        return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
