"""
CLI entry point for the particle field.

Runs the field headless for a number of frames and exports the last one.

Usage:
    juliafield [options]
    python -m juliafield [options]
"""

import argparse
import sys
import time
from pathlib import Path

from juliafield.errors import InvalidConfiguration
from juliafield.field import PROFILES, FieldConfig, ParticleField
from juliafield.io.exporter import SnapshotExporter


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="juliafield",
        description="Headless 3D Julia set particle field",
    )

    # Size
    parser.add_argument(
        "-p", "--profile", type=str, default="small",
        choices=sorted(PROFILES),
        help="Field size (small: 27^3, medium: 54^3, full: 81^3 particles)",
    )
    parser.add_argument("--particles", type=int, default=None, help="Particle count (overrides profile)")
    parser.add_argument("--unit", type=float, default=None, help="Display lattice spacing (overrides profile)")

    # Simulation
    parser.add_argument(
        "-n", "--frames", type=int, default=120,
        help="Number of updates to run (default: 120)",
    )
    parser.add_argument(
        "--max-iter", type=int, default=64,
        help="Escape-time iteration bound (default: 64)",
    )
    parser.add_argument(
        "-w", "--workers", type=int, default=1,
        help="Threads used to colorize particles (default: 1)",
    )

    # Output
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the final frame as a .npz archive",
    )
    parser.add_argument("--json", type=Path, default=None, help="Write frame metadata as JSON")
    parser.add_argument("--preview", type=Path, default=None, help="Write a PNG of one lattice layer")
    parser.add_argument(
        "--layer", type=int, default=None,
        help="Lattice layer for --preview (default: middle layer)",
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    p_cfg = PROFILES[args.profile]
    particle_count = args.particles if args.particles is not None else int(p_cfg["particle_count"])
    unit = args.unit if args.unit is not None else p_cfg["unit"]

    if args.frames < 0:
        print(f"Error: frame count must not be negative: {args.frames}", file=sys.stderr)
        sys.exit(1)

    config = FieldConfig(
        particle_count=particle_count,
        unit=unit,
        max_iter=args.max_iter,
        workers=args.workers,
    )

    # Step 1: Build
    print(f"Building field: {particle_count} particles")
    t0 = time.time()
    try:
        field = ParticleField(config)
    except InvalidConfiguration as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    width, height, depth = field.dimensions
    print(f"  Lattice: {width}x{height}x{depth}")
    print(f"  Build took {time.time() - t0:.2f}s")

    # Step 2: Run
    print(f"\nRunning {args.frames} frames (max_iter={config.max_iter}, workers={config.workers})")
    t1 = time.time()
    for _ in field.run(args.frames, progress_callback=_progress_bar):
        pass
    elapsed = time.time() - t1

    osc = field.oscillator
    print(f"  Driving value: {osc.position:.4f} ({osc.direction}, velocity {osc.velocity:.4f})")
    print(f"  Channel order: {list(field.channel_order)} after {field.channels.rotations} rotations")
    print(f"  Update took {elapsed:.2f}s ({args.frames / max(elapsed, 0.01):.1f} fps)")

    # Step 3: Export
    exporter = SnapshotExporter()

    if args.output is not None:
        path = exporter.export_numpy(field, args.output)
        print(f"  Snapshot: {path}")

    if args.json is not None:
        path = exporter.export_json(field, args.json)
        print(f"  Metadata: {path}")

    if args.preview is not None:
        layer = depth // 2 if args.layer is None else args.layer
        try:
            path = exporter.export_layer_png(field, args.preview, layer=layer)
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        print(f"  Preview (layer {layer}): {path}")


if __name__ == "__main__":
    main()
