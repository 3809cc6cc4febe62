#!/usr/bin/env python3
"""
Inspect catalog solids and apply cap operations from the command line.

Usage:
  johnson list
  johnson stats truncated-cube
  johnson augment triangular-cupola --face 7 --gyrate ortho --out bicupola.json
  johnson diminish icosahedron --peak 0
  johnson gyrate cuboctahedron --peak 0 --models models/
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .catalog import Catalog, default_catalog
from .errors import JohnsonError
from .logging_config import setup_logging
from .operations import GYRATE_OPTIONS, apply_operation
from .polyhedron import Polyhedron


def format_face_count(polyhedron: Polyhedron) -> str:
    counts = polyhedron.face_count()
    return " ".join(f"{n}:{counts[n]}" for n in sorted(counts))


def print_stats(polyhedron: Polyhedron) -> None:
    name = polyhedron.name or "-"
    print(f"{'name':30s}  V   E   F   faces")
    print("-" * 72)
    print(
        f"{name[:30]:30s} {polyhedron.num_vertices():3d} {len(polyhedron.edges):3d} "
        f"{polyhedron.num_faces():3d}   {format_face_count(polyhedron)}"
    )
    peaks = polyhedron.peaks()
    kinds = sorted({peak.kind.value for peak in peaks})
    print(f"peaks: {len(peaks)} ({', '.join(kinds) or 'none'})")
    print(f"regular: {'yes' if polyhedron.is_regular() else 'no'}")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="johnson", description=__doc__.splitlines()[1])
    ap.add_argument("--models", default=None, help="Folder of *.json models to add to the catalog")
    ap.add_argument("--verbose", action="store_true", help="Log operation details")
    sub = ap.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List catalog solids")

    stats = sub.add_parser("stats", help="Print counts, peaks and regularity for a solid")
    stats.add_argument("name")

    augment = sub.add_parser("augment", help="Attach a cap to a face")
    augment.add_argument("name")
    augment.add_argument("--face", type=int, required=True, help="Index of the face to augment")
    augment.add_argument("--gyrate", choices=GYRATE_OPTIONS, default=None)
    augment.add_argument("--using", choices=["pyramid", "cupola", "rotunda"], default=None)

    for command, help_text in (("diminish", "Remove a peak"), ("gyrate", "Rotate a cupola or rotunda")):
        p = sub.add_parser(command, help=help_text)
        p.add_argument("name")
        p.add_argument("--peak", type=int, required=True, help="Index into the solid's peak list")

    for p in (stats, augment) + tuple(sub.choices[c] for c in ("diminish", "gyrate")):
        p.add_argument("--out", default=None, help="Write the resulting solid as JSON here")
    return ap


def run(args: argparse.Namespace) -> Optional[Polyhedron]:
    catalog = Catalog.from_folder(args.models) if args.models else default_catalog

    if args.command == "list":
        for name in catalog.names():
            print(name)
        return None

    polyhedron = Polyhedron.get(args.name, catalog=catalog)
    if args.command == "stats":
        return polyhedron
    if args.command == "augment":
        options = {"face_index": args.face}
        if args.gyrate is not None:
            options["gyrate"] = args.gyrate
        if args.using is not None:
            options["using"] = args.using
    else:
        options = {"peak": args.peak}
    return apply_operation(args.command, polyhedron, options)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        result = run(args)
    except JohnsonError as e:
        print(f"[FAIL] {args.command}: {e}")
        return 1

    if result is None:
        return 0
    print_stats(result)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(result.to_json(), f, indent=2, ensure_ascii=False)
        print(f"\nWrote: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
