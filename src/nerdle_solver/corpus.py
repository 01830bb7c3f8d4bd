#!/usr/bin/env python3
"""corpus.py

Reads and writes equation lists, and generates them from the command line.

Corpus files are UTF-8, one equation per line, using ² and ³ (s and c are
accepted on load).

Usage:
  nerdle-gen classic                      # writes classic_nerdle.txt
  nerdle-gen maxi --output maxi.txt
  nerdle-gen --slots 7 --output seven.txt
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import Iterable, List, Optional

import tqdm

from .generate import generate
from .log import make_loggers
from .mask import normalize_guess

# name -> (slot count, extended)
PRESETS = {
    "micro": (5, False),
    "classic": (8, False),
    "maxi": (10, True),
}

# classic Nerdle is often quoted at 18,115; these rules give 17,723 (DESIGN.md)
KNOWN_COUNTS = {
    "micro": 127,
    "classic": 17_723,
    "maxi": 2_177_736,
}


# load_equations loads a corpus file, one equation per line
def load_equations(path: str) -> List[str]:
    equations: List[str] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            eq = normalize_guess(line)
            if eq.count("=") == 1:
                equations.append(eq)
    # all equations in one game share a length; keep the first one's
    if equations:
        slots = len(equations[0])
        equations = [eq for eq in equations if len(eq) == slots]
    # Deduplicate while keeping order
    seen = set()
    out = []
    for eq in equations:
        if eq not in seen:
            seen.add(eq)
            out.append(eq)
    return out


def write_equations(equations: Iterable[str], path: str, *, show_progress: bool = True) -> int:
    """Stream equations to path, one per line, and return how many were written."""
    count = 0
    tmp_path = str(path) + ".tmp"
    iterator = tqdm.tqdm(equations, desc="Generating", unit="eq") if show_progress else equations
    with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
        for eq in iterator:
            f.write(eq)
            f.write("\n")
            count += 1
    os.replace(tmp_path, path)
    return count


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Generate every valid Nerdle equation of a given length.")
    ap.add_argument("preset", nargs="?", choices=sorted(PRESETS), default=None,
                    help="micro (5 slots), classic (8 slots) or maxi (10 slots, with parentheses and powers).")
    ap.add_argument("--slots", type=int, default=None, help="Equation length, instead of a preset.")
    ap.add_argument("--extended", action="store_true", help="Allow parentheses, squares and cubes (with --slots).")
    ap.add_argument("--output", type=str, default=None, help="Output file. Presets default to <preset>_nerdle.txt.")
    ap.add_argument("--workers", type=int, default=os.cpu_count() or 1,
                    help="Processes used to search (1 = in this process).")
    ap.add_argument("--no-progress", action="store_true", help="Disable the progress bar.")
    ap.add_argument("--verbose", action="store_true", help="Print detailed progress to the console.")
    ap.add_argument("--debug", action="store_true", help="Very verbose logs.")
    args = ap.parse_args(argv)

    log, _log_debug = make_loggers(args.verbose, args.debug)

    if args.preset is not None and args.slots is not None:
        print("Give either a preset or --slots, not both.", file=sys.stderr)
        return 2

    if args.preset is not None:
        slot_count, extended = PRESETS[args.preset]
        out_path = args.output or f"{args.preset}_nerdle.txt"
    elif args.slots is not None:
        slot_count, extended = args.slots, args.extended
        if args.output is None:
            print("--output is required with --slots.", file=sys.stderr)
            return 2
        out_path = args.output
    else:
        print("Choose a preset (micro, classic, maxi) or pass --slots.", file=sys.stderr)
        return 2

    if slot_count < 3:
        print(f"An equation needs at least 3 slots, got {slot_count}.", file=sys.stderr)
        return 2

    log(f"gen: slots={slot_count} extended={extended} workers={args.workers} output={out_path}")
    equations = generate(slot_count, extended, workers=args.workers)
    count = write_equations(equations, out_path, show_progress=not args.no_progress)
    print(f"Wrote {count} equations to {out_path}")

    if args.preset is not None and count != KNOWN_COUNTS[args.preset]:
        print(
            f"Expected {KNOWN_COUNTS[args.preset]} equations for {args.preset}, got {count}.",
            file=sys.stderr,
        )
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
