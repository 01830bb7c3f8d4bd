#!/usr/bin/env python3
"""
interactive.py

A Nerdle helper that suggests guesses by maximizing expected information gain.
You play Nerdle elsewhere; after each guess you type the colours here.

Guess format:
- The equation you played. s and c can be typed for ² and ³.

Mask format, one code per tile:
- G or 2 for green, P or 1 for purple, B or 0 (or space) for black
  Example: "GBPPBGBB" or "20110200"

Corpus:
- Generate one first with nerdle-gen, e.g. "nerdle-gen classic".

Usage:
  nerdle-solve classic_nerdle.txt
  nerdle-solve maxi_nerdle.txt --sample-size 300 --workers 8
"""

from __future__ import annotations

import argparse
import os
import random
import sys
from typing import List, Optional

from .corpus import load_equations
from .log import make_loggers
from .mask import MaskParseError
from .solver import DEFAULT_SAMPLE_SIZE, NerdleEntropySolver, SessionState

DEFAULT_SHOW = 25


def _print_candidates(candidates: List[str], show: int) -> None:
    for eq in candidates[:show]:
        print(f"- {eq}")
    if len(candidates) > show:
        print("- ...")


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Nerdle entropy solver (interactive CLI).")
    ap.add_argument("corpus", type=str, help="Path to the equation list, one per line (see nerdle-gen).")
    ap.add_argument("--sample-size", type=int, default=DEFAULT_SAMPLE_SIZE,
                    help="Rank guesses on a random sample of this many candidates when there are more.")
    ap.add_argument("--workers", type=int, default=os.cpu_count() or 1,
                    help="Processes used to score guesses.")
    ap.add_argument("--show", type=int, default=DEFAULT_SHOW, help="How many remaining candidates to list.")
    ap.add_argument("--no-suggest", action="store_true", help="Only filter; don't compute a suggested guess.")
    ap.add_argument("--seed", type=int, default=None, help="Seed for the sampling RNG.")
    ap.add_argument("--verbose", action="store_true", help="Print detailed progress to the console.")
    ap.add_argument("--debug", action="store_true", help="Very verbose logs.")
    args = ap.parse_args(argv)

    log, log_debug = make_loggers(args.verbose, args.debug)

    try:
        corpus = load_equations(args.corpus)
    except OSError as e:
        print(f"Could not read {args.corpus}: {e}", file=sys.stderr)
        return 2
    if not corpus:
        print(f"Loaded 0 usable equations from {args.corpus}. Check the file.", file=sys.stderr)
        return 2

    solver = NerdleEntropySolver(
        corpus,
        sample_size=args.sample_size,
        workers=args.workers,
        rng=random.Random(args.seed),
        log=log_debug,
    )
    log(f"solver: loaded {len(corpus)} equations of {solver.slot_count} slots from {args.corpus}")

    print("\n=== Nerdle Entropy Solver ===")
    print(f"Equations: {len(corpus)} ({solver.slot_count} slots)")
    print("Mask input: G or 2 for green; P or 1 for purple; B or 0 for black. Example: GBPPBGBB")
    print("Type 'quit' to exit.\n")

    turn = 1
    while True:
        if solver.state is SessionState.CONVERGED:
            print(f"There's only one equation left, the answer is {solver.answer}!\n")
            return 0
        if solver.state is SessionState.EXHAUSTED:
            print("No candidates left. Either the corpus doesn't match the game,", file=sys.stderr)
            print("or a mask was mistyped somewhere along the way.", file=sys.stderr)
            return 3

        n = len(solver.candidates)
        print(f"Turn {turn} | Remaining candidates: {n}")
        _print_candidates(solver.candidates, args.show)

        suggested: Optional[str] = None
        if not args.no_suggest:
            suggested, h = solver.suggest(show_progress=True)
            print(f"\nSuggested guess: {suggested}  (score {h:.4f})\n")

        raw = input("Enter your guess (you can use s for ² and c for ³; Enter uses the suggestion): ").strip()
        if raw.lower() == "quit":
            return 0
        if raw == "":
            if suggested is None:
                print("No suggestion to use; type the guess you played.\n")
                continue
            raw = suggested

        try:
            guess = solver.propose(raw)
        except ValueError as e:
            print(f"{e}\n")
            continue
        log(f"turn {turn}: guess {guess}")

        # stay on this guess until the mask parses
        while solver.state is SessionState.AWAITING_FEEDBACK:
            mask_txt = input("Enter your mask (G or 2 for green; P or 1 for purple; B or 0 for black): ")
            if mask_txt.strip().lower() == "quit":
                return 0
            try:
                solver.feedback(mask_txt)
            except MaskParseError as e:
                print(f"{e}\n")

        print(f"{len(solver.candidates)} options remaining\n")
        turn += 1


if __name__ == "__main__":
    raise SystemExit(main())
