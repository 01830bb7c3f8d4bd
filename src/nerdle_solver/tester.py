#!/usr/bin/env python3
"""tester.py

Runs automated games with the entropy solver against every secret in a
corpus and prints summary statistics. Optionally writes a matplotlib graph.

Examples:
  nerdle-test micro_nerdle.txt
  nerdle-test classic_nerdle.txt --limit 200 --sample-size 200 --plot results.png

Notes:
- Use --plot to require matplotlib (pip install "nerdle-solver[plot]").
"""

from __future__ import annotations

import argparse
import random
import statistics
import sys
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import tqdm

from .corpus import load_equations
from .mask import score
from .solver import DEFAULT_SAMPLE_SIZE, NerdleEntropySolver, SessionState


@dataclass(frozen=True)
class GameResult:
    secret: str
    solved: bool
    turns: int
    final_candidates: int
    first_guess: str
    # candidates left after each turn's feedback was applied
    remaining: Tuple[int, ...] = ()

    @property
    def failure(self) -> Optional[str]:
        if self.solved:
            return None
        return "no candidates left" if self.final_candidates == 0 else "turn limit"


def simulate_game(
    *,
    secret: str,
    corpus: List[str],
    max_turns: int,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    workers: int = 1,
    rng: Optional[random.Random] = None,
) -> GameResult:
    solver = NerdleEntropySolver(corpus, sample_size=sample_size, workers=workers, rng=rng)

    first_guess = ""
    remaining: List[int] = []

    def result(solved: bool, turns: int, left: int) -> GameResult:
        return GameResult(
            secret=secret,
            solved=solved,
            turns=turns,
            final_candidates=left,
            first_guess=first_guess,
            remaining=tuple(remaining),
        )

    for turn in range(1, max_turns + 1):
        if solver.state is SessionState.EXHAUSTED:
            return result(False, turn - 1, 0)

        if solver.state is SessionState.CONVERGED:
            # nothing left to rank, just play it
            guess = solver.answer
        else:
            guess = solver.propose()
        if turn == 1:
            first_guess = guess

        mask = score(guess, secret)
        if mask.is_solved:
            return result(True, turn, len(solver.candidates))
        if solver.state is SessionState.CONVERGED:
            # the only candidate left was wrong
            return result(False, turn, 1)

        solver.apply_mask(mask)
        remaining.append(len(solver.candidates))

    return result(False, max_turns, len(solver.candidates))


def mean_remaining(results: Iterable[GameResult]) -> List[float]:
    """Mean candidates left after turn 1, 2, ... over the games that got that far."""
    sums: Dict[int, int] = defaultdict(int)
    games: Dict[int, int] = defaultdict(int)
    for r in results:
        for i, left in enumerate(r.remaining):
            sums[i] += left
            games[i] += 1
    return [sums[i] / games[i] for i in sorted(sums)]


def summarize(results: Iterable[GameResult]) -> str:
    results = list(results)
    if not results:
        return "No results."

    games = len(results)
    solved_turns = sorted(r.turns for r in results if r.solved)
    failures = Counter(r.failure for r in results if not r.solved)

    lines = [f"Games: {games}", f"Solved: {len(solved_turns)} ({100 * len(solved_turns) / games:.2f}%)"]
    if solved_turns:
        lines.append(f"Avg turns (solved): {statistics.mean(solved_turns):.3f}")
        lines.append(f"Worst solve: {solved_turns[-1]} turns")
        by_turn = Counter(solved_turns)
        lines.append("Turn distribution (solved): " + ", ".join(f"{t}:{n}" for t, n in sorted(by_turn.items())))

    shrink = mean_remaining(results)
    if shrink:
        lines.append("Mean candidates left by turn: " + ", ".join(f"{t}:{n:.1f}" for t, n in enumerate(shrink, 1)))

    openers = Counter(r.first_guess for r in results if r.first_guess)
    if openers:
        opener, count = openers.most_common(1)[0]
        lines.append(f"Most common first guess: {opener} ({count} / {games})")

    if failures:
        lines.append("Failed: " + ", ".join(f"{reason} {n}" for reason, n in sorted(failures.items())))
        failed = [r.secret for r in results if not r.solved]
        lines.append("Failed secrets (up to 10): " + ", ".join(failed[:10]))

    return "\n".join(lines)


def plot_results(*, results: List[GameResult], max_turns: int, out_path: str) -> None:
    """Turns-to-solve histogram next to the mean candidate count per turn."""
    # matplotlib is an optional extra; only --plot needs it
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt  # noqa: E402

    by_turn = Counter(r.turns for r in results if r.solved)
    failures = Counter(r.failure for r in results if not r.solved)
    reasons = sorted(failures)

    labels = [str(t) for t in range(1, max_turns + 1)] + reasons
    heights = [by_turn.get(t, 0) for t in range(1, max_turns + 1)] + [failures[k] for k in reasons]
    colors = ["C0"] * max_turns + ["C3"] * len(reasons)

    fig, (ax_turns, ax_left) = plt.subplots(1, 2, figsize=(12, 4.5))
    ax_turns.bar(range(len(labels)), heights, color=colors)
    ax_turns.set_xticks(range(len(labels)))
    ax_turns.set_xticklabels(labels, rotation=45 if reasons else 0, ha="right" if reasons else "center")
    ax_turns.set_title(f"Nerdle games ({len(results)} played)")
    ax_turns.set_xlabel("Turns to solve")
    ax_turns.set_ylabel("# games")

    shrink = mean_remaining(results)
    if shrink:
        ax_left.plot(range(1, len(shrink) + 1), shrink, marker="o", color="C2")
        # symlog keeps turns where every game ran dry (mean 0) on the chart
        ax_left.set_yscale("symlog")
    ax_left.set_title("Candidate equations left")
    ax_left.set_xlabel("After turn")
    ax_left.set_ylabel("Mean over games")

    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Run Nerdle solver simulations and print statistics.")
    ap.add_argument("corpus", type=str, help="Equation list the solver plays from (see nerdle-gen).")
    ap.add_argument("--secrets", type=str, default=None, help="Secrets to test (defaults to the corpus itself).")
    ap.add_argument("--limit", type=int, default=0, help="Limit number of secrets (0 = no limit).")
    ap.add_argument("--max-turns", type=int, default=6, help="Max turns per game.")
    ap.add_argument("--sample-size", type=int, default=DEFAULT_SAMPLE_SIZE,
                    help="Rank guesses on a random sample of this many candidates when there are more.")
    ap.add_argument("--workers", type=int, default=1, help="Processes used to score guesses.")
    ap.add_argument("--seed", type=int, default=None, help="Seed for the sampling RNG.")
    ap.add_argument("--no-progress", action="store_true", help="Disable progress bars.")
    ap.add_argument("--plot", type=str, default=None, help="Write a matplotlib graph to this path (e.g. results.png).")
    args = ap.parse_args(argv)

    try:
        corpus = load_equations(args.corpus)
        secrets = load_equations(args.secrets) if args.secrets else corpus
    except OSError as e:
        print(f"Could not read word lists: {e}", file=sys.stderr)
        return 2

    if not corpus:
        print("Loaded 0 equations.", file=sys.stderr)
        return 2

    if args.limit and args.limit > 0:
        secrets = secrets[: args.limit]

    rng = random.Random(args.seed)
    corpus_set = set(corpus)
    skipped = 0
    results: List[GameResult] = []

    iterator = secrets if args.no_progress else tqdm.tqdm(secrets, desc="Simulating", unit="game")
    for secret in iterator:
        if secret not in corpus_set:
            skipped += 1
            continue
        results.append(
            simulate_game(
                secret=secret,
                corpus=corpus,
                max_turns=args.max_turns,
                sample_size=args.sample_size,
                workers=args.workers,
                rng=rng,
            )
        )

    if skipped:
        print(f"Skipped {skipped} secrets not in the corpus.")

    print(summarize(results))

    if args.plot:
        try:
            plot_results(results=results, max_turns=args.max_turns, out_path=args.plot)
            print(f"Wrote plot: {args.plot}")
        except ModuleNotFoundError as e:
            print(f"Plot requested but missing dependency: {e}. Install matplotlib to use --plot.", file=sys.stderr)
            return 2

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
