"""
solver.py

Picks Nerdle guesses by expected information gain and tracks the candidate
equations still consistent with the feedback received so far.
"""

from __future__ import annotations

import enum
import math
import random
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import tqdm

from .evaluate import check_equation
from .log import LogFn
from .mask import Mask, filter_candidates, matches, normalize_guess, parse_mask, score

# corpora bigger than this are ranked on a random sample of this size
DEFAULT_SAMPLE_SIZE = 500

# guesses per task handed to a worker process
_BATCH_SIZE = 64

# set once per worker process by the pool initializer, read-only afterwards
_WORKER_CORPUS: List[str] = []


# score a guess against the corpus
# this is the core of the entropy maximization strategy
# for each feedback mask m the guess can produce, count(m) answers give m and
# each leaves |{c : matches(c, m)}| candidates, so the guess is worth
#   sum(count(m) * -log2(remaining(m)))
# the textbook formula also subtracts log2(len(corpus)), a constant that
# doesn't change which guess wins, so it's left out
def entropy(guess: str, corpus: Sequence[str]) -> float:
    buckets: Dict[Mask, int] = defaultdict(int)
    for truth in corpus:
        buckets[score(guess, truth)] += 1

    t = 0.0
    for mask, count in buckets.items():
        remaining = sum(1 for c in corpus if matches(c, mask))
        t += count * -math.log2(remaining)
    return t


def sample_corpus(corpus: Sequence[str], sample_size: int, rng: Optional[random.Random] = None) -> List[str]:
    """Uniform sample without replacement, or the whole corpus if it's small enough."""
    if sample_size <= 0 or len(corpus) <= sample_size:
        return list(corpus)
    rng = rng if rng is not None else random.Random()
    return rng.sample(list(corpus), sample_size)


def _init_worker(corpus: List[str]) -> None:
    global _WORKER_CORPUS
    _WORKER_CORPUS = corpus


def _score_batch(start: int, guesses: List[str]) -> List[Tuple[int, float]]:
    return [(start + offset, entropy(g, _WORKER_CORPUS)) for offset, g in enumerate(guesses)]


def _score_serial(pool: List[str], show_progress: bool) -> List[Tuple[int, float]]:
    iterator = tqdm.tqdm(pool, desc="Scoring guesses", unit="eq") if show_progress else pool
    return [(i, entropy(g, pool)) for i, g in enumerate(iterator)]


def _score_parallel(pool: List[str], workers: int, show_progress: bool) -> List[Tuple[int, float]]:
    scored: List[Tuple[int, float]] = []
    with ProcessPoolExecutor(max_workers=workers, initializer=_init_worker, initargs=(pool,)) as executor:
        futures = [
            executor.submit(_score_batch, start, pool[start:start + _BATCH_SIZE])
            for start in range(0, len(pool), _BATCH_SIZE)
        ]
        bar = tqdm.tqdm(total=len(pool), desc="Scoring guesses", unit="eq", disable=not show_progress)
        # completion order is arbitrary; the reduction below doesn't care
        for future in as_completed(futures):
            batch = future.result()
            scored.extend(batch)
            bar.update(len(batch))
        bar.close()
    return scored


def best_guess(
    corpus: Sequence[str],
    *,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    rng: Optional[random.Random] = None,
    workers: int = 1,
    show_progress: bool = False,
) -> Tuple[str, float]:
    """
    Return (guess, score) for the highest scoring guess in the corpus.

    Corpora larger than sample_size are ranked on a fresh random sample each
    call, so repeated calls may disagree. Ties go to the guess that comes
    later in the (sampled) corpus.
    """
    if not corpus:
        raise ValueError("cannot pick a guess from an empty corpus")

    pool = sample_corpus(corpus, sample_size, rng)
    if workers > 1 and len(pool) > _BATCH_SIZE:
        scored = _score_parallel(pool, workers, show_progress)
    else:
        scored = _score_serial(pool, show_progress)

    best_index, best_score = max(scored, key=lambda item: (item[1], item[0]))
    return pool[best_index], best_score


class SessionState(enum.Enum):
    AWAITING_GUESS = "awaiting_guess"
    AWAITING_FEEDBACK = "awaiting_feedback"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


class SessionStateError(RuntimeError):
    """Operation not allowed in the session's current state."""


# solver session for one Nerdle game using entropy maximization
class NerdleEntropySolver:
    def __init__(
        self,
        corpus: Iterable[str],
        *,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        workers: int = 1,
        rng: Optional[random.Random] = None,
        log: Optional[LogFn] = None,
    ):
        self.candidates: List[str] = list(corpus)
        self.slot_count: Optional[int] = len(self.candidates[0]) if self.candidates else None
        self.sample_size = sample_size
        self.workers = workers
        self.rng = rng if rng is not None else random.Random()
        self.pending_guess: Optional[str] = None
        self.history: List[Tuple[str, Mask]] = []
        self._log = log
        self.state = self._settle()

    def _debug(self, msg: str) -> None:
        if self._log is not None:
            self._log(msg)

    def _settle(self) -> SessionState:
        if not self.candidates:
            return SessionState.EXHAUSTED
        if len(self.candidates) == 1:
            return SessionState.CONVERGED
        return SessionState.AWAITING_GUESS

    def _require(self, state: SessionState) -> None:
        if self.state is not state:
            raise SessionStateError(f"session is {self.state.value}, expected {state.value}")

    @property
    def answer(self) -> Optional[str]:
        return self.candidates[0] if self.state is SessionState.CONVERGED else None

    def suggest(self, show_progress: bool = False) -> Tuple[str, float]:
        if not self.candidates:
            raise SessionStateError("no candidates left to suggest from")
        guess, h = best_guess(
            self.candidates,
            sample_size=self.sample_size,
            rng=self.rng,
            workers=self.workers,
            show_progress=show_progress,
        )
        self._debug(f"solver: best guess over {len(self.candidates)} candidates is {guess} ({h:.4f})")
        return guess, h

    def propose(self, guess: Optional[str] = None) -> str:
        """
        Record the guess that was played. With no guess, plays the suggestion.

        Raises ValueError (EvalError for a false equation) if the guess isn't
        playable; the session stays awaiting a guess.
        """
        self._require(SessionState.AWAITING_GUESS)
        if guess is None or not guess.strip():
            guess = self.suggest()[0]
        guess = normalize_guess(guess)
        if len(guess) != self.slot_count:
            raise ValueError(f"Guess must be exactly {self.slot_count} characters, got {len(guess)}.")
        check_equation(guess)

        self.pending_guess = guess
        self.state = SessionState.AWAITING_FEEDBACK
        return guess

    def feedback(self, mask_text: str) -> SessionState:
        """Apply typed feedback for the pending guess. A bad mask raises MaskParseError and changes nothing."""
        self._require(SessionState.AWAITING_FEEDBACK)
        mask = parse_mask(self.pending_guess, mask_text)
        return self._apply(mask)

    def apply_mask(self, mask: Mask) -> SessionState:
        self._require(SessionState.AWAITING_FEEDBACK)
        if mask.guess != self.pending_guess:
            raise ValueError(f"mask is for {mask.guess!r}, pending guess is {self.pending_guess!r}")
        return self._apply(mask)

    def _apply(self, mask: Mask) -> SessionState:
        before = len(self.candidates)
        self.candidates = filter_candidates(self.candidates, mask)
        self.history.append((self.pending_guess, mask))
        self.pending_guess = None
        self.state = self._settle()
        self._debug(f"solver: filtered candidates {before} -> {len(self.candidates)} ({self.state.value})")
        return self.state
