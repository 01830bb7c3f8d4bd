"""
mask.py

Nerdle feedback masks: scoring a guess against the answer, parsing the
colours an operator types in, and checking which equations are still
consistent with them.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Set, Tuple

CORRECT, PRESENT, ABSENT = 2, 1, 0

Pattern = Tuple[int, ...]  # each int in {0,1,2}, one per slot
Entry = Tuple[int, str]  # (position, character)

# Green is correct, purple is present elsewhere, black is not in the answer.
MASK_CODES = {
    **{ch: CORRECT for ch in "2CcGg"},
    **{ch: PRESENT for ch in "1IiPp"},
    **{ch: ABSENT for ch in "0NnBbRr "},
}

_ALIASES = str.maketrans({"s": "²", "c": "³"})


class MaskParseError(ValueError):
    """Typed mask that can't be read. The session stays where it was."""


@dataclass(frozen=True)
class Mask:
    """Feedback for one guess, split into correct / present / absent (position, char) pairs."""

    correct: FrozenSet[Entry] = frozenset()
    present: FrozenSet[Entry] = frozenset()
    absent: FrozenSet[Entry] = frozenset()

    def __len__(self) -> int:
        return len(self.correct) + len(self.present) + len(self.absent)

    @property
    def pattern(self) -> Pattern:
        res = [ABSENT] * len(self)
        for idx, _ in self.correct:
            res[idx] = CORRECT
        for idx, _ in self.present:
            res[idx] = PRESENT
        return tuple(res)

    @property
    def guess(self) -> str:
        chars = [""] * len(self)
        for idx, ch in self.correct | self.present | self.absent:
            chars[idx] = ch
        return "".join(chars)

    @property
    def is_solved(self) -> bool:
        return bool(self.correct) and not self.present and not self.absent

    @classmethod
    def from_pattern(cls, guess: str, pattern: Iterable[int]) -> "Mask":
        buckets: dict = {CORRECT: set(), PRESENT: set(), ABSENT: set()}
        pattern = tuple(pattern)
        if len(pattern) != len(guess):
            raise ValueError(f"pattern has {len(pattern)} entries but guess has {len(guess)} characters")
        for idx, (ch, p) in enumerate(zip(guess, pattern)):
            buckets[p].add((idx, ch))
        return cls(frozenset(buckets[CORRECT]), frozenset(buckets[PRESENT]), frozenset(buckets[ABSENT]))


# normalize_guess swaps the ASCII aliases s/c for the ²/³ glyphs
def normalize_guess(text: str) -> str:
    return text.strip().translate(_ALIASES)


def parse_mask(guess: str, text: str) -> Mask:
    """
    Parse typed feedback like "GPBBG" or "21002" for the given guess.

    Correct: 2 C c G g. Present elsewhere: 1 I i P p. Absent: 0 N n B b R r and space.
    """
    guess = normalize_guess(guess)
    if len(text) != len(guess):
        raise MaskParseError(
            f"Mask length doesn't match guess length! mask: {text!r} ({len(text)}) guess: {guess!r} ({len(guess)})"
        )
    pattern = []
    for idx, code in enumerate(text):
        if code not in MASK_CODES:
            raise MaskParseError(f"Unrecognized mask code {code!r} at position {idx} in {text!r}")
        pattern.append(MASK_CODES[code])
    return Mask.from_pattern(guess, pattern)


# compute Nerdle feedback for guess given the answer
def score(guess: str, truth: str) -> Mask:
    """
    Handles repeated characters: each occurrence in the answer can only
    colour one guess character, greens first, then left to right.
    """
    if len(guess) != len(truth):
        raise ValueError(f"cannot score {guess!r} against {truth!r}: lengths differ")

    correct: Set[Entry] = set()
    present: Set[Entry] = set()
    absent: Set[Entry] = set()

    # first pass: greens, and count what's left over in the answer
    truth_counts: Counter = Counter()
    for idx, (g, t) in enumerate(zip(guess, truth)):
        if g == t:
            correct.add((idx, g))
        else:
            truth_counts[t] += 1

    # second pass: everything else, consuming leftovers
    for idx, g in enumerate(guess):
        if (idx, g) in correct:
            continue
        if truth_counts[g] > 0:
            truth_counts[g] -= 1
            present.add((idx, g))
        else:
            absent.add((idx, g))

    return Mask(frozenset(correct), frozenset(present), frozenset(absent))


def matches(candidate: str, mask: Mask) -> bool:
    """True if candidate could be the answer given this feedback."""
    if len(candidate) != len(mask):
        return False

    for idx, ch in mask.correct:
        if candidate[idx] != ch:
            return False
    for idx, ch in mask.present:
        if candidate[idx] == ch:
            return False
    for idx, ch in mask.absent:
        if candidate[idx] == ch:
            return False

    claimed = {idx for idx, _ in mask.correct}
    counts = Counter(ch for idx, ch in enumerate(candidate) if idx not in claimed)

    # every purple needs its own occurrence
    for _, ch in mask.present:
        if counts[ch] == 0:
            return False
        counts[ch] -= 1
    # a black means there are no more beyond the greens and purples
    for _, ch in mask.absent:
        if counts[ch] > 0:
            return False

    return True


def filter_candidates(candidates: Iterable[str], mask: Mask) -> List[str]:
    return [c for c in candidates if matches(c, mask)]
