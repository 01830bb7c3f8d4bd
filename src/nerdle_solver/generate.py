"""
generate.py

Enumerate every valid Nerdle equation of a given length.

The left side is built one token at a time by depth-first search over an
explicit stack. Every frame carries the exact running value of its prefix, so
checking whether "=" and the answer would fill the remaining slots costs a
comparison rather than a parse. Prefixes that pass are confirmed with
evaluate(), which applies the 32-bit limits, before they are emitted.
"""

from __future__ import annotations

from concurrent.futures import ProcessPoolExecutor
from fractions import Fraction
from itertools import repeat
from typing import Iterator, List, Optional, Tuple, Union

from .evaluate import EvalError, Number, evaluate

DIGITS = "0123456789"
OPERATORS = "*+-/"
POWERS = "²³"

# code point order, so the output comes out sorted
ALPHABET = "()*+-/0123456789=²³"

# what the last token of a prefix was
_OPERAND = "operand"  # start, after an operator, after "(": a number or "(" must follow
_NUMBER = "number"
_POWER = "power"
_CLOSE = "close"
_EQUALS = "equals"  # pseudo-frame: a prefix whose value fits, waiting to be confirmed

# running value of one parenthesis level:
#   (sum of finished terms, signed product of the current term's finished
#    factors, whether the current factor divides, current factor or None)
Level = Tuple[Number, Number, bool, Optional[Number]]

# (prefix, last, depth, digit run, levels from outermost to innermost)
Frame = Tuple[str, str, int, int, Tuple[Level, ...]]

_START: Level = (0, 1, False, None)

# parallel runs hand out the subtrees below prefixes this long
_SPLIT_AT = 3


def max_digit_run(slot_count: int) -> int:
    # a longer number leaves no room for "=" and its own value
    return max(1, (slot_count - 2) // 2)


def _exact(v: Number) -> Number:
    if isinstance(v, Fraction) and v.denominator == 1:
        return v.numerator
    return v


def _term(level: Level) -> Number:
    # raises ZeroDivisionError when the current factor is a zero divisor
    _, coef, divide, factor = level
    if not divide:
        return _exact(coef * factor)
    if isinstance(coef, int) and isinstance(factor, int) and coef % factor == 0:
        return coef // factor
    return _exact(Fraction(coef) / factor)


def _fits(value: Number, width: int) -> bool:
    """Whether value is a non-negative whole number exactly width digits long."""
    if not isinstance(value, int) or value < 0 or width < 1:
        return False
    if width == 1:
        return value < 10
    return 10 ** (width - 1) <= value < 10 ** width


def _close(prefix: str, slot_count: int) -> Optional[str]:
    try:
        value = evaluate(prefix)
    except EvalError:
        return None
    if value < 0:
        # Nerdle never has negative answers
        return None
    rhs = str(value)
    if len(prefix) + 1 + len(rhs) != slot_count:
        return None
    return f"{prefix}={rhs}"


def _push(out: List[Frame], child: Frame, slot_count: int) -> None:
    prefix, last, depth, _, levels = child
    # shortest finish: a number if one is due, every ")", then "=" and one digit
    need = len(prefix) + depth + 2 + (1 if last == _OPERAND else 0)
    if need > slot_count:
        return
    if len(prefix) < slot_count - 2:
        out.append(child)
        return
    # nothing fits after this token but "=" and a single digit
    total = levels[-1][0]
    try:
        value = _exact(total + _term(levels[-1]))
    except ZeroDivisionError:
        return
    if _fits(value, 1):
        out.append((prefix, _EQUALS, 0, 0, ()))


def _extensions(frame: Frame, slot_count: int, max_run: int, extended: bool) -> List[Frame]:
    prefix, last, depth, run, levels = frame
    index = len(prefix)
    ends_operand = last in (_NUMBER, _POWER, _CLOSE)
    total, coef, divide, factor = levels[-1]
    outer = levels[:-1]

    term: Number = 0
    if ends_operand:
        try:
            term = _term(levels[-1])
        except ZeroDivisionError:
            # every way of going on divides by this zero
            return []

    out: List[Frame] = []
    for token in ALPHABET:
        if token in DIGITS:
            d = ord(token) - 48
            if last == _NUMBER and run < max_run:
                level = (total, coef, divide, factor * 10 + d)
                _push(out, (prefix + token, _NUMBER, depth, run + 1, outer + (level,)), slot_count)
            elif last == _OPERAND and d != 0:
                level = (total, coef, divide, d)
                _push(out, (prefix + token, _NUMBER, depth, 1, outer + (level,)), slot_count)
        elif token in OPERATORS:
            if not ends_operand:
                continue
            if token == "+":
                level = (_exact(total + term), 1, False, None)
            elif token == "-":
                level = (_exact(total + term), -1, False, None)
            else:
                level = (total, term, token == "/", None)
            _push(out, (prefix + token, _OPERAND, depth, 0, outer + (level,)), slot_count)
        elif token == "(":
            if extended and last == _OPERAND:
                _push(out, (prefix + token, _OPERAND, depth + 1, 0, levels + (_START,)), slot_count)
        elif token == ")":
            if extended and ends_operand and depth > 0:
                o_total, o_coef, o_divide, _ = outer[-1]
                level = (o_total, o_coef, o_divide, _exact(total + term))
                _push(out, (prefix + token, _CLOSE, depth - 1, 0, outer[:-1] + (level,)), slot_count)
        elif token == "=":
            if ends_operand and depth == 0 and _fits(_exact(total + term), slot_count - index - 1):
                out.append((prefix, _EQUALS, 0, 0, ()))
        elif token in POWERS:
            # only straight after a number or a closing paren, never chained
            if extended and last in (_NUMBER, _CLOSE):
                level = (total, coef, divide, factor ** (2 if token == "²" else 3))
                _push(out, (prefix + token, _POWER, depth, 0, outer + (level,)), slot_count)
    return out


def _walk(frame: Frame, slot_count: int, extended: bool, stop_at: int = 0) -> Iterator[Union[str, Frame]]:
    # yields equations in order; with stop_at, frames that long come back unexpanded
    max_run = max_digit_run(slot_count)
    stack: List[Frame] = [frame]
    while stack:
        frame = stack.pop()
        if frame[1] == _EQUALS:
            equation = _close(frame[0], slot_count)
            if equation is not None:
                yield equation
        elif stop_at and len(frame[0]) >= stop_at:
            yield frame
        else:
            stack.extend(reversed(_extensions(frame, slot_count, max_run, extended)))


def _expand(frame: Frame, slot_count: int, extended: bool) -> List[str]:
    return list(_walk(frame, slot_count, extended))


def generate(slot_count: int, extended: bool = False, workers: int = 1) -> Iterator[str]:
    """
    Yield every valid equation exactly slot_count characters long.

    extended enables parentheses, squares and cubes (Maxi Nerdle). Results
    are produced lazily in sorted order; calling again starts over. With
    workers > 1 the subtrees below short prefixes are searched in a process
    pool and handed back in the same order.
    """
    if slot_count < 3:
        return

    # each call owns its stack; frames are immutable so nothing is shared
    root: Frame = ("", _OPERAND, 0, 0, (_START,))
    if workers <= 1:
        yield from _walk(root, slot_count, extended)
        return

    items = list(_walk(root, slot_count, extended, stop_at=_SPLIT_AT))
    seeds = [item for item in items if not isinstance(item, str)]
    executor = ProcessPoolExecutor(max_workers=workers)
    try:
        results = executor.map(_expand, seeds, repeat(slot_count), repeat(extended))
        for item in items:
            if isinstance(item, str):
                yield item
            else:
                yield from next(results)
    finally:
        executor.shutdown(cancel_futures=True)
