"""Nerdle equation generator and entropy solver."""

from .corpus import load_equations, write_equations
from .evaluate import (
    ArithmeticOverflow,
    EquationMismatch,
    EquationSyntaxError,
    EvalError,
    NonIntegerResult,
    check_equation,
    evaluate,
)
from .generate import generate
from .mask import Mask, MaskParseError, filter_candidates, matches, parse_mask, score
from .solver import (
    NerdleEntropySolver,
    SessionState,
    SessionStateError,
    best_guess,
    entropy,
)

__all__ = [
    "ArithmeticOverflow",
    "EquationMismatch",
    "EquationSyntaxError",
    "EvalError",
    "Mask",
    "MaskParseError",
    "NerdleEntropySolver",
    "NonIntegerResult",
    "SessionState",
    "SessionStateError",
    "best_guess",
    "check_equation",
    "entropy",
    "evaluate",
    "filter_candidates",
    "generate",
    "load_equations",
    "matches",
    "parse_mask",
    "score",
    "write_equations",
]
