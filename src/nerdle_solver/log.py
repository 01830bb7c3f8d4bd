"""Console log callbacks shared by the command line tools."""

from __future__ import annotations

import time
from typing import Callable, Tuple

LogFn = Callable[[str], None]


def make_loggers(verbose: bool, debug: bool) -> Tuple[LogFn, LogFn]:
    """Return (log, log_debug) closures stamped with seconds since creation.

    --debug implies --verbose, same as the other CLIs.
    """
    verbose = bool(verbose or debug)
    start_t = time.time()

    def log(msg: str) -> None:
        if not verbose:
            return
        dt = time.time() - start_t
        print(f"[{dt:7.2f}s] {msg}")

    def log_debug(msg: str) -> None:
        if not debug:
            return
        dt = time.time() - start_t
        print(f"[{dt:7.2f}s] DEBUG {msg}")

    return log, log_debug
