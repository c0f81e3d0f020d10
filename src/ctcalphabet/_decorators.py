"""Logging decorator for alphabet constructors."""

import functools
import logging
import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .alphabet import Alphabet

log = logging.getLogger("ctcalphabet.alphabet")


def log_construction(func: Callable[..., "Alphabet"]) -> Callable[..., "Alphabet"]:
    """Log the size, space label and build time of the table ``func`` returns."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> "Alphabet":
        start = time.perf_counter()
        try:
            alphabet = func(*args, **kwargs)
        except Exception as e:
            elapsed = time.perf_counter() - start
            log.debug(f"{func.__name__} failed after {elapsed * 1000:.2f} ms: {e}")
            raise
        elapsed = time.perf_counter() - start
        log.info(
            f"{func.__name__}: {alphabet.size} labels, "
            f"space label {alphabet.space_label}, "
            f"strategy {alphabet.strategy.name} ({elapsed * 1000:.2f} ms)"
        )
        return alphabet

    return wrapper
