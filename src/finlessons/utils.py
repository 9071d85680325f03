"""
utils.py
--------
Logging, timing decorators, and shared helper functions.
"""

import functools
import logging
import math
import time

from .config import CONFIG


def get_logger(name: str, level: str = None) -> logging.Logger:
    """
    Return a named logger writing to stdout.

    Parameters
    ----------
    name  : Logger name (typically the module __name__).
    level : Logging level string ("DEBUG", "INFO", "WARNING", "ERROR").
            Defaults to ``CONFIG.log_level``.

    Returns
    -------
    logging.Logger
    """
    logger = logging.getLogger(name)

    if logger.handlers:          # avoid duplicate handlers on re-import
        return logger

    level = level or CONFIG.log_level
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    return logger


def timeit(func):
    """Decorator that logs the execution time of any function."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        t0 = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - t0
        logger.debug("%s completed in %.3f s", func.__qualname__, elapsed)
        return result
    return wrapper


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp value to [lo, hi] range."""
    return max(lo, min(value, hi))


def safe_float(value: float, fallback: float) -> float:
    """Return ``value`` as float, or ``fallback`` if it is NaN or infinite."""
    value = float(value)
    return value if math.isfinite(value) else fallback


def format_currency(value: float, decimals: int = 2) -> str:
    """Format a float as a USD currency string."""
    return f"${value:,.{decimals}f}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a decimal fraction (0.2) as a percentage string (20.0%)."""
    return f"{value * 100:.{decimals}f}%"


def clock_label(decimal_hours: float) -> str:
    """Convert decimal hours (9.75) into an ``HH:MM`` label (09:45)."""
    hours = int(math.floor(decimal_hours))
    minutes = int(math.floor((decimal_hours - hours) * 60))
    return f"{hours:02d}:{minutes:02d}"
