"""
Bundled Lessons
===============
Every lesson module shipped with the package and a helper that registers
them all in a fresh registry.
"""

from typing import Optional

from ..core.registry import LessonRegistry
from ..utils import get_logger
from . import (
    black_scholes_time, expected_shortfall, fast_fourier_transform, fft_finance,
    hurst_exponent, kelly_criterion, vwap,
)

logger = get_logger(__name__)

ALL_LESSONS = (
    black_scholes_time.MODULE,
    kelly_criterion.MODULE,
    expected_shortfall.MODULE,
    vwap.MODULE,
    hurst_exponent.MODULE,
    fast_fourier_transform.MODULE,
    fft_finance.MODULE,
)


def build_default_registry(registry: Optional[LessonRegistry] = None) -> LessonRegistry:
    """
    Register every bundled lesson.

    Parameters:
        registry: Registry to fill; a new one is created when omitted

    Returns:
        The populated registry
    """
    registry = registry if registry is not None else LessonRegistry()
    for module in ALL_LESSONS:
        registry.register(module)
    logger.info("Default registry ready with %d lessons", len(registry))
    return registry


__all__ = ["ALL_LESSONS", "build_default_registry"]
