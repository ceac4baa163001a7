"""Error types and numeric helpers shared by the analytics engine.

The engine performs no I/O, so there is no retry logic here: every error is
local to a single computation and is raised straight back to the caller.
"""

import logging

logger = logging.getLogger("options_analytics.error_handling")


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safely divide two numbers, returning default on division by zero.

    Args:
        numerator: Numerator value
        denominator: Denominator value
        default: Value to return if denominator is zero

    Returns:
        Result of division, or default if denominator is zero

    Example:
        >>> safe_divide(10, 2)
        5.0
        >>> safe_divide(10, 0)
        0.0
    """
    if denominator == 0:
        logger.debug("Division by zero: %s/%s, returning %s", numerator, denominator, default)
        return default
    return numerator / denominator


def percent_change(new: float, old: float) -> float | None:
    """Percentage change from old to new, relative to |old|.

    Returns:
        Change in percent (12.5 = +12.5%), or None when old is zero and the
        change is undefined
    """
    if old == 0:
        return None
    return (new - old) / abs(old) * 100


class AnalyticsError(Exception):
    """Base exception for analytics engine errors."""
    pass


class DataValidationError(ValueError, AnalyticsError):
    """Raised when an input record fails validation.

    Inherits from ValueError so callers can treat it as bad input.
    """
    pass


class InsufficientDataError(AnalyticsError):
    """Raised when a computation needs data that was not supplied."""
    pass


class PortfolioMismatchError(ValueError, AnalyticsError):
    """Raised when two portfolio snapshots are not positionally aligned."""
    pass


class ConfigurationError(AnalyticsError):
    """Raised when configuration is invalid."""
    pass
