"""
Error taxonomy for the decision engine
"""

import warnings


class InvalidParameterError(ValueError):
    """Out-of-domain configuration (alpha/power outside (0, 1), negative costs, ...)."""


class InvalidSampleError(ValueError):
    """Observed counts that cannot be analyzed (empty arm, conversions > total)."""


class DegenerateResultWarning(UserWarning):
    """A statistic is undefined for the inputs and a sentinel was returned instead."""


def warn_degenerate(flag, message):
    """Emit a DegenerateResultWarning and return the flag for the result's record."""
    warnings.warn(f"{flag}: {message}", DegenerateResultWarning, stacklevel=3)
    return flag
