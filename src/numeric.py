"""
Numeric primitives: normal distribution approximations and random variates

The variate generators take an injectable uniform source, any callable that
accepts a `size` and returns that many uniform(0, 1) floats as an array
(e.g. `np.random.default_rng(seed).random`). They are vectorized over `size`
so the Monte Carlo loops run in numpy rather than in Python.
"""

import math

import numpy as np

from .errors import InvalidParameterError


# Abramowitz & Stegun 7.1.26
_ERF_A = (0.254829592, -0.284496736, 1.421413741, -1.453152027, 1.061405429)
_ERF_P = 0.3275911

# Acklam's rational approximation of the normal quantile
_Q_A = (-3.969683028665376e+01, 2.209460984245205e+02, -2.759285104469687e+02,
        1.383577518672690e+02, -3.066479806614716e+01, 2.506628277459239e+00)
_Q_B = (-5.447609879822406e+01, 1.615858368580409e+02, -1.556989798598866e+02,
        6.680131188771972e+01, -1.328068155288572e+01)
_Q_C = (-7.784894002430293e-03, -3.223964580411365e-01, -2.400758277161838e+00,
        -2.549732539343734e+00, 4.374664141464968e+00, 2.938163982698783e+00)
_Q_D = (7.784695709041462e-03, 3.224671290700398e-01, 2.445134137142996e+00,
        3.754408661907416e+00)
_Q_LOW = 0.02425


def erf(x):
    sign = 1.0 if x >= 0 else -1.0
    x = abs(x)
    a1, a2, a3, a4, a5 = _ERF_A
    t = 1.0 / (1.0 + _ERF_P * x)
    y = 1.0 - (((((a5 * t + a4) * t) + a3) * t + a2) * t + a1) * t * math.exp(-x * x)
    return sign * y


def normal_cdf(x):
    """Standard normal CDF, absolute error below 1e-7."""
    return 0.5 * (1.0 + erf(x / math.sqrt(2.0)))


def inverse_normal(p):
    """
    Standard normal quantile: z such that normal_cdf(z) == p

    Args:
        p: Probability, strictly between 0 and 1

    Returns:
        z-score (relative error ~1e-9)
    """
    if not (0.0 < p < 1.0):
        raise InvalidParameterError(f"p must be in (0, 1), got {p}")

    if p > 0.5:
        return -inverse_normal(1.0 - p)

    if p < _Q_LOW:
        c1, c2, c3, c4, c5, c6 = _Q_C
        d1, d2, d3, d4 = _Q_D
        q = math.sqrt(-2.0 * math.log(p))
        return ((((((c1 * q + c2) * q + c3) * q + c4) * q + c5) * q + c6)
                / ((((d1 * q + d2) * q + d3) * q + d4) * q + 1.0))

    a1, a2, a3, a4, a5, a6 = _Q_A
    b1, b2, b3, b4, b5 = _Q_B
    q = p - 0.5
    r = q * q
    return (((((((a1 * r + a2) * r + a3) * r + a4) * r + a5) * r + a6) * q)
            / (((((b1 * r + b2) * r + b3) * r + b4) * r + b5) * r + 1.0))


def default_uniform(seed=None):
    """Uniform(0, 1) source backed by a numpy Generator."""
    return np.random.default_rng(seed).random


def _draw_uniform(uniform, n):
    return np.asarray(uniform(n), dtype=float)


def standard_normal(size=None, uniform=None):
    """Standard normal variates via the Box-Muller transform."""
    uniform = uniform or default_uniform()
    n = 1 if size is None else int(size)

    # 1 - U keeps the log argument in (0, 1]
    u1 = 1.0 - _draw_uniform(uniform, n)
    u2 = _draw_uniform(uniform, n)
    z = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)

    return float(z[0]) if size is None else z


def _marsaglia_tsang(shape, n, uniform):
    d = shape - 1.0 / 3.0
    c = 1.0 / math.sqrt(9.0 * d)

    out = np.empty(n)
    pending = np.arange(n)

    while pending.size:
        m = pending.size
        x = standard_normal(m, uniform)
        v = (1.0 + c * x) ** 3
        u = _draw_uniform(uniform, m)

        positive = v > 0
        with np.errstate(divide='ignore', invalid='ignore'):
            log_v = np.log(np.where(positive, v, 1.0))
            log_u = np.log(u)
        squeeze = u < 1.0 - 0.0331 * x ** 4
        accept = positive & (squeeze | (log_u < 0.5 * x * x + d * (1.0 - v + log_v)))

        out[pending[accept]] = d * v[accept]
        pending = pending[~accept]

    return out


def gamma_random(shape, size=None, uniform=None):
    """
    Gamma(shape, 1) variates by Marsaglia-Tsang

    Shapes below 1 are drawn at shape + 1 and rescaled by U^(1/shape).
    """
    if not shape > 0:
        raise InvalidParameterError(f"Gamma shape must be > 0, got {shape}")

    uniform = uniform or default_uniform()
    n = 1 if size is None else int(size)

    if shape < 1:
        g = _marsaglia_tsang(shape + 1.0, n, uniform)
        g = g * _draw_uniform(uniform, n) ** (1.0 / shape)
    else:
        g = _marsaglia_tsang(shape, n, uniform)

    return float(g[0]) if size is None else g


def beta_random(alpha, beta, size=None, uniform=None):
    """Beta(alpha, beta) variates as X / (X + Y) with X, Y gamma draws."""
    if not (alpha > 0 and beta > 0):
        raise InvalidParameterError(
            f"Beta shapes must be > 0, got alpha={alpha}, beta={beta}"
        )

    uniform = uniform or default_uniform()
    x = gamma_random(alpha, size, uniform)
    y = gamma_random(beta, size, uniform)
    return x / (x + y)
