"""Standard normal quantile function (Wichura AS 241 with Halley refinement)."""

from __future__ import annotations

import math

import numpy as np
from scipy.special import ndtr

_SPLIT1 = 0.425
_SPLIT2 = 5.0
_CONST1 = 0.180625
_CONST2 = 1.6

# Coefficients in ascending powers of r.
_A = np.array([
    3.3871328727963666080e0, 1.3314166789178437745e2,
    1.9715909503065514427e3, 1.3731693765509461125e4,
    4.5921953931549871457e4, 6.7265770927008700853e4,
    3.3430575583588128105e4, 2.5090809287301226727e3,
])
_B = np.array([
    1.0, 4.2313330701600911252e1,
    6.8718700749205790830e2, 5.3941960214247511077e3,
    2.1213794301586595867e4, 3.9307895800092710610e4,
    2.8729085735721942674e4, 5.2264952788528545610e3,
])
_C = np.array([
    1.42343711074968357734e0, 4.63033784615654529590e0,
    5.76949722146069140550e0, 3.64784832476320460504e0,
    1.27045825245236838258e0, 2.41780725177450611770e-1,
    2.27238449892691845833e-2, 7.74545014278341407640e-4,
])
_D = np.array([
    1.0, 2.05319162663775882187e0,
    1.67638483018380384940e0, 6.89767334985100004550e-1,
    1.48103976427480074590e-1, 1.51986665636164571966e-2,
    5.47593808499534494600e-4, 1.05075007164441684324e-9,
])
_E = np.array([
    6.65790464350110377720e0, 5.46378491116411436990e0,
    1.78482653991729133580e0, 2.96560571828504891230e-1,
    2.65321895265761230930e-2, 1.24266094738807843860e-3,
    2.71155556874348757815e-5, 2.01033439929228813265e-7,
])
_F = np.array([
    1.0, 5.99832206555887937690e-1,
    1.36929880922735805310e-1, 1.48753612908506148525e-2,
    7.86869131145613259100e-4, 1.84631831751005468180e-5,
    1.42151175831644588870e-7, 2.04426310338993978564e-15,
])

_SQRT_2PI = math.sqrt(2.0 * math.pi)


def _rational(num: np.ndarray, den: np.ndarray, r: float) -> float:
    return float(np.polyval(num[::-1], r) / np.polyval(den[::-1], r))


def _as241(p: float) -> float:
    q = p - 0.5
    if abs(q) <= _SPLIT1:
        r = _CONST1 - q * q
        return q * _rational(_A, _B, r)

    r = math.sqrt(-math.log(p if q < 0 else 1.0 - p))
    if r <= _SPLIT2:
        val = _rational(_C, _D, r - _CONST2)
    else:
        val = _rational(_E, _F, r - _SPLIT2)
    return -val if q < 0 else val


def normal_quantile(p: float) -> float:
    """Inverse of the standard normal CDF.

    Args:
        p: Probability

    Returns:
        z such that P(Z <= z) = p, or NaN when p is not in (0, 1)
    """
    p = float(p)
    if not (0.0 < p < 1.0):
        return float("nan")

    x = _as241(p)

    # One Halley step against the exact CDF.
    e = float(ndtr(x)) - p
    u = e * _SQRT_2PI * math.exp(0.5 * x * x)
    return x - u / (1.0 + 0.5 * x * u)


def z_value(confidence: float) -> float:
    """Two-sided critical value for a confidence level.

    Args:
        confidence: Confidence level as a fraction, e.g. 0.95

    Returns:
        Quantile at (1 + confidence) / 2, or NaN when confidence is not in (0, 1)
    """
    confidence = float(confidence)
    if not (0.0 < confidence < 1.0):
        return float("nan")
    return normal_quantile((1.0 + confidence) / 2.0)
