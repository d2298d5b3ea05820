"""Standard normal distribution functions.

References:
    George Marsaglia (2004). Evaluating the Normal Distribution.
    Journal of Statistical Software 11 (4).

    Michael J. Wichura (1988). Algorithm AS241: The Percentage Points of
    the Normal Distribution. Applied Statistics 37 (3), 477-484.
"""

import math

# log(sqrt(2 * pi))
_LOG_SQRT_2PI = 0.91893853320467274178

_SPLIT1 = 0.425
_SPLIT2 = 5.0
_CONST1 = 0.180625
_CONST2 = 1.6

# Coefficients for p close to 0.5
_A = (
    3.3871328727963666080,
    1.3314166789178437745e2,
    1.9715909503065514427e3,
    1.3731693765509461125e4,
    4.5921953931549871457e4,
    6.7265770927008700853e4,
    3.3430575583588128105e4,
    2.5090809287301226727e3,
)
_B = (
    1.0,
    4.2313330701600911252e1,
    6.8718700749205790830e2,
    5.3941960214247511077e3,
    2.1213794301586595867e4,
    3.9307895800092710610e4,
    2.8729085735721942674e4,
    5.2264952788528545610e3,
)

# Coefficients for p neither close to 0.5 nor extreme
_C = (
    1.42343711074968357734,
    4.63033784615654529590,
    5.76949722146069140550,
    3.64784832476320460504,
    1.27045825245236838258,
    2.41780725177450611770e-1,
    2.27238449892691845833e-2,
    7.74545014278341407640e-4,
)
_D = (
    1.0,
    2.05319162663775882187,
    1.67638483018380384940,
    6.89767334985100004550e-1,
    1.48103976427480074590e-1,
    1.51986665636164571966e-2,
    5.47593808499534494600e-4,
    1.05075007164441684324e-9,
)

# Coefficients for p near 0 or 1
_E = (
    6.65790464350110377720,
    5.46378491116411436990,
    1.78482653991729133580,
    2.96560571828504891230e-1,
    2.65321895265761230930e-2,
    1.24266094738807843860e-3,
    2.71155556874348757815e-5,
    2.01033439929228813265e-7,
)
_F = (
    1.0,
    5.99832206555887937690e-1,
    1.36929880922735805310e-1,
    1.48753612908506148525e-2,
    7.86869131145613259100e-4,
    1.84631831751005468180e-5,
    1.42151175831644588870e-7,
    2.04426310338993978564e-15,
)


def _poly(coefficients, x: float) -> float:
    """Evaluate a polynomial with Horner's rule, lowest order first."""
    result = 0.0
    for c in reversed(coefficients):
        result = result * x + c
    return result


def cdf(x: float) -> float:
    """Standard normal cumulative distribution function.

    Uses Marsaglia's Taylor series around zero, summed until the partial
    sums stop changing.

    Args:
        x: Point at which to evaluate

    Returns:
        P(Z <= x) for a standard normal Z; NaN for NaN input
    """
    if math.isnan(x):
        return math.nan
    if x < -8:
        return 0.0
    if x > 8:
        return 1.0

    s = x
    t = 0.0
    b = x
    q = x * x
    i = 1.0
    while s != t:
        t = s
        i += 2
        b *= q / i
        s += b
    return 0.5 + s * math.exp(-0.5 * q - _LOG_SQRT_2PI)


def inverse_cdf(p: float) -> float:
    """Standard normal quantile function (Wichura's AS241, PPND16).

    Args:
        p: Probability, strictly between 0 and 1

    Returns:
        z such that cdf(z) == p

    Raises:
        ValueError: If p is outside (0, 1) or NaN
    """
    if not 0.0 < p < 1.0:
        raise ValueError(f"Probability out of range (0, 1): {p}")

    q = p - 0.5
    if abs(q) <= _SPLIT1:
        r = _CONST1 - q * q
        return q * _poly(_A, r) / _poly(_B, r)

    r = p if q < 0 else 1.0 - p
    r = math.sqrt(-math.log(r))
    if r <= _SPLIT2:
        r -= _CONST2
        value = _poly(_C, r) / _poly(_D, r)
    else:
        r -= _SPLIT2
        value = _poly(_E, r) / _poly(_F, r)
    return -value if q < 0 else value
