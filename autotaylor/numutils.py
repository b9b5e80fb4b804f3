r"""@package autotaylor.numutils

Miscellaneous numerical utilities and helpers.

Besides the usual combinatorial helpers, this module contains the pieces
needed to treat floating point and `mpmath` values alike when dividing by
zero. Series coefficients are allowed to become infinite or NaN at singular
expansion points, so divisions inside the engine must follow IEEE semantics
instead of raising.


@b Examples

```
    >>> binomial(5, 3)
    10
    >>> factorial(5)
    120
    >>> ieee_divide(1.0, 0.0)
    inf
```
"""

import functools

import numpy as np
from mpmath import mp
import sympy as sp


__all__ = [
    "binomial",
    "binomial_coeffs",
    "factorial",
    "ieee_divide",
    "ieee_arithmetic",
    "NumericalError",
    "TruncationIndexError",
]


class NumericalError(Exception):
    r"""Exception raised for problems with numerical evaluation."""
    pass


class TruncationIndexError(NumericalError, IndexError):
    r"""Raised when a coefficient beyond the truncation orders is requested.

    The error derives from `IndexError`, so code treating series like
    sequences can catch it the usual way.
    """
    pass


def binomial(n, k):
    r"""Compute the binomial coefficient n choose k."""
    return int(sp.binomial(n, k))


def binomial_coeffs(n):
    r"""Compute all binomial coefficients n choose k for 0 <= k <= n.

    The result is a list of integers
    \f[
        {n \choose 0}, {n \choose 1}, \ldots, {n \choose n}.
    \f]
    """
    return _BinomialCoeffs.all_coeffs(n)


class _BinomialCoeffs():
    r"""Cache of the lists produced by binomial_coeffs()."""

    __binomial_coeffs = []

    @classmethod
    def all_coeffs(cls, n):
        r"""Generate and cache the results for binomial_coeffs()."""
        while len(cls.__binomial_coeffs) <= n:
            nn = len(cls.__binomial_coeffs)
            coeffs = [binomial(nn, k) for k in range(nn+1)]
            cls.__binomial_coeffs.append(coeffs)
        return cls.__binomial_coeffs[n]


def factorial(n):
    r"""Exact factorial `n!` as Python integer (cached)."""
    return _Factorials.get(n)


class _Factorials():
    r"""Growing table of factorials used by factorial()."""

    __table = [1]

    @classmethod
    def get(cls, n):
        if n < 0:
            raise ValueError("Factorial of negative number %s requested." % n)
        table = cls.__table
        while len(table) <= n:
            table.append(table[-1] * len(table))
        return table[n]


def ieee_divide(a, b):
    r"""Divide two scalars following IEEE 754 semantics.

    Floating point values are divided by NumPy (which returns signed
    infinities or NaN for a zero divisor). `mpmath` raises on division by
    zero, so this case is mapped to `+-inf` or `nan` manually. Since `mpf`
    has no signed zero, the sign of the result is the sign of `a`.
    """
    if isinstance(a, mp.mpf) or isinstance(b, mp.mpf):
        if b != 0:
            return a / b
        if a == 0 or mp.isnan(a):
            return mp.nan
        return mp.inf if a > 0 else -mp.inf
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        return np.true_divide(a, b)


def ieee_arithmetic(func):
    r"""Decorator silencing NumPy floating point warnings inside `func`.

    Infinite and NaN coefficients are valid results of the series
    arithmetic, so the `divide`, `invalid` and `overflow` warnings NumPy
    would emit are suppressed while `func` runs.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            return func(*args, **kwargs)
    return wrapper
