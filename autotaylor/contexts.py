r"""@package autotaylor.contexts

Selection of the scalar backends used for series coefficients.

A series either stores NumPy floating point values (fast mode) or `mpmath`
`mpf` objects (arbitrary precision mode, activated by `use_mp=True`). The
elementary functions need scalar versions of `exp`, `log`, etc. for the root
type of a series. These are provided by the object returned from
math_context(): the `mpmath.mp` context itself in arbitrary precision mode or
a light wrapper around NumPy/SciPy functions producing values of the series'
floating point dtype.

To run a block of code at a given precision, use the context() context
manager:

~~~.py
with context(use_mp=True, dps=50):
    x = make_fvar(2, 5, use_mp=True)
    print(exp(x).derivative(5))
~~~
"""

from contextlib import contextmanager

import numpy as np
from scipy import special
from mpmath import mp, fp


__all__ = [
    "context",
    "mpmath_context",
    "math_context",
]


def mpmath_context(use_mp):
    r"""Return the `mpmath.mp` or `mpmath.fp` context."""
    return mp if use_mp else fp


@contextmanager
def context(use_mp, dps=None):
    r"""Convenience function to be used as context manager.

    This will automatically choose the correct context (`mp` or `fp`) based
    on the choice of `use_mp` and configure the desired decimal places.

    Args:
        use_mp: Whether to use `mp` (if `True`) or `fp`.
        dps:    Decimal places to use in `mp` computations. The current
                precision is kept if not given.
    """
    ctx = mpmath_context(use_mp)
    if not use_mp or dps is None:
        yield ctx
        return
    with ctx.workdps(dps):
        yield ctx


def math_context(root_type):
    r"""Return the scalar math backend for the given root type.

    For `mpmath.mpf` this is the `mpmath.mp` context. For NumPy floating
    point types, a _FloatMath object for that dtype is returned, offering the
    same function names as `mp`.
    """
    if root_type is mp.mpf:
        return mp
    return _FloatMath.get(root_type)


class _FloatMath(object):
    r"""Scalar functions for one NumPy floating point dtype.

    The attribute and method names follow the ones of `mpmath.mp` so that
    the function library can use either backend unchanged. All results are
    NumPy scalars of the configured dtype, which means division by zero or
    evaluation outside the domain of a function gives `inf`/`nan` instead of
    raising.
    """

    __instances = dict()

    def __init__(self, dtype):
        self.dtype = np.dtype(dtype)
        ## Converter to the root type (mirrors `mp.mpf`).
        self.mpf = self.dtype.type
        self.pi = self.mpf(np.pi)
        self.e = self.mpf(np.e)
        self.eps = self.mpf(np.finfo(self.dtype).eps)
        self.inf = self.mpf(np.inf)
        self.nan = self.mpf(np.nan)

    @classmethod
    def get(cls, root_type):
        r"""Return a shared instance for the dtype of `root_type`."""
        dtype = np.dtype(root_type)
        try:
            return cls.__instances[dtype]
        except KeyError:
            ctx = cls.__instances[dtype] = cls(dtype)
            return ctx

    def __repr__(self):
        return "<float math context for %s>" % self.dtype.name

    def _call(self, func, *args):
        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            return self.mpf(func(*args))

    def exp(self, x): return self._call(np.exp, x)
    def log(self, x): return self._call(np.log, x)
    def sqrt(self, x): return self._call(np.sqrt, x)
    def power(self, x, y): return self._call(np.power, x, y)
    def sin(self, x): return self._call(np.sin, x)
    def cos(self, x): return self._call(np.cos, x)
    def tan(self, x): return self._call(np.tan, x)
    def asin(self, x): return self._call(np.arcsin, x)
    def acos(self, x): return self._call(np.arccos, x)
    def atan(self, x): return self._call(np.arctan, x)
    def atan2(self, y, x): return self._call(np.arctan2, y, x)
    def sinh(self, x): return self._call(np.sinh, x)
    def cosh(self, x): return self._call(np.cosh, x)
    def tanh(self, x): return self._call(np.tanh, x)
    def asinh(self, x): return self._call(np.arcsinh, x)
    def acosh(self, x): return self._call(np.arccosh, x)
    def atanh(self, x): return self._call(np.arctanh, x)
    def erf(self, x): return self._call(special.erf, x)
    def erfc(self, x): return self._call(special.erfc, x)
    def fabs(self, x): return self._call(np.fabs, x)
    def floor(self, x): return self._call(np.floor, x)
    def ceil(self, x): return self._call(np.ceil, x)
    def fmod(self, x, y): return self._call(np.fmod, x, y)
    def hypot(self, x, y): return self._call(np.hypot, x, y)

    def isnan(self, x):
        return bool(np.isnan(x))

    def isinf(self, x):
        return bool(np.isinf(x))

    def lambertw(self, x):
        r"""Principal branch of the Lambert W function.

        Outside the real domain (`x < -1/e`) the result is `nan`.
        """
        w = special.lambertw(x)
        if w.imag != 0:
            return self.nan
        return self.mpf(w.real)

    def frexp(self, x):
        mantissa, exponent = np.frexp(self.mpf(x))
        return self.mpf(mantissa), int(exponent)

    def ldexp(self, x, n):
        return self._call(np.ldexp, self.mpf(x), int(n))
