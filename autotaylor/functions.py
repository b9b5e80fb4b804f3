r"""@package autotaylor.functions

Elementary functions of truncated series.

Each function evaluates the scalar function and its derivatives (or Taylor
coefficients) at the root value of its argument and composes these with the
argument using one of the composition forms of autotaylor.compose. Many
derivative sequences are obtained from the series of the first derivative,
e.g. for `atan` the coefficients are
\f$ g_i = (1/(1+x^2))_{i-1} / i \f$, which are read from an auxiliary one
dimensional series of one order less.

The accumulate-by-power form is used wherever the derivatives may become
infinite at the expansion point (`sqrt`, `log`, `asin`, `tan` and `pow`
near zero, `lambert_w0`, `sinc` at zero); all other functions use the
cheaper Horner form.

All functions also accept plain scalars, for which the scalar function of
the matching backend (see autotaylor.contexts.math_context()) is returned.


@b Examples

```
    >>> x = make_fvar(4.0, 5)
    >>> [float(d) for d in sqrt(x).derivatives()]
    [2.0, 0.25, -0.03125, 0.01171875, -0.00732421875, 0.00640869140625]
```
"""

# pylint: disable=redefined-builtin

import logging

from mpmath import mp

from .contexts import math_context
from .numutils import binomial_coeffs, factorial, ieee_divide, ieee_arithmetic
from .promotion import SeriesShape, is_series, promote, promote_root_types
from .promotion import coerce_scalar, constant_coeffs
from .series import TruncatedSeries, constant, make_fvar


__all__ = [
    "exp",
    "log",
    "sqrt",
    "pow",
    "sin",
    "cos",
    "tan",
    "asin",
    "acos",
    "atan",
    "atan2",
    "sinh",
    "cosh",
    "tanh",
    "asinh",
    "acosh",
    "atanh",
    "erf",
    "erfc",
    "lambert_w0",
    "sinc",
    "fabs",
    "floor",
    "ceil",
    "trunc",
    "round",
    "iround",
    "itrunc",
    "fmod",
    "frexp",
    "ldexp",
    "hypot",
]


logger = logging.getLogger(__name__)


def _scalar(name, *args):
    r"""Evaluate the scalar function `name` of the backend for `args`."""
    root_type = promote_root_types(*args)
    ctx = math_context(root_type)
    return getattr(ctx, name)(*[coerce_scalar(a, root_type) for a in args])


def _ctx(x):
    return math_context(x.root_type)


def _with_root_type(x, root_type):
    r"""Return `x` cast to `root_type` (keeping its orders)."""
    if x.root_type is root_type:
        return x
    return x.convert(SeriesShape(x.orders, root_type))


def _aux_variable(x0, order, root_type):
    r"""One dimensional variable at `x0` used to build derivative series."""
    return make_fvar(x0, order, root_type=root_type)


def _from_first_derivative(d0, d1):
    r"""Coefficient callback from the value `d0` and the series `d1` of g'."""
    return lambda i: d1.at(i-1) / i if i else d0


@ieee_arithmetic
def exp(x):
    r"""Exponential function."""
    if not is_series(x):
        return _scalar('exp', x)
    d0 = _ctx(x).exp(x.root)
    return x.apply_derivatives(x.order_sum, lambda i: d0)


@ieee_arithmetic
def log(x):
    r"""Natural logarithm.

    At a zero root, the derivatives are computed from the zero-root inverse
    of `x` and are alternating infinities.
    """
    if not is_series(x):
        return _scalar('log', x)
    d0 = _ctx(x).log(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    d1 = _aux_variable(x.root, x.order_sum - 1, x.root_type).inverse()
    return x.apply_coefficients_nonhorner(_from_first_derivative(d0, d1))


@ieee_arithmetic
def sqrt(x):
    r"""Square root.

    The derivatives are
    \f$ d_i = \frac{n_i}{x_0^{i-1} \sqrt{x_0}} \f$ with
    \f$ n_1 = 1/2 \f$ and \f$ n_i = -\frac{1}{2} (2i - 3) n_{i-1} \f$.
    """
    if not is_series(x):
        return _scalar('sqrt', x)
    ctx = _ctx(x)
    x0 = x.root
    n = x.order_sum
    derivs = [ctx.sqrt(x0)]
    if n == 0:
        return x.constant_like(derivs[0])
    numerator = ctx.mpf(0.5)
    powers = ctx.mpf(1)
    derivs.append(ieee_divide(numerator, derivs[0]))
    for i in range(2, n + 1):
        numerator = numerator * ctx.mpf(-0.5) * (2*i - 3)
        powers = powers * x0
        derivs.append(ieee_divide(numerator, powers * derivs[0]))
    if x0 < ctx.eps:
        logger.debug("sqrt() at %s: accumulating by power.", x0)
        return x.apply_derivatives_nonhorner(n, lambda i: derivs[i])
    return x.apply_derivatives(n, lambda i: derivs[i])


@ieee_arithmetic
def pow(x, y):
    r"""Power `x**y` for series and/or scalar base and exponent.

    For a nonnegative integer exponent `c` and series base `x`, the
    derivatives are computed as falling factorials times `x0**(c-i)`, which
    stays finite at `x0 == 0`. The same form is used for any finite `c` when
    `|x0|` is below machine epsilon, so that derivatives beyond the order
    `c` become signed infinities instead of NaN.
    """
    if is_series(x):
        if is_series(y):
            return _pow_series(x, y)
        return _pow_scalar_exponent(x, y)
    if is_series(y):
        return _pow_scalar_base(x, y)
    return _scalar('power', x, y)


def _pow_scalar_exponent(x, c):
    root_type = promote_root_types(x, c)
    x = _with_root_type(x, root_type)
    c = coerce_scalar(c, root_type)
    ctx = math_context(root_type)
    x0 = x.root
    n = x.order_sum
    derivs = [ctx.power(x0, c)] + [ctx.mpf(0)] * n
    finite = not (ctx.isinf(c) or ctx.isnan(c))
    if finite and c >= 0 and c == ctx.floor(c):
        falling = ctx.mpf(1)
        for i in range(1, min(n, int(c)) + 1):
            falling = falling * (c - (i - 1))
            derivs[i] = falling * ctx.power(x0, c - i)
    elif finite and ctx.fabs(x0) < ctx.eps:
        falling = ctx.mpf(1)
        for i in range(1, n + 1):
            falling = falling * (c - (i - 1))
            if c - i >= 0:
                derivs[i] = falling * ctx.power(x0, c - i)
            else:
                derivs[i] = ieee_divide(falling, ctx.power(x0, i - c))
    else:
        for i in range(n):
            derivs[i+1] = ieee_divide((c - i) * derivs[i], x0)
    if ctx.fabs(x0) < ctx.eps:
        logger.debug("pow() with base %s: accumulating by power.", x0)
        return x.apply_derivatives_nonhorner(n, lambda i: derivs[i])
    return x.apply_derivatives(n, lambda i: derivs[i])


def _pow_scalar_base(c, y):
    root_type = promote_root_types(c, y)
    y = _with_root_type(y, root_type)
    c = coerce_scalar(c, root_type)
    ctx = math_context(root_type)
    n = y.order_sum
    logc = ctx.log(c)
    derivs = [ctx.power(c, y.root)]
    for i in range(n):
        derivs.append(derivs[i] * logc)
    if ctx.fabs(c) < ctx.eps:
        logger.debug("pow() with base %s: accumulating by power.", c)
        return y.apply_derivatives_nonhorner(n, lambda i: derivs[i])
    return y.apply_derivatives(n, lambda i: derivs[i])


def _pow_series(x, y):
    r"""Power with both base and exponent being series.

    The mixed derivatives of \f$ x^y \f$ are
    \f[
        \partial_x^i \partial_y^j x^y
            = \sum_{k=0}^{i} {i \choose k}
              \partial_x^{i-k} x^{y_0}\, \partial_x^k (\log x)^j,
    \f]
    where the derivatives of the powers of `log x` are read from auxiliary
    series.
    """
    shape = promote(x, y)
    root_type = shape.root_type
    x = _with_root_type(x, root_type)
    y = _with_root_type(y, root_type)
    ctx = math_context(root_type)
    n = shape.order_sum
    x0 = x.root
    y0 = y.root
    dxydx = [ctx.power(x0, y0)] + [ctx.mpf(0)] * n
    if n == 0:
        return TruncatedSeries(constant_coeffs(dxydx[0], shape.sizes, root_type))
    for i in range(n):
        if y0 - i == 0:
            break
        dxydx[i+1] = ieee_divide((y0 - i) * dxydx[i], x0)
    log1 = log(_aux_variable(x0, n, root_type))
    lognx = [constant(1, n, root_type=root_type), log1]
    for i in range(1, n):
        lognx.append(lognx[i] * log1)
    def f(i, j):
        binomials = binomial_coeffs(i)
        total = dxydx[i] * lognx[j].root
        for k in range(1, i + 1):
            total = total + binomials[k] * dxydx[i-k] * lognx[j].derivative(k)
        return total
    if ctx.fabs(x0) < ctx.eps:
        logger.debug("pow() with base %s: accumulating by power.", x0)
        return x.apply_derivatives_nonhorner(n, f, y)
    return x.apply_derivatives(n, f, y)


@ieee_arithmetic
def sin(x):
    r"""Sine function."""
    if not is_series(x):
        return _scalar('sin', x)
    ctx = _ctx(x)
    d0 = ctx.sin(x.root)
    d1 = ctx.cos(x.root)
    derivs = (d0, d1, -d0, -d1)
    return x.apply_derivatives(x.order_sum, lambda i: derivs[i & 3])


@ieee_arithmetic
def cos(x):
    r"""Cosine function."""
    if not is_series(x):
        return _scalar('cos', x)
    ctx = _ctx(x)
    d0 = ctx.cos(x.root)
    d1 = -ctx.sin(x.root)
    derivs = (d0, d1, -d0, -d1)
    return x.apply_derivatives(x.order_sum, lambda i: derivs[i & 3])


@ieee_arithmetic
def tan(x):
    r"""Tangent function, using `tan' = 1/cos^2`."""
    if not is_series(x):
        return _scalar('tan', x)
    d0 = _ctx(x).tan(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    c = cos(_aux_variable(x.root, x.order_sum - 1, x.root_type))
    d1 = (c * c).inverse()
    return x.apply_coefficients_nonhorner(_from_first_derivative(d0, d1))


@ieee_arithmetic
def asin(x):
    r"""Inverse sine, using `asin' = 1/sqrt(1-x^2)`."""
    if not is_series(x):
        return _scalar('asin', x)
    d0 = _ctx(x).asin(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    v = _aux_variable(x.root, x.order_sum - 1, x.root_type)
    d1 = sqrt(1 - v * v).inverse()
    return x.apply_coefficients_nonhorner(_from_first_derivative(d0, d1))


@ieee_arithmetic
def acos(x):
    r"""Inverse cosine, using `acos' = -1/sqrt(1-x^2)`."""
    if not is_series(x):
        return _scalar('acos', x)
    d0 = _ctx(x).acos(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    v = _aux_variable(x.root, x.order_sum - 1, x.root_type)
    d1 = sqrt(1 - v * v).inverse().negate()
    return x.apply_coefficients(x.order_sum, _from_first_derivative(d0, d1))


@ieee_arithmetic
def atan(x):
    r"""Inverse tangent, using `atan' = 1/(1+x^2)`."""
    if not is_series(x):
        return _scalar('atan', x)
    d0 = _ctx(x).atan(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    v = _aux_variable(x.root, x.order_sum - 1, x.root_type)
    d1 = (v * v + 1).inverse()
    return x.apply_coefficients(x.order_sum, _from_first_derivative(d0, d1))


@ieee_arithmetic
def atan2(y, x):
    r"""Two-argument inverse tangent `atan2(y, x)`.

    Either argument may be a scalar. With two series, the result has their
    promoted shape and is computed with the two-argument Horner form.
    """
    if is_series(y):
        if is_series(x):
            return _atan2_series(y, x)
        return _atan2_scalar_x(y, x)
    if is_series(x):
        return _atan2_scalar_y(y, x)
    return _scalar('atan2', y, x)


def _atan2_scalar_x(y, c):
    root_type = promote_root_types(y, c)
    y = _with_root_type(y, root_type)
    c = coerce_scalar(c, root_type)
    d0 = math_context(root_type).atan2(y.root, c)
    if y.order_sum == 0:
        return y.constant_like(d0)
    v = _aux_variable(y.root, y.order_sum - 1, root_type)
    d1 = c / (v * v + c * c)
    return y.apply_coefficients(y.order_sum, _from_first_derivative(d0, d1))


def _atan2_scalar_y(c, x):
    root_type = promote_root_types(c, x)
    x = _with_root_type(x, root_type)
    c = coerce_scalar(c, root_type)
    d0 = math_context(root_type).atan2(c, x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    v = _aux_variable(x.root, x.order_sum - 1, root_type)
    d1 = -c / (v * v + c * c)
    return x.apply_coefficients(x.order_sum, _from_first_derivative(d0, d1))


def _atan2_series(y, x):
    shape = promote(y, x)
    root_type = shape.root_type
    y = _with_root_type(y, root_type)
    x = _with_root_type(x, root_type)
    y0 = y.root
    x0 = x.root
    d00 = math_context(root_type).atan2(y0, x0)
    n = shape.order_sum
    if n == 0:
        return TruncatedSeries(constant_coeffs(d00, shape.sizes, root_type))
    d01 = d10 = None
    if x.order_sum > 0:
        x01 = _aux_variable(x0, x.order_sum - 1, root_type)
        d01 = -y0 / (x01 * x01 + y0 * y0)
    if y.order_sum > 0:
        y10 = _aux_variable(y0, y.order_sum - 1, root_type)
        x10 = make_fvar(x0, 0, x.order_sum, root_type=root_type)
        d10 = x10 / (x10 * x10 + y10 * y10)
    def f(i, j):
        if i:
            return d10.at(i-1, j) / i
        if j:
            return d01.at(j-1) / j
        return d00
    return y.apply_coefficients(n, f, x)


@ieee_arithmetic
def sinh(x):
    r"""Hyperbolic sine."""
    if not is_series(x):
        return _scalar('sinh', x)
    ctx = _ctx(x)
    derivs = (ctx.sinh(x.root), ctx.cosh(x.root))
    return x.apply_derivatives(x.order_sum, lambda i: derivs[i & 1])


@ieee_arithmetic
def cosh(x):
    r"""Hyperbolic cosine."""
    if not is_series(x):
        return _scalar('cosh', x)
    ctx = _ctx(x)
    derivs = (ctx.cosh(x.root), ctx.sinh(x.root))
    return x.apply_derivatives(x.order_sum, lambda i: derivs[i & 1])


@ieee_arithmetic
def tanh(x):
    r"""Hyperbolic tangent, computed as `(exp(2x)-1)/(exp(2x)+1)`."""
    if not is_series(x):
        return _scalar('tanh', x)
    e2x = exp(x * 2)
    return (e2x - 1) / (e2x + 1)


@ieee_arithmetic
def asinh(x):
    r"""Inverse hyperbolic sine, using `asinh' = 1/sqrt(x^2+1)`."""
    if not is_series(x):
        return _scalar('asinh', x)
    d0 = _ctx(x).asinh(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    v = _aux_variable(x.root, x.order_sum - 1, x.root_type)
    d1 = sqrt(v * v + 1).inverse()
    return x.apply_coefficients(x.order_sum, _from_first_derivative(d0, d1))


@ieee_arithmetic
def acosh(x):
    r"""Inverse hyperbolic cosine, using `acosh' = 1/sqrt(x^2-1)`."""
    if not is_series(x):
        return _scalar('acosh', x)
    d0 = _ctx(x).acosh(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    v = _aux_variable(x.root, x.order_sum - 1, x.root_type)
    d1 = sqrt(v * v - 1).inverse()
    return x.apply_coefficients(x.order_sum, _from_first_derivative(d0, d1))


@ieee_arithmetic
def atanh(x):
    r"""Inverse hyperbolic tangent, using `atanh' = 1/(1-x^2)`."""
    if not is_series(x):
        return _scalar('atanh', x)
    d0 = _ctx(x).atanh(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    v = _aux_variable(x.root, x.order_sum - 1, x.root_type)
    d1 = (1 - v * v).inverse()
    return x.apply_coefficients(x.order_sum, _from_first_derivative(d0, d1))


def _erf_like(x, name, sign):
    ctx = _ctx(x)
    d0 = getattr(ctx, name)(x.root)
    if x.order_sum == 0:
        return x.constant_like(d0)
    v = _aux_variable(x.root, x.order_sum - 1, x.root_type)
    d1 = exp(-(v * v)) * (sign * 2 / ctx.sqrt(ctx.pi))
    return x.apply_coefficients(x.order_sum, _from_first_derivative(d0, d1))


@ieee_arithmetic
def erf(x):
    r"""Error function, using `erf' = 2/sqrt(pi) exp(-x^2)`."""
    if not is_series(x):
        return _scalar('erf', x)
    return _erf_like(x, 'erf', 1)


@ieee_arithmetic
def erfc(x):
    r"""Complementary error function, using `erfc' = -erf'`."""
    if not is_series(x):
        return _scalar('erfc', x)
    return _erf_like(x, 'erfc', -1)


def _lambert_w0_scalar(ctx, x):
    w = ctx.lambertw(x)
    if isinstance(w, mp.mpc) and w.imag == 0:
        w = w.real
    return w


@ieee_arithmetic
def lambert_w0(x):
    r"""Principal branch of the Lambert W function.

    The derivatives follow from `W' = 1/(x + exp(W))` via a recurrence for
    the coefficients of polynomials in `W' exp(W)`.
    """
    if not is_series(x):
        root_type = promote_root_types(x)
        return _lambert_w0_scalar(math_context(root_type),
                                  coerce_scalar(x, root_type))
    ctx = _ctx(x)
    x0 = x.root
    n = x.order_sum
    derivs = [_lambert_w0_scalar(ctx, x0)]
    if n == 0:
        return x.constant_like(derivs[0])
    expw = ctx.exp(derivs[0])
    derivs.append(ieee_divide(ctx.mpf(1), x0 + expw))
    if n >= 2:
        d1powers = derivs[1] * derivs[1]
        t = derivs[1] * expw
        derivs.append(d1powers * (-1 - t))
        coef = [ctx.mpf(-1), ctx.mpf(-1)] + [ctx.mpf(0)] * (n - 2)
        for m in range(3, n + 1):
            coef[m-1] = coef[m-2] * -(2*m - 3)
            for j in range(m - 2, 0, -1):
                coef[j] = coef[j] * -(m - 1) - (m + j - 2) * coef[j-1]
            coef[0] = coef[0] * -(m - 1)
            d1powers = d1powers * derivs[1]
            acc = coef[m-1]
            for k in range(m - 2, -1, -1):
                acc = acc * t + coef[k]
            derivs.append(d1powers * acc)
    return x.apply_derivatives_nonhorner(n, lambda i: derivs[i])


@ieee_arithmetic
def sinc(x):
    r"""Cardinal sine `sin(x)/x` with `sinc(0) = 1`."""
    if not is_series(x):
        if x != 0:
            return _scalar('sin', x) / x
        return coerce_scalar(1, promote_root_types(x))
    if x.root != 0:
        return sin(x) / x
    ctx = _ctx(x)
    taylor = [ctx.mpf(1)] + [ctx.mpf(0)] * x.order_sum
    for m in range(2, x.order_sum + 1, 2):
        taylor[m] = ctx.mpf(1 - (m & 2)) / factorial(m + 1)
    return x.apply_coefficients_nonhorner(lambda i: taylor[i])


@ieee_arithmetic
def fabs(x):
    r"""Absolute value. The derivatives at zero are canonically zero."""
    if not is_series(x):
        return _scalar('fabs', x)
    if x < 0:
        return -x
    if x == 0:
        return x.constant_like(0)
    return x.copy()


def _rounded(x, name):
    if not is_series(x):
        return _round_scalar(name, x)
    return x.constant_like(_round_scalar(name, x.root))


def _round_scalar(name, x):
    root_type = promote_root_types(x)
    ctx = math_context(root_type)
    x = coerce_scalar(x, root_type)
    if name == 'floor':
        return ctx.floor(x)
    if name == 'ceil':
        return ctx.ceil(x)
    if name == 'trunc':
        return ctx.floor(x) if x >= 0 else ctx.ceil(x)
    # Round half away from zero.
    if -0.5 < x < 0.5:
        return ctx.mpf(0)
    if x > 0:
        r = ctx.ceil(x)
        return r - 1 if r - x > 0.5 else r
    r = ctx.floor(x)
    return r + 1 if x - r > 0.5 else r


def floor(x):
    r"""Constant series of the largest integer not above the root value."""
    return _rounded(x, 'floor')


def ceil(x):
    r"""Constant series of the smallest integer not below the root value."""
    return _rounded(x, 'ceil')


def trunc(x):
    r"""Constant series of the root value rounded towards zero."""
    return _rounded(x, 'trunc')


def round(x):
    r"""Constant series of the root value rounded half away from zero."""
    return _rounded(x, 'round')


def iround(x):
    r"""Root value rounded half away from zero, as Python `int`."""
    return int(_round_scalar('round', x.root if is_series(x) else x))


def itrunc(x):
    r"""Root value rounded towards zero, as Python `int`."""
    return int(_round_scalar('trunc', x.root if is_series(x) else x))


@ieee_arithmetic
def fmod(a, b):
    r"""Floating point remainder `a - b*trunc(a0/b0)`."""
    if not (is_series(a) or is_series(b)):
        return _scalar('fmod', a, b)
    root_type = promote_root_types(a, b)
    a0 = coerce_scalar(a.root if is_series(a) else a, root_type)
    b0 = coerce_scalar(b.root if is_series(b) else b, root_type)
    return a - b * _round_scalar('trunc', ieee_divide(a0, b0))


def frexp(x):
    r"""Split into mantissa and exponent.

    @return A pair `(m, e)` where `m = x * 2**-e` has a root value of
        magnitude in `[0.5, 1)` (or zero) and `e` is an `int`.
    """
    if not is_series(x):
        return _scalar('frexp', x)
    ctx = _ctx(x)
    _, e = ctx.frexp(x.root)
    return x * ctx.ldexp(ctx.mpf(1), -e), int(e)


def ldexp(x, e):
    r"""Multiply by `2**e` for an integer `e`."""
    if not is_series(x):
        root_type = promote_root_types(x)
        return math_context(root_type).ldexp(coerce_scalar(x, root_type), e)
    ctx = _ctx(x)
    return x * ctx.ldexp(ctx.mpf(1), e)


@ieee_arithmetic
def hypot(x, y):
    r"""Euclidean norm `sqrt(x*x + y*y)`."""
    if not (is_series(x) or is_series(y)):
        return _scalar('hypot', x, y)
    return sqrt(x * x + y * y)
