r"""@package autotaylor.compose

Composition of scalar functions with truncated series.

Given a series `s` with root value `x0` and the scalar Taylor data of a
function `g` at `x0`, the functions here compute the series of `g(s)`. Write
`s = x0 + eps`, where `eps` is `s` with its root set to zero. Then

\f[
    g(s) = \sum_{i=0}^{N} g_i\, \epsilon^i,
    \qquad g_i = \frac{g^{(i)}(x0)}{i!},
\f]

where `N` is the maximum total degree (`order_sum`) representable by `s`,
since \f$\epsilon^{N+1}\f$ vanishes identically in the truncated algebra.

Two evaluation strategies are available:

* The Horner form (apply_coefficients(), apply_derivatives()) evaluates the
  sum as `((g_N eps + g_{N-1}) eps + ...) + g_0` using full series
  multiplications. It is the cheaper one.
* The accumulate-by-power form (apply_coefficients_nonhorner(),
  apply_derivatives_nonhorner()) builds the powers of `eps` separately with
  epsilon_multiply() and scales them by `g_i` with
  epsilon_multiply_scalar(). Coefficients of \f$\epsilon^i\f$ below total
  degree `i` are structurally zero and are never touched, so an infinite or
  NaN `g_i` (e.g. the derivatives of `sqrt` at zero) only affects the orders
  it actually belongs to.

The multi-argument versions compose over the first series and, for each
coefficient, call the same form on the remaining series with the remaining
order budget. The callback then takes one index per series.

These functions operate on any object providing the interface of
autotaylor.series.TruncatedSeries; they are normally called through the
methods of that class.
"""

import numpy as np
from mpmath import mp

from .numutils import factorial
from .promotion import promote, coerce_scalar, constant_coeffs, convert_coeffs
from .promotion import zeros


__all__ = [
    "epsilon_multiply",
    "epsilon_multiply_scalar",
    "apply_coefficients",
    "apply_coefficients_nonhorner",
    "apply_derivatives",
    "apply_derivatives_nonhorner",
]


def _window_start(coeffs, z, isum):
    r"""Smallest index along axis 0 that can still reach total degree `z`."""
    order = coeffs.shape[0] - 1
    order_sum = sum(coeffs.shape) - coeffs.ndim
    return max(0, order + z - (order_sum + isum))


def _zeros_like(coeffs):
    if coeffs.dtype == object:
        return zeros(coeffs.shape, mp.mpf)
    return zeros(coeffs.shape, coeffs.dtype.type)


def epsilon_multiply(a, z0, isum0, b, z1, isum1):
    r"""Truncated product of two coefficient arrays of `eps` powers.

    `a` and `b` must have the same shape and root type. They are known to
    contain no terms of total degree below `z0` and `z1`, respectively, and
    `isum0`, `isum1` are the sums of indices already consumed in enclosing
    dimensions. Only coefficients that can contribute to a total degree of
    at least `z0 + z1` are read; lower output coefficients are left zero.

    Args:
        a:      Coefficient array of the first factor.
        z0:     Power of `eps` represented by `a`.
        isum0:  Index sum consumed in the outer dimensions for `a`.
        b:      Coefficient array of the second factor.
        z1:     Power of `eps` represented by `b`.
        isum1:  Index sum consumed in the outer dimensions for `b`.

    @return New coefficient array of the same shape as `a`.
    """
    order = a.shape[0] - 1
    m0 = _window_start(a, z0, isum0)
    m1 = _window_start(b, z1, isum1)
    out = _zeros_like(a)
    for j in range(m0 + m1, order + 1):
        if a.ndim == 1:
            out[j] = np.dot(a[m0:j-m1+1], b[m1:j-m0+1][::-1])
        else:
            for i0 in range(m0, j - m1 + 1):
                i1 = j - i0
                out[j] += epsilon_multiply(a[i0], z0, isum0 + i0,
                                           b[i1], z1, isum1 + i1)
    return out


def epsilon_multiply_scalar(a, z0, isum0, c):
    r"""Multiply the coefficients of an `eps^z0` array by a scalar.

    Only the nonzero coefficients inside the window that can reach total
    degree `z0` are multiplied, so a `c` of `inf` or `nan` leaves the
    structurally zero coefficients at zero. `z0` should be positive for this
    reason: with `z0 == 0`, a zero root would not be turned into `nan` by an
    infinite `c`. Use a plain multiplication in that case.
    """
    out = a.copy()
    _scale_window(out, z0, isum0, c)
    return out


def _scale_window(a, z0, isum0, c):
    r"""In-place worker for epsilon_multiply_scalar()."""
    m0 = _window_start(a, z0, isum0)
    if a.ndim == 1:
        window = a[m0:]
        mask = np.asarray(window != 0, dtype=bool)
        window[mask] = window[mask] * c
    else:
        for i in range(m0, a.shape[0]):
            _scale_window(a[i], z0, isum0 + i, c)


def _epsilon(s):
    r"""Copy of `s` with root value zero."""
    return s.copy().set_root(0)


def _nested(f, i):
    r"""Fix the first index of a multi-index callback."""
    return lambda *indices: f(i, *indices)


def apply_coefficients(s, order, f, *others):
    r"""Compose with normalized Taylor coefficients using the Horner form.

    Args:
        s:      Series to compose with.
        order:  Maximum order to take into account. The effective order is
                `min(order, s.order_sum)`.
        f:      Callback `i -> g^(i)(x0)/i!`. With further series in
                `others`, it takes one index per series.
        *others: Further series for multi-argument functions.

    @return New series. With `others`, it has the promoted shape of all
        arguments.
    """
    eps = _epsilon(s)
    n = min(order, s.order_sum)
    if not others:
        acc = s.constant_like(f(n))
        for i in range(n - 1, -1, -1):
            acc = acc * eps + f(i)
        return acc
    shape = promote(s, *others)
    def term(i):
        return apply_coefficients(others[0], order - i, _nested(f, i),
                                  *others[1:])
    acc = term(n).convert(shape)
    for i in range(n - 1, -1, -1):
        acc = acc * eps + term(i)
    return acc.convert(shape)


def apply_derivatives(s, order, f, *others):
    r"""Compose with raw derivatives using the Horner form.

    Same as apply_coefficients(), but `f` returns the derivatives
    `g^(i)(x0)` which are divided by `i!` here.
    """
    eps = _epsilon(s)
    n = min(order, s.order_sum)
    if not others:
        acc = s.constant_like(f(n) / factorial(n))
        for i in range(n - 1, -1, -1):
            acc = acc * eps + f(i) / factorial(i)
        return acc
    shape = promote(s, *others)
    def term(i):
        return apply_derivatives(others[0], order - i, _nested(f, i),
                                 *others[1:]) / factorial(i)
    acc = term(n).convert(shape)
    for i in range(n - 1, -1, -1):
        acc = acc * eps + term(i)
    return acc.convert(shape)


def apply_coefficients_nonhorner(s, f):
    r"""Compose with normalized Taylor coefficients accumulating by power.

    All orders up to `s.order_sum` are used.
    """
    root_type = s.root_type
    eps = _epsilon(s).coeffs
    eps_i = constant_coeffs(1, eps.shape, root_type)
    acc = constant_coeffs(f(0), eps.shape, root_type)
    for i in range(1, s.order_sum + 1):
        eps_i = epsilon_multiply(eps_i, i - 1, 0, eps, 1, 0)
        acc = acc + epsilon_multiply_scalar(eps_i, i, 0,
                                            coerce_scalar(f(i), root_type))
    return type(s)(acc)


def apply_derivatives_nonhorner(s, order, f, *others):
    r"""Compose with raw derivatives accumulating by power.

    For a single series, `order` is ignored and all orders up to
    `s.order_sum` are used. With further series, the composition over `s`
    stops at `min(order, s.order_sum)` and each term is computed from the
    remaining series with the remaining order budget.
    """
    root_type = s.root_type
    eps = _epsilon(s).coeffs
    eps_i = constant_coeffs(1, eps.shape, root_type)
    if not others:
        acc = constant_coeffs(f(0), eps.shape, root_type)
        for i in range(1, s.order_sum + 1):
            eps_i = epsilon_multiply(eps_i, i - 1, 0, eps, 1, 0)
            g_i = coerce_scalar(f(i), root_type) / factorial(i)
            acc = acc + epsilon_multiply_scalar(eps_i, i, 0, g_i)
        return type(s)(acc)
    shape = promote(s, *others)
    def term(i):
        return apply_derivatives_nonhorner(others[0], order - i,
                                           _nested(f, i), *others[1:])
    acc = term(0).convert(shape).coeffs
    for i in range(1, min(order, s.order_sum) + 1):
        eps_i = epsilon_multiply(eps_i, i - 1, 0, eps, 1, 0)
        g_i = (term(i) / factorial(i)).convert(shape)
        acc = acc + epsilon_multiply(convert_coeffs(eps_i, shape), i, 0,
                                     g_i.coeffs, 0, 0)
    return type(s)(acc)
