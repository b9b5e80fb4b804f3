r"""@package autotaylor.series

Truncated multivariate Taylor series with forward mode arithmetic.

A TruncatedSeries represents a function of `depth` independent variables
through all its partial derivatives up to fixed orders, expanded about one
point. The coefficients are stored in a single NumPy array whose axis `k` has
length `orders[k] + 1`. The entry at multi-index `(i0, ..., iD)` is the
normalized Taylor coefficient

\f[
    \frac{1}{i_0! \cdots i_D!}
    \frac{\partial^{i_0 + \ldots + i_D} f}
         {\partial x_0^{i_0} \cdots \partial x_D^{i_D}}.
\f]

Evaluating an expression built from series objects therefore computes its
value together with all requested derivatives.

Arithmetic follows the usual rules of power series truncated at the orders
of the operands. Operands of different shapes are first promoted to a
common shape (see autotaylor.promotion). Elementary functions are found in
autotaylor.functions.


@b Examples

```
    >>> x = make_fvar(1.0, 4)
    >>> f = 1 / (x*x + 1)
    >>> [f.derivative(i) for i in range(5)]
    [0.5, -0.5, 0.5, 0.0, -3.0]
```

Mixed partial derivatives are obtained by seeding several variables along
different dimensions:

```
    >>> x = make_fvar(2.0, 2)     # first variable, order 2
    >>> y = make_fvar(3.0, 0, 2)  # second variable, order 2
    >>> (x*x*y).derivative(2, 1)
    2.0
```
"""

import logging
import operator

import numpy as np
from mpmath import mp

from .numutils import factorial, ieee_divide, ieee_arithmetic
from .numutils import TruncationIndexError
from .promotion import SeriesShape, is_series, is_scalar, promote
from .promotion import root_type_of, coerce_scalar, parse_literal
from .promotion import zeros, constant_coeffs, expand_coeffs, convert_coeffs
from . import compose


__all__ = [
    "TruncatedSeries",
    "constant",
    "make_fvar",
    "variable",
    "make_ftuple",
]


logger = logging.getLogger(__name__)


class TruncatedSeries(object):
    r"""Value and derivatives of a function of several variables at a point.

    Objects are usually created using the constant(), make_fvar(),
    variable() or make_ftuple() functions and then combined using the
    arithmetic operators and the functions in autotaylor.functions.

    Binary operators return new objects. The in-place operators replace the
    coefficients of the receiving object with those of the result.
    Comparisons act on the root values only, which makes series objects
    unhashable.
    """

    # Make NumPy scalars on the left defer to our reflected operators.
    __array_ufunc__ = None
    __hash__ = None

    def __init__(self, coeffs):
        r"""Create a series from its normalized coefficients.

        Args:
            coeffs: Array with one dimension per variable. Object arrays
                    must contain `mpmath.mpf` values. Integer arrays are
                    converted to `float64`.
        """
        coeffs = np.asarray(coeffs)
        if coeffs.ndim < 1:
            raise ValueError("Series need at least one dimension.")
        if coeffs.dtype.kind in 'iub':
            coeffs = coeffs.astype(np.float64)
        elif coeffs.dtype.kind not in 'fO':
            raise TypeError("Unsupported coefficient dtype: %s" % coeffs.dtype)
        self._coeffs = coeffs

    @property
    def coeffs(self):
        r"""Coefficient array (normalized Taylor coefficients)."""
        return self._coeffs

    @property
    def orders(self):
        r"""Truncation orders, one per dimension (outermost first)."""
        return tuple(n - 1 for n in self._coeffs.shape)

    @property
    def depth(self):
        r"""Number of dimensions (independent variables)."""
        return self._coeffs.ndim

    @property
    def order(self):
        r"""Truncation order of the outermost dimension."""
        return self._coeffs.shape[0] - 1

    @property
    def order_sum(self):
        r"""Maximum total degree of this series."""
        return sum(self.orders)

    @property
    def root_type(self):
        r"""Type of the scalar coefficients (`mpmath.mpf` or NumPy float)."""
        if self._coeffs.dtype == object:
            return mp.mpf
        return self._coeffs.dtype.type

    @property
    def use_mp(self):
        r"""Whether coefficients are `mpmath.mpf` objects."""
        return self._coeffs.dtype == object

    @property
    def shape(self):
        r"""SeriesShape of this series."""
        return SeriesShape(self.orders, self.root_type)

    @property
    def root(self):
        r"""The function value at the expansion point."""
        return self._coeffs[(0,) * self.depth]

    def __float__(self):
        return float(self.root)

    def copy(self):
        r"""Return an independent copy of this series."""
        return type(self)(self._coeffs.copy())

    def constant_like(self, value):
        r"""Constant of the same shape as this series."""
        return type(self)(constant_coeffs(value, self._coeffs.shape,
                                          self.root_type))

    def convert(self, shape):
        r"""Return a copy zero-extended (and cast) to the given shape.

        Args:
            shape: Either a SeriesShape or a sequence of orders. In the
                latter case, the root type is kept.
        """
        if not isinstance(shape, SeriesShape):
            shape = SeriesShape(tuple(shape), self.root_type)
        return type(self)(convert_coeffs(self._coeffs, shape))

    def set_root(self, value):
        r"""Replace the root value in-place and return this series."""
        self._coeffs[(0,) * self.depth] = coerce_scalar(value, self.root_type)
        return self

    def negate(self):
        r"""Flip the sign of all coefficients in-place and return this series."""
        self._coeffs = -self._coeffs
        return self

    def at(self, *indices):
        r"""Return the stored (normalized) coefficient at a multi-index.

        With fewer indices than `depth`, a copy of the sub-series at that
        position is returned.

        @raises TruncationIndexError if an index exceeds the order of its
            dimension.
        """
        if len(indices) > self.depth:
            raise TypeError("at() takes at most %d indices (%d given)"
                            % (self.depth, len(indices)))
        indices = tuple(operator.index(i) for i in indices)
        for dim, (i, order) in enumerate(zip(indices, self.orders)):
            if not 0 <= i <= order:
                raise TruncationIndexError(
                    "Index %d out of range for dimension %d of order %d."
                    % (i, dim, order)
                )
        value = self._coeffs[indices]
        if len(indices) == self.depth:
            return value
        return type(self)(value.copy())

    @ieee_arithmetic
    def derivative(self, *indices):
        r"""Return the partial derivative of the given orders.

        This is the coefficient at(*indices) multiplied by the factorials of
        the indices. With fewer indices than `depth`, the sub-series is
        returned with all its coefficients multiplied by that factor.
        """
        value = self.at(*indices)
        scale = 1
        for i in indices:
            scale *= factorial(i)
        return value * coerce_scalar(scale, self.root_type)

    @ieee_arithmetic
    def derivatives(self):
        r"""Return an array of all partial derivatives.

        The element at `(i0, ..., iD)` is the derivative of orders
        `i0, ..., iD`, i.e. the result of derivative(i0, ..., iD).
        """
        out = self._coeffs
        for axis, order in enumerate(self.orders):
            facts = np.empty(order + 1, dtype=out.dtype)
            facts[:] = [coerce_scalar(factorial(i), self.root_type)
                        for i in range(order + 1)]
            sizes = [1] * self.depth
            sizes[axis] = order + 1
            out = out * facts.reshape(sizes)
        return out

    def inverse(self):
        r"""Multiplicative inverse `1/self`.

        For a nonzero root, this is computed with the usual power series
        division. At a zero root, the derivatives of `1/x` are evaluated
        directly at the root (giving signed infinities) and composed using
        the accumulate-by-power form, which keeps the result consistent
        with the limits of real analysis.
        """
        x0 = self.root
        if x0 != 0:
            return 1 / self
        logger.debug("Inverting series with zero root value.")
        derivs = [ieee_divide(coerce_scalar(1, self.root_type), x0)]
        for i in range(1, self.order_sum + 1):
            derivs.append(ieee_divide(-derivs[-1] * i, x0))
        return self.apply_derivatives_nonhorner(self.order_sum,
                                                lambda i: derivs[i])

    def apply_coefficients(self, order, f, *others):
        r"""Compose a function given by its Taylor coefficients (Horner form).

        See autotaylor.compose.apply_coefficients().
        """
        return compose.apply_coefficients(self, order, f, *others)

    def apply_coefficients_nonhorner(self, f):
        r"""Compose a function given by its Taylor coefficients by powers.

        See autotaylor.compose.apply_coefficients_nonhorner().
        """
        return compose.apply_coefficients_nonhorner(self, f)

    def apply_derivatives(self, order, f, *others):
        r"""Compose a function given by its derivatives (Horner form).

        See autotaylor.compose.apply_derivatives().
        """
        return compose.apply_derivatives(self, order, f, *others)

    def apply_derivatives_nonhorner(self, order, f, *others):
        r"""Compose a function given by its derivatives by powers.

        See autotaylor.compose.apply_derivatives_nonhorner().
        """
        return compose.apply_derivatives_nonhorner(self, order, f, *others)

    def __repr__(self):
        return _format_coeffs(self._coeffs, self.use_mp)

    __str__ = __repr__

    def __pos__(self):
        return self.copy()

    def __neg__(self):
        return type(self)(-self._coeffs)

    def __abs__(self):
        from .functions import fabs
        return fabs(self)

    @ieee_arithmetic
    def __add__(self, other):
        if is_series(other):
            shape = promote(self, other)
            return type(self)(convert_coeffs(self._coeffs, shape)
                              + convert_coeffs(other.coeffs, shape))
        if not is_scalar(other):
            return NotImplemented
        shape = promote(self, other)
        coeffs = convert_coeffs(self._coeffs, shape)
        coeffs[(0,) * shape.depth] += coerce_scalar(other, shape.root_type)
        return type(self)(coeffs)

    __radd__ = __add__

    @ieee_arithmetic
    def __sub__(self, other):
        if is_series(other):
            shape = promote(self, other)
            return type(self)(convert_coeffs(self._coeffs, shape)
                              - convert_coeffs(other.coeffs, shape))
        if not is_scalar(other):
            return NotImplemented
        return self + (-coerce_scalar(other, promote(self, other).root_type))

    @ieee_arithmetic
    def __rsub__(self, other):
        if not is_scalar(other):
            return NotImplemented
        return (-self) + other

    @ieee_arithmetic
    def __mul__(self, other):
        if is_series(other):
            shape = promote(self, other)
            return type(self)(_multiply(
                expand_coeffs(self._coeffs, shape.depth, shape.root_type),
                expand_coeffs(other.coeffs, shape.depth, shape.root_type),
                shape.sizes,
            ))
        if not is_scalar(other):
            return NotImplemented
        shape = promote(self, other)
        return type(self)(_scale(convert_coeffs(self._coeffs, shape),
                                 coerce_scalar(other, shape.root_type)))

    __rmul__ = __mul__

    @ieee_arithmetic
    def __truediv__(self, other):
        if is_series(other):
            shape = promote(self, other)
            return type(self)(_divide(
                expand_coeffs(self._coeffs, shape.depth, shape.root_type),
                expand_coeffs(other.coeffs, shape.depth, shape.root_type),
                shape.sizes,
            ))
        if not is_scalar(other):
            return NotImplemented
        shape = promote(self, other)
        return type(self)(_divide_by_scalar(
            convert_coeffs(self._coeffs, shape),
            coerce_scalar(other, shape.root_type),
        ))

    @ieee_arithmetic
    def __rtruediv__(self, other):
        if not is_scalar(other):
            return NotImplemented
        shape = promote(self, other)
        dividend = constant_coeffs(other, (1,) * shape.depth, shape.root_type)
        return type(self)(_divide(
            dividend,
            expand_coeffs(self._coeffs, shape.depth, shape.root_type),
            shape.sizes,
        ))

    def __pow__(self, other):
        from .functions import pow as _pow
        if not (is_series(other) or is_scalar(other)):
            return NotImplemented
        return _pow(self, other)

    def __rpow__(self, other):
        from .functions import pow as _pow
        if not is_scalar(other):
            return NotImplemented
        return _pow(other, self)

    def _inplace(self, result):
        if result is NotImplemented:
            return result
        self._coeffs = result.coeffs
        return self

    def __iadd__(self, other):
        return self._inplace(self.__add__(other))

    def __isub__(self, other):
        return self._inplace(self.__sub__(other))

    def __imul__(self, other):
        return self._inplace(self.__mul__(other))

    def __itruediv__(self, other):
        return self._inplace(self.__truediv__(other))

    def _root_of(self, other):
        if is_series(other):
            return other.root
        if is_scalar(other):
            return other
        return NotImplemented

    def __eq__(self, other):
        value = self._root_of(other)
        if value is NotImplemented:
            return value
        return bool(self.root == value)

    def __ne__(self, other):
        value = self._root_of(other)
        if value is NotImplemented:
            return value
        return bool(self.root != value)

    def __lt__(self, other):
        value = self._root_of(other)
        if value is NotImplemented:
            return value
        return bool(self.root < value)

    def __le__(self, other):
        value = self._root_of(other)
        if value is NotImplemented:
            return value
        return bool(self.root <= value)

    def __gt__(self, other):
        value = self._root_of(other)
        if value is NotImplemented:
            return value
        return bool(self.root > value)

    def __ge__(self, other):
        value = self._root_of(other)
        if value is NotImplemented:
            return value
        return bool(self.root >= value)


def _format_scalar(value, use_mp):
    if use_mp:
        return mp.nstr(value, mp.dps)
    return repr(float(value))


def _format_coeffs(coeffs, use_mp):
    r"""Format coefficients as `depth(D)(c0,...,cN)`, recursively."""
    if coeffs.ndim == 1:
        parts = [_format_scalar(c, use_mp) for c in coeffs]
    else:
        parts = [_format_coeffs(c, use_mp) for c in coeffs]
    return "depth(%d)(%s)" % (coeffs.ndim, ",".join(parts))


def _multiply(a, b, sizes):
    r"""Cauchy product of two coefficient arrays of the same depth.

    The result has the given sizes. Coefficients are only read within the
    operands' own shapes and products landing beyond `sizes` are never
    computed.
    """
    out = zeros(sizes, mp.mpf if a.dtype == object else a.dtype.type)
    for idx in np.ndindex(*a.shape):
        window = tuple(slice(0, min(nb, n - i))
                       for i, nb, n in zip(idx, b.shape, sizes))
        target = tuple(slice(i, i + w.stop) for i, w in zip(idx, window))
        out[target] += a[idx] * b[window]
    return out


def _divide(u, v, sizes):
    r"""Power series division `u/v` of coefficient arrays of the same depth.

    Along axis 0 this solves `u = q v` order by order,
    \f[
        q_i = \Big(u_i - \sum_{k=1}^{i} v_k q_{i-k}\Big) / v_0,
    \f]
    where for more than one dimension the products and the division by
    `v_0` are operations on the nested sub-arrays.
    """
    leaf = len(sizes) == 1
    q = zeros(sizes, mp.mpf if u.dtype == object else u.dtype.type)
    q[tuple(slice(0, n) for n in u.shape)] = u
    v0 = v[0]
    for i in range(sizes[0]):
        total = None
        for k in range(1, min(i, v.shape[0] - 1) + 1):
            if leaf:
                term = v[k] * q[i-k]
            else:
                term = _multiply(v[k], q[i-k], sizes[1:])
            total = term if total is None else total + term
        numerator = q[i] if total is None else q[i] - total
        if leaf:
            q[i] = ieee_divide(numerator, v0)
        else:
            q[i] = _divide(numerator, v0, sizes[1:])
    return q


def _scale(coeffs, c):
    r"""Multiply coefficients by a scalar in-place, skipping zeros.

    The root is always multiplied so that e.g. `0 * inf` gives `nan` there.
    """
    mask = np.asarray(coeffs != 0, dtype=bool)
    mask[(0,) * coeffs.ndim] = True
    coeffs[mask] = coeffs[mask] * c
    return coeffs


_ieee_divide_objects = np.frompyfunc(ieee_divide, 2, 1)


def _divide_by_scalar(coeffs, c):
    if coeffs.dtype == object:
        return np.asarray(_ieee_divide_objects(coeffs, c), dtype=object)
    return coeffs / c


def _root_type_for(value, use_mp, root_type):
    if root_type is not None:
        return root_type
    if use_mp:
        return mp.mpf
    if isinstance(value, str):
        return np.float64
    return root_type_of(value)


def _check_orders(orders):
    if not orders:
        raise ValueError("At least one order needs to be specified.")
    orders = tuple(operator.index(o) for o in orders)
    if any(o < 0 for o in orders):
        raise ValueError("Orders must not be negative: %s" % (orders,))
    return orders


def constant(value, *orders, use_mp=False, root_type=None):
    r"""Create a constant series.

    The root coefficient is `value`, all others are zero, i.e. all
    derivatives vanish.

    Args:
        value:  Value of the constant. May be a decimal string literal.
        *orders: Truncation orders of the dimensions (at least one).
        use_mp: Whether to use `mpmath.mpf` coefficients. An `mpf` value
                implies this.
        root_type: Explicit root type overriding `use_mp`.
    """
    orders = _check_orders(orders)
    root_type = _root_type_for(value, use_mp, root_type)
    coeffs = zeros(tuple(o + 1 for o in orders), root_type)
    coeffs[(0,) * len(orders)] = parse_literal(value, root_type)
    return TruncatedSeries(coeffs)


def make_fvar(value, *orders, use_mp=False, root_type=None):
    r"""Create an independent variable.

    The variable is seeded along the innermost given dimension: the
    coefficient at `(0, ..., 0, 1)` is one. For example, `make_fvar(x, 3)`
    is the first variable with order 3 while `make_fvar(y, 0, 0, 4)` is
    the third variable of a computation with order 4 in that variable.

    Args are the same as for constant().
    """
    series = constant(value, *orders, use_mp=use_mp, root_type=root_type)
    if series.orders[-1] > 0:
        series.coeffs[(0,) * (series.depth - 1) + (1,)] = \
            coerce_scalar(1, series.root_type)
    return series


def variable(value, order, dim=0, depth=None, use_mp=False, root_type=None):
    r"""Create the independent variable of dimension `dim`.

    Args:
        value:  Expansion point of the variable.
        order:  Truncation order of dimension `dim`.
        dim:    Index of the dimension/variable (default `0`).
        depth:  Number of dimensions. Defaults to `dim+1`. All dimensions
                other than `dim` have order zero.
        use_mp, root_type: See constant().
    """
    if depth is None:
        depth = dim + 1
    if not 0 <= dim < depth:
        raise ValueError("Dimension %s not within depth %s." % (dim, depth))
    orders = [0] * depth
    orders[dim] = order
    series = constant(value, *orders, use_mp=use_mp, root_type=root_type)
    if order > 0:
        index = [0] * depth
        index[dim] = 1
        series.coeffs[tuple(index)] = coerce_scalar(1, series.root_type)
    return series


def make_ftuple(values, orders, use_mp=False, root_type=None):
    r"""Create one independent variable per value.

    The `k`-th variable is seeded along dimension `k` with order
    `orders[k]`, so the results can be combined to compute mixed partial
    derivatives of up to these orders.

    @b Examples

    ```
        >>> w, x = make_ftuple([1.0, 2.0], [3, 2])
        >>> (w*x).orders
        (3, 2)
    ```
    """
    if len(values) != len(orders):
        raise ValueError("Need one order for each value.")
    return tuple(variable(value, order, dim=k, use_mp=use_mp,
                          root_type=root_type)
                 for k, (value, order) in enumerate(zip(values, orders)))
