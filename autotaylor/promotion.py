r"""@package autotaylor.promotion

Common shapes and root types of series and scalars.

Binary operations between series of different depth, truncation orders or
root types first compute a common SeriesShape with promote() and then
convert both coefficient arrays to that shape. Converting never truncates:
missing trailing dimensions are appended with order 0 and missing
coefficients are zero.

The root type of a series is either a NumPy floating point type (e.g.
`numpy.float64`) or `mpmath.mpf`. Arbitrary precision wins over floating
point types, and several floating point types combine according to
`numpy.result_type`. Plain Python numbers and NumPy scalars act as depth-0
constants which adopt the root type of the series they are combined with.
Only an `mpf` scalar changes the root type of a floating point series.


@b Examples

```
    >>> shape = promote(make_fvar(1.0, 2), make_fvar(1.0, 0, 3))
    >>> shape.orders
    (2, 3)
    >>> promote(make_fvar(1.0, 2), mp.mpf(2)).root_type is mp.mpf
    True
```
"""

from collections import namedtuple
import numbers

import numpy as np
from mpmath import mp


__all__ = [
    "SeriesShape",
    "is_series",
    "is_scalar",
    "root_type_of",
    "depth_of",
    "orders_of",
    "order_sum_of",
    "promote",
    "promote_root_types",
    "coerce_scalar",
    "parse_literal",
    "zeros",
    "constant_coeffs",
    "cast_coeffs",
    "expand_coeffs",
    "convert_coeffs",
]


class SeriesShape(namedtuple('SeriesShape', ['orders', 'root_type'])):
    r"""Truncation orders and root type describing a series layout.

    The coefficient array of a series with this shape has `depth`
    dimensions of lengths `sizes`.
    """
    __slots__ = ()

    @property
    def depth(self):
        r"""Number of independent variables (dimensions)."""
        return len(self.orders)

    @property
    def order_sum(self):
        r"""Maximum total degree representable in this shape."""
        return sum(self.orders)

    @property
    def sizes(self):
        r"""Shape of the coefficient array."""
        return tuple(o + 1 for o in self.orders)

    @property
    def use_mp(self):
        r"""Whether the root type is `mpmath.mpf`."""
        return self.root_type is mp.mpf

    @property
    def dtype(self):
        r"""NumPy dtype of the coefficient array."""
        if self.use_mp:
            return np.dtype(object)
        return np.dtype(self.root_type)


def is_series(x):
    r"""Return whether `x` behaves like a truncated series."""
    return isinstance(getattr(x, 'coeffs', None), np.ndarray) and hasattr(x, 'orders')


def is_scalar(x):
    r"""Return whether `x` is a supported scalar (a depth-0 constant)."""
    if isinstance(x, mp.mpf):
        return True
    if isinstance(x, (bool, np.bool_)):
        return False
    return isinstance(x, numbers.Real)


def root_type_of(x):
    r"""Root type of a series or a scalar.

    Python numbers have root type `numpy.float64`. Any unsupported value
    (e.g. complex numbers, strings) raises a `TypeError`.
    """
    if is_series(x):
        return x.root_type
    if isinstance(x, mp.mpf):
        return mp.mpf
    if isinstance(x, np.floating):
        return type(x)
    if is_scalar(x):
        return np.float64
    raise TypeError("Unsupported numeric type: %s" % type(x).__name__)


def depth_of(x):
    r"""Depth of a series (`0` for scalars)."""
    return x.depth if is_series(x) else 0


def orders_of(x):
    r"""Orders of a series (empty tuple for scalars)."""
    return tuple(x.orders) if is_series(x) else ()


def order_sum_of(x):
    r"""Sum of the orders of a series (`0` for scalars)."""
    return sum(orders_of(x))


def promote_root_types(*args):
    r"""Compute the common root type of series and scalars.

    `mpmath.mpf` wins whenever any argument uses it. Otherwise the NumPy
    result type of the series' root types is returned. Scalars only
    contribute their root type if no series is among the arguments.
    """
    types = [root_type_of(a) for a in args]
    if mp.mpf in types:
        return mp.mpf
    series_types = [t for t, a in zip(types, args) if is_series(a)]
    if series_types:
        types = series_types
    if not types:
        return np.float64
    return np.result_type(*types).type


def promote(*args):
    r"""Return the common SeriesShape of the given series and scalars.

    The depth is the maximum depth, the orders are the elementwise maximum
    (dimensions missing from shallower series count as order 0) and the
    root type is determined by promote_root_types().

    @b Examples

    ```
        >>> promote(make_fvar(1.0, 3), make_fvar(2.0, 1, 2), 5.0)
        SeriesShape(orders=(3, 2), root_type=<class 'numpy.float64'>)
    ```
    """
    root_type = promote_root_types(*args)
    orders = []
    for a in args:
        for k, order in enumerate(orders_of(a)):
            if k < len(orders):
                orders[k] = max(orders[k], order)
            else:
                orders.append(order)
    return SeriesShape(tuple(orders), root_type)


def coerce_scalar(value, root_type):
    r"""Convert a supported scalar to the given root type."""
    root_type_of(value)
    if root_type is mp.mpf:
        return mp.mpf(value)
    return root_type(value)


def parse_literal(value, root_type):
    r"""Convert a scalar or decimal string literal to the given root type.

    Strings are parsed by `mpmath.mpf` in arbitrary precision mode (using
    the current working precision) or by NumPy otherwise.
    """
    if isinstance(value, str):
        if root_type is mp.mpf:
            return mp.mpf(value)
        try:
            return root_type(float(value))
        except ValueError:
            raise ValueError("Not a numeric literal: %r" % value)
    return coerce_scalar(value, root_type)


def zeros(sizes, root_type):
    r"""Create a zero coefficient array of the given sizes and root type."""
    if root_type is mp.mpf:
        out = np.empty(sizes, dtype=object)
        out.fill(mp.mpf(0))
        return out
    return np.zeros(sizes, dtype=root_type)


def constant_coeffs(value, sizes, root_type):
    r"""Coefficient array of a constant: `value` at the root, zeros elsewhere."""
    out = zeros(sizes, root_type)
    out[(0,) * len(sizes)] = coerce_scalar(value, root_type)
    return out


_to_mpf = np.frompyfunc(mp.mpf, 1, 1)


def cast_coeffs(coeffs, root_type):
    r"""Return the coefficients converted to `root_type`.

    The input is returned unchanged if it already has the right type.
    """
    if root_type is mp.mpf:
        if coeffs.dtype == object:
            return coeffs
        return np.asarray(_to_mpf(coeffs), dtype=object)
    if coeffs.dtype == np.dtype(root_type):
        return coeffs
    return coeffs.astype(root_type)


def expand_coeffs(coeffs, depth, root_type):
    r"""Append trailing length-1 axes up to `depth` and cast to `root_type`.

    No zero padding takes place, so the result may be a view of `coeffs`.
    """
    if coeffs.ndim > depth:
        raise ValueError("Cannot reduce depth %d to %d." % (coeffs.ndim, depth))
    coeffs = coeffs.reshape(coeffs.shape + (1,) * (depth - coeffs.ndim))
    return cast_coeffs(coeffs, root_type)


def convert_coeffs(coeffs, shape):
    r"""Return a new coefficient array zero-extended to `shape`.

    Args:
        coeffs: Coefficient array to convert. It must not be larger than
                `shape` in any dimension.
        shape:  Target SeriesShape.
    """
    sizes = shape.sizes
    coeffs = expand_coeffs(coeffs, len(sizes), shape.root_type)
    if any(n > m for n, m in zip(coeffs.shape, sizes)):
        raise ValueError("Cannot convert orders %s to smaller orders %s."
                         % (tuple(n-1 for n in coeffs.shape), shape.orders))
    out = zeros(sizes, shape.root_type)
    out[tuple(slice(0, n) for n in coeffs.shape)] = coeffs
    return out
