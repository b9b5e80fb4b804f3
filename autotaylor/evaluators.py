r"""@package autotaylor.evaluators

Callable adapters computing derivatives of plain Python functions.

Any function built from arithmetic operators and the functions in
autotaylor.functions can be differentiated by calling it with series
arguments. The classes and functions here hide the creation of the
variables and the extraction of the derivatives.

A SeriesEvaluator behaves like a function of one variable which can also
evaluate its derivatives. The series at the last evaluation point is kept,
so asking for several derivatives at the same point computes the series
only once:

~~~.py
ev = SeriesEvaluator(lambda x: exp(x) * sin(x), order=3)
print(ev(0.5), ev.diff(0.5), ev.diff(0.5, n=3))
d2 = ev.function(2)
print(d2(1.0))
~~~
"""

from .promotion import SeriesShape, is_series, promote_root_types
from .series import constant, make_fvar, make_ftuple


__all__ = [
    "SeriesEvaluator",
    "derivatives",
    "partials",
]


class SeriesEvaluator(object):
    r"""Evaluator for a function of one variable and its derivatives.

    The function is evaluated with a series argument of the configured
    order. The resulting series is cached until a different point is
    requested.
    """
    def __init__(self, func, order, use_mp=False):
        r"""Create an evaluator for a callable.

        Args:
            func:   Callable taking one argument. It must only use
                    operations supported by TruncatedSeries.
            order:  Maximum derivative order to compute.
            use_mp: Whether to compute with `mpmath.mpf` coefficients.
        """
        self._func = func
        ## Maximum derivative order available.
        self.order = order
        ## Boolean indicating if computation should use `mpmath`.
        self.use_mp = use_mp
        self._x = None
        self._series = None

    def __call__(self, x):
        r"""Compute the function value at a point x."""
        return self.diff(x, 0)

    def diff(self, x, n=1):
        r"""Evaluate the n'th derivative of the function at a point x.

        @raises TruncationIndexError if `n` exceeds the configured order.
        """
        self.set_x(x)
        return self._series.derivative(n)

    def function(self, n=0):
        r"""Return a callable for the n'th derivative."""
        return lambda x: self.diff(x, n)

    def series(self, x):
        r"""Return (a copy of) the series of the function at x."""
        self.set_x(x)
        return self._series.copy()

    def set_x(self, x):
        r"""Check if x has changed since the last call and trigger an update."""
        if self._series is not None and self._x == x:
            return False
        self._x = x
        self._x_changed(x)
        return True

    def _x_changed(self, x):
        value = self._func(make_fvar(x, self.order, use_mp=self.use_mp))
        if not is_series(value):
            value = constant(value, self.order, use_mp=self.use_mp)
        self._series = value


def derivatives(func, x, order, use_mp=False):
    r"""List of the derivatives `0, ..., order` of `func` at `x`."""
    ev = SeriesEvaluator(func, order, use_mp=use_mp)
    return [ev.diff(x, n) for n in range(order + 1)]


def partials(func, point, orders, use_mp=False):
    r"""Array of all mixed partial derivatives of `func` at a point.

    Args:
        func:   Callable taking one argument per variable.
        point:  Sequence of values at which to evaluate.
        orders: Sequence of maximum derivative orders, one per variable.
        use_mp: Whether to compute with `mpmath.mpf` coefficients.

    @return NumPy array of shape `[o+1 for o in orders]`. The element at
        `(i0, i1, ...)` is the derivative of order `i0` in the first
        variable, `i1` in the second, etc.
    """
    orders = tuple(orders)
    variables = make_ftuple(point, orders, use_mp=use_mp)
    value = func(*variables)
    root_type = promote_root_types(value, *variables)
    shape = SeriesShape(orders, root_type)
    if is_series(value):
        value = value.convert(shape)
    else:
        value = constant(value, *orders, root_type=root_type)
    return value.derivatives()
