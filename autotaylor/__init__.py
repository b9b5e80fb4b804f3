r"""@package autotaylor

Forward mode automatic differentiation with truncated Taylor series.

Ordinary scalar values are replaced by series.TruncatedSeries objects
carrying the value of an expression together with all its partial
derivatives up to fixed orders in one or more independent variables. The
derivatives are exact to floating point (or `mpmath`) precision; no symbolic
differentiation or finite differencing takes place.

The package is organized as follows:
    * autotaylor.series: the series class, arithmetic and constructors
    * autotaylor.compose: lifting scalar functions to series
    * autotaylor.functions: elementary functions of series
    * autotaylor.promotion: common shapes and root types
    * autotaylor.evaluators: derivatives of plain Python callables
    * autotaylor.contexts: scalar backends and precision control
    * autotaylor.mixed_partials: accuracy benchmark with reference values

As a simple example, the mixed partial derivative
\f$ \partial_x \partial_y^2 \f$ of \f$ f(x,y) = e^{xy} \f$ at
\f$ (1, 2) \f$ is obtained with:

~~~.py
x = make_fvar(1.0, 1)
y = make_fvar(2.0, 0, 2)
print(exp(x*y).derivative(1, 2))
~~~

For arbitrary precision, create the variables with `use_mp=True` and set the
precision with the context() context manager.
"""

from .numutils import NumericalError, TruncationIndexError
from .contexts import context
from .promotion import SeriesShape, promote
from .series import TruncatedSeries, constant, make_fvar, variable
from .series import make_ftuple
from .functions import *
from .evaluators import SeriesEvaluator, derivatives, partials
