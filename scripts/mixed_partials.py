#!/usr/bin/env python3
r"""@package mixed_partials

Script computing 240 mixed partial derivatives of a function of four
variables and comparing them with symbolically computed reference values.

Usage:

    ./scripts/mixed_partials.py [-mp] [-dps DIGITS] [-v]

With `-mp`, the computation uses `mpmath` at `DIGITS` decimal places
(default `50`). `-v` shows log messages of the computation. The errors are
always evaluated at the full precision of the reference values.
"""

import logging
import time
import sys
import os.path as op

from mpmath import mp

sys.path.append(op.realpath(op.join(op.dirname(__file__), op.pardir)))

from autotaylor import context
from autotaylor.mixed_partials import mixed_partials, max_relative_error


def _flag_value(flag, default):
    if flag not in sys.argv:
        return default
    try:
        return int(sys.argv[sys.argv.index(flag) + 1])
    except (IndexError, ValueError):
        raise SystemExit("Option %s needs an integer argument." % flag)


def main():
    if '-v' in sys.argv or '-verbose' in sys.argv:
        logging.basicConfig(level=logging.DEBUG)
    use_mp = '-mp' in sys.argv
    dps = _flag_value("-dps", 50)
    with context(use_mp, dps):
        start = time.time()
        series = mixed_partials(use_mp=use_mp)
        logging.info("Computed series of orders %s in %.3f seconds.",
                     series.orders, time.time() - start)
    with mp.workdps(50):
        error = max_relative_error(series)
    count = series.coeffs.size
    print("max_relative_error = %.3g out of %d calculated values. (%s)"
          % (float(error), count, "mpmath, %d digits" % dps if use_mp else "float64"))


if __name__ == "__main__":
    main()
