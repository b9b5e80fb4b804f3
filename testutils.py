r"""@package testutils

Helpers shared by the `unittest` modules of the project.

The AutoTaylorTestCase base class honours the run configuration stored in
TestSettings (set by the `tests.py` runner) and adds assertions for
sequences of series coefficients. Coefficients may legitimately be infinite
or NaN when expanding about singular points, so these assertions treat equal
infinities as equal and let NaN match NaN.

Tests decorated with slowtest are skipped unless the runner sets
`TestSettings.skipslow = False` (option `-s`).
"""

import sys
import functools
import unittest
import time

import numpy as np
from mpmath import mp


__all__ = [
    "AutoTaylorTestCase",
    "TestSettings",
    "slowtest",
]


class TestSettings(object):
    """Run configuration set by the test runner."""
    ## Abort the run at the first failure or error.
    failfast = False
    ## Whether the runner buffers stdout/stderr (informational only).
    buffering = False
    ## Print the duration of each test (with `verbosity=2`).
    timing = False
    ## Skip tests decorated with slowtest().
    skipslow = True


def slowtest(func):
    """Mark a test to be skipped unless slow tests are requested."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if TestSettings.skipslow:
            raise unittest.SkipTest("slow test")
        return func(*args, **kwargs)
    return wrapper


def _isnan(x):
    if isinstance(x, mp.mpf):
        return mp.isnan(x)
    return bool(np.isnan(x))


def _outcome_counts(result):
    # Result objects of other runners (e.g. pytest) lack these lists.
    return tuple(len(getattr(result, name, ()))
                 for name in ('errors', 'failures', 'skipped'))


class AutoTaylorTestCase(unittest.TestCase):
    """Base class of the project's test cases.

    Compared to `unittest.TestCase`, this class
        * prints the duration of each successful test if TestSettings.timing
          is set and the runner is verbose
        * calls failureHook() whenever a test failed or errored
        * provides assertions comparing coefficient sequences elementwise
    """
    def run(self, result=None):
        before = _outcome_counts(result)
        start = time.time()
        outcome = super(AutoTaylorTestCase, self).run(result)
        duration = time.time() - start
        after = _outcome_counts(result)
        if after[:2] != before[:2]:
            self.failureHook(result)
        elif (TestSettings.timing and after == before
              and getattr(result, 'showAll', True)):
            print("(%.4f seconds) " % duration, file=sys.stderr, end='')
        return outcome

    def failureHook(self, result):
        r"""Called after this test failed or raised an error.

        Override to inspect or dump state for debugging. The default does
        nothing.
        """
        pass

    def assertIsType(self, obj, cls):
        r"""Assert that `type(obj)` is exactly `cls`."""
        self.assertIs(type(obj), cls)

    def assertListAlmostEqual(self, a, b, places=None, delta=None, rel=None):
        r"""Assert that two sequences agree elementwise.

        At most one of the tolerances may be given: a number of decimal
        `places` (the default, `7`), an absolute tolerance `delta` or a
        relative tolerance `rel`. Infinities have to match exactly while NaN
        only matches NaN.
        """
        if sum(tol is not None for tol in (places, delta, rel)) > 1:
            raise TypeError("Specify at most one of places, delta and rel.")
        if places is None and delta is None and rel is None:
            places = 7
        a, b = list(a), list(b)
        if len(a) != len(b):
            self.fail("Sequences differ in length: %d != %d" % (len(a), len(b)))
        def close(x, y):
            if x == y:
                return True
            if _isnan(x) or _isnan(y):
                return _isnan(x) and _isnan(y)
            diff = abs(x - y)
            if delta is not None:
                return diff <= delta
            if rel is not None:
                return diff <= rel * max(abs(x), abs(y))
            return round(float(diff), places) == 0
        bad = [i for i, (x, y) in enumerate(zip(a, b)) if not close(x, y)]
        if bad:
            shown = bad[:10]
            lines = ["%d of %d elements differ%s:" % (
                len(bad), len(a), "" if len(bad) == len(shown) else " (first 10)"
            )]
            lines += ["  [%d] %s != %s" % (i, a[i], b[i]) for i in shown]
            self.fail("\n".join(lines))

    def assertCoeffsAlmostEqual(self, a, b, **kw):
        r"""Compare two coefficient arrays (or series) of the same shape.

        Keyword arguments are passed to assertListAlmostEqual().
        """
        a = np.asarray(getattr(a, 'coeffs', a))
        b = np.asarray(getattr(b, 'coeffs', b))
        self.assertEqual(a.shape, b.shape)
        self.assertListAlmostEqual(a.ravel(), b.ravel(), **kw)
