#!/usr/bin/env python3

import unittest
import sys
import math

import numpy as np
from mpmath import mp

from testutils import AutoTaylorTestCase
from .numutils import TruncationIndexError
from .evaluators import SeriesEvaluator, derivatives, partials
from .functions import exp, sin


class TestSeriesEvaluator(AutoTaylorTestCase):
    def test_evaluate(self):
        ev = SeriesEvaluator(lambda x: x*x*x, order=3)
        self.assertAlmostEqual(ev(2.0), 8.0)
        self.assertAlmostEqual(ev.diff(2.0), 12.0)
        self.assertAlmostEqual(ev.diff(2.0, 2), 12.0)
        self.assertAlmostEqual(ev.diff(2.0, 3), 6.0)
        self.assertAlmostEqual(ev.diff(1.0, 1), 3.0)
        with self.assertRaises(TruncationIndexError):
            ev.diff(1.0, 4)

    def test_function(self):
        ev = SeriesEvaluator(lambda x: exp(x) * sin(x), order=2)
        d1 = ev.function(1)
        self.assertAlmostEqual(d1(0.5), math.exp(0.5) * (math.sin(0.5) + math.cos(0.5)))
        self.assertAlmostEqual(ev.function()(0.5), math.exp(0.5) * math.sin(0.5))

    def test_caching(self):
        calls = []
        def f(x):
            calls.append(x)
            return x*x
        ev = SeriesEvaluator(f, order=2)
        ev(1.0)
        ev.diff(1.0, 2)
        self.assertEqual(len(calls), 1)
        self.assertFalse(ev.set_x(1.0))
        ev(2.0)
        self.assertEqual(len(calls), 2)
        s = ev.series(2.0)
        s.set_root(0.0)
        self.assertAlmostEqual(ev(2.0), 4.0)

    def test_constant_result(self):
        ev = SeriesEvaluator(lambda x: 5.0, order=2)
        self.assertEqual(ev(1.0), 5.0)
        self.assertEqual(ev.diff(1.0, 2), 0.0)

    def test_mp(self):
        with mp.workdps(40):
            ev = SeriesEvaluator(exp, order=2, use_mp=True)
            self.assertIsType(ev.diff(1, 2), mp.mpf)
            self.assertTrue(abs(ev.diff(1, 2) - mp.e) < mp.mpf('1e-38'))


class TestHelpers(AutoTaylorTestCase):
    def test_derivatives(self):
        result = derivatives(lambda x: 1 / (x*x + 1), 1.0, 4)
        self.assertListAlmostEqual(result, [0.5, -0.5, 0.5, 0.0, -3.0])

    def test_partials(self):
        result = partials(lambda x, y: x*x*y, [2.0, 3.0], [2, 2])
        self.assertIsInstance(result, np.ndarray)
        self.assertEqual(result.shape, (3, 3))
        expected = np.array([[12.0, 4.0, 0.0],
                             [12.0, 4.0, 0.0],
                             [6.0, 2.0, 0.0]])
        self.assertCoeffsAlmostEqual(result, expected)

    def test_partials_unused_variable(self):
        result = partials(lambda x, y: 2 * x, [1.0, 5.0], [1, 2])
        self.assertEqual(result.shape, (2, 3))
        self.assertEqual(result[1, 0], 2.0)
        self.assertEqual(result[0, 1], 0.0)
        result = partials(lambda x, y: 1.5, [1.0, 5.0], [1, 1])
        self.assertEqual(result.shape, (2, 2))
        self.assertEqual(result[0, 0], 1.5)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
