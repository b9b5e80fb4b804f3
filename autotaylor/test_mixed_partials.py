#!/usr/bin/env python3

import unittest
import sys

from mpmath import mp, fp

from testutils import AutoTaylorTestCase, slowtest
from .contexts import context
from .evaluators import partials
from .mixed_partials import ORDERS, POINT, REFERENCE_VALUES
from .mixed_partials import mixed_partials_function, mixed_partials
from .mixed_partials import max_relative_error


class TestMixedPartials(AutoTaylorTestCase):
    def test_reference_count(self):
        count = 1
        for order in ORDERS:
            count *= order + 1
        self.assertEqual(len(REFERENCE_VALUES), count)

    def test_float(self):
        s = mixed_partials()
        self.assertEqual(s.orders, ORDERS)
        self.assertFalse(s.use_mp)
        with mp.workdps(50):
            self.assertLess(max_relative_error(s), 1e-12)

    def test_float_in_context(self):
        with context(False, 50) as ctx:
            self.assertIs(ctx, fp)
            s = mixed_partials()
        self.assertFalse(s.use_mp)
        with mp.workdps(50):
            self.assertLess(max_relative_error(s), 1e-12)

    def test_mp(self):
        with mp.workdps(50):
            s = mixed_partials(use_mp=True)
            self.assertEqual(s.orders, ORDERS)
            self.assertTrue(s.use_mp)
            self.assertLess(max_relative_error(s), mp.mpf('1e-45'))

    @slowtest
    def test_partials_mp(self):
        with mp.workdps(50):
            result = partials(mixed_partials_function, POINT, ORDERS, use_mp=True)
            self.assertEqual(result.shape, tuple(o + 1 for o in ORDERS))
            values = [mp.mpf(v) for v in REFERENCE_VALUES]
            self.assertListAlmostEqual(result.ravel(), values, rel=mp.mpf("1e-45"))


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
