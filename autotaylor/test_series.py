#!/usr/bin/env python3

import unittest
import sys

import numpy as np
from mpmath import mp

from testutils import AutoTaylorTestCase
from .numutils import TruncationIndexError, binomial
from .series import TruncatedSeries, constant, make_fvar, variable
from .series import make_ftuple


class TestConstruction(AutoTaylorTestCase):
    def test_constant(self):
        c = constant(3.5, 2, 1)
        self.assertEqual(c.orders, (2, 1))
        self.assertEqual(c.depth, 2)
        self.assertEqual(c.order, 2)
        self.assertEqual(c.order_sum, 3)
        self.assertEqual(c.root, 3.5)
        self.assertIs(c.root_type, np.float64)
        self.assertFalse(c.use_mp)
        self.assertEqual(c.derivative(1, 0), 0.0)
        self.assertEqual(c.derivative(2, 1), 0.0)
        self.assertEqual(float(c), 3.5)

    def test_make_fvar(self):
        x = make_fvar(2.0, 3)
        self.assertListAlmostEqual(x.coeffs, [2.0, 1.0, 0.0, 0.0])
        self.assertEqual(x.derivative(0), 2.0)
        self.assertEqual(x.derivative(1), 1.0)
        self.assertEqual(x.derivative(2), 0.0)
        y = make_fvar(5.0, 0, 2)
        self.assertEqual(y.orders, (0, 2))
        self.assertEqual(y.at(0, 1), 1.0)
        self.assertEqual(make_fvar(5.0, 0).coeffs.tolist(), [5.0])

    def test_variable(self):
        v = variable(2.0, 3, dim=1, depth=3)
        self.assertEqual(v.orders, (0, 3, 0))
        self.assertEqual(v.at(0, 1, 0), 1.0)
        self.assertEqual(v.root, 2.0)
        self.assertEqual(variable(1.0, 2).orders, (2,))
        self.assertEqual(variable(1.0, 2, dim=2).orders, (0, 0, 2))
        with self.assertRaises(ValueError):
            variable(1.0, 2, dim=3, depth=2)

    def test_make_ftuple(self):
        w, x = make_ftuple([1.0, 2.0], [3, 2])
        self.assertEqual(w.orders, (3,))
        self.assertEqual(x.orders, (0, 2))
        self.assertEqual((w*x).orders, (3, 2))
        self.assertEqual((w*x).derivative(1, 1), 1.0)
        with self.assertRaises(ValueError):
            make_ftuple([1.0], [1, 2])

    def test_mp(self):
        with mp.workdps(50):
            x = make_fvar("0.1", 2, use_mp=True)
            self.assertIs(x.root_type, mp.mpf)
            self.assertTrue(x.use_mp)
            self.assertEqual(x.root, mp.mpf("0.1"))
            self.assertIsType(x.at(1), mp.mpf)
            self.assertIsType(x.at(2), mp.mpf)
        self.assertTrue(make_fvar(mp.mpf(1), 2).use_mp)

    def test_root_type(self):
        x = make_fvar(1.0, 2, root_type=np.float32)
        self.assertIs(x.root_type, np.float32)
        self.assertIs((x * 2.0).root_type, np.float32)
        self.assertIs((x * make_fvar(1.0, 1)).root_type, np.float64)
        self.assertIs((x * mp.mpf(2)).root_type, mp.mpf)
        self.assertIs(TruncatedSeries(np.array([1, 2])).root_type, np.float64)

    def test_errors(self):
        with self.assertRaises(ValueError):
            constant(1.0)
        with self.assertRaises(ValueError):
            make_fvar(1.0, -1)
        with self.assertRaises(ValueError):
            constant("one", 2)
        with self.assertRaises(TypeError):
            constant(1j, 2)
        with self.assertRaises(ValueError):
            TruncatedSeries(np.array(1.0))
        with self.assertRaises(TypeError):
            TruncatedSeries(np.array(["a"]))
        with self.assertRaises(TypeError):
            make_fvar(1.0, 2) + "1"

    def test_copy(self):
        x = make_fvar(1.0, 2)
        y = x.copy()
        y.set_root(5.0)
        self.assertEqual(x.root, 1.0)
        self.assertEqual(y.root, 5.0)
        self.assertIs(x.negate(), x)
        self.assertListAlmostEqual(x.coeffs, [-1.0, -1.0, 0.0])
        c = x.constant_like(4.0)
        self.assertEqual(c.orders, x.orders)
        self.assertListAlmostEqual(c.coeffs, [4.0, 0.0, 0.0])

    def test_convert(self):
        x = make_fvar(1.0, 2)
        y = x.convert((3, 1))
        self.assertEqual(y.orders, (3, 1))
        self.assertEqual(y.at(1, 0), 1.0)
        self.assertEqual(y.at(3, 1), 0.0)
        with self.assertRaises(ValueError):
            x.convert((1,))


class TestExtraction(AutoTaylorTestCase):
    def test_at(self):
        x = make_fvar(2.0, 2)
        y = make_fvar(3.0, 0, 2)
        s = x * x * y
        self.assertEqual(s.at(0, 0), 12.0)
        self.assertEqual(s.at(2, 1), 1.0)
        sub = s.at(2)
        self.assertIsInstance(sub, TruncatedSeries)
        self.assertEqual(sub.depth, 1)
        self.assertListAlmostEqual(sub.coeffs, [3.0, 1.0, 0.0])
        sub.set_root(0.0)
        self.assertEqual(s.at(2, 0), 3.0)

    def test_derivative(self):
        x = make_fvar(2.0, 2)
        y = make_fvar(3.0, 0, 2)
        s = x * x * y
        self.assertEqual(s.derivative(0, 0), s.root)
        self.assertEqual(s.derivative(2, 1), 2.0)
        self.assertEqual(s.derivative(1, 1), 4.0)
        self.assertEqual(s.derivative(1, 0), 12.0)
        self.assertEqual(s.derivative(0, 2), 0.0)
        self.assertListAlmostEqual(s.derivative(2).coeffs, [6.0, 2.0, 0.0])
        derivs = s.derivatives()
        self.assertEqual(derivs.shape, (3, 3))
        for i in range(3):
            for j in range(3):
                self.assertEqual(derivs[i, j], s.derivative(i, j))

    def test_out_of_range(self):
        x = make_fvar(1.0, 2, 3)
        with self.assertRaises(TruncationIndexError):
            x.at(3)
        with self.assertRaises(TruncationIndexError):
            x.at(0, 4)
        with self.assertRaises(TruncationIndexError):
            x.derivative(-1, 0)
        with self.assertRaises(IndexError):
            x.derivative(3, 0)
        with self.assertRaises(TypeError):
            x.at(0, 0, 0)


class TestArithmetic(AutoTaylorTestCase):
    def test_scenario_rational(self):
        x = make_fvar(1.0, 4)
        f = 1 / (x*x + 1)
        self.assertListAlmostEqual([f.derivative(i) for i in range(5)],
                                   [0.5, -0.5, 0.5, 0.0, -3.0], delta=1e-14)

    def test_scenario_rational_mp(self):
        with mp.workdps(40):
            x = make_fvar(1, 4, use_mp=True)
            f = 1 / (x*x + 1)
            derivs = [f.derivative(i) for i in range(5)]
            self.assertIsType(derivs[4], mp.mpf)
            self.assertListAlmostEqual(derivs, [0.5, -0.5, 0.5, 0, -3],
                                       delta=mp.mpf('1e-38'))

    def _sample(self):
        x = make_fvar(0.5, 3)
        y = make_fvar(-1.5, 0, 2)
        a = x*x*y + 3*y - x + 2
        b = 1 / (x + y*y + 4) - x*y*y
        return a, b

    def test_linearity(self):
        a, b = self._sample()
        s = a + b
        d = a - 2*b
        for i in range(4):
            for j in range(3):
                self.assertAlmostEqual(s.derivative(i, j),
                                       a.derivative(i, j) + b.derivative(i, j))
                self.assertAlmostEqual(d.derivative(i, j),
                                       a.derivative(i, j) - 2*b.derivative(i, j))

    def test_leibniz(self):
        x = make_fvar(0.5, 5)
        a = 1 / (x + 2)
        b = x*x*x + x
        p = a * b
        for n in range(6):
            expected = sum(binomial(n, k) * a.derivative(k) * b.derivative(n-k)
                           for k in range(n+1))
            self.assertAlmostEqual(p.derivative(n), expected, places=10)

    def test_division_roundtrip(self):
        a, b = self._sample()
        self.assertCoeffsAlmostEqual((a / b) * b, a, delta=1e-12)
        self.assertCoeffsAlmostEqual((a * b) / b, a, delta=1e-12)

    def test_mixed_shapes(self):
        x = make_fvar(1.0, 2)
        y = make_fvar(2.0, 0, 3)
        s = x * y
        self.assertEqual(s.orders, (2, 3))
        self.assertEqual(s.root, 2.0)
        self.assertEqual(s.at(1, 1), 1.0)
        self.assertEqual((x + y).orders, (2, 3))
        self.assertEqual((y - x).at(1, 0), -1.0)
        q = y / x
        self.assertEqual(q.orders, (2, 3))
        self.assertAlmostEqual(q.derivative(1, 1), -1.0)

    def test_scalars(self):
        x = make_fvar(2.0, 2)
        self.assertListAlmostEqual((x + 1).coeffs, [3.0, 1.0, 0.0])
        self.assertListAlmostEqual((1 + x).coeffs, [3.0, 1.0, 0.0])
        self.assertListAlmostEqual((x - 1).coeffs, [1.0, 1.0, 0.0])
        self.assertListAlmostEqual((1 - x).coeffs, [-1.0, -1.0, 0.0])
        self.assertListAlmostEqual((3 * x).coeffs, [6.0, 3.0, 0.0])
        self.assertListAlmostEqual((x / 2).coeffs, [1.0, 0.5, 0.0])
        self.assertListAlmostEqual((2 / x).coeffs, [1.0, -0.5, 0.25])
        self.assertListAlmostEqual((-x).coeffs, [-2.0, -1.0, 0.0])
        self.assertListAlmostEqual((+x).coeffs, [2.0, 1.0, 0.0])
        self.assertIsInstance(np.float64(2.0) * x, TruncatedSeries)

    def test_scalar_infinity(self):
        s = make_fvar(0.0, 2) * np.inf
        self.assertTrue(np.isnan(s.root))
        self.assertEqual(s.at(1), np.inf)
        self.assertEqual(s.at(2), 0.0)

    def test_inplace(self):
        s = make_fvar(1.0, 2)
        t = s
        s += 1
        self.assertIs(t, s)
        self.assertEqual(s.root, 2.0)
        s *= 2
        self.assertListAlmostEqual(s.coeffs, [4.0, 2.0, 0.0])
        s -= make_fvar(1.0, 2)
        self.assertListAlmostEqual(s.coeffs, [3.0, 1.0, 0.0])
        s /= 2
        self.assertListAlmostEqual(s.coeffs, [1.5, 0.5, 0.0])
        s *= make_fvar(0.0, 0, 1)
        self.assertEqual(s.orders, (2, 1))
        self.assertEqual(s.at(1, 1), 0.5)

    def test_inverse(self):
        x = make_fvar(2.0, 3)
        self.assertCoeffsAlmostEqual(x.inverse(), 1 / x)

    def test_inverse_at_zero(self):
        x = make_fvar(0.0, 3)
        derivs = [x.inverse().derivative(i) for i in range(4)]
        self.assertListAlmostEqual(derivs, [np.inf, -np.inf, np.inf, -np.inf])

    def test_inverse_at_zero_mp(self):
        x = make_fvar(0, 3, use_mp=True)
        derivs = [x.inverse().derivative(i) for i in range(4)]
        self.assertListAlmostEqual(derivs, [mp.inf, -mp.inf, mp.inf, -mp.inf])

    def test_mixed_root_types(self):
        x = make_fvar(1.0, 2)
        y = make_fvar(2, 2, use_mp=True)
        s = x * y
        self.assertIs(s.root_type, mp.mpf)
        self.assertEqual(s.root, 2)
        self.assertEqual(s.at(1), 3)


class TestComparisons(AutoTaylorTestCase):
    def test_compare_root(self):
        x = make_fvar(2.0, 2)
        self.assertTrue(x == 2.0)
        self.assertTrue(2.0 == x)
        self.assertTrue(x != 3)
        self.assertTrue(x < 3)
        self.assertTrue(x <= 2)
        self.assertTrue(x > make_fvar(1.0, 5))
        self.assertTrue(x >= constant(2.0, 0))
        self.assertFalse(x > 2)
        self.assertTrue(1 < x)

    def test_unhashable(self):
        with self.assertRaises(TypeError):
            hash(make_fvar(1.0, 1))


class TestRepr(AutoTaylorTestCase):
    def test_repr(self):
        self.assertEqual(repr(make_fvar(1.0, 2)), "depth(1)(1.0,1.0,0.0)")
        s = TruncatedSeries(np.array([[1.0, 2.0], [3.0, 4.0]]))
        self.assertEqual(str(s), "depth(2)(depth(1)(1.0,2.0),depth(1)(3.0,4.0))")

    def test_repr_mp(self):
        with mp.workdps(15):
            self.assertEqual(repr(make_fvar(1, 1, use_mp=True)),
                             "depth(1)(1.0,1.0)")


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
