#!/usr/bin/env python3

import unittest
import sys
import math

import numpy as np
from mpmath import mp

from testutils import AutoTaylorTestCase
from .compose import epsilon_multiply, epsilon_multiply_scalar
from .compose import apply_coefficients, apply_coefficients_nonhorner
from .compose import apply_derivatives, apply_derivatives_nonhorner
from .series import make_fvar


def _sample():
    x = make_fvar(0.5, 3)
    y = make_fvar(2.0, 0, 2)
    return x*x*y - 3*y + x + 1


def _identity(x0):
    return lambda i: {0: x0, 1: 1}.get(i, 0)


class TestEpsilonMultiply(AutoTaylorTestCase):
    def test_matches_product(self):
        s = _sample()
        eps = s - s.root
        eps2 = epsilon_multiply(eps.coeffs, 1, 0, eps.coeffs, 1, 0)
        self.assertCoeffsAlmostEqual(eps2, (eps*eps).coeffs, delta=1e-13)
        eps3 = epsilon_multiply(eps2, 2, 0, eps.coeffs, 1, 0)
        self.assertCoeffsAlmostEqual(eps3, (eps*eps*eps).coeffs, delta=1e-13)

    def test_one_dimensional(self):
        eps = make_fvar(0.0, 4).coeffs
        eps2 = epsilon_multiply(eps, 1, 0, eps, 1, 0)
        self.assertListAlmostEqual(eps2, [0, 0, 1, 0, 0])
        one = np.array([1.0, 0, 0, 0, 0])
        self.assertListAlmostEqual(epsilon_multiply(one, 0, 0, eps, 1, 0), eps)

    def test_scalar_skips_zeros(self):
        eps = make_fvar(0.0, 3).coeffs
        eps2 = epsilon_multiply(eps, 1, 0, eps, 1, 0)
        out = epsilon_multiply_scalar(eps2, 2, 0, np.inf)
        self.assertListAlmostEqual(out, [0, 0, np.inf, 0])
        out = epsilon_multiply_scalar(eps2, 2, 0, np.nan)
        self.assertListAlmostEqual(out, [0, 0, np.nan, 0])
        self.assertListAlmostEqual(eps2, [0, 0, 1, 0])

    def test_mp(self):
        eps = make_fvar(0, 2, use_mp=True) + make_fvar(0, 0, 1, use_mp=True)
        eps2 = epsilon_multiply(eps.coeffs, 1, 0, eps.coeffs, 1, 0)
        self.assertEqual(eps2.dtype, np.dtype(object))
        self.assertCoeffsAlmostEqual(eps2, (eps*eps).coeffs)
        self.assertEqual(eps2[1, 1], 2)


class TestComposition(AutoTaylorTestCase):
    def test_identity(self):
        s = _sample()
        f = _identity(s.root)
        self.assertCoeffsAlmostEqual(apply_coefficients(s, s.order_sum, f), s)
        self.assertCoeffsAlmostEqual(apply_derivatives(s, s.order_sum, f), s)
        self.assertCoeffsAlmostEqual(apply_coefficients_nonhorner(s, f), s)
        self.assertCoeffsAlmostEqual(
            apply_derivatives_nonhorner(s, s.order_sum, f), s
        )

    def test_methods(self):
        s = _sample()
        f = _identity(s.root)
        self.assertCoeffsAlmostEqual(s.apply_coefficients(s.order_sum, f), s)
        self.assertCoeffsAlmostEqual(s.apply_derivatives_nonhorner(0, f), s)

    def test_exp_forms(self):
        x = make_fvar(1.5, 5)
        d = math.exp(1.5)
        horner = x.apply_derivatives(x.order_sum, lambda i: d)
        by_power = x.apply_derivatives_nonhorner(x.order_sum, lambda i: d)
        coeffs = [d / math.factorial(i) for i in range(6)]
        self.assertListAlmostEqual(horner.coeffs, coeffs, rel=1e-15)
        self.assertListAlmostEqual(by_power.coeffs, coeffs, rel=1e-15)
        taylor = x.apply_coefficients_nonhorner(lambda i: coeffs[i])
        self.assertListAlmostEqual(taylor.coeffs, coeffs, rel=1e-15)

    def test_horner_order(self):
        x = make_fvar(1.0, 4)
        s = x.apply_coefficients(2, lambda i: 1)
        self.assertListAlmostEqual(s.coeffs, [1, 1, 1, 0, 0])

    def test_singular_coefficients(self):
        x = make_fvar(0.0, 3)
        derivs = [0.0, np.inf, -np.inf, np.inf]
        s = x.apply_derivatives_nonhorner(x.order_sum, lambda i: derivs[i])
        self.assertListAlmostEqual(s.coeffs, [0.0, np.inf, -np.inf, np.inf])

    def test_two_arguments(self):
        x = make_fvar(2.0, 2)
        y = make_fvar(3.0, 0, 2)
        taylor = {(0, 0): 6.0, (1, 0): 3.0, (0, 1): 2.0, (1, 1): 1.0}
        f = lambda i, j: taylor.get((i, j), 0.0)
        s = apply_coefficients(x, 4, f, y)
        self.assertEqual(s.orders, (2, 2))
        self.assertCoeffsAlmostEqual(s, x*y)
        s = apply_derivatives(x, 4, f, y)
        self.assertCoeffsAlmostEqual(s, x*y)
        s = apply_derivatives_nonhorner(x, 4, f, y)
        self.assertEqual(s.orders, (2, 2))
        self.assertCoeffsAlmostEqual(s, x*y)

    def test_two_arguments_mp(self):
        x = make_fvar(2, 2, use_mp=True)
        y = make_fvar(3, 0, 2, use_mp=True)
        taylor = {(0, 0): 6, (1, 0): 3, (0, 1): 2, (1, 1): 1}
        f = lambda i, j: mp.mpf(taylor.get((i, j), 0))
        s = apply_derivatives_nonhorner(x, 4, f, y)
        self.assertTrue(s.use_mp)
        self.assertCoeffsAlmostEqual(s, x*y)


def run_tests():
    suite = unittest.TestLoader().loadTestsFromModule(sys.modules[__name__])
    return len(unittest.TextTestRunner(verbosity=2).run(suite).failures)


if __name__ == '__main__':
    unittest.main()
