import io
import unittest
import numpy as np
import pytest

from diag_hessian import DiagonalModifiedSR1, DegenerateStepError, DimensionMismatchError, auxiliary_vector
from diag_hessian.shared.autodiff import gradient, hessian_diagonal, value

A_DIAG = np.array([2.0, 3.0, 4.0])


def quadratic(x):
    return 0.5 * np.sum(A_DIAG * x ** 2)


class TestDiagonalModifiedSR1(unittest.TestCase):

    def test_update_formula(self):
        # psi = 1, yt = [3, 1], sigma = 10 / 3
        B = DiagonalModifiedSR1(np.array([1.0, 1.0]))
        s = np.array([1.0, 0.0])
        B.update(s, np.array([3.0, 1.0]), np.zeros(2), 0.5, s)
        np.testing.assert_allclose(B.d, np.full(2, 13.0 / 3.0))

    def test_absolute_value_of_psi(self):
        # psi = -2, |psi| = 2, yt = [4, 1], sigma = 17 / 4
        B = DiagonalModifiedSR1(np.array([1.0, 1.0]))
        s = np.array([1.0, 0.0])
        B.update(s, np.array([3.0, 1.0]), np.zeros(2), -1.0, s)
        np.testing.assert_allclose(B.d, np.full(2, 21.0 / 4.0))

    def test_correction_is_uniform(self):
        d0 = np.array([1.0, -2.0, 5.0])
        B = DiagonalModifiedSR1(d0.copy())
        B.update(np.array([0.3, 0.1, -0.2]), np.array([1.0, 0.5, 0.2]),
                 np.array([0.1, 0.2, 0.3]), 0.05, np.array([0.3, 0.1, -0.2]))
        shift = B.d - d0
        np.testing.assert_allclose(shift, np.full(3, shift[0]))

    def test_quadratic_uniform_offset_is_recovered(self):
        x0 = np.array([1.0, -0.5, 2.0])
        x1 = x0 + np.array([0.1, 0.2, -0.1])
        g0, g1 = A_DIAG * x0, A_DIAG * x1
        for choice in ('s', 'y', 'grad'):
            B = DiagonalModifiedSR1(A_DIAG + 5.0)
            B.update_from_points(x0, x1, g0, g1, quadratic(x0), quadratic(x1), choice=choice)
            np.testing.assert_allclose(B.d, A_DIAG, atol=1e-9, err_msg=f"u = {choice}")

    def test_update_from_points_matches_update(self):
        x0 = np.array([1.0, -0.5, 2.0])
        x1 = np.array([1.2, -0.4, 1.7])
        g0, g1 = np.array([0.5, 1.0, -1.0]), np.array([0.7, 1.4, -0.2])
        B1 = DiagonalModifiedSR1(np.array([1.0, 2.0, 3.0]))
        B2 = DiagonalModifiedSR1(np.array([1.0, 2.0, 3.0]))
        B1.update_from_points(x0, x1, g0, g1, 3.0, 2.5, choice='grad')
        B2.update(x1 - x0, g1 - g0, g0 + g1, 0.5, g0)
        np.testing.assert_allclose(B1.d, B2.d)

    def test_s_dot_u_zero_fails_and_keeps_state(self):
        B = DiagonalModifiedSR1(np.array([1.0, 2.0, 3.0]))
        with self.assertRaises(DegenerateStepError) as ctx:
            B.update(np.array([1.0, 0.0, 0.0]), np.ones(3), np.ones(3), 1.0, np.array([0.0, 1.0, 0.0]))
        self.assertEqual(ctx.exception.quantity, "dot(s, u)")
        np.testing.assert_array_equal(B.d, np.array([1.0, 2.0, 3.0]))

    def test_modified_y_orthogonal_to_s_fails_and_keeps_state(self):
        log = io.StringIO()
        B = DiagonalModifiedSR1(np.ones(3))
        s = np.array([1.0, 0.0, 0.0])
        with self.assertRaises(DegenerateStepError) as ctx:
            B.update(s, np.array([1.0, 5.0, 0.0]), np.zeros(3), 0.0, s, logfile=log)
        self.assertEqual(ctx.exception.quantity, "dot(yt, s)")
        np.testing.assert_array_equal(B.d, np.ones(3))
        self.assertIn("dot(yt, s) = 0", log.getvalue())

    def test_overflow_fails_and_keeps_state(self):
        B = DiagonalModifiedSR1(np.array([1.0, 1.0]))
        s = np.array([1.0, 0.0])
        with self.assertRaises(DegenerateStepError) as ctx:
            B.update(s, np.array([1e200, 0.0]), np.zeros(2), 0.0, s)
        self.assertEqual(ctx.exception.quantity, "updated diagonal")
        np.testing.assert_array_equal(B.d, np.ones(2))

    def test_integer_step_is_promoted(self):
        # psi = 0, yt = [2**32, 0], sigma = 1
        B = DiagonalModifiedSR1(np.array([1.0, 1.0]))
        s = np.array([2 ** 32, 0])
        B.update(s, np.array([2 ** 33, 0]), np.zeros(2, dtype=int), 0, s)
        np.testing.assert_allclose(B.d, np.full(2, 2.0))

    def test_dimension_mismatch(self):
        B = DiagonalModifiedSR1(np.ones(3))
        with self.assertRaises(DimensionMismatchError):
            B.update(np.ones(3), np.ones(3), np.ones(2), 0.0, np.ones(3))
        with self.assertRaises(DimensionMismatchError):
            B.update(np.ones(3), np.ones(3), np.ones(3), 0.0, np.ones(4))


def test_auxiliary_vector_choices():
    s, y, g = np.array([1.0]), np.array([2.0]), np.array([3.0])
    assert auxiliary_vector('s', s, y, g) is s
    assert auxiliary_vector('y', s, y, g) is y
    assert auxiliary_vector('grad', s, y, g) is g
    with pytest.raises(ValueError):
        auxiliary_vector('x', s, y, g)


@pytest.mark.parametrize("choice", ['s', 'y', 'grad'])
def test_autodiff_points(choice):
    def f(x):
        return x[0] ** 2 + x[1] ** 2 * x[2] ** 2

    x0 = np.array([0.5, 0.0, 1.0])
    x1 = x0 + np.array([0.1, 0.1, 0.1])
    d0 = hessian_diagonal(f, x0)
    B = DiagonalModifiedSR1(d0.copy())
    B.update_from_points(x0, x1, gradient(f, x0), gradient(f, x1), value(f, x0), value(f, x1), choice=choice)
    shift = B.d - d0
    assert np.all(np.isfinite(B.d))
    np.testing.assert_allclose(shift, np.full(3, shift[0]))


if __name__ == '__main__':
    unittest.main()
