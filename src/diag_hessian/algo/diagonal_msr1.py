import numpy as np

from diag_hessian.core.base import DiagonalQuasiNewtonOperator, as_initial_diagonal, log_write
from diag_hessian.core.errors import DegenerateStepError
from diag_hessian.core.kernels import mul_square_diagonal

AUXILIARY_CHOICES = ("s", "y", "grad")


def auxiliary_vector(choice, s, y, grad_prev):
    """
    Pick the vector u of the modified secant equation.

    Args:
        choice (str): 's', 'y' or 'grad' (gradient at x_k).
    """
    if choice == "s":
        return s
    if choice == "y":
        return y
    if choice == "grad":
        return grad_prev
    raise ValueError(f"unknown auxiliary vector choice {choice!r}, expected one of {AUXILIARY_CHOICES}")


class DiagonalModifiedSR1(DiagonalQuasiNewtonOperator):
    """
    Diagonal modified SR1 approximation described in

    Farzin Modarres, Abu Hassan Malik, Wah June Leong,
    Improved Hessian approximation with modified secant equations for symmetric rank-one method.
    https://doi.org/10.1016/j.cam.2010.10.042
    """

    def __init__(self, d):
        d = as_initial_diagonal(d)
        super().__init__(d.shape[0], d.dtype)
        self.d = d
        self._yt = np.empty_like(d)
        self._Bs = np.empty_like(d)
        self._d_new = np.empty_like(d)

    def to_diagonal(self):
        return self.d.copy()

    def update(self, s, y, t, z, u, logfile=None):
        """
        Update from a modified secant pair.

        Args:
            s: x_{k+1} - x_k
            y: grad f(x_{k+1}) - grad f(x_k)
            t: grad f(x_k) + grad f(x_{k+1})
            z (float): f(x_k) - f(x_{k+1})
            u: one of s, y, grad f(x_k); see ``auxiliary_vector``.

        Every diagonal entry is shifted by the same
        sigma = yt'yt / yt's, where yt = y + |2z + t's| / s'u * u - Bs.

        Raises:
            DegenerateStepError: if s'u == 0 or yt's == 0. ``d`` is left unchanged.
        """
        s = self._check_vector(s, "s")
        y = self._check_vector(y, "y")
        t = self._check_vector(t, "t")
        u = self._check_vector(u, "u")

        psi = 2 * z + np.dot(t, s)
        mul_square_diagonal(self._Bs, self.d, s, 1.0, 0.0)
        sT_u = np.dot(s, u)
        if sT_u == 0:
            log_write(logfile, "Warning: DiagonalModifiedSR1 update skipped, dot(s, u) = 0.\n")
            raise DegenerateStepError("dot(s, u)", sT_u)

        yt = self._yt
        np.multiply(abs(psi) / sT_u, u, out=yt)
        yt += y
        yt -= self._Bs
        ytT_s = np.dot(yt, s)
        if ytT_s == 0:
            log_write(logfile, "Warning: DiagonalModifiedSR1 update skipped, dot(yt, s) = 0.\n")
            raise DegenerateStepError("dot(yt, s)", ytT_s)

        sigma = np.dot(yt, yt) / ytT_s
        d_new = self._d_new
        np.add(self.d, sigma, out=d_new)
        self._commit_diagonal(d_new, logfile)
        log_write(logfile, f"  DiagonalModifiedSR1 update: sigma={sigma:.4e}, psi={psi:.4e}\n")
        return self

    def update_from_points(self, x_prev, x_next, g_prev, g_next, f_prev, f_next, choice="s", logfile=None):
        """Build (s, y, t, z, u) from two evaluation points and call ``update``."""
        x_prev, x_next = np.asarray(x_prev), np.asarray(x_next)
        g_prev, g_next = np.asarray(g_prev), np.asarray(g_next)
        s = x_next - x_prev
        y = g_next - g_prev
        u = auxiliary_vector(choice, s, y, g_prev)
        return self.update(s, y, g_prev + g_next, f_prev - f_next, u, logfile)
