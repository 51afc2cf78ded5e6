import numpy as np

from diag_hessian.core.base import DiagonalQuasiNewtonOperator, as_initial_diagonal, log_write
from diag_hessian.core.errors import DegenerateStepError
from diag_hessian.core.kernels import mul_square_diagonal


class DiagonalQN(DiagonalQuasiNewtonOperator):
    """
    Diagonal quasi-Newton approximation described in

    Andrei, N.
    A diagonal quasi-Newton updating method for unconstrained optimization.
    https://doi.org/10.1007/s11075-018-0562-7

    Args:
        d (array_like): Initial diagonal, e.g. the exact Hessian diagonal at
            the starting point. A 1-D float array is stored without copying.
    """

    def __init__(self, d):
        d = as_initial_diagonal(d)
        super().__init__(d.shape[0], d.dtype)
        self.d = d
        self._Bs = np.empty_like(d)
        self._d_new = np.empty_like(d)

    def to_diagonal(self):
        return self.d.copy()

    def update(self, s, y, logfile=None):
        """
        Update with s = x_{k+1} - x_k and y = grad f(x_{k+1}) - grad f(x_k).

        d <- d + q * s**2 - 1 with
        q = (s'y + s's - s'Bs) / sum(s**4).

        Raises:
            DegenerateStepError: if sum(s**4) == 0. ``d`` is left unchanged.
        """
        s = self._check_vector(s, "s")
        y = self._check_vector(y, "y")

        trA2 = np.sum(s ** 4)
        sT_s = np.dot(s, s)
        sT_y = np.dot(s, y)
        mul_square_diagonal(self._Bs, self.d, s, 1.0, 0.0)
        sT_B_s = np.dot(s, self._Bs)
        if trA2 == 0:
            log_write(logfile, "Warning: DiagonalQN update skipped, trA2 = 0.\n")
            raise DegenerateStepError("trA2", trA2)

        q = (sT_y + sT_s - sT_B_s) / trA2
        d_new = self._d_new
        np.multiply(s, s, out=d_new)
        d_new *= q
        d_new += self.d
        d_new -= 1
        self._commit_diagonal(d_new, logfile)
        log_write(logfile, f"  DiagonalQN update: q={q:.4e}, trA2={trA2:.4e}\n")
        return self
