import numpy as np

from diag_hessian.core.base import DiagonalQuasiNewtonOperator, as_initial_diagonal, log_write
from diag_hessian.core.errors import DegenerateStepError


class SpectralGradient(DiagonalQuasiNewtonOperator):
    """
    Spectral gradient approximation (a multiple of the identity) described in

    Birgin, E. G., Martinez, J. M., & Raydan, M.
    Spectral Projected Gradient Methods: Review and Perspectives.
    https://doi.org/10.18637/jss.v060.i03

    Args:
        d (float): Initial coefficient.
        n (int): Dimension of the operator.
    """

    def __init__(self, d, n, dtype=np.float64):
        super().__init__(n, dtype)
        d = self.dtype.type(d)
        if not np.isfinite(d):
            raise ValueError(f"initial coefficient must be finite, got {d}")
        self.d = d

    @classmethod
    def from_diagonal(cls, d):
        """Build from a diagonal estimate, reduced to the mean of its entries."""
        d = as_initial_diagonal(d)
        return cls(np.mean(d), d.shape[0], d.dtype)

    @property
    def scalar(self):
        return self.d

    def to_diagonal(self):
        return np.full(self.dimension, self.d, dtype=self.dtype)

    def update(self, s, y, logfile=None):
        """
        Replace the coefficient by the Barzilai-Borwein ratio s'y / s's.

        Raises:
            DegenerateStepError: if every entry of s is zero (or s's underflows).
        """
        s = self._check_vector(s, "s")
        y = self._check_vector(y, "y")

        if not np.any(s):
            log_write(logfile, "Warning: SpectralGradient update skipped, s = 0.\n")
            raise DegenerateStepError("s", 0.0, message="Cannot divide by zero and s = 0")
        sT_s = np.dot(s, s)
        if sT_s == 0:
            log_write(logfile, "Warning: SpectralGradient update skipped, dot(s, s) = 0.\n")
            raise DegenerateStepError("dot(s, s)", sT_s)

        d_new = self.dtype.type(np.dot(s, y) / sT_s)
        if not np.isfinite(d_new):
            log_write(logfile, "Warning: SpectralGradient update skipped, non-finite coefficient.\n")
            raise DegenerateStepError(
                "updated coefficient", np.inf,
                message="Update produced a non-finite coefficient",
            )
        self.d = d_new
        log_write(logfile, f"  SpectralGradient update: d={d_new:.4e}\n")
        return self
