import numpy as np
import scipy.sparse as sp
from scipy.sparse.linalg import LinearOperator

from diag_hessian.core.errors import DegenerateStepError, DimensionMismatchError
from diag_hessian.core.kernels import mul_square_diagonal


def as_initial_diagonal(d):
    """
    Validate an initial diagonal estimate.

    The array is kept as-is when it already is a 1-D floating array, so the
    operator takes ownership of the caller's buffer and updates it in place.
    """
    d = np.asarray(d)
    if d.ndim != 1 or d.size == 0:
        raise ValueError(f"initial diagonal must be a non-empty 1-D array, got shape {d.shape}")
    if not np.issubdtype(d.dtype, np.floating):
        d = d.astype(np.float64)
    if not np.all(np.isfinite(d)):
        raise ValueError("initial diagonal contains non-finite entries")
    return d


def log_write(logfile, message):
    if logfile:
        logfile.write(message)
        logfile.flush()


class DiagonalQuasiNewtonOperator(LinearOperator):
    """
    Square, symmetric operator stored through its diagonal only.

    Subclasses keep their state in ``self.d`` (a vector, or a scalar for a
    multiple of the identity) and implement ``update``. Products never form
    the dense matrix. Positive definiteness is not guaranteed.
    """

    symmetric = True
    hermitian = True

    def __init__(self, n, dtype=np.float64):
        n = int(n)
        if n < 1:
            raise ValueError(f"dimension must be >= 1, got {n}")
        super().__init__(dtype=np.dtype(dtype), shape=(n, n))
        self.nprod = 0
        self.ntprod = 0
        self.nctprod = 0

    @property
    def dimension(self):
        return self.shape[0]

    def is_symmetric(self):
        return self.symmetric

    def reset_counters(self):
        self.nprod = 0
        self.ntprod = 0
        self.nctprod = 0

    def _check_vector(self, v, name="v", cast=True):
        """
        Check the length of ``v`` and promote it to the operator's float dtype.

        Integer input would otherwise overflow in ``s ** 4`` and the dot
        products. ``cast=False`` keeps the caller's array (output buffers).
        """
        v = np.asarray(v)
        if v.ndim != 1 or v.shape[0] != self.dimension:
            got = v.shape[0] if v.ndim == 1 else v.shape
            raise DimensionMismatchError(self.dimension, got, name)
        if cast:
            v = v.astype(np.result_type(self.dtype, v.dtype), copy=False)
        return v

    def _apply(self, v, alpha, beta, out):
        v = self._check_vector(v)
        if out is None:
            out = np.empty(self.dimension, dtype=v.dtype)
            beta = 0.0
        else:
            out = self._check_vector(out, "out", cast=False)
        return mul_square_diagonal(out, self.d, v, alpha, beta)

    def apply(self, v, alpha=1.0, beta=0.0, out=None):
        """
        Compute ``alpha * (D v) + beta * out``.

        If ``out`` is omitted a new vector is returned; otherwise the result is
        written into ``out``, whose previous content is ignored when ``beta``
        is zero.
        """
        self.nprod += 1
        return self._apply(v, alpha, beta, out)

    def tapply(self, v, alpha=1.0, beta=0.0, out=None):
        self.ntprod += 1
        return self._apply(v, alpha, beta, out)

    def capply(self, v, alpha=1.0, beta=0.0, out=None):
        self.nctprod += 1
        return self._apply(v, alpha, beta, out)

    # scipy.sparse.linalg.LinearOperator hooks

    def matvec(self, x):
        x = np.asanyarray(x)
        if x.shape != (self.dimension,) and x.shape != (self.dimension, 1):
            raise DimensionMismatchError(self.dimension, x.shape, "x")
        return super().matvec(x)

    def rmatvec(self, x):
        x = np.asanyarray(x)
        if x.shape != (self.dimension,) and x.shape != (self.dimension, 1):
            raise DimensionMismatchError(self.dimension, x.shape, "x")
        return super().rmatvec(x)

    def _matvec(self, x):
        return self.apply(x.reshape(-1))

    def _rmatvec(self, x):
        return np.conj(self.capply(np.conj(x.reshape(-1))))

    def _matmat(self, X):
        self.nprod += X.shape[1]
        return self.to_diagonal()[:, None] * X

    def _adjoint(self):
        return self

    def _transpose(self):
        return self

    def _commit_diagonal(self, d_new, logfile=None):
        """Copy a candidate diagonal into ``self.d`` after checking it is finite."""
        if not np.all(np.isfinite(d_new)):
            log_write(logfile, f"Warning: {type(self).__name__} update skipped, non-finite diagonal.\n")
            raise DegenerateStepError(
                "updated diagonal", np.inf,
                message="Update produced non-finite diagonal entries",
            )
        self.d[...] = d_new

    # materialization

    def to_diagonal(self):
        """Return a copy of the diagonal as an n-vector."""
        raise NotImplementedError

    def to_dense(self):
        return np.diag(self.to_diagonal())

    def to_sparse(self):
        return sp.diags(self.to_diagonal(), 0, shape=self.shape, format="dia")

    def __repr__(self):
        return f"<{self.shape[0]}x{self.shape[1]} {type(self).__name__} with dtype={self.dtype}>"
