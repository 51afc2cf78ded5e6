import torch

from diag_hessian.algo.diagonal_msr1 import auxiliary_vector
from diag_hessian.algo.gpu_components.gpu_kernels import torch_mul_square_diagonal
from diag_hessian.core.base import log_write
from diag_hessian.core.errors import DegenerateStepError, DimensionMismatchError


def _default_device(device):
    return device or torch.device('cuda' if torch.cuda.is_available() else 'cpu')


def _as_initial_diagonal(d, device, dtype):
    d = torch.as_tensor(d, dtype=dtype, device=_default_device(device))
    if d.dim() != 1 or d.numel() == 0:
        raise ValueError(f"initial diagonal must be a non-empty 1-D tensor, got shape {tuple(d.shape)}")
    if not torch.isfinite(d).all():
        raise ValueError("initial diagonal contains non-finite entries")
    return d


class TorchDiagonalOperator:
    """
    Device-resident diagonal operator.

    Same contract as the numpy operators, with vectors given as torch tensors
    (numpy arrays are moved to the operator's device). All arithmetic is done
    in the operator's dtype, float64 by default.
    """

    symmetric = True
    hermitian = True

    def __init__(self, n, device=None, dtype=torch.float64):
        n = int(n)
        if n < 1:
            raise ValueError(f"dimension must be >= 1, got {n}")
        self.device = _default_device(device)
        self.dtype = dtype
        self.shape = (n, n)
        self.nprod = 0

    @property
    def dimension(self):
        return self.shape[0]

    def is_symmetric(self):
        return self.symmetric

    def _check_vector(self, v, name="v"):
        v = torch.as_tensor(v, dtype=self.dtype, device=self.device)
        if v.dim() != 1 or v.shape[0] != self.dimension:
            got = v.shape[0] if v.dim() == 1 else tuple(v.shape)
            raise DimensionMismatchError(self.dimension, got, name)
        return v

    def apply(self, v, alpha=1.0, beta=0.0, out=None):
        """Compute ``alpha * (D v) + beta * out`` (``out`` ignored when beta is zero)."""
        v = self._check_vector(v)
        if out is None:
            out = torch.empty(self.dimension, dtype=self.dtype, device=self.device)
            beta = 0.0
        elif out.dim() != 1 or out.shape[0] != self.dimension:
            raise DimensionMismatchError(self.dimension, tuple(out.shape), "out")
        self.nprod += 1
        return torch_mul_square_diagonal(out, self.d, v, alpha, beta)

    def __matmul__(self, v):
        return self.apply(v)

    def _commit_diagonal(self, d_new, logfile=None):
        if not torch.isfinite(d_new).all():
            log_write(logfile, f"Warning: {type(self).__name__} update skipped, non-finite diagonal.\n")
            raise DegenerateStepError(
                "updated diagonal", float('inf'),
                message="Update produced non-finite diagonal entries",
            )
        self.d.copy_(d_new)

    def to_diagonal(self):
        raise NotImplementedError

    def to_dense(self):
        return torch.diag(self.to_diagonal())

    def __repr__(self):
        return f"<{self.shape[0]}x{self.shape[1]} {type(self).__name__} on {self.device}>"


class TorchDiagonalQN(TorchDiagonalOperator):
    def __init__(self, d, device=None, dtype=torch.float64):
        d = _as_initial_diagonal(d, device, dtype)
        super().__init__(d.shape[0], d.device, dtype)
        self.d = d
        self._Bs = torch.empty_like(d)

    def to_diagonal(self):
        return self.d.clone()

    def update(self, s, y, logfile=None):
        """Andrei's diagonal update, d <- d + q * s**2 - 1."""
        s = self._check_vector(s, "s")
        y = self._check_vector(y, "y")

        trA2 = torch.sum(s ** 4)
        sT_s = torch.dot(s, s)
        sT_y = torch.dot(s, y)
        torch_mul_square_diagonal(self._Bs, self.d, s, 1.0, 0.0)
        sT_B_s = torch.dot(s, self._Bs)
        if trA2.item() == 0:
            log_write(logfile, "Warning: TorchDiagonalQN update skipped, trA2 = 0.\n")
            raise DegenerateStepError("trA2", 0.0)

        q = (sT_y + sT_s - sT_B_s) / trA2
        self._commit_diagonal(self.d + q * s ** 2 - 1, logfile)
        log_write(logfile, f"  TorchDiagonalQN update: q={q.item():.4e}\n")
        return self


class TorchSpectralGradient(TorchDiagonalOperator):
    def __init__(self, d, n, device=None, dtype=torch.float64):
        super().__init__(n, device, dtype)
        d = torch.as_tensor(d, dtype=dtype, device=self.device).reshape(())
        if not torch.isfinite(d):
            raise ValueError(f"initial coefficient must be finite, got {d.item()}")
        self.d = d

    @classmethod
    def from_diagonal(cls, d, device=None, dtype=torch.float64):
        """Reduce a diagonal estimate to the mean of its entries."""
        d = torch.as_tensor(d, dtype=dtype)
        if d.dim() != 1 or d.numel() == 0:
            raise ValueError(f"initial diagonal must be a non-empty 1-D tensor, got shape {tuple(d.shape)}")
        return cls(d.mean(), d.shape[0], device, dtype)

    @property
    def scalar(self):
        return self.d.item()

    def to_diagonal(self):
        return self.d.expand(self.dimension).clone()

    def update(self, s, y, logfile=None):
        """Barzilai-Borwein coefficient s'y / s's."""
        s = self._check_vector(s, "s")
        y = self._check_vector(y, "y")

        if not bool(torch.any(s != 0)):
            log_write(logfile, "Warning: TorchSpectralGradient update skipped, s = 0.\n")
            raise DegenerateStepError("s", 0.0, message="Cannot divide by zero and s = 0")
        sT_s = torch.dot(s, s)
        if sT_s.item() == 0:
            log_write(logfile, "Warning: TorchSpectralGradient update skipped, dot(s, s) = 0.\n")
            raise DegenerateStepError("dot(s, s)", 0.0)

        d_new = torch.dot(s, y) / sT_s
        if not torch.isfinite(d_new):
            log_write(logfile, "Warning: TorchSpectralGradient update skipped, non-finite coefficient.\n")
            raise DegenerateStepError(
                "updated coefficient", float('inf'),
                message="Update produced a non-finite coefficient",
            )
        self.d = d_new
        log_write(logfile, f"  TorchSpectralGradient update: d={d_new.item():.4e}\n")
        return self


class TorchDiagonalModifiedSR1(TorchDiagonalOperator):
    def __init__(self, d, device=None, dtype=torch.float64):
        d = _as_initial_diagonal(d, device, dtype)
        super().__init__(d.shape[0], d.device, dtype)
        self.d = d
        self._Bs = torch.empty_like(d)

    def to_diagonal(self):
        return self.d.clone()

    def update(self, s, y, t, z, u, logfile=None):
        """Modified SR1 shift, d <- d + yt'yt / yt's."""
        s = self._check_vector(s, "s")
        y = self._check_vector(y, "y")
        t = self._check_vector(t, "t")
        u = self._check_vector(u, "u")

        psi = 2 * float(z) + torch.dot(t, s)
        torch_mul_square_diagonal(self._Bs, self.d, s, 1.0, 0.0)
        sT_u = torch.dot(s, u)
        if sT_u.item() == 0:
            log_write(logfile, "Warning: TorchDiagonalModifiedSR1 update skipped, dot(s, u) = 0.\n")
            raise DegenerateStepError("dot(s, u)", 0.0)

        yt = y + torch.abs(psi) / sT_u * u - self._Bs
        ytT_s = torch.dot(yt, s)
        if ytT_s.item() == 0:
            log_write(logfile, "Warning: TorchDiagonalModifiedSR1 update skipped, dot(yt, s) = 0.\n")
            raise DegenerateStepError("dot(yt, s)", 0.0)

        sigma = torch.dot(yt, yt) / ytT_s
        self._commit_diagonal(self.d + sigma, logfile)
        log_write(logfile, f"  TorchDiagonalModifiedSR1 update: sigma={sigma.item():.4e}\n")
        return self

    def update_from_points(self, x_prev, x_next, g_prev, g_next, f_prev, f_next, choice="s", logfile=None):
        x_prev, x_next = self._check_vector(x_prev, "x_prev"), self._check_vector(x_next, "x_next")
        g_prev, g_next = self._check_vector(g_prev, "g_prev"), self._check_vector(g_next, "g_next")
        s = x_next - x_prev
        y = g_next - g_prev
        u = auxiliary_vector(choice, s, y, g_prev)
        return self.update(s, y, g_prev + g_next, float(f_prev) - float(f_next), u, logfile)
