import numpy as np
import torch
from torch.autograd.functional import jacobian, hessian


def _to_tensor(x):
    return torch.as_tensor(np.asarray(x, dtype=np.float64))


def value(fun, x):
    """Evaluate a torch-traceable scalar function at a numpy point."""
    return float(fun(_to_tensor(x)))


def gradient(fun, x):
    return jacobian(fun, _to_tensor(x)).detach().numpy()


def hessian_diagonal(fun, x):
    """Exact Hessian diagonal by automatic differentiation."""
    H = hessian(fun, _to_tensor(x))
    return torch.diagonal(H).detach().numpy().copy()
