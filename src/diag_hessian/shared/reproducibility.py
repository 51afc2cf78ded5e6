import random
import numpy as np
import torch


def set_deterministic(seed: int = 42):
    """
    Seed python, numpy and torch.

    Returns:
        numpy.random.Generator seeded with ``seed``, for drawing test points.
    """
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
    print(f"[diag-hessian] Deterministic mode enabled. Seed: {seed}")
    return np.random.default_rng(seed)
