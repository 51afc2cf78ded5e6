import numpy as np


def mul_square_diagonal(res, d, v, alpha, beta):
    """
    res <- alpha * d * v + beta * res, element-wise.

    ``d`` is either a vector or a scalar (multiple of the identity). When
    ``beta == 0`` the old content of ``res`` is never read, so an
    uninitialized buffer is fine. ``res`` may be ``v`` itself.
    """
    if beta == 0:
        np.multiply(d, v, out=res)
        if alpha != 1:
            res *= alpha
    else:
        # d * v is formed before res is scaled, so res and v may alias
        dv = np.multiply(d, v)
        if alpha != 1:
            dv *= alpha
        if beta != 1:
            res *= beta
        res += dv
    return res
