import torch


def torch_mul_square_diagonal(res: torch.Tensor, d, v: torch.Tensor, alpha: float, beta: float) -> torch.Tensor:
    """
    res <- alpha * d * v + beta * res on the device of ``res``.

    ``d`` is a vector or a 0-dim tensor. ``res`` is not read when ``beta == 0``
    and may be ``v`` itself.
    """
    if beta == 0:
        torch.mul(v, d, out=res)
        if alpha != 1:
            res.mul_(alpha)
    else:
        # d * v is formed before res is scaled, so res and v may alias
        dv = v * d
        if alpha != 1:
            dv.mul_(alpha)
        if beta != 1:
            res.mul_(beta)
        res.add_(dv)
    return res
