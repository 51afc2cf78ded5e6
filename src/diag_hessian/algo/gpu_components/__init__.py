from .gpu_kernels import torch_mul_square_diagonal
from .diagonal_operators import (
    TorchDiagonalOperator,
    TorchDiagonalQN,
    TorchSpectralGradient,
    TorchDiagonalModifiedSR1,
)
