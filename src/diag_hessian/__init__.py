from .core import (
    DiagonalOperatorError,
    DegenerateStepError,
    DimensionMismatchError,
    DiagonalQuasiNewtonOperator,
    mul_square_diagonal,
)
from .algo import DiagonalQN, SpectralGradient, DiagonalModifiedSR1, auxiliary_vector
from .registry import create_operator, create_from_config

__version__ = "0.1.0"
