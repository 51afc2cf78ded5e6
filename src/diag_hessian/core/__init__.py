from .errors import DiagonalOperatorError, DegenerateStepError, DimensionMismatchError
from .kernels import mul_square_diagonal
from .base import DiagonalQuasiNewtonOperator
from .interfaces import DiagonalOperatorProtocol, SecantUpdateProtocol, ModifiedSecantUpdateProtocol
