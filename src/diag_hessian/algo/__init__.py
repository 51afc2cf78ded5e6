from .diagonal_qn import DiagonalQN
from .spectral_gradient import SpectralGradient
from .diagonal_msr1 import DiagonalModifiedSR1, auxiliary_vector, AUXILIARY_CHOICES
