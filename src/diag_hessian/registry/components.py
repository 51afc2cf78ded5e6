from diag_hessian.algo.diagonal_qn import DiagonalQN
from diag_hessian.algo.spectral_gradient import SpectralGradient
from diag_hessian.algo.diagonal_msr1 import DiagonalModifiedSR1
from diag_hessian.algo.gpu_components.diagonal_operators import (
    TorchDiagonalQN,
    TorchSpectralGradient,
    TorchDiagonalModifiedSR1,
)


class ComponentRegistry:
    def __init__(self):
        self._constructors = {}

    def register(self, method, version, constructor):
        self._constructors[(method, version)] = constructor

    def get(self, method, version):
        return self._constructors.get((method, version))

    def available(self):
        return sorted(self._constructors)


default_component_registry = ComponentRegistry()

DEFAULT_VERSIONS = {
    'diagonal_qn': 'andrei.v1',
    'spectral_gradient': 'bmr.v1',
    'diagonal_msr1': 'mhl.v1',
    'diagonal_qn-gpu': 'v1.0',
    'spectral_gradient-gpu': 'v1.0',
    'diagonal_msr1-gpu': 'v1.0',
}


def register_defaults():
    default_component_registry.register('diagonal_qn', 'andrei.v1', DiagonalQN)
    default_component_registry.register('spectral_gradient', 'bmr.v1', SpectralGradient)
    default_component_registry.register('diagonal_msr1', 'mhl.v1', DiagonalModifiedSR1)
    default_component_registry.register('diagonal_qn-gpu', 'v1.0', TorchDiagonalQN)
    default_component_registry.register('spectral_gradient-gpu', 'v1.0', TorchSpectralGradient)
    default_component_registry.register('diagonal_msr1-gpu', 'v1.0', TorchDiagonalModifiedSR1)
