import numpy as np
import pytest
import torch

from diag_hessian import DiagonalQN, SpectralGradient, DiagonalModifiedSR1
from diag_hessian.algo.gpu_components import TorchDiagonalQN, TorchSpectralGradient
from diag_hessian.registry import ComponentRegistry, create_operator, create_from_config, default_component_registry, register_defaults
from diag_hessian.shared import Config


def test_create_default_versions():
    assert isinstance(create_operator('diagonal_qn', initial=[1.0, 2.0]), DiagonalQN)
    assert isinstance(create_operator('diagonal_msr1', 'mhl.v1', initial=[1.0, 2.0]), DiagonalModifiedSR1)


def test_create_spectral_from_scalar_or_vector():
    op = create_operator('spectral_gradient', initial=2.0, dimension=4)
    assert isinstance(op, SpectralGradient)
    assert op.dimension == 4 and op.scalar == 2.0
    op = create_operator('spectral_gradient', initial=np.array([1.0, 3.0]))
    assert op.dimension == 2 and op.scalar == 2.0
    with pytest.raises(ValueError):
        create_operator('spectral_gradient', initial=2.0)


def test_unknown_operator():
    with pytest.raises(ValueError):
        create_operator('bfgs', 'v1', initial=[1.0])
    with pytest.raises(ValueError):
        create_operator('diagonal_qn', 'v999', initial=[1.0])
    with pytest.raises(ValueError):
        create_operator('diagonal_qn')


def test_create_gpu_variants():
    op = create_operator('diagonal_qn-gpu', initial=[1.0, 2.0], device=torch.device('cpu'))
    assert isinstance(op, TorchDiagonalQN)
    assert op.device == torch.device('cpu')
    op = create_operator('spectral_gradient-gpu', initial=3.0, dimension=2, device=torch.device('cpu'))
    assert isinstance(op, TorchSpectralGradient)
    assert op.scalar == 3.0


def test_create_from_config():
    cfg = Config(method='spectral_gradient', dimension=3)
    assert cfg.get('version') is None
    op = create_from_config(cfg, 1.5)
    assert op.dimension == 3 and op.scalar == 1.5
    op = create_from_config(Config(), [1.0, 2.0, 3.0])
    assert isinstance(op, DiagonalQN)


def test_registry_lookup():
    register_defaults()
    assert ('diagonal_qn', 'andrei.v1') in default_component_registry.available()
    registry = ComponentRegistry()
    registry.register('custom', 'v1', DiagonalQN)
    assert registry.get('custom', 'v1') is DiagonalQN
    assert registry.get('custom', 'v2') is None
