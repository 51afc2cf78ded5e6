import numpy as np

from diag_hessian.registry.components import (
    default_component_registry,
    register_defaults,
    DEFAULT_VERSIONS,
)


def create_operator(method, version=None, initial=None, **kwargs):
    """
    Build a diagonal quasi-Newton operator by name.

    Args:
        method (str): e.g. 'diagonal_qn', 'spectral_gradient', 'diagonal_msr1'
            or their '-gpu' variants.
        version (str): Registered version, defaults to ``DEFAULT_VERSIONS[method]``.
        initial: Initial diagonal vector. For the spectral methods a scalar is
            also accepted together with ``dimension=n``; a vector is reduced to
            its mean.
        **kwargs: ``dimension``, and ``device``/``dtype`` for the gpu variants.
    """
    register_defaults()
    if version is None:
        version = DEFAULT_VERSIONS.get(method)
    ctor = default_component_registry.get(method, version)
    if ctor is None:
        raise ValueError(f"operator {method!r} version {version!r} not found")
    if initial is None:
        raise ValueError('an initial diagonal (or scalar) estimate is required')

    device_kwargs = {}
    if method.endswith('-gpu'):
        device_kwargs = {k: kwargs[k] for k in ('device', 'dtype') if kwargs.get(k) is not None}
    if method.startswith('spectral_gradient'):
        if np.ndim(initial) == 0:
            dimension = kwargs.get('dimension')
            if dimension is None:
                raise ValueError('dimension is required when the initial estimate is a scalar')
            return ctor(initial, dimension, **device_kwargs)
        return ctor.from_diagonal(initial, **device_kwargs)
    return ctor(initial, **device_kwargs)


def create_from_config(config, initial):
    return create_operator(
        config.get('method', 'diagonal_qn'),
        config.get('version'),
        initial,
        dimension=config.get('dimension'),
        device=config.get('device'),
        dtype=config.get('dtype'),
    )
