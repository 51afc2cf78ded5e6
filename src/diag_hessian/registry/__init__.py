from .components import ComponentRegistry, default_component_registry, register_defaults, DEFAULT_VERSIONS
from .factory import create_operator, create_from_config
