# rwa_registry/controllers/__init__.py
from .registry_controller import RegistryController, parse_component_spec

__all__ = [
    "RegistryController",
    "parse_component_spec"
]
