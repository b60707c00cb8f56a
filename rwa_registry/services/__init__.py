# rwa_registry/services/__init__.py
from .conduit_check import UrnConduitCheck
from .snapshot_store import load_registry, save_registry

__all__ = [
    "UrnConduitCheck",
    "load_registry",
    "save_registry"
]
