# rwa_registry/models/__init__.py
from .identifiers import Bytes32, DealId, ComponentName
from .enumerable_set import EnumerableSet, iterate
from .registry_model import RwaRegistry, DealStatus, DealInfo, Component

__all__ = [
    "Bytes32",
    "DealId",
    "ComponentName",
    "EnumerableSet",
    "iterate",
    "RwaRegistry",
    "DealStatus",
    "DealInfo",
    "Component"
]
