"""
RWA Registry: authenticated registry of real-world-asset deals and the
contract addresses (components) that make them up.
"""

from rwa_registry.models.identifiers import Bytes32
from rwa_registry.models.registry_model import RwaRegistry, DealStatus, DealInfo, Component
from rwa_registry.models import errors, events

__version__ = "0.1.0"

__all__ = [
    'Bytes32',
    'RwaRegistry',
    'DealStatus',
    'DealInfo',
    'Component',
    'errors',
    'events'
]
