"""Notifications emitted by the registry.

One event per successful mutating call, carrying every identifier and new
value involved so an indexer can rebuild the full state from the event log
alone.
"""

from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Dict

from eth_typing import ChecksumAddress

from .identifiers import Bytes32

__all__ = [
    "RegistryEvent",
    "Rely",
    "Deny",
    "AddSupportedComponent",
    "AddDeal",
    "FinalizeDeal",
    "RemoveDeal",
    "File",
    "RemoveComponent",
]


@dataclass(frozen=True, slots=True)
class RegistryEvent:
    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"event": type(self).__name__}
        for f in fields(self):
            value = getattr(self, f.name)
            out[f.name] = value.text if isinstance(value, Bytes32) else value
        return out


@dataclass(frozen=True, slots=True)
class Rely(RegistryEvent):
    usr: ChecksumAddress


@dataclass(frozen=True, slots=True)
class Deny(RegistryEvent):
    usr: ChecksumAddress


@dataclass(frozen=True, slots=True)
class AddSupportedComponent(RegistryEvent):
    component_name: Bytes32


@dataclass(frozen=True, slots=True)
class AddDeal(RegistryEvent):
    ilk: Bytes32
    pos: int


@dataclass(frozen=True, slots=True)
class FinalizeDeal(RegistryEvent):
    ilk: Bytes32


@dataclass(frozen=True, slots=True)
class RemoveDeal(RegistryEvent):
    ilk: Bytes32


@dataclass(frozen=True, slots=True)
class File(RegistryEvent):
    ilk: Bytes32
    what: str
    component_name: Bytes32
    addr: ChecksumAddress
    variant: int


@dataclass(frozen=True, slots=True)
class RemoveComponent(RegistryEvent):
    ilk: Bytes32
    component_name: Bytes32
