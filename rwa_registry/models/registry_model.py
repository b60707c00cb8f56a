# rwa_registry/models/registry_model.py
"""
Registry of RWA deals and the contracts ("components") that make them up.

Every deal is keyed by its ilk and moves through NONE -> ACTIVE -> FINALIZED.
While a deal is ACTIVE its components (urn, jar, conduits...) can be set,
updated and removed; once FINALIZED they are frozen.

All mutating calls are gated by the ward set and run as a single transaction:
either the whole call commits (and its events are published) or the state is
restored and nothing is emitted.
"""

from __future__ import annotations

import copy
import functools
import logging
import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from eth_typing import ChecksumAddress

from ..config.components import DEFAULT_SUPPORTED_COMPONENTS, FILE_COMPONENT, MAX_VARIANT
from .enumerable_set import EnumerableSet
from .errors import (
    ComponentAlreadySupported,
    ComponentDoesNotExist,
    DealAlreadyExists,
    DealDoesNotExist,
    DealHasDanglingComponents,
    DealNotActive,
    InvalidAccount,
    InvalidComponentAddress,
    InvalidIteration,
    InvalidVariant,
    MismatchingComponentParams,
    MissingDeal,
    Unauthorized,
    UnknownParameter,
    UnsupportedComponent,
)
from . import events as ev
from .identifiers import Bytes32, BytesLike, is_zero_address, to_address

logger = logging.getLogger(__name__)

__all__ = ["RwaRegistry", "DealStatus", "DealInfo", "Component", "Validator"]

SNAPSHOT_VERSION = 1


class DealStatus(IntEnum):
    NONE = 0
    ACTIVE = 1
    FINALIZED = 2


class DealInfo(NamedTuple):
    status: DealStatus
    pos: int


@dataclass(frozen=True, slots=True)
class Component:
    name: Bytes32
    addr: ChecksumAddress
    variant: int


@dataclass
class _Deal:
    status: DealStatus
    pos: int
    component_names: EnumerableSet = field(default_factory=EnumerableSet)
    components: Dict[Bytes32, Component] = field(default_factory=dict)


@dataclass
class _RegistryState:
    wards: Set[ChecksumAddress] = field(default_factory=set)
    supported_components: EnumerableSet = field(default_factory=EnumerableSet)
    deal_ids: EnumerableSet = field(default_factory=EnumerableSet)
    deals: Dict[Bytes32, _Deal] = field(default_factory=dict)


# hook(deal_id, components) -> None, raises to reject a compound add
Validator = Callable[[Bytes32, Dict[Bytes32, Component]], None]

# In-memory event log length; subscribers see every event regardless
DEFAULT_MAX_EVENTS = 10_000


def _transaction(method):
    """Run a mutating entry point under the registry lock, all or nothing.

    Mutations register their inverse in ``self._undo``; on failure the undo
    journal is replayed backwards, so a call only pays for what it touched.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            if self._depth:
                return method(self, *args, **kwargs)
            self._depth += 1
            try:
                result = method(self, *args, **kwargs)
            except Exception as e:
                self._rollback()
                logger.warning("%s rolled back: %s", method.__name__, e)
                raise
            finally:
                self._depth -= 1
                self._undo.clear()
                self._copied_deals.clear()
            committed, self._pending = self._pending, []
            self._publish(committed)
            return result

    return wrapper


class RwaRegistry:
    """Authenticated registry of RWA deals and their components."""

    def __init__(
        self,
        owner: str,
        supported_components: Optional[Sequence[BytesLike]] = None,
        require_nonzero_address: bool = True,
        validators: Optional[Sequence[Validator]] = None,
        max_events: Optional[int] = DEFAULT_MAX_EVENTS,
    ):
        self._setup(_RegistryState(), require_nonzero_address, validators, max_events)

        owner = self._to_account(owner)
        self._state.wards.add(owner)
        self._emit(ev.Rely(owner))

        names = DEFAULT_SUPPORTED_COMPONENTS if supported_components is None else supported_components
        for name in names:
            self._add_supported_component(Bytes32.coerce(name))

        self._undo.clear()
        committed, self._pending = self._pending, []
        self._publish(committed)

    def _setup(self, state, require_nonzero_address, validators, max_events) -> None:
        self._lock = threading.RLock()
        self._state = state
        self._pending: List[ev.RegistryEvent] = []
        self._undo: List[Callable[[], None]] = []
        self._copied_deals: Set[Bytes32] = set()
        self._depth = 0
        self.events: List[ev.RegistryEvent] = []
        self.max_events = max_events
        self._listeners: List[Callable[[ev.RegistryEvent], None]] = []
        self.require_nonzero_address = require_nonzero_address
        self.validators: List[Validator] = list(validators or [])

    # ------------------------------------------------------------------ #
    # Undo journal                                                        #
    # ------------------------------------------------------------------ #

    def _rollback(self) -> None:
        while self._undo:
            self._undo.pop()()
        self._pending.clear()

    def _writable_deal(self, deal_id: Bytes32) -> _Deal:
        """Copy-on-write: the first change to a deal in a call works on a copy."""
        deal = self._state.deals[deal_id]
        if deal_id in self._copied_deals:
            return deal
        self._copied_deals.add(deal_id)
        writable = copy.deepcopy(deal)
        self._state.deals[deal_id] = writable
        self._undo.append(lambda: self._state.deals.__setitem__(deal_id, deal))
        return writable

    # ------------------------------------------------------------------ #
    # Events                                                              #
    # ------------------------------------------------------------------ #

    def subscribe(self, listener: Callable[[ev.RegistryEvent], None]) -> None:
        """Call ``listener`` with every event once its call has committed."""
        self._listeners.append(listener)

    def drain_events(self) -> List[ev.RegistryEvent]:
        """Return and clear the in-memory event log."""
        with self._lock:
            drained, self.events = self.events, []
            return drained

    def _emit(self, event: ev.RegistryEvent) -> None:
        self._pending.append(event)

    def _publish(self, committed: List[ev.RegistryEvent]) -> None:
        for event in committed:
            logger.debug("Committed %s", event)
            self.events.append(event)
            for listener in list(self._listeners):
                try:
                    listener(event)
                except Exception:
                    logger.exception("Event listener failed on %s", event)
        if self.max_events is not None and len(self.events) > self.max_events:
            del self.events[:len(self.events) - self.max_events]

    # ------------------------------------------------------------------ #
    # Access control                                                      #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _to_account(account: str) -> ChecksumAddress:
        try:
            return to_address(account)
        except (TypeError, ValueError):
            raise InvalidAccount(account) from None

    def _auth(self, caller: str) -> None:
        try:
            caller = to_address(caller)
        except (TypeError, ValueError):
            raise Unauthorized(caller) from None
        if caller not in self._state.wards:
            raise Unauthorized(caller)

    def wards(self, account: str) -> bool:
        with self._lock:
            return self._to_account(account) in self._state.wards

    @_transaction
    def rely(self, account: str, *, caller: str) -> None:
        """Authorize ``account``. Idempotent."""
        self._auth(caller)
        account = self._to_account(account)
        if account not in self._state.wards:
            self._state.wards.add(account)
            self._undo.append(lambda: self._state.wards.discard(account))
        self._emit(ev.Rely(account))

    @_transaction
    def deny(self, account: str, *, caller: str) -> None:
        """Revoke ``account``. Idempotent; the last ward can deny itself."""
        self._auth(caller)
        account = self._to_account(account)
        if account in self._state.wards:
            self._state.wards.discard(account)
            self._undo.append(lambda: self._state.wards.add(account))
        self._emit(ev.Deny(account))

    # ------------------------------------------------------------------ #
    # Supported components                                                #
    # ------------------------------------------------------------------ #

    def _add_supported_component(self, name: Bytes32) -> None:
        if not self._state.supported_components.add(name):
            raise ComponentAlreadySupported(name)
        self._undo.append(lambda: self._state.supported_components.remove(name))
        self._emit(ev.AddSupportedComponent(name))

    @_transaction
    def add_supported_component(self, name: BytesLike, *, caller: str) -> None:
        self._auth(caller)
        self._add_supported_component(Bytes32.coerce(name))

    def is_supported_component(self, name: BytesLike) -> bool:
        with self._lock:
            try:
                return Bytes32.coerce(name) in self._state.supported_components
            except (TypeError, ValueError):
                return False

    def list_supported_components(self) -> List[Bytes32]:
        with self._lock:
            return self._state.supported_components.values()

    # ------------------------------------------------------------------ #
    # Deals                                                               #
    # ------------------------------------------------------------------ #

    def _get_deal(self, deal_id: Bytes32) -> _Deal:
        deal = self._state.deals.get(deal_id)
        if deal is None:
            raise DealDoesNotExist(deal_id)
        return deal

    def _get_active_deal(self, deal_id: Bytes32) -> _Deal:
        deal = self._state.deals.get(deal_id)
        if deal is None:
            raise MissingDeal(deal_id)
        if deal.status != DealStatus.ACTIVE:
            raise DealNotActive(deal_id, deal.status)
        return deal

    @_transaction
    def add(
        self,
        deal_id: BytesLike,
        names: Optional[Sequence[BytesLike]] = None,
        addresses: Optional[Sequence[str]] = None,
        variants: Optional[Sequence[int]] = None,
        *,
        caller: str,
    ) -> None:
        """
        Add a new deal, optionally with its initial components.

        ``names``, ``addresses`` and ``variants`` are parallel lists. When any
        of them is given the call attaches every component and runs the
        registered validators; a failure anywhere leaves no trace of the deal.
        """
        self._auth(caller)
        deal_id = Bytes32.coerce(deal_id)
        if deal_id in self._state.deals:
            raise DealAlreadyExists(deal_id)

        pos = len(self._state.deal_ids)
        self._state.deals[deal_id] = _Deal(status=DealStatus.ACTIVE, pos=pos)
        self._state.deal_ids.add(deal_id)
        self._copied_deals.add(deal_id)
        self._undo.append(lambda: self._state.deal_ids.remove(deal_id))
        self._undo.append(lambda: self._state.deals.pop(deal_id))
        self._emit(ev.AddDeal(deal_id, pos))

        if names is None and addresses is None and variants is None:
            return

        names, addresses, variants = list(names or []), list(addresses or []), list(variants or [])
        if not (len(names) == len(addresses) == len(variants)):
            raise MismatchingComponentParams(len(names), len(addresses), len(variants))

        for name, addr, variant in zip(names, addresses, variants):
            self._set_component(deal_id, Bytes32.coerce(name), addr, variant)

        deal = self._state.deals[deal_id]
        for validator in self.validators:
            validator(deal_id, dict(deal.components))

    @_transaction
    def finalize(self, deal_id: BytesLike, *, caller: str) -> None:
        """ACTIVE -> FINALIZED. Components can no longer change afterwards."""
        self._auth(caller)
        deal_id = Bytes32.coerce(deal_id)
        self._get_active_deal(deal_id)
        self._writable_deal(deal_id).status = DealStatus.FINALIZED
        self._emit(ev.FinalizeDeal(deal_id))

    @_transaction
    def remove(self, deal_id: BytesLike, *, caller: str) -> None:
        """
        Drop a deal with no attached components.

        The deal's slot in the enumeration is swap-removed: the last deal id
        takes its place in ``list()`` and no stored position is renumbered.
        """
        self._auth(caller)
        deal_id = Bytes32.coerce(deal_id)
        deal = self._get_deal(deal_id)
        if len(deal.component_names):
            raise DealHasDanglingComponents(deal_id, len(deal.component_names))
        index = self._state.deal_ids.index_of(deal_id)
        del self._state.deals[deal_id]
        self._state.deal_ids.remove(deal_id)
        self._undo.append(lambda: self._state.deal_ids.reinsert(deal_id, index))
        self._undo.append(lambda: self._state.deals.__setitem__(deal_id, deal))
        self._emit(ev.RemoveDeal(deal_id))

    def count(self) -> int:
        with self._lock:
            return len(self._state.deal_ids)

    def list(self) -> List[Bytes32]:
        with self._lock:
            return self._state.deal_ids.values()

    def iter(self, start: int, end: int) -> List[Bytes32]:
        with self._lock:
            return self._state.deal_ids.slice(start, end)

    def pos_to_id(self, pos: int) -> Bytes32:
        with self._lock:
            try:
                return self._state.deal_ids.at(pos)
            except IndexError:
                raise InvalidIteration(pos, pos + 1)

    def has(self, deal_id: BytesLike) -> bool:
        with self._lock:
            try:
                return Bytes32.coerce(deal_id) in self._state.deals
            except (TypeError, ValueError):
                return False

    def deal_info(self, deal_id: BytesLike) -> DealInfo:
        """Raw (status, pos) accessor; an unknown deal reads as (NONE, 0)."""
        with self._lock:
            deal = self._state.deals.get(Bytes32.coerce(deal_id))
            if deal is None:
                return DealInfo(DealStatus.NONE, 0)
            return DealInfo(deal.status, deal.pos)

    # ------------------------------------------------------------------ #
    # Components                                                          #
    # ------------------------------------------------------------------ #

    def _validate_component(self, name: Bytes32, addr: str, variant: int) -> ChecksumAddress:
        if name not in self._state.supported_components:
            raise UnsupportedComponent(name)
        try:
            checksummed = to_address(addr)
        except (TypeError, ValueError):
            raise InvalidComponentAddress(name, addr)
        if self.require_nonzero_address and is_zero_address(checksummed):
            raise InvalidComponentAddress(name, addr)
        if isinstance(variant, bool) or not isinstance(variant, int) or not 0 <= variant <= MAX_VARIANT:
            raise InvalidVariant(name, variant)
        return checksummed

    def _set_component(self, deal_id: Bytes32, name: Bytes32, addr: str, variant: int) -> None:
        self._get_active_deal(deal_id)
        checksummed = self._validate_component(name, addr, variant)
        deal = self._writable_deal(deal_id)
        deal.components[name] = Component(name, checksummed, variant)
        deal.component_names.add(name)
        self._emit(ev.File(deal_id, FILE_COMPONENT, name, checksummed, variant))

    @_transaction
    def set_component(self, deal_id: BytesLike, name: BytesLike, addr: str, variant: int, *, caller: str) -> None:
        """Insert or update a component of an ACTIVE deal."""
        self._auth(caller)
        self._set_component(Bytes32.coerce(deal_id), Bytes32.coerce(name), addr, variant)

    @_transaction
    def file(self, deal_id: BytesLike, what: str, name: BytesLike, addr: str, variant: int, *, caller: str) -> None:
        """Generic single-field update; only ``what="component"`` is known."""
        self._auth(caller)
        if what != FILE_COMPONENT:
            raise UnknownParameter(what)
        self._set_component(Bytes32.coerce(deal_id), Bytes32.coerce(name), addr, variant)

    @_transaction
    def remove_component(self, deal_id: BytesLike, name: BytesLike, *, caller: str) -> None:
        """Detach ``name`` from an ACTIVE deal. Missing components are not an error."""
        self._auth(caller)
        deal_id, name = Bytes32.coerce(deal_id), Bytes32.coerce(name)
        self._get_active_deal(deal_id)
        deal = self._writable_deal(deal_id)
        deal.component_names.remove(name)
        deal.components.pop(name, None)
        self._emit(ev.RemoveComponent(deal_id, name))

    def get_component(self, deal_id: BytesLike, name: BytesLike) -> Tuple[ChecksumAddress, int]:
        with self._lock:
            deal_id, name = Bytes32.coerce(deal_id), Bytes32.coerce(name)
            component = self._get_deal(deal_id).components.get(name)
            if component is None:
                raise ComponentDoesNotExist(deal_id, name)
            return component.addr, component.variant

    def has_component(self, deal_id: BytesLike, name: BytesLike) -> bool:
        with self._lock:
            try:
                deal_id, name = Bytes32.coerce(deal_id), Bytes32.coerce(name)
            except (TypeError, ValueError):
                return False
            deal = self._state.deals.get(deal_id)
            return deal is not None and name in deal.component_names

    def list_components(self, deal_id: BytesLike) -> List[Component]:
        with self._lock:
            deal = self._get_deal(Bytes32.coerce(deal_id))
            return [deal.components[name] for name in deal.component_names]

    def list_component_names(self, deal_id: BytesLike) -> List[Bytes32]:
        with self._lock:
            return self._get_deal(Bytes32.coerce(deal_id)).component_names.values()

    def count_components(self, deal_id: BytesLike) -> int:
        with self._lock:
            return len(self._get_deal(Bytes32.coerce(deal_id)).component_names)

    def iter_components(self, deal_id: BytesLike, start: int, end: int) -> List[Bytes32]:
        with self._lock:
            return self._get_deal(Bytes32.coerce(deal_id)).component_names.slice(start, end)

    # ------------------------------------------------------------------ #
    # Snapshots                                                           #
    # ------------------------------------------------------------------ #

    def snapshot(self) -> dict:
        """Plain-data copy of the whole storage, deals in enumeration order."""
        with self._lock:
            state = self._state
            return {
                "version": SNAPSHOT_VERSION,
                "require_nonzero_address": self.require_nonzero_address,
                "wards": sorted(state.wards),
                "supported_components": [name.text for name in state.supported_components],
                "deals": [
                    {
                        "ilk": deal_id.text,
                        "status": state.deals[deal_id].status.name,
                        "pos": state.deals[deal_id].pos,
                        "components": [
                            {"name": c.name.text, "addr": c.addr, "variant": c.variant}
                            for c in (state.deals[deal_id].components[n] for n in state.deals[deal_id].component_names)
                        ],
                    }
                    for deal_id in state.deal_ids
                ],
            }

    @classmethod
    def from_snapshot(
        cls,
        data: dict,
        validators: Optional[Sequence[Validator]] = None,
        max_events: Optional[int] = DEFAULT_MAX_EVENTS,
    ) -> "RwaRegistry":
        """Rebuild a registry from ``snapshot()`` output without replaying calls or emitting events."""
        if data.get("version") != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {data.get('version')}")

        state = _RegistryState()
        state.wards = {to_address(w) for w in data.get("wards", [])}
        state.supported_components = EnumerableSet(Bytes32.coerce(n) for n in data.get("supported_components", []))
        for entry in data.get("deals", []):
            deal_id = Bytes32.coerce(entry["ilk"])
            deal = _Deal(status=DealStatus[entry["status"]], pos=int(entry["pos"]))
            for c in entry.get("components", []):
                component = Component(Bytes32.coerce(c["name"]), to_address(c["addr"]), int(c["variant"]))
                deal.components[component.name] = component
                deal.component_names.add(component.name)
            state.deals[deal_id] = deal
            state.deal_ids.add(deal_id)
        registry = cls.__new__(cls)
        registry._setup(state, data.get("require_nonzero_address", True), validators, max_events)
        return registry
