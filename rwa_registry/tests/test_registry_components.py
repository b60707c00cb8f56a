import pytest

from rwa_registry.config.components import MAX_VARIANT, OPAQUE_VARIANT, ZERO_ADDRESS
from rwa_registry.models import events as ev
from rwa_registry.models.errors import (
    ComponentDoesNotExist,
    InvalidComponentAddress,
    InvalidIteration,
    InvalidVariant,
    UnknownParameter,
    UnsupportedComponent,
)
from rwa_registry.models.identifiers import Bytes32
from rwa_registry.models.registry_model import Component, RwaRegistry

from rwa_registry.tests.addresses import CONDUIT_ADDR, JAR_ADDR, ORACLE_ADDR, OWNER, URN_ADDR

ILK = Bytes32.from_text("RWA100-A")


def test_set_and_update(deal):
    deal.set_component("RWA100-A", "urn", CONDUIT_ADDR, 2, caller=OWNER)
    assert deal.get_component("RWA100-A", "urn") == (CONDUIT_ADDR, 2)
    deal.set_component("RWA100-A", "urn", ORACLE_ADDR, 5, caller=OWNER)
    assert deal.get_component("RWA100-A", "urn") == (ORACLE_ADDR, 5)
    # update, not append
    assert [n.text for n in deal.list_component_names("RWA100-A")] == ["urn", "jar"]
    assert deal.events[-1] == ev.File(ILK, "component", Bytes32.from_text("urn"), ORACLE_ADDR, 5)


def test_set_same_value_still_emits(deal):
    count = len(deal.events)
    deal.set_component("RWA100-A", "jar", JAR_ADDR, 1, caller=OWNER)
    assert len(deal.events) == count + 1


def test_addresses_are_checksummed(deal):
    deal.set_component("RWA100-A", "token", "0x" + "ee" * 20, 0, caller=OWNER)
    addr, _ = deal.get_component("RWA100-A", "token")
    assert addr != addr.lower()
    assert addr.lower() == "0x" + "ee" * 20


def test_unsupported_component_is_rejected(deal):
    with pytest.raises(UnsupportedComponent):
        deal.set_component("RWA100-A", "vault", CONDUIT_ADDR, 1, caller=OWNER)
    assert not deal.has_component("RWA100-A", "vault")
    deal.add_supported_component("vault", caller=OWNER)
    deal.set_component("RWA100-A", "vault", CONDUIT_ADDR, 1, caller=OWNER)
    assert deal.has_component("RWA100-A", "vault")


@pytest.mark.parametrize("addr", [ZERO_ADDRESS, "0x1234", "not-an-address", None])
def test_invalid_addresses(deal, addr):
    with pytest.raises(InvalidComponentAddress):
        deal.set_component("RWA100-A", "outputConduit", addr, 1, caller=OWNER)
    assert not deal.has_component("RWA100-A", "outputConduit")


def test_zero_address_allowed_when_relaxed():
    registry = RwaRegistry(OWNER, require_nonzero_address=False)
    registry.add("RWA100-A", ["outputConduit"], [ZERO_ADDRESS], [1], caller=OWNER)
    assert registry.get_component("RWA100-A", "outputConduit") == (ZERO_ADDRESS, 1)


@pytest.mark.parametrize("variant", [-1, MAX_VARIANT + 1, 1.5, "1", True])
def test_invalid_variants(deal, variant):
    with pytest.raises(InvalidVariant):
        deal.set_component("RWA100-A", "urn", URN_ADDR, variant, caller=OWNER)
    assert deal.get_component("RWA100-A", "urn") == (URN_ADDR, 1)


def test_opaque_variant_is_the_max(deal):
    deal.set_component("RWA100-A", "liquidationOracle", ORACLE_ADDR, OPAQUE_VARIANT, caller=OWNER)
    assert deal.get_component("RWA100-A", "liquidationOracle") == (ORACLE_ADDR, 2**88 - 1)


def test_get_missing_component(deal):
    with pytest.raises(ComponentDoesNotExist) as exc_info:
        deal.get_component("RWA100-A", "token")
    assert exc_info.value.deal_id == ILK
    assert exc_info.value.name == Bytes32.from_text("token")


def test_has_component_is_total(deal):
    assert deal.has_component("RWA100-A", "urn")
    assert not deal.has_component("RWA100-A", "token")
    assert not deal.has_component("RWA999-A", "urn")
    assert not deal.has_component("RWA100-A", "never-registered")


@pytest.mark.parametrize("bad", ["x" * 40, None, 42, "0x" + "ab" * 33])
def test_has_component_with_malformed_identifiers(deal, bad):
    assert not deal.has_component(bad, "urn")
    assert not deal.has_component("RWA100-A", bad)


def test_remove_component(deal):
    deal.remove_component("RWA100-A", "urn", caller=OWNER)
    assert not deal.has_component("RWA100-A", "urn")
    assert [n.text for n in deal.list_component_names("RWA100-A")] == ["jar"]
    with pytest.raises(ComponentDoesNotExist):
        deal.get_component("RWA100-A", "urn")
    assert deal.events[-1] == ev.RemoveComponent(ILK, Bytes32.from_text("urn"))


def test_remove_absent_component_is_not_an_error(deal):
    deal.remove_component("RWA100-A", "token", caller=OWNER)
    assert deal.count_components("RWA100-A") == 2


def test_readding_after_removal_goes_to_the_end(deal):
    deal.remove_component("RWA100-A", "urn", caller=OWNER)
    deal.set_component("RWA100-A", "urn", URN_ADDR, 3, caller=OWNER)
    assert [n.text for n in deal.list_component_names("RWA100-A")] == ["jar", "urn"]


def test_list_components(deal):
    assert deal.list_components("RWA100-A") == [
        Component(Bytes32.from_text("urn"), URN_ADDR, 1),
        Component(Bytes32.from_text("jar"), JAR_ADDR, 1),
    ]


def test_iter_components(deal):
    names = deal.list_component_names("RWA100-A")
    assert deal.iter_components("RWA100-A", 0, 99) == names
    assert deal.iter_components("RWA100-A", 1, 2) == names[1:]
    with pytest.raises(InvalidIteration):
        deal.iter_components("RWA100-A", 3, 99)


def test_file_updates_a_single_component(registry):
    registry.add("X", ["urn", "outputConduit"], [URN_ADDR, JAR_ADDR], [1, 1], caller=OWNER)
    registry.file("X", "component", "outputConduit", CONDUIT_ADDR, 1, caller=OWNER)
    assert registry.get_component("X", "outputConduit") == (CONDUIT_ADDR, 1)
    assert registry.get_component("X", "urn") == (URN_ADDR, 1)


def test_file_unknown_parameter(deal):
    with pytest.raises(UnknownParameter):
        deal.file("RWA100-A", "operator", "urn", CONDUIT_ADDR, 1, caller=OWNER)
    assert deal.get_component("RWA100-A", "urn") == (URN_ADDR, 1)
