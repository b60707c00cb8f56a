import pytest

from rwa_registry.models import events as ev
from rwa_registry.models.errors import (
    DealAlreadyExists,
    DealDoesNotExist,
    DealHasDanglingComponents,
    DealNotActive,
    InvalidIteration,
    MismatchingComponentParams,
    UnsupportedComponent,
)
from rwa_registry.models.identifiers import Bytes32
from rwa_registry.models.registry_model import DealInfo, DealStatus

from rwa_registry.tests.addresses import JAR_ADDR, OWNER, URN_ADDR

ILK = Bytes32.from_text("RWA100-A")


def test_unknown_deal_reads(registry):
    assert not registry.has("RWA999-A")
    assert registry.deal_info("RWA999-A") == DealInfo(DealStatus.NONE, 0)
    with pytest.raises(DealDoesNotExist):
        registry.get_component("RWA999-A", "urn")
    with pytest.raises(DealDoesNotExist):
        registry.list_components("RWA999-A")
    with pytest.raises(DealDoesNotExist):
        registry.list_component_names("RWA999-A")
    with pytest.raises(DealDoesNotExist):
        registry.count_components("RWA999-A")
    with pytest.raises(DealDoesNotExist):
        registry.iter_components("RWA999-A", 0, 10)


@pytest.mark.parametrize("bad", ["x" * 40, None, 42])
def test_has_with_malformed_ilk(deal, bad):
    assert deal.has("RWA100-A")
    assert not deal.has(bad)


def test_unknown_deal_mutations(registry):
    with pytest.raises(DealDoesNotExist):
        registry.finalize("RWA999-A", caller=OWNER)
    with pytest.raises(DealNotActive):
        registry.finalize("RWA999-A", caller=OWNER)
    with pytest.raises(DealDoesNotExist):
        registry.remove("RWA999-A", caller=OWNER)


def test_add_deal(registry):
    registry.add("RWA100-A", caller=OWNER)
    assert registry.has("RWA100-A")
    assert registry.deal_info("RWA100-A") == DealInfo(DealStatus.ACTIVE, 0)
    assert registry.list() == [ILK]
    assert registry.count() == 1
    assert registry.pos_to_id(0) == ILK
    assert registry.list_components("RWA100-A") == []
    assert registry.events[-1] == ev.AddDeal(ILK, 0)


def test_add_twice_fails(registry):
    registry.add("RWA100-A", caller=OWNER)
    with pytest.raises(DealAlreadyExists):
        registry.add("RWA100-A", caller=OWNER)
    assert registry.list().count(ILK) == 1


def test_positions_are_dense(registry):
    for i in range(3):
        registry.add(f"RWA00{i}-A", caller=OWNER)
    assert [registry.deal_info(f"RWA00{i}-A").pos for i in range(3)] == [0, 1, 2]


def test_add_with_components(deal):
    assert [n.text for n in deal.list_component_names("RWA100-A")] == ["urn", "jar"]
    assert deal.count_components("RWA100-A") == 2
    assert deal.get_component("RWA100-A", "jar") == (JAR_ADDR, 1)
    assert [type(e) for e in deal.events[-3:]] == [ev.AddDeal, ev.File, ev.File]


def test_add_with_mismatching_params(registry):
    with pytest.raises(MismatchingComponentParams):
        registry.add("RWA100-A", ["urn", "jar"], [URN_ADDR], [1, 1], caller=OWNER)
    with pytest.raises(MismatchingComponentParams):
        registry.add("RWA100-A", ["urn"], [URN_ADDR], None, caller=OWNER)
    assert not registry.has("RWA100-A")


def test_add_with_bad_component_is_atomic(registry):
    events_before = list(registry.events)
    with pytest.raises(UnsupportedComponent):
        registry.add("RWA100-A", ["urn", "vault"], [URN_ADDR, JAR_ADDR], [1, 1], caller=OWNER)
    assert not registry.has("RWA100-A")
    assert registry.list() == []
    assert registry.events == events_before
    # the id is still free
    registry.add("RWA100-A", caller=OWNER)
    assert registry.deal_info("RWA100-A").pos == 0


def test_finalize(deal):
    deal.finalize("RWA100-A", caller=OWNER)
    assert deal.deal_info("RWA100-A").status == DealStatus.FINALIZED
    assert deal.events[-1] == ev.FinalizeDeal(ILK)
    with pytest.raises(DealNotActive):
        deal.finalize("RWA100-A", caller=OWNER)
    with pytest.raises(DealNotActive):
        deal.set_component("RWA100-A", "urn", JAR_ADDR, 2, caller=OWNER)
    with pytest.raises(DealNotActive):
        deal.remove_component("RWA100-A", "urn", caller=OWNER)
    # reads keep working
    assert deal.get_component("RWA100-A", "urn") == (URN_ADDR, 1)
    assert deal.has("RWA100-A")


def test_remove_requires_no_components(deal):
    with pytest.raises(DealHasDanglingComponents):
        deal.remove("RWA100-A", caller=OWNER)
    deal.remove_component("RWA100-A", "jar", caller=OWNER)
    deal.remove_component("RWA100-A", "urn", caller=OWNER)
    deal.remove("RWA100-A", caller=OWNER)
    assert not deal.has("RWA100-A")
    assert deal.list() == []
    assert deal.deal_info("RWA100-A") == DealInfo(DealStatus.NONE, 0)
    assert deal.events[-1] == ev.RemoveDeal(ILK)
    with pytest.raises(DealDoesNotExist):
        deal.get_component("RWA100-A", "urn")


def test_remove_then_add_again(registry):
    registry.add("RWA100-A", caller=OWNER)
    registry.add("RWA200-A", caller=OWNER)
    registry.remove("RWA100-A", caller=OWNER)
    registry.add("RWA100-A", caller=OWNER)
    assert registry.deal_info("RWA100-A") == DealInfo(DealStatus.ACTIVE, 1)


def test_remove_swaps_without_renumbering(registry):
    for ilk in ("RWA001-A", "RWA002-A", "RWA003-A", "RWA004-A"):
        registry.add(ilk, caller=OWNER)
    registry.remove("RWA002-A", caller=OWNER)

    assert [i.text for i in registry.list()] == ["RWA001-A", "RWA004-A", "RWA003-A"]
    # stored positions are left as assigned at creation
    assert registry.deal_info("RWA004-A").pos == 3
    assert registry.pos_to_id(1).text == "RWA004-A"
    # a new deal takes the current enumeration size, colliding with a stale position
    registry.add("RWA005-A", caller=OWNER)
    assert registry.deal_info("RWA005-A").pos == 3


def test_remove_finalized_deal_without_components(registry):
    registry.add("RWA100-A", caller=OWNER)
    registry.finalize("RWA100-A", caller=OWNER)
    registry.remove("RWA100-A", caller=OWNER)
    assert not registry.has("RWA100-A")


def test_iter_deals(registry):
    for i in range(5):
        registry.add(f"RWA00{i}-A", caller=OWNER)
    assert registry.iter(0, registry.count()) == registry.list()
    assert registry.iter(0, 1000) == registry.list()
    assert [i.text for i in registry.iter(1, 3)] == ["RWA001-A", "RWA002-A"]
    assert len(registry.iter(3, 1000)) == 2
    assert registry.iter(5, 5) == []
    with pytest.raises(InvalidIteration):
        registry.iter(6, 1000)
    with pytest.raises(InvalidIteration):
        registry.iter(3, 2)


def test_pos_to_id_out_of_range(registry):
    with pytest.raises(InvalidIteration):
        registry.pos_to_id(0)


def test_scenario_add_strip_and_remove(registry):
    registry.add("RWA100-A", ["urn", "jar"], ["0x" + "aa" * 20, "0x" + "bb" * 20], [1, 1], caller=OWNER)
    assert [n.text for n in registry.list_component_names("RWA100-A")] == ["urn", "jar"]
    registry.remove_component("RWA100-A", "jar", caller=OWNER)
    registry.remove_component("RWA100-A", "urn", caller=OWNER)
    registry.remove("RWA100-A", caller=OWNER)
    assert not registry.has("RWA100-A")
