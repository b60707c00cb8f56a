import pytest

from rwa_registry.models.registry_model import RwaRegistry
from rwa_registry.tests.addresses import JAR_ADDR, OWNER, URN_ADDR


@pytest.fixture
def registry():
    return RwaRegistry(OWNER)


@pytest.fixture
def deal(registry):
    """A registry with RWA100-A holding an urn and a jar."""
    registry.add("RWA100-A", ["urn", "jar"], [URN_ADDR, JAR_ADDR], [1, 1], caller=OWNER)
    return registry
