"""Component catalog defaults and value-domain limits."""

# Registered at construction, in this order.
DEFAULT_SUPPORTED_COMPONENTS = (
    "urn",
    "liquidationOracle",
    "outputConduit",
    "inputConduit",
    "jar",
    "jarInputConduit",
    "token",
)

# Component variants are stored next to a 160-bit address in a single word.
VARIANT_BITS = 88
MAX_VARIANT = (1 << VARIANT_BITS) - 1

# Reserved variant: the address is opaque, not a typed contract.
OPAQUE_VARIANT = MAX_VARIANT

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Parameter accepted by RwaRegistry.file()
FILE_COMPONENT = "component"
