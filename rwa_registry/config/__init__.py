"""
Configuration package for the RWA registry.
"""

from rwa_registry.config.components import (
    DEFAULT_SUPPORTED_COMPONENTS,
    VARIANT_BITS,
    MAX_VARIANT,
    OPAQUE_VARIANT,
    ZERO_ADDRESS,
    FILE_COMPONENT
)

from rwa_registry.config.network import (
    RPC_URL,
    REGISTRY_STATE_PATH,
    REGISTRY_CALLER,
    PRIVATE_KEY
)

from rwa_registry.config.abis import (
    RWA_URN_ABI
)

__all__ = [
    # Components
    'DEFAULT_SUPPORTED_COMPONENTS',
    'VARIANT_BITS',
    'MAX_VARIANT',
    'OPAQUE_VARIANT',
    'ZERO_ADDRESS',
    'FILE_COMPONENT',

    # Network / environment
    'RPC_URL',
    'REGISTRY_STATE_PATH',
    'REGISTRY_CALLER',
    'PRIVATE_KEY',

    # ABIs
    'RWA_URN_ABI'
]
