"""Fixed-width identifiers used as registry keys.

Deal ids (ilks such as ``RWA100-A``) and component names (``urn``, ``jar``...)
are stored as 32-byte values, never as free text. ``Bytes32`` keeps that
contract: text is right-padded with zero bytes, the same way a string literal
is packed into a ``bytes32`` slot on chain.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from eth_typing import ChecksumAddress
from eth_utils import encode_hex, is_hex, to_bytes, to_checksum_address

__all__ = ["Bytes32", "DealId", "ComponentName", "BytesLike", "to_address", "is_zero_address"]

BYTES32_LEN = 32


@dataclass(frozen=True, slots=True)
class Bytes32:
    value: bytes

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray)) or len(self.value) != BYTES32_LEN:
            raise ValueError(f"Bytes32 requires exactly {BYTES32_LEN} bytes, got {self.value!r}")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_text(cls, text: str) -> "Bytes32":
        raw = text.encode("utf-8")
        if len(raw) > BYTES32_LEN:
            raise ValueError(f"'{text}' does not fit in {BYTES32_LEN} bytes")
        return cls(raw.ljust(BYTES32_LEN, b"\x00"))

    @classmethod
    def from_hex(cls, hexstr: str) -> "Bytes32":
        return cls(to_bytes(hexstr=hexstr))

    @classmethod
    def coerce(cls, value: "BytesLike") -> "Bytes32":
        """Accept a Bytes32, raw 32 bytes, a 0x-prefixed 32-byte hex string or plain text."""
        if isinstance(value, cls):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(value)
        if isinstance(value, str):
            if len(value) == 2 + 2 * BYTES32_LEN and value[:2].lower() == "0x" and is_hex(value):
                return cls.from_hex(value)
            return cls.from_text(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to Bytes32")

    @property
    def text(self) -> str:
        """Human-readable form; falls back to hex when the bytes are not padded UTF-8."""
        stripped = self.value.rstrip(b"\x00")
        if b"\x00" in stripped:
            return self.hex()
        try:
            return stripped.decode("utf-8")
        except UnicodeDecodeError:
            return self.hex()

    def hex(self) -> str:
        return encode_hex(self.value)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Bytes32({self.text!r})"


# Same storage contract, different roles
DealId = Bytes32
ComponentName = Bytes32

BytesLike = Union[Bytes32, bytes, bytearray, str]


def to_address(address: str) -> ChecksumAddress:
    """Checksum an account or contract address (raises ValueError if malformed)."""
    return to_checksum_address(address)


def is_zero_address(address: str) -> bool:
    return int(address, 16) == 0
