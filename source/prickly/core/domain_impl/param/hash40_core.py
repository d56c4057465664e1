"""40-bit param hash keys: derivation from text, hex literals and raw display."""

from __future__ import annotations

import zlib
from dataclasses import dataclass

from prickly.core.exceptions import InvalidHashLiteral, StructuralViolation


HASH40_MASK = 0xFF_FFFF_FFFF
HEX_PREFIX = "0x"
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True, slots=True)
class Hash40:
    """A 40-bit key; the low 32 bits are a CRC32 and the high 8 bits a length."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise StructuralViolation(f"hash40 value must be an int, got {type(self.value).__name__}")
        if self.value < 0 or self.value > HASH40_MASK:
            raise StructuralViolation(f"hash40 value out of range: {self.value:#x}")

    def __copy__(self) -> Hash40:
        return self

    def __deepcopy__(self, memo: dict) -> Hash40:
        return self

    def to_hex(self) -> str:
        return f"{HEX_PREFIX}{self.value:010x}"

    def __str__(self) -> str:
        return self.to_hex()


def hash40(text: str) -> Hash40:
    """Derive the hash of a label the same way the document format does."""
    data = str(text).encode("utf-8")
    return Hash40(((len(data) << 32) | zlib.crc32(data)) & HASH40_MASK)


def is_hex_literal(text: str) -> bool:
    return str(text).startswith(HEX_PREFIX)


def parse_hex_literal(text: str) -> Hash40:
    """Parse a `0x`-prefixed literal; raises InvalidHashLiteral on malformed digits."""
    source = str(text)
    if not source.startswith(HEX_PREFIX):
        raise InvalidHashLiteral(f"hash literal must start with {HEX_PREFIX!r}")
    digits = source[len(HEX_PREFIX):]
    if not digits:
        raise InvalidHashLiteral("hash literal has no digits")
    if any(ch not in _HEX_DIGITS for ch in digits):
        raise InvalidHashLiteral(f"invalid hex digits in {source!r}")
    value = int(digits, 16)
    if value > HASH40_MASK:
        raise InvalidHashLiteral(f"{source!r} does not fit in 40 bits")
    return Hash40(value)
