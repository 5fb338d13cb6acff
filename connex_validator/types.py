"""
Primitive predicates for values returned by the Thor client API.

Each predicate takes a value of unknown type and returns a bool. None of
them raise, and None/bool inputs are rejected wherever a string or an
integer is expected.
"""
import re
from numbers import Real
from typing import Any, Optional

from web3 import Web3

__all__ = [
    "is_hex_bytes",
    "is_address",
    "is_bytes32",
    "is_checksum_address",
    "is_semver",
    "is_uint",
    "is_decimal_uint",
    "is_decimal_int",
    "is_fraction",
]

_HEX_BYTES_RE = re.compile(r"^0x(?:[0-9a-f]{2})*$")
_DECIMAL_UINT_RE = re.compile(r"^(?:0|[1-9][0-9]*)$")
_DECIMAL_INT_RE = re.compile(r"^(?:0|-?[1-9][0-9]*)$")

# https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


def is_hex_bytes(value: Any, length: Optional[int] = None) -> bool:
    """
    Check for a lowercase, 0x-prefixed hex string.

    Args:
        value: Candidate value
        length: Exact byte count required; any even digit count when omitted

    Returns:
        True if value is canonical hex bytes of the requested length
    """
    if not isinstance(value, str) or not _HEX_BYTES_RE.fullmatch(value):
        return False
    if length is None:
        return True
    return len(value) == 2 + 2 * length


def is_address(value: Any) -> bool:
    return is_hex_bytes(value, 20)


def is_bytes32(value: Any) -> bool:
    return is_hex_bytes(value, 32)


def is_checksum_address(value: Any) -> bool:
    """Check for a mixed-case checksummed 20-byte address."""
    if not isinstance(value, str) or len(value) != 42:
        return False
    return bool(Web3.is_checksum_address(value))


def is_semver(value: Any) -> bool:
    return isinstance(value, str) and _SEMVER_RE.fullmatch(value) is not None


def is_uint(value: Any, bits: Optional[int] = None) -> bool:
    """
    Check for a non-negative integer, optionally bounded to `bits` bits.

    bool is an int subclass in Python but never a valid numeric field.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    if value < 0:
        return False
    return bits is None or value < 2 ** bits


def is_decimal_uint(value: Any) -> bool:
    return isinstance(value, str) and _DECIMAL_UINT_RE.fullmatch(value) is not None


def is_decimal_int(value: Any) -> bool:
    return isinstance(value, str) and _DECIMAL_INT_RE.fullmatch(value) is not None


def is_fraction(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return 0 <= value <= 1
