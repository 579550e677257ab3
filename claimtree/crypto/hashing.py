"""
Hashing Utilities
Keccak-256 hashing and hex helpers for Merkle commitments.

This module provides:
- Keccak-256 hashing for raw bytes (Ethereum variant, not NIST SHA3-256)
- Sorted-pair hashing for internal tree nodes
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Internal nodes hash exactly two 32-byte children, leaves are hashes of
  hashes; the two domains never share a preimage
- Pair hashing is order-independent, so proofs carry no direction bits
"""
from __future__ import annotations

from eth_utils import keccak


def keccak256(data: bytes) -> bytes:
    """
    Compute the Keccak-256 hash of raw bytes.

    Args:
        data: Raw bytes to hash

    Returns:
        32-byte Keccak-256 digest

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=data)


# Keccak-256 of empty bytes
EMPTY_HASH: bytes = keccak256(b"")


def hash_pair(a: bytes, b: bytes) -> bytes:
    """
    Hash two child digests into their parent using the sorted-pair rule.

    parent = keccak256(min(a, b) + max(a, b))

    Byte-wise comparison, so hash_pair(a, b) == hash_pair(b, a).

    Args:
        a: First child digest
        b: Second child digest

    Returns:
        32-byte parent digest
    """
    if a <= b:
        return keccak256(a + b)
    return keccak256(b + a)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to a lowercase hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert a hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xDEADbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith(("0x", "0X")):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "EMPTY_HASH",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
]
