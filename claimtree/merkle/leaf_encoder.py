"""
Leaf Encoder
Canonical byte encoding and leaf hashing for claim records.

Leaf rule (compatible with OpenZeppelin StandardMerkleTree / MerkleProof):
    leaf = keccak256(keccak256(abi.encode(epoch, account, token, cumulativeAmount)))

abi.encode uses 32-byte words: integers big-endian, addresses left-zero-padded.
The double hash keeps leaves out of the preimage space of internal nodes,
which are single hashes of 64 bytes.
"""
from __future__ import annotations

import re
from typing import Any, Sequence

from eth_abi import encode
from eth_abi.exceptions import EncodingError as AbiEncodingError

from claimtree.crypto.hashing import keccak256
from claimtree.schemas.claims import CLAIM_LEAF_TYPES, ClaimRecord
from claimtree.schemas.errors import EncodingError


UINT256_MAX: int = 2**256 - 1
ADDRESS_LENGTH: int = 20

_HEX_BODY = re.compile(r"^[0-9a-f]*$")


def _check_uint256(value: int, field: str) -> int:
    if value < 0:
        raise EncodingError(f"{field} must be non-negative, got {value}", field=field)
    if value > UINT256_MAX:
        raise EncodingError(f"{field} does not fit in 256 bits", field=field)
    return value


def _address_bytes(value: str, field: str) -> bytes:
    """Decode a 0x-prefixed hex address to exactly 20 bytes."""
    normalized = value.strip().lower()
    if not normalized.startswith("0x"):
        raise EncodingError(f"{field} must be 0x-prefixed hex, got {value!r}", field=field)
    body = normalized[2:]
    if not _HEX_BODY.match(body) or len(body) % 2:
        raise EncodingError(f"{field} is not valid hex: {value!r}", field=field)
    raw = bytes.fromhex(body)
    if len(raw) != ADDRESS_LENGTH:
        raise EncodingError(
            f"{field} must be {ADDRESS_LENGTH} bytes, got {len(raw)}",
            field=field,
        )
    return raw


def encode_claim(record: ClaimRecord) -> bytes:
    """
    ABI-encode a claim as the tuple (uint256, address, address, uint256).

    Args:
        record: Claim to encode

    Returns:
        128 bytes of ABI encoding

    Raises:
        EncodingError: If an integer is negative or wider than 256 bits, or
            an address is not exactly 20 bytes
    """
    values = [
        _check_uint256(record.epoch, "epoch"),
        _address_bytes(record.account, "account"),
        _address_bytes(record.token, "token"),
        _check_uint256(record.cumulative_amount, "cumulativeAmount"),
    ]
    return encode(list(CLAIM_LEAF_TYPES), values)


def standard_leaf_hash(types: Sequence[str], values: Sequence[Any]) -> bytes:
    """
    Double-hashed leaf for an arbitrary ABI tuple.

    Matches StandardMerkleTree.leafHash(value) of the reference JS library.

    Raises:
        EncodingError: If the values do not encode as the given types
    """
    try:
        encoded = encode(list(types), list(values))
    except AbiEncodingError as e:
        raise EncodingError(f"Cannot ABI-encode leaf: {e}") from e
    return keccak256(keccak256(encoded))


def claim_leaf_hash(record: ClaimRecord) -> bytes:
    """
    Compute the 32-byte leaf digest of a claim.

    Raises:
        EncodingError: Propagated from encode_claim
    """
    return keccak256(keccak256(encode_claim(record)))


__all__ = [
    "UINT256_MAX",
    "ADDRESS_LENGTH",
    "encode_claim",
    "claim_leaf_hash",
    "standard_leaf_hash",
]
