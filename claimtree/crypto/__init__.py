"""
Cryptographic utilities.

Keccak-256 hashing, sorted-pair node hashing and hex helpers.
"""
from .hashing import (
    EMPTY_HASH,
    keccak256,
    hash_pair,
    to_hex,
    from_hex,
)

__all__ = [
    "EMPTY_HASH",
    "keccak256",
    "hash_pair",
    "to_hex",
    "from_hex",
]
