"""
Merkle Proofs Convenience Wrappers
Thin wrappers around the tree functions for claim-level use.

This module provides class-based interfaces:
- ClaimProver: Generate roots and proofs directly from claim records
- ClaimVerifier: Verify proofs for digests, hex strings or claim records
"""
from __future__ import annotations

from typing import Sequence

from claimtree.crypto.hashing import from_hex
from claimtree.merkle.leaf_encoder import claim_leaf_hash
from claimtree.merkle.merkle_tree import (
    MerkleProof,
    MerkleTree,
    verify_merkle_proof,
    verify_proof,
)
from claimtree.schemas.claims import ClaimRecord, parse_claim


class ClaimProver:
    """
    Convenience class for generating proofs from claim records.

    Each call builds a fresh tree; build a MerkleTree once when many proofs
    are needed.

    Example:
        >>> proof = ClaimProver.prove(records, index=1)
        >>> ClaimVerifier.verify(proof)
        True
    """

    @staticmethod
    def prove(records: Sequence[ClaimRecord], index: int) -> MerkleProof:
        """
        Generate a Merkle proof for the record at the given index.

        Raises:
            EncodingError: If any record is malformed
            EmptyTreeError: If records is empty
            IndexOutOfRange: If index is out of range
        """
        return MerkleTree.from_claims(records).prove(index)

    @staticmethod
    def compute_root(records: Sequence[ClaimRecord]) -> bytes:
        """Compute the 32-byte Merkle root for a sequence of records."""
        return MerkleTree.from_claims(records).root


class ClaimVerifier:
    """Convenience class for verifying proofs."""

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_hex(leaf_hex: str, proof_hex: Sequence[str], root_hex: str) -> bool:
        """
        Verify a proof given as 0x-prefixed hex strings (distribution format).

        Malformed hex is treated as a failed verification.
        """
        try:
            leaf = from_hex(leaf_hex)
            siblings = [from_hex(s) for s in proof_hex]
            root = from_hex(root_hex)
        except ValueError:
            return False
        return verify_proof(leaf, siblings, root)

    @staticmethod
    def verify_claim(
        record: ClaimRecord | dict,
        proof: Sequence[bytes],
        root: bytes,
    ) -> bool:
        """
        Verify a claim record is included in a root.

        The record is encoded and double-hashed to produce the leaf.

        Raises:
            EncodingError: If the record is malformed
        """
        leaf = claim_leaf_hash(parse_claim(record))
        return verify_proof(leaf, proof, root)


__all__ = [
    "ClaimProver",
    "ClaimVerifier",
]
