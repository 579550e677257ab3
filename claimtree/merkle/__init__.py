"""
Merkle Tree and Commitments
Deterministic claim leaf encoding, Merkle tree construction and proofs.

This module provides:
- encode_claim / claim_leaf_hash: Leaf encoding for claim records
- MerkleTree: Immutable tree with root and per-index proofs
- verify_proof: Recompute a root from a leaf and its proof

Commitment Rules:
1. Leaf hashing: keccak256(keccak256(abi.encode(epoch, account, token, cumulativeAmount)))
2. Parent hashing: keccak256(min(a, b) + max(a, b))
3. Odd level size: last node promoted unchanged
4. Empty tree: EmptyTreeError
5. Single leaf: root = leaf

Usage:
    from claimtree.merkle import MerkleTree, verify_proof

    tree = MerkleTree.from_claims(records)
    proof = tree.proof(2)
    assert verify_proof(tree.leaves[2], proof, tree.root)
"""
from .leaf_encoder import (
    ADDRESS_LENGTH,
    UINT256_MAX,
    claim_leaf_hash,
    encode_claim,
    standard_leaf_hash,
)

from .merkle_tree import (
    DIGEST_SIZE,
    MerkleProof,
    MerkleTree,
    merkle_parent,
    next_level,
    build_levels,
    build_merkle_root,
    build_merkle_proof,
    verify_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    ClaimProver,
    ClaimVerifier,
)


__all__ = [
    # Leaf encoding
    "ADDRESS_LENGTH",
    "UINT256_MAX",
    "claim_leaf_hash",
    "encode_claim",
    "standard_leaf_hash",
    # Core types
    "DIGEST_SIZE",
    "MerkleProof",
    "MerkleTree",
    # Core functions
    "merkle_parent",
    "next_level",
    "build_levels",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    # Convenience classes
    "ClaimProver",
    "ClaimVerifier",
]
