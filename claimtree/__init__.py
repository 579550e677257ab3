"""
claimtree

Merkle commitments and inclusion proofs for reward-claim distributions.

Usage:
    from claimtree import build_distribution, load_claims

    distribution = build_distribution(load_claims("input.json"))
    print(distribution.root)
"""

__version__ = "0.1.0"

from claimtree.distribution import build_distribution, find_claims, verify_distribution
from claimtree.io import load_claims, load_distribution, save_claims, save_distribution
from claimtree.merkle import MerkleProof, MerkleTree, claim_leaf_hash, encode_claim, verify_proof
from claimtree.schemas import (
    ClaimRecord,
    EmptyTreeError,
    EncodingError,
    IndexOutOfRange,
    MerkleDistribution,
)

__all__ = [
    "__version__",
    "build_distribution",
    "find_claims",
    "verify_distribution",
    "load_claims",
    "load_distribution",
    "save_claims",
    "save_distribution",
    "MerkleProof",
    "MerkleTree",
    "claim_leaf_hash",
    "encode_claim",
    "verify_proof",
    "ClaimRecord",
    "EmptyTreeError",
    "EncodingError",
    "IndexOutOfRange",
    "MerkleDistribution",
]
