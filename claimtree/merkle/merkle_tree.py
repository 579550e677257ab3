"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification.

This module provides:
- Level-by-level tree construction over 32-byte leaf digests
- Merkle proof generation for any leaf index
- Merkle proof verification against a root

Commitment Rules (Hard Contracts):
1. Leaf hashing: done upstream (see leaf_encoder), leaves arrive as digests
2. Parent hashing: parent = keccak256(min(a, b) + max(a, b))  (sorted pair)
3. Odd level size: the last node is promoted unchanged to the next level
4. Empty leaves: EmptyTreeError, there is no empty root
5. Single leaf: root = leaf, proof = []

Determinism Notes:
- Leaves are never sorted; input order is the leaf index
- The root therefore depends on input order even for the same record set
- Sorted-pair hashing means proofs carry no left/right direction bits

Compatible with OpenZeppelin MerkleProof.verify and merkletreejs with
sortPairs enabled. A verifier using the duplicate-last-node rule will compute
different roots for trees with an odd level.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Sequence

from claimtree.crypto.hashing import hash_pair, to_hex
from claimtree.merkle.leaf_encoder import claim_leaf_hash
from claimtree.schemas.claims import ClaimRecord, parse_claim
from claimtree.schemas.errors import (
    BuildCancelledError,
    EmptyTreeError,
    EncodingError,
    IndexOutOfRange,
)


logger = logging.getLogger(__name__)

DIGEST_SIZE: int = 32


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf in a Merkle tree.

    Attributes:
        leaf: The leaf digest being proven
        index: The 0-based index of the leaf in the original leaf list
        siblings: Sibling digests from bottom to top of tree; levels where
            the node was promoted contribute nothing
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    siblings: tuple[bytes, ...]
    root: bytes

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")
        # accept any sequence, store it read-only
        object.__setattr__(self, "siblings", tuple(self.siblings))

    def siblings_hex(self) -> list[str]:
        return [to_hex(s) for s in self.siblings]


def merkle_parent(a: bytes, b: bytes) -> bytes:
    """Compute the parent of two child nodes (sorted-pair rule)."""
    return hash_pair(a, b)


def next_level(level: Sequence[bytes], executor: Executor | None = None) -> list[bytes]:
    """
    Build the level above `level`.

    Adjacent nodes (0,1), (2,3), ... are paired. If the level has odd size,
    the last node is appended to the result unchanged.

    With an executor, pairs are hashed concurrently; map() keeps result order,
    so each parent slot is written exactly once.
    """
    lefts = level[0::2]
    rights = level[1::2]
    if executor is not None:
        parents = list(executor.map(merkle_parent, lefts, rights))
    else:
        parents = [merkle_parent(a, b) for a, b in zip(lefts, rights)]

    if len(level) % 2 == 1:
        parents.append(level[-1])

    return parents


def build_levels(
    leaves: Sequence[bytes],
    *,
    executor: Executor | None = None,
    cancel_event: threading.Event | None = None,
) -> list[list[bytes]]:
    """
    Build every level of the tree, leaves first, root level last.

    Raises:
        EmptyTreeError: If leaves is empty
        BuildCancelledError: If cancel_event is set at a level boundary
    """
    if len(leaves) == 0:
        raise EmptyTreeError()

    levels: list[list[bytes]] = [list(leaves)]
    while len(levels[-1]) > 1:
        if cancel_event is not None and cancel_event.is_set():
            raise BuildCancelledError(level=len(levels))
        parents = next_level(levels[-1], executor)
        logger.debug(f"Level {len(levels)}: {len(levels[-1])} -> {len(parents)} nodes")
        levels.append(parents)

    return levels


class MerkleTree:
    """
    Immutable Merkle tree over an ordered sequence of leaf digests.

    The tree holds all levels (leaves at level 0, root alone at the top).
    It is never mutated after construction, so concurrent proof requests
    need no locking.

    Example:
        >>> tree = MerkleTree.from_claims(records)
        >>> proof = tree.proof(2)
        >>> verify_proof(tree.leaves[2], proof, tree.root)
        True
    """

    def __init__(
        self,
        leaves: Sequence[bytes],
        *,
        workers: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """
        Build the tree.

        Args:
            leaves: 32-byte leaf digests, in index order
            workers: Hash each level on a thread pool of this size when > 1
            cancel_event: Checked once per level; a set event aborts the build

        Raises:
            EmptyTreeError: If leaves is empty
            ValueError: If a leaf is not a 32-byte digest
            BuildCancelledError: If cancelled before completion
        """
        if len(leaves) == 0:
            raise EmptyTreeError()
        for i, leaf in enumerate(leaves):
            if not isinstance(leaf, bytes) or len(leaf) != DIGEST_SIZE:
                raise ValueError(f"Leaf {i} is not a {DIGEST_SIZE}-byte digest")

        logger.info(f"Building Merkle tree over {len(leaves)} leaves")
        if workers is not None and workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                levels = build_levels(leaves, executor=pool, cancel_event=cancel_event)
        else:
            levels = build_levels(leaves, cancel_event=cancel_event)

        self._levels: tuple[tuple[bytes, ...], ...] = tuple(tuple(level) for level in levels)
        logger.info(f"Merkle root {self.root_hex} ({self.depth} levels)")

    @classmethod
    def from_claims(
        cls,
        records: Iterable[ClaimRecord | dict],
        *,
        workers: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> "MerkleTree":
        """
        Encode claim records into leaves and build the tree.

        Any malformed record aborts the whole build: skipping it would shift
        every later leaf index.

        Raises:
            EncodingError: For the first malformed record, with its index
            EmptyTreeError: If there are no records
        """
        leaves: list[bytes] = []
        for i, raw in enumerate(records):
            record = parse_claim(raw, index=i)
            try:
                leaves.append(claim_leaf_hash(record))
            except EncodingError as e:
                raise EncodingError(
                    f"Invalid record {i}: {e.message}",
                    field=e.field,
                    index=i,
                ) from e
        return cls(leaves, workers=workers, cancel_event=cancel_event)

    @property
    def root(self) -> bytes:
        return self._levels[-1][0]

    @property
    def root_hex(self) -> str:
        return to_hex(self.root)

    @property
    def leaves(self) -> tuple[bytes, ...]:
        return self._levels[0]

    @property
    def levels(self) -> tuple[tuple[bytes, ...], ...]:
        return self._levels

    @property
    def depth(self) -> int:
        """Number of levels, leaves and root included."""
        return len(self._levels)

    def __len__(self) -> int:
        return len(self._levels[0])

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self):
            raise IndexOutOfRange(index, len(self))

    def proof(self, index: int) -> list[bytes]:
        """
        Sibling digests from the leaf at `index` up to the root.

        At each level the sibling is the other node of the pair (index ^ 1).
        A promoted node has no sibling on that level and contributes nothing.

        Raises:
            IndexOutOfRange: If index is not in [0, len(tree))
        """
        self._check_index(index)

        siblings: list[bytes] = []
        current = index
        for level in self._levels[:-1]:
            sibling = current ^ 1
            if sibling < len(level):
                siblings.append(level[sibling])
            current //= 2
        return siblings

    def proof_hex(self, index: int) -> list[str]:
        return [to_hex(s) for s in self.proof(index)]

    def prove(self, index: int) -> MerkleProof:
        """Proof for `index` bundled with its leaf and the root."""
        siblings = self.proof(index)
        return MerkleProof(
            leaf=self._levels[0][index],
            index=index,
            siblings=tuple(siblings),
            root=self.root,
        )

    def verify(self, leaf: bytes, proof: Sequence[bytes]) -> bool:
        return verify_proof(leaf, proof, self.root)


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf digests.

    Example: [a, b, c] -> [parent(a,b), c] -> [parent(parent(a,b), c)]

    Raises:
        EmptyTreeError: If leaves is empty
    """
    return MerkleTree(leaves).root


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        EmptyTreeError: If leaves is empty
        IndexOutOfRange: If index is out of range
    """
    return MerkleTree(leaves).prove(index)


def verify_proof(leaf: bytes, proof: Sequence[bytes], root: bytes) -> bool:
    """
    Verify that `leaf` is committed to by `root`.

    Folds the proof with the sorted-pair hash, bottom-up, and compares the
    result with the root. Same algorithm as OpenZeppelin MerkleProof.verify.
    """
    computed = leaf
    for sibling in proof:
        computed = merkle_parent(computed, sibling)
    return computed == root


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """Verify a MerkleProof against its own root."""
    return verify_proof(proof.leaf, proof.siblings, proof.root)


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels of a tree with `num_leaves` leaves, leaves and root
    included. A single leaf has depth 1, two leaves depth 2, three leaves
    depth 3 (the third leaf is promoted once).

    Returns 0 for an empty tree.
    """
    if num_leaves <= 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "DIGEST_SIZE",
    "MerkleProof",
    "MerkleTree",
    "merkle_parent",
    "next_level",
    "build_levels",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
