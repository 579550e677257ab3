"""
Distribution Assembly and Auditing

Turns an ordered list of claim records into the published distribution
(root, totals, per-claim proofs) and re-checks a published distribution
offline.

Output format (JSON, camelCase keys):
    {
      "root": "0x...",
      "totalAmount": "123",
      "totalClaims": 2,
      "leafEncoding": ["uint256", "address", "address", "uint256"],
      "values": [
        {"index": 0, "epoch": 1, "account": "0x...", "token": "0x...",
         "cumulativeAmount": "100", "proof": ["0x...", ...]},
        ...
      ]
    }
"""
from __future__ import annotations

import logging
import threading
from typing import Iterable, Sequence

from claimtree.crypto.hashing import from_hex, to_hex
from claimtree.merkle.leaf_encoder import claim_leaf_hash
from claimtree.merkle.merkle_tree import MerkleTree, verify_proof
from claimtree.schemas.claims import (
    CLAIM_LEAF_TYPES,
    ClaimEntry,
    ClaimRecord,
    MerkleDistribution,
    parse_claim,
)
from claimtree.schemas.errors import ClaimTreeException, ErrorCodes
from claimtree.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)

# Per-claim failures reported individually before they are summarized
MAX_REPORTED_FAILURES = 20


def total_amount(records: Iterable[ClaimRecord]) -> int:
    """Sum of cumulative amounts (arbitrary precision)."""
    return sum(record.cumulative_amount for record in records)


def build_distribution(
    records: Sequence[ClaimRecord | dict],
    *,
    workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> MerkleDistribution:
    """
    Build the tree over `records` and assemble the distribution.

    Args:
        records: Claim records in leaf-index order
        workers: Thread pool size for level hashing (see MerkleTree)
        cancel_event: Optional cancellation flag (see MerkleTree)

    Returns:
        MerkleDistribution with one entry per record, in input order

    Raises:
        EncodingError: If any record is malformed (nothing is produced)
        EmptyTreeError: If records is empty
    """
    parsed = [parse_claim(r, index=i) for i, r in enumerate(records)]
    tree = MerkleTree.from_claims(parsed, workers=workers, cancel_event=cancel_event)

    values = [
        ClaimEntry.from_record(i, record, tree.proof_hex(i))
        for i, record in enumerate(parsed)
    ]
    amount = total_amount(parsed)

    logger.info(
        f"Distribution built: root={tree.root_hex} claims={len(values)} total={amount}"
    )
    return MerkleDistribution(
        root=tree.root_hex,
        total_amount=str(amount),
        total_claims=len(values),
        values=values,
    )


def find_claims(distribution: MerkleDistribution, account: str) -> list[ClaimEntry]:
    """Entries for `account`, compared case-insensitively."""
    wanted = account.strip().lower()
    return [entry for entry in distribution.values if entry.account.lower() == wanted]


def _check_header(distribution: MerkleDistribution) -> list[CheckResult]:
    checks: list[CheckResult] = []

    if list(distribution.leaf_encoding) == list(CLAIM_LEAF_TYPES):
        checks.append(CheckResult.passed("leaf_encoding", "Leaf encoding matches"))
    else:
        checks.append(CheckResult.failed(
            "leaf_encoding",
            f"Unsupported leaf encoding {distribution.leaf_encoding}",
            details={"expected": list(CLAIM_LEAF_TYPES)},
        ))

    if distribution.total_claims == len(distribution.values):
        checks.append(CheckResult.passed("total_claims", f"{len(distribution.values)} claims"))
    else:
        checks.append(CheckResult.failed(
            "total_claims",
            f"totalClaims is {distribution.total_claims} but {len(distribution.values)} entries present",
            details={"code": ErrorCodes.TOTALS_MISMATCH},
        ))

    bad_indices = [
        pos for pos, entry in enumerate(distribution.values) if entry.index != pos
    ]
    if bad_indices:
        checks.append(CheckResult.failed(
            "indices",
            f"{len(bad_indices)} entries are out of index order",
            details={"positions": bad_indices[:MAX_REPORTED_FAILURES]},
        ))
    else:
        checks.append(CheckResult.passed("indices", "Entries are in index order"))

    return checks


def verify_distribution(distribution: MerkleDistribution) -> VerificationResult:
    """
    Audit a distribution without trusting any of its derived values.

    Checks:
    - leaf_encoding: the distribution uses the claim leaf types
    - total_claims: totalClaims equals the number of entries
    - indices: entry i carries index i
    - records: every entry re-encodes to a valid leaf
    - proofs: every proof recomputes the published root
    - root: rebuilding the tree from the entries gives the published root
    - total_amount: totalAmount equals the sum of entry amounts

    Returns:
        VerificationResult; ok is False if any check failed
    """
    checks = _check_header(distribution)

    try:
        root = from_hex(distribution.root)
    except ValueError as e:
        checks.append(CheckResult.failed("root", f"Root is not valid hex: {e}"))
        return VerificationResult.from_checks(checks)

    records: list[ClaimRecord] = []
    leaves: list[bytes] = []
    try:
        for entry in distribution.values:
            record = entry.to_record()
            records.append(record)
            leaves.append(claim_leaf_hash(record))
    except ClaimTreeException as e:
        checks.append(CheckResult.failed(
            "records",
            e.message,
            details=e.details,
        ))
        return VerificationResult.failure(checks, error=e.to_error_model())
    checks.append(CheckResult.passed("records", f"{len(records)} records encode"))

    failed_proofs: list[int] = []
    for entry, leaf in zip(distribution.values, leaves):
        try:
            siblings = [from_hex(s) for s in entry.proof]
        except ValueError:
            failed_proofs.append(entry.index)
            continue
        if not verify_proof(leaf, siblings, root):
            failed_proofs.append(entry.index)

    if failed_proofs:
        logger.warning(f"{len(failed_proofs)} proofs do not verify against {distribution.root}")
        checks.append(CheckResult.failed(
            "proofs",
            f"{len(failed_proofs)} of {len(leaves)} proofs do not verify",
            details={
                "code": ErrorCodes.MERKLE_PROOF_INVALID,
                "indices": failed_proofs[:MAX_REPORTED_FAILURES],
            },
        ))
    else:
        checks.append(CheckResult.passed("proofs", f"All {len(leaves)} proofs verify"))

    if leaves:
        rebuilt = MerkleTree(leaves).root
        if rebuilt == root:
            checks.append(CheckResult.passed("root", "Root matches rebuilt tree"))
        else:
            checks.append(CheckResult.failed(
                "root",
                "Root does not match the tree rebuilt from entries",
                details={
                    "code": ErrorCodes.ROOT_MISMATCH,
                    "expected": distribution.root,
                    "actual": to_hex(rebuilt),
                },
            ))
    else:
        checks.append(CheckResult.failed("root", "Distribution has no entries"))

    amount = total_amount(records)
    if str(amount) == distribution.total_amount:
        checks.append(CheckResult.passed("total_amount", f"Total amount {amount}"))
    else:
        checks.append(CheckResult.failed(
            "total_amount",
            f"totalAmount is {distribution.total_amount} but entries sum to {amount}",
            details={"code": ErrorCodes.TOTALS_MISMATCH},
        ))

    return VerificationResult.from_checks(checks)


__all__ = [
    "MAX_REPORTED_FAILURES",
    "total_amount",
    "build_distribution",
    "find_claims",
    "verify_distribution",
]
