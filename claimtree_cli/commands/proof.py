"""
CLI Proof Command

Look up claims and their proofs in a distribution file. Each proof is
re-checked against the root before it is shown.

Usage:
    claimtree proof distribution.json --index 3
    claimtree proof distribution.json --account 0xabc... [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace

from claimtree.crypto.hashing import to_hex
from claimtree.distribution import find_claims
from claimtree.io import load_distribution
from claimtree.merkle.leaf_encoder import claim_leaf_hash
from claimtree.merkle.merkle_proofs import ClaimVerifier
from claimtree.schemas.claims import ClaimEntry


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def entry_verifies(entry: ClaimEntry, root: str) -> bool:
    """Whether the entry's proof links its re-encoded leaf to `root`."""
    leaf = claim_leaf_hash(entry.to_record())
    return ClaimVerifier.verify_hex(to_hex(leaf), entry.proof, root)


def proof_cmd(args: Namespace) -> int:
    """
    Execute the proof command.

    Returns:
        EXIT_VERIFICATION_FAILED if a shown proof does not verify
    """
    distribution = load_distribution(args.distribution)

    if args.index is not None:
        if not 0 <= args.index < len(distribution.values):
            print(
                f"Error: index {args.index} out of range for {len(distribution.values)} claims",
                file=sys.stderr,
            )
            return EXIT_RUNTIME_ERROR
        entries = [distribution.values[args.index]]
    else:
        entries = find_claims(distribution, args.account)
        if not entries:
            print(f"Error: no claims for account {args.account}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

    verified = [entry_verifies(entry, distribution.root) for entry in entries]
    exit_code = EXIT_SUCCESS if all(verified) else EXIT_VERIFICATION_FAILED

    output_json = args.json or args.cli_config.default_output_format == "json"
    if output_json:
        claims = []
        for entry, ok in zip(entries, verified):
            data = entry.model_dump(mode="json", by_alias=True)
            data["verified"] = ok
            claims.append(data)
        print(json.dumps({"root": distribution.root, "claims": claims}, indent=2))
        return exit_code

    print(f"root: {distribution.root}")
    for entry, ok in zip(entries, verified):
        print(f"\nindex: {entry.index}")
        print(f"epoch: {entry.epoch}")
        print(f"account: {entry.account}")
        print(f"token: {entry.token}")
        print(f"cumulativeAmount: {entry.cumulative_amount}")
        print(f"verified: {str(ok).lower()}")
        print(f"proof ({len(entry.proof)}):")
        for sibling in entry.proof:
            print(f"  {sibling}")
    return exit_code
