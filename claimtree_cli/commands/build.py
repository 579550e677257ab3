"""
CLI Build Command

Build the Merkle tree over an input claims file and write the distribution
(root, totals and one proof per claim).

Usage:
    claimtree build input.json distribution.json [--workers N] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from claimtree.distribution import build_distribution
from claimtree.io import load_claims, save_distribution


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0


def build_cmd(args: Namespace) -> int:
    """
    Execute the build command.

    Any malformed record aborts the build before anything is written.
    """
    workers = args.workers if args.workers is not None else args.cli_config.workers

    records = load_claims(args.input)
    distribution = build_distribution(records, workers=workers)
    path = save_distribution(args.output, distribution)

    output_json = args.json or args.cli_config.default_output_format == "json"
    if output_json:
        print(json.dumps({
            "root": distribution.root,
            "totalAmount": distribution.total_amount,
            "totalClaims": distribution.total_claims,
            "output": str(path),
        }, indent=2))
    else:
        print(f"Merkle Root: {distribution.root}")
        print(f"Total Amount of Claims: {distribution.total_amount}")
        print(f"Total Number of Claims: {distribution.total_claims}")
        print(f"Merkle tree and proofs written to: {path}")

    return EXIT_SUCCESS
