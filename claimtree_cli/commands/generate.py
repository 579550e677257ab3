"""
CLI Generate Command

Write a file of random claim records for testing.

Usage:
    claimtree generate --out input.json [--entries N] [--seed S] [--epoch E] [--token ADDR ...]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from claimtree.generator import generate_claims
from claimtree.io import save_claims


logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0


def generate_cmd(args: Namespace) -> int:
    """
    Execute the generate command.

    Command-line values override the generator section of the configuration.
    """
    settings = args.cli_config.generator
    config = settings.to_generator_config(seed=args.seed)
    if args.entries is not None:
        config.entries = args.entries
    if args.epoch is not None:
        config.epoch = args.epoch
    if args.token:
        config.token_addresses = list(args.token)

    records = generate_claims(config)
    path = save_claims(args.out, records)

    if args.json:
        print(json.dumps({"path": str(path), "entries": len(records)}, indent=2))
    else:
        print(f"Generated {len(records)} entries and saved to {path}")
    return EXIT_SUCCESS
