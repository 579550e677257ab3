"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    claimtree generate --out PATH [--entries N] [--seed S] [--epoch E] [--token ADDR ...]
    claimtree build <input> <output> [--workers N] [--json] [--debug]
    claimtree verify <distribution> [--json] [--debug]
    claimtree proof <distribution> (--index N | --account ADDR) [--json]
    claimtree config --init | --show

Environment Variables:
    CLAIMTREE_WORKERS           Thread pool size for tree building (default: 1)
    CLAIMTREE_LOG_LEVEL         Log level (default: INFO)
    CLAIMTREE_LOG_FILE          Also log to this file
    CLAIMTREE_OUTPUT_FORMAT     human or json
    CLAIMTREE_EPOCH             Generator epoch
    CLAIMTREE_TOKEN_ADDRESSES   Generator token addresses, comma separated
    CLAIMTREE_CUMULATIVE_MIN    Generator minimum amount
    CLAIMTREE_CUMULATIVE_MAX    Generator maximum amount
    CLAIMTREE_ENTRIES           Generator entry count
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from claimtree_cli import __version__
from claimtree_cli.commands import build, generate, proof, verify
from claimtree_cli.config import LOG_LEVELS, get_default_config_template, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="claimtree",
        description="Build Merkle trees over reward claims and produce inclusion proofs.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./claimtree.json or ~/.config/claimtree/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=LOG_LEVELS,
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate command ---
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate random claim records",
        description="Write a JSON array of random claims for testing.",
    )
    generate_parser.add_argument(
        "--out", "-o",
        type=str,
        default="input_data.json",
        help="Output path (default: input_data.json)",
    )
    generate_parser.add_argument(
        "--entries", "-n",
        type=int,
        default=None,
        help="Number of claims (default: from config)",
    )
    generate_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible output",
    )
    generate_parser.add_argument(
        "--epoch",
        type=int,
        default=None,
        help="Epoch for every claim (default: from config)",
    )
    generate_parser.add_argument(
        "--token",
        action="append",
        default=None,
        help="Token address; repeat to draw from several tokens",
    )
    generate_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    generate_parser.set_defaults(func=generate.generate_cmd)

    # --- build command ---
    build_parser = subparsers.add_parser(
        "build",
        help="Build the Merkle tree and write proofs",
        description="Read claims, build the tree and write root, totals and per-claim proofs.",
    )
    build_parser.add_argument("input", type=str, help="Input claims JSON file")
    build_parser.add_argument("output", type=str, help="Output distribution JSON file")
    build_parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Thread pool size for hashing (default: from config)",
    )
    build_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    build_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )
    build_parser.set_defaults(func=build.build_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a distribution file offline",
        description="Recompute leaves, proofs, root and totals of a distribution.",
    )
    verify_parser.add_argument("distribution", type=str, help="Distribution JSON file")
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- proof command ---
    proof_parser = subparsers.add_parser(
        "proof",
        help="Show the proof for a claim",
        description="Look up a claim by leaf index or account.",
    )
    proof_parser.add_argument("distribution", type=str, help="Distribution JSON file")
    lookup = proof_parser.add_mutually_exclusive_group(required=True)
    lookup.add_argument("--index", "-i", type=int, help="Leaf index")
    lookup.add_argument("--account", "-a", type=str, help="Account address (any case)")
    proof_parser.add_argument("--json", action="store_true", help="JSON output")
    proof_parser.set_defaults(func=proof.proof_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default="claimtree.json",
        help="Path for config file (default: claimtree.json)",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (CLAIMTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: claimtree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
