"""
CLI Verify Command

Audit a distribution file offline: re-encode every claim, check every proof
against the root, rebuild the root and re-add the totals.

Usage:
    claimtree verify distribution.json [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from claimtree.distribution import verify_distribution
from claimtree.io import load_distribution
from claimtree.schemas.verification import VerificationResult


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def print_result_human(path: str, root: str, result: VerificationResult) -> None:
    """Print result in human-readable format."""
    print(f"distribution: {path}")
    print(f"root: {root}")
    print(f"ok: {str(result.ok).lower()}")
    print(f"\nchecks: {result.passed_count} passed, {result.failed_count} failed")
    for check in result.checks:
        status = "✓" if check.ok else "✗"
        print(f"  {status} {check.check_id}: {check.message}")


def print_result_json(path: str, root: str, result: VerificationResult) -> None:
    """Print result as JSON."""
    data = {"distribution": path, "root": root}
    data.update(result.model_dump(mode="json", exclude_none=True))
    print(json.dumps(data, indent=2))


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        EXIT_SUCCESS if every check passed, EXIT_VERIFICATION_FAILED otherwise
    """
    distribution = load_distribution(args.distribution)
    result = verify_distribution(distribution)

    output_json = args.json or args.cli_config.default_output_format == "json"
    if output_json:
        print_result_json(args.distribution, distribution.root, result)
    else:
        print_result_human(args.distribution, distribution.root, result)

    if result.ok:
        logger.info("Verification passed")
        return EXIT_SUCCESS

    logger.warning(f"Verification failed: {'; '.join(result.get_error_messages())}")
    return EXIT_VERIFICATION_FAILED
