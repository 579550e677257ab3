"""
Claim and Distribution IO

Purpose: Read claim input files and read/write distribution files.

Input file: JSON array of {epoch, account, token, cumulativeAmount} objects.
Distribution file: see claimtree.distribution.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from claimtree.schemas.claims import ClaimRecord, MerkleDistribution, parse_claim
from claimtree.schemas.errors import ClaimFileError


logger = logging.getLogger(__name__)

# Input files are indented 4, distribution files 2
CLAIMS_INDENT = 4
DISTRIBUTION_INDENT = 2


def _read_json_file(path: Path) -> Any:
    """Read and parse a JSON file."""
    try:
        data = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ClaimFileError(f"File not found: {path}", path=str(path)) from e
    except OSError as e:
        raise ClaimFileError(f"Cannot read {path}: {e}", path=str(path)) from e

    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise ClaimFileError(f"Invalid JSON in {path}: {e}", path=str(path)) from e


def _write_json_file(path: Path, obj: Any, indent: int) -> int:
    """Write object as JSON, creating parent directories. Returns byte size."""
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(obj, indent=indent)
    path.write_text(content, encoding="utf-8")
    return len(content.encode("utf-8"))


def load_claims(path: str | Path) -> list[ClaimRecord]:
    """
    Load claim records from a JSON array file.

    Records keep file order, which becomes their leaf index.

    Raises:
        ClaimFileError: If the file is missing, not JSON, or not an array
        EncodingError: If a record is malformed
    """
    path = Path(path)
    data = _read_json_file(path)
    if not isinstance(data, list):
        raise ClaimFileError(
            f"Expected a JSON array of claims in {path}, got {type(data).__name__}",
            path=str(path),
        )

    records = [parse_claim(item, index=i) for i, item in enumerate(data)]
    logger.info(f"Loaded {len(records)} claims from {path}")
    return records


def save_claims(path: str | Path, records: Sequence[ClaimRecord]) -> Path:
    """Write claim records as an input file."""
    path = Path(path)
    size = _write_json_file(path, [r.to_json_dict() for r in records], CLAIMS_INDENT)
    logger.info(f"Wrote {len(records)} claims to {path} ({size} bytes)")
    return path


def save_distribution(path: str | Path, distribution: MerkleDistribution) -> Path:
    """Write a distribution file."""
    path = Path(path)
    size = _write_json_file(path, distribution.to_json_dict(), DISTRIBUTION_INDENT)
    logger.info(f"Wrote distribution to {path} ({size} bytes)")
    return path


def load_distribution(path: str | Path) -> MerkleDistribution:
    """
    Load a distribution file.

    Raises:
        ClaimFileError: If the file is missing, not JSON, or not a distribution
    """
    path = Path(path)
    data = _read_json_file(path)
    try:
        return MerkleDistribution.model_validate(data)
    except ValidationError as e:
        raise ClaimFileError(
            f"Invalid distribution in {path}: {e.errors()[0]['msg']}",
            path=str(path),
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


__all__ = [
    "load_claims",
    "save_claims",
    "save_distribution",
    "load_distribution",
]
