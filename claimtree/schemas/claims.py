"""
Schemas - Claims
File: claims.py

Purpose: Claim record input model and the distribution output models.

Input records arrive as four-field JSON objects:
    {"epoch": 1, "account": "0x...", "token": "0x...", "cumulativeAmount": "123"}

Amounts are decimal strings because they routinely exceed 2**53.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import EncodingError


# ABI types of the leaf tuple, in encoding order
CLAIM_LEAF_TYPES: tuple[str, ...] = ("uint256", "address", "address", "uint256")

_DECIMAL_INTEGER = re.compile(r"^-?[0-9]+$")


def _parse_integer(value: Any) -> int:
    """Accept ints and decimal-string integers of any size."""
    # bool is a subclass of int
    if isinstance(value, bool):
        raise ValueError("boolean is not an integer")
    if isinstance(value, int):
        return value
    # 1e25 parses to a float that is not 10**25
    if isinstance(value, float):
        raise ValueError(f"floating-point number {value!r}, use a decimal string")
    if isinstance(value, str):
        text = value.strip()
        if not _DECIMAL_INTEGER.match(text):
            raise ValueError(f"not a decimal integer string: {value!r}")
        return int(text, 10)
    raise ValueError(f"expected an integer, got {type(value).__name__}")


class ClaimRecord(BaseModel):
    """
    A single reward claim.

    Immutable once constructed. Addresses are stored lowercased, integers as
    Python ints, so records that differ only in address letter case or in
    int-vs-string amount form compare (and encode) identically.

    Range and length checks are left to the leaf encoder, which reports them
    as EncodingError.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    epoch: int = Field(..., description="Distribution epoch (uint256)")
    account: str = Field(..., description="Claimant address, 0x-prefixed hex")
    token: str = Field(..., description="Reward token address, 0x-prefixed hex")
    cumulative_amount: int = Field(
        ...,
        alias="cumulativeAmount",
        description="Cumulative claimable amount in base units (uint256)",
    )

    @field_validator("epoch", "cumulative_amount", mode="plain")
    @classmethod
    def _validate_integer(cls, value: Any) -> int:
        return _parse_integer(value)

    @field_validator("account", "token", mode="before")
    @classmethod
    def _normalize_address(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize in the input file format (amount as decimal string)."""
        return {
            "epoch": self.epoch,
            "account": self.account,
            "token": self.token,
            "cumulativeAmount": str(self.cumulative_amount),
        }


def parse_claim(data: Any, index: int | None = None) -> ClaimRecord:
    """
    Build a ClaimRecord from a JSON object.

    Args:
        data: Mapping with epoch, account, token and cumulativeAmount
        index: Position of the record in its input sequence (for error details)

    Returns:
        The parsed record

    Raises:
        EncodingError: If any field is missing or malformed
    """
    if isinstance(data, ClaimRecord):
        return data
    try:
        return ClaimRecord.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or None
        where = f"record {index}" if index is not None else "record"
        raise EncodingError(
            f"Invalid {where}: {first['msg']}",
            field=field,
            index=index,
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


class ClaimEntry(BaseModel):
    """One record of a distribution: the claim fields, its leaf index and proof."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    index: int = Field(..., ge=0, description="Leaf index of this claim")
    epoch: int
    account: str
    token: str
    cumulative_amount: str = Field(..., alias="cumulativeAmount")
    proof: list[str] = Field(
        default_factory=list,
        description="Sibling digests from leaf to root, 0x-prefixed hex",
    )

    @classmethod
    def from_record(cls, index: int, record: ClaimRecord, proof: list[str]) -> "ClaimEntry":
        return cls(
            index=index,
            epoch=record.epoch,
            account=record.account,
            token=record.token,
            cumulative_amount=str(record.cumulative_amount),
            proof=proof,
        )

    def to_record(self) -> ClaimRecord:
        """Rebuild the claim record; raises EncodingError if malformed."""
        return parse_claim(
            {
                "epoch": self.epoch,
                "account": self.account,
                "token": self.token,
                "cumulativeAmount": self.cumulative_amount,
            },
            index=self.index,
        )


class MerkleDistribution(BaseModel):
    """
    Published output of a build.

    `values` is in leaf-index order; a verifier maps a claim to its proof by
    its `index`.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    root: str = Field(..., description="Merkle root, 0x-prefixed hex")
    total_amount: str = Field(
        ...,
        alias="totalAmount",
        description="Sum of all cumulativeAmount values (decimal string)",
    )
    total_claims: int = Field(..., alias="totalClaims", ge=0)
    leaf_encoding: list[str] = Field(
        default_factory=lambda: list(CLAIM_LEAF_TYPES),
        alias="leafEncoding",
    )
    values: list[ClaimEntry] = Field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "CLAIM_LEAF_TYPES",
    "ClaimRecord",
    "ClaimEntry",
    "MerkleDistribution",
    "parse_claim",
]
