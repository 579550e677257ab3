"""
Schemas - Verification
File: verification.py

Purpose: Report format for auditing a written distribution.

An audit is a list of named checks (leaf_encoding, total_claims, indices,
records, proofs, root, total_amount). A failing distribution is reported,
never raised.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import ClaimTreeError


CheckSeverity = Literal["info", "error"]


class CheckResult(BaseModel):
    """Outcome of one audit check."""

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., min_length=1, description="Name of the check, e.g. 'root'")
    ok: bool
    severity: CheckSeverity
    message: str
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Error code, offending indices, expected/actual values",
    )

    @property
    def is_error(self) -> bool:
        return not self.ok and self.severity == "error"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=True, severity="info", message=message,
                   details=details or {})

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        return cls(check_id=check_id, ok=False, severity="error", message=message,
                   details=details or {})


class VerificationResult(BaseModel):
    """
    Audit report for one distribution.

    `error` is set only when the audit stopped early because an entry could
    not be re-encoded; the checks gathered up to that point are kept.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool
    checks: list[CheckResult] = Field(default_factory=list)
    error: ClaimTreeError | None = None

    @property
    def has_errors(self) -> bool:
        return any(check.is_error for check in self.checks)

    @property
    def passed_count(self) -> int:
        return sum(1 for check in self.checks if check.ok)

    @property
    def failed_count(self) -> int:
        return len(self.checks) - self.passed_count

    def get_error_messages(self) -> list[str]:
        return [check.message for check in self.checks if check.is_error]

    @classmethod
    def from_checks(cls, checks: list[CheckResult]) -> "VerificationResult":
        """ok only if every check passed."""
        return cls(ok=all(check.ok for check in checks), checks=checks)

    @classmethod
    def failure(
        cls,
        checks: list[CheckResult] | None = None,
        error: ClaimTreeError | None = None,
    ) -> "VerificationResult":
        return cls(ok=False, checks=checks or [], error=error)
