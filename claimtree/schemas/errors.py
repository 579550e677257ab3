"""
Schemas - Errors
File: errors.py

Purpose: Error taxonomy for claim encoding, tree construction and proof lookup.
Defines both Pydantic models for structured error reporting and Python
exceptions for control flow.

None of these errors is retryable: building a tree is pure computation, and a
partially built tree must never be published.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Record & Encoding Errors
    ENCODING_ERROR = "ENCODING_ERROR"
    CLAIM_FILE_ERROR = "CLAIM_FILE_ERROR"

    # Tree Errors
    EMPTY_TREE = "EMPTY_TREE"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    BUILD_CANCELLED = "BUILD_CANCELLED"

    # Verification Errors
    MERKLE_PROOF_INVALID = "MERKLE_PROOF_INVALID"
    ROOT_MISMATCH = "ROOT_MISMATCH"
    TOTALS_MISMATCH = "TOTALS_MISMATCH"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class ClaimTreeError(BaseModel):
    """
    Structured error model.

    Used where an error is reported as data (verification results, CLI JSON
    output) rather than raised.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.ENCODING_ERROR],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "ClaimTreeException":
        """Convert this error model to a raised exception."""
        return ClaimTreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class ClaimTreeException(Exception):
    """
    Base exception for all claimtree errors.

    Carries structured error information and can be converted to a
    ClaimTreeError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "CLAIMTREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> ClaimTreeError:
        """Convert this exception to a ClaimTreeError model."""
        return ClaimTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EncodingError(ClaimTreeException):
    """Raised when a claim record field is malformed or out of range."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if field:
            full_details["field"] = field
        if index is not None:
            full_details["index"] = index
        super().__init__(
            message=message,
            code=ErrorCodes.ENCODING_ERROR,
            details=full_details,
            retryable=False,
        )
        self.field = field
        self.index = index


class EmptyTreeError(ClaimTreeException):
    """Raised when a tree is requested over zero records."""

    def __init__(
        self,
        message: str = "Cannot build a Merkle tree from zero leaves",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_TREE,
            details=details,
            retryable=False,
        )


class IndexOutOfRange(ClaimTreeException, IndexError):
    """Raised when a proof is requested for a leaf that does not exist."""

    def __init__(
        self,
        index: int,
        size: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["index"] = index
        full_details["size"] = size
        super().__init__(
            message=f"Leaf index {index} out of range for {size} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )
        self.index = index
        self.size = size


class BuildCancelledError(ClaimTreeException):
    """Raised when a tree build is cancelled at a level boundary."""

    def __init__(
        self,
        level: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["level"] = level
        super().__init__(
            message=f"Tree build cancelled before level {level}",
            code=ErrorCodes.BUILD_CANCELLED,
            details=full_details,
            retryable=False,
        )
        self.level = level


class ClaimFileError(ClaimTreeException):
    """Raised when a claims or distribution file cannot be read."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.CLAIM_FILE_ERROR,
            details=full_details,
            retryable=False,
        )


class ConfigurationError(ClaimTreeException):
    """Raised for invalid generator or CLI configuration."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=details,
            retryable=False,
        )
