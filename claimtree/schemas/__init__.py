"""
Schemas

Purpose: Export the public API for the schemas module.
"""

# Claim records and distribution output
from .claims import (
    CLAIM_LEAF_TYPES,
    ClaimEntry,
    ClaimRecord,
    MerkleDistribution,
    parse_claim,
)

# Error models and exceptions
from .errors import (
    BuildCancelledError,
    ClaimFileError,
    ClaimTreeError,
    ClaimTreeException,
    ConfigurationError,
    EmptyTreeError,
    EncodingError,
    ErrorCodes,
    IndexOutOfRange,
)

# Verification results
from .verification import (
    CheckResult,
    CheckSeverity,
    VerificationResult,
)

__all__ = [
    # Claims
    "CLAIM_LEAF_TYPES",
    "ClaimEntry",
    "ClaimRecord",
    "MerkleDistribution",
    "parse_claim",
    # Errors
    "BuildCancelledError",
    "ClaimFileError",
    "ClaimTreeError",
    "ClaimTreeException",
    "ConfigurationError",
    "EmptyTreeError",
    "EncodingError",
    "ErrorCodes",
    "IndexOutOfRange",
    # Verification
    "CheckResult",
    "CheckSeverity",
    "VerificationResult",
]
