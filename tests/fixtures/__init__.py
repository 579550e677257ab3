"""
Test fixtures package for claimtree tests.

This package provides factory functions for creating test objects:
- claim_fixtures.py: claim records and distributions

Usage:
    from fixtures import make_claims, make_distribution

    def test_something():
        claims = make_claims(4)
        distribution = make_distribution(7)
"""

from .claim_fixtures import (
    TOKEN_A,
    TOKEN_B,
    make_address,
    make_claim,
    make_claims,
    make_claim_dicts,
    make_distribution,
)

__all__ = [
    "TOKEN_A",
    "TOKEN_B",
    "make_address",
    "make_claim",
    "make_claims",
    "make_claim_dicts",
    "make_distribution",
]
