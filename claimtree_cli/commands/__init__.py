"""
CLI command modules.
"""

from claimtree_cli.commands import build, generate, proof, verify

__all__ = ["build", "generate", "proof", "verify"]
