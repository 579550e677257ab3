"""
claimtree CLI

Command-line interface for building claim Merkle trees.

Usage:
    python -m claimtree_cli generate --out input.json --entries 1000
    python -m claimtree_cli build input.json distribution.json
    python -m claimtree_cli verify distribution.json
    python -m claimtree_cli proof distribution.json --account 0x...
    python -m claimtree_cli config --init
"""

__version__ = "0.1.0"
