"""
Claim Data Generator

Produces random claim records for load testing and fixtures. Everything the
generator depends on is passed in through GeneratorConfig.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from claimtree.schemas.claims import ClaimRecord
from claimtree.schemas.errors import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_TOKEN_ADDRESS = "0x5615dEB798BB3E4dFa0139dFa1b3D433Cc23b72f"
DEFAULT_CUMULATIVE_MIN = 10**16  # 0.01 token at 18 decimals
DEFAULT_CUMULATIVE_MAX = 10**25  # 10,000,000 tokens at 18 decimals


@dataclass
class GeneratorConfig:
    """Inputs for generate_claims."""

    epoch: int = 1
    token_addresses: list[str] = field(default_factory=lambda: [DEFAULT_TOKEN_ADDRESS])
    cumulative_min: int = DEFAULT_CUMULATIVE_MIN
    cumulative_max: int = DEFAULT_CUMULATIVE_MAX
    entries: int = 100_000
    seed: int | None = None

    def validate(self) -> None:
        """
        Raises:
            ConfigurationError: If the configuration cannot produce claims
        """
        if not self.token_addresses:
            raise ConfigurationError("At least one token address is required")
        if self.entries < 0:
            raise ConfigurationError(f"entries must be >= 0, got {self.entries}")
        if self.epoch < 0:
            raise ConfigurationError(f"epoch must be >= 0, got {self.epoch}")
        if self.cumulative_min < 0:
            raise ConfigurationError(
                f"cumulative_min must be >= 0, got {self.cumulative_min}"
            )
        if self.cumulative_min > self.cumulative_max:
            raise ConfigurationError(
                "cumulative_min must not exceed cumulative_max",
                details={"min": str(self.cumulative_min), "max": str(self.cumulative_max)},
            )


def random_address(rng: random.Random) -> str:
    """A random 20-byte address as lowercase 0x-prefixed hex."""
    return "0x" + rng.getrandbits(160).to_bytes(20, "big").hex()


def generate_claims(config: GeneratorConfig) -> list[ClaimRecord]:
    """
    Generate `config.entries` random claims.

    Accounts are random, the token is drawn from `config.token_addresses`,
    amounts are uniform in [cumulative_min, cumulative_max]. The same seed
    yields the same records.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config.validate()
    rng = random.Random(config.seed)

    records = [
        ClaimRecord(
            epoch=config.epoch,
            account=random_address(rng),
            token=rng.choice(config.token_addresses),
            cumulative_amount=rng.randint(config.cumulative_min, config.cumulative_max),
        )
        for _ in range(config.entries)
    ]
    logger.info(f"Generated {len(records)} claims for epoch {config.epoch}")
    return records


__all__ = [
    "DEFAULT_TOKEN_ADDRESS",
    "DEFAULT_CUMULATIVE_MIN",
    "DEFAULT_CUMULATIVE_MAX",
    "GeneratorConfig",
    "random_address",
    "generate_claims",
]
