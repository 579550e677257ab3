"""
Generator Unit Tests
Tests for claimtree/generator.py
"""
import random

import pytest

from claimtree.generator import (
    DEFAULT_CUMULATIVE_MAX,
    DEFAULT_CUMULATIVE_MIN,
    DEFAULT_TOKEN_ADDRESS,
    GeneratorConfig,
    generate_claims,
    random_address,
)
from claimtree.merkle.leaf_encoder import claim_leaf_hash
from claimtree.schemas.errors import ConfigurationError, ErrorCodes

from fixtures.claim_fixtures import TOKEN_A, TOKEN_B


class TestGeneratorConfig:
    """Tests for GeneratorConfig defaults and validation."""

    def test_defaults(self):
        config = GeneratorConfig()

        assert config.epoch == 1
        assert config.token_addresses == [DEFAULT_TOKEN_ADDRESS]
        assert config.cumulative_min == DEFAULT_CUMULATIVE_MIN == 10**16
        assert config.cumulative_max == DEFAULT_CUMULATIVE_MAX == 10**25
        assert config.entries == 100_000

    def test_no_tokens(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GeneratorConfig(token_addresses=[]).validate()

        assert exc_info.value.code == ErrorCodes.CONFIGURATION_ERROR

    def test_negative_entries(self):
        with pytest.raises(ConfigurationError):
            GeneratorConfig(entries=-1).validate()

    def test_negative_epoch(self):
        with pytest.raises(ConfigurationError):
            GeneratorConfig(epoch=-1).validate()

    def test_negative_minimum(self):
        with pytest.raises(ConfigurationError):
            GeneratorConfig(cumulative_min=-1).validate()

    def test_min_above_max(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GeneratorConfig(cumulative_min=10, cumulative_max=9).validate()

        assert exc_info.value.details == {"min": "10", "max": "9"}


class TestGenerateClaims:
    """Tests for generate_claims()."""

    def test_entry_count(self):
        assert len(generate_claims(GeneratorConfig(entries=25, seed=1))) == 25

    def test_zero_entries(self):
        assert generate_claims(GeneratorConfig(entries=0)) == []

    def test_same_seed_same_claims(self):
        config = GeneratorConfig(entries=10, seed=42)

        assert generate_claims(config) == generate_claims(config)

    def test_different_seeds_differ(self):
        a = generate_claims(GeneratorConfig(entries=10, seed=1))
        b = generate_claims(GeneratorConfig(entries=10, seed=2))

        assert a != b

    def test_amounts_in_bounds(self):
        config = GeneratorConfig(entries=200, seed=7, cumulative_min=100, cumulative_max=110)

        amounts = {r.cumulative_amount for r in generate_claims(config)}
        assert min(amounts) >= 100
        assert max(amounts) <= 110

    def test_fixed_amount(self):
        config = GeneratorConfig(entries=5, seed=3, cumulative_min=9, cumulative_max=9)

        assert all(r.cumulative_amount == 9 for r in generate_claims(config))

    def test_epoch_applied(self):
        records = generate_claims(GeneratorConfig(entries=5, epoch=12, seed=0))

        assert {r.epoch for r in records} == {12}

    def test_tokens_drawn_from_config(self):
        config = GeneratorConfig(entries=100, seed=5, token_addresses=[TOKEN_A, TOKEN_B])

        assert {r.token for r in generate_claims(config)} <= {TOKEN_A, TOKEN_B}

    def test_default_token_stored_lowercase(self):
        records = generate_claims(GeneratorConfig(entries=1, seed=0))

        assert records[0].token == DEFAULT_TOKEN_ADDRESS.lower()

    def test_generated_claims_encode(self):
        for record in generate_claims(GeneratorConfig(entries=20, seed=9)):
            assert len(claim_leaf_hash(record)) == 32

    def test_invalid_config_raises(self):
        with pytest.raises(ConfigurationError):
            generate_claims(GeneratorConfig(token_addresses=[]))


class TestRandomAddress:
    """Tests for random_address()."""

    def test_format(self):
        address = random_address(random.Random(0))

        assert address.startswith("0x")
        assert len(address) == 42
        assert address == address.lower()

    def test_deterministic(self):
        assert random_address(random.Random(11)) == random_address(random.Random(11))
