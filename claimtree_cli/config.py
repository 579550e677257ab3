"""
CLI Configuration

Configuration management for the claimtree CLI.
Supports a JSON configuration file and environment variables
(a .env file in the working directory is loaded first).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from claimtree.generator import (
    DEFAULT_CUMULATIVE_MAX,
    DEFAULT_CUMULATIVE_MIN,
    DEFAULT_TOKEN_ADDRESS,
    GeneratorConfig,
)
from claimtree.schemas.errors import ConfigurationError


# Environment variable prefix
ENV_PREFIX = "CLAIMTREE_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
OUTPUT_FORMATS = ("human", "json")


@dataclass
class GeneratorSettings:
    """Defaults for the generate command."""

    epoch: int = 1
    token_addresses: list[str] = field(default_factory=lambda: [DEFAULT_TOKEN_ADDRESS])
    cumulative_min: int = DEFAULT_CUMULATIVE_MIN
    cumulative_max: int = DEFAULT_CUMULATIVE_MAX
    entries: int = 100_000

    def to_generator_config(self, seed: int | None = None) -> GeneratorConfig:
        return GeneratorConfig(
            epoch=self.epoch,
            token_addresses=list(self.token_addresses),
            cumulative_min=self.cumulative_min,
            cumulative_max=self.cumulative_max,
            entries=self.entries,
            seed=seed,
        )


@dataclass
class CLIConfig:
    """Main CLI configuration."""

    # Tree building
    workers: int = 1

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Output
    default_output_format: str = "human"  # "human" or "json"

    generator: GeneratorSettings = field(default_factory=GeneratorSettings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "workers": self.workers,
            "log_level": self.log_level,
            "log_file": self.log_file,
            "default_output_format": self.default_output_format,
            "generator": {
                "epoch": self.generator.epoch,
                "token_addresses": list(self.generator.token_addresses),
                "cumulative_min": str(self.generator.cumulative_min),
                "cumulative_max": str(self.generator.cumulative_max),
                "entries": self.generator.entries,
            },
        }


def _int_value(value: Any, name: str) -> int:
    """Integers may be given as JSON numbers or decimal strings."""
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _choice_value(value: Any, choices: tuple[str, ...], name: str, *, upper: bool = False) -> str:
    """A string from a fixed set; case-folded before the lookup."""
    text = str(value).strip()
    text = text.upper() if upper else text.lower()
    if text not in choices:
        raise ConfigurationError(
            f"{name} must be one of {', '.join(choices)}, got {value!r}"
        )
    return text


def _apply_env(config: CLIConfig) -> CLIConfig:
    """Override config fields from CLAIMTREE_* environment variables."""
    if os.getenv(f"{ENV_PREFIX}WORKERS"):
        config.workers = _int_value(os.getenv(f"{ENV_PREFIX}WORKERS"), "WORKERS")
    if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config.log_level = _choice_value(
            os.getenv(f"{ENV_PREFIX}LOG_LEVEL"), LOG_LEVELS, "LOG_LEVEL", upper=True
        )
    if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config.log_file = os.getenv(f"{ENV_PREFIX}LOG_FILE")
    if os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"):
        config.default_output_format = _choice_value(
            os.getenv(f"{ENV_PREFIX}OUTPUT_FORMAT"), OUTPUT_FORMATS, "OUTPUT_FORMAT"
        )

    gen = config.generator
    if os.getenv(f"{ENV_PREFIX}EPOCH"):
        gen.epoch = _int_value(os.getenv(f"{ENV_PREFIX}EPOCH"), "EPOCH")
    if os.getenv(f"{ENV_PREFIX}TOKEN_ADDRESSES"):
        tokens = os.getenv(f"{ENV_PREFIX}TOKEN_ADDRESSES", "")
        gen.token_addresses = [t.strip() for t in tokens.split(",") if t.strip()]
    if os.getenv(f"{ENV_PREFIX}CUMULATIVE_MIN"):
        gen.cumulative_min = _int_value(os.getenv(f"{ENV_PREFIX}CUMULATIVE_MIN"), "CUMULATIVE_MIN")
    if os.getenv(f"{ENV_PREFIX}CUMULATIVE_MAX"):
        gen.cumulative_max = _int_value(os.getenv(f"{ENV_PREFIX}CUMULATIVE_MAX"), "CUMULATIVE_MAX")
    if os.getenv(f"{ENV_PREFIX}ENTRIES"):
        gen.entries = _int_value(os.getenv(f"{ENV_PREFIX}ENTRIES"), "ENTRIES")

    return config


def load_config_from_env() -> CLIConfig:
    """Load configuration from environment variables over defaults."""
    load_dotenv()
    return _apply_env(CLIConfig())


def load_config_from_file(path: Path) -> CLIConfig:
    """
    Load configuration from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: If the file is not valid configuration
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")

    config = CLIConfig()

    config.workers = _int_value(data.get("workers", config.workers), "workers")
    config.log_level = _choice_value(
        data.get("log_level", config.log_level), LOG_LEVELS, "log_level", upper=True
    )
    config.log_file = data.get("log_file", config.log_file)
    config.default_output_format = _choice_value(
        data.get("default_output_format", config.default_output_format),
        OUTPUT_FORMATS,
        "default_output_format",
    )

    gen_data = data.get("generator", {})
    gen = config.generator
    gen.epoch = _int_value(gen_data.get("epoch", gen.epoch), "generator.epoch")
    gen.token_addresses = list(gen_data.get("token_addresses", gen.token_addresses))
    gen.cumulative_min = _int_value(
        gen_data.get("cumulative_min", gen.cumulative_min), "generator.cumulative_min"
    )
    gen.cumulative_max = _int_value(
        gen_data.get("cumulative_max", gen.cumulative_max), "generator.cumulative_max"
    )
    gen.entries = _int_value(gen_data.get("entries", gen.entries), "generator.entries")

    return config


def load_config(config_path: Path | None = None) -> CLIConfig:
    """
    Load configuration from file and/or environment.

    Environment variables override file settings.

    Args:
        config_path: Optional path to config file

    Returns:
        Merged configuration
    """
    load_dotenv()

    config = CLIConfig()

    if config_path is not None:
        config = load_config_from_file(config_path)
    else:
        default_paths = [
            Path.cwd() / "claimtree.json",
            Path.cwd() / ".claimtree.json",
            Path.home() / ".config" / "claimtree" / "config.json",
        ]
        for default_path in default_paths:
            if default_path.exists():
                config = load_config_from_file(default_path)
                break

    return _apply_env(config)


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(CLIConfig().to_dict(), indent=2) + "\n"
