from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the optional YAML config (default ``config/portfolio.yml``)
- Validate it against the bundled JSON schema (``schema.json``)
- Apply defaults for every missing key
"""

SCHEMA_PATH = Path(__file__).with_name("schema.json")
DEFAULT_CONFIG_PATH = Path("config/portfolio.yml")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class MarketDataConfig:
    price_period: str = "5d"  # history window for the current price
    price_interval: str = "1m"  # bar size; last close is the current price


@dataclass(frozen=True)
class OutputConfig:
    default_suffix: str = "_updated"  # used by the "d"/"default" output token


@dataclass(frozen=True)
class PortfolioConfig:
    market_data: MarketDataConfig = field(default_factory=MarketDataConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    template_path: str = "template.csv"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: If the schema file is unreadable or the data fails
            validation (unknown keys, wrong types, bad period/interval strings).
    """
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    try:
        jsonschema.validate(data, schema)
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def load_config(path: Path | None = None) -> PortfolioConfig:
    """Load configuration.

    With ``path=None`` the default location is used when it exists and
    built-in defaults otherwise. An explicit ``path`` must exist.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return PortfolioConfig()
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    md_raw = data.get("market_data", {})
    out_raw = data.get("output", {})
    defaults = PortfolioConfig()
    return PortfolioConfig(
        market_data=MarketDataConfig(
            price_period=md_raw.get("price_period", defaults.market_data.price_period),
            price_interval=md_raw.get("price_interval", defaults.market_data.price_interval),
        ),
        output=OutputConfig(
            default_suffix=out_raw.get("default_suffix", defaults.output.default_suffix),
        ),
        template_path=data.get("template_path", defaults.template_path),
    )
