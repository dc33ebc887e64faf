"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. --config <path> CLI flag
2. ./fulfillment.yaml (working directory)
3. ~/.fulfillment/config.yaml (user home)

Environment variables override YAML: FULFILLMENT_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

ENV_PREFIX = "FULFILLMENT_"


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class AmazonConfig(BaseModel):
    """Fulfillment service endpoint and credentials."""

    api_key: str = ""
    secret_key: str = ""
    endpoint: str = "https://fba-outbound.amazonaws.com/"
    timeout_seconds: float = Field(default=30.0, gt=0)


class FulfillmentConfig(BaseModel):
    """Workflow behaviour.

    Attributes:
        max_quantity_failsafe: Per-SKU quantity cap. None disables the cap.
        development_mode: Ignore missing-catalog faults on submit.
        pacing_delay_seconds: Pause before every service call.
        order_comment: Comment printed on the customer's packing slip.
    """

    max_quantity_failsafe: Optional[int] = Field(default=None, ge=1)
    development_mode: bool = False
    pacing_delay_seconds: float = Field(default=1.0, ge=0)
    order_comment: str = "Thank you for your order."


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error"] = "info"
    format: Literal["text", "verbose"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _lowercase_level(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class AppConfig(BaseModel):
    """Top-level configuration for the fulfillment adapter."""

    amazon: AmazonConfig = AmazonConfig()
    fulfillment: FulfillmentConfig = FulfillmentConfig()
    logging: LoggingConfig = LoggingConfig()


def _find_config_file() -> Path | None:
    candidates = [
        Path.cwd() / "fulfillment.yaml",
        Path.cwd() / "fulfillment.yml",
        Path.home() / ".fulfillment" / "config.yaml",
        Path.home() / ".fulfillment" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _coerce(value: str) -> Any:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply FULFILLMENT_<SECTION>_<KEY> env var overrides to config data.

    For example, ``FULFILLMENT_FULFILLMENT_DEVELOPMENT_MODE=true`` maps to
    section ``fulfillment``, field ``development_mode``.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    known_sections = sorted(AppConfig.model_fields.keys(), key=len, reverse=True)
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        suffix = key[len(ENV_PREFIX):].lower()
        matched_section = None
        matched_field = None
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                matched_section = section
                matched_field = suffix[len(section_prefix):]
                break
        if matched_section is None or not matched_field:
            continue
        section_data = data.setdefault(matched_section, {})
        if isinstance(section_data, dict):
            # Keep credentials as strings even if they look numeric
            if matched_field in ("api_key", "secret_key", "endpoint"):
                section_data[matched_field] = value
            else:
                section_data[matched_field] = _coerce(value)
    return data


def load_config(config_path: str | None = None) -> AppConfig:
    """Load configuration from YAML file with env var resolution.

    Without a config file, defaults plus environment overrides are used.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.fulfillment/).

    Returns:
        Validated AppConfig.

    Raises:
        FileNotFoundError: If config_path is given but does not exist.
        pydantic.ValidationError: If values fail validation.
    """
    raw_data: dict[str, Any] = {}
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    return AppConfig(**data)
