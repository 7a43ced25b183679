"""
Configuration dataclasses for the domain lookup system.

This module defines the configuration structures used throughout the system
(remote API, request pacing, logging) together with loaders that build a
SystemConfig from defaults, environment variables / .env files, or JSON.
"""

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_BASE_URL = "https://1ztlll6rcl.execute-api.eu-north-1.amazonaws.com"
DEFAULT_TIMEOUT_SECONDS = 3.0
# The free API allows 60 requests per minute
DEFAULT_PACING_INTERVAL_SECONDS = 1.0

ENV_PREFIX = "DOMAIN_LOOKUP_"
LOG_LEVELS = ("debug", "info", "warn", "error")
LOG_FORMATS = ("json", "text", "both")


@dataclass
class ApiConfig:
    """Remote availability API settings."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


@dataclass
class PacingConfig:
    """Fixed delay enforced between consecutive availability queries."""

    interval_seconds: float = DEFAULT_PACING_INTERVAL_SECONDS


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main system configuration combining all sub-configurations."""

    api: ApiConfig = field(default_factory=ApiConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    simulation_mode: bool = False


def create_default_config(simulation_mode: bool = False) -> SystemConfig:
    """Create a system configuration with the built-in defaults."""
    return SystemConfig(simulation_mode=simulation_mode)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _choice_env(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = (os.getenv(ENV_PREFIX + name) or "").strip().lower()
    return raw if raw in choices else default


def load_config_from_env(env_file: Optional[Path] = None) -> SystemConfig:
    """
    Build a configuration from environment variables.

    Variables are read with the DOMAIN_LOOKUP_ prefix. A .env file is loaded
    first (without overriding variables that are already set); invalid values
    fall back to the defaults.

    Args:
        env_file: Optional explicit .env path; defaults to python-dotenv's lookup

    Returns:
        SystemConfig built from the environment
    """
    if env_file is not None:
        load_dotenv(dotenv_path=env_file)
    else:
        load_dotenv()

    base_url = (os.getenv(ENV_PREFIX + "BASE_URL") or "").strip() or DEFAULT_BASE_URL
    simulation = (os.getenv(ENV_PREFIX + "SIMULATION", "0") or "0").strip().lower()

    return SystemConfig(
        api=ApiConfig(
            base_url=base_url,
            timeout_seconds=_float_env("TIMEOUT", DEFAULT_TIMEOUT_SECONDS) or DEFAULT_TIMEOUT_SECONDS,
        ),
        pacing=PacingConfig(
            interval_seconds=_float_env("PACING_INTERVAL", DEFAULT_PACING_INTERVAL_SECONDS),
        ),
        logging=LoggingConfig(
            level=_choice_env("LOG_LEVEL", LOG_LEVELS, "info"),
            output_format=_choice_env("LOG_FORMAT", LOG_FORMATS, "text"),
        ),
        simulation_mode=simulation in ("1", "true", "yes", "on"),
    )


def load_config_from_file(config_path: Path) -> Optional[SystemConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        SystemConfig if successful, None otherwise
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        api_data = data.get("api", {})
        api = ApiConfig(
            base_url=api_data.get("base_url", DEFAULT_BASE_URL),
            timeout_seconds=float(api_data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
        )

        pacing_data = data.get("pacing", {})
        pacing = PacingConfig(
            interval_seconds=float(
                pacing_data.get("interval_seconds", DEFAULT_PACING_INTERVAL_SECONDS)
            ),
        )

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=logging_data.get("level", "info"),
            output_format=logging_data.get("output_format", "text"),
        )

        return SystemConfig(
            api=api,
            pacing=pacing,
            logging=logging_config,
            simulation_mode=bool(data.get("simulation_mode", False)),
        )

    except (json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None
    except FileNotFoundError:
        return None


def save_config_to_file(config: SystemConfig, config_path: Path) -> bool:
    """
    Save configuration to a JSON file.

    Args:
        config: SystemConfig to save
        config_path: Path to save the configuration

    Returns:
        True if successful, False otherwise
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "api": {
                "base_url": config.api.base_url,
                "timeout_seconds": config.api.timeout_seconds,
            },
            "pacing": {
                "interval_seconds": config.pacing.interval_seconds,
            },
            "logging": {
                "level": config.logging.level,
                "output_format": config.logging.output_format,
            },
            "simulation_mode": config.simulation_mode,
        }

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return True

    except (OSError, TypeError) as e:
        print(f"Error saving config: {e}", file=sys.stderr)
        return False
