"""
Property-based tests for configuration module.

Covers the JSON file round trip and the environment / .env loader.
"""

import json
from pathlib import Path

import pytest
from hypothesis import given, settings, HealthCheck
from hypothesis import strategies as st

from domain_lookup.config import (
    ApiConfig,
    PacingConfig,
    LoggingConfig,
    SystemConfig,
    DEFAULT_BASE_URL,
    DEFAULT_PACING_INTERVAL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_PREFIX,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)


ENV_NAMES = ["BASE_URL", "TIMEOUT", "PACING_INTERVAL", "LOG_LEVEL", "LOG_FORMAT", "SIMULATION"]


@st.composite
def system_config_strategy(draw) -> SystemConfig:
    """Generate valid SystemConfig objects."""
    host = draw(st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=20))
    return SystemConfig(
        api=ApiConfig(
            base_url=f"https://{host}.example",
            timeout_seconds=draw(st.floats(min_value=0.1, max_value=60.0)),
        ),
        pacing=PacingConfig(
            interval_seconds=draw(st.floats(min_value=0.0, max_value=10.0)),
        ),
        logging=LoggingConfig(
            level=draw(st.sampled_from(["debug", "info", "warn", "error"])),
            output_format=draw(st.sampled_from(["json", "text", "both"])),
        ),
        simulation_mode=draw(st.booleans()),
    )


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so variables written by load_dotenv are removed on teardown
    for name in ENV_NAMES:
        monkeypatch.setenv(ENV_PREFIX + name, "")
        monkeypatch.delenv(ENV_PREFIX + name)
    return monkeypatch


class TestConfigurationRoundTripProperty:
    """
    Property-based tests for configuration serialization round-trip.
    """

    @given(config=system_config_strategy())
    @settings(max_examples=100, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_config_round_trip_preserves_data(self, config: SystemConfig, tmp_path: Path) -> None:
        """
        *For any* valid SystemConfig object, saving it to JSON and loading it
        back SHALL produce an equal SystemConfig object.
        """
        path = tmp_path / "config.json"

        assert save_config_to_file(config, path)
        reconstructed = load_config_from_file(path)

        assert reconstructed == config

    @given(config=system_config_strategy())
    @settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_config_serialization_produces_valid_json(self, config: SystemConfig, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        save_config_to_file(config, path)

        parsed = json.loads(path.read_text(encoding="utf-8"))

        assert set(parsed.keys()) == {"api", "pacing", "logging", "simulation_mode"}

    def test_missing_sections_use_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"simulation_mode": True}), encoding="utf-8")

        config = load_config_from_file(path)

        assert config == create_default_config(simulation_mode=True)

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert load_config_from_file(tmp_path / "nope.json") is None

    def test_malformed_file_returns_none(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        assert load_config_from_file(path) is None


class TestEnvironmentConfigProperty:
    """
    Property-based tests for environment based configuration.
    """

    def test_defaults_without_environment(self, clean_env, tmp_path: Path) -> None:
        config = load_config_from_env(env_file=tmp_path / "missing.env")

        assert config.api.base_url == DEFAULT_BASE_URL
        assert config.api.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
        assert config.pacing.interval_seconds == DEFAULT_PACING_INTERVAL_SECONDS
        assert config.logging == LoggingConfig()
        assert config.simulation_mode is False

    def test_environment_variables_are_read(self, clean_env, tmp_path: Path) -> None:
        clean_env.setenv(ENV_PREFIX + "BASE_URL", "https://lookup.example")
        clean_env.setenv(ENV_PREFIX + "TIMEOUT", "5")
        clean_env.setenv(ENV_PREFIX + "PACING_INTERVAL", "0.25")
        clean_env.setenv(ENV_PREFIX + "LOG_LEVEL", "WARN")
        clean_env.setenv(ENV_PREFIX + "LOG_FORMAT", "json")
        clean_env.setenv(ENV_PREFIX + "SIMULATION", "true")

        config = load_config_from_env(env_file=tmp_path / "missing.env")

        assert config.api.base_url == "https://lookup.example"
        assert config.api.timeout_seconds == 5.0
        assert config.pacing.interval_seconds == 0.25
        assert config.logging.level == "warn"
        assert config.logging.output_format == "json"
        assert config.simulation_mode is True

    def test_dotenv_file_is_loaded(self, clean_env, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text(
            f"{ENV_PREFIX}PACING_INTERVAL=2.5\n{ENV_PREFIX}SIMULATION=1\n",
            encoding="utf-8",
        )

        config = load_config_from_env(env_file=env_file)

        assert config.pacing.interval_seconds == 2.5
        assert config.simulation_mode is True

    def test_environment_wins_over_dotenv(self, clean_env, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text(f"{ENV_PREFIX}PACING_INTERVAL=2.5\n", encoding="utf-8")
        clean_env.setenv(ENV_PREFIX + "PACING_INTERVAL", "0.5")

        config = load_config_from_env(env_file=env_file)

        assert config.pacing.interval_seconds == 0.5

    @pytest.mark.parametrize("raw", ["abc", "-1", "", "  "])
    def test_invalid_numbers_fall_back_to_defaults(self, clean_env, tmp_path: Path, raw: str) -> None:
        clean_env.setenv(ENV_PREFIX + "PACING_INTERVAL", raw)
        clean_env.setenv(ENV_PREFIX + "TIMEOUT", raw)

        config = load_config_from_env(env_file=tmp_path / "missing.env")

        assert config.pacing.interval_seconds == DEFAULT_PACING_INTERVAL_SECONDS
        assert config.api.timeout_seconds == DEFAULT_TIMEOUT_SECONDS

    def test_zero_timeout_falls_back_but_zero_interval_is_kept(self, clean_env, tmp_path: Path) -> None:
        clean_env.setenv(ENV_PREFIX + "PACING_INTERVAL", "0")
        clean_env.setenv(ENV_PREFIX + "TIMEOUT", "0")

        config = load_config_from_env(env_file=tmp_path / "missing.env")

        assert config.pacing.interval_seconds == 0.0
        assert config.api.timeout_seconds == DEFAULT_TIMEOUT_SECONDS

    def test_unknown_log_choices_fall_back(self, clean_env, tmp_path: Path) -> None:
        clean_env.setenv(ENV_PREFIX + "LOG_LEVEL", "verbose")
        clean_env.setenv(ENV_PREFIX + "LOG_FORMAT", "xml")

        config = load_config_from_env(env_file=tmp_path / "missing.env")

        assert config.logging == LoggingConfig()
