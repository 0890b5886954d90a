import pytest
from pydantic import ValidationError

from route_sim.core.exceptions import ConfigurationError
from route_sim.settings import (
    MAX_SPEED_KMH,
    SimulationConfig,
    SimulatorSettings,
    build_config,
    get_settings,
)


@pytest.mark.unit
class TestSimulationConfig:
    def test_defaults(self):
        config = SimulationConfig()
        assert config.speed_kmh == 45.0
        assert config.update_interval_ms == 1000
        assert config.noise_enabled is False

    def test_interval_seconds(self):
        assert SimulationConfig(update_interval_ms=250).interval_seconds == 0.25

    def test_validation(self):
        with pytest.raises(ValidationError):
            SimulationConfig(speed_kmh=0)

        with pytest.raises(ValidationError):
            SimulationConfig(speed_kmh=-10)

        with pytest.raises(ValidationError):
            SimulationConfig(update_interval_ms=0)

    def test_accepts_speed_above_operator_limit(self):
        assert SimulationConfig(speed_kmh=MAX_SPEED_KMH + 150).speed_kmh == 500.0

    def test_is_frozen(self):
        config = SimulationConfig()
        with pytest.raises(ValidationError):
            config.speed_kmh = 10.0


@pytest.mark.unit
class TestBuildConfig:
    def test_valid_values(self):
        config = build_config(speed_kmh=40.0, update_interval_ms=500, noise_enabled=True)
        assert config == SimulationConfig(speed_kmh=40.0, update_interval_ms=500, noise_enabled=True)

    def test_invalid_values_raise_configuration_error(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_config(speed_kmh=0.0, update_interval_ms=-5)

        assert set(exc_info.value.details) == {"speed_kmh", "update_interval_ms"}
        assert "speed_kmh" in exc_info.value.message


@pytest.mark.unit
class TestSimulatorSettings:
    def test_defaults(self):
        settings = SimulatorSettings()
        assert settings.speed_kmh == 45.0
        assert settings.update_interval_ms == 1000
        assert settings.noise_enabled is False
        assert settings.seed is None
        assert settings.log_level == "INFO"

    def test_speed_above_operator_limit_rejected(self):
        with pytest.raises(ValidationError):
            SimulatorSettings(speed_kmh=MAX_SPEED_KMH + 1)

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("ROUTE_SIM_SPEED_KMH", "60")
        monkeypatch.setenv("ROUTE_SIM_UPDATE_INTERVAL_MS", "250")
        monkeypatch.setenv("ROUTE_SIM_NOISE_ENABLED", "true")
        monkeypatch.setenv("ROUTE_SIM_SEED", "7")
        monkeypatch.setenv("ROUTE_SIM_LOG_LEVEL", "DEBUG")

        settings = SimulatorSettings()
        assert settings.speed_kmh == 60.0
        assert settings.update_interval_ms == 250
        assert settings.noise_enabled is True
        assert settings.seed == 7
        assert settings.log_level == "DEBUG"

    def test_to_config(self):
        config = SimulatorSettings(speed_kmh=30.0, update_interval_ms=200).to_config()
        assert config == SimulationConfig(speed_kmh=30.0, update_interval_ms=200)

    def test_get_settings_wraps_invalid_environment(self, monkeypatch):
        monkeypatch.setenv("ROUTE_SIM_SPEED_KMH", "0")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "speed_kmh" in exc_info.value.details
