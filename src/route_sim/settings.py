from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from route_sim.core.exceptions import ConfigurationError

# Upper bound of the operator-facing speed setting (ROUTE_SIM_SPEED_KMH).
# The engine itself accepts any positive speed.
MAX_SPEED_KMH = 350.0


class SimulationConfig(BaseModel):
    """Validated parameters of one simulated run."""

    speed_kmh: float = Field(default=45.0, gt=0.0)
    update_interval_ms: int = Field(default=1000, gt=0)
    noise_enabled: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def interval_seconds(self) -> float:
        return self.update_interval_ms / 1000.0


def _configuration_error(prefix: str, error: PydanticValidationError) -> ConfigurationError:
    fields = {".".join(str(p) for p in err["loc"]): err["msg"] for err in error.errors()}
    return ConfigurationError(f"{prefix}: {', '.join(sorted(fields))}", details=fields)


def build_config(**kwargs: object) -> SimulationConfig:
    """Build a SimulationConfig, reporting invalid values as ConfigurationError."""
    try:
        return SimulationConfig.model_validate(kwargs)
    except PydanticValidationError as e:
        raise _configuration_error("Invalid simulation configuration", e) from e


class SimulatorSettings(BaseSettings):
    speed_kmh: float = Field(default=45.0, gt=0.0, le=MAX_SPEED_KMH)
    update_interval_ms: int = Field(default=1000, gt=0)
    noise_enabled: bool = Field(
        default=False,
        description="Add speed variation, GPS drift and traffic pauses to emitted positions",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the noise random generator; unset for non-deterministic runs",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"

    model_config = SettingsConfigDict(env_prefix="ROUTE_SIM_", case_sensitive=False)

    def to_config(self) -> SimulationConfig:
        return SimulationConfig(
            speed_kmh=self.speed_kmh,
            update_interval_ms=self.update_interval_ms,
            noise_enabled=self.noise_enabled,
        )


def get_settings() -> SimulatorSettings:
    """Load and validate settings from environment variables."""
    try:
        return SimulatorSettings()
    except PydanticValidationError as e:
        raise _configuration_error("Invalid environment settings", e) from e
