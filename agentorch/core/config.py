from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Mapping

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROCESSING_NOTICE_PROBABILITY = 0.3


class ExecutionSettings(BaseModel):
    init_pause_ms: int = Field(500, ge=0, description="Pause after the initialization notice.")
    step_delay_min_ms: int = Field(1000, ge=0, description="Lower bound of the per-step jitter window.")
    step_delay_max_ms: int = Field(3000, ge=0, description="Upper bound of the per-step jitter window.")
    processing_notice_probability: float = Field(
        DEFAULT_PROCESSING_NOTICE_PROBABILITY,
        ge=0.0,
        le=1.0,
        description="Chance of emitting a supplementary '<step> - Processing...' notice.",
    )
    processing_pause_ms: int = Field(500, ge=0)
    time_scale: float = Field(
        1.0,
        ge=0.0,
        description="Multiplier applied to every simulated wait; 0 keeps only cooperative yields.",
    )
    run_timeout_seconds: float | None = Field(default=None, gt=0.0)
    random_seed: int | None = Field(default=None, description="Seed for simulated latency and metrics.")

    @model_validator(mode="after")
    def _check_window(self) -> "ExecutionSettings":
        if self.step_delay_min_ms > self.step_delay_max_ms:
            raise ValueError("step_delay_min_ms must not exceed step_delay_max_ms")
        return self


class SynthesisSettings(BaseModel):
    execution_time_min_ms: int = Field(2000, ge=0)
    execution_time_max_ms: int = Field(8000, ge=0)
    success_rate_floor: float = Field(0.9, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_window(self) -> "SynthesisSettings":
        if self.execution_time_min_ms > self.execution_time_max_ms:
            raise ValueError("execution_time_min_ms must not exceed execution_time_max_ms")
        return self


class ModelSettings(BaseModel):
    default_complexity: Literal["simple", "intermediate", "complex"] = "intermediate"


class ObservabilitySettings(BaseModel):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_logs: bool = Field(True)
    prometheus_enabled: bool = Field(True)


class Settings(BaseSettings):
    environment: Literal["local", "test", "production"] = Field("local")

    execution: ExecutionSettings = Field(default_factory=ExecutionSettings)  # type: ignore[arg-type]
    synthesis: SynthesisSettings = Field(default_factory=SynthesisSettings)  # type: ignore[arg-type]
    model: ModelSettings = Field(default_factory=ModelSettings)  # type: ignore[arg-type]
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)  # type: ignore[arg-type]

    model_config = SettingsConfigDict(
        env_prefix="AGENTORCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        protected_namespaces=(),
    )


@lru_cache(maxsize=1)
def _get_cached_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]


def get_settings(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Return settings, using cached defaults unless overrides are provided."""
    if overrides:
        return Settings(**dict(overrides))
    return _get_cached_settings()
