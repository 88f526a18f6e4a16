"""
Configuration settings for the centerline worker.
"""

from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings

from .pipeline.processors import pairing_constants as defaults
from .pipeline.processors.units import meters_to_internal


class ConfigurationError(ValueError):
    """Thresholds or settings that cannot produce a meaningful run."""


class PairingThresholds(BaseModel):
    """
    Thresholds shared by every pipeline stage, in the caller's length unit.

    parallel_threshold is unitless (abs of a direction dot product); every
    other value is a length.
    """

    point_tolerance: float = defaults.POINT_TOLERANCE_M
    parallel_threshold: float = Field(defaults.PARALLEL_THRESHOLD, gt=0.0, le=1.0)
    min_distance: float = Field(defaults.MIN_DISTANCE_M, ge=0.0)
    max_distance: float = Field(defaults.MAX_DISTANCE_M, gt=0.0)
    min_overlap: float = Field(defaults.MIN_OVERLAP_LENGTH_M, ge=0.0)
    coincident_threshold: float = Field(defaults.COINCIDENT_THRESHOLD_M, ge=0.0)
    split_epsilon: float = Field(defaults.SPLIT_EPSILON_M, gt=0.0)
    min_line_length: float = Field(defaults.MIN_LINE_LENGTH_M, gt=0.0)
    overlap_floor: float = Field(defaults.OVERLAP_FLOOR_M, ge=0.0)
    coincident_overlap: float = Field(defaults.COINCIDENT_OVERLAP_M, ge=0.0)

    class Config:
        frozen = True
        extra = "forbid"
        allow_inf_nan = False

    @model_validator(mode="after")
    def _check_consistency(self) -> "PairingThresholds":
        if self.min_distance > self.max_distance:
            raise ValueError(
                f"min_distance ({self.min_distance}) exceeds max_distance ({self.max_distance})"
            )
        if self.split_epsilon >= self.min_line_length:
            raise ValueError(
                f"split_epsilon ({self.split_epsilon}) must be smaller than "
                f"min_line_length ({self.min_line_length})"
            )
        return self


def load_thresholds(**overrides: Any) -> PairingThresholds:
    """Build thresholds, turning validation failures into ConfigurationError."""
    try:
        return PairingThresholds(**overrides)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


class Settings(BaseSettings):
    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Application
    log_level: str = "INFO"

    # Worker
    worker_concurrency: int = 4
    job_timeout: int = 600  # 10 minutes

    # Internal length unit of incoming coordinates (m, cm, mm, ft, in)
    length_unit: str = "m"

    # Thresholds, authored in meters
    point_tolerance_m: float = defaults.POINT_TOLERANCE_M
    parallel_threshold: float = defaults.PARALLEL_THRESHOLD
    min_distance_m: float = defaults.MIN_DISTANCE_M
    max_distance_m: float = defaults.MAX_DISTANCE_M
    min_overlap_m: float = defaults.MIN_OVERLAP_LENGTH_M
    coincident_threshold_m: float = defaults.COINCIDENT_THRESHOLD_M
    split_epsilon_m: float = defaults.SPLIT_EPSILON_M
    min_line_length_m: float = defaults.MIN_LINE_LENGTH_M
    overlap_floor_m: float = defaults.OVERLAP_FLOOR_M
    coincident_overlap_m: float = defaults.COINCIDENT_OVERLAP_M

    class Config:
        env_file = ".env"
        env_prefix = "CENTERLINE_"
        case_sensitive = False

    def pairing_thresholds(self) -> PairingThresholds:
        """Thresholds converted from meters into the internal length unit."""
        try:
            def to_internal(meters: float) -> float:
                return meters_to_internal(meters, self.length_unit)

            values = {
                "point_tolerance": to_internal(self.point_tolerance_m),
                "parallel_threshold": self.parallel_threshold,
                "min_distance": to_internal(self.min_distance_m),
                "max_distance": to_internal(self.max_distance_m),
                "min_overlap": to_internal(self.min_overlap_m),
                "coincident_threshold": to_internal(self.coincident_threshold_m),
                "split_epsilon": to_internal(self.split_epsilon_m),
                "min_line_length": to_internal(self.min_line_length_m),
                "overlap_floor": to_internal(self.overlap_floor_m),
                "coincident_overlap": to_internal(self.coincident_overlap_m),
            }
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        return load_thresholds(**values)


# Global settings instance
settings = Settings()
