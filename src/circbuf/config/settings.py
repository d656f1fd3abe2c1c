"""Configuration settings for Circbuf."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class JoinStyle(str, Enum):
    """Shape inserted at convex corners of the offset."""

    ROUND = "round"
    BEVEL = "bevel"


class CapStyle(str, Enum):
    """Shape closing the offset at the finite ends of an open curve."""

    ROUND = "round"
    BUTT = "butt"
    SQUARE = "square"


class InternalCornerStyle(str, Enum):
    """Policy for concave corners of the offset."""

    NONE = "none"
    TRIM = "trim"


class GeometryConfig(BaseModel):
    """Configuration for geometric comparisons.

    A single tolerance is used for coincidence, colinearity and distance
    comparisons. It is passed explicitly to every primitive.
    """

    model_config = ConfigDict(frozen=True)

    tolerance: float = Field(
        default=1e-6,
        gt=0.0,
        le=1.0,
        description="Epsilon for coincidence and distance comparisons",
    )
    corner_probe: float = Field(
        default=0.01,
        gt=0.0,
        lt=0.5,
        description="Fraction of an element used to probe the side of a corner",
    )


class BufferConfig(BaseModel):
    """Configuration for buffer construction."""

    model_config = ConfigDict(frozen=True)

    join: JoinStyle = Field(
        default=JoinStyle.ROUND,
        description="Join style for convex corners",
    )
    cap: CapStyle = Field(
        default=CapStyle.ROUND,
        description="Cap style for open curve ends",
    )
    internal_corner: InternalCornerStyle = Field(
        default=InternalCornerStyle.NONE,
        description="Concave corner policy (none = rely on global splitting)",
    )


class ProcessingConfig(BaseModel):
    """Configuration for sub-curve processing."""

    model_config = ConfigDict(frozen=True)

    max_workers: int = Field(
        default=1,
        ge=1,
        description="Worker processes for independent sub-curves (1 = in-process)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class BufferSettings(BaseModel):
    """Main application settings."""

    model_config = ConfigDict(frozen=True)

    buffer: BufferConfig = Field(default_factory=BufferConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> BufferSettings:
    """Get default application settings."""
    return BufferSettings()
