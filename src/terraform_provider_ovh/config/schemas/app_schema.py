"""Application settings schemas."""
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("WARNING", description="Root log level")
    destination: str = Field("stderr", description="Log destination: stderr, file or both")
    file_path: str = Field("~/.ovh-provider/provider.log", description="Log file path")
    max_size_mb: int = Field(10, description="Maximum log file size before rotation")
    backup_count: int = Field(3, description="Number of rotated log files to keep")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        """Validate log destination."""
        valid_destinations = ["stderr", "file", "both"]
        if v not in valid_destinations:
            raise ValueError(f"Log destination must be one of {valid_destinations}")
        return v


class ClientConfig(BaseModel):
    """OVH API client configuration."""

    timeout: int = Field(180, description="Request timeout in seconds")
    validate_on_configure: bool = Field(
        True, description="Probe /auth/time while configuring the provider"
    )

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate request timeout."""
        if v <= 0:
            raise ValueError("Client timeout must be positive")
        return v


class WaitConfig(BaseModel):
    """Polling of asynchronous OVH operations."""

    timeout: float = Field(600.0, description="Maximum time to wait for a remote state, in seconds")
    interval: float = Field(5.0, description="Delay between two polls, in seconds")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate wait timeout."""
        if v <= 0:
            raise ValueError("Wait timeout must be positive")
        return v

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v: float) -> float:
        """Validate polling interval."""
        if v < 0:
            raise ValueError("Wait interval cannot be negative")
        return v


class AppConfig(BaseModel):
    """Provider application settings."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)
    wait: WaitConfig = Field(default_factory=WaitConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create configuration from a raw dictionary."""
        return cls.model_validate(data or {})
