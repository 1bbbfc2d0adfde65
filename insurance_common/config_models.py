"""
Pydantic models for global configuration structure.

Each model corresponds to a section in the global_config.yaml file and provides
type validation and structure for the configuration data.
"""

from pydantic import BaseModel, Field


class FeatureFlagSettings(BaseModel):
    """Remote feature flag (flag management) configuration."""

    namespace: str = "insurancestack"
    # Base URL the relative runtime config path is resolved against
    base_url: str = "http://localhost:8080/"
    runtime_config_path: str = "config/fm.json"
    runtime_config_field: str = "envKey"


class LoggingLocationConfig(BaseModel):
    """Location information display configuration for logging."""

    enabled: bool
    show_file: bool
    show_function: bool
    show_line: bool
    show_for_info: bool
    show_for_debug: bool
    show_for_warning: bool
    show_for_error: bool


class LoggingFormatConfig(BaseModel):
    """Logging format configuration."""

    show_time: bool
    show_session_id: bool
    location: LoggingLocationConfig


class LoggingLevelsConfig(BaseModel):
    """Logging level configuration."""

    debug: bool
    info: bool
    warning: bool
    error: bool
    critical: bool


class RedactionPattern(BaseModel):
    """Configuration for a specific redaction pattern."""

    name: str
    regex: str
    placeholder: str


class RedactionConfig(BaseModel):
    """Configuration for log redaction/scrubbing."""

    enabled: bool = True
    use_default_pii: bool = True
    patterns: list[RedactionPattern] = []


class LoggingConfig(BaseModel):
    """Complete logging configuration."""

    verbose: bool
    format: LoggingFormatConfig
    levels: LoggingLevelsConfig
    redaction: RedactionConfig = Field(default_factory=lambda: RedactionConfig())
