"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from user_table.entities.user import normalize_field


class ApiConfig(BaseModel):
    """Users REST backend configuration."""

    base_url: str = Field(
        default="http://localhost:3001", description="Base URL of the users API"
    )
    timeout_seconds: float = Field(
        default=10.0, description="Request timeout in seconds"
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class TableConfig(BaseModel):
    """Table behaviour configuration."""

    default_sort_field: str = Field(
        default="first_name", description="Field the sort state starts on"
    )

    @field_validator("default_sort_field")
    @classmethod
    def _known_field(cls, value: str) -> str:
        return normalize_field(value)


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    api: ApiConfig = Field(default_factory=ApiConfig, description="API configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    table: TableConfig = Field(
        default_factory=TableConfig, description="Table configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
