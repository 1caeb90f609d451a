"""
Configuration for the addon build API

Settings are read from environment variables with the ADDON_API_ prefix
(or a .env file). The compatibility table can also be loaded from a YAML
file, in which case the file replaces the built-in table.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def load_ember_versions(path: Path) -> dict[str, str]:
    """Load an ordered {tag: pattern} table from a YAML file.

    Args:
        path: YAML file containing a mapping of tags to regular expressions

    Returns:
        Mapping in file order
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of tag to pattern")

    return {str(tag): str(pattern) for tag, pattern in data.items()}


class Settings(BaseSettings):
    """Settings for the addon build API"""

    model_config = SettingsConfigDict(
        env_prefix="ADDON_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment label, logged with every request
    env: str = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Service identification
    service_name: str = "addon-api"
    service_version: str = "1.0.0"

    # Storage for built addons and their status documents
    addon_bucket_name: str = "addons.example.com"
    artifact_filename: str = "artifact.json"

    # Lambda function that runs the actual build
    scheduler_function_name: str = "addon-builder-scheduler"

    # Package registry
    registry_url: str = "https://registry.npmjs.com"
    registry_timeout: Optional[float] = None
    addon_keyword: str = "ember-addon"

    # AWS
    aws_region: str = "us-east-1"
    s3_endpoint_url: Optional[str] = None
    lambda_endpoint_url: Optional[str] = None

    # Compatibility table, first matching pattern wins
    builder_ember_versions: dict[str, str] = Field(
        default_factory=lambda: {
            "3-4": r"^3\.4\.",
            "3-1": r"^3\.1\.",
            "3-0": r"^3\.0\.",
            "2-18": r"^2\.18\.",
            "2-16": r"^2\.16\.",
            "2-12": r"^2\.12\.",
        }
    )
    builder_ember_versions_file: Optional[Path] = None

    @model_validator(mode="after")
    def _load_versions_file(self) -> "Settings":
        if self.builder_ember_versions_file:
            self.builder_ember_versions = load_ember_versions(
                self.builder_ember_versions_file
            )
        return self


# Global settings instance
settings = Settings()
