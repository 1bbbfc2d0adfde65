import os
import warnings
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values, load_dotenv
from loguru import logger
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .config_models import FeatureFlagSettings, LoggingConfig

# Get the path to the root directory (one level up from insurance_common)
root_dir = Path(__file__).parent.parent
config_dir = Path(__file__).parent


class YamlSettingsSource(PydanticBaseSettingsSource):
    """
    Custom settings source that loads from YAML files with priority:
    1. .global_config.yaml (highest priority, git-ignored)
    2. production_config.yaml (if DEV_ENV=prod)
    3. global_config.yaml (base config)
    """

    reserved_filenames = {
        "global_config.yaml",
        "production_config.yaml",
        ".global_config.yaml",
    }

    def __init__(self, settings_cls: type[BaseSettings]):
        super().__init__(settings_cls)
        self.yaml_data = self._load_yaml_files()

    @staticmethod
    def _read_yaml(path: Path) -> Any:
        try:
            with open(path, "r") as file:
                return yaml.safe_load(file)
        except yaml.YAMLError as e:
            raise RuntimeError(f"Invalid YAML in {path}: {e}") from e

    def _load_yaml_files(self) -> dict[str, Any]:
        """Load and merge YAML configuration files."""

        def recursive_update(default: dict, override: dict) -> dict:
            for key, value in override.items():
                if isinstance(value, dict) and isinstance(default.get(key), dict):
                    recursive_update(default[key], value)
                else:
                    default[key] = value
            return default

        config_path = config_dir / "global_config.yaml"
        try:
            config_data = self._read_yaml(config_path) or {}
        except FileNotFoundError as e:
            raise RuntimeError(f"Required config file not found: {config_path}") from e

        # Split files contribute one root key each, named after the file
        for split_file in sorted(config_dir.glob("*.yaml")):
            if split_file.name in self.reserved_filenames:
                continue
            if split_file.is_symlink():
                logger.warning(f"Skipping symlink config file: {split_file}")
                continue
            root_key = split_file.stem
            if root_key in config_data:
                raise KeyError(
                    f"Config conflict: key '{root_key}' from '{split_file.name}' "
                    f"already exists in global_config.yaml. Remove it from one location."
                )
            split_data = self._read_yaml(split_file)
            if split_data is not None:
                config_data[root_key] = split_data
                logger.debug(f"Loaded split config: {split_file.name} -> '{root_key}'")

        if os.getenv("DEV_ENV") == "prod":
            prod_config_path = config_dir / "production_config.yaml"
            if prod_config_path.exists():
                prod_config_data = self._read_yaml(prod_config_path)
                if prod_config_data:
                    config_data = recursive_update(config_data, prod_config_data)
                    logger.warning(
                        "Overwriting insurance_common/global_config.yaml with production_config.yaml"
                    )

        custom_config_path = root_dir / ".global_config.yaml"
        if custom_config_path.exists():
            custom_config_data = self._read_yaml(custom_config_path)
            if custom_config_data:
                config_data = recursive_update(config_data, custom_config_data)
                logger.warning(
                    "Overwriting default insurance_common/global_config.yaml with .global_config.yaml"
                )

        return config_data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get field value from YAML data."""
        field_value = self.yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        return self.yaml_data


class Config(BaseSettings):
    """
    Global configuration using Pydantic Settings.
    Loads from:
    1. Environment variables (from .env or .prod.env)
    2. YAML files (global_config.yaml, production_config.yaml, .global_config.yaml)
    """

    model_config = SettingsConfigDict(
        env_file=str(root_dir / ".env"),
        env_file_encoding="utf-8",
        # Allow nested env vars with double underscore
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="allow",
    )

    app_name: str = "insurance-ui"
    feature_flags: FeatureFlagSettings = Field(
        default_factory=lambda: FeatureFlagSettings()
    )
    logging: LoggingConfig

    # Environment variables
    DEV_ENV: str = "dev"
    # Flag management key injected at build/deploy time
    ROX_API_KEY: str | None = None

    is_local: bool = Field(
        default_factory=lambda: os.getenv("GITHUB_ACTIONS") != "true"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Priority (highest to lowest):
        1. Environment variables
        2. .env file
        3. YAML files (custom .global_config.yaml > production_config.yaml > global_config.yaml)
        4. Init settings (passed to constructor)
        """
        return (
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            init_settings,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return self.model_dump()


# Load .env file first, to get DEV_ENV if it's defined there
load_dotenv(dotenv_path=root_dir / ".env", override=True)

if os.getenv("DEV_ENV") == "prod":
    load_dotenv(dotenv_path=root_dir / ".prod.env", override=True)

is_local = os.getenv("GITHUB_ACTIONS") != "true"
if is_local:
    env_file_to_check = ".prod.env" if os.getenv("DEV_ENV") == "prod" else ".env"
    env_values = dotenv_values(root_dir / env_file_to_check)
    if not env_values:
        warnings.warn(
            f"{env_file_to_check} file not found or empty",
            UserWarning,
            stacklevel=2,
        )

# Create a singleton instance
global_config = Config()  # type: ignore[call-arg]
