"""Configuration Management for dialogentities

Handles loading, validation, and management of recognizer settings.
Supports hierarchical YAML configuration with environment overrides.
"""

import os
import re
import threading
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union, get_origin

import yaml
from pydantic import BaseModel, Field, ValidationError, validator

from .error_handler import ConfigurationError


class TemporalConfig(BaseModel):
    """Configuration for temporal resolution and free-text extraction."""
    timezone_offset: Optional[float] = Field(default=None, ge=-14.0, le=14.0)
    languages: List[str] = Field(default_factory=lambda: ["en"])
    prefer_dates_from: str = Field(default="current_period", pattern="^(current_period|past|future)$")
    detect_ranges: bool = Field(default=True)

    @validator('languages')
    def validate_languages(cls, v):
        """Validate language codes"""
        if not v:
            raise ValueError("At least one language is required")
        for code in v:
            if not re.match(r'^[a-z]{2,3}(-[A-Za-z0-9]+)?$', code):
                raise ValueError(f"Invalid language code: {code}")
        return v


class MatchingConfig(BaseModel):
    """Configuration for fuzzy choice matching."""
    threshold: float = Field(default=0.6, ge=0.0, le=1.0)


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_to_console: bool = Field(default=False)
    file_path: Optional[str] = Field(default=None)
    max_file_size: str = Field(default="10MB")
    backup_count: int = Field(default=5, ge=1, le=20)

    @validator('max_file_size')
    def validate_file_size(cls, v):
        """Validate file size format"""
        if not re.match(r'^\d+[KMG]B$', v.upper()):
            raise ValueError("File size must be in format: 10KB, 10MB, or 1GB")
        return v


class RecognizerSettings(BaseModel):
    """Main settings for the entity recognizers."""
    app_name: str = Field(default="dialogentities")
    environment: str = Field(default="development", pattern="^(development|testing|staging|production)$")

    temporal: TemporalConfig = Field(default_factory=TemporalConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    class Config:
        validate_assignment = True


class ConfigManager:
    """Manages settings loading and validation."""

    ENV_PREFIX = "DIALOGENTITIES_"

    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional directory holding the YAML files
            environment: Environment name (development, testing, staging, production)
        """
        self.config_base_path = Path(config_path) if config_path else self._get_default_config_path()
        self.environment = environment or os.getenv('DIALOGENTITIES_ENV', 'development')
        self._config: Optional[RecognizerSettings] = None
        self._lock = threading.Lock()
        self.logger = logging.getLogger(__name__)

        self.config_files = self._get_config_files()

    def _get_default_config_path(self) -> Path:
        """Get the default configuration directory."""
        config_locations = [
            Path("config"),
            Path.home() / ".dialogentities",
        ]

        for location in config_locations:
            if location.exists() and location.is_dir():
                return location

        return Path("config")

    def _get_config_files(self) -> Dict[str, Path]:
        """Get configuration file paths for hierarchical loading."""
        base_dir = self.config_base_path

        return {
            'default': base_dir / 'default_config.yaml',
            'environment': base_dir / f'{self.environment}.yaml',
            'local': base_dir / 'local.yaml'
        }

    def load_config(self) -> RecognizerSettings:
        """Load and validate settings with hierarchical overrides.

        Returns:
            Validated recognizer settings

        Raises:
            ConfigurationError: If a file cannot be parsed or validation fails
        """
        with self._lock:
            if self._config:
                return self._config

            config_data: Dict[str, Any] = {}

            for config_type, config_file in self.config_files.items():
                if config_file.exists():
                    self.logger.info(f"Loading {config_type} config from {config_file}")
                    file_data = self._load_yaml_file(config_file)
                    self._deep_merge(config_data, file_data)

            env_overrides = self._get_env_overrides()
            if env_overrides:
                self.logger.info(f"Applying environment overrides: {list(env_overrides.keys())}")
                self._deep_merge(config_data, env_overrides)

            config_data.setdefault('environment', self.environment)

            try:
                self._config = RecognizerSettings(**config_data)
            except ValidationError as e:
                self.logger.error(f"Configuration validation failed: {e}")
                raise ConfigurationError(f"Invalid configuration: {e}") from e

            return self._config

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file.

        Returns:
            Configuration dictionary
        """
        try:
            with open(file_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Failed to parse YAML file {file_path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {file_path} must be a mapping")
        return data

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Get configuration overrides from environment variables.

        Environment variables follow pattern: DIALOGENTITIES_<SECTION>_<KEY>
        Example: DIALOGENTITIES_TEMPORAL_TIMEZONE_OFFSET -> temporal.timezone_offset
        """
        overrides: Dict[str, Any] = {}
        sections = set(RecognizerSettings.model_fields)

        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == 'DIALOGENTITIES_ENV':
                continue

            name = key[len(self.ENV_PREFIX):].lower()
            section, _, field_name = name.partition('_')
            if section in sections and field_name:
                if self._is_list_field(section, field_name):
                    converted = [v.strip() for v in value.split(',') if v.strip()]
                else:
                    converted = self._convert_env_value(value)
                overrides.setdefault(section, {})[field_name] = converted
            elif name in sections:
                overrides[name] = self._convert_env_value(value)

        return overrides

    def _is_list_field(self, section: str, field_name: str) -> bool:
        """Check whether a section field is annotated as a list."""
        section_model = RecognizerSettings.model_fields[section].annotation
        fields = getattr(section_model, 'model_fields', {})
        if field_name not in fields:
            return False
        return get_origin(fields[field_name].annotation) in (list, List)

    def _convert_env_value(self, value: str) -> Union[str, int, float, bool, List[str]]:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if ',' in value:
            return [v.strip() for v in value.split(',')]

        return value

    def update_config(self, updates: Dict[str, Any]) -> RecognizerSettings:
        """Update settings with new values.

        Args:
            updates: Nested dictionary of setting updates

        Returns:
            Updated settings
        """
        current = self.load_config()

        with self._lock:
            config_dict = current.model_dump()
            self._deep_merge(config_dict, updates)

            try:
                self._config = RecognizerSettings(**config_dict)
            except ValidationError as e:
                # Previous settings stay in place
                self.logger.error(f"Failed to update configuration: {e}")
                raise ConfigurationError(f"Invalid configuration update: {e}") from e

            return self._config

    def reload_config(self) -> RecognizerSettings:
        """Drop cached settings and load them again from disk and environment."""
        with self._lock:
            old_config = self._config
            self._config = None

        new_config = self.load_config()
        if old_config:
            changes = self._get_config_changes(old_config, new_config)
            if changes:
                self.logger.info(f"Configuration reloaded, changed: {changes}")
        return new_config

    def _get_config_changes(self, old_config: RecognizerSettings,
                            new_config: RecognizerSettings) -> List[str]:
        """List dotted paths whose values differ between two settings objects."""
        changes = []

        def compare_dicts(old: Dict, new: Dict, prefix: str = ""):
            for key in set(old.keys()) | set(new.keys()):
                path = f"{prefix}.{key}" if prefix else key
                old_value, new_value = old.get(key), new.get(key)
                if isinstance(old_value, dict) and isinstance(new_value, dict):
                    compare_dicts(old_value, new_value, path)
                elif old_value != new_value:
                    changes.append(path)

        compare_dicts(old_config.model_dump(), new_config.model_dump())
        return sorted(changes)

    def _deep_merge(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]):
        """Recursively merge nested dictionaries."""
        for key, value in update_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._deep_merge(base_dict[key], value)
            else:
                base_dict[key] = value

    def validate_config(self, config_data: Dict[str, Any]) -> List[str]:
        """Validate a settings dictionary without applying it.

        Returns:
            List of validation error messages, empty when valid
        """
        try:
            RecognizerSettings(**config_data)
            return []
        except ValidationError as e:
            return [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]

    def save_config(self, target: str = "local") -> Path:
        """Write the current settings to one of the hierarchy files.

        Args:
            target: Key into the file hierarchy (default, environment, local)

        Returns:
            Path that was written
        """
        if target not in self.config_files:
            raise ConfigurationError(f"Unknown configuration target: {target}")

        config = self.load_config()
        file_path = self.config_files[target]
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w') as f:
            yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)

        self.logger.info(f"Saved configuration to {file_path}")
        return file_path
