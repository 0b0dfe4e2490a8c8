"""Configuration Management for ClockVoice

Handles loading, validation, and management of interpreter configuration.
Supports hierarchical YAML files with environment overrides.
"""

import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, List, Union
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError, validator

from .error_handler import ConfigurationError


CANONICAL_VERBS = ["add", "change", "delete"]


def _split_list(value: Any) -> Any:
    """Accept a comma-separated string where a list of names is expected."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(',') if part.strip()]
    return value


class InterpreterSettings(BaseModel):
    """Vocabulary and heuristics for the command interpreter."""
    allowed_verbs: List[str] = Field(default_factory=lambda: list(CANONICAL_VERBS))
    employees: List[str] = Field(default_factory=list)
    reference_timezone: str = Field(default="America/Los_Angeles")
    name_window: int = Field(default=50, ge=0, le=500)
    
    @validator('allowed_verbs', pre=True)
    def split_verbs(cls, v):
        return _split_list(v)
    
    @validator('allowed_verbs')
    def validate_verbs(cls, v):
        """Only canonical verbs can be allowed"""
        normalized = [verb.lower().strip() for verb in v]
        unknown = [verb for verb in normalized if verb not in CANONICAL_VERBS]
        if unknown:
            raise ValueError(f"Unknown verbs {unknown}; expected a subset of {CANONICAL_VERBS}")
        return normalized
    
    @validator('employees', pre=True)
    def split_employees(cls, v):
        return _split_list(v)
    
    @validator('reference_timezone')
    def validate_timezone(cls, v):
        """Reference timezone must be resolvable"""
        from dateutil.tz import gettz
        if gettz(v) is None:
            raise ValueError(f"Unknown timezone: {v}")
        return v


class CaptureSettings(BaseModel):
    """Configuration for the speech capture boundary."""
    language: str = Field(default="en-US")
    continuous: bool = Field(default=False)
    interim_results: bool = Field(default=True)


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    log_dir: str = Field(default="logs")
    log_to_console: bool = Field(default=True)
    log_to_file: bool = Field(default=False)
    
    @validator('level', pre=True)
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class AppConfig(BaseModel):
    """Main application configuration."""
    app_name: str = Field(default="ClockVoice")
    environment: str = Field(default="development", pattern="^(development|testing|staging|production)$")
    
    # Component configurations
    interpreter: InterpreterSettings = Field(default_factory=InterpreterSettings)
    capture: CaptureSettings = Field(default_factory=CaptureSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    
    class Config:
        validate_assignment = True


class ConfigManager:
    """Manages configuration loading and validation."""
    
    ENV_PREFIX = "CLOCKVOICE_"
    
    def __init__(self, config_path: Optional[Path] = None, environment: Optional[str] = None):
        """Initialize configuration manager.
        
        Args:
            config_path: Optional path to the configuration directory
            environment: Environment name (development, testing, staging, production)
        """
        self.config_base_path = Path(config_path) if config_path else self._get_default_config_path()
        self.environment = environment or os.getenv('CLOCKVOICE_ENV', 'development')
        self._config: Optional[AppConfig] = None
        self._lock = threading.RLock()
        self.logger = logging.getLogger(__name__)
        
        # Configuration file paths
        self.config_files = self._get_config_files()
        
    def _get_default_config_path(self) -> Path:
        """Get the default configuration directory."""
        # Looking for config in order of precedence
        config_locations = [
            Path("config"),
            Path.home() / ".clockvoice",
            Path("/etc/clockvoice"),
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
            'local': base_dir / 'local.yaml'  # For development overrides
        }
    
    def load_config(self) -> AppConfig:
        """Load and validate configuration with hierarchical overrides.
        
        Returns:
            Validated application configuration
            
        Raises:
            ConfigurationError: If a file cannot be parsed or validation fails
        """
        with self._lock:
            if self._config:
                return self._config
            
            config_data: Dict[str, Any] = {}
            
            # Load configurations in order of precedence
            for config_type, config_file in self.config_files.items():
                if config_file.exists():
                    self.logger.info(f"Loading {config_type} config from {config_file}")
                    file_data = self._load_yaml_file(config_file)
                    self._deep_merge(config_data, file_data)
            
            # Apply environment variable overrides
            env_overrides = self._get_env_overrides()
            if env_overrides:
                self.logger.info(f"Applying environment overrides: {list(env_overrides.keys())}")
                self._deep_merge(config_data, env_overrides)
            
            try:
                self._config = AppConfig(**config_data)
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
        
        Environment variables follow pattern: CLOCKVOICE_<SECTION>_<KEY>
        Example: CLOCKVOICE_INTERPRETER_ALLOWED_VERBS -> interpreter.allowed_verbs
        """
        overrides: Dict[str, Any] = {}
        
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == 'CLOCKVOICE_ENV':
                continue
                
            section, _, field_name = key[len(self.ENV_PREFIX):].lower().partition('_')
            if not field_name:
                overrides[section] = self._convert_env_value(value)
                continue
                
            overrides.setdefault(section, {})[field_name] = self._convert_env_value(value)
        
        return overrides
    
    def _convert_env_value(self, value: str) -> Union[str, int, float, bool, List[str]]:
        """Convert environment variable string to appropriate type."""
        # Boolean conversion
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        
        # Numeric conversion
        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass
        
        # List conversion (comma-separated)
        if ',' in value:
            return [v.strip() for v in value.split(',')]
        
        return value
    
    def update_config(self, updates: Dict[str, Any]) -> AppConfig:
        """Update configuration with new values.
        
        Args:
            updates: Dictionary of configuration updates
            
        Returns:
            Updated configuration
            
        Raises:
            ConfigurationError: If the updated configuration is invalid; the
                previous configuration stays active
        """
        with self._lock:
            current = self.load_config()
            config_dict = current.model_dump()
            self._deep_merge(config_dict, updates)
            
            try:
                self._config = AppConfig(**config_dict)
            except ValidationError as e:
                self.logger.error(f"Failed to update configuration: {e}")
                raise ConfigurationError(f"Invalid configuration update: {e}") from e
            
            return self._config
        
    def _deep_merge(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]):
        """Recursively merge nested dictionaries."""
        for key, value in update_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._deep_merge(base_dict[key], value)
            else:
                base_dict[key] = value
    
    def reload_config(self) -> AppConfig:
        """Reload configuration from files, keeping the old one on failure."""
        self.logger.info("Reloading configuration...")
        
        with self._lock:
            old_config = self._config
            self._config = None
            
            try:
                new_config = self.load_config()
            except ConfigurationError:
                self._config = old_config
                raise
                
            if old_config:
                changes = self._get_config_changes(old_config, new_config)
                if changes:
                    self.logger.info(f"Configuration changes: {changes}")
                    
            return new_config
    
    def _get_config_changes(self, old_config: AppConfig, new_config: AppConfig) -> List[str]:
        """Get list of changed configuration fields."""
        changes = []
        
        def compare_dicts(old: Dict, new: Dict, prefix: str = ""):
            for key in sorted(set(old.keys()) | set(new.keys())):
                current_path = f"{prefix}.{key}" if prefix else key
                
                if key not in old:
                    changes.append(f"{current_path} added")
                elif key not in new:
                    changes.append(f"{current_path} removed")
                elif isinstance(old[key], dict) and isinstance(new[key], dict):
                    compare_dicts(old[key], new[key], current_path)
                elif old[key] != new[key]:
                    changes.append(f"{current_path}: {old[key]} -> {new[key]}")
        
        compare_dicts(old_config.model_dump(), new_config.model_dump())
        return changes
    
    def export_config(self, file_path: Path) -> bool:
        """Export current configuration to a YAML file.
        
        Returns:
            True if export successful
        """
        config_dict = self.load_config().model_dump()
        
        try:
            with open(file_path, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            self.logger.error(f"Failed to export configuration: {e}")
            return False
        
        self.logger.info(f"Configuration exported to {file_path}")
        return True
    
    def to_interpreter_config(self):
        """Build the per-call interpreter configuration from loaded settings."""
        from ..timeclock.models import InterpreterConfig
        
        settings = self.load_config().interpreter
        return InterpreterConfig(
            allowed_verbs=tuple(settings.allowed_verbs),
            available_employees=tuple(settings.employees)
        )
