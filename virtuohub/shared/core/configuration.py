"""
Configuration Management System for the VirtuoHub client

This module provides a centralized configuration system that supports a 3-tier
precedence hierarchy: environment → user → system defaults.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULTS_DIR = Path(__file__).resolve().parent.parent / "config" / "settings"


class ValidationLevel(Enum):
    """Configuration validation strictness levels"""
    STRICT = "strict"      # Fail fast on validation errors
    LENIENT = "lenient"    # Log warnings, use defaults


class ApiConfig(BaseModel):
    """Backend action endpoints"""
    model_config = ConfigDict(extra='forbid')

    base_url: str = Field(default="http://localhost:5000", description="VirtuoHub API base URL")
    timeout: float = Field(default=15.0, ge=1.0, le=120.0, description="Request timeout (seconds)")


class AuthConfig(BaseModel):
    """Hosted auth provider (GoTrue) settings"""
    model_config = ConfigDict(extra='forbid')

    supabase_url: Optional[str] = Field(default=None, description="Auth/identity service URL")
    supabase_anon_key: Optional[str] = Field(default=None, description="Public anon key sent as apikey")
    redirect_url: Optional[str] = Field(default=None, description="Magic link redirect target")
    timeout: float = Field(default=15.0, ge=1.0, le=120.0, description="Request timeout (seconds)")
    replay_on_sign_in: bool = Field(default=True, description="Replay pending intent after sign-in")
    upsert_profile_on_sign_in: bool = Field(default=True, description="Best-effort profile upsert after sign-in")


class IntentConfig(BaseModel):
    """Deferred intent replay settings"""
    model_config = ConfigDict(extra='forbid')

    failure_title: str = Field(default="Action failed", description="Toast title when replay fails")
    failure_description: str = Field(default="Please try again.", description="Toast body when replay fails")


class UIConfig(BaseModel):
    """UI Configuration"""
    model_config = ConfigDict(extra='forbid')

    flet_web_mode: bool = Field(default=False, description="Enable web mode")
    flet_port: int = Field(default=8550, ge=1024, le=65535, description="Web server port")
    flet_web_renderer: str = Field(default="html", description="Web renderer type")

    theme_mode: str = Field(default="dark", description="UI theme mode")
    toast_duration_ms: int = Field(default=4000, ge=500, le=30000, description="Toast display time")
    max_toasts: int = Field(default=20, ge=1, le=200, description="Toast history kept in memory")


class SystemConfig(BaseModel):
    """Complete system configuration"""
    model_config = ConfigDict(extra='forbid')

    api: ApiConfig = Field(default_factory=ApiConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    intents: IntentConfig = Field(default_factory=IntentConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    schema_version: int = Field(default=1, description="Configuration schema version")


# env var -> (section, key)
ENV_MAP: Dict[str, tuple[str, str]] = {
    'VIRTUOHUB_API_URL': ('api', 'base_url'),
    'VIRTUOHUB_API_TIMEOUT': ('api', 'timeout'),
    'SUPABASE_URL': ('auth', 'supabase_url'),
    'SUPABASE_ANON_KEY': ('auth', 'supabase_anon_key'),
    'AUTH_REDIRECT_URL': ('auth', 'redirect_url'),
    'FLET_WEB_MODE': ('ui', 'flet_web_mode'),
    'FLET_PORT': ('ui', 'flet_port'),
    'FLET_WEB_RENDERER': ('ui', 'flet_web_renderer'),
}

_INT_KEYS = {'flet_port'}
_FLOAT_KEYS = {'timeout'}
_BOOL_KEYS = {'flet_web_mode'}


class ConfigManager:
    """Centralized configuration manager with 3-tier precedence hierarchy"""

    def __init__(self, config_dir: Optional[Path] = None, defaults_dir: Optional[Path] = None):
        self.config_dir = config_dir or (Path.cwd() / "config")
        self.defaults_dir = defaults_dir or DEFAULTS_DIR
        self._system_config: Optional[SystemConfig] = None
        self._user_config: Optional[Dict[str, Any]] = None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML configuration file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.warning(f"Failed to load {file_path}: {e}")
            return {}

    def _save_yaml_file(self, file_path: Path, data: Dict[str, Any]) -> bool:
        """Save configuration to YAML file"""
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False, indent=2)
            return True
        except OSError as e:
            logger.error(f"Failed to save {file_path}: {e}")
            return False

    def _load_system_defaults(self) -> SystemConfig:
        """Load system default configuration"""
        if self._system_config is None:
            defaults_dict = self._load_yaml_file(self.defaults_dir / "defaults.yaml")

            try:
                self._system_config = SystemConfig(**defaults_dict)
            except ValidationError as e:
                logger.warning(f"System defaults validation failed: {e}")
                self._system_config = SystemConfig()

        return self._system_config

    def _load_user_config(self) -> Dict[str, Any]:
        """Load user-level configuration"""
        if self._user_config is None:
            self._user_config = self._load_yaml_file(self.config_dir / "user.yaml")

        return self._user_config

    def _merge_configs(self) -> Dict[str, Any]:
        """Merge configurations with precedence: env → user → system"""
        merged = self._load_system_defaults().model_dump()
        self._deep_merge(merged, self._load_user_config())
        self._deep_merge(merged, self._get_env_overrides())
        return merged

    def _deep_merge(self, base: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Deep merge configuration dictionaries"""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _get_env_overrides(self) -> Dict[str, Any]:
        """Extract configuration overrides from environment variables"""
        overrides: Dict[str, Any] = {}
        for env_key, (section, config_key) in ENV_MAP.items():
            value = os.getenv(env_key)
            if value is None:
                continue

            if config_key in _INT_KEYS:
                try:
                    converted: Any = int(value)
                except ValueError:
                    continue
            elif config_key in _FLOAT_KEYS:
                try:
                    converted = float(value)
                except ValueError:
                    continue
            elif config_key in _BOOL_KEYS:
                converted = value.lower() in ('true', '1', 'yes', 'on')
            else:
                converted = value

            overrides.setdefault(section, {})[config_key] = converted

        return overrides

    def get_config(self, validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
        """Get merged configuration with validation"""
        merged_config = self._merge_configs()

        try:
            return SystemConfig(**merged_config)
        except ValidationError as e:
            if validation_level == ValidationLevel.STRICT:
                raise ValueError(f"Configuration validation failed: {e}")
            logger.warning(f"Configuration validation failed, using defaults: {e}")
            return SystemConfig()

    def save_user_config(self, config_updates: Dict[str, Any]) -> bool:
        """Save user-level configuration updates"""
        user_path = self.config_dir / "user.yaml"

        existing_config = self._load_yaml_file(user_path)
        self._deep_merge(existing_config, config_updates)

        success = self._save_yaml_file(user_path, existing_config)
        if success:
            self._user_config = None

        return success

    def reload_config(self) -> None:
        """Clear cached configurations and reload from files"""
        self._system_config = None
        self._user_config = None


# Global instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_dir: Optional[Path] = None) -> ConfigManager:
    """Get global configuration manager instance"""
    global _config_manager
    if _config_manager is None or config_dir is not None:
        _config_manager = ConfigManager(config_dir)
    return _config_manager


def get_config(validation_level: ValidationLevel = ValidationLevel.STRICT) -> SystemConfig:
    """Get current system configuration"""
    return get_config_manager().get_config(validation_level)


def validate_critical_config(config: SystemConfig) -> bool:
    """Check the settings without which sign-in cannot work."""
    url = config.auth.supabase_url
    key = config.auth.supabase_anon_key
    if not (url and url.strip()):
        logger.error("SUPABASE_URL is not configured")
        return False
    if not url.startswith(("http://", "https://")):
        logger.error(f"SUPABASE_URL must be an http(s) URL, got {url!r}")
        return False
    if not (key and key.strip()):
        logger.error("SUPABASE_ANON_KEY is not configured")
        return False
    return True
