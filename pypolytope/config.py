"""
Configuration management for PyPolytope.

This module provides:
- PolytopeConfig: Typed configuration dataclass
- ConfigManager: Central configuration management with environment support
- create_default_config: Factory function for default configurations
- load_config: Load configuration from YAML files
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from pypolytope.exceptions import ConfigNotFoundError, ConfigValidationError


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class ToleranceConfig:
    """Numeric tolerance shared by every sign and zero decision."""

    eps: float = 1e-8

    def validate(self) -> None:
        """Validate tolerance configuration."""
        if not 0 < self.eps < 1:
            raise ConfigValidationError("tolerance.eps", "must be in (0, 1)", self.eps)


@dataclass
class SolverConfig:
    """Linear programming solver used to bootstrap vertex enumeration."""

    method: str = "highs"

    def validate(self) -> None:
        """Validate solver configuration."""
        valid_methods = {"highs", "highs-ds", "highs-ipm"}
        if self.method not in valid_methods:
            raise ConfigValidationError(
                "solver.method", f"must be one of {sorted(valid_methods)}", self.method
            )


@dataclass
class DebugConfig:
    """Development-time consistency checking."""

    checks: bool = False


@dataclass
class PolytopeConfig:
    """Complete PyPolytope configuration."""

    tolerance: ToleranceConfig = field(default_factory=ToleranceConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)

    def validate(self) -> None:
        """Validate all configuration settings."""
        self.tolerance.validate()
        self.solver.validate()
        if not isinstance(self.debug.checks, bool):
            raise ConfigValidationError("debug.checks", "must be a boolean", self.debug.checks)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "tolerance": {"eps": self.tolerance.eps},
            "solver": {"method": self.solver.method},
            "debug": {"checks": self.debug.checks},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PolytopeConfig":
        """Create PolytopeConfig from dictionary."""
        tolerance_data = data.get("tolerance", {})
        solver_data = data.get("solver", {})
        debug_data = data.get("debug", {})

        return cls(
            tolerance=ToleranceConfig(eps=float(tolerance_data.get("eps", 1e-8))),
            solver=SolverConfig(method=solver_data.get("method", "highs")),
            debug=DebugConfig(checks=debug_data.get("checks", False)),
        )


# =============================================================================
# Configuration Manager
# =============================================================================


class ConfigManager:
    """Central configuration management with environment variable support.

    Environment variables take precedence over config files.
    Config files take precedence over defaults.

    Environment variable format: PYPOLYTOPE_<SECTION>_<KEY>
    Example: PYPOLYTOPE_TOLERANCE_EPS=1e-9
    """

    ENV_PREFIX = "PYPOLYTOPE"

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to YAML configuration file.
        """
        self._config: Optional[PolytopeConfig] = None
        self._config_path = Path(config_path) if config_path else None
        self._raw_config: Dict[str, Any] = {}

    def load(self, validate: bool = True) -> PolytopeConfig:
        """Load and return configuration.

        Args:
            validate: Whether to validate configuration after loading.

        Returns:
            Loaded PolytopeConfig instance.
        """
        self._raw_config = create_default_config()

        if self._config_path:
            self._load_from_file(self._config_path)

        self._load_from_env()

        self._config = PolytopeConfig.from_dict(self._raw_config)

        if validate:
            self._config.validate()

        return self._config

    def _load_from_file(self, path: Path) -> None:
        """Load configuration from YAML file."""
        if not path.exists():
            raise ConfigNotFoundError(str(path))

        with open(path, "r") as f:
            file_config = yaml.safe_load(f)

        if file_config:
            self._deep_update(self._raw_config, file_config)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(f"{self.ENV_PREFIX}_"):
                config_key = key[len(self.ENV_PREFIX) + 1 :].lower()
                self._set_nested_value(config_key, value)

    def _set_nested_value(self, key: str, value: str) -> None:
        """Set a nested configuration value from environment variable."""
        parts = key.split("_")
        target = self._raw_config

        for part in parts[:-1]:
            if not isinstance(target.get(part), dict):
                target[part] = {}
            target = target[part]

        target[parts[-1]] = self._parse_value(value)

    @staticmethod
    def _parse_value(value: str) -> Any:
        """Parse string value to appropriate Python type."""
        if value.lower() in ("true", "yes", "1"):
            return True
        if value.lower() in ("false", "no", "0"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _deep_update(base: dict, update: dict) -> dict:
        """Deep merge update into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                ConfigManager._deep_update(base[key], value)
            else:
                base[key] = value
        return base

    @property
    def config(self) -> PolytopeConfig:
        """Get current configuration (loads if not already loaded)."""
        if self._config is None:
            self.load()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dotted key path.

        Args:
            key: Dotted key path (e.g., "tolerance.eps").
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        parts = key.split(".")
        value = self._raw_config

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value


# =============================================================================
# Factory Functions
# =============================================================================


def create_default_config() -> Dict[str, Any]:
    """Create default configuration dictionary.

    Returns:
        Configuration dictionary.
    """
    return {
        "tolerance": {
            "eps": 1e-8,
        },
        "solver": {
            "method": "highs",
        },
        "debug": {
            "checks": False,
        },
    }


def load_config(path: Union[str, Path], validate: bool = True) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file.
        validate: Whether to validate configuration.

    Returns:
        Configuration dictionary.
    """
    manager = ConfigManager(path)
    config = manager.load(validate=validate)
    return config.to_dict()


_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get global configuration manager instance."""
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager()
    return _global_config


def init_config(path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize global configuration from file.

    Args:
        path: Optional path to configuration file.

    Returns:
        Initialized ConfigManager instance.
    """
    global _global_config
    _global_config = ConfigManager(path)
    _global_config.load()
    return _global_config
