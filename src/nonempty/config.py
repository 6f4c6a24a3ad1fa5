"""
nonempty - Configuration

Configuration loading from environment variables, with an optional YAML file
for projects that keep settings next to their code.

The settings only change diagnostics and defaults. No setting can weaken the
non-empty guarantee of the safe API.
"""

import os
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

TRUTHY = ("true", "1", "yes", "on")

DEFAULT_INLINE_CAPACITY = 8
DEFAULT_LOG_LEVEL = "WARNING"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TRUTHY


@dataclass
class NonEmptyConfig:
    """
    Configuration for the nonempty collections.

    Attributes:
        debug_checks: Unchecked operations verify their precondition and raise
            PreconditionViolatedError instead of silently breaking the invariant.
        inline_capacity: Default number of inline slots for NonEmptySmallVec.
        log_level: Level for the ``nonempty`` logger when configure_logging runs.
        log_json: Format log records as JSON lines.
    """

    debug_checks: bool = False
    inline_capacity: int = DEFAULT_INLINE_CAPACITY
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = True

    @classmethod
    def from_env(cls) -> "NonEmptyConfig":
        """
        Load configuration from environment variables.

        Environment variables:
            NONEMPTY_DEBUG_CHECKS: Verify unchecked-operation preconditions (default: false)
            NONEMPTY_INLINE_CAPACITY: Default inline capacity (default: 8)
            NONEMPTY_LOG_LEVEL: Logger level (default: WARNING)
            NONEMPTY_LOG_JSON: Emit JSON log lines (default: true)

        Returns:
            NonEmptyConfig: Configuration instance
        """
        debug_checks = _parse_bool(os.getenv("NONEMPTY_DEBUG_CHECKS", "false"))

        inline_capacity_str = os.getenv("NONEMPTY_INLINE_CAPACITY")
        inline_capacity = DEFAULT_INLINE_CAPACITY
        if inline_capacity_str:
            try:
                inline_capacity = int(inline_capacity_str)
            except ValueError:
                logger.warning(
                    f"Ignoring non-integer NONEMPTY_INLINE_CAPACITY={inline_capacity_str!r}"
                )

        log_level = os.getenv("NONEMPTY_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        log_json = _parse_bool(os.getenv("NONEMPTY_LOG_JSON", "true"))

        return cls(
            debug_checks=debug_checks,
            inline_capacity=inline_capacity,
            log_level=log_level,
            log_json=log_json,
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "NonEmptyConfig":
        """
        Load configuration from a YAML file.

        Only the top-level ``nonempty`` mapping is read, so the settings can live
        in a shared project config. Environment variables override file values.

        Example file:
            nonempty:
              debug_checks: true
              inline_capacity: 16
        """
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        section = data.get("nonempty", {}) if isinstance(data, dict) else {}
        if not isinstance(section, dict):
            raise ValueError(f"'nonempty' section in {path} must be a mapping")

        config = cls.from_dict(section)
        logger.info(f"Loaded configuration from {path}")

        # Environment wins over the file
        env_overrides = {
            "NONEMPTY_DEBUG_CHECKS": "debug_checks",
            "NONEMPTY_INLINE_CAPACITY": "inline_capacity",
            "NONEMPTY_LOG_LEVEL": "log_level",
            "NONEMPTY_LOG_JSON": "log_json",
        }
        overrides = {
            field_name: os.environ[env_name]
            for env_name, field_name in env_overrides.items()
            if env_name in os.environ
        }
        if overrides:
            merged = config.to_dict()
            merged.update(overrides)
            config = cls.from_dict(merged)
        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NonEmptyConfig":
        """Create a config from a mapping, ignoring unknown keys."""
        config = cls()
        if "debug_checks" in data:
            config.debug_checks = _parse_bool(data["debug_checks"])
        if "inline_capacity" in data:
            config.inline_capacity = int(data["inline_capacity"])
        if "log_level" in data:
            config.log_level = str(data["log_level"]).upper()
        if "log_json" in data:
            config.log_json = _parse_bool(data["log_json"])
        return config

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration.

        Returns:
            Tuple of (is_valid: bool, errors: list[str])
        """
        errors = []

        if self.inline_capacity < 0:
            errors.append(
                f"NONEMPTY_INLINE_CAPACITY must be >= 0, got {self.inline_capacity}"
            )

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"NONEMPTY_LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}, "
                f"got {self.log_level}"
            )

        is_valid = len(errors) == 0
        return is_valid, errors


_active_config: Optional[NonEmptyConfig] = None


def get_config() -> NonEmptyConfig:
    """Return the active configuration, loading it from the environment on first use."""
    global _active_config
    if _active_config is None:
        _active_config = NonEmptyConfig.from_env()
        is_valid, errors = _active_config.validate()
        if not is_valid:
            for error in errors:
                logger.warning(f"Configuration warning: {error}")
            _active_config = NonEmptyConfig()
    return _active_config


def set_config(config: NonEmptyConfig) -> None:
    """Install ``config`` as the active configuration."""
    is_valid, errors = config.validate()
    if not is_valid:
        raise ValueError("Configuration validation failed: " + "; ".join(errors))
    global _active_config
    _active_config = config


def reset_config() -> None:
    """Forget the active configuration so the next get_config() re-reads the environment."""
    global _active_config
    _active_config = None
