"""
Configuration management for ts-doctest.

Handles environment variables, defaults, and configuration validation
for a doctest generation run.
"""

import os
from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]
VALID_LOG_FORMATS = ["text", "json"]
VALID_MARKER_POLICIES = ["ignore", "warn", "error"]

DEFAULT_EXTENSIONS = (".ts", ".tsx", ".mts", ".cts", ".js", ".jsx")


@dataclass
class Config:
    """Configuration class for ts-doctest with environment variable support."""

    # Output dialect (mocha, jest, ava, tape)
    dialect: Optional[str] = field(default=None)

    # Watch mode
    watch: bool = field(default=False)
    watch_debounce: float = field(default=0.025)

    # Environment detection
    ci_mode: bool = field(default=False)

    # Logging configuration
    log_level: str = field(default="INFO")
    log_format: str = field(default="text")
    log_file: Optional[Path] = field(default=None)

    # Extraction behaviour
    extra_marker_policy: str = field(default="ignore")
    extensions: Tuple[str, ...] = field(default=DEFAULT_EXTENSIONS)

    def __post_init__(self):
        """Post-initialization normalisation and environment overrides."""
        ci_env = os.getenv("CI", "").lower() == "true"
        if ci_env and self.ci_mode is False:
            self.ci_mode = True

        log_env = os.getenv("TS_DOCTEST_LOG_LEVEL")
        if log_env:
            self.log_level = log_env
        self.log_level = self.log_level.upper()
        if self.log_level == "WARN":
            self.log_level = "WARNING"
        if self.log_level not in VALID_LOG_LEVELS:
            self.log_level = "INFO"

        format_env = os.getenv("TS_DOCTEST_LOG_FORMAT")
        if format_env:
            self.log_format = format_env.lower()
        # CI logs are machine-read
        elif self.ci_mode and self.log_format == "text":
            self.log_format = "json"

        policy_env = os.getenv("TS_DOCTEST_MARKER_POLICY")
        if policy_env:
            self.extra_marker_policy = policy_env.lower()

        if self.log_file is not None:
            self.log_file = Path(self.log_file)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for logging."""
        return {
            "dialect": self.dialect,
            "watch": self.watch,
            "watch_debounce": self.watch_debounce,
            "ci_mode": self.ci_mode,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "log_file": str(self.log_file) if self.log_file else None,
            "extra_marker_policy": self.extra_marker_policy,
            "extensions": list(self.extensions),
        }

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables."""
        ci = os.getenv("CI", "").lower() == "true"
        log_file = os.getenv("TS_DOCTEST_LOG_FILE")

        return cls(
            dialect=os.getenv("TS_DOCTEST_DIALECT"),
            ci_mode=ci,
            log_level=os.getenv("TS_DOCTEST_LOG_LEVEL", "INFO"),
            log_format="json" if ci else "text",
            log_file=Path(log_file) if log_file else None,
            extra_marker_policy=os.getenv("TS_DOCTEST_MARKER_POLICY", "ignore"),
        )

    def validate(self) -> None:
        """Validate configuration and raise ConfigurationError if invalid."""
        from .exceptions import ConfigurationError
        from ..generation.dialects import DIALECTS

        errors = []

        if self.dialect is None:
            errors.append(
                "No output dialect chosen. Choose one of "
                + ", ".join(sorted(DIALECTS))
            )
        elif self.dialect not in DIALECTS:
            errors.append(
                f"Unknown dialect: {self.dialect}. Must be one of {sorted(DIALECTS)}"
            )

        if self.log_format not in VALID_LOG_FORMATS:
            errors.append(
                f"Invalid log format: {self.log_format}. Must be one of {VALID_LOG_FORMATS}"
            )

        if self.extra_marker_policy not in VALID_MARKER_POLICIES:
            errors.append(
                f"Invalid marker policy: {self.extra_marker_policy}. "
                f"Must be one of {VALID_MARKER_POLICIES}"
            )

        if self.watch_debounce < 0:
            errors.append(f"Watch debounce must be >= 0, got {self.watch_debounce}")

        if not self.extensions:
            errors.append("At least one source file extension is required")

        if errors:
            message = "Configuration validation failed: " + "; ".join(errors)
            raise ConfigurationError(
                message,
                setting="config",
                violations=errors,
            )
