"""
Environment Variable Configuration with Validation

Harness settings are read from DASHBOARD_* environment variables:
- Type validation (str, int, bool, path)
- Default values
- Validation rules (min/max, choices, patterns)

Usage:
    from dashboard_e2e.config import Config, HarnessConfig

    base_url = Config.DASHBOARD_BASE_URL
    settings = HarnessConfig.from_env()
"""

import logging
import os
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class EnvVar:
    """Environment variable definition with validation."""

    name: str
    default: Any = None
    var_type: str = "str"  # str, int, bool, path
    description: str = ""
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    choices: Optional[List[Any]] = None
    pattern: Optional[str] = None
    validator: Optional[Callable[[Any], bool]] = None

    def parse(self, value: str) -> Any:
        """Parse string value to target type."""
        if value is None:
            return None

        if self.var_type == "int":
            try:
                return int(value)
            except ValueError:
                raise ConfigError(f"{self.name}: '{value}' is not a valid integer")
        elif self.var_type == "bool":
            return value.strip().lower() in ("true", "1", "yes", "on")
        elif self.var_type == "path":
            return Path(value).expanduser()
        return value

    def validate(self, value: Any) -> tuple[bool, str]:
        """Validate parsed value. Returns (is_valid, error_message)."""
        if value is None:
            return True, ""

        if self.var_type == "int":
            if self.min_value is not None and value < self.min_value:
                return False, f"{self.name}: value {value} is below minimum {self.min_value}"
            if self.max_value is not None and value > self.max_value:
                return False, f"{self.name}: value {value} exceeds maximum {self.max_value}"

        if self.choices is not None and value not in self.choices:
            return (
                False,
                f"{self.name}: '{value}' is not a valid choice. Must be one of: {self.choices}",
            )

        if self.pattern and self.var_type == "str":
            if not re.match(self.pattern, value):
                return False, f"{self.name}: '{value}' does not match required pattern"

        if self.validator and not self.validator(value):
            return False, f"{self.name}: custom validation failed for value '{value}'"

        return True, ""

    def get_value(self) -> Any:
        """Get validated value from environment."""
        raw_value = os.environ.get(self.name)
        if raw_value is None or raw_value == "":
            return self.default

        parsed = self.parse(raw_value)
        is_valid, error = self.validate(parsed)
        if not is_valid:
            raise ConfigError(error)

        return parsed


ENV_VARS: Dict[str, EnvVar] = {
    # Target system
    "DASHBOARD_BASE_URL": EnvVar(
        name="DASHBOARD_BASE_URL",
        default="http://localhost:8080",
        pattern=r"^https?://[^/\s]+$",
        validator=lambda v: not v.endswith("/"),
        description="Root address of the proxy serving the dashboard",
    ),
    "DASHBOARD_PATH": EnvVar(
        name="DASHBOARD_PATH",
        default="/dashboard/",
        pattern=r"^/.*/$",
        description="Dashboard root path",
    ),
    # Timeouts (milliseconds)
    "DASHBOARD_COMMAND_TIMEOUT": EnvVar(
        name="DASHBOARD_COMMAND_TIMEOUT",
        default=10000,
        var_type="int",
        min_value=100,
        max_value=600000,
        description="Max wait for any single UI operation",
    ),
    "DASHBOARD_REQUEST_TIMEOUT": EnvVar(
        name="DASHBOARD_REQUEST_TIMEOUT",
        default=10000,
        var_type="int",
        min_value=100,
        max_value=600000,
        description="Max wait for outgoing navigation",
    ),
    "DASHBOARD_RESPONSE_TIMEOUT": EnvVar(
        name="DASHBOARD_RESPONSE_TIMEOUT",
        default=10000,
        var_type="int",
        min_value=100,
        max_value=600000,
        description="Max wait for navigation response",
    ),
    "DASHBOARD_SETTLE_DELAY": EnvVar(
        name="DASHBOARD_SETTLE_DELAY",
        default=2000,
        var_type="int",
        min_value=0,
        max_value=60000,
        description="Fixed wait after navigation for client-side rendering",
    ),
    "DASHBOARD_CLICK_SETTLE_DELAY": EnvVar(
        name="DASHBOARD_CLICK_SETTLE_DELAY",
        default=500,
        var_type="int",
        min_value=0,
        max_value=60000,
        description="Fixed wait after a click",
    ),
    # Browser and artifacts
    "DASHBOARD_VIDEO": EnvVar(
        name="DASHBOARD_VIDEO", default=False, var_type="bool", description="Record run video"
    ),
    "DASHBOARD_SCREENSHOT_ON_FAILURE": EnvVar(
        name="DASHBOARD_SCREENSHOT_ON_FAILURE",
        default=True,
        var_type="bool",
        description="Capture a diagnostic screenshot on failure",
    ),
    "DASHBOARD_HEADLESS": EnvVar(
        name="DASHBOARD_HEADLESS", default=True, var_type="bool", description="Run browser headless"
    ),
    "DASHBOARD_ARTIFACTS_DIR": EnvVar(
        name="DASHBOARD_ARTIFACTS_DIR",
        default=Path("artifacts"),
        var_type="path",
        description="Directory for screenshots and videos",
    ),
    # Catalog and logging
    "DASHBOARD_CATALOG": EnvVar(
        name="DASHBOARD_CATALOG",
        default=None,
        var_type="path",
        description="Catalog YAML merged over the packaged catalog",
    ),
    "DASHBOARD_LOG_LEVEL": EnvVar(
        name="DASHBOARD_LOG_LEVEL",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        description="Harness log level",
    ),
}


class ConfigMeta(type):
    """Metaclass to provide attribute access to config values."""

    def __getattr__(cls, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        if name in ENV_VARS:
            return ENV_VARS[name].get_value()

        raise AttributeError(f"Unknown config variable: {name}")


class Config(metaclass=ConfigMeta):
    """
    Configuration class with environment variable access.

    Values are re-read on every access so that a CLI run can export
    options into the environment before the suite starts.
    """


def validate_config() -> List[str]:
    """Validate every variable, returning the list of errors."""
    errors = []
    for name, var in ENV_VARS.items():
        try:
            var.get_value()
        except ConfigError as e:
            errors.append(str(e))
    for error in errors:
        logger.error(f"Config error: {error}")
    return errors


@dataclass(frozen=True)
class HarnessConfig:
    """Immutable snapshot of the harness settings for one run."""

    base_url: str = "http://localhost:8080"
    dashboard_path: str = "/dashboard/"
    default_command_timeout: int = 10000
    request_timeout: int = 10000
    response_timeout: int = 10000
    settle_delay: int = 2000
    click_settle_delay: int = 500
    video: bool = False
    screenshot_on_failure: bool = True
    headless: bool = True
    artifacts_dir: Path = Path("artifacts")
    catalog_path: Optional[Path] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "HarnessConfig":
        """Build a snapshot from the DASHBOARD_* environment."""
        return cls(
            base_url=Config.DASHBOARD_BASE_URL,
            dashboard_path=Config.DASHBOARD_PATH,
            default_command_timeout=Config.DASHBOARD_COMMAND_TIMEOUT,
            request_timeout=Config.DASHBOARD_REQUEST_TIMEOUT,
            response_timeout=Config.DASHBOARD_RESPONSE_TIMEOUT,
            settle_delay=Config.DASHBOARD_SETTLE_DELAY,
            click_settle_delay=Config.DASHBOARD_CLICK_SETTLE_DELAY,
            video=Config.DASHBOARD_VIDEO,
            screenshot_on_failure=Config.DASHBOARD_SCREENSHOT_ON_FAILURE,
            headless=Config.DASHBOARD_HEADLESS,
            artifacts_dir=Config.DASHBOARD_ARTIFACTS_DIR,
            catalog_path=Config.DASHBOARD_CATALOG,
            log_level=Config.DASHBOARD_LOG_LEVEL,
        )

    @property
    def navigation_timeout(self) -> int:
        """Budget for a single navigation (request + response)."""
        return max(self.request_timeout, self.response_timeout)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["artifacts_dir"] = str(self.artifacts_dir)
        data["catalog_path"] = str(self.catalog_path) if self.catalog_path else None
        return data
