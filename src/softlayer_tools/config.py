"""
Configuration dataclasses and loaders for the SoftLayer tools.

Settings come from an optional JSON file and from environment variables,
which may be placed in a ``.env`` file next to the working directory.
Environment values override file values; command-line flags override both
(applied by the CLI modules).
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .enums import HostType, LogLevel
from .exceptions import ConfigurationError


# Largest share of the remote inventory a single purge may delete
PURGE_MAX_FRACTION = 0.2


PUBLIC_API_URL = "https://api.softlayer.com/rest/v3"
PRIVATE_API_URL = "https://api.service.softlayer.com/rest/v3"

DEFAULT_CONFIG_PATH = Path.home() / ".softlayer_tools" / "config.json"


@dataclass
class ApiConfig:
    """Credentials and transport settings for the provider API."""

    username: str = ""
    api_key: str = ""
    private_network: bool = False
    timeout_seconds: float = 15.0

    @property
    def base_url(self) -> str:
        return PRIVATE_API_URL if self.private_network else PUBLIC_API_URL

    def validate(self) -> list[str]:
        problems = []
        if not self.username:
            problems.append("API username is not set")
        if not self.api_key:
            problems.append("API key is not set")
        if self.timeout_seconds <= 0:
            problems.append(f"timeout must be positive, got {self.timeout_seconds}")
        return problems


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'

    def validate(self) -> list[str]:
        problems = []
        if self.level not in {level.value for level in LogLevel}:
            problems.append(f"unknown log level {self.level!r}")
        if self.output_format not in ("json", "text", "both"):
            problems.append(f"unknown log format {self.output_format!r}")
        return problems


@dataclass
class SyncConfig:
    """Settings for the secondary DNS reconciler."""

    api: ApiConfig = field(default_factory=ApiConfig)
    zone_directory: Path = Path("/var/named")
    master_ip: str = ""
    transfer_frequency: int = 10  # minutes
    min_local_domains: int = 10
    purge_max_fraction: float = PURGE_MAX_FRACTION
    dry_run: bool = False
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self, mutating: bool = True) -> list[str]:
        """
        Collect configuration problems.

        Args:
            mutating: Whether create/update actions will run, which need a
                master IP and a transfer frequency

        Returns:
            List of human readable problems, empty when the config is usable
        """
        problems = self.api.validate() + self.logging.validate()
        if mutating and not self.master_ip:
            problems.append("master IP address is not set")
        if self.transfer_frequency <= 0:
            problems.append(
                f"transfer frequency must be positive, got {self.transfer_frequency}"
            )
        if self.min_local_domains < 0:
            problems.append(
                f"minimum local domain count must not be negative, got {self.min_local_domains}"
            )
        if not 0 < self.purge_max_fraction <= PURGE_MAX_FRACTION:
            problems.append(
                f"purge fraction must be in (0, {PURGE_MAX_FRACTION}], got {self.purge_max_fraction}"
            )
        return problems


@dataclass
class MonitorConfig:
    """Settings for the transfer allocation monitor."""

    api: ApiConfig = field(default_factory=ApiConfig)
    hostname: Optional[str] = None
    host_type: str = HostType.HARDWARE.value
    warning_percent: Optional[float] = None
    critical_percent: Optional[float] = None
    renewal_day: int = 0  # 0 = unset
    projected_overage_critical: bool = False
    current_overage_critical: bool = False
    verbosity: int = 0
    summary_type: str = "publicnet"

    def validate(self) -> list[str]:
        problems = self.api.validate()
        if self.host_type not in {t.value for t in HostType}:
            problems.append(
                f"host type must be one of {', '.join(t.value for t in HostType)}, "
                f"got {self.host_type!r}"
            )
        for label, value in (
            ("warning", self.warning_percent),
            ("critical", self.critical_percent),
        ):
            if value is not None and not 0 <= value <= 100:
                problems.append(f"{label} threshold must be within 0..100, got {value}")
        if (
            self.warning_percent is not None
            and self.critical_percent is not None
            and self.warning_percent > self.critical_percent
        ):
            problems.append("warning threshold must not exceed critical threshold")
        if not 0 <= self.renewal_day <= 31:
            problems.append(f"renewal day must be within 0..31, got {self.renewal_day}")
        if not 0 <= self.verbosity <= 3:
            problems.append(f"verbosity must be within 0..3, got {self.verbosity}")
        return problems


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _number(section: dict, key: str, default, convert):
    value = section.get(key, default)
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            code="invalid_config",
            message=f"Config value {key} must be a number, got {value!r}",
            details={"key": key},
        ) from e


def _read_json(config_path: Optional[Path]) -> dict:
    if config_path is None or not config_path.exists():
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            code="unreadable_config",
            message=f"Could not load config from {config_path}: {e}",
            details={"path": str(config_path)},
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            code="invalid_config",
            message=f"Config file {config_path} must contain a JSON object",
            details={"path": str(config_path)},
        )
    return data


def load_api_config(data: Optional[dict] = None) -> ApiConfig:
    """
    Build API settings from a parsed config section and the environment.

    Args:
        data: The ``api`` section of a config file, if any

    Returns:
        ApiConfig with environment overrides applied
    """
    data = data or {}
    load_dotenv()
    file_config = ApiConfig(
        username=data.get("username", ""),
        api_key=data.get("api_key", ""),
        private_network=bool(data.get("private_network", False)),
        timeout_seconds=_number(data, "timeout_seconds", 15.0, float),
    )
    return ApiConfig(
        username=os.getenv("SL_USERNAME", file_config.username).strip(),
        api_key=os.getenv("SL_API_KEY", file_config.api_key).strip(),
        private_network=file_config.private_network,
        timeout_seconds=_float_env("SL_TIMEOUT", file_config.timeout_seconds),
    )


def load_sync_config(config_path: Optional[Path] = None) -> SyncConfig:
    """
    Load reconciler configuration.

    Args:
        config_path: Optional JSON config file; a missing file is not an error

    Returns:
        SyncConfig with file values and environment overrides

    Raises:
        ConfigurationError: If the file exists but cannot be parsed, or a
            numeric setting is not a number
    """
    data = _read_json(config_path)
    sync_data = data.get("sync", {})
    logging_data = data.get("logging", {})

    api = load_api_config(data.get("api"))
    defaults = SyncConfig()

    zone_directory = os.getenv(
        "SL_ZONE_DIR", sync_data.get("zone_directory", str(defaults.zone_directory))
    )

    return SyncConfig(
        api=api,
        zone_directory=Path(zone_directory),
        master_ip=os.getenv("SL_MASTER_IP", sync_data.get("master_ip", "")).strip(),
        transfer_frequency=_int_env(
            "SL_TRANSFER_FREQUENCY",
            _number(sync_data, "transfer_frequency", defaults.transfer_frequency, int),
        ),
        min_local_domains=_int_env(
            "SL_MIN_LOCAL_DOMAINS",
            _number(sync_data, "min_local_domains", defaults.min_local_domains, int),
        ),
        purge_max_fraction=_number(
            sync_data, "purge_max_fraction", defaults.purge_max_fraction, float
        ),
        logging=LoggingConfig(
            level=logging_data.get("level", "info"),
            output_format=logging_data.get("output_format", "text"),
        ),
    )
