"""
Run configuration, assembled from defaults, a YAML file, the environment and CLI flags.
"""

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .age import days_to_seconds
from .errors import ConfigError
from .providers.ec2 import EC2_REGIONS
from .retention import SAFE_WORDS, RetentionPolicy

PROVIDERS = ("ec2", "cloud-api")


@dataclass(frozen=True)
class SweepConfig:
    """Settings for one sweep run."""
    debug: bool = True
    volumes_age_days: int = 7
    snapshots_age_days: int = 30
    dry_run: bool = True
    check_tags: bool = False
    safe_words: Tuple[str, ...] = SAFE_WORDS
    provider: str = "ec2"
    regions: Tuple[str, ...] = field(default_factory=lambda: tuple(name for _, name in EC2_REGIONS))
    api_url: Optional[str] = None
    api_token: Optional[str] = None
    legacy_ec2: bool = False
    timeout: float = 30.0

    @property
    def volumes_age_seconds(self) -> int:
        return days_to_seconds(self.volumes_age_days)

    @property
    def snapshots_age_seconds(self) -> int:
        return days_to_seconds(self.snapshots_age_days)

    @property
    def retention_policy(self) -> RetentionPolicy:
        return RetentionPolicy(safe_words=tuple(self.safe_words), check_tags=self.check_tags)

    def validate(self) -> "SweepConfig":
        """
        Check value ranges and cross-field requirements.

        Raises:
            ConfigError: If a value is out of range or missing
        """
        if self.volumes_age_days < 0 or self.snapshots_age_days < 0:
            raise ConfigError("Ages must not be negative")
        if self.timeout <= 0:
            raise ConfigError("Timeout must be positive")
        if self.provider not in PROVIDERS:
            raise ConfigError(f"Unknown provider: {self.provider}. Expected one of {', '.join(PROVIDERS)}")
        if self.provider == "cloud-api" and not self.api_url:
            raise ConfigError("The cloud-api provider needs an API URL (--api-url or BLOCKSWEEP_API_URL)")
        if not self.safe_words:
            raise ConfigError("At least one safe word is required")
        return self


_BOOLS = ("debug", "dry_run", "check_tags", "legacy_ec2")
_INTS = ("volumes_age_days", "snapshots_age_days")
_OPTIONAL_STRINGS = ("api_url", "api_token")
_WORD_LISTS = ("safe_words", "regions")


def _word_list(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise ConfigError(f"{key} must be a list of strings or a comma separated string, got {value!r}")


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check the type of every setting. YAML hands back whatever the file
    says, so "ten" or "false" (quoted) must not reach the sweep.

    Raises:
        ConfigError: On unknown keys or values of the wrong type
    """
    known = {f.name for f in fields(SweepConfig)}
    unknown = set(values) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    coerced = dict(values)
    for key, value in values.items():
        if key in _BOOLS:
            if not isinstance(value, bool):
                raise ConfigError(f"{key} must be true or false, got {value!r}")
        elif key in _INTS:
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{key} must be a whole number of days, got {value!r}")
        elif key == "timeout":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"timeout must be a number of seconds, got {value!r}")
            coerced[key] = float(value)
        elif key == "provider":
            if not isinstance(value, str):
                raise ConfigError(f"provider must be a string, got {value!r}")
        elif key in _OPTIONAL_STRINGS:
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{key} must be a string, got {value!r}")
        elif key in _WORD_LISTS:
            coerced[key] = _word_list(key, value)
    return coerced


def load_file(path: Path) -> Dict[str, Any]:
    """Read settings from a YAML mapping. Dashes in keys are accepted."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def load_env(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    if environ.get("BLOCKSWEEP_API_URL"):
        values["api_url"] = environ["BLOCKSWEEP_API_URL"]
    if environ.get("BLOCKSWEEP_API_TOKEN"):
        values["api_token"] = environ["BLOCKSWEEP_API_TOKEN"]
    if environ.get("BLOCKSWEEP_REGIONS"):
        values["regions"] = environ["BLOCKSWEEP_REGIONS"]
    return values


def build_config(
    cli_values: Optional[Dict[str, Any]] = None,
    config_file: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> SweepConfig:
    """
    Merge configuration sources, later ones winning.

    Args:
        cli_values: Flag values; None entries mean "not given"
        config_file: Optional YAML file
        environ: Environment mapping, defaults to os.environ

    Returns:
        Validated SweepConfig
    """
    config = SweepConfig()
    if config_file:
        config = replace(config, **_coerce(load_file(config_file)))
    config = replace(config, **_coerce(load_env(environ)))
    given = {key: value for key, value in (cli_values or {}).items() if value is not None}
    config = replace(config, **_coerce(given))
    return config.validate()
