"""Configuration parsing from ``.gocovsum.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from gocovsum.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gocovsum.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_MAX_PERCENT = 100.0
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        else:
            result[key] = value
    return result


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


@dataclass
class GoConfig:
    """Go toolchain configuration."""

    binary: str = ""
    """``go`` executable; empty means ``$GOROOT/bin/go`` or ``go`` on PATH."""

    workdir: str = "."
    """Directory ``go list`` runs in (must be inside the module)."""

    timeout: float = 120.0
    """Timeout in seconds for ``go list``."""


@dataclass
class ReportConfig:
    """Report sorting and coloring."""

    reverse: bool = False
    """Sort from best to worst coverage."""

    color: bool = True
    """Color rows by coverage bucket."""

    red_threshold: float = 30.0
    """Percentages at or below this are red."""

    yellow_threshold: float = 70.0
    """Percentages above red and at or below this are yellow; above is green."""


@dataclass
class ExtractConfig:
    """Function extraction options."""

    include_methods: bool = False
    """Count method declarations in addition to plain functions."""


@dataclass
class LoggingConfig:
    """Logging options."""

    level: str = "WARNING"
    """Root log level name."""


@dataclass
class GoCovSumConfig:
    """Top-level gocovsum configuration."""

    go: GoConfig = field(default_factory=GoConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML (after environment expansion)."""


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        return {}
    return section


def _parse_go_config(raw: dict[str, Any]) -> GoConfig:
    go_raw = _section(raw, "go")
    return GoConfig(
        binary=str(go_raw.get("binary", "")),
        workdir=str(go_raw.get("workdir", ".")),
        timeout=float(go_raw.get("timeout", 120.0)),
    )


def _parse_report_config(raw: dict[str, Any]) -> ReportConfig:
    report_raw = _section(raw, "report")
    return ReportConfig(
        reverse=_as_bool(report_raw.get("reverse", False)),
        color=_as_bool(report_raw.get("color", True)),
        red_threshold=float(report_raw.get("red_threshold", 30.0)),
        yellow_threshold=float(report_raw.get("yellow_threshold", 70.0)),
    )


def load_config(root: str | Path = ".", config_file: str | Path | None = None) -> GoCovSumConfig:
    """Load ``.gocovsum.yml`` from ``root`` (or ``config_file`` when given).

    Missing files yield the defaults.

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping, or
            holds values of the wrong type.
    """
    path = Path(config_file) if config_file else Path(root).resolve() / CONFIG_FILE_NAME

    raw: dict[str, Any] = {}
    if path.is_file():
        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot load {path}: {exc}") from exc
        if parsed is not None and not isinstance(parsed, dict):
            raise ConfigError(f"{path}: top level must be a mapping")
        raw = _resolve_dict(parsed or {})
        logger.debug("Loaded configuration from %s", path)

    try:
        return GoCovSumConfig(
            go=_parse_go_config(raw),
            report=_parse_report_config(raw),
            extract=ExtractConfig(
                include_methods=_as_bool(_section(raw, "extract").get("include_methods", False)),
            ),
            logging=LoggingConfig(
                level=str(_section(raw, "logging").get("level", "WARNING")).upper(),
            ),
            raw=raw,
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{path}: {exc}") from exc


def validate_config(config: GoCovSumConfig) -> list[str]:
    """Return a list of human-readable configuration problems."""
    errors: list[str] = []

    report = config.report
    for name, value in (
        ("report.red_threshold", report.red_threshold),
        ("report.yellow_threshold", report.yellow_threshold),
    ):
        if not 0.0 <= value <= _MAX_PERCENT:
            errors.append(f"{name} must be between 0 and 100, got {value}")
    if report.red_threshold > report.yellow_threshold:
        errors.append(
            "report.red_threshold must not exceed report.yellow_threshold "
            f"({report.red_threshold} > {report.yellow_threshold})"
        )

    if config.go.timeout <= 0:
        errors.append(f"go.timeout must be positive, got {config.go.timeout}")

    if config.logging.level not in _LOG_LEVELS:
        errors.append(
            f"logging.level must be one of {', '.join(sorted(_LOG_LEVELS))}, "
            f"got {config.logging.level!r}"
        )

    return errors
