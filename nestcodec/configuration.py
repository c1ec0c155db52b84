"""Layered configuration loader for nestcodec."""

from __future__ import annotations

import codecs
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ConfigurationError

APP_NAME = "nestcodec"
CONFIG_FILENAME = f"{APP_NAME}.yaml"


class NestCodecConfig(BaseModel):
    """Schema describing all supported configuration options."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    NESTCODEC_DEBUG: bool = Field(
        default=False,
        description="Print conversion diagnostics to stderr.",
    )
    NESTCODEC_ENCODING: str = Field(
        default="utf-8",
        description="Text encoding used to read and write files.",
    )
    NESTCODEC_JSON_INDENT: int = Field(
        default=2,
        ge=0,
        le=8,
        description="Indentation of interchange JSON output (0 for a single line).",
    )

    @model_validator(mode="before")
    @classmethod
    def _normalise_encoding(cls, data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("NESTCODEC_ENCODING")
            if isinstance(raw_value, str):
                try:
                    data["NESTCODEC_ENCODING"] = codecs.lookup(raw_value.strip()).name
                except LookupError as exc:
                    raise ValueError(f"Unknown text encoding '{raw_value}'.") from exc
        return data


def discover_file_paths(app_dir: Path) -> list[Path]:
    """Return existing YAML configuration files, lowest precedence first."""

    home = Path.home()
    candidates = [
        home / f".{CONFIG_FILENAME}",
        home / ".config" / APP_NAME / "config.yaml",
        app_dir / CONFIG_FILENAME,
    ]
    return [path for path in candidates if path.is_file()]


@lru_cache(maxsize=4)
def _load_config(app_dir: Path | None = None) -> NestCodecConfig:
    """Load configuration layers once and cache the immutable model."""

    base_dir = app_dir or Path.cwd()
    combined = _load_discovered_yaml(app_dir=base_dir)
    _merge_env_sources(combined, app_dir=base_dir, schema=NestCodecConfig)
    try:
        return NestCodecConfig.model_validate(combined)
    except ValidationError as exc:
        issues = _format_validation_errors(exc.errors())
        raise ConfigurationError(issues) from exc


def _load_discovered_yaml(*, app_dir: Path) -> dict[str, Any]:
    """Merge every discovered YAML file into one mapping."""

    result: dict[str, Any] = {}
    for path in discover_file_paths(app_dir):
        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigurationError(
                f"Configuration file {path} could not be read: {exc}"
            ) from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Configuration file {path} is not valid YAML: {exc}"
            ) from exc
        if parsed is None:
            continue
        if not isinstance(parsed, Mapping):
            raise ConfigurationError(
                f"Invalid configuration file {path}: expected a mapping at the root."
            )
        result.update(parsed)
    return result


def _merge_env_sources(
    target: dict[str, Any],
    *,
    app_dir: Path,
    schema: type[BaseModel],
) -> None:
    """Merge .env and process environment variables into the target mapping."""

    allowed = set(schema.model_fields.keys())

    def merge_values(values: Mapping[str, str | None]) -> None:
        for key, value in sorted(values.items()):
            if value is None:
                continue
            if key not in allowed:
                continue
            target[key] = value

    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        merge_values(dotenv_values(dotenv_path))

    merge_values({k: v for k, v in os.environ.items() if isinstance(v, str)})


def _format_validation_errors(entries: Sequence[Mapping[str, Any]]) -> str:
    details: list[str] = []
    for entry in entries:
        path = entry.get("loc") or ()
        location = ".".join(str(part) for part in path if part not in {None, ""})
        message = str(entry.get("msg") or "Invalid value")
        prefix = f"{location}: " if location else ""
        details.append(f"- {prefix}{message}")
    return "Configuration validation errors detected:\n" + "\n".join(details)


def get_settings(app_dir: Path | None = None) -> NestCodecConfig:
    """Return the validated configuration for typed access."""

    return _load_config(app_dir=app_dir)
