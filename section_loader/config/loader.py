from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_BASE_URL,
    DEFAULT_IDENTITY_COLUMNS,
    EntryConfig,
    FieldKind,
    FieldSpec,
    RetryPolicy,
    SiteSelectors,
    SiteUrls,
    Timeouts,
)

"""Config loader.

Responsibilities:
- Load the YAML config (``config/entry.yml``); JSON is valid YAML, so the
  ``config.json`` layout of older deployments loads unchanged
- Validate it against ``entry_schema.json``
- Apply defaults (timezone=UTC, site URLs, login/menu selectors, timeouts)
- Let ``STREETSAVER_USERNAME`` / ``STREETSAVER_PASSWORD`` override the
  credentials in the file
"""

SCHEMA_PATH = Path(__file__).parent / "entry_schema.json"
DEFAULT_CONFIG_PATH = Path("config/entry.yml")

ENV_USERNAME = "STREETSAVER_USERNAME"
ENV_PASSWORD = "STREETSAVER_PASSWORD"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or invalid, or the config
            fails validation (missing required keys, wrong types, extra keys)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _resolve_credentials(data: dict[str, Any]) -> tuple[str, str]:
    username = os.getenv(ENV_USERNAME) or data.get("username") or ""
    password = os.getenv(ENV_PASSWORD) or data.get("password") or ""
    if not username or not password:
        raise ConfigError(
            f"credentials missing: set username/password in the config or {ENV_USERNAME}/{ENV_PASSWORD}"
        )
    return username, password


def _build_urls(data: dict[str, Any]) -> SiteUrls:
    base = str(data.get("base_url", DEFAULT_BASE_URL)).rstrip("/")
    section_page = f"{base}/Forms/PavementSections/Section?linkid=linkSection"
    raw = data.get("urls", {})
    return SiteUrls(
        login=raw.get("login", section_page),
        section_form=raw.get("section_form", section_page),
    )


def _build_fields(raw_fields: list[dict[str, Any]]) -> tuple[FieldSpec, ...]:
    fields = []
    for raw in raw_fields:
        fields.append(
            FieldSpec(
                column=raw["column"],
                selector=raw["selector"],
                kind=FieldKind(raw.get("kind", FieldKind.TEXT.value)),
                truncate=bool(raw.get("truncate", False)),
                threshold=float(raw.get("threshold", 0.0)),
            )
        )
    return tuple(fields)


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> EntryConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)
    username, password = _resolve_credentials(data)

    tz = data.get("timezone", "UTC")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"unknown timezone: {tz}") from e

    return EntryConfig(
        username=username,
        password=password,
        spreadsheet_path=data["spreadsheet_path"],
        target_database_name=data["target_database_name"],
        selectors=SiteSelectors(**data["selectors"]),
        fields=_build_fields(data["fields"]),
        timezone=tz,
        headless=data.get("headless", False),
        urls=_build_urls(data),
        timeouts=Timeouts(**data.get("timeouts", {})),
        retry=RetryPolicy(**data.get("retry", {})),
        identity_columns=tuple(data.get("identity_columns", DEFAULT_IDENTITY_COLUMNS)),
        audit_log_path=data.get("audit_log_path", "logs/audit_log.xlsx"),
        unmatched_report_path=data.get("unmatched_report_path", "unmatched_rows.xlsx"),
    )
