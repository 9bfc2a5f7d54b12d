"""
authproxy — source merger and config-file loading.

File: src/authproxy/config/loader.py

Purpose
- Resolve every ``Options`` field from command-line flags, environment variables, the TOML
  config file and built-in defaults.

What should be included in this file
- Precedence logic, per field: flag > env (bound variables only) > file > default.
- TOML loading via ``tomllib``.
- Deterministic coercion of raw values into each field's kind.
- Redacted deterministic dump of the effective configuration.

Functional requirements
- A value that cannot be converted becomes a merge message; the field keeps its default and
  the remaining fields still resolve.
- Repeatable fields accumulate flag occurrences and split delimited env/file strings.

Non-functional requirements
- Keep merging deterministic and free of process-global state.
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Final

from authproxy.config.durations import DurationError, format_duration, parse_duration
from authproxy.config.flags import flag_values_from_namespace, parse_flags
from authproxy.config.options import (
    FIELDS,
    FIELDS_BY_FILE_KEY,
    FieldSpec,
    Options,
    new_options,
)
from authproxy.constants import LIST_DELIMITER

logger = logging.getLogger(__name__)

_BOOLEAN_TRUE: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_BOOLEAN_FALSE: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})

SECRET_FIELDS: Final[frozenset[str]] = frozenset(
    {"client_secret", "cookie_secret", "basic_auth_password", "signature_key"}
)
REDACTED: Final[str] = "<redacted>"


class ConfigLoadError(ValueError):
    """Raised when the config file cannot be read or decoded."""


class _CoercionError(ValueError):
    pass


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Merged options plus the conversion problems met along the way."""

    options: Options
    messages: tuple[str, ...]


def resolve_options(
    flag_values: Mapping[str, object],
    environ: Mapping[str, str],
    file_values: Mapping[str, object],
) -> MergeResult:
    """Merge the three external sources over the defaults.

    ``flag_values`` is keyed by field name and holds only flags given explicitly;
    ``file_values`` is keyed by config-file key.
    """

    options = new_options()
    messages: list[str] = []

    for key in sorted(set(file_values) - set(FIELDS_BY_FILE_KEY)):
        logger.debug("ignoring unknown config file key", extra={"key": key})

    for spec in FIELDS:
        source, raw = _select_source(spec, flag_values, environ, file_values)
        if source is None:
            continue
        try:
            value = _coerce(spec, raw, from_flag=source == "flag")
        except _CoercionError as exc:
            messages.append(
                f"invalid value {_render_raw(raw)} for {spec.flag} (from {source}): {exc}"
            )
            continue
        setattr(options, spec.name, value)

    return MergeResult(options=options, messages=tuple(messages))


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Read a TOML config file into a flat mapping of file keys."""

    resolved = Path(path).expanduser()
    if not resolved.exists():
        raise ConfigLoadError(f"config file not found: {resolved}")
    try:
        with resolved.open("rb") as handle:
            parsed = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigLoadError(f"invalid TOML in {resolved}: {exc}") from exc
    except OSError as exc:
        raise ConfigLoadError(f"unable to read config file {resolved}: {exc}") from exc
    return parsed


def load_options(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> MergeResult:
    """Parse ``argv``, read ``--config`` if given, and merge with ``environ``."""

    namespace = parse_flags(argv)
    env_map = os.environ if environ is None else environ
    config_path = getattr(namespace, "config", None)
    file_values = load_config_file(config_path) if config_path else {}
    return resolve_options(flag_values_from_namespace(namespace), env_map, file_values)


def redact_options(options: Options) -> dict[str, Any]:
    """Return externally sourced fields with secrets masked, ready for JSON."""

    rendered: dict[str, Any] = {}
    for spec in FIELDS:
        value = getattr(options, spec.name)
        if spec.name in SECRET_FIELDS and value:
            rendered[spec.name] = REDACTED
        elif isinstance(value, timedelta):
            rendered[spec.name] = format_duration(value)
        elif isinstance(value, list):
            rendered[spec.name] = list(value)
        else:
            rendered[spec.name] = value
    return rendered


def effective_config(options: Options) -> dict[str, Any]:
    """Alias kept for log call sites that describe the running configuration."""

    return redact_options(options)


def dump_effective_config(options: Options) -> str:
    """Return deterministic JSON dump of redacted effective config."""

    return json.dumps(
        effective_config(options), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def _select_source(
    spec: FieldSpec,
    flag_values: Mapping[str, object],
    environ: Mapping[str, str],
    file_values: Mapping[str, object],
) -> tuple[str | None, object]:
    if spec.name in flag_values:
        return "flag", flag_values[spec.name]
    if spec.env is not None and spec.env in environ:
        return f"env {spec.env}", environ[spec.env]
    if spec.file_key in file_values:
        return "config file", file_values[spec.file_key]
    return None, None


def _coerce(spec: FieldSpec, raw: object, *, from_flag: bool) -> object:
    if spec.kind == "str":
        return _coerce_str(raw)
    if spec.kind == "bool":
        return _coerce_bool(raw)
    if spec.kind == "duration":
        return _coerce_duration(raw)
    return _coerce_list(raw, from_flag=from_flag)


def _coerce_str(raw: object) -> str:
    if isinstance(raw, str):
        return raw
    raise _CoercionError("must be a string")


def _coerce_bool(raw: object) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        lowered = raw.strip().lower()
        if lowered in _BOOLEAN_TRUE:
            return True
        if lowered in _BOOLEAN_FALSE:
            return False
    raise _CoercionError("must be a boolean (true/false/1/0/yes/no/on/off)")


def _coerce_duration(raw: object) -> timedelta:
    if isinstance(raw, timedelta):
        return raw
    if isinstance(raw, bool):
        raise _CoercionError("must be a duration")
    if isinstance(raw, int | float):
        try:
            return timedelta(seconds=raw)
        except (OverflowError, ValueError) as exc:
            raise _CoercionError(f"duration {raw!r} seconds out of range") from exc
    if isinstance(raw, str):
        try:
            return parse_duration(raw)
        except DurationError as exc:
            raise _CoercionError(str(exc)) from exc
    raise _CoercionError("must be a duration")


def _coerce_list(raw: object, *, from_flag: bool) -> list[str]:
    if isinstance(raw, str):
        return _split_delimited(raw)
    if isinstance(raw, list | tuple):
        items: list[str] = []
        for item in raw:
            if not isinstance(item, str):
                raise _CoercionError("list items must be strings")
            if from_flag:
                items.append(item)
            elif item.strip():
                items.append(item.strip())
        return items
    raise _CoercionError("must be a string or a list of strings")


def _split_delimited(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(LIST_DELIMITER) if part.strip()]


def _render_raw(raw: object) -> str:
    if isinstance(raw, str):
        return json.dumps(raw, ensure_ascii=False)
    return repr(raw)


__all__ = [
    "REDACTED",
    "SECRET_FIELDS",
    "ConfigLoadError",
    "MergeResult",
    "dump_effective_config",
    "effective_config",
    "load_config_file",
    "load_options",
    "redact_options",
    "resolve_options",
]
