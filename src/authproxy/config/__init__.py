"""
authproxy config package public API.

File: src/authproxy/config/__init__.py

Purpose
- Export option resolution/validation entrypoints and public error types.

What should be included in this file
- The ``Options`` record, its binding table and defaults.
- Loader APIs for merged options and redacted dumps.
- The validator and its aggregated error.
"""

from authproxy.config.cookies import cookie_name_is_valid, samesite_is_valid
from authproxy.config.durations import DurationError, format_duration, parse_duration
from authproxy.config.flags import build_parser, flag_values_from_namespace, parse_flags
from authproxy.config.loader import (
    ConfigLoadError,
    MergeResult,
    dump_effective_config,
    effective_config,
    load_config_file,
    load_options,
    redact_options,
    resolve_options,
)
from authproxy.config.options import (
    FIELDS,
    FIELDS_BY_FILE_KEY,
    FIELDS_BY_NAME,
    FieldSpec,
    Options,
    new_options,
)
from authproxy.config.report import ConfigValidationError, ValidationReport
from authproxy.config.secrets import add_padding, secret_bytes
from authproxy.config.signature import SignatureData, SignatureKeyError, parse_signature_key
from authproxy.config.validation import validate_options

__all__ = [
    "FIELDS",
    "FIELDS_BY_FILE_KEY",
    "FIELDS_BY_NAME",
    "ConfigLoadError",
    "ConfigValidationError",
    "DurationError",
    "FieldSpec",
    "MergeResult",
    "Options",
    "SignatureData",
    "SignatureKeyError",
    "ValidationReport",
    "add_padding",
    "build_parser",
    "cookie_name_is_valid",
    "dump_effective_config",
    "effective_config",
    "flag_values_from_namespace",
    "format_duration",
    "load_config_file",
    "load_options",
    "new_options",
    "parse_duration",
    "parse_flags",
    "redact_options",
    "resolve_options",
    "samesite_is_valid",
    "secret_bytes",
    "validate_options",
]
