"""Command-line interface for authproxy startup."""

from __future__ import annotations

import logging
import os
import platform
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from authproxy.config import (
    ConfigLoadError,
    ConfigValidationError,
    build_parser,
    flag_values_from_namespace,
    load_config_file,
    redact_options,
    resolve_options,
    validate_options,
)
from authproxy.constants import VERSION
from authproxy.main import ExitCode
from authproxy.observability import LoggingConfig, setup_logging, shutdown_logging
from authproxy.providers import HttpClientFactory
from authproxy.startup import (
    ResourceOpenError,
    ServiceSettings,
    build_service_settings,
    release_provider_resources,
)

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[ServiceSettings], int]


@dataclass(frozen=True, slots=True)
class CLIError(RuntimeError):
    """Typed CLI failure with an explicit process exit code."""

    message: str
    exit_code: int = ExitCode.VALIDATION_FAILED

    def __str__(self) -> str:
        return self.message


def version_string() -> str:
    return f"authproxy v{VERSION} (built with Python {platform.python_version()})"


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    service_factory: ServiceFactory | None = None,
    http_client_factory: HttpClientFactory | None = None,
) -> int:
    """Resolve, validate and hand off configuration; return the process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    if namespace.version:
        print(version_string())
        return int(ExitCode.SUCCESS)

    setup_logging(LoggingConfig(level=namespace.log_level, log_format=namespace.log_format))
    try:
        settings = _resolve_settings(
            namespace.config,
            flag_values_from_namespace(namespace),
            os.environ if environ is None else environ,
            http_client_factory,
        )
        factory = service_factory or _log_and_exit_service
        return int(factory(settings))
    except CLIError as exc:
        print(str(exc), file=sys.stderr)
        return int(exc.exit_code)
    finally:
        shutdown_logging()


def _resolve_settings(
    config_path: str | None,
    flag_values: Mapping[str, object],
    environ: Mapping[str, str],
    http_client_factory: HttpClientFactory | None,
) -> ServiceSettings:
    try:
        file_values = load_config_file(config_path) if config_path else {}
    except ConfigLoadError as exc:
        raise CLIError(
            f"failed to load config file {config_path} - {exc}",
            exit_code=ExitCode.RESOURCE_ERROR,
        ) from exc

    merged = resolve_options(flag_values, environ, file_values)
    try:
        options = validate_options(
            merged.options,
            prior_messages=merged.messages,
            http_client_factory=http_client_factory,
        )
    except ConfigValidationError as exc:
        release_provider_resources(merged.options)
        raise CLIError(str(exc), exit_code=ExitCode.VALIDATION_FAILED) from exc

    try:
        return build_service_settings(options)
    except ResourceOpenError as exc:
        release_provider_resources(options)
        raise CLIError(f"FATAL: {exc}", exit_code=ExitCode.RESOURCE_ERROR) from exc


def _log_and_exit_service(settings: ServiceSettings) -> int:
    options = settings.options
    descriptor = options.provider_descriptor
    logger.info(
        "effective configuration",
        extra={
            "config": redact_options(options),
            "provider": descriptor.describe() if descriptor is not None else None,
            "sign_in_message": settings.sign_in_message,
        },
    )
    settings.close()
    return int(ExitCode.SUCCESS)


__all__ = ["CLIError", "ServiceFactory", "run_cli", "version_string"]
