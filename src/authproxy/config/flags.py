"""Command-line flag set generated from the ``FIELDS`` binding table."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import Final

from authproxy.config.options import FIELDS

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS: Final[tuple[str, ...]] = ("text", "json")


def build_parser() -> argparse.ArgumentParser:
    """Build the parser; only flags given on the command line reach the namespace.

    Values stay raw strings so conversion problems are reported by the merger
    alongside every other configuration finding.
    """

    parser = argparse.ArgumentParser(
        prog="authproxy",
        description="Authenticating reverse proxy: resolve and validate startup configuration.",
        argument_default=argparse.SUPPRESS,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--config",
        default=None,
        metavar="PATH",
        help="path to a TOML config file",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        default=False,
        help="print version string and exit",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="log level for startup diagnostics",
    )
    parser.add_argument(
        "--log-format",
        default="text",
        choices=LOG_FORMATS,
        help="log line format",
    )

    fields_group = parser.add_argument_group("proxy settings")
    for spec in FIELDS:
        option = f"--{spec.flag}"
        if spec.kind == "bool":
            fields_group.add_argument(
                option,
                dest=spec.name,
                nargs="?",
                const="true",
                metavar="BOOL",
                help=spec.help,
            )
        elif spec.kind == "list":
            fields_group.add_argument(option, dest=spec.name, action="append", help=spec.help)
        else:
            fields_group.add_argument(option, dest=spec.name, help=spec.help)
    return parser


def parse_flags(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(None if argv is None else list(argv))


def flag_values_from_namespace(namespace: argparse.Namespace) -> dict[str, object]:
    """Return the explicitly supplied field flags keyed by field name."""

    return {spec.name: getattr(namespace, spec.name) for spec in FIELDS if hasattr(namespace, spec.name)}


__all__ = [
    "LOG_FORMATS",
    "LOG_LEVELS",
    "build_parser",
    "flag_values_from_namespace",
    "parse_flags",
]
