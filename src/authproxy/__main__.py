"""Module entrypoint for ``python -m authproxy``."""

from __future__ import annotations

from authproxy.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
