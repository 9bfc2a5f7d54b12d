"""
authproxy — configuration resolution and validation for an authenticating reverse proxy.

Purpose
- Resolve startup settings from flags, environment, a TOML file and defaults, then validate
  them into the typed settings the proxy service is built from.

Functional requirements
- Must not have side effects at import time (no config loading, no logging init).
"""

from authproxy.constants import VERSION

__version__ = VERSION

__all__ = ["VERSION", "__version__"]
