from __future__ import annotations

import logging
import os
import sys

_PACKAGE_LOGGER = "oui_theme_builder"
_configured = False


def _configure() -> None:
    global _configured
    if _configured:
        return
    root = logging.getLogger(_PACKAGE_LOGGER)
    level_name = os.environ.get("OUI_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace with the console handler attached."""

    _configure()
    if not name.startswith(_PACKAGE_LOGGER):
        name = f"{_PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
