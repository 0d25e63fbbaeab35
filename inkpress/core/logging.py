"""Root logging setup shared by the app and the emulator."""

from __future__ import annotations

import logging

from inkpress.core.config import get_settings

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_configured = False


def configure_logging(level: str | None = None) -> None:
    global _configured
    if _configured:
        return
    lvl = (level or get_settings().log_level or "INFO").upper()
    logging.basicConfig(level=getattr(logging, lvl, logging.INFO), format=_FORMAT)
    _configured = True
