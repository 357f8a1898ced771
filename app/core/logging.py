"""Logging setup for the ``app`` logger tree."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Attach a stdout handler to the ``app`` logger. Safe to call twice."""
    root = logging.getLogger("app")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if any(getattr(h, "_folio", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._folio = True  # type: ignore[attr-defined]
    root.addHandler(handler)
