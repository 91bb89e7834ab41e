# warranty_hub/utils/logging.py
import logging
import sys

from warranty_hub.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s %(name)s — %(message)s"
_configured = False


def _configure_root():
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))

    root = logging.getLogger("warranty_hub")
    root.setLevel(LOG_LEVEL.upper())
    # avoid duplicate handlers on reload
    if not root.handlers:
        root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _configure_root()
    return logging.getLogger(name)
