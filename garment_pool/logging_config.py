"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``. The root
logger gets a single stream handler the first time
configure_logging() runs; later calls only adjust the level.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_HANDLER_NAME = "garment_pool"


def configure_logging(level: str = "INFO") -> None:
    """Install the application log handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
