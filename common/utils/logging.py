"""
Logging setup.

Modules log through logging.getLogger(__name__); this configures the
root logger once at startup.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stream handler on the root logger.

    Safe to call more than once; existing handlers are replaced.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())

    # Motor/pymongo heartbeat chatter
    logging.getLogger("pymongo").setLevel(logging.WARNING)


def mask_uri(uri: str) -> str:
    """Drop credentials from a connection string before logging it."""
    return uri.split("@")[-1] if "@" in uri else uri
