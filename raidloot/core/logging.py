"""
Logging bootstrap.

Modules log through `logging.getLogger(__name__)`; this module only wires
the root logger once, with a single stdout handler.
"""
import logging
import sys
import threading

_lock = threading.Lock()
_is_configured = False

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger. Safe to call more than once."""
    global _is_configured

    with _lock:
        if _is_configured:
            return

        root = logging.getLogger()
        root.setLevel(getattr(logging, level.upper(), logging.INFO))

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

        # SQL echo is noisy at INFO
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

        _is_configured = True
