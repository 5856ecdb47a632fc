import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach one stream handler to the package logger; repeat calls only adjust the level."""
    global _handler
    logger = logging.getLogger("resultdesk")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    return logger
