import logging
import os


def setup_logging(level: str = None) -> None:
    """Minimal logging setup for the import pipeline.

    - Sets root logger level (``SLIDEGRAPH_LOG_LEVEL`` when no level is given)
    - Ensures a basic StreamHandler is attached once
    """
    if level is None:
        level = os.getenv("SLIDEGRAPH_LOG_LEVEL", "INFO")
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    try:
        root.setLevel(getattr(logging, level.upper()))
    except (AttributeError, TypeError):
        root.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger after ensuring logging is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
