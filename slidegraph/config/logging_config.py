"""
Environment-specific logging configuration
"""
import os
from typing import Dict, Any


def get_logging_config() -> Dict[str, Any]:
    """Get logging configuration based on environment"""

    # Detect environment
    is_production = os.getenv("ENV") == "production"
    is_debug = os.getenv("DEBUG", "false").lower() == "true"

    config = {
        "production": {
            # Production: only element failures and fatal errors
            "default_level": "WARNING",
            "console_format": "%(levelname)s - %(message)s",
            "show_timestamps": False,
            "log_font_attempts": False,
            "suppress_modules": [
                "slidegraph.services.font_resolver",
                "slidegraph.application.event_bus",
            ]
        },
        "development": {
            "default_level": "INFO",
            "console_format": "%(asctime)s - %(levelname)s - %(message)s",
            "show_timestamps": True,
            "log_font_attempts": False,
            "suppress_modules": ["slidegraph.application.event_bus"]
        },
        "debug": {
            # Debug: every ladder step and every created node
            "default_level": "DEBUG",
            "console_format": "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
            "show_timestamps": True,
            "log_font_attempts": True,
            "suppress_modules": []
        }
    }

    if is_debug:
        selected_config = config["debug"]
    elif is_production:
        selected_config = config["production"]
    else:
        selected_config = config["development"]

    selected_config["environment"] = "debug" if is_debug else ("production" if is_production else "development")

    return selected_config


def apply_logging_config(config: Dict[str, Any] = None, level: str = None):
    """Apply logging configuration to Python's logging system

    ``level`` (usually ``ImportConfig.log_level``) replaces the profile's
    default level when given.
    """
    import logging

    if config is None:
        config = get_logging_config()

    logging.getLogger().setLevel(getattr(logging, (level or config["default_level"]).upper()))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(config["console_format"]))

    # Remove existing handlers and add new one
    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.addHandler(console_handler)

    for module in config.get("suppress_modules", []):
        logging.getLogger(module).setLevel(logging.WARNING)

    if config.get("log_font_attempts"):
        logging.getLogger("slidegraph.services.font_resolver").setLevel(logging.DEBUG)

    return config
