from slidegraph.config.import_config import (
    CanvasConfig,
    ImportConfig,
    TextConfig,
    get_config,
    get_config_dict,
)
from slidegraph.config.logging_config import apply_logging_config, get_logging_config

__all__ = [
    "CanvasConfig",
    "ImportConfig",
    "TextConfig",
    "get_config",
    "get_config_dict",
    "apply_logging_config",
    "get_logging_config",
]
