"""
Configuration management for the import pipeline.

Centralized configuration with:
- Environment variable support (``SLIDEGRAPH_*``, optionally from a .env file)
- Validation
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from slidegraph.exceptions import ConfigurationError

load_dotenv()

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


def _env_int(name: str, default: str) -> int:
    return int(os.getenv(name, default))


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


@dataclass
class CanvasConfig:
    """Target canvas for each slide frame"""
    target_width: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_TARGET_WIDTH', '1920'))
    target_height: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_TARGET_HEIGHT', '1080'))
    fit_to_canvas: bool = field(default_factory=lambda: _env_bool('SLIDEGRAPH_FIT_TO_CANVAS', 'true'))
    slide_spacing: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_SLIDE_SPACING', '100'))


@dataclass
class TextConfig:
    """Text and table typography"""
    text_padding: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_TEXT_PADDING', '4'))
    default_font_size: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_DEFAULT_FONT_SIZE', '14'))
    table_font_family: str = field(default_factory=lambda: os.getenv('SLIDEGRAPH_TABLE_FONT', 'Arial'))
    table_font_size: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_TABLE_FONT_SIZE', '10'))
    memoize_fonts: bool = field(default_factory=lambda: _env_bool('SLIDEGRAPH_MEMOIZE_FONTS', 'true'))


@dataclass
class ImportConfig:
    """Master configuration"""
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    text: TextConfig = field(default_factory=TextConfig)

    # Neutral grays for degraded output
    placeholder_gray: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_PLACEHOLDER_GRAY', '0.9'))
    cell_stroke_gray: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_CELL_STROKE_GRAY', '0.8'))

    max_group_depth: int = field(default_factory=lambda: _env_int('SLIDEGRAPH_MAX_GROUP_DEPTH', '32'))

    # Progress band owned by slide creation (earlier percentages belong to fetching)
    progress_start: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_PROGRESS_START', '60'))
    progress_span: float = field(default_factory=lambda: _env_float('SLIDEGRAPH_PROGRESS_SPAN', '35'))

    # Overrides the logging profile level when set
    log_level: Optional[str] = field(default_factory=lambda: os.getenv('SLIDEGRAPH_LOG_LEVEL'))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'canvas': {
                'target_width': self.canvas.target_width,
                'target_height': self.canvas.target_height,
                'fit_to_canvas': self.canvas.fit_to_canvas,
                'slide_spacing': self.canvas.slide_spacing
            },
            'text': {
                'text_padding': self.text.text_padding,
                'default_font_size': self.text.default_font_size,
                'table_font_family': self.text.table_font_family,
                'table_font_size': self.text.table_font_size,
                'memoize_fonts': self.text.memoize_fonts
            },
            'placeholder_gray': self.placeholder_gray,
            'cell_stroke_gray': self.cell_stroke_gray,
            'max_group_depth': self.max_group_depth,
            'progress': {
                'start': self.progress_start,
                'span': self.progress_span
            },
            'log_level': self.log_level
        }

    def validate(self) -> None:
        """Validate configuration values"""
        if self.canvas.target_width <= 0 or self.canvas.target_height <= 0:
            raise ConfigurationError(
                f"Target canvas must be positive, got {self.canvas.target_width}x{self.canvas.target_height}"
            )

        if self.canvas.slide_spacing < 0:
            raise ConfigurationError(f"slide_spacing must be non-negative, got {self.canvas.slide_spacing}")

        if self.text.table_font_size < 1 or self.text.default_font_size < 1:
            raise ConfigurationError("Font sizes must be at least 1")

        for name in ('placeholder_gray', 'cell_stroke_gray'):
            value = getattr(self, name)
            if value < 0 or value > 1:
                raise ConfigurationError(f"{name} must be between 0 and 1, got {value}")

        if self.max_group_depth < 1:
            raise ConfigurationError(f"max_group_depth must be at least 1, got {self.max_group_depth}")

        if self.progress_start < 0 or self.progress_start + self.progress_span > 100:
            raise ConfigurationError(
                f"Progress band {self.progress_start}+{self.progress_span} must stay within 0-100"
            )

        if self.log_level and self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log_level {self.log_level!r}")


@lru_cache(maxsize=1)
def get_config() -> ImportConfig:
    """Get singleton configuration instance"""
    config = ImportConfig()
    config.validate()
    return config


def get_config_dict() -> Dict[str, Any]:
    """Get configuration as dictionary"""
    return get_config().to_dict()
