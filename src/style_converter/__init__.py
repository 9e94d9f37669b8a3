"""Convert eXeLearning styles from the v2.9 layout to v3.0."""

__version__ = "0.1.0"

from .config import AppConfig, load_config
from .core import ConversionError, StyleConversionService
from .models import BatchConversionResult, ConversionOptions, ConversionResult

__all__ = [
    "AppConfig",
    "BatchConversionResult",
    "ConversionError",
    "ConversionOptions",
    "ConversionResult",
    "StyleConversionService",
    "load_config",
]
