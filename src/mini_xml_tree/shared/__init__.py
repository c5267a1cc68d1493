"""Shared utilities for XML tree parsing.

This module provides the configuration object, the exception hierarchy and the
logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .errors import (
    DepthLimitExceededError,
    EmptyDocumentError,
    MismatchedTagError,
    StructureError,
    TokenizationError,
    UnexpectedEndOfInputError,
    XMLTreeError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "DepthLimitExceededError",
    "EmptyDocumentError",
    "MismatchedTagError",
    "StructureError",
    "TokenizationError",
    "UnexpectedEndOfInputError",
    "XMLTreeError",
    "CorrelationLogger",
    "get_logger",
]
