"""Configuration for XML tree parsing.

``ParserConfig`` is an immutable dataclass shared by the tree builder, the
parser façade and the CLI. Derived configurations are produced with
``override`` rather than by mutation.
"""

import json
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, List, Optional

DEFAULT_MAX_DEPTH = 1024


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Configuration controlling tree construction.

    Attributes:
        max_depth: Maximum number of simultaneously open elements
        strict_end_of_input: Raise when input ends with open elements; when
            False the open elements are closed implicitly and the root returned
        strip_bom: Drop a leading byte order mark from the input
        name: Optional label used in logs and CLI output
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    strict_end_of_input: bool = True
    strip_bom: bool = True
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigValidationError(
                "max_depth must be an integer",
                field_name="max_depth",
            )
        if self.max_depth < 1:
            raise ConfigValidationError(
                "max_depth must be >= 1",
                field_name="max_depth",
                suggestions=[f"Use the default of {DEFAULT_MAX_DEPTH}"],
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> ParserConfig().override(max_depth=16).max_depth
            16
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Reject every structurally incomplete document."""
        return cls(strict_end_of_input=True, name="strict")

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Close elements left open at end of input instead of failing."""
        return cls(strict_end_of_input=False, name="lenient")
