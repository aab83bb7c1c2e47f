"""Configuration for the cleanhtml pipeline.

Options can be passed directly or loaded from YAML with priority resolution:
1. Explicit path given by the caller (highest priority)
2. User config: ~/.config/cleanhtml/config.yaml
3. Project config: .cleanhtml/config.yaml in current directory
4. Built-in defaults (fallback)
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional, Union

from .containers import (
    DEFAULT_BLOCK_ELEMENTS,
    DEFAULT_STRIP_ATTRIBUTES,
    DEFAULT_STRIP_PREFIXES,
)
from .linebreaks import LineBreakMode
from .punctuation import NumericTier

logger = logging.getLogger(__name__)

# Lazy import yaml to avoid startup cost
_yaml = None


def _get_yaml():
    """Lazy-load PyYAML."""
    global _yaml
    if _yaml is None:
        import yaml
        _yaml = yaml
    return _yaml


class ConfigError(ValueError):
    """Raised for invalid configuration values or files."""


@dataclass(frozen=True)
class CleanHtmlConfig:
    """Options for one configured pipeline.

    The configuration is immutable and holds no per-call state, so one
    instance can be shared by any number of concurrent calls.
    """
    preserve_line_breaks: bool = True
    line_break_mode: LineBreakMode = LineBreakMode.STRIP
    keep_emoji: bool = False
    attribute_strip_list: frozenset = DEFAULT_STRIP_ATTRIBUTES
    attribute_strip_prefixes: tuple = DEFAULT_STRIP_PREFIXES
    block_element_set: frozenset = DEFAULT_BLOCK_ELEMENTS
    numeric_tier: NumericTier = NumericTier.MARKUP

    # Accepted spellings for each option
    ALIASES = {
        'preserveLineBreaks': 'preserve_line_breaks',
        'lineBreakMode': 'line_break_mode',
        'convertLineBreaks': 'line_break_mode',
        'keepEmoji': 'keep_emoji',
        'attributeStripList': 'attribute_strip_list',
        'attributeStripPrefixes': 'attribute_strip_prefixes',
        'blockElementSet': 'block_element_set',
        'numericTier': 'numeric_tier',
    }

    @property
    def effective_line_break_mode(self) -> LineBreakMode:
        """Mode actually applied: PRESERVE whenever breaks are preserved."""
        if self.preserve_line_breaks:
            return LineBreakMode.PRESERVE
        return LineBreakMode.parse(self.line_break_mode)

    def with_options(self, **options: Any) -> "CleanHtmlConfig":
        """Return a copy with options overridden (either spelling)."""
        return replace(self, **_coerce(options))

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "CleanHtmlConfig":
        """Build a config from a mapping, e.g. parsed YAML.

        Raises:
            ConfigError: On unknown keys or values of the wrong shape.
        """
        return cls(**_coerce(data or {}))


_FIELD_NAMES = frozenset(f.name for f in fields(CleanHtmlConfig))


def _coerce(data: dict) -> dict:
    """Map option names to field names and values to field types."""
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

    result = {}
    for key, value in data.items():
        name = CleanHtmlConfig.ALIASES.get(key, key)
        if name not in _FIELD_NAMES:
            raise ConfigError(f"Unknown configuration option: {key}")
        result[name] = _coerce_value(name, value)
    return result


def _coerce_value(name: str, value: Any) -> Any:
    if name in ('preserve_line_breaks', 'keep_emoji'):
        if not isinstance(value, bool):
            raise ConfigError(f"{name} must be a boolean, got {value!r}")
        return value
    if name == 'line_break_mode':
        # Unknown modes are not an error: they fall back to preserve
        return LineBreakMode.parse(value)
    if name == 'numeric_tier':
        try:
            return NumericTier(value)
        except ValueError:
            raise ConfigError(f"Unknown numeric tier: {value!r}") from None
    if isinstance(value, str) or not hasattr(value, '__iter__'):
        raise ConfigError(f"{name} must be a list of names, got {value!r}")
    names = [str(v).strip().lower() for v in value]
    if name == 'attribute_strip_prefixes':
        return tuple(names)
    return frozenset(names)


CONFIG_LOCATIONS = [
    Path.home() / ".config" / "cleanhtml" / "config.yaml",  # User overrides
    Path.cwd() / ".cleanhtml" / "config.yaml",               # Project config
]


def find_config_file(path: Optional[Union[str, Path]] = None) -> Optional[Path]:
    """Find the config file to load, checking locations in priority order.

    Returns:
        Path to the config file, or None if none exists.

    Raises:
        ConfigError: If an explicit path was given but does not exist.
    """
    if path is not None:
        explicit = Path(path)
        if not explicit.is_file():
            raise ConfigError(f"Config file not found: {explicit}")
        return explicit

    for candidate in CONFIG_LOCATIONS:
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Optional[Union[str, Path]] = None) -> CleanHtmlConfig:
    """Load configuration from YAML, falling back to defaults.

    Args:
        path: Optional explicit config file. Takes priority over the
              user and project locations.

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid options.
    """
    config_file = find_config_file(path)
    if config_file is None:
        logger.debug("No config file found, using defaults")
        return CleanHtmlConfig()

    yaml = _get_yaml()
    content = config_file.read_text(encoding='utf-8')

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_file}: {exc}") from exc

    logger.debug("Loaded config from %s", config_file)
    return CleanHtmlConfig.from_dict(data)
