"""Rich-text HTML normalization for storage."""

from .behavior import CleanHtmlBehavior
from .config import CleanHtmlConfig, ConfigError, load_config
from .containers import ContainerNormalizer, normalize_containers
from .emoji import extract_emoji, restore_emoji
from .linebreaks import LineBreakFormatter, LineBreakMode
from .pipeline import CleanHtmlPipeline, clean_html
from .punctuation import NumericTier, PunctuationSpacer, fix_punctuation
from .sanitizer import (
    AllowListSanitizer,
    CallableSanitizer,
    PassthroughSanitizer,
    Sanitizer,
    SanitizerChain,
)

__all__ = [
    "CleanHtmlPipeline",
    "clean_html",
    "CleanHtmlConfig",
    "ConfigError",
    "load_config",
    "ContainerNormalizer",
    "normalize_containers",
    "PunctuationSpacer",
    "NumericTier",
    "fix_punctuation",
    "LineBreakFormatter",
    "LineBreakMode",
    "extract_emoji",
    "restore_emoji",
    "Sanitizer",
    "PassthroughSanitizer",
    "CallableSanitizer",
    "AllowListSanitizer",
    "SanitizerChain",
    "CleanHtmlBehavior",
]
