"""Spacing after sentence punctuation.

Ensures a single space follows ``. , ; : ! ?`` when the mark runs straight
into the next word. Spans that merely contain those characters are matched
first and passed through untouched:

- URLs (``http://``, ``https://``, ``www.``)
- HTML entities and markup tags
- ellipses (two or more dots)
- numeric separators (``10.5``, ``1,000``, ``12:30``, ``12-15``)
"""

import re
from enum import Enum


class NumericTier(str, Enum):
    """What may sit around a separator between two digits and still count.

    STRICT: nothing (``10.5``)
    SPACED: whitespace and non-breaking space entities (``10 . 5``)
    MARKUP: additionally inline tags (``10<b>.</b>5``)
    """
    STRICT = "strict"
    SPACED = "spaced"
    MARKUP = "markup"


# Spacing marks that get a space appended
SPACING_MARKS = '.,;:!?'

# Separators protected when they sit between two digits
NUMERIC_SEPARATORS = ".,:\\-\u2013"

# Characters after which no space is added
_NO_SPACE_BEFORE = "\\s" + re.escape(SPACING_MARKS) + ")\\]}\"'\u00bb\u201d\u2019"

_NBSP = r'&nbsp;|&#160;|&#[xX]0*[aA]0;'

# Tags that already end the word: closers and block-level openers.
# Inline opening tags still get a space before them.
_SEPARATING_TAG = (
    r'<[/!?]'
    r'|<(?i:p|div|br|ul|ol|li|table|tr|td|th|h[1-6]|blockquote|pre)\b'
)

_TIER_FILLERS = {
    NumericTier.STRICT: '',
    NumericTier.SPACED: rf'(?:\s|{_NBSP})*',
    NumericTier.MARKUP: rf'(?:\s|{_NBSP}|<[^>]*>)*',
}

_EXCLUSIONS = (
    # URL, minus any trailing sentence punctuation
    r'(?<![\w/])(?:https?://|www\.)[^\s<>"\']*[^\s<>"\'.,;:!?)\]]',
    r'&(?:[A-Za-z][A-Za-z0-9]*|#[0-9]+|#[xX][0-9A-Fa-f]+);',
    r'<[A-Za-z/!?][^>]*>',
    r'\.{2,}',
)


def _build_pattern(tier: NumericTier) -> re.Pattern:
    filler = _TIER_FILLERS[tier]
    numeric = rf'\d{filler}[{NUMERIC_SEPARATORS}](?={filler}\d)'
    skip = '|'.join(_EXCLUSIONS + (numeric,))
    mark = rf'[{re.escape(SPACING_MARKS)}](?![{_NO_SPACE_BEFORE}]|{_NBSP}|{_SEPARATING_TAG}|\Z)'
    return re.compile(rf'(?P<skip>{skip})|(?P<mark>{mark})')


class PunctuationSpacer:
    """Insert missing spaces after punctuation, exclusions first.

    Every exclusion is an earlier branch of one alternation, so at any
    position a URL, entity, tag, ellipsis or numeric separator wins over the
    spacing rule and is consumed whole. The rule is idempotent: a mark that
    is already followed by whitespace never matches.
    """

    def __init__(self, tier: NumericTier = NumericTier.MARKUP):
        self._tier = tier
        self._pattern = _build_pattern(tier)

    @property
    def tier(self) -> NumericTier:
        return self._tier

    def fix(self, text: str) -> str:
        """Return text with one space after each run-on punctuation mark."""
        return self._pattern.sub(self._replace, text)

    @staticmethod
    def _replace(match: re.Match) -> str:
        mark = match.group("mark")
        if mark is None:
            return match.group(0)
        return mark + ' '


def fix_punctuation(text: str, tier: NumericTier = NumericTier.MARKUP) -> str:
    """Convenience function for one-off spacing fixes.

    For repeated use, prefer creating a PunctuationSpacer instance.
    """
    return PunctuationSpacer(tier).fix(text)
