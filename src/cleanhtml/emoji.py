"""Reversible emoji extraction.

Emoji are swapped for placeholder tokens before the destructive stages of
the pipeline run, then put back at the end. The map travels with the call:
nothing is kept between invocations.
"""

import re

# Code point ranges treated as emoji (inclusive)
EMOJI_RANGES: tuple[tuple[str, str], ...] = (
    ('\U0001F000', '\U0001FAFF'),  # Mahjong tiles through Symbols & Pictographs Ext-A
    ('\u2300', '\u23ff'),  # Miscellaneous Technical (watch, hourglass)
    ('\u2600', '\u27bf'),  # Miscellaneous Symbols, Dingbats
    ('\u2b00', '\u2bff'),  # Miscellaneous Symbols and Arrows
)

PLACEHOLDER_TEMPLATE = '###EMOJI_{index}###'

EmojiMap = dict[str, str]

_PLACEHOLDER_RE = re.compile(r'###EMOJI_\d+###')


def _build_emoji_pattern(ranges: tuple[tuple[str, str], ...]) -> re.Pattern:
    char_class = ''.join(f'{re.escape(lo)}-{re.escape(hi)}' for lo, hi in ranges)
    # Token-shaped text already in the input is vaulted as a unit so that it
    # can never be mistaken for one of our placeholders on restore.
    return re.compile(f'{_PLACEHOLDER_RE.pattern}|[{char_class}]')


_EMOJI_RE = _build_emoji_pattern(EMOJI_RANGES)


def extract_emoji(text: str) -> tuple[str, EmojiMap]:
    """Replace every emoji code point with a numbered placeholder.

    Args:
        text: Input text or HTML.

    Returns:
        Tuple of (rewritten text, placeholder -> original map). Placeholders
        are numbered from 0 in left-to-right order; repeated emoji get
        distinct entries.
    """
    emoji_map: EmojiMap = {}

    def _vault(match: re.Match) -> str:
        placeholder = PLACEHOLDER_TEMPLATE.format(index=len(emoji_map))
        emoji_map[placeholder] = match.group(0)
        return placeholder

    return _EMOJI_RE.sub(_vault, text), emoji_map


def restore_emoji(text: str, emoji_map: EmojiMap) -> str:
    """Put vaulted originals back in place of their placeholders.

    Tokens missing from the map are left as they are. Restored values are
    never rescanned.
    """
    if not emoji_map:
        return text
    return _PLACEHOLDER_RE.sub(lambda m: emoji_map.get(m.group(0), m.group(0)), text)
