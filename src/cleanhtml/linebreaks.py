"""Line break reformatting.

Turns author line breaks into spaces, paragraphs or a bullet list. Only runs
when the caller is not preserving line breaks.
"""

import html
import logging
import re
from enum import Enum
from typing import Any, Iterable

from bs4 import BeautifulSoup, NavigableString, Tag

logger = logging.getLogger(__name__)

# A <br> in any of its spellings, or a raw newline
_BREAK = r'(?:<br\s*/?>|\n)'

_BREAK_RUN_RE = re.compile(rf'[ \t]*(?:{_BREAK}[ \t]*)+', re.IGNORECASE)
_PARAGRAPH_SPLIT_RE = re.compile(r'\n[ \t]*(?:\n[ \t]*)+')
_NEWLINE_RUN_RE = re.compile(r'[ \t]*(?:\n[ \t]*)+')
_TAG_RE = re.compile(r'<[^>]*>')

# Block boundaries that end a line in the plain-text projection
_BLOCK_TAG_RE = re.compile(
    r'</?(?:p|div|br|li|tr|td|th|ul|ol|table|h[1-6]|blockquote|pre)(?:\s[^>]*)?/?>',
    re.IGNORECASE,
)

# Elements that are already block-structured
_BLOCK_ELEMENTS = frozenset(['p', 'ul', 'ol', 'li', 'table', 'tr', 'td', 'th'])


class LineBreakMode(str, Enum):
    """What to do with line breaks."""
    PRESERVE = "preserve"
    STRIP = "strip"
    PARAGRAPHS = "paragraphs"
    LIST = "list"

    @classmethod
    def parse(cls, value: Any) -> "LineBreakMode":
        """Resolve a configured value to a mode.

        Accepts members, their string values, and the short forms ``"p"``
        and ``"ul"``. ``False`` and ``None`` mean strip. Anything else falls
        back to PRESERVE.
        """
        if isinstance(value, cls):
            return value
        if value is False or value is None:
            return cls.STRIP
        if isinstance(value, str):
            key = value.strip().lower()
            key = _ALIASES.get(key, key)
            try:
                return cls(key)
            except ValueError:
                pass
        logger.warning('Unrecognized line break mode %r, preserving line breaks', value)
        return cls.PRESERVE


_ALIASES = {
    'p': LineBreakMode.PARAGRAPHS.value,
    'paragraph': LineBreakMode.PARAGRAPHS.value,
    'ul': LineBreakMode.LIST.value,
    'none': LineBreakMode.STRIP.value,
}


class LineBreakFormatter:
    """Apply a LineBreakMode to an HTML fragment."""

    def apply(self, html_text: str, mode: Any) -> str:
        """Reformat line breaks in html_text.

        Args:
            html_text: Normalized HTML fragment.
            mode: A LineBreakMode or any value LineBreakMode.parse accepts.

        Returns:
            Reformatted fragment. PRESERVE returns the input unchanged.
        """
        mode = LineBreakMode.parse(mode)
        logger.debug('Applying line break mode %s', mode.value)

        if mode is LineBreakMode.STRIP:
            return self._strip(html_text)
        if mode is LineBreakMode.PARAGRAPHS:
            return self._paragraphs(html_text)
        if mode is LineBreakMode.LIST:
            return self._list(html_text)
        return html_text

    def _strip(self, html_text: str) -> str:
        return _BREAK_RUN_RE.sub(' ', html_text)

    def _paragraphs(self, html_text: str) -> str:
        """Split top-level content into paragraphs.

        Only breaks at the root of the fragment, or directly inside a ``p``,
        separate paragraphs. Other block elements are emitted as they are.
        """
        soup = BeautifulSoup(html_text, 'html.parser')
        blocks = []
        run = []
        for node in list(soup.contents):
            if not (isinstance(node, Tag) and node.name.lower() in _BLOCK_ELEMENTS):
                run.append(node)
                continue
            blocks.extend(f'<p>{s}</p>' for s in self._segments(run))
            run = []
            if node.name.lower() != 'p':
                blocks.append(str(node))
                continue
            segments = self._segments(node.contents)
            if len(segments) == 1:
                blocks.append(str(node))
            else:
                blocks.extend(f'<p>{s}</p>' for s in segments)
        blocks.extend(f'<p>{s}</p>' for s in self._segments(run))
        return '\n'.join(blocks)

    @staticmethod
    def _segments(nodes: Iterable) -> list[str]:
        """Serialize inline nodes and split them on paragraph breaks."""
        parts = []
        for node in nodes:
            if isinstance(node, Tag):
                if node.name.lower() == 'br':
                    parts.append('\n')
                else:
                    # Breaks nested in inline markup never split a paragraph
                    parts.append(_NEWLINE_RUN_RE.sub(' ', str(node)))
            elif isinstance(node, NavigableString):
                parts.append(node.output_ready())
        segments = []
        for segment in _PARAGRAPH_SPLIT_RE.split(''.join(parts)):
            segment = segment.strip()
            if segment:
                segments.append(_NEWLINE_RUN_RE.sub(' ', segment))
        return segments

    def _list(self, html_text: str) -> str:
        text = _BLOCK_TAG_RE.sub('\n', html_text)
        # Plain-text projection: drop markup, then decode entities
        text = html.unescape(_TAG_RE.sub('', text))
        items = [
            f'<li>{html.escape(line.strip(), quote=True)}</li>'
            for line in text.split('\n')
            if line.strip()
        ]
        if not items:
            return ''
        return '<ul>' + ''.join(items) + '</ul>'
