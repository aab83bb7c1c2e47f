"""Rewrite generic container elements into semantic paragraphs.

Parses author HTML with BeautifulSoup, then walks the tree bottom-up:
- ``span`` elements are unwrapped
- ``div`` elements become ``p`` unless they directly hold a block element,
  in which case they are unwrapped too
- presentational and scripting attributes are stripped everywhere
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_ELEMENTS = frozenset([
    'p', 'div', 'ul', 'ol', 'table', 'tr', 'td', 'th',
])

DEFAULT_STRIP_ATTRIBUTES = frozenset([
    'class',
    'style',
    'id',
    'dir',
    'role',
    'tabindex',
    'contenteditable',
    'spellcheck',
    'attributionsrc',
])

DEFAULT_STRIP_PREFIXES = ('data-', 'aria-')


class ContainerKind(Enum):
    """Container elements the normalizer rewrites."""
    DIV = "div"
    SPAN = "span"

    @classmethod
    def of(cls, tag_name: str) -> Optional["ContainerKind"]:
        """Return the kind for a tag name, or None for anything else."""
        try:
            return cls(tag_name.lower())
        except ValueError:
            return None


class ContainerNormalizer:
    """Convert div/span soup into paragraphs.

    Traversal is post-order: an element's children are fully rewritten
    before the element itself, so a ``div`` sees its inner ``div`` already
    turned into a ``p`` (or unwrapped) when it checks for block children.
    """

    def __init__(
        self,
        strip_attributes: Iterable[str] = DEFAULT_STRIP_ATTRIBUTES,
        strip_prefixes: Iterable[str] = DEFAULT_STRIP_PREFIXES,
        block_elements: Iterable[str] = DEFAULT_BLOCK_ELEMENTS,
    ):
        self._strip_attributes = frozenset(a.lower() for a in strip_attributes)
        self._strip_prefixes = tuple(p.lower() for p in strip_prefixes)
        self._block_elements = frozenset(b.lower() for b in block_elements)

    def normalize(self, html: str) -> str:
        """Normalize containers in an HTML fragment.

        Args:
            html: HTML fragment, possibly malformed.

        Returns:
            Serialized fragment without any document scaffolding.
        """
        soup = BeautifulSoup(html, 'html.parser')
        rewritten = self._normalize_children(soup, soup)
        logger.debug('Rewrote %d container element(s)', rewritten)
        return str(soup)

    def _normalize_children(self, soup: BeautifulSoup, parent: Tag) -> int:
        rewritten = 0
        # Snapshot: unwrapping splices already-normalized nodes into parent
        for child in list(parent.contents):
            if isinstance(child, Tag):
                rewritten += self._normalize_element(soup, child)
        return rewritten

    def _normalize_element(self, soup: BeautifulSoup, element: Tag) -> int:
        rewritten = self._normalize_children(soup, element)
        self._strip(element)

        kind = ContainerKind.of(element.name)
        if kind is None:
            return rewritten
        if kind is ContainerKind.DIV and not (
            self._has_block_child(element)
            or self._inside_paragraph(element)
            or self._holds_paragraph(element)
        ):
            self._to_paragraph(soup, element)
        else:
            element.unwrap()
        return rewritten + 1

    def _has_block_child(self, element: Tag) -> bool:
        """Check direct children only, not deeper descendants."""
        return any(
            isinstance(child, Tag) and child.name.lower() in self._block_elements
            for child in element.contents
        )

    @staticmethod
    def _inside_paragraph(element: Tag) -> bool:
        return element.find_parent('p') is not None

    @staticmethod
    def _holds_paragraph(element: Tag) -> bool:
        # A p below an inline child, e.g. a div already converted there
        return element.find('p') is not None

    def _to_paragraph(self, soup: BeautifulSoup, element: Tag) -> Tag:
        paragraph = soup.new_tag('p')
        element.replace_with(paragraph)
        for child in list(element.contents):
            paragraph.append(child.extract())
        self._strip(paragraph)
        return paragraph

    def _strip(self, element: Tag) -> None:
        """Drop attributes on the strip-list or with a stripped prefix."""
        for name in list(element.attrs):
            lowered = name.lower()
            if lowered in self._strip_attributes or lowered.startswith(self._strip_prefixes):
                del element.attrs[name]


def normalize_containers(html: str) -> str:
    """Convenience function using the default attribute and block sets."""
    return ContainerNormalizer().normalize(html)
