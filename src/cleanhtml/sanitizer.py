"""Sanitizer seam between container normalization and punctuation fixes.

The pipeline hands its intermediate HTML to a Sanitizer and continues with
whatever comes back. Hosts plug in their own allow-list sanitizer; the
AllowListSanitizer here is a reference implementation of the usual
rich-text policy.
"""

import inspect
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Comment, Tag

logger = logging.getLogger(__name__)

SanitizerResult = Union[str, Awaitable[str]]

DEFAULT_ALLOWED = "p,b,i,u,ul,ol,li,a[href],table,tr,td,th,br"

# Elements dropped together with their content
DROP_WITH_CONTENT = frozenset(["script", "style", "noscript", "template", "iframe", "object"])

VOID_ELEMENTS = frozenset(["br", "hr", "img", "col", "wbr"])

# Elements never removed for being empty
KEEP_EMPTY = VOID_ELEMENTS | frozenset(["td", "th"])

SAFE_URL_SCHEMES = frozenset(["http", "https", "mailto"])


def parse_allowed(rules: str) -> dict[str, frozenset[str]]:
    """Parse an allow string like ``"p,b,a[href|title]"``.

    Returns:
        Mapping of tag name to the attribute names allowed on it.
    """
    allowed: dict[str, frozenset[str]] = {}
    for item in rules.split(","):
        item = item.strip().lower()
        if not item:
            continue
        if "[" in item and item.endswith("]"):
            tag, attrs = item[:-1].split("[", 1)
            names = frozenset(a.strip() for a in attrs.split("|") if a.strip())
        else:
            tag, names = item, frozenset()
        allowed[tag.strip()] = allowed.get(tag.strip(), frozenset()) | names
    return allowed


class Sanitizer(ABC):
    """Base class for sanitizers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable sanitizer name."""
        pass

    @property
    @abstractmethod
    def slug(self) -> str:
        """Canonical slug for the CLI (e.g., 'allow-list')."""
        pass

    @abstractmethod
    def process(self, html: str) -> SanitizerResult:
        """Filter html. Async hosts may return an awaitable."""
        pass


class PassthroughSanitizer(Sanitizer):
    """Return the input unchanged."""

    @property
    def name(self) -> str:
        return "PassthroughSanitizer"

    @property
    def slug(self) -> str:
        return "passthrough"

    def process(self, html: str) -> str:
        return html


class CallableSanitizer(Sanitizer):
    """Adapt a host function ``(html) -> html`` to the Sanitizer interface."""

    def __init__(self, func: Callable[[str], SanitizerResult], name: Optional[str] = None):
        self._func = func
        self._name = name or getattr(func, "__name__", "CallableSanitizer")

    @property
    def name(self) -> str:
        return self._name

    @property
    def slug(self) -> str:
        return self._name.lower().replace("_", "-")

    def process(self, html: str) -> SanitizerResult:
        return self._func(html)


class AllowListSanitizer(Sanitizer):
    """Keep only allowed tags and attributes.

    Disallowed elements are unwrapped so their text survives, except for
    script-like elements which go with their content. Links keep only safe
    schemes and can be forced to open in a new tab with rel="nofollow".
    Empty elements are removed; with remove_nbsp_empty an element holding
    only non-breaking spaces counts as empty.
    """

    def __init__(
        self,
        allowed: str = DEFAULT_ALLOWED,
        remove_empty: bool = True,
        remove_nbsp_empty: bool = True,
        target_blank: bool = True,
        nofollow: bool = True,
    ):
        self._allowed = parse_allowed(allowed)
        self._remove_empty = remove_empty
        self._remove_nbsp_empty = remove_nbsp_empty
        self._target_blank = target_blank
        self._nofollow = nofollow

    @property
    def name(self) -> str:
        return "AllowListSanitizer"

    @property
    def slug(self) -> str:
        return "allow-list"

    @property
    def allowed(self) -> dict[str, frozenset[str]]:
        return dict(self._allowed)

    def process(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()
        self._filter_children(soup)
        return str(soup)

    def _filter_children(self, parent: Tag) -> None:
        for child in list(parent.contents):
            if isinstance(child, Tag):
                self._filter_element(child)

    def _filter_element(self, element: Tag) -> None:
        name = element.name.lower()
        if name in DROP_WITH_CONTENT:
            element.decompose()
            return

        self._filter_children(element)

        if name not in self._allowed:
            element.unwrap()
            return

        allowed_attrs = self._allowed[name]
        for attr in list(element.attrs):
            if attr.lower() not in allowed_attrs:
                del element.attrs[attr]

        if name == "a":
            self._secure_link(element)

        if self._remove_empty and self._is_empty(element):
            element.decompose()

    def _secure_link(self, link: Tag) -> None:
        href = link.get("href")
        if href is None:
            return
        scheme = urlparse(href.strip()).scheme.lower()
        if scheme and scheme not in SAFE_URL_SCHEMES:
            logger.debug("Dropping unsafe href scheme %r", scheme)
            del link.attrs["href"]
            return
        if scheme in ("http", "https"):
            if self._target_blank:
                link["target"] = "_blank"
            if self._nofollow:
                link["rel"] = "nofollow"

    def _is_empty(self, element: Tag) -> bool:
        if element.name.lower() in KEEP_EMPTY:
            return False
        if element.find(lambda t: t.name.lower() in VOID_ELEMENTS):
            return False
        text = element.get_text()
        if self._remove_nbsp_empty:
            return not text.strip()
        # str.strip() would also eat non-breaking spaces
        return not text.strip(" \t\n\r\f\v")


class SanitizerChain(Sanitizer):
    """Run several sanitizers in order."""

    def __init__(self, sanitizers: Optional[list[Sanitizer]] = None):
        self.sanitizers = sanitizers or []

    def add(self, sanitizer: Sanitizer) -> None:
        self.sanitizers.append(sanitizer)

    @property
    def name(self) -> str:
        return "SanitizerChain"

    @property
    def slug(self) -> str:
        return "+".join(s.slug for s in self.sanitizers) or "empty"

    def process(self, html: str) -> str:
        """Execute the chain. Every member must be synchronous."""
        for sanitizer in self.sanitizers:
            result = sanitizer.process(html)
            if not isinstance(result, str):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError(f"{sanitizer.name} returned {type(result).__name__}, expected str")
            html = result
        return html
