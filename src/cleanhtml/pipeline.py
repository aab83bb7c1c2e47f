"""Fixed-order normalization pipeline.

raw HTML
  -> emoji extraction (keep_emoji)
  -> line ending normalization
  -> container normalization
  -> sanitizer
  -> punctuation spacing
  -> whitespace collapse
  -> line break formatting (unless preserving)
  -> emoji restoration (keep_emoji)
  -> trim
"""

import inspect
import logging
import re
from typing import Any, Optional

from .config import CleanHtmlConfig
from .containers import ContainerNormalizer
from .emoji import EmojiMap, extract_emoji, restore_emoji
from .linebreaks import LineBreakFormatter, LineBreakMode
from .punctuation import PunctuationSpacer
from .sanitizer import PassthroughSanitizer, Sanitizer

logger = logging.getLogger(__name__)

# Markup is kept as is; only whitespace between tags is collapsed
_TAG_OR_SPACE_RE = re.compile(r'(<[^>]*>)|([ \t\n\r\f\v]+)')


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR to LF."""
    return text.replace('\r\n', '\n').replace('\r', '\n')


def collapse_whitespace(html: str, keep_newlines: bool = False) -> str:
    """Collapse whitespace runs outside of tags to a single space.

    With keep_newlines, a run containing line breaks becomes one newline,
    or two when it held a blank line, so paragraph boundaries survive.
    """
    def _collapse(match: re.Match) -> str:
        if match.group(1) is not None:
            return match.group(1)
        run = match.group(2)
        if keep_newlines and '\n' in run:
            return '\n\n' if run.count('\n') > 1 else '\n'
        return ' '

    return _TAG_OR_SPACE_RE.sub(_collapse, html)


class CleanHtmlPipeline:
    """Normalize author HTML for storage.

    One configured pipeline can serve concurrent calls: the emoji map is
    created and consumed inside each call and never stored on the instance.
    """

    def __init__(
        self,
        config: Optional[CleanHtmlConfig] = None,
        sanitizer: Optional[Sanitizer] = None,
    ):
        self.config = config or CleanHtmlConfig()
        self.sanitizer = sanitizer or PassthroughSanitizer()
        self._containers = ContainerNormalizer(
            strip_attributes=self.config.attribute_strip_list,
            strip_prefixes=self.config.attribute_strip_prefixes,
            block_elements=self.config.block_element_set,
        )
        self._spacer = PunctuationSpacer(self.config.numeric_tier)
        self._line_breaks = LineBreakFormatter()

    def clean(self, html: str) -> str:
        """Run the pipeline with a synchronous sanitizer.

        Raises:
            TypeError: If the sanitizer returns an awaitable; use aclean.
        """
        if not html or not html.strip():
            return ""

        prepared, emoji_map = self._prepare(html)
        sanitized = self.sanitizer.process(prepared)
        if inspect.isawaitable(sanitized):
            if inspect.iscoroutine(sanitized):
                sanitized.close()
            raise TypeError(f"{self.sanitizer.name} is asynchronous, use aclean()")
        return self._finish(sanitized, emoji_map)

    async def aclean(self, html: str) -> str:
        """Run the pipeline, awaiting the sanitizer if it is asynchronous."""
        if not html or not html.strip():
            return ""

        prepared, emoji_map = self._prepare(html)
        sanitized = self.sanitizer.process(prepared)
        if inspect.isawaitable(sanitized):
            sanitized = await sanitized
        return self._finish(sanitized, emoji_map)

    def _prepare(self, html: str) -> tuple[str, EmojiMap]:
        emoji_map: EmojiMap = {}
        if self.config.keep_emoji:
            html, emoji_map = extract_emoji(html)
            logger.debug("Vaulted %d emoji", len(emoji_map))

        html = normalize_line_endings(html)
        html = self._containers.normalize(html)
        return html, emoji_map

    def _finish(self, html: str, emoji_map: EmojiMap) -> str:
        mode = self.config.effective_line_break_mode

        html = self._spacer.fix(html)
        html = collapse_whitespace(html, keep_newlines=mode is not LineBreakMode.PRESERVE)

        if mode is not LineBreakMode.PRESERVE:
            html = self._line_breaks.apply(html, mode)

        if self.config.keep_emoji:
            html = restore_emoji(html, emoji_map)

        return html.strip()


def clean_html(
    html: str,
    config: Optional[CleanHtmlConfig] = None,
    sanitizer: Optional[Sanitizer] = None,
    **options: Any,
) -> str:
    """Convenience function for one-off cleaning.

    Options override the config, in either spelling
    (``keep_emoji=True`` or ``keepEmoji=True``). For repeated use, prefer
    creating a CleanHtmlPipeline instance.
    """
    config = config or CleanHtmlConfig()
    if options:
        config = config.with_options(**options)
    return CleanHtmlPipeline(config, sanitizer).clean(html)
