"""Tests for div/span normalization."""

import pytest
from cleanhtml.containers import (
    ContainerKind,
    ContainerNormalizer,
    DEFAULT_BLOCK_ELEMENTS,
    DEFAULT_STRIP_ATTRIBUTES,
    normalize_containers,
)


class TestContainerKind:
    def test_known_kinds(self):
        assert ContainerKind.of("div") is ContainerKind.DIV
        assert ContainerKind.of("SPAN") is ContainerKind.SPAN

    def test_other_tags(self):
        assert ContainerKind.of("p") is None
        assert ContainerKind.of("section") is None


class TestContainerNormalizer:
    def setup_method(self):
        self.normalizer = ContainerNormalizer()

    def test_plain_text_unchanged(self):
        assert self.normalizer.normalize("Just text.") == "Just text."

    def test_div_becomes_paragraph(self):
        assert self.normalizer.normalize("<div>Hello</div>") == "<p>Hello</p>"

    def test_nested_div_post_order(self):
        """Outer div holds a block once the inner one is a p, so it is unwrapped."""
        assert self.normalizer.normalize("<div>A<div>B</div></div>") == "A<p>B</p>"

    def test_span_unwrapped(self):
        assert self.normalizer.normalize("<span class=x>hi</span> there") == "hi there"

    def test_div_with_list_unwrapped(self):
        html = "<div>Intro<ul><li>one</li></ul></div>"
        assert self.normalizer.normalize(html) == "Intro<ul><li>one</li></ul>"

    def test_only_direct_children_count(self):
        """A block nested inside an inline child does not unwrap the div."""
        html = "<div><b><ul><li>x</li></ul></b></div>"
        assert self.normalizer.normalize(html) == "<p><b><ul><li>x</li></ul></b></p>"

    def test_paragraph_below_inline_child_not_nested(self):
        html = "<div><b><div>x</div></b></div>"
        assert self.normalizer.normalize(html) == "<b><p>x</p></b>"

    def test_existing_paragraph_below_inline_child(self):
        html = "<div>a <i><p>b</p></i></div>"
        assert self.normalizer.normalize(html) == "a <i><p>b</p></i>"

    def test_div_attributes_dropped(self):
        html = '<div class="a" style="color:red" title="t">x</div>'
        assert self.normalizer.normalize(html) == "<p>x</p>"

    def test_mixed_children_keep_order(self):
        html = "<div>one <b>two</b> three</div>"
        assert self.normalizer.normalize(html) == "<p>one <b>two</b> three</p>"

    def test_span_inside_div(self):
        html = '<div><span style="x">a</span> b</div>'
        assert self.normalizer.normalize(html) == "<p>a b</p>"

    def test_div_inside_span(self):
        assert self.normalizer.normalize("<span><div>x</div></span>") == "<p>x</p>"

    def test_div_inside_paragraph_not_nested(self):
        assert self.normalizer.normalize("<p>a<div>b</div></p>") == "<p>ab</p>"

    def test_empty_elements_kept(self):
        assert self.normalizer.normalize("<div></div>") == "<p></p>"
        assert self.normalizer.normalize("<span></span>x") == "x"

    def test_sibling_divs(self):
        html = "<div>One</div><div>Two</div>"
        assert self.normalizer.normalize(html) == "<p>One</p><p>Two</p>"

    def test_deep_nesting(self):
        html = "<div><div><div>deep</div></div></div>"
        assert self.normalizer.normalize(html) == "<p>deep</p>"

    def test_strips_attributes_on_other_elements(self):
        html = '<p id="a" data-x="1" aria-label="l" dir="rtl">t</p>'
        assert self.normalizer.normalize(html) == "<p>t</p>"

    def test_keeps_other_attributes(self):
        html = '<a href="https://example.com" class="btn" data-track="1">go</a>'
        assert self.normalizer.normalize(html) == '<a href="https://example.com">go</a>'

    @pytest.mark.parametrize("attr", sorted(DEFAULT_STRIP_ATTRIBUTES))
    def test_each_strip_attribute(self, attr):
        html = f'<b {attr}="v">x</b>'
        assert self.normalizer.normalize(html) == "<b>x</b>"

    def test_no_document_scaffolding(self):
        result = self.normalizer.normalize("<div>x</div>")
        assert "<html" not in result
        assert "<body" not in result
        assert "<!DOCTYPE" not in result

    def test_malformed_html_recovers(self):
        result = self.normalizer.normalize("<div><b>unclosed <i>tags</div>")
        assert "unclosed" in result
        assert "tags" in result

    def test_stray_closing_tag(self):
        assert self.normalizer.normalize("text</div>") == "text"

    def test_text_entities_preserved(self):
        assert self.normalizer.normalize("<div>a &amp; b &lt; c</div>") == "<p>a &amp; b &lt; c</p>"

    def test_newlines_in_text_preserved(self):
        assert self.normalizer.normalize("a\n\nb") == "a\n\nb"

    def test_custom_block_elements(self):
        normalizer = ContainerNormalizer(block_elements=DEFAULT_BLOCK_ELEMENTS | {"blockquote"})
        html = "<div><blockquote>q</blockquote></div>"
        assert normalizer.normalize(html) == "<blockquote>q</blockquote>"

    def test_custom_strip_list(self):
        normalizer = ContainerNormalizer(strip_attributes=["title"], strip_prefixes=[])
        html = '<b title="t" class="c" data-x="1">x</b>'
        assert normalizer.normalize(html) == '<b class="c" data-x="1">x</b>'

    def test_idempotent(self):
        html = "<div>A<div>B</div><span>C</span></div>"
        once = self.normalizer.normalize(html)
        assert self.normalizer.normalize(once) == once


def test_normalize_containers_convenience():
    assert normalize_containers("<div>x</div>") == "<p>x</p>"
