"""Tests for applying the pipeline to record attributes."""

from dataclasses import dataclass
from typing import Optional

import pytest
from cleanhtml.behavior import CleanHtmlBehavior
from cleanhtml.config import CleanHtmlConfig, ConfigError
from cleanhtml.pipeline import CleanHtmlPipeline


@dataclass
class Article:
    title: str
    body: Optional[str] = None
    views: int = 0


class TestCleanHtmlBehavior:
    def test_empty_attributes_rejected(self):
        with pytest.raises(ConfigError, match="Attributes cannot be empty"):
            CleanHtmlBehavior([])

    def test_cleans_listed_attributes(self):
        article = Article(title="<span>Hi</span>", body="<div>a,b</div>")
        behavior = CleanHtmlBehavior(["body"])

        cleaned = behavior.clean(article)

        assert cleaned == ["body"]
        assert article.body == "<p>a, b</p>"
        assert article.title == "<span>Hi</span>"

    def test_skips_missing_and_non_string(self):
        article = Article(title="x")
        behavior = CleanHtmlBehavior(["body", "views", "summary"])

        assert behavior.clean(article) == []
        assert article.body is None
        assert article.views == 0

    def test_uses_given_pipeline(self):
        pipeline = CleanHtmlPipeline(CleanHtmlConfig(preserve_line_breaks=False, line_break_mode="list"))
        article = Article(title="one\ntwo")
        CleanHtmlBehavior(["title"], pipeline).clean(article)
        assert article.title == "<ul><li>one</li><li>two</li></ul>"

    def test_hooks(self):
        behavior = CleanHtmlBehavior(("title",))
        article = Article(title="<div>x</div>")
        assert behavior.before_validate(article) == ["title"]
        assert article.title == "<p>x</p>"
        assert behavior.before_save(article) == ["title"]
        assert article.title == "<p>x</p>"

    def test_empty_string_attribute(self):
        article = Article(title="   ")
        CleanHtmlBehavior(["title"]).clean(article)
        assert article.title == ""
