"""Tests for CLI entry point."""

import io

import pytest
from cleanhtml.cli import CliFlags, parse_flags, run
from cleanhtml import config as config_module


@pytest.fixture(autouse=True)
def no_config_locations(monkeypatch, tmp_path):
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [tmp_path / "none.yaml"])


def feed_stdin(monkeypatch, text: str) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(text))


class TestParseFlags:
    def test_no_flags(self):
        flags, remaining = parse_flags(["post.html"])

        assert flags == CliFlags()
        assert remaining == ["post.html"]

    def test_keep_emoji(self):
        flags, remaining = parse_flags(["--keep-emoji"])

        assert flags.keep_emoji is True
        assert remaining == []

    def test_line_breaks(self):
        flags, _ = parse_flags(["--line-breaks", "Paragraphs", "x.html"])

        assert flags.line_breaks == "paragraphs"

    def test_line_breaks_invalid(self):
        flags, _ = parse_flags(["--line-breaks", "zigzag"])

        assert flags.line_breaks is None
        assert "zigzag" in flags.error

    def test_line_breaks_missing_value(self):
        flags, _ = parse_flags(["--line-breaks"])

        assert flags.error == "--line-breaks requires a value"

    def test_config(self):
        flags, remaining = parse_flags(["--config", "c.yaml", "in.html"])

        assert flags.config == "c.yaml"
        assert remaining == ["in.html"]

    def test_raw_verbose_help(self):
        flags, _ = parse_flags(["--raw", "-v", "-h"])

        assert flags.raw is True
        assert flags.verbose is True
        assert flags.help is True


class TestRun:
    def test_help(self, capsys):
        assert run(["--help"]) == 0
        assert "Usage: cleanhtml" in capsys.readouterr().out

    def test_flag_error(self, capsys):
        assert run(["--line-breaks", "zigzag"]) == 1
        assert "invalid --line-breaks value" in capsys.readouterr().err

    def test_too_many_files(self, capsys):
        assert run(["a.html", "b.html"]) == 1
        assert "at most one" in capsys.readouterr().err

    def test_missing_file(self, capsys, tmp_path):
        assert run([str(tmp_path / "missing.html")]) == 1
        assert "No such file" in capsys.readouterr().err

    def test_stdin(self, monkeypatch, capsys):
        feed_stdin(monkeypatch, '<div class="x">Hello.World<script>x()</script></div>')

        assert run([]) == 0
        assert capsys.readouterr().out == "<p>Hello. World</p>\n"

    def test_raw_skips_sanitizer(self, monkeypatch, capsys):
        feed_stdin(monkeypatch, "<div><em>x</em></div>")

        assert run(["--raw"]) == 0
        assert capsys.readouterr().out == "<p><em>x</em></p>\n"

    def test_file_input(self, tmp_path, capsys):
        path = tmp_path / "post.html"
        path.write_text("one\n\ntwo", encoding="utf-8")

        assert run(["--line-breaks", "paragraphs", str(path)]) == 0
        assert capsys.readouterr().out == "<p>one</p>\n<p>two</p>\n"

    def test_keep_emoji(self, monkeypatch, capsys):
        feed_stdin(monkeypatch, "<p>Nice.\U0001F600</p>")

        assert run(["--keep-emoji"]) == 0
        assert capsys.readouterr().out == "<p>Nice. \U0001F600</p>\n"

    def test_config_file(self, monkeypatch, tmp_path, capsys):
        config_path = tmp_path / "cleanhtml.yaml"
        config_path.write_text("preserveLineBreaks: false\nlineBreakMode: list\n")
        feed_stdin(monkeypatch, "a\nb")

        assert run(["--config", str(config_path)]) == 0
        assert capsys.readouterr().out == "<ul><li>a</li><li>b</li></ul>\n"

    def test_bad_config_file(self, tmp_path, capsys):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("unknown: 1\n")

        assert run(["--config", str(config_path)]) == 1
        assert "Unknown configuration option" in capsys.readouterr().err

    def test_preserve_overrides_config(self, monkeypatch, tmp_path, capsys):
        config_path = tmp_path / "cleanhtml.yaml"
        config_path.write_text("preserveLineBreaks: false\nlineBreakMode: list\n")
        feed_stdin(monkeypatch, "a<br>b")

        assert run(["--config", str(config_path), "--line-breaks", "preserve"]) == 0
        assert capsys.readouterr().out == "a<br/>b\n"

    def test_empty_input(self, monkeypatch, capsys):
        feed_stdin(monkeypatch, "   ")

        assert run([]) == 0
        assert capsys.readouterr().out == ""
