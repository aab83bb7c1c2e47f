"""CLI entry point for cleanhtml."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import ConfigError, load_config
from .linebreaks import LineBreakMode
from .pipeline import CleanHtmlPipeline
from .sanitizer import AllowListSanitizer, PassthroughSanitizer

LINE_BREAK_CHOICES = tuple(mode.value for mode in LineBreakMode)


@dataclass
class CliFlags:
    """Parsed cleanhtml flags."""
    keep_emoji: bool = False
    line_breaks: Optional[str] = None
    config: Optional[str] = None
    raw: bool = False
    verbose: bool = False
    help: bool = False
    error: Optional[str] = None


def parse_flags(args: list[str]) -> tuple[CliFlags, list[str]]:
    """Extract flags from args, return (flags, remaining_args)."""
    flags = CliFlags()
    remaining = []

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--keep-emoji":
            flags.keep_emoji = True
            i += 1
        elif arg in ("--line-breaks", "--config"):
            if i + 1 >= len(args):
                flags.error = f"{arg} requires a value"
                i += 1
                continue
            value = args[i + 1]
            if arg == "--config":
                flags.config = value
            elif value.lower() in LINE_BREAK_CHOICES:
                flags.line_breaks = value.lower()
            else:
                flags.error = f"invalid --line-breaks value: {value}"
            i += 2
        elif arg == "--raw":
            flags.raw = True
            i += 1
        elif arg in ("--verbose", "-v"):
            flags.verbose = True
            i += 1
        elif arg in ("--help", "-h"):
            flags.help = True
            i += 1
        else:
            remaining.append(arg)
            i += 1

    return flags, remaining


def print_help() -> None:
    """Print cleanhtml help."""
    print("cleanhtml - Normalize author HTML for storage")
    print()
    print("Usage: cleanhtml [options] [file]")
    print()
    print("Reads HTML from file, or from stdin when no file is given.")
    print()
    print("Options:")
    print("  --keep-emoji           Protect emoji from the cleaning stages")
    print("  --line-breaks <mode>   Line break handling (default: preserve):")
    print("                           preserve   - leave line breaks alone")
    print("                           strip      - replace them with spaces")
    print("                           paragraphs - blank lines become <p> blocks")
    print("                           list       - each line becomes a <li>")
    print("  --config <path>        Load options from a YAML file")
    print("  --raw                  Skip the allow-list sanitizer")
    print("  --verbose, -v          Log each stage to stderr")
    print("  --help, -h             Show this help")
    print()
    print("Examples:")
    print("  cleanhtml post.html")
    print("  cleanhtml --line-breaks paragraphs < draft.txt")
    print("  cleanhtml --keep-emoji --raw post.html")


def run(args: Optional[list[str]] = None) -> int:
    """Run cleanhtml with the given arguments. Returns exit code."""
    if args is None:
        args = sys.argv[1:]

    flags, remaining = parse_flags(args)

    if flags.help:
        print_help()
        return 0

    if flags.error:
        print(f"cleanhtml: {flags.error}", file=sys.stderr)
        print("Try 'cleanhtml --help' for more information.", file=sys.stderr)
        return 1

    if len(remaining) > 1:
        print("cleanhtml: expected at most one input file", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if flags.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(flags.config)
    except ConfigError as exc:
        print(f"cleanhtml: {exc}", file=sys.stderr)
        return 1

    if flags.keep_emoji:
        config = config.with_options(keep_emoji=True)
    if flags.line_breaks:
        preserve = flags.line_breaks == LineBreakMode.PRESERVE.value
        config = config.with_options(
            preserve_line_breaks=preserve,
            line_break_mode=flags.line_breaks,
        )

    if remaining:
        path = Path(remaining[0])
        if not path.is_file():
            print(f"cleanhtml: {path}: No such file", file=sys.stderr)
            return 1
        source = path.read_text(encoding="utf-8")
    else:
        source = sys.stdin.read()

    sanitizer = PassthroughSanitizer() if flags.raw else AllowListSanitizer()
    result = CleanHtmlPipeline(config, sanitizer).clean(source)

    sys.stdout.write(result)
    if result and not result.endswith("\n"):
        sys.stdout.write("\n")

    return 0


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
