"""CLI entry point for bilingual-stories.

Usage:
  python -m bilingual_stories check [FILE ...] [--strict] [--verbose]
  python -m bilingual_stories show FILE
  python -m bilingual_stories json FILE
  python -m bilingual_stories formats
  python -m bilingual_stories serve [--host HOST] [--port PORT]
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from bilingual_stories.models import ParseResult


def main():
    args = sys.argv[1:]
    command = args[0] if args else "check"

    if command == "check":
        sys.exit(_check(args[1:]))
    elif command == "show":
        _show(args[1:])
    elif command == "json":
        _json(args[1:])
    elif command == "formats":
        _formats()
    elif command == "serve":
        _serve(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: check, show, json, formats, serve")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _setup_logging(args: list[str]) -> None:
    level = logging.DEBUG if "--verbose" in args else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s | %(message)s")


def _positional(args: list[str]) -> list[str]:
    return [a for a in args if not a.startswith("--")]


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        print(f"Cannot read {path}: not valid UTF-8")
        sys.exit(1)


def _check_file(path: Path) -> ParseResult:
    from bilingual_stories.validator import check_stories
    return check_stories(_read(path))


def _format_diagnostic(e) -> str:
    where = f"line {e.line}: " if e.line is not None else ""
    first, *rest = e.message.splitlines()
    text = f"  {e.severity.upper():7s} {where}{first}"
    for extra in rest:
        text += f"\n          {extra}"
    return text


def _check(args: list[str]) -> int:
    from bilingual_stories.config import load_settings

    _setup_logging(args)
    settings = load_settings()
    strict = "--strict" in args or settings.fail_on_warnings

    files = [Path(p) for p in _positional(args)] or settings.resolved_input_files()
    if not files:
        print("No input files. Pass FILE arguments or configure input_files.")
        return 1

    failed = False
    for path in files:
        if not path.exists():
            print(f"  Skipping (not found): {path}")
            failed = True
            continue
        result = _check_file(path)
        print(f"{path.name}: {len(result.stories)} stories, "
              f"{len(result.errors_only)} errors, {len(result.warnings_only)} warnings")
        for e in result.errors:
            print(_format_diagnostic(e))
        if result.errors_only or (strict and result.warnings_only):
            failed = True
    return 1 if failed else 0


def _single_file(args: list[str], command: str) -> Path:
    files = _positional(args)
    if len(files) != 1:
        print(f"Usage: python -m bilingual_stories {command} FILE")
        sys.exit(1)
    path = Path(files[0])
    if not path.exists():
        print(f"File not found: {path}")
        sys.exit(1)
    return path


def _show(args: list[str]):
    _setup_logging(args)
    result = _check_file(_single_file(args, "show"))

    for s in result.stories:
        print(f"Story {s.number}: {s.title_original} / {s.title_translated}")
        print(f"  Vocabulary:   {', '.join(v.word for v in s.vocabulary)}")
        print(f"  Text:         {len(s.text_original)} / {len(s.text_translated)} chars")
        print(f"  Questions:    {len(s.questions)}")
        print(f"  Answers:      {' '.join(s.answers)}")
        print(f"  Illustration: {'yes' if s.illustration_prompt else 'no'}")
    if result.errors:
        print()
        for e in result.errors:
            print(_format_diagnostic(e))


def _json(args: list[str]):
    _setup_logging(args)
    result = _check_file(_single_file(args, "json"))
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


def _formats():
    from bilingual_stories import locales
    from bilingual_stories.errors import TITLE_FORMATS

    print("Title formats:")
    for f in TITLE_FORMATS:
        print(f"  {f}")
    print("\nStory headers:")
    for code, word in locales.STORY_HEADERS.items():
        print(f"  {code}: {word}")
    print(f"\nSection markers (lines starting with '{locales.MARKER_PREFIX}'):")
    for code, kw in locales.SECTION_KEYWORDS.items():
        print(f"  {code}: {kw.vocabulary} | {kw.questions} | {kw.answers} | {kw.illustration}")


def _serve(args: list[str]):
    import uvicorn

    from bilingual_stories.config import load_settings

    settings = load_settings()
    port = int(_parse_flag(args, "--port", str(settings.port)))
    host = _parse_flag(args, "--host", settings.host)

    print(f"Starting Bilingual Stories on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "bilingual_stories.app:app",
        host=host,
        port=port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
