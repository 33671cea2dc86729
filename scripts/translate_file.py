#!/usr/bin/env python3
"""
Translate a block notation file from the command line.

Uses the same vocabularies, dropdown mapping and engine as the API.

Usage:
    python scripts/translate_file.py script.txt --direction en-to-ja
    python scripts/translate_file.py script.txt -d ja-to-en -o script_en.txt
    cat script.txt | python scripts/translate_file.py - -d en-to-ja
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from config import get_settings
from exceptions import AppError, ConfigLoadError
from services.translation_service import Direction, build_translation_service


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Translate block notation between languages, dropdown values included."
    )
    parser.add_argument(
        "input",
        help="Path to the block notation file, or - for stdin",
    )
    parser.add_argument(
        "-d", "--direction",
        default="en-to-ja",
        help="Direction as {source}-to-{target} (default: en-to-ja)",
    )
    parser.add_argument(
        "-o", "--output",
        default="",
        help="Write the translation here instead of stdout",
    )
    parser.add_argument(
        "--strategy",
        choices=["tree", "pattern"],
        default=None,
        help="Dropdown substitution strategy (default: from settings)",
    )
    return parser.parse_args(argv)


def read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def main(argv=None) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)

    settings = get_settings()
    if args.strategy:
        settings = settings.model_copy(update={"dropdown_strategy": args.strategy})

    try:
        direction = Direction.parse(args.direction)
        service = build_translation_service(settings)
        source = read_source(args.input)
    except ConfigLoadError as e:
        print(f"[ERROR] {e.message}", file=sys.stderr)
        return 1
    except AppError as e:
        print(f"[ERROR] {e.message} ({args.direction})", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"[ERROR] Cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    result = service.translate(source, direction)

    if not result.success:
        print(f"[ERROR] {result.error.message}", file=sys.stderr)
        if result.translated_code is not None:
            print(result.translated_code)
        return 1

    if args.output:
        Path(args.output).write_text(result.translated_code, encoding="utf-8")
        print(f"[OK] Translated code saved to {args.output}", file=sys.stderr)
    else:
        print(result.translated_code)

    return 0


if __name__ == "__main__":
    sys.exit(main())
