"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from fnerror.internals.version import print_banner


def read_source(source: str) -> tuple[str, Path | None, str]:
    """Return (text, path, display name) for a path or `-` (stdin)."""
    if source == "-":
        return sys.stdin.read(), None, "<stdin>"
    src_path = Path(source).resolve()
    return src_path.read_text(encoding="utf-8"), src_path, str(src_path)


def main(argv: list[str] | None = None) -> int:
    """Main expander entry point."""
    ap = argparse.ArgumentParser(
        prog="fnerror",
        description="Expand #[fnerror] functions in Rust source into an error enum plus the rewritten function",
    )

    ap.add_argument("source", nargs='?', help="Path to a Rust source file, or - for stdin")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree")
    ap.add_argument("--dump-ast", action="store_true", help="Print syntax tree")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Write the expanded source to OUT (default: stdout)")
    ap.add_argument("--in-place", action="store_true",
                    help="Overwrite the source file with the expanded source")
    ap.add_argument("--verbose", action="store_true",
                    help="Report what was written on stderr")
    ap.add_argument(
        "--traceback",
        action="store_true",
        help="Print full traceback on internal errors (for debugging)",
    )
    args = ap.parse_args(argv)

    if args.version:
        print_banner()
        return 0

    if not args.source:
        print("error: source file required (use - for stdin)", file=sys.stderr)
        return 2

    if args.in_place and args.source == "-":
        print("error: --in-place needs a source file, not stdin", file=sys.stderr)
        return 2

    if args.in_place and args.out:
        print("error: --in-place and --out are mutually exclusive", file=sys.stderr)
        return 2

    from fnerror.driver.pipeline import expand_file
    from fnerror.internals.parse_errors import handle_parse_exception
    from fnerror.internals.report import Reporter

    try:
        src, src_path, display = read_source(args.source)
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: cannot read {args.source}: {e}", file=sys.stderr)
        return 2

    reporter = Reporter(source=src, filename=display)

    try:
        result = expand_file(src, src_path, reporter, args)
        reporter.print()
        return result

    except Exception as exc:
        if handle_parse_exception(exc, reporter):
            reporter.print()
            return 2
        if args.traceback:
            raise
        print(f"Expansion failed: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
