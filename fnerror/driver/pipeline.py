"""Single-file expansion orchestration."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from fnerror.internals.errors import TransformError
from fnerror.internals.parser import parse_to_ast
from fnerror.internals.report import Reporter
from fnerror.transform.source import expand_source


def write_output(output: str, src_path: Optional[Path], args) -> Optional[Path]:
    """Write to --out, back to the source with --in-place, or to stdout.

    Returns the path written, or None for stdout.
    """
    if args.in_place:
        dest = src_path
    elif args.out:
        dest = Path(args.out)
    else:
        sys.stdout.write(output)
        sys.stdout.flush()
        return None
    dest.write_text(output, encoding="utf-8")
    return dest


def expand_file(src: str, src_path: Optional[Path], reporter: Reporter, args) -> int:
    """Expand every `#[fnerror]` function of one source text.

    Args:
        src: Source text.
        src_path: Path the text was read from (None for stdin).
        reporter: Reporter for error/warning collection.
        args: Command line arguments.

    Returns:
        Exit code (0=success, 1=warnings, 2=errors).
    """
    if args.dump_parse or args.dump_ast:
        ast = parse_to_ast(src, dump_parse=args.dump_parse)
        if args.dump_ast:
            print(ast)
            print()

    try:
        output = expand_source(src, reporter=reporter)
    except TransformError as e:
        # Nothing is written when an expansion fails
        e.report(reporter)
        return 2

    dest = write_output(output, src_path, args)
    if args.verbose:
        changed = "unchanged" if output == src else "expanded"
        target = dest if dest is not None else "<stdout>"
        print(f"{reporter.filename}: {changed} -> {target}", file=sys.stderr)

    return 1 if reporter.has_warnings else 0
