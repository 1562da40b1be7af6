"""Shared parse exception handling for the expander and the CLI."""
from __future__ import annotations

from typing import Optional

from lark import UnexpectedInput

from fnerror.internals.report import Span
from fnerror.syntax.ast_builder import UnsupportedSyntaxError


def _input_span(exc: UnexpectedInput) -> Optional[Span]:
    line = getattr(exc, "line", -1)
    col = getattr(exc, "column", -1)
    if not isinstance(line, int) or line < 1:
        return None
    col = col if isinstance(col, int) and col > 0 else 1
    pos = getattr(exc, "pos_in_stream", None)
    return Span(line, col, line, col, pos, pos)


def handle_parse_exception(exc: Exception, reporter, source_path=None) -> bool:
    """Handle a parse exception by emitting diagnostics through the reporter.

    Args:
        exc: The exception to handle.
        reporter: Reporter for error/warning collection.
        source_path: Optional path, used as the diagnostic filename.

    Returns:
        True if the exception was handled, False otherwise.
    """
    from fnerror.internals import errors as er
    from fnerror.internals.parser import improve_parse_error

    if source_path:
        reporter.filename = str(source_path)

    if isinstance(exc, UnsupportedSyntaxError):
        er.emit(reporter, er.ERR.FE0002, exc.span, what=exc.what)
        return True

    if isinstance(exc, UnexpectedInput):
        er.emit(reporter, er.ERR.FE0001, _input_span(exc), detail=improve_parse_error(exc))
        return True

    return False
