"""Custom exceptions for AST building errors."""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from fnerror.internals.report import Span


class UnsupportedSyntaxError(Exception):
    """Exception raised when a parse tree node has no syntax tree counterpart."""
    def __init__(self, what: str, span: Optional['Span'] = None):
        super().__init__(f"unsupported syntax: {what}")
        self.what = what
        self.span = span
