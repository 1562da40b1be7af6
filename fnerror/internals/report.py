from __future__ import annotations
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from lark import Token


class C:
    """ANSI escape codes used by the diagnostic renderer."""
    RESET = "\x1b[0m"
    BOLD = "\x1b[1m"
    DIM = "\x1b[2m"
    RED = "\x1b[31m"
    YELLOW = "\x1b[33m"
    CYAN = "\x1b[36m"
    GRAY = "\x1b[90m"


@dataclass
class Span:
    line: int
    col: int
    end_line: int
    end_col: int
    start_pos: Optional[int] = None  # offsets into the source text
    end_pos: Optional[int] = None

    @property
    def width(self) -> int:
        """Columns covered on the first line (at least one)."""
        if self.end_line != self.line:
            return 1
        return max(1, self.end_col - self.col)


@dataclass
class Diagnostic:
    kind: str  # "error" | "warning"
    code: str
    message: str
    span: Optional[Span] = None
    filename: Optional[str] = None


def span_of(node: Any) -> Optional[Span]:
    """Span of a lark Tree (through its meta) or Token, None when unknown."""
    meta = getattr(node, "meta", None)
    if meta is not None:
        if getattr(meta, "empty", True):
            return None
        return Span(meta.line, meta.column, meta.end_line, meta.end_column,
                    getattr(meta, "start_pos", None), getattr(meta, "end_pos", None))
    if isinstance(node, Token) and node.line is not None and node.column is not None:
        return Span(node.line, node.column,
                    node.end_line or node.line, node.end_column or node.column,
                    node.start_pos, node.end_pos)
    return None


def _display_name(filename: str) -> str:
    """`./relative/path.rs` below the working directory, the bare name elsewhere."""
    if filename.startswith("<"):
        return filename
    try:
        return f"./{Path(filename).resolve().relative_to(Path.cwd())}"
    except ValueError:
        return Path(filename).name


class Reporter:
    """Collects diagnostics for one source text and renders them with a snippet."""

    def __init__(self, source: Optional[str] = None, filename: str = "<input>") -> None:
        self.source = source
        self.filename = filename
        self.items: List[Diagnostic] = []

    def error(self, code: str, msg: str, span: Optional[Span]) -> None:
        self.items.append(Diagnostic("error", code, msg, span, filename=self.filename))

    def warn(self, code: str, msg: str, span: Optional[Span]) -> None:
        self.items.append(Diagnostic("warning", code, msg, span, filename=self.filename))

    @property
    def has_errors(self) -> bool:
        return any(d.kind == "error" for d in self.items)

    @property
    def has_warnings(self) -> bool:
        return any(d.kind == "warning" for d in self.items)

    def codes(self) -> List[str]:
        return [d.code for d in self.items]

    def source_line(self, line: int) -> str:
        lines = self.source.splitlines() if self.source else []
        return lines[line - 1] if 0 < line <= len(lines) else ""

    def _headline(self, d: Diagnostic, use_color: bool) -> str:
        name = _display_name(d.filename or self.filename)
        where = f"{name}:{d.span.line}:{d.span.col}" if d.span else name
        message = d.message if d.message.endswith(".") else d.message + "."
        if not use_color:
            return f"{where}: {d.kind} [{d.code}]: {message}"
        tint = C.RED if d.kind == "error" else C.YELLOW
        return (f"{C.CYAN}{where}{C.RESET}: {C.BOLD}{tint}{d.kind}{C.RESET} "
                f"[{C.DIM}{d.code}{C.RESET}]: {message}")

    def _render(self, d: Diagnostic, use_color: bool, use_unicode: bool) -> List[str]:
        head = self._headline(d, use_color)
        if d.span is None:
            return [head]

        text = self.source_line(d.span.line)
        pad = " " * (max(1, d.span.col) - 1)

        if not use_unicode:
            return [head, f"  | {text}", f"  ` {pad}{'^' * d.span.width}"]

        tint = C.RED if d.kind == "error" else C.YELLOW

        def paint(s: str, code: str) -> str:
            return f"{code}{s}{C.RESET}" if use_color else s

        marker = "┯" + "━" * (d.span.width - 1)
        guide = paint("─" * max(1, d.span.col), C.GRAY) + paint("╯", tint)
        return [
            f"{paint('  ╭──┤ ', C.GRAY)}{head}",
            f"{paint('  │', C.GRAY)} {text}",
            f"{paint('  │', C.GRAY)} {pad}{paint(marker, tint)}",
            f"{paint('  ╰', C.GRAY)}{guide}",
        ]

    def format(self, use_color: bool = True, use_unicode: bool = True) -> str:
        """Render every diagnostic, in the order reported.

        use_color   -> ANSI colors on location, kind and markers
        use_unicode -> box drawing guides instead of `|` and a `^` underline
        """
        out: List[str] = []
        for d in self.items:
            out.extend(self._render(d, use_color, use_unicode))
        return "\n".join(out)

    def print(self, stream=None, use_color: Optional[bool] = None, use_unicode: Optional[bool] = None) -> None:
        """Print to `stream` (default: sys.stderr).

        Color and unicode default to on for a TTY; NO_COLOR, NO_UNICODE and
        TERM=dumb turn them off.
        """
        stream = stream or sys.stderr
        fancy = getattr(stream, "isatty", lambda: False)() and os.getenv("TERM") != "dumb"

        if use_color is None:
            use_color = fancy and os.getenv("NO_COLOR") is None
        if use_unicode is None:
            use_unicode = fancy and os.getenv("NO_UNICODE") is None

        text = self.format(use_color=use_color, use_unicode=use_unicode)
        if text:
            print(text, file=stream)
