"""Helpers for source slices that are carried through verbatim."""
from __future__ import annotations


def line_indent(source: str, pos: int) -> str:
    """Leading whitespace of the source line containing offset `pos`."""
    line_start = source.rfind("\n", 0, pos) + 1
    end = line_start
    while end < len(source) and source[end] in " \t":
        end += 1
    return source[line_start:end]


def dedent_continuation(text: str, indent: str) -> str:
    """Strip `indent` from every line after the first.

    The first line of a slice starts mid-line and carries no indentation of
    its own; the rest keep the indentation they had in the file.
    """
    if "\n" not in text or not indent:
        return text
    lines = text.split("\n")
    out = [lines[0]]
    for line in lines[1:]:
        out.append(line[len(indent):] if line.startswith(indent) else line)
    return "\n".join(out)


def indent_continuation(text: str, indent: str) -> str:
    """Prefix every non-empty line after the first with `indent`."""
    if "\n" not in text or not indent:
        return text
    lines = text.split("\n")
    return "\n".join([lines[0]] + [indent + line if line else line for line in lines[1:]])
