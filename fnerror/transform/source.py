"""Expansion of every `#[fnerror]` function in a source file."""
from __future__ import annotations
from typing import List, Optional, Union

from fnerror.internals.errors import ERR, raise_fatal
from fnerror.internals.parser import parse_to_ast
from fnerror.internals.report import Reporter
from fnerror.syntax.ast import FnItem, Item, ImplItem, ModItem, OtherItem, TraitItem
from fnerror.syntax.ast_builder.utils.string_processing import line_indent
from fnerror.syntax.visitors import RecursiveVisitor
from fnerror.transform.expand import expand_fn, find_marker, item_kind


class MarkerFinder(RecursiveVisitor):
    """Collects the outermost `#[fnerror]` functions of a file.

    Marked functions are searched at top level, in inline modules and inside
    function bodies (also the bodies of impl and trait methods). A marked
    function is not searched further; its nested markers are found once it
    has been expanded.
    """

    def __init__(self) -> None:
        self.found: List[FnItem] = []

    def reject_marked(self, item: Item) -> None:
        marker = find_marker(item.attrs)
        if marker is not None:
            raise_fatal(ERR.FE5002, marker.loc, kind=item_kind(item))

    def visit_fnitem(self, item: FnItem) -> None:
        if find_marker(item.attrs) is not None:
            self.found.append(item)
            return
        if item.body is not None:
            self.visit(item.body)

    def visit_moditem(self, item: ModItem) -> None:
        self.reject_marked(item)
        for member in item.items or []:
            self.visit(member)

    def visit_members(self, item: Union[ImplItem, TraitItem]) -> None:
        self.reject_marked(item)
        for member in item.items:
            if not isinstance(member, FnItem):
                continue
            marker = find_marker(member.attrs)
            if marker is not None:
                raise_fatal(ERR.FE5001, marker.loc, name=member.sig.name)
            if member.body is not None:
                self.visit(member.body)

    def visit_implitem(self, item: ImplItem) -> None:
        self.visit_members(item)

    def visit_traititem(self, item: TraitItem) -> None:
        self.visit_members(item)

    def visit_otheritem(self, item: OtherItem) -> None:
        self.reject_marked(item)


def find_marked_functions(text: str) -> List[FnItem]:
    finder = MarkerFinder()
    finder.visit(parse_to_ast(text))
    return finder.found


def expand_source(text: str, reporter: Optional[Reporter] = None) -> str:
    """Replace every `#[fnerror]` function in `text` with its expansion.

    Text outside the expanded items is kept byte for byte. Functions nested
    in an expanded body are picked up by the next round.
    """
    while True:
        marked = find_marked_functions(text)
        if not marked:
            return text
        for item in sorted(marked, key=lambda fn: fn.loc.start_pos, reverse=True):
            expansion = expand_fn(item, reporter=reporter)
            start, end = item.loc.start_pos, item.loc.end_pos
            indent = line_indent(text, start)
            text = text[:start] + expansion.to_source(indent) + text[end:]
