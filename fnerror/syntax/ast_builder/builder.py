"""Main ASTBuilder orchestrator for the fnerror syntax tree.

This module contains the ASTBuilder class that turns Lark parse trees into
the dataclass syntax tree. The builder delegates to specialized parsers:

- Type parsing: syntax.ast_builder.types
- Expression parsing: syntax.ast_builder.expressions
- Statement parsing: syntax.ast_builder.statements
- Item parsing: syntax.ast_builder.declarations

Patterns, visibilities, macro token trees and the items that are never
rewritten are kept as source slices, so the builder holds on to the source
text it was given.
"""
from __future__ import annotations
from typing import List, Optional, Union

from lark import Tree, Token

from fnerror.internals.report import span_of
from fnerror.syntax.ast import File, Item, Attribute, Pat, Block, Expr
from fnerror.syntax.typesys import TypeNode
from fnerror.syntax.ast_builder.utils.tree_navigation import trees
from fnerror.syntax.ast_builder.utils.string_processing import line_indent, dedent_continuation


class ASTBuilder:
    def __init__(self, source: str):
        """Initialize ASTBuilder over `source` with lazy-loaded parsers."""
        self.source = source
        self._type_parser = None
        self._expr_parser = None
        self._stmt_parser = None

    @property
    def type_parser(self):
        """Lazy-load TypeParser on first use."""
        if self._type_parser is None:
            from fnerror.syntax.ast_builder.types.parser import TypeParser
            self._type_parser = TypeParser(self)
        return self._type_parser

    @property
    def expr_parser(self):
        """Lazy-load ExpressionParser on first use."""
        if self._expr_parser is None:
            from fnerror.syntax.ast_builder.expressions.parser import ExpressionParser
            self._expr_parser = ExpressionParser(self)
        return self._expr_parser

    @property
    def stmt_parser(self):
        """Lazy-load StatementParser on first use."""
        if self._stmt_parser is None:
            from fnerror.syntax.ast_builder.statements.parser import StatementParser
            self._stmt_parser = StatementParser(self)
        return self._stmt_parser

    def build(self, tree: Tree) -> File:
        """Build a File from a `file` parse tree."""
        assert isinstance(tree, Tree) and tree.data == "file"
        inner_attrs = [self.attribute(t) for t in trees(tree.children, "inner_attr")]
        items = [self.item(t) for t in tree.children
                 if isinstance(t, Tree) and t.data != "inner_attr"]
        return File(loc=span_of(tree), items=items, inner_attrs=inner_attrs)

    def item(self, t: Tree) -> Item:
        from fnerror.syntax.ast_builder.declarations import items
        return items.parse_item(t, self)

    # ------------------------
    # Shortcuts into the specialized parsers
    # ------------------------

    def _type(self, t: Tree) -> TypeNode:
        return self.type_parser.parse_type(t)

    def _expr(self, t: Tree) -> Expr:
        return self.expr_parser.parse_expr(t)

    def _block(self, t: Tree) -> Block:
        return self.stmt_parser.parse_block(t)

    # ------------------------
    # Source slices
    # ------------------------

    def text(self, node: Union[Tree, Token]) -> str:
        """Exact source text covered by `node`."""
        span = span_of(node)
        if span is None or span.start_pos is None:
            return ""
        return self.source[span.start_pos:span.end_pos]

    def verbatim(self, node: Union[Tree, Token]) -> str:
        """Source text of `node` with continuation lines dedented to its first line's indentation."""
        span = span_of(node)
        if span is None or span.start_pos is None:
            return ""
        text = self.source[span.start_pos:span.end_pos]
        return dedent_continuation(text, line_indent(self.source, span.start_pos))

    def pat(self, t: Tree) -> Pat:
        return Pat(loc=span_of(t), text=self.verbatim(t))

    def visibility(self, t: Optional[Tree]) -> Optional[str]:
        if t is None:
            return None
        return " ".join(self.text(t).split())

    # ------------------------
    # Attributes
    # ------------------------

    def attrs(self, t: Optional[Tree]) -> List[Attribute]:
        """Parse an `attrs` tree (zero or more outer attributes)."""
        if t is None:
            return []
        return [self.attribute(a) for a in trees(t.children, "outer_attr")]

    def attribute(self, t: Tree) -> Attribute:
        """Parse `#[path input]` or `#![path input]`."""
        body = t.children[0]
        path_tree, input_tree = body.children
        return Attribute(
            loc=span_of(t),
            path=self.type_parser.parse_simple_path(path_tree),
            tokens=self.verbatim(input_tree) if input_tree is not None else None,
            inner=t.data == "inner_attr",
        )
