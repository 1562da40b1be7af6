"""Statement and block parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List
from lark import Tree
from fnerror.syntax.ast import Block, Stmt, Let, ExprStmt, ItemStmt, EmptyStmt
from fnerror.syntax.ast_builder.exceptions import UnsupportedSyntaxError
from fnerror.syntax.ast_builder.utils.tree_navigation import trees
from fnerror.internals.report import span_of

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


class StatementParser:
    """Parses blocks and the statements inside them."""

    def __init__(self, ast_builder: 'ASTBuilder'):
        self.ast_builder = ast_builder

    def parse_block(self, t: Tree) -> Block:
        """block: "{" inner_attr* stmt* [expr] "}"

        The tail slot is always the last child. Block-like statements and the
        tail expression both become ExprStmt(semi=False); a block-like
        expression followed by a lone `;` is merged back into one statement,
        so `if c {} ;` reads the same however the parser split it.
        """
        *body, tail = t.children
        inner_attrs = [self.ast_builder.attribute(a) for a in trees(body, "inner_attr")]

        stmts: List[Stmt] = []
        for child in trees(body):
            if child.data == "inner_attr":
                continue
            stmt = self.parse_stmt(child)
            if (isinstance(stmt, EmptyStmt) and stmts
                    and isinstance(stmts[-1], ExprStmt) and not stmts[-1].semi):
                stmts[-1].semi = True
                continue
            stmts.append(stmt)

        if tail is not None:
            expr = self.ast_builder._expr(tail)
            stmts.append(ExprStmt(loc=span_of(tail), expr=expr, semi=False))

        return Block(loc=span_of(t), stmts=stmts, inner_attrs=inner_attrs)

    def parse_stmt(self, t: Tree) -> Stmt:
        tag = t.data
        loc = span_of(t)

        if tag == "empty_stmt":
            return EmptyStmt(loc=loc)

        if tag == "let_stmt":
            attrs, pat, ty, init, diverge = t.children
            return Let(
                loc=loc,
                pat=self.ast_builder.pat(pat),
                ty=self.ast_builder._type(ty) if ty is not None else None,
                init=self.ast_builder._expr(init) if init is not None else None,
                diverge=self.parse_block(diverge) if diverge is not None else None,
                attrs=self.ast_builder.attrs(attrs),
            )

        if tag == "item_stmt":
            return ItemStmt(loc=loc, item=self.ast_builder.item(t.children[0]))

        if tag == "semi_stmt":
            return ExprStmt(loc=loc, expr=self.ast_builder._expr(t.children[0]), semi=True)

        if tag == "block_like_stmt":
            return ExprStmt(loc=loc, expr=self.ast_builder._expr(t.children[0]), semi=False)

        raise UnsupportedSyntaxError(f"statement '{tag}'", loc)
