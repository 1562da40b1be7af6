"""Literal expression parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING
from lark import Tree, Token
from fnerror.syntax.ast import Expr, Lit, Unary
from fnerror.internals.report import span_of

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


LITERAL_KINDS = {
    "string_lit": "str",
    "char_lit": "char",
    "int_lit": "int",
    "float_lit": "float",
    "bool_lit": "bool",
}


def lit_from_token(tok: Token, kind: str) -> Lit:
    return Lit(loc=span_of(tok), kind=kind, text=str(tok))


def expr_literal(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """string_lit / char_lit / int_lit / float_lit / bool_lit: [Token]"""
    return lit_from_token(t.children[0], LITERAL_KINDS[t.data])


def expr_neg_literal(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """`-1` in const generic positions becomes a negation of the literal."""
    tok = t.children[0]
    kind = "float" if tok.type == "FLOAT" else "int"
    return Unary(loc=span_of(t), op="-", expr=lit_from_token(tok, kind))
