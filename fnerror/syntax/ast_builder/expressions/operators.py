"""Operator expression parsing (unary, binary, casts, references, ranges, assignment)."""
from __future__ import annotations
from typing import TYPE_CHECKING
from lark import Tree
from fnerror.syntax.ast import Expr, Unary, Binary, Cast, Reference, Range, Assign
from fnerror.internals.report import span_of

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


def op_text(t: Tree) -> str:
    """Join an operator tree's tokens: shift_op keeps `>` `>` as two tokens."""
    return "".join(str(tok) for tok in t.children)


def expr_unary(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    op_tree, sub = t.children
    return Unary(loc=span_of(t), op=op_text(op_tree), expr=ast_builder._expr(sub))


def expr_reference(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    mut, sub = t.children
    ref = Reference(loc=span_of(t), mutable=mut is not None, expr=ast_builder._expr(sub))
    if t.data == "double_reference":
        # `&&x` lexes as one token but means `& &x`
        return Reference(loc=span_of(t), mutable=False, expr=ref)
    return ref


def expr_binary(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    left, op_tree, right = t.children
    return Binary(
        loc=span_of(t),
        op=op_text(op_tree),
        left=ast_builder._expr(left),
        right=ast_builder._expr(right),
    )


def expr_cast(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """expr as type"""
    sub, ty = t.children
    return Cast(loc=span_of(t), expr=ast_builder._expr(sub), ty=ast_builder._type(ty))


def expr_assign(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    if t.data == "compound_assign":
        target, op, value = t.children
        op = str(op)
    else:
        target, value = t.children
        op = "="
    return Assign(
        loc=span_of(t),
        op=op,
        target=ast_builder._expr(target),
        value=ast_builder._expr(value),
    )


def expr_range(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """`a..b`, `a..`, `..b`, `..`, `a..=b`, `..=b`."""
    inclusive = t.data == "range_inclusive"
    if len(t.children) == 2:
        start, end = t.children
    else:
        start, end = None, t.children[0]
    return Range(
        loc=span_of(t),
        start=ast_builder._expr(start) if start is not None else None,
        end=ast_builder._expr(end) if end is not None else None,
        inclusive=inclusive,
    )
