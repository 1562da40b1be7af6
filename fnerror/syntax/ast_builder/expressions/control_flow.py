"""Block-like and jump expressions: blocks, if, match, loops, closures, return/break/continue."""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional
from lark import Tree, Token
from fnerror.syntax.ast import (
    Expr, BlockExpr, If, LetCond, Match, MatchArm, Loop, While, ForLoop,
    Return, Break, Continue, Closure, ClosureParam,
)
from fnerror.syntax.ast_builder.utils.tree_navigation import trees
from fnerror.internals.report import span_of

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


def label_of(t: Optional[Tree]) -> Optional[str]:
    """label: LIFETIME ":" """
    if t is None:
        return None
    return str(t.children[0])


def expr_block(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """block_expr: [label] block | unsafe block | async [move] block | const block"""
    ch = t.children
    block = ast_builder._block(ch[-1])
    head = ch[0]
    if isinstance(head, Token):
        if head.type == "ASYNC":
            kind = "async move" if ch[1] is not None else "async"
        else:
            kind = str(head)
        return BlockExpr(loc=span_of(t), block=block, kind=kind)
    return BlockExpr(loc=span_of(t), block=block, label=label_of(head))


def expr_bare_block(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """A `block` in expression position (const generic arguments)."""
    return BlockExpr(loc=span_of(t), block=ast_builder._block(t))


def parse_cond(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    if t.data == "let_cond":
        pat, value = t.children
        return LetCond(loc=span_of(t), pat=ast_builder.pat(pat), expr=ast_builder._expr(value))
    return ast_builder._expr(t)


def expr_if(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    cond, then, orelse = t.children
    else_expr = None
    if orelse is not None:
        if orelse.data == "else_block":
            else_expr = BlockExpr(loc=span_of(orelse), block=ast_builder._block(orelse.children[0]))
        else:
            else_expr = expr_if(orelse, ast_builder)
    return If(
        loc=span_of(t),
        cond=parse_cond(cond, ast_builder),
        then=ast_builder._block(then),
        orelse=else_expr,
    )


def expr_match(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    scrutinee, *rest = t.children
    arms = []
    for arm in trees(rest, "match_arm"):
        attrs, pat, guard, body = arm.children
        arms.append(MatchArm(
            loc=span_of(arm),
            pat=ast_builder.pat(pat),
            body=ast_builder._expr(body),
            guard=ast_builder._expr(guard) if guard is not None else None,
            attrs=ast_builder.attrs(attrs),
        ))
    return Match(
        loc=span_of(t),
        expr=ast_builder._expr(scrutinee),
        arms=arms,
        inner_attrs=[ast_builder.attribute(a) for a in trees(rest, "inner_attr")],
    )


def expr_loop(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    label, body = t.children
    return Loop(loc=span_of(t), body=ast_builder._block(body), label=label_of(label))


def expr_while(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    label, cond, body = t.children
    return While(
        loc=span_of(t),
        cond=parse_cond(cond, ast_builder),
        body=ast_builder._block(body),
        label=label_of(label),
    )


def expr_for(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    label, pat, iterable, body = t.children
    return ForLoop(
        loc=span_of(t),
        pat=ast_builder.pat(pat),
        iter=ast_builder._expr(iterable),
        body=ast_builder._block(body),
        label=label_of(label),
    )


def expr_closure(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """[move] |params| [-> ret] body"""
    move, params_tree, ret, body = t.children
    params = []
    for p in params_tree.children:
        attrs, pat, ty = p.children
        params.append(ClosureParam(
            loc=span_of(p),
            pat=ast_builder.pat(pat),
            ty=ast_builder._type(ty) if ty is not None else None,
            attrs=ast_builder.attrs(attrs),
        ))
    return Closure(
        loc=span_of(t),
        params=params,
        body=ast_builder._expr(body),
        ret=ast_builder.type_parser.parse_ret_type(ret),
        is_move=move is not None,
    )


def expr_return(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    value = t.children[0]
    return Return(loc=span_of(t), value=ast_builder._expr(value) if value is not None else None)


def expr_break(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    label, value = t.children
    return Break(
        loc=span_of(t),
        label=str(label) if label is not None else None,
        value=ast_builder._expr(value) if value is not None else None,
    )


def expr_continue(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    label = t.children[0]
    return Continue(loc=span_of(t), label=str(label) if label is not None else None)
