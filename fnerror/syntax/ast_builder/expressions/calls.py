"""Call, member access and struct literal parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional
from lark import Tree
from fnerror.syntax.ast import (
    Expr, Call, MethodCall, Field, Await, Index, Try, StructLit, FieldValue, MacroCall,
)
from fnerror.internals.report import span_of

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


def call_args(t: Optional[Tree], ast_builder: 'ASTBuilder') -> List[Expr]:
    if t is None:
        return []
    return [ast_builder._expr(a) for a in t.children]


def expr_call(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """callee(args)

    `recv.name(args)` can also come out of the parser as a call whose callee is
    a field access; it is folded into a MethodCall so both readings agree.
    """
    callee_tree, args_tree = t.children
    callee = ast_builder._expr(callee_tree)
    args = call_args(args_tree, ast_builder)
    if (callee_tree.data == "field" and isinstance(callee, Field)
            and not callee.attrs and callee.member.isidentifier()):
        return MethodCall(loc=span_of(t), receiver=callee.base, method=callee.member, args=args)
    return Call(loc=span_of(t), func=callee, args=args)


def expr_method_call(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    recv, name, turbofish, args_tree = t.children
    return MethodCall(
        loc=span_of(t),
        receiver=ast_builder._expr(recv),
        method=str(name),
        args=call_args(args_tree, ast_builder),
        turbofish=(ast_builder.type_parser.parse_generic_args(turbofish.children[0], turbofish=True)
                   if turbofish is not None else None),
    )


def expr_field(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    base_tree, member = t.children
    base = ast_builder._expr(base_tree)
    if member.type == "FLOAT":
        # `t.0.1` lexes the member as the float `0.1`
        outer = base
        for part in str(member).split("."):
            outer = Field(loc=span_of(t), base=outer, member=part)
        return outer
    return Field(loc=span_of(t), base=base, member=str(member))


def expr_await(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    return Await(loc=span_of(t), base=ast_builder._expr(t.children[0]))


def expr_index(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    base, index = t.children
    return Index(loc=span_of(t), base=ast_builder._expr(base), index=ast_builder._expr(index))


def expr_try(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    return Try(loc=span_of(t), expr=ast_builder._expr(t.children[0]))


def expr_struct(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """Path { field: value, shorthand, ..base }"""
    path_tree, fields_tree = t.children
    fields: List[FieldValue] = []
    base = None
    if fields_tree is not None:
        for f in fields_tree.children:
            if f.data == "named_field_value":
                name, value = f.children
                fields.append(FieldValue(loc=span_of(f), name=str(name), value=ast_builder._expr(value)))
            elif f.data == "shorthand_field_value":
                fields.append(FieldValue(loc=span_of(f), name=str(f.children[0])))
            elif f.data == "struct_base":
                base = ast_builder._expr(f.children[0])
    return StructLit(
        loc=span_of(t),
        path=ast_builder.type_parser.parse_expr_path(path_tree),
        fields=fields,
        base=base,
    )


def expr_macro_call(t: Tree, ast_builder: 'ASTBuilder') -> Expr:
    """path!(tokens): the token tree is kept as written."""
    path_tree, tt = t.children
    return MacroCall(
        loc=span_of(t),
        path=ast_builder.type_parser.parse_simple_path(path_tree),
        tokens=ast_builder.verbatim(tt),
    )
