"""Function declaration parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional
from lark import Tree
from fnerror.syntax.ast import FnItem, Signature, SelfArg, TypedArg, FnArg
from fnerror.internals.report import span_of

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


def parse_qualifiers(t: Tree) -> List[str]:
    """fn_quals: [const] [async] [unsafe] [extern ["ABI"]]"""
    const, async_, unsafe, abi = t.children
    quals = [str(tok) for tok in (const, async_, unsafe) if tok is not None]
    if abi is not None:
        _extern, name = abi.children
        quals.append(f"extern {name}" if name is not None else "extern")
    return quals


def parse_params(t: Optional[Tree], ast_builder: 'ASTBuilder') -> List[FnArg]:
    if t is None:
        return []
    params: List[FnArg] = []
    for p in t.children:
        loc = span_of(p)
        if p.data == "ref_self_param":
            attrs, lifetime, mut, _self = p.children
            params.append(SelfArg(
                loc=loc,
                reference=True,
                mutable=mut is not None,
                lifetime=str(lifetime) if lifetime is not None else None,
                attrs=ast_builder.attrs(attrs),
            ))
        elif p.data == "value_self_param":
            attrs, mut, _self, ty = p.children
            params.append(SelfArg(
                loc=loc,
                reference=False,
                mutable=mut is not None,
                ty=ast_builder._type(ty) if ty is not None else None,
                attrs=ast_builder.attrs(attrs),
            ))
        else:
            attrs, pat, ty = p.children
            params.append(TypedArg(
                loc=loc,
                pat=ast_builder.pat(pat),
                ty=ast_builder._type(ty),
                attrs=ast_builder.attrs(attrs),
            ))
    return params


def parse_fn_item(t: Tree, ast_builder: 'ASTBuilder') -> FnItem:
    """Parse a function declaration.

    fn_item: attrs [visibility] fn_quals "fn" NAME [generic_params]
             "(" [fn_params] ")" [ret_type] [where_clause] (block | ";")
    """
    (attrs, vis, quals, name, gparams, params,
     ret, where, body) = t.children

    sig = Signature(
        loc=span_of(t),
        name=str(name),
        generics=ast_builder.type_parser.parse_generics(gparams, where),
        inputs=parse_params(params, ast_builder),
        output=ast_builder.type_parser.parse_ret_type(ret),
        qualifiers=parse_qualifiers(quals),
    )

    return FnItem(
        loc=span_of(t),
        attrs=ast_builder.attrs(attrs),
        vis=ast_builder.visibility(vis),
        sig=sig,
        body=ast_builder._block(body) if body.data == "block" else None,
        source=ast_builder.verbatim(t),
    )
