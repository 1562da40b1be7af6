"""Item dispatch: functions, modules, impl and trait blocks, and verbatim items."""
from __future__ import annotations
from typing import TYPE_CHECKING, List
from lark import Tree
from fnerror.syntax.ast import Item, ModItem, ImplItem, TraitItem, OtherItem
from fnerror.syntax.ast_builder.declarations.functions import parse_fn_item
from fnerror.internals.report import span_of

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


ASSOC_ITEMS = {"fn_item", "const_item", "type_alias", "macro_item"}

# Fixed child positions before the inner attributes and member items.
MOD_BODY_START = 3
IMPL_BODY_START = 7
TRAIT_BODY_START = 7


def member_items(children: list, start: int, allowed: set, ast_builder: 'ASTBuilder') -> List[Item]:
    return [parse_item(c, ast_builder) for c in children[start:]
            if isinstance(c, Tree) and c.data in allowed]


def parse_item(t: Tree, ast_builder: 'ASTBuilder') -> Item:
    tag = t.data
    loc = span_of(t)

    if tag == "fn_item":
        return parse_fn_item(t, ast_builder)

    attrs = ast_builder.attrs(t.children[0])
    source = ast_builder.verbatim(t)

    if tag == "mod_item":
        name = str(t.children[2])
        items = None
        if ast_builder.text(t).rstrip().endswith("}"):
            items = [parse_item(c, ast_builder) for c in t.children[MOD_BODY_START:]
                     if isinstance(c, Tree) and c.data != "inner_attr"]
        return ModItem(loc=loc, attrs=attrs, name=name, items=items, source=source)

    if tag == "impl_item":
        items = member_items(t.children, IMPL_BODY_START, ASSOC_ITEMS, ast_builder)
        return ImplItem(loc=loc, attrs=attrs, items=items, source=source)

    if tag == "trait_item":
        items = member_items(t.children, TRAIT_BODY_START, ASSOC_ITEMS, ast_builder)
        return TraitItem(loc=loc, attrs=attrs, name=str(t.children[3]), items=items, source=source)

    return OtherItem(loc=loc, attrs=attrs, kind=tag, source=source)
