"""Tree navigation utilities for traversing Lark parse trees."""
from __future__ import annotations
from typing import List, Optional, Callable
from lark import Tree, Token


def first(children: List[object], pred: Callable) -> Optional[object]:
    """Find first child matching predicate."""
    for ch in children:
        if pred(ch):
            return ch
    return None


def first_token(children: List[object], *types: str) -> Optional[Token]:
    """Get first token of one of `types` (any token if none given)."""
    return first(children, lambda c: isinstance(c, Token) and (not types or c.type in types))  # type: ignore[return-value]


def first_tree(children: List[object], data: str) -> Optional[Tree]:
    """Get first Tree child with specific data tag."""
    return first(children, lambda c: isinstance(c, Tree) and c.data == data)  # type: ignore[return-value]


def trees(children: List[object], *data: str) -> List[Tree]:
    """All Tree children, optionally restricted to the given data tags."""
    return [c for c in children if isinstance(c, Tree) and (not data or c.data in data)]


def tokens(children: List[object], *types: str) -> List[Token]:
    """All Token children, optionally restricted to the given token types."""
    return [c for c in children if isinstance(c, Token) and (not types or c.type in types)]


def has_token(children: List[object], type_: str) -> bool:
    return first_token(children, type_) is not None


def is_tree(node: object, data: str) -> bool:
    return isinstance(node, Tree) and node.data == data
