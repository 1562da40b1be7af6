"""
Visitor base classes for the fnerror syntax tree.

Usage:
    1. Subclass NodeVisitor[T] for visitors that return values (the printer)
    2. Subclass RecursiveVisitor for passes that walk a tree (marker search,
       call-site extraction)

Example:
    class CallCounter(RecursiveVisitor):
        def __init__(self):
            self.count = 0

        def visit_call(self, node: Call) -> None:
            self.count += 1
            self.generic_visit(node)  # Continue traversal

    counter = CallCounter()
    counter.visit(block)
"""
from __future__ import annotations
from abc import ABC
from dataclasses import fields, is_dataclass
from typing import Any, TypeVar, Generic

from fnerror.syntax.ast import Node, ItemStmt

T = TypeVar('T')

class NodeVisitor(ABC, Generic[T]):
    """
    Abstract base class for syntax tree visitors.

    Dispatches on the node's class name: a `Call` goes to `visit_call`, a
    `PathType` to `visit_pathtype`.
    """

    def visit(self, node: Any) -> T:
        method_name = f'visit_{type(node).__name__.lower()}'
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Any) -> T:
        raise NotImplementedError(
            f"Visitor {self.__class__.__name__} doesn't handle {type(node).__name__}"
        )


class RecursiveVisitor(NodeVisitor[None]):
    """
    Walks every `Node` reachable through dataclass fields, in field order.

    Type-level syntax (paths, types, generics) is not made of `Node`s and is
    skipped. Subclasses override the visit_* methods they care about and call
    `generic_visit` to keep descending.
    """

    def generic_visit(self, node: Any) -> None:
        if not is_dataclass(node):
            return
        for f in fields(node):
            if f.name == "loc":
                continue
            value = getattr(node, f.name)
            if isinstance(value, Node):
                self.visit(value)
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Node):
                        self.visit(item)

    def visit_itemstmt(self, node: ItemStmt) -> None:
        """Visit a nested item. Default: descend into it."""
        self.visit(node.item)
