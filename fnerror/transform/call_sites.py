"""
Discovery and rewriting of `#[fnerr]` call sites.

    Err(#[fnerr] NotFound("no entry for {}", key as String))

becomes

    Err(LookupError::NotFound(key))

and records the site `NotFound("no entry for {}", (String,))` for the enum.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from fnerror.internals.errors import ERR, raise_fatal
from fnerror.internals.report import Span
from fnerror.syntax.ast import Block, Call, Cast, Expr, ItemStmt, PathExpr
from fnerror.syntax.printer import print_expr
from fnerror.syntax.typesys import Generics, Path, PathSegment, TypeNode
from fnerror.syntax.visitors import RecursiveVisitor
from fnerror.transform.constants import CALL_MARKER
from fnerror.transform.generics import GenericsResolver, UsedGenerics


@dataclass(frozen=True)
class ErrorSite:
    tag: str
    template: Expr
    field_types: Tuple[TypeNode, ...]
    loc: Optional[Span] = None


@dataclass
class Extraction:
    block: Block
    sites: List[ErrorSite]
    used: UsedGenerics


class CallSiteExtractor(RecursiveVisitor):
    """Strips `#[fnerr]` markers from a function body and rewrites the marked calls.

    Sites are collected in pre-order, left to right. Nested items are opaque:
    markers inside a nested fn belong to that fn.
    """

    def __init__(self, error_ident: str, declared: Generics):
        self.error_ident = error_ident
        self.declared = declared
        self.sites: List[ErrorSite] = []
        self.used = UsedGenerics()
        self.resolver = GenericsResolver(declared, self.used)
        self._by_tag: Dict[str, ErrorSite] = {}

    def extract(self, block: Block) -> Extraction:
        self.visit(block)
        return Extraction(block=block, sites=self.sites, used=self.used)

    def visit(self, node) -> None:
        if isinstance(node, Expr) and self._take_marker(node):
            self._rewrite_site(node)
            return
        super().visit(node)

    def visit_itemstmt(self, node: ItemStmt) -> None:
        pass

    def _take_marker(self, expr: Expr) -> bool:
        kept = [a for a in expr.attrs if not a.is_ident(CALL_MARKER)]
        marked = len(kept) != len(expr.attrs)
        expr.attrs = kept
        return marked

    def _rewrite_site(self, node: Expr) -> None:
        if not isinstance(node, Call):
            raise_fatal(ERR.FE3004, node.loc, found=print_expr(node))

        tag = node.func.path.get_ident() if isinstance(node.func, PathExpr) else None
        if tag is None:
            raise_fatal(ERR.FE3001, node.func.loc, found=print_expr(node.func))

        if not node.args:
            raise_fatal(ERR.FE3002, node.loc, name=tag)

        template, *payload = node.args
        values: List[Expr] = []
        field_types: List[TypeNode] = []
        for arg in payload:
            if not isinstance(arg, Cast) or arg.attrs:
                raise_fatal(ERR.FE3003, arg.loc, found=print_expr(arg))
            self.resolver.resolve_type(arg.ty)
            values.append(arg.expr)
            field_types.append(arg.ty)

        first = self._by_tag.get(tag)
        if first is not None:
            raise_fatal(ERR.FE3005, node.loc, name=tag, line=first.loc.line if first.loc else "?")

        site = ErrorSite(tag=tag, template=template, field_types=tuple(field_types), loc=node.loc)
        self._by_tag[tag] = site
        self.sites.append(site)

        callee_loc = node.func.loc
        node.func = PathExpr(loc=callee_loc, path=Path(loc=callee_loc, segments=[
            PathSegment(loc=None, ident=self.error_ident),
            PathSegment(loc=callee_loc, ident=tag),
        ]))
        node.args = values

        for value in values:
            self.visit(value)
