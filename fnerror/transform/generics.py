"""
Generic parameter resolution for the synthesized error enum.

The resolver walks the field types of every error site and records which of
the function's declared generic parameters they reference. The result is the
minimal parameter list the enum must declare, in the order Rust requires
(lifetimes first) and otherwise in first-encounter order.
"""
from __future__ import annotations
from dataclasses import replace
from typing import Iterator, List, Optional, Set, Tuple, Union

from fnerror.internals.errors import ERR, raise_fatal
from fnerror.syntax.ast import Expr, PathExpr, Paren, Unary, Binary, Cast, BlockExpr, ExprStmt
from fnerror.syntax.typesys import (
    Generics, GenericParam, LifetimeParam, TypeParam, ConstParam, param_kind,
    GenericArg, LifetimeArg, TypeArg, ConstArg, AssocArg, AngleArgs, ParenArgs, Path,
    TypeNode, PathType, RefType, PtrType, TupleType, ParenType, SliceType, ArrayType,
    FnPtrType, TraitObjectType, ImplTraitType, LifetimeBound, TraitBound,
    LifetimePredicate, TypePredicate, WherePredicate,
)
from fnerror.syntax.printer import print_type
from fnerror.syntax.visitors import NodeVisitor
from fnerror.transform.names import path_from_ident

ParamKey = Tuple[str, str]


class UsedGenerics:
    """Ordered, duplicate-free subset of a function's generic parameters.

    Lifetimes and type/const parameters are kept in separate runs so the
    lifetimes always come first; each run keeps first-encounter order.
    Membership is keyed by (kind, name).
    """

    def __init__(self) -> None:
        self._lifetimes: List[LifetimeParam] = []
        self._others: List[Union[TypeParam, ConstParam]] = []
        self._seen: Set[ParamKey] = set()

    def add(self, param: GenericParam) -> bool:
        """Record `param`; returns False if it was already present."""
        key = (param_kind(param), param.name)
        if key in self._seen:
            return False
        self._seen.add(key)
        if isinstance(param, LifetimeParam):
            self._lifetimes.append(param)
        else:
            self._others.append(param)
        return True

    def __contains__(self, key: ParamKey) -> bool:
        return key in self._seen

    def __iter__(self) -> Iterator[GenericParam]:
        return iter(self.params())

    def __len__(self) -> int:
        return len(self._seen)

    def __bool__(self) -> bool:
        return bool(self._seen)

    def keys(self) -> Set[ParamKey]:
        return set(self._seen)

    def names(self) -> List[str]:
        return [p.name for p in self.params()]

    def params(self) -> List[GenericParam]:
        """Declaration form, as the parameters were declared on the function."""
        return [*self._lifetimes, *self._others]

    def arguments(self) -> List[GenericArg]:
        """Argument form: `'a, T, N` for use in `Name<'a, T, N>`."""
        args: List[GenericArg] = []
        for p in self.params():
            if isinstance(p, LifetimeParam):
                args.append(LifetimeArg(loc=None, name=p.name))
            elif isinstance(p, ConstParam):
                args.append(ConstArg(loc=None, value=PathExpr(loc=None, path=path_from_ident(p.name))))
            else:
                args.append(TypeArg(loc=None, ty=PathType(loc=None, path=path_from_ident(p.name))))
        return args


class GenericsResolver(NodeVisitor[None]):
    """Records the declared generics referenced by a type or expression into `found`.

    With strict=True (field types of error sites) a reference without an
    explicit lifetime is fatal; the non-strict form is used to inspect
    bounds and where predicates.
    """

    def __init__(self, declared: Generics, found: UsedGenerics, strict: bool = True):
        self.declared = declared
        self.found = found
        self.strict = strict

    def resolve_type(self, ty: TypeNode) -> None:
        self.visit(ty)

    def resolve_expr(self, expr: Expr) -> None:
        self.visit(expr)

    def _record(self, kind: str, name: str) -> bool:
        param = self.declared.find(kind, name)
        if param is None:
            return False
        self.found.add(param)
        return True

    def generic_visit(self, node) -> None:
        # Literals, calls and other expressions never name a generic parameter
        return None

    # --- types

    def visit_reftype(self, t: RefType) -> None:
        if t.lifetime is None:
            if self.strict:
                raise_fatal(ERR.FE4001, t.loc, found=print_type(t))
        else:
            self._record("lifetime", t.lifetime)
        self.visit(t.elem)

    def visit_pathtype(self, t: PathType) -> None:
        path = t.path
        if self._record("type", path.last.ident):
            return
        ident = path.get_ident()
        if ident is not None and self._record("const", ident):
            # `Buffer<N>`: a bare const parameter parses as a type argument
            return
        if len(path.segments) > 1 and not path.leading_colon:
            # `T::Err` is a projection out of T
            self._record("type", path.segments[0].ident)
        self.visit(path)

    def visit_path(self, p: Path) -> None:
        for seg in p.segments:
            if seg.args is not None:
                self.visit(seg.args)

    def visit_angleargs(self, a: AngleArgs) -> None:
        for arg in a.args:
            self.visit(arg)

    def visit_parenargs(self, a: ParenArgs) -> None:
        for ty in a.inputs:
            self.visit(ty)
        if a.output is not None:
            self.visit(a.output)

    def visit_lifetimearg(self, a: LifetimeArg) -> None:
        self._record("lifetime", a.name)

    def visit_typearg(self, a: TypeArg) -> None:
        self.visit(a.ty)

    def visit_constarg(self, a: ConstArg) -> None:
        self.visit(a.value)

    def visit_assocarg(self, a: AssocArg) -> None:
        if a.args is not None:
            self.visit(a.args)
        self.visit(a.ty)

    def visit_tupletype(self, t: TupleType) -> None:
        for elem in t.elems:
            self.visit(elem)

    def visit_parentype(self, t: ParenType) -> None:
        self.visit(t.elem)

    def visit_slicetype(self, t: SliceType) -> None:
        self.visit(t.elem)

    def visit_ptrtype(self, t: PtrType) -> None:
        self.visit(t.elem)

    def visit_arraytype(self, t: ArrayType) -> None:
        self.visit(t.elem)
        self.visit(t.length)

    def visit_fnptrtype(self, t: FnPtrType) -> None:
        for ty in t.inputs:
            self.visit(ty)
        if t.output is not None:
            self.visit(t.output)

    def visit_traitobjecttype(self, t: TraitObjectType) -> None:
        for b in t.bounds:
            self.visit(b)

    def visit_impltraittype(self, t: ImplTraitType) -> None:
        for b in t.bounds:
            self.visit(b)

    def visit_lifetimebound(self, b: LifetimeBound) -> None:
        self._record("lifetime", b.name)

    def visit_traitbound(self, b: TraitBound) -> None:
        self.visit(b.path)

    # --- expressions (array lengths, const arguments)

    def visit_pathexpr(self, e: PathExpr) -> None:
        ident = e.path.get_ident()
        if ident is not None:
            self._record("const", ident)

    def visit_paren(self, e: Paren) -> None:
        self.visit(e.expr)

    def visit_unary(self, e: Unary) -> None:
        self.visit(e.expr)

    def visit_binary(self, e: Binary) -> None:
        self.visit(e.left)
        self.visit(e.right)

    def visit_cast(self, e: Cast) -> None:
        self.visit(e.expr)

    def visit_blockexpr(self, e: BlockExpr) -> None:
        for stmt in e.block.stmts:
            if isinstance(stmt, ExprStmt):
                self.visit(stmt.expr)


def mentioned(declared: Generics, node) -> Set[ParamKey]:
    """Keys of the declared parameters that `node` (type, bound or expression) refers to."""
    found = UsedGenerics()
    GenericsResolver(declared, found, strict=False).visit(node)
    return found.keys()


def _predicate_subject(pred: WherePredicate) -> Optional[ParamKey]:
    if isinstance(pred, LifetimePredicate):
        return ("lifetime", pred.name)
    if isinstance(pred.bounded, PathType) and not pred.bounded.path.leading_colon:
        return ("type", pred.bounded.path.segments[0].ident)
    return None


def generic_declaration(declared: Generics, used: UsedGenerics) -> Generics:
    """Declaration form of `used` for the enum: `<'a, T: Display> where T: Clone`.

    Each parameter keeps the bounds that only mention used parameters, and a
    where predicate is kept when its subject is used and some of its bounds
    survive. Defaults are dropped.
    """
    keys = used.keys()

    def keeps(node) -> bool:
        return mentioned(declared, node) <= keys

    params: List[GenericParam] = []
    for p in used.params():
        if isinstance(p, LifetimeParam):
            bounds = [b for b in p.bounds if declared.find("lifetime", b) is None or ("lifetime", b) in keys]
            params.append(replace(p, loc=None, bounds=bounds))
        elif isinstance(p, TypeParam):
            params.append(replace(p, loc=None, bounds=[b for b in p.bounds if keeps(b)], default=None))
        else:
            params.append(replace(p, loc=None, default=None))

    where: List[WherePredicate] = []
    for pred in declared.where:
        subject = _predicate_subject(pred)
        if subject is None or subject not in keys:
            continue
        if isinstance(pred, LifetimePredicate):
            bounds = [b for b in pred.bounds if declared.find("lifetime", b) is None or ("lifetime", b) in keys]
            if bounds:
                where.append(replace(pred, loc=None, bounds=bounds))
        else:
            if not keeps(pred.bounded):
                continue
            bounds = [b for b in pred.bounds if keeps(b)]
            if bounds:
                where.append(replace(pred, loc=None, bounds=bounds))

    return Generics(loc=None, params=params, where=where)
