# syntax/typesys.py
"""Type-level syntax: paths, generic arguments, types, bounds and generic parameters."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union, TYPE_CHECKING

from fnerror.internals.report import Span

if TYPE_CHECKING:
    from fnerror.syntax.ast import Attribute, Expr


# === Paths ===

@dataclass
class PathSegment:
    loc: Optional[Span]
    ident: str
    args: Optional["PathArgs"] = None

@dataclass
class Path:
    loc: Optional[Span]
    segments: List[PathSegment]
    leading_colon: bool = False

    def get_ident(self) -> Optional[str]:
        """Return the identifier if this path is a single bare segment (`foo`, not `::foo` or `foo<T>`)."""
        if self.leading_colon or len(self.segments) != 1:
            return None
        seg = self.segments[0]
        return seg.ident if seg.args is None else None

    def idents(self) -> List[str]:
        return [seg.ident for seg in self.segments]

    @property
    def last(self) -> PathSegment:
        return self.segments[-1]

@dataclass
class AngleArgs:
    """`<'a, T, N, Item = U>`; `turbofish` marks the expression form `::<...>`."""
    loc: Optional[Span]
    args: List["GenericArg"]
    turbofish: bool = False

@dataclass
class ParenArgs:
    """Fn-sugar arguments: `Fn(A, B) -> C`."""
    loc: Optional[Span]
    inputs: List["TypeNode"]
    output: Optional["TypeNode"] = None

PathArgs = Union[AngleArgs, ParenArgs]


# === Generic arguments ===

@dataclass
class LifetimeArg:
    loc: Optional[Span]
    name: str

@dataclass
class TypeArg:
    loc: Optional[Span]
    ty: "TypeNode"

@dataclass
class ConstArg:
    loc: Optional[Span]
    value: "Expr"

@dataclass
class AssocArg:
    """Associated type binding, `Item = T`."""
    loc: Optional[Span]
    name: str
    ty: "TypeNode"
    args: Optional[AngleArgs] = None

GenericArg = Union[LifetimeArg, TypeArg, ConstArg, AssocArg]


# === Types ===

@dataclass
class TypeNode:
    loc: Optional[Span]

@dataclass
class PathType(TypeNode):
    path: Path

@dataclass
class RefType(TypeNode):
    lifetime: Optional[str]
    mutable: bool
    elem: TypeNode

@dataclass
class PtrType(TypeNode):
    mutable: bool
    elem: TypeNode

@dataclass
class TupleType(TypeNode):
    elems: List[TypeNode]

@dataclass
class ParenType(TypeNode):
    elem: TypeNode

@dataclass
class SliceType(TypeNode):
    elem: TypeNode

@dataclass
class ArrayType(TypeNode):
    elem: TypeNode
    length: "Expr"

@dataclass
class NeverType(TypeNode):
    pass

@dataclass
class InferType(TypeNode):
    pass

@dataclass
class FnPtrType(TypeNode):
    inputs: List[TypeNode]
    output: Optional[TypeNode] = None
    unsafe: bool = False
    for_lifetimes: List[str] = field(default_factory=list)

@dataclass
class TraitObjectType(TypeNode):
    bounds: List["TypeBound"]
    dyn: bool = True

@dataclass
class ImplTraitType(TypeNode):
    bounds: List["TypeBound"]


# === Bounds ===

@dataclass
class LifetimeBound:
    loc: Optional[Span]
    name: str

@dataclass
class TraitBound:
    loc: Optional[Span]
    path: Path
    maybe: bool = False                                   # ?Sized
    for_lifetimes: List[str] = field(default_factory=list)

TypeBound = Union[LifetimeBound, TraitBound]


# === Generic parameters ===

@dataclass
class LifetimeParam:
    loc: Optional[Span]
    name: str                                     # includes the quote: 'a
    bounds: List[str] = field(default_factory=list)
    attrs: List["Attribute"] = field(default_factory=list)

@dataclass
class TypeParam:
    loc: Optional[Span]
    name: str
    bounds: List[TypeBound] = field(default_factory=list)
    default: Optional[TypeNode] = None
    attrs: List["Attribute"] = field(default_factory=list)

@dataclass
class ConstParam:
    loc: Optional[Span]
    name: str
    ty: TypeNode
    default: Optional["Expr"] = None
    attrs: List["Attribute"] = field(default_factory=list)

GenericParam = Union[LifetimeParam, TypeParam, ConstParam]


def param_kind(param: GenericParam) -> str:
    """Kind tag used for membership checks: 'lifetime', 'type' or 'const'."""
    if isinstance(param, LifetimeParam):
        return "lifetime"
    if isinstance(param, ConstParam):
        return "const"
    return "type"


# === Where clauses ===

@dataclass
class LifetimePredicate:
    loc: Optional[Span]
    name: str
    bounds: List[str]

@dataclass
class TypePredicate:
    loc: Optional[Span]
    bounded: TypeNode
    bounds: List[TypeBound]
    for_lifetimes: List[str] = field(default_factory=list)

WherePredicate = Union[LifetimePredicate, TypePredicate]


@dataclass
class Generics:
    loc: Optional[Span]
    params: List[GenericParam] = field(default_factory=list)
    where: List[WherePredicate] = field(default_factory=list)

    def lifetimes(self) -> List[LifetimeParam]:
        return [p for p in self.params if isinstance(p, LifetimeParam)]

    def type_params(self) -> List[TypeParam]:
        return [p for p in self.params if isinstance(p, TypeParam)]

    def const_params(self) -> List[ConstParam]:
        return [p for p in self.params if isinstance(p, ConstParam)]

    def find(self, kind: str, name: str) -> Optional[GenericParam]:
        for p in self.params:
            if param_kind(p) == kind and p.name == name:
                return p
        return None

    def __bool__(self) -> bool:
        return bool(self.params or self.where)
