# syntax/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

from fnerror.internals.report import Span
from fnerror.syntax.typesys import Path, AngleArgs, Generics, TypeNode

# === Core node base ===

@dataclass
class Node:
    loc: Optional[Span]

@dataclass
class Expr(Node):
    pass

@dataclass
class Stmt(Node):
    pass

@dataclass
class Item(Node):
    pass

# === Verbatim fragments ===

@dataclass
class Attribute(Node):
    path: Path
    tokens: Optional[str] = None     # attribute input as written: "(Debug, Clone)" or "= \"doc\""
    inner: bool = False              # #![...]

    def is_ident(self, name: str) -> bool:
        return self.path.get_ident() == name

@dataclass
class Pat(Node):
    """A pattern, kept as its source text."""
    text: str

# === Expressions ===
#
# Every expression carries its outer attributes (`#[attr] expr`) in `attrs`.

@dataclass
class Lit(Expr):
    kind: str                        # "str", "char", "int", "float", "bool"
    text: str
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class PathExpr(Expr):
    path: Path
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Call(Expr):
    func: Expr
    args: List[Expr]
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class MethodCall(Expr):
    receiver: Expr
    method: str
    args: List[Expr]
    turbofish: Optional[AngleArgs] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Field(Expr):
    base: Expr
    member: str
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Await(Expr):
    base: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Index(Expr):
    base: Expr
    index: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Try(Expr):
    expr: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Unary(Expr):
    op: str                          # "-", "!", "*"
    expr: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Reference(Expr):
    mutable: bool
    expr: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Binary(Expr):
    op: str
    left: Expr
    right: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Cast(Expr):
    expr: Expr
    ty: TypeNode
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Assign(Expr):
    op: str                          # "=" or a compound operator such as "+="
    target: Expr
    value: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Range(Expr):
    start: Optional[Expr]
    end: Optional[Expr]
    inclusive: bool = False
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class ClosureParam(Node):
    pat: Pat
    ty: Optional[TypeNode] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Closure(Expr):
    params: List[ClosureParam]
    body: Expr
    ret: Optional[TypeNode] = None
    is_move: bool = False
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Paren(Expr):
    expr: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Tuple(Expr):
    elems: List[Expr]
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Array(Expr):
    elems: List[Expr]
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class ArrayRepeat(Expr):
    value: Expr
    count: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class FieldValue(Node):
    name: str
    value: Optional[Expr] = None     # None for shorthand `Foo { x }`

@dataclass
class StructLit(Expr):
    path: Path
    fields: List[FieldValue]
    base: Optional[Expr] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class MacroCall(Expr):
    path: Path
    tokens: str                      # delimited token tree as written
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Return(Expr):
    value: Optional[Expr] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Break(Expr):
    label: Optional[str] = None
    value: Optional[Expr] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Continue(Expr):
    label: Optional[str] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class BlockExpr(Expr):
    block: "Block"
    label: Optional[str] = None
    kind: str = ""                   # "", "unsafe", "async", "async move", "const"
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class LetCond(Expr):
    """`let PAT = EXPR` in `if let` / `while let` conditions."""
    pat: Pat
    expr: Expr
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class If(Expr):
    cond: Expr
    then: "Block"
    orelse: Optional[Expr] = None    # BlockExpr or If
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class MatchArm(Node):
    pat: Pat
    body: Expr
    guard: Optional[Expr] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Match(Expr):
    expr: Expr
    arms: List[MatchArm]
    inner_attrs: List[Attribute] = field(default_factory=list)
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Loop(Expr):
    body: "Block"
    label: Optional[str] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class While(Expr):
    cond: Expr
    body: "Block"
    label: Optional[str] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class ForLoop(Expr):
    pat: Pat
    iter: Expr
    body: "Block"
    label: Optional[str] = None
    attrs: List[Attribute] = field(default_factory=list)

# === Statements ===

@dataclass
class Block(Node):
    stmts: List[Stmt]
    inner_attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Let(Stmt):
    pat: Pat
    ty: Optional[TypeNode] = None
    init: Optional[Expr] = None
    diverge: Optional[Block] = None  # let-else
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class ExprStmt(Stmt):
    expr: Expr
    semi: bool                       # False for tail expressions and block-like statements

@dataclass
class ItemStmt(Stmt):
    item: Item

@dataclass
class EmptyStmt(Stmt):
    pass

# === Items ===
#
# `source` holds the item's text as written (continuation lines dedented to
# the item's own indentation). Items without `source` are printed from the tree.

@dataclass
class SelfArg(Node):
    reference: bool
    mutable: bool
    lifetime: Optional[str] = None
    ty: Optional[TypeNode] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class TypedArg(Node):
    pat: Pat
    ty: TypeNode
    attrs: List[Attribute] = field(default_factory=list)

FnArg = Union[SelfArg, TypedArg]

@dataclass
class Signature(Node):
    name: str
    generics: Generics
    inputs: List[FnArg]
    output: Optional[TypeNode] = None
    qualifiers: List[str] = field(default_factory=list)   # "const", "async", "unsafe", 'extern "C"'

@dataclass
class FnItem(Item):
    attrs: List[Attribute]
    vis: Optional[str]
    sig: Signature
    body: Optional[Block]
    source: Optional[str] = None

@dataclass
class VariantField(Node):
    ty: TypeNode
    name: Optional[str] = None
    vis: Optional[str] = None
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class Variant(Node):
    name: str
    fields: List[VariantField]
    attrs: List[Attribute] = field(default_factory=list)

@dataclass
class EnumItem(Item):
    attrs: List[Attribute]
    vis: Optional[str]
    name: str
    generics: Generics
    variants: List[Variant]
    source: Optional[str] = None

@dataclass
class ModItem(Item):
    attrs: List[Attribute]
    name: str
    items: Optional[List[Item]]      # None for `mod foo;`
    source: Optional[str] = None

@dataclass
class ImplItem(Item):
    attrs: List[Attribute]
    items: List[Item]
    source: Optional[str] = None

@dataclass
class TraitItem(Item):
    attrs: List[Attribute]
    name: str
    items: List[Item]
    source: Optional[str] = None

@dataclass
class OtherItem(Item):
    """Any other item (struct, enum, const, use, macro, ...), kept verbatim."""
    attrs: List[Attribute]
    kind: str
    source: Optional[str] = None

@dataclass
class File(Node):
    items: List[Item]
    inner_attrs: List[Attribute] = field(default_factory=list)
