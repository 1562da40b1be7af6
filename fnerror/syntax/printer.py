"""
Rust source printer for the fnerror syntax tree.

Every visit_* method returns the node's text. The first line carries no
indentation; continuation lines are indented absolutely for the current
nesting level, so a caller places the result after its own indentation.

Items that still carry their `source` text are reproduced as written;
rewritten items (source=None) are printed from the tree in rustfmt's layout.
"""
from __future__ import annotations
from typing import List, Optional

from fnerror.internals.errors import raise_internal_error
from fnerror.syntax.ast import (
    Attribute, Pat, Lit, PathExpr, Call, MethodCall, Field, Await, Index, Try, Unary,
    Reference, Binary, Cast, Assign, Range, ClosureParam, Closure, Paren, Tuple, Array,
    ArrayRepeat, FieldValue, StructLit, MacroCall, Return, Break, Continue, BlockExpr,
    LetCond, If, MatchArm, Match, Loop, While, ForLoop, Block, Let, ExprStmt, ItemStmt,
    EmptyStmt, SelfArg, TypedArg, Signature, FnItem, VariantField, Variant, EnumItem,
    ModItem, ImplItem, TraitItem, OtherItem, File, Expr, Item,
)
from fnerror.syntax.typesys import (
    Path, PathSegment, AngleArgs, ParenArgs, LifetimeArg, TypeArg, ConstArg, AssocArg,
    PathType, RefType, PtrType, TupleType, ParenType, SliceType, ArrayType, NeverType,
    InferType, FnPtrType, TraitObjectType, ImplTraitType, LifetimeBound, TraitBound,
    LifetimeParam, TypeParam, ConstParam, LifetimePredicate, TypePredicate, Generics,
    TypeNode, WherePredicate,
)
from fnerror.syntax.visitors import NodeVisitor
from fnerror.syntax.ast_builder.utils.string_processing import indent_continuation

INDENT = "    "


class Printer(NodeVisitor[str]):
    def __init__(self, level: int = 0):
        self.level = level

    @property
    def ind(self) -> str:
        return INDENT * self.level

    def generic_visit(self, node) -> str:
        raise_internal_error("FE9001", node=type(node).__name__)

    def verbatim(self, text: str) -> str:
        return indent_continuation(text, self.ind)

    def join(self, nodes, sep: str = ", ") -> str:
        return sep.join(self.visit(n) for n in nodes)

    # ------------------------
    # Paths and generic arguments
    # ------------------------

    def visit_path(self, p: Path) -> str:
        text = "::".join(self.visit(seg) for seg in p.segments)
        return f"::{text}" if p.leading_colon else text

    def visit_pathsegment(self, seg: PathSegment) -> str:
        if seg.args is None:
            return seg.ident
        return seg.ident + self.visit(seg.args)

    def visit_angleargs(self, a: AngleArgs) -> str:
        prefix = "::" if a.turbofish else ""
        return f"{prefix}<{self.join(a.args)}>"

    def visit_parenargs(self, a: ParenArgs) -> str:
        text = f"({self.join(a.inputs)})"
        if a.output is not None:
            text += f" -> {self.visit(a.output)}"
        return text

    def visit_lifetimearg(self, a: LifetimeArg) -> str:
        return a.name

    def visit_typearg(self, a: TypeArg) -> str:
        return self.visit(a.ty)

    def visit_constarg(self, a: ConstArg) -> str:
        return self.visit(a.value)

    def visit_assocarg(self, a: AssocArg) -> str:
        args = self.visit(a.args) if a.args is not None else ""
        return f"{a.name}{args} = {self.visit(a.ty)}"

    # ------------------------
    # Types
    # ------------------------

    def visit_pathtype(self, t: PathType) -> str:
        return self.visit(t.path)

    def visit_reftype(self, t: RefType) -> str:
        lifetime = f"{t.lifetime} " if t.lifetime else ""
        mut = "mut " if t.mutable else ""
        return f"&{lifetime}{mut}{self.visit(t.elem)}"

    def visit_ptrtype(self, t: PtrType) -> str:
        return f"*{'mut' if t.mutable else 'const'} {self.visit(t.elem)}"

    def visit_tupletype(self, t: TupleType) -> str:
        if len(t.elems) == 1:
            return f"({self.visit(t.elems[0])},)"
        return f"({self.join(t.elems)})"

    def visit_parentype(self, t: ParenType) -> str:
        return f"({self.visit(t.elem)})"

    def visit_slicetype(self, t: SliceType) -> str:
        return f"[{self.visit(t.elem)}]"

    def visit_arraytype(self, t: ArrayType) -> str:
        return f"[{self.visit(t.elem)}; {self.visit(t.length)}]"

    def visit_nevertype(self, t: NeverType) -> str:
        return "!"

    def visit_infertype(self, t: InferType) -> str:
        return "_"

    def for_lifetimes(self, names: List[str]) -> str:
        return f"for<{', '.join(names)}> " if names else ""

    def visit_fnptrtype(self, t: FnPtrType) -> str:
        text = self.for_lifetimes(t.for_lifetimes)
        if t.unsafe:
            text += "unsafe "
        text += f"fn({self.join(t.inputs)})"
        if t.output is not None:
            text += f" -> {self.visit(t.output)}"
        return text

    def visit_traitobjecttype(self, t: TraitObjectType) -> str:
        return "dyn " + self.join(t.bounds, " + ")

    def visit_impltraittype(self, t: ImplTraitType) -> str:
        return "impl " + self.join(t.bounds, " + ")

    # ------------------------
    # Bounds, generic parameters, where clauses
    # ------------------------

    def visit_lifetimebound(self, b: LifetimeBound) -> str:
        return b.name

    def visit_traitbound(self, b: TraitBound) -> str:
        maybe = "?" if b.maybe else ""
        return f"{maybe}{self.for_lifetimes(b.for_lifetimes)}{self.visit(b.path)}"

    def param_attrs(self, attrs: List[Attribute]) -> str:
        return "".join(self.visit(a) + " " for a in attrs)

    def visit_lifetimeparam(self, p: LifetimeParam) -> str:
        bounds = f": {' + '.join(p.bounds)}" if p.bounds else ""
        return f"{self.param_attrs(p.attrs)}{p.name}{bounds}"

    def visit_typeparam(self, p: TypeParam) -> str:
        text = self.param_attrs(p.attrs) + p.name
        if p.bounds:
            text += ": " + self.join(p.bounds, " + ")
        if p.default is not None:
            text += f" = {self.visit(p.default)}"
        return text

    def visit_constparam(self, p: ConstParam) -> str:
        text = f"{self.param_attrs(p.attrs)}const {p.name}: {self.visit(p.ty)}"
        if p.default is not None:
            text += f" = {self.visit(p.default)}"
        return text

    def visit_generics(self, g: Generics) -> str:
        """The `<...>` parameter list only; see where_clause for predicates."""
        if not g.params:
            return ""
        return f"<{self.join(g.params)}>"

    def visit_lifetimepredicate(self, p: LifetimePredicate) -> str:
        return f"{p.name}: {' + '.join(p.bounds)}"

    def visit_typepredicate(self, p: TypePredicate) -> str:
        bounds = self.join(p.bounds, " + ")
        return f"{self.for_lifetimes(p.for_lifetimes)}{self.visit(p.bounded)}:{' ' + bounds if bounds else ''}"

    def where_clause(self, preds: List[WherePredicate]) -> str:
        """Newline-led `where` block, one predicate per line, or "" when empty."""
        if not preds:
            return ""
        lines = [f"\n{self.ind}where"]
        lines += [f"{self.ind}{INDENT}{self.visit(p)}," for p in preds]
        return "\n".join(lines)

    def with_body(self, header: str, where: List[WherePredicate], body: str) -> str:
        """Attach an opening brace (or `;`) to a header, after the where clause if any."""
        clause = self.where_clause(where)
        if not clause:
            return f"{header} {body}" if body != ";" else f"{header};"
        if body == ";":
            return f"{header}{clause};"
        return f"{header}{clause}\n{self.ind}{body}"

    # ------------------------
    # Attributes and patterns
    # ------------------------

    def visit_attribute(self, a: Attribute) -> str:
        opener = "#![" if a.inner else "#["
        tokens = a.tokens or ""
        if tokens.startswith("="):
            tokens = " " + tokens
        return f"{opener}{self.visit(a.path)}{self.verbatim(tokens)}]"

    def outer_attrs(self, attrs: List[Attribute]) -> str:
        """Item attributes, one per line, each followed by a newline and indentation."""
        return "".join(f"{self.visit(a)}\n{self.ind}" for a in attrs)

    def visit_pat(self, p: Pat) -> str:
        return self.verbatim(p.text)

    # ------------------------
    # Expressions
    # ------------------------

    def visit(self, node) -> str:
        text = super().visit(node)
        attrs = getattr(node, "attrs", None)
        if isinstance(node, Expr) and attrs:
            return "".join(self.visit(a) + " " for a in attrs) + text
        return text

    def visit_lit(self, e: Lit) -> str:
        return e.text

    def visit_pathexpr(self, e: PathExpr) -> str:
        return self.visit(e.path)

    def visit_call(self, e: Call) -> str:
        return f"{self.visit(e.func)}({self.join(e.args)})"

    def visit_methodcall(self, e: MethodCall) -> str:
        turbofish = self.visit(e.turbofish) if e.turbofish is not None else ""
        return f"{self.visit(e.receiver)}.{e.method}{turbofish}({self.join(e.args)})"

    def visit_field(self, e: Field) -> str:
        return f"{self.visit(e.base)}.{e.member}"

    def visit_await(self, e: Await) -> str:
        return f"{self.visit(e.base)}.await"

    def visit_index(self, e: Index) -> str:
        return f"{self.visit(e.base)}[{self.visit(e.index)}]"

    def visit_try(self, e: Try) -> str:
        return f"{self.visit(e.expr)}?"

    def visit_unary(self, e: Unary) -> str:
        return f"{e.op}{self.visit(e.expr)}"

    def visit_reference(self, e: Reference) -> str:
        return f"&{'mut ' if e.mutable else ''}{self.visit(e.expr)}"

    def visit_binary(self, e: Binary) -> str:
        return f"{self.visit(e.left)} {e.op} {self.visit(e.right)}"

    def visit_cast(self, e: Cast) -> str:
        return f"{self.visit(e.expr)} as {self.visit(e.ty)}"

    def visit_assign(self, e: Assign) -> str:
        return f"{self.visit(e.target)} {e.op} {self.visit(e.value)}"

    def visit_range(self, e: Range) -> str:
        start = self.visit(e.start) if e.start is not None else ""
        end = self.visit(e.end) if e.end is not None else ""
        return f"{start}{'..=' if e.inclusive else '..'}{end}"

    def visit_closureparam(self, p: ClosureParam) -> str:
        text = self.param_attrs(p.attrs) + self.visit(p.pat)
        if p.ty is not None:
            text += f": {self.visit(p.ty)}"
        return text

    def visit_closure(self, e: Closure) -> str:
        text = "move " if e.is_move else ""
        text += f"|{self.join(e.params)}|"
        if e.ret is not None:
            text += f" -> {self.visit(e.ret)}"
        return f"{text} {self.visit(e.body)}"

    def visit_paren(self, e: Paren) -> str:
        return f"({self.visit(e.expr)})"

    def visit_tuple(self, e: Tuple) -> str:
        if len(e.elems) == 1:
            return f"({self.visit(e.elems[0])},)"
        return f"({self.join(e.elems)})"

    def visit_array(self, e: Array) -> str:
        return f"[{self.join(e.elems)}]"

    def visit_arrayrepeat(self, e: ArrayRepeat) -> str:
        return f"[{self.visit(e.value)}; {self.visit(e.count)}]"

    def visit_fieldvalue(self, f: FieldValue) -> str:
        if f.value is None:
            return f.name
        return f"{f.name}: {self.visit(f.value)}"

    def visit_structlit(self, e: StructLit) -> str:
        parts = [self.visit(f) for f in e.fields]
        if e.base is not None:
            parts.append(f"..{self.visit(e.base)}")
        if not parts:
            return f"{self.visit(e.path)} {{}}"
        return f"{self.visit(e.path)} {{ {', '.join(parts)} }}"

    def visit_macrocall(self, e: MacroCall) -> str:
        return f"{self.visit(e.path)}!{self.verbatim(e.tokens)}"

    def visit_return(self, e: Return) -> str:
        return "return" if e.value is None else f"return {self.visit(e.value)}"

    def visit_break(self, e: Break) -> str:
        text = "break"
        if e.label:
            text += f" {e.label}"
        if e.value is not None:
            text += f" {self.visit(e.value)}"
        return text

    def visit_continue(self, e: Continue) -> str:
        return f"continue {e.label}" if e.label else "continue"

    def label(self, label: Optional[str]) -> str:
        return f"{label}: " if label else ""

    def visit_blockexpr(self, e: BlockExpr) -> str:
        kind = f"{e.kind} " if e.kind else ""
        return f"{self.label(e.label)}{kind}{self.visit(e.block)}"

    def visit_letcond(self, e: LetCond) -> str:
        return f"let {self.visit(e.pat)} = {self.visit(e.expr)}"

    def visit_if(self, e: If) -> str:
        text = f"if {self.visit(e.cond)} {self.visit(e.then)}"
        if e.orelse is not None:
            text += f" else {self.visit(e.orelse)}"
        return text

    def visit_matcharm(self, arm: MatchArm) -> str:
        text = self.outer_attrs(arm.attrs) + self.visit(arm.pat)
        if arm.guard is not None:
            text += f" if {self.visit(arm.guard)}"
        text += f" => {self.visit(arm.body)}"
        if not (isinstance(arm.body, BlockExpr) and not arm.body.attrs):
            text += ","
        return text

    def visit_match(self, e: Match) -> str:
        head = f"match {self.visit(e.expr)} {{"
        if not e.arms and not e.inner_attrs:
            return head + "}"
        self.level += 1
        lines = [f"{self.ind}{self.visit(a)}" for a in e.inner_attrs]
        lines += [f"{self.ind}{self.visit(arm)}" for arm in e.arms]
        self.level -= 1
        return head + "\n" + "\n".join(lines) + f"\n{self.ind}}}"

    def visit_loop(self, e: Loop) -> str:
        return f"{self.label(e.label)}loop {self.visit(e.body)}"

    def visit_while(self, e: While) -> str:
        return f"{self.label(e.label)}while {self.visit(e.cond)} {self.visit(e.body)}"

    def visit_forloop(self, e: ForLoop) -> str:
        return f"{self.label(e.label)}for {self.visit(e.pat)} in {self.visit(e.iter)} {self.visit(e.body)}"

    # ------------------------
    # Blocks and statements
    # ------------------------

    def visit_block(self, b: Block) -> str:
        if not b.stmts and not b.inner_attrs:
            return "{}"
        self.level += 1
        lines = [f"{self.ind}{self.visit(a)}" for a in b.inner_attrs]
        lines += [f"{self.ind}{self.visit(s)}" for s in b.stmts]
        self.level -= 1
        return "{\n" + "\n".join(lines) + f"\n{self.ind}}}"

    def visit_let(self, s: Let) -> str:
        text = self.outer_attrs(s.attrs) + f"let {self.visit(s.pat)}"
        if s.ty is not None:
            text += f": {self.visit(s.ty)}"
        if s.init is not None:
            text += f" = {self.visit(s.init)}"
        if s.diverge is not None:
            text += f" else {self.visit(s.diverge)}"
        return text + ";"

    def visit_exprstmt(self, s: ExprStmt) -> str:
        return self.visit(s.expr) + (";" if s.semi else "")

    def visit_itemstmt(self, s: ItemStmt) -> str:
        return self.visit(s.item)

    def visit_emptystmt(self, s: EmptyStmt) -> str:
        return ";"

    # ------------------------
    # Items
    # ------------------------

    def visit_selfarg(self, a: SelfArg) -> str:
        text = self.param_attrs(a.attrs)
        if a.reference:
            text += "&"
            if a.lifetime:
                text += f"{a.lifetime} "
        if a.mutable:
            text += "mut "
        text += "self"
        if a.ty is not None:
            text += f": {self.visit(a.ty)}"
        return text

    def visit_typedarg(self, a: TypedArg) -> str:
        return f"{self.param_attrs(a.attrs)}{self.visit(a.pat)}: {self.visit(a.ty)}"

    def visit_signature(self, sig: Signature) -> str:
        """Everything from the qualifiers to the return type (no where clause)."""
        quals = "".join(f"{q} " for q in sig.qualifiers)
        text = f"{quals}fn {sig.name}{self.visit(sig.generics)}({self.join(sig.inputs)})"
        if sig.output is not None:
            text += f" -> {self.visit(sig.output)}"
        return text

    def visit_fnitem(self, item: FnItem) -> str:
        if item.source is not None:
            return self.verbatim(item.source)
        vis = f"{item.vis} " if item.vis else ""
        header = self.outer_attrs(item.attrs) + vis + self.visit(item.sig)
        body = self.visit(item.body) if item.body is not None else ";"
        return self.with_body(header, item.sig.generics.where, body)

    def visit_variantfield(self, f: VariantField) -> str:
        text = self.param_attrs(f.attrs)
        if f.vis:
            text += f"{f.vis} "
        if f.name is not None:
            text += f"{f.name}: "
        return text + self.visit(f.ty)

    def visit_variant(self, v: Variant) -> str:
        text = self.outer_attrs(v.attrs) + v.name
        if v.fields and v.fields[0].name is not None:
            return f"{text} {{ {self.join(v.fields)} }}"
        return f"{text}({self.join(v.fields)})"

    def visit_enumitem(self, item: EnumItem) -> str:
        if item.source is not None:
            return self.verbatim(item.source)
        vis = f"{item.vis} " if item.vis else ""
        header = f"{self.outer_attrs(item.attrs)}{vis}enum {item.name}{self.visit(item.generics)}"
        if item.variants:
            self.level += 1
            lines = [f"{self.ind}{self.visit(v)}," for v in item.variants]
            self.level -= 1
            body = "{\n" + "\n".join(lines) + f"\n{self.ind}}}"
        else:
            body = "{}"
        return self.with_body(header, item.generics.where, body)

    def visit_moditem(self, item: ModItem) -> str:
        return self.verbatim(item.source or "")

    def visit_implitem(self, item: ImplItem) -> str:
        return self.verbatim(item.source or "")

    def visit_traititem(self, item: TraitItem) -> str:
        return self.verbatim(item.source or "")

    def visit_otheritem(self, item: OtherItem) -> str:
        return self.verbatim(item.source or "")

    def visit_file(self, f: File) -> str:
        parts = [self.visit(a) for a in f.inner_attrs]
        parts += [self.visit(item) for item in f.items]
        return "\n\n".join(parts) + "\n"


def format_item(item: Item, indent: str = "") -> str:
    """Print `item` for placement after `indent` (continuation lines carry it too)."""
    text = Printer().visit(item)
    return indent_continuation(text, indent)


def print_expr(expr: Expr) -> str:
    return Printer().visit(expr)


def print_type(ty: TypeNode) -> str:
    return Printer().visit(ty)
