"""Type, path and generics parsing."""
from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional

from lark import Tree

from fnerror.internals.report import span_of
from fnerror.syntax.typesys import (
    Path, PathSegment, AngleArgs, ParenArgs,
    LifetimeArg, TypeArg, ConstArg, AssocArg, GenericArg,
    TypeNode, PathType, RefType, PtrType, TupleType, ParenType, SliceType, ArrayType,
    NeverType, InferType, FnPtrType, TraitObjectType, ImplTraitType,
    LifetimeBound, TraitBound, TypeBound,
    LifetimeParam, TypeParam, ConstParam, GenericParam,
    LifetimePredicate, TypePredicate, WherePredicate, Generics,
)
from fnerror.syntax.ast_builder.exceptions import UnsupportedSyntaxError

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


class TypeParser:
    """Parses types, paths, bounds and generic parameter lists."""

    def __init__(self, ast_builder: 'ASTBuilder'):
        self.ast_builder = ast_builder

    # === Paths ===

    def _segment_ident(self, t: Tree) -> str:
        # path_ident: NAME | SELF | SELF_TYPE | SUPER | CRATE
        return str(t.children[0])

    def parse_simple_path(self, t: Tree) -> Path:
        """simple_path: [leading_colon] path_ident ("::" path_ident)*"""
        lead, *idents = t.children
        segments = [PathSegment(loc=span_of(i), ident=self._segment_ident(i)) for i in idents]
        return Path(loc=span_of(t), segments=segments, leading_colon=lead is not None)

    def parse_expr_path(self, t: Tree) -> Path:
        """expr_path: segments may carry turbofish arguments (`Vec::<u8>::new`)."""
        lead, *segs = t.children
        segments = []
        for seg in segs:
            ident, args = seg.children
            segments.append(PathSegment(
                loc=span_of(seg),
                ident=self._segment_ident(ident),
                args=self.parse_generic_args(args, turbofish=True) if args is not None else None,
            ))
        return Path(loc=span_of(t), segments=segments, leading_colon=lead is not None)

    def parse_type_path(self, t: Tree) -> Path:
        lead, *segs = t.children
        segments = []
        for seg in segs:
            ident = self._segment_ident(seg.children[0])
            if seg.data == "plain_segment":
                args = None
            elif seg.data == "angle_segment":
                args = self.parse_generic_args(seg.children[1])
            elif seg.data == "paren_segment":
                inputs, ret = seg.children[1], seg.children[2]
                args = ParenArgs(
                    loc=span_of(seg),
                    inputs=self.parse_type_list(inputs),
                    output=self.parse_ret_type(ret),
                )
            else:
                raise UnsupportedSyntaxError(f"path segment '{seg.data}'", span_of(seg))
            segments.append(PathSegment(loc=span_of(seg), ident=ident, args=args))
        return Path(loc=span_of(t), segments=segments, leading_colon=lead is not None)

    # === Generic arguments ===

    def parse_generic_args(self, t: Tree, turbofish: bool = False) -> AngleArgs:
        return AngleArgs(
            loc=span_of(t),
            args=[self.parse_generic_arg(a) for a in t.children],
            turbofish=turbofish,
        )

    def parse_generic_arg(self, t: Tree) -> GenericArg:
        loc = span_of(t)
        if t.data == "lifetime_arg":
            return LifetimeArg(loc=loc, name=str(t.children[0]))
        if t.data == "type_arg":
            return TypeArg(loc=loc, ty=self.parse_type(t.children[0]))
        if t.data == "const_arg":
            return ConstArg(loc=loc, value=self.ast_builder._expr(t.children[0]))
        if t.data == "assoc_arg":
            name, args, ty = t.children
            return AssocArg(
                loc=loc,
                name=str(name),
                ty=self.parse_type(ty),
                args=self.parse_generic_args(args) if args is not None else None,
            )
        raise UnsupportedSyntaxError(f"generic argument '{t.data}'", loc)

    # === Types ===

    def parse_type_list(self, t: Optional[Tree]) -> List[TypeNode]:
        if t is None:
            return []
        return [self.parse_type(c) for c in t.children]

    def parse_ret_type(self, t: Optional[Tree]) -> Optional[TypeNode]:
        if t is None:
            return None
        return self.parse_type(t.children[0])

    def parse_type(self, t: Tree) -> TypeNode:
        """Parse a type node into a TypeNode object."""
        tag = t.data
        loc = span_of(t)
        ch = t.children

        if tag == "path_type":
            return PathType(loc=loc, path=self.parse_type_path(ch[0]))

        if tag in ("ref_type", "double_ref_type"):
            lifetime, mut, elem = ch
            ref = RefType(
                loc=loc,
                lifetime=str(lifetime) if lifetime is not None else None,
                mutable=mut is not None,
                elem=self.parse_type(elem),
            )
            if tag == "double_ref_type":
                # `&&T` is `& &T`; the outer reference carries no lifetime
                return RefType(loc=loc, lifetime=None, mutable=False, elem=ref)
            return ref

        if tag == "tuple_type":
            return TupleType(loc=loc, elems=[self.parse_type(c) for c in ch])

        if tag == "paren_type":
            return ParenType(loc=loc, elem=self.parse_type(ch[0]))

        if tag == "slice_type":
            return SliceType(loc=loc, elem=self.parse_type(ch[0]))

        if tag == "array_type":
            return ArrayType(loc=loc, elem=self.parse_type(ch[0]),
                             length=self.ast_builder._expr(ch[1]))

        if tag == "ptr_type":
            kind, elem = ch
            return PtrType(loc=loc, mutable=kind.type == "MUT", elem=self.parse_type(elem))

        if tag == "never_type":
            return NeverType(loc=loc)

        if tag == "infer_type":
            return InferType(loc=loc)

        if tag == "fn_ptr_type":
            for_lts, unsafe, inputs, ret = ch
            return FnPtrType(
                loc=loc,
                inputs=self.parse_type_list(inputs),
                output=self.parse_ret_type(ret),
                unsafe=unsafe is not None,
                for_lifetimes=self.parse_for_lifetimes(for_lts),
            )

        if tag == "trait_object_type":
            bounds = [self.parse_bound(b) for b in ch if isinstance(b, Tree)]
            return TraitObjectType(loc=loc, bounds=bounds, dyn=True)

        if tag == "impl_trait_type":
            bounds = [self.parse_bound(b) for b in ch if isinstance(b, Tree)]
            return ImplTraitType(loc=loc, bounds=bounds)

        raise UnsupportedSyntaxError(f"type '{tag}'", loc)

    # === Bounds ===

    def parse_for_lifetimes(self, t: Optional[Tree]) -> List[str]:
        if t is None:
            return []
        return [str(tok) for tok in t.children]

    def parse_lifetime_bounds(self, t: Optional[Tree]) -> List[str]:
        if t is None:
            return []
        return [str(tok) for tok in t.children]

    def parse_type_bounds(self, t: Optional[Tree]) -> List[TypeBound]:
        if t is None:
            return []
        return [self.parse_bound(b) for b in t.children]

    def parse_bound(self, t: Tree) -> TypeBound:
        if t.data == "lifetime_bound":
            return LifetimeBound(loc=span_of(t), name=str(t.children[0]))
        maybe, for_lts, path = t.children
        return TraitBound(
            loc=span_of(t),
            path=self.parse_type_path(path),
            maybe=maybe is not None,
            for_lifetimes=self.parse_for_lifetimes(for_lts),
        )

    # === Generic parameters ===

    def parse_generic_params(self, t: Optional[Tree]) -> List[GenericParam]:
        if t is None:
            return []
        return [self.parse_generic_param(p) for p in t.children]

    def parse_generic_param(self, t: Tree) -> GenericParam:
        loc = span_of(t)
        attrs = self.ast_builder.attrs(t.children[0])
        if t.data == "lifetime_param":
            _, name, bounds = t.children
            return LifetimeParam(loc=loc, name=str(name),
                                 bounds=self.parse_lifetime_bounds(bounds), attrs=attrs)
        if t.data == "type_param":
            _, name, bounds, default = t.children
            return TypeParam(
                loc=loc,
                name=str(name),
                bounds=self.parse_type_bounds(bounds),
                default=self.parse_type(default) if default is not None else None,
                attrs=attrs,
            )
        if t.data == "const_param":
            _, _const, name, ty, default = t.children
            return ConstParam(
                loc=loc,
                name=str(name),
                ty=self.parse_type(ty),
                default=self.ast_builder._expr(default) if default is not None else None,
                attrs=attrs,
            )
        raise UnsupportedSyntaxError(f"generic parameter '{t.data}'", loc)

    def parse_where(self, t: Optional[Tree]) -> List[WherePredicate]:
        if t is None:
            return []
        preds: List[WherePredicate] = []
        for p in t.children:
            if p.data == "lifetime_pred":
                name, bounds = p.children
                preds.append(LifetimePredicate(loc=span_of(p), name=str(name),
                                               bounds=self.parse_lifetime_bounds(bounds)))
            else:
                for_lts, bounded, bounds = p.children
                preds.append(TypePredicate(
                    loc=span_of(p),
                    bounded=self.parse_type(bounded),
                    bounds=self.parse_type_bounds(bounds),
                    for_lifetimes=self.parse_for_lifetimes(for_lts),
                ))
        return preds

    def parse_generics(self, params: Optional[Tree], where: Optional[Tree]) -> Generics:
        loc = span_of(params) if params is not None else None
        return Generics(loc=loc, params=self.parse_generic_params(params),
                        where=self.parse_where(where))
