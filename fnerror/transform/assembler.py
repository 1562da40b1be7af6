"""Assembly of the error enum and the rewritten function."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List

from fnerror.syntax.ast import Attribute, EnumItem, FnItem, Item, Variant, VariantField
from fnerror.syntax.printer import format_item, print_expr
from fnerror.syntax.typesys import Generics
from fnerror.transform.call_sites import ErrorSite, Extraction
from fnerror.transform.constants import DERIVE_ATTR, DERIVE_TOKENS, VARIANT_ATTR
from fnerror.transform.generics import generic_declaration
from fnerror.transform.names import path_from_ident


@dataclass
class Expansion:
    """What one `#[fnerror]` function expands to."""
    error_enum: EnumItem
    function: FnItem

    def items(self) -> List[Item]:
        """The enum first, then the function that returns it."""
        return [self.error_enum, self.function]

    def to_source(self, indent: str = "") -> str:
        """Both items, separated by a blank line, for placement after `indent`."""
        return f"\n\n{indent}".join(format_item(item, indent) for item in self.items())


def variant_attr(site: ErrorSite) -> Attribute:
    """`#[error(<template>, .0, .1, ...)]`"""
    refs = "".join(f", .{i}" for i in range(len(site.field_types)))
    return Attribute(loc=None, path=path_from_ident(VARIANT_ATTR),
                     tokens=f"({print_expr(site.template)}{refs})")


def build_variant(site: ErrorSite) -> Variant:
    return Variant(
        loc=site.loc,
        name=site.tag,
        fields=[VariantField(loc=None, ty=ty) for ty in site.field_types],
        attrs=[variant_attr(site)],
    )


def build_error_enum(error_ident: str, extraction: Extraction, declared: Generics) -> EnumItem:
    return EnumItem(
        loc=None,
        attrs=[Attribute(loc=None, path=path_from_ident(DERIVE_ATTR), tokens=DERIVE_TOKENS)],
        vis="pub",
        name=error_ident,
        generics=generic_declaration(declared, extraction.used),
        variants=[build_variant(site) for site in extraction.sites],
    )


def assemble(function: FnItem, error_ident: str, extraction: Extraction) -> Expansion:
    """Pair the rewritten `function` with its error enum.

    `function` must already carry the rewritten body and return type.
    """
    error_enum = build_error_enum(error_ident, extraction, function.sig.generics)
    return Expansion(error_enum=error_enum, function=function)
