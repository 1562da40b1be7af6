"""
Entry points for expanding a single `#[fnerror]` function.

    #[fnerror]
    fn load(path: &str) -> Result<Config> {
        let text = read(path).map_err(|e| #[fnerr] Read("cannot read {}: {}", path as String, e as io::Error))?;
        ...
    }

expands to a `pub enum LoadError` with one variant per marked call, followed
by `load` returning `::std::result::Result<Config, LoadError>`.
"""
from __future__ import annotations
import copy
from dataclasses import dataclass
from typing import List, Optional

from lark import UnexpectedInput

from fnerror.internals import errors as er
from fnerror.internals.errors import ERR, raise_fatal
from fnerror.internals.parser import improve_parse_error, parse_item, parse_tree
from fnerror.internals.report import Reporter, Span
from fnerror.syntax.ast import Attribute, FnItem, Item, OtherItem, PathExpr
from fnerror.syntax.ast_builder import ASTBuilder
from fnerror.transform.assembler import Expansion, assemble
from fnerror.transform.call_sites import CallSiteExtractor
from fnerror.transform.constants import FN_MARKER_PATHS, NAME_ARG
from fnerror.transform.return_type import parse_return_type, resolve_error_ident, rewrite_return_type

_DELIMITERS = {"(": ")", "[": "]", "{": "}"}


@dataclass
class FnErrorArgs:
    """Arguments of `#[fnerror(...)]`."""
    ident: Optional[str] = None


def is_fn_marker(attr: Attribute) -> bool:
    if attr.inner:
        return False
    if any(seg.args is not None for seg in attr.path.segments):
        return False
    return tuple(attr.path.idents()) in FN_MARKER_PATHS


def find_marker(attrs: List[Attribute]) -> Optional[Attribute]:
    for attr in attrs:
        if is_fn_marker(attr):
            return attr
    return None


def item_kind(item: Item) -> str:
    """Human readable item kind for diagnostics: 'struct', 'impl block', ..."""
    if isinstance(item, FnItem):
        return "a function without a body" if item.body is None else "function"
    if isinstance(item, OtherItem):
        return item.kind.replace("_item", "").replace("_", " ")
    return type(item).__name__.replace("Item", "").lower() + " item"


def parse_attr_args(tokens: Optional[str], span: Optional[Span] = None) -> FnErrorArgs:
    """Parse `(ident = Name, ...)` as written after the marker path.

    Only `ident` with a plain identifier value is recognised; other names and
    values are ignored.
    """
    if tokens is None:
        return FnErrorArgs()

    text = tokens.strip()
    if not text or text[0] not in _DELIMITERS or text[-1] != _DELIMITERS[text[0]]:
        raise_fatal(ERR.FE1002, span, detail=f"expected a parenthesized argument list, found `{text}`")

    inner = text[1:-1]
    try:
        tree = parse_tree(inner, "attr_args")
    except UnexpectedInput as e:
        raise_fatal(ERR.FE1002, span, detail=improve_parse_error(e))

    builder = ASTBuilder(inner)
    args = FnErrorArgs()
    for arg in tree.children:
        name_tree, value_tree = arg.children
        if builder.type_parser.parse_simple_path(name_tree).get_ident() != NAME_ARG:
            continue
        value = builder._expr(value_tree)
        if isinstance(value, PathExpr) and value.path.get_ident() is not None:
            args.ident = value.path.get_ident()
    return args


def expand_fn(item: Item, args: Optional[FnErrorArgs] = None,
              reporter: Optional[Reporter] = None) -> Expansion:
    """Expand one function; `item` itself is left untouched.

    `args` defaults to the arguments of the item's own `#[fnerror(...)]`.
    Raises TransformError on the first problem found.
    """
    if not isinstance(item, FnItem) or item.body is None:
        raise_fatal(ERR.FE1001, item.loc, found=item_kind(item))

    fn = copy.deepcopy(item)
    marker = find_marker(fn.attrs)
    marker_span = marker.loc if marker is not None else fn.loc
    if args is None:
        args = parse_attr_args(marker.tokens if marker is not None else None, marker_span)
    fn.attrs = [a for a in fn.attrs if not is_fn_marker(a)]

    ret = parse_return_type(fn.sig.output, fn.sig.loc, fn.sig.name)
    error_ident = resolve_error_ident(args.ident, ret, fn.sig.name, marker_span)

    extraction = CallSiteExtractor(error_ident, fn.sig.generics).extract(fn.body)
    fn.body = extraction.block
    fn.sig.output = rewrite_return_type(ret, error_ident, extraction.used)
    fn.source = None

    if not extraction.sites and reporter is not None:
        er.emit(reporter, ERR.FW1001, marker_span, name=fn.sig.name, error=error_ident)

    return assemble(fn, error_ident, extraction)


def expand_item(text: str, reporter: Optional[Reporter] = None) -> Expansion:
    """Parse `text` as a single item and expand it."""
    return expand_fn(parse_item(text), reporter=reporter)
