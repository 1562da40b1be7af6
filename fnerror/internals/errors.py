# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, NoReturn, Optional

from fnerror.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL   = "general"
    SYNTAX    = "syntax"
    ATTRIBUTE = "attribute"
    SIGNATURE = "signature"
    CALL_SITE = "call-site"
    GENERICS  = "generics"
    PLACEMENT = "placement"
    INTERNAL  = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)


class TransformError(Exception):
    """A fatal diagnostic: the expansion is aborted and nothing is emitted."""

    def __init__(self, message: ErrorMessage, text: str, span: Optional[Span] = None):
        super().__init__(f"{message.code}: {text}")
        self.message = message
        self.text = text
        self.span = span

    @property
    def code(self) -> str:
        return self.message.code

    def report(self, r: Reporter) -> None:
        r.error(self.code, self.text, self.span)


def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = _fmt(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def raise_fatal(em: ErrorMessage, span: Optional[Span], **kwargs) -> NoReturn:
    """Abort the current expansion with `em` pinned to `span`."""
    raise TransformError(em, _fmt(em.code, **kwargs), span)

def raise_internal_error(code: str, **kwargs) -> NoReturn:
    """Raise a RuntimeError for internal errors.

    Internal errors (FE9xxx codes) indicate bugs in the expander, not in the
    user's source.
    """
    text = _fmt(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

def _fmt(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None

#
# --- Registry population
#

# Syntax (FE0xxx)
_add(ErrorMessage("FE0001", Severity.ERROR,
    "syntax error: {detail}",
    Category.SYNTAX, "The input is not valid Rust (or uses syntax outside the supported subset)."))

_add(ErrorMessage("FE0002", Severity.ERROR,
    "unsupported syntax: {what}",
    Category.SYNTAX, "The parser recognised the construct but the syntax tree has no node for it."))

# Marker and arguments (FE1xxx)
_add(ErrorMessage("FE1001", Severity.ERROR,
    "#[fnerror] expects a function with a body, found {found}",
    Category.ATTRIBUTE, "The primary marker can only expand free functions that have a body."))

_add(ErrorMessage("FE1002", Severity.ERROR,
    "invalid #[fnerror] arguments: {detail}",
    Category.ATTRIBUTE, "Arguments must be a comma separated list of `name = value` pairs, e.g. `ident = ParseError`."))

# Signature (FE2xxx)
_add(ErrorMessage("FE2001", Severity.ERROR,
    "function '{name}' has no return type, expected `-> Result<T>`",
    Category.SIGNATURE, "The expanded function returns the synthesized error type through a Result."))

_add(ErrorMessage("FE2002", Severity.ERROR,
    "expect Result, found `{found}`",
    Category.SIGNATURE, "The return type must be `Result<T>` or `Result<T, Name>` (the path may be qualified)."))

_add(ErrorMessage("FE2003", Severity.ERROR,
    "Result takes a success type and an optional error name, found {count} type argument(s)",
    Category.SIGNATURE, "Exactly one success type is required; a second argument names the error type."))

_add(ErrorMessage("FE2004", Severity.ERROR,
    "invalid Result argument `{found}`: {reason}",
    Category.SIGNATURE, "Result arguments must be types and the error slot a single identifier."))

_add(ErrorMessage("FE2005", Severity.ERROR,
    "error type '{attr}' from #[fnerror(ident = ...)] conflicts with '{declared}' in the return type",
    Category.SIGNATURE, "Name the error type once, either in the attribute or in the return type."))

# Call sites (FE3xxx)
_add(ErrorMessage("FE3001", Severity.ERROR,
    "expect a single identifier as #[fnerr] variant name, found `{found}`",
    Category.CALL_SITE, "The callee of a marked call becomes the variant name and cannot be a path."))

_add(ErrorMessage("FE3002", Severity.ERROR,
    "expect a format string as the first argument of '{name}'",
    Category.CALL_SITE, "The first argument of a marked call is the variant's display template."))

_add(ErrorMessage("FE3003", Severity.ERROR,
    "expect a cast expression, like: `context as &'static str`, found `{found}`",
    Category.CALL_SITE, "Every payload argument pairs a value with its field type through `as`."))

_add(ErrorMessage("FE3004", Severity.ERROR,
    "#[fnerr] can only mark a call expression, found `{found}`",
    Category.CALL_SITE, "Move the marker onto the call itself, e.g. `Err(#[fnerr] NotFound(\"{}\", p as String))`."))

_add(ErrorMessage("FE3005", Severity.ERROR,
    "duplicate #[fnerr] variant '{name}' (first used on line {line})",
    Category.CALL_SITE, "Each marked call defines a variant, so variant names must be unique within a function."))

# Generics (FE4xxx)
_add(ErrorMessage("FE4001", Severity.ERROR,
    "expect a lifetime on reference type `{found}`",
    Category.GENERICS, "Field types of the generated enum cannot elide lifetimes; write `&'a T` or `&'static T`."))

# Placement (FE5xxx)
_add(ErrorMessage("FE5001", Severity.ERROR,
    "#[fnerror] cannot be used on associated function '{name}'",
    Category.PLACEMENT, "The generated enum is an item and cannot be placed inside an impl or trait block."))

_add(ErrorMessage("FE5002", Severity.ERROR,
    "#[fnerror] can only be used on functions, found {kind}",
    Category.PLACEMENT, "The primary marker only applies to fn items."))

# Internal (FE9xxx)
_add(ErrorMessage("FE9001", Severity.ERROR,
    "cannot print node '{node}'",
    Category.INTERNAL, "A syntax node reached the printer without a rendering rule (bug)."))

# Warnings
_add(ErrorMessage("FW1001", Severity.WARNING,
    "function '{name}' has no #[fnerr] call sites, the generated '{error}' has no variants",
    Category.CALL_SITE, "The expansion still succeeds, but the error type cannot be constructed."))
