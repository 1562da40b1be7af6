"""Identifier and path construction helpers."""
from __future__ import annotations
import re
from typing import List, Optional

from fnerror.internals.report import Span
from fnerror.syntax.typesys import Path, PathSegment, AngleArgs, GenericArg

_WORD = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

ERROR_SUFFIX = "Error"


def path_from_ident(ident: str, loc: Optional[Span] = None) -> Path:
    return Path(loc=loc, segments=[PathSegment(loc=loc, ident=ident)])


def path_from_str(text: str, loc: Optional[Span] = None) -> Path:
    """`"::std::result::Result"` -> Path with a leading colon and three segments."""
    leading = text.startswith("::")
    idents = text[2:].split("::") if leading else text.split("::")
    return Path(loc=loc, segments=[PathSegment(loc=loc, ident=i) for i in idents], leading_colon=leading)


def path_from_args(ident: str, args: List[GenericArg], loc: Optional[Span] = None) -> Path:
    """`Name<args...>`; an empty argument list gives the bare `Name`."""
    seg = PathSegment(loc=loc, ident=ident,
                      args=AngleArgs(loc=loc, args=list(args)) if args else None)
    return Path(loc=loc, segments=[seg])


def pascal_case(name: str) -> str:
    """parse_config -> ParseConfig, fetchURL -> FetchUrl, HTTPServer -> HttpServer."""
    words = _WORD.findall(name)
    return "".join(w[:1].upper() + w[1:].lower() for w in words)


def failure_type_ident(fn_name: str) -> str:
    return pascal_case(fn_name) + ERROR_SUFFIX
