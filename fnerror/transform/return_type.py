"""Validation and rewriting of the `-> Result<T>` return type."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from fnerror.internals.errors import ERR, raise_fatal
from fnerror.internals.report import Span
from fnerror.syntax.printer import Printer, print_type
from fnerror.syntax.typesys import AngleArgs, PathType, TypeArg, TypeNode
from fnerror.transform.constants import RESULT_IDENT, RESULT_PATH
from fnerror.transform.generics import UsedGenerics
from fnerror.transform.names import failure_type_ident, path_from_args, path_from_str


@dataclass
class ReturnType:
    """A validated `Result<ok>` or `Result<ok, Name>`."""
    loc: Optional[Span]
    ok: TypeNode
    error_ident: Optional[str] = None


def parse_return_type(output: Optional[TypeNode], fn_span: Optional[Span], name: str) -> ReturnType:
    """Check that `output` is `Result<T>` or `Result<T, Name>`.

    The `Result` path may be qualified (`std::result::Result`). The error slot
    must be a single segment; its own generic arguments are ignored, so an
    already rewritten `Result<T, Name<'a>>` reads back as `Name`.
    """
    if output is None:
        raise_fatal(ERR.FE2001, fn_span, name=name)

    if not isinstance(output, PathType) or output.path.last.ident != RESULT_IDENT:
        raise_fatal(ERR.FE2002, output.loc, found=print_type(output))

    args = output.path.last.args
    count = len(args.args) if isinstance(args, AngleArgs) else 0
    if not isinstance(args, AngleArgs) or count not in (1, 2):
        raise_fatal(ERR.FE2003, output.loc, count=count)

    for arg in args.args:
        if not isinstance(arg, TypeArg):
            raise_fatal(ERR.FE2004, arg.loc, found=Printer().visit(arg), reason="expected a type")

    error_ident = None
    if count == 2:
        err = args.args[1].ty
        path = err.path if isinstance(err, PathType) else None
        if path is None or path.leading_colon or len(path.segments) != 1:
            raise_fatal(ERR.FE2004, err.loc, found=print_type(err),
                        reason="the error type must be a single identifier")
        error_ident = path.segments[0].ident

    return ReturnType(loc=output.loc, ok=args.args[0].ty, error_ident=error_ident)


def resolve_error_ident(attr_ident: Optional[str], ret: ReturnType, fn_name: str,
                        span: Optional[Span] = None) -> str:
    """Name precedence: `#[fnerror(ident = ...)]`, the return type's error slot, `<FnName>Error`."""
    if attr_ident is not None and ret.error_ident is not None and attr_ident != ret.error_ident:
        raise_fatal(ERR.FE2005, span, attr=attr_ident, declared=ret.error_ident)
    return attr_ident or ret.error_ident or failure_type_ident(fn_name)


def rewrite_return_type(ret: ReturnType, error_ident: str, used: UsedGenerics) -> PathType:
    """`::std::result::Result<ok, ErrorIdent<used arguments>>`"""
    path = path_from_str(RESULT_PATH)
    error_type = PathType(loc=None, path=path_from_args(error_ident, used.arguments()))
    path.last.args = AngleArgs(loc=None, args=[
        TypeArg(loc=None, ty=ret.ok),
        TypeArg(loc=None, ty=error_type),
    ])
    return PathType(loc=ret.loc, path=path)
