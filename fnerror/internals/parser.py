"""Lark parser setup and syntax tree construction."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from lark import Lark, Tree, UnexpectedInput, UnexpectedToken, UnexpectedCharacters, UnexpectedEOF

from fnerror.syntax.ast import File, Item, Expr
from fnerror.syntax.typesys import TypeNode
from fnerror.syntax.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"

START_RULES = ["file", "item", "attr_args", "type", "expr"]


@lru_cache(maxsize=None)
def get_parser() -> Lark:
    """Build the Lark parser once; every entry point shares it."""
    kwargs = dict(
        parser="earley",
        lexer="basic",
        ambiguity="resolve",
        propagate_positions=True,
        maybe_placeholders=True,
        start=START_RULES,
    )
    return Lark.open(str(GRAMMAR_PATH), **kwargs)


def improve_parse_error(e: UnexpectedInput) -> str:
    """Condense Lark's parse errors to a single line."""
    if isinstance(e, UnexpectedEOF):
        return "unexpected end of input"

    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character {e.char!r}"

    if isinstance(e, UnexpectedToken):
        tok = e.token
        if tok.type == "$END":
            return "unexpected end of input"
        expected = sorted(e.expected) if e.expected else []
        if 0 < len(expected) <= 4:
            return f"unexpected token `{tok}`, expected one of: {', '.join(expected)}"
        return f"unexpected token `{tok}`"

    return str(e).splitlines()[0] if str(e) else type(e).__name__


def parse_tree(src: str, start: str = "file") -> Tree:
    """Parse `src` from the grammar rule `start` and return the raw Lark tree."""
    return get_parser().parse(src, start=start)


def parse_to_ast(src: str, dump_parse: bool = False) -> File:
    """Parse a whole source file into a File node."""
    tree = parse_tree(src, "file")
    if dump_parse:
        print(tree.pretty())
    return ASTBuilder(src).build(tree)


def parse_item(src: str) -> Item:
    """Parse a single item (the text of one fn, struct, mod, ...)."""
    return ASTBuilder(src).item(parse_tree(src, "item"))


def parse_type(src: str) -> TypeNode:
    return ASTBuilder(src)._type(parse_tree(src, "type"))


def parse_expr(src: str) -> Expr:
    return ASTBuilder(src)._expr(parse_tree(src, "expr"))
