"""Main expression parser coordinating specialized expression parsers."""
from __future__ import annotations
from typing import TYPE_CHECKING
from lark import Tree
from fnerror.syntax.ast import Expr, PathExpr, Paren, Tuple, Array, ArrayRepeat
from fnerror.syntax.ast_builder.expressions import literals, operators, calls, control_flow
from fnerror.syntax.ast_builder.exceptions import UnsupportedSyntaxError
from fnerror.internals.report import span_of

if TYPE_CHECKING:
    from fnerror.syntax.ast_builder.builder import ASTBuilder


class ExpressionParser:
    """Coordinates expression parsing across specialized parsers."""

    HANDLERS = {
        "string_lit": literals.expr_literal,
        "char_lit": literals.expr_literal,
        "int_lit": literals.expr_literal,
        "float_lit": literals.expr_literal,
        "bool_lit": literals.expr_literal,
        "neg_literal": literals.expr_neg_literal,
        "unary": operators.expr_unary,
        "reference": operators.expr_reference,
        "double_reference": operators.expr_reference,
        "binary": operators.expr_binary,
        "cast": operators.expr_cast,
        "assign": operators.expr_assign,
        "compound_assign": operators.expr_assign,
        "range": operators.expr_range,
        "range_inclusive": operators.expr_range,
        "call": calls.expr_call,
        "method_call": calls.expr_method_call,
        "field": calls.expr_field,
        "await_expr": calls.expr_await,
        "index": calls.expr_index,
        "try_expr": calls.expr_try,
        "struct_expr": calls.expr_struct,
        "macro_call": calls.expr_macro_call,
        "block_expr": control_flow.expr_block,
        "block": control_flow.expr_bare_block,
        "if_expr": control_flow.expr_if,
        "match_expr": control_flow.expr_match,
        "loop_expr": control_flow.expr_loop,
        "while_expr": control_flow.expr_while,
        "for_expr": control_flow.expr_for,
        "closure": control_flow.expr_closure,
        "return_expr": control_flow.expr_return,
        "break_expr": control_flow.expr_break,
        "continue_expr": control_flow.expr_continue,
    }

    def __init__(self, ast_builder: 'ASTBuilder'):
        """Initialize ExpressionParser with reference to ASTBuilder for recursive parsing."""
        self.ast_builder = ast_builder

    def parse_expr(self, t: Tree) -> Expr:
        """Parse an expression node into an Expr object.

        Main dispatcher for all expression types.
        """
        tag = t.data
        loc = span_of(t)

        handler = self.HANDLERS.get(tag)
        if handler is not None:
            return handler(t, self.ast_builder)

        if tag == "path_expr":
            return PathExpr(loc=loc, path=self.ast_builder.type_parser.parse_expr_path(t.children[0]))

        if tag == "paren":
            return Paren(loc=loc, expr=self.parse_expr(t.children[0]))

        if tag == "tuple":
            return Tuple(loc=loc, elems=[self.parse_expr(c) for c in t.children if c is not None])

        if tag == "array":
            return Array(loc=loc, elems=[self.parse_expr(c) for c in t.children if c is not None])

        if tag == "array_repeat":
            value, count = t.children
            return ArrayRepeat(loc=loc, value=self.parse_expr(value), count=self.parse_expr(count))

        # #[attr] expr: attributes attach to the expression they precede
        if tag == "attributed":
            *attr_trees, inner = t.children
            expr = self.parse_expr(inner)
            expr.attrs = [self.ast_builder.attribute(a) for a in attr_trees] + expr.attrs
            return expr

        raise UnsupportedSyntaxError(f"expression '{tag}'", loc)
