from textwrap import dedent

import pytest

from fnerror.internals.parser import parse_expr, parse_item, parse_type
from fnerror.syntax.printer import Printer, format_item, print_expr, print_type


@pytest.mark.parametrize(
    "text",
    [
        "&'a mut [u8]",
        "::std::result::Result<(), FooError<'a, T>>",
        "Box<dyn Fn(&'a str) -> bool + Send>",
        "[u8; N]",
        "(u8,)",
        "*const T",
        "impl Iterator<Item = T>",
        "fn(u8) -> u8",
    ],
)
def test_print_type(text: str) -> None:
    assert print_type(parse_type(text)) == text


@pytest.mark.parametrize(
    "text",
    [
        'FooError::Error2(e)',
        'bar().map_err(|e| e)?',
        'x as u8 + 1',
        'v.iter().map(|x| x * 2).collect::<Vec<_>>()',
        'Point { x: 1, y }',
        'format!("{}", a)',
        'a[0].b.0',
        '&mut x',
        'move || 1',
        '!done',
    ],
)
def test_print_expr(text: str) -> None:
    assert print_expr(parse_expr(text)) == text


def test_print_expr_keeps_attributes() -> None:
    assert print_expr(parse_expr("#[allow(unused)] f(x)")) == "#[allow(unused)] f(x)"


def test_rewritten_fn_is_printed_from_tree() -> None:
    fn = parse_item("fn f(x: u8) -> u8 { let y = x; if y > 1 { return y; } match y { 0 => 1, _ => { 2 } } }")
    fn.source = None

    assert format_item(fn) == dedent("""\
        fn f(x: u8) -> u8 {
            let y = x;
            if y > 1 {
                return y;
            }
            match y {
                0 => 1,
                _ => {
                    2
                }
            }
        }""")


def test_where_clause_layout() -> None:
    fn = parse_item("fn f<T>(t: T) -> T where T: Clone { t }")
    fn.source = None

    assert format_item(fn) == dedent("""\
        fn f<T>(t: T) -> T
        where
            T: Clone,
        {
            t
        }""")


def test_format_item_indents_continuation_lines() -> None:
    fn = parse_item("fn f() { g(); }")
    fn.source = None

    assert format_item(fn, "    ") == "fn f() {\n        g();\n    }"


def test_verbatim_item_inside_rewritten_body() -> None:
    fn = parse_item("fn f() {\n    fn inner() {\n        g();\n    }\n}")
    fn.source = None

    assert format_item(fn) == "fn f() {\n    fn inner() {\n        g();\n    }\n}"


def test_empty_block() -> None:
    fn = parse_item("fn f() {}")
    fn.source = None

    assert format_item(fn) == "fn f() {}"


def test_unknown_node_is_internal_error() -> None:
    with pytest.raises(RuntimeError, match="FE9001"):
        Printer().visit(object())
