import pytest

from fnerror.internals.errors import TransformError
from fnerror.internals.parser import parse_item, parse_type
from fnerror.syntax.printer import Printer, print_type
from fnerror.syntax.typesys import Generics
from fnerror.transform.generics import GenericsResolver, UsedGenerics, generic_declaration, mentioned


def declared(params: str, where: str = "") -> Generics:
    return parse_item(f"fn f{params}() {where} {{}}").sig.generics


def resolve(generics: Generics, *types: str) -> UsedGenerics:
    used = UsedGenerics()
    resolver = GenericsResolver(generics, used)
    for text in types:
        resolver.resolve_type(parse_type(text))
    return used


def test_unrelated_types_collect_nothing() -> None:
    used = resolve(declared("<'a, T>"), "String", "&'static str", "u8")

    assert not used
    assert used.names() == []


def test_lifetimes_come_first() -> None:
    used = resolve(declared("<'a, 'b, T, U>"), "U", "&'b str", "T", "&'a T")

    assert used.names() == ["'b", "'a", "U", "T"]


def test_each_parameter_is_recorded_once() -> None:
    used = resolve(declared("<'a, T>"), "&'a T", "Vec<&'a T>", "T")

    assert used.names() == ["'a", "T"]
    assert len(used) == 2


def test_composite_types_are_searched() -> None:
    used = resolve(declared("<'a, K, V, W>"),
                   "std::collections::HashMap<K, Vec<V>>", "Option<(u8, [W; 4])>")

    assert used.names() == ["K", "V", "W"]


def test_const_parameters() -> None:
    used = resolve(declared("<T, const N: usize, const M: usize>"), "[u8; N]", "Buffer<M>")

    assert used.names() == ["N", "M"]
    assert [Printer().visit(a) for a in used.arguments()] == ["N", "M"]


def test_projection_uses_its_base_parameter() -> None:
    used = resolve(declared("<T: std::str::FromStr>"), "T::Err")

    assert used.names() == ["T"]


def test_lifetimes_in_generic_arguments_and_bounds() -> None:
    used = resolve(declared("<'a, 'b>"), "Cow<'a, str>", "Box<dyn Error + 'b>")

    assert used.names() == ["'a", "'b"]


def test_reference_without_lifetime_is_fatal() -> None:
    with pytest.raises(TransformError) as exc_info:
        resolve(declared("<T>"), "Vec<&T>")

    assert exc_info.value.code == "FE4001"
    assert "&T" in exc_info.value.text


def test_non_strict_resolver_tolerates_elided_lifetimes() -> None:
    generics = declared("<T>")

    assert mentioned(generics, parse_type("&T")) == {("type", "T")}


def test_undeclared_names_are_not_generics() -> None:
    used = resolve(declared("<T>"), "U", "&'x T")

    assert used.names() == ["T"]


def test_arguments_form() -> None:
    used = resolve(declared("<'a, T, const N: usize>"), "&'a [T; N]")

    assert [Printer().visit(a) for a in used.arguments()] == ["'a", "T", "N"]


def test_declaration_keeps_bounds_of_used_params() -> None:
    generics = declared("<'a, 'b: 'a, T: Display + 'a, U: Into<T> = String>")
    used = resolve(generics, "&'b U")

    decl = generic_declaration(generics, used)

    assert Printer().visit(decl) == "<'b, U>"


def test_declaration_prunes_where_predicates() -> None:
    generics = declared("<'a, T, U>", "where T: Clone + From<U>, U: Default, 'a: 'static")
    used = resolve(generics, "T", "&'a str")

    decl = generic_declaration(generics, used)

    assert Printer().visit(decl) == "<'a, T>"
    assert [Printer().visit(p) for p in decl.where] == ["T: Clone", "'a: 'static"]


def test_declaration_drops_defaults() -> None:
    generics = declared("<T: Clone = u8, const N: usize = 4>")
    used = resolve(generics, "[T; N]")

    decl = generic_declaration(generics, used)

    assert Printer().visit(decl) == "<T: Clone, const N: usize>"


def test_declaration_of_nothing_is_empty() -> None:
    generics = declared("<T>")
    decl = generic_declaration(generics, UsedGenerics())

    assert not decl
    assert print_type(parse_type("T")) == "T"
