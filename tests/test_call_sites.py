import pytest

from fnerror.internals.errors import TransformError
from fnerror.internals.parser import parse_item
from fnerror.syntax.printer import format_item, print_expr, print_type
from fnerror.transform.call_sites import CallSiteExtractor, Extraction


def extract(text: str, error_ident: str = "FooError") -> tuple[Extraction, str]:
    fn = parse_item(text)
    extraction = CallSiteExtractor(error_ident, fn.sig.generics).extract(fn.body)
    fn.body = extraction.block
    fn.source = None
    return extraction, format_item(fn)


def extract_error(text: str) -> TransformError:
    with pytest.raises(TransformError) as exc_info:
        extract(text)
    return exc_info.value


def test_single_site() -> None:
    extraction, printed = extract(
        'fn foo() -> Result<()> { bar().map_err(|e| #[fnerr] Error2("{}", e as String))?; Ok(()) }'
    )

    (site,) = extraction.sites
    assert site.tag == "Error2"
    assert print_expr(site.template) == '"{}"'
    assert [print_type(t) for t in site.field_types] == ["String"]
    assert "bar().map_err(|e| FooError::Error2(e))?;" in printed
    assert "fnerr" not in printed


def test_sites_in_pre_order() -> None:
    extraction, printed = extract("""fn foo(x: u8) -> Result<()> {
        if x > 1 {
            return Err(#[fnerr] TooBig("{} > 1", x as u8));
        }
        let v = check(#[fnerr] Outer("{}", inner(#[fnerr] Inner("no")) as u8));
        match v {
            0 => Err(#[fnerr] Zero("zero")),
            _ => Ok(()),
        }
    }""")

    assert [s.tag for s in extraction.sites] == ["TooBig", "Outer", "Inner", "Zero"]
    assert "return Err(FooError::TooBig(x));" in printed
    assert "check(FooError::Outer(inner(FooError::Inner())))" in printed
    assert "0 => Err(FooError::Zero())," in printed


def test_field_types_in_argument_order() -> None:
    extraction, printed = extract(
        'fn foo() -> Result<()> { Err(#[fnerr] Error3("{}, {}", e as &\'static str, 123 as u8)) }'
    )

    (site,) = extraction.sites
    assert [print_type(t) for t in site.field_types] == ["&'static str", "u8"]
    assert "Err(FooError::Error3(e, 123))" in printed


def test_no_generics_without_declared_params() -> None:
    extraction, _ = extract('fn foo() -> Result<()> { Err(#[fnerr] E("{}", s as &\'static str)) }')

    assert not extraction.used


def test_generics_are_collected() -> None:
    extraction, _ = extract(
        "fn foo<'a, T>(s: &'a str, t: T) -> Result<T> {"
        ' Err(#[fnerr] Bad("{} {:?}", t as T, s as &\'a str)) }'
    )

    assert extraction.used.names() == ["'a", "T"]


def test_nested_items_are_opaque() -> None:
    extraction, printed = extract("""fn foo() -> Result<()> {
        fn helper() -> Result<()> {
            Err(#[fnerr] Inner("inner"))
        }
        Err(#[fnerr] Outer("outer"))
    }""")

    assert [s.tag for s in extraction.sites] == ["Outer"]
    assert '#[fnerr] Inner("inner")' in printed


def test_other_attributes_are_kept() -> None:
    extraction, printed = extract(
        'fn foo() -> Result<()> { Err(#[allow(unused)] #[fnerr] E("e")) }'
    )

    assert [s.tag for s in extraction.sites] == ["E"]
    assert "Err(#[allow(unused)] FooError::E())" in printed


def test_unmarked_calls_are_untouched() -> None:
    extraction, printed = extract('fn foo() -> Result<()> { E("{}", x as u8); Ok(()) }')

    assert extraction.sites == []
    assert 'E("{}", x as u8);' in printed


def test_path_callee_is_fatal() -> None:
    err = extract_error('fn foo() -> Result<()> { Err(#[fnerr] errors::E("e")) }')

    assert err.code == "FE3001"
    assert "errors::E" in err.text


def test_missing_template_is_fatal() -> None:
    err = extract_error("fn foo() -> Result<()> { Err(#[fnerr] E()) }")

    assert err.code == "FE3002"
    assert "'E'" in err.text


def test_argument_without_cast_is_fatal() -> None:
    err = extract_error('fn foo() -> Result<()> { Err(#[fnerr] E("{} {}", a as u8, path)) }')

    assert err.code == "FE3003"
    assert "`path`" in err.text
    assert err.span is not None


def test_marker_on_method_call_is_fatal() -> None:
    err = extract_error('fn foo() -> Result<()> { Err(#[fnerr] x.fail("e")) }')

    assert err.code == "FE3004"


def test_duplicate_tag_is_fatal() -> None:
    err = extract_error("""fn foo() -> Result<()> {
        a().map_err(|_| #[fnerr] Io("a"))?;
        b().map_err(|_| #[fnerr] Io("b"))?;
        Ok(())
    }""")

    assert err.code == "FE3005"
    assert "line 2" in err.text


def test_reference_field_needs_lifetime() -> None:
    err = extract_error('fn foo() -> Result<()> { Err(#[fnerr] E("{}", s as &str)) }')

    assert err.code == "FE4001"
