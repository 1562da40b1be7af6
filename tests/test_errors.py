import pytest

from fnerror.internals import errors as er
from fnerror.internals.errors import ERR, REGISTRY, Severity, TransformError, raise_fatal
from fnerror.internals.report import Reporter, Span


def test_catalog_lookup() -> None:
    assert ERR.FE3003 is REGISTRY["FE3003"]
    assert ERR["FW1001"].severity == Severity.WARNING

    with pytest.raises(AttributeError):
        ERR.FE0000


def test_codes_are_unique_and_prefixed() -> None:
    for code, msg in REGISTRY.items():
        assert msg.code == code
        prefix = "FE" if msg.severity == Severity.ERROR else "FW"
        assert code.startswith(prefix)


def test_duplicate_registration_is_rejected() -> None:
    with pytest.raises(ValueError):
        er._add(er.ErrorMessage("FE0001", Severity.ERROR, "again"))


def test_missing_format_key() -> None:
    with pytest.raises(KeyError) as exc_info:
        raise_fatal(ERR.FE3003, None)

    assert exc_info.value.args[0].startswith("missing text key 'found' for FE3003")


def test_raise_fatal_carries_code_and_span() -> None:
    span = Span(3, 5, 3, 9)

    with pytest.raises(TransformError) as exc_info:
        raise_fatal(ERR.FE3001, span, found="a::B")

    err = exc_info.value
    assert err.code == "FE3001"
    assert err.span is span
    assert str(err).startswith("FE3001: ")


def test_emit_routes_by_severity() -> None:
    r = Reporter()

    er.emit(r, ERR.FW1001, None, name="f", error="FError")
    er.emit(r, ERR.FE0001, None, detail="unexpected end of input")

    assert r.codes() == ["FW1001", "FE0001"]
    assert r.has_warnings and r.has_errors


def test_plain_format() -> None:
    r = Reporter(source="fn f() {\n    g(x)\n}\n", filename="<stdin>")
    TransformError(ERR.FE3003, "expect a cast expression, found `x`", Span(2, 7, 2, 8)).report(r)

    assert r.format(use_color=False, use_unicode=False) == "\n".join([
        "<stdin>:2:7: error [FE3003]: expect a cast expression, found `x`.",
        "  |     g(x)",
        "  `       ^",
    ])


def test_format_without_span() -> None:
    r = Reporter(filename="<stdin>")
    r.warn("FW1001", "nothing to do", None)

    assert r.format(use_color=False, use_unicode=False) == "<stdin>: warning [FW1001]: nothing to do."


def test_underline_covers_single_line_span() -> None:
    r = Reporter(source="let x = g(y);\n", filename="<stdin>")
    r.error("FE3001", "bad callee", Span(1, 9, 1, 13))

    lines = r.format(use_color=False, use_unicode=False).splitlines()
    assert lines[-1] == "  ` " + " " * 8 + "^^^^"
    assert Span(1, 9, 3, 2).width == 1
