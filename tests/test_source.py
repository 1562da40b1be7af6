from textwrap import dedent

import pytest

from fnerror.internals.errors import TransformError
from fnerror.internals.report import Reporter
from fnerror.transform.source import expand_source, find_marked_functions


def test_source_without_markers_is_unchanged() -> None:
    src = "// header\nuse std::io;\n\nfn main() {\n    run();   // trailing\n}\n"

    assert expand_source(src) == src


def test_text_around_expansion_is_kept() -> None:
    src = dedent("""\
        // Loader.
        use std::io;

        #[fnerror]
        fn load() -> Result<u8> {
            Err(#[fnerr] Empty("empty"))
        }

        fn main() {   /* untouched */ }
        """)

    out = expand_source(src)

    assert out == dedent("""\
        // Loader.
        use std::io;

        #[derive(Debug, ::thiserror::Error)]
        pub enum LoadError {
            #[error("empty")]
            Empty(),
        }

        fn load() -> ::std::result::Result<u8, LoadError> {
            Err(LoadError::Empty())
        }

        fn main() {   /* untouched */ }
        """)


def test_expansion_inside_module_keeps_indentation() -> None:
    src = dedent("""\
        mod io {
            #[fnerror]
            pub fn read() -> Result<()> {
                Err(#[fnerr] Eof("eof"))
            }
        }
        """)

    assert expand_source(src) == dedent("""\
        mod io {
            #[derive(Debug, ::thiserror::Error)]
            pub enum ReadError {
                #[error("eof")]
                Eof(),
            }

            pub fn read() -> ::std::result::Result<(), ReadError> {
                Err(ReadError::Eof())
            }
        }
        """)


def test_several_functions() -> None:
    src = dedent("""\
        #[fnerror]
        fn a() -> Result<()> { Err(#[fnerr] A("a")) }

        #[fnerror]
        fn b() -> Result<()> { Err(#[fnerr] B("b")) }
        """)

    out = expand_source(src)

    assert out.index("pub enum AError") < out.index("fn a()") < out.index("pub enum BError") < out.index("fn b()")
    assert "#[fnerr" not in out


def test_nested_marked_function_is_expanded_separately() -> None:
    src = dedent("""\
        #[fnerror]
        fn outer() -> Result<()> {
            #[fnerror]
            fn inner() -> Result<()> {
                Err(#[fnerr] Inner("inner"))
            }
            inner().map_err(|_| #[fnerr] Outer("outer"))?;
            Ok(())
        }
        """)

    out = expand_source(src)

    assert "pub enum OuterError {\n    #[error(\"outer\")]\n    Outer(),\n}" in out
    assert "    pub enum InnerError {\n        #[error(\"inner\")]\n        Inner(),\n    }" in out
    assert "Err(InnerError::Inner())" in out
    assert "#[fnerr" not in out


def test_marked_function_inside_method_body() -> None:
    src = dedent("""\
        impl Server {
            fn run(&self) {
                #[fnerror]
                fn step() -> Result<()> {
                    Err(#[fnerr] Stop("stop"))
                }
            }
        }
        """)

    out = expand_source(src)

    assert "        pub enum StepError {" in out
    assert out.startswith("impl Server {\n    fn run(&self) {\n")


def test_find_marked_functions_outermost_only() -> None:
    src = "#[fnerror]\nfn a() -> Result<()> {\n    #[fnerror]\n    fn b() -> Result<()> { Ok(()) }\n    Ok(())\n}\n"

    assert [fn.sig.name for fn in find_marked_functions(src)] == ["a"]


def test_marked_method_is_rejected() -> None:
    src = "impl Foo {\n    #[fnerror]\n    fn bar(&self) -> Result<()> { Ok(()) }\n}\n"

    with pytest.raises(TransformError) as exc_info:
        expand_source(src)

    assert exc_info.value.code == "FE5001"
    assert exc_info.value.span.line == 2


@pytest.mark.parametrize(
    "src,kind",
    [
        ("#[fnerror]\nstruct Foo;\n", "struct"),
        ("#[fnerror]\nmod m {}\n", "mod item"),
        ("#[fnerror]\nimpl Foo {}\n", "impl item"),
    ],
)
def test_marker_on_other_items_is_rejected(src: str, kind: str) -> None:
    with pytest.raises(TransformError) as exc_info:
        expand_source(src)

    assert exc_info.value.code == "FE5002"
    assert kind in exc_info.value.text


def test_warnings_are_reported() -> None:
    reporter = Reporter(source="", filename="<test>")

    expand_source("#[fnerror]\nfn a() -> Result<()> { Ok(()) }\n", reporter=reporter)

    assert reporter.has_warnings
    assert not reporter.has_errors
