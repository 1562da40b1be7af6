from collections.abc import Callable
from textwrap import dedent

import pytest

from fnerror.internals.errors import TransformError
from fnerror.internals.report import Reporter
from fnerror.transform.expand import expand_item


@pytest.fixture
def reporter() -> Reporter:
    return Reporter(source="", filename="<test>")


@pytest.fixture
def expand(reporter: Reporter) -> Callable[[str], str]:
    """Expand one fn item and return the printed enum + function."""
    def _expand(text: str) -> str:
        return expand_item(dedent(text).strip(), reporter=reporter).to_source()

    return _expand


@pytest.fixture
def expect_fatal() -> Callable[[str, str], TransformError]:
    """Expand one fn item that must fail with `code`."""
    def _expect_fatal(text: str, code: str) -> TransformError:
        with pytest.raises(TransformError) as exc_info:
            expand_item(dedent(text).strip())
        assert exc_info.value.code == code, str(exc_info.value)
        return exc_info.value

    return _expect_fatal
