"""
Expectation metadata for the .rs test cases.

A case can pin parts of the expander's output with comment directives in its
first lines:

    // EXPECT_STDOUT_CONTAINS: "pub enum LoadError {"
    // EXPECT_STDOUT_NOT_CONTAINS: "#[fnerr]"
    // EXPECT_STDERR_CONTAINS: "FE3003"
    // TIMEOUT_SECONDS: 30
"""

from dataclasses import dataclass, field
from typing import List
from pathlib import Path

HEADER_LINES = 20
DIRECTIVES = ("EXPECT_STDOUT_CONTAINS:", "EXPECT_STDOUT_NOT_CONTAINS:", "EXPECT_STDERR_CONTAINS:", "TIMEOUT_SECONDS:")


@dataclass
class CaseMetadata:
    """Expectations for one test case, beyond its exit code."""

    expect_stdout_contains: List[str] = field(default_factory=list)
    expect_stdout_not_contains: List[str] = field(default_factory=list)
    expect_stderr_contains: List[str] = field(default_factory=list)
    timeout_seconds: int = 30

    def check(self, stdout: str, stderr: str) -> List[str]:
        """Return a description of every unmet expectation.

        The directive comments themselves are copied to the expanded output
        unchanged, so they are left out of the stdout checks.
        """
        stdout = strip_directives(stdout)
        problems = []
        for text in self.expect_stdout_contains:
            if text not in stdout:
                problems.append(f"stdout is missing {text!r}")
        for text in self.expect_stdout_not_contains:
            if text in stdout:
                problems.append(f"stdout unexpectedly contains {text!r}")
        for text in self.expect_stderr_contains:
            if text not in stderr:
                problems.append(f"stderr is missing {text!r}")
        return problems


def _directive(line: str) -> str:
    """The directive text of a `// NAME: value` comment line, or "" for other lines."""
    line = line.strip()
    if not line.startswith("//"):
        return ""
    text = line[2:].strip()
    return text if text.startswith(DIRECTIVES) else ""


def strip_directives(text: str) -> str:
    return "\n".join(line for line in text.split("\n") if not _directive(line))


def _value(directive: str) -> str:
    value = directive.split(':', 1)[1].strip()
    # Remove quotes if present
    if value.startswith('"') and value.endswith('"') and len(value) >= 2:
        value = value[1:-1]
    # Handle escape sequences
    return value.replace('\\n', '\n').replace('\\t', '\t').replace('\\"', '"')


def parse_case_metadata(test_file: Path) -> CaseMetadata:
    """
    Parse expectation directives from the `//` comments at the top of a case.

    Args:
        test_file: Path to the .rs test file

    Returns:
        CaseMetadata with the parsed expectations
    """
    metadata = CaseMetadata()

    try:
        content = test_file.read_text(encoding='utf-8')
    except OSError as e:
        print(f"Warning: Failed to read metadata from {test_file}: {e}")
        return metadata

    for line in content.split('\n')[:HEADER_LINES]:
        line = line.strip()
        if not line.startswith('//'):
            continue

        directive = line[2:].strip()

        if directive.startswith('EXPECT_STDOUT_CONTAINS:'):
            metadata.expect_stdout_contains.append(_value(directive))

        elif directive.startswith('EXPECT_STDOUT_NOT_CONTAINS:'):
            metadata.expect_stdout_not_contains.append(_value(directive))

        elif directive.startswith('EXPECT_STDERR_CONTAINS:'):
            metadata.expect_stderr_contains.append(_value(directive))

        elif directive.startswith('TIMEOUT_SECONDS:'):
            value = _value(directive)
            try:
                metadata.timeout_seconds = int(value)
            except ValueError:
                print(f"Warning: Invalid TIMEOUT_SECONDS value in {test_file}: {value}")

    return metadata


def get_test_category(test_file: Path) -> str:
    """
    Determine test category based on filename pattern.

    Returns:
        'error': Expansion must fail (test_err_*)
        'warning': Expansion succeeds with warnings (test_warn_*)
        'success': Expansion succeeds without warnings (test_*)
    """
    filename = test_file.name

    if filename.startswith('test_err_'):
        return 'error'
    elif filename.startswith('test_warn_'):
        return 'warning'
    else:
        return 'success'
