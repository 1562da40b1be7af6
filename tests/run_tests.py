#!/usr/bin/env python3
"""
Batch runner for the fnerror expander.

Every tests/cases/test_*.rs file is expanded through the CLI in a subprocess
and the exit code is compared with the one its name promises:
- test_*.rs       0, expanded cleanly
- test_warn_*.rs  1, expanded with warnings
- test_err_*.rs   2, rejected with an error

Header directives (see case_metadata.py) can pin parts of the expanded text
and of the diagnostics as well.

Usage:
    python tests/run_tests.py [-j N] [--filter basic] [--verbose] [--json]
"""

import argparse
import json
import os
import subprocess
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from tqdm import tqdm

from case_metadata import get_test_category, parse_case_metadata

EXIT_CODES = {"success": 0, "warning": 1, "error": 2}
ROOT = Path(__file__).parent.parent
CASES_DIR = ROOT / "tests" / "cases"
OUT_DIR = ROOT / "tests" / "bin"


@dataclass
class CaseResult:
    name: str
    expected: int
    actual: int
    problems: List[str] = field(default_factory=list)
    log: str = ""

    @property
    def passed(self) -> bool:
        return self.actual == self.expected and not self.problems


def run_case(case: Path) -> CaseResult:
    """Expand one case into tests/bin and check it."""
    expected = EXIT_CODES[get_test_category(case)]
    metadata = parse_case_metadata(case)
    dest = OUT_DIR / case.name
    cmd = [sys.executable, "-m", "fnerror.driver.cli", str(case), "--verbose", "-o", str(dest)]

    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=metadata.timeout_seconds,
            env={**os.environ, "NO_COLOR": "1", "NO_UNICODE": "1"},
        )
    except subprocess.TimeoutExpired:
        return CaseResult(case.name, expected, -1, ["timed out"])
    except OSError as e:
        return CaseResult(case.name, expected, -1, [f"could not start the expander: {e}"])

    expanded = dest.read_text(encoding="utf-8") if dest.exists() else ""
    log = ""
    if expanded:
        log += f"--- expanded\n{expanded}\n"
    if proc.stderr:
        log += f"--- stderr\n{proc.stderr}\n"
    return CaseResult(case.name, expected, proc.returncode,
                      metadata.check(expanded, proc.stderr), log)


def run_all(cases: List[Path], jobs: int, progress: bool) -> List[CaseResult]:
    results = []
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        pending = [pool.submit(run_case, case) for case in cases]
        with tqdm(total=len(cases), desc="Expanding cases", unit="case", disable=not progress) as bar:
            for done in as_completed(pending):
                results.append(done.result())
                bar.update(1)
    return sorted(results, key=lambda r: r.name)


def print_report(results: List[CaseResult], elapsed: float, verbose: bool) -> None:
    failed = [r for r in results if not r.passed]
    for r in results:
        if r.passed and not verbose:
            continue
        mark = "✓" if r.passed else "✗"
        print(f"{mark} {r.name} (exit {r.actual}, wanted {r.expected})")
        for problem in r.problems:
            print(f"    {problem}")
        if verbose and not r.passed and r.log:
            print(r.log)

    print()
    print(f"{len(results) - len(failed)}/{len(results)} cases passed in {elapsed:.2f}s")
    if failed:
        print("Failing: " + ", ".join(r.name for r in failed))


def main() -> int:
    ap = argparse.ArgumentParser(description="Run the fnerror expansion cases")
    ap.add_argument("-j", "--jobs", type=int, default=4, help="Parallel jobs (default: 4)")
    ap.add_argument("--filter", help="Only run cases whose name contains this text")
    ap.add_argument("-v", "--verbose", action="store_true", help="Show every case and the logs of failures")
    ap.add_argument("--json", action="store_true", help="Print a JSON summary instead")
    args = ap.parse_args()

    OUT_DIR.mkdir(exist_ok=True)
    # A stale expansion would satisfy the output checks of a failing case
    for stale in OUT_DIR.glob("test_*.rs"):
        stale.unlink()
    os.chdir(ROOT)

    cases = sorted(CASES_DIR.glob("test_*.rs"))
    if args.filter:
        cases = [c for c in cases if args.filter in c.name]
    if not cases:
        print("No cases found", file=sys.stderr)
        return 1

    started = time.time()
    results = run_all(cases, args.jobs, progress=not (args.json or args.verbose))
    elapsed = time.time() - started

    if args.json:
        print(json.dumps({
            "total": len(results),
            "passed": sum(r.passed for r in results),
            "duration_seconds": round(elapsed, 2),
            "failed": [
                {"name": r.name, "expected_exit_code": r.expected,
                 "actual_exit_code": r.actual, "problems": r.problems}
                for r in results if not r.passed
            ],
        }, indent=2))
    else:
        print_report(results, elapsed, args.verbose)

    return 0 if all(r.passed for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
