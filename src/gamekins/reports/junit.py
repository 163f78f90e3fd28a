"""
JUnit XML results.

Surefire and Gradle write one ``TEST-<class>.xml`` per test class, with a
``<testsuite tests="n">`` root and one ``<testcase name="...">`` per test.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from gamekins.models.files import ReadPolicy
from gamekins.reports.io import read_report_text

logger = logging.getLogger(__name__)

RESULT_PATTERN = "TEST-*.xml"


@dataclass(frozen=True)
class TestSuiteResult:
    """Executed tests of one test class."""

    __test__ = False

    name: str
    tests: int = 0
    test_names: tuple[str, ...] = field(default_factory=tuple)


def parse_test_suite(text: str) -> TestSuiteResult | None:
    """Parse a single JUnit result document.

    Args:
        text: XML content

    Returns:
        TestSuiteResult, or None if the document is malformed
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        logger.warning(f"Malformed JUnit result: {e}")
        return None

    suites = [root] if root.tag == "testsuite" else root.findall("testsuite")
    if not suites:
        return None

    names = []
    declared = 0
    for suite in suites:
        cases = suite.findall("testcase")
        names.extend(case.get("name", "") for case in cases)
        count = suite.get("tests")
        declared += int(count) if count and count.isdigit() else len(cases)

    return TestSuiteResult(
        name=suites[0].get("name", ""),
        tests=declared,
        test_names=tuple(name for name in names if name),
    )


def read_test_suite(path: Path | None, policy: ReadPolicy | None = None) -> TestSuiteResult | None:
    """Read the JUnit result of one test class.

    Args:
        path: Location of the ``TEST-<class>.xml`` file
        policy: Retry policy for the read

    Returns:
        TestSuiteResult, or None if the result is missing or malformed
    """
    text = read_report_text(path, policy=policy)
    if text is None:
        return None
    return parse_test_suite(text)


def count_tests(directory: Path, policy: ReadPolicy | None = None) -> int:
    """Total number of executed tests over every result in a directory.

    Args:
        directory: JUnit results directory
        policy: Retry policy for each read

    Returns:
        Sum of the test counts, 0 if the directory does not exist
    """
    if not directory.is_dir():
        return 0

    total = 0
    for path in sorted(directory.rglob(RESULT_PATTERN)):
        suite = read_test_suite(path, policy=policy)
        if suite is not None:
            total += suite.tests
    return total
