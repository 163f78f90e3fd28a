"""
JaCoCo Report Parser.

Reads the three JaCoCo artifacts a coverage challenge needs:

- the source page (``Foo.java.html``), where every instrumented line is a
  ``<span class="fc|pc|nc" id="L<n>" title="...">`` element
- the class page (``Foo.html``), whose method rows link to the first line
  of each method
- the CSV report with per-class line counters

Every reader tolerates missing and half-written files and returns empty
results for them.
"""

from __future__ import annotations

import csv
import io
import logging
import random
import re
from dataclasses import dataclass, field
from html.parser import HTMLParser
from pathlib import Path

from gamekins.models.base import CoverageStatus
from gamekins.models.coverage import (
    BranchCoverage,
    ClassCoverage,
    LineCoverage,
    MethodCoverage,
)
from gamekins.models.files import ReadPolicy
from gamekins.reports.io import read_report_text

logger = logging.getLogger(__name__)

HTML_END_MARKER = "</html>"

_LINE_ID = re.compile(r"^L(\d+)$")
_METHOD_ANCHOR = re.compile(r"#L(\d+)$")
_ALL_BRANCHES = re.compile(r"^All\s+(\d+)\s+branch(?:es)?\s+(missed|covered)", re.IGNORECASE)
_COUNT_OF_TOTAL = re.compile(r"^(\d+)\s+of\s+(\d+)")
_EXCEPTION_WORDS = re.compile(r"\b(throw|throws|catch|raise|except)\b")

_STATUS_VALUES = {status.value for status in CoverageStatus}


def parse_branch_counts(title: str) -> tuple[int, int]:
    """Extract the (covered, total) branch pair from a line title.

    Handles JaCoCo's own wording and the bare "covered total" pair:

    - ``""`` -> (0, 1), a non-branching line
    - ``"2 of 5"`` or ``"2 5"`` -> (2, 5)
    - ``"1 of 4 branches missed."`` -> (3, 4)
    - ``"All 2 branches missed."`` -> (0, 2)
    - ``"All 2 branches covered."`` -> (2, 2)

    Args:
        title: Raw title attribute of the line

    Returns:
        Tuple of (covered branches, total branches)
    """
    title = title.strip()
    if not title:
        return 0, 1

    match = _ALL_BRANCHES.match(title)
    if match:
        total = max(int(match.group(1)), 1)
        if match.group(2).lower() == "missed":
            return 0, total
        return total, total

    match = _COUNT_OF_TOTAL.match(title)
    if match:
        count, total = int(match.group(1)), max(int(match.group(2)), 1)
        if "missed" in title.lower():
            count = total - count
        return min(max(count, 0), total), total

    tokens = title.split()
    if len(tokens) >= 2 and tokens[0].isdigit() and tokens[1].isdigit():
        total = max(int(tokens[1]), 1)
        return min(int(tokens[0]), total), total

    return 0, 1


def normalize_text(text: str) -> str:
    """Collapse whitespace the way the report renders line content."""
    return " ".join(text.split())


def _build_line(attributes: dict[str, str | None], text: str) -> LineCoverage:
    status = CoverageStatus((attributes.get("class") or "").split()[0])
    number = int(_LINE_ID.match(attributes.get("id") or "").group(1))
    title = attributes.get("title") or ""
    covered, total = parse_branch_counts(title)
    line_type = BranchCoverage if total > 1 else LineCoverage
    return line_type(
        number=number,
        status=status,
        text=normalize_text(text),
        title=title,
        covered_branches=covered,
        total_branches=total,
    )


class _SourcePageParser(HTMLParser):
    """Collect the coverage spans of a JaCoCo source page."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.lines: list[LineCoverage] = []
        self._current: dict[str, str | None] | None = None
        self._nested = 0
        self._text: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag != "span":
            return
        if self._current is not None:
            self._nested += 1
            return
        attributes = dict(attrs)
        css = (attributes.get("class") or "").split()
        if not css or css[0] not in _STATUS_VALUES:
            return
        if not _LINE_ID.match(attributes.get("id") or ""):
            return
        self._current = attributes
        self._nested = 0
        self._text = []

    def handle_endtag(self, tag):
        if tag != "span" or self._current is None:
            return
        if self._nested:
            self._nested -= 1
            return
        self.lines.append(_build_line(self._current, "".join(self._text)))
        self._current = None

    def handle_data(self, data):
        if self._current is not None:
            self._text.append(data)


class _MethodPageParser(HTMLParser):
    """Collect (name, first line) of every method row on a class page."""

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.methods: list[tuple[str, int]] = []
        self._first_line: int | None = None
        self._text: list[str] = []

    def handle_starttag(self, tag, attrs):
        if tag != "a":
            return
        attributes = dict(attrs)
        if "el_method" not in (attributes.get("class") or "").split():
            return
        match = _METHOD_ANCHOR.search(attributes.get("href") or "")
        if match:
            self._first_line = int(match.group(1))
            self._text = []

    def handle_endtag(self, tag):
        if tag == "a" and self._first_line is not None:
            name = normalize_text("".join(self._text))
            if name:
                self.methods.append((name, self._first_line))
            self._first_line = None

    def handle_data(self, data):
        if self._first_line is not None:
            self._text.append(data)


@dataclass(frozen=True)
class SourceReport:
    """Parsed JaCoCo source page of one class.

    An empty report means "no data": the page is missing, incomplete or
    unparsable. It never means "fully covered".
    """

    path: Path | None = None
    lines: tuple[LineCoverage, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def last_line_number(self) -> int:
        return max((line.number for line in self.lines), default=0)

    def lines_with(self, *statuses: CoverageStatus) -> list[LineCoverage]:
        """Lines whose marker is one of the given statuses, in line order."""
        return [line for line in self.lines if line.status in statuses]

    def count(self, status: CoverageStatus) -> int:
        return sum(1 for line in self.lines if line.status == status)

    def line(self, number: int) -> LineCoverage | None:
        for line in self.lines:
            if line.number == number:
                return line
        return None

    @property
    def has_uncovered_lines(self) -> bool:
        """Whether any line is partially or not covered."""
        return any(line.status != CoverageStatus.FULLY_COVERED for line in self.lines)

    def uncovered_lines(self, partially: bool = False) -> list[LineCoverage]:
        """Candidate lines for line challenges.

        Args:
            partially: Only return partially covered (branch) lines

        Returns:
            Not or partially covered lines, in line order
        """
        if partially:
            return self.lines_with(CoverageStatus.PARTIALLY_COVERED)
        return self.lines_with(CoverageStatus.NOT_COVERED, CoverageStatus.PARTIALLY_COVERED)

    def exception_lines(self) -> list[LineCoverage]:
        """Uncovered lines that throw, catch or declare an exception."""
        return [line for line in self.uncovered_lines() if _EXCEPTION_WORDS.search(line.text)]

    def contains_uncovered_text(self, text: str) -> bool:
        """Whether a partially or not covered line still has this content."""
        return any(line.text == text for line in self.uncovered_lines())

    def find_match(self, original: LineCoverage) -> LineCoverage | None:
        """Find a previously recorded line in this (possibly regenerated) report.

        Lines may have moved since the original was recorded. An exact
        number and text match among covered lines wins. Otherwise all lines
        with the same text are considered: a single one is taken as is,
        several are resolved by the smallest distance to the old number.

        The caller decides whether the match counts; a match that is still
        not covered is never a solve.

        Args:
            original: Line as recorded at challenge creation

        Returns:
            The matching line, or None if the text is gone
        """
        for line in self.lines_with(
            CoverageStatus.FULLY_COVERED, CoverageStatus.PARTIALLY_COVERED
        ):
            if line.number == original.number and line.text == original.text:
                return line

        candidates = [line for line in self.lines if line.text == original.text]
        if not candidates:
            return None
        if len(candidates) == 1:
            return candidates[0]
        return min(candidates, key=lambda line: abs(line.number - original.number))

    def class_coverage(
        self,
        class_name: str,
        package_name: str = "",
        coverage: float | None = None,
    ) -> ClassCoverage:
        """Summarize the report as a class coverage entity.

        Args:
            class_name: Simple class name
            package_name: Dotted package name
            coverage: Ratio computed by the host; derived from the line
                markers if not given

        Returns:
            ClassCoverage with line counts
        """
        fully = self.count(CoverageStatus.FULLY_COVERED)
        partially = self.count(CoverageStatus.PARTIALLY_COVERED)
        not_covered = self.count(CoverageStatus.NOT_COVERED)
        if coverage is None:
            total = fully + partially + not_covered
            coverage = (fully + partially) / total if total else 0.0
        return ClassCoverage(
            class_name=class_name,
            package_name=package_name,
            coverage=coverage,
            fully_covered_lines=fully,
            partially_covered_lines=partially,
            not_covered_lines=not_covered,
        )


def parse_source_page(text: str, path: Path | None = None) -> SourceReport:
    """Parse the HTML of a JaCoCo source page.

    Args:
        text: HTML content
        path: Where the content came from, for diagnostics

    Returns:
        SourceReport, empty if nothing could be parsed
    """
    parser = _SourcePageParser()
    try:
        parser.feed(text)
        parser.close()
    except (ValueError, AssertionError) as e:
        logger.warning(f"Malformed JaCoCo source page {path}: {e}")
        return SourceReport(path=path)
    return SourceReport(path=path, lines=tuple(parser.lines))


def load_source_report(path: Path | None, policy: ReadPolicy | None = None) -> SourceReport:
    """Read and parse a JaCoCo source page.

    Args:
        path: Location of the ``<File>.<ext>.html`` page
        policy: Retry policy for the read

    Returns:
        SourceReport, empty if the page is missing or unreadable
    """
    text = read_report_text(path, complete_marker=HTML_END_MARKER, policy=policy)
    if text is None:
        return SourceReport(path=path)
    return parse_source_page(text, path)


def parse_method_page(text: str) -> list[tuple[str, int]]:
    """Extract (method name, first line) pairs from a JaCoCo class page."""
    parser = _MethodPageParser()
    try:
        parser.feed(text)
        parser.close()
    except (ValueError, AssertionError) as e:
        logger.warning(f"Malformed JaCoCo class page: {e}")
        return []
    return parser.methods


def aggregate_methods(
    method_starts: list[tuple[str, int]],
    report: SourceReport,
) -> list[MethodCoverage]:
    """Aggregate line status over the span of every method.

    A method spans from its first line up to the line before the next
    method's first line; the last method runs to the end of the report.

    Args:
        method_starts: (name, first line) pairs from the class page
        report: Parsed source page of the same class

    Returns:
        MethodCoverage per method, ordered by first line
    """
    if report.is_empty:
        return []

    ordered = sorted(method_starts, key=lambda item: item[1])
    starts = sorted({first_line for _, first_line in ordered})
    last_line = report.last_line_number
    methods = []
    for name, first_line in ordered:
        next_starts = [start for start in starts if start > first_line]
        end = next_starts[0] - 1 if next_starts else max(last_line, first_line)
        span = [line for line in report.lines if first_line <= line.number <= end]
        missed = sum(1 for line in span if line.status != CoverageStatus.FULLY_COVERED)
        methods.append(
            MethodCoverage(
                name=name,
                first_line=first_line,
                last_line=max(end, first_line),
                total_lines=len(span),
                missed_lines=missed,
            )
        )
    return methods


def load_method_entries(
    method_page: Path | None,
    report: SourceReport,
    policy: ReadPolicy | None = None,
) -> list[MethodCoverage]:
    """Read the class page and aggregate the methods of a class.

    Args:
        method_page: Location of the ``<File>.html`` page
        report: Parsed source page of the same class
        policy: Retry policy for the read

    Returns:
        MethodCoverage per method, empty if either page is unavailable
    """
    text = read_report_text(method_page, complete_marker=HTML_END_MARKER, policy=policy)
    if text is None:
        return []
    return aggregate_methods(parse_method_page(text), report)


def not_fully_covered_methods(methods: list[MethodCoverage]) -> list[MethodCoverage]:
    return [method for method in methods if not method.fully_covered]


def find_method(methods: list[MethodCoverage], name: str) -> MethodCoverage | None:
    for method in methods:
        if method.name == name:
            return method
    return None


def parse_class_coverage(text: str, package_name: str, class_name: str) -> float | None:
    """Compute the line coverage of one class from JaCoCo CSV content.

    Args:
        text: CSV content with PACKAGE, CLASS, LINE_MISSED, LINE_COVERED columns
        package_name: Dotted package name
        class_name: Simple class name

    Returns:
        Coverage ratio, 1.0 for classes without lines, None if the class
        is not listed or the CSV is malformed
    """
    try:
        for row in csv.DictReader(io.StringIO(text)):
            if row.get("PACKAGE") != package_name or row.get("CLASS") != class_name:
                continue
            missed = int(row["LINE_MISSED"])
            covered = int(row["LINE_COVERED"])
            total = missed + covered
            return covered / total if total else 1.0
    except (KeyError, ValueError, TypeError, csv.Error) as e:
        logger.warning(f"Malformed JaCoCo CSV for {package_name}.{class_name}: {e}")
    return None


def read_class_coverage(
    csv_path: Path | None,
    package_name: str,
    class_name: str,
    policy: ReadPolicy | None = None,
) -> float | None:
    """Read the coverage of one class from the JaCoCo CSV.

    Args:
        csv_path: Location of the CSV report
        package_name: Dotted package name
        class_name: Simple class name
        policy: Retry policy for the read

    Returns:
        Coverage ratio, or None if unavailable
    """
    text = read_report_text(csv_path, policy=policy)
    if text is None:
        return None
    return parse_class_coverage(text, package_name, class_name)


def choose_random_line(
    report: SourceReport,
    rng: random.Random,
    partially: bool = False,
) -> LineCoverage | None:
    """Draw one not or partially covered line.

    Args:
        report: Parsed source page
        rng: Random source of the round
        partially: Restrict the draw to partially covered lines

    Returns:
        The drawn line, or None if there is none
    """
    candidates = report.uncovered_lines(partially=partially)
    if not candidates:
        return None
    return rng.choice(candidates)


def choose_exception_line(report: SourceReport, rng: random.Random) -> LineCoverage | None:
    candidates = report.exception_lines()
    if not candidates:
        return None
    return rng.choice(candidates)


def choose_random_method(
    methods: list[MethodCoverage],
    rng: random.Random,
) -> MethodCoverage | None:
    candidates = not_fully_covered_methods(methods)
    if not candidates:
        return None
    return rng.choice(candidates)
