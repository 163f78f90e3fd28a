"""
PIT mutation report parser.

PIT writes ``mutations.xml`` with one ``<mutation ...>`` element per line.
Each line is parsed on its own, so a report that is still being written
yields the mutants that are already complete.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from gamekins.models.base import MutationStatus
from gamekins.models.coverage import MutationRecord
from gamekins.models.files import FileDetails, ReadPolicy
from gamekins.reports.io import read_report_text

logger = logging.getLogger(__name__)

MUTATION_TAG = "<mutation "


def _child_text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def parse_mutation(record: str) -> MutationRecord | None:
    """Parse a single ``<mutation>`` element.

    Args:
        record: One line of the report

    Returns:
        MutationRecord, or None if the line is not a complete element
    """
    try:
        element = ET.fromstring(record.strip())
    except ET.ParseError as e:
        logger.debug(f"Skipping malformed mutation record: {e}")
        return None

    status_value = (element.get("status") or "").upper()
    try:
        status = MutationStatus(status_value)
    except ValueError:
        status = MutationStatus.UNKNOWN

    line_text = _child_text(element, "lineNumber")
    return MutationRecord(
        source_file=_child_text(element, "sourceFile"),
        mutated_class=_child_text(element, "mutatedClass"),
        mutated_method=_child_text(element, "mutatedMethod"),
        method_description=_child_text(element, "methodDescription"),
        line_number=int(line_text) if line_text.isdigit() else 0,
        mutator=_child_text(element, "mutator"),
        description=_child_text(element, "description"),
        status=status,
        detected=(element.get("detected") or "").lower() == "true",
    )


def parse_mutation_report(text: str) -> list[MutationRecord]:
    """Parse every mutation record of a report.

    Args:
        text: Content of mutations.xml

    Returns:
        Parsed mutants in report order
    """
    mutants = []
    for line in text.splitlines():
        if not line.lstrip().startswith(MUTATION_TAG):
            continue
        mutant = parse_mutation(line)
        if mutant is not None:
            mutants.append(mutant)
    return mutants


def load_mutations(path: Path | None, policy: ReadPolicy | None = None) -> list[MutationRecord]:
    """Read and parse a PIT mutation report.

    Args:
        path: Location of mutations.xml
        policy: Retry policy for the read

    Returns:
        Parsed mutants, empty if the report is missing or unreadable
    """
    text = read_report_text(path, policy=policy)
    if text is None:
        return []
    return parse_mutation_report(text)


def mutants_of_file(mutants: list[MutationRecord], details: FileDetails) -> list[MutationRecord]:
    """Mutants of the class in the file, inner classes included."""
    name = details.qualified_name
    return [
        mutant
        for mutant in mutants
        if mutant.mutated_class == name or mutant.mutated_class.startswith(f"{name}$")
    ]


def alive_mutants(mutants: list[MutationRecord]) -> list[MutationRecord]:
    """Mutants that no test killed."""
    return [mutant for mutant in mutants if mutant.status != MutationStatus.KILLED]


def find_mutant(mutants: list[MutationRecord], original: MutationRecord) -> MutationRecord | None:
    """Find the current state of a previously recorded mutant."""
    for mutant in mutants:
        if mutant.same_mutant(original):
            return mutant
    return None
