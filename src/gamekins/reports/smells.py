"""
Static-analysis findings.

Findings are exported by the build as JSON, either as a plain list or as an
object with an ``issues`` list. Each finding needs a file, a rule and a
message; everything else is opaque to the engine.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import TypeAdapter, ValidationError

from gamekins.models.coverage import SmellRecord
from gamekins.models.files import FileDetails, ReadPolicy
from gamekins.reports.base import MalformedReportError
from gamekins.reports.io import read_report_text

logger = logging.getLogger(__name__)

_SMELL_LIST = TypeAdapter(list[SmellRecord])


def _label(path: Path | None) -> str | None:
    return str(path) if path is not None else None


def parse_smells(text: str, path: Path | None = None) -> list[SmellRecord]:
    """Parse a findings document.

    Args:
        text: JSON content
        path: Where the content came from, for diagnostics

    Returns:
        Validated findings

    Raises:
        MalformedReportError: If the document is not valid JSON or a
            finding lacks required fields
    """
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedReportError(f"Smells report is not valid JSON: {e}", _label(path)) from e

    if isinstance(data, dict):
        data = data.get("issues", [])
    try:
        return _SMELL_LIST.validate_python(data)
    except ValidationError as e:
        raise MalformedReportError(
            f"Invalid smells report: {e.error_count()} errors", _label(path)
        ) from e


def load_smells(path: Path | None, policy: ReadPolicy | None = None) -> list[SmellRecord]:
    """Read and parse a findings document.

    Args:
        path: Location of the JSON findings
        policy: Retry policy for the read

    Returns:
        Findings, empty if the file is missing, unreadable or malformed
    """
    text = read_report_text(path, policy=policy)
    if text is None:
        return []
    try:
        return parse_smells(text, path)
    except MalformedReportError as e:
        logger.warning(str(e))
        return []


def _normalize(path: str) -> str:
    return str(PurePosixPath(path.replace("\\", "/")))


def smells_of_file(smells: list[SmellRecord], details: FileDetails) -> list[SmellRecord]:
    """Findings that belong to the file, matched by workspace-relative path."""
    target = _normalize(details.file_path)
    return [
        smell
        for smell in smells
        if _normalize(smell.file_path) == target
        or _normalize(smell.file_path).endswith(f"/{target}")
    ]


def find_smell(smells: list[SmellRecord], original: SmellRecord) -> SmellRecord | None:
    for smell in smells:
        if smell.same_finding(original):
            return smell
    return None
