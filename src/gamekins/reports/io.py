"""
Tolerant report reads.

The build may rewrite a report while a challenge is being generated or
evaluated. Reads are retried with tenacity; a file that stays missing or
incomplete is reported as "no data" (None) instead of raising.
"""

from __future__ import annotations

import logging
from pathlib import Path

from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from gamekins.models.files import ReadPolicy
from gamekins.reports.base import IncompleteReportError

logger = logging.getLogger(__name__)

DEFAULT_READ_POLICY = ReadPolicy()


def _read_once(path: Path, complete_marker: str | None) -> str:
    text = path.read_text(encoding="utf-8", errors="replace")
    if complete_marker is not None and complete_marker not in text:
        raise IncompleteReportError(f"Report is incomplete: {path}")
    return text


def read_report_text(
    path: Path | None,
    complete_marker: str | None = None,
    policy: ReadPolicy | None = None,
) -> str | None:
    """Read a report, retrying transient I/O failures.

    Args:
        path: Report to read; None is treated as a missing report
        complete_marker: Text that must be present for the report to be
            complete, e.g. ``</html>``
        policy: Retry policy, defaults to 3 attempts 50ms apart

    Returns:
        The report text, or None if it could not be read
    """
    if path is None:
        return None

    policy = policy or DEFAULT_READ_POLICY
    retrying = Retrying(
        stop=stop_after_attempt(policy.attempts),
        wait=wait_fixed(policy.wait_seconds),
        retry=retry_if_exception_type(OSError),
    )
    try:
        for attempt in retrying:
            with attempt:
                return _read_once(path, complete_marker)
    except RetryError as e:
        cause = e.last_attempt.exception()
        if isinstance(cause, FileNotFoundError):
            logger.debug(f"Report not found: {path}")
        else:
            logger.warning(f"Could not read report {path}: {cause}")
    return None
