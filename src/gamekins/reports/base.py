"""
Report error types.

Missing reports are not errors: readers return empty collections for them.
These exceptions describe files that exist but cannot be used.
"""


class ReportError(Exception):
    """Base exception for report errors."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        msg = super().__str__()
        if self.path:
            msg = f"{msg} (file: {self.path})"
        return msg


class MalformedReportError(ReportError):
    """Raised when a report exists but its content cannot be parsed."""

    pass


class IncompleteReportError(OSError):
    """Raised when a report is read while the build is still writing it.

    Subclasses OSError so the read retry treats it like any other
    transient I/O failure.
    """

    pass
