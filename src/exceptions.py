"""Project-wide custom exception types."""


class ParseError(RuntimeError):
    """Raised when a spreadsheet payload cannot be read."""

    def __init__(self, message: str) -> None:  # noqa: D401 – simple constructor
        super().__init__(message)


class EmptyDatasetError(ValueError):
    """Raised when a spreadsheet has a header row but no respondents."""


class InvalidReportError(ValueError):
    """Raised when a stored/imported report document is structurally incomplete."""
