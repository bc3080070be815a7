"""Exception classes raised by the workbook export."""


class ExportError(Exception):
    """Base exception for a failed export attempt."""

    pass


class TemplateFetchError(ExportError):
    """The template could not be read from its source."""

    pass


class TemplateParseError(ExportError):
    """The template bytes are not a readable xlsx package."""

    pass


class WorkbookSerializationError(ExportError):
    """The filled workbook could not be written back to bytes."""

    pass


class ExportInProgressError(ExportError):
    """An export for the same report is still running."""

    pass
