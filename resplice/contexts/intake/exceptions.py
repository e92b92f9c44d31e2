"""Custom exceptions for the tailoring engine with field and source references."""

from pathlib import Path
from typing import Optional, Union


class ResplicerError(Exception):
    """Base class for all errors raised by the tailoring engine."""

    pass


class InputError(ResplicerError, ValueError):
    """
    Exception raised when a tailoring request is rejected before any computation.

    Attributes:
        message: Error description
        field: Request field that failed validation (e.g., 'techStack')
        value: Offending value, if useful for display
    """

    def __init__(self, message: str, field: Optional[str] = None, value: object = None):
        self.message = message
        self.field = field
        self.value = value

        parts = [message]

        if field:
            parts.append(f"Field: {field}")

        if value is not None:
            shown = repr(value)
            # Truncate value if too long
            shown = shown[:120] + "..." if len(shown) > 120 else shown
            parts.append(f"Value: {shown}")

        super().__init__("\n".join(parts))


class CodecFailure(ResplicerError):
    """
    Exception raised when a document cannot be read or written at the codec boundary.

    Attributes:
        message: Error description
        source: Path or name of the document that failed
        original_error: The underlying codec error
    """

    def __init__(
        self,
        message: str,
        source: Optional[Union[str, Path]] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.source = source
        self.original_error = original_error

        parts = [message]

        if source:
            parts.append(f"Document: {source}")

        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class ConfigError(ResplicerError, ValueError):
    """
    Exception raised when an engine configuration file or override is invalid.

    Raised for unknown scoring profile names, missing keys, or values
    that would break the planner invariants (e.g., non-positive top_section_count).
    """

    pass
