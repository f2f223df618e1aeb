"""Exception classes for Llaves.

Provides standardized exceptions for error handling throughout Llaves.

The scanning algorithms return ``ParseError`` instances as values rather
than raising them; ``llaves.parse`` raises them for callers that prefer
exceptions.
"""

from __future__ import annotations


class LlavesError(Exception):
    """Base exception for all Llaves errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(LlavesError):
    """Error during template scanning.

    Raised (or returned) when the scanner meets a directive it cannot
    delimit. Carries the offending character offset so callers can point
    the user at the broken span.
    """

    def __init__(
        self,
        message: str,
        offset: int | None = None,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            offset: Character offset into the template (0-indexed)
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.offset = offset
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        # Build formatted message
        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class NoMarkerDelimiterError(ParseError):
    """A ``{{marker`` opener was never followed by its ``:`` delimiter.

    Only raised for the named ``{{marker:content}}`` form, when no colon
    appears within the marker lookahead window.
    """

    def __init__(
        self,
        trigger_at: int,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize with the offset of the ``{{`` that opened the marker.

        Args:
            trigger_at: Offset of the trigger that has no marker delimiter
            lineno: Line number of the trigger (1-indexed)
            col_offset: Column of the trigger (1-indexed)
            source_file: Path to source file (optional)
        """
        self.trigger_at = trigger_at
        super().__init__(
            f"missing ':' after marker name in directive starting at character {trigger_at}",
            offset=trigger_at,
            lineno=lineno,
            col_offset=col_offset,
            source_file=source_file,
        )


class UnterminatedDirectiveError(ParseError):
    """A directive was opened but its braces never balance.

    ``opened_at`` is the offset of the first content character; the
    trigger itself starts at ``trigger_at``.
    """

    def __init__(
        self,
        opened_at: int,
        trigger_at: int | None = None,
        command_name: str | None = None,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize unterminated directive error.

        Args:
            opened_at: Offset of the first content character
            trigger_at: Offset of the trigger that opened the directive
            command_name: Name of the command whose template is broken (optional)
            lineno: Line number of the content start (1-indexed)
            col_offset: Column of the content start (1-indexed)
            source_file: Path to source file (optional)
        """
        self.opened_at = opened_at
        self.trigger_at = trigger_at
        self.command_name = command_name

        where = f" in {command_name}" if command_name else ""
        super().__init__(
            f"unclosed directive{where} starting at character {opened_at}",
            offset=opened_at,
            lineno=lineno,
            col_offset=col_offset,
            source_file=source_file,
        )


class TriggerTableError(LlavesError):
    """Error in a trigger table definition.

    Raised when a TriggerSpec is malformed (empty prefix, missing marker).
    """

    def __init__(self, prefix: str, message: str) -> None:
        """Initialize trigger table error.

        Args:
            prefix: The offending trigger prefix
            message: Description of the error
        """
        self.prefix = prefix
        super().__init__(f"Trigger {prefix!r}: {message}")
