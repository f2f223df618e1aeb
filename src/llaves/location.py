"""Source location tracking for error messages and debugging.

Provides SourceLocation dataclass for tracking positions in template text.
Templates are addressed by character offset; line and column are derived
from the offset when an error needs to be shown to a person.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and debugging.

    Line and column are 1-indexed; ``offset`` is the 0-indexed character
    offset into the template.

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Column offset (1-indexed)
        offset: Absolute character offset in source
        source_file: Source file path (optional)

    Examples:
            >>> SourceLocation.from_offset("ab\\ncd", 4)
        SourceLocation(lineno=2, col_offset=2, offset=4, source_file=None)

            >>> loc = SourceLocation(3, 7, 40, "commands/review.toml")
            >>> str(loc)
            'commands/review.toml:3:7'

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    lineno: int
    col_offset: int
    offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "file.toml:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    @classmethod
    def from_offset(
        cls, source: str, offset: int, source_file: str | None = None
    ) -> SourceLocation:
        """Compute line/column for a character offset.

        Offsets past the end of the source are clamped to the end.

        Args:
            source: Template text
            offset: 0-indexed character offset
            source_file: Optional source file path

        Returns:
            SourceLocation for the offset
        """
        offset = max(0, min(offset, len(source)))
        lineno = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(
            lineno=lineno,
            col_offset=offset - line_start + 1,
            offset=offset,
            source_file=source_file,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Create an unknown/placeholder location."""
        return cls(lineno=0, col_offset=0)
