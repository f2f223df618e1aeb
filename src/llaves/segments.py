"""Scan output: directives, segments and the ParseOutput container.

A successful scan produces an ordered tuple of segments, each either a
Literal run of template text or a Directive wrapping an
InjectionDirective. Segments cover the source exactly once, so
concatenating their text reproduces the template verbatim.

Segment Hierarchy:
Segment
├── Literal
└── Directive

Thread Safety:
All records are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from llaves.markers import Marker, MarkerKind


@dataclass(frozen=True, slots=True)
class InjectionDirective:
    """One directive found in a template.

    ``start``/``end`` cover the whole directive including delimiters and
    are what callers use to splice replacement text back in.
    ``content_start``/``content_end`` cover ``raw_content`` only.

    Attributes:
        marker: Marker identifying the directive type
        raw_content: Text between the logical open and close delimiters
        start: Offset of the first trigger character
        end: Offset just past the final closing delimiter
        content_start: Offset of the first content character
        content_end: Offset just past the last content character
        text: The full original directive text, delimiters included
        trigger: The trigger prefix that opened the directive

    """

    marker: Marker
    raw_content: str
    start: int
    end: int
    content_start: int
    content_end: int
    text: str
    trigger: str

    @property
    def kind(self) -> MarkerKind:
        """Semantic type of the directive."""
        return self.marker.kind

    @property
    def span(self) -> tuple[int, int]:
        """Half-open ``(start, end)`` range of the whole directive."""
        return (self.start, self.end)

    def __repr__(self) -> str:
        content = self.raw_content
        if len(content) > 20:
            content = content[:17] + "..."
        return f"InjectionDirective({self.marker.name}, {content!r}, {self.start}:{self.end})"


@dataclass(frozen=True, slots=True)
class Segment:
    """Base class for output segments."""

    @property
    def text(self) -> str:
        """Original template text covered by this segment."""
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class Literal(Segment):
    """Plain template text between directives."""

    content: str
    start: int
    end: int

    @property
    def text(self) -> str:
        return self.content


@dataclass(frozen=True, slots=True)
class Directive(Segment):
    """A segment holding a parsed directive."""

    directive: InjectionDirective

    @property
    def text(self) -> str:
        return self.directive.text

    @property
    def start(self) -> int:
        return self.directive.start

    @property
    def end(self) -> int:
        return self.directive.end


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Warning about syntax the scanner left as literal text.

    Attributes:
        code: Stable identifier ("unknown-marker", "no-marker-delimiter")
        message: Human-readable description
        offset: Offset of the trigger the diagnostic refers to
        name: Marker name involved, if any

    """

    code: str
    message: str
    offset: int
    name: str | None = None


UNKNOWN_MARKER = "unknown-marker"
NO_MARKER_DELIMITER = "no-marker-delimiter"


@dataclass(frozen=True, slots=True)
class ParseOutput:
    """Result of a successful scan.

    Attributes:
        source: The scanned template
        segments: Literal and Directive segments in source order
        diagnostics: Warnings for recoverable conditions

    """

    source: str
    segments: tuple[Segment, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def directives(self) -> tuple[InjectionDirective, ...]:
        """All directives in source order."""
        return tuple(seg.directive for seg in self.segments if isinstance(seg, Directive))

    @property
    def literals(self) -> tuple[Literal, ...]:
        """All literal segments in source order."""
        return tuple(seg for seg in self.segments if isinstance(seg, Literal))

    def of_kind(self, kind: MarkerKind) -> tuple[InjectionDirective, ...]:
        """Directives with the given marker kind."""
        return tuple(d for d in self.directives if d.kind is kind)

    def has_kind(self, kind: MarkerKind) -> bool:
        """True if any directive has the given marker kind."""
        return any(d.kind is kind for d in self.directives)

    def reconstruct(self) -> str:
        """Concatenate every segment's text.

        Always equals ``source`` for output produced by the scanner.
        """
        return "".join(seg.text for seg in self.segments)

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)
