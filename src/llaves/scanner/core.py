"""Directive scanner driver with O(n) performance.

Walks a template, hands each trigger occurrence to the marker resolver and
the brace-depth extractor, and assembles the Literal/Directive segments.

No regex in the hot path.

Thread Safety:
Scanner instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from llaves.config import ScanConfig, get_scan_config
from llaves.errors import NoMarkerDelimiterError, ParseError, UnterminatedDirectiveError
from llaves.location import SourceLocation
from llaves.markers import MarkerRegistry, create_default_registry
from llaves.scanner.braces import extract_balanced_content
from llaves.scanner.marker import UnknownMarker, resolve_marker
from llaves.scanner.modes import BRACED_CLOSE_WIDTH, NAMED_CLOSE_WIDTH, ScanMode
from llaves.scanner.trigger import TriggerCursor, TriggerMatch
from llaves.segments import (
    NO_MARKER_DELIMITER,
    UNKNOWN_MARKER,
    Diagnostic,
    Directive,
    InjectionDirective,
    Literal,
    ParseOutput,
    Segment,
)
from llaves.triggers import TriggerForm, TriggerTable, create_default_triggers
from llaves.utils.logger import get_logger

logger = get_logger(__name__)


class Scanner:
    """Single-use directive scanner.

    Usage:
        >>> output = Scanner("Review @{src/app.py} now").run()
        >>> [seg.text for seg in output]
        ['Review ', '@{src/app.py}', ' now']

    Explicit ``triggers``/``markers`` arguments win over the active
    ScanConfig, which wins over the defaults.

    Thread Safety:
        Scanner instances are single-use. Create one per source string.
        All state is instance-local; no shared mutable state.

    """

    __slots__ = (
        "_source",
        "_triggers",
        "_markers",
        "_lookahead",
        "_strict_markers",
        "_source_file",
        "_command_name",
        "_mode",
        "_segments",
        "_diagnostics",
    )

    def __init__(
        self,
        source: str,
        triggers: TriggerTable | None = None,
        markers: MarkerRegistry | None = None,
        *,
        source_file: str | None = None,
        command_name: str | None = None,
        config: ScanConfig | None = None,
    ) -> None:
        """Initialize scanner with template text.

        Args:
            source: Template text
            triggers: Trigger table (falls back to config, then defaults)
            markers: Marker registry (falls back to config, then defaults)
            source_file: Optional source file path for error messages
            command_name: Optional command name for error messages
            config: Explicit config (defaults to the context's ScanConfig)
        """
        if config is None:
            config = get_scan_config()

        if triggers is None:
            triggers = config.triggers if config.triggers is not None else create_default_triggers()
        if markers is None:
            markers = config.markers if config.markers is not None else create_default_registry()

        self._source = source
        self._triggers = triggers
        self._markers = markers
        self._lookahead = config.marker_lookahead
        self._strict_markers = config.strict_markers
        self._source_file = source_file
        self._command_name = command_name

        self._mode = ScanMode.SCANNING
        self._segments: list[Segment] = []
        self._diagnostics: list[Diagnostic] = []

    @property
    def mode(self) -> ScanMode:
        """Current state of the scan."""
        return self._mode

    def run(self) -> ParseOutput | ParseError:
        """Scan the whole source.

        Returns:
            ParseOutput on success. NoMarkerDelimiterError or
            UnterminatedDirectiveError if a directive cannot be delimited;
            no partial output is returned in that case.
        """
        source = self._source
        cursor = TriggerCursor(source, self._triggers)
        literal_start = 0
        pos = 0

        while True:
            self._mode = ScanMode.SCANNING
            match = cursor.next_match(pos)
            if match is None:
                break

            self._mode = ScanMode.RESOLVING_MARKER
            resolved = resolve_marker(
                source, match.index, match.spec, self._markers, lookahead=self._lookahead
            )

            if isinstance(resolved, UnknownMarker):
                self._warn(
                    UNKNOWN_MARKER,
                    f"unknown marker {resolved.name!r} at character {resolved.trigger_at}",
                    resolved.trigger_at,
                    resolved.name,
                )
                pos = resolved.resume_at
                continue

            if isinstance(resolved, NoMarkerDelimiterError):
                if self._strict_markers:
                    return self._fail(NoMarkerDelimiterError(match.index, *self._where(match.index)))
                self._warn(
                    NO_MARKER_DELIMITER,
                    f"no marker delimiter after '{match.spec.prefix}' at character {match.index}",
                    match.index,
                )
                pos = match.index + len(match.spec.prefix)
                continue

            self._mode = ScanMode.EXTRACTING_CONTENT
            marker, content_start = resolved

            if match.spec.form is TriggerForm.PLACEHOLDER:
                raw_content, content_end, end = "", content_start, content_start
            else:
                width = NAMED_CLOSE_WIDTH if match.spec.form is TriggerForm.NAMED else BRACED_CLOSE_WIDTH
                extracted = extract_balanced_content(source, content_start, close_width=width)
                if isinstance(extracted, UnterminatedDirectiveError):
                    return self._fail(self._unterminated(extracted.opened_at, match))
                raw_content, content_end, end = extracted

            if match.index > literal_start:
                self._segments.append(
                    Literal(source[literal_start : match.index], literal_start, match.index)
                )
            self._segments.append(
                Directive(
                    InjectionDirective(
                        marker=marker,
                        raw_content=raw_content,
                        start=match.index,
                        end=end,
                        content_start=content_start,
                        content_end=content_end,
                        text=source[match.index : end],
                        trigger=match.spec.prefix,
                    )
                )
            )
            pos = literal_start = end

        self._mode = ScanMode.DONE
        if literal_start < len(source):
            self._segments.append(Literal(source[literal_start:], literal_start, len(source)))

        return ParseOutput(
            source=source,
            segments=tuple(self._segments),
            diagnostics=tuple(self._diagnostics),
        )

    def _where(self, offset: int) -> tuple[int, int, str | None]:
        """Line, column and file for an offset."""
        loc = SourceLocation.from_offset(self._source, offset, self._source_file)
        return loc.lineno, loc.col_offset, loc.source_file

    def _unterminated(self, opened_at: int, match: TriggerMatch) -> UnterminatedDirectiveError:
        lineno, col, source_file = self._where(opened_at)
        return UnterminatedDirectiveError(
            opened_at,
            trigger_at=match.index,
            command_name=self._command_name,
            lineno=lineno,
            col_offset=col,
            source_file=source_file,
        )

    def _warn(self, code: str, message: str, offset: int, name: str | None = None) -> None:
        logger.debug("Leaving directive as literal text: %s", message)
        self._diagnostics.append(Diagnostic(code, message, offset, name))

    def _fail(self, error: ParseError) -> ParseError:
        logger.debug("Scan failed: %s", error)
        self._segments.clear()
        self._diagnostics.clear()
        return error
