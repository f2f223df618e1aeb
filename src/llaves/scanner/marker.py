"""Marker resolver: work out a matched trigger's marker and content start.

Braced and placeholder triggers carry their marker. Named triggers read
the marker name from the source, up to the first ``:`` inside a bounded
lookahead window, and look it up in the marker registry.

Returns results as values:
- ResolvedMarker on success
- UnknownMarker when the name is not registered (recoverable)
- NoMarkerDelimiterError when no ``:`` appears in the window

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from llaves.config import DEFAULT_MARKER_LOOKAHEAD
from llaves.errors import NoMarkerDelimiterError
from llaves.markers import Marker, MarkerRegistry
from llaves.scanner.modes import MARKER_DELIMITER
from llaves.triggers import TriggerForm, TriggerSpec


class ResolvedMarker(NamedTuple):
    """Marker identity plus the offset where content begins."""

    marker: Marker
    content_start: int


@dataclass(frozen=True, slots=True)
class UnknownMarker:
    """A ``{{name:`` whose name is not in the marker registry.

    Attributes:
        name: The marker name as written
        trigger_at: Offset of the trigger
        resume_at: Offset where scanning continues (just past the trigger)

    """

    name: str
    trigger_at: int
    resume_at: int


def resolve_marker(
    source: str,
    trigger_index: int,
    spec: TriggerSpec,
    registry: MarkerRegistry,
    *,
    lookahead: int = DEFAULT_MARKER_LOOKAHEAD,
) -> ResolvedMarker | UnknownMarker | NoMarkerDelimiterError:
    """Resolve the marker of the trigger at ``trigger_index``.

    Args:
        source: Template text
        trigger_index: Offset where ``spec.prefix`` occurs
        spec: The matched trigger
        registry: Known marker names for the named form
        lookahead: The ``:`` must sit at most this many characters past
            ``trigger_index``

    Returns:
        ResolvedMarker, UnknownMarker or NoMarkerDelimiterError
    """
    name_start = trigger_index + len(spec.prefix)

    if spec.form is not TriggerForm.NAMED:
        # TriggerSpec guarantees a marker for these forms
        assert spec.marker is not None
        return ResolvedMarker(spec.marker, name_start)

    window_end = min(len(source), trigger_index + lookahead + 1)
    colon = source.find(MARKER_DELIMITER, name_start, window_end)
    if colon == -1:
        return NoMarkerDelimiterError(trigger_index)

    name = source[name_start:colon]
    marker = registry.get(name)
    if marker is None:
        return UnknownMarker(name, trigger_index, name_start)

    return ResolvedMarker(marker, colon + 1)
