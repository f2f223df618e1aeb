"""Trigger scanner: locate the next directive opener.

Finds the lowest index at or after a start position where any trigger
prefix occurs. Uses ``str.find`` per prefix, no regex.

Tie-breaking at the same index: longest prefix first, then declaration
order in the trigger table.

Thread Safety:
find_next_trigger is pure. TriggerCursor instances are single-use per
source string; all state is instance-local.

"""

from __future__ import annotations

from typing import NamedTuple

from llaves.triggers import TriggerSpec, TriggerTable


class TriggerMatch(NamedTuple):
    """A trigger occurrence in the source."""

    index: int
    spec: TriggerSpec


def find_next_trigger(
    source: str, from_index: int, triggers: TriggerTable
) -> TriggerMatch | None:
    """Find the next trigger occurrence at or after ``from_index``.

    Args:
        source: Template text
        from_index: Offset to start searching from
        triggers: Trigger table

    Returns:
        The earliest match, or None when no trigger occurs before the end
        of the source (also for empty sources and empty tables).
    """
    return TriggerCursor(source, triggers).next_match(from_index)


class TriggerCursor:
    """Memoising trigger search over one source string.

    Remembers the next occurrence of every prefix, so the driver's repeated
    forward searches only rescan a prefix once the cursor has passed its
    cached position. Total work is linear in the source for each prefix.

    Usage:
        >>> cursor = TriggerCursor("a @{x} b", DEFAULT_TRIGGERS)
        >>> cursor.next_match(0)
        TriggerMatch(index=2, spec=TriggerSpec(prefix='@{', ...))

    """

    __slots__ = ("_source", "_specs", "_next")

    def __init__(self, source: str, triggers: TriggerTable) -> None:
        self._source = source
        self._specs = triggers.specs
        # Next known occurrence per spec; -1 once a prefix is exhausted
        self._next: list[int | None] = [None] * len(self._specs)

    def next_match(self, from_index: int) -> TriggerMatch | None:
        """Find the earliest trigger at or after ``from_index``.

        Calls must use non-decreasing ``from_index`` values.
        """
        if from_index < 0:
            from_index = 0
        if from_index >= len(self._source):
            return None

        best_index = -1
        best_spec: TriggerSpec | None = None

        for i, spec in enumerate(self._specs):
            pos = self._next[i]
            if pos is None or (pos != -1 and pos < from_index):
                pos = self._source.find(spec.prefix, from_index)
                self._next[i] = pos
            if pos == -1:
                continue

            if (
                best_spec is None
                or pos < best_index
                or (pos == best_index and len(spec.prefix) > len(best_spec.prefix))
            ):
                best_index = pos
                best_spec = spec

        if best_spec is None:
            return None
        return TriggerMatch(best_index, best_spec)
