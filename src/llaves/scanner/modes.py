"""Scanner states and scanning constants.

The driver is a small finite state machine:

    SCANNING -> RESOLVING_MARKER -> EXTRACTING_CONTENT -> SCANNING ... -> DONE

A failure in RESOLVING_MARKER or EXTRACTING_CONTENT ends the scan with an
error instead of reaching DONE.
"""

from __future__ import annotations

from enum import Enum, auto


class ScanMode(Enum):
    """Scanner states.

    - SCANNING: looking for the next trigger
    - RESOLVING_MARKER: a trigger matched, working out its marker
    - EXTRACTING_CONTENT: counting braces to find the directive's end
    - DONE: no trigger left, remaining text emitted as a literal

    """

    SCANNING = auto()
    RESOLVING_MARKER = auto()
    EXTRACTING_CONTENT = auto()
    DONE = auto()


OPEN_BRACE = "{"
CLOSE_BRACE = "}"
MARKER_DELIMITER = ":"

# Width of the closer for each directive form
BRACED_CLOSE_WIDTH = 1  # @{...}  !{...}
NAMED_CLOSE_WIDTH = 2  # {{name:...}}
