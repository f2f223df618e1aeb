"""Directive scanner package for Llaves.

Three algorithms plus a driver:

- trigger: find the next directive opener
- marker: resolve the opener's marker and where its content starts
- braces: count brace depth to find where the content ends
- core: the Scanner state machine assembling Literal/Directive segments

Usage:
    >>> from llaves.scanner import Scanner
    >>> output = Scanner("!{git diff --staged}").run()
    >>> output.directives[0].raw_content
    'git diff --staged'

Thread Safety:
Scanner instances are single-use. The functions are pure.
"""

from llaves.scanner.braces import ExtractedContent, extract_balanced_content
from llaves.scanner.core import Scanner
from llaves.scanner.marker import ResolvedMarker, UnknownMarker, resolve_marker
from llaves.scanner.modes import ScanMode
from llaves.scanner.trigger import TriggerCursor, TriggerMatch, find_next_trigger

__all__ = [
    "ExtractedContent",
    "ResolvedMarker",
    "ScanMode",
    "Scanner",
    "TriggerCursor",
    "TriggerMatch",
    "UnknownMarker",
    "extract_balanced_content",
    "find_next_trigger",
    "resolve_marker",
]
