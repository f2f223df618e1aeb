"""Brace-depth extractor: find where a directive's content ends.

Content may contain balanced brace pairs (JSON, shell ``${VAR}``, even
other directive-like fragments) without ending the directive early:

    !{echo ${HOME}}      -> content "echo ${HOME}"
    {{json:{"a":{}}}}    -> content '{"a":{}}'

Algorithm:
    depth starts at 1 (the directive's own opener). Each open character
    adds one, each close character subtracts one. The 1 -> 0 transition
    ends the directive. For multi-character closers (``}}``) the following
    characters must also be closers, otherwise the lone closer is content
    and depth goes back to 1. Depth never drops below 0.

An excess closer inside content ends the directive there:
``@{foo}}bar}`` has content ``foo``. Commands with unbalanced braces
belong in an external script.

Complexity: O(n) in the length of the remaining source, single pass.

"""

from __future__ import annotations

from typing import NamedTuple

from llaves.errors import UnterminatedDirectiveError
from llaves.scanner.modes import BRACED_CLOSE_WIDTH, CLOSE_BRACE, OPEN_BRACE


class ExtractedContent(NamedTuple):
    """Raw content and the offset just past the closing delimiter."""

    raw_content: str
    content_end: int
    end: int


def extract_balanced_content(
    source: str,
    content_start: int,
    open_char: str = OPEN_BRACE,
    close_char: str = CLOSE_BRACE,
    close_width: int = BRACED_CLOSE_WIDTH,
) -> ExtractedContent | UnterminatedDirectiveError:
    """Extract brace-balanced content starting at ``content_start``.

    Args:
        source: Template text
        content_start: Offset of the first content character
        open_char: Character that increases depth
        close_char: Character that decreases depth
        close_width: Number of consecutive ``close_char`` that close the
            directive (1 for ``@{...}``, 2 for ``{{name:...}}``)

    Returns:
        ExtractedContent, or UnterminatedDirectiveError (with
        ``opened_at=content_start``) if the source ends first.
    """
    tail = close_char * (close_width - 1)
    source_len = len(source)
    depth = 1
    i = content_start

    while i < source_len:
        char = source[i]
        if char == open_char:
            depth += 1
        elif char == close_char:
            if depth > 1:
                depth -= 1
            elif not tail or source.startswith(tail, i + 1):
                return ExtractedContent(source[content_start:i], i, i + close_width)
            # Lone closer at depth 1: part of the content, depth stays 1
        i += 1

    return UnterminatedDirectiveError(content_start)
