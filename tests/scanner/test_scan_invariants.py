"""Property-based tests for scanner invariants using Hypothesis.

These hold for any input, well-formed or not.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from llaves import InjectionScanner, ParseError, scan
from llaves.segments import Directive, Literal, ParseOutput

# Biased toward the characters that matter to the scanner
template_text = st.text(
    alphabet=st.sampled_from(list("@!{}:abc fileshlnjsonargv\n")),
    max_size=200,
)


def _check_segments(source: str, output: ParseOutput) -> None:
    pos = 0
    for segment in output:
        if isinstance(segment, Literal):
            assert segment.content, "Empty literal emitted"
        assert segment.start == pos, "Segments must be contiguous"
        pos = segment.end
    assert pos == len(source)
    assert output.reconstruct() == source


class TestScanInvariants:
    """Invariants of successful and failed scans."""

    @given(template_text)
    @settings(max_examples=300)
    def test_never_raises(self, source: str) -> None:
        result = scan(source)
        assert isinstance(result, (ParseOutput, ParseError))

    @given(template_text)
    @settings(max_examples=300)
    def test_segments_cover_source(self, source: str) -> None:
        result = scan(source)
        if isinstance(result, ParseOutput):
            _check_segments(source, result)

    @given(template_text)
    @settings(max_examples=200)
    def test_directive_offsets_match_source(self, source: str) -> None:
        result = scan(source)
        if isinstance(result, ParseError):
            return
        for directive in result.directives:
            assert source[directive.start : directive.end] == directive.text
            assert source[directive.content_start : directive.content_end] == directive.raw_content
            assert directive.start < directive.content_start <= directive.content_end <= directive.end
            assert directive.text.startswith(directive.trigger)

    @given(template_text)
    @settings(max_examples=200)
    def test_deterministic(self, source: str) -> None:
        first = scan(source)
        second = scan(source)
        if isinstance(first, ParseOutput):
            assert first == second
        else:
            assert type(first) is type(second)
            assert str(first) == str(second)

    @given(template_text)
    @settings(max_examples=200)
    def test_error_location_valid(self, source: str) -> None:
        result = scan(source)
        if isinstance(result, ParseError):
            assert result.lineno is not None and result.lineno >= 1
            assert result.col_offset is not None and result.col_offset >= 1

    @given(template_text)
    @settings(max_examples=200)
    def test_lenient_mode_only_fails_on_unterminated(self, source: str) -> None:
        result = InjectionScanner(strict_markers=False).scan(source)
        if isinstance(result, ParseError):
            assert type(result).__name__ == "UnterminatedDirectiveError"
        else:
            _check_segments(source, result)


class TestPlainText:
    """Text without triggers passes through untouched."""

    @given(st.text(alphabet=st.characters(exclude_characters="{"), max_size=300))
    @settings(max_examples=200)
    def test_single_literal(self, source: str) -> None:
        result = scan(source)
        assert isinstance(result, ParseOutput)
        assert result.directives == ()
        if source:
            assert result.segments == (Literal(source, 0, len(source)),)
        else:
            assert result.segments == ()

    @given(st.text(alphabet=st.sampled_from(list("ab /.-_")), min_size=1, max_size=50))
    def test_file_directive_round_trip(self, path: str) -> None:
        result = scan(f"@{{{path}}}")
        assert isinstance(result, ParseOutput)
        (segment,) = result.segments
        assert isinstance(segment, Directive)
        assert segment.directive.raw_content == path
