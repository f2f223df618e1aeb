"""Tests for the Scanner state machine and segment assembly."""

import logging

import pytest

from llaves.config import ScanConfig, scan_config_context
from llaves.errors import NoMarkerDelimiterError, ParseError, UnterminatedDirectiveError
from llaves.markers import FILE, SHELL, MarkerKind
from llaves.scanner import ScanMode, Scanner
from llaves.segments import Directive, Literal, ParseOutput
from llaves.triggers import SHELL_TRIGGER, TriggerTable


def _run(source: str, **kwargs) -> ParseOutput:  # type: ignore[no-untyped-def]
    result = Scanner(source, **kwargs).run()
    assert isinstance(result, ParseOutput), result
    return result


class TestSegmentAssembly:
    """Literal and Directive segments cover the source in order."""

    def test_empty_source(self) -> None:
        output = _run("")
        assert output.segments == ()
        assert output.reconstruct() == ""

    def test_literal_only(self) -> None:
        output = _run("no directives { here }")
        assert output.segments == (Literal("no directives { here }", 0, 22),)

    def test_single_directive_with_surrounding_text(self) -> None:
        output = _run("Review @{src/app.py} now")
        kinds = [type(seg) for seg in output]
        assert kinds == [Literal, Directive, Literal]
        directive = output.directives[0]
        assert directive.marker == FILE
        assert directive.raw_content == "src/app.py"
        assert directive.span == (7, 20)
        assert directive.text == "@{src/app.py}"
        assert directive.trigger == "@{"

    def test_directive_only(self) -> None:
        output = _run("!{git status}")
        assert len(output) == 1
        assert output.directives[0].marker == SHELL

    def test_multiple_named_directives(self) -> None:
        output = _run("cmp {{file:a.ts}} to {{file:b.ts}}")
        assert [seg.text for seg in output] == ["cmp ", "{{file:a.ts}}", " to ", "{{file:b.ts}}"]
        first, second = output.directives
        assert (first.kind, first.raw_content, first.span) == (MarkerKind.FILE, "a.ts", (4, 17))
        assert (second.kind, second.raw_content, second.span) == (MarkerKind.FILE, "b.ts", (21, 34))

    def test_adjacent_directives(self) -> None:
        output = _run("{{file:a}}{{file:b}}")
        assert len(output) == 2
        assert all(isinstance(seg, Directive) for seg in output)
        assert [d.raw_content for d in output.directives] == ["a", "b"]

    def test_all_trigger_kinds(self) -> None:
        source = "Review @{src/main.ts} then !{git diff} with {{args}} as {{code:x = {}}}"
        output = _run(source)
        assert [(d.kind, d.raw_content) for d in output.directives] == [
            (MarkerKind.FILE, "src/main.ts"),
            (MarkerKind.SHELL, "git diff"),
            (MarkerKind.ARGS, ""),
            (MarkerKind.NAMED, "x = {}"),
        ]
        assert output.reconstruct() == source

    def test_args_placeholder_span(self) -> None:
        output = _run("Explain: {{args}}")
        directive = output.directives[0]
        assert directive.span == (9, 17)
        assert directive.content_start == directive.content_end == 17

    def test_args_inside_shell_content_is_not_split(self) -> None:
        output = _run('!{grep "{{args}}" src/}')
        assert len(output) == 1
        assert output.directives[0].raw_content == 'grep "{{args}}" src/'

    def test_content_offsets_match_raw_content(self) -> None:
        source = "a {{shell:echo {x}}} b"
        directive = _run(source).directives[0]
        assert source[directive.content_start : directive.content_end] == directive.raw_content

    def test_unicode_offsets_are_characters(self) -> None:
        output = _run("héllo @{naïve.txt} ✓")
        directive = output.directives[0]
        assert directive.start == 6
        assert directive.raw_content == "naïve.txt"
        assert output.segments[-1] == Literal(" ✓", 18, 20)

    def test_restricted_trigger_table(self) -> None:
        output = _run("@{a} !{b}", triggers=TriggerTable((SHELL_TRIGGER,)))
        assert [seg.text for seg in output] == ["@{a} ", "!{b}"]
        assert output.directives[0].marker == SHELL


class TestUnknownMarkers:
    """Unknown ``{{name:`` markers stay literal."""

    def test_whole_text_is_literal(self) -> None:
        output = _run("{{bogus:x}}")
        assert output.segments == (Literal("{{bogus:x}}", 0, 11),)
        assert len(output.diagnostics) == 1
        assert output.diagnostics[0].code == "unknown-marker"
        assert output.diagnostics[0].name == "bogus"
        assert output.diagnostics[0].offset == 0

    def test_followed_by_valid_directive(self) -> None:
        output = _run("{{bogus:x}} @{a}")
        assert [seg.text for seg in output] == ["{{bogus:x}} ", "@{a}"]

    def test_directive_inside_unknown_marker_is_found(self) -> None:
        """Only the two-character opener is skipped, not the whole span."""
        output = _run("{{bogus:@{a}}}")
        assert output.segments == (
            Literal("{{bogus:", 0, 8),
            output.segments[1],
            Literal("}}", 12, 14),
        )
        assert output.directives[0].raw_content == "a"

    def test_unknown_marker_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="llaves")
        _run("{{bogus:x}}")
        assert "unknown marker 'bogus'" in caplog.text


class TestHardFailures:
    """Malformed directives abort the whole scan."""

    def test_unterminated(self) -> None:
        result = Scanner("@{unclosed").run()
        assert isinstance(result, UnterminatedDirectiveError)
        assert result.opened_at == 2
        assert result.trigger_at == 0

    def test_unterminated_after_valid_directives(self) -> None:
        """No partial output even when earlier directives parsed."""
        result = Scanner("@{ok} and !{broken").run()
        assert isinstance(result, UnterminatedDirectiveError)
        assert result.opened_at == 12

    def test_unterminated_named(self) -> None:
        result = Scanner("x {{file:a.ts}").run()
        assert isinstance(result, UnterminatedDirectiveError)
        assert result.opened_at == 9
        assert result.trigger_at == 2

    def test_no_marker_delimiter(self) -> None:
        result = Scanner("Hello {{ name }}").run()
        assert isinstance(result, NoMarkerDelimiterError)
        assert result.trigger_at == 6

    def test_error_location(self) -> None:
        result = Scanner("line one\n@{oops", source_file="review.toml").run()
        assert isinstance(result, UnterminatedDirectiveError)
        assert result.opened_at == 11
        assert (result.lineno, result.col_offset) == (2, 3)
        assert str(result).startswith("review.toml:2:3 unclosed directive starting at character 11")

    def test_command_name_in_message(self) -> None:
        result = Scanner("!{oops", command_name="review").run()
        assert isinstance(result, ParseError)
        assert "unclosed directive in review" in str(result)

    def test_failure_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="llaves")
        Scanner("@{unclosed").run()
        assert "Scan failed" in caplog.text


class TestLenientMarkers:
    """strict_markers=False keeps undelimited ``{{`` as text."""

    def test_no_marker_delimiter_degrades(self) -> None:
        with scan_config_context(ScanConfig(strict_markers=False)):
            output = _run("Hello {{ name }} @{a}")
        assert [seg.text for seg in output] == ["Hello {{ name }} ", "@{a}"]
        assert output.diagnostics[0].code == "no-marker-delimiter"
        assert output.diagnostics[0].offset == 6

    def test_explicit_config_argument(self) -> None:
        output = _run("{{ x }}", config=ScanConfig(strict_markers=False))
        assert output.segments == (Literal("{{ x }}", 0, 7),)

    def test_unterminated_still_fails(self) -> None:
        with scan_config_context(ScanConfig(strict_markers=False)):
            result = Scanner("@{open").run()
        assert isinstance(result, UnterminatedDirectiveError)


class TestScanMode:
    """The driver's state after a run."""

    def test_initial_mode(self) -> None:
        assert Scanner("x").mode is ScanMode.SCANNING

    def test_done_after_success(self) -> None:
        scanner = Scanner("a @{b} c")
        scanner.run()
        assert scanner.mode is ScanMode.DONE

    def test_stops_in_extraction_on_unterminated(self) -> None:
        scanner = Scanner("@{b")
        scanner.run()
        assert scanner.mode is ScanMode.EXTRACTING_CONTENT

    def test_stops_in_resolution_on_missing_delimiter(self) -> None:
        scanner = Scanner("{{ x")
        scanner.run()
        assert scanner.mode is ScanMode.RESOLVING_MARKER
