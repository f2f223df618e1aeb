"""Tests for trigger specs and trigger tables."""

import pytest

from llaves.errors import TriggerTableError
from llaves.markers import ARGS, FILE, SHELL
from llaves.triggers import (
    AT_FILE_INJECTION_TRIGGER,
    DEFAULT_TRIGGERS,
    FILE_TRIGGER,
    NAMED_TRIGGER,
    SHELL_INJECTION_TRIGGER,
    SHELL_TRIGGER,
    SHORTHAND_ARGS_PLACEHOLDER,
    TriggerForm,
    TriggerSpec,
    TriggerTable,
    create_default_triggers,
)


class TestTriggerSpecValidation:
    """TriggerSpec rejects inconsistent definitions."""

    def test_empty_prefix(self) -> None:
        with pytest.raises(TriggerTableError, match="must not be empty"):
            TriggerSpec("", TriggerForm.BRACED, FILE)

    def test_braced_needs_marker(self) -> None:
        with pytest.raises(TriggerTableError, match="need a marker"):
            TriggerSpec("@{", TriggerForm.BRACED)

    def test_placeholder_needs_marker(self) -> None:
        with pytest.raises(TriggerTableError, match="need a marker"):
            TriggerSpec("{{args}}", TriggerForm.PLACEHOLDER)

    def test_braced_must_end_with_brace(self) -> None:
        with pytest.raises(TriggerTableError, match="must end with"):
            TriggerSpec("@", TriggerForm.BRACED, FILE)

    def test_named_rejects_marker(self) -> None:
        with pytest.raises(TriggerTableError, match="read their marker"):
            TriggerSpec("{{", TriggerForm.NAMED, FILE)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            FILE_TRIGGER.prefix = "#{"  # type: ignore[misc]


class TestDefaultTriggers:
    """The default table matches the custom-command syntax."""

    def test_prefixes_in_order(self) -> None:
        assert DEFAULT_TRIGGERS.prefixes == ("@{", "!{", "{{args}}", "{{")

    def test_constants(self) -> None:
        assert AT_FILE_INJECTION_TRIGGER == "@{"
        assert SHELL_INJECTION_TRIGGER == "!{"
        assert SHORTHAND_ARGS_PLACEHOLDER == "{{args}}"

    def test_markers(self) -> None:
        assert DEFAULT_TRIGGERS.get("@{").marker == FILE  # type: ignore[union-attr]
        assert DEFAULT_TRIGGERS.get("!{").marker == SHELL  # type: ignore[union-attr]
        assert DEFAULT_TRIGGERS.get("{{args}}").marker == ARGS  # type: ignore[union-attr]
        assert DEFAULT_TRIGGERS.get("{{") is NAMED_TRIGGER

    def test_create_default_triggers(self) -> None:
        assert create_default_triggers() is DEFAULT_TRIGGERS


class TestTriggerTable:
    """Table lookup helpers."""

    def test_len_iter_contains(self) -> None:
        table = TriggerTable((FILE_TRIGGER, SHELL_TRIGGER))
        assert len(table) == 2
        assert list(table) == [FILE_TRIGGER, SHELL_TRIGGER]
        assert "@{" in table
        assert "{{" not in table

    def test_get_missing(self) -> None:
        assert TriggerTable(()).get("@{") is None

    def test_get_returns_first_declared(self) -> None:
        other = TriggerSpec("@{", TriggerForm.BRACED, SHELL)
        table = TriggerTable((FILE_TRIGGER, other))
        assert table.get("@{") is FILE_TRIGGER

    def test_only(self) -> None:
        table = DEFAULT_TRIGGERS.only("!{", "@{")
        assert table.prefixes == ("!{", "@{")

    def test_only_unknown_prefix(self) -> None:
        with pytest.raises(KeyError):
            DEFAULT_TRIGGERS.only("%{")

    def test_equality(self) -> None:
        assert TriggerTable([FILE_TRIGGER]) == TriggerTable((FILE_TRIGGER,))
        assert TriggerTable([FILE_TRIGGER]) != TriggerTable([SHELL_TRIGGER])
        assert hash(TriggerTable([FILE_TRIGGER])) == hash(TriggerTable([FILE_TRIGGER]))

    def test_accepts_generators(self) -> None:
        table = TriggerTable(spec for spec in DEFAULT_TRIGGERS if spec.form is TriggerForm.BRACED)
        assert table.prefixes == ("@{", "!{")

    def test_repr(self) -> None:
        assert repr(TriggerTable([FILE_TRIGGER])) == "TriggerTable(['@{'])"
