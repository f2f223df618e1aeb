"""Trigger specifications for directive openers.

A trigger is the literal sequence that opens a directive. Each TriggerSpec
pairs a prefix with the form of directive it opens:

- BRACED: ``@{path}`` or ``!{command}``; the trigger itself names the marker
- NAMED: ``{{name:content}}``; the marker name is read from the source
- PLACEHOLDER: a fixed token such as ``{{args}}`` with no content

Overlapping prefixes are allowed. When two triggers match at the same
index the longest prefix wins, then declaration order.

Thread Safety:
TriggerSpec and TriggerTable are immutable. Safe to share.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum, auto

from llaves.errors import TriggerTableError
from llaves.markers import ARGS, FILE, SHELL, Marker

AT_FILE_INJECTION_TRIGGER = "@{"
SHELL_INJECTION_TRIGGER = "!{"
SHORTHAND_ARGS_PLACEHOLDER = "{{args}}"
NAMED_INJECTION_TRIGGER = "{{"


class TriggerForm(Enum):
    """How the directive opened by a trigger is delimited."""

    BRACED = auto()  # prefix ends with "{", content closes on a balanced "}"
    NAMED = auto()  # "{{" name ":" content "}}"
    PLACEHOLDER = auto()  # fixed token, no content


@dataclass(frozen=True, slots=True)
class TriggerSpec:
    """A trigger prefix and the directive form it opens.

    Attributes:
        prefix: Literal opening sequence
        form: Directive form
        marker: Marker for BRACED and PLACEHOLDER forms; None for NAMED

    Raises:
        TriggerTableError: If prefix, form and marker disagree

    """

    prefix: str
    form: TriggerForm = TriggerForm.BRACED
    marker: Marker | None = None

    def __post_init__(self) -> None:
        if not self.prefix:
            raise TriggerTableError(self.prefix, "prefix must not be empty")
        if self.form is TriggerForm.NAMED:
            if self.marker is not None:
                raise TriggerTableError(self.prefix, "named triggers read their marker from the source")
            return
        if self.marker is None:
            raise TriggerTableError(self.prefix, f"{self.form.name.lower()} triggers need a marker")
        if self.form is TriggerForm.BRACED and not self.prefix.endswith("{"):
            raise TriggerTableError(self.prefix, "braced triggers must end with '{'")


class TriggerTable:
    """Ordered, immutable collection of TriggerSpec.

    Declaration order is significant: it breaks ties between triggers that
    match the same text with the same length.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_specs",)

    def __init__(self, specs: Iterable[TriggerSpec]) -> None:
        self._specs: tuple[TriggerSpec, ...] = tuple(specs)

    @property
    def specs(self) -> tuple[TriggerSpec, ...]:
        """All trigger specs in declaration order."""
        return self._specs

    @property
    def prefixes(self) -> tuple[str, ...]:
        """All prefixes in declaration order."""
        return tuple(spec.prefix for spec in self._specs)

    def get(self, prefix: str) -> TriggerSpec | None:
        """Get the first spec declared with this prefix."""
        for spec in self._specs:
            if spec.prefix == prefix:
                return spec
        return None

    def only(self, *prefixes: str) -> TriggerTable:
        """Return a table restricted to the given prefixes.

        Raises:
            KeyError: If a prefix is not in this table
        """
        selected = []
        for prefix in prefixes:
            spec = self.get(prefix)
            if spec is None:
                raise KeyError(prefix)
            selected.append(spec)
        return TriggerTable(selected)

    def __iter__(self) -> Iterator[TriggerSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, prefix: str) -> bool:
        return self.get(prefix) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TriggerTable):
            return NotImplemented
        return self._specs == other._specs

    def __hash__(self) -> int:
        return hash(self._specs)

    def __repr__(self) -> str:
        return f"TriggerTable({list(self.prefixes)!r})"


FILE_TRIGGER = TriggerSpec(AT_FILE_INJECTION_TRIGGER, TriggerForm.BRACED, FILE)
SHELL_TRIGGER = TriggerSpec(SHELL_INJECTION_TRIGGER, TriggerForm.BRACED, SHELL)
ARGS_TRIGGER = TriggerSpec(SHORTHAND_ARGS_PLACEHOLDER, TriggerForm.PLACEHOLDER, ARGS)
NAMED_TRIGGER = TriggerSpec(NAMED_INJECTION_TRIGGER, TriggerForm.NAMED)

DEFAULT_TRIGGERS = TriggerTable((FILE_TRIGGER, SHELL_TRIGGER, ARGS_TRIGGER, NAMED_TRIGGER))


def create_default_triggers() -> TriggerTable:
    """Get the default trigger table.

    Returns:
        Table with ``@{`` (file), ``!{`` (shell), ``{{args}}`` (args)
        and ``{{`` (named markers)
    """
    return DEFAULT_TRIGGERS
