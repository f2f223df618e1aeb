"""Marker kinds and the marker registry.

A marker is the type tag of a directive. ``@{...}`` is always a file
marker and ``!{...}`` always a shell marker; the ``{{name:...}}`` form
looks its name up in a MarkerRegistry. Unknown names are not errors, the
scanner leaves them as literal text.

Thread Safety:
MarkerRegistry is immutable after creation. Safe to share.
Use MarkerRegistryBuilder for mutable construction.

Example:
    >>> builder = MarkerRegistryBuilder()
    >>> builder.register("file", MarkerKind.FILE)
    >>> builder.register("diagram")
    >>> registry = builder.build()
    >>> registry.get("diagram")
    Marker(kind=<MarkerKind.NAMED: 4>, name='diagram')
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class MarkerKind(Enum):
    """Semantic type of a directive.

    - FILE: inject the contents of a path
    - SHELL: inject the output of a command
    - ARGS: substitute the invocation arguments
    - NAMED: any other ``{{name:...}}`` marker, identified by its name

    """

    FILE = auto()
    SHELL = auto()
    ARGS = auto()
    NAMED = auto()


@dataclass(frozen=True, slots=True)
class Marker:
    """A marker kind plus the name it was written with.

    Attributes:
        kind: The semantic type
        name: Marker name ("file", "shell", "args", or the named marker)

    """

    kind: MarkerKind
    name: str

    def __str__(self) -> str:
        return self.name


FILE = Marker(MarkerKind.FILE, "file")
SHELL = Marker(MarkerKind.SHELL, "shell")
ARGS = Marker(MarkerKind.ARGS, "args")


class MarkerRegistry:
    """Immutable map from marker name to Marker.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_by_name",)

    def __init__(self, by_name: dict[str, Marker]) -> None:
        """Initialize registry with a pre-built mapping.

        Use MarkerRegistryBuilder to create instances.
        """
        self._by_name = by_name

    def get(self, name: str) -> Marker | None:
        """Get marker for a name.

        Args:
            name: Marker name as written in the template (e.g., "file")

        Returns:
            Marker if registered, None otherwise
        """
        return self._by_name.get(name)

    def has(self, name: str) -> bool:
        """Check if marker name is registered."""
        return name in self._by_name

    @property
    def names(self) -> frozenset[str]:
        """Get all registered marker names."""
        return frozenset(self._by_name.keys())

    @property
    def markers(self) -> tuple[Marker, ...]:
        """Get all registered markers, in registration order."""
        return tuple(self._by_name.values())

    def __contains__(self, name: str) -> bool:
        """Support 'name in registry' syntax."""
        return self.has(name)

    def __len__(self) -> int:
        """Number of registered marker names."""
        return len(self._by_name)

    def __repr__(self) -> str:
        return f"MarkerRegistry({sorted(self._by_name)!r})"


class MarkerRegistryBuilder:
    """Mutable builder for MarkerRegistry.

    Example:
        >>> builder = MarkerRegistryBuilder()
        >>> builder.register("file", MarkerKind.FILE).register("json")
        >>> registry = builder.build()
    """

    __slots__ = ("_by_name",)

    def __init__(self) -> None:
        """Initialize empty builder."""
        self._by_name: dict[str, Marker] = {}

    def register(self, name: str, kind: MarkerKind = MarkerKind.NAMED) -> MarkerRegistryBuilder:
        """Register a marker name.

        Args:
            name: Name as written between ``{{`` and ``:``
            kind: Semantic type (NAMED unless the name aliases a built-in kind)

        Returns:
            Self for chaining

        Raises:
            ValueError: If the name is empty, contains ':' or is already registered
        """
        if not name or ":" in name:
            msg = f"Invalid marker name {name!r}"
            raise ValueError(msg)

        if name in self._by_name:
            existing = self._by_name[name]
            msg = f"Marker '{name}' already registered as {existing.kind.name}"
            raise ValueError(msg)

        self._by_name[name] = Marker(kind, name)
        return self

    def register_all(self, names: list[str], kind: MarkerKind = MarkerKind.NAMED) -> MarkerRegistryBuilder:
        """Register several names with the same kind.

        Returns:
            Self for chaining
        """
        for name in names:
            self.register(name, kind)
        return self

    def build(self) -> MarkerRegistry:
        """Build immutable registry from registered markers.

        Returns:
            Immutable MarkerRegistry
        """
        return MarkerRegistry(dict(self._by_name))

    def __len__(self) -> int:
        """Number of registered markers."""
        return len(self._by_name)


# Named markers understood by custom-command prompts
DEFAULT_NAMED_MARKERS = ("code", "url", "json", "env")


def create_registry_with_defaults() -> MarkerRegistryBuilder:
    """Create a builder pre-populated with the default markers.

    Use this to extend the default set:

        >>> builder = create_registry_with_defaults()
        >>> builder.register("diagram")
        >>> registry = builder.build()

    Returns:
        MarkerRegistryBuilder with file, shell and the default named markers
    """
    builder = MarkerRegistryBuilder()
    builder.register(FILE.name, MarkerKind.FILE)
    builder.register(SHELL.name, MarkerKind.SHELL)
    builder.register_all(list(DEFAULT_NAMED_MARKERS))
    return builder


# Cached singleton; MarkerRegistry is immutable
_DEFAULT_REGISTRY: MarkerRegistry | None = None


def create_default_registry() -> MarkerRegistry:
    """Get the default marker registry (cached singleton).

    Returns:
        Registry with ``file``, ``shell``, ``code``, ``url``, ``json``, ``env``

    Thread Safety:
        Returns a cached immutable registry. Safe for concurrent access.
    """
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = create_registry_with_defaults().build()
    return _DEFAULT_REGISTRY
