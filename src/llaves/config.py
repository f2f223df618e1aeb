"""ContextVar-based scan configuration for Llaves.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per InjectionScanner call, read by the scanner in the
same context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed and race conditions are impossible.

Usage:
    # In InjectionScanner
    scanner = InjectionScanner(strict_markers=False)
    output = scanner("Review @{src/main.py}")  # Sets config internally

    # Direct scanner usage (advanced)
    from llaves.config import set_scan_config, reset_scan_config, ScanConfig

    set_scan_config(ScanConfig(marker_lookahead=40))
    try:
        output = Scanner(source).run()
    finally:
        reset_scan_config()

    # Or use the context manager
    with scan_config_context(ScanConfig(strict_markers=False)):
        output = Scanner(source).run()

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from llaves.markers import MarkerRegistry
    from llaves.triggers import TriggerTable

# Original custom-command prompts look at most 20 characters past "{{"
# for the ":" that ends a marker name.
DEFAULT_MARKER_LOOKAHEAD = 20


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Immutable scan configuration.

    Note: source_file is excluded; it is per-call state,
    not configuration. It remains on the Scanner instance.

    Attributes:
        triggers: Trigger table (defaults when None)
        markers: Marker registry for ``{{name:...}}`` (defaults when None)
        marker_lookahead: Furthest offset past the trigger at which the
            marker ``:`` may appear
        strict_markers: Fail the scan when a ``{{`` has no marker
            delimiter; when False the opener is kept as literal text

    """

    triggers: TriggerTable | None = None
    markers: MarkerRegistry | None = None
    marker_lookahead: int = DEFAULT_MARKER_LOOKAHEAD
    strict_markers: bool = True

    def __post_init__(self) -> None:
        if self.marker_lookahead < 1:
            msg = f"marker_lookahead must be positive, got {self.marker_lookahead}"
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, config_dict: dict) -> ScanConfig:
        """Create ScanConfig from dictionary.

        Useful when settings come from an external file (e.g. a command
        definition). Only includes keys that are valid ScanConfig fields;
        unknown keys are silently ignored.

        Args:
            config_dict: Dictionary with config values. Keys should match
                ScanConfig attribute names.

        Returns:
            New ScanConfig instance with values from dict.

        Example:
            >>> config = ScanConfig.from_dict({
            ...     "strict_markers": False,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.strict_markers
            False

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ScanConfig = ScanConfig()

# Thread-local configuration via ContextVar
_scan_config: ContextVar[ScanConfig] = ContextVar(
    "scan_config",
    default=_DEFAULT_CONFIG,
)


def get_scan_config() -> ScanConfig:
    """Get current scan configuration (thread-local).

    Returns:
        The active ScanConfig for this thread/context.

    """
    return _scan_config.get()


def set_scan_config(config: ScanConfig) -> None:
    """Set scan configuration for current context.

    Args:
        config: ScanConfig instance to use for this context.

    Thread Safety:
        Only affects the current thread's context. Other threads are unaffected.

    """
    _scan_config.set(config)


def reset_scan_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.

    """
    _scan_config.set(_DEFAULT_CONFIG)


@contextmanager
def scan_config_context(config: ScanConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: ScanConfig to use within the context.

    Yields:
        None

    Example:
        >>> with scan_config_context(ScanConfig(strict_markers=False)):
        ...     output = Scanner("{{ not a marker }}").run()
        >>> # Automatically reset to previous config

    Thread Safety:
        Only affects the current thread's context. Properly restores previous
        config even if an exception is raised.

    """
    previous = _scan_config.get()
    _scan_config.set(config)
    try:
        yield
    finally:
        _scan_config.set(previous)


__all__ = [
    "DEFAULT_MARKER_LOOKAHEAD",
    "ScanConfig",
    "get_scan_config",
    "reset_scan_config",
    "scan_config_context",
    "set_scan_config",
]
