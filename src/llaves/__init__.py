"""
Llaves — Injection directive scanner for command templates

Finds ``@{file}``, ``!{shell}``, ``{{args}}`` and ``{{marker:content}}``
directives in user-authored prompt templates, counting brace depth so that
directive content may itself contain balanced braces. Pure functions over
immutable input, zero runtime dependencies.

Quick Start:
    >>> from llaves import parse
    >>> output = parse("Review @{src/main.py} and !{git diff --staged}")
    >>> [(d.marker.name, d.raw_content) for d in output.directives]
    [('file', 'src/main.py'), ('shell', 'git diff --staged')]

    >>> # Error-union form: errors are returned, not raised
    >>> from llaves import scan, ParseError
    >>> result = scan("@{unclosed")
    >>> isinstance(result, ParseError)
    True

Custom Markers:
    >>> from llaves import InjectionScanner, create_registry_with_defaults
    >>>
    >>> builder = create_registry_with_defaults()
    >>> builder.register("diagram")
    >>> scanner = InjectionScanner(markers=builder.build())
    >>> scanner("{{diagram:A -> B}}").directives[0].marker.name
    'diagram'
"""

from llaves.config import (
    DEFAULT_MARKER_LOOKAHEAD,
    ScanConfig,
    get_scan_config,
    reset_scan_config,
    scan_config_context,
    set_scan_config,
)
from llaves.errors import (
    LlavesError,
    NoMarkerDelimiterError,
    ParseError,
    TriggerTableError,
    UnterminatedDirectiveError,
)
from llaves.expand import ArgumentSubstituter, DirectiveResolver, expand
from llaves.location import SourceLocation
from llaves.markers import (
    Marker,
    MarkerKind,
    MarkerRegistry,
    MarkerRegistryBuilder,
    create_default_registry,
    create_registry_with_defaults,
)
from llaves.scanner import Scanner
from llaves.segments import (
    Diagnostic,
    Directive,
    InjectionDirective,
    Literal,
    ParseOutput,
    Segment,
)
from llaves.serialization import from_dict, from_json, to_dict, to_json
from llaves.triggers import (
    AT_FILE_INJECTION_TRIGGER,
    DEFAULT_TRIGGERS,
    SHELL_INJECTION_TRIGGER,
    SHORTHAND_ARGS_PLACEHOLDER,
    TriggerForm,
    TriggerSpec,
    TriggerTable,
    create_default_triggers,
)

__version__ = "0.1.0"


def scan(
    source: str,
    *,
    triggers: TriggerTable | None = None,
    markers: MarkerRegistry | None = None,
    source_file: str | None = None,
) -> ParseOutput | ParseError:
    """Scan a template, returning either the output or the error.

    Args:
        source: Template text
        triggers: Trigger table (uses the active ScanConfig or defaults if None)
        markers: Marker registry (uses the active ScanConfig or defaults if None)
        source_file: Optional source file path for error messages

    Returns:
        ParseOutput on success, or the NoMarkerDelimiterError /
        UnterminatedDirectiveError describing why the template is malformed

    Example:
        >>> result = scan("{{file:a.ts}}{{file:b.ts}}")
        >>> len(result.directives)
        2
    """
    return Scanner(source, triggers, markers, source_file=source_file).run()


def parse(
    source: str,
    *,
    triggers: TriggerTable | None = None,
    markers: MarkerRegistry | None = None,
    source_file: str | None = None,
) -> ParseOutput:
    """Scan a template into Literal/Directive segments.

    Args:
        source: Template text
        triggers: Trigger table (uses the active ScanConfig or defaults if None)
        markers: Marker registry (uses the active ScanConfig or defaults if None)
        source_file: Optional source file path for error messages

    Returns:
        ParseOutput covering the whole source

    Raises:
        NoMarkerDelimiterError: A ``{{marker`` has no ``:`` within the lookahead
        UnterminatedDirectiveError: A directive's braces never balance
    """
    result = scan(source, triggers=triggers, markers=markers, source_file=source_file)
    if isinstance(result, ParseError):
        raise result
    return result


def extract_injections(
    text: str,
    trigger: str | TriggerSpec,
    *,
    command_name: str | None = None,
) -> list[InjectionDirective]:
    """Find the directives opened by a single trigger.

    Other triggers are ignored, so ``extract_injections(t, "!{")`` leaves
    ``@{...}`` spans as plain text.

    Args:
        text: Template text
        trigger: A default trigger prefix (``"@{"``, ``"!{"``, ...) or a TriggerSpec
        command_name: Command name for error messages

    Returns:
        Directives in source order

    Raises:
        ValueError: If ``trigger`` is an unknown prefix
        UnterminatedDirectiveError: If a directive's braces never balance

    Example:
        >>> [d.raw_content for d in extract_injections("a !{echo {nested}} b", "!{")]
        ['echo {nested}']
    """
    if isinstance(trigger, str):
        spec = DEFAULT_TRIGGERS.get(trigger)
        if spec is None:
            msg = f"Unknown trigger {trigger!r}; pass a TriggerSpec for custom triggers"
            raise ValueError(msg)
    else:
        spec = trigger

    if spec.prefix not in text:
        return []

    result = Scanner(text, TriggerTable((spec,)), command_name=command_name).run()
    if isinstance(result, ParseError):
        raise result
    return list(result.directives)


class InjectionScanner:
    """Reusable scanner with fixed triggers, markers and options.

    Usage:
        >>> scanner = InjectionScanner(strict_markers=False)
        >>> output = scanner("Hello {{ name }} @{README.md}")
        >>> [d.raw_content for d in output.directives]
        ['README.md']
        >>> output.diagnostics[0].code
        'no-marker-delimiter'

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        InjectionScanner instances concurrently from different threads.

    """

    __slots__ = ("_config",)

    def __init__(
        self,
        *,
        triggers: TriggerTable | None = None,
        markers: MarkerRegistry | None = None,
        strict_markers: bool = True,
        marker_lookahead: int = DEFAULT_MARKER_LOOKAHEAD,
    ) -> None:
        """Initialize scanner.

        Args:
            triggers: Trigger table (uses defaults if None)
            markers: Marker registry (uses defaults if None)
            strict_markers: Fail on ``{{`` without a marker delimiter
            marker_lookahead: How far past ``{{`` the ``:`` may appear
        """
        # Build immutable config once (thread-safe, reused across calls)
        self._config = ScanConfig(
            triggers=triggers if triggers is not None else create_default_triggers(),
            markers=markers if markers is not None else create_default_registry(),
            marker_lookahead=marker_lookahead,
            strict_markers=strict_markers,
        )

    @property
    def config(self) -> ScanConfig:
        """The scanner's configuration."""
        return self._config

    def __call__(self, source: str, *, source_file: str | None = None) -> ParseOutput:
        """Scan a template, raising on malformed directives."""
        result = self.scan(source, source_file=source_file)
        if isinstance(result, ParseError):
            raise result
        return result

    def scan(self, source: str, *, source_file: str | None = None) -> ParseOutput | ParseError:
        """Scan a template, returning either the output or the error.

        Thread Safety:
            Sets config via ContextVar (thread-local). Safe for concurrent use.

        """
        with scan_config_context(self._config):
            return Scanner(source, source_file=source_file).run()


__all__ = [
    # Core API
    "parse",
    "scan",
    "extract_injections",
    "expand",
    "InjectionScanner",
    "Scanner",
    # Configuration
    "ScanConfig",
    "get_scan_config",
    "set_scan_config",
    "reset_scan_config",
    "scan_config_context",
    # Triggers and markers
    "AT_FILE_INJECTION_TRIGGER",
    "SHELL_INJECTION_TRIGGER",
    "SHORTHAND_ARGS_PLACEHOLDER",
    "DEFAULT_TRIGGERS",
    "TriggerForm",
    "TriggerSpec",
    "TriggerTable",
    "create_default_triggers",
    "Marker",
    "MarkerKind",
    "MarkerRegistry",
    "MarkerRegistryBuilder",
    "create_default_registry",
    "create_registry_with_defaults",
    # Output
    "ParseOutput",
    "Segment",
    "Literal",
    "Directive",
    "InjectionDirective",
    "Diagnostic",
    "SourceLocation",
    # Expansion
    "ArgumentSubstituter",
    "DirectiveResolver",
    # Serialization
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Errors
    "LlavesError",
    "ParseError",
    "NoMarkerDelimiterError",
    "UnterminatedDirectiveError",
    "TriggerTableError",
    # Version
    "__version__",
]
