"""Splice resolved text back into a scanned template.

The scanner only finds directives. Reading files, running commands and
asking for confirmation belong to the caller, which plugs in one
DirectiveResolver per marker kind:

    from llaves import parse
    from llaves.expand import ArgumentSubstituter, expand
    from llaves.markers import MarkerKind

    output = parse(template)
    args = ArgumentSubstituter(user_args)
    text = expand(output, {
        MarkerKind.FILE: lambda d: read_workspace_file(d.raw_content),
        MarkerKind.SHELL: lambda d: run_command(args.shell_command(d)),
        MarkerKind.ARGS: args,
    })

Thread Safety:
    expand is pure apart from what the resolvers do.

"""

from __future__ import annotations

import shlex
from collections.abc import Mapping
from typing import Protocol

from llaves.markers import MarkerKind
from llaves.segments import Directive, InjectionDirective, ParseOutput
from llaves.triggers import SHORTHAND_ARGS_PLACEHOLDER


class DirectiveResolver(Protocol):
    """Protocol for directive resolvers.

    A resolver receives a directive and returns the text that replaces the
    directive's whole span.

    """

    def __call__(self, directive: InjectionDirective) -> str:
        """Return replacement text for ``directive``."""
        ...


def expand(output: ParseOutput, resolvers: Mapping[MarkerKind, DirectiveResolver]) -> str:
    """Replace each directive's span with its resolved text.

    Directives whose kind has no resolver are kept verbatim.

    Args:
        output: Result of a successful scan
        resolvers: Resolver per marker kind

    Returns:
        The expanded template
    """
    parts: list[str] = []
    for segment in output:
        if isinstance(segment, Directive):
            resolver = resolvers.get(segment.directive.kind)
            if resolver is not None:
                parts.append(resolver(segment.directive))
                continue
        parts.append(segment.text)
    return "".join(parts)


class ArgumentSubstituter:
    """Substitutes invocation arguments for ``{{args}}``.

    In plain template text the arguments are inserted verbatim. Inside a
    shell directive they are shell-escaped first, so user input cannot
    break out of the command.

    Usage:
        >>> args = ArgumentSubstituter("fix the bug")
        >>> output = parse('Task: {{args}} !{grep -r "{{args}}" src}')
        >>> args(output.directives[0])
        'fix the bug'
        >>> args.shell_command(output.directives[1])
        'grep -r "\\'fix the bug\\'" src'

    """

    __slots__ = ("args",)

    def __init__(self, args: str = "") -> None:
        self.args = args

    def __call__(self, directive: InjectionDirective) -> str:
        """Resolve an ARGS directive to the raw arguments.

        Any other directive is returned unchanged.
        """
        if directive.kind is MarkerKind.ARGS:
            return self.args
        return directive.text

    def shell_command(self, directive: InjectionDirective) -> str:
        """Return a shell directive's command with escaped arguments."""
        return directive.raw_content.replace(SHORTHAND_ARGS_PLACEHOLDER, shlex.quote(self.args))

    def append_if_unused(
        self,
        output: ParseOutput,
        resolvers: Mapping[MarkerKind, DirectiveResolver] | None = None,
    ) -> str:
        """Expand ``output`` and append the arguments if nothing used them.

        Templates that never mention ``{{args}}`` still receive the user's
        arguments, after a blank line. Blank arguments are not appended.

        Args:
            output: Result of a successful scan
            resolvers: Resolvers for the other marker kinds

        Returns:
            The expanded template
        """
        text = expand(output, {**(resolvers or {}), MarkerKind.ARGS: self})
        args = self.args.strip()
        if args and SHORTHAND_ARGS_PLACEHOLDER not in output.source:
            text += f"\n\n{args}"
        return text
