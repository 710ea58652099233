r"""
Argbinder dispatcher: one forward pass over the command-line tokens.

Token grammar
- "--"               terminator: every following token is positional.
- "--name"           long option; its handler may pull following tokens.
- "--name=value"     long option with an inline value the handler must consume.
- "-c"               short option.
- "-cVALUE"          short option with an inline value (the cluster tail).
- "-xyz"             cluster of short flags.
- "-xyzVALUE"        cluster ending in a value-taking option that absorbs the tail.
- anything else      positional (a lone "-" included).

Modes
- "interspersed": options may appear anywhere among positionals.
- "exclusive": the first positional token turns option recognition off for
  the rest of the line.
Both modes honor "--".

Each step advances by the number of tokens it consumed (at least one). The
first fault stops the pass; nothing is retried.
"""
import difflib
from typing import NamedTuple, Literal

from .bindings import Cursor
from .faults import *
from .utils import *

MODES = ("interspersed", "exclusive")

type Mode = Literal["interspersed", "exclusive"]


class Pass(NamedTuple):
    """
    Result of a dispatch pass.

    - residue: positional tokens in command-line order.
    - helper: handle of the help option that stopped the pass, or None.
    """
    residue: tuple[str, ...]
    helper: object = None


class Dispatcher:
    """
    Route tokens to bindings through a registry.

    Parameters
    - registry: Registry mapping option names to handles.
    - bindings: the arena; handle.index selects the binding.
    - mode: "interspersed" (default) or "exclusive".
    """

    def __init__(self, registry, bindings, /, mode="interspersed"):
        if mode not in MODES:
            raise ValueError("dispatcher 'mode' must be one of %s" % ", ".join(map(repr, MODES)))
        self._registry = registry
        self._bindings = bindings
        self._mode = mode
        self._helper = None

    @property
    def mode(self):
        return self._mode

    def run(self, tokens, /):
        """
        Dispatch every token and return the positional residue.

        Raises
        - ParserFault subclasses on the first unknown option, unconsumed inline
          value, missing option value or conversion failure.
        """
        tokens = tuple(tokens)
        residue = []
        self._helper = None

        index = 0
        while index < len(tokens):
            token = tokens[index]

            if token == "--":
                residue.extend(tokens[index + 1:])
                break

            if token.startswith("--"):
                index += self._long(tokens, index)
            elif token.startswith("-") and len(token) > 1:
                index += self._short(tokens, index)
            elif self._mode == "exclusive":
                residue.extend(tokens[index:])
                break
            else:
                residue.append(token)
                index += 1

            if self._helper is not None:
                break

        return Pass(tuple(residue), self._helper)

    def _long(self, tokens, index):
        name, separator, inline = tokens[index].partition("=")
        inline = inline if separator else None

        handle = self._lookup(name, index)
        consumed = self._invoke(handle, name, inline, tokens, index)

        if inline is not None:
            if consumed < 1:
                raise InlineValueNotConsumedError(
                    "option %r at %s position does not take a value" % (name, ordinal(index + 1)),
                    input=name,
                    token=tokens[index],
                    index=index + 1,
                    hint="remove everything from '=' (for example: %s)" % name,
                )
            consumed -= 1
        return 1 + consumed

    def _short(self, tokens, index):
        cluster = tokens[index]
        for offset in range(1, len(cluster)):
            name = "-" + cluster[offset]
            inline = cluster[offset + 1:] or None

            handle = self._lookup(name, index)
            consumed = self._invoke(handle, name, inline, tokens, index)

            if self._helper is not None:
                return 1
            if consumed > 0:
                # the cluster tail (if any) went to this option as its inline value
                return consumed + (1 if inline is None else 0)
        return 1

    def _lookup(self, name, index):
        if (handle := self._registry.lookup(name)) is not None:
            return handle

        suggestions = difflib.get_close_matches(name, self._registry.names(), 5)
        try:
            hint = "did you mean %r? use '--' before arguments that start with '-'" % suggestions[0]
        except IndexError:
            hint = "use '--' before positional arguments that start with '-'"
        raise UnknownOptionError(
            "unknown option %r at %s position" % (name, ordinal(index + 1)),
            input=name,
            index=index + 1,
            suggestions=tuple(suggestions),
            hint=hint,
        )

    def _invoke(self, handle, name, inline, tokens, index):
        binding = self._bindings[handle.index]

        if binding.deprecated:
            trigger(DeprecatedOptionWarning(
                "option %r at %s position is deprecated" % (name, ordinal(index + 1)),
                input=name,
                index=index + 1,
                hint="check the help output for its replacement",
            ))

        cursor = Cursor(name, binding.slot, inline, tokens, index + 1, position=index + 1)
        try:
            consumed = binding.consume(cursor)
        except (ValueError, TypeError) as exception:
            token = coalesce(cursor.last, "" if inline is None else inline)
            raise ArgumentConversionError(
                "invalid value %r for option %r at %s position%s" % (
                    token, name, ordinal(index + 1), ": %s" % exception if str(exception) else ""
                ),
                input=name,
                token=token,
                index=index + 1,
                hint="check the expected %s" % (binding.metavar or "value"),
                exception=exception,
            ) from exception

        if binding.helper:
            self._helper = handle
        return consumed


__all__ = (
    "Dispatcher",
    "Pass",
    "Mode",
    "MODES",
)
