"""
Argbinder outcomes: what a parse returns.

Kinds
- Parsed: every binding settled and validated; values are readable by handle.
- Failed: the first user-facing fault that stopped the parse.
- HelpRequested: the help option was seen; carries the rendered usage.

Exit contract
- status is 0 for Parsed and HelpRequested, 1 for Failed.
- exit() on Failed prints the fault to stderr and exits with status 1.
- exit() on HelpRequested prints the usage to the chosen stream (stdout by
  default) and exits with status 0.
- exit() on Parsed returns the outcome unchanged, so it can be chained:
      outcome = parser.parse().exit()
"""
import io
import sys
from abc import ABC, abstractmethod
from types import MappingProxyType

from rich.console import Console

from .bindings import Handle
from .faults import ConfigurationError, MissingRequiredArgumentError, trigger
from .utils import *


class Outcome(ABC):
    """
    Common base for parse outcomes.
    """
    status = 0

    @property
    def ok(self):
        return self.status == 0

    @abstractmethod
    def exit(self, file=Unset):
        ...


class Parsed(Outcome):
    """
    Successful parse.

    - values: read-only mapping of handle to value for every binding that holds
      a value (bindings without default that were never seen are absent).
    - arena: identifier of the parser that produced it; handles from any other
      parser are rejected.
    """

    def __init__(self, values, arena, /):
        self._values = MappingProxyType(dict(values))
        self._arena = arena

    @property
    def values(self):
        return self._values

    def __getitem__(self, handle):
        if not isinstance(handle, Handle):
            raise TypeError("expected a handle returned by a parser declaration, got %r" % (handle,))
        if handle.arena != self._arena:
            raise ConfigurationError("%r belongs to another parser" % (handle,))
        try:
            return self._values[handle]
        except KeyError:
            raise MissingRequiredArgumentError(
                "no value was parsed for %r" % (handle,),
                input=handle,
            ) from None

    def __contains__(self, handle):
        return handle in self._values

    def exit(self, file=Unset):
        return self

    def __rich_repr__(self):
        yield "values", dict(self._values)

    def __repr__(self):
        return "parsed(%r)" % dict(self._values)


class Failed(Outcome):
    """
    Failed parse carrying the fault that stopped it.
    """
    status = 1

    def __init__(self, fault, /):
        self._fault = fault

    @property
    def fault(self):
        return self._fault

    @property
    def message(self):
        return self._fault.message

    def exit(self, file=Unset):
        # faults print themselves to stderr and exit with status 1 in shell mode
        trigger(self._fault, shell=True)

    def __rich__(self):
        return self._fault

    def __repr__(self):
        return "failed(%s: %r)" % (type(self._fault).__name__, self._fault.message)


class HelpRequested(Outcome):
    """
    The help option was given. Not a failure: status is 0.

    - renderable: the rich renderable produced by the help formatter.
    - usage: the same content as plain text.
    """

    def __init__(self, renderable, /, width=80):
        self._renderable = renderable
        self._width = width

    @property
    def renderable(self):
        return self._renderable

    @property
    def usage(self):
        buffer = io.StringIO()
        Console(file=buffer, width=self._width, color_system=None, highlight=False, soft_wrap=False).print(self._renderable)
        return buffer.getvalue()

    @property
    def message(self):
        return self.usage

    def show(self, file=Unset):
        Console(file=coalesce(file, sys.stdout), highlight=False).print(self._renderable)

    def exit(self, file=Unset):
        self.show(file)
        sys.exit(self.status)

    def __rich__(self):
        return self._renderable

    def __repr__(self):
        return "help-requested()"


def run(parser, callback, /, *, file=Unset):
    """
    Parse, then hand the successful outcome to callback.

    Failures and help requests are printed and end the process through
    Outcome.exit(); callback only ever sees a Parsed outcome. Its return value
    is returned.
    """
    return callback(parser.parse().exit(file))


__all__ = (
    "Outcome",
    "Parsed",
    "Failed",
    "HelpRequested",
    "run",
)
