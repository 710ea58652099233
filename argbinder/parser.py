r"""
Argbinder parser: declare bindings, parse once, read values.

Two phases
- configuring: declaration methods register bindings and return handles.
  • flag(...): presence-only switch (True when seen).
  • option(...): one converted value; later occurrences overwrite.
  • collect(...): converted values accumulated into a list.
  • mapping(...): each name stands for a constant ("--fast" → Mode.FAST).
  • custom(...): raw handler over a Cursor (every helper above is built on it).
  • cardinal(...): positional argument with an arity.
  • default(...), validator(...): adjust a declared binding.
- parse(): runs exactly once and returns an outcome (Parsed, Failed or
  HelpRequested). Later calls return the same outcome. Declaration methods
  raise ConfigurationError from then on.

Reading values
- parser[handle] or outcome[handle] after a successful parse. Reading never
  triggers parsing; before parse() (or after a failure) it is a
  ConfigurationError.

Parse steps
1. freeze the registry;
2. dispatch every token (see argbinder.dispatcher);
3. allocate the positional residue to cardinals (see argbinder.positionals);
4. report the first required binding without a value;
5. run validators, binding by binding in registration order.
The first fault stops the remaining steps and the parser ends up failed.

Quick example:
    >>> parser = Parser(["-v", "--count=5", "a.txt", "b.txt"], "tool")
    >>> verbose = parser.flag("-v", "--verbose")
    >>> count = parser.option("-n", "--count", type=int, default=1)
    >>> files = parser.cardinal("FILE", nargs="+")
    >>> outcome = parser.parse()
    >>> outcome[verbose], outcome[count], outcome[files]
    (True, 5, ['a.txt', 'b.txt'])
"""
import copy
import enum
import itertools
import os.path
import sys
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from .bindings import Binding, Cursor, Handle
from .dispatcher import Dispatcher, MODES
from .faults import *
from .formatter import render
from .outcomes import Parsed, Failed, HelpRequested
from .positionals import Cardinal, allocate
from .registry import Registry
from .utils import *

_arenas = itertools.count(1)


class Lifecycle(enum.Enum):
    """
    Parser states. CONFIGURING is the only non-terminal one.
    """
    CONFIGURING = "configuring"
    PARSED = "parsed"
    HELP = "help"
    FAILED = "failed"


class HelpEntry(NamedTuple):
    """
    What a help formatter needs to know about one binding.

    - names: option names in declaration order (empty for cardinals).
    - metavar: display placeholder ("COUNT", "FILE [FILE ...]") or None for flags.
    - descr: help string or None.
    - required: no default and not a flag (cardinals: minimum arity > 0).
    - kind: "flag", "option" or "cardinal".
    - hidden / deprecated: presentation hints.
    """
    names: tuple[str, ...]
    metavar: str | None
    descr: str | None
    required: bool
    kind: str
    hidden: bool = False
    deprecated: bool = False


def _converter(type, /):
    if not callable(type):
        raise TypeError("'type' must be callable")
    return type


def _placeholder(names, metavar, /):
    if metavar:
        return metavar
    longs = [name for name in names if name.startswith("--")]
    return (longs[0][2:] if longs else names[0][1:]).upper().replace("-", "_")


class Parser:
    """
    Command-line parser bound to one token sequence.

    Parameters
    - tokens: Iterable[str] (positional-only), defaults to sys.argv[1:].
    - prog: program name for usage and fault headers, defaults to the basename
      of sys.argv[0].
    - descr: description paragraph for the help output.
    - mode: "interspersed" (options anywhere, default) or "exclusive" (the first
      positional turns option recognition off).
    - help: register "-h"/"--help" (default True).
    - colorful / fancy: fault and help rendering options.
    - formatter: Callable(prog, entries, descr, *, colorful, fancy) returning a
      rich renderable; defaults to argbinder.formatter.render.

    A parser owns its bindings and registry; they are never shared. One parse()
    per instance, from one thread.
    """

    def __init__(
            self,
            tokens=Unset,
            prog=Unset,
            /,
            *,
            descr=Unset,
            mode="interspersed",
            help=True,
            colorful=True,
            fancy=False,
            formatter=render,
    ):
        tokens = tuple(coalesce(tokens, sys.argv[1:]))
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parser tokens must be strings")
        if not isinstance(prog := coalesce(prog, os.path.basename(sys.argv[0])), str):
            raise TypeError("parser 'prog' must be a string")
        if mode not in MODES:
            raise ValueError("parser 'mode' must be one of %s" % ", ".join(map(repr, MODES)))
        if not callable(formatter):
            raise TypeError("parser 'formatter' must be callable")

        self._tokens = tokens
        self._prog = prog
        self._descr = coalesce(descr)
        self._mode = mode
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._formatter = formatter

        self._arena = next(_arenas)
        self._bindings = []
        self._registry = Registry()
        self._lifecycle = Lifecycle.CONFIGURING
        self._outcome = Unset
        self._error = None

        if help:
            self.custom(
                "-h", "--help",
                handler=rename(lambda cursor: True, "help"),
                default=False,
                descr="show this help message and exit",
                flag=True,
                helper=True,
            )

    @property
    def prog(self):
        return self._prog

    @property
    def tokens(self):
        return self._tokens

    @property
    def mode(self):
        return self._mode

    @property
    def lifecycle(self):
        return self._lifecycle

    @property
    def outcome(self):
        """
        The memoized outcome, or None while still configuring.
        """
        return coalesce(self._outcome)

    # ----------------------------------------------------------------------------------------------
    # configuration
    # ----------------------------------------------------------------------------------------------

    def _configuring(self, action):
        if self._lifecycle is not Lifecycle.CONFIGURING:
            raise ConfigurationError("cannot %s: the parser has already parsed its arguments" % action)

    def _binding(self, handle):
        if not isinstance(handle, Handle):
            raise TypeError("expected a handle returned by a parser declaration, got %r" % (handle,))
        if handle.arena != self._arena:
            raise ConfigurationError("%r belongs to another parser" % (handle,))
        return self._bindings[handle.index]

    def _declare(self, names, binding):
        self._configuring("declare %s" % (" ".join(names) or binding.metavar))
        if binding.cardinal is None:
            if not names:
                raise ConfigurationError("an option needs at least one name")
            if len(set(names)) != len(names):
                raise ConfigurationError("option names cannot contain duplicates: %s" % ", ".join(names))
            for name in names:
                self._registry.check(name)

        handle = Handle(len(self._bindings), self._arena)
        for name in names:
            self._registry.register(name, handle)
        self._bindings.append(binding)
        return handle

    def custom(
            self,
            *names,
            handler,
            default=Unset,
            metavar=Unset,
            descr=Unset,
            flag=False,
            helper=False,
            hidden=False,
            deprecated=False,
    ):
        """
        Declare an option driven by a raw handler.

        handler(cursor) receives a Cursor (see argbinder.bindings) and returns the
        new value. It may pull any number of tokens with cursor.next(); pulling
        none marks the option as flag-like inside a short-option cluster.
        """
        binding = Binding(
            names,
            handler,
            default,
            Unset if flag else _placeholder(names, metavar) if names else metavar,
            descr,
            flag=flag,
            helper=helper,
            hidden=hidden,
            deprecated=deprecated,
        )
        return self._declare(names, binding)

    def flag(self, *names, default=False, descr=Unset, hidden=False, deprecated=False):
        """
        Declare a presence-only option: True when seen, default otherwise.
        """
        return self.custom(
            *names,
            handler=rename(lambda cursor: True, "flag"),
            default=default,
            descr=descr,
            flag=True,
            hidden=hidden,
            deprecated=deprecated,
        )

    def option(self, *names, type=str, default=Unset, metavar=Unset, descr=Unset, hidden=False, deprecated=False):
        """
        Declare an option taking exactly one value, converted with `type`.

        Without a default the option is required.
        """
        convert = _converter(type)
        return self.custom(
            *names,
            handler=rename(lambda cursor: convert(cursor.next()), "option"),
            default=default,
            metavar=metavar,
            descr=descr,
            hidden=hidden,
            deprecated=deprecated,
        )

    def collect(self, *names, type=str, default=(), metavar=Unset, descr=Unset, hidden=False, deprecated=False):
        """
        Declare an accumulating option: every occurrence appends one converted
        value to a list that starts from a copy of `default`.
        """
        convert = _converter(type)
        if not isinstance(default, Iterable) or isinstance(default, str):
            raise TypeError("collect 'default' must be a non-string iterable")
        return self.custom(
            *names,
            handler=rename(lambda cursor: [*coalesce(cursor.value, ()), convert(cursor.next())], "collect"),
            default=list(default),
            metavar=metavar,
            descr=descr,
            hidden=hidden,
            deprecated=deprecated,
        )

    def mapping(self, mapping, /, default=Unset, *, descr=Unset, hidden=False, deprecated=False):
        """
        Declare a set of flag-like names sharing one destination; each name
        stores its own constant and the last one seen wins. Without a default
        the binding holds no value unless one of the names is given.

            mode = parser.mapping({"--fast": Mode.FAST, "--small": Mode.SMALL}, Mode.FAST)
        """
        if not isinstance(mapping, Mapping) or not mapping:
            raise TypeError("mapping() argument must be a non-empty mapping of names to values")
        constants = dict(mapping)
        return self.custom(
            *constants,
            handler=rename(lambda cursor: constants[cursor.name], "mapping"),
            default=default,
            descr=descr,
            flag=True,
            hidden=hidden,
            deprecated=deprecated,
        )

    def cardinal(self, metavar, /, nargs=Unset, *, type=str, default=Unset, descr=Unset, hidden=False):
        """
        Declare a positional argument.

        nargs: Unset (exactly one), "?", "*", "+", an int, or a (minimum, maximum)
        pair where maximum may be None. Single-valued cardinals ("?" and Unset)
        store the converted token, the others a list. An empty "?" cardinal
        stores `default` (None when not given).
        """
        convert = _converter(type)
        cardinal = Cardinal(metavar, nargs)

        if cardinal.scalar:
            handler = rename(lambda cursor: convert(cursor.next()), "cardinal")
        else:
            handler = rename(lambda cursor: [convert(token) for token in cursor.rest()], "cardinal")

        if cardinal.minimum > 0 and default is not Unset:
            raise ConfigurationError("cardinal %r requires at least one value and cannot have a default" % cardinal.metavar)
        if cardinal.minimum == 0 and default is Unset:
            default = None if cardinal.scalar else []

        binding = Binding(
            (),
            handler,
            default,
            cardinal.metavar,
            descr,
            hidden=hidden,
            cardinal=cardinal,
        )
        return self._declare((), binding)

    def default(self, handle, value, /):
        """
        Set (or replace) the default of a declared binding.
        """
        self._configuring("set a default")
        binding = self._binding(handle)
        if binding.cardinal is not None and binding.cardinal.minimum > 0:
            raise ConfigurationError("cardinal %r requires at least one value and cannot have a default" % binding.metavar)
        binding.reseed(value)
        return handle

    def validator(self, handle, check=Unset, /, message=Unset):
        """
        Attach a validator to a binding.

        - check(value) returning a falsy value fails with ValidationError(message).
        - check raising ValidationError keeps its own message; ValueError becomes
          ValidationError with the error text.

        Without `check`, returns a decorator:

            @parser.validator(weights, "weights must sum to 100")
            def _(values):
                return sum(values) == 100
        """
        self._configuring("attach a validator")
        binding = self._binding(handle)
        if message is not Unset and not isinstance(message, str):
            raise TypeError("validator 'message' must be a string")

        if check is Unset:
            @rename("validator")
            def decorator(check, /):
                self.validator(handle, check, message)
                return check
            return decorator

        binding.attach(check, coalesce(message, "invalid value for %s" % binding.label))
        return handle

    # ----------------------------------------------------------------------------------------------
    # lifecycle
    # ----------------------------------------------------------------------------------------------

    def parse(self):
        """
        Parse the tokens (once) and return the outcome.

        Never raises user-facing faults: they are returned as Failed. Calling it
        again returns the memoized outcome without doing any work.

        Any other exception (from a handler, converter or validator) propagates
        and leaves the parser failed without an outcome; later calls raise
        ConfigurationError instead of parsing again.
        """
        if self._lifecycle is not Lifecycle.CONFIGURING:
            if self._outcome is Unset:
                raise ConfigurationError("cannot parse: the previous parse raised %s" % type(self._error).__name__) from self._error
            return self._outcome

        self._registry.freeze()
        try:
            run = Dispatcher(self._registry, self._bindings, self._mode).run(self._tokens)
            if run.helper is not None:
                self._lifecycle = Lifecycle.HELP
                self._outcome = HelpRequested(self.usage())
                return self._outcome
            self._settle(run.residue)
            self._require()
            self._validate()
        except ParserFault as fault:
            self._lifecycle = Lifecycle.FAILED
            self._outcome = Failed(copy.replace(fault, prog=self._prog, colorful=self._colorful, fancy=self._fancy))
            return self._outcome
        except BaseException as exception:
            self._lifecycle = Lifecycle.FAILED
            self._error = exception
            raise

        self._lifecycle = Lifecycle.PARSED
        self._outcome = Parsed({
            Handle(index, self._arena): binding.slot
            for index, binding in enumerate(self._bindings)
            if binding.slot is not Unset
        }, self._arena)
        return self._outcome

    force = parse

    def _settle(self, residue):
        cardinals = [binding for binding in self._bindings if binding.cardinal is not None]
        chunks = allocate([binding.cardinal for binding in cardinals], residue)

        for binding, chunk in zip(cardinals, chunks):
            if not chunk and binding.cardinal.scalar:
                continue
            cursor = Cursor(binding.metavar, binding.slot, None, chunk, 0)
            try:
                binding.consume(cursor)
            except (ValueError, TypeError) as exception:
                token = coalesce(cursor.last, chunk[0])
                raise ArgumentConversionError(
                    "invalid value %r for %r%s" % (
                        token, binding.metavar, ": %s" % exception if str(exception) else ""
                    ),
                    input=binding.metavar,
                    token=token,
                    hint="check the expected %s" % binding.metavar,
                    exception=exception,
                ) from exception

    def _require(self):
        for binding in self._bindings:
            if binding.cardinal is None and binding.slot is Unset and binding.required:
                raise MissingRequiredArgumentError(
                    "missing required option %r" % binding.label,
                    input=binding.label,
                    hint="pass %s %s" % (binding.label, binding.metavar),
                )

    def _validate(self):
        for binding in self._bindings:
            if binding.slot is Unset:
                continue
            for check, message in binding.validators:
                try:
                    valid = check(binding.slot)
                except ValidationError:
                    raise
                except ValueError as exception:
                    raise ValidationError(str(exception) or message, input=binding.label, exception=exception) from exception
                if not valid:
                    raise ValidationError(message, input=binding.label)

    # ----------------------------------------------------------------------------------------------
    # reading
    # ----------------------------------------------------------------------------------------------

    def __getitem__(self, handle):
        """
        Read the value of a binding after a successful parse.

        Raises
        - ConfigurationError: the parser has not parsed (or failed), or the handle
          belongs to another parser.
        - MissingRequiredArgumentError: the binding holds no value.
        """
        binding = self._binding(handle)
        if self._lifecycle is not Lifecycle.PARSED:
            raise ConfigurationError("cannot read %s: the parser is %s" % (binding.label, self._lifecycle.value))
        if binding.slot is Unset:
            raise MissingRequiredArgumentError("no value was parsed for %r" % binding.label, input=binding.label)
        return binding.slot

    def entries(self):
        """
        Help metadata for every binding, in registration order.
        """
        entries = []
        for binding in self._bindings:
            if binding.cardinal is not None:
                kind = "cardinal"
                metavar = binding.cardinal.placeholder
            else:
                kind = "flag" if binding.flag else "option"
                metavar = binding.metavar
            entries.append(HelpEntry(
                binding.names,
                metavar,
                binding.descr,
                binding.required,
                kind,
                binding.hidden,
                binding.deprecated,
            ))
        return tuple(entries)

    def usage(self):
        """
        The help renderable produced by the configured formatter.
        """
        return self._formatter(self._prog, self.entries(), self._descr, colorful=self._colorful, fancy=self._fancy)

    def __rich_repr__(self):
        yield "prog", self._prog
        yield "mode", self._mode
        yield "lifecycle", self._lifecycle.value
        yield "bindings", list(self._bindings)

    def __repr__(self):
        return "parser(prog=%r, mode=%r, lifecycle=%r, bindings=%d)" % (
            self._prog, self._mode, self._lifecycle.value, len(self._bindings)
        )


__all__ = (
    "Parser",
    "Lifecycle",
    "HelpEntry",
)
