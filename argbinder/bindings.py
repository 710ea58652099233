r"""
Argbinder bindings: typed destinations, their handles and the token cursor.

Overview
- Binding[_T]
  • The destination of one declared option or cardinal: a handler that consumes
    tokens through a Cursor, an optional default, ordered validators and a
    memoized slot holding the current value.
  • Bindings live in an arena (a plain list) owned by one Parser. They hold no
    reference back to the parser or the registry.

- Handle
  • Stable, hashable address of a binding inside one arena: (index, arena).
    Handles are what the configuration API returns and what value reads accept.

- Cursor
  • Transient view handed to a handler for a single dispatch step: an optional
    inline value (from "--name=value" or a short-option cluster tail), the
    following tokens, and a count of how many of them the handler consumed.

Handler contract
- handler(cursor) -> value
  • Pull tokens with cursor.next(); flags pull nothing.
  • cursor.value is the slot before this step (Unset when empty), so
    accumulating handlers can return the grown collection.
  • The returned value becomes the new slot.
  • ValueError/TypeError mean “this token cannot be converted” and are
    reported as ArgumentConversionError by the dispatcher.

Quick example:
    >>> binding = Binding(("-n", "--count"), rename(lambda cursor: int(cursor.next()), "count"))
    >>> cursor = Cursor("--count", binding.slot, "5", (), 0)
    >>> binding.consume(cursor)
    1
    >>> binding.slot
    5
"""
import copy
import functools
import operator
import re
from typing import NamedTuple

from .faults import OptionValueRequiredError
from .utils import *


class BindingType(type):
    """
    Metaclass that turns binding-like classes into introspectable records.

    Responsibilities
    - Expose the fields listed in __introspectable__ as read-only properties
      backed by "_<name>" attributes (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
      __displayable__ (if set) narrows the fields shown; otherwise
      __introspectable__ is used.
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in messages and help sections.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name, detach=False) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Handle(NamedTuple):
    """
    Address of a binding inside one parser's arena.

    - index: position of the binding in registration order.
    - arena: identifier of the owning parser; handles from another parser are
      rejected on lookup.
    """
    index: int
    arena: int

    def __repr__(self):
        return "handle(%d@%d)" % (self.index, self.arena)


class Cursor:
    """
    Token access for one handler invocation.

    The visible sequence is the inline value (when present) followed by
    tokens[offset:]. Each next() call consumes one element of it; `consumed`
    reports how many were taken, inline value included.

    Parameters
    - name: the option name as written ("-n", "--count") or a cardinal metavar.
    - value: the binding slot before this step (Unset when empty).
    - inline: str | None, the inline value candidate.
    - tokens: the full token sequence of the dispatch pass.
    - offset: index of the first token after the one being dispatched.
    - position: 1-based position of the dispatched token (for messages).
    """
    __slots__ = ("name", "value", "position", "_inline", "_tokens", "_offset", "_consumed", "_last")

    def __init__(self, name, value, inline, tokens, offset, /, position=Unset):
        self.name = name
        self.value = value
        self.position = coalesce(position, offset)
        self._inline = inline
        self._tokens = tokens
        self._offset = offset
        self._consumed = 0
        self._last = Unset

    @property
    def consumed(self):
        return self._consumed

    @property
    def inline(self):
        """
        The inline value, or None when the option token carried none.
        """
        return self._inline

    @property
    def last(self):
        """
        The last token handed out by next() (Unset when nothing was consumed).
        """
        return self._last

    def _locate(self, step):
        if self._inline is not None:
            if step == 0:
                return True, self._inline
            step -= 1
        if (index := self._offset + step) < len(self._tokens):
            return True, self._tokens[index]
        return False, Unset

    def has_next(self):
        return self._locate(self._consumed)[0]

    def peek(self):
        """
        Return the next token without consuming it.
        """
        found, token = self._locate(self._consumed)
        if not found:
            raise self._exhausted()
        return token

    def next(self):
        found, token = self._locate(self._consumed)
        if not found:
            raise self._exhausted()
        self._consumed += 1
        self._last = token
        return token

    def rest(self):
        """
        Consume and return every remaining token as a tuple.
        """
        tokens = []
        while self.has_next():
            tokens.append(self.next())
        return tuple(tokens)

    def _exhausted(self):
        return OptionValueRequiredError(
            "option %r at %s position requires a value" % (self.name, ordinal(self.position)),
            input=self.name,
            index=self.position,
            hint="pass a value inline (%s=<value>) or as the next token" % self.name
            if self.name.startswith("--") else
            "pass a value right after it (%s<value> or %s <value>)" % (self.name, self.name),
        )

    def __repr__(self):
        return "cursor(name=%r, inline=%r, consumed=%d)" % (self.name, self._inline, self._consumed)


class Binding[_T](metaclass=BindingType):
    """
    Typed destination for one option or cardinal.

    Highlights
    - names: ordered tuple of option names ("-v", "--verbose"); empty for cardinals.
    - handler: Callable[[Cursor], _T], see the module docstring for the contract.
    - default: value the slot is pre-seeded with (a shallow copy; Unset when absent).
    - validators: ordered (check, message) pairs run after parsing.
    - flag: zero-argument option (presence only); flags are never required.
    - helper: the help option; dispatching it stops the parse with help.
    - cardinal: positional arity (see argbinder.positionals.Cardinal) or None.
    - metavar/descr/hidden/deprecated: help metadata.

    The slot is written by consume() (dispatch) and store() (allocation and
    defaults) only while the owning parser is configuring or parsing.
    """

    __introspectable__ = (
        "names",
        "handler",
        "default",
        "metavar",
        "descr",
        "flag",
        "helper",
        "hidden",
        "deprecated",
        "cardinal",
        "slot",
    )
    __displayable__ = (
        "names",
        "metavar",
        "default",
        "slot",
    )

    def __init__(
            self,
            names,
            handler,
            /,
            default=Unset,
            metavar=Unset,
            descr=Unset,
            *,
            flag=False,
            helper=False,
            hidden=False,
            deprecated=False,
            cardinal=None,
    ):
        if not callable(handler):
            raise TypeError(f"{type(self).__typename__} 'handler' must be callable")

        if not isinstance(metavar, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'metavar' must be a string")
        elif isinstance(metavar, str) and not (metavar := metavar.strip()):
            raise ValueError(f"{type(self).__typename__} 'metavar' cannot be empty")

        if not isinstance(descr, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{type(self).__typename__} 'descr' cannot be empty")

        if helper and hidden:
            raise TypeError(f"helper {type(self).__typename__} cannot be hidden")

        self._names = tuple(names)
        self._handler = handler
        self._default = default
        self._metavar = coalesce(metavar)
        self._descr = coalesce(descr)
        self._flag = bool(flag)
        self._helper = bool(helper)
        self._hidden = bool(hidden)
        self._deprecated = bool(deprecated)
        self._cardinal = cardinal
        self._validators = []
        self._slot = copy.copy(default)

    @property
    def validators(self):
        return tuple(self._validators)

    @property
    def required(self):
        """
        True when parsing must produce a value: no default and not a flag.
        Cardinals are required when their minimum arity is positive.
        """
        if self._cardinal is not None:
            return self._cardinal.minimum > 0
        return self._default is Unset and not self._flag

    @property
    def label(self):
        """
        Name used in messages: the longest option name, or the cardinal metavar.
        """
        if self._names:
            return max(self._names, key=len)
        return coalesce(self._metavar, "argument")

    def consume(self, cursor, /):
        """
        Run the handler over the cursor, store its result, and return how many
        tokens (inline value included) it consumed.
        """
        self._slot = self._handler(cursor)
        return cursor.consumed

    def store(self, value, /):
        self._slot = value

    def reseed(self, value, /):
        """
        Replace the default (and the slot it pre-seeds with a shallow copy).
        """
        self._default = value
        self._slot = copy.copy(value)

    def attach(self, check, message, /):
        if not callable(check):
            raise TypeError("validator check must be callable")
        self._validators.append((check, message))


__all__ = (
    "Binding",
    "Handle",
    "Cursor",
)
