"""
Argbinder positional specs (cardinals) and the residue allocator.

Overview
- Cardinal: arity of one positional argument, expressed as (minimum, maximum)
  where maximum may be None (unbounded). Built from a familiar nargs value:
    Unset   → exactly one, stored as a scalar
    "?"     → zero or one, stored as a scalar (default when absent)
    "*"     → zero or more, stored as a list
    "+"     → one or more, stored as a list
    int n   → exactly n (n >= 1), stored as a list
    (m, M)  → explicit bounds, M may be None; stored as a list

- allocate(cardinals, residue): distributes the positional residue collected
  by the dispatcher across cardinals in declared order.

Allocation (two greedy passes, left-biased)
1. Every cardinal must receive its minimum; if the residue is shorter than
   the sum of minimums, the first cardinal whose cumulative minimum is not met
   is reported as missing.
2. Left-over tokens are handed out in declared order, each cardinal taking as
   many as its maximum allows. Anything still left is unrecognized.

    >>> allocate([Cardinal("A"), Cardinal("B", nargs="+")], "abcde")
    (('a',), ('b', 'c', 'd', 'e'))
    >>> allocate([Cardinal("A", nargs="+"), Cardinal("B")], "abcde")
    (('a', 'b', 'c', 'd'), ('e',))
"""
from .bindings import BindingType
from .faults import MissingRequiredArgumentError, UnrecognizedArgumentsError
from .utils import *


class Cardinal(metaclass=BindingType):
    """
    Positional argument arity.

    Properties
    - metavar: display name used in help and messages.
    - nargs: the arity as declared (Unset, "?", "*", "+", int or tuple).
    - minimum / maximum: normalized bounds (maximum is None when unbounded).
    - scalar: True when the value is stored as a single item instead of a list.
    """

    __introspectable__ = (
        "metavar",
        "nargs",
        "minimum",
        "maximum",
        "scalar",
    )
    __displayable__ = (
        "metavar",
        "minimum",
        "maximum",
    )

    def __init__(self, metavar, /, nargs=Unset):
        if not isinstance(metavar, str):
            raise TypeError(f"{type(self).__typename__} 'metavar' must be a string")
        elif not (metavar := metavar.strip()):
            raise ValueError(f"{type(self).__typename__} 'metavar' cannot be empty")

        scalar = False
        match nargs:
            case UnsetType():
                minimum, maximum, scalar = 1, 1, True
            case "?":
                minimum, maximum, scalar = 0, 1, True
            case "*":
                minimum, maximum = 0, None
            case "+":
                minimum, maximum = 1, None
            case bool():
                raise TypeError(f"{type(self).__typename__} 'nargs' must be a string, an integer or a pair")
            case int() if nargs < 1:
                raise ValueError(f"{type(self).__typename__} 'nargs' must be a positive integer")
            case int():
                minimum, maximum = nargs, nargs
            case (int() as minimum, int() | None as maximum):
                if minimum < 0:
                    raise ValueError(f"{type(self).__typename__} minimum arity cannot be negative")
                if maximum is not None and maximum < minimum:
                    raise ValueError(f"{type(self).__typename__} minimum arity cannot exceed maximum arity")
                if maximum == 0:
                    raise ValueError(f"{type(self).__typename__} maximum arity must be positive")
            case str():
                raise ValueError(f"{type(self).__typename__} 'nargs' must be one of '?', '+', or '*'")
            case _:
                raise TypeError(f"{type(self).__typename__} 'nargs' must be a string, an integer or a pair")

        self._metavar = metavar
        self._nargs = nargs
        self._minimum = minimum
        self._maximum = maximum
        self._scalar = scalar

    @property
    def bounded(self):
        return self._maximum is not None

    @property
    def placeholder(self):
        """
        Display form of the cardinal for usage lines, shaped by its arity.

        - exactly one: FILE
        - zero or one: [FILE]
        - zero or more: [FILE ...]
        - one or more: FILE [FILE ...]
        - n..m: FILE FILE [FILE ...]
        """
        metavar = self._metavar
        parts = [metavar] * self._minimum
        if self._maximum is None:
            parts.append("[%s ...]" % metavar)
        elif (extra := self._maximum - self._minimum) == 1:
            parts.append("[%s]" % metavar)
        elif extra > 1:
            parts.append("[%s ...]" % metavar)
        return " ".join(parts)


def allocate(cardinals, residue, /):
    """
    Split the residue into one contiguous chunk per cardinal.

    Parameters
    - cardinals: sequence of Cardinal, in declared order.
    - residue: sequence of positional tokens, in command-line order.

    Returns
    - tuple of tuples, one chunk per cardinal.

    Raises
    - MissingRequiredArgumentError: fewer tokens than the sum of minimums.
    - UnrecognizedArgumentsError: more tokens than the total capacity.
    """
    residue = tuple(residue)

    needed = 0
    for cardinal in cardinals:
        needed += cardinal.minimum
        if needed > len(residue):
            missing = needed - len(residue)
            raise MissingRequiredArgumentError(
                "missing %s for %r" % (quantify(min(missing, cardinal.minimum), "positional argument"), cardinal.metavar),
                input=cardinal.metavar,
                expected=cardinal.minimum,
                got=max(0, cardinal.minimum - missing),
                hint="pass %s" % cardinal.placeholder,
            )

    remaining = len(residue) - needed
    sizes = []
    for cardinal in cardinals:
        extra = remaining if cardinal.maximum is None else min(remaining, cardinal.maximum - cardinal.minimum)
        remaining -= extra
        sizes.append(cardinal.minimum + extra)

    if remaining > 0:
        extras = residue[len(residue) - remaining:]
        raise UnrecognizedArgumentsError(
            "unrecognized arguments: %s" % " ".join(extras),
            tokens=extras,
            hint="remove the extra %s" % ("argument" if remaining == 1 else "arguments")
            if cardinals else
            "this command takes no positional arguments",
        )

    chunks = []
    start = 0
    for size in sizes:
        chunks.append(residue[start:start + size])
        start += size
    return tuple(chunks)


__all__ = (
    "Cardinal",
    "allocate",
)
