"""
Argbinder faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- ConfigurationError: developer-fatal contract violations (bad names, late
  registration). Raised immediately, never turned into an outcome.
- ParserFault / ParserWarning: base types for user-facing issues that carry
  message + options and know how to render themselves with rich.
- trigger(): central entry point to surface any fault (print + exit in shell
  mode, raise or warn otherwise).

UX goals
- Position-first messages: messages name the token position when one exists
  (“at third position”).
- Short titles, one-sentence bodies, a single clear hint.
- Styling configurable via __styles__ in __main__; code labels via __codes__.
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - options (1111x)
      • UNKNOWN_OPTION, INLINE_VALUE_NOT_CONSUMED, OPTION_VALUE_REQUIRED
    - arity (1112x / 1114x)
      • MISSING_REQUIRED_ARGUMENT, UNRECOGNIZED_ARGUMENTS
    - handlers (1113x / 1115x)
      • ARGUMENT_CONVERSION, VALIDATION_FAILED
    - warnings (12xxx)
      • DEPRECATED_OPTION
    """
    # --- option errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    INLINE_VALUE_NOT_CONSUMED   = 11113
    OPTION_VALUE_REQUIRED       = 11117

    # --- arity errors (11xxx) ---
    MISSING_REQUIRED_ARGUMENT   = 11125
    UNRECOGNIZED_ARGUMENTS      = 11141

    # --- handler errors (11xxx) ---
    ARGUMENT_CONVERSION         = 11131
    VALIDATION_FAILED           = 11151

    # --- warnings (12xxx) ---
    DEPRECATED_OPTION           = 12112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ConfigurationError(Exception):
    """
    Raised when the parser is declared incorrectly.

    This is a programmer error (malformed or duplicated option name, configuration
    after parsing started, foreign handle) and is never reported as an outcome.
    """


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _render(self, styles, titlestyle):
    """
    Shared rich rendering for faults: "[ prog — code | title ]", message, hint.
    """
    colorful = self.options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = self.options.get("prog", getattr(__import__("__main__"), "__prog__", Unset))
    header = Text.assemble(
        "[ ",
        *((text(prog, "prog-name"), " — ") if prog else ()),
        text(self.code.normalize() if isinstance(self.code, FaultCode) else "-", "code"),
        " | ",
        text(self.title.title(), titlestyle),
        " ]"
    )
    body = [text(self.message, "message")]
    if hint := self.options.get("hint"):
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

    if self.options.get("fancy", False):
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class ParserFault(Exception):
    """
    Base class for user-facing parse and validation failures.

    Every fault carries
    - message: one sentence for the user.
    - options: read-only mapping with rendering context (prog, colorful, fancy),
      a hint, and fault specific details (input, token, argument, ...). Details
      are reachable as attributes: fault.input == fault.options["input"].

    Subclasses pin a FaultCode and a short title; both may be overridden per
    instance through the 'code' and 'title' options.
    """
    code = Unset
    title = "parse failure"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)
        if "code" in options:
            self.code = options["code"]
        if "title" in options:
            self.title = options["title"]

    def __getattr__(self, name):
        if name == "options":
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __str__(self):
        return self.message

    def __reduce__(self):
        return (_rebuild, (type(self), self.message, dict(self.options)))

    def __rich__(self):
        return _render(self, _styles({
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }), "error-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


def _rebuild(cls, message, options):
    return cls(message, **options)


class UnknownOptionError(ParserFault):
    code = FaultCode.UNKNOWN_OPTION
    title = "unknown option"


class InlineValueNotConsumedError(ParserFault):
    code = FaultCode.INLINE_VALUE_NOT_CONSUMED
    title = "option takes no value"


class MissingRequiredArgumentError(ParserFault):
    code = FaultCode.MISSING_REQUIRED_ARGUMENT
    title = "missing required argument"


class OptionValueRequiredError(MissingRequiredArgumentError):
    code = FaultCode.OPTION_VALUE_REQUIRED
    title = "option value required"


class UnrecognizedArgumentsError(ParserFault):
    code = FaultCode.UNRECOGNIZED_ARGUMENTS
    title = "unrecognized arguments"


class ArgumentConversionError(ParserFault):
    code = FaultCode.ARGUMENT_CONVERSION
    title = "invalid value"


class ValidationError(ParserFault):
    code = FaultCode.VALIDATION_FAILED
    title = "validation failed"


class ParserWarning(Warning):
    """
    Base class for soft, non-fatal notices raised while parsing.
    """
    code = Unset
    title = "parser warning"

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        return _render(self, _styles({
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }), "warning-title")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedOptionWarning(ParserWarning):
    code = FaultCode.DEPRECATED_OPTION
    title = "deprecated option"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options)
      before triggering.
    - with shell=True, errors are printed to stderr and the process exits with
      status 1, warnings are printed; otherwise errors are raised and warnings
      go through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ConfigurationError",
    "ParserFault",
    "UnknownOptionError",
    "InlineValueNotConsumedError",
    "MissingRequiredArgumentError",
    "OptionValueRequiredError",
    "UnrecognizedArgumentsError",
    "ArgumentConversionError",
    "ValidationError",
    "ParserWarning",
    "DeprecatedOptionWarning",
    "trigger",
)
