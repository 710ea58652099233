"""
Argbinder registry: option names to binding handles.

Rules
- short names: "-x", exactly one character after the hyphen (the character may
  not be "-").
- long names: "--name", at least one character after the double hyphen and no
  "=" (it separates inline values).
- names are unique across the whole registry, short and long alike.
- once frozen (the parser left its configuring phase) nothing can be added.

Every violation is a ConfigurationError: these are programming mistakes, not
user input problems.
"""
from types import MappingProxyType

from .faults import ConfigurationError


class Registry:
    """
    Name maps for one parser.

    - short: read-only mapping of single characters to handles.
    - long: read-only mapping of full long names ("--name") to handles.
    """

    def __init__(self):
        self._short = {}
        self._long = {}
        self._frozen = False

    @property
    def short(self):
        return MappingProxyType(self._short)

    @property
    def long(self):
        return MappingProxyType(self._long)

    @property
    def frozen(self):
        return self._frozen

    def freeze(self):
        self._frozen = True

    def check(self, name, /):
        """
        Validate a name without registering it.

        Raises
        - TypeError: name is not a string.
        - ConfigurationError: malformed, already registered, or registry frozen.
        """
        if not isinstance(name, str):
            raise TypeError("option names must be strings")
        if self._frozen:
            raise ConfigurationError("cannot register %r: the parser has already parsed its arguments" % name)

        if name.startswith("--"):
            if len(name) <= 2:
                raise ConfigurationError("illegal long option %r: must have at least one character after the hyphens" % name)
            if "=" in name:
                raise ConfigurationError("illegal long option %r: cannot contain '='" % name)
            if name in self._long:
                raise ConfigurationError("long option %r already in use" % name)
        elif name.startswith("-"):
            if len(name) != 2:
                raise ConfigurationError("illegal short option %r: can only have one character after the hyphen" % name)
            if name[1] in self._short:
                raise ConfigurationError("short option %r already in use" % name)
        else:
            raise ConfigurationError("illegal option name %r: must start with '-' or '--'" % name)

    def register(self, name, handle, /):
        self.check(name)
        if name.startswith("--"):
            self._long[name] = handle
        else:
            self._short[name[1]] = handle

    def lookup(self, name, /):
        """
        Return the handle registered under a full option name, or None.
        """
        if name.startswith("--"):
            return self._long.get(name)
        if len(name) == 2 and name.startswith("-"):
            return self._short.get(name[1])
        return None

    def names(self):
        """
        All registered names, short ones first, as written on a command line.
        """
        return ["-" + key for key in self._short] + list(self._long)

    def __contains__(self, name):
        return self.lookup(name) is not None

    def __len__(self):
        return len(self._short) + len(self._long)


__all__ = (
    "Registry",
)
