"""
Argbinder default help formatter.

The parser exports one HelpEntry per binding (names, placeholder, description,
required, kind, hidden, deprecated); render() lays them out with rich:

    usage: prog [-h | --help] [-v | --verbose] [-n | --count COUNT] FILE [FILE ...]

    description paragraph

    flags:
      -h, --help     show this help message and exit
      -v, --verbose  talk more
    options:
      -n, --count COUNT
                     how many
    cardinals:
      FILE           input files

Palette keys
- usage-label, program-name, description-section
- group-label, argument-description, required-mark
- option-name, flag-name, deprecated-name, metavar
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed; deprecated names still strike.
"""
from collections import defaultdict

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import *

INDENT = 17
PADDING = 2


def render(prog, entries, /, descr=Unset, *, colorful=True, fancy=False):
    """
    Build a rich renderable describing the given help entries.

    Parameters
    - prog: program name shown in the usage line.
    - entries: iterable of HelpEntry, in registration order.
    - descr: optional description paragraph.
    - colorful: apply the palette.
    - fancy: wrap everything in a titled panel.
    """
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "description-section": "italic #A3A3A3",

        "group-label": "bold #FFFFFF",
        "argument-description": "#9CA3AF",
        "required-mark": "bold #EF4444",

        "option-name": "bold #00E6FF",
        "flag-name": "bold #22C55E",
        "deprecated-name": "bold #F97316 strike",
        "metavar": "bold #FFD600",

        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        if "deprecated" in style and not colorful:
            return "strike"
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        return Text(str(fragment), styler(style))

    entries = [entry for entry in entries if not entry.hidden]

    def names(entry, separator):
        style = "deprecated-name" if entry.deprecated else ("flag-name" if entry.kind == "flag" else "option-name")
        return Text(separator).join(text(name, style) for name in entry.names)

    # usage line: named entries first (in registration order), then cardinals
    usage = Text()
    usage.append(text("usage", "usage-label")).append(": ")
    usage.append(text(prog, "program-name"))
    for entry in filter(lambda x: x.kind != "cardinal", entries):
        item = names(entry, " | ")
        if entry.metavar:
            item.append(" ").append(text(entry.metavar, "metavar"))
        usage.append(" ").append(item if entry.required else Text.assemble("[", item, "]"))
    for entry in filter(lambda x: x.kind == "cardinal", entries):
        usage.append(" ").append(text(entry.metavar, "metavar"))

    renders = [usage]

    if descr:
        renders.append(Text("\n").append(text(descr, "description-section")))

    groups = defaultdict(list)
    for entry in entries:
        groups[pluralize(entry.kind)].append(entry)

    for group, members in groups.items():
        section = Text("\n")
        section.append(text(group, "group-label")).append(":")
        for entry in members:
            if entry.kind == "cardinal":
                head = text(entry.metavar, "metavar")
            else:
                head = names(entry, ", ")
                if entry.metavar:
                    head.append(" ").append(text(entry.metavar, "metavar"))

            line = Text("\n").append(" " * PADDING).append(head)
            if entry.required and entry.kind != "cardinal":
                line.append(" ").append(text("(required)", "required-mark"))

            if entry.descr:
                if len(line) - 1 >= INDENT - 1:
                    line.append("\n").append(" " * INDENT)
                else:
                    line.append(" " * (INDENT - len(line) + 1))
                line.append(text(entry.descr, "argument-description"))
            section.append(line)
        renders.append(section)

    renderable = Group(*renders)
    if fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", f"{prog} help".upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )
    return renderable


__all__ = (
    "render",
)
