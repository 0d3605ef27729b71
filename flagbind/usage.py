"""
flagbind usage reporter.

render(flagset) builds a rich renderable listing every flag of a FlagSet:

    usage: cut [flags] [args ...]

    flags:
      -d | --delimiter <char>       field delimiter (default: '\\t')
      -f | --fields <int,...>       fields to select
      -s                            suppress lines without delimiters

Palette keys
- usage-label, program-name, usage-section
- group-label, flag-name, metavar, argument-description, default
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the flag set is not colorful, styling is suppressed.
- When the flag set is fancy, the whole listing is wrapped in a Panel.

Rendering never mutates the flag set or its values.
"""
from collections import defaultdict

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def render(flagset, /):
    """
    Build the usage renderable for flagset.
    """
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "usage-section": "bold #36C5F0",
        "group-label": "bold #FFFFFF",
        "flag-name": "bold #22C55E",
        "metavar": "bold #FFD600",
        "argument-description": "#9CA3AF",
        "default": "italic #737373",
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if flagset.colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not flagset.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    def names(flag):
        spelled = ["-" + key if len(key) == 1 else "--" + key for key in sorted(flag.keys, key=len)]
        return Text(" | ").join(text(name, styler("flag-name")) for name in spelled)

    renders = [Text.assemble(
        text("usage:", styler("usage-label")),
        " ",
        text(flagset.name, styler("program-name")),
        " ",
        text("[flags] [args ...]" if len(flagset) else "[args ...]", styler("usage-section")),
    )]

    if len(flagset):
        table = Table(box=None, show_header=False, show_edge=False, pad_edge=False, padding=(0, 2))
        table.add_column("names", no_wrap=True)
        table.add_column("description")
        for flag in flagset:
            signature = names(flag)
            if metavar := flag.value.metavar:
                signature = Text.assemble(signature, " ", text(metavar, styler("metavar")))
            description = text(flag.usage, styler("argument-description"))
            if flag.default is not None:
                default = text("(default: %r)" % flag.default, styler("default"))
                description = Text.assemble(description, " ", default) if flag.usage else default
            table.add_row(Text.assemble("  ", signature), description)
        renders.extend((Text(""), text("flags:", styler("group-label")), table))

    if flagset.fancy:
        return Panel(Group(*renders), title=text(flagset.name, styler("panel-title")), title_align="left")
    return Group(*renders)


__all__ = (
    "render",
)
