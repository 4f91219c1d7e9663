from __future__ import annotations

from cleo.commands.help_command import HelpCommand as _HelpCommand  # type: ignore[import]
from cleo.commands.list_command import ListCommand  # type: ignore[import]
from cleo.formatters.formatter import Formatter  # type: ignore[import]
from cleo.formatters.style import Style  # type: ignore[import]
from cleo.io.io import IO, OutputType  # type: ignore[import]


def add_style(
    io: IO | Formatter,
    name: str,
    foreground: str | None = None,
    background: str | None = None,
    options: list[str] | None = None,
) -> None:
    """
    Add a style to a Cleo IO or Formatter instance.
    """

    style = Style(foreground, background, options)
    if isinstance(io, IO):
        io.output.formatter.set_style(name, style)
        io.error_output.formatter.set_style(name, style)
    elif isinstance(io, Formatter):
        io.set_style(name, style)
    else:
        raise TypeError(f"expected IO|Formatter, got {type(io).__name__}")


def write_raw(io: IO, text: str) -> None:
    """
    Write *text* to the standard output without interpreting style tags. Changelog text regularly contains
    HTML-like tags that Cleo would otherwise consume.
    """

    io.output.write(text, type=OutputType.RAW)


class HelpCommand(_HelpCommand, ListCommand):
    arguments = ListCommand.arguments

    def handle(self) -> int:
        self.io.input._arguments["namespace"] = None
        if not self._command:
            return ListCommand.handle(self)
        return _HelpCommand.handle(self)
