""" Provides a logging formatter that understands Cleo style tags in log messages. """

from __future__ import annotations

import logging

from cleo.formatters.formatter import Formatter  # type: ignore[import]

from aic.util.cleo import add_style


def get_default_formatter(decorated: bool) -> Formatter:
    formatter = Formatter(decorated)
    add_style(formatter, "subj", "blue")
    add_style(formatter, "obj", "yellow")
    add_style(formatter, "val", "cyan")
    return formatter


class TerminalColorFormatter(logging.Formatter):
    """A formatter that converts style tags such as `<subj>...</subj>` in log messages to ANSI terminal colors, or
    removes them if the formatter is not *decorated*."""

    def __init__(self, fmt: str, decorated: bool = True) -> None:
        super().__init__(fmt)
        self.styles = get_default_formatter(decorated)

    def format(self, record: logging.LogRecord) -> str:
        return self.styles.format(super().format(record))

    @classmethod
    def install(cls, fmt: str) -> None:
        """Install the formatter on all stream handlers of the root logger. Handlers attached to a TTY get a
        decorated formatter, all others get one that strips the style tags."""

        for handler in logging.root.handlers:
            if isinstance(handler, logging.StreamHandler):
                isatty = getattr(handler.stream, "isatty", None)
                handler.setFormatter(cls(fmt, bool(isatty and isatty())))
