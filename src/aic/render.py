""" Renders changelog entries as JSON, Markdown or plain text. """

from __future__ import annotations

import json
import typing as t

import databind.json
from databind.core.settings import SerializeDefaults
from termcolor import colored

from aic.changelog import ChangelogEntry

DATE_FORMAT = "%Y-%m-%d"


def dump_json(entries: ChangelogEntry | list[ChangelogEntry]) -> str:
    """Serializes a single entry or a list of entries to JSON. Fields that hold their default value are omitted."""

    type_: t.Any = list[ChangelogEntry] if isinstance(entries, list) else ChangelogEntry
    data = databind.json.dump(entries, type_, settings=[SerializeDefaults(False)])
    return json.dumps(data, indent=2)


def render_markdown(entry: ChangelogEntry, fp: t.TextIO) -> None:
    if entry.released_at is not None:
        fp.write(f"## {entry.version} ({entry.released_at.strftime(DATE_FORMAT)})\n\n")
    else:
        fp.write(f"## {entry.version}\n\n")

    for section in entry.sections:
        fp.write(f"### {section.name}\n\n")
        for change in section.changes:
            fp.write(f"- {change}\n")
        fp.write("\n")

    for change in entry.changes:
        fp.write(f"- {change}\n")


def render_plain_text(display_name: str, entry: ChangelogEntry, fp: t.TextIO, color: bool = False) -> None:
    """Renders an entry for reading in the terminal. With *color* enabled, the output is decorated with ANSI escape
    sequences."""

    def _style(text: str, *attrs: str, fg: str | None = None) -> str:
        return colored(text, fg, attrs=list(attrs), force_color=True) if color else text

    title = f"{display_name} {entry.version}"
    if entry.released_at is not None:
        title += f" ({entry.released_at.strftime(DATE_FORMAT)})"
    fp.write(_style(title, "bold") + "\n")
    fp.write("-" * 40 + "\n")

    for section in entry.sections:
        fp.write("\n" + _style(f"[{section.name}]", fg="cyan") + "\n")
        for change in section.changes:
            fp.write(f"  * {change}\n")

    if entry.sections and entry.changes:
        fp.write("\n")
    for change in entry.changes:
        fp.write(f"  * {change}\n")
