""" The `aic <source>` commands that show the changelog of a single source. """

from __future__ import annotations

import io
import logging

from aic.application import Application, Command, argument, option
from aic.changelog import EntryNotFoundError, select_entry
from aic.github import FetchError
from aic.plugins import ApplicationPlugin
from aic.render import dump_json, render_markdown, render_plain_text
from aic.sources import Source
from aic.util.cleo import write_raw

logger = logging.getLogger(__name__)


class ShowCommand(Command):
    """Show a release from the changelog of a source.

    Without arguments, the newest release is shown. Pass a version number to show
    a specific release, or use <opt>--list, -l</opt> to list all versions.

    <b>Example:</b>

      <fg=yellow>$</fg> aic codex --json
      <fg=yellow>$</fg> aic gemini 0.21.0
    """

    arguments = [
        argument("version", "The version to show. Defaults to the newest release.", optional=True),
    ]
    options = [
        option("--json", "-j", description="Output the release as JSON."),
        option("--markdown", "-m", description="Output the release as Markdown."),
        option("--list", "-l", description="List all versions, newest first."),
    ]

    def __init__(self, source: Source) -> None:
        self.name = source.name
        self.description = f"Show the changelog of {source.display_name} ({source.vendor})."
        super().__init__()
        self.source = source

    def handle(self) -> int:
        if self.option("json") and self.option("markdown"):
            self.line_error("error: <opt>--json, -j</opt> is incompatible with <opt>--markdown, -m</opt>", "error")
            return 1

        logger.info("Fetching changelog of <subj>%s</subj>", self.source.display_name)
        try:
            entries = self.source.fetch()
        except FetchError as exc:
            self.line_error(f"error: fetching changelog failed: {exc}", "error")
            return 1

        if not entries:
            self.line_error("error: No changelog entries found", "error")
            return 1

        if self.option("list"):
            write_raw(self.io, "".join(entry.version + "\n" for entry in entries))
            return 0

        try:
            entry = select_entry(entries, self.argument("version"))
        except EntryNotFoundError as exc:
            self.line_error(f"error: {exc}", "error")
            return 1

        buffer = io.StringIO()
        if self.option("json"):
            buffer.write(dump_json(entry) + "\n")
        elif self.option("markdown"):
            render_markdown(entry, buffer)
        else:
            render_plain_text(self.source.display_name, entry, buffer, color=self.io.output.is_decorated())
        write_raw(self.io, buffer.getvalue())
        return 0


class ShowCommandPlugin(ApplicationPlugin[None]):
    """Registers one #ShowCommand per known source."""

    def load_configuration(self, app: Application) -> None:
        return None

    def activate(self, app: Application, config: None) -> None:
        for source in app.sources.values():
            app.cleo.add(ShowCommand(source))
