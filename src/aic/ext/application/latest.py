""" The `aic latest` command. """

from __future__ import annotations

import datetime
import io

from aic.aggregate import collect_recent_releases
from aic.application import Application, Command, option
from aic.plugins import ApplicationPlugin
from aic.render import dump_json, render_plain_text
from aic.util.cleo import write_raw


class LatestCommand(Command):
    """Show the releases of all sources that were published recently.

    Every source is queried in parallel. Sources that cannot be fetched are
    reported as a warning and skipped. Only sources that provide a release
    date are considered.
    """

    name = "latest"
    options = [
        option("--json", "-j", description="Output the releases as a JSON list."),
        option(
            "--hours",
            None,
            description="The time window in hours. Defaults to the <code>recent-hours</code> configuration (24).",
            flag=False,
        ),
    ]

    def __init__(self, app: Application) -> None:
        super().__init__()
        self.app = app

    def handle(self) -> int:
        hours_option: str | None = self.option("hours")
        try:
            hours = int(hours_option) if hours_option is not None else self.app.config.recent_hours
        except ValueError:
            self.line_error(f"error: <opt>--hours</opt> must be an integer, got <code>{hours_option}</code>", "error")
            return 1

        since = datetime.datetime.now(datetime.timezone.utc) - datetime.timedelta(hours=hours)
        result = collect_recent_releases(self.app.sources.values(), since)

        for failure in result.failures:
            self.line_error(f"warning: Failed to fetch {failure.source.display_name}: {failure.error}", "warning")

        if not result.entries:
            self.line(f"No releases in the last {hours} hours.")
            return 0

        buffer = io.StringIO()
        if self.option("json"):
            buffer.write(dump_json(result.entries) + "\n")
        else:
            for index, entry in enumerate(result.entries):
                if index > 0:
                    buffer.write("\n")
                render_plain_text(entry.source or "", entry, buffer, color=self.io.output.is_decorated())
        write_raw(self.io, buffer.getvalue())
        return 0


class LatestCommandPlugin(ApplicationPlugin[None]):
    def load_configuration(self, app: Application) -> None:
        return None

    def activate(self, app: Application, config: None) -> None:
        app.cleo.add(LatestCommand(app))
