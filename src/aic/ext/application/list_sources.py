from __future__ import annotations

from aic.application import Application, Command
from aic.plugins import ApplicationPlugin
from aic.util.cleo import write_raw


class ListSourcesCommand(Command, ApplicationPlugin[None]):
    """List the sources that changelogs can be fetched from."""

    app: Application
    name = "list-sources"

    def load_configuration(self, app: Application) -> None:
        return None

    def activate(self, app: Application, config: None) -> None:
        self.app = app
        app.cleo.add(self)

    def handle(self) -> int:
        write_raw(self.io, "".join(f"  {name}\t{source.display_name}\n" for name, source in self.app.sources.items()))
        return 0
