""" With the application object we manage the CLI commands, the user configuration and the known changelog
sources. """

from __future__ import annotations

import functools
import logging
import textwrap
import typing as t

from cleo.application import Application as BaseCleoApplication  # type: ignore[import]
from cleo.commands.command import Command as _BaseCommand  # type: ignore[import]
from cleo.helpers import argument, option  # type: ignore[import]
from cleo.io.io import IO  # type: ignore[import]

from aic import __version__

if t.TYPE_CHECKING:
    from aic.config import AicConfig
    from aic.sources import Source

__all__ = ["Command", "argument", "option", "IO", "Application"]
logger = logging.getLogger(__name__)


class Command(_BaseCommand):
    help: str
    description: str

    def __init_subclass__(cls) -> None:
        super().__init_subclass__()
        if not cls.help:
            first_line, remainder = (cls.__doc__ or "").partition("\n")[::2]
            cls.help = (first_line.strip() + "\n" + textwrap.dedent(remainder)).strip()
        cls.description = cls.description or (cls.help.strip().splitlines()[0] if cls.help else None) or ""


class CleoApplication(BaseCleoApplication):
    from cleo.formatters.style import Style  # type: ignore[import]
    from cleo.io.inputs.input import Input  # type: ignore[import]
    from cleo.io.outputs.output import Output  # type: ignore[import]

    _styles: dict[str, Style]

    def __init__(self, init: t.Callable[[IO], t.Any], name: str = "console", version: str = "") -> None:
        super().__init__(name, version)
        self._init_callback = init
        self._styles = {}

        self._initialized = True
        from aic.util.cleo import HelpCommand

        self.add(HelpCommand())
        self._default_command = "help"

        self.add_style("code", "dark_gray")
        self.add_style("warning", "magenta")
        self.add_style("u", options=["underline"])
        self.add_style("i", options=["italic"])
        self.add_style("s", "yellow")
        self.add_style("opt", "cyan", options=["italic"])

    def add_style(self, name, fg=None, bg=None, options=None):
        self._styles[name] = self.Style(fg, bg, options)

    def create_io(
        self, input: Input | None = None, output: Output | None = None, error_output: Output | None = None
    ) -> IO:
        io = super().create_io(input, output, error_output)
        for style_name, style in self._styles.items():
            io.output.formatter.set_style(style_name, style)
            io.error_output.formatter.set_style(style_name, style)
        return io

    def _configure_io(self, io: IO) -> None:
        from aic.util.logging import TerminalColorFormatter

        fmt = "<fg=dark_gray>%(message)s</fg>"
        if io.input.has_parameter_option("-vvv"):
            fmt = "<fg=dark_gray>%(asctime)s | %(levelname)s | %(name)s | %(message)s</fg>"
            level = logging.DEBUG
        elif io.input.has_parameter_option("-vv"):
            level = logging.DEBUG
        elif io.input.has_parameter_option("-v"):
            level = logging.INFO
        elif io.input.has_parameter_option("-q"):
            level = logging.ERROR
        else:
            level = logging.WARNING

        logging.basicConfig(level=level)
        TerminalColorFormatter.install(fmt)

        super()._configure_io(io)
        self._init_callback(io)


class Application:
    """The application object is the main hub for command-line interactions. It provides the #cleo command-line
    application that #ApplicationPlugin#s register commands to, the user configuration and the sources that
    commands can fetch changelogs from."""

    #: The cleo application to which new commands can be registered via #ApplicationPlugin#s.
    cleo: CleoApplication

    def __init__(
        self,
        config: AicConfig | None = None,
        sources: t.Mapping[str, Source] | None = None,
        name: str = "aic",
        version: str = __version__,
    ) -> None:
        self._config = config
        self._sources = sources
        self._plugins_loaded = False
        self.cleo = CleoApplication(self._cleo_init, name, version)

    @functools.cached_property
    def config(self) -> AicConfig:
        """The user configuration, loaded on first access unless it was passed to the constructor."""

        from aic.config import load_config

        return self._config if self._config is not None else load_config()

    @functools.cached_property
    def sources(self) -> t.Mapping[str, Source]:
        """The known changelog sources keyed by name. Unless sources were passed to the constructor, these are
        the builtin sources, fetched with a GitHub client set up from the user configuration."""

        from aic.github import GithubClient
        from aic.sources import get_sources

        if self._sources is not None:
            return self._sources
        return get_sources(GithubClient.from_config(self.config))

    def load_plugins(self) -> None:
        """Loads all application plugins (see #ApplicationPlugin) and activates them.

        All plugins available in the `aic.plugins.application` entry point group are loaded, except for those
        listed in the `disable` option of the user configuration."""

        from aic.plugins import ApplicationPlugin
        from aic.util.plugins import iter_entrypoints

        assert not self._plugins_loaded
        self._plugins_loaded = True

        disable = self.config.disable or []

        logger.debug("Loading application plugins")

        for plugin_name, loader in iter_entrypoints(ApplicationPlugin):  # type: ignore[type-abstract]
            if plugin_name in disable:
                continue
            try:
                plugin = loader()()
            except Exception:
                logger.exception("Could not load plugin <subj>%s</subj> due to an exception", plugin_name)
            else:
                plugin_config = plugin.load_configuration(self)
                plugin.activate(self, plugin_config)

    def _cleo_init(self, io: IO) -> None:
        from aic.config import ConfigError

        try:
            self.config
        except ConfigError as exc:
            io.write_error_line(f"<error>error: {exc}</error>")
            raise SystemExit(1)
        self.load_plugins()

    def run(self) -> None:
        """Loads and activates application plugins and then invokes the CLI."""

        self.cleo.run()
