""" The user configuration, read from `~/.config/aic/config.toml`. """

from __future__ import annotations

import dataclasses
import logging
import os
import typing as t
from pathlib import Path

import databind.json
import tomli
from databind.core.converter import ConversionError
from databind.core.settings import Alias, ExtraKeys

from aic.github import GithubClient

CONFIG_FILE = Path.home() / ".config" / "aic" / "config.toml"
logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the configuration file cannot be read."""


@ExtraKeys(True)
@dataclasses.dataclass
class AicConfig:
    #: A token for the GitHub API. Anonymous access is rate limited to 60 requests per hour. When not set, the
    #: `GITHUB_TOKEN` environment variable is used.
    github_token: t.Annotated[str | None, Alias("github-token")] = None

    #: The GitHub API to talk to.
    github_api_url: t.Annotated[str, Alias("github-api-url")] = GithubClient.API_URL

    #: Where raw file contents are served from.
    github_raw_url: t.Annotated[str, Alias("github-raw-url")] = GithubClient.RAW_URL

    #: Timeout for HTTP requests in seconds. By default, requests wait indefinitely.
    timeout: float | None = None

    #: The default time window of the `aic latest` command.
    recent_hours: t.Annotated[int, Alias("recent-hours")] = 24

    #: A list of application plugins to _not_ activate.
    disable: list[str] = dataclasses.field(default_factory=list)


def get_config_file() -> Path:
    return Path(os.environ["AIC_CONFIG"]) if os.environ.get("AIC_CONFIG") else CONFIG_FILE


def load_config(path: Path | None = None) -> AicConfig:
    """Loads the configuration from *path* (defaults to #get_config_file()). A missing file yields the default
    configuration.

    :raise ConfigError: If the file is not valid TOML or contains invalid values.
    """

    path = path or get_config_file()
    data: dict[str, t.Any] = {}
    if path.is_file():
        logger.debug("Reading configuration from <val>%s</val>", path)
        try:
            with path.open("rb") as fp:
                data = tomli.load(fp)
        except tomli.TOMLDecodeError as exc:
            raise ConfigError(f'cannot parse "{path}": {exc}') from exc

    try:
        config = databind.json.load(data, AicConfig, filename=str(path))
    except (ConversionError, TypeError) as exc:
        raise ConfigError(f'invalid configuration in "{path}": {exc}') from exc

    if config.github_token is None:
        config.github_token = os.environ.get("GITHUB_TOKEN") or None
    return config
