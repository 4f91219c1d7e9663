""" The upstream projects whose changelogs we know how to fetch. """

from __future__ import annotations

import dataclasses
import functools
import logging
import typing as t

from aic.changelog import ChangelogEntry
from aic.github import FetchError, GithubClient
from aic.parser import (
    DATED_VERSION_HEADER,
    UNDATED_VERSION_HEADER,
    entries_from_releases,
    parse_dated_markdown_changelog,
    parse_markdown_changelog,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Source:
    """An upstream project that publishes a changelog."""

    #: The name used on the command-line, e.g. `claude`.
    name: str

    #: The human readable name of the product, e.g. `Claude Code`.
    display_name: str

    #: The organization that publishes the product.
    vendor: str

    #: Retrieves and parses the changelog. Raises #FetchError if the changelog cannot be retrieved.
    fetch: t.Callable[[], list[ChangelogEntry]] = dataclasses.field(compare=False, repr=False)


def fetch_github_releases(client: GithubClient, owner: str, repo: str) -> list[ChangelogEntry]:
    return entries_from_releases(client.get_releases(owner, repo))


def fetch_markdown_changelog(
    client: GithubClient, owner: str, repo: str, path: str, version_pattern: str = UNDATED_VERSION_HEADER
) -> list[ChangelogEntry]:
    """Fetches a changelog file without release dates. The newest entry is dated with the last commit that touched
    the file, if that information is available."""

    entries = parse_markdown_changelog(client.get_raw_file(owner, repo, path), version_pattern)
    if entries:
        try:
            released_at = client.get_file_last_commit_date(owner, repo, path)
        except FetchError as exc:
            logger.debug("Could not determine last commit date of <subj>%s/%s:%s</subj>: %s", owner, repo, path, exc)
            released_at = None
        if released_at is not None:
            entries[0] = dataclasses.replace(entries[0], released_at=released_at)
    return entries


def fetch_dated_markdown_changelog(
    client: GithubClient, owner: str, repo: str, path: str, version_pattern: str = DATED_VERSION_HEADER
) -> list[ChangelogEntry]:
    return parse_dated_markdown_changelog(client.get_raw_file(owner, repo, path), version_pattern)


def get_sources(client: GithubClient) -> dict[str, Source]:
    """Returns the known sources keyed by their name, in the order they should be listed."""

    sources = [
        Source(
            "claude",
            "Claude Code",
            "Anthropic",
            functools.partial(fetch_markdown_changelog, client, "anthropics", "claude-code", "CHANGELOG.md"),
        ),
        Source("codex", "OpenAI Codex", "OpenAI", functools.partial(fetch_github_releases, client, "openai", "codex")),
        Source("opencode", "OpenCode", "SST", functools.partial(fetch_github_releases, client, "sst", "opencode")),
        Source(
            "gemini",
            "Gemini CLI",
            "Google",
            functools.partial(fetch_github_releases, client, "google-gemini", "gemini-cli"),
        ),
        Source(
            "copilot",
            "GitHub Copilot CLI",
            "GitHub",
            functools.partial(fetch_dated_markdown_changelog, client, "github", "copilot-cli", "changelog.md"),
        ),
    ]
    return {source.name: source for source in sources}
