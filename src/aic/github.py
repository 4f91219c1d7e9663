""" A minimal client for the parts of GitHub that serve changelogs: raw files, the Releases API and the commit
history of a file. """

from __future__ import annotations

import datetime
import logging
import typing as t

import databind.json
import requests
from databind.core.converter import ConversionError
from databind.core.settings import ExtraKeys

from aic.parser import ReleaseRecord, parse_timestamp

if t.TYPE_CHECKING:
    from aic.config import AicConfig

logger = logging.getLogger(__name__)

USER_AGENT = "aic-changelog"


class FetchError(Exception):
    """Raised when content could not be retrieved from GitHub or could not be decoded."""


class GithubClient:
    API_URL = "https://api.github.com"
    RAW_URL = "https://raw.githubusercontent.com"

    def __init__(
        self,
        api_url: str = API_URL,
        raw_url: str = RAW_URL,
        token: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        :param api_url: The URL of the GitHub API, e.g. https://api.github.com.
        :param raw_url: The URL that serves raw file contents, e.g. https://raw.githubusercontent.com.
        :param token: An optional token for the GitHub API. Anonymous requests are subject to a low rate limit.
        :param timeout: Timeout for every request in seconds. `None` waits indefinitely.
        """

        self._api_url = api_url.rstrip("/")
        self._raw_url = raw_url.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "User-Agent": USER_AGENT,
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_config(cls, config: AicConfig) -> GithubClient:
        return cls(config.github_api_url, config.github_raw_url, config.github_token, config.timeout)

    def get_raw_file(self, owner: str, repo: str, path: str, ref: str = "main") -> str:
        """
        Fetches the contents of a file in a repository as text.
        """

        return self._get(f"{self._raw_url}/{owner}/{repo}/{ref}/{path}").text

    def get_releases(self, owner: str, repo: str) -> list[ReleaseRecord]:
        """
        Fetches the releases of a repository, newest first.
        """

        response = self._get(f"{self._api_url}/repos/{owner}/{repo}/releases")
        try:
            return databind.json.load(response.json(), list[ReleaseRecord], settings=[ExtraKeys(True)])
        except (ValueError, ConversionError) as exc:
            raise FetchError(f"failed to parse releases: {exc}") from exc

    def get_file_last_commit_date(self, owner: str, repo: str, path: str) -> datetime.datetime | None:
        """
        Returns the committer date of the most recent commit that touched *path*, or `None` if the repository
        has no such commit.
        """

        response = self._get(f"{self._api_url}/repos/{owner}/{repo}/commits", params={"path": path, "per_page": 1})
        try:
            commits = response.json()
            return parse_timestamp(commits[0]["commit"]["committer"]["date"]) if commits else None
        except (ValueError, LookupError, TypeError) as exc:
            raise FetchError(f"failed to parse commits: {exc}") from exc

    def _get(self, url: str, **kwargs: t.Any) -> requests.Response:
        logger.debug("GET <val>%s</val>", url)
        try:
            response = self._session.get(url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise FetchError(f"HTTP request failed: {exc}") from exc
        self._raise_for_status(response)
        return response

    def _raise_for_status(self, response: requests.Response) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            logger.debug(
                "Request to '%s' returned status code %d with body: %s",
                response.request.url,
                response.status_code,
                response.text,
            )
            raise FetchError(f"HTTP {response.status_code}: {response.reason}") from exc
