""" Parsers that reduce the raw changelog formats published by upstream projects to #ChangelogEntry objects.

Two strategies are implemented:

* The *flat* parser splits a whole Markdown changelog document at its version headers and collects the `- `
  bullets below each header (see #parse_markdown_changelog() and #parse_dated_markdown_changelog()).
* The *release body* parser turns the free-form Markdown body of a single GitHub release into named sections
  and ungrouped changes (see #parse_release_body()).

None of the functions in this module raise on unexpected content. Input that does not look like a changelog
simply produces fewer (or empty) results.
"""

from __future__ import annotations

import dataclasses
import datetime
import re
import typing as t

from aic.changelog import ChangelogEntry, Section

#: Prefixes that are removed from release tags, each tried once and in this order.
VERSION_PREFIXES = ("v", "rust-v")

#: Version header of a changelog without release dates, e.g. `## 1.0.58`.
UNDATED_VERSION_HEADER = r"^## (\d+\.\d+\.\d+)\s*$"

#: Version header of a changelog with release dates, e.g. `## 0.0.339 - 2025-10-10`.
DATED_VERSION_HEADER = r"^## ([\d.]+) - (\d{4}-\d{2}-\d{2})\s*$"

#: The header that GitHub wraps generated release notes in. It does not name a section.
WRAPPER_HEADER = "What's Changed"

RELEASE_BODY_BULLETS = ("- ", "* ")
CHANGELOG_BULLETS = ("- ",)

_HEADER_RE = re.compile(r"^#{1,3}\s+(.+)$", re.ASCII)


@dataclasses.dataclass
class ReleaseRecord:
    """A release as returned by the GitHub Releases API. Only the fields we need are declared."""

    tag_name: str
    name: str | None = None
    body: str | None = None
    published_at: str | None = None


def normalize_version(tag: str) -> str:
    """Strips the known #VERSION_PREFIXES from a release tag.

    >>> normalize_version("v1.2.3"), normalize_version("rust-v0.9.0"), normalize_version("2.0.0")
    ('1.2.3', '0.9.0', '2.0.0')
    """

    for prefix in VERSION_PREFIXES:
        if tag.startswith(prefix):
            tag = tag[len(prefix) :]
    return tag


def parse_date(value: str) -> datetime.datetime | None:
    """Parses a `YYYY-MM-DD` date as midnight UTC. Returns `None` if the value is not a valid date."""

    try:
        return datetime.datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=datetime.timezone.utc)
    except ValueError:
        return None


def parse_timestamp(value: str | None) -> datetime.datetime | None:
    """Parses an RFC 3339 timestamp such as `2025-03-10T17:02:11Z`. Returns `None` for missing or bad values."""

    if not value:
        return None
    try:
        timestamp = datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=datetime.timezone.utc)
    return timestamp


def strip_bullet(line: str, markers: t.Sequence[str], chained: bool = False) -> str | None:
    """Returns the text after the bullet marker if the stripped *line* starts with one of *markers*. With *chained*,
    every marker is removed in turn, so `- * fix` gives `fix` for the markers `("- ", "* ")`."""

    line = line.strip()
    if not line.startswith(tuple(markers)):
        return None
    for marker in markers:
        if line.startswith(marker):
            line = line[len(marker) :]
            if not chained:
                break
    return line


def parse_changes(content: str) -> list[str]:
    """Collects all `- ` bullets in *content*, in document order."""

    changes = []
    for line in content.split("\n"):
        change = strip_bullet(line, CHANGELOG_BULLETS)
        if change is not None:
            changes.append(change)
    return changes


def parse_release_body(body: str) -> tuple[list[Section], list[str]]:
    """Parses the Markdown body of a single release into sections and ungrouped changes.

    A header (`#` to `###`) opens a new section, and `- ` or `* ` bullets are added to the section that is currently
    open, or to the ungrouped changes if no section has been opened yet. Sections that end up without changes are
    dropped. The #WRAPPER_HEADER is ignored entirely: it neither opens nor closes a section. Bullets that are empty
    or mention a user (starting with `@`) are skipped.
    """

    sections: list[Section] = []
    ungrouped: list[str] = []
    current: Section | None = None

    for line in body.split("\n"):
        line = line.strip()

        if match := _HEADER_RE.match(line):
            header = match.group(1).strip()
            if header == WRAPPER_HEADER:
                continue
            if current is not None and current.changes:
                sections.append(current)
            current = Section(header)
            continue

        change = strip_bullet(line, RELEASE_BODY_BULLETS, chained=True)
        if not change or change.startswith("@"):
            continue
        if current is not None:
            current.changes.append(change)
        else:
            ungrouped.append(change)

    if current is not None and current.changes:
        sections.append(current)

    return sections, ungrouped


def iter_version_spans(content: str, version_pattern: str | re.Pattern[str]) -> t.Iterator[tuple[re.Match[str], str]]:
    """Yields every match of *version_pattern* in *content* together with the text that follows it, up to the next
    match or the end of the document. A string pattern is compiled in multi-line mode, with the digit and whitespace
    classes matching ASCII characters only."""

    if isinstance(version_pattern, str):
        version_pattern = re.compile(version_pattern, re.M | re.ASCII)

    matches = list(version_pattern.finditer(content))
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(content)
        yield match, content[match.end() : end]


def parse_markdown_changelog(
    content: str, version_pattern: str | re.Pattern[str] = UNDATED_VERSION_HEADER
) -> list[ChangelogEntry]:
    """Parses a changelog document whose version headers carry no date. The first group of *version_pattern*
    must capture the version. Entries are returned in document order."""

    return [
        ChangelogEntry(version=match.group(1), changes=parse_changes(span))
        for match, span in iter_version_spans(content, version_pattern)
    ]


def parse_dated_markdown_changelog(
    content: str, version_pattern: str | re.Pattern[str] = DATED_VERSION_HEADER
) -> list[ChangelogEntry]:
    """Like #parse_markdown_changelog(), but the second group of *version_pattern* captures a `YYYY-MM-DD` release
    date. A date that does not exist in the calendar leaves the release date unset."""

    return [
        ChangelogEntry(version=match.group(1), released_at=parse_date(match.group(2)), changes=parse_changes(span))
        for match, span in iter_version_spans(content, version_pattern)
    ]


def entries_from_releases(releases: t.Iterable[ReleaseRecord]) -> list[ChangelogEntry]:
    """Converts GitHub release records into changelog entries, keeping the order of the API."""

    entries = []
    for release in releases:
        sections, changes = parse_release_body(release.body or "")
        entries.append(
            ChangelogEntry(
                version=normalize_version(release.tag_name),
                released_at=parse_timestamp(release.published_at),
                sections=sections,
                changes=changes,
            )
        )
    return entries
