""" The normalized changelog model that all sources are parsed into, and selection of a single entry from it. """

from __future__ import annotations

import dataclasses
import datetime
import typing as t


class EntryNotFoundError(LookupError):
    """Raised when no changelog entry can be selected."""


@dataclasses.dataclass(frozen=True)
class Section:
    """A named group of changes inside a #ChangelogEntry, e.g. "Bug Fixes"."""

    name: str
    changes: list[str] = dataclasses.field(default_factory=list)

    __hash__ = None  # type: ignore[assignment]


@dataclasses.dataclass(frozen=True)
class ChangelogEntry:
    """Represents the changes of one released version."""

    #: The version string with known tag prefixes removed.
    version: str

    #: The release date in UTC, if the source format provides one.
    released_at: datetime.datetime | None = None

    #: The display name of the source. Only set for entries collected across sources.
    source: str | None = None

    #: Named groups of changes in the order they appear in the source.
    sections: list[Section] = dataclasses.field(default_factory=list)

    #: Changes that are not part of any section.
    changes: list[str] = dataclasses.field(default_factory=list)

    __hash__ = None  # type: ignore[assignment]


def select_entry(entries: t.Sequence[ChangelogEntry], version: str | None = None) -> ChangelogEntry:
    """Returns the entry for the given *version*, or the first (newest) entry if no version is specified.

    :raise EntryNotFoundError: If *entries* is empty or no entry matches *version* exactly.
    """

    if not entries:
        raise EntryNotFoundError("No changelog entries found")
    if version is None:
        return entries[0]
    for entry in entries:
        if entry.version == version:
            return entry
    raise EntryNotFoundError(f"Version {version} not found")
