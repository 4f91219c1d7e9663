""" Collects the most recent release of every source in parallel. """

from __future__ import annotations

import concurrent.futures
import dataclasses
import datetime
import logging
import typing as t

from aic.changelog import ChangelogEntry

if t.TYPE_CHECKING:
    from aic.sources import Source

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class SourceFailure:
    source: Source
    error: Exception


@dataclasses.dataclass
class RecentReleases:
    #: The newest entry of each source that was released after the cutoff, newest first. Every entry carries
    #: the display name of its source.
    entries: list[ChangelogEntry] = dataclasses.field(default_factory=list)

    #: Sources that could not be fetched.
    failures: list[SourceFailure] = dataclasses.field(default_factory=list)


def _fetch_latest(source: Source) -> ChangelogEntry | None:
    entries = source.fetch()
    if not entries:
        return None
    return dataclasses.replace(entries[0], source=source.display_name)


def collect_recent_releases(
    sources: t.Iterable[Source], since: datetime.datetime, max_workers: int | None = None
) -> RecentReleases:
    """Fetches all *sources* concurrently and returns their newest entries if they were released after *since*.

    A source that fails is recorded in #RecentReleases.failures and does not affect the other sources. Entries
    without a release date are never considered recent. This function returns only after every source is done.
    """

    result = RecentReleases()
    sources = list(sources)
    if not sources:
        return result

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers or len(sources)) as executor:
        futures = {executor.submit(_fetch_latest, source): source for source in sources}
        for future in concurrent.futures.as_completed(futures):
            source = futures[future]
            try:
                entry = future.result()
            except Exception as exc:
                logger.debug("Fetching <subj>%s</subj> failed", source.name, exc_info=True)
                result.failures.append(SourceFailure(source, exc))
                continue
            if entry is None:
                logger.debug("Source <subj>%s</subj> has no entries", source.name)
            elif entry.released_at is not None and entry.released_at > since:
                result.entries.append(entry)

    result.entries.sort(key=lambda entry: t.cast(datetime.datetime, entry.released_at), reverse=True)
    return result
