import datetime

from aic.changelog import ChangelogEntry, Section
from aic.parser import (
    DATED_VERSION_HEADER,
    UNDATED_VERSION_HEADER,
    ReleaseRecord,
    entries_from_releases,
    iter_version_spans,
    normalize_version,
    parse_changes,
    parse_dated_markdown_changelog,
    parse_markdown_changelog,
    parse_release_body,
    parse_timestamp,
)

UTC = datetime.timezone.utc

GENERATED_RELEASE_NOTES = """\
## What's Changed
### Features
* Add sandbox policy flag by @alice in https://github.com/acme/tool/pull/12
* @bob did a thing
### Bug Fixes
- Fix crash on empty config

## New Contributors
* @carol made their first contribution in https://github.com/acme/tool/pull/13

**Full Changelog**: https://github.com/acme/tool/compare/v1.0.0...v1.1.0
"""

CLAUDE_CHANGELOG = """\
# Changelog

## 1.0.2

- Fixed a crash when resuming sessions
- Added `/doctor` command
  - nested detail
* not a change in this format

## 1.0.1
## 1.0.0

- Initial release
"""


def test__normalize_version__strips_known_prefixes():
    assert normalize_version("v1.2.3") == "1.2.3"
    assert normalize_version("rust-v0.9.0") == "0.9.0"
    assert normalize_version("2.0.0") == "2.0.0"
    assert normalize_version("release-1.0") == "release-1.0"


def test__parse_release_body__generated_release_notes():
    sections, changes = parse_release_body(GENERATED_RELEASE_NOTES)
    assert sections == [
        Section("Features", ["Add sandbox policy flag by @alice in https://github.com/acme/tool/pull/12"]),
        Section("Bug Fixes", ["Fix crash on empty config"]),
    ]
    assert changes == []


def test__parse_release_body__drops_mention_bullets():
    sections, changes = parse_release_body("- @someone did a thing\n## Notes\n* @someone did a thing\n")
    assert sections == []
    assert changes == []


def test__parse_release_body__bullets_before_first_header_are_ungrouped():
    sections, changes = parse_release_body("- first\n* second\n# Fixes\n- third\n")
    assert changes == ["first", "second"]
    assert sections == [Section("Fixes", ["third"])]


def test__parse_release_body__wrapper_header_is_transparent():
    sections, changes = parse_release_body("### Features\n- a\n## What's Changed\n- b\n")
    assert sections == [Section("Features", ["a", "b"])]
    assert changes == []

    sections, changes = parse_release_body("## What's Changed\n- a\n- b\n")
    assert sections == []
    assert changes == ["a", "b"]


def test__parse_release_body__wrapper_header_match_is_exact():
    sections, _ = parse_release_body("## What's changed\n- a\n")
    assert sections == [Section("What's changed", ["a"])]


def test__parse_release_body__nested_header_inside_wrapper_keeps_its_name():
    # The wrapper does not make the headers below it ungrouped.
    sections, changes = parse_release_body("## What's Changed\n### Features\n- a\n")
    assert sections == [Section("Features", ["a"])]
    assert changes == []


def test__parse_release_body__drops_empty_sections():
    sections, _ = parse_release_body("## A\n## B\n- b\n")
    assert sections == [Section("B", ["b"])]

    sections, _ = parse_release_body("## A\n- a\n## B\n## C\n- c\n## D\n")
    assert sections == [Section("A", ["a"]), Section("C", ["c"])]


def test__parse_release_body__repeated_header_names_are_not_merged():
    sections, _ = parse_release_body("## Fixes\n- one\n## Other\n- two\n## Fixes\n- three\n")
    assert [s.name for s in sections] == ["Fixes", "Other", "Fixes"]
    assert sections[2].changes == ["three"]


def test__parse_release_body__ignores_non_matching_lines():
    body = "#### Too deep\n#NoSpace\n-no space\n+ plus\n1. numbered\nSome prose.\n\n  - indented bullet\n"
    sections, changes = parse_release_body(body)
    assert sections == []
    assert changes == ["indented bullet"]


def test__parse_release_body__header_text_is_trimmed():
    sections, _ = parse_release_body("###    Performance   \n- faster\n")
    assert sections == [Section("Performance", ["faster"])]


def test__parse_release_body__handles_crlf_line_endings():
    sections, changes = parse_release_body("- a\r\n## Fixes\r\n- b\r\n")
    assert changes == ["a"]
    assert sections == [Section("Fixes", ["b"])]


def test__parse_release_body__empty_body():
    assert parse_release_body("") == ([], [])


def test__parse_release_body__strips_dash_then_star_marker():
    sections, changes = parse_release_body("- * fix\n- * @bob made a change\n* - kept dash\n- - kept dash too\n")
    assert sections == []
    assert changes == ["fix", "- kept dash", "- kept dash too"]


def test__parse_release_body__splits_on_newlines_only():
    sections, changes = parse_release_body("## Fixes More\n- fix\x0cmore\n- a - b\n")
    assert sections == [Section("Fixes More", ["fix\x0cmore", "a - b"])]
    assert changes == []


def test__parse_release_body__header_requires_ascii_whitespace():
    sections, changes = parse_release_body("##\u3000Features\n- a\n")
    assert sections == []
    assert changes == ["a"]


def test__parse_changes__only_accepts_dash_bullets():
    assert parse_changes("- a\n* b\n   - c  \ntext\n-d\n") == ["a", "c"]


def test__parse_changes__keeps_mention_bullets():
    assert parse_changes("- @someone did a thing\n") == ["@someone did a thing"]


def test__parse_changes__splits_on_newlines_only():
    assert parse_changes("- fix\x0cmore\n- a b\n- c\x85- d\n") == ["fix\x0cmore", "a b", "c\x85- d"]
    assert parse_changes("- * not chained\n") == ["* not chained"]


def test__parse_markdown_changelog__version_digits_are_ascii():
    assert parse_markdown_changelog("## \u0661.\u0662.\u0663\n- a\n") == []
    assert parse_dated_markdown_changelog("## 1.0.0 - \u0662025-01-01\n- a\n") == []


def test__parse_markdown_changelog__splits_at_version_headers():
    assert parse_markdown_changelog(CLAUDE_CHANGELOG, UNDATED_VERSION_HEADER) == [
        ChangelogEntry("1.0.2", changes=["Fixed a crash when resuming sessions", "Added `/doctor` command", "nested detail"]),
        ChangelogEntry("1.0.1"),
        ChangelogEntry("1.0.0", changes=["Initial release"]),
    ]


def test__parse_markdown_changelog__no_headers_gives_no_entries():
    assert parse_markdown_changelog("- a change without a version\n") == []
    assert parse_markdown_changelog("") == []
    assert parse_dated_markdown_changelog("## 1.0.0\n- undated header\n") == []


def test__parse_markdown_changelog__ignores_bullets_before_first_header():
    entries = parse_markdown_changelog("- preamble\n## 2.0.0\n- a\n")
    assert entries == [ChangelogEntry("2.0.0", changes=["a"])]


def test__iter_version_spans__spans_cover_the_document_after_the_first_header():
    spans = list(iter_version_spans(CLAUDE_CHANGELOG, UNDATED_VERSION_HEADER))
    assert len(spans) == 3
    first_match = spans[0][0]
    assert "".join(match.group(0) + span for match, span in spans) == CLAUDE_CHANGELOG[first_match.start() :]


def test__parse_dated_markdown_changelog__parses_dates_as_utc_midnight():
    content = "# Changelog\n\n## 1.5.0 - 2025-03-10\n\n- Added a thing\n* ignored\n\n## 1.4.9 - 2025-02-28\n- Fixed\n"
    entries = parse_dated_markdown_changelog(content, DATED_VERSION_HEADER)
    assert entries == [
        ChangelogEntry("1.5.0", released_at=datetime.datetime(2025, 3, 10, tzinfo=UTC), changes=["Added a thing"]),
        ChangelogEntry("1.4.9", released_at=datetime.datetime(2025, 2, 28, tzinfo=UTC), changes=["Fixed"]),
    ]
    assert entries[0].released_at.time() == datetime.time(0, 0)


def test__parse_dated_markdown_changelog__invalid_date_leaves_release_date_unset():
    entries = parse_dated_markdown_changelog("## 1.5.1 - 2025-13-40\n- a\n")
    assert entries == [ChangelogEntry("1.5.1", changes=["a"])]


def test__parse_timestamp():
    assert parse_timestamp("2025-10-15T18:22:05Z") == datetime.datetime(2025, 10, 15, 18, 22, 5, tzinfo=UTC)
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("yesterday") is None


def test__entries_from_releases():
    releases = [
        ReleaseRecord(tag_name="rust-v0.46.0", body="## Highlights\n- Faster startup\n", published_at="2025-10-15T18:22:05Z"),
        ReleaseRecord(tag_name="v0.45.0", body=None, published_at=None),
    ]
    assert entries_from_releases(releases) == [
        ChangelogEntry(
            "0.46.0",
            released_at=datetime.datetime(2025, 10, 15, 18, 22, 5, tzinfo=UTC),
            sections=[Section("Highlights", ["Faster startup"])],
        ),
        ChangelogEntry("0.45.0"),
    ]
