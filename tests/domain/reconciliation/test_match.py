from __future__ import annotations

from arrsync.domain.identity_cache import ScopedIdentityCache
from arrsync.domain.reconciliation import match_remote_record
from arrsync.domain.records import RecordKind
from tests.helpers.servarr import InMemoryIdentityCacheStore, make_desired_record, make_remote_record


def _cache(entries: dict[str, int] | None = None) -> ScopedIdentityCache:
    store = InMemoryIdentityCacheStore(
        {
            ("movies", RecordKind.CUSTOM_FORMAT, key): remote_id
            for key, remote_id in (entries or {}).items()
        }
    )
    return ScopedIdentityCache(store, "movies", RecordKind.CUSTOM_FORMAT)


def test_cached_id_wins_over_name() -> None:
    record = make_desired_record("a1", "x265")
    remotes = [make_remote_record(1, "x265"), make_remote_record(2, "Renamed by user")]

    match = match_remote_record(record, remotes, _cache({"a1": 2}))

    assert match is not None
    assert match.id == 2


def test_falls_back_to_case_insensitive_name_when_cached_id_is_gone() -> None:
    record = make_desired_record("a1", "x265")
    remotes = [make_remote_record(5, "X265")]

    match = match_remote_record(record, remotes, _cache({"a1": 99}))

    assert match is not None
    assert match.id == 5


def test_name_match_can_be_disabled() -> None:
    record = make_desired_record("a1", "x265")

    match = match_remote_record(record, [make_remote_record(5, "x265")], _cache(), match_by_name=False)

    assert match is None


def test_no_match_returns_none() -> None:
    record = make_desired_record("a1", "x265")

    assert match_remote_record(record, [make_remote_record(5, "HDR")], _cache()) is None
