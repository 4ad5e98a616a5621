"""Tests for last-write-wins conflict resolution."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from hypothesis import given
from hypothesis import strategies as st

from grocery_api.sync.conflict import Decision, incoming_wins, resolve


@dataclass
class Stamp:
    updated_at: datetime | None


timestamps = st.datetimes(
    min_value=datetime(2000, 1, 1),
    max_value=datetime(2100, 1, 1),
)
optional_timestamps = st.none() | timestamps


class TestResolve:
    def test_create_when_nothing_stored(self) -> None:
        assert resolve(None, Stamp(datetime(2024, 1, 1))) is Decision.CREATE

    def test_create_when_nothing_stored_and_no_client_timestamp(self) -> None:
        assert resolve(None, Stamp(None)) is Decision.CREATE

    def test_newer_incoming_overwrites(self) -> None:
        stored = Stamp(datetime(2024, 1, 1, 10))
        assert resolve(stored, Stamp(datetime(2024, 1, 1, 11))) is Decision.OVERWRITE

    def test_older_incoming_keeps_stored(self) -> None:
        stored = Stamp(datetime(2024, 1, 1, 10))
        assert resolve(stored, Stamp(datetime(2024, 1, 1, 9))) is Decision.KEEP_STORED

    def test_tie_keeps_stored(self) -> None:
        stored = Stamp(datetime(2024, 1, 1, 10))
        assert resolve(stored, Stamp(datetime(2024, 1, 1, 10))) is Decision.KEEP_STORED

    def test_missing_client_timestamp_keeps_stored(self) -> None:
        assert resolve(Stamp(datetime(2024, 1, 1)), Stamp(None)) is Decision.KEEP_STORED

    def test_missing_stored_timestamp_is_overwritten(self) -> None:
        assert resolve(Stamp(None), Stamp(datetime(2024, 1, 1))) is Decision.OVERWRITE

    def test_offset_timestamps_compare_in_utc(self) -> None:
        stored = Stamp(datetime(2024, 1, 1, 10))
        # 11:30+02:00 is 09:30 UTC
        incoming = Stamp(datetime(2024, 1, 1, 11, 30, tzinfo=timezone(timedelta(hours=2))))
        assert resolve(stored, incoming) is Decision.KEEP_STORED


class TestResolveProperties:
    @given(stored=optional_timestamps, incoming=optional_timestamps)
    def test_deterministic(self, stored, incoming) -> None:
        assert resolve(Stamp(stored), Stamp(incoming)) == resolve(Stamp(stored), Stamp(incoming))

    @given(stored=timestamps, incoming=timestamps)
    def test_overwrite_iff_strictly_newer(self, stored, incoming) -> None:
        decision = resolve(Stamp(stored), Stamp(incoming))
        if incoming > stored:
            assert decision is Decision.OVERWRITE
        else:
            assert decision is Decision.KEEP_STORED

    @given(stored=optional_timestamps)
    def test_absent_client_timestamp_never_wins(self, stored) -> None:
        assert not incoming_wins(stored, None)

    @given(a=timestamps, b=timestamps)
    def test_at_most_one_side_wins(self, a, b) -> None:
        assert not (incoming_wins(a, b) and incoming_wins(b, a))
