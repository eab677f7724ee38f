"""Tests for slot time normalization."""

from datetime import date, datetime, timedelta

import pytest

from coachbook.models.slots import SingleSlotDraft, SlotStatus
from coachbook.rules.time_normalizer import normalize, split_hourly, truncate_to_hour

DAY = date(2025, 3, 10)


class TestNormalize:
    """Tests for normalize()."""

    def test_same_start_and_end(self):
        """09:15-09:15 becomes 09:00-10:00."""
        start, end = normalize(DAY, datetime(2025, 3, 10, 9, 15), datetime(2025, 3, 10, 9, 15))

        assert start == datetime(2025, 3, 10, 9, 0)
        assert end == datetime(2025, 3, 10, 10, 0)

    def test_longer_block_is_kept(self):
        start, end = normalize(
            DAY, datetime(2025, 3, 10, 9, 40), datetime(2025, 3, 10, 12, 59, 30)
        )

        assert start == datetime(2025, 3, 10, 9)
        assert end == datetime(2025, 3, 10, 12)

    def test_end_before_start_is_clamped(self):
        start, end = normalize(DAY, datetime(2025, 3, 10, 14), datetime(2025, 3, 10, 8))

        assert end == start + timedelta(hours=1)

    def test_anchor_to_day_moves_date(self):
        start, end = normalize(
            DAY,
            datetime(2025, 1, 2, 9, 30),
            datetime(2025, 1, 2, 11, 5),
            anchor_to_day=True,
        )

        assert start == datetime(2025, 3, 10, 9)
        assert end == datetime(2025, 3, 10, 11)

    def test_without_anchor_date_is_untouched(self):
        start, _ = normalize(DAY, datetime(2025, 1, 2, 9, 30), datetime(2025, 1, 2, 11))

        assert start.date() == date(2025, 1, 2)

    @pytest.mark.parametrize(
        "start,end",
        [
            (datetime(2025, 3, 10, 9, 15), datetime(2025, 3, 10, 9, 15)),
            (datetime(2025, 3, 10, 0, 1, 59), datetime(2025, 3, 10, 23, 59, 59)),
            (datetime(2025, 3, 10, 23, 30), datetime(2025, 3, 10, 23, 45)),
            (datetime(2025, 3, 10, 17), datetime(2025, 3, 10, 6, 30)),
        ],
    )
    def test_properties(self, start, end):
        """Idempotent, whole hours, at least one hour long."""
        once = normalize(DAY, start, end)
        twice = normalize(DAY, *once)

        assert twice == once
        assert once[1] - once[0] >= timedelta(hours=1)
        for value in once:
            assert (value.minute, value.second, value.microsecond) == (0, 0, 0)

    def test_truncate_to_hour(self):
        assert truncate_to_hour(datetime(2025, 3, 10, 9, 59, 59, 999)) == datetime(
            2025, 3, 10, 9
        )


class TestSingleSlotDraft:
    """Tests for editing a SingleSlotDraft."""

    def test_from_default(self):
        draft = SingleSlotDraft.from_default(DAY, 9)

        assert draft.start == datetime(2025, 3, 10, 9)
        assert draft.end == datetime(2025, 3, 10, 10)
        assert draft.status == SlotStatus.OPEN

    def test_moving_start_pulls_end_forward(self):
        draft = SingleSlotDraft.from_default(DAY, 9)
        draft.set_start(datetime(2025, 3, 10, 11, 20))

        assert draft.start == datetime(2025, 3, 10, 11)
        assert draft.end == datetime(2025, 3, 10, 12)

    def test_end_below_minimum_is_clamped(self):
        draft = SingleSlotDraft.from_default(DAY, 9)
        draft.set_end(datetime(2025, 3, 10, 9, 30))

        assert draft.end == datetime(2025, 3, 10, 10)

    def test_extending_end(self):
        draft = SingleSlotDraft.from_default(DAY, 9)
        draft.set_end(datetime(2025, 3, 10, 12, 10))

        assert draft.end == datetime(2025, 3, 10, 12)
        assert draft.duration == timedelta(hours=3)

    def test_set_day_keeps_times(self):
        draft = SingleSlotDraft.from_default(DAY, 9)
        draft.set_end(datetime(2025, 3, 10, 11))
        draft.set_day(date(2025, 3, 12))

        assert draft.start == datetime(2025, 3, 12, 9)
        assert draft.end == datetime(2025, 3, 12, 11)

    def test_late_start_rolls_end_past_midnight(self):
        draft = SingleSlotDraft.from_default(DAY, 23)

        assert draft.end == datetime(2025, 3, 11, 0)


class TestSplitHourly:
    """Tests for split_hourly()."""

    def test_splits_whole_hours(self):
        pieces = split_hourly(datetime(2025, 3, 10, 9), datetime(2025, 3, 10, 12))

        assert [p[0].hour for p in pieces] == [9, 10, 11]
        assert all(end - start == timedelta(hours=1) for start, end in pieces)

    def test_open_drops_partial_hour(self):
        pieces = split_hourly(datetime(2025, 3, 10, 9), datetime(2025, 3, 10, 10, 30))

        assert len(pieces) == 1

    def test_unavailable_keeps_partial_hour(self):
        pieces = split_hourly(
            datetime(2025, 3, 10, 9),
            datetime(2025, 3, 10, 10, 30),
            SlotStatus.UNAVAILABLE,
        )

        assert pieces[-1] == (datetime(2025, 3, 10, 10), datetime(2025, 3, 10, 10, 30))
