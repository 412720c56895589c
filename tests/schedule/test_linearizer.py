"""Tests for the schedule linearizer."""

from hue_scheduler.schedule import ScheduledScene, linearize, split_wrapping
from hue_scheduler.timerange import TimeRange


def s(scene_id: str, start: int, end: int) -> ScheduledScene:
    """Shorthand constructor."""
    return ScheduledScene(scene_id, start, end)


def winner_at(timeline: list[ScheduledScene], minute: int) -> list[str]:
    """All entries covering a minute (should be at most one)."""
    return [entry.scene_id for entry in timeline if entry.contains(minute)]


class TestNoOverlap:
    """Inputs that are already a partition."""

    def test_empty(self):
        assert linearize([]) == []

    def test_single(self):
        assert linearize([s("1", 0, 10)]) == [s("1", 0, 10)]

    def test_unchanged(self):
        schedules = [s("1", 0, 10), s("2", 50, 100), s("3", 100, 200)]
        assert linearize(schedules) == schedules

    def test_input_order_irrelevant(self):
        schedules = [s("3", 100, 200), s("1", 0, 10), s("2", 50, 100)]
        assert linearize(schedules) == [s("1", 0, 10), s("2", 50, 100), s("3", 100, 200)]


class TestOverlap:
    """Narrow, later-starting windows carve into broad ones."""

    def test_overlapping(self):
        assert linearize([s("1", 0, 100), s("2", 25, 75)]) == [
            s("1", 0, 25),
            s("2", 25, 75),
            s("1", 75, 100),
        ]

    def test_partial_overlap(self):
        assert linearize([s("1", 0, 60), s("2", 40, 100)]) == [
            s("1", 0, 40),
            s("2", 40, 100),
        ]

    def test_enclosed_same_identity_merges(self):
        assert linearize([s("1", 0, 100), s("2", 25, 100), s("2", 0, 25)]) == [s("2", 0, 100)]

    def test_overflow(self):
        assert linearize(
            [s("1", 0, 100), s("2", 50, 100), s("3", 70, 120), s("2", 75, 100)]
        ) == [
            s("1", 0, 50),
            s("2", 50, 70),
            s("3", 70, 75),
            s("2", 75, 100),
            s("3", 100, 120),
        ]

    def test_equal_start_later_wins(self):
        assert linearize([s("1", 0, 100), s("2", 0, 50)]) == [
            s("2", 0, 50),
            s("1", 50, 100),
        ]

    def test_broad_window_resumes_after_nested_gap(self):
        """The outer window resumes between two nested ones."""
        assert linearize([s("1", 0, 100), s("2", 25, 75), s("3", 80, 90)]) == [
            s("1", 0, 25),
            s("2", 25, 75),
            s("1", 75, 80),
            s("3", 80, 90),
            s("1", 90, 100),
        ]

    def test_same_identity_overlap_merges(self):
        assert linearize([s("1", 0, 60), s("1", 30, 100)]) == [s("1", 0, 100)]

    def test_zero_width_dropped(self):
        assert linearize([s("1", 50, 50), s("2", 0, 10)]) == [s("2", 0, 10)]

    def test_gaps_preserved(self):
        assert linearize([s("1", 0, 10), s("2", 20, 30), s("1", 5, 8)]) == [
            s("1", 0, 10),
            s("2", 20, 30),
        ]


class TestProperties:
    """Structural properties of the partition."""

    SCHEDULES = [
        s("a", 0, 600),
        s("b", 300, 900),
        s("c", 420, 480),
        s("a", 870, 1000),
        s("d", 950, 1440),
        s("e", 300, 310),
        s("b", 1200, 1300),
    ]

    def test_exactly_one_entry_per_covered_minute(self):
        timeline = linearize(self.SCHEDULES)
        for minute in range(1440):
            covered = any(schedule.contains(minute) for schedule in self.SCHEDULES)
            assert len(winner_at(timeline, minute)) == (1 if covered else 0)

    def test_latest_start_wins(self):
        timeline = linearize(self.SCHEDULES)
        for minute in range(1440):
            covering = [x for x in self.SCHEDULES if x.contains(minute)]
            if not covering:
                continue
            # Stable sort by start; last covering entry is the expected winner
            expected = sorted(covering, key=lambda x: x.start)[-1].scene_id
            assert winner_at(timeline, minute) == [expected]

    def test_sorted_and_well_formed(self):
        timeline = linearize(self.SCHEDULES)
        for entry in timeline:
            assert entry.start < entry.end
        for previous, entry in zip(timeline, timeline[1:]):
            assert previous.end <= entry.start
            if previous.end == entry.start:
                assert previous.scene_id != entry.scene_id

    def test_idempotent(self):
        timeline = linearize(self.SCHEDULES)
        assert linearize(timeline) == timeline


class TestSplitWrapping:
    """Tests for midnight splitting."""

    def test_normal(self):
        assert split_wrapping("1", TimeRange(360, 1200)) == [s("1", 360, 1200)]

    def test_wrapping(self):
        assert split_wrapping("1", TimeRange(1200, 360)) == [
            s("1", 1200, 1440),
            s("1", 0, 360),
        ]

    def test_after_midnight_piece_keeps_window_start(self):
        head, tail = split_wrapping("1", TimeRange(1200, 360))
        assert head.window_start is None
        assert tail.window_start == 1200
        assert tail.priority > s("2", 0, 1440).priority

    def test_after_midnight_piece_wins_tie_at_zero(self):
        allday = s("2", 0, 1440)
        for pieces in (
            [allday, *split_wrapping("1", TimeRange(1320, 360))],
            [*split_wrapping("1", TimeRange(1320, 360)), allday],
        ):
            assert linearize(pieces) == [
                s("1", 0, 360),
                s("2", 360, 1320),
                s("1", 1320, 1440),
            ]

    def test_wrapping_to_midnight(self):
        assert split_wrapping("1", TimeRange(1200, 0)) == [s("1", 1200, 1440)]

    def test_zero_width(self):
        assert split_wrapping("1", TimeRange(0, 0)) == []
