"""Tests for the time-grid layout engine."""

import random
from datetime import datetime, timedelta, timezone

import pytest
from conftest import make_event

from services.layout import event_geometry, events_overlap, layout_events, lowest_free_lane

DAY = datetime(2025, 11, 3)


def at(hour, minute=0):
    return DAY.replace(hour=hour, minute=minute)


def by_id(laid_out):
    return {entry.event.id: entry for entry in laid_out}


def random_day(seed, count=25):
    rng = random.Random(seed)
    events = []
    for i in range(count):
        start = at(8) + timedelta(minutes=15 * rng.randint(0, 36))
        end = start + timedelta(minutes=15 * rng.randint(0, 12))
        events.append(make_event(f"e{i}", start, end))
    return events


class TestLowestFreeLane:
    def test_empty(self):
        assert lowest_free_lane([]) == 0

    def test_fills_gap(self):
        assert lowest_free_lane([{0, 2}, {1, 3}]) == 4
        assert lowest_free_lane([{0, 2}, {3}]) == 1


class TestLayoutScenarios:
    def test_no_events(self):
        assert layout_events([]) == []

    def test_single_event(self, sample_event):
        [entry] = layout_events([sample_event])
        assert (entry.column, entry.total_columns, entry.width) == (0, 1, 1)

    def test_two_overlapping(self):
        result = by_id(
            layout_events(
                [
                    make_event("a", at(9), at(10)),
                    make_event("b", at(9, 30), at(10, 30)),
                ]
            )
        )
        assert (result["a"].column, result["a"].total_columns) == (0, 2)
        assert (result["b"].column, result["b"].total_columns) == (1, 2)

    def test_identical_pair_then_separate_event(self):
        result = by_id(
            layout_events(
                [
                    make_event("a", at(9), at(10)),
                    make_event("b", at(9), at(10)),
                    make_event("c", at(11), at(12)),
                ]
            )
        )
        assert {result["a"].column, result["b"].column} == {0, 1}
        assert result["a"].total_columns == result["b"].total_columns == 2
        assert (result["c"].column, result["c"].total_columns) == (0, 1)

    def test_back_to_back_events_share_column(self):
        result = by_id(
            layout_events(
                [
                    make_event("a", at(9), at(10)),
                    make_event("b", at(10), at(11)),
                ]
            )
        )
        assert result["a"].column == result["b"].column == 0
        assert result["b"].total_columns == 1

    def test_zero_duration_events_get_distinct_columns(self):
        result = by_id(
            layout_events(
                [
                    make_event("a", at(9), at(9)),
                    make_event("b", at(9), at(9)),
                ]
            )
        )
        assert {result["a"].column, result["b"].column} == {0, 1}

    def test_longer_event_anchors_tied_start(self):
        result = by_id(
            layout_events(
                [
                    make_event("short", at(9), at(9, 30)),
                    make_event("long", at(9), at(12)),
                ]
            )
        )
        assert result["long"].column == 0
        assert result["short"].column == 1

    def test_cluster_reaches_through_chain(self):
        # a overlaps b, b overlaps c, a and c do not overlap
        result = by_id(
            layout_events(
                [
                    make_event("a", at(9), at(10)),
                    make_event("b", at(9, 30), at(11)),
                    make_event("c", at(10, 30), at(11, 30)),
                ]
            )
        )
        assert result["c"].column == 0
        assert {entry.total_columns for entry in result.values()} == {2}

    def test_input_not_mutated(self):
        events = [make_event("b", at(10), at(11)), make_event("a", at(9), at(10))]
        snapshot = list(events)
        layout_events(events)
        assert events == snapshot


@pytest.mark.parametrize("seed", range(10))
class TestLayoutProperties:
    def test_overlapping_events_never_share_column(self, seed):
        laid_out = layout_events(random_day(seed))
        for i, a in enumerate(laid_out):
            for b in laid_out[i + 1 :]:
                if events_overlap(a.event, b.event):
                    assert a.column != b.column

    def test_column_is_lowest_free(self, seed):
        laid_out = layout_events(random_day(seed))
        for i, entry in enumerate(laid_out):
            earlier = [
                other.column
                for other in laid_out[:i]
                if events_overlap(other.event, entry.event)
            ]
            assert entry.column <= len(earlier)
            assert entry.column not in earlier
            assert all(col in earlier for col in range(entry.column))

    def test_total_columns_consistent_within_overlap(self, seed):
        laid_out = layout_events(random_day(seed))
        for i, a in enumerate(laid_out):
            assert a.total_columns >= a.column + 1
            for b in laid_out[i + 1 :]:
                if events_overlap(a.event, b.event):
                    assert a.total_columns == b.total_columns

    def test_idempotent(self, seed):
        events = random_day(seed)
        assert layout_events(events) == layout_events(events)


class TestEventGeometry:
    def test_two_columns(self):
        day_start = DAY.replace(tzinfo=timezone.utc)
        laid_out = by_id(
            layout_events(
                [
                    make_event("a", at(6), at(12)),
                    make_event("b", at(9), at(18)),
                ]
            )
        )
        a = event_geometry(laid_out["a"], day_start, gutter=1.0)
        b = event_geometry(laid_out["b"], day_start, gutter=1.0)
        assert a.left == 0
        assert b.left == 50
        assert a.width == pytest.approx(49.0)
        assert a.top == pytest.approx(25.0)
        assert a.height == pytest.approx(25.0)
        assert b.height == pytest.approx(37.5)

    def test_multi_day_event_clipped_to_day(self):
        day_start = DAY.replace(tzinfo=timezone.utc)
        event = make_event("conf", at(12) - timedelta(days=1), at(12) + timedelta(days=1))
        [entry] = layout_events([event])
        geometry = event_geometry(entry, day_start)
        assert geometry.top == 0
        assert geometry.height == pytest.approx(100.0)
