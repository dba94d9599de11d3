import math
from types import SimpleNamespace

import pytest

from rhythm_preprocessor import (COMMON_RHYTHMS, EvenPattern, EvenRun, closest_rhythm, group_by_interval,
                                 process_rhythm, rhythm_ratio)
from taiko_objects import create_difficulty_objects


def _items(intervals):
    return [SimpleNamespace(interval=interval, name=i) for i, interval in enumerate(intervals)]


def _timed(times):
    return [SimpleNamespace(start_time=t) for t in times]


def test_table_has_unique_ratios():
    ratios = [rhythm.ratio for rhythm in COMMON_RHYTHMS]
    assert len(ratios) == len(set(ratios))
    assert COMMON_RHYTHMS[0].ratio == 1.0
    assert COMMON_RHYTHMS[0].difficulty == 0.0


def test_closest_rhythm_picks_nearest():
    assert closest_rhythm(1.0).difficulty == 0.0
    assert closest_rhythm(1.49).ratio == pytest.approx(1.5)
    assert closest_rhythm(0.52).ratio == pytest.approx(0.5)
    assert closest_rhythm(10.0).ratio == pytest.approx(3.0)


def test_closest_rhythm_ties_keep_table_order():
    # exactly between 1/1 and 5/4
    assert closest_rhythm(1.125).ratio == 1.0


def test_rhythm_ratio_guards_non_positive_previous():
    assert rhythm_ratio(100.0, 0.0) == 1.0
    assert rhythm_ratio(100.0, 200.0) == 0.5


def test_uniform_intervals_form_one_group():
    groups = group_by_interval(_items([100.0] * 6))
    assert len(groups) == 1
    assert len(groups[0]) == 6


def test_slow_down_stays_with_the_faster_group():
    groups = group_by_interval(_items([100.0, 100.0, 100.0, 200.0, 200.0, 200.0]))
    assert [len(g) for g in groups] == [4, 2]


def test_grouping_is_an_ordered_partition():
    items = _items([100.0, 100.0, 50.0, 50.0, 75.0, 200.0, 200.0, 101.0, 99.0])
    groups = group_by_interval(items)
    assert [item.name for group in groups for item in group] == list(range(len(items)))


def test_small_inputs():
    assert group_by_interval([]) == []
    assert [len(g) for g in group_by_interval(_items([100.0]))] == [1]
    assert [len(g) for g in group_by_interval(_items([100.0, 300.0]))] == [2]


def test_even_run_intervals():
    first = EvenRun(None, _timed([0.0, 100.0, 200.0]))
    second = EvenRun(first, _timed([400.0, 450.0, 500.0]))
    single = EvenRun(second, _timed([800.0]))

    assert first.child_interval == 100.0
    assert first.interval == math.inf
    assert first.duration == 200.0
    assert second.child_interval_ratio == pytest.approx(0.5)
    assert second.interval == 400.0
    assert single.child_interval is None
    assert single.child_interval_ratio == 1.0


def test_even_pattern_interval_ratio_defaults_to_one():
    runs = [EvenRun(None, _timed([0.0, 100.0]))]
    first = EvenPattern(None, runs)
    second = EvenPattern(first, [EvenRun(runs[0], _timed([300.0, 400.0]))])
    assert first.interval_ratio == 1.0
    # previous pattern's interval is infinite
    assert second.interval_ratio == 1.0


def test_process_rhythm_annotates_every_object(even_stream):
    sequence = create_difficulty_objects(even_stream)
    runs, patterns = process_rhythm(sequence)

    assert all(o.rhythm.ratio == 1.0 for o in sequence.objects)
    assert len(runs) == 1 and len(patterns) == 1
    assert all(o.even_run is runs[0] for o in sequence.objects)
    assert all(o.even_pattern is patterns[0] for o in sequence.objects)


def test_rhythm_tags_are_canonical_table_entries(beatmap_builder):
    gaps = [200.0, 200.0, 300.0, 100.0, 150.0, 150.0, 120.0, 240.0]
    sequence = create_difficulty_objects(beatmap_builder("d" * 9, spacing=gaps))
    process_rhythm(sequence)
    assert all(o.rhythm in COMMON_RHYTHMS for o in sequence.objects)
    assert [o.rhythm.ratio for o in sequence.objects][:3] == [1.0, 1.5, pytest.approx(1 / 3)]
