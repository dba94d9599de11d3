import pytest

from taiko_objects import Beatmap, HitEvent, HitKind, create_difficulty_objects


def test_first_two_events_only_give_context(even_stream):
    sequence = create_difficulty_objects(even_stream)
    assert len(sequence) == 3
    assert sequence.objects[0].start_time == 1500.0
    assert sequence.objects[0].delta_time == 250.0
    assert sequence.objects[0].previous_delta_time == 250.0


def test_fewer_than_three_events_is_empty(beatmap_builder):
    assert len(create_difficulty_objects(beatmap_builder("dk"))) == 0
    assert len(create_difficulty_objects(Beatmap(hit_events=()))) == 0


def test_clock_rate_divides_times(even_stream):
    sequence = create_difficulty_objects(even_stream, clock_rate=2.0)
    assert [o.start_time for o in sequence.objects] == [750.0, 875.0, 1000.0]
    assert all(o.delta_time == 125.0 for o in sequence.objects)


def test_objects_only_carry_start_time(even_stream):
    obj = create_difficulty_objects(even_stream).objects[-1]
    assert obj.interval == obj.delta_time
    assert not hasattr(obj, "end_time")


def test_non_positive_clock_rate_is_rejected(even_stream):
    with pytest.raises(ValueError):
        create_difficulty_objects(even_stream, clock_rate=0)


def test_neighbour_lookups_return_none_past_the_ends(beatmap_builder):
    sequence = create_difficulty_objects(beatmap_builder("ddkdk"))
    first, last = sequence.objects[0], sequence.objects[-1]
    assert first.previous() is None
    assert last.next() is None
    assert first.next() is sequence.objects[1]
    assert last.previous(1) is first
    assert first.previous_note() is None
    assert last.next_note() is None


def test_mono_and_note_indices(beatmap_builder):
    # objects: k d r k
    sequence = create_difficulty_objects(beatmap_builder("ddkdrk"))
    kinds = [o.kind for o in sequence.objects]
    assert kinds == [HitKind.RIM, HitKind.CENTRE, HitKind.DRUM_ROLL, HitKind.RIM]

    rim_last = sequence.objects[-1]
    assert rim_last.mono_index == 1
    assert rim_last.previous_mono() is sequence.objects[0]
    assert rim_last.note_index == 2
    assert rim_last.previous_note() is sequence.objects[1]

    roll = sequence.objects[2]
    assert roll.note_index == -1
    assert roll.previous_note() is None
    assert len(sequence.notes) == 3


def test_unsorted_events_are_sorted():
    events = tuple(HitEvent(t, HitKind.CENTRE) for t in (0.0, 300.0, 100.0, 200.0))
    sequence = create_difficulty_objects(Beatmap(hit_events=events))
    assert [o.start_time for o in sequence.objects] == [200.0, 300.0]


def test_effective_bpm_follows_timing_and_velocity(beatmap_builder):
    sequence = create_difficulty_objects(beatmap_builder("ddddd", bpm=200.0, slider_multiplier=2.8), clock_rate=1.5)
    # 200 bpm * 1.5 rate * (2.8 / 1.4) global velocity
    assert sequence.objects[0].effective_bpm == pytest.approx(600.0)


def test_effective_bpm_is_unknown_without_timing(even_stream):
    sequence = create_difficulty_objects(even_stream)
    assert all(o.effective_bpm is None for o in sequence.objects)
