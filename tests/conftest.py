import json

import pytest

from taiko_objects import Beatmap, HitEvent, HitKind, TimingSegment


def make_beatmap(pattern, spacing=250.0, start=1000.0, od=5.0, bpm=None, slider_multiplier=1.4):
    """
    Build a beatmap from a pattern string: 'd' centre, 'k' rim, 'r' drum roll, 's' swell.
    Events are evenly spaced unless spacing is a list of gaps.
    """
    kinds = {'d': HitKind.CENTRE, 'k': HitKind.RIM, 'r': HitKind.DRUM_ROLL, 's': HitKind.SWELL}
    gaps = spacing if isinstance(spacing, (list, tuple)) else [spacing] * len(pattern)

    events = []
    time = start
    for i, symbol in enumerate(pattern):
        events.append(HitEvent(start_time=time, kind=kinds[symbol]))
        if i < len(gaps):
            time += gaps[i]

    segments = (TimingSegment(time=0.0, bpm=bpm),) if bpm is not None else ()
    return Beatmap(hit_events=tuple(events), overall_difficulty=od,
                   slider_multiplier=slider_multiplier, timing_segments=segments)


@pytest.fixture
def beatmap_builder():
    return make_beatmap


@pytest.fixture
def even_stream():
    """Five centre notes, 250 ms apart."""
    return make_beatmap("ddddd", spacing=250.0)


@pytest.fixture
def mixed_map():
    """A longer map with colour changes, rhythm changes and a timing segment."""
    pattern = "dkdk" * 8 + "ddkk" * 6 + "dddkdddk" * 4
    gaps = ([125.0] * 32) + ([187.5, 62.5] * 12) + ([100.0] * 32)
    return make_beatmap(pattern, spacing=gaps, bpm=180.0)


@pytest.fixture
def json_beatmap_dir(tmp_path):
    """A folder holding one beatmap in the CLI's JSON layout."""
    data = {
        "overall_difficulty": 6.0,
        "slider_multiplier": 1.4,
        "timing_points": [{"time": 0, "bpm": 160, "slider_velocity": 1.0}],
        "hit_objects": [
            {"time": 1000 + i * 125, "kind": "centre" if i % 3 else "rim"} for i in range(64)
        ],
    }
    (tmp_path / "sample.json").write_text(json.dumps(data), encoding="utf-8")
    return tmp_path
