import json

import pytest

import srcalc_script
from taiko_objects import HitKind


def test_version_prints_credit_and_exits(capsys):
    with pytest.raises(SystemExit) as e:
        srcalc_script.main(["--version"])
    assert e.value.code == 0
    assert "taiko-srcalc" in capsys.readouterr().out


def test_rates_every_beatmap_in_folder(json_beatmap_dir, capsys):
    srcalc_script.main([str(json_beatmap_dir), "-M", "DT"])
    out = capsys.readouterr().out
    assert "(DT) sample | " in out


def test_prints_performance_when_counts_are_given(json_beatmap_dir, capsys):
    srcalc_script.main([str(json_beatmap_dir), "--great", "60", "--ok", "3", "--miss", "1"])
    out = capsys.readouterr().out
    assert "(NM) sample | " in out
    assert "pp " in out


def test_invalid_directory_exits(tmp_path):
    with pytest.raises(SystemExit) as e:
        srcalc_script.main([str(tmp_path / "missing")])
    assert e.value.code == 1


def test_unknown_mod_exits(json_beatmap_dir):
    with pytest.raises(SystemExit) as e:
        srcalc_script.main([str(json_beatmap_dir), "-M", "ZZ"])
    assert e.value.code == 1


def test_beatmap_from_dict():
    beatmap = srcalc_script.beatmap_from_dict({
        "overall_difficulty": 7,
        "timing_points": [{"time": 0, "bpm": 150}],
        "hit_objects": [{"time": 10, "kind": "Rim"}, {"time": 20, "kind": "drum_roll", "duration": 300}],
    })
    assert beatmap.overall_difficulty == 7.0
    assert [e.kind for e in beatmap.hit_events] == [HitKind.RIM, HitKind.DRUM_ROLL]
    assert beatmap.hit_events[1].duration == 300.0
    assert beatmap.timing_segments[0].slider_velocity == 1.0

    with pytest.raises(ValueError):
        srcalc_script.beatmap_from_dict({"hit_objects": [{"time": 0, "kind": "katsu"}]})


def test_null_field_in_beatmap_exits(tmp_path):
    data = {"hit_objects": [{"time": None, "kind": "centre"}]}
    (tmp_path / "broken.json").write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(SystemExit) as e:
        srcalc_script.main([str(tmp_path)])
    assert e.value.code == 1


def test_slider_velocity_is_read_as_float():
    beatmap = srcalc_script.beatmap_from_dict({
        "hit_objects": [{"time": 0, "kind": "centre", "slider_velocity": "1.5"}, {"time": 100, "kind": "rim"}],
    })
    assert beatmap.hit_events[0].slider_velocity == 1.5
    assert beatmap.hit_events[1].slider_velocity is None
