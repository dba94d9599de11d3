import pytest

from taiko_mods import Mod, adjusted_overall_difficulty, clock_rate, difficulty_range, hit_windows, parse_mods


def test_parse_mods():
    assert parse_mods(["dt", "HD", "NM", "DT"]) == (Mod.DT, Mod.HD)
    assert parse_mods(["NM"]) == ()
    with pytest.raises(ValueError):
        parse_mods(["XX"])


def test_clock_rate():
    assert clock_rate(()) == 1.0
    assert clock_rate((Mod.NC, Mod.HD)) == 1.5
    assert clock_rate((Mod.HT,)) == 0.75


def test_overall_difficulty_adjustments():
    assert adjusted_overall_difficulty(6.0, (Mod.EZ,)) == 3.0
    assert adjusted_overall_difficulty(5.0, (Mod.HR,)) == pytest.approx(7.0)
    assert adjusted_overall_difficulty(9.0, (Mod.HR,)) == 10.0


def test_difficulty_range():
    assert difficulty_range(0.0, (50.0, 35.0, 20.0)) == 50.0
    assert difficulty_range(5.0, (50.0, 35.0, 20.0)) == 35.0
    assert difficulty_range(10.0, (50.0, 35.0, 20.0)) == 20.0
    assert difficulty_range(7.5, (50.0, 35.0, 20.0)) == pytest.approx(27.5)


def test_hit_windows():
    assert hit_windows(5.0) == (35.0, 80.0)
    great, ok = hit_windows(10.0, rate=1.5)
    assert great == pytest.approx(20.0 / 1.5)
    assert ok == pytest.approx(50.0 / 1.5)
    with pytest.raises(ValueError):
        hit_windows(5.0, rate=0.0)
