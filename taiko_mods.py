from enum import Enum

import difficulty_params as params


class Mod(Enum):
    NM = "NM"
    DT = "DT"
    NC = "NC"
    HT = "HT"
    DC = "DC"
    EZ = "EZ"
    HR = "HR"
    HD = "HD"
    FL = "FL"

    @property
    def clock_rate(self):
        if self in (Mod.DT, Mod.NC):
            return 1.5
        if self in (Mod.HT, Mod.DC):
            return 0.75
        return 1.0


def parse_mods(acronyms):
    """Turn an iterable of acronyms (case-insensitive) into a tuple of unique mods, keeping order."""
    mods = []
    for acronym in acronyms:
        try:
            mod = Mod(acronym.upper())
        except ValueError:
            raise ValueError(f"Unknown mod: {acronym!r}") from None
        if mod is not Mod.NM and mod not in mods:
            mods.append(mod)
    return tuple(mods)


def clock_rate(mods):
    rate = 1.0
    for mod in mods:
        rate *= mod.clock_rate
    return rate


def adjusted_overall_difficulty(od, mods):
    if Mod.EZ in mods:
        od *= params.EASY_OD_MULTIPLIER
    if Mod.HR in mods:
        od = min(od * params.HARD_ROCK_OD_MULTIPLIER, params.MAX_OVERALL_DIFFICULTY)
    return od


def difficulty_range(difficulty, value_range):
    """Linear interpolation of a (od 0, od 5, od 10) triple."""
    low, mid, high = value_range
    if difficulty > 5:
        return mid + (high - mid) * (difficulty - 5) / 5
    if difficulty < 5:
        return mid - (mid - low) * (5 - difficulty) / 5
    return mid


def hit_windows(od, rate=1.0):
    """Return (great, ok) hit windows in ms, as perceived at the given clock rate."""
    if rate <= 0:
        raise ValueError(f"Clock rate must be positive, got {rate}")
    great = difficulty_range(od, params.GREAT_WINDOW_RANGE) / rate
    ok = difficulty_range(od, params.OK_WINDOW_RANGE) / rate
    return great, ok
