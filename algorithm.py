import logging
import math

import numpy as np
import pandas as pd

import difficulty_params as params
import strain_skills
import taiko_mods
from colour_preprocessor import process_colour
from difficulty_attributes import DifficultyAttributes
from rhythm_preprocessor import process_rhythm
from strain_skills import SkillKind
from taiko_objects import create_difficulty_objects

logger = logging.getLogger(__name__)

SKILL_WEIGHTS = {
    SkillKind.RHYTHM: params.RHYTHM_WEIGHT,
    SkillKind.COLOUR: params.COLOUR_WEIGHT,
    SkillKind.STAMINA: params.STAMINA_WEIGHT,
    SkillKind.READING: params.READING_WEIGHT,
}

# -----Start of Helper methods--------

def norm(p, *values):
    """p-norm of the values. Works element-wise on arrays and Series."""
    total = sum(np.power(value, p) for value in values)
    return np.power(total, 1 / p)


def weighted_peak_sum(peaks, decay=params.PEAK_WEIGHT_DECAY):
    """Sum of the peaks sorted high to low, the i-th one weighted by decay**i."""
    values = np.sort(np.asarray(peaks, dtype=float))[::-1]
    weights = decay ** np.arange(len(values))
    return float(np.sum(values * weights))


def simple_pattern_penalty(rating):
    """Close to SIMPLE_PATTERN_FLOOR for a rating near 0, approaching 1 as the rating grows."""
    return 1 - (1 - params.SIMPLE_PATTERN_FLOOR) * math.exp(-rating / params.SIMPLE_PATTERN_THRESHOLD)


def rescale(sr):
    """Map the combined peak rating onto the star scale. Negative input is left as it is."""
    if sr < 0:
        return sr
    return params.RESCALE_MULTIPLIER * math.log(sr / params.RESCALE_DIVISOR + 1)

# -----End of Helper methods--------


def section_peaks(skills):
    """One row per section, one weighted column per skill."""
    df_peaks = pd.DataFrame({
        kind.value: strain_skills.strain_peaks(skill) for kind, skill in skills.items()
    }, dtype=float)
    for kind, weight in SKILL_WEIGHTS.items():
        df_peaks[kind.value] *= weight
    return df_peaks


def combine_peaks(df_peaks):
    """
    Combine weighted per-section skill peaks into ratings.

    Colour and rhythm are penalised when the other one is barely present. Each section
    then gets a single combined peak; empty sections are dropped and the rest are
    weighted by rank. Sub-ratings follow the same ranking.
    """
    rhythm = SkillKind.RHYTHM.value
    colour = SkillKind.COLOUR.value
    stamina = SkillKind.STAMINA.value
    reading = SkillKind.READING.value

    df_peaks = df_peaks.copy()
    rhythm_rating = weighted_peak_sum(df_peaks[rhythm])
    colour_rating = weighted_peak_sum(df_peaks[colour])
    df_peaks[colour] *= simple_pattern_penalty(rhythm_rating)
    df_peaks[rhythm] *= simple_pattern_penalty(colour_rating)

    df_peaks['combined'] = norm(params.COMBINED_NORM,
                                norm(params.COLOUR_STAMINA_NORM, df_peaks[colour], df_peaks[stamina]),
                                df_peaks[rhythm],
                                df_peaks[reading])

    df_ranked = df_peaks[df_peaks['combined'] > 0].sort_values('combined', ascending=False, kind='stable')
    weights = params.PEAK_WEIGHT_DECAY ** np.arange(len(df_ranked))
    ratings = df_ranked.mul(weights, axis=0).sum() * params.DIFFICULTY_MULTIPLIER

    logger.debug("Combined %d of %d sections", len(df_ranked), len(df_peaks))
    return {column: float(ratings.get(column, 0.0)) for column in (rhythm, colour, stamina, reading, 'combined')}


def calculate(beatmap, mods=()):
    """Difficulty attributes of a beatmap played with the given mods."""
    mods = tuple(mods)
    rate = taiko_mods.clock_rate(mods)
    od = taiko_mods.adjusted_overall_difficulty(beatmap.overall_difficulty, mods)
    great_hit_window, ok_hit_window = taiko_mods.hit_windows(od, rate)
    max_combo = sum(1 for event in beatmap.hit_events if event.kind.is_note)

    sequence = create_difficulty_objects(beatmap, rate)
    if not sequence.objects:
        return DifficultyAttributes(great_hit_window=great_hit_window, ok_hit_window=ok_hit_window,
                                    max_combo=max_combo, mods=mods)

    process_rhythm(sequence)
    process_colour(sequence)
    skills = strain_skills.process_all(sequence, great_hit_window)

    ratings = combine_peaks(section_peaks(skills))
    peak_difficulty = ratings['combined']
    star_rating = rescale(peak_difficulty * params.STAR_RATING_SCALE)

    logger.debug("Star rating %.4f (peak %.4f, rate %.2f, OD %.2f)", star_rating, peak_difficulty, rate, od)

    return DifficultyAttributes(
        star_rating=star_rating,
        rhythm_difficulty=ratings[SkillKind.RHYTHM.value],
        colour_difficulty=ratings[SkillKind.COLOUR.value],
        stamina_difficulty=ratings[SkillKind.STAMINA.value],
        reading_difficulty=ratings[SkillKind.READING.value],
        peak_difficulty=peak_difficulty,
        great_hit_window=great_hit_window,
        ok_hit_window=ok_hit_window,
        max_combo=max_combo,
        mods=mods,
    )
