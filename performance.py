"""
Performance value of a score on a rated beatmap.

The player's hit error is modelled as a zero-mean normal distribution. Its standard
deviation is estimated by maximising the likelihood of the observed judgement
counts, then the difficulty and accuracy values are scaled by how consistent the
player must have been.
"""
import logging
import math
from dataclasses import dataclass

import numpy as np
from scipy import optimize, special

import difficulty_params as params
from difficulty_attributes import PerformanceAttributes
from evaluators import tanh_sigmoid
from taiko_mods import Mod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreStatistics:
    count_great: int = 0
    count_ok: int = 0
    count_miss: int = 0
    mods: tuple = ()

    def __post_init__(self):
        for name in ('count_great', 'count_ok', 'count_miss'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")

    @property
    def total_hits(self):
        return self.count_great + self.count_ok + self.count_miss

    @property
    def total_successful_hits(self):
        return self.count_great + self.count_ok

    @property
    def accuracy(self):
        if self.total_hits == 0:
            return 0.0
        return (self.count_great + self.count_ok * 0.5) / self.total_hits


# -----Start of Helper methods--------

def log_erfc_approx(x):
    """ln(erfc(x)), switching to the asymptotic expansion where erfc underflows."""
    if x <= params.LOG_ERFC_EXACT_LIMIT:
        return math.log(special.erfc(x))
    return -x * x - math.log(x * math.sqrt(math.pi))


def _log_diff(first, second):
    """ln(e^first - e^second), -inf when the difference is not positive."""
    if second >= first:
        return -math.inf
    return first + math.log1p(-math.exp(second - first))


def _deviation_log_likelihood(deviation, score, great_hit_window, ok_hit_window):
    root2 = math.sqrt(2)
    log_erfc_great = log_erfc_approx(great_hit_window / (deviation * root2))
    log_erfc_ok = log_erfc_approx(ok_hit_window / (deviation * root2))

    terms = []
    if score.count_great > 0:
        log_p_great = math.log1p(-math.exp(log_erfc_great)) if log_erfc_great < 0 else -math.inf
        terms.append(score.count_great * log_p_great)
    # the pseudo-count keeps the estimate finite for scores without any ok
    terms.append((score.count_ok + params.OK_PSEUDO_COUNT) * _log_diff(log_erfc_great, log_erfc_ok))
    if score.count_miss > 0:
        terms.append(score.count_miss * log_erfc_ok)

    return np.sum(terms)

# -----End of Helper methods--------


def estimate_deviation(score, great_hit_window, ok_hit_window):
    """
    Maximum-likelihood standard deviation (ms) of the hit error, or None when
    there is nothing to estimate from.
    """
    if score.total_successful_hits == 0 or great_hit_window <= 0:
        return None

    total = score.total_hits + params.OK_PSEUDO_COUNT

    def objective(deviation):
        if deviation <= 0:
            return 0.0
        log_likelihood = _deviation_log_likelihood(deviation, score, great_hit_window, ok_hit_window)
        if not np.isfinite(log_likelihood):
            return 0.0
        return -math.exp(log_likelihood / total)

    try:
        result = optimize.minimize_scalar(objective, bracket=params.DEVIATION_BRACKET, method='brent')
    except RuntimeError as e:
        logger.warning("Deviation estimate failed: %s", e)
        return None

    if not np.isfinite(result.x) or result.x <= 0:
        logger.warning("Deviation estimate failed (%s); treating the score as unrated", result.x)
        return None

    logger.debug("Estimated deviation %.4f ms in %d iterations", result.x, result.nit)
    return float(result.x)


def effective_miss_count(score):
    if score.total_successful_hits == 0:
        return float(score.count_miss)
    return max(1.0, params.MISS_COUNT_REFERENCE / score.total_successful_hits) * score.count_miss


def reading_multiplier(attributes):
    """Share of the difficulty that comes from patterns rather than raw speed, in [0, 1]."""
    if attributes.peak_difficulty == 0:
        return 0.0
    pattern_ratio = math.hypot(attributes.rhythm_difficulty, attributes.colour_difficulty) / attributes.peak_difficulty
    return tanh_sigmoid(pattern_ratio / params.PATTERN_RATIO,
                        params.READING_SIGMOID_CENTER, params.READING_SIGMOID_WIDTH)


def length_bonus(score):
    return 1 + params.LENGTH_BONUS_SCALE * min(1.0, score.total_hits / params.LENGTH_BONUS_NOTES)


def difficulty_value(score, attributes, unstable_rate, miss_count, rm):
    if unstable_rate is None:
        return 0.0

    value = (5 * max(1.0, attributes.star_rating / params.DIFFICULTY_STAR_DIVISOR) - 4) \
        ** params.DIFFICULTY_EXPONENT / params.DIFFICULTY_DIVISOR
    value *= length_bonus(score)
    value *= params.MISS_DECAY ** miss_count

    if Mod.EZ in score.mods:
        value *= 1 - params.EASY_DIFFICULTY_PENALTY * rm
    if Mod.HD in score.mods:
        value *= 1 + params.HIDDEN_DIFFICULTY_BONUS * rm
    if Mod.HR in score.mods:
        value *= 1 + params.HARD_ROCK_DIFFICULTY_BONUS * rm
    if Mod.FL in score.mods:
        value *= (1 + params.FLASHLIGHT_DIFFICULTY_BONUS * rm) * length_bonus(score)

    # scale by how likely the player is to hit within a generous window
    return value * special.erf(params.DEVIATION_SCALING_UR / (math.sqrt(2) * unstable_rate)) ** 2


def accuracy_value(score, attributes, unstable_rate):
    if unstable_rate is None or attributes.great_hit_window <= 0:
        return 0.0

    value = (params.ACCURACY_BASE / unstable_rate) ** params.ACCURACY_EXPONENT \
        * attributes.star_rating ** params.ACCURACY_STAR_EXPONENT * 100
    length = min(params.ACCURACY_LENGTH_CAP, (score.total_hits / params.LENGTH_BONUS_NOTES) ** params.ACCURACY_LENGTH_EXPONENT)
    return value * length


def calculate_performance(score, attributes):
    deviation = estimate_deviation(score, attributes.great_hit_window, attributes.ok_hit_window)
    unstable_rate = deviation * params.UNSTABLE_RATE_SCALE if deviation is not None else None

    miss_count = effective_miss_count(score)
    rm = reading_multiplier(attributes)

    difficulty = difficulty_value(score, attributes, unstable_rate, miss_count, rm)
    accuracy = accuracy_value(score, attributes, unstable_rate)

    power = params.PERFORMANCE_POWER_MEAN
    total = (difficulty ** power + accuracy ** power) ** (1 / power) * params.PERFORMANCE_MULTIPLIER
    if Mod.HD in score.mods:
        total *= 1 + params.HIDDEN_TOTAL_BONUS * rm
    if Mod.EZ in score.mods:
        total *= params.EASY_TOTAL_MULTIPLIER

    logger.debug("Performance %.4f (difficulty %.4f, accuracy %.4f, UR %s)",
                 total, difficulty, accuracy, unstable_rate)

    return PerformanceAttributes(
        difficulty=float(difficulty),
        accuracy=float(accuracy),
        effective_miss_count=float(miss_count),
        estimated_unstable_rate=unstable_rate,
        deviation=deviation,
        total=float(total),
    )
