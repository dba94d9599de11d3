"""
Evaluators turn one difficulty object, with the context attached by the
preprocessors, into a non-negative strain contribution.

All of them are plain functions. The only evaluator with rolling state is
stamina, whose state object is owned by the skill processing a single beatmap.
"""
import math
from collections import deque

import difficulty_params as params
import pattern_stats
from taiko_objects import HitKind

# -----Start of Helper methods--------

def logistic(x, midpoint_offset=0.0, multiplier=1.0, max_value=1.0):
    exponent = -multiplier * (x - midpoint_offset)
    if exponent > 700:  # math.exp overflows past ~709
        return 0.0
    return max_value / (1 + math.exp(exponent))


def scaled_logistic(value, center, width):
    """Logistic curve whose transition spans roughly ``width`` around ``center``."""
    return logistic(value, center, 10 / width)


def tanh_sigmoid(value, center, width, middle=0.5, height=1.0):
    """Decreasing sigmoid through ``middle`` at ``center``, spanning ``height``."""
    return math.tanh(math.e * -(value - center) / width) * (height / 2) + middle

# -----End of Helper methods--------


# -----Rhythm--------

def _term_penalty(ratio, denominator, power, multiplier):
    return -multiplier * math.cos(denominator * math.pi * ratio) ** power


def _targeted_bonus(ratio, target_ratio, width, multiplier):
    return multiplier * math.exp(math.e * -((ratio - target_ratio) ** 2 / width ** 2))


def ratio_difficulty(ratio, terms=params.RHYTHM_TERMS):
    """
    Difficulty of an interval ratio. Each term penalises ratios lining up with
    1/denominator, so simpler ratios are penalised more often. Ratio 1 gives 0.
    """
    difficulty = 0.0
    for denominator in range(1, terms + 1):
        difficulty += _term_penalty(ratio, denominator, params.RHYTHM_TERM_POWER, 1)
    difficulty += terms

    # near-1 ratios are hard, exactly 1 is not
    difficulty += _targeted_bonus(ratio, 1, params.NEAR_ONE_BONUS_WIDTH, 1)
    difficulty -= _targeted_bonus(ratio, 1, params.NEAR_ONE_PENALTY_WIDTH, 1)

    return max(difficulty, 0.0) / math.sqrt(8)


def is_consistent_pattern(run, threshold=params.CONSISTENT_PATTERN_THRESHOLD):
    """True when any two of the last four run intervals are within ``threshold`` of each other."""
    intervals = []
    current = run
    while current is not None and len(intervals) < 4:
        intervals.append(current.child_interval)
        current = current.previous

    intervals = [interval for interval in intervals if interval is not None]
    if len(intervals) < 4:
        return False

    for i in range(len(intervals)):
        for j in range(i + 1, len(intervals)):
            if intervals[j] == 0:
                continue
            if abs(1 - intervals[i] / intervals[j]) <= threshold:
                return True
    return False


def evaluate_even_run(run, hit_window):
    difficulty = ratio_difficulty(run.child_interval_ratio)

    # patterns playable with the same interval as the previous one
    previous_interval = run.previous.child_interval if run.previous is not None else None
    if previous_interval is not None and len(run.children) > 1 and hit_window > 0:
        expected_duration = previous_interval * len(run.children)
        duration_difference = abs(run.duration - expected_duration)
        difficulty *= logistic(duration_difference / hit_window,
                               params.SAME_DURATION_MIDPOINT, params.SAME_DURATION_STEEPNESS)

    if is_consistent_pattern(run):
        difficulty *= params.CONSISTENT_PATTERN_PENALTY

    # patterns that fit inside a single hit window
    if hit_window > 0:
        difficulty *= logistic(run.duration / hit_window,
                               params.SINGLE_WINDOW_MIDPOINT, params.SINGLE_WINDOW_STEEPNESS)

    return difficulty


def evaluate_rhythm(obj, hit_window):
    """Rhythm difficulty, counted once at the first object of each even run and each even pattern."""
    difficulty = 0.0

    if obj.even_run is not None and obj.even_run.first_object is obj:
        difficulty += evaluate_even_run(obj.even_run, hit_window)

    if obj.even_pattern is not None and obj.even_pattern.first_object is obj and obj.rhythm is not None:
        difficulty += ratio_difficulty(obj.even_pattern.interval_ratio) * obj.rhythm.difficulty

    return difficulty


# -----Pattern complexity--------

def _capped_intervals(group):
    return [min(later.start_time - earlier.start_time, params.PATTERN_INTERVAL_CAP)
            for later, earlier in zip(group, group[1:])]


def pattern_group(obj, size=params.PATTERN_GROUP_SIZE):
    """The object followed by up to ``size - 1`` predecessors, newest first."""
    group = [obj]
    for i in range(size - 1):
        previous = obj.previous(i)
        if previous is None:
            break
        group.append(previous)
    return group


def pattern_complexity(obj):
    """Multiplier >= 0.9 growing with the irregularity of the recent intervals. Evenly spaced notes give 1."""
    group = pattern_group(obj)
    if len(group) <= 1:
        return 1.0

    intervals = _capped_intervals(group)
    factor = 1.0
    factor += pattern_stats.variance(intervals) / params.PATTERN_VARIANCE_DIVISOR

    cv = pattern_stats.coefficient_of_variation(intervals)
    if cv > params.PATTERN_CV_THRESHOLD:
        factor += cv * params.PATTERN_CV_SCALE

    entropy = pattern_stats.binned_entropy(intervals, params.PATTERN_BIN_SIZE)
    if entropy > params.PATTERN_ENTROPY_THRESHOLD:
        factor += entropy * params.PATTERN_ENTROPY_SCALE

    if pattern_stats.has_linear_trend(intervals, params.PATTERN_SLOPE_THRESHOLD):
        factor *= params.PATTERN_LINEAR_TREND_FACTOR

    return factor


# -----Colour--------

def _colour_sigmoid(value):
    return tanh_sigmoid(value, params.COLOUR_SIGMOID_CENTER, params.COLOUR_SIGMOID_WIDTH)


def evaluate_repeating_pattern(repeating):
    return params.COLOUR_REPETITION_SCALE * (1 - _colour_sigmoid(repeating.repetition_interval))


def evaluate_alternating_pattern(alternating):
    return _colour_sigmoid(alternating.index) * evaluate_repeating_pattern(alternating.parent)


def evaluate_colour_run(run):
    return _colour_sigmoid(run.index) * evaluate_alternating_pattern(run.parent) * params.COLOUR_RUN_SCALE


def evaluate_colour(obj):
    """Colour difficulty, added at the first object of each colour structure the object opens."""
    run = obj.colour_run
    if run is None:
        return 0.0

    difficulty = 0.0
    if run.first_object is obj:
        difficulty += evaluate_colour_run(run)

    alternating = run.parent
    if alternating is not None and alternating.first_object is obj:
        difficulty += evaluate_alternating_pattern(alternating)

        repeating = alternating.parent
        if repeating is not None and repeating.first_object is obj:
            difficulty += evaluate_repeating_pattern(repeating)

    return difficulty


# -----Stamina--------

class FingerState:
    """
    Same-finger hit intervals under full alternating play: each kind is played by two
    fingers which alternate, so fingers 0/1 take centre notes and 2/3 take rim notes.
    """

    def __init__(self, history_length=params.FINGER_HISTORY_LENGTH):
        self.histories = [deque(maxlen=history_length) for _ in range(4)]
        self.previous_hit_time = [None] * 4
        self.centre_finger = 1
        self.rim_finger = 3

    def _next_finger(self, kind):
        if kind is HitKind.CENTRE:
            self.centre_finger = 0 if self.centre_finger == 1 else 1
            return self.centre_finger
        self.rim_finger = 2 if self.rim_finger == 3 else 3
        return self.rim_finger

    def hit(self, obj):
        """Record a hit and return the interval history of the finger playing it."""
        finger = self._next_finger(obj.kind)
        previous = self.previous_hit_time[finger]
        if previous is not None:
            self.histories[finger].append(obj.start_time - previous)
        self.previous_hit_time[finger] = obj.start_time
        return self.histories[finger]


def speed_bonus(interval):
    return params.STAMINA_SPEED_NUMERATOR / max(interval, params.STAMINA_MIN_INTERVAL)


def evaluate_stamina(obj, state):
    if not obj.kind.is_note:
        return 0.0

    history = state.hit(obj)
    strain = params.STAMINA_BASE_STRAIN
    if history:
        strain += speed_bonus(min(history))
    return strain


# -----Reading--------

def object_density(obj):
    """
    Tempo below which slow scrolling starts to hurt reading. Dense passages (short
    delta times) raise it towards LOW_VELOCITY_CENTER_MAX.

    Measured at the unmodified clock rate: a rate change scales scroll speed and note
    spacing together, so the notes on screen look the same.
    """
    spread = params.LOW_VELOCITY_CENTER_MAX - params.LOW_VELOCITY_CENTER_MIN
    mapped_delta_time = obj.delta_time * obj.sequence.clock_rate
    return params.LOW_VELOCITY_CENTER_MAX - spread * scaled_logistic(
        mapped_delta_time, params.DENSITY_DELTA_CENTER, params.DENSITY_DELTA_WIDTH)


def evaluate_reading(obj):
    if not obj.kind.is_note or obj.effective_bpm is None:
        return 0.0

    center = (params.HIGH_VELOCITY_MAX + params.HIGH_VELOCITY_MIN) / 2
    width = params.HIGH_VELOCITY_MAX - params.HIGH_VELOCITY_MIN
    high_bonus = scaled_logistic(obj.effective_bpm, center, width)
    # crowded slow scrolling does not depend on the clock rate, fast scrolling does
    mapped_bpm = obj.effective_bpm / obj.sequence.clock_rate
    low_bonus = 1 - scaled_logistic(mapped_bpm, object_density(obj), params.LOW_VELOCITY_WIDTH)

    return params.HIGH_VELOCITY_MULTIPLIER * high_bonus + params.LOW_VELOCITY_MULTIPLIER * low_bonus
