import math

# Every tuning constant of the difficulty and performance calculation lives here,
# so re-tuning never touches the algorithm modules.

# -----Sequencing--------

SECTION_LENGTH = 400  # ms per strain section
NEUTRAL_SLIDER_MULTIPLIER = 1.4

# -----Rhythm classifier--------

# (numerator, denominator, difficulty). Ratios closer to 1 (but not 1) are harder,
# speed-ups are generally harder than slow-downs. 3/2 is purposefully higher as it
# requires a hand switch under full alternating play.
COMMON_RHYTHMS = (
    (1, 1, 0.0),
    (2, 1, 0.3),
    (1, 2, 0.5),
    (3, 1, 0.3),
    (1, 3, 0.35),
    (3, 2, 0.6),
    (2, 3, 0.4),
    (5, 4, 0.5),
    (4, 5, 0.7),
)

# -----Grouping--------

EVEN_RUN_MARGIN_OF_ERROR = 3.0  # ms

# -----Colour--------

MAX_REPETITION_INTERVAL = 16
RUN_LENGTH_TOLERANCE = 0

# -----Rhythm evaluator--------

RHYTHM_TERMS = 8
RHYTHM_TERM_POWER = 2
NEAR_ONE_BONUS_WIDTH = 0.5
NEAR_ONE_PENALTY_WIDTH = 0.3
SAME_DURATION_MIDPOINT = 0.5
SAME_DURATION_STEEPNESS = 1.5
SINGLE_WINDOW_MIDPOINT = 0.5
SINGLE_WINDOW_STEEPNESS = 1.0
CONSISTENT_PATTERN_THRESHOLD = 0.1
CONSISTENT_PATTERN_PENALTY = 0.4

# -----Pattern complexity--------

PATTERN_GROUP_SIZE = 10
PATTERN_INTERVAL_CAP = 500.0
PATTERN_BIN_SIZE = 10.0
PATTERN_SLOPE_THRESHOLD = 0.05
PATTERN_VARIANCE_DIVISOR = 500000.0
PATTERN_CV_THRESHOLD = 0.2
PATTERN_CV_SCALE = 0.2
PATTERN_ENTROPY_THRESHOLD = 2.0
PATTERN_ENTROPY_SCALE = 0.3
PATTERN_LINEAR_TREND_FACTOR = 0.9

# -----Colour evaluator--------

COLOUR_SIGMOID_CENTER = 2.0
COLOUR_SIGMOID_WIDTH = 2.0
COLOUR_RUN_SCALE = 0.5
COLOUR_REPETITION_SCALE = 2.0

# -----Stamina evaluator--------

FINGER_HISTORY_LENGTH = 2
STAMINA_BASE_STRAIN = 0.5
STAMINA_SPEED_NUMERATOR = 30.0
STAMINA_MIN_INTERVAL = 50.0  # caps at 600bpm 1/4 with alternating fingers

# -----Reading evaluator--------

HIGH_VELOCITY_MIN = 480.0
HIGH_VELOCITY_MAX = 640.0
HIGH_VELOCITY_MULTIPLIER = 1.0
LOW_VELOCITY_WIDTH = 160.0
LOW_VELOCITY_MULTIPLIER = 1.0
LOW_VELOCITY_CENTER_MAX = 200.0  # dense passages
LOW_VELOCITY_CENTER_MIN = 100.0  # sparse passages
DENSITY_DELTA_CENTER = 200.0
DENSITY_DELTA_WIDTH = 300.0

# -----Skills--------

RHYTHM_SKILL_MULTIPLIER = 1.0
RHYTHM_NOTE_DECAY = 0.96
COLOUR_SKILL_MULTIPLIER = 0.12
COLOUR_DECAY_BASE = 0.8
STAMINA_SKILL_MULTIPLIER = 1.1
STAMINA_DECAY_BASE = 0.4
READING_SKILL_MULTIPLIER = 1.0
READING_DECAY_BASE = 0.4

# -----Combiner--------

FINAL_MULTIPLIER = 0.0625
RHYTHM_WEIGHT = 0.2 * FINAL_MULTIPLIER
COLOUR_WEIGHT = 0.375 * FINAL_MULTIPLIER
STAMINA_WEIGHT = 0.375 * FINAL_MULTIPLIER
READING_WEIGHT = 0.1 * FINAL_MULTIPLIER

COLOUR_STAMINA_NORM = 1.5
COMBINED_NORM = 2.0
PEAK_WEIGHT_DECAY = 0.9

SIMPLE_PATTERN_THRESHOLD = 0.5
SIMPLE_PATTERN_FLOOR = 0.75

DIFFICULTY_MULTIPLIER = 1.35
STAR_RATING_SCALE = 1.4
RESCALE_MULTIPLIER = 10.43
RESCALE_DIVISOR = 8.0

# -----Hit windows (ms at OD 0, 5, 10)--------

GREAT_WINDOW_RANGE = (50.0, 35.0, 20.0)
OK_WINDOW_RANGE = (120.0, 80.0, 50.0)
HARD_ROCK_OD_MULTIPLIER = 1.4
EASY_OD_MULTIPLIER = 0.5
MAX_OVERALL_DIFFICULTY = 10.0

# -----Performance--------

DEVIATION_BRACKET = (30.0, 60.0)
OK_PSEUDO_COUNT = 0.5
LOG_ERFC_EXACT_LIMIT = 5.0
UNSTABLE_RATE_SCALE = 10.0

PERFORMANCE_MULTIPLIER = 1.13
PERFORMANCE_POWER_MEAN = 1.1
MISS_COUNT_REFERENCE = 1000.0
MISS_DECAY = 0.986

# Estimated ratio of pattern difficulty to peak difficulty when every skill
# contributes evenly.
PATTERN_RATIO = math.hypot(0.35, 0.275) / math.sqrt(0.35 ** 2 + 0.275 ** 2 + 0.6 ** 2)
READING_SIGMOID_CENTER = 0.55
READING_SIGMOID_WIDTH = 0.4

DIFFICULTY_STAR_DIVISOR = 0.115
DIFFICULTY_EXPONENT = 2.25
DIFFICULTY_DIVISOR = 1150.0
LENGTH_BONUS_NOTES = 1500.0
LENGTH_BONUS_SCALE = 0.1
DEVIATION_SCALING_UR = 400.0

ACCURACY_BASE = 70.0
ACCURACY_EXPONENT = 1.1
ACCURACY_STAR_EXPONENT = 0.4
ACCURACY_LENGTH_EXPONENT = 0.3
ACCURACY_LENGTH_CAP = 1.15

HIDDEN_TOTAL_BONUS = 0.075
EASY_TOTAL_MULTIPLIER = 0.975
EASY_DIFFICULTY_PENALTY = 0.015
HIDDEN_DIFFICULTY_BONUS = 0.05
HARD_ROCK_DIFFICULTY_BONUS = 0.01
FLASHLIGHT_DIFFICULTY_BONUS = 0.05
