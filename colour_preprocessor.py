import difficulty_params as params


class ColourRun:
    """A maximal run of notes of one kind."""

    def __init__(self, previous, kind):
        self.previous = previous
        self.kind = kind
        self.objects = []
        self.parent = None
        self.index = 0

    @property
    def first_object(self):
        return self.objects[0]

    @property
    def run_length(self):
        return len(self.objects)


class AlternatingPattern:
    """Consecutive colour runs of the same length, e.g. ``kd kd kd`` or ``kkdd kkdd``."""

    def __init__(self, previous):
        self.previous = previous
        self.runs = []
        self.parent = None
        self.index = 0

    @property
    def first_object(self):
        return self.runs[0].first_object

    def has_identical_run_length(self, other, tolerance=params.RUN_LENGTH_TOLERANCE):
        return abs(other.runs[0].run_length - self.runs[0].run_length) <= tolerance

    def is_repetition_of(self, other):
        return (self.has_identical_run_length(other)
                and len(other.runs) == len(self.runs)
                and other.runs[0].kind == self.runs[0].kind)


class RepeatingPattern:
    """Alternating patterns that repeat with a period of two."""

    def __init__(self, previous):
        self.previous = previous
        self.patterns = []
        self.repetition_interval = params.MAX_REPETITION_INTERVAL + 1

    @property
    def first_object(self):
        return self.patterns[0].first_object

    def is_repetition_of(self, other):
        if len(self.patterns) != len(other.patterns):
            return False
        for mine, theirs in zip(self.patterns[:2], other.patterns[:2]):
            if not mine.has_identical_run_length(theirs):
                return False
        return True

    def find_repetition_interval(self):
        """Distance to the closest earlier repetition, or MAX_REPETITION_INTERVAL + 1 when there is none."""
        self.repetition_interval = params.MAX_REPETITION_INTERVAL + 1
        other = self.previous
        interval = 1
        while other is not None and interval <= params.MAX_REPETITION_INTERVAL:
            if self.is_repetition_of(other):
                self.repetition_interval = interval
                return
            other = other.previous
            interval += 1


def _add_pattern(repeating, pattern):
    pattern.parent = repeating
    pattern.index = len(repeating.patterns)
    repeating.patterns.append(pattern)


def encode_colour_runs(notes):
    runs = []
    for obj in notes:
        if not runs or obj.kind != runs[-1].kind:
            runs.append(ColourRun(runs[-1] if runs else None, obj.kind))
        runs[-1].objects.append(obj)
        obj.colour_run = runs[-1]
    return runs


def encode_alternating_patterns(runs, tolerance=params.RUN_LENGTH_TOLERANCE):
    patterns = []
    for i, run in enumerate(runs):
        if not patterns or abs(run.run_length - runs[i - 1].run_length) > tolerance:
            patterns.append(AlternatingPattern(patterns[-1] if patterns else None))
        run.parent = patterns[-1]
        run.index = len(patterns[-1].runs)
        patterns[-1].runs.append(run)
    return patterns


def encode_repeating_patterns(patterns):
    repeating_patterns = []
    count = len(patterns)
    i = 0

    while i < count:
        repeating = RepeatingPattern(repeating_patterns[-1] if repeating_patterns else None)

        coupled = i < count - 2 and patterns[i].is_repetition_of(patterns[i + 2])
        if not coupled:
            _add_pattern(repeating, patterns[i])
            i += 1
        else:
            while i < count - 2 and patterns[i].is_repetition_of(patterns[i + 2]):
                _add_pattern(repeating, patterns[i])
                i += 1
            # the last two patterns of the coupled chain
            _add_pattern(repeating, patterns[i])
            _add_pattern(repeating, patterns[i + 1])
            i += 2

        repeating_patterns.append(repeating)

    for repeating in repeating_patterns:
        repeating.find_repetition_interval()

    return repeating_patterns


def process_colour(sequence):
    """Annotate every note with its colour run; the run links up to its patterns."""
    runs = encode_colour_runs(sequence.notes)
    alternating = encode_alternating_patterns(runs)
    return encode_repeating_patterns(alternating)
