import math
from dataclasses import dataclass

import difficulty_params as params


@dataclass(frozen=True)
class RhythmTag:
    """A rhythm change from the canonical table, attached to a difficulty object."""
    ratio: float
    difficulty: float


COMMON_RHYTHMS = tuple(RhythmTag(numerator / denominator, difficulty)
                       for numerator, denominator, difficulty in params.COMMON_RHYTHMS)


def closest_rhythm(ratio):
    """
    Nearest canonical rhythm by absolute ratio difference.
    min() keeps the first of equally close entries, so ties resolve by table order.
    """
    return min(COMMON_RHYTHMS, key=lambda rhythm: abs(rhythm.ratio - ratio))


def rhythm_ratio(delta_time, previous_delta_time):
    if previous_delta_time <= 0:
        return 1.0
    return delta_time / previous_delta_time


class EvenRun:
    """
    A group of difficulty objects with no rhythm variation.
    The per-child interval is only defined with more than one child.
    """

    def __init__(self, previous, children):
        self.previous = previous
        self.children = children
        self.child_interval = None
        self.child_interval_ratio = 1.0
        self.interval = math.inf

        if len(children) > 1:
            self.child_interval = (children[-1].start_time - children[0].start_time) / (len(children) - 1)

        if previous is not None and previous.child_interval and self.child_interval is not None:
            self.child_interval_ratio = self.child_interval / previous.child_interval

        if previous is not None:
            self.interval = self.start_time - previous.start_time

    @property
    def first_object(self):
        return self.children[0]

    @property
    def start_time(self):
        return self.children[0].start_time

    @property
    def end_time(self):
        return self.children[-1].start_time

    @property
    def duration(self):
        return self.end_time - self.start_time


class EvenPattern:
    """EvenRuns grouped by the interval between their start times."""

    def __init__(self, previous, children):
        self.previous = previous
        self.children = children

    @property
    def first_object(self):
        return self.children[0].first_object

    @property
    def children_interval(self):
        if len(self.children) > 1:
            return self.children[1].interval
        return self.children[0].interval

    @property
    def interval_ratio(self):
        if self.previous is None:
            return 1.0
        previous_interval = self.previous.children_interval
        if previous_interval == 0 or not math.isfinite(previous_interval):
            return 1.0
        ratio = self.children_interval / self.previous.children_interval
        return ratio if math.isfinite(ratio) else 1.0

    def objects(self):
        for run in self.children:
            yield from run.children


def _is_flat(current, following, margin_of_error):
    # inf - inf is nan, which never compares as flat
    return abs(current.interval - following.interval) <= margin_of_error


def group_by_interval(items, margin_of_error=params.EVEN_RUN_MARGIN_OF_ERROR):
    """
    Partition items (anything with an ``interval``) into runs of near-constant interval.

    When the interval changes and the following interval is the larger one, the
    current item still closes the run, so a deliberate slow-down is not split off.
    """
    groups = []
    count = len(items)
    i = 0

    while i < count:
        children = [items[i]]
        i += 1

        while i < count - 1:
            current, following = items[i], items[i + 1]
            if not _is_flat(current, following, margin_of_error):
                if following.interval > current.interval + margin_of_error:
                    children.append(current)
                    i += 1
                break
            children.append(current)
            i += 1

        if i < count and (count <= 2 or _is_flat(items[-1], items[-2], margin_of_error)):
            children.append(items[i])
            i += 1

        groups.append(children)

    return groups


def group_even_runs(objects, margin_of_error=params.EVEN_RUN_MARGIN_OF_ERROR):
    runs = []
    for children in group_by_interval(objects, margin_of_error):
        run = EvenRun(runs[-1] if runs else None, children)
        for obj in children:
            obj.even_run = run
        runs.append(run)
    return runs


def group_even_patterns(runs, margin_of_error=params.EVEN_RUN_MARGIN_OF_ERROR):
    patterns = []
    for children in group_by_interval(runs, margin_of_error):
        pattern = EvenPattern(patterns[-1] if patterns else None, children)
        for obj in pattern.objects():
            obj.even_pattern = pattern
        patterns.append(pattern)
    return patterns


def process_rhythm(sequence):
    """Classify every object's rhythm change, then group the notes into even runs and patterns."""
    for obj in sequence.objects:
        obj.rhythm = closest_rhythm(rhythm_ratio(obj.delta_time, obj.previous_delta_time))

    runs = group_even_runs(sequence.notes)
    patterns = group_even_patterns(runs)
    return runs, patterns
