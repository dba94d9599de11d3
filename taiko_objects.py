import bisect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import difficulty_params as params

logger = logging.getLogger(__name__)


class HitKind(Enum):
    CENTRE = "centre"
    RIM = "rim"
    DRUM_ROLL = "drum_roll"
    SWELL = "swell"

    @property
    def is_note(self):
        return self in (HitKind.CENTRE, HitKind.RIM)


@dataclass(frozen=True)
class HitEvent:
    start_time: float
    kind: HitKind
    duration: float = 0.0
    # None inherits the velocity of the active timing segment.
    slider_velocity: Optional[float] = None


@dataclass(frozen=True)
class TimingSegment:
    time: float
    bpm: float
    slider_velocity: float = 1.0


@dataclass(frozen=True)
class Beatmap:
    hit_events: tuple
    overall_difficulty: float = 5.0
    slider_multiplier: float = params.NEUTRAL_SLIDER_MULTIPLIER
    timing_segments: tuple = ()


class DifficultyObject:
    """
    One hit event enriched for difficulty calculation.

    Neighbours are looked up by index in the owning ObjectSequence, so every lookup
    past either end returns None. The annotation fields (rhythm, even_run,
    even_pattern, colour_run) are filled once by their preprocessor.
    """

    def __init__(self, sequence, event, index, start_time, delta_time, previous_delta_time, effective_bpm):
        self.sequence = sequence
        self.event = event
        self.kind = event.kind
        self.index = index
        self.start_time = start_time
        self.delta_time = delta_time
        self.previous_delta_time = previous_delta_time
        self.effective_bpm = effective_bpm
        self.mono_index = -1
        self.note_index = -1

        self.rhythm = None
        self.even_run = None
        self.even_pattern = None
        self.colour_run = None

    def __repr__(self):
        return f"DifficultyObject(index={self.index}, start_time={self.start_time}, kind={self.kind.name})"

    @property
    def interval(self):
        return self.delta_time

    @staticmethod
    def _lookup(objects, position):
        if 0 <= position < len(objects):
            return objects[position]
        return None

    def previous(self, backwards_index=0):
        return self._lookup(self.sequence.objects, self.index - (backwards_index + 1))

    def next(self, forwards_index=0):
        return self._lookup(self.sequence.objects, self.index + (forwards_index + 1))

    def previous_mono(self, backwards_index=0):
        if self.mono_index < 0:
            return None
        return self._lookup(self.sequence.mono(self.kind), self.mono_index - (backwards_index + 1))

    def previous_note(self, backwards_index=0):
        if self.note_index < 0:
            return None
        return self._lookup(self.sequence.notes, self.note_index - (backwards_index + 1))

    def next_note(self, forwards_index=0):
        if self.note_index < 0:
            return None
        return self._lookup(self.sequence.notes, self.note_index + (forwards_index + 1))


@dataclass
class ObjectSequence:
    clock_rate: float = 1.0
    objects: list = field(default_factory=list)
    centre: list = field(default_factory=list)
    rim: list = field(default_factory=list)
    notes: list = field(default_factory=list)

    def __len__(self):
        return len(self.objects)

    def mono(self, kind):
        if kind is HitKind.CENTRE:
            return self.centre
        if kind is HitKind.RIM:
            return self.rim
        return []

    def append(self, obj):
        self.objects.append(obj)
        if obj.kind.is_note:
            same_kind = self.mono(obj.kind)
            obj.mono_index = len(same_kind)
            same_kind.append(obj)
            obj.note_index = len(self.notes)
            self.notes.append(obj)


# -----Start of Helper methods--------

def _segment_at(segments, segment_times, time):
    if not segments:
        return None
    position = bisect.bisect_right(segment_times, time) - 1
    return segments[max(position, 0)]


def effective_bpm(event, segment, clock_rate, slider_multiplier):
    """Scroll speed of an event expressed as a tempo, including the global and local velocity."""
    if segment is None:
        return None
    velocity = event.slider_velocity if event.slider_velocity is not None else segment.slider_velocity
    global_velocity = slider_multiplier / params.NEUTRAL_SLIDER_MULTIPLIER
    return segment.bpm * clock_rate * global_velocity * velocity

# -----End of Helper methods--------


def create_difficulty_objects(beatmap, clock_rate=1.0):
    """
    Build the ordered difficulty objects of a beatmap.

    The first two events only provide rhythm context, so fewer than three events
    yields an empty sequence. Times are divided by the clock rate.
    """
    if clock_rate <= 0:
        raise ValueError(f"Clock rate must be positive, got {clock_rate}")

    sequence = ObjectSequence(clock_rate=clock_rate)
    events = list(beatmap.hit_events)
    if len(events) < 3:
        return sequence

    if any(later.start_time < earlier.start_time for earlier, later in zip(events, events[1:])):
        logger.warning("Hit events are not ordered by start time; sorting them")
        events.sort(key=lambda e: e.start_time)

    segments = sorted(beatmap.timing_segments, key=lambda s: s.time)
    segment_times = [s.time for s in segments]

    for i in range(2, len(events)):
        event, last, last_last = events[i], events[i - 1], events[i - 2]
        segment = _segment_at(segments, segment_times, event.start_time)
        sequence.append(DifficultyObject(
            sequence,
            event,
            index=len(sequence.objects),
            start_time=event.start_time / clock_rate,
            delta_time=(event.start_time - last.start_time) / clock_rate,
            previous_delta_time=(last.start_time - last_last.start_time) / clock_rate,
            effective_bpm=effective_bpm(event, segment, clock_rate, beatmap.slider_multiplier),
        ))

    logger.debug("Created %d difficulty objects (%d notes) at rate %.2f",
                 len(sequence.objects), len(sequence.notes), clock_rate)
    return sequence
