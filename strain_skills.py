"""
Strain accumulation for the four taiko skills.

Each skill keeps a decaying strain which every difficulty object raises by its
evaluated difficulty. The map is cut into sections of SECTION_LENGTH ms and the
highest strain reached inside each section is kept as that section's peak.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

import difficulty_params as params
import evaluators

logger = logging.getLogger(__name__)


class SkillKind(Enum):
    RHYTHM = "rhythm"
    COLOUR = "colour"
    STAMINA = "stamina"
    READING = "reading"


class DecayPolicy(Enum):
    PER_NOTE = "per_note"
    TIME = "time"


@dataclass(frozen=True)
class SkillSpec:
    # evaluate(obj, state, great_hit_window) -> float
    evaluate: Callable
    multiplier: float
    decay: DecayPolicy
    decay_base: float
    make_state: Optional[Callable] = None


def _rhythm(obj, state, great_hit_window):
    return evaluators.evaluate_rhythm(obj, great_hit_window) * evaluators.pattern_complexity(obj)


def _colour(obj, state, great_hit_window):
    return evaluators.evaluate_colour(obj)


def _stamina(obj, state, great_hit_window):
    return evaluators.evaluate_stamina(obj, state)


def _reading(obj, state, great_hit_window):
    return evaluators.evaluate_reading(obj)


SKILL_TABLE = {
    SkillKind.RHYTHM: SkillSpec(_rhythm, params.RHYTHM_SKILL_MULTIPLIER,
                                DecayPolicy.PER_NOTE, params.RHYTHM_NOTE_DECAY),
    SkillKind.COLOUR: SkillSpec(_colour, params.COLOUR_SKILL_MULTIPLIER,
                                DecayPolicy.TIME, params.COLOUR_DECAY_BASE),
    SkillKind.STAMINA: SkillSpec(_stamina, params.STAMINA_SKILL_MULTIPLIER,
                                 DecayPolicy.TIME, params.STAMINA_DECAY_BASE,
                                 make_state=evaluators.FingerState),
    SkillKind.READING: SkillSpec(_reading, params.READING_SKILL_MULTIPLIER,
                                 DecayPolicy.TIME, params.READING_DECAY_BASE),
}


@dataclass
class StrainSkill:
    kind: SkillKind
    spec: SkillSpec
    state: object = None
    current_strain: float = 0.0
    section_end: Optional[float] = None
    section_peak: float = 0.0
    last_time: Optional[float] = None
    peaks: list = field(default_factory=list)


def create_skills(kinds=tuple(SkillKind)):
    """Fresh skills, one per kind. Skills hold per-beatmap state and must not be reused."""
    skills = {}
    for kind in kinds:
        spec = SKILL_TABLE[kind]
        state = spec.make_state() if spec.make_state is not None else None
        skills[kind] = StrainSkill(kind, spec, state)
    return skills


# -----Start of Helper methods--------

def decay_factor(spec, elapsed):
    if spec.decay is DecayPolicy.PER_NOTE:
        return spec.decay_base
    return spec.decay_base ** (elapsed / 1000)


def initial_section_strain(skill, time):
    """Strain carried into a new section starting at ``time``."""
    if skill.spec.decay is DecayPolicy.PER_NOTE or skill.last_time is None:
        return 0.0
    return skill.current_strain * decay_factor(skill.spec, time - skill.last_time)

# -----End of Helper methods--------


def process(skill, obj, great_hit_window):
    """Feed one difficulty object to a skill. Objects must arrive in time order."""
    if skill.section_end is None:
        skill.section_end = math.ceil(obj.start_time / params.SECTION_LENGTH) * params.SECTION_LENGTH

    while obj.start_time > skill.section_end:
        skill.peaks.append(skill.section_peak)
        skill.section_peak = initial_section_strain(skill, skill.section_end)
        skill.section_end += params.SECTION_LENGTH

    elapsed = obj.start_time - skill.last_time if skill.last_time is not None else 0.0
    difficulty = skill.spec.evaluate(obj, skill.state, great_hit_window)
    skill.current_strain = (skill.current_strain * decay_factor(skill.spec, elapsed)
                            + difficulty * skill.spec.multiplier)
    skill.last_time = obj.start_time
    skill.section_peak = max(skill.section_peak, skill.current_strain)


def strain_peaks(skill):
    """Saved section peaks followed by the peak of the still open section."""
    if skill.section_end is None:
        return []
    return skill.peaks + [skill.section_peak]


def process_all(sequence, great_hit_window, kinds=tuple(SkillKind)):
    skills = create_skills(kinds)
    for obj in sequence.objects:
        for skill in skills.values():
            process(skill, obj, great_hit_window)

    for kind, skill in skills.items():
        logger.debug("%s: %d sections, final strain %.4f",
                     kind.value, len(strain_peaks(skill)), skill.current_strain)
    return skills
