from dataclasses import dataclass
from typing import Optional

# Numeric ids used when attributes are stored as a flat id -> value map.
ATTRIB_ID_MAX_COMBO = 9
ATTRIB_ID_DIFFICULTY = 11
ATTRIB_ID_GREAT_HIT_WINDOW = 13
ATTRIB_ID_OK_HIT_WINDOW = 27
ATTRIB_ID_RHYTHM = 31
ATTRIB_ID_COLOUR = 33
ATTRIB_ID_STAMINA = 35
ATTRIB_ID_READING = 37
ATTRIB_ID_PEAK = 39


@dataclass(frozen=True)
class DifficultyAttributes:
    star_rating: float = 0.0
    rhythm_difficulty: float = 0.0
    colour_difficulty: float = 0.0
    stamina_difficulty: float = 0.0
    reading_difficulty: float = 0.0
    peak_difficulty: float = 0.0
    great_hit_window: float = 0.0
    ok_hit_window: float = 0.0
    max_combo: int = 0
    mods: tuple = ()

    def to_database_attributes(self):
        return {
            ATTRIB_ID_MAX_COMBO: float(self.max_combo),
            ATTRIB_ID_DIFFICULTY: self.star_rating,
            ATTRIB_ID_GREAT_HIT_WINDOW: self.great_hit_window,
            ATTRIB_ID_OK_HIT_WINDOW: self.ok_hit_window,
            ATTRIB_ID_RHYTHM: self.rhythm_difficulty,
            ATTRIB_ID_COLOUR: self.colour_difficulty,
            ATTRIB_ID_STAMINA: self.stamina_difficulty,
            ATTRIB_ID_READING: self.reading_difficulty,
            ATTRIB_ID_PEAK: self.peak_difficulty,
        }

    @classmethod
    def from_database_attributes(cls, values, mods=()):
        """Inverse of to_database_attributes. Mods are not stored in the map and are passed separately."""
        return cls(
            star_rating=values[ATTRIB_ID_DIFFICULTY],
            rhythm_difficulty=values[ATTRIB_ID_RHYTHM],
            colour_difficulty=values[ATTRIB_ID_COLOUR],
            stamina_difficulty=values[ATTRIB_ID_STAMINA],
            reading_difficulty=values[ATTRIB_ID_READING],
            peak_difficulty=values[ATTRIB_ID_PEAK],
            great_hit_window=values[ATTRIB_ID_GREAT_HIT_WINDOW],
            ok_hit_window=values[ATTRIB_ID_OK_HIT_WINDOW],
            max_combo=int(values[ATTRIB_ID_MAX_COMBO]),
            mods=tuple(mods),
        )


@dataclass(frozen=True)
class PerformanceAttributes:
    difficulty: float = 0.0
    accuracy: float = 0.0
    effective_miss_count: float = 0.0
    estimated_unstable_rate: Optional[float] = None
    deviation: Optional[float] = None
    total: float = 0.0
