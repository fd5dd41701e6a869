import math
from typing import Iterable, Protocol

from .exercise_parser import ExerciseParser


class ExerciseLike(Protocol):
    sets: str
    reps: str
    duration: str


class WorkoutCalculations:
    """Duration and calorie estimates for planned workouts."""

    SECONDS_PER_REP: float = 2.5
    REST_BETWEEN_SETS: int = 60
    SETUP_SECONDS: int = 10
    MINUTES_BETWEEN_EXERCISES: int = 2
    DEFAULT_MINUTES_PER_SET: int = 3
    KCAL_PER_MINUTE: int = 5
    MET_CORRECTION: float = 1.05
    EMPTY_MARK = "−"

    @classmethod
    def estimated_duration(cls, exercises: Iterable[ExerciseLike]) -> int:
        """Return the estimated workout length in whole minutes (at least 1).

        Duration-based exercises use their duration per set, rep-based ones
        ``reps * 2.5`` seconds per set. One minute of rest is added between
        sets and two minutes between exercises.
        """
        items = list(exercises)
        total = 0
        for index, ex in enumerate(items):
            sets = ExerciseParser.extract_sets(ex.sets)
            if ex.duration and ex.duration != cls.EMPTY_MARK:
                seconds = ExerciseParser.parse_duration_to_seconds(ex.duration)
                total += ((seconds + 59) // 60) * sets
                if sets > 1:
                    total += sets - 1
            elif ex.reps and ex.reps != cls.EMPTY_MARK:
                reps = ExerciseParser.first_int(ex.reps)
                if reps is not None:
                    per_set = int(reps * cls.SECONDS_PER_REP)
                    total += (per_set * sets + 59) // 60
                    if sets > 1:
                        total += sets - 1
                else:
                    total += cls.DEFAULT_MINUTES_PER_SET * sets
            else:
                total += cls.DEFAULT_MINUTES_PER_SET * sets
            if index < len(items) - 1:
                total += cls.MINUTES_BETWEEN_EXERCISES
        return max(total, 1)

    @classmethod
    def estimated_calories(cls, duration_minutes: int) -> int:
        """Rough kcal for ``duration_minutes`` of moderate work."""
        return duration_minutes * cls.KCAL_PER_MINUTE

    @classmethod
    def calories_from_mets(cls, mets: float, weight_kg: float, duration_minutes: float) -> int:
        """Return ``mets * kg * hours * 1.05`` rounded to whole kcal."""
        return cls.round_kcal(cls.kcal(mets, weight_kg, duration_minutes * 60))

    @classmethod
    def kcal(cls, mets: float, weight_kg: float, seconds: float) -> float:
        return cls.MET_CORRECTION * mets * weight_kg * (seconds / 3600.0)

    @staticmethod
    def round_kcal(value: float) -> int:
        """Round half up and never go below zero."""
        return max(0, int(math.floor(value + 0.5)))

    @classmethod
    def estimated_seconds(cls, sets: int, reps: int) -> int:
        """Seconds for ``sets`` rep-based sets including rest and setup."""
        work = int(sets * reps * cls.SECONDS_PER_REP)
        rest = (sets - 1) * cls.REST_BETWEEN_SETS
        return work + rest + cls.SETUP_SECONDS

    @staticmethod
    def format_time(seconds: int) -> str:
        seconds = max(0, int(seconds))
        return f"{seconds // 60:02d}:{seconds % 60:02d}"
