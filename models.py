from __future__ import annotations

from dataclasses import dataclass, field

from algorithms import ExerciseParser


@dataclass(frozen=True)
class PlanExercise:
    """One exercise of a planned day. Fields hold the plan's free text."""

    name: str
    sets: str = ""
    reps: str = ""
    weight: str = ""
    duration: str = ""
    notes: str = ""

    @property
    def is_duration_based(self) -> bool:
        return bool(self.duration.strip())

    @property
    def total_sets(self) -> int:
        return max(1, ExerciseParser.extract_sets(self.sets))

    @property
    def workload_text(self) -> str:
        work = self.duration if not self.reps else self.reps
        return work or "—"

    @classmethod
    def from_dict(cls, data: dict) -> "PlanExercise":
        return cls(
            name=str(data.get("name", "")),
            sets=str(data.get("sets", "") or ""),
            reps=str(data.get("reps", "") or ""),
            weight=str(data.get("weight", "") or ""),
            duration=str(data.get("duration", "") or ""),
            notes=str(data.get("notes", "") or ""),
        )


@dataclass(frozen=True)
class DaySchedule:
    day: str
    exercises: tuple[PlanExercise, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "DaySchedule":
        return cls(
            day=str(data.get("day", "")),
            exercises=tuple(PlanExercise.from_dict(e) for e in data.get("exercises", [])),
        )


@dataclass(frozen=True)
class SetLog:
    """A logged set. ``set_index`` starts at 1."""

    exercise_index: int
    set_index: int
    weight_kg: float
    reps: int


@dataclass(frozen=True)
class SetInfo:
    name: str
    set_now: int
    set_all: int
    workload_text: str


@dataclass
class WorkoutItem:
    """Catalog row shown when picking an exercise to log."""

    name: str
    calories: float
    display_unit: str
    mets: float
    tags: list[str] = field(default_factory=list)
    body_part: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "calories": round(self.calories, 2),
            "display_unit": self.display_unit,
            "mets": self.mets,
            "tags": list(self.tags),
            "body_part": self.body_part,
        }
