from __future__ import annotations

import math
import time
from dataclasses import dataclass, replace
from enum import Enum

from loguru import logger

from algorithms import ExerciseParser
from models import DaySchedule, PlanExercise, SetInfo, SetLog
from pace_service import Difficulty, PaceService, infer_equipment

DEFAULT_REST_SECONDS = 30
REST_EXTENSION_SECONDS = 20


class Phase(Enum):
    ACTIVE = "active"
    RESTING = "resting"
    FINISHED = "finished"


@dataclass(frozen=True)
class SessionState:
    """Snapshot of a running workout.

    While resting, the cursor already points at the upcoming set.
    """

    phase: Phase = Phase.ACTIVE
    exercise_index: int = 0
    set_index: int = 0
    remaining: int = 0
    running: bool = False
    elapsed: int = 0
    completed_exercise_indices: tuple[int, ...] = ()
    set_logs: tuple[SetLog, ...] = ()
    set_started_at: float | None = None
    is_full_completion: bool = False

    @property
    def is_finished(self) -> bool:
        return self.phase is Phase.FINISHED

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "exercise_index": self.exercise_index,
            "set_index": self.set_index,
            "remaining": self.remaining,
            "running": self.running,
            "elapsed": self.elapsed,
            "completed_exercise_indices": list(self.completed_exercise_indices),
            "set_logs": [
                {
                    "exercise_index": log.exercise_index,
                    "set_index": log.set_index,
                    "weight_kg": log.weight_kg,
                    "reps": log.reps,
                }
                for log in self.set_logs
            ],
            "is_full_completion": self.is_full_completion,
        }


def _now(now: float | None) -> float:
    return time.time() if now is None else now


class WorkoutSessionMachine:
    """Set and rest cycle over the exercises of one planned day.

    Every transition takes a state and returns a new one. A finished
    state is terminal. When a pace service is given, completed rep-based
    sets feed their wall-clock duration into its learner.
    """

    def __init__(
        self,
        day: DaySchedule,
        pace: PaceService | None = None,
        rest_seconds: int = DEFAULT_REST_SECONDS,
    ) -> None:
        self.day = day
        self.pace = pace
        self.rest_seconds = rest_seconds

    @property
    def exercises(self) -> tuple[PlanExercise, ...]:
        return self.day.exercises

    def exercise_at(self, index: int) -> PlanExercise | None:
        if 0 <= index < len(self.exercises):
            return self.exercises[index]
        return None

    def current_exercise(self, state: SessionState) -> PlanExercise | None:
        return self.exercise_at(state.exercise_index)

    def is_duration_based(self, state: SessionState) -> bool:
        ex = self.current_exercise(state)
        return ex is not None and ex.is_duration_based

    @staticmethod
    def workout_duration(ex: PlanExercise) -> int:
        return ExerciseParser.workout_duration(ex.duration)

    def _enter_active(
        self, state: SessionState, exercise_index: int, set_index: int, now: float | None
    ) -> SessionState:
        ex = self.exercise_at(exercise_index)
        timed = ex is not None and ex.is_duration_based
        return replace(
            state,
            phase=Phase.ACTIVE,
            exercise_index=exercise_index,
            set_index=set_index,
            remaining=self.workout_duration(ex) if timed else 0,
            running=False,
            set_started_at=None if timed else _now(now),
        )

    def _advance(self, exercise_index: int, set_index: int) -> tuple[int, int] | None:
        ex = self.exercise_at(exercise_index)
        if ex is not None and set_index + 1 < ex.total_sets:
            return exercise_index, set_index + 1
        if exercise_index + 1 >= len(self.exercises):
            return None
        return exercise_index + 1, 0

    def _log_for(self, state: SessionState) -> SetLog | None:
        ex = self.current_exercise(state)
        if ex is None:
            return None
        return SetLog(
            exercise_index=state.exercise_index,
            set_index=state.set_index + 1,
            weight_kg=ExerciseParser.parse_weight(ex.weight),
            reps=ExerciseParser.parse_reps(ex.reps),
        )

    def _finish(self, state: SessionState, full: bool) -> SessionState:
        logger.info(
            f"Workout {self.day.day!r} finished after {state.elapsed}s "
            f"({len(state.completed_exercise_indices)}/{len(self.exercises)} exercises)"
        )
        return replace(
            state,
            phase=Phase.FINISHED,
            running=False,
            remaining=0,
            set_started_at=None,
            is_full_completion=full,
        )

    def start(self, now: float | None = None) -> SessionState:
        state = SessionState()
        if not self.exercises:
            return self._finish(state, True)
        return self._enter_active(state, 0, 0, now)

    def complete_set(self, state: SessionState, now: float | None = None) -> SessionState:
        if state.is_finished:
            return state
        ex = self.current_exercise(state)
        log = self._log_for(state)
        if ex is None or log is None:
            return state
        logs = state.set_logs + (log,)
        is_last_set = state.set_index + 1 >= ex.total_sets
        is_last_exercise = state.exercise_index >= len(self.exercises) - 1
        completed = state.completed_exercise_indices
        if is_last_set and state.exercise_index not in completed:
            completed = completed + (state.exercise_index,)
        self._learn_pace(ex, log, state, now)
        state = replace(state, set_logs=logs, completed_exercise_indices=completed)
        if is_last_set and is_last_exercise:
            return self._finish(state, True)
        next_ei, next_si = self._advance(state.exercise_index, state.set_index)
        logger.debug(f"Set {log.set_index} of {ex.name!r} done; resting {self.rest_seconds}s")
        return replace(
            state,
            phase=Phase.RESTING,
            exercise_index=next_ei,
            set_index=next_si,
            remaining=self.rest_seconds,
            running=True,
            set_started_at=None,
        )

    def skip(self, state: SessionState, now: float | None = None) -> SessionState:
        if state.is_finished:
            return state
        if state.phase is Phase.RESTING:
            return self._enter_active(state, state.exercise_index, state.set_index, now)
        log = self._log_for(state)
        if log is not None:
            state = replace(state, set_logs=state.set_logs + (log,))
        nxt = self._advance(state.exercise_index, state.set_index)
        if nxt is None:
            full = len(state.completed_exercise_indices) == len(self.exercises)
            return self._finish(state, full)
        return self._enter_active(state, nxt[0], nxt[1], now)

    def previous(self, state: SessionState, now: float | None = None) -> SessionState:
        if state.is_finished:
            return state
        if state.exercise_index == 0 and state.set_index == 0:
            return state
        if state.set_index > 0:
            ei, si = state.exercise_index, state.set_index - 1
        else:
            ei = state.exercise_index - 1
            prev = self.exercise_at(ei)
            si = max(0, prev.total_sets - 1) if prev is not None else 0
        return self._enter_active(state, ei, si, now)

    def restart(self, state: SessionState, now: float | None = None) -> SessionState:
        if not self.exercises:
            return state
        fresh = replace(
            state,
            elapsed=0,
            completed_exercise_indices=(),
            set_logs=(),
            is_full_completion=False,
        )
        return self._enter_active(fresh, 0, 0, now)

    def toggle(self, state: SessionState) -> SessionState:
        if state.is_finished:
            return state
        return replace(state, running=not state.running)

    def extend_rest(self, state: SessionState, seconds: int = REST_EXTENSION_SECONDS) -> SessionState:
        if state.phase is not Phase.RESTING:
            return state
        return replace(state, remaining=state.remaining + seconds)

    def tick(self, state: SessionState, now: float | None = None) -> SessionState:
        """Advance one second of wall-clock time."""
        if state.is_finished or not state.running:
            return state
        state = replace(state, elapsed=state.elapsed + 1)
        if state.remaining <= 0:
            if state.phase is Phase.ACTIVE and self.is_duration_based(state):
                return self.complete_set(state, now)
            if state.phase is Phase.RESTING:
                return self.skip(state, now)
            return state
        return replace(state, remaining=state.remaining - 1)

    def _learn_pace(
        self, ex: PlanExercise, log: SetLog, state: SessionState, now: float | None
    ) -> None:
        if self.pace is None or ex.is_duration_based or state.set_started_at is None:
            return
        spent = int(max(0.0, _now(now) - state.set_started_at))
        if spent <= 0:
            return
        self.pace.record(ex.name, log.reps, spent, 0)

    def _set_info(self, exercise_index: int, set_index: int) -> SetInfo | None:
        ex = self.exercise_at(exercise_index)
        if ex is None:
            return None
        total = ex.total_sets
        return SetInfo(ex.name, min(set_index + 1, max(1, total)), total, ex.workload_text)

    def current_set_info(self, state: SessionState) -> SetInfo | None:
        return self._set_info(state.exercise_index, state.set_index)

    def next_set_info(self, state: SessionState) -> SetInfo | None:
        nxt = self._advance(state.exercise_index, state.set_index)
        if nxt is None:
            return None
        return self._set_info(*nxt)

    def progress_percent(self, state: SessionState) -> int:
        if not self.exercises:
            return 0
        total = sum(ex.total_sets for ex in self.exercises)
        done_before = sum(ex.total_sets for ex in self.exercises[: state.exercise_index])
        ex = self.current_exercise(state)
        current = min(state.set_index, ex.total_sets) if ex is not None else 0
        percent = int((done_before + current) / max(1, total) * 100)
        return max(0, min(100, percent))

    def remaining_exercises(self, state: SessionState) -> int:
        return max(0, len(self.exercises) - state.exercise_index)

    def standby_notes(self, state: SessionState) -> list[str] | None:
        ex = self.current_exercise(state)
        if ex is None:
            return None
        return ExerciseParser.split_notes(ex.notes) or None

    @staticmethod
    def set_elapsed_seconds(state: SessionState, now: float | None = None) -> int:
        if state.set_started_at is None:
            return 0
        return max(0, int(_now(now) - state.set_started_at))

    def estimated_seconds_for_rep_set(self, state: SessionState) -> int | None:
        """Expected length of the current rep-based set from the learned pace."""
        ex = self.current_exercise(state)
        if ex is None or self.pace is None:
            return None
        reps = ExerciseParser.parse_reps(ex.reps)
        if reps <= 0:
            return None
        profile = self.pace.pace(
            ex.name,
            difficulty=Difficulty.NORMAL,
            equipment=infer_equipment(ex.name, ex.weight),
        )
        return int(math.floor(reps * profile.seconds_per_rep + 0.5))

    def suggested_rest(self) -> int:
        return self.rest_seconds
