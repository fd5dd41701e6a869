from __future__ import annotations

import datetime
import sqlite3
from typing import Iterable

from loguru import logger

from algorithms import ExerciseParser, WeightConverter, WorkoutCalculations, week_dates
from db import (
    BodyWeightRepository,
    CustomWorkoutRepository,
    FavoriteExerciseRepository,
    GeneratedPlanRepository,
    SettingsRepository,
    WorkoutProgressRepository,
    WorkoutSessionRepository,
)
from met_service import BodyPartClassifier, METValueService
from models import DaySchedule, PlanExercise, SetLog, WorkoutItem
from pace_service import PaceService
from session_service import SessionState

DEFAULT_WEIGHT_KG = 60.0
MANUAL_ENTRY_WEIGHT_KG = 70.0
SECONDS_PER_REP_ESTIMATE = 3
DEFAULT_REPS = 10
RESTING_METS = 3.0
CUSTOM_BODY_PART = "カスタム"

ALL = "すべて"
HISTORY = "履歴"
CUSTOM = "カスタム"
FAVORITES = "お気に入り"
CATEGORIES = [ALL, HISTORY, CUSTOM, FAVORITES, "胸", "肩", "背中", "腕", "脚", "腹筋", "お尻", "有酸素", "スポーツ"]


class SessionSaveError(RuntimeError):
    """Raised when a workout could not be written to the database."""


class RecordService:
    """Calorie estimates and persistence of finished workouts."""

    def __init__(
        self,
        session_repo: WorkoutSessionRepository,
        progress_repo: WorkoutProgressRepository,
        plan_repo: GeneratedPlanRepository,
        custom_repo: CustomWorkoutRepository,
        favorite_repo: FavoriteExerciseRepository,
        body_weight_repo: BodyWeightRepository,
        settings_repo: SettingsRepository,
        mets: METValueService,
        pace: PaceService | None = None,
    ) -> None:
        self.sessions = session_repo
        self.progress = progress_repo
        self.plans = plan_repo
        self.custom = custom_repo
        self.favorites = favorite_repo
        self.body_weights = body_weight_repo
        self.settings = settings_repo
        self.mets = mets
        self.pace = pace

    def current_weight_kg(self, fallback: float = DEFAULT_WEIGHT_KG) -> float:
        latest = self.body_weights.fetch_latest_weight()
        if latest is not None and latest > 0:
            return latest
        stored = self.settings.get_float("body_weight", 0.0)
        return stored if stored > 0 else fallback

    def log_body_weight(self, weight: float, date: str | None = None, unit: str | None = None) -> int:
        """Log a body weight given in ``unit`` (the configured unit by default)."""
        unit = unit or self.settings.get_text("weight_unit", "kg")
        kg = WeightConverter.to_kg(weight, unit)
        day = date or datetime.date.today().isoformat()
        return self.body_weights.log(day, kg)

    def _met_defaults(self) -> tuple[float, float]:
        return (
            self.settings.get_float("default_resistance_mets", 3.8),
            self.settings.get_float("default_aerobic_mets", 6.0),
        )

    def met_for(self, name: str, is_duration_based: bool) -> float:
        resistance, aerobic = self._met_defaults()
        return self.mets.lookup(
            name,
            is_duration_based=is_duration_based,
            default_resistance=resistance,
            default_aerobic=aerobic,
        )

    @staticmethod
    def exercise_seconds(ex: PlanExercise) -> int:
        """Working seconds of a planned exercise: its duration, else 3 s per rep."""
        if ex.is_duration_based:
            return ExerciseParser.parse_duration_to_seconds(ex.duration.strip())
        reps = ExerciseParser.first_int(ex.reps)
        if reps is None:
            reps = DEFAULT_REPS
        return max(0, ex.total_sets * reps * SECONDS_PER_REP_ESTIMATE)

    def estimate_plan_calories(
        self,
        day: DaySchedule,
        completed_indices: Iterable[int],
        elapsed_seconds: int,
        weight_kg: float | None = None,
    ) -> int:
        weight = weight_kg if weight_kg is not None else self.current_weight_kg()
        total_seconds = 0
        total_kcal = 0.0
        for index in completed_indices:
            if not 0 <= index < len(day.exercises):
                continue
            ex = day.exercises[index]
            seconds = self.exercise_seconds(ex)
            total_seconds += seconds
            met = self.met_for(ex.name, ex.is_duration_based)
            total_kcal += WorkoutCalculations.kcal(met, weight, seconds)
        if total_seconds == 0:
            return WorkoutCalculations.round_kcal(
                WorkoutCalculations.kcal(RESTING_METS, weight, elapsed_seconds)
            )
        return WorkoutCalculations.round_kcal(total_kcal)

    def save_plan_completion(
        self,
        day: DaySchedule,
        elapsed_seconds: int,
        completed_indices: Iterable[int],
        set_logs: Iterable[SetLog] = (),
        feedback: str | None = None,
        is_full_completion: bool = True,
        session_date: str | None = None,
        user_id: str | None = None,
    ) -> int:
        """Store a finished plan day and mark its progress on the latest plan."""
        completed = [i for i in completed_indices if 0 <= i < len(day.exercises)]
        logs = list(set_logs)
        calories = self.estimate_plan_calories(day, completed, elapsed_seconds)
        exercises = []
        for index in completed:
            ex = day.exercises[index]
            mine = [log for log in logs if log.exercise_index == index]
            if mine:
                sets = [(log.set_index, log.weight_kg, log.reps, True) for log in mine]
            else:
                sets = [(i, 0.0, 0, True) for i in range(1, ex.total_sets + 1)]
            exercises.append((ex.name, sets))
        now = session_date or datetime.datetime.now().isoformat(timespec="seconds")
        user = user_id or self.settings.get_text("user_id", "current_user")
        try:
            latest = self.plans.fetch_latest()
            progress = None
            if latest is not None:
                progress = {
                    "plan_id": latest["id"],
                    "day_identifier": day.day,
                    "is_completed": is_full_completion,
                    "completed_at": now,
                    "elapsed_seconds": elapsed_seconds,
                    "estimated_calories": calories,
                    "difficulty_feedback": feedback,
                }
            session_id = self.sessions.create(
                day.day, now, elapsed_seconds, calories, exercises, user_id=user, progress=progress
            )
        except sqlite3.Error as e:
            logger.error(f"Failed to save workout session {day.day!r}: {e}")
            raise SessionSaveError(f"failed to save workout session: {e}") from e
        logger.info(
            f"Saved workout session {session_id} for {day.day!r}: {elapsed_seconds}s, {calories} kcal"
        )
        return session_id

    def save_finished_state(
        self, day: DaySchedule, state: SessionState, feedback: str | None = None
    ) -> int:
        if not state.is_finished:
            raise ValueError("workout is not finished")
        return self.save_plan_completion(
            day,
            state.elapsed,
            state.completed_exercise_indices,
            state.set_logs,
            feedback=feedback,
            is_full_completion=state.is_full_completion,
        )

    def save_manual_entry(
        self,
        name: str,
        session_date: str,
        sets: Iterable[tuple[str, str]],
        user_id: str | None = None,
    ) -> int:
        """Store a hand-entered exercise; ``sets`` holds ``(weight, reps)`` text pairs."""
        if not name.strip():
            raise ValueError("name must not be empty")
        rows = []
        total_reps = 0
        for index, (weight_text, reps_text) in enumerate(sets, start=1):
            weight = ExerciseParser.parse_weight(weight_text)
            reps = ExerciseParser.digits(reps_text) or 0
            total_reps += reps
            rows.append((index, weight, reps, True))
        seconds = total_reps * SECONDS_PER_REP_ESTIMATE
        met = self.met_for(name, False)
        calories = WorkoutCalculations.round_kcal(
            WorkoutCalculations.kcal(met, self.current_weight_kg(MANUAL_ENTRY_WEIGHT_KG), seconds)
        )
        user = user_id or self.settings.get_text("user_id", "current_user")
        try:
            session_id = self.sessions.create(
                name, session_date, seconds, calories, [(name, rows)], user_id=user
            )
        except sqlite3.Error as e:
            logger.error(f"Failed to save manual entry {name!r}: {e}")
            raise SessionSaveError(f"failed to save manual entry: {e}") from e
        logger.info(f"Saved manual entry {session_id} for {name!r}: {seconds}s, {calories} kcal")
        return session_id

    def catalog_items(self) -> list[WorkoutItem]:
        weight = self.current_weight_kg()
        items = []
        for entry in self.mets.all_entries():
            if not entry.keys:
                continue
            display_name = entry.keys[0]
            body_part = BodyPartClassifier.determine(entry.keys, entry.mets)
            if BodyPartClassifier.is_cardio(body_part):
                calories = entry.mets * weight * 0.167
                unit = "10分"
            else:
                spr = self.pace.pace(display_name).seconds_per_rep if self.pace else 3.0
                calories = (entry.mets * weight / 3600.0) * spr * 10.0
                unit = "10回"
            items.append(
                WorkoutItem(display_name, calories, unit, entry.mets, list(entry.keys), body_part)
            )
        return sorted(items, key=lambda i: i.name)

    def history_items(self) -> list[WorkoutItem]:
        weight = self.current_weight_kg()
        items = []
        for name in self.sessions.exercise_names():
            met = self.met_for(name, False)
            calories = (met * weight / 3600.0) * SECONDS_PER_REP_ESTIMATE * DEFAULT_REPS
            body_part = BodyPartClassifier.determine([name], met)
            items.append(WorkoutItem(name, calories, "10回", met, [name], body_part))
        return items

    def custom_item(self, custom: dict) -> WorkoutItem:
        weight = self.current_weight_kg()
        minutes = float(custom["duration_min"])
        calories = float(custom["calories_kcal"])
        hours = max(minutes / 60.0, 0.0001)
        mets = calories / (weight * hours) if weight > 0 and calories > 0 else 0.0
        return WorkoutItem(
            custom["name"],
            calories,
            f"{minutes:.0f}分",
            mets,
            list(custom.get("tags", [])),
            custom.get("body_part", CUSTOM_BODY_PART),
        )

    def custom_items(self) -> list[WorkoutItem]:
        return [self.custom_item(c) for c in self.custom.fetch_all_workouts()]

    def create_custom_workout(self, name: str, duration_min: float, calories_kcal: int) -> int:
        trimmed = name.strip()
        if not trimmed:
            raise ValueError("name must not be empty")
        if duration_min <= 0:
            raise ValueError("duration_min must be positive")
        if calories_kcal <= 0:
            raise ValueError("calories_kcal must be positive")
        workout_id = self.custom.add(
            trimmed,
            body_part=CUSTOM_BODY_PART,
            tags=[trimmed, CUSTOM_BODY_PART],
            duration_min=duration_min,
            calories_kcal=calories_kcal,
            user_id=self.settings.get_text("user_id", "current_user"),
        )
        logger.info(f"Created custom workout {workout_id} {trimmed!r}")
        return workout_id

    @staticmethod
    def _matches(item: WorkoutItem, keyword: str) -> bool:
        if not keyword:
            return True
        key = keyword.casefold()
        return key in item.name.casefold() or any(key in t.casefold() for t in item.tags)

    @staticmethod
    def _unique(items: Iterable[WorkoutItem]) -> list[WorkoutItem]:
        seen: set[str] = set()
        result = []
        for item in items:
            if item.name in seen:
                continue
            seen.add(item.name)
            result.append(item)
        return result

    def browse(self, category: str = ALL, search: str = "") -> list[WorkoutItem]:
        """Return the items listed under ``category`` that match ``search``."""
        keyword = search.strip()
        if category == HISTORY:
            items = self.history_items()
        elif category == CUSTOM:
            items = self.custom_items()
        elif category == ALL:
            items = self._unique(self.catalog_items() + self.custom_items())
        elif category == FAVORITES:
            names = set(self.favorites.fetch_all())
            pool = self._unique(self.catalog_items() + self.custom_items() + self.history_items())
            items = [i for i in pool if i.name in names]
        elif category in CATEGORIES:
            items = [i for i in self.catalog_items() if i.body_part == category]
        else:
            raise ValueError(f"unknown category: {category}")
        return [i for i in items if self._matches(i, keyword)]

    def toggle_favorite(self, name: str) -> bool:
        """Flip the favorite flag of ``name`` and return the new state."""
        if self.favorites.contains(name):
            self.favorites.remove(name)
            return False
        self.favorites.add(name)
        return True

    def weekly_burn(self, offset: int = 0, today: datetime.date | None = None) -> list[dict]:
        days = week_dates(offset, today)
        totals = self.sessions.daily_calories(days[0].isoformat(), days[-1].isoformat())
        return [{"date": d.isoformat(), "calories": totals.get(d.isoformat(), 0)} for d in days]
