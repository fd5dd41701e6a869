import datetime
import itertools
from dataclasses import asdict
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Body
from pydantic import BaseModel

from db import (
    SettingsRepository,
    WorkoutSessionRepository,
    AsyncWorkoutSessionRepository,
    WorkoutProgressRepository,
    GeneratedPlanRepository,
    CustomWorkoutRepository,
    FavoriteExerciseRepository,
    BodyWeightRepository,
    CustomMETRepository,
)
from met_service import METValueService
from models import DaySchedule, SetLog
from pace_service import GOAL_KEY, Difficulty, Equipment, PaceService, Tempo
from record_service import RecordService, SessionSaveError
from settings_schema import SettingsSchema, validate_settings
from session_service import SessionState, WorkoutSessionMachine


class PlanExerciseIn(BaseModel):
    name: str
    sets: str = ""
    reps: str = ""
    weight: str = ""
    duration: str = ""
    notes: str = ""


class DayIn(BaseModel):
    day: str
    exercises: List[PlanExerciseIn] = []

    def to_schedule(self) -> DaySchedule:
        return DaySchedule.from_dict(self.model_dump())


class SetLogIn(BaseModel):
    exercise_index: int
    set_index: int
    weight_kg: float = 0.0
    reps: int = 0


class CompletionIn(BaseModel):
    day: DayIn
    elapsed_seconds: int
    completed_exercise_indices: List[int]
    set_logs: List[SetLogIn] = []
    feedback: Optional[str] = None
    is_full_completion: bool = True


class SetTextIn(BaseModel):
    weight: str = ""
    reps: str = ""


class ManualEntryIn(BaseModel):
    name: str
    session_date: str
    sets: List[SetTextIn]


class LiveSession:
    def __init__(self, day: DaySchedule, machine: WorkoutSessionMachine, state: SessionState) -> None:
        self.day = day
        self.machine = machine
        self.state = state


class SyncAPI:
    """Provides REST endpoints for workout sessions, MET lookup and pace learning."""

    def __init__(self, db_path: str = "sync.db", yaml_path: str = "settings.yaml") -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        self.sessions = WorkoutSessionRepository(db_path)
        self.async_sessions = AsyncWorkoutSessionRepository(db_path)
        self.progress = WorkoutProgressRepository(db_path)
        self.plans = GeneratedPlanRepository(db_path)
        self.custom_workouts = CustomWorkoutRepository(db_path)
        self.favorites = FavoriteExerciseRepository(db_path)
        self.body_weights = BodyWeightRepository(db_path)
        self.custom_mets = CustomMETRepository(db_path)
        self.mets = METValueService(repo=self.custom_mets)
        self.pace = PaceService(self.settings)
        self.records = RecordService(
            self.sessions,
            self.progress,
            self.plans,
            self.custom_workouts,
            self.favorites,
            self.body_weights,
            self.settings,
            self.mets,
            self.pace,
        )
        self.live: dict[int, LiveSession] = {}
        self._live_ids = itertools.count(1)
        self.app = FastAPI(
            title="Sync API",
            description="REST API for workout sessions, MET lookup and pace learning",
        )
        self._setup_routes()

    def _live_session(self, live_id: int) -> LiveSession:
        try:
            return self.live[live_id]
        except KeyError:
            raise HTTPException(status_code=404, detail="live session not found")

    def _live_payload(self, live_id: int, live: LiveSession, now: float | None = None) -> dict:
        machine, state = live.machine, live.state
        current = machine.current_set_info(state)
        upcoming = machine.next_set_info(state)
        return {
            "id": live_id,
            "state": state.to_dict(),
            "current": asdict(current) if current else None,
            "next": asdict(upcoming) if upcoming else None,
            "progress_percent": machine.progress_percent(state),
            "remaining_exercises": machine.remaining_exercises(state),
            "standby_notes": machine.standby_notes(state),
            "set_elapsed_seconds": machine.set_elapsed_seconds(state, now),
            "estimated_seconds": machine.estimated_seconds_for_rep_set(state),
        }

    def _setup_routes(self) -> None:
        @self.app.get("/health")
        def health():
            try:
                self.sessions.fetch_all_sessions()
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.get("/mets")
        def lookup_mets(name: str, duration_based: bool = False):
            met = self.records.met_for(name, duration_based)
            entry = self.mets.find(name)
            return {
                "name": name,
                "mets": met,
                "matched": entry.to_dict() if entry else None,
            }

        @self.app.get("/mets/custom")
        def list_custom_mets():
            return [e.to_dict() for e in reversed(self.mets.custom)]

        @self.app.post("/mets/custom")
        def add_custom_met(keys: str, mets: float):
            try:
                entry = self.mets.register_custom(keys.split("|"), mets)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return entry.to_dict()

        @self.app.delete("/mets/custom")
        def reset_custom_mets():
            self.mets.reset_custom()
            return {"status": "deleted"}

        @self.app.get("/pace")
        def get_pace(
            name: str,
            difficulty: str = "normal",
            equipment: str = "other",
            ecc: float | None = None,
            pause: float = 0.0,
            con: float | None = None,
            top: float = 0.0,
        ):
            try:
                diff = Difficulty(difficulty)
                equip = Equipment(equipment)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            tempo = None
            if ecc is not None and con is not None:
                tempo = Tempo(ecc, pause, con, top)
            profile = self.pace.pace(name, diff, equip, tempo)
            data = profile.to_dict()
            data["category"] = self.pace.lexicon.category(name)
            return data

        @self.app.post("/pace/record")
        def record_pace(name: str, reps: int, elapsed_seconds: int, rest_seconds: int = 0):
            self.pace.record(name, reps, elapsed_seconds, rest_seconds)
            cat = self.pace.lexicon.category(name)
            return {"category": cat, "learned": self.pace.learned_pace(cat)}

        @self.app.get("/pace/goal")
        def get_goal():
            return {"goal": self.pace.current_goal.value}

        @self.app.post("/pace/goal")
        def set_goal(goal: str):
            if not self.pace.set_user_goal_raw(goal):
                raise HTTPException(status_code=400, detail=f"unknown goal: {goal}")
            return {"goal": self.pace.current_goal.value}

        @self.app.get("/sessions")
        async def list_sessions(
            start_date: str = None,
            end_date: str = None,
            sort_order: str = "desc",
        ):
            rows = await self.async_sessions.fetch_all_sessions(
                start_date, end_date, sort_order.lower() != "asc"
            )
            return [
                {
                    "id": sid,
                    "user_id": user,
                    "name": name,
                    "session_date": date,
                    "duration_seconds": duration,
                    "calories_kcal": kcal,
                }
                for sid, user, name, date, duration, kcal in rows
            ]

        @self.app.get("/sessions/{session_id}")
        def get_session(session_id: int):
            try:
                return self.sessions.fetch_detail(session_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @self.app.delete("/sessions/{session_id}")
        def delete_session(session_id: int):
            try:
                self.sessions.delete(session_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return {"status": "deleted"}

        @self.app.post("/sessions/estimate")
        def estimate_calories(data: CompletionIn):
            day = data.day.to_schedule()
            kcal = self.records.estimate_plan_calories(
                day, data.completed_exercise_indices, data.elapsed_seconds
            )
            return {"calories": kcal}

        @self.app.post("/sessions")
        def save_completion(data: CompletionIn):
            day = data.day.to_schedule()
            logs = [SetLog(**log.model_dump()) for log in data.set_logs]
            try:
                sid = self.records.save_plan_completion(
                    day,
                    data.elapsed_seconds,
                    data.completed_exercise_indices,
                    logs,
                    feedback=data.feedback,
                    is_full_completion=data.is_full_completion,
                )
            except SessionSaveError as e:
                raise HTTPException(status_code=500, detail=str(e))
            return {"id": sid}

        @self.app.post("/sessions/manual")
        def save_manual(data: ManualEntryIn):
            try:
                sid = self.records.save_manual_entry(
                    data.name,
                    data.session_date,
                    [(s.weight, s.reps) for s in data.sets],
                )
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except SessionSaveError as e:
                raise HTTPException(status_code=500, detail=str(e))
            return {"id": sid}

        @self.app.post("/live")
        def start_live(day: DayIn, now: float | None = None):
            schedule = day.to_schedule()
            machine = WorkoutSessionMachine(
                schedule,
                self.pace,
                rest_seconds=self.settings.get_int("rest_seconds", 30),
            )
            live_id = next(self._live_ids)
            self.live[live_id] = LiveSession(schedule, machine, machine.start(now))
            return self._live_payload(live_id, self.live[live_id], now)

        @self.app.get("/live/{live_id}")
        def get_live(live_id: int, now: float | None = None):
            return self._live_payload(live_id, self._live_session(live_id), now)

        @self.app.post("/live/{live_id}/save")
        def save_live(live_id: int, feedback: str | None = None):
            live = self._live_session(live_id)
            try:
                sid = self.records.save_finished_state(live.day, live.state, feedback)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            except SessionSaveError as e:
                raise HTTPException(status_code=500, detail=str(e))
            del self.live[live_id]
            return {"id": sid}

        @self.app.delete("/live/{live_id}")
        def discard_live(live_id: int):
            self._live_session(live_id)
            del self.live[live_id]
            return {"status": "deleted"}

        @self.app.post("/live/{live_id}/{action}")
        def live_action(live_id: int, action: str, now: float | None = None):
            live = self._live_session(live_id)
            machine, state = live.machine, live.state
            if action == "complete":
                live.state = machine.complete_set(state, now)
            elif action == "skip":
                live.state = machine.skip(state, now)
            elif action == "previous":
                live.state = machine.previous(state, now)
            elif action == "restart":
                live.state = machine.restart(state, now)
            elif action == "toggle":
                live.state = machine.toggle(state)
            elif action == "tick":
                live.state = machine.tick(state, now)
            elif action == "extend":
                live.state = machine.extend_rest(state)
            else:
                raise HTTPException(status_code=400, detail=f"unknown action: {action}")
            return self._live_payload(live_id, live, now)

        @self.app.get("/workouts")
        def browse_workouts(category: str = "すべて", search: str = ""):
            try:
                items = self.records.browse(category, search)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return [i.to_dict() for i in items]

        @self.app.get("/favorites")
        def list_favorites():
            return self.favorites.fetch_all()

        @self.app.post("/favorites")
        def add_favorite(name: str):
            self.favorites.add(name)
            return {"status": "added"}

        @self.app.post("/favorites/toggle")
        def toggle_favorite(name: str):
            return {"name": name, "favorite": self.records.toggle_favorite(name)}

        @self.app.delete("/favorites/{name}")
        def remove_favorite(name: str):
            self.favorites.remove(name)
            return {"status": "deleted"}

        @self.app.get("/custom_workouts")
        def list_custom_workouts():
            return self.custom_workouts.fetch_all_workouts()

        @self.app.post("/custom_workouts")
        def create_custom_workout(name: str, duration_min: float, calories_kcal: int):
            try:
                wid = self.records.create_custom_workout(name, duration_min, calories_kcal)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": wid}

        @self.app.delete("/custom_workouts/{workout_id}")
        def delete_custom_workout(workout_id: int):
            self.custom_workouts.delete(workout_id)
            return {"status": "deleted"}

        @self.app.post("/body_weight")
        def log_body_weight(weight: float, date: str | None = None, unit: str | None = None):
            try:
                wid = self.records.log_body_weight(weight, date, unit)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"id": wid}

        @self.app.get("/body_weight")
        def body_weight_history(start_date: str = None, end_date: str = None):
            rows = self.body_weights.fetch_history(start_date, end_date)
            return [{"id": rid, "date": d, "weight": w} for rid, d, w in rows]

        @self.app.get("/body_weight/current")
        def current_body_weight():
            return {"weight_kg": self.records.current_weight_kg()}

        @self.app.post("/plans")
        def create_plan(
            summary: str,
            days: List[DayIn] = Body(...),
            daily_calories: int = 0,
            motivational_message: str = "",
        ):
            pid = self.plans.create(
                summary,
                {"weekly_schedule": [d.model_dump() for d in days]},
                daily_calories=daily_calories,
                motivational_message=motivational_message,
            )
            return {"id": pid}

        @self.app.get("/plans/latest")
        def latest_plan():
            plan = self.plans.fetch_latest()
            if plan is None:
                raise HTTPException(status_code=404, detail="no plan")
            return plan

        @self.app.get("/plans/{plan_id}/progress")
        def plan_progress(plan_id: int):
            return self.progress.fetch_for_plan(plan_id)

        @self.app.get("/weekly_burn")
        def weekly_burn(offset: int = 0, today: str | None = None):
            try:
                day = datetime.date.fromisoformat(today) if today else None
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return self.records.weekly_burn(offset, day)

        @self.app.get("/settings")
        def get_settings():
            return self.settings.all_settings()

        @self.app.post("/settings/{key}")
        def update_setting(key: str, value: str):
            if key not in SettingsSchema.model_fields:
                raise HTTPException(status_code=404, detail=f"unknown setting: {key}")
            try:
                validate_settings({key: value})
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            self.settings.set_text(key, value)
            if key == GOAL_KEY:
                self.pace.set_user_goal_raw(value)
            return {"status": "updated"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(SyncAPI().app)
