import requests
from typing import Optional


class SyncClient:
    """Simple REST client for the Sync API."""

    def __init__(self, base_url: str = "http://localhost:8000", session=None) -> None:
        self.base_url = base_url.rstrip("/")
        self.http = session or requests

    def _get(self, path: str, **params):
        resp = self.http.get(f"{self.base_url}{path}", params=params)
        resp.raise_for_status()
        return resp.json()

    def _post(self, path: str, json=None, **params):
        resp = self.http.post(f"{self.base_url}{path}", params=params, json=json)
        resp.raise_for_status()
        return resp.json()

    def mets(self, name: str, duration_based: bool = False) -> float:
        return self._get("/mets", name=name, duration_based=duration_based)["mets"]

    def add_custom_met(self, keys: list[str], mets: float) -> dict:
        return self._post("/mets/custom", keys="|".join(keys), mets=mets)

    def pace(self, name: str, difficulty: str = "normal", equipment: str = "other") -> dict:
        return self._get("/pace", name=name, difficulty=difficulty, equipment=equipment)

    def record_pace(self, name: str, reps: int, elapsed_seconds: int, rest_seconds: int = 0) -> dict:
        return self._post(
            "/pace/record",
            name=name,
            reps=reps,
            elapsed_seconds=elapsed_seconds,
            rest_seconds=rest_seconds,
        )

    def set_goal(self, goal: str) -> str:
        return self._post("/pace/goal", goal=goal)["goal"]

    def list_sessions(self, **params: str):
        return self._get("/sessions", **params)

    def get_session(self, session_id: int) -> dict:
        return self._get(f"/sessions/{session_id}")

    def save_completion(
        self,
        day: dict,
        elapsed_seconds: int,
        completed_exercise_indices: list[int],
        set_logs: Optional[list[dict]] = None,
        feedback: Optional[str] = None,
        is_full_completion: bool = True,
    ) -> int:
        payload = {
            "day": day,
            "elapsed_seconds": elapsed_seconds,
            "completed_exercise_indices": completed_exercise_indices,
            "set_logs": set_logs or [],
            "feedback": feedback,
            "is_full_completion": is_full_completion,
        }
        return self._post("/sessions", json=payload)["id"]

    def save_manual_entry(self, name: str, session_date: str, sets: list[tuple[str, str]]) -> int:
        payload = {
            "name": name,
            "session_date": session_date,
            "sets": [{"weight": w, "reps": r} for w, r in sets],
        }
        return self._post("/sessions/manual", json=payload)["id"]

    def start_live(self, day: dict) -> dict:
        return self._post("/live", json=day)

    def live_action(self, live_id: int, action: str) -> dict:
        return self._post(f"/live/{live_id}/{action}")

    def discard_live(self, live_id: int) -> None:
        resp = self.http.delete(f"{self.base_url}/live/{live_id}")
        resp.raise_for_status()

    def favorites(self) -> list[str]:
        return self._get("/favorites")

    def toggle_favorite(self, name: str) -> bool:
        return self._post("/favorites/toggle", name=name)["favorite"]

    def log_body_weight(self, weight: float, date: Optional[str] = None) -> int:
        params = {"weight": weight}
        if date:
            params["date"] = date
        return self._post("/body_weight", **params)["id"]

    def weekly_burn(self, offset: int = 0) -> list[dict]:
        return self._get("/weekly_burn", offset=offset)
