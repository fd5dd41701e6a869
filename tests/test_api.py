import os
import sys
import unittest
from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from rest_api import SyncAPI


DAY = {
    "day": "月曜日",
    "exercises": [
        {"name": "Barbell Squat", "sets": "1", "reps": "10", "weight": "60kg"},
        {"name": "Plank", "sets": "1", "duration": "30秒", "notes": "腰を落とさない"},
    ],
}


class APITestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_api.db"
        self.yaml_path = "test_api.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)
        self.api = SyncAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.client = TestClient(self.api.app)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_mets(self) -> None:
        data = self.client.get("/mets", params={"name": "Squat"}).json()
        self.assertEqual(data["mets"], 5.0)
        self.assertIn("squat", data["matched"]["keys"])
        data = self.client.get("/mets", params={"name": "zzqx"}).json()
        self.assertEqual(data["mets"], 3.8)
        self.assertIsNone(data["matched"])
        data = self.client.get("/mets", params={"name": "zzqx", "duration_based": True}).json()
        self.assertEqual(data["mets"], 6.0)

    def test_custom_mets(self) -> None:
        response = self.client.post("/mets/custom", params={"keys": "zzqx|foo", "mets": 9.5})
        self.assertEqual(response.json(), {"keys": ["zzqx", "foo"], "mets": 9.5})
        self.assertEqual(self.client.get("/mets", params={"name": "ZZQX"}).json()["mets"], 9.5)
        self.assertEqual(len(self.client.get("/mets/custom").json()), 1)
        response = self.client.post("/mets/custom", params={"keys": "bar", "mets": -1})
        self.assertEqual(response.status_code, 400)
        self.client.delete("/mets/custom")
        self.assertEqual(self.client.get("/mets/custom").json(), [])

    def test_pace(self) -> None:
        data = self.client.get("/pace", params={"name": "Barbell Squat"}).json()
        self.assertEqual(data["category"], "squat")
        self.assertAlmostEqual(data["seconds_per_rep"], 4.5)
        self.assertEqual(data["rest_seconds"], 120)
        data = self.client.get(
            "/pace", params={"name": "Barbell Squat", "ecc": 3, "pause": 1, "con": 2}
        ).json()
        self.assertAlmostEqual(data["seconds_per_rep"], 6.0)
        response = self.client.get("/pace", params={"name": "Squat", "difficulty": "brutal"})
        self.assertEqual(response.status_code, 400)

        data = self.client.post(
            "/pace/record",
            params={"name": "Squat", "reps": 10, "elapsed_seconds": 60, "rest_seconds": 20},
        ).json()
        self.assertEqual(data["category"], "squat")
        self.assertAlmostEqual(data["learned"], 4.35)

    def test_goal(self) -> None:
        self.assertEqual(self.client.get("/pace/goal").json(), {"goal": "maintain"})
        self.assertEqual(self.client.post("/pace/goal", params={"goal": "loseFat"}).json(), {"goal": "loseFat"})
        self.assertEqual(self.client.post("/pace/goal", params={"goal": "nap"}).status_code, 400)
        self.client.post("/settings/goal_type", params={"value": "bulkUp"})
        self.assertEqual(self.client.get("/pace/goal").json(), {"goal": "bulkUp"})

    def test_sessions(self) -> None:
        payload = {
            "day": DAY,
            "elapsed_seconds": 600,
            "completed_exercise_indices": [0, 1],
            "set_logs": [{"exercise_index": 0, "set_index": 1, "weight_kg": 60, "reps": 10}],
            "feedback": "ちょうどいい",
        }
        estimate = self.client.post("/sessions/estimate", json=payload).json()
        response = self.client.post("/sessions", json=payload)
        self.assertEqual(response.status_code, 200)
        sid = response.json()["id"]

        sessions = self.client.get("/sessions").json()
        self.assertEqual(len(sessions), 1)
        self.assertEqual(sessions[0]["calories_kcal"], estimate["calories"])

        detail = self.client.get(f"/sessions/{sid}").json()
        self.assertEqual(detail["exercises"][0]["sets"][0]["weight_kg"], 60.0)
        self.assertEqual(self.client.get("/sessions/999").status_code, 404)

        self.assertEqual(self.client.delete(f"/sessions/{sid}").json(), {"status": "deleted"})
        self.assertEqual(self.client.delete(f"/sessions/{sid}").status_code, 404)

    def test_manual_entry(self) -> None:
        response = self.client.post(
            "/sessions/manual",
            json={"name": "Squat", "session_date": "2024-05-01", "sets": [{"weight": "60", "reps": "10"}]},
        )
        self.assertEqual(response.status_code, 200)
        response = self.client.post(
            "/sessions/manual", json={"name": " ", "session_date": "2024-05-01", "sets": []}
        )
        self.assertEqual(response.status_code, 400)

    def test_live_session(self) -> None:
        data = self.client.post("/live", params={"now": 0}, json=DAY).json()
        live_id = data["id"]
        self.assertEqual(data["state"]["phase"], "active")
        self.assertEqual(data["current"]["name"], "Barbell Squat")
        self.assertEqual(data["estimated_seconds"], 45)

        data = self.client.post(f"/live/{live_id}/complete", params={"now": 40}).json()
        self.assertEqual(data["state"]["phase"], "resting")
        self.assertEqual(data["state"]["remaining"], 30)
        self.assertAlmostEqual(self.api.pace.learned_pace("squat"), 4.35)

        data = self.client.post(f"/live/{live_id}/extend").json()
        self.assertEqual(data["state"]["remaining"], 50)
        data = self.client.post(f"/live/{live_id}/skip", params={"now": 41}).json()
        self.assertEqual(data["state"]["phase"], "active")
        self.assertEqual(data["state"]["remaining"], 30)
        self.assertEqual(data["standby_notes"], ["腰を落とさない"])

        self.assertEqual(self.client.post(f"/live/{live_id}/save").status_code, 400)
        self.assertEqual(self.client.post(f"/live/{live_id}/jump").status_code, 400)

        data = self.client.post(f"/live/{live_id}/complete", params={"now": 80}).json()
        self.assertEqual(data["state"]["phase"], "finished")
        self.assertTrue(data["state"]["is_full_completion"])
        sid = self.client.post(f"/live/{live_id}/save", params={"feedback": "きつい"}).json()["id"]
        self.assertEqual(len(self.client.get(f"/sessions/{sid}").json()["exercises"]), 2)
        self.assertEqual(self.client.get(f"/live/{live_id}").status_code, 404)

    def test_discard_live_session(self) -> None:
        live_id = self.client.post("/live", params={"now": 0}, json=DAY).json()["id"]
        self.assertEqual(self.client.delete(f"/live/{live_id}").status_code, 200)
        self.assertEqual(self.api.live, {})
        self.assertEqual(self.client.get(f"/live/{live_id}").status_code, 404)
        self.assertEqual(self.client.delete(f"/live/{live_id}").status_code, 404)

    def test_plans_and_progress(self) -> None:
        self.assertEqual(self.client.get("/plans/latest").status_code, 404)
        pid = self.client.post("/plans", params={"summary": "Week 1"}, json=[DAY]).json()["id"]
        latest = self.client.get("/plans/latest").json()
        self.assertEqual(latest["id"], pid)
        self.assertEqual(latest["plan"]["weekly_schedule"][0]["day"], "月曜日")
        self.client.post(
            "/sessions",
            json={"day": DAY, "elapsed_seconds": 300, "completed_exercise_indices": [0]},
        )
        progress = self.client.get(f"/plans/{pid}/progress").json()
        self.assertEqual(progress[0]["day_identifier"], "月曜日")
        self.assertTrue(progress[0]["is_completed"])

    def test_catalog_favorites_custom(self) -> None:
        wid = self.client.post(
            "/custom_workouts", params={"name": "Zumba", "duration_min": 30, "calories_kcal": 150}
        ).json()["id"]
        self.assertEqual(self.client.get("/custom_workouts").json()[0]["id"], wid)
        items = self.client.get("/workouts", params={"category": "カスタム"}).json()
        self.assertEqual([i["name"] for i in items], ["Zumba"])
        self.assertEqual(self.client.get("/workouts", params={"category": "bogus"}).status_code, 400)
        self.assertTrue(self.client.post("/favorites/toggle", params={"name": "Zumba"}).json()["favorite"])
        self.assertEqual(self.client.get("/favorites").json(), ["Zumba"])
        self.client.delete("/favorites/Zumba")
        self.assertEqual(self.client.get("/favorites").json(), [])
        self.client.delete(f"/custom_workouts/{wid}")
        self.assertEqual(self.client.get("/custom_workouts").json(), [])

    def test_body_weight_and_weekly_burn(self) -> None:
        self.assertEqual(self.client.get("/body_weight/current").json(), {"weight_kg": 60.0})
        self.client.post("/body_weight", params={"weight": 72.0, "date": "2024-05-13"})
        self.assertEqual(self.client.get("/body_weight/current").json(), {"weight_kg": 72.0})
        self.assertEqual(self.client.post("/body_weight", params={"weight": -1}).status_code, 400)
        self.assertEqual(len(self.client.get("/body_weight").json()), 1)

        week = self.client.get("/weekly_burn", params={"today": "2024-05-15"}).json()
        self.assertEqual(week[0]["date"], "2024-05-12")
        self.assertEqual(len(week), 7)
        self.assertEqual(self.client.get("/weekly_burn", params={"today": "soon"}).status_code, 400)

    def test_settings(self) -> None:
        self.assertEqual(self.client.get("/settings").json()["goal_type"], "maintain")
        response = self.client.post("/settings/rest_seconds", params={"value": "45"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.api.settings.get_int("rest_seconds", 0), 45)
        response = self.client.post("/settings/rest_seconds", params={"value": "0"})
        self.assertEqual(response.status_code, 400)
        response = self.client.post("/settings/rest_secs", params={"value": "45"})
        self.assertEqual(response.status_code, 404)
        self.assertNotIn("rest_secs", self.client.get("/settings").json())


if __name__ == "__main__":
    unittest.main()
