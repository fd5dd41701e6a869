import os
import sys
import json
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig
from db import (
    BodyWeightRepository,
    CustomMETRepository,
    CustomWorkoutRepository,
    FavoriteExerciseRepository,
    GeneratedPlanRepository,
    SettingsRepository,
    WorkoutProgressRepository,
    WorkoutSessionRepository,
)


class DatabaseTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_db.db"
        self.yaml_path = "test_db.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def test_settings_defaults_and_yaml_sync(self) -> None:
        settings = SettingsRepository(self.db_path, self.yaml_path)
        self.assertEqual(settings.get_float("body_weight", 0.0), 60.0)
        self.assertEqual(settings.get_int("rest_seconds", 0), 30)
        self.assertEqual(settings.get_text("goal_type", ""), "maintain")
        settings.set_text("goal_type", "bulkUp")
        self.assertEqual(YamlConfig(self.yaml_path).load()["goal_type"], "bulkUp")

        data = YamlConfig(self.yaml_path).load()
        data["body_weight"] = 75.5
        YamlConfig(self.yaml_path).save(data)
        self.assertEqual(settings.get_float("body_weight", 0.0), 75.5)

        data["goal_type"] = "sleep"
        YamlConfig(self.yaml_path).save(data)
        with self.assertRaises(ValueError):
            settings.get_text("goal_type", "")

    def test_settings_typed_values(self) -> None:
        settings = SettingsRepository(self.db_path, self.yaml_path)
        settings.set_bool("sound", True)
        self.assertTrue(settings.get_bool("sound", False))
        self.assertFalse(settings.get_bool("missing", False))
        settings.set_int("rest_seconds", 45)
        self.assertEqual(settings.get_int("rest_seconds", 0), 45)
        self.assertIsNone(settings.get_json("nothing"))
        settings.set_json("pace.learned.v1", {"squat": 4.2, "curl": 2.9})
        self.assertEqual(settings.get_json("pace.learned.v1"), {"curl": 2.9, "squat": 4.2})
        reopened = SettingsRepository(self.db_path, self.yaml_path)
        self.assertEqual(reopened.get_json("pace.learned.v1"), {"curl": 2.9, "squat": 4.2})
        self.assertIn("goal_type", reopened.all_settings())

    def test_session_repository(self) -> None:
        repo = WorkoutSessionRepository(self.db_path)
        sid = repo.create(
            "月曜日",
            "2024-05-13T10:00:00",
            900,
            120,
            [("Squat", [(1, 60.0, 10, True), (2, 60.0, 8, True)]), ("Plank", [])],
        )
        detail = repo.fetch_detail(sid)
        self.assertEqual(detail["calories_kcal"], 120)
        self.assertEqual([e["name"] for e in detail["exercises"]], ["Squat", "Plank"])
        self.assertEqual(detail["exercises"][0]["sets"][1]["reps"], 8)
        self.assertEqual(repo.exercise_names(), ["Plank", "Squat"])

        csv_data = repo.export_session_csv(sid)
        self.assertTrue(csv_data.startswith("Exercise,Set,Weight,Reps,Completed"))
        self.assertIn("Squat,2,60.0,8,1", csv_data)
        self.assertEqual(json.loads(repo.export_session_json(sid))["name"], "月曜日")

        repo.delete(sid)
        self.assertEqual(repo.fetch_all_sessions(), [])
        self.assertEqual(repo.fetch_all("SELECT COUNT(*) FROM logged_sets;"), [(0,)])
        with self.assertRaises(ValueError):
            repo.fetch_detail(sid)
        with self.assertRaises(ValueError):
            repo.delete(sid)

    def test_plans_and_progress(self) -> None:
        plans = GeneratedPlanRepository(self.db_path)
        progress = WorkoutProgressRepository(self.db_path)
        self.assertIsNone(plans.fetch_latest())
        older = plans.create("A", {"weekly_schedule": []}, created_at="2024-01-01T00:00:00")
        newer = plans.create("B", [{"day": "月曜日"}], daily_calories=2000, created_at="2024-03-01T00:00:00")
        latest = plans.fetch_latest()
        self.assertEqual(latest["id"], newer)
        self.assertEqual(latest["plan"], [{"day": "月曜日"}])
        self.assertEqual([p[0] for p in plans.fetch_all_plans()], [newer, older])

        progress.upsert(newer, "月曜日", False, "2024-03-02T10:00:00", 600, 50, "きつい")
        progress.upsert(newer, "月曜日", True, "2024-03-03T10:00:00", 700, 60, None)
        row = progress.fetch(newer, "月曜日")
        self.assertTrue(row["is_completed"])
        self.assertEqual(row["elapsed_seconds"], 700)
        self.assertIsNone(progress.fetch(older, "月曜日"))

        plans.delete(newer)
        self.assertEqual(progress.fetch_for_plan(newer), [])
        with self.assertRaises(ValueError):
            plans.fetch_detail(newer)

    def test_small_repositories(self) -> None:
        favorites = FavoriteExerciseRepository(self.db_path)
        favorites.add("Squat")
        favorites.add("Squat")
        favorites.add("Bench")
        self.assertEqual(favorites.fetch_all(), ["Bench", "Squat"])
        favorites.remove("Squat")
        self.assertFalse(favorites.contains("Squat"))

        weights = BodyWeightRepository(self.db_path)
        with self.assertRaises(ValueError):
            weights.log("2024-01-01", 0)
        self.assertIsNone(weights.fetch_latest_weight())
        weights.log("2024-01-02", 71.0)
        weights.log("2024-01-01", 70.0)
        self.assertEqual(weights.fetch_latest_weight(), 71.0)
        self.assertEqual(len(weights.fetch_history("2024-01-02")), 1)

        custom = CustomWorkoutRepository(self.db_path)
        with self.assertRaises(ValueError):
            custom.add("  ")
        wid = custom.add("Zumba", tags=["Zumba"], duration_min=30, calories_kcal=150)
        self.assertEqual(custom.fetch_all_workouts()[0]["tags"], ["Zumba"])
        custom.delete(wid)
        self.assertEqual(custom.fetch_all_workouts(), [])

        mets = CustomMETRepository(self.db_path)
        mets.add(["a"], 4.0)
        mets.add(["b", "c"], 5.0)
        self.assertEqual(mets.fetch_all_entries(), [(["a"], 4.0), (["b", "c"], 5.0)])
        mets.delete_all()
        self.assertEqual(mets.fetch_all_entries(), [])


if __name__ == "__main__":
    unittest.main()
