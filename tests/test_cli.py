import os
import sys
import json
import unittest
from unittest import mock

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
import cli
from cli import backup_db, demo_data, export_sessions, restore_db
from db import GeneratedPlanRepository, WorkoutProgressRepository, WorkoutSessionRepository


class CLIToolsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_cli.db"
        self.yaml_path = "test_cli.yaml"
        self.tearDown()

    def tearDown(self) -> None:
        for path in [self.db_path, self.yaml_path, "backup.db", "exports"]:
            if os.path.exists(path):
                if os.path.isdir(path):
                    for f in os.listdir(path):
                        os.remove(os.path.join(path, f))
                    os.rmdir(path)
                else:
                    os.remove(path)

    def test_demo_data(self) -> None:
        demo_data(self.db_path, self.yaml_path)
        sessions = WorkoutSessionRepository(self.db_path)
        rows = sessions.fetch_all_sessions()
        self.assertEqual(len(rows), 1)
        detail = sessions.fetch_detail(rows[0][0])
        self.assertEqual(len(detail["exercises"]), 3)
        self.assertGreater(detail["duration_seconds"], 0)
        self.assertGreater(detail["calories_kcal"], 0)
        plan = GeneratedPlanRepository(self.db_path).fetch_latest()
        progress = WorkoutProgressRepository(self.db_path).fetch(plan["id"], "月曜日")
        self.assertTrue(progress["is_completed"])
        self.assertEqual(progress["difficulty_feedback"], "ちょうどいい")

        demo_data(self.db_path, self.yaml_path)
        self.assertEqual(len(sessions.fetch_all_sessions()), 1)

    def test_export_backup_restore(self) -> None:
        os.makedirs("exports", exist_ok=True)
        sessions = WorkoutSessionRepository(self.db_path)
        sid = sessions.create("月曜日", "2024-05-13", 600, 90, [("Squat", [(1, 60.0, 10, True)])])
        written = export_sessions(self.db_path, "csv", "exports")
        self.assertEqual(written, [f"exports/session_{sid}.csv"])
        written = export_sessions(self.db_path, "json", "exports")
        with open(written[0], encoding="utf-8") as f:
            self.assertEqual(json.load(f)["calories_kcal"], 90)

        backup_db(self.db_path, "backup.db")
        self.assertTrue(os.path.exists("backup.db"))
        sessions.delete_all()
        self.assertEqual(sessions.fetch_all_sessions(), [])
        restore_db("backup.db", self.db_path)
        self.assertEqual(len(sessions.fetch_all_sessions()), 1)

    def test_convert_command(self) -> None:
        with mock.patch.object(sys, "argv", ["sync-cli", "convert", "--weight", "100", "--unit", "kg"]):
            with mock.patch("builtins.print") as printed:
                cli.main()
        printed.assert_called_once_with("100.0 kg = 220.46 lbs")

    def test_estimate_command(self) -> None:
        argv = ["sync-cli", "estimate", "--sets", "3", "--reps", "10"]
        with mock.patch.object(sys, "argv", argv):
            with mock.patch("builtins.print") as printed:
                cli.main()
        printed.assert_called_once_with("4 min, 20 kcal")


if __name__ == "__main__":
    unittest.main()
