import unittest
import sys
import os
from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from client import SyncClient
from rest_api import SyncAPI


class ClientTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_client.db"
        self.yaml_path = "test_client.yaml"
        self.api = SyncAPI(db_path=self.db_path, yaml_path=self.yaml_path)
        self.client = SyncClient(base_url="http://testserver/", session=TestClient(self.api.app))

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def test_mets_and_pace(self) -> None:
        self.client.add_custom_met(["zzqx"], 7.5)
        self.assertEqual(self.client.mets("zzqx class"), 7.5)
        self.assertEqual(self.client.mets("unmatched qqq", duration_based=True), 6.0)
        self.assertEqual(self.client.pace("Barbell Squat")["category"], "squat")
        self.assertAlmostEqual(self.client.record_pace("Squat", 10, 40)["learned"], 4.35)
        self.assertEqual(self.client.set_goal("bulkUp"), "bulkUp")

    def test_sessions(self) -> None:
        day = {"day": "月曜日", "exercises": [{"name": "Squat", "sets": "2", "reps": "10"}]}
        sid = self.client.save_completion(day, 300, [0])
        self.assertEqual(self.client.get_session(sid)["name"], "月曜日")
        mid = self.client.save_manual_entry("Squat", "2024-05-01", [("60", "10")])
        self.assertEqual([s["id"] for s in self.client.list_sessions(sort_order="asc")], [mid, sid])

    def test_live_and_favorites(self) -> None:
        day = {"day": "火曜日", "exercises": [{"name": "Squat", "sets": "1", "reps": "5"}]}
        live = self.client.start_live(day)
        done = self.client.live_action(live["id"], "complete")
        self.assertEqual(done["state"]["phase"], "finished")
        abandoned = self.client.start_live(day)
        self.client.discard_live(abandoned["id"])
        self.assertEqual(list(self.api.live), [live["id"]])
        self.assertTrue(self.client.toggle_favorite("Squat"))
        self.assertEqual(self.client.favorites(), ["Squat"])
        self.client.log_body_weight(70.0, "2024-05-13")
        self.assertEqual(len(self.client.weekly_burn()), 7)


if __name__ == "__main__":
    unittest.main()
