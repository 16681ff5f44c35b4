import unittest

from api_support import ApiTestCase


class ProgressApiTests(ApiTestCase, unittest.TestCase):
    def setUp(self):
        super().setUp()
        body = self.analyze().json()
        self.analysis_id = body["analysis_id"]
        self.step = body["roadmap"]["steps"][0]

    def _event(self, **overrides) -> dict:
        event = {
            "analysis_id": self.analysis_id,
            "step_id": self.step["step_id"],
            "resource_index": 0,
            "skill": "Docker",
            "step_title": self.step["title"],
            "step_number": 1,
            "resource_title": "Docker 101",
            "resource_url": "https://docs.docker.com/get-started/",
            "resource_type": "course",
            "resource_provider": "Docker",
        }
        event.update(overrides)
        return event

    def _log(self, **overrides):
        return self.client.post("/v1/progress", json=self._event(**overrides), headers=self.user_headers)

    def test_latest_is_empty_without_events(self):
        response = self.client.get("/v1/progress/latest", headers=self.user_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"progress": None})

    def test_logged_event_becomes_latest_with_normalized_type(self):
        response = self._log(resource_type="YouTube")
        self.assertEqual(response.status_code, 201)
        progress_id = response.json()["progress_id"]

        latest = self.client.get("/v1/progress/latest", headers=self.user_headers).json()["progress"]
        self.assertEqual(latest["progress_id"], progress_id)
        self.assertEqual(latest["resource_type"], "video")
        self.assertEqual(latest["skill"], "Docker")

    def test_unknown_analysis_is_rejected(self):
        response = self._log(analysis_id="0" * 32)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"]["category"], "not_found")

    def test_history_is_newest_first_and_limited(self):
        ids = [self._log(resource_index=index).json()["progress_id"] for index in range(3)]

        response = self.client.get("/v1/progress/history?limit=2", headers=self.user_headers)
        self.assertEqual(response.status_code, 200)
        events = response.json()["events"]
        self.assertEqual([event["progress_id"] for event in events], [ids[2], ids[1]])

        other = self.client.get("/v1/progress/history", headers={"X-User-Id": "user-2"}).json()
        self.assertEqual(other["events"], [])

    def test_events_for_analysis_are_removed_with_it(self):
        self._log()
        self._log(resource_index=1, resource_type="docs")

        events = self.client.get(f"/v1/progress/analysis/{self.analysis_id}", headers=self.user_headers).json()
        self.assertEqual(len(events["events"]), 2)

        self.client.delete(f"/v1/resume-analysis/{self.analysis_id}", headers=self.user_headers)
        latest = self.client.get("/v1/progress/latest", headers=self.user_headers).json()
        self.assertIsNone(latest["progress"])
        gone = self.client.get(f"/v1/progress/analysis/{self.analysis_id}", headers=self.user_headers)
        self.assertEqual(gone.status_code, 404)


if __name__ == "__main__":
    unittest.main()
