import sys
import unittest
from pathlib import Path
from unittest.mock import patch

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from advisory_fixtures import WHEAT_JSON, farm_payload, parse_sse  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from langchain_core.language_models.fake_chat_models import (  # noqa: E402
    FakeListChatModel,
)

from app.core.config import settings  # noqa: E402
from app.core.genai_client import get_advisory_model  # noqa: E402
from app.main import app  # noqa: E402


class CropAdvisoryApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)
        app.dependency_overrides[get_advisory_model] = lambda: FakeListChatModel(
            responses=[WHEAT_JSON]
        )

    def tearDown(self) -> None:
        app.dependency_overrides.clear()

    def test_recommendation_returns_envelope(self) -> None:
        response = self.client.post("/api/crop-advisory", json=farm_payload())
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["data"]["primaryRecommendation"]["cropName"], "Wheat")
        self.assertEqual(body["data"]["primaryRecommendation"]["profitability"], "high")
        self.assertEqual(body["metadata"]["analysisVersion"], "1.0")
        self.assertIn("requestId", body["metadata"])

    def test_stream_returns_server_sent_events(self) -> None:
        response = self.client.post("/api/crop-advisory/stream", json=farm_payload())
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.headers["content-type"].startswith("text/event-stream"))
        self.assertEqual(response.headers["cache-control"], "no-cache")

        events = parse_sse(response.text)
        self.assertEqual(events[-1], "[DONE]")
        self.assertEqual(events[-2]["type"], "complete")
        self.assertIn("partial", [e["type"] for e in events[:-1]])

    def test_invalid_payload_is_rejected(self) -> None:
        payload = farm_payload(
            location={"latitude": 120},
            climate={"season": "autumn"},
        )
        response = self.client.post("/api/crop-advisory", json=payload)
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"]["code"], "VALIDATION_ERROR")
        fields = {detail["field"] for detail in body["error"]["details"]}
        self.assertIn("location.latitude", fields)
        self.assertIn("climate.season", fields)

    def test_missing_section_is_rejected(self) -> None:
        payload = farm_payload()
        del payload["soilData"]
        response = self.client.post("/api/crop-advisory/stream", json=payload)
        self.assertEqual(response.status_code, 400)
        fields = {detail["field"] for detail in response.json()["error"]["details"]}
        self.assertIn("soilData", fields)

    def test_unknown_fields_are_ignored(self) -> None:
        payload = farm_payload(location={"village": "Khanna"})
        payload["extra"] = {"anything": True}
        response = self.client.post("/api/crop-advisory", json=payload)
        self.assertEqual(response.status_code, 200)

    def test_missing_api_key_reports_service_unavailable(self) -> None:
        app.dependency_overrides.clear()
        with patch.object(settings, "GEMINI_API_KEY", ""):
            response = self.client.post("/api/crop-advisory", json=farm_payload())
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["error"]["code"], "SERVICE_UNAVAILABLE")
        self.assertEqual(response.json()["error"]["message"], "AI service not configured")


class ServiceEndpointsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.client = TestClient(app)

    def test_health(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertIn("uptime", body)
        self.assertIn("geminiAI", body["services"])

    def test_info_lists_endpoints(self) -> None:
        body = self.client.get("/api/crop-advisory/info").json()
        self.assertIn("/api/crop-advisory/stream", body["data"]["endpoints"]["POST"])

    def test_root(self) -> None:
        body = self.client.get("/").json()
        self.assertEqual(body["endpoints"]["cropAdvisory"], "/api/crop-advisory")

    def test_unknown_route(self) -> None:
        response = self.client.get("/api/unknown")
        self.assertEqual(response.status_code, 404)
        body = response.json()
        self.assertEqual(body["error"]["code"], "NOT_FOUND")
        self.assertEqual(body["error"]["message"], "Route GET /api/unknown not found")


if __name__ == "__main__":
    unittest.main()
