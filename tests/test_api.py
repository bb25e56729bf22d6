import json
import os
import sys
import unittest
from io import BytesIO
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep API tests deterministic: no rate limiting, no real LLM calls.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

from fastapi.testclient import TestClient  # noqa: E402
from pypdf import PdfWriter  # noqa: E402

from ats_engine.ai.client import API_KEY_MISSING_MESSAGE, ExtractionClient  # noqa: E402
from ats_engine.ai.config import AIConfig  # noqa: E402
from ats_engine.ai.factory import get_extraction_client  # noqa: E402
from ats_engine.ai.types import GenerationResult  # noqa: E402
from ats_engine.main import app  # noqa: E402
from ats_engine.services.analysis_service import AnalysisService  # noqa: E402
from ats_engine.services.dependencies import get_analysis_service  # noqa: E402

RESUME = (
    "Jane Doe - jane.doe@example.com\n"
    "Experience: Senior QA Analyst. Developed Selenium and Cypress suites, managed Jira.\n"
    "Education: BSc Computer Science\n"
    "Skills: SQL, Python, Agile, Scrum\n"
)


class FakeGenerator:
    def __init__(self, *contents):
        self._contents = list(contents)

    def generate(self, prompt, system_instruction, response_format="json"):
        content = self._contents.pop(0) if self._contents else "{}"
        return GenerationResult(success=True, content=content)


class StaticExtractor:
    def __init__(self, text):
        self.text = text

    def extract_text(self, stream):
        return self.text


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


class ApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()

    def _use_client(self, extraction_client: ExtractionClient) -> None:
        app.dependency_overrides[get_extraction_client] = lambda: extraction_client

    def _use_generator(self, *contents) -> None:
        self._use_client(ExtractionClient(AIConfig(api_key="test-key"), generator=FakeGenerator(*contents)))

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})

    def test_ai_health_unconfigured(self):
        self._use_client(ExtractionClient(AIConfig(api_key=None)))
        response = self.client.get("/v1/ai/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body["configured"])
        self.assertFalse(body["available"])

    def test_analyze_generic(self):
        response = self.client.post("/v1/analyze", json={"text": RESUME})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["analysis_type"], "generic")
        self.assertIn("Selenium", body["found_keywords"])
        self.assertTrue(0 <= body["score"]["overall"] <= 100)

    def test_analyze_requires_text(self):
        response = self.client.post("/v1/analyze", json={"text": "   "})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Resume text is required")

    def test_analyze_job_description(self):
        response = self.client.post(
            "/v1/analyze/job-description",
            json={"text": RESUME, "job_description": "Looking for Selenium, Kubernetes and leadership."},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["analysis_type"], "job-description")
        self.assertIn("kubernetes", body["missing_keywords"])

        missing_jd = self.client.post("/v1/analyze/job-description", json={"text": RESUME})
        self.assertEqual(missing_jd.status_code, 400)

    def test_analyze_role(self):
        response = self.client.post("/v1/analyze/role", json={"text": RESUME, "role": "qa"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role_display_name"], "Quality Assurance")

        unknown = self.client.post("/v1/analyze/role", json={"text": RESUME, "role": "astronaut"})
        self.assertEqual(unknown.status_code, 404)

    def test_analyze_job_role_with_model(self):
        self._use_generator(json.dumps({"primaryRole": "QA Engineer", "confidence": 0.85}))
        response = self.client.post("/v1/analyze/job-role", json={"text": RESUME})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["analysis_type"], "job-role")
        self.assertEqual(body["job_role_analysis"]["primary_role"], "QA Engineer")
        self.assertIn("qa-testing", [category["id"] for category in body["recommended_categories"]])

    def test_resume_ai_reports_missing_key(self):
        self._use_client(ExtractionClient(AIConfig(api_key=None)))
        response = self.client.post("/v1/analyze/resume-ai", json={"text": RESUME})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["ai_error"], API_KEY_MISSING_MESSAGE)

    def test_extract_keywords(self):
        self._use_generator(json.dumps({"suggestedKeywords": ["Kafka", "Spark"], "relevanceScore": 80}))
        response = self.client.post("/v1/extract-keywords", json={"job_description": "Data engineer"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["suggested_keywords"], ["Kafka", "Spark"])

    def test_extract_keywords_with_infinite_numbers(self):
        self._use_generator(
            '{"suggestedKeywords": ["Kafka"], "relevanceScore": 1e999, "keywordFrequency": {"kafka": Infinity}}'
        )
        response = self.client.post("/v1/extract-keywords", json={"job_description": "Data engineer"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["suggested_keywords"], ["Kafka"])
        self.assertIsNone(body["relevance_score"])
        self.assertEqual(body["keyword_frequency"], {})

    def test_extract_keywords_unavailable(self):
        self._use_client(ExtractionClient(AIConfig(api_key=None)))
        response = self.client.post("/v1/extract-keywords", json={"job_description": "Data engineer"})
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["detail"], API_KEY_MISSING_MESSAGE)

    def test_analyze_job_role_endpoint_unavailable(self):
        self._use_client(ExtractionClient(AIConfig(api_key=None)))
        response = self.client.post("/v1/analyze-job-role", json={"text": RESUME})
        self.assertEqual(response.status_code, 503)

    def test_extract_text_rejects_non_pdf(self):
        response = self.client.post(
            "/v1/extract-text",
            files={"file": ("resume.docx", b"PK\x03\x04", "application/octet-stream")},
        )
        self.assertEqual(response.status_code, 400)

    def test_extract_text_blank_pdf(self):
        response = self.client.post(
            "/v1/extract-text",
            files={"file": ("resume.pdf", _blank_pdf(), "application/pdf")},
        )
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"], "No extractable text found in PDF.")

    def test_analyze_file_routes_by_form_fields(self):
        service = AnalysisService(extractor=StaticExtractor(RESUME))
        app.dependency_overrides[get_analysis_service] = lambda: service
        files = {"file": ("resume.pdf", b"%PDF-1.4 stub", "application/pdf")}

        generic = self.client.post("/v1/analyze/file", files=files)
        self.assertEqual(generic.status_code, 200)
        self.assertEqual(generic.json()["analysis_type"], "generic")

        by_role = self.client.post("/v1/analyze/file", files=files, data={"role": "qa"})
        self.assertEqual(by_role.json()["analysis_type"], "role-based")

        by_jd = self.client.post("/v1/analyze/file", files=files, data={"job_description": "Need Selenium"})
        self.assertEqual(by_jd.json()["analysis_type"], "job-description")

        extracted = self.client.post("/v1/extract-text", files=files)
        self.assertEqual(extracted.json()["text"], RESUME)

    def test_categories(self):
        response = self.client.get("/v1/categories")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["total"], 10)
        self.assertEqual(body["categories"][0]["id"], "software-development")

        search = self.client.get("/v1/categories/search", params={"q": "security"})
        self.assertIn("cybersecurity", [category["id"] for category in search.json()["categories"]])

        smart = self.client.get("/v1/categories/smart", params={"role": "Data Analyst", "confidence": 0.9})
        self.assertEqual([category["id"] for category in smart.json()["categories"]], ["data-science"])

    def test_category_keywords(self):
        response = self.client.get("/v1/categories/sales/keywords")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["keywords"])

        self.assertEqual(self.client.get("/v1/categories/astronomy/keywords").status_code, 404)

    def test_smart_category_analysis(self):
        self._use_generator(json.dumps({"primaryRole": "Sales Manager", "confidence": 0.9}))
        response = self.client.post("/v1/categories/smart-analysis", json={"text": RESUME})
        self.assertEqual(response.status_code, 200)
        categories = [category["id"] for category in response.json()["categories"]]
        self.assertEqual(categories, ["sales", "project-management"])

        blank = self.client.post("/v1/categories/smart-analysis", json={"text": ""})
        self.assertEqual(blank.status_code, 400)

    def test_roles(self):
        roles = self.client.get("/v1/roles").json()
        self.assertEqual(roles[0]["key"], "qa")

        keywords = self.client.get("/v1/roles/qa/keywords")
        self.assertEqual(keywords.status_code, 200)
        self.assertEqual(keywords.json()["keywords"][0], "Quality Assurance")

        tools = self.client.get("/v1/roles/qa/keywords/Tools")
        self.assertEqual(tools.json()["id"], "qa/tools")
        self.assertIn("Jira", tools.json()["keywords"])

        self.assertEqual(self.client.get("/v1/roles/nobody/keywords").status_code, 404)
        self.assertEqual(self.client.get("/v1/roles/qa/keywords/misc").status_code, 400)


if __name__ == "__main__":
    unittest.main()
