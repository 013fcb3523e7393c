import json
import sys
import unittest
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from skillcanon.core.config import settings  # noqa: E402
from skillcanon.errors import GenerationTransportError  # noqa: E402
from skillcanon.main import app  # noqa: E402


class FakeClient:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error

    def generate(self, prompt, payload):
        if self.error is not None:
            raise self.error
        return {"candidates": [{"content": {"parts": [{"text": self.text}]}}]}


_JOB = {
    "domain": "Technology & IT",
    "cluster": "DevOps & Cloud Infrastructure",
    "skills": [{"skill_id": "1", "skill_name": "Docker"}, {"skill_id": "2", "skill_name": "docker"}],
}


class ApiTests(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        local = replace(settings, api_key=None, interactions_enabled=False)
        for target in ("skillcanon.core.security.settings", "skillcanon.api.v1.skills.settings"):
            patcher = patch(target, local)
            patcher.start()
            self.addCleanup(patcher.stop)

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["clusters"], 65)

    def test_taxonomy_document(self):
        body = self.client.get("/v1/taxonomy").json()
        self.assertEqual(len(body["domains"]), 10)
        self.assertEqual(sum(len(domain["clusters"]) for domain in body["domains"]), 65)

    def test_merge_reconcile_success(self):
        answer = "```csv\nskill_id,outcome_id,merge_with_skill_id,reason\n1,1,,keep\n2,2,1,case\n```"
        response = self.client.post("/v1/merge/reconcile", json={"job": _JOB, "answer_text": answer})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "succeeded")
        self.assertEqual(body["records"][1]["outcome"], "Merge with another skill")

    def test_merge_reconcile_reports_reason(self):
        answer = "skill_id,outcome_id,merge_with_skill_id,reason\n1,2,99,alias"
        body = self.client.post("/v1/merge/reconcile", json={"job": _JOB, "answer_text": answer}).json()
        self.assertEqual(body["status"], "validation_failed")
        self.assertIn("Missing skills in output: 2", body["reason"])
        self.assertIn("Skill 1 -> '99'", body["reason"])

    def test_merge_reconcile_rejects_duplicate_job_ids(self):
        job = dict(_JOB, skills=[{"skill_id": "1", "skill_name": "a"}, {"skill_id": "1", "skill_name": "b"}])
        response = self.client.post("/v1/merge/reconcile", json={"job": job, "answer_text": ""})
        self.assertEqual(response.status_code, 422)

    def test_skills_validate_returns_enriched_rows(self):
        answer = [
            {
                "original_input": "k8s",
                "canonical_name": "Kubernetes",
                "is_valid": True,
                "requires_review": False,
                "review_reason": "",
                "clusters": [2],
            }
        ]
        fake = FakeClient("```json\n" + json.dumps(answer) + "\n```")
        with patch("skillcanon.api.v1.skills.get_generation_client", return_value=fake):
            response = self.client.post("/v1/skills/validate", json={"skills": ["k8s"]})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["content_found"])
        self.assertEqual(body["rows"][0]["cluster_names"], ["DevOps & Cloud Infrastructure"])
        self.assertEqual(body["rows"][0]["domain_names"], ["Technology & IT"])

    def test_skills_validate_maps_transport_errors(self):
        fake = FakeClient(error=GenerationTransportError("HTTP 503", kind="api_error", status_code=503))
        with patch("skillcanon.api.v1.skills.get_generation_client", return_value=fake):
            response = self.client.post("/v1/skills/validate", json={"skills": ["k8s"]})
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"]["kind"], "api_error")

    def test_skills_validate_reports_missing_client(self):
        with patch("skillcanon.api.v1.skills.get_generation_client", side_effect=RuntimeError("GEMINI_API_KEY is missing")):
            response = self.client.post("/v1/skills/validate", json={"skills": ["k8s"]})
        self.assertEqual(response.status_code, 503)

    def test_skills_validate_rejects_empty_list(self):
        response = self.client.post("/v1/skills/validate", json={"skills": []})
        self.assertEqual(response.status_code, 422)

    def test_api_key_is_enforced_when_configured(self):
        with patch("skillcanon.core.security.settings", replace(settings, api_key="secret")):
            denied = self.client.post("/v1/merge/reconcile", json={"job": _JOB, "answer_text": ""})
            allowed = self.client.post(
                "/v1/merge/reconcile", json={"job": _JOB, "answer_text": ""}, headers={"X-API-Key": "secret"}
            )
        self.assertEqual(denied.status_code, 401)
        self.assertEqual(allowed.status_code, 200)


if __name__ == "__main__":
    unittest.main()
