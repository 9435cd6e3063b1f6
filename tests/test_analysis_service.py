import sys
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.parsing.parse import ResumeExtractionError  # noqa: E402
from app.schemas.analysis import AnalysisResult, InvalidJobPosting  # noqa: E402
from app.services.analysis_service import analyze_resume, parse_analysis_response  # noqa: E402
from app.services.llm import LLMServiceError, strip_json_fences  # noqa: E402
from tests.support import sample_analysis_payload  # noqa: E402


class ParseAnalysisResponseTests(unittest.TestCase):
    def test_valid_payload(self):
        result = parse_analysis_response(sample_analysis_payload())
        self.assertIsInstance(result, AnalysisResult)
        self.assertEqual(result.overall_score, "Good")
        self.assertEqual(len(result.recommendations), 5)
        self.assertEqual(result.job_analysis.required_skills[0], "Python")

    def test_invalid_job_posting_payload(self):
        result = parse_analysis_response(
            {
                "error": "invalid_job_posting",
                "message": "This looks like a news article.",
                "suggestions": ["Paste the full job description"],
            }
        )
        self.assertIsInstance(result, InvalidJobPosting)
        self.assertEqual(result.message, "This looks like a news article.")

    def test_invalid_job_posting_without_message_gets_default(self):
        result = parse_analysis_response({"error": "invalid_job_posting"})
        self.assertIsInstance(result, InvalidJobPosting)
        self.assertTrue(result.message)

    def test_wrong_recommendation_count_is_rejected(self):
        payload = sample_analysis_payload()
        payload["recommendations"] = payload["recommendations"][:3]
        with self.assertRaises(LLMServiceError) as ctx:
            parse_analysis_response(payload)
        self.assertEqual(ctx.exception.code, "llm_invalid")

    def test_unknown_score_is_rejected(self):
        payload = sample_analysis_payload()
        payload["overallScore"] = "Amazing"
        with self.assertRaises(LLMServiceError):
            parse_analysis_response(payload)


class StripJsonFencesTests(unittest.TestCase):
    def test_fenced_json(self):
        self.assertEqual(strip_json_fences('```json\n{"a": 1}\n```'), '{"a": 1}')

    def test_plain_json(self):
        self.assertEqual(strip_json_fences(' {"a": 1} '), '{"a": 1}')


class AnalyzeResumeTests(unittest.IsolatedAsyncioTestCase):
    async def test_calls_model_with_resume_and_posting(self):
        completion = AsyncMock(return_value=sample_analysis_payload())
        with patch("app.services.analysis_service.json_completion", new=completion):
            result = await analyze_resume("Jane Doe, Python engineer", "Hiring a Python engineer")

        self.assertIsInstance(result, AnalysisResult)
        completion.assert_awaited_once()
        prompt = completion.await_args.kwargs["user_prompt"]
        self.assertIn("Jane Doe, Python engineer", prompt)
        self.assertIn("Hiring a Python engineer", prompt)

    async def test_empty_resume_text_is_rejected_before_model_call(self):
        completion = AsyncMock()
        with patch("app.services.analysis_service.json_completion", new=completion):
            with self.assertRaises(ResumeExtractionError):
                await analyze_resume("   ", "Hiring a Python engineer")
        completion.assert_not_awaited()


if __name__ == "__main__":
    unittest.main()
