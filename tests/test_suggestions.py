import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_engine.features.suggestions import (  # noqa: E402
    detect_issues,
    generic_suggestions,
    job_specific_suggestion,
    role_analysis_suggestions,
    sort_by_priority,
)
from ats_engine.schemas.analysis import JobRoleAnalysis, Suggestion  # noqa: E402


class SuggestionTests(unittest.TestCase):
    def test_generic_suggestions_for_bare_text(self):
        missing = [f"kw{index}" for index in range(14)]
        suggestions = generic_suggestions("hello", missing)
        self.assertEqual(
            [s.title for s in suggestions],
            ["Add Missing Keywords", "Add Experience Section", "Add Education Section", "Add Skills Section"],
        )
        self.assertEqual(len(suggestions[0].keywords), 10)
        self.assertIn("14", suggestions[0].description)

    def test_section_markers_suppress_suggestions(self):
        text = "Work history, degree and technical background"
        self.assertEqual(generic_suggestions(text, []), [])

    def test_job_specific_suggestion(self):
        self.assertIsNone(job_specific_suggestion([]))
        suggestion = job_specific_suggestion([f"k{index}" for index in range(20)])
        self.assertEqual(suggestion.type, "job-specific")
        self.assertEqual(len(suggestion.keywords), 15)

    def test_role_analysis_is_confidence_gated(self):
        low = JobRoleAnalysis(primary_role="Designer", confidence=0.69)
        self.assertEqual(role_analysis_suggestions(low), [])

        high = JobRoleAnalysis(
            primary_role="Designer",
            seniority_level="Mid",
            industry="Media",
            confidence=0.7,
            recommended_categories=["ux-ui-design"],
        )
        suggestions = role_analysis_suggestions(high)
        self.assertEqual([s.type for s in suggestions], ["role-specific", "category-recommendation"])
        self.assertIn("70% confidence", suggestions[0].description)
        self.assertEqual(suggestions[1].keywords, ["ux-ui-design"])

    def test_sort_is_stable_by_priority(self):
        items = [
            Suggestion(type="a", title="low-1", description="", priority="low"),
            Suggestion(type="b", title="high-1", description="", priority="high"),
            Suggestion(type="c", title="medium-1", description="", priority="medium"),
            Suggestion(type="d", title="high-2", description="", priority="high"),
        ]
        self.assertEqual([s.title for s in sort_by_priority(items)], ["high-1", "high-2", "medium-1", "low-1"])


class IssueDetectionTests(unittest.TestCase):
    def test_clean_long_resume_has_no_issues(self):
        text = "Contact me at jane@example.com. " + "Delivered reliable software. " * 30
        self.assertEqual(detect_issues(text), [])

    def test_each_rule(self):
        text = "See photo │ résumé"
        issues = {issue.type: issue for issue in detect_issues(text)}
        self.assertEqual(set(issues), {"format", "formatting", "encoding", "content", "contact"})
        self.assertEqual(issues["contact"].severity, "high")
        self.assertEqual(issues["contact"].location, "header")
        self.assertEqual(issues["encoding"].severity, "low")
        self.assertEqual(issues["format"].severity, "medium")


if __name__ == "__main__":
    unittest.main()
