import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillsnap.services.errors import (  # noqa: E402
    IncompleteResponseError,
    InvalidResponseShapeError,
    TruncatedResponseError,
)
from skillsnap.services.response_normalizer import (  # noqa: E402
    REQUIRED_FIELDS,
    normalize_analysis_response,
    normalize_suggestions,
    parse_llm_json,
    repair_truncated_json,
    strip_code_fences,
)


def _payload(**overrides) -> dict:
    payload = {
        "extractedJobTitle": "  Data Engineer ",
        "similarityPercentage": 70,
        "matchPercent": 55.5,
        "atsScore": 81,
        "atsScoreExplanation": "Solid.",
        "skillsFound": ["Python", "", None],
        "missingSkills": ["Spark"],
        "suggestions": [],
        "phasedRoadmap": [{"skill": "Spark", "phases": []}],
    }
    payload.update(overrides)
    return payload


class CodeFenceTests(unittest.TestCase):
    def test_strips_json_and_plain_fences(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')
        self.assertEqual(strip_code_fences('```JSON {"a": 1}```'), '{"a": 1}')
        self.assertEqual(strip_code_fences('```\n[1]\n```'), "[1]")
        self.assertEqual(strip_code_fences('  {"a": 1}  '), '{"a": 1}')


class RepairTests(unittest.TestCase):
    def test_closes_arrays_then_objects(self):
        self.assertEqual(repair_truncated_json('{"a": [1, 2'), '{"a": [1, 2]}')

    def test_drops_trailing_garbage_after_last_value(self):
        self.assertEqual(repair_truncated_json('{"a": [1, 2, '), '{"a": [1, 2]}')
        repaired = repair_truncated_json('{"items": [{"n": 1}, {"n": 2},\n')
        self.assertEqual(json.loads(repaired), {"items": [{"n": 1}, {"n": 2}]})

    def test_balanced_text_is_unchanged(self):
        self.assertEqual(repair_truncated_json('{"a": [1]}'), '{"a": [1]}')

    def test_parse_repairs_cut_off_answer(self):
        full = json.dumps({"items": [{"name": "a"}, {"name": "b"}]})
        self.assertEqual(parse_llm_json(full[:-2]), {"items": [{"name": "a"}, {"name": "b"}]})

    def test_unrepairable_text_is_truncated_error(self):
        with self.assertRaises(TruncatedResponseError) as ctx:
            parse_llm_json("I cannot help with that")
        self.assertEqual(ctx.exception.category, "malformed_response")


class ValidationTests(unittest.TestCase):
    def test_normalizes_valid_payload(self):
        result = normalize_analysis_response("```json\n" + json.dumps(_payload()) + "\n```")
        self.assertEqual(result.extracted_job_title, "Data Engineer")
        self.assertEqual(result.match_percent, 55.5)
        self.assertEqual(result.skills_found, ["Python"])
        self.assertEqual(result.strength_areas, [])
        self.assertEqual(result.phased_roadmap, [{"skill": "Spark", "phases": []}])

    def test_missing_fields_are_listed_in_order(self):
        payload = _payload()
        for field in ("suggestions", "extractedJobTitle"):
            del payload[field]
        with self.assertRaises(IncompleteResponseError) as ctx:
            normalize_analysis_response(json.dumps(payload))
        self.assertEqual(ctx.exception.missing_fields, ["extractedJobTitle", "suggestions"])
        self.assertEqual(ctx.exception.to_detail()["missing_fields"], ["extractedJobTitle", "suggestions"])

    def test_every_required_field_is_checked(self):
        with self.assertRaises(IncompleteResponseError) as ctx:
            normalize_analysis_response("{}")
        self.assertEqual(ctx.exception.missing_fields, list(REQUIRED_FIELDS))

    def test_non_object_answer_is_invalid_shape(self):
        with self.assertRaises(InvalidResponseShapeError):
            normalize_analysis_response("[1, 2, 3]")

    def test_blank_job_title_is_invalid_shape(self):
        with self.assertRaises(InvalidResponseShapeError):
            normalize_analysis_response(json.dumps(_payload(extractedJobTitle="   ")))

    def test_non_string_explanation_is_invalid_shape(self):
        for value in ({"reason": "good"}, ["good"], None, 80):
            with self.subTest(value=value):
                with self.assertRaises(InvalidResponseShapeError):
                    normalize_analysis_response(json.dumps(_payload(atsScoreExplanation=value)))

    def test_skills_must_be_lists(self):
        with self.assertRaises(InvalidResponseShapeError):
            normalize_analysis_response(json.dumps(_payload(missingSkills="Spark, Kafka")))

    def test_scores_are_coerced_and_clamped(self):
        result = normalize_analysis_response(
            json.dumps(_payload(similarityPercentage="85%", matchPercent=140, atsScore=-3))
        )
        self.assertEqual(result.similarity_percentage, 85.0)
        self.assertEqual(result.match_percent, 100.0)
        self.assertEqual(result.ats_score, 0.0)

    def test_non_numeric_score_is_invalid_shape(self):
        for value in ("high", True, None, [80]):
            with self.subTest(value=value):
                with self.assertRaises(InvalidResponseShapeError):
                    normalize_analysis_response(json.dumps(_payload(atsScore=value)))


class SuggestionTests(unittest.TestCase):
    def test_sectioned_object_is_flattened(self):
        suggestions = normalize_suggestions(
            {
                "resumeImprovements": ["Add Spark to skills", ""],
                "alternativeBulletPoints": [{"text": "Built pipelines processing 2TB/day"}],
                "atsOptimizedSummary": "Data engineer with Python.",
            }
        )
        self.assertEqual(
            [(item.category, item.title) for item in suggestions],
            [
                ("keywords", "Add Spark to skills"),
                ("content", "Built pipelines processing 2TB/day"),
                ("structure", "ATS-optimized summary"),
            ],
        )
        self.assertEqual(suggestions[2].description, "Data engineer with Python.")

    def test_list_items_keep_known_category_and_priority(self):
        suggestions = normalize_suggestions(
            [
                {"category": "Formatting", "priority": "HIGH", "title": "Use one column"},
                {"category": "made-up", "priority": "urgent", "description": "Quantify results"},
                42,
            ]
        )
        self.assertEqual(len(suggestions), 2)
        self.assertEqual((suggestions[0].category, suggestions[0].priority), ("formatting", "high"))
        self.assertEqual((suggestions[1].category, suggestions[1].priority), ("general", None))
        self.assertEqual(suggestions[1].title, "Quantify results")

    def test_unexpected_shapes_yield_nothing(self):
        self.assertEqual(normalize_suggestions("tighten wording"), [])
        self.assertEqual(normalize_suggestions(None), [])


if __name__ == "__main__":
    unittest.main()
