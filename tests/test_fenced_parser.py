import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillcanon.errors import MalformedContent  # noqa: E402
from skillcanon.parsing.fenced import parse_fenced, strip_code_fence  # noqa: E402


class StripCodeFenceTests(unittest.TestCase):
    def test_removes_fence_with_language_tag(self):
        self.assertEqual(strip_code_fence("```json\n[1, 2]\n```"), "[1, 2]")

    def test_removes_bare_fence_and_surrounding_whitespace(self):
        self.assertEqual(strip_code_fence("  \n```\na,b\n1,2\n```  \n"), "a,b\n1,2")

    def test_leaves_unfenced_text_alone(self):
        self.assertEqual(strip_code_fence("  [1]  "), "[1]")
        self.assertEqual(strip_code_fence(None), "")


class JsonModeTests(unittest.TestCase):
    def test_fenced_empty_list_parses_to_empty_list(self):
        self.assertEqual(parse_fenced("```json\n[]\n```", "json"), [])

    def test_parses_fenced_array_of_objects(self):
        text = '```json\n[{"original_input": "React.Js", "canonical_name": "React"}]\n```'
        self.assertEqual(parse_fenced(text, "json"), [{"original_input": "React.Js", "canonical_name": "React"}])

    def test_single_object_becomes_one_element_list(self):
        self.assertEqual(parse_fenced('{"a": 1}', "json"), [{"a": 1}])

    def test_non_json_answer_is_empty_not_error(self):
        self.assertEqual(parse_fenced("I could not find any skills.", "json"), [])
        self.assertEqual(parse_fenced("", "json"), [])

    def test_broken_json_raises_malformed_content(self):
        with self.assertRaises(MalformedContent):
            parse_fenced('[{"a": 1,}', "json")


class CsvModeTests(unittest.TestCase):
    def test_rows_are_keyed_by_header(self):
        text = "```csv\nskill_id,outcome_id,merge_with_skill_id,reason\n1,1,,Canonical\n2,2,1,\"Same as 1, spelling\"\n```"
        rows = parse_fenced(text, "csv")
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0], {"skill_id": "1", "outcome_id": "1", "merge_with_skill_id": "", "reason": "Canonical"})
        self.assertEqual(rows[1]["reason"], "Same as 1, spelling")

    def test_header_names_are_trimmed_and_blank_lines_skipped(self):
        rows = parse_fenced("skill_id , outcome_id\n\n7,1\n", "csv")
        self.assertEqual(rows, [{"skill_id": "7", "outcome_id": "1"}])

    def test_short_rows_are_padded(self):
        rows = parse_fenced("skill_id,outcome_id,merge_with_skill_id,reason\n3,1", "csv")
        self.assertEqual(rows[0]["merge_with_skill_id"], "")
        self.assertEqual(rows[0]["reason"], "")

    def test_header_only_yields_no_records(self):
        self.assertEqual(parse_fenced("skill_id,outcome_id", "csv"), [])

    def test_unquoted_commas_fold_into_last_column(self):
        text = "skill_id,outcome_id,merge_with_skill_id,reason\n2,2,1,Same framework, different spelling"
        rows = parse_fenced(text, "csv")
        self.assertEqual(rows[0]["merge_with_skill_id"], "1")
        self.assertEqual(rows[0]["reason"], "Same framework, different spelling")

    def test_unterminated_quote_raises_with_truncated_preview(self):
        long_reason = "x" * 400
        text = f"skill_id,reason\n1,\"{long_reason}"
        with self.assertRaises(MalformedContent) as ctx:
            parse_fenced(text, "csv")
        self.assertIn("CSV parsing error", str(ctx.exception))
        self.assertLessEqual(len(ctx.exception.preview), 200)
        self.assertTrue(ctx.exception.preview.startswith("skill_id,reason"))

    def test_bad_quoting_raises(self):
        with self.assertRaises(MalformedContent):
            parse_fenced('skill_id,reason\n1,"unterminated', "csv")

    def test_unknown_mode_is_rejected(self):
        with self.assertRaises(ValueError):
            parse_fenced("[]", "xml")


if __name__ == "__main__":
    unittest.main()
