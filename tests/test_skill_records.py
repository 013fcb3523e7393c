import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillcanon.schemas import ensure_skill_request  # noqa: E402
from skillcanon.taxonomy import LocalTaxonomy  # noqa: E402
from skillcanon.validation import partition_skill_records, validate_skill_record  # noqa: E402


def _record(**overrides):
    record = {
        "original_input": "react.js",
        "canonical_name": "React",
        "is_valid": True,
        "requires_review": False,
        "review_reason": "",
        "clusters": [1, 9],
    }
    record.update(overrides)
    return record


class SkillRecordValidatorTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.taxonomy = LocalTaxonomy()

    def test_well_formed_record_passes(self):
        self.assertTrue(validate_skill_record(_record(), self.taxonomy).ok)

    def test_review_reason_may_be_null(self):
        self.assertTrue(validate_skill_record(_record(review_reason=None), self.taxonomy).ok)

    def test_unknown_cluster_ids_are_rejected(self):
        result = validate_skill_record(_record(clusters=[1, 99]), self.taxonomy)
        self.assertFalse(result.ok)
        self.assertEqual(result.reason, "Invalid cluster ID(s): 99")

    def test_cluster_list_shape_rules(self):
        cases = {
            "not a list": _record(clusters="1"),
            "booleans": _record(clusters=[True]),
            "duplicates": _record(clusters=[1, 1]),
            "unsorted": _record(clusters=[9, 1]),
            "invalid with clusters": _record(is_valid=False, clusters=[1]),
        }
        for label, record in cases.items():
            with self.subTest(label=label):
                self.assertFalse(validate_skill_record(record, self.taxonomy).ok)

    def test_invalid_skill_with_empty_clusters_passes(self):
        record = _record(original_input="asdf", canonical_name="asdf", is_valid=False, clusters=[])
        self.assertTrue(validate_skill_record(record, self.taxonomy).ok)

    def test_required_fields(self):
        self.assertFalse(validate_skill_record(_record(canonical_name="  "), self.taxonomy).ok)
        self.assertFalse(validate_skill_record(_record(is_valid="true"), self.taxonomy).ok)
        self.assertFalse(validate_skill_record("React", self.taxonomy).ok)

    def test_partition_keeps_order_and_indexes_rejections(self):
        records = [_record(), _record(original_input="bad", clusters=[0]), _record(original_input="vue", canonical_name="Vue.js")]
        accepted, rejected = partition_skill_records(records, self.taxonomy)
        self.assertEqual([item.canonical_name for item in accepted], ["React", "Vue.js"])
        self.assertEqual(len(rejected), 1)
        self.assertEqual(rejected[0].index, 1)
        self.assertEqual(rejected[0].original_input, "bad")
        self.assertIn("Invalid cluster ID(s): 0", rejected[0].reason)


class SkillRequestTests(unittest.TestCase):
    def test_rejects_missing_or_wrong_type(self):
        with self.assertRaises(TypeError):
            ensure_skill_request(None)
        with self.assertRaises(TypeError):
            ensure_skill_request("python")
        with self.assertRaises(TypeError):
            ensure_skill_request(["python", 3])

    def test_rejects_empty_list(self):
        with self.assertRaises(ValueError):
            ensure_skill_request([])

    def test_returns_copy(self):
        skills = ["python"]
        result = ensure_skill_request(skills)
        self.assertEqual(result, skills)
        self.assertIsNot(result, skills)


if __name__ == "__main__":
    unittest.main()
