import json
import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skillcanon.taxonomy import LocalTaxonomy  # noqa: E402


class LocalTaxonomyTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.taxonomy = LocalTaxonomy()

    def test_bundled_document_has_ten_domains_and_sixty_five_clusters(self):
        self.assertEqual(len(self.taxonomy.domains()), 10)
        self.assertEqual(self.taxonomy.cluster_count, 65)
        self.assertEqual(self.taxonomy.version, "2025.10")

    def test_cluster_lookup_resolves_owning_domain(self):
        info = self.taxonomy.cluster(9)
        self.assertIsNotNone(info)
        self.assertEqual(info.cluster_name, "UX/UI Design & Research")
        self.assertEqual(info.domain_id, 2)
        self.assertEqual(info.domain_name, "Design & Creative")

    def test_unknown_cluster(self):
        self.assertIsNone(self.taxonomy.cluster(0))
        self.assertFalse(self.taxonomy.has_cluster(66))
        self.assertTrue(self.taxonomy.has_cluster(65))

    def test_domains_are_read_only(self):
        clusters = self.taxonomy.domains()[0].clusters
        with self.assertRaises(TypeError):
            clusters[999] = "Injected"

    def test_document_round_trips_through_loader(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "taxonomy.json"
            path.write_text(json.dumps(self.taxonomy.as_document()), encoding="utf-8")
            reloaded = LocalTaxonomy(path)
        self.assertEqual(reloaded.as_document(), self.taxonomy.as_document())

    def test_duplicate_cluster_ids_are_rejected(self):
        document = {
            "version": "x",
            "domains": [
                {"id": 1, "domain": "A", "clusters": [{"id": 1, "cluster": "a"}]},
                {"id": 2, "domain": "B", "clusters": [{"id": 1, "cluster": "b"}]},
            ],
        }
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "taxonomy.json"
            path.write_text(json.dumps(document), encoding="utf-8")
            with self.assertRaises(RuntimeError):
                LocalTaxonomy(path)

    def test_document_without_domains_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "taxonomy.json"
            path.write_text("[]", encoding="utf-8")
            with self.assertRaises(RuntimeError):
                LocalTaxonomy(path)


if __name__ == "__main__":
    unittest.main()
