import importlib.util
import unittest
from pathlib import Path

from portfolio.tests.helpers import make_configured_store

SCRIPTS_DIR = Path(__file__).resolve().parents[2] / "scripts"


def load_script(name: str):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class ImportProjectsTests(unittest.TestCase):
    def setUp(self):
        self.script = load_script("import_projects")
        self.store = make_configured_store()

    def test_creates_with_derived_slugs_and_order(self):
        counts = self.script.import_projects(
            self.store,
            [
                {"title": "Annual Report 2023", "category": "Print"},
                {"title": "Launch Video", "category": "Video", "is_featured": True},
                {"category": "Missing title"},
            ],
            update=False,
        )
        self.assertEqual(counts, {"created": 2, "updated": 0, "skipped": 0, "failed": 1})
        projects = self.store.list_projects()
        self.assertEqual(
            [(p.slug, p.order_index) for p in projects],
            [("annual-report-2023", 1), ("launch-video", 2)],
        )

    def test_existing_slug_skipped_or_updated(self):
        items = [{"title": "Rebrand", "description": "v1"}]
        self.script.import_projects(self.store, items, update=False)

        skipped = self.script.import_projects(
            self.store, [{"title": "Rebrand", "description": "v2"}], update=False
        )
        self.assertEqual(skipped["skipped"], 1)

        updated = self.script.import_projects(
            self.store, [{"title": "Rebrand", "description": "v2"}], update=True
        )
        self.assertEqual(updated["updated"], 1)
        self.assertEqual(self.store.get_project_by_slug("rebrand").description, "v2")


class HashAdminPasswordTests(unittest.TestCase):
    def test_hash_verifies(self):
        load_script("hash_admin_password")
        from portfolio.auth import hash_password, verify_password

        hashed = hash_password("pw")
        self.assertTrue(verify_password("pw", hashed))
        self.assertFalse(verify_password("other", hashed))


if __name__ == "__main__":
    unittest.main()
