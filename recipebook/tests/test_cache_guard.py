import json
import tempfile
import unittest
from recipebook.domain.Errors import StorageCorruptWarning, StorageFullError, StorageTooLargeWarning
from recipebook.events.Event_Bus import EventBus, STORAGE_CORRUPT, STORAGE_FULL, STORAGE_TOO_LARGE
from recipebook.infra.Cache_Guard import LocalCacheGuard
from recipebook.infra.Local_Store import JsonFileStore, MemoryStore


def _recipe(i, **extra):
    data = {"id": str(i), "title": f"Recipe {i}", "ingredients": ["salt"], "instructions": ["stir"]}
    data.update(extra)
    return data


class TestLocalCacheGuard(unittest.TestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.bus = EventBus()
        self.events = []
        for name in (STORAGE_FULL, STORAGE_CORRUPT, STORAGE_TOO_LARGE):
            self.bus.subscribe(name, lambda event, payload: self.events.append((event, payload)))
        self.guard = LocalCacheGuard(self.store, max_bytes=2000, bus=self.bus)

    def test_absent_data_reads_as_empty_without_warning(self):
        read = self.guard.read_recipes()
        self.assertEqual(read.data, [])
        self.assertIsNone(read.warning)

    def test_write_strips_images(self):
        self.guard.write_recipes([_recipe(1, thumbnailUrl="data:image/png;base64,AAAA", image="x")])
        stored = json.loads(self.store.get("recipes"))
        self.assertEqual(stored, [_recipe(1)])

    def test_oversize_write_is_rejected_and_old_data_kept(self):
        self.guard.write_recipes([_recipe(1)])
        before = self.store.get("recipes")
        huge = [_recipe(i, notes="x" * 500) for i in range(10)]
        with self.assertRaises(StorageFullError) as ctx:
            self.guard.write_recipes(huge)
        self.assertGreater(ctx.exception.size, 2000)
        self.assertEqual(self.store.get("recipes"), before)
        self.assertEqual(self.events[-1][0], STORAGE_FULL)

    def test_image_bytes_do_not_count_towards_budget(self):
        # Only the stripped serialization is measured
        self.guard.write_recipes([_recipe(1, image="A" * 10000)])
        self.assertEqual(self.guard.read_recipes().data, [_recipe(1)])

    def test_store_refusal_is_storage_full(self):
        guard = LocalCacheGuard(MemoryStore(quota=10), bus=self.bus)
        with self.assertRaises(StorageFullError):
            guard.write_recipes([_recipe(1)])

    def test_malformed_data_is_cleared(self):
        self.store.set("recipes", "[{not json")
        read = self.guard.read_recipes()
        self.assertEqual(read.data, [])
        self.assertIsInstance(read.warning, StorageCorruptWarning)
        self.assertIsNone(self.store.get("recipes"))
        self.assertEqual(self.events[-1][0], STORAGE_CORRUPT)

    def test_wrong_shape_is_corrupt(self):
        self.store.set("recipes", json.dumps({"title": "not a list"}))
        read = self.guard.read_recipes()
        self.assertEqual(read.data, [])
        self.assertIsInstance(read.warning, StorageCorruptWarning)

    def test_wrongly_typed_fields_are_corrupt(self):
        for entry in ({"id": "1", "title": "x", "ingredients": 5},
                      {"id": "1", "title": "x", "ingredients": [None]},
                      {"id": "1", "title": 7, "ingredients": ["salt"]},
                      {"id": "1", "title": "x", "tags": "dinner"},
                      {"id": "1", "title": "x", "createdAt": 1700000000000}):
            self.store.set("recipes", json.dumps([_recipe(2), entry]))
            read = self.guard.read_recipes()
            self.assertEqual(read.data, [], entry)
            self.assertIsInstance(read.warning, StorageCorruptWarning)
            self.assertIsNone(self.store.get("recipes"))
            self.assertEqual(self.events[-1][0], STORAGE_CORRUPT)

    def test_numeric_ids_and_missing_lists_are_accepted(self):
        entries = [{"id": 1700000000000, "title": "Toast"}, _recipe(2, ingredients=None)]
        self.store.set("recipes", json.dumps(entries))
        read = self.guard.read_recipes()
        self.assertEqual(read.data, entries)
        self.assertIsNone(read.warning)

    def test_oversize_stored_data_is_cleared(self):
        self.store.set("recipes", json.dumps([_recipe(i, notes="y" * 400) for i in range(10)]))
        read = self.guard.read_recipes()
        self.assertEqual(read.data, [])
        self.assertIsInstance(read.warning, StorageTooLargeWarning)
        self.assertIsNone(self.store.get("recipes"))
        self.assertEqual(self.events[-1][0], STORAGE_TOO_LARGE)

    def test_read_strips_images_and_writes_back(self):
        self.store.set("recipes", json.dumps([_recipe(1, thumbnailUrl="abc")]))
        read = self.guard.read_recipes()
        self.assertEqual(read.data, [_recipe(1)])
        self.assertNotIn("thumbnailUrl", self.store.get("recipes"))

    def test_corrupt_meal_plan_resets(self):
        self.store.set("mealPlan", "nope")
        read = self.guard.read_meal_plan()
        self.assertEqual(read.data, {})
        self.assertIsInstance(read.warning, StorageCorruptWarning)
        self.assertIsNone(self.store.get("mealPlan"))


class TestJsonFileStore(unittest.TestCase):
    def test_set_get_remove(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = JsonFileStore(tmp)
            self.assertIsNone(store.get("recipes"))
            self.assertTrue(store.set("recipes", "[]"))
            self.assertEqual(store.get("recipes"), "[]")
            store.remove("recipes")
            store.remove("recipes")
            self.assertIsNone(store.get("recipes"))


if __name__ == '__main__':
    unittest.main()
