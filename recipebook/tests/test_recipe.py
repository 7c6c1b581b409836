import unittest
from recipebook.domain.Recipe import Recipe


class TestRecipe(unittest.TestCase):

    def setUp(self):
        self.cache_entry = {
            "id": "1700000000000",
            "title": "Pancakes",
            "prepTime": 10,
            "cookTime": 15,
            "servings": 4,
            "ingredients": ["200 g flour", "300 ml milk", "2 eggs"],
            "instructions": ["Mix ingredients", "Cook on skillet"],
            "tags": ["breakfast", "vegetarian", "breakfast"],
            "source": "manual",
            "sourceUrl": "https://example.com/pancakes",
            "favorite": True,
            "createdAt": "2025-01-01T08:00:00+00:00",
            "thumbnailUrl": "data:image/png;base64,AAAA",
            "image": "data:image/png;base64,BBBB",
        }

    def test_from_cache_format(self):
        recipe = Recipe.from_dict(self.cache_entry)
        self.assertEqual(recipe.id, "1700000000000")
        self.assertEqual(recipe.prep_time, 10)
        self.assertEqual(recipe.cook_time, 15)
        self.assertEqual(recipe.source_url, "https://example.com/pancakes")
        self.assertTrue(recipe.favorite)
        # tags behave as a set, first occurrence kept
        self.assertEqual(recipe.tags, ["breakfast", "vegetarian"])

    def test_image_payloads_never_survive(self):
        data = Recipe.from_dict(self.cache_entry).to_dict()
        self.assertNotIn("thumbnailUrl", data)
        self.assertNotIn("image", data)

    def test_from_remote_row(self):
        row = Recipe.from_dict(self.cache_entry).to_row()
        self.assertIn("prep_time", row)
        self.assertIn("created_at", row)
        self.assertEqual(Recipe.from_dict(row), Recipe.from_dict(self.cache_entry))

    def test_missing_numbers_fall_back_to_defaults(self):
        recipe = Recipe.from_dict({"id": "1", "title": "Toast", "prepTime": "", "servings": None})
        self.assertEqual(recipe.prep_time, 0)
        self.assertEqual(recipe.servings, 1)
        self.assertEqual(recipe.source, "manual")
        self.assertFalse(recipe.favorite)

    def test_copy_does_not_share_lists(self):
        recipe = Recipe.from_dict(self.cache_entry)
        clone = recipe.copy(title="Crepes")
        clone.ingredients.append("sugar")
        self.assertEqual(recipe.title, "Pancakes")
        self.assertEqual(len(recipe.ingredients), 3)

    def test_strip_heavy_fields(self):
        cleaned = Recipe.strip_heavy_fields(self.cache_entry)
        self.assertNotIn("thumbnailUrl", cleaned)
        self.assertNotIn("image", cleaned)
        self.assertIn("image", self.cache_entry)


if __name__ == '__main__':
    unittest.main()
