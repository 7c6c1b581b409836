import json
import random
import unittest
from recipebook.domain.Errors import StorageCorruptWarning, ValidationError
from recipebook.domain.Plan import MealPlan, RecipeRef
from recipebook.events.Event_Bus import EventBus
from recipebook.infra.Cache_Guard import LocalCacheGuard
from recipebook.infra.Local_Backend import LocalBackend
from recipebook.infra.Local_Store import MemoryStore
from recipebook.infra.Plan_Repository import MealPlanRepository
from recipebook.infra.Recipe_Repository import RecipeRepository
from recipebook.logic.suggestions import generate_suggestions
from recipebook.utilities.constants import DAYS, MEALS


class TestMealPlanRepository(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.bus = EventBus()
        backend = LocalBackend(LocalCacheGuard(self.store, bus=self.bus))
        self.recipes = RecipeRepository(backend)
        self.plans = MealPlanRepository(backend, bus=self.bus)

    async def _recipe(self, title):
        return (await self.recipes.create({"title": title, "ingredients": ["water"],
                                           "instructions": ["boil"]})).unwrap()

    async def test_new_plan_is_empty(self):
        plan = (await self.plans.get_plan()).unwrap()
        self.assertEqual(plan, MealPlan.empty())

    async def test_assign_last_write_wins(self):
        soup = await self._recipe("Soup")
        salad = await self._recipe("Salad")
        await self.plans.assign("Monday", "dinner", soup.id)
        plan = (await self.plans.assign("Monday", "dinner", salad.id)).unwrap()
        self.assertEqual(plan.get("Monday", "dinner"), RecipeRef(salad.id, "Salad"))
        self.assertEqual(len(plan.filled_slots()), 1)

    async def test_assign_rejects_invalid_slot(self):
        soup = await self._recipe("Soup")
        result = await self.plans.assign("Funday", "dinner", soup.id)
        self.assertIsInstance(result.error, ValidationError)
        self.assertEqual(str(result.error), "Invalid day: Funday")

        result = await self.plans.assign("Monday", "brunch", soup.id)
        self.assertEqual(str(result.error), "Invalid meal: brunch")
        self.assertTrue((await self.plans.get_plan()).value.is_empty())

    async def test_remove_is_idempotent(self):
        soup = await self._recipe("Soup")
        await self.plans.assign("Tuesday", "lunch", soup.id)
        self.assertIsNone((await self.plans.remove("Tuesday", "lunch")).unwrap().get("Tuesday", "lunch"))
        self.assertTrue((await self.plans.remove("Tuesday", "lunch")).ok)

    async def test_clear_week(self):
        soup = await self._recipe("Soup")
        for day in DAYS:
            await self.plans.assign(day, "lunch", soup.id)
        self.assertTrue((await self.plans.clear_week()).ok)
        plan = (await self.plans.get_plan()).unwrap()
        self.assertEqual(len(list(plan)), 21)
        self.assertTrue(plan.is_empty())

    async def test_deleted_recipe_reads_as_empty_slot(self):
        soup = await self._recipe("Soup")
        await self.plans.assign("Monday", "dinner", soup.id)
        resolved = (await self.plans.resolved_plan()).unwrap()
        self.assertEqual(resolved["Monday"]["dinner"].title, "Soup")

        await self.recipes.delete(soup.id)
        resolved = (await self.plans.resolved_plan()).unwrap()
        self.assertIsNone(resolved["Monday"]["dinner"])
        # the reference itself is kept
        self.assertEqual((await self.plans.get_plan()).value.get("Monday", "dinner").id, soup.id)

    async def test_apply_suggestion_replaces_whole_plan(self):
        soup = await self._recipe("Soup")
        salad = await self._recipe("Salad")
        await self.plans.assign("Sunday", "breakfast", soup.id)
        candidate = {"Monday": {"lunch": {"id": salad.id, "title": "Salad"}}}
        plan = (await self.plans.apply_suggestion(candidate)).unwrap()
        self.assertEqual(plan.get("Monday", "lunch").id, salad.id)
        stored = (await self.plans.get_plan()).unwrap()
        self.assertIsNone(stored.get("Sunday", "breakfast"))
        self.assertEqual(stored.get("Monday", "lunch").id, salad.id)

    async def test_apply_rejects_invalid_candidate(self):
        soup = await self._recipe("Soup")
        await self.plans.assign("Sunday", "breakfast", soup.id)
        result = await self.plans.apply_suggestion({"Monday": {"brunch": soup.id}})
        self.assertIsInstance(result.error, ValidationError)
        self.assertEqual((await self.plans.get_plan()).value.get("Sunday", "breakfast").id, soup.id)

    async def test_suggest_does_not_store(self):
        await self._recipe("Soup")
        await self._recipe("Salad")
        candidate = (await self.plans.suggest(lambda rs: generate_suggestions(rs, random.Random(1)))).unwrap()
        self.assertEqual(len(candidate.filled_slots()), len(DAYS) * len(MEALS))
        self.assertTrue((await self.plans.get_plan()).value.is_empty())

    async def test_corrupt_plan_is_reported(self):
        self.store.set("mealPlan", json.dumps(["not", "a", "grid"]))
        result = await self.plans.get_plan()
        self.assertTrue(result.value.is_empty())
        self.assertIsInstance(result.warnings[0], StorageCorruptWarning)


if __name__ == '__main__':
    unittest.main()
