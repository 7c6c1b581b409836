import unittest
from fastapi.testclient import TestClient
from recipebook.api.api_run import app
from recipebook.api.dependencies import get_plan_repository, get_recipe_repository
from recipebook.events import web_observers
from recipebook.events.Event_Bus import STORAGE_CORRUPT
from recipebook.infra.Cache_Guard import LocalCacheGuard
from recipebook.infra.Local_Backend import LocalBackend
from recipebook.infra.Local_Store import MemoryStore
from recipebook.infra.Plan_Repository import MealPlanRepository
from recipebook.infra.Recipe_Repository import RecipeRepository
from recipebook.utilities.constants import DAYS, MEALS


class TestMealPlanApi(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.store = MemoryStore()
        # no bus passed: events go to the global bus, as in the running app
        backend = LocalBackend(LocalCacheGuard(self.store))
        recipes = RecipeRepository(backend)
        plans = MealPlanRepository(backend)
        app.dependency_overrides[get_recipe_repository] = lambda: recipes
        app.dependency_overrides[get_plan_repository] = lambda: plans

    def tearDown(self):
        app.dependency_overrides.clear()

    def _recipe(self, title):
        resp = self.client.post('/api/recipes', json={'title': title, 'ingredients': ['water'],
                                                       'instructions': ['boil']})
        return resp.json()['recipe']['id']

    def test_empty_week(self):
        plan = self.client.get('/api/meal-plan').json()['plan']
        self.assertEqual(list(plan.keys()), list(DAYS))
        self.assertTrue(all(plan[day][meal] is None for day in DAYS for meal in MEALS))

    def test_assign_resolve_and_dangling_reference(self):
        soup = self._recipe('Soup')
        resp = self.client.put('/api/meal-plan/Monday/dinner', json={'recipe_id': soup})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['plan']['Monday']['dinner']['id'], soup)

        plan = self.client.get('/api/meal-plan').json()['plan']
        self.assertEqual(plan['Monday']['dinner'], {'id': soup, 'title': 'Soup'})

        self.client.delete(f'/api/recipes/{soup}')
        plan = self.client.get('/api/meal-plan').json()['plan']
        self.assertIsNone(plan['Monday']['dinner'])

    def test_numeric_recipe_id_is_accepted(self):
        soup = self._recipe('Soup')
        resp = self.client.put('/api/meal-plan/Wednesday/lunch', json={'recipe_id': int(soup)})
        self.assertEqual(resp.status_code, 200, resp.text)
        plan = self.client.get('/api/meal-plan').json()['plan']
        self.assertEqual(plan['Wednesday']['lunch'], {'id': soup, 'title': 'Soup'})

    def test_invalid_slot_is_400(self):
        soup = self._recipe('Soup')
        resp = self.client.put('/api/meal-plan/Funday/dinner', json={'recipe_id': soup})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['message'], 'Invalid day: Funday')

        resp = self.client.put('/api/meal-plan/Monday/dinner', json={})
        self.assertEqual(resp.status_code, 400)

    def test_remove_and_clear(self):
        soup = self._recipe('Soup')
        self.client.put('/api/meal-plan/Monday/dinner', json={'recipe_id': soup})
        self.client.put('/api/meal-plan/Tuesday/lunch', json={'recipe_id': soup})

        plan = self.client.delete('/api/meal-plan/Monday/dinner').json()['plan']
        self.assertIsNone(plan['Monday']['dinner'])
        self.assertIsNotNone(plan['Tuesday']['lunch'])

        plan = self.client.delete('/api/meal-plan').json()['plan']
        self.assertTrue(all(plan[day][meal] is None for day in DAYS for meal in MEALS))

    def test_suggest_then_apply(self):
        self._recipe('Soup')
        self._recipe('Salad')
        suggested = self.client.post('/api/meal-plan/suggestions').json()
        self.assertEqual(suggested['filled'], 21)
        self.assertTrue(all(slot is None for slot in self.client.get('/api/meal-plan').json()['plan']['Monday'].values()))

        resp = self.client.post('/api/meal-plan/apply', json=suggested['plan'])
        self.assertEqual(resp.status_code, 200)
        plan = self.client.get('/api/meal-plan').json()['plan']
        self.assertTrue(all(plan[day][meal] is not None for day in DAYS for meal in MEALS))

    def test_suggest_with_no_recipes_is_empty(self):
        self.assertEqual(self.client.post('/api/meal-plan/suggestions').json()['filled'], 0)

    def test_picker(self):
        for i in range(35):
            self._recipe(f'Soup {i}')
        self._recipe('Salad')
        data = self.client.get('/api/meal-plan/picker', params={'search': 'soup'}).json()
        self.assertEqual(len(data['recipes']), 30)
        self.assertEqual(data['total'], 35)

    def test_reset_is_reported_on_events_feed(self):
        web_observers.start()
        cursor = self.client.get('/api/events').json()['next_cursor']
        self.store.set('mealPlan', '{oops')
        data = self.client.get('/api/meal-plan').json()
        self.assertEqual(data['warnings'][0]['type'], 'storage_corrupt')

        events = self.client.get('/api/events', params={'since': cursor}).json()['events']
        self.assertEqual(events[-1]['type'], STORAGE_CORRUPT)
        self.assertEqual(events[-1]['key'], 'mealPlan')

    def test_health(self):
        self.assertEqual(self.client.get('/api/health').json(), {'status': 'ok'})


if __name__ == '__main__':
    unittest.main()
