import unittest

from fastapi.testclient import TestClient

from larder.api.api_run import create_app
from larder.infra.session import build_memory_session
from larder.tests.sample_data import make_catalog, make_recipes

DAY = '2026-03-02'


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self.session = build_memory_session(make_catalog(), make_recipes())
        self.client = TestClient(create_app(self.session))

    def add_meal(self, recipe_id, day=DAY, meal_type='breakfast', servings=None):
        body = {'date': day, 'recipe_id': recipe_id, 'meal_type': meal_type}
        if servings is not None:
            body['servings'] = servings
        response = self.client.post('/api/meals', json=body)
        self.assertEqual(response.status_code, 201)
        return response.json()


class TestPantryApi(ApiTestCase):

    def test_add_and_read_item(self):
        response = self.client.post('/api/pantry', json={'ingredient_id': 'eggs', 'quantity': 6, 'storage': 'fridge'})
        self.assertEqual(response.status_code, 201)
        item = response.json()
        self.assertEqual(item['unit'], 'pieces')
        self.assertEqual(item['name'], 'Eggs')
        self.assertEqual(item['available'], 6)

        listed = self.client.get('/api/pantry').json()
        self.assertEqual([i['ingredientId'] for i in listed], ['eggs'])

    def test_unknown_ingredient_is_404(self):
        response = self.client.post('/api/pantry', json={'ingredient_id': 'unicorn', 'quantity': 1})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(self.client.get('/api/pantry/unicorn').status_code, 404)

    def test_invalid_body_is_rejected(self):
        response = self.client.post('/api/pantry', json={'ingredient_id': 'eggs', 'quantity': -1})
        self.assertEqual(response.status_code, 422)
        response = self.client.post('/api/pantry', json={'ingredient_id': 'eggs', 'storage': 'garage'})
        self.assertEqual(response.status_code, 422)

    def test_update_quantity_and_remove(self):
        self.session.pantry.set('milk', 500)
        response = self.client.put('/api/pantry/milk/quantity', json={'quantity': 1, 'unit': 'l'})
        self.assertEqual(response.json()['quantity'], 1)
        self.assertEqual(response.json()['unit'], 'l')
        self.assertEqual(self.client.delete('/api/pantry/milk').status_code, 200)
        self.assertEqual(self.client.delete('/api/pantry/milk').status_code, 404)

    def test_reservations_show_on_item(self):
        self.session.pantry.set('eggs', 6)
        self.add_meal('pancakes', servings=4)
        item = self.client.get('/api/pantry/eggs').json()
        self.assertEqual((item['reserved'], item['available']), (2, 4))
        self.assertEqual(item['reservations'][0]['date'], DAY)

    def test_import_failure_is_400(self):
        response = self.client.post('/api/pantry/import', json={'data': {'version': '1.0.0'}})
        self.assertEqual(response.status_code, 400)


class TestMealsApi(ApiTestCase):

    def test_add_defaults_servings_to_recipe_yield(self):
        meal = self.add_meal('egg_bake')
        self.assertTrue(meal['id'].startswith('meal_'))
        self.assertEqual(meal['servings'], 4)
        self.assertEqual(meal['recipeTitle'], self.session.recipes.get('egg_bake').title)
        self.assertFalse(meal['availability']['can_make'])

    def test_unknown_recipe_is_404(self):
        response = self.client.post('/api/meals', json={'date': DAY, 'recipe_id': 'unicorn_pie'})
        self.assertEqual(response.status_code, 404)

    def test_bad_date_is_422(self):
        response = self.client.post('/api/meals', json={'date': '02/03/2026', 'recipe_id': 'flatbread'})
        self.assertEqual(response.status_code, 422)

    def test_move_keeps_id(self):
        meal = self.add_meal('flatbread', meal_type='lunch')
        moved = self.client.post(f"/api/meals/{meal['id']}/move", json={'date': '2026-03-04'}).json()
        self.assertEqual(moved['id'], meal['id'])
        self.assertEqual(moved['date'], '2026-03-04')
        self.assertEqual(moved['movedFrom'], DAY)
        self.assertEqual(self.client.get(f'/api/meals/date/{DAY}').json(), [])

    def test_eaten_dismiss_restore(self):
        meal = self.add_meal('flatbread', meal_type='lunch')
        eaten = self.client.post(f"/api/meals/{meal['id']}/eaten", json={'consumed_servings': 2}).json()
        self.assertEqual((eaten['status'], eaten['consumedServings']), ('eaten', 2))
        dismissed = self.client.post(f"/api/meals/{meal['id']}/dismiss").json()
        self.assertEqual(dismissed['status'], 'dismissed')
        restored = self.client.post(f"/api/meals/{meal['id']}/restore").json()
        self.assertEqual(restored['status'], 'planned')

    def test_week_view(self):
        self.add_meal('flatbread', meal_type='lunch')
        self.add_meal('flatbread', day='2026-03-09', meal_type='lunch')
        week = self.client.get('/api/meals/week', params={'start': DAY}).json()
        self.assertEqual(list(week['meals']), [DAY])
        self.assertEqual(week['stats']['total_meals'], 1)

    def test_clear_range(self):
        self.add_meal('flatbread', meal_type='lunch')
        self.add_meal('flatbread', day='2026-03-09', meal_type='lunch')
        response = self.client.delete('/api/meals/range', params={'start': DAY, 'end': '2026-03-08'})
        self.assertEqual(response.json()['removed'], 1)
        self.assertEqual(len(self.session.calendar), 1)

    def test_unknown_meal_is_404(self):
        self.assertEqual(self.client.get('/api/meals/meal_missing').status_code, 404)
        self.assertEqual(self.client.post('/api/meals/meal_missing/eaten').status_code, 404)


class TestRecipesAndShoppingApi(ApiTestCase):

    def test_full_matches_only(self):
        self.session.pantry.set('flour', 2)
        self.session.pantry.set('salt', 5)
        data = self.client.get('/api/recipes', params={'match': 'full'}).json()
        self.assertEqual(data['count'], 1)
        self.assertEqual(data['makeable'], 1)
        self.assertEqual(data['recipes'][0]['recipe']['id'], 'flatbread')

    def test_recipe_detail(self):
        data = self.client.get('/api/recipes/flatbread').json()
        self.assertEqual(data['recipe']['id'], 'flatbread')
        self.assertEqual(data['match']['match_type'], 'none')
        self.assertEqual(self.client.get('/api/recipes/unicorn_pie').status_code, 404)

    def test_shopping_list(self):
        self.add_meal('flatbread', meal_type='lunch')
        data = self.client.get('/api/shopping-list', params={'start': DAY, 'end': '2026-03-08'}).json()
        self.assertEqual(sorted(i['ingredientId'] for i in data['items']), ['flour', 'salt'])
        self.assertEqual(sorted(data['by_category']), ['baking', 'spices'])
        self.assertEqual(data['stats']['need_shopping'], 1)

    def test_shopping_list_pdf(self):
        self.add_meal('flatbread', meal_type='lunch')
        response = self.client.get('/api/shopping-list/pdf')
        self.assertEqual(response.headers['content-type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_bad_window_is_400(self):
        self.assertEqual(self.client.get('/api/shopping-list', params={'start': 'soon'}).status_code, 400)


class TestNutritionApi(ApiTestCase):

    def test_planned_and_actual_totals(self):
        meal = self.add_meal('egg_bake')
        planned = self.client.get(f'/api/nutrition/day/{DAY}').json()
        self.assertEqual(planned['total']['calories'], 450)
        self.assertEqual(self.client.get(f'/api/nutrition/day/{DAY}', params={'mode': 'actual'}).json()['meal_count'], 0)

        self.client.post(f"/api/meals/{meal['id']}/eaten", json={'consumed_servings': 2})
        actual = self.client.get(f'/api/nutrition/day/{DAY}', params={'mode': 'actual'}).json()
        self.assertEqual(actual['total']['calories'], 900)

    def test_invalid_mode_and_date(self):
        self.assertEqual(self.client.get(f'/api/nutrition/day/{DAY}', params={'mode': 'both'}).status_code, 422)
        self.assertEqual(self.client.get('/api/nutrition/day/yesterday').status_code, 400)

    def test_presets(self):
        presets = self.client.get('/api/nutrition/presets').json()
        self.assertIn('high_protein', [p['id'] for p in presets])
        prefs = self.client.post('/api/nutrition/presets/high_protein').json()
        self.assertEqual(prefs['goals']['daily']['protein']['target'], 200)
        self.assertEqual(self.client.post('/api/nutrition/presets/keto_max').status_code, 404)

    def test_set_goal(self):
        response = self.client.put('/api/nutrition/goals/fiber', json={'target': 35, 'type': 'minimum'})
        self.assertEqual(response.json(), {'macro': 'fiber', 'target': 35, 'type': 'minimum'})
        self.assertEqual(self.client.put('/api/nutrition/goals/sodium', json={'target': 5}).status_code, 404)
        self.assertEqual(self.client.put('/api/nutrition/goals/fiber', json={'target': 0}).status_code, 422)

    def test_prefs_update_rejects_unknown_macro(self):
        response = self.client.put('/api/nutrition/prefs', json={'goals': {'sodium': {'target': 5}}})
        self.assertEqual(response.status_code, 422)


class TestEventsApi(ApiTestCase):

    def test_changes_are_logged(self):
        self.client.post('/api/pantry', json={'ingredient_id': 'eggs', 'quantity': 6})
        self.add_meal('flatbread', meal_type='lunch')
        data = self.client.get('/api/events').json()
        self.assertEqual([e['action'] for e in data['events']], ['add', 'add'])
        self.assertEqual(self.client.get('/api/events', params={'since': data['next_cursor']}).json()['events'], [])

    def test_health(self):
        self.assertEqual(self.client.get('/api/health').json()['recipes'], 4)
