import unittest

from larder.domain.Recipe import RecipeRecord
from larder.infra.session import build_memory_session
from larder.logic.reporting.nutrition import goal_status, to_grams
from larder.tests.sample_data import make_catalog, make_recipes

DAY = '2026-03-02'


class TestRecipeNutrition(unittest.TestCase):

    def setUp(self):
        self.session = build_memory_session(make_catalog(), make_recipes())
        self.engine = self.session.nutrition

    def test_to_grams(self):
        self.assertEqual(to_grams(2, 'cups'), 480)
        self.assertEqual(to_grams(3, 'pieces'), 300)
        self.assertEqual(to_grams(1, 'pinch'), 100)

    def test_recipe_totals_and_per_serving(self):
        # 12 eggs (1200 g) + 200 ml milk, salt has no data
        nutrition = self.engine.recipe_nutrition(self.session.recipes.get('egg_bake'))
        self.assertTrue(nutrition['has_data'])
        self.assertEqual(nutrition['total']['calories'], 1800)
        self.assertEqual(nutrition['total']['protein'], 150)
        self.assertEqual(nutrition['per_serving'], {
            'calories': 450, 'protein': 37.5, 'carbs': 5.5, 'fat': 31.5, 'fiber': 0,
        })
        self.assertEqual([b['ingredient_id'] for b in nutrition['breakdown']], ['eggs', 'milk'])

    def test_recipe_without_data(self):
        recipe = RecipeRecord.from_dict({'id': 'brine', 'servings': 1, 'ingredients': [
            {'ingredientId': 'salt', 'quantity': 2, 'unit': 'tsp'},
        ]})
        nutrition = self.engine.recipe_nutrition(recipe)
        self.assertFalse(nutrition['has_data'])
        self.assertEqual(nutrition['total']['calories'], 0)

    def test_goal_status(self):
        self.assertEqual(goal_status(110, 'limit'), 'over')
        self.assertEqual(goal_status(85, 'limit'), 'near')
        self.assertEqual(goal_status(50, 'limit'), 'under')
        self.assertEqual(goal_status(100, 'minimum'), 'met')
        self.assertEqual(goal_status(80, 'minimum'), 'near')


class TestDayAndWeekNutrition(unittest.TestCase):

    def setUp(self):
        self.session = build_memory_session(make_catalog(), make_recipes())
        self.engine = self.session.nutrition
        calendar = self.session.calendar
        self.bake = calendar.add_meal(DAY, 'egg_bake', 'breakfast', 4)
        self.dinner = calendar.add_meal(DAY, 'chicken_rice', 'dinner', 2)

    def test_planned_day_total_counts_one_serving_per_entry(self):
        day = self.engine.day_total(DAY)
        self.assertEqual(day['meal_count'], 2)
        self.assertEqual(day['total']['calories'], 1140)
        self.assertEqual(day['total']['protein'], 106.5)
        self.assertEqual(day['percentages']['calories'], 57)
        self.assertEqual(day['status']['protein'], 'near')
        self.assertEqual(day['status']['fiber'], 'under')

    def test_limit_goal_over(self):
        self.session.prefs.set_goal('calories', 1000)
        day = self.engine.day_total(DAY)
        self.assertEqual(day['percentages']['calories'], 114)
        self.assertEqual(day['status']['calories'], 'over')

    def test_actual_mode_counts_only_eaten(self):
        self.assertEqual(self.engine.day_total(DAY, 'actual')['meal_count'], 0)
        self.session.calendar.mark_eaten(self.dinner.id, 2)
        actual = self.engine.day_total(DAY, 'actual')
        self.assertEqual(actual['meal_count'], 1)
        self.assertEqual(actual['total']['calories'], 1380)
        # planned totals are unaffected by eating
        self.assertEqual(self.engine.day_total(DAY)['total']['calories'], 1140)

    def test_zero_consumed_servings_add_nothing(self):
        self.session.calendar.mark_eaten(self.dinner.id, 0)
        actual = self.engine.day_total(DAY, 'actual')
        self.assertEqual(actual['meal_count'], 1)
        self.assertEqual(actual['meals'][0]['servings_consumed'], 0)
        self.assertEqual(actual['total']['calories'], 0)

    def test_remaining_budget(self):
        remaining = self.engine.remaining_budget(DAY)
        self.assertEqual(remaining['calories'], 860)
        self.assertEqual(remaining['protein'], 13.5)
        self.assertEqual(remaining['consumed']['calories'], 1140)

    def test_fits_budget(self):
        result = self.engine.fits_budget(self.session.recipes.get('flatbread'), DAY)
        self.assertFalse(result['fits'])
        exceeding = {e['macro']: e for e in result['exceeding']}
        self.assertEqual(set(exceeding), {'calories', 'carbs'})
        self.assertEqual(exceeding['calories']['excess'], 14)
        self.assertEqual(exceeding['carbs']['excess'], 18)

    def test_recipe_without_data_always_fits(self):
        recipe = RecipeRecord.from_dict({'id': 'brine', 'ingredients': [{'ingredientId': 'salt', 'quantity': 1}]})
        self.assertTrue(self.engine.fits_budget(recipe, DAY)['fits'])

    def test_day_comparison(self):
        self.session.calendar.mark_eaten(self.dinner.id)
        comparison = self.engine.day_comparison(DAY)
        self.assertTrue(comparison['has_actual_data'])
        self.assertEqual(comparison['difference']['calories'], -450)

    def test_day_summary(self):
        summary = self.engine.day_summary(DAY)
        self.assertEqual(summary['primary']['macro'], 'calories')
        self.assertEqual(summary['primary']['consumed'], 1140)
        self.assertEqual(summary['overall_status'], 'on-track')
        self.assertEqual(summary['needs_more'], ['fiber'])
        self.session.prefs.set_enabled(False)
        self.assertIsNone(self.engine.day_summary(DAY))

    def test_week_total(self):
        self.session.calendar.add_meal('2026-03-04', 'flatbread', 'lunch', 1)
        week = self.engine.week_total(DAY)
        self.assertEqual(week['total']['calories'], 2014)
        self.assertEqual(week['days_with_meals'], 2)
        self.assertEqual(week['daily_average']['calories'], 1007)
        self.assertEqual(week['weekly_goals']['calories'], {'target': 14000, 'type': 'limit'})
        self.assertEqual(len(week['days']), 7)

    def test_empty_week_averages_over_seven_days(self):
        week = self.engine.week_total('2026-04-06')
        self.assertEqual(week['days_with_meals'], 0)
        self.assertEqual(week['daily_average']['calories'], 0)
