import unittest

from larder.infra.session import build_memory_session
from larder.logic.matching.suggestions import NO_DATA_SCORE, score_recipe_fit, suggestions_for_date
from larder.tests.sample_data import make_catalog, make_recipes

DAY = '2026-03-02'


class TestSuggestions(unittest.TestCase):

    def setUp(self):
        self.session = build_memory_session(make_catalog(), make_recipes())
        for ingredient_id in ('flour', 'eggs', 'milk', 'salt'):
            self.session.pantry.set(ingredient_id, 10)

    def _suggest(self, **kwargs):
        s = self.session
        return suggestions_for_date(DAY, s.recipes, s.catalog, s.pantry.ids(), s.nutrition, **kwargs)

    def test_recipes_that_fit_come_first(self):
        self.session.prefs.set_goal('calories', 500)
        results = self._suggest(meal_type='breakfast')
        self.assertEqual([r['recipe'].id for r in results], ['egg_bake', 'pancakes'])
        self.assertEqual(results[0]['priority'], 0)
        self.assertTrue(results[0]['fits_nutrition'])
        self.assertEqual(results[1]['priority'], 100)

    def test_min_pantry_match(self):
        self.session.pantry.remove('flour')
        self.session.pantry.remove('milk')
        ids = [r['recipe'].id for r in self._suggest(meal_type='breakfast', min_pantry_match=50)]
        self.assertEqual(ids, ['egg_bake'])

    def test_max_results(self):
        self.assertEqual(len(self._suggest(max_results=1, min_pantry_match=0)), 1)

    def test_tracking_disabled_falls_back_to_pantry_ranking(self):
        self.session.prefs.set_enabled(False)
        results = self._suggest(meal_type='lunch', min_pantry_match=0)
        self.assertEqual([r['recipe'].id for r in results], ['flatbread', 'chicken_rice'])
        self.assertNotIn('priority', results[0])

    def test_score_without_data(self):
        fit = score_recipe_fit(None, {})
        self.assertEqual(fit['score'], NO_DATA_SCORE)
        self.assertFalse(fit['fits'])

    def test_score_exceeding_limit(self):
        remaining = {
            'calories': 100,
            'goals': {'calories': {'target': 2000, 'type': 'limit'}},
            'consumed': {'calories': 1900},
        }
        fit = score_recipe_fit({'calories': 300}, remaining)
        self.assertFalse(fit['fits'])
        # 200 over a 2000 target: 2 x 10 %
        self.assertEqual(fit['score'], 20)
        self.assertEqual(fit['details']['calories']['status'], 'exceeds')

    def test_score_rewards_meeting_a_minimum(self):
        remaining = {
            'protein': 30,
            'goals': {'protein': {'target': 100, 'type': 'minimum'}},
            'consumed': {'protein': 70},
        }
        fit = score_recipe_fit({'protein': 40}, remaining)
        self.assertTrue(fit['fits'])
        self.assertEqual(fit['score'], -10)
