import unittest

from larder.domain.Recipe import RecipeRecord
from larder.infra.session import build_memory_session
from larder.logic.matching.scorer import (
    calculate_match_score, classify, count_makeable, filter_by_match_type, rank_recipes,
)
from larder.tests.sample_data import make_catalog, make_recipes


class TestMatchScorer(unittest.TestCase):

    def setUp(self):
        self.recipes = make_recipes()
        self.catalog = make_catalog()
        self.pancakes = self.recipes.get('pancakes')

    def test_partial_required_coverage(self):
        match = calculate_match_score(self.pancakes, {'flour', 'eggs'}, self.catalog)
        self.assertEqual(match['required_percent'], 67)
        self.assertEqual(match['match_type'], 'minimal')
        # 20 of 36 points
        self.assertEqual(match['score'], 56)
        self.assertEqual([m['ingredient_id'] for m in match['missing']], ['milk'])
        self.assertEqual(match['missing'][0]['name'], 'Milk')

    def test_optional_ingredients_only_add_points(self):
        match = calculate_match_score(self.pancakes, {'flour', 'eggs', 'butter'})
        self.assertEqual(match['required_percent'], 67)
        self.assertEqual(match['score'], 64)
        self.assertEqual(match['optional_have'], 1)

    def test_full_match(self):
        match = calculate_match_score(self.pancakes, ['flour', 'eggs', 'milk'])
        self.assertEqual(match['match_type'], 'full')
        self.assertEqual(match['score'], 83)
        self.assertEqual(match['missing'], [])

    def test_recipe_without_ingredients(self):
        match = calculate_match_score(RecipeRecord('water', 'Water'), set())
        self.assertEqual(match['required_percent'], 100)
        self.assertEqual(match['score'], 0)

    def test_match_type_is_monotonic(self):
        order = {'none': 3, 'minimal': 2, 'partial': 1, 'full': 0}
        ranks = [order[classify(p)] for p in range(0, 101)]
        self.assertEqual(ranks, sorted(ranks, reverse=True))
        self.assertEqual(classify(70), 'partial')
        self.assertEqual(classify(69), 'minimal')
        self.assertEqual(classify(49), 'none')

    def test_rank_recipes_orders_by_type_then_score(self):
        ranked = rank_recipes(self.recipes, {'flour', 'eggs', 'milk'}, self.catalog)
        self.assertEqual(
            [r['recipe'].id for r in ranked],
            ['egg_bake', 'pancakes', 'flatbread', 'chicken_rice'],
        )

    def test_filter_by_match_type(self):
        ranked = rank_recipes(self.recipes, {'flour', 'eggs', 'milk'})
        self.assertEqual([r['recipe'].id for r in filter_by_match_type(ranked, 'full')], ['egg_bake', 'pancakes'])
        self.assertEqual(len(filter_by_match_type(ranked, 'partial')), 2)
        self.assertEqual(len(filter_by_match_type(ranked, 'minimal')), 3)
        self.assertEqual(len(filter_by_match_type(ranked, 'all')), 4)

    def test_zero_stock_pantry_entries_do_not_match(self):
        session = build_memory_session(self.catalog, self.recipes)
        session.pantry.set('flour', 0, 'cups')
        session.pantry.set('salt', 0, 'tsp')
        match = calculate_match_score(self.recipes.get('flatbread'), session.pantry.ids(), self.catalog)
        self.assertEqual(match['match_type'], 'none')
        self.assertEqual(match['score'], 0)

    def test_count_makeable(self):
        self.assertEqual(count_makeable(self.recipes, {'flour', 'eggs', 'milk'}), 2)
        self.assertEqual(count_makeable(self.recipes, set()), 0)
