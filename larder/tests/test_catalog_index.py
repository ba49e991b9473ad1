import unittest

from larder.logic.catalog.index import CatalogIndex, normalize_name
from larder.tests.sample_data import make_catalog


class TestCatalogIndex(unittest.TestCase):

    def setUp(self):
        self.catalog = make_catalog()

    def test_lookup_by_id(self):
        self.assertEqual(self.catalog.get('eggs').name, 'Eggs')
        self.assertIsNone(self.catalog.get('unicorn'))
        self.assertIn('flour', self.catalog)
        self.assertEqual(len(self.catalog), 10)

    def test_search_needs_two_characters(self):
        self.assertEqual(self.catalog.search('t'), [])
        self.assertEqual(self.catalog.search(''), [])
        self.assertEqual(self.catalog.search(None), [])

    def test_exact_name_ranks_first(self):
        results = self.catalog.search_scored('tomato')
        self.assertEqual(results[0][0].id, 'tomato')
        self.assertEqual(results[0][1], 110)
        # prefix on a name: 75 + 10
        self.assertEqual(dict((r.id, s) for r, s in results)['tomato_paste'], 85)

    def test_alias_substring_match(self):
        results = self.catalog.search_scored('puree')
        self.assertEqual([(r.id, s) for r, s in results], [('tomato_paste', 50)])

    def test_each_ingredient_once_with_best_score(self):
        ids = [r.id for r in self.catalog.search('tomato', limit=10)]
        self.assertEqual(len(ids), len(set(ids)))

    def test_limit(self):
        self.assertEqual(len(self.catalog.search('tomato', limit=1)), 1)

    def test_categories(self):
        self.assertEqual(len(self.catalog.categories()), 6)
        self.assertEqual({i.id for i in self.catalog.by_category('dairy')}, {'eggs', 'milk', 'butter'})
        self.assertEqual([i.id for i in self.catalog.by_subcategory('dairy', 'milk')], ['milk'])

    def test_nutrition_parsed_per_100g(self):
        self.assertEqual(self.catalog.get('eggs').nutrition.protein, 12)
        self.assertIsNone(self.catalog.get('salt').nutrition)

    def test_find_by_name(self):
        self.assertEqual(self.catalog.find_by_name('Tomatoes').id, 'tomato')
        self.assertIsNone(self.catalog.find_by_name('zz'))

    def test_normalize_name(self):
        self.assertEqual(normalize_name('Chopped Tomatoes'), 'chopped tomato')
        self.assertEqual(normalize_name('Berries'), 'berry')
        self.assertEqual(normalize_name('Basil Fresh'), 'basil')

    def test_empty_catalog(self):
        empty = CatalogIndex.from_dict(None)
        self.assertEqual(len(empty), 0)
        self.assertEqual(empty.search('flour'), [])
