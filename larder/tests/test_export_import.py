import json
import unittest

from larder.infra.session import build_memory_session, build_session
from larder.tests.sample_data import make_catalog, make_recipes
from larder.utilities.export_import import DataExporter, DataImporter, main


def _session():
    return build_memory_session(make_catalog(), make_recipes())


def _ledger_view(pantry):
    return {e.ingredient_id: (e.quantity, e.unit, e.storage) for e in pantry.list()}


class TestPantryExportImport(unittest.TestCase):

    def setUp(self):
        self.source = _session()
        self.source.pantry.set('eggs', 6, 'pieces', 'fridge')
        self.source.pantry.set('flour', 2.5, 'cups')
        self.source.pantry.set('milk', 1, 'l', 'fridge', 'oat milk')

    def test_export_shape(self):
        data = DataExporter(self.source).export_pantry()
        self.assertEqual(data['version'], '1.0.0')
        self.assertEqual(data['itemCount'], 3)
        self.assertIn('exportedAt', data)
        self.assertEqual(data['items'][0]['ingredientId'], 'eggs')

    def test_replace_round_trip(self):
        target = _session()
        target.pantry.set('rice', 500)
        result = DataImporter(target).import_pantry(DataExporter(self.source).export_pantry(), 'replace')
        self.assertEqual(result, {'success': True, 'imported': 3, 'skipped': 0, 'total': 3})
        self.assertEqual(_ledger_view(target.pantry), _ledger_view(self.source.pantry))

    def test_merge_keeps_existing_entries(self):
        target = _session()
        target.pantry.set('rice', 500)
        DataImporter(target).import_pantry(DataExporter(self.source).export_pantry())
        self.assertEqual(len(target.pantry), 4)

    def test_accepts_json_text(self):
        text = json.dumps(DataExporter(self.source).export_pantry())
        self.assertTrue(DataImporter(_session()).import_pantry(text)['success'])

    def test_unknown_and_invalid_items_are_skipped(self):
        payload = {'items': [
            {'ingredientId': 'eggs', 'quantity': 3},
            {'ingredientId': 'unicorn', 'quantity': 1},
            {'quantity': 2},
            {'ingredientId': 'milk', 'quantity': -4},
            {'ingredientId': 'salt', 'storage': ''},
        ]}
        target = _session()
        result = DataImporter(target).import_pantry(payload)
        self.assertEqual(result, {'success': True, 'imported': 2, 'skipped': 3, 'total': 5})
        self.assertEqual(target.pantry.get('salt').quantity, 1)
        self.assertEqual(target.pantry.get('salt').storage, 'pantry')

    def test_malformed_payloads(self):
        importer = DataImporter(_session())
        self.assertFalse(importer.import_pantry('{not json')['success'])
        result = importer.import_pantry({'version': '1.0.0'})
        self.assertFalse(result['success'])
        self.assertIn('items', result['error'])
        self.assertFalse(importer.import_pantry({'items': []}, 'append')['success'])

    def test_failed_replace_leaves_ledger_untouched(self):
        DataImporter(self.source).import_pantry({'items': 'nope'}, 'replace')
        self.assertEqual(len(self.source.pantry), 3)


class TestMealPlanExportImport(unittest.TestCase):

    def setUp(self):
        self.source = _session()
        self.source.calendar.add_meal('2026-03-02', 'pancakes', 'breakfast')
        self.source.calendar.add_meal('2026-03-03', 'chicken_rice', 'dinner', 2)

    def test_export_shape(self):
        data = DataExporter(self.source).export_meal_plan()
        self.assertEqual(sorted(data['meals']), ['2026-03-02', '2026-03-03'])
        self.assertEqual(data['meals']['2026-03-02'][0]['recipeId'], 'pancakes')

    def test_replace_keeps_ids(self):
        target = _session()
        result = DataImporter(target).import_meal_plan(DataExporter(self.source).export_meal_plan(), 'replace')
        self.assertEqual(result['imported'], 2)
        self.assertEqual(
            sorted(e.id for e in target.calendar.entries()),
            sorted(e.id for e in self.source.calendar.entries()),
        )

    def test_merge_assigns_fresh_ids(self):
        exported = DataExporter(self.source).export_meal_plan()
        DataImporter(self.source).import_meal_plan(exported)
        ids = [e.id for e in self.source.calendar.entries()]
        self.assertEqual(len(ids), 4)
        self.assertEqual(len(set(ids)), 4)

    def test_unknown_recipes_and_bad_dates_are_skipped(self):
        payload = {'meals': {
            '2026-03-05': [{'recipeId': 'flatbread'}, {'recipeId': 'unicorn_pie'}],
            'someday': [{'recipeId': 'flatbread'}],
        }}
        result = DataImporter(_session()).import_meal_plan(payload)
        self.assertEqual(result, {'success': True, 'imported': 1, 'skipped': 2, 'total': 3})

    def test_missing_meals_key(self):
        result = DataImporter(_session()).import_meal_plan({'items': []})
        self.assertEqual(result['success'], False)


class TestNutritionPrefsExportImport(unittest.TestCase):

    def test_round_trip(self):
        source = _session()
        source.prefs.apply_preset('high_protein')
        source.prefs.set_enabled(False)
        target = _session()
        result = DataImporter(target).import_nutrition_prefs(DataExporter(source).export_nutrition_prefs())
        self.assertTrue(result['success'])
        self.assertFalse(target.prefs.enabled)
        self.assertEqual(target.prefs.goal('protein').target, 200)

    def test_rejects_unrelated_document(self):
        self.assertFalse(DataImporter(_session()).import_nutrition_prefs({'items': []})['success'])


def test_cli_round_trip_through_file(tmp_path, capsys):
    source_dir, target_dir = tmp_path / 'source', tmp_path / 'target'
    source = build_session(source_dir)
    source.pantry.set('eggs', 6)
    export_file = tmp_path / 'pantry.json'

    assert main(['export', '--type', 'pantry', '--file', str(export_file)], session=source) == 0
    assert json.loads(export_file.read_text(encoding='utf-8'))['itemCount'] == 1

    target = build_session(target_dir)
    assert main(['import', '--type', 'pantry', '--file', str(export_file), '--mode', 'replace'], session=target) == 0
    assert target.pantry.quantity_of('eggs') == 6
    # persisted by the JSON snapshot store
    assert build_session(target_dir).pantry.quantity_of('eggs') == 6
    assert 'Imported 1 of 1' in capsys.readouterr().out


def test_cli_import_requires_file(capsys):
    assert main(['import', '--type', 'meals'], session=_session()) == 1
    assert '--file is required' in capsys.readouterr().out
