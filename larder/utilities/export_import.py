"""
Export and Import functionality for the pantry, the meal calendar and nutrition preferences.

Export documents carry a ``version`` and an ``exportedAt`` timestamp; imports
accept either the parsed document or its JSON text and run in ``merge``
(default) or ``replace`` mode.
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Union
import logging

from pydantic import ValidationError

from larder.domain.Pantry import PantryEntry
from larder.domain.Plan import MealEntry, parse_date
from larder.utilities.constants import EXPORT_VERSION, DEFAULT_STORAGE
from larder.utilities.validators import PantryImportItem

logger = logging.getLogger(__name__)

MODE_MERGE = 'merge'
MODE_REPLACE = 'replace'
IMPORT_MODES = (MODE_MERGE, MODE_REPLACE)

Payload = Union[str, bytes, Dict[str, Any]]


def _exported_at() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse(data: Payload) -> Any:
    if isinstance(data, (str, bytes)):
        return json.loads(data)
    return data


def _failure(error) -> Dict[str, Any]:
    logger.error(f"Import failed: {error}")
    return {'success': False, 'error': str(error)}


class DataExporter:
    """Export the user data of one session as JSON documents."""

    def __init__(self, session):
        self.session = session

    def export_pantry(self) -> Dict[str, Any]:
        items = self.session.pantry.snapshot()
        return {
            'version': EXPORT_VERSION,
            'exportedAt': _exported_at(),
            'itemCount': len(items),
            'items': items,
        }

    def export_meal_plan(self) -> Dict[str, Any]:
        return {
            'version': EXPORT_VERSION,
            'exportedAt': _exported_at(),
            'meals': self.session.calendar.snapshot(),
        }

    def export_nutrition_prefs(self) -> Dict[str, Any]:
        return {
            'version': EXPORT_VERSION,
            'exportedAt': _exported_at(),
            **self.session.prefs.to_dict(),
        }

    def export(self, data_type: str) -> Dict[str, Any]:
        exporters = {
            'pantry': self.export_pantry,
            'meals': self.export_meal_plan,
            'prefs': self.export_nutrition_prefs,
        }
        return exporters[data_type]()

    @staticmethod
    def write_json(data: Dict[str, Any], output_path: Path = None) -> Path:
        """Write an export document; the default file name is timestamped."""
        if output_path is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            output_path = Path(f"larder_export_{timestamp}.json")
        output_path = Path(output_path)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        logger.info(f"Exported data to {output_path}")
        return output_path


class DataImporter:
    """Import export documents into the stores of one session."""

    def __init__(self, session):
        self.session = session

    def import_pantry(self, data: Payload, mode: str = MODE_MERGE) -> Dict[str, Any]:
        """
        Import pantry items.

        Args:
            data: ``{version, items: [...]}`` or its JSON text
            mode: 'merge' keeps entries not in the file; 'replace' clears the pantry first

        Items without an ingredient id, with an id the catalog does not know,
        or with invalid fields are skipped and counted.
        """
        try:
            parsed = _parse(data)
            if mode not in IMPORT_MODES:
                raise ValueError(f"Unknown import mode: {mode}")
            if not isinstance(parsed, dict) or not isinstance(parsed.get('items'), list):
                raise ValueError('Invalid pantry file format: missing items array')
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
            return _failure(e)

        entries = []
        skipped = 0
        for raw in parsed['items']:
            try:
                item = PantryImportItem.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping invalid pantry item {raw!r}: {e.error_count()} error(s)")
                skipped += 1
                continue
            if item.ingredient_id not in self.session.catalog:
                logger.warning(f"Unknown ingredient in import: {item.ingredient_id}")
                skipped += 1
                continue
            entries.append(PantryEntry(
                ingredient_id=item.ingredient_id,
                quantity=1 if item.quantity is None else item.quantity,
                unit=item.unit or '',
                storage=item.storage or DEFAULT_STORAGE,
                notes=item.notes or '',
            ))

        imported = self.session.pantry.replace_entries(entries, replace=(mode == MODE_REPLACE))
        logger.info(f"Imported {imported} pantry items ({mode}), skipped {skipped}")
        return {
            'success': True,
            'imported': imported,
            'skipped': skipped + len(entries) - imported,
            'total': len(parsed['items']),
        }

    def import_meal_plan(self, data: Payload, mode: str = MODE_MERGE) -> Dict[str, Any]:
        """
        Import calendar entries from ``{meals: {YYYY-MM-DD: [entry, ...]}}``.

        Merged entries receive fresh ids; replace mode keeps the file's ids.
        Entries with a bad date or an unknown recipe are skipped.
        """
        try:
            parsed = _parse(data)
            if mode not in IMPORT_MODES:
                raise ValueError(f"Unknown import mode: {mode}")
            if not isinstance(parsed, dict) or not isinstance(parsed.get('meals'), dict):
                raise ValueError('Invalid meal plan file format')
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
            return _failure(e)

        meals = {}
        total = 0
        skipped = 0
        for key, raw_entries in parsed['meals'].items():
            day = parse_date(key)
            raw_entries = raw_entries if isinstance(raw_entries, list) else []
            total += len(raw_entries)
            for raw in raw_entries:
                entry = MealEntry.from_dict(raw, day) if day is not None else None
                if entry is None or self.session.recipes.get(entry.recipe_id) is None:
                    skipped += 1
                    continue
                meals.setdefault(day, []).append(entry)

        imported = self.session.calendar.replace_meals(meals, replace=(mode == MODE_REPLACE))
        logger.info(f"Imported {imported} meal entries ({mode}), skipped {skipped}")
        return {'success': True, 'imported': imported, 'skipped': skipped, 'total': total}

    def import_nutrition_prefs(self, data: Payload) -> Dict[str, Any]:
        """Replace goals, the enabled flag and display settings; invalid goals fall back to defaults."""
        try:
            parsed = _parse(data)
            if not isinstance(parsed, dict) or not ('goals' in parsed or 'enabled' in parsed):
                raise ValueError('Invalid nutrition preferences format')
        except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
            return _failure(e)

        self.session.prefs.replace_from_dict(parsed)
        logger.info("Imported nutrition preferences")
        return {'success': True, 'imported': 1, 'skipped': 0, 'total': 1}

    def import_file(self, data_type: str, input_path: Path, mode: str = MODE_MERGE) -> Dict[str, Any]:
        try:
            with open(input_path, 'r', encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            return _failure(e)
        if data_type == 'pantry':
            return self.import_pantry(text, mode)
        if data_type == 'meals':
            return self.import_meal_plan(text, mode)
        return self.import_nutrition_prefs(text)


def main(argv=None, session=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description='Export/Import Larder data')
    parser.add_argument('action', choices=['export', 'import'], help='Action to perform')
    parser.add_argument('--type', choices=['pantry', 'meals', 'prefs'], default='pantry', help='Data type')
    parser.add_argument('--file', help='Input/output file path')
    parser.add_argument('--mode', choices=list(IMPORT_MODES), default=MODE_MERGE, help='Import mode')
    parser.add_argument('--data-dir', help='Directory holding the user data files')

    args = parser.parse_args(argv)

    if session is None:
        from larder.infra.session import build_session
        session = build_session(Path(args.data_dir) if args.data_dir else None)

    if args.action == 'export':
        exporter = DataExporter(session)
        result = exporter.write_json(exporter.export(args.type), Path(args.file) if args.file else None)
        print(f"✓ Exported to: {result}")
        return 0

    if not args.file:
        print("Error: --file is required for import")
        return 1

    result = DataImporter(session).import_file(args.type, Path(args.file), args.mode)
    if result['success']:
        print(f"✓ Imported {result['imported']} of {result['total']} from: {args.file} ({result['skipped']} skipped)")
        return 0
    print(f"✗ Import failed: {result['error']}")
    return 1


# CLI interface
if __name__ == "__main__":
    raise SystemExit(main())
