"""Process/session wiring: builds every store once and hands them to consumers.

Nothing in the engine reaches for module-level state; the API, the CLI and
tests all work against a LarderSession.
"""
import logging
from pathlib import Path
from typing import Callable, Optional

from larder.domain.NutritionGoals import NutritionPrefs
from larder.domain.Pantry import PantryLedger
from larder.domain.Plan import MealCalendar
from larder.events.web_observers import ChangeLog
from larder.infra.Catalog_Repository import read_catalog
from larder.infra.Recipe_Repository import RecipeRepository
from larder.infra.Snapshot_Store import JsonSnapshotStore, MemorySnapshotStore
from larder.logic.catalog.index import CatalogIndex
from larder.logic.reporting.nutrition import NutritionEngine
from larder.logic.reservation.engine import ReservationEngine
from larder.utilities import config
from larder.utilities.statistics import MealPlanStats

logger = logging.getLogger(__name__)


class LarderSession:
    def __init__(self, catalog: CatalogIndex, recipes: RecipeRepository,
                 pantry_store, meals_store, prefs_store,
                 sync_hook: Optional[Callable[[str, str], None]] = None, clock=None):
        self.catalog = catalog
        self.recipes = recipes
        self.pantry = PantryLedger(catalog, repository=pantry_store, sync_hook=sync_hook, clock=clock)
        self.calendar = MealCalendar(recipes, repository=meals_store, sync_hook=sync_hook, clock=clock)
        self.prefs = NutritionPrefs(repository=prefs_store, sync_hook=sync_hook, clock=clock)
        self.reservations = ReservationEngine(self.calendar, recipes, self.pantry, catalog)
        self.nutrition = NutritionEngine(recipes, catalog, self.calendar, self.prefs)
        self.stats = MealPlanStats(self.calendar, recipes)
        self.changes = ChangeLog().attach(self.pantry, self.calendar, self.prefs)

    def load(self) -> "LarderSession":
        self.pantry.load()
        self.calendar.load()
        self.prefs.load()
        return self


def build_session(data_dir: Optional[Path] = None, sync_hook=None) -> LarderSession:
    """Session backed by JSON files (catalog/recipes read-only, user data in data_dir)."""
    if data_dir is None:
        pantry_file, meals_file, prefs_file = config.PANTRY_FILE, config.MEAL_PLAN_FILE, config.NUTRITION_PREFS_FILE
    else:
        data_dir = Path(data_dir)
        pantry_file = data_dir / config.PANTRY_FILE.name
        meals_file = data_dir / config.MEAL_PLAN_FILE.name
        prefs_file = data_dir / config.NUTRITION_PREFS_FILE.name
    session = LarderSession(
        catalog=read_catalog(config.CATALOG_FILE),
        recipes=RecipeRepository.from_file(config.RECIPES_FILE),
        pantry_store=JsonSnapshotStore(pantry_file),
        meals_store=JsonSnapshotStore(meals_file),
        prefs_store=JsonSnapshotStore(prefs_file),
        sync_hook=sync_hook,
    )
    logger.info(f"Session data files: {pantry_file}, {meals_file}, {prefs_file}")
    return session.load()


def build_memory_session(catalog: Optional[CatalogIndex] = None, recipes: Optional[RecipeRepository] = None,
                         sync_hook=None, clock=None) -> LarderSession:
    """Session with in-memory persistence; reference data defaults to the bundled files."""
    return LarderSession(
        catalog=catalog if catalog is not None else read_catalog(config.CATALOG_FILE),
        recipes=recipes if recipes is not None else RecipeRepository.from_file(config.RECIPES_FILE),
        pantry_store=MemorySnapshotStore(),
        meals_store=MemorySnapshotStore(),
        prefs_store=MemorySnapshotStore(),
        sync_hook=sync_hook,
        clock=clock,
    )
