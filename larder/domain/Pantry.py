"""Pantry ledger: on-hand quantity per ingredient with change notification."""
import logging
from typing import Dict, FrozenSet, Iterable, List, Optional

from larder.domain.Store import ObservableStore
from larder.events.Event_Bus import PANTRY_CHANGED
from larder.utilities.constants import DEFAULT_STORAGE

logger = logging.getLogger(__name__)


def _quantity(value, default: float = 1.0) -> float:
    '''Numeric, non-negative quantity. ``None`` means "not given".'''
    if value is None:
        return default
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        logger.warning("Invalid pantry quantity %r, using 0", value)
        return 0.0


class PantryEntry:
    def __init__(self, ingredient_id: str, quantity: float = 1, unit: str = "",
                 storage: str = DEFAULT_STORAGE, notes: str = "",
                 added_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.ingredient_id = ingredient_id
        self.quantity = _quantity(quantity)
        self.unit = unit or ""
        self.storage = storage or DEFAULT_STORAGE
        self.notes = notes or ""
        self.added_at = added_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"{self.ingredient_id} - {self.quantity} {self.unit} ({self.storage})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> "PantryEntry":
        d = dict(data) if isinstance(data, dict) else {}
        return PantryEntry(
            ingredient_id=str(d.get("ingredientId", d.get("ingredient_id", "")) or ""),
            quantity=_quantity(d.get("quantity")),
            unit=d.get("unit", ""),
            storage=d.get("storage", DEFAULT_STORAGE),
            notes=d.get("notes", ""),
            added_at=d.get("addedAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self):
        return {
            "ingredientId": self.ingredient_id,
            "quantity": self.quantity,
            "unit": self.unit,
            "storage": self.storage,
            "notes": self.notes,
            "addedAt": self.added_at,
            "updatedAt": self.updated_at,
        }


class PantryLedger(ObservableStore):
    """Keyed store ingredient_id -> PantryEntry.

    Every entry refers to an ingredient the catalog knows; ``set`` refuses
    unknown ids instead of storing them.
    """
    topic = PANTRY_CHANGED

    def __init__(self, catalog, repository=None, sync_hook=None, bus=None, clock=None):
        super().__init__(repository=repository, sync_hook=sync_hook, bus=bus, clock=clock)
        self._catalog = catalog
        self._items: Dict[str, PantryEntry] = {}

    # --- Queries -----------------------------------------------------------
    def get(self, ingredient_id: str) -> Optional[PantryEntry]:
        return self._items.get(ingredient_id)

    def has(self, ingredient_id: str) -> bool:
        return ingredient_id in self._items

    __contains__ = has

    def list(self) -> List[PantryEntry]:
        with self._lock:
            return list(self._items.values())

    def ids(self) -> FrozenSet[str]:
        '''Ingredients held in a positive quantity; zero-stock entries do not count.'''
        with self._lock:
            return frozenset(i for i, e in self._items.items() if e.quantity > 0)

    def quantity_of(self, ingredient_id: str) -> float:
        entry = self._items.get(ingredient_id)
        return entry.quantity if entry else 0.0

    def __len__(self) -> int:
        return len(self._items)

    def snapshot(self):
        with self._lock:
            return [entry.to_dict() for entry in self._items.values()]

    # --- Mutations ---------------------------------------------------------
    def set(self, ingredient_id: str, quantity=None, unit: Optional[str] = None,
            storage: Optional[str] = None, notes: Optional[str] = None) -> Optional[PantryEntry]:
        '''
        Creates or overwrites the entry for ``ingredient_id``.
        Returns None (and stores nothing) when the catalog does not know the id.
        '''
        ingredient = self._catalog.get(ingredient_id)
        if ingredient is None:
            logger.error("Unknown ingredient: %s", ingredient_id)
            return None

        with self._lock:
            existing = self._items.get(ingredient_id)
            now = self._now()
            entry = PantryEntry(
                ingredient_id=ingredient_id,
                quantity=_quantity(quantity),
                unit=unit or ingredient.default_unit,
                storage=storage or DEFAULT_STORAGE,
                notes=notes or "",
                added_at=existing.added_at if existing else now,
                updated_at=now,
            )
            self._items[ingredient_id] = entry
            self._commit("update" if existing else "add", entry)
        return entry

    def update_quantity(self, ingredient_id: str, quantity, unit: Optional[str] = None) -> Optional[PantryEntry]:
        '''Changes quantity (and optionally unit) of an existing entry only.'''
        existing = self._items.get(ingredient_id)
        if existing is None:
            return None
        return self.set(ingredient_id, quantity, unit or existing.unit, existing.storage, existing.notes)

    def remove(self, ingredient_id: str) -> bool:
        with self._lock:
            entry = self._items.pop(ingredient_id, None)
            if entry is None:
                return False
            self._commit("remove", entry)
        return True

    def clear(self):
        with self._lock:
            self._items.clear()
            self._commit("clear")

    def replace_entries(self, entries: Iterable[PantryEntry], replace: bool = False, action: str = "import") -> int:
        '''
        Bulk write used by imports: one persist and one event for the batch.
        Entries whose ingredient the catalog does not know are dropped.
        Returns the number of entries written.
        '''
        written = 0
        with self._lock:
            if replace:
                self._items.clear()
            now = self._now()
            for entry in entries:
                ingredient = self._catalog.get(entry.ingredient_id)
                if ingredient is None:
                    logger.warning("Unknown ingredient in import: %s", entry.ingredient_id)
                    continue
                entry.unit = entry.unit or ingredient.default_unit
                entry.added_at = entry.added_at or now
                entry.updated_at = now
                self._items[entry.ingredient_id] = entry
                written += 1
            self._commit(action)
        return written

    def load(self) -> int:
        '''Restores entries from the persistence port. No event is fired.'''
        data = self._read_snapshot()
        if not isinstance(data, list):
            return 0
        with self._lock:
            self._items.clear()
            for raw in data:
                entry = PantryEntry.from_dict(raw)
                if not entry.ingredient_id or self._catalog.get(entry.ingredient_id) is None:
                    logger.warning("Dropping stored pantry entry with unknown ingredient: %r", raw)
                    continue
                self._items[entry.ingredient_id] = entry
        logger.info("Loaded %d pantry entries", len(self._items))
        return len(self._items)

    def __str__(self) -> str:
        items_str = ",\n\t".join(str(item) for item in self._items.values())
        return f"Items:\n\t{items_str}"

    __repr__ = __str__
