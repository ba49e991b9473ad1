"""Meal calendar: date -> ordered list of planned meal entries."""
import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple, Union

from larder.domain.Store import ObservableStore
from larder.events.Event_Bus import MEALS_CHANGED
from larder.utilities.constants import (
    DATE_FORMAT, MEAL_TYPES, MEAL_STATUS_PLANNED, MEAL_STATUS_EATEN,
    MEAL_STATUS_DISMISSED, MEAL_STATUSES,
)

logger = logging.getLogger(__name__)

DateLike = Union[date, str]


def parse_date(value: DateLike) -> Optional[date]:
    '''Accepts a ``date``/``datetime`` or a ``YYYY-MM-DD`` string; None if unparseable.'''
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), DATE_FORMAT).date()
        except ValueError:
            return None
    return None


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def week_start(value: DateLike) -> date:
    '''Monday of the week containing ``value``.'''
    day = parse_date(value)
    return day - timedelta(days=day.weekday())


def week_dates(start: DateLike) -> List[date]:
    '''The 7 consecutive dates beginning at ``start`` (not snapped to Monday).'''
    first = parse_date(start)
    return [first + timedelta(days=i) for i in range(7)]


def new_meal_id() -> str:
    return f"meal_{uuid.uuid4().hex}"


class MealEntry:
    def __init__(self, id: str, date: date, recipe_id: str, meal_type: str = "dinner",
                 servings: float = 1, status: str = MEAL_STATUS_PLANNED,
                 consumed_servings: Optional[float] = None, consumed_at: Optional[str] = None,
                 moved_from: Optional[date] = None, notes: str = "", added_at: Optional[str] = None):
        self.id = id
        self.date = date
        self.recipe_id = recipe_id
        self.meal_type = meal_type if meal_type in MEAL_TYPES else "dinner"
        self.servings = max(1, servings or 1)
        self.status = status if status in MEAL_STATUSES else MEAL_STATUS_PLANNED
        self.consumed_servings = consumed_servings
        self.consumed_at = consumed_at
        self.moved_from = moved_from
        self.notes = notes or ""
        self.added_at = added_at

    @property
    def is_eaten(self) -> bool:
        return self.status == MEAL_STATUS_EATEN

    def __str__(self) -> str:
        return f"{format_date(self.date)} {self.meal_type}: {self.recipe_id} x{self.servings} [{self.status}]"

    __repr__ = __str__

    @staticmethod
    def from_dict(data, day: Optional[DateLike] = None) -> Optional["MealEntry"]:
        '''
        Builds an entry from its stored shape. ``day`` overrides the entry's own
        date (the calendar stores entries under their date key).
        Returns None when the date or recipe id is missing.
        '''
        d = dict(data) if isinstance(data, dict) else {}
        entry_date = parse_date(day if day is not None else d.get("date"))
        recipe_id = d.get("recipeId", d.get("recipe_id"))
        if entry_date is None or not recipe_id:
            return None
        try:
            servings = float(d.get("servings") or 1)
        except (TypeError, ValueError):
            servings = 1
        consumed = d.get("consumedServings")
        try:
            consumed = float(consumed) if consumed is not None else None
        except (TypeError, ValueError):
            consumed = None
        return MealEntry(
            id=str(d.get("id") or new_meal_id()),
            date=entry_date,
            recipe_id=str(recipe_id),
            meal_type=d.get("mealType", d.get("meal_type", "dinner")),
            servings=servings,
            status=d.get("status", MEAL_STATUS_PLANNED),
            consumed_servings=consumed,
            consumed_at=d.get("consumedAt"),
            moved_from=parse_date(d.get("movedFrom")) if d.get("movedFrom") else None,
            notes=d.get("notes", ""),
            added_at=d.get("addedAt"),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "date": format_date(self.date),
            "recipeId": self.recipe_id,
            "mealType": self.meal_type,
            "servings": self.servings,
            "status": self.status,
            "consumedServings": self.consumed_servings,
            "consumedAt": self.consumed_at,
            "movedFrom": format_date(self.moved_from) if self.moved_from else None,
            "notes": self.notes,
            "addedAt": self.added_at,
        }


class MealCalendar(ObservableStore):
    """Mapping date -> [MealEntry]; a date with no entries has no key."""
    topic = MEALS_CHANGED

    def __init__(self, recipes=None, repository=None, sync_hook=None, bus=None, clock=None,
                 id_factory: Optional[Callable[[], str]] = None):
        super().__init__(repository=repository, sync_hook=sync_hook, bus=bus, clock=clock)
        self._recipes = recipes
        self._new_id = id_factory or new_meal_id
        self._meals: Dict[date, List[MealEntry]] = {}

    # --- Queries -----------------------------------------------------------
    def meals_for_date(self, day: DateLike) -> List[MealEntry]:
        with self._lock:
            return list(self._meals.get(parse_date(day), []))

    def meals_for_week(self, start: DateLike) -> Dict[date, List[MealEntry]]:
        '''Only dates that have entries are included.'''
        with self._lock:
            return {d: list(self._meals[d]) for d in week_dates(start) if d in self._meals}

    def all_meals(self) -> Dict[date, List[MealEntry]]:
        with self._lock:
            return {d: list(self._meals[d]) for d in sorted(self._meals)}

    def dates(self) -> List[date]:
        with self._lock:
            return sorted(self._meals)

    def entries(self) -> List[MealEntry]:
        with self._lock:
            return [entry for d in sorted(self._meals) for entry in self._meals[d]]

    def entries_between(self, start: Optional[DateLike] = None, end: Optional[DateLike] = None) -> List[MealEntry]:
        '''Entries with ``start <= date <= end``; either bound may be None.'''
        first = parse_date(start) if start is not None else None
        last = parse_date(end) if end is not None else None
        return [
            entry for entry in self.entries()
            if (first is None or entry.date >= first) and (last is None or entry.date <= last)
        ]

    def get(self, meal_id: str) -> Optional[MealEntry]:
        found = self._find(meal_id)
        return found[1] if found else None

    def __len__(self) -> int:
        with self._lock:
            return sum(len(v) for v in self._meals.values())

    def snapshot(self):
        with self._lock:
            return {format_date(d): [e.to_dict() for e in self._meals[d]] for d in sorted(self._meals)}

    def _find(self, meal_id: str) -> Optional[Tuple[date, MealEntry]]:
        with self._lock:
            for day, entries in self._meals.items():
                for entry in entries:
                    if entry.id == meal_id:
                        return day, entry
        return None

    def _detach(self, day: date, entry: MealEntry):
        bucket = self._meals[day]
        bucket.remove(entry)
        if not bucket:
            del self._meals[day]

    # --- Mutations ---------------------------------------------------------
    def add_meal(self, day: DateLike, recipe_id: str, meal_type: str = "dinner",
                 servings: Optional[float] = None, notes: str = "") -> Optional[MealEntry]:
        '''
        Appends an entry for ``recipe_id`` on ``day``. Servings default to the
        recipe's own yield. Returns None for an unknown recipe or bad date.
        '''
        entry_date = parse_date(day)
        if entry_date is None:
            logger.error("Invalid meal date: %r", day)
            return None
        recipe = None
        if self._recipes is not None:
            recipe = self._recipes.get(recipe_id)
            if recipe is None:
                logger.error("Unknown recipe: %s", recipe_id)
                return None
        if meal_type not in MEAL_TYPES:
            logger.warning("Unknown meal type %r, using dinner", meal_type)
            meal_type = "dinner"
        if not servings:
            servings = recipe.servings if recipe else 1

        with self._lock:
            entry = MealEntry(
                id=self._new_id(),
                date=entry_date,
                recipe_id=recipe_id,
                meal_type=meal_type,
                servings=servings,
                notes=notes,
                added_at=self._now(),
            )
            self._meals.setdefault(entry_date, []).append(entry)
            self._commit("add", entry)
        return entry

    def update_meal(self, meal_id: str, servings: Optional[float] = None, meal_type: Optional[str] = None,
                    notes: Optional[str] = None) -> Optional[MealEntry]:
        with self._lock:
            found = self._find(meal_id)
            if found is None:
                return None
            entry = found[1]
            if servings is not None:
                entry.servings = max(1, servings)
            if meal_type in MEAL_TYPES:
                entry.meal_type = meal_type
            if notes is not None:
                entry.notes = notes
            self._commit("update", entry)
        return entry

    def remove_meal(self, meal_id: str) -> bool:
        with self._lock:
            found = self._find(meal_id)
            if found is None:
                return False
            self._detach(*found)
            self._commit("remove", found[1])
        return True

    def clear_range(self, start: DateLike, end: DateLike) -> int:
        '''Removes every entry dated within [start, end]. Returns how many.'''
        first, last = parse_date(start), parse_date(end)
        if first is None or last is None:
            return 0
        with self._lock:
            doomed = [d for d in self._meals if first <= d <= last]
            removed = sum(len(self._meals[d]) for d in doomed)
            for d in doomed:
                del self._meals[d]
            self._commit("clear", {"start": format_date(first), "end": format_date(last), "removed": removed})
        return removed

    def clear_week(self, start: DateLike) -> int:
        first = parse_date(start)
        if first is None:
            return 0
        return self.clear_range(first, first + timedelta(days=6))

    def mark_eaten(self, meal_id: str, consumed_servings: Optional[float] = None) -> Optional[MealEntry]:
        '''Records consumption; actual-mode nutrition counts only eaten entries.'''
        with self._lock:
            found = self._find(meal_id)
            if found is None:
                return None
            entry = found[1]
            entry.status = MEAL_STATUS_EATEN
            entry.consumed_servings = max(0, consumed_servings) if consumed_servings is not None else 1
            entry.consumed_at = self._now()
            self._commit("status", entry)
        return entry

    def dismiss(self, meal_id: str) -> Optional[MealEntry]:
        with self._lock:
            found = self._find(meal_id)
            if found is None:
                return None
            entry = found[1]
            entry.status = MEAL_STATUS_DISMISSED
            entry.consumed_servings = None
            entry.consumed_at = None
            self._commit("status", entry)
        return entry

    def restore(self, meal_id: str) -> Optional[MealEntry]:
        '''Undo for eaten/dismissed: back to planned.'''
        with self._lock:
            found = self._find(meal_id)
            if found is None:
                return None
            entry = found[1]
            entry.status = MEAL_STATUS_PLANNED
            entry.consumed_servings = None
            entry.consumed_at = None
            self._commit("status", entry)
        return entry

    def move_meal(self, meal_id: str, new_date: DateLike) -> Optional[MealEntry]:
        target = parse_date(new_date)
        if target is None:
            return None
        with self._lock:
            found = self._find(meal_id)
            if found is None:
                return None
            day, entry = found
            if day == target:
                return entry
            self._detach(day, entry)
            entry.moved_from = day
            entry.date = target
            self._meals.setdefault(target, []).append(entry)
            self._commit("move", entry)
        return entry

    def replace_meals(self, meals: Dict[date, List[MealEntry]], replace: bool = False, action: str = "import") -> int:
        '''
        Bulk write used by imports. Merged entries get fresh ids so they can
        never collide with existing ones. Returns the number of entries written.
        '''
        written = 0
        with self._lock:
            if replace:
                self._meals.clear()
            for day in sorted(meals):
                for entry in meals[day]:
                    if not replace:
                        entry.id = self._new_id()
                    entry.date = day
                    self._meals.setdefault(day, []).append(entry)
                    written += 1
            self._commit(action)
        return written

    def load(self) -> int:
        '''Restores the calendar from the persistence port. No event is fired.'''
        data = self._read_snapshot()
        if not isinstance(data, dict):
            return 0
        with self._lock:
            self._meals.clear()
            for key, raw_entries in data.items():
                day = parse_date(key)
                if day is None or not isinstance(raw_entries, list):
                    logger.warning("Dropping stored meals under invalid date %r", key)
                    continue
                for raw in raw_entries:
                    entry = MealEntry.from_dict(raw, day)
                    if entry is not None:
                        self._meals.setdefault(day, []).append(entry)
        logger.info("Loaded %d meal entries", len(self))
        return len(self)
