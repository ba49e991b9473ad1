"""Daily nutrition goals per macro, with presets and a tracking switch."""
import copy
import logging
from typing import Any, Dict, List, Optional

from larder.domain.Store import ObservableStore
from larder.events.Event_Bus import NUTRITION_CHANGED
from larder.utilities.constants import MACROS, GOAL_LIMIT, GOAL_MINIMUM, GOAL_TYPES

logger = logging.getLogger(__name__)


class NutritionGoal:
    def __init__(self, target: float, type: str = GOAL_LIMIT):
        self.target = target
        self.type = type if type in GOAL_TYPES else GOAL_LIMIT

    @property
    def is_limit(self) -> bool:
        return self.type == GOAL_LIMIT

    def __eq__(self, other) -> bool:
        return isinstance(other, NutritionGoal) and (self.target, self.type) == (other.target, other.type)

    def __str__(self) -> str:
        return f"{self.target} ({self.type})"

    __repr__ = __str__

    @staticmethod
    def from_dict(data) -> Optional["NutritionGoal"]:
        '''None unless ``target`` is a positive number.'''
        if not isinstance(data, dict):
            return None
        try:
            target = float(data.get("target"))
        except (TypeError, ValueError):
            return None
        if target <= 0:
            return None
        return NutritionGoal(target, data.get("type", GOAL_LIMIT))

    def to_dict(self):
        return {"target": self.target, "type": self.type}


def _goals(calories, protein, carbs, fat, fiber) -> Dict[str, NutritionGoal]:
    return {
        "calories": NutritionGoal(calories, GOAL_LIMIT),
        "protein": NutritionGoal(protein, GOAL_MINIMUM),
        "carbs": NutritionGoal(carbs, GOAL_LIMIT),
        "fat": NutritionGoal(fat, GOAL_LIMIT),
        "fiber": NutritionGoal(fiber, GOAL_MINIMUM),
    }


DEFAULT_GOALS: Dict[str, NutritionGoal] = _goals(2000, 120, 250, 65, 30)

PRESETS: Dict[str, Dict[str, Any]] = {
    "weight_loss": {"name": "Weight Loss", "goals": _goals(1500, 130, 150, 50, 35)},
    "maintenance": {"name": "Maintenance", "goals": _goals(2000, 100, 250, 65, 30)},
    "muscle_gain": {"name": "Muscle Gain", "goals": _goals(2800, 180, 350, 85, 35)},
    "low_carb": {"name": "Low Carb", "goals": _goals(1800, 140, 50, 120, 25)},
    "high_protein": {"name": "High Protein", "goals": _goals(2200, 200, 200, 60, 30)},
}

DEFAULT_DISPLAY_SETTINGS: Dict[str, Any] = {"show_on_calendar": True, "primary_macro": "calories"}


class NutritionPrefs(ObservableStore):
    topic = NUTRITION_CHANGED

    def __init__(self, repository=None, sync_hook=None, bus=None, clock=None):
        super().__init__(repository=repository, sync_hook=sync_hook, bus=bus, clock=clock)
        self.enabled = True
        self._goals: Dict[str, NutritionGoal] = copy.deepcopy(DEFAULT_GOALS)
        self.display_settings: Dict[str, Any] = dict(DEFAULT_DISPLAY_SETTINGS)

    # --- Queries -----------------------------------------------------------
    def goals(self) -> Dict[str, NutritionGoal]:
        return dict(self._goals)

    def goal(self, macro: str) -> Optional[NutritionGoal]:
        return self._goals.get(macro)

    @staticmethod
    def presets() -> List[Dict[str, Any]]:
        return [
            {"id": preset_id, "name": preset["name"],
             "goals": {m: g.to_dict() for m, g in preset["goals"].items()}}
            for preset_id, preset in PRESETS.items()
        ]

    def to_dict(self):
        return {
            "enabled": self.enabled,
            "goals": {"daily": {m: g.to_dict() for m, g in self._goals.items()}},
            "displaySettings": {
                "showOnCalendar": self.display_settings["show_on_calendar"],
                "primaryMacro": self.display_settings["primary_macro"],
            },
        }

    snapshot = to_dict

    # --- Mutations ---------------------------------------------------------
    def set_goal(self, macro: str, target: float, type: Optional[str] = None) -> Optional[NutritionGoal]:
        if macro not in self._goals:
            logger.error("Unknown macro: %s", macro)
            return None
        if not isinstance(target, (int, float)) or target <= 0:
            logger.error("Goal target for %s must be positive, got %r", macro, target)
            return None
        if type is not None and type not in GOAL_TYPES:
            logger.error("Unknown goal type: %s", type)
            return None
        with self._lock:
            goal = self._goals[macro]
            goal.target = target
            if type:
                goal.type = type
            self._commit("update", {"macro": macro, "goal": goal.to_dict()})
        return goal

    def apply_preset(self, preset_id: str) -> Optional[Dict[str, NutritionGoal]]:
        preset = PRESETS.get(preset_id)
        if preset is None:
            logger.error("Unknown preset: %s", preset_id)
            return None
        with self._lock:
            self._goals = copy.deepcopy(preset["goals"])
            self._commit("preset", {"preset": preset_id})
        return self.goals()

    def set_enabled(self, enabled: bool) -> bool:
        with self._lock:
            self.enabled = bool(enabled)
            self._commit("update", {"enabled": self.enabled})
        return self.enabled

    def update(self, enabled: Optional[bool] = None, goals: Optional[Dict[str, Dict[str, Any]]] = None,
               display_settings: Optional[Dict[str, Any]] = None):
        '''
        Partial update. Goal entries are merged per macro; unknown macros and
        invalid targets are ignored.
        '''
        with self._lock:
            if enabled is not None:
                self.enabled = bool(enabled)
            for macro, value in (goals or {}).items():
                current = self._goals.get(macro)
                if current is None or not isinstance(value, dict):
                    continue
                merged = NutritionGoal.from_dict({**current.to_dict(), **value})
                if merged is not None:
                    self._goals[macro] = merged
            for key, value in (display_settings or {}).items():
                if key in DEFAULT_DISPLAY_SETTINGS and value is not None:
                    self.display_settings[key] = value
            self._commit("update")
        return self

    def reset(self):
        with self._lock:
            self._apply_dict({})
            self._commit("reset")
        return self

    def replace_from_dict(self, data: Dict[str, Any], action: str = "import"):
        '''Loads a stored/imported shape, falling back to defaults per field.'''
        with self._lock:
            self._apply_dict(data)
            self._commit(action)
        return self

    def load(self) -> bool:
        data = self._read_snapshot()
        if not isinstance(data, dict):
            return False
        with self._lock:
            self._apply_dict(data)
        return True

    def _apply_dict(self, data: Dict[str, Any]):
        daily = ((data.get("goals") or {}).get("daily") or {}) if isinstance(data, dict) else {}
        self._goals = {}
        for macro in MACROS:
            self._goals[macro] = NutritionGoal.from_dict(daily.get(macro)) or copy.deepcopy(DEFAULT_GOALS[macro])
        enabled = data.get("enabled")
        self.enabled = True if enabled is None else bool(enabled)
        display = data.get("displaySettings") or {}
        self.display_settings = {
            "show_on_calendar": display.get("showOnCalendar", DEFAULT_DISPLAY_SETTINGS["show_on_calendar"]),
            "primary_macro": display.get("primaryMacro") or DEFAULT_DISPLAY_SETTINGS["primary_macro"],
        }
