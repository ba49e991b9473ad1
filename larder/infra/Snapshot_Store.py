"""Persistence port implementations for the stores (load/save a JSON snapshot)."""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class JsonSnapshotStore:
    """One JSON document per store. Writes go through a temp file and a move."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[Any]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            logger.info(f"No snapshot at {self.path}, starting empty")
            return None
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in {self.path}: {e}")
            return None

    def save(self, snapshot: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=f".{self.path.stem}_", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(snapshot, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, self.path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def __repr__(self) -> str:
        return f"JsonSnapshotStore({str(self.path)!r})"


class MemorySnapshotStore:
    """Keeps the last saved snapshot in memory (tests, throwaway sessions)."""

    def __init__(self, initial: Any = None):
        self.data = initial
        self.saves = 0

    def load(self) -> Optional[Any]:
        return json.loads(json.dumps(self.data)) if self.data is not None else None

    def save(self, snapshot: Any) -> None:
        # round-trip through JSON so callers never share mutable state with the store
        self.data = json.loads(json.dumps(snapshot))
        self.saves += 1
