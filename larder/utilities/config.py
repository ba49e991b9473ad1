"""Configuration management for the Larder engine and its API."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '127.0.0.1')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
REFERENCE_DIR: Final[Path] = BASE_DIR / 'data'
DATA_DIR: Final[Path] = Path(os.getenv('LARDER_DATA_DIR', str(Path.home() / '.larder')))

CATALOG_FILE: Final[Path] = Path(os.getenv('CATALOG_FILE', str(REFERENCE_DIR / 'catalog.json')))
RECIPES_FILE: Final[Path] = Path(os.getenv('RECIPES_FILE', str(REFERENCE_DIR / 'recipes.json')))
PANTRY_FILE: Final[Path] = Path(os.getenv('PANTRY_FILE', str(DATA_DIR / 'pantry.json')))
MEAL_PLAN_FILE: Final[Path] = Path(os.getenv('MEAL_PLAN_FILE', str(DATA_DIR / 'meal_plan.json')))
NUTRITION_PREFS_FILE: Final[Path] = Path(os.getenv('NUTRITION_PREFS_FILE', str(DATA_DIR / 'nutrition_prefs.json')))
