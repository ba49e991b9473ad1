import json
import logging
from larder.logic.catalog.index import CatalogIndex
from larder.utilities.config import CATALOG_FILE

logger = logging.getLogger(__name__)


def read_catalog(path=CATALOG_FILE) -> CatalogIndex:
    """Read the ingredient catalog ({categories, ingredients}) into an index; empty on error."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            catalog_data = json.load(f)
        index = CatalogIndex.from_dict(catalog_data)
        logger.info(f"Loaded {len(index)} catalog ingredients from {path}")
        return index
    except FileNotFoundError:
        logger.warning(f"Catalog file not found: {path}. Returning empty catalog.")
        return CatalogIndex()
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in catalog file: {e}")
        return CatalogIndex()
