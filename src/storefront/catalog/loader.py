"""Static catalog loaded from JSON files.

The catalog is read once when the app registry is ready and never reloaded;
changing items or categories requires a process restart.

Files in the catalog directory:
    items.json       list of {id, name, price, image, category}
    categories.json  list of {slug, name, image?}
    metadata.json    site-wide page metadata (title, description, ...)
    home.json        home page content

Any other ``<name>.json`` file in the directory is available as page
metadata through ``Catalog.page(name)``.
"""

import json
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from types import MappingProxyType

from storefront.core.exceptions import ItemNotFound

logger = logging.getLogger(__name__)

ITEMS_FILE = "items.json"
CATEGORIES_FILE = "categories.json"


class CatalogError(Exception):
    """Catalog files are missing or malformed."""


@dataclass(frozen=True)
class Item:
    """A catalog product."""

    id: int
    name: str
    price: Decimal
    image: str
    category: str


@dataclass(frozen=True)
class Category:
    slug: str
    name: str
    image: str = ""


@dataclass(frozen=True)
class Catalog:
    """Read-only catalog of items, categories and page metadata."""

    item_list: tuple[Item, ...] = ()
    category_list: tuple[Category, ...] = ()
    pages: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))

    def items(self) -> tuple[Item, ...]:
        return self.item_list

    def categories(self) -> tuple[Category, ...]:
        return self.category_list

    def page(self, name: str) -> dict:
        """Return page metadata by file stem, or an empty dict."""
        return dict(self.pages.get(name, {}))

    def get_item(self, item_id) -> Item:
        """Look up an item by id.

        Raises:
            ItemNotFound: No catalog item has that id
        """
        try:
            item_id = int(item_id)
        except (TypeError, ValueError):
            raise ItemNotFound() from None
        for item in self.item_list:
            if item.id == item_id:
                return item
        raise ItemNotFound()

    def items_in_category(self, category: str) -> list[Item]:
        return [item for item in self.item_list if item.category == category]


def _read_json(path: Path):
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh, parse_float=Decimal)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Invalid JSON in {path}: {e}") from e


def _parse_item(raw: dict) -> Item:
    try:
        price = Decimal(str(raw["price"]))
        return Item(
            id=int(raw["id"]),
            name=str(raw["name"]),
            price=price.quantize(Decimal("0.01")),
            image=str(raw.get("image", "")),
            category=str(raw["category"]),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        raise CatalogError(f"Invalid catalog item {raw!r}: {e}") from e


def _parse_category(raw) -> Category:
    if isinstance(raw, str):
        return Category(slug=raw, name=raw.replace("-", " ").title())
    try:
        return Category(slug=str(raw["slug"]), name=str(raw["name"]), image=str(raw.get("image", "")))
    except (KeyError, TypeError) as e:
        raise CatalogError(f"Invalid catalog category {raw!r}: {e}") from e


def load_catalog(directory) -> Catalog:
    """Load and validate the catalog from a directory of JSON files.

    Raises:
        CatalogError: A required file is missing, unreadable or malformed,
            or two items share an id
    """
    directory = Path(directory)
    items = tuple(_parse_item(raw) for raw in _read_json(directory / ITEMS_FILE))
    seen = set()
    for item in items:
        if item.id in seen:
            raise CatalogError(f"Duplicate catalog item id: {item.id}")
        seen.add(item.id)

    categories = tuple(_parse_category(raw) for raw in _read_json(directory / CATEGORIES_FILE))

    pages = {}
    for path in sorted(directory.glob("*.json")):
        if path.name in (ITEMS_FILE, CATEGORIES_FILE):
            continue
        data = _read_json(path)
        if not isinstance(data, dict):
            raise CatalogError(f"Page metadata in {path} must be a JSON object")
        pages[path.stem] = MappingProxyType(data)

    logger.info(
        "Loaded catalog from %s: %d items, %d categories",
        directory,
        len(items),
        len(categories),
    )
    return Catalog(item_list=items, category_list=categories, pages=MappingProxyType(pages))


_catalog: Catalog | None = None


def install_catalog(catalog: Catalog) -> Catalog:
    """Make ``catalog`` the process-wide catalog."""
    global _catalog
    _catalog = catalog
    return catalog


def get_catalog() -> Catalog:
    """Return the process-wide catalog installed at startup."""
    if _catalog is None:
        raise CatalogError("Catalog has not been loaded")
    return _catalog
