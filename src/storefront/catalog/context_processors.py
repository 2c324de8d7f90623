"""Context processors for the catalog."""

from .loader import get_catalog


def catalog_context(request):
    """Add site metadata and the category list to every page."""
    catalog = get_catalog()
    return {
        **catalog.page("metadata"),
        "categories": catalog.categories(),
    }
