"""Catalog app configuration."""

from django.apps import AppConfig
from django.conf import settings


class CatalogConfig(AppConfig):
    """Loads the static catalog once, before any request is served."""

    name = "storefront.catalog"
    label = "catalog"
    verbose_name = "Catalog"

    def ready(self):
        from .loader import install_catalog, load_catalog

        install_catalog(load_catalog(settings.STOREFRONT_CATALOG_DIR))
