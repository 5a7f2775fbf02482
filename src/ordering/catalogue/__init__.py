"""Catalogue lookup factory.

``get_catalogue()`` returns the configured adapter, chosen by the
``CATALOGUE_ADAPTER`` environment variable. Only the in-memory adapter ships;
tests swap it with ``set_catalogue()``.
"""

import os

from ordering.catalogue.port import CatalogueLookup

_current_catalogue: CatalogueLookup | None = None


def get_catalogue() -> CatalogueLookup:
    global _current_catalogue
    if _current_catalogue is None:
        adapter = os.environ.get("CATALOGUE_ADAPTER", "memory")
        if adapter == "memory":
            from ordering.catalogue.fake_adapter import InMemoryCatalogue

            _current_catalogue = InMemoryCatalogue()
        else:
            raise ValueError(f"Unknown catalogue adapter: {adapter}")
    return _current_catalogue


def set_catalogue(catalogue: CatalogueLookup) -> None:
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    global _current_catalogue
    _current_catalogue = None
