"""
Pool Builder services.

Catalog access, pool assembly, deck views and the submission store.
"""

from poolbuilder.services.catalog import (
    CatalogError,
    CatalogProvider,
    HttpCatalog,
    create_catalog_client,
    get_catalog,
)
from poolbuilder.services.field_report import (
    CardInclusion,
    DeckDiff,
    average_basics,
    color_combos,
    compare_decks,
    inclusion_rates,
)
from poolbuilder.services.pool_view import group_by_cmc, group_by_color, sort_cards
from poolbuilder.services.sealed import (
    PoolSnapshot,
    build_daily_snapshot,
    build_pool_snapshot,
)
from poolbuilder.services.submissions import (
    get_field_summary,
    get_submissions,
    set_featured,
    submit,
)

__all__ = [
    "CardInclusion",
    "CatalogError",
    "CatalogProvider",
    "DeckDiff",
    "HttpCatalog",
    "PoolSnapshot",
    "average_basics",
    "build_daily_snapshot",
    "build_pool_snapshot",
    "color_combos",
    "compare_decks",
    "create_catalog_client",
    "get_catalog",
    "get_field_summary",
    "get_submissions",
    "group_by_cmc",
    "group_by_color",
    "inclusion_rates",
    "set_featured",
    "sort_cards",
    "submit",
]
