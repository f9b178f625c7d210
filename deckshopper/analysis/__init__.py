from deckshopper.analysis.attach import attach_quantities, coerce_card_id, coerce_quantity
from deckshopper.analysis.merge import (
    casefold_name,
    exact_name,
    merge_collection_lists,
    merge_deck_lists,
    merge_lists,
)
from deckshopper.analysis.pricing import (
    PriceComparison,
    PriceQuote,
    get_all_prices,
    get_best_price,
    price_missing_cards,
    total_best_price,
)
from deckshopper.analysis.reconcile import compute_stats, reconcile

__all__ = [
    "PriceComparison",
    "PriceQuote",
    "attach_quantities",
    "casefold_name",
    "coerce_card_id",
    "coerce_quantity",
    "compute_stats",
    "exact_name",
    "get_all_prices",
    "get_best_price",
    "merge_collection_lists",
    "merge_deck_lists",
    "merge_lists",
    "price_missing_cards",
    "reconcile",
    "total_best_price",
]
