"""
Identifier attachment.

Deck files such as YDK list one card identifier per copy instead of
named entries with quantities. These helpers count the identifiers and
join them against a catalog of card data.
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from deckshopper.models.card import CardEntry


def coerce_quantity(value: Any) -> int:
    """
    Parse a quantity from external data.

    Accepts ints and numeric strings (surrounding whitespace allowed).
    Anything else, including negatives, becomes 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0) if value.is_integer() else 0
    if isinstance(value, str):
        try:
            return max(int(value.strip()), 0)
        except ValueError:
            return 0
    return 0


def coerce_card_id(value: Any) -> int | None:
    """Parse a card identifier, returning None if it is not an integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def count_identifiers(ids: Iterable[Any]) -> dict[int, int]:
    """
    Count identifier occurrences in first-seen order.

    Unparseable identifiers are skipped.
    """
    counts: dict[int, int] = {}
    for raw in ids:
        card_id = coerce_card_id(raw)
        if card_id is None:
            continue
        counts[card_id] = counts.get(card_id, 0) + 1
    return counts


def attach_quantities(
    ids: Iterable[Any],
    catalog: Iterable[CardEntry] | Mapping[int, CardEntry],
) -> tuple[CardEntry, ...]:
    """
    Turn a list of card identifiers into entries with quantities.

    Args:
        ids: One identifier per copy, possibly repeated, as ints, integral
                floats or numeric strings
        catalog: Card data to join against, as entries or keyed by card id

    Returns:
        One entry per distinct identifier, in first-seen order, with quantity
        equal to its occurrence count. Identifiers missing from the catalog
        are dropped.
    """
    if isinstance(catalog, Mapping):
        by_id = dict(catalog)
    else:
        by_id = {card.card_id: card for card in catalog if card.card_id is not None}

    result: list[CardEntry] = []
    for card_id, quantity in count_identifiers(ids).items():
        card = by_id.get(card_id)
        if card is not None:
            result.append(replace(card, quantity=quantity, owned=False))

    return tuple(result)
