"""
List merging.

Folds several card groups (a deck's main/extra/side zones, several decks,
or several collection imports) into one list with a single entry per card.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace
from typing import Literal

from deckshopper.models.card import CardEntry
from deckshopper.models.collection import CollectionImport
from deckshopper.models.deck import DeckList

SortPolicy = Literal["none", "alpha", "qtyDesc"]
Normalizer = Callable[[str], str]


def exact_name(name: str) -> str:
    """Identity normalizer: names must match exactly."""
    return name


def casefold_name(name: str) -> str:
    """Normalizer used for reconciliation: lowercase and trim whitespace."""
    return name.strip().lower()


def merge_lists(
    groups: Iterable[Iterable[CardEntry]],
    normalizer: Normalizer | None = None,
    sort_by: SortPolicy = "none",
) -> tuple[CardEntry, ...]:
    """
    Merge card groups into one deduplicated list.

    Quantities of entries whose normalized names match are summed. The
    merged entry keeps every other attribute from the first occurrence.

    Args:
        groups: Card groups, walked in order, entries within each in order
        normalizer: Maps a display name to its dedup key. Defaults to exact match.
        sort_by: "none" keeps first-seen order, "alpha" sorts by display name,
            "qtyDesc" sorts by total quantity, largest first (ties keep
            first-seen order)

    Returns:
        Tuple of merged entries. Zero-quantity entries are kept.
    """
    normalize = normalizer or exact_name

    # dicts keep insertion order, which is the first-seen order
    merged: dict[str, CardEntry] = {}
    totals: dict[str, int] = {}

    for group in groups:
        for card in group:
            key = normalize(card.name)
            if key not in merged:
                merged[key] = card
                totals[key] = 0
            totals[key] += card.quantity

    result = [replace(card, quantity=totals[key]) for key, card in merged.items()]

    if sort_by == "alpha":
        result.sort(key=lambda card: (card.name.casefold(), card.name))
    elif sort_by == "qtyDesc":
        result.sort(key=lambda card: card.quantity, reverse=True)

    return tuple(result)


def merge_deck_lists(
    decks: Sequence[DeckList],
    normalizer: Normalizer | None = None,
    sort_by: SortPolicy = "none",
) -> tuple[CardEntry, ...]:
    """Merge every zone of every deck, in deck order then main/extra/side."""
    return merge_lists(deck_groups(decks), normalizer=normalizer, sort_by=sort_by)


def merge_collection_lists(
    collections: Sequence[CollectionImport],
    normalizer: Normalizer | None = None,
    sort_by: SortPolicy = "none",
) -> tuple[CardEntry, ...]:
    """Merge several collection imports into one owned list."""
    return merge_lists(
        (collection.cards for collection in collections),
        normalizer=normalizer,
        sort_by=sort_by,
    )


def deck_groups(decks: Sequence[DeckList]) -> list[list[CardEntry]]:
    """Flatten decks into their card groups: main, extra, side of each deck."""
    return [zone for deck in decks for zone in deck.zones()]
