"""
Collection reconciliation.

Splits the cards a set of decks requires into the copies the player
already owns and the copies they still need to buy.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from deckshopper.analysis.merge import casefold_name, merge_lists
from deckshopper.models.card import CardEntry
from deckshopper.models.reconciliation import ReconciliationResult, ReconciliationStats

logger = logging.getLogger(__name__)


def reconcile(
    required_groups: Iterable[Iterable[CardEntry]],
    owned: Iterable[CardEntry] | None,
) -> ReconciliationResult:
    """
    Reconcile required cards against owned cards.

    Names are compared case-insensitively with surrounding whitespace
    ignored. A required card the player owns only some copies of is split
    into an owned entry and a missing entry.

    Args:
        required_groups: Card groups to require (deck zones, several decks)
        owned: Owned cards, possibly with repeated names. None means no
            collection has been imported.

    Returns:
        ReconciliationResult with missing and owned lists in required order
    """
    required = merge_lists(required_groups, normalizer=casefold_name)
    owned_cards = list(owned) if owned is not None else []

    if not owned_cards:
        missing = tuple(replace(card, owned=False) for card in required)
        total = sum(card.quantity for card in missing)
        return ReconciliationResult(
            missing=missing,
            owned=(),
            stats=compute_stats(total_owned=0, total_missing=total),
        )

    owned_quantities = owned_quantity_lookup(owned_cards)

    missing_out: list[CardEntry] = []
    owned_out: list[CardEntry] = []
    total_owned = 0
    total_missing = 0

    for card in required:
        # Owned stock is read, never decremented
        available = owned_quantities.get(casefold_name(card.name), 0)
        needed = card.quantity

        if available == 0:
            missing_out.append(replace(card, owned=False, quantity=needed))
            total_missing += needed
        elif available >= needed:
            owned_out.append(replace(card, owned=True, quantity=needed))
            total_owned += needed
        else:
            owned_out.append(replace(card, owned=True, quantity=available))
            missing_out.append(replace(card, owned=False, quantity=needed - available))
            total_owned += available
            total_missing += needed - available

    stats = compute_stats(total_owned=total_owned, total_missing=total_missing)
    logger.debug(
        "Reconciled %d required cards: %d owned, %d missing",
        stats.total_required,
        stats.total_owned,
        stats.total_missing,
    )

    return ReconciliationResult(
        missing=tuple(missing_out),
        owned=tuple(owned_out),
        stats=stats,
    )


def owned_quantity_lookup(owned: Iterable[CardEntry]) -> dict[str, int]:
    """Sum owned quantities per normalized name."""
    lookup: dict[str, int] = {}
    for card in owned:
        key = casefold_name(card.name)
        lookup[key] = lookup.get(key, 0) + card.quantity
    return lookup


def compute_stats(total_owned: int, total_missing: int) -> ReconciliationStats:
    """
    Build the statistics record for a reconciliation.

    Completion is rounded half up, but never reaches 100 while a card is
    still missing. With nothing required the deck is considered complete.
    """
    denominator = total_owned + total_missing
    if denominator > 0:
        completion = (200 * total_owned + denominator) // (2 * denominator)
        if total_missing > 0:
            completion = min(completion, 99)
    else:
        completion = 100

    return ReconciliationStats(
        total_required=denominator,
        total_owned=total_owned,
        total_missing=total_missing,
        completion_percentage=completion,
    )
