"""
Exporters for card lists.
"""

import csv
from collections.abc import Iterable
from datetime import date
from decimal import Decimal, InvalidOperation
from io import StringIO

from deckshopper.models.card import CardEntry

COLLECTION_CSV_HEADERS = ["Card Name", "Quantity", "Type", "Rarity", "Set", "Price"]


def _price_field(card: CardEntry) -> Decimal | str:
    price = card.prices.get("cardmarket_price") or card.prices.get("tcgplayer_price") or "0"
    try:
        # Decimal keeps the vendor's text ("0.40") and is written unquoted
        return Decimal(price.strip())
    except InvalidOperation:
        return price


def export_collection_csv(cards: Iterable[CardEntry]) -> str:
    """
    Export cards as CSV.

    The header and the numeric Quantity and Price columns are unquoted,
    text columns are quoted. Price is the CardMarket price, falling back
    to TCGPlayer, then 0.
    """
    buffer = StringIO()
    buffer.write(",".join(COLLECTION_CSV_HEADERS) + "\n")
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")

    for card in cards:
        first_set = card.sets[0] if card.sets else None
        writer.writerow(
            [
                card.name,
                card.quantity,
                card.card_type,
                first_set.set_rarity if first_set else "",
                first_set.set_name if first_set else "",
                _price_field(card),
            ]
        )

    return buffer.getvalue().rstrip("\n")


def export_missing_text(cards: Iterable[CardEntry], generated_on: date | None = None) -> str:
    """
    Export missing cards as a shopping list.

    Example:
        # Missing Cards List
        # Generated on 2024-05-01

        1x Dark Magician
        2x Pot of Greed
    """
    if generated_on is None:
        generated_on = date.today()

    lines = [
        "# Missing Cards List",
        f"# Generated on {generated_on.isoformat()}",
        "",
    ]
    lines.extend(f"{card.quantity}x {card.name}" for card in cards)
    return "\n".join(lines)
