"""
Parser for collection CSV exports.

The YGOPRODeck collection export looks like:
    cardname,cardq,cardrarity,card_edition,cardset,cardcode,cardid,print_id
    Ash Blossom & Joyous Spring,3,Ultra Rare,1st Edition,Maximum Crisis,MACR-EN036,14558127,

Other spreadsheets work too as long as they have a card name column.
Column names are matched case-insensitively.
"""

import csv
import logging
import re
from io import StringIO

from deckshopper.analysis.attach import coerce_card_id, coerce_quantity
from deckshopper.models.card import CardEntry, CardSet
from deckshopper.models.collection import CollectionImport
from deckshopper.models.failure import ParseError

logger = logging.getLogger(__name__)

NAME_COLUMNS = ("cardname", "card name", "name", "card")
QUANTITY_COLUMNS = ("cardq", "quantity", "qty", "count")

# Some exports embed the quantity in the name: "3x Dark Magician".
# The "x" is required: "7 Colored Fish" is a real card name.
QUANTITY_PREFIX_PATTERN = re.compile(r"^(\d+)x\s+(.+)$", re.IGNORECASE)


def _find_column(fieldnames: list[str], candidates: tuple[str, ...]) -> str | None:
    normalized = {name.strip().lower(): name for name in fieldnames}
    for candidate in candidates:
        if candidate in normalized:
            return normalized[candidate]
    return None


def _row_value(row: dict[str, str | None], column: str | None) -> str:
    if column is None:
        return ""
    return (row.get(column) or "").strip()


def parse_collection_csv(text: str, name: str | None = None) -> CollectionImport:
    """
    Parse a collection CSV into owned cards.

    Args:
        text: Raw CSV content including the header row
        name: Label for this import (usually the file name without extension)

    Returns:
        CollectionImport with one owned entry per data row

    Raises:
        ParseError: If the file has no data rows or no card name column
    """
    reader = csv.DictReader(StringIO(text.lstrip("\ufeff")))

    if not reader.fieldnames:
        raise ParseError("CSV file is empty")

    name_col = _find_column(list(reader.fieldnames), NAME_COLUMNS)
    if name_col is None:
        raise ParseError(
            "CSV format not recognized. Required columns: cardname",
            detail=f"Found columns: {', '.join(reader.fieldnames)}",
        )
    qty_col = _find_column(list(reader.fieldnames), QUANTITY_COLUMNS)
    id_col = _find_column(list(reader.fieldnames), ("cardid", "id"))
    set_col = _find_column(list(reader.fieldnames), ("cardset", "set"))
    code_col = _find_column(list(reader.fieldnames), ("cardcode", "set code"))
    rarity_col = _find_column(list(reader.fieldnames), ("cardrarity", "rarity"))
    edition_col = _find_column(list(reader.fieldnames), ("card_edition", "edition"))

    cards: list[CardEntry] = []
    rows_seen = 0

    for row in reader:
        rows_seen += 1
        card_name = _row_value(row, name_col)
        if not card_name:
            continue

        match = QUANTITY_PREFIX_PATTERN.match(card_name)
        if match:
            card_name = match.group(2).strip()

        # Default to 1 if no quantity column
        quantity = coerce_quantity(_row_value(row, qty_col)) if qty_col else 1

        set_name = _row_value(row, set_col)
        sets = (
            (
                CardSet(
                    set_name=set_name,
                    set_code=_row_value(row, code_col),
                    set_rarity=_row_value(row, rarity_col),
                ),
            )
            if set_name
            else ()
        )

        attributes: dict[str, str] = {}
        if edition := _row_value(row, edition_col):
            attributes["edition"] = edition

        cards.append(
            CardEntry(
                name=card_name,
                quantity=quantity,
                owned=True,
                card_id=coerce_card_id(_row_value(row, id_col)),
                sets=sets,
                attributes=attributes,
            )
        )

    if rows_seen == 0:
        raise ParseError("CSV file is empty")

    collection = CollectionImport(cards=cards, import_source="csv", name=name)
    logger.info(
        "Parsed collection %r: %d entries, %d cards",
        name,
        collection.unique_cards(),
        collection.total_cards(),
    )
    return collection
