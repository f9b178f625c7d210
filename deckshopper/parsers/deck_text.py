"""
Parser for free-text deck lists.

Accepts one card per line in any of these notations:
    3x Blue-Eyes White Dragon
    3 Blue-Eyes White Dragon
    Blue-Eyes White Dragon x3
    Blue-Eyes White Dragon (3)
    Blue-Eyes White Dragon          (quantity 1)

Lines starting with # or // are comments.
"""

import re

from deckshopper.models.card import CardEntry
from deckshopper.models.deck import DeckList

# "3x Card Name" or "3 Card Name"
PREFIX_PATTERN = re.compile(r"^(\d+)x?\s+(.+)$")

# "Card Name x3"
SUFFIX_PATTERN = re.compile(r"^(.+?)\s+x(\d+)$")

# "Card Name (3)"
PAREN_PATTERN = re.compile(r"^(.+?)\s*\((\d+)\)$")


def parse_deck_line(line: str) -> CardEntry | None:
    """Parse one deck list line. Returns None for blanks and comments."""
    line = line.strip()
    if not line or line.startswith(("#", "//")):
        return None

    quantity = 1
    name = line

    if match := PREFIX_PATTERN.match(line):
        quantity, name = int(match.group(1)), match.group(2)
    elif match := SUFFIX_PATTERN.match(line):
        name, quantity = match.group(1), int(match.group(2))
    elif match := PAREN_PATTERN.match(line):
        name, quantity = match.group(1), int(match.group(2))

    name = name.strip()
    if not name:
        return None

    return CardEntry(name=name, quantity=quantity)


def parse_text_deck_list(text: str, name: str | None = None) -> DeckList:
    """
    Parse a free-text deck list.

    Text lists have no zone markers, so every card goes in the main deck.
    """
    cards: list[CardEntry] = []
    for line in text.split("\n"):
        card = parse_deck_line(line)
        if card is not None:
            cards.append(card)

    return DeckList(name=name, main=cards)
