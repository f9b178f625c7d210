from dataclasses import dataclass, field
from typing import Literal

from deckshopper.models.card import CardEntry

ImportSource = Literal["csv", "manual", "scrape"]


@dataclass
class CollectionImport:
    """
    One imported batch of owned cards.

    A player may import several collections (e.g., one CSV per binder).
    They are merged before reconciliation, so the same card may appear
    in more than one import.
    """

    cards: list[CardEntry] = field(default_factory=list)
    import_source: ImportSource = "csv"
    name: str | None = None

    def total_cards(self) -> int:
        """Total number of owned copies in this import."""
        return sum(card.quantity for card in self.cards)

    def unique_cards(self) -> int:
        """Number of entries in this import."""
        return len(self.cards)
