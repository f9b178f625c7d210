from dataclasses import dataclass, field

from deckshopper.models.card import CardEntry


@dataclass
class DeckList:
    """
    A deck the player wants to assemble.

    Attributes:
        name: Deck name (usually the uploaded file name)
        main: Main deck cards
        extra: Extra deck cards
        side: Side deck cards
    """

    name: str | None = None
    main: list[CardEntry] = field(default_factory=list)
    extra: list[CardEntry] = field(default_factory=list)
    side: list[CardEntry] = field(default_factory=list)

    def zones(self) -> tuple[list[CardEntry], list[CardEntry], list[CardEntry]]:
        """The three card groups in traversal order: main, extra, side."""
        return (self.main, self.extra, self.side)

    def total_cards(self) -> int:
        """Total copies across all zones."""
        return sum(card.quantity for zone in self.zones() for card in zone)


@dataclass
class YdkData:
    """Raw card identifiers from a YDK file, per section."""

    main: list[int] = field(default_factory=list)
    extra: list[int] = field(default_factory=list)
    side: list[int] = field(default_factory=list)

    def all_ids(self) -> list[int]:
        """All identifiers in main, extra, side order (duplicates kept)."""
        return self.main + self.extra + self.side
