from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class CardSet:
    """A printing of a card in a specific set."""

    set_name: str
    set_code: str
    set_rarity: str = ""
    set_rarity_code: str = ""
    set_price: str = "0"


@dataclass(frozen=True, slots=True)
class CardEntry:
    """
    A card with a quantity.

    Only `name` and `quantity` are read by merge and reconciliation logic.
    Every other attribute passes through unmodified.

    Attributes:
        name: Display name, also the dedup key (after normalization)
        quantity: Number of copies, never negative
        owned: Whether this entry describes owned copies
        card_id: YGOPRODeck passcode, if known
        card_type: Card type line (e.g., "Effect Monster")
        sets: Printings of the card
        prices: Vendor price fields as returned by the card database
        attributes: Any other descriptive data (rarity, archetype, ...)
    """

    name: str
    quantity: int
    owned: bool = False
    card_id: int | None = None
    card_type: str = ""
    sets: tuple[CardSet, ...] = ()
    prices: dict[str, str] = field(default_factory=dict, hash=False)
    attributes: dict[str, Any] = field(default_factory=dict, hash=False)
