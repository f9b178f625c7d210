from dataclasses import dataclass

from deckshopper.models.card import CardEntry


@dataclass(frozen=True)
class ReconciliationStats:
    """Totals derived from a reconciliation."""

    total_required: int = 0
    total_owned: int = 0
    total_missing: int = 0
    completion_percentage: int = 100

    @property
    def is_complete(self) -> bool:
        """True if nothing is missing."""
        return self.total_missing == 0


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Required cards split into the portion the player owns and the portion
    they still need.

    For every required name, owned quantity + missing quantity equals the
    required quantity. Cards that are owned but not required never appear.
    """

    missing: tuple[CardEntry, ...]
    owned: tuple[CardEntry, ...]
    stats: ReconciliationStats
