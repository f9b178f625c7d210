"""
Response and request models shared by several endpoints.
"""

from pydantic import BaseModel, Field

from deckshopper.models.card import CardEntry
from deckshopper.models.reconciliation import ReconciliationResult


class CardInput(BaseModel):
    """A card supplied directly in a request body."""

    name: str = Field(..., min_length=1)
    quantity: int = Field(default=1, ge=0)


class CardResponse(BaseModel):
    """A card with quantity and ownership."""

    name: str
    quantity: int
    owned: bool = False
    card_id: int | None = None
    card_type: str = ""


class StatsResponse(BaseModel):
    """Reconciliation totals."""

    total_required: int = 0
    total_owned: int = 0
    total_missing: int = 0
    completion_percentage: int = Field(default=100, ge=0, le=100)
    is_complete: bool = True


class ReconcileResponse(BaseModel):
    """Required cards split into owned and missing."""

    missing: list[CardResponse] = Field(default_factory=list)
    owned: list[CardResponse] = Field(default_factory=list)
    stats: StatsResponse


def card_to_response(card: CardEntry) -> CardResponse:
    return CardResponse(
        name=card.name,
        quantity=card.quantity,
        owned=card.owned,
        card_id=card.card_id,
        card_type=card.card_type,
    )


def result_to_response(result: ReconciliationResult) -> ReconcileResponse:
    stats = result.stats
    return ReconcileResponse(
        missing=[card_to_response(card) for card in result.missing],
        owned=[card_to_response(card) for card in result.owned],
        stats=StatsResponse(
            total_required=stats.total_required,
            total_owned=stats.total_owned,
            total_missing=stats.total_missing,
            completion_percentage=stats.completion_percentage,
            is_complete=stats.is_complete,
        ),
    )
