"""
Comparison and pricing endpoints.

Reconciles a session's deck lists against its collections, exports the
missing cards, and prices them through the card database. Stateless
variants take the cards directly in the request body.
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from deckshopper.analysis.merge import SortPolicy, casefold_name, deck_groups, merge_lists
from deckshopper.analysis.pricing import price_missing_cards, total_best_price
from deckshopper.analysis.reconcile import reconcile
from deckshopper.api.dependencies import CardDatabaseDep, WizardSessionDep
from deckshopper.api.schemas import (
    CardInput,
    CardResponse,
    ReconcileResponse,
    card_to_response,
    result_to_response,
)
from deckshopper.models.card import CardEntry
from deckshopper.models.deck import DeckList
from deckshopper.models.failure import StepNotAccessibleError
from deckshopper.parsers.export import export_missing_text
from deckshopper.services.wizard import STEP_PRICES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["compare"])


class DeckInput(BaseModel):
    """A deck supplied directly in a request body."""

    name: str | None = None
    main: list[CardInput] = Field(default_factory=list)
    extra: list[CardInput] = Field(default_factory=list)
    side: list[CardInput] = Field(default_factory=list)


class ReconcileRequest(BaseModel):
    """Request model for stateless reconciliation."""

    decks: list[DeckInput] = Field(default_factory=list)
    collection: list[CardInput] | None = Field(
        default=None,
        description="Owned cards. Omit when no collection is available.",
    )


class MergeRequest(BaseModel):
    """Request model for merging card groups."""

    groups: list[list[CardInput]] = Field(default_factory=list)
    ignore_case: bool = Field(
        default=False,
        description="Compare names case-insensitively, ignoring surrounding whitespace",
    )
    sort_by: SortPolicy = "none"


class MergeResponse(BaseModel):
    """Merged card list."""

    cards: list[CardResponse] = Field(default_factory=list)
    total_cards: int = 0


class PriceQuoteResponse(BaseModel):
    """A vendor price."""

    source: str
    price: float
    currency: str


class PricedCardResponse(BaseModel):
    """A missing card with its prices."""

    card: CardResponse
    best_price: PriceQuoteResponse | None = None
    all_prices: list[PriceQuoteResponse] = Field(default_factory=list)
    line_total: float | None = None


class PricesResponse(BaseModel):
    """Prices for every missing card."""

    cards: list[PricedCardResponse] = Field(default_factory=list)
    totals: dict[str, float] = Field(
        default_factory=dict,
        description="Sum of best-price line totals per currency",
    )
    unpriced: list[str] = Field(default_factory=list)


def _to_entries(cards: list[CardInput]) -> list[CardEntry]:
    return [CardEntry(name=card.name, quantity=card.quantity) for card in cards]


@router.post("/sessions/{session_id}/compare", response_model=ReconcileResponse)
async def compare_session(session: WizardSessionDep) -> ReconcileResponse:
    """
    Compare the session's decks with its collections.

    Returns 409 until at least one deck has been added.
    """
    with session.loading():
        result = session.compare()
    return result_to_response(result)


@router.get("/sessions/{session_id}/missing.txt", response_class=PlainTextResponse)
async def export_missing(session: WizardSessionDep) -> str:
    """Missing cards as a plain text shopping list."""
    return export_missing_text(session.missing_cards)


@router.post("/sessions/{session_id}/prices", response_model=PricesResponse)
async def price_session(session: WizardSessionDep, card_db: CardDatabaseDep) -> PricesResponse:
    """
    Look up prices for the session's missing cards.

    Cards imported from YDK files already carry prices; the rest are
    fetched by name. Returns 409 until a comparison has found missing cards.
    """
    price_step = session.step(STEP_PRICES)
    if session.result is None or price_step is None or not price_step.is_accessible:
        raise StepNotAccessibleError(
            STEP_PRICES, "Compare your collection and find missing cards first"
        )

    with session.loading():
        result = session.result
        catalog = [card for card in result.missing if card.prices]
        to_fetch = [card.name for card in result.missing if not card.prices]
        if to_fetch:
            catalog.extend(await card_db.get_cards_by_names(to_fetch))

        comparisons = price_missing_cards(result, catalog)
        session.update_step_completion(STEP_PRICES, True)

    unpriced = [c.card.name for c in comparisons if c.best_price is None]
    if unpriced:
        logger.info("No prices found for %d cards", len(unpriced))

    return PricesResponse(
        cards=[
            PricedCardResponse(
                card=card_to_response(comparison.card),
                best_price=(
                    PriceQuoteResponse(**asdict(comparison.best_price))
                    if comparison.best_price
                    else None
                ),
                all_prices=[PriceQuoteResponse(**asdict(quote)) for quote in comparison.all_prices],
                line_total=comparison.line_total,
            )
            for comparison in comparisons
        ],
        totals=total_best_price(comparisons),
        unpriced=unpriced,
    )


@router.post("/reconcile", response_model=ReconcileResponse)
async def reconcile_cards(request: ReconcileRequest) -> ReconcileResponse:
    """Reconcile decks against a collection without creating a session."""
    decks = [
        DeckList(
            name=deck.name,
            main=_to_entries(deck.main),
            extra=_to_entries(deck.extra),
            side=_to_entries(deck.side),
        )
        for deck in request.decks
    ]
    owned = None if request.collection is None else _to_entries(request.collection)

    result = reconcile(deck_groups(decks), owned)
    return result_to_response(result)


@router.post("/merge", response_model=MergeResponse)
async def merge_cards(request: MergeRequest) -> MergeResponse:
    """Merge card groups into one list, summing repeated names."""
    merged = merge_lists(
        [_to_entries(group) for group in request.groups],
        normalizer=casefold_name if request.ignore_case else None,
        sort_by=request.sort_by,
    )
    return MergeResponse(
        cards=[card_to_response(card) for card in merged],
        total_cards=sum(card.quantity for card in merged),
    )
