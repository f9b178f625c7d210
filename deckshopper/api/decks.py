"""
Deck list endpoints.

Decks come from YDK or text file uploads, or from text pasted directly.
"""

from fastapi import APIRouter, UploadFile
from pydantic import BaseModel, Field

from deckshopper.api.dependencies import CardDatabaseDep, WizardSessionDep
from deckshopper.api.schemas import CardResponse, card_to_response
from deckshopper.api.sessions import SessionResponse, session_to_response
from deckshopper.models.deck import DeckList
from deckshopper.parsers.deck_text import parse_text_deck_list
from deckshopper.parsers.file_types import validate_upload
from deckshopper.services.importer import decode_upload, import_deck

router = APIRouter(prefix="/sessions", tags=["decks"])


class DeckTextRequest(BaseModel):
    """Request model for a pasted deck list."""

    text: str = Field(
        ...,
        min_length=1,
        description="One card per line: '3x Name', '3 Name', 'Name x3' or 'Name (3)'",
        examples=["3x Ash Blossom & Joyous Spring\nPot of Prosperity (2)"],
    )
    name: str | None = None


class DeckResponse(BaseModel):
    """Response model for an added deck."""

    name: str | None = None
    main: list[CardResponse] = Field(default_factory=list)
    extra: list[CardResponse] = Field(default_factory=list)
    side: list[CardResponse] = Field(default_factory=list)
    total_cards: int = 0
    session: SessionResponse


def _deck_response(deck: DeckList, session: SessionResponse) -> DeckResponse:
    return DeckResponse(
        name=deck.name,
        main=[card_to_response(card) for card in deck.main],
        extra=[card_to_response(card) for card in deck.extra],
        side=[card_to_response(card) for card in deck.side],
        total_cards=deck.total_cards(),
        session=session,
    )


@router.post("/{session_id}/decks", response_model=DeckResponse)
async def upload_deck(
    session: WizardSessionDep,
    card_db: CardDatabaseDep,
    file: UploadFile,
) -> DeckResponse:
    """
    Add a deck from a YDK or TXT file.

    YDK passcodes are resolved through the card database; unknown
    passcodes are dropped. Returns 409 until a collection is imported.
    """
    raw = await file.read()
    file_name = file.filename or "deck.txt"

    with session.loading():
        session.require_deck_step()
        validate_upload(file_name, len(raw))
        deck = await import_deck(file_name, decode_upload(raw), card_db)
        session.add_deck(deck)

    return _deck_response(deck, session_to_response(session))


@router.post("/{session_id}/decks/text", response_model=DeckResponse)
async def add_deck_text(request: DeckTextRequest, session: WizardSessionDep) -> DeckResponse:
    """Add a deck from pasted text. All cards go in the main deck."""
    deck = parse_text_deck_list(request.text, name=request.name)
    session.add_deck(deck)
    return _deck_response(deck, session_to_response(session))


@router.delete("/{session_id}/decks/{index}", response_model=SessionResponse)
async def remove_deck(index: int, session: WizardSessionDep) -> SessionResponse:
    """Remove the deck at `index` (0-based). Returns 404 if there is none."""
    session.remove_deck(index)
    return session_to_response(session)
