"""
Wizard session endpoints.

A session tracks one player's progress: imported collections, deck lists,
the latest comparison, and which wizard steps are unlocked.
"""

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from deckshopper.api.dependencies import SessionStoreDep, WizardSessionDep
from deckshopper.models.failure import StepNotAccessibleError
from deckshopper.services.wizard import WizardSession

router = APIRouter(prefix="/sessions", tags=["sessions"])


class StepResponse(BaseModel):
    """A wizard step and its state."""

    id: int
    title: str
    description: str
    component: str
    is_complete: bool
    is_accessible: bool


class CollectionSummary(BaseModel):
    """An imported collection."""

    name: str | None = None
    import_source: str
    total_cards: int
    unique_cards: int


class DeckSummary(BaseModel):
    """An added deck list."""

    name: str | None = None
    main: int = 0
    extra: int = 0
    side: int = 0
    total_cards: int = 0


class SessionResponse(BaseModel):
    """Full wizard session state."""

    session_id: str
    current_step: int
    progress: int = Field(ge=0, le=100)
    can_go_back: bool
    can_go_next: bool
    can_proceed: bool
    steps: list[StepResponse] = Field(default_factory=list)
    collections: list[CollectionSummary] = Field(default_factory=list)
    decks: list[DeckSummary] = Field(default_factory=list)
    missing_cards: int = Field(default=0, description="Total copies still missing")
    error: str | None = None


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    session_id: str
    deleted: bool


def session_to_response(session: WizardSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        current_step=session.current_step,
        progress=session.progress,
        can_go_back=session.can_go_back,
        can_go_next=session.can_go_next,
        can_proceed=session.can_proceed,
        steps=[
            StepResponse(
                id=step.id,
                title=step.title,
                description=step.description,
                component=step.component,
                is_complete=step.is_complete,
                is_accessible=step.is_accessible,
            )
            for step in session.steps
        ],
        collections=[
            CollectionSummary(
                name=collection.name,
                import_source=collection.import_source,
                total_cards=collection.total_cards(),
                unique_cards=collection.unique_cards(),
            )
            for collection in session.collections
        ],
        decks=[
            DeckSummary(
                name=deck.name,
                main=sum(card.quantity for card in deck.main),
                extra=sum(card.quantity for card in deck.extra),
                side=sum(card.quantity for card in deck.side),
                total_cards=deck.total_cards(),
            )
            for deck in session.decks
        ],
        missing_cards=sum(card.quantity for card in session.missing_cards),
        error=session.error,
    )


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(store: SessionStoreDep) -> SessionResponse:
    """Start a new wizard session."""
    return session_to_response(store.create())


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session: WizardSessionDep) -> SessionResponse:
    """Get the current state of a session."""
    return session_to_response(session)


@router.delete("/{session_id}", response_model=DeleteResponse)
async def delete_session(session_id: str, store: SessionStoreDep) -> DeleteResponse:
    """Discard a session."""
    store.delete(session_id)
    return DeleteResponse(session_id=session_id, deleted=True)


@router.post("/{session_id}/next", response_model=SessionResponse)
async def next_step(session: WizardSessionDep) -> SessionResponse:
    """
    Advance to the next step.

    Returns 409 if the next step is still locked.
    """
    if not session.next_step():
        raise StepNotAccessibleError(
            session.current_step + 1,
            "Finish the current step before moving on",
        )
    return session_to_response(session)


@router.post("/{session_id}/prev", response_model=SessionResponse)
async def prev_step(session: WizardSessionDep) -> SessionResponse:
    """Go back one step. Does nothing on the first step."""
    session.prev_step()
    return session_to_response(session)


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset_session(session: WizardSessionDep) -> SessionResponse:
    """Clear everything and return to the first step."""
    session.reset()
    return session_to_response(session)
