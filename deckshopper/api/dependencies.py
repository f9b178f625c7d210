"""
Shared FastAPI dependencies.

Application-wide objects live on ``app.state`` and are handed to route
handlers through these functions, so tests can swap them with
``app.dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request

from deckshopper.services.card_database import CardDatabaseClient
from deckshopper.services.wizard import SessionStore, WizardSession


def get_session_store(request: Request) -> SessionStore:
    """The application's wizard session store."""
    store: SessionStore = request.app.state.session_store
    return store


def get_card_db(request: Request) -> CardDatabaseClient:
    """The application's card database client."""
    card_db: CardDatabaseClient = request.app.state.card_db
    return card_db


def get_wizard_session(
    session_id: str,
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> WizardSession:
    """
    Resolve the session named in the request path.

    Raises:
        SessionNotFoundError: If the session does not exist
    """
    return store.get(session_id)


SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
CardDatabaseDep = Annotated[CardDatabaseClient, Depends(get_card_db)]
WizardSessionDep = Annotated[WizardSession, Depends(get_wizard_session)]
