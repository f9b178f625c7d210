"""
Collection import endpoints.

Collections come from CSV uploads or from a shared YGOPRODeck collection
page. Each import is kept separately and merged at comparison time.
"""

from fastapi import APIRouter, UploadFile
from pydantic import BaseModel, Field

from deckshopper.api.dependencies import CardDatabaseDep, WizardSessionDep
from deckshopper.api.sessions import SessionResponse, session_to_response
from deckshopper.models.collection import CollectionImport
from deckshopper.parsers.file_types import validate_upload
from deckshopper.services.importer import decode_upload, import_collection, import_shared_collection

router = APIRouter(prefix="/sessions", tags=["collections"])


class ScrapeRequest(BaseModel):
    """Request model for importing a shared collection."""

    slug: str = Field(
        ...,
        description="Collection slug or full share URL",
        examples=["https://ygoprodeck.com/collection/share/abc123"],
    )


class ImportResponse(BaseModel):
    """Response model for a collection import."""

    name: str | None = None
    cards_imported: int
    total_cards: int
    session: SessionResponse


def _import_response(collection: CollectionImport, session: SessionResponse) -> ImportResponse:
    return ImportResponse(
        name=collection.name,
        cards_imported=collection.unique_cards(),
        total_cards=collection.total_cards(),
        session=session,
    )


@router.post("/{session_id}/collections", response_model=ImportResponse)
async def upload_collection(session: WizardSessionDep, file: UploadFile) -> ImportResponse:
    """
    Import a collection CSV.

    Returns 413 for files over the size limit, 415 for non-CSV files,
    and 422 for CSVs without a card name column.
    """
    raw = await file.read()
    file_name = file.filename or "collection.csv"

    with session.loading():
        validate_upload(file_name, len(raw))
        collection = import_collection(file_name, decode_upload(raw))
        session.add_collection(collection)

    return _import_response(collection, session_to_response(session))


@router.post("/{session_id}/collections/scrape", response_model=ImportResponse)
async def scrape_collection(
    request: ScrapeRequest,
    session: WizardSessionDep,
    card_db: CardDatabaseDep,
) -> ImportResponse:
    """
    Import a collection shared on ygoprodeck.com.

    Returns 404 if the page lists no cards and 502 if it cannot be fetched.
    """
    with session.loading():
        collection = await import_shared_collection(request.slug, card_db)
        session.add_collection(collection)

    return _import_response(collection, session_to_response(session))


@router.delete("/{session_id}/collections", response_model=SessionResponse)
async def clear_collections(session: WizardSessionDep) -> SessionResponse:
    """Remove every imported collection. Later wizard steps are locked again."""
    session.set_collections([])
    return session_to_response(session)
