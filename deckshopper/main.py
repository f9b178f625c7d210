from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deckshopper.api import (
    collection_router,
    compare_router,
    decks_router,
    health_router,
    sessions_router,
)
from deckshopper.config import settings
from deckshopper.models.failure import KnownError
from deckshopper.services.card_database import CardDatabaseClient
from deckshopper.services.wizard import SessionStore


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    yield
    await app.state.card_db.aclose()


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("deckshopper"),
    lifespan=lifespan,
)

app.state.session_store = SessionStore()
app.state.card_db = CardDatabaseClient()


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    """Render known failures as {"failure": {...}} with the error's status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"failure": exc.to_detail().model_dump(mode="json")},
    )


app.include_router(collection_router)
app.include_router(compare_router)
app.include_router(decks_router)
app.include_router(health_router)
app.include_router(sessions_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
