"""
Deck and collection import.

Turns uploaded files and shared collection pages into the DeckList and
CollectionImport shapes the reconciler works on. Card data needed to
resolve passcodes comes from the card database.
"""

import logging
from dataclasses import replace
from pathlib import PurePath

import httpx

from deckshopper.models.card import CardEntry
from deckshopper.models.collection import CollectionImport
from deckshopper.models.deck import DeckList
from deckshopper.models.failure import FailureKind, KnownError, ParseError, UnsupportedFileTypeError
from deckshopper.parsers.collection_csv import parse_collection_csv
from deckshopper.parsers.deck_text import parse_text_deck_list
from deckshopper.parsers.file_types import detect_file_type
from deckshopper.parsers.ydk import build_ydk_deck, parse_ydk
from deckshopper.scrapers.ygoprodeck_collection import extract_last_path_segment, scrape_collection
from deckshopper.services.card_database import CardDatabaseClient

logger = logging.getLogger(__name__)


def display_name(file_name: str) -> str:
    """File name without its extension."""
    return PurePath(file_name).stem or file_name


def decode_upload(raw: bytes) -> str:
    """Decode uploaded bytes as UTF-8 text."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError("Failed to read file as text", detail=str(e)) from e


async def import_deck(
    file_name: str,
    content: str,
    card_db: CardDatabaseClient | None,
) -> DeckList:
    """
    Parse a deck file.

    YDK decks list passcodes, which are resolved through the card database;
    without one (offline use) they resolve to an empty deck. Text decks are
    parsed as-is.

    Raises:
        UnsupportedFileTypeError: If the file is neither YDK nor text
    """
    file_type = detect_file_type(file_name, content)

    if file_type == "ydk":
        ydk = parse_ydk(content)
        catalog: list[CardEntry] = []
        if card_db is not None:
            catalog = await card_db.get_cards_by_ids(ydk.all_ids())
        else:
            logger.warning("No card database available; YDK deck %s resolves no cards", file_name)
        deck = build_ydk_deck(file_name, ydk, catalog)
    elif file_type == "txt":
        deck = parse_text_deck_list(content, name=file_name)
    else:
        raise UnsupportedFileTypeError(file_name)

    logger.info("Imported deck %s with %d cards", file_name, deck.total_cards())
    return deck


def import_collection(file_name: str, content: str) -> CollectionImport:
    """
    Parse a collection file.

    Raises:
        UnsupportedFileTypeError: If the file is not CSV
        ParseError: If the CSV cannot be parsed
    """
    if detect_file_type(file_name, content) != "csv":
        raise UnsupportedFileTypeError(file_name)
    return parse_collection_csv(content, name=display_name(file_name))


async def import_shared_collection(
    slug_or_url: str,
    card_db: CardDatabaseClient,
    client: httpx.AsyncClient | None = None,
) -> CollectionImport:
    """
    Import a collection from a shared YGOPRODeck collection page.

    Passcodes are resolved through the card database; cards it does not
    know are dropped.

    Raises:
        KnownError: If the slug is blank or the page lists no cards
        ExternalServiceError: If the page cannot be fetched
    """
    slug = extract_last_path_segment(slug_or_url)
    if not slug:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Please enter a collection ID",
        )

    scraped = await scrape_collection(slug, client)
    if not scraped:
        raise KnownError(
            kind=FailureKind.EMPTY_RESULT,
            message="No cards found in the collection. Please check the collection ID.",
            detail=f"Slug: {slug}",
            status_code=404,
        )

    catalog = {
        card.card_id: card
        for card in await card_db.get_cards_by_ids(card.card_id for card in scraped)
        if card.card_id is not None
    }

    cards: list[CardEntry] = []
    for scraped_card in scraped:
        found = catalog.get(scraped_card.card_id)
        if found is not None:
            cards.append(replace(found, quantity=scraped_card.quantity, owned=True))

    if len(cards) < len(scraped):
        logger.warning(
            "Dropped %d of %d cards from collection %s with no card data",
            len(scraped) - len(cards),
            len(scraped),
            slug,
        )

    return CollectionImport(cards=cards, import_source="scrape", name=slug)
