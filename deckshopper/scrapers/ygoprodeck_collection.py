"""
YGOPRODeck shared collection scraper.

Players can share their YGOPRODeck collection as a public page:
    https://ygoprodeck.com/collection/share/<slug>

The page lists one card-row div per card with its passcode in data-id and
the owned count in a floating-quantity div ("x3"). There is no API for
this, so the HTML is parsed with regular expressions.

Note: Web scraping is inherently fragile. Page structure may change.
"""

import re
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

import httpx

from deckshopper.config import BROWSER_USER_AGENT, settings
from deckshopper.models.failure import ExternalServiceError

CARD_ROW_PATTERN = re.compile(
    r'<div[^>]*class="card-row"[^>]*data-id="\d+"[^>]*>[\s\S]*?</div>',
)
CARD_ID_PATTERN = re.compile(r'data-id="(\d+)"')
QUANTITY_PATTERN = re.compile(r'<div[^>]*class="floating-quantity"[^>]*>x(\d+)</div>')


@dataclass(frozen=True)
class ScrapedCard:
    """A card found on a shared collection page."""

    card_id: int
    quantity: int


def extract_last_path_segment(text: str) -> str:
    """
    Pull the collection slug out of whatever the user pasted.

    Accepts a full URL, a URL without scheme ("ygoprodeck.com/collection/..."),
    a path, or the bare slug. Quotes, trailing slashes, query strings and
    fragments are dropped and the result is URL-decoded.
    """
    value = text.strip().strip("'\"")

    if "://" in value:
        value = urlsplit(value).path
    elif not value.startswith("/") and re.search(r"[.:]", value):
        value = urlsplit(f"https://{value}").path

    value = value.split("?")[0].split("#")[0].rstrip("/")
    segments = [segment for segment in value.split("/") if segment]
    last = segments[-1] if segments else value
    return unquote(last)


def parse_collection_page(html: str) -> list[ScrapedCard]:
    """
    Parse card passcodes and quantities from a shared collection page.

    Rows without a quantity marker count as one copy.
    """
    cards: list[ScrapedCard] = []

    for row in CARD_ROW_PATTERN.finditer(html):
        row_html = row.group(0)

        id_match = CARD_ID_PATTERN.search(row_html)
        if not id_match:
            continue

        quantity = 1
        quantity_match = QUANTITY_PATTERN.search(row_html)
        if quantity_match:
            quantity = int(quantity_match.group(1))

        cards.append(ScrapedCard(card_id=int(id_match.group(1)), quantity=quantity))

    return cards


def collection_share_url(slug: str) -> str:
    return f"{settings.ygoprodeck_site_url.rstrip('/')}/collection/share/{slug.strip()}"


async def fetch_collection_page(slug: str, client: httpx.AsyncClient | None = None) -> str:
    """
    Fetch a shared collection page.

    Args:
        slug: Collection slug (see extract_last_path_segment)
        client: Optional httpx client for connection reuse

    Returns:
        Raw HTML content

    Raises:
        ValueError: If slug is blank
        ExternalServiceError: If the page cannot be fetched
    """
    if not slug or not slug.strip():
        raise ValueError("Collection slug is required")

    url = collection_share_url(slug)
    headers = {"User-Agent": BROWSER_USER_AGENT}

    try:
        if client:
            response = await client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient(
                follow_redirects=True, timeout=settings.request_timeout_seconds
            ) as owned_client:
                response = await owned_client.get(url, headers=headers)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise ExternalServiceError(
            f"Failed to fetch collection: {e.response.status_code} {e.response.reason_phrase}",
            detail=url,
            status_code=e.response.status_code,
        ) from e
    except httpx.RequestError as e:
        raise ExternalServiceError("Failed to fetch collection", detail=str(e)) from e

    return response.text


async def scrape_collection(slug: str, client: httpx.AsyncClient | None = None) -> list[ScrapedCard]:
    """Fetch and parse a shared collection page."""
    html = await fetch_collection_page(slug, client)
    return parse_collection_page(html)
