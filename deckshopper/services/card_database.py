"""
YGOPRODeck card database client.

Looks up card data (names, types, set printings, vendor prices) by
passcode or name. API docs: https://ygoprodeck.com/api-guide/

Lookups are allowed to miss: every public method logs the failure and
returns None or an empty list instead of raising, so a flaky API only
means fewer cards get resolved.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable, Sequence
from typing import Any

import httpx

from deckshopper.config import USER_AGENT, settings
from deckshopper.models.card import CardEntry, CardSet

logger = logging.getLogger(__name__)


class CardDatabaseError(Exception):
    """Raised when the card database returns an error."""

    pass


class RateLimiter:
    """Enforces a minimum delay between consecutive requests."""

    def __init__(self, delay_seconds: float):
        self.delay_seconds = delay_seconds
        self._last_request: float | None = None
        self._lock = asyncio.Lock()

    async def throttle(self) -> None:
        """Wait until the next request is allowed."""
        async with self._lock:
            if self._last_request is not None:
                elapsed = time.monotonic() - self._last_request
                if elapsed < self.delay_seconds:
                    await asyncio.sleep(self.delay_seconds - elapsed)
            self._last_request = time.monotonic()


def card_from_api(data: dict[str, Any]) -> CardEntry:
    """
    Convert a YGOPRODeck card payload to a CardEntry with quantity 0.

    Quantity is filled in later, by identifier attachment or by the caller.
    """
    prices_list = data.get("card_prices") or []
    prices = {key: str(value) for key, value in prices_list[0].items()} if prices_list else {}

    sets = tuple(
        CardSet(
            set_name=card_set.get("set_name", ""),
            set_code=card_set.get("set_code", ""),
            set_rarity=card_set.get("set_rarity", ""),
            set_rarity_code=card_set.get("set_rarity_code", ""),
            set_price=str(card_set.get("set_price", "0")),
        )
        for card_set in data.get("card_sets") or []
    )

    attributes: dict[str, Any] = {}
    for key in ("frameType", "desc", "race", "attribute", "archetype", "atk", "def", "level"):
        if data.get(key) is not None:
            attributes[key] = data[key]
    if data.get("ygoprodeck_url"):
        attributes["ygoprodeck_url"] = data["ygoprodeck_url"]
    images = data.get("card_images") or []
    if images:
        attributes["image_url"] = images[0].get("image_url", "")

    return CardEntry(
        name=data["name"],
        quantity=0,
        card_id=data.get("id"),
        card_type=data.get("type", ""),
        sets=sets,
        prices=prices,
        attributes=attributes,
    )


class CardDatabaseClient:
    """
    Async client for the YGOPRODeck API.

    Usage:
        async with CardDatabaseClient() as db:
            cards = await db.get_cards_by_ids([89631139, 46986414])
    """

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        rate_limiter: RateLimiter | None = None,
    ):
        self.base_url = (base_url or settings.ygoprodeck_api_url).rstrip("/")
        self._client = client
        self._owns_client = client is None
        self.rate_limiter = rate_limiter or RateLimiter(settings.request_delay_seconds)

    async def __aenter__(self) -> "CardDatabaseClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                timeout=settings.request_timeout_seconds,
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _request(self, endpoint: str, params: dict[str, str] | None = None) -> Any:
        """
        Make a rate-limited GET request and return the decoded JSON.

        Raises:
            CardDatabaseError: On non-2xx responses or an "error" payload
            httpx.RequestError: On transport failures
        """
        await self.rate_limiter.throttle()

        response = await self.client.get(f"{self.base_url}/{endpoint}", params=params)

        if not response.is_success:
            raise CardDatabaseError(
                f"API request failed: {response.status_code} {response.reason_phrase}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise CardDatabaseError(f"API returned invalid JSON: {e}") from e

        if isinstance(data, dict) and data.get("error"):
            raise CardDatabaseError(f"API Error: {data['error']}")

        return data

    async def _cardinfo(self, params: dict[str, str], description: str) -> list[CardEntry]:
        try:
            data = await self._request("cardinfo.php", params)
        except (CardDatabaseError, httpx.HTTPError) as e:
            logger.warning("Failed to fetch %s: %s", description, e)
            return []
        return [card_from_api(card) for card in data.get("data") or []]

    async def get_card_by_id(self, card_id: int) -> CardEntry | None:
        """Get a card by passcode."""
        cards = await self._cardinfo({"id": str(card_id)}, f"card with ID {card_id}")
        return cards[0] if cards else None

    async def get_cards_by_ids(self, card_ids: Iterable[int]) -> list[CardEntry]:
        """Get several cards in one request. Duplicate ids are sent once."""
        unique_ids = list(dict.fromkeys(card_ids))
        if not unique_ids:
            return []
        return await self._cardinfo(
            {"id": ",".join(str(card_id) for card_id in unique_ids)},
            f"{len(unique_ids)} cards by ID",
        )

    async def get_card_by_name(self, name: str) -> CardEntry | None:
        """Get a card by exact name."""
        cards = await self._cardinfo({"name": name}, f'card with name "{name}"')
        return cards[0] if cards else None

    async def get_cards_by_names(self, names: Iterable[str]) -> list[CardEntry]:
        """Get several cards by exact name in one request."""
        unique_names = list(dict.fromkeys(names))
        if not unique_names:
            return []
        return await self._cardinfo(
            {"name": "|".join(unique_names)},
            f"{len(unique_names)} cards by name",
        )

    async def search_cards_by_name(self, term: str) -> list[CardEntry]:
        """Fuzzy search by partial name."""
        if not term.strip():
            return []
        return await self._cardinfo({"fname": term}, f'cards matching "{term}"')

    async def validate_card(self, identifier: int | str) -> CardEntry | None:
        """Look up a card by passcode (int) or exact name (str)."""
        if isinstance(identifier, int):
            return await self.get_card_by_id(identifier)
        return await self.get_card_by_name(identifier)

    async def validate_cards(
        self,
        identifiers: Sequence[int | str],
        on_progress: Callable[[int, int], None] | None = None,
    ) -> list[CardEntry]:
        """
        Look up cards one at a time, reporting progress.

        Args:
            identifiers: Passcodes or exact names
            on_progress: Called with (completed, total) after each lookup

        Returns:
            Cards that were found, in identifier order
        """
        results: list[CardEntry] = []
        total = len(identifiers)

        for index, identifier in enumerate(identifiers, start=1):
            card = await self.validate_card(identifier)
            if card is not None:
                results.append(card)
            if on_progress is not None:
                on_progress(index, total)

        return results

    async def get_card_sets(self) -> list[dict[str, Any]]:
        """All card sets: set_name, set_code, num_of_cards, tcg_date."""
        try:
            data = await self._request("cardsets.php")
        except (CardDatabaseError, httpx.HTTPError) as e:
            logger.warning("Failed to fetch card sets: %s", e)
            return []
        return list(data or [])

    async def get_random_card(self) -> CardEntry | None:
        """A random card."""
        try:
            data = await self._request("randomcard.php")
        except (CardDatabaseError, httpx.HTTPError) as e:
            logger.warning("Failed to fetch random card: %s", e)
            return None

        # The endpoint has returned both a bare card and a {"data": [...]} wrapper
        if isinstance(data, dict) and "data" in data:
            cards = data["data"] or []
            return card_from_api(cards[0]) if cards else None
        if isinstance(data, dict) and "name" in data:
            return card_from_api(data)
        return None
