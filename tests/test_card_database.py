"""Tests for the YGOPRODeck card database client."""

import time
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import respx

from deckshopper.services.card_database import (
    CardDatabaseClient,
    CardDatabaseError,
    RateLimiter,
    card_from_api,
)

API_URL = "https://db.ygoprodeck.com/api/v7"
CARDINFO_URL = f"{API_URL}/cardinfo.php"


@pytest.fixture
def ash_blossom_payload() -> dict[str, Any]:
    """A cardinfo.php card as returned by the API."""
    return {
        "id": 14558127,
        "name": "Ash Blossom & Joyous Spring",
        "type": "Tuner Effect Monster",
        "frameType": "effect",
        "desc": "When a card or effect is activated that includes...",
        "atk": 0,
        "def": 1800,
        "level": 3,
        "race": "Zombie",
        "attribute": "FIRE",
        "ygoprodeck_url": "https://ygoprodeck.com/card/ash-blossom-joyous-spring-7485",
        "card_sets": [
            {
                "set_name": "Maximum Crisis",
                "set_code": "MACR-EN036",
                "set_rarity": "Secret Rare",
                "set_rarity_code": "(ScR)",
                "set_price": "12.34",
            }
        ],
        "card_images": [
            {"id": 14558127, "image_url": "https://images.ygoprodeck.com/images/cards/14558127.jpg"}
        ],
        "card_prices": [
            {
                "cardmarket_price": "2.50",
                "tcgplayer_price": "3.10",
                "ebay_price": "4.99",
                "amazon_price": "5.00",
                "coolstuffinc_price": "2.99",
            }
        ],
    }


@pytest.fixture
def pot_payload() -> dict[str, Any]:
    return {
        "id": 84211599,
        "name": "Pot of Prosperity",
        "type": "Spell Card",
        "card_prices": [{"cardmarket_price": "1.00", "tcgplayer_price": "1.20"}],
    }


@pytest.fixture
async def card_db() -> AsyncGenerator[CardDatabaseClient, None]:
    async with CardDatabaseClient(base_url=API_URL, rate_limiter=RateLimiter(0)) as db:
        yield db


class TestCardFromApi:
    def test_converts_payload(self, ash_blossom_payload: dict[str, Any]) -> None:
        """All useful fields are carried over."""
        card = card_from_api(ash_blossom_payload)

        assert card.name == "Ash Blossom & Joyous Spring"
        assert card.quantity == 0
        assert card.card_id == 14558127
        assert card.card_type == "Tuner Effect Monster"
        assert card.prices["tcgplayer_price"] == "3.10"
        assert card.sets[0].set_code == "MACR-EN036"
        assert card.sets[0].set_price == "12.34"
        assert card.attributes["race"] == "Zombie"
        assert card.attributes["atk"] == 0
        assert card.attributes["image_url"].endswith("14558127.jpg")

    def test_minimal_payload(self) -> None:
        """Optional sections may be absent."""
        card = card_from_api({"id": 1, "name": "Mystery"})

        assert card.name == "Mystery"
        assert card.sets == ()
        assert card.prices == {}
        assert card.attributes == {}


class TestRateLimiter:
    async def test_zero_delay_does_not_wait(self) -> None:
        """A limiter with no delay lets requests straight through."""
        limiter = RateLimiter(0)

        await limiter.throttle()
        await limiter.throttle()

    async def test_waits_between_requests(self) -> None:
        """A second request inside the delay window waits for the remainder."""
        limiter = RateLimiter(0.05)

        await limiter.throttle()
        started = time.monotonic()
        await limiter.throttle()

        assert time.monotonic() - started >= 0.04


class TestCardLookups:
    @respx.mock
    async def test_get_card_by_id(
        self, card_db: CardDatabaseClient, ash_blossom_payload: dict[str, Any]
    ) -> None:
        """A single card is fetched by passcode."""
        route = respx.get(CARDINFO_URL).mock(
            return_value=httpx.Response(200, json={"data": [ash_blossom_payload]})
        )

        card = await card_db.get_card_by_id(14558127)

        assert card is not None
        assert card.name == "Ash Blossom & Joyous Spring"
        assert route.calls.last.request.url.params["id"] == "14558127"

    @respx.mock
    async def test_get_cards_by_ids_sends_unique_ids(
        self,
        card_db: CardDatabaseClient,
        ash_blossom_payload: dict[str, Any],
        pot_payload: dict[str, Any],
    ) -> None:
        """Duplicate passcodes are requested once, comma separated."""
        route = respx.get(CARDINFO_URL).mock(
            return_value=httpx.Response(200, json={"data": [ash_blossom_payload, pot_payload]})
        )

        cards = await card_db.get_cards_by_ids([14558127, 14558127, 84211599])

        assert [card.card_id for card in cards] == [14558127, 84211599]
        assert route.call_count == 1
        assert route.calls.last.request.url.params["id"] == "14558127,84211599"

    async def test_get_cards_by_ids_empty(self, card_db: CardDatabaseClient) -> None:
        """No passcodes means no request."""
        assert await card_db.get_cards_by_ids([]) == []

    @respx.mock
    async def test_get_cards_by_names(
        self, card_db: CardDatabaseClient, pot_payload: dict[str, Any]
    ) -> None:
        """Names are joined with a pipe."""
        route = respx.get(CARDINFO_URL).mock(
            return_value=httpx.Response(200, json={"data": [pot_payload]})
        )

        cards = await card_db.get_cards_by_names(["Pot of Prosperity", "Raigeki"])

        assert [card.name for card in cards] == ["Pot of Prosperity"]
        assert route.calls.last.request.url.params["name"] == "Pot of Prosperity|Raigeki"

    @respx.mock
    async def test_search_uses_fuzzy_name(
        self, card_db: CardDatabaseClient, pot_payload: dict[str, Any]
    ) -> None:
        """Search sends the term as fname."""
        route = respx.get(CARDINFO_URL).mock(
            return_value=httpx.Response(200, json={"data": [pot_payload]})
        )

        cards = await card_db.search_cards_by_name("prosperity")

        assert len(cards) == 1
        assert route.calls.last.request.url.params["fname"] == "prosperity"

    async def test_blank_search(self, card_db: CardDatabaseClient) -> None:
        """Blank search terms return nothing without a request."""
        assert await card_db.search_cards_by_name("  ") == []

    @respx.mock
    async def test_validate_card_by_name_or_id(
        self, card_db: CardDatabaseClient, pot_payload: dict[str, Any]
    ) -> None:
        """Ints are passcodes, strings are names."""
        route = respx.get(CARDINFO_URL).mock(
            return_value=httpx.Response(200, json={"data": [pot_payload]})
        )

        await card_db.validate_card(84211599)
        await card_db.validate_card("Pot of Prosperity")

        assert route.calls[0].request.url.params["id"] == "84211599"
        assert route.calls[1].request.url.params["name"] == "Pot of Prosperity"

    @respx.mock
    async def test_validate_cards_reports_progress(
        self, card_db: CardDatabaseClient, pot_payload: dict[str, Any]
    ) -> None:
        """Progress is reported after each lookup, misses included."""
        respx.get(CARDINFO_URL).mock(
            side_effect=[
                httpx.Response(200, json={"data": [pot_payload]}),
                httpx.Response(400, json={"error": "No card matching your query was found"}),
            ]
        )
        progress: list[tuple[int, int]] = []

        cards = await card_db.validate_cards(
            ["Pot of Prosperity", "Not A Card"],
            on_progress=lambda done, total: progress.append((done, total)),
        )

        assert [card.name for card in cards] == ["Pot of Prosperity"]
        assert progress == [(1, 2), (2, 2)]


class TestLookupFailures:
    @respx.mock
    async def test_error_payload_returns_nothing(self, card_db: CardDatabaseClient) -> None:
        """An API error becomes a miss."""
        respx.get(CARDINFO_URL).mock(
            return_value=httpx.Response(200, json={"error": "No card matching your query was found"})
        )

        assert await card_db.get_card_by_name("Not A Card") is None

    @respx.mock
    async def test_http_error_returns_nothing(self, card_db: CardDatabaseClient) -> None:
        """Server errors become misses."""
        respx.get(CARDINFO_URL).mock(return_value=httpx.Response(500))

        assert await card_db.get_cards_by_ids([1, 2]) == []

    @respx.mock
    async def test_network_error_returns_nothing(self, card_db: CardDatabaseClient) -> None:
        """Transport failures become misses."""
        respx.get(CARDINFO_URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        assert await card_db.get_card_by_id(1) is None

    @respx.mock
    async def test_request_raises_on_error_payload(self, card_db: CardDatabaseClient) -> None:
        """The low-level request surfaces API errors."""
        respx.get(CARDINFO_URL).mock(return_value=httpx.Response(200, json={"error": "bad"}))

        with pytest.raises(CardDatabaseError, match="API Error: bad"):
            await card_db._request("cardinfo.php", {"name": "x"})

    @respx.mock
    async def test_request_raises_on_invalid_json(self, card_db: CardDatabaseClient) -> None:
        """Non-JSON bodies are reported."""
        respx.get(CARDINFO_URL).mock(return_value=httpx.Response(200, text="<html>"))

        with pytest.raises(CardDatabaseError, match="invalid JSON"):
            await card_db._request("cardinfo.php")


class TestOtherEndpoints:
    @respx.mock
    async def test_get_card_sets(self, card_db: CardDatabaseClient) -> None:
        """Card sets are returned as-is."""
        sets = [{"set_name": "Maximum Crisis", "set_code": "MACR", "num_of_cards": 100}]
        respx.get(f"{API_URL}/cardsets.php").mock(return_value=httpx.Response(200, json=sets))

        assert await card_db.get_card_sets() == sets

    @respx.mock
    async def test_random_card_bare_payload(
        self, card_db: CardDatabaseClient, pot_payload: dict[str, Any]
    ) -> None:
        """A bare card object is accepted."""
        respx.get(f"{API_URL}/randomcard.php").mock(
            return_value=httpx.Response(200, json=pot_payload)
        )

        card = await card_db.get_random_card()

        assert card is not None
        assert card.name == "Pot of Prosperity"

    @respx.mock
    async def test_random_card_wrapped_payload(
        self, card_db: CardDatabaseClient, pot_payload: dict[str, Any]
    ) -> None:
        """A {"data": [...]} wrapper is accepted."""
        respx.get(f"{API_URL}/randomcard.php").mock(
            return_value=httpx.Response(200, json={"data": [pot_payload]})
        )

        card = await card_db.get_random_card()

        assert card is not None
        assert card.card_id == 84211599


class TestClientLifecycle:
    async def test_closes_owned_client(self) -> None:
        """A client created by the database is closed with it."""
        async with CardDatabaseClient(base_url=API_URL) as db:
            http_client = db.client

        assert http_client.is_closed

    async def test_leaves_injected_client_open(self) -> None:
        """An injected client belongs to the caller."""
        async with httpx.AsyncClient() as http_client:
            async with CardDatabaseClient(base_url=API_URL, client=http_client) as db:
                assert db.client is http_client

            assert not http_client.is_closed
