from collections.abc import AsyncGenerator, Iterable

import pytest
from httpx import ASGITransport, AsyncClient

from deckshopper.api.dependencies import get_card_db, get_session_store
from deckshopper.main import app
from deckshopper.models.card import CardEntry
from deckshopper.services.wizard import SessionStore


class FakeCardDatabase:
    """In-memory stand-in for CardDatabaseClient."""

    def __init__(self, cards: Iterable[CardEntry]):
        self.cards = list(cards)
        self.name_lookups: list[list[str]] = []

    async def get_cards_by_ids(self, card_ids: Iterable[int]) -> list[CardEntry]:
        wanted = set(card_ids)
        return [card for card in self.cards if card.card_id in wanted]

    async def get_cards_by_names(self, names: Iterable[str]) -> list[CardEntry]:
        wanted = list(names)
        self.name_lookups.append(wanted)
        return [card for card in self.cards if card.name in wanted]


@pytest.fixture
def catalog() -> list[CardEntry]:
    """Card database entries as returned by the API (quantity 0)."""
    return [
        CardEntry(
            name="Ash Blossom & Joyous Spring",
            quantity=0,
            card_id=14558127,
            card_type="Tuner Effect Monster",
            prices={"cardmarket_price": "2.50", "tcgplayer_price": "3.10"},
        ),
        CardEntry(
            name="Pot of Prosperity",
            quantity=0,
            card_id=84211599,
            card_type="Spell Card",
            prices={"cardmarket_price": "0.00", "tcgplayer_price": "1.20"},
        ),
        CardEntry(
            name="Accesscode Talker",
            quantity=0,
            card_id=86066372,
            card_type="Link Monster",
            prices={"cardmarket_price": "4.00", "tcgplayer_price": "3.50"},
        ),
        CardEntry(
            name="Infinite Impermanence",
            quantity=0,
            card_id=10045474,
            card_type="Trap Card",
            prices={},
        ),
    ]


@pytest.fixture
def sample_ydk() -> str:
    """A small YDK deck file."""
    return """#created by Player
#main
14558127
14558127
14558127
84211599
#extra
86066372
!side
10045474
10045474
"""


@pytest.fixture
def sample_collection_csv() -> str:
    """A YGOPRODeck collection export."""
    return (
        "cardname,cardq,cardrarity,card_edition,cardset,cardcode,cardid,print_id\n"
        "Ash Blossom & Joyous Spring,2,Ultra Rare,1st Edition,Maximum Crisis,MACR-EN036,14558127,\n"
        "Pot of Prosperity,1,Secret Rare,1st Edition,Blazing Vortex,BLVO-EN065,84211599,\n"
        "Raigeki,1,Ultra Rare,Unlimited,Legend of Blue Eyes,LOB-053,12580477,\n"
    )


@pytest.fixture
def card_db(catalog: list[CardEntry]) -> FakeCardDatabase:
    return FakeCardDatabase(catalog)


@pytest.fixture
async def client(card_db: FakeCardDatabase) -> AsyncGenerator[AsyncClient, None]:
    """Async test client with a fresh session store and a fake card database."""
    store = SessionStore()
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_card_db] = lambda: card_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
