from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class PriceSource:
    """A vendor price field on a card database entry."""

    source: str
    field: str
    currency: str


# Order matters only for ties: equal prices keep this order.
DEFAULT_PRICE_SOURCES: tuple[PriceSource, ...] = (
    PriceSource(source="CardMarket", field="cardmarket_price", currency="EUR"),
    PriceSource(source="TCGPlayer", field="tcgplayer_price", currency="USD"),
    PriceSource(source="eBay", field="ebay_price", currency="USD"),
    PriceSource(source="Amazon", field="amazon_price", currency="USD"),
    PriceSource(source="CoolStuffInc", field="coolstuffinc_price", currency="USD"),
)


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="DECKSHOPPER_")

    app_name: str = "DeckShopper"
    debug: bool = False

    ygoprodeck_api_url: str = "https://db.ygoprodeck.com/api/v7"
    ygoprodeck_site_url: str = "https://ygoprodeck.com"

    # YGOPRODeck allows 20 requests/second
    request_delay_seconds: float = 0.1
    request_timeout_seconds: float = 30.0

    max_upload_bytes: int = 10 * 1024 * 1024

    price_sources: tuple[PriceSource, ...] = DEFAULT_PRICE_SOURCES


settings = Settings()


USER_AGENT = "DeckShopper/1.0"

# Collection share pages reject non-browser user agents
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
