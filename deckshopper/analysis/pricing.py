"""
Price lookup for missing cards.

Card database entries carry one price field per vendor. Which vendors are
considered, and in what currency, comes from configuration.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from deckshopper.analysis.merge import casefold_name
from deckshopper.config import PriceSource, settings
from deckshopper.models.card import CardEntry
from deckshopper.models.reconciliation import ReconciliationResult


@dataclass(frozen=True)
class PriceQuote:
    """A single vendor price."""

    source: str
    price: float
    currency: str


@dataclass
class PriceComparison:
    """A missing card with every price found for it."""

    card: CardEntry
    best_price: PriceQuote | None
    all_prices: list[PriceQuote] = field(default_factory=list)

    @property
    def line_total(self) -> float | None:
        """Best price times missing quantity, or None without a price."""
        if self.best_price is None:
            return None
        return self.best_price.price * self.card.quantity


def _parse_price(value: str | None) -> float | None:
    if not value:
        return None
    try:
        price = float(value)
    except ValueError:
        return None
    return price if price > 0 else None


def get_all_prices(
    card: CardEntry,
    sources: Sequence[PriceSource] | None = None,
) -> list[PriceQuote]:
    """
    Collect every usable price for a card, cheapest first.

    Prices that are absent, unparseable, or not positive are skipped.
    Equal prices keep the order of `sources`.
    """
    if sources is None:
        sources = settings.price_sources

    quotes: list[PriceQuote] = []
    for source in sources:
        price = _parse_price(card.prices.get(source.field))
        if price is not None:
            quotes.append(PriceQuote(source=source.source, price=price, currency=source.currency))

    quotes.sort(key=lambda quote: quote.price)
    return quotes


def get_best_price(
    card: CardEntry,
    sources: Sequence[PriceSource] | None = None,
) -> PriceQuote | None:
    """Lowest usable price for a card, or None if it has none."""
    quotes = get_all_prices(card, sources)
    return quotes[0] if quotes else None


def price_missing_cards(
    result: ReconciliationResult,
    catalog: Iterable[CardEntry] | Mapping[str, CardEntry],
    sources: Sequence[PriceSource] | None = None,
) -> list[PriceComparison]:
    """
    Price every missing card from a reconciliation.

    Args:
        result: Reconciliation whose missing cards should be priced
        catalog: Card data with prices, matched to missing cards by
            normalized name (entries) or by the mapping's normalized keys
        sources: Vendors to consider. Defaults to configured sources.

    Returns:
        One PriceComparison per missing entry, in missing-list order.
        Cards without catalog data get no prices.
    """
    if isinstance(catalog, Mapping):
        by_name = {casefold_name(name): card for name, card in catalog.items()}
    else:
        by_name = {casefold_name(card.name): card for card in catalog}

    comparisons: list[PriceComparison] = []
    for card in result.missing:
        priced = by_name.get(casefold_name(card.name))
        quotes = get_all_prices(priced, sources) if priced is not None else []
        comparisons.append(
            PriceComparison(
                card=card,
                best_price=quotes[0] if quotes else None,
                all_prices=quotes,
            )
        )
    return comparisons


def total_best_price(comparisons: Iterable[PriceComparison]) -> dict[str, float]:
    """Sum best-price line totals per currency."""
    totals: dict[str, float] = {}
    for comparison in comparisons:
        line_total = comparison.line_total
        if line_total is None or comparison.best_price is None:
            continue
        currency = comparison.best_price.currency
        totals[currency] = round(totals.get(currency, 0.0) + line_total, 2)
    return totals
