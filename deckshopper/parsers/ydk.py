"""
Parser for YDK deck files.

YDK format (YGOPro / YGOPRODeck):
    #created by ...
    #main
    89631139
    89631139
    #extra
    44508094
    !side
    14558127

One card passcode per line, one line per copy. Lines starting with # or !
are comments, except the #main and #extra markers and the side deck
marker, written !side or #side.
"""

from collections.abc import Iterable, Mapping

from deckshopper.analysis.attach import attach_quantities
from deckshopper.models.card import CardEntry
from deckshopper.models.deck import DeckList, YdkData


def parse_ydk(text: str) -> YdkData:
    """
    Parse YDK text into card identifiers per section.

    Identifiers that appear before any section marker, and anything that
    is not a positive integer, are ignored.
    """
    result = YdkData()
    section: list[int] | None = None

    for line in text.split("\n"):
        line = line.strip()
        if not line:
            continue

        if line.startswith("#main"):
            section = result.main
            continue
        if line.startswith("#extra"):
            section = result.extra
            continue
        if line.startswith(("#side", "!side")):
            section = result.side
            continue
        if line.startswith(("#", "!")):
            continue

        try:
            card_id = int(line)
        except ValueError:
            continue

        if card_id > 0 and section is not None:
            section.append(card_id)

    return result


def build_ydk_deck(
    name: str | None,
    ydk: YdkData,
    catalog: Iterable[CardEntry] | Mapping[int, CardEntry],
) -> DeckList:
    """
    Join YDK identifiers against card data, one zone at a time.

    Identifiers the catalog does not know are dropped.
    """
    if not isinstance(catalog, Mapping):
        catalog = {card.card_id: card for card in catalog if card.card_id is not None}

    return DeckList(
        name=name,
        main=list(attach_quantities(ydk.main, catalog)),
        extra=list(attach_quantities(ydk.extra, catalog)),
        side=list(attach_quantities(ydk.side, catalog)),
    )
