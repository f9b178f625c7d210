"""
Compare deck files against collection files from the command line.

Reads collection CSVs and YDK/TXT deck lists, reconciles them and prints
the cards still to buy.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from deckshopper.analysis.merge import SortPolicy, deck_groups, merge_lists
from deckshopper.analysis.reconcile import reconcile
from deckshopper.models.card import CardEntry
from deckshopper.models.collection import CollectionImport
from deckshopper.models.deck import DeckList
from deckshopper.models.failure import KnownError
from deckshopper.models.reconciliation import ReconciliationResult
from deckshopper.services.card_database import CardDatabaseClient
from deckshopper.services.importer import import_collection, import_deck

logger = logging.getLogger(__name__)


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")


async def load_decks(paths: list[Path], offline: bool = False) -> list[DeckList]:
    """Parse deck files, resolving YDK passcodes unless offline."""
    if offline:
        return [await import_deck(path.name, _read(path), None) for path in paths]

    async with CardDatabaseClient() as card_db:
        return [
            await import_deck(path.name, _read(path), card_db) for path in paths
        ]


def load_collections(paths: list[Path]) -> list[CollectionImport]:
    return [import_collection(path.name, _read(path)) for path in paths]


async def run_compare(
    collection_paths: list[Path],
    deck_paths: list[Path],
    offline: bool = False,
) -> ReconciliationResult:
    """
    Reconcile deck files against collection files.

    With no collection files every required card is reported missing.

    Raises:
        KnownError: If a file cannot be imported
    """
    collections = load_collections(collection_paths)
    decks = await load_decks(deck_paths, offline=offline)

    owned: list[CardEntry] | None = None
    if collections:
        owned = [card for collection in collections for card in collection.cards]

    result = reconcile(deck_groups(decks), owned)
    logger.info(
        "Compared %d decks against %d collections",
        len(decks),
        len(collections),
    )
    return result


def format_result(result: ReconciliationResult, sort_by: SortPolicy = "none") -> str:
    """Missing cards followed by a stats summary."""
    lines: list[str] = []
    missing = merge_lists([result.missing], sort_by=sort_by)

    if missing:
        lines.append("Missing cards:")
        lines.extend(f"  {card.quantity}x {card.name}" for card in missing)
    else:
        lines.append("You own every card.")

    stats = result.stats
    lines.append("")
    lines.append(f"Required: {stats.total_required}")
    lines.append(f"Owned:    {stats.total_owned}")
    lines.append(f"Missing:  {stats.total_missing}")
    lines.append(f"Complete: {stats.completion_percentage}%")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Find the cards missing from your collection")
    parser.add_argument(
        "--collection",
        type=Path,
        action="append",
        default=[],
        help="Collection CSV file (repeatable)",
    )
    parser.add_argument(
        "--deck",
        type=Path,
        action="append",
        required=True,
        help="Deck file, YDK or TXT (repeatable)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip card database lookups; YDK decks then resolve no cards",
    )
    parser.add_argument(
        "--sort",
        default="none",
        choices=["none", "alpha", "qtyDesc"],
        help="Order of the missing list (default: none)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        result = asyncio.run(run_compare(args.collection, args.deck, offline=args.offline))
    except KnownError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_result(result, sort_by=args.sort))
    return 0


if __name__ == "__main__":
    sys.exit(main())
