"""
Wizard session state.

The shopping flow is a four step wizard: import a collection, add deck
lists, compare, then look up prices. A WizardSession holds one player's
progress through it. Sessions are plain objects created by a SessionStore
and handed to whoever needs them; reconciliation itself never sees them.
"""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from deckshopper.analysis.merge import deck_groups
from deckshopper.analysis.reconcile import reconcile
from deckshopper.models.card import CardEntry
from deckshopper.models.collection import CollectionImport
from deckshopper.models.deck import DeckList
from deckshopper.models.failure import (
    FailureKind,
    KnownError,
    SessionNotFoundError,
    StepNotAccessibleError,
)
from deckshopper.models.reconciliation import ReconciliationResult

logger = logging.getLogger(__name__)

STEP_COLLECTION = 1
STEP_DECKS = 2
STEP_COMPARE = 3
STEP_PRICES = 4


@dataclass
class WizardStep:
    """One step of the wizard."""

    id: int
    title: str
    description: str
    component: str
    is_complete: bool = False
    is_accessible: bool = False


def initial_wizard_steps() -> list[WizardStep]:
    """Fresh step list: only the first step is accessible."""
    return [
        WizardStep(
            id=STEP_COLLECTION,
            title="Import Collection",
            description="Upload your collection data from YGOPRODeck CSV or enter manually",
            component="CollectionImport",
            is_accessible=True,
        ),
        WizardStep(
            id=STEP_DECKS,
            title="Add Deck List",
            description="Upload YDK file or paste your desired deck list",
            component="DeckInput",
        ),
        WizardStep(
            id=STEP_COMPARE,
            title="Compare Collection",
            description="Compare your deck with your collection to find missing cards",
            component="CollectionComparison",
        ),
        WizardStep(
            id=STEP_PRICES,
            title="Price Comparison",
            description="View prices for missing cards and find the best deals",
            component="PriceComparison",
        ),
    ]


@dataclass
class WizardSession:
    """A single player's progress through the wizard."""

    session_id: str
    current_step: int = STEP_COLLECTION
    collections: list[CollectionImport] = field(default_factory=list)
    decks: list[DeckList] = field(default_factory=list)
    missing_cards: list[CardEntry] = field(default_factory=list)
    result: ReconciliationResult | None = None
    is_loading: bool = False
    error: str | None = None
    steps: list[WizardStep] = field(default_factory=initial_wizard_steps)

    def step(self, step_id: int) -> WizardStep | None:
        for wizard_step in self.steps:
            if wizard_step.id == step_id:
                return wizard_step
        return None

    def update_step_completion(self, step_id: int, is_complete: bool) -> None:
        wizard_step = self.step(step_id)
        if wizard_step is not None:
            wizard_step.is_complete = is_complete

    def _unlock(self, step_id: int) -> None:
        wizard_step = self.step(step_id)
        if wizard_step is not None:
            wizard_step.is_accessible = True

    def _lock_after(self, step_id: int) -> None:
        for wizard_step in self.steps:
            if wizard_step.id > step_id:
                wizard_step.is_accessible = False
                wizard_step.is_complete = False

    def require_step(self, step_id: int, message: str) -> None:
        """Raise StepNotAccessibleError unless `step_id` is accessible."""
        wizard_step = self.step(step_id)
        if wizard_step is None or not wizard_step.is_accessible:
            raise StepNotAccessibleError(step_id, message)

    def _clear_comparison(self) -> None:
        # Any change to the inputs makes the last comparison stale
        self.result = None
        self.missing_cards = []
        self.update_step_completion(STEP_COMPARE, False)
        self._lock_after(STEP_COMPARE)

    # Collection step

    def set_collections(self, collections: list[CollectionImport]) -> None:
        """Replace all imported collections. An empty list locks later steps."""
        self.collections = list(collections)
        self._clear_comparison()

        if self.collections:
            self.update_step_completion(STEP_COLLECTION, True)
            self._unlock(STEP_DECKS)
            if self.decks:
                self.update_step_completion(STEP_DECKS, True)
                self._unlock(STEP_COMPARE)
        else:
            self.update_step_completion(STEP_COLLECTION, False)
            self._lock_after(STEP_COLLECTION)

    def add_collection(self, collection: CollectionImport) -> None:
        self.set_collections([*self.collections, collection])

    def owned_cards(self) -> list[CardEntry]:
        """Every owned entry across all imports (names may repeat)."""
        return [card for collection in self.collections for card in collection.cards]

    # Deck step

    def set_decks(self, decks: list[DeckList]) -> None:
        """Replace all deck lists. An empty list locks later steps."""
        self.decks = list(decks)
        self._clear_comparison()

        if self.decks:
            self.update_step_completion(STEP_DECKS, True)
            self._unlock(STEP_COMPARE)
        else:
            self.update_step_completion(STEP_DECKS, False)
            self._lock_after(STEP_DECKS)

    def add_deck(self, deck: DeckList) -> None:
        """
        Append a deck list.

        Raises:
            StepNotAccessibleError: If no collection has been imported yet
        """
        self.require_deck_step()
        self.set_decks([*self.decks, deck])

    def require_deck_step(self) -> None:
        self.require_step(STEP_DECKS, "Import a collection before adding deck lists")

    def remove_deck(self, index: int) -> DeckList:
        """
        Remove the deck at `index`.

        Raises:
            KnownError: If there is no deck at that index
        """
        if not 0 <= index < len(self.decks):
            raise KnownError(
                kind=FailureKind.NOT_FOUND,
                message=f"No deck at position {index}",
                status_code=404,
            )
        removed = self.decks[index]
        self.set_decks(self.decks[:index] + self.decks[index + 1 :])
        return removed

    # Compare step

    def set_missing_cards(self, cards: list[CardEntry]) -> None:
        """Record missing cards. Any missing card unlocks price comparison."""
        self.missing_cards = list(cards)
        if self.missing_cards:
            self._unlock(STEP_PRICES)

    def compare(self) -> ReconciliationResult:
        """
        Reconcile the deck lists against the imported collections.

        Raises:
            StepNotAccessibleError: If no deck list has been added yet
        """
        self.require_step(STEP_COMPARE, "Add at least one deck list before comparing")

        result = reconcile(deck_groups(self.decks), self.owned_cards())
        self.result = result
        self.set_missing_cards(list(result.missing))
        self.update_step_completion(STEP_COMPARE, True)

        logger.info(
            "Session %s: %d of %d cards owned (%d%%)",
            self.session_id,
            result.stats.total_owned,
            result.stats.total_required,
            result.stats.completion_percentage,
        )
        return result

    # Navigation

    def set_error(self, error: str | None) -> None:
        self.error = error

    @contextmanager
    def loading(self) -> Iterator[None]:
        """
        Mark the session busy while an import or lookup runs.

        Clears the previous error on entry. A KnownError raised inside is
        recorded as the session error and re-raised.
        """
        self.is_loading = True
        self.error = None
        try:
            yield
        except KnownError as e:
            self.error = e.message
            raise
        finally:
            self.is_loading = False

    def next_step(self) -> bool:
        """Advance if the next step is accessible. Returns whether it moved."""
        next_wizard_step = self.step(self.current_step + 1)
        if next_wizard_step is not None and next_wizard_step.is_accessible:
            self.current_step = next_wizard_step.id
            return True
        return False

    def prev_step(self) -> bool:
        """Go back one step. Returns whether it moved."""
        if self.current_step > STEP_COLLECTION:
            self.current_step -= 1
            return True
        return False

    def reset(self) -> None:
        """Start over with an empty session."""
        self.current_step = STEP_COLLECTION
        self.collections = []
        self.decks = []
        self.missing_cards = []
        self.result = None
        self.is_loading = False
        self.error = None
        self.steps = initial_wizard_steps()

    @property
    def current_wizard_step(self) -> WizardStep | None:
        return self.step(self.current_step)

    @property
    def can_go_back(self) -> bool:
        return self.current_step > STEP_COLLECTION

    @property
    def can_go_next(self) -> bool:
        next_wizard_step = self.step(self.current_step + 1)
        return next_wizard_step is not None and next_wizard_step.is_accessible

    @property
    def can_proceed(self) -> bool:
        current = self.current_wizard_step
        return current is not None and current.is_complete

    @property
    def progress(self) -> int:
        """Percentage of completed steps."""
        completed = sum(1 for wizard_step in self.steps if wizard_step.is_complete)
        return round(completed / len(self.steps) * 100)


class SessionStore:
    """In-memory registry of wizard sessions, keyed by id."""

    def __init__(self) -> None:
        self._sessions: dict[str, WizardSession] = {}

    def create(self) -> WizardSession:
        session = WizardSession(session_id=uuid.uuid4().hex)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> WizardSession:
        """
        Raises:
            SessionNotFoundError: If no session has this id
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)

    def __len__(self) -> int:
        return len(self._sessions)
