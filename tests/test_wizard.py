"""Tests for wizard session state."""

import pytest

from deckshopper.models.card import CardEntry
from deckshopper.models.collection import CollectionImport
from deckshopper.models.deck import DeckList
from deckshopper.models.failure import KnownError, SessionNotFoundError, StepNotAccessibleError
from deckshopper.services.wizard import (
    STEP_COLLECTION,
    STEP_COMPARE,
    STEP_DECKS,
    STEP_PRICES,
    SessionStore,
    WizardSession,
)


@pytest.fixture
def session() -> WizardSession:
    return WizardSession(session_id="test")


@pytest.fixture
def collection() -> CollectionImport:
    return CollectionImport(
        cards=[
            CardEntry(name="Ash Blossom & Joyous Spring", quantity=2, owned=True),
            CardEntry(name="Raigeki", quantity=1, owned=True),
        ],
        name="binder",
    )


@pytest.fixture
def deck() -> DeckList:
    return DeckList(
        name="combo",
        main=[CardEntry(name="Ash Blossom & Joyous Spring", quantity=3)],
        side=[CardEntry(name="Raigeki", quantity=1)],
    )


def accessible(session: WizardSession) -> list[int]:
    return [step.id for step in session.steps if step.is_accessible]


def completed(session: WizardSession) -> list[int]:
    return [step.id for step in session.steps if step.is_complete]


class TestInitialState:
    def test_only_first_step_is_open(self, session: WizardSession) -> None:
        """A new session starts on the collection step."""
        assert session.current_step == STEP_COLLECTION
        assert accessible(session) == [STEP_COLLECTION]
        assert completed(session) == []
        assert session.progress == 0
        assert not session.can_go_back
        assert not session.can_go_next
        assert not session.can_proceed

    def test_step_titles(self, session: WizardSession) -> None:
        """Four steps in order."""
        assert [step.title for step in session.steps] == [
            "Import Collection",
            "Add Deck List",
            "Compare Collection",
            "Price Comparison",
        ]


class TestStepUnlocking:
    def test_collection_unlocks_decks(
        self, session: WizardSession, collection: CollectionImport
    ) -> None:
        """Importing a collection completes step 1 and opens step 2."""
        session.add_collection(collection)

        assert completed(session) == [STEP_COLLECTION]
        assert accessible(session) == [STEP_COLLECTION, STEP_DECKS]
        assert session.progress == 25
        assert session.can_proceed
        assert session.can_go_next

    def test_deck_unlocks_compare(
        self, session: WizardSession, collection: CollectionImport, deck: DeckList
    ) -> None:
        """Adding a deck completes step 2 and opens step 3."""
        session.add_collection(collection)
        session.add_deck(deck)

        assert completed(session) == [STEP_COLLECTION, STEP_DECKS]
        assert STEP_COMPARE in accessible(session)
        assert session.progress == 50

    def test_clearing_collections_locks_later_steps(
        self, session: WizardSession, collection: CollectionImport, deck: DeckList
    ) -> None:
        """Removing every collection closes everything after step 1."""
        session.add_collection(collection)
        session.add_deck(deck)

        session.set_collections([])

        assert accessible(session) == [STEP_COLLECTION]
        assert completed(session) == []

    def test_reimporting_restores_deck_step(
        self, session: WizardSession, collection: CollectionImport, deck: DeckList
    ) -> None:
        """Decks already added count again once a collection is back."""
        session.add_collection(collection)
        session.add_deck(deck)
        session.set_collections([])

        session.add_collection(collection)

        assert completed(session) == [STEP_COLLECTION, STEP_DECKS]
        assert STEP_COMPARE in accessible(session)

    def test_removing_last_deck_locks_compare(
        self, session: WizardSession, collection: CollectionImport, deck: DeckList
    ) -> None:
        """With no decks there is nothing to compare."""
        session.add_collection(collection)
        session.add_deck(deck)

        removed = session.remove_deck(0)

        assert removed is deck
        assert session.decks == []
        assert STEP_COMPARE not in accessible(session)

    def test_remove_deck_out_of_range(self, session: WizardSession) -> None:
        """Removing a deck that does not exist is a 404."""
        with pytest.raises(KnownError) as exc_info:
            session.remove_deck(3)

        assert exc_info.value.status_code == 404


class TestCompare:
    def test_compare_requires_a_deck(self, session: WizardSession) -> None:
        """Comparing before adding a deck is refused."""
        with pytest.raises(StepNotAccessibleError) as exc_info:
            session.compare()

        assert exc_info.value.status_code == 409

    def test_compare_records_result(
        self, session: WizardSession, collection: CollectionImport, deck: DeckList
    ) -> None:
        """Comparison stores the result and unlocks pricing."""
        session.add_collection(collection)
        session.add_deck(deck)

        result = session.compare()

        assert session.result is result
        assert [(c.name, c.quantity) for c in session.missing_cards] == [
            ("Ash Blossom & Joyous Spring", 1)
        ]
        assert result.stats.completion_percentage == 75
        assert STEP_COMPARE in completed(session)
        assert STEP_PRICES in accessible(session)
        assert session.progress == 75

    def test_nothing_missing_keeps_prices_locked(
        self, session: WizardSession, collection: CollectionImport
    ) -> None:
        """Pricing only opens when something is missing."""
        session.add_collection(collection)
        session.add_deck(DeckList(main=[CardEntry(name="Raigeki", quantity=1)]))

        result = session.compare()

        assert result.stats.is_complete
        assert STEP_PRICES not in accessible(session)

    def test_decks_need_a_collection_first(self, session: WizardSession, deck: DeckList) -> None:
        """Adding a deck before any collection is refused and unlocks nothing."""
        with pytest.raises(StepNotAccessibleError) as exc_info:
            session.add_deck(deck)

        assert exc_info.value.step_id == STEP_DECKS
        assert session.decks == []
        assert accessible(session) == [STEP_COLLECTION]

    def test_several_collections_are_combined(
        self, session: WizardSession, collection: CollectionImport, deck: DeckList
    ) -> None:
        """Copies spread over imports add up."""
        session.add_collection(collection)
        session.add_collection(
            CollectionImport(cards=[CardEntry(name="ash blossom & joyous spring", quantity=1)])
        )
        session.add_deck(deck)

        result = session.compare()

        assert result.missing == ()
        assert result.stats.completion_percentage == 100

    def test_changing_inputs_clears_result(
        self, session: WizardSession, collection: CollectionImport, deck: DeckList
    ) -> None:
        """A new deck makes the previous comparison stale."""
        session.add_collection(collection)
        session.add_deck(deck)
        session.compare()

        session.add_deck(DeckList(main=[CardEntry(name="Dark Hole", quantity=1)]))

        assert session.result is None
        assert session.missing_cards == []
        assert STEP_COMPARE not in completed(session)
        assert STEP_PRICES not in accessible(session)


class TestNavigation:
    def test_next_only_into_accessible_steps(
        self, session: WizardSession, collection: CollectionImport
    ) -> None:
        """Moving forward needs the next step unlocked."""
        assert session.next_step() is False

        session.add_collection(collection)

        assert session.next_step() is True
        assert session.current_step == STEP_DECKS
        assert session.next_step() is False

    def test_prev_step(self, session: WizardSession, collection: CollectionImport) -> None:
        """Going back stops at the first step."""
        session.add_collection(collection)
        session.next_step()

        assert session.prev_step() is True
        assert session.current_step == STEP_COLLECTION
        assert session.prev_step() is False

    def test_reset(
        self, session: WizardSession, collection: CollectionImport, deck: DeckList
    ) -> None:
        """Reset returns to a fresh session with the same id."""
        session.add_collection(collection)
        session.add_deck(deck)
        session.compare()
        session.next_step()
        session.error = "oops"

        session.reset()

        assert session.session_id == "test"
        assert session.current_step == STEP_COLLECTION
        assert session.collections == []
        assert session.decks == []
        assert session.result is None
        assert session.error is None
        assert accessible(session) == [STEP_COLLECTION]


class TestLoading:
    def test_flags_busy_while_running(self, session: WizardSession) -> None:
        """is_loading is set inside the block and cleared after."""
        with session.loading():
            assert session.is_loading

        assert not session.is_loading

    def test_records_known_errors(self, session: WizardSession) -> None:
        """Known failures are stored on the session and re-raised."""
        with pytest.raises(SessionNotFoundError):
            with session.loading():
                raise SessionNotFoundError("other")

        assert session.error == "Session 'other' not found"
        assert not session.is_loading

    def test_clears_previous_error(self, session: WizardSession) -> None:
        """A new operation starts without the last error."""
        session.set_error("old")

        with session.loading():
            pass

        assert session.error is None


class TestSessionStore:
    def test_create_and_get(self) -> None:
        """Created sessions can be looked up by id."""
        store = SessionStore()

        session = store.create()

        assert store.get(session.session_id) is session
        assert len(store) == 1

    def test_ids_are_unique(self) -> None:
        """Every session gets its own id."""
        store = SessionStore()

        assert store.create().session_id != store.create().session_id

    def test_unknown_session(self) -> None:
        """Unknown ids raise SessionNotFoundError."""
        with pytest.raises(SessionNotFoundError):
            SessionStore().get("missing")

    def test_delete(self) -> None:
        """Deleted sessions are gone; deleting twice fails."""
        store = SessionStore()
        session = store.create()

        store.delete(session.session_id)

        assert len(store) == 0
        with pytest.raises(SessionNotFoundError):
            store.delete(session.session_id)
