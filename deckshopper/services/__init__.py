"""
DeckShopper services.

Card database access, file and collection import, and wizard sessions.
"""

from deckshopper.services.card_database import (
    CardDatabaseClient,
    CardDatabaseError,
    RateLimiter,
    card_from_api,
)
from deckshopper.services.importer import (
    decode_upload,
    display_name,
    import_collection,
    import_deck,
    import_shared_collection,
)
from deckshopper.services.wizard import (
    SessionStore,
    WizardSession,
    WizardStep,
    initial_wizard_steps,
)

__all__ = [
    "CardDatabaseClient",
    "CardDatabaseError",
    "RateLimiter",
    "card_from_api",
    "decode_upload",
    "display_name",
    "import_collection",
    "import_deck",
    "import_shared_collection",
    "SessionStore",
    "WizardSession",
    "WizardStep",
    "initial_wizard_steps",
]
