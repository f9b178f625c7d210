from deckshopper.models.card import CardEntry, CardSet
from deckshopper.models.collection import CollectionImport, ImportSource
from deckshopper.models.deck import DeckList, YdkData
from deckshopper.models.failure import (
    ExternalServiceError,
    FailureDetail,
    FailureKind,
    FileTooLargeError,
    KnownError,
    ParseError,
    SessionNotFoundError,
    StepNotAccessibleError,
    UnsupportedFileTypeError,
)
from deckshopper.models.reconciliation import ReconciliationResult, ReconciliationStats

__all__ = [
    "CardEntry",
    "CardSet",
    "CollectionImport",
    "DeckList",
    "ExternalServiceError",
    "FailureDetail",
    "FailureKind",
    "FileTooLargeError",
    "ImportSource",
    "KnownError",
    "ParseError",
    "ReconciliationResult",
    "ReconciliationStats",
    "SessionNotFoundError",
    "StepNotAccessibleError",
    "UnsupportedFileTypeError",
    "YdkData",
]
