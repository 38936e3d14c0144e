from poolbuilder.models.booster import BoosterDefinition, Slot
from poolbuilder.models.card import COLOR_ORDER, VALID_RARITIES, Card, CardFace, ImageUris
from poolbuilder.models.failure import (
    FailureKind,
    KnownError,
    NoEligibleSetsError,
    ServiceResult,
)
from poolbuilder.models.mtg_set import SetInfo
from poolbuilder.models.session import DeckSession
from poolbuilder.models.submission import DayMeta, Submission

__all__ = [
    "COLOR_ORDER",
    "VALID_RARITIES",
    "BoosterDefinition",
    "Card",
    "CardFace",
    "DayMeta",
    "DeckSession",
    "FailureKind",
    "ImageUris",
    "KnownError",
    "NoEligibleSetsError",
    "ServiceResult",
    "SetInfo",
    "Slot",
    "Submission",
]
