"""Typed records exchanged with the duplicate detection engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime

SIMILARITY_THRESHOLD_DEFAULT = 0.8


class ComparisonOption(StrEnum):
    """Policy deciding which historical lists join one comparison pass."""

    LAST_1 = "last-1"
    LAST_3 = "last-3"
    LAST_5 = "last-5"
    ALL = "all"
    CUSTOM = "custom"


class SuggestedAction(StrEnum):
    """Remediation suggested for one duplicated product."""

    SKIP = "skip"
    REDUCE = "reduce"
    WARNING = "warning"
    MERGE = "merge"
    DIFFERENT_STORE = "different-store"


class Confidence(StrEnum):
    """Confidence that a flagged product is really a duplicate."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Return sort rank where higher means more confident."""
        return _CONFIDENCE_RANKS[self]


_CONFIDENCE_RANKS: dict[Confidence, int] = {
    Confidence.HIGH: 3,
    Confidence.MEDIUM: 2,
    Confidence.LOW: 1,
}


class ResolutionAction(StrEnum):
    """Caller-side responses to a pending duplicate prompt."""

    MERGE = "merge"
    DISCARD = "discard"
    ADD_ANYWAY = "add-anyway"
    CANCEL = "cancel"


@dataclass(frozen=True, slots=True)
class ProductRecord:
    """One shopping-list item as extracted from the list store."""

    name: str
    quantity: float
    units: str
    list_id: str
    list_name: str
    is_purchased: bool
    created_at: datetime
    product_id: str | None = None
    selected_store: str | None = None


@dataclass(frozen=True, slots=True)
class ListRecord:
    """Shopping-list metadata used for window selection."""

    list_id: str
    name: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class ListSnapshot:
    """One list with the product rows it held when the snapshot was taken."""

    list_data: ListRecord
    products: tuple[ProductRecord, ...] = ()

    @property
    def list_id(self) -> str:
        """Return the wrapped list id."""
        return self.list_data.list_id

    @property
    def name(self) -> str:
        """Return the wrapped list name."""
        return self.list_data.name

    @property
    def created_at(self) -> datetime:
        """Return the wrapped list creation time."""
        return self.list_data.created_at


@dataclass(frozen=True, slots=True)
class ComparisonSettings:
    """Per-run knobs controlling list selection and match acceptance."""

    option: ComparisonOption = ComparisonOption.LAST_3
    custom_days: int | None = None
    include_completed: bool = False
    similarity_threshold: float = SIMILARITY_THRESHOLD_DEFAULT
    check_different_stores: bool = True


DEFAULT_COMPARISON_SETTINGS = ComparisonSettings()


@dataclass(frozen=True, slots=True)
class MatchEntry:
    """One earlier product that matched the evaluated product."""

    list_id: str
    list_name: str
    quantity: float
    units: str
    is_purchased: bool
    days_ago: int
    selected_store: str | None = None
    product_id: str | None = None


@dataclass(frozen=True, slots=True)
class ProductMatches:
    """All surviving matches for one current-list product."""

    product: ProductRecord
    matches: tuple[MatchEntry, ...]
    is_different_store: bool = False


@dataclass(frozen=True, slots=True)
class Classification:
    """Verdict for one product's match group."""

    confidence: Confidence
    suggested_action: SuggestedAction


@dataclass(frozen=True, slots=True)
class DuplicateMatch:
    """Detection result for one current-list product with matches."""

    product_name: str
    current_quantity: float
    current_units: str
    matches: tuple[MatchEntry, ...]
    suggested_action: SuggestedAction
    confidence: Confidence
    is_different_store: bool = False
    current_store: str | None = None


@dataclass(frozen=True, slots=True)
class DuplicateStats:
    """Summary counts over one batch of detection results."""

    total_duplicates: int = 0
    high_confidence: int = 0
    suggested_skips: int = 0
    suggested_reductions: int = 0
    different_stores: int = 0

    @property
    def potential_savings(self) -> str:
        """Return the short reporting message for this batch."""
        if self.total_duplicates > 0:
            return "Avoid overbuying"
        return "No duplicates found"


@dataclass(frozen=True, slots=True)
class DifferentStoreCheck:
    """Outcome of the pre-add same-list different-store check."""

    found: bool
    existing_product: ProductRecord | None = None


@dataclass(frozen=True, slots=True)
class PendingDuplicate:
    """Prompt payload for a product that duplicates one already listed."""

    product_name: str
    existing_quantity: float
    new_quantity: float
    units: str
    existing_store: str | None
    new_store: str | None
    is_different_store: bool
