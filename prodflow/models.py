"""Canonical data model for shoots, rosters, ledgers and commercial documents."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class ShootType(Enum):
    STUDIO_REELS = "Studio Reels"
    OUTDOOR_REELS = "Outdoor Reels"
    STORE_REELS = "Store Reels"
    LIVE = "Live"
    ADVT = "Advt."
    YOUTUBE_INFLUENCER = "YouTube Influencer"
    YOUTUBE_VIDEO = "YouTube Video"
    YOUTUBE_SHORTS = "YouTube Shorts"
    OTHER = "Other"


class LocationType(Enum):
    STUDIO = "Studio"
    OUTDOOR = "Outdoor"
    STORE = "Store"


class ShootStatus(Enum):
    PLANNING = "Planning"
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    POSTPONED = "Postponed"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    PENDING = "Pending"
    ADVANCE = "Advance"
    CASH = "Cash"
    PART = "Part"
    FULL = "Full"


class StaffType(Enum):
    INHOUSE = "Inhouse"
    OUTSOURCE = "Outsource"
    STORE = "Store"


class BillingCategory(Enum):
    SERVICE = "Service"
    TRAVEL = "Travel"


class DocumentType(Enum):
    INVOICE = "INVOICE"
    PO = "PO"


class RecipientKind(Enum):
    TALENT = "talent"
    CREW = "crew"


TALENT_CATEGORY = "Talent"
TRAVEL_CATEGORY = "Travelling"
CUSTOM_CATEGORY = "Custom"

ZERO = Decimal("0")


def _check_non_negative(owner: str, values: list[tuple[str, Decimal]]) -> None:
    for name, val in values:
        if val < 0:
            raise ValueError(f"{owner} '{name}' must not be negative, got {val}")


@dataclass(frozen=True)
class TalentCharges:
    """Per-engagement rate card for one talent member. Zero means no explicit rate."""
    studio_reels: Decimal = ZERO
    outdoor_reels: Decimal = ZERO
    store_reels: Decimal = ZERO
    live: Decimal = ZERO
    advertisement: Decimal = ZERO
    youtube_influencer: Decimal = ZERO
    youtube_video: Decimal = ZERO
    youtube_shorts: Decimal = ZERO
    custom: Decimal = ZERO

    def __post_init__(self) -> None:
        _check_non_negative("Talent rate", [
            (f.name, getattr(self, f.name)) for f in fields(self)
        ])


@dataclass(frozen=True)
class CrewCharges:
    """Secondary crew rate card keyed by location environment."""
    indoor: Decimal = ZERO
    outdoor: Decimal = ZERO
    live: Decimal = ZERO
    custom: Decimal = ZERO

    def __post_init__(self) -> None:
        _check_non_negative("Crew rate", [
            ("indoor", self.indoor),
            ("outdoor", self.outdoor),
            ("live", self.live),
            ("custom", self.custom),
        ])


@dataclass(frozen=True)
class BankDetails:
    bank_name: str = ""
    account_number: str = ""
    ifsc_code: str = ""
    branch_name: str = ""


@dataclass
class TalentMember:
    """A model who can be booked for a shoot."""
    id: str
    name: str
    charges: TalentCharges = field(default_factory=TalentCharges)
    travel_charges: Decimal = ZERO
    billing_name: Optional[str] = None
    phone: str = ""
    email: str = ""
    address: str = ""
    pan: str = ""
    gstin: str = ""
    bank_details: Optional[BankDetails] = None
    documents: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_non_negative("Talent", [("travel_charges", self.travel_charges)])


@dataclass
class CrewMember:
    """A production staff member (floor manager, stylist, ...)."""
    id: str
    name: str
    role: str
    rate: Decimal = ZERO
    charges: Optional[CrewCharges] = None
    travel_charges: Decimal = ZERO
    staff_type: StaffType = StaffType.INHOUSE
    phone: str = ""
    address: str = ""
    pan: str = ""
    gstin: str = ""
    bank_details: Optional[BankDetails] = None
    documents: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        _check_non_negative("Crew", [
            ("rate", self.rate),
            ("travel_charges", self.travel_charges),
        ])


@dataclass
class ExpenseLine:
    """One row of a shoot's ledger. No linked_id means a manually added line."""
    id: str
    description: str
    category: str
    date: Optional[date] = None
    estimated_amount: Decimal = ZERO
    actual_amount: Decimal = ZERO
    payment_status: PaymentStatus = PaymentStatus.PENDING
    paid_amount: Decimal = ZERO
    remark: str = ""
    attachments: list[str] = field(default_factory=list)
    linked_id: Optional[str] = None

    @property
    def is_manual(self) -> bool:
        return not self.linked_id


@dataclass
class Shoot:
    """A production project and its expense ledger."""
    id: str
    title: str
    date: Optional[date] = None
    shoot_type: ShootType = ShootType.STUDIO_REELS
    location_type: LocationType = LocationType.STUDIO
    location_name: str = ""
    page: Optional[str] = None
    talent_ids: list[str] = field(default_factory=list)
    crew_ids: list[str] = field(default_factory=list)
    budget: Decimal = ZERO
    expenses: list[ExpenseLine] = field(default_factory=list)
    status: ShootStatus = ShootStatus.PLANNING
    campaign_details: str = ""


@dataclass
class Firm:
    """A legal billing entity."""
    id: str
    name: str
    store_name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    gstin: str = ""
    logo_url: str = ""


@dataclass(frozen=True)
class InvoiceItem:
    description: str
    quantity: Decimal
    rate: Decimal
    amount: Decimal


@dataclass(frozen=True)
class Document:
    """An issued invoice or purchase order. Immutable once recorded."""
    id: str
    number: str
    date: date
    shoot_id: str
    firm_id: str
    recipient_id: Optional[str]
    recipient_name: str
    billing_category: BillingCategory
    items: tuple[InvoiceItem, ...]
    total: Decimal
    document_type: DocumentType


@dataclass(frozen=True)
class ExtraItem:
    """Additional line typed in on top of the base amount."""
    description: str
    qty: Decimal = Decimal("1")
    rate: Decimal = ZERO

    @property
    def amount(self) -> Decimal:
        return self.qty * self.rate


Member = Union[TalentMember, CrewMember]


@dataclass(frozen=True)
class Recipient:
    """A talent or crew member being billed, dispatched on ``kind``."""
    kind: RecipientKind
    member: Member

    @classmethod
    def talent(cls, member: TalentMember) -> "Recipient":
        return cls(RecipientKind.TALENT, member)

    @classmethod
    def crew(cls, member: CrewMember) -> "Recipient":
        return cls(RecipientKind.CREW, member)

    @property
    def id(self) -> str:
        return self.member.id

    @property
    def name(self) -> str:
        return self.member.name

    @property
    def display_name(self) -> str:
        if self.kind is RecipientKind.TALENT and self.member.billing_name:
            return f"{self.member.name} (C/O {self.member.billing_name})"
        return self.member.name

    @property
    def travel_allowance(self) -> Decimal:
        return self.member.travel_charges

    @property
    def documents(self) -> list[str]:
        return self.member.documents

    def rate_for(self, shoot_type: ShootType, location: LocationType) -> Decimal:
        from prodflow.engine.rates import resolve_crew_rate, resolve_talent_rate

        if self.kind is RecipientKind.TALENT:
            return resolve_talent_rate(self.member, shoot_type)
        return resolve_crew_rate(self.member, shoot_type, location)


@dataclass
class DraftDocument:
    """Computed invoice/PO ready for rendering, either fresh or historical."""
    firm: Optional[Firm]
    recipient: Optional[Recipient]
    recipient_id: Optional[str]
    recipient_name: str
    base_amount: Decimal
    base_description: str
    extra_items: list[ExtraItem]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    net_total: Decimal
    shoot: Optional[Shoot]
    shoot_id: str
    issue_date: str
    number: str
    billing_category: BillingCategory
    document_type: DocumentType
    is_historical: bool = False
    issued_on: Optional[date] = None


class LedgerValidationError(Exception):
    """Raised when a ledger breaks its per-member line invariants."""
    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Ledger validation failed with {len(errors)} error(s):\n" +
                         "\n".join(f"  - {e}" for e in errors))


class PersistenceFailure(Exception):
    """Raised when a store round-trip fails. Nothing is partially written."""


class HistoricalDocumentError(Exception):
    """Raised when a reconstructed historical document is recorded again."""
