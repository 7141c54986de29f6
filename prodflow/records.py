"""Conversion between model objects and plain JSON-ready dicts.

Money is written as decimal strings so that persisted documents keep
their exact arithmetic when read back.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from prodflow.models import (
    ZERO,
    BankDetails,
    BillingCategory,
    CrewCharges,
    CrewMember,
    Document,
    DocumentType,
    ExpenseLine,
    Firm,
    InvoiceItem,
    LocationType,
    PaymentStatus,
    PersistenceFailure,
    Shoot,
    ShootStatus,
    ShootType,
    StaffType,
    TalentCharges,
    TalentMember,
)


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


def stored_money(value: Any, field_name: str, default: Optional[Decimal] = None) -> Decimal:
    """Decode a persisted document amount. Bad data raises instead of becoming 0."""
    if (value is None or value == "") and default is not None:
        return default
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        amount = None
    if amount is None or not amount.is_finite():
        raise PersistenceFailure(f"Stored document field {field_name!r} is not an amount: {value!r}")
    return amount


def _money(value: Decimal) -> str:
    return str(value)


def _date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_date(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _bank_to_dict(bank: Optional[BankDetails]) -> Optional[dict]:
    if bank is None:
        return None
    return {
        "bank_name": bank.bank_name,
        "account_number": bank.account_number,
        "ifsc_code": bank.ifsc_code,
        "branch_name": bank.branch_name,
    }


def _bank_from_dict(data: Optional[dict]) -> Optional[BankDetails]:
    if not data:
        return None
    return BankDetails(
        bank_name=data.get("bank_name", ""),
        account_number=data.get("account_number", ""),
        ifsc_code=data.get("ifsc_code", ""),
        branch_name=data.get("branch_name", ""),
    )


# --- Roster ---

_TALENT_CHARGE_FIELDS = (
    "studio_reels", "outdoor_reels", "store_reels", "live", "advertisement",
    "youtube_influencer", "youtube_video", "youtube_shorts", "custom",
)


def talent_to_dict(member: TalentMember) -> dict:
    return {
        "id": member.id,
        "name": member.name,
        "billing_name": member.billing_name,
        "charges": {
            name: _money(getattr(member.charges, name)) for name in _TALENT_CHARGE_FIELDS
        },
        "travel_charges": _money(member.travel_charges),
        "phone": member.phone,
        "email": member.email,
        "address": member.address,
        "pan": member.pan,
        "gstin": member.gstin,
        "bank_details": _bank_to_dict(member.bank_details),
        "documents": list(member.documents),
    }


def talent_from_dict(data: dict) -> TalentMember:
    charges = data.get("charges") or {}
    return TalentMember(
        id=data["id"],
        name=data["name"],
        billing_name=data.get("billing_name"),
        charges=TalentCharges(**{
            name: to_decimal(charges.get(name)) for name in _TALENT_CHARGE_FIELDS
        }),
        travel_charges=to_decimal(data.get("travel_charges")),
        phone=data.get("phone", ""),
        email=data.get("email", ""),
        address=data.get("address", ""),
        pan=data.get("pan", ""),
        gstin=data.get("gstin", ""),
        bank_details=_bank_from_dict(data.get("bank_details")),
        documents=list(data.get("documents", [])),
    )


def crew_to_dict(member: CrewMember) -> dict:
    charges = None
    if member.charges is not None:
        charges = {
            "indoor": _money(member.charges.indoor),
            "outdoor": _money(member.charges.outdoor),
            "live": _money(member.charges.live),
            "custom": _money(member.charges.custom),
        }
    return {
        "id": member.id,
        "name": member.name,
        "role": member.role,
        "rate": _money(member.rate),
        "charges": charges,
        "travel_charges": _money(member.travel_charges),
        "staff_type": member.staff_type.value,
        "phone": member.phone,
        "address": member.address,
        "pan": member.pan,
        "gstin": member.gstin,
        "bank_details": _bank_to_dict(member.bank_details),
        "documents": list(member.documents),
    }


def crew_from_dict(data: dict) -> CrewMember:
    charges = data.get("charges")
    return CrewMember(
        id=data["id"],
        name=data["name"],
        role=data["role"],
        rate=to_decimal(data.get("rate")),
        charges=CrewCharges(
            indoor=to_decimal(charges.get("indoor")),
            outdoor=to_decimal(charges.get("outdoor")),
            live=to_decimal(charges.get("live")),
            custom=to_decimal(charges.get("custom")),
        ) if charges else None,
        travel_charges=to_decimal(data.get("travel_charges")),
        staff_type=StaffType(data.get("staff_type", StaffType.INHOUSE.value)),
        phone=data.get("phone", ""),
        address=data.get("address", ""),
        pan=data.get("pan", ""),
        gstin=data.get("gstin", ""),
        bank_details=_bank_from_dict(data.get("bank_details")),
        documents=list(data.get("documents", [])),
    )


# --- Shoots and ledgers ---

def expense_to_dict(line: ExpenseLine) -> dict:
    return {
        "id": line.id,
        "description": line.description,
        "category": line.category,
        "date": _date(line.date),
        "estimated_amount": _money(line.estimated_amount),
        "actual_amount": _money(line.actual_amount),
        "payment_status": line.payment_status.value,
        "paid_amount": _money(line.paid_amount),
        "remark": line.remark,
        "attachments": list(line.attachments),
        "linked_id": line.linked_id,
    }


def expense_from_dict(data: dict) -> ExpenseLine:
    return ExpenseLine(
        id=data["id"],
        description=data.get("description", ""),
        category=data.get("category", ""),
        date=_parse_date(data.get("date")),
        estimated_amount=to_decimal(data.get("estimated_amount")),
        actual_amount=to_decimal(data.get("actual_amount")),
        payment_status=PaymentStatus(data.get("payment_status", PaymentStatus.PENDING.value)),
        paid_amount=to_decimal(data.get("paid_amount")),
        remark=data.get("remark", ""),
        attachments=list(data.get("attachments", [])),
        linked_id=data.get("linked_id") or None,
    )


def shoot_to_dict(shoot: Shoot) -> dict:
    return {
        "id": shoot.id,
        "title": shoot.title,
        "date": _date(shoot.date),
        "type": shoot.shoot_type.value,
        "location_type": shoot.location_type.value,
        "location_name": shoot.location_name,
        "page": shoot.page,
        "talent_ids": list(shoot.talent_ids),
        "crew_ids": list(shoot.crew_ids),
        "budget": _money(shoot.budget),
        "expenses": [expense_to_dict(e) for e in shoot.expenses],
        "status": shoot.status.value,
        "campaign_details": shoot.campaign_details,
    }


def shoot_from_dict(data: dict) -> Shoot:
    return Shoot(
        id=data["id"],
        title=data.get("title", ""),
        date=_parse_date(data.get("date")),
        shoot_type=ShootType(data.get("type", ShootType.STUDIO_REELS.value)),
        location_type=LocationType(data.get("location_type", LocationType.STUDIO.value)),
        location_name=data.get("location_name", ""),
        page=data.get("page"),
        talent_ids=list(data.get("talent_ids", [])),
        crew_ids=list(data.get("crew_ids", [])),
        budget=to_decimal(data.get("budget")),
        expenses=[expense_from_dict(e) for e in data.get("expenses", [])],
        status=ShootStatus(data.get("status", ShootStatus.PLANNING.value)),
        campaign_details=data.get("campaign_details", ""),
    )


# --- Firms and documents ---

def firm_to_dict(firm: Firm) -> dict:
    return {
        "id": firm.id,
        "name": firm.name,
        "store_name": firm.store_name,
        "address": firm.address,
        "phone": firm.phone,
        "email": firm.email,
        "gstin": firm.gstin,
        "logo_url": firm.logo_url,
    }


def firm_from_dict(data: dict) -> Firm:
    return Firm(
        id=data["id"],
        name=data["name"],
        store_name=data.get("store_name", ""),
        address=data.get("address", ""),
        phone=data.get("phone", ""),
        email=data.get("email", ""),
        gstin=data.get("gstin", ""),
        logo_url=data.get("logo_url", ""),
    )


def document_to_dict(doc: Document) -> dict:
    return {
        "id": doc.id,
        "number": doc.number,
        "date": doc.date.isoformat(),
        "shoot_id": doc.shoot_id,
        "firm_id": doc.firm_id,
        "recipient_id": doc.recipient_id,
        "recipient_name": doc.recipient_name,
        "billing_category": doc.billing_category.value,
        "items": [
            {
                "description": item.description,
                "quantity": _money(item.quantity),
                "rate": _money(item.rate),
                "amount": _money(item.amount),
            }
            for item in doc.items
        ],
        "total": _money(doc.total),
        "type": doc.document_type.value,
    }


def document_from_dict(data: dict) -> Document:
    try:
        issued = date.fromisoformat(data["date"])
    except (KeyError, TypeError, ValueError) as e:
        raise PersistenceFailure(f"Stored document {data.get('id')} has no valid date") from e
    return Document(
        id=data["id"],
        number=data["number"],
        date=issued,
        shoot_id=data.get("shoot_id", ""),
        firm_id=data.get("firm_id", ""),
        recipient_id=data.get("recipient_id"),
        recipient_name=data.get("recipient_name") or "Unknown",
        billing_category=BillingCategory(
            data.get("billing_category") or BillingCategory.SERVICE.value
        ),
        items=tuple(
            InvoiceItem(
                description=item.get("description", ""),
                quantity=stored_money(item.get("quantity"), "quantity", Decimal("1")),
                rate=stored_money(item.get("rate"), "rate"),
                amount=stored_money(item.get("amount"), "amount"),
            )
            for item in data.get("items", [])
        ),
        total=stored_money(data.get("total"), "total"),
        document_type=DocumentType(data.get("type", DocumentType.PO.value)),
    )
