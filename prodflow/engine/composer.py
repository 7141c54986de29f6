"""Document composition for invoices and purchase orders.

All money is computed with Decimal. The draft is a pure function of the
shoot ledger, the roster, the firm and the documents already issued.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from prodflow.constants import TRAVEL_DESCRIPTION
from prodflow.engine.synchronizer import travel_link
from prodflow.models import (
    TRAVEL_CATEGORY,
    ZERO,
    BillingCategory,
    CrewMember,
    Document,
    DocumentType,
    DraftDocument,
    ExtraItem,
    Firm,
    Recipient,
    Shoot,
    TalentMember,
)

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")

TYPE_PREFIXES = {
    DocumentType.INVOICE: "INV",
    DocumentType.PO: "PO",
}

CATEGORY_SUFFIXES = {
    BillingCategory.SERVICE: "SRV",
    BillingCategory.TRAVEL: "TRV",
}


def format_issue_date(value: date) -> str:
    return value.strftime("%d-%m-%Y")


def next_sequence(issued: Iterable[Document], firm_id: str) -> int:
    """Running per-firm count. Two concurrent drafts may get the same number."""
    return 1 + sum(1 for doc in issued if doc.firm_id == firm_id)


def document_number(
    document_type: DocumentType,
    billing_category: BillingCategory,
    sequence: int,
    issued_on: date,
) -> str:
    return (
        f"{TYPE_PREFIXES[document_type]}-{issued_on.month:02d}/"
        f"{sequence:04d}/{CATEGORY_SUFFIXES[billing_category]}"
    )


def resolve_recipient(
    recipient_id: Optional[str],
    talent: Iterable[TalentMember],
    crew: Iterable[CrewMember],
) -> Optional[Recipient]:
    if not recipient_id:
        return None
    for member in talent:
        if member.id == recipient_id:
            return Recipient.talent(member)
    for member in crew:
        if member.id == recipient_id:
            return Recipient.crew(member)
    return None


def resolve_firm_for_shoot(
    shoot: Shoot,
    firms: list[Firm],
    page_firm_map: Mapping[str, str],
) -> Optional[Firm]:
    """Firm mapped from the shoot's brand page, else the first firm."""
    if not firms:
        return None
    firm_id = page_firm_map.get(shoot.page) if shoot.page else None
    if firm_id:
        for firm in firms:
            if firm.id == firm_id:
                return firm
        logger.warning("Page %s maps to unknown firm %s", shoot.page, firm_id)
    return firms[0]


def _service_base(shoot: Shoot, recipient: Recipient) -> Decimal:
    line = next(
        (e for e in shoot.expenses
         if e.linked_id == recipient.id and e.category != TRAVEL_CATEGORY),
        None,
    )
    amount = line.estimated_amount if line is not None else ZERO
    if not amount:
        # Shoot not synchronized yet: price straight off the rate card
        amount = recipient.rate_for(shoot.shoot_type, shoot.location_type)
    return amount


def _travel_base(shoot: Shoot, recipient: Recipient) -> Decimal:
    link = travel_link(recipient.id)
    line = next(
        (e for e in shoot.expenses
         if e.linked_id == link
         or (e.linked_id == recipient.id and e.category == TRAVEL_CATEGORY)),
        None,
    )
    if line is None:
        return ZERO
    if line.actual_amount > 0:
        return line.actual_amount
    return line.estimated_amount


def compose_draft(
    shoot: Optional[Shoot],
    recipient_id: Optional[str],
    firm: Optional[Firm],
    billing_category: BillingCategory,
    document_type: DocumentType,
    tax_rate: Decimal,
    extra_items: Iterable[ExtraItem] = (),
    *,
    talent: Iterable[TalentMember],
    crew: Iterable[CrewMember],
    issued: Iterable[Document],
    issued_on: Optional[date] = None,
) -> Optional[DraftDocument]:
    """Compute a fresh invoice/PO draft.

    Returns None when the shoot, recipient or firm cannot be resolved.
    Travel documents are never taxed.
    """
    if shoot is None or firm is None:
        return None
    recipient = resolve_recipient(recipient_id, talent, crew)
    if recipient is None:
        logger.info("No draft: recipient %s not in roster", recipient_id)
        return None

    issued_on = issued_on or date.today()

    if billing_category == BillingCategory.SERVICE:
        base_amount = _service_base(shoot, recipient)
        base_description = shoot.shoot_type.value
    else:
        base_amount = _travel_base(shoot, recipient)
        base_description = TRAVEL_DESCRIPTION

    valid_extras = [item for item in extra_items if item.description.strip()]
    extra_total = sum((item.amount for item in valid_extras), ZERO)

    subtotal = base_amount + extra_total
    effective_rate = ZERO if billing_category == BillingCategory.TRAVEL else Decimal(tax_rate)
    # Full precision; display rounding is left to the renderers
    tax_amount = subtotal * effective_rate / _HUNDRED
    net_total = subtotal - tax_amount

    sequence = next_sequence(issued, firm.id)
    number = document_number(document_type, billing_category, sequence, issued_on)

    return DraftDocument(
        firm=firm,
        recipient=recipient,
        recipient_id=recipient.id,
        recipient_name=recipient.name,
        base_amount=base_amount,
        base_description=base_description,
        extra_items=valid_extras,
        subtotal=subtotal,
        tax_rate=effective_rate,
        tax_amount=tax_amount,
        net_total=net_total,
        shoot=shoot,
        shoot_id=shoot.id,
        issue_date=format_issue_date(issued_on),
        issued_on=issued_on,
        number=number,
        billing_category=billing_category,
        document_type=document_type,
        is_historical=False,
    )
