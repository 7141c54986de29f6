"""Document registry: recording drafts and reconstructing issued documents.

Issued documents are append-only. A historical document is always shown
from its stored line items and total; current rate cards and tax policy
are never consulted when reconstructing one.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from prodflow.engine.composer import format_issue_date, next_sequence, resolve_recipient
from prodflow.models import (
    ZERO,
    BillingCategory,
    CrewMember,
    Document,
    DraftDocument,
    ExtraItem,
    Firm,
    HistoricalDocumentError,
    InvoiceItem,
    Shoot,
    TalentMember,
)
from prodflow.store import JsonStore

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


def document_from_draft(
    draft: DraftDocument,
    document_id: Optional[str] = None,
    issued_on: Optional[date] = None,
) -> Document:
    """Freeze a fresh draft into an issued document."""
    if draft.is_historical:
        raise HistoricalDocumentError(
            f"Document {draft.number} is a historical view and cannot be recorded again"
        )
    items = [
        InvoiceItem(
            description=draft.base_description,
            quantity=Decimal("1"),
            rate=draft.base_amount,
            amount=draft.base_amount,
        ),
    ]
    items.extend(
        InvoiceItem(
            description=item.description,
            quantity=item.qty,
            rate=item.rate,
            amount=item.amount,
        )
        for item in draft.extra_items
    )
    return Document(
        id=document_id or str(uuid.uuid4()),
        number=draft.number,
        date=issued_on or draft.issued_on or date.today(),
        shoot_id=draft.shoot_id,
        firm_id=draft.firm.id if draft.firm else "",
        recipient_id=draft.recipient_id,
        recipient_name=draft.recipient_name,
        billing_category=draft.billing_category,
        items=tuple(items),
        total=draft.net_total,
        document_type=draft.document_type,
    )


def reconstruct(
    document: Document,
    firms: list[Firm],
    shoots: Iterable[Shoot],
    talent: Iterable[TalentMember],
    crew: Iterable[CrewMember],
) -> DraftDocument:
    """Rebuild the draft view of an issued document from its stored fields.

    The first stored item is the base line, the rest are extra items.
    Tax is whatever separates the item sum from the stored total, and the
    displayed rate is back-computed from it for Service documents.
    """
    firm = next((f for f in firms if f.id == document.firm_id), None)
    if firm is None and firms:
        firm = firms[0]
    shoot = next((s for s in shoots if s.id == document.shoot_id), None)
    recipient = resolve_recipient(document.recipient_id, talent, crew)

    first = document.items[0] if document.items else None
    extras = [
        ExtraItem(description=item.description, qty=item.quantity, rate=item.rate)
        for item in document.items[1:]
    ]

    subtotal = sum((item.amount for item in document.items), ZERO)
    tax_amount = subtotal - document.total
    if document.billing_category == BillingCategory.SERVICE and subtotal > 0:
        tax_rate = tax_amount / subtotal * _HUNDRED
    else:
        tax_rate = ZERO

    return DraftDocument(
        firm=firm,
        recipient=recipient,
        recipient_id=document.recipient_id,
        recipient_name=recipient.name if recipient else document.recipient_name,
        base_amount=first.rate if first else ZERO,
        base_description=first.description if first else "",
        extra_items=extras,
        subtotal=subtotal,
        tax_rate=tax_rate,
        tax_amount=tax_amount,
        net_total=document.total,
        shoot=shoot,
        shoot_id=document.shoot_id,
        issue_date=format_issue_date(document.date),
        issued_on=document.date,
        number=document.number,
        billing_category=document.billing_category,
        document_type=document.document_type,
        is_historical=True,
    )


class DocumentRegistry:
    """Append-only registry of issued invoices and purchase orders."""

    def __init__(self, store: JsonStore):
        self.store = store

    def documents(self) -> list[Document]:
        return self.store.get_documents()

    def next_sequence(self, firm_id: str) -> int:
        return next_sequence(self.documents(), firm_id)

    def record(self, draft: DraftDocument) -> Document:
        """Persist a fresh draft. Historical drafts raise HistoricalDocumentError."""
        doc = document_from_draft(draft)
        self.store.append_document(doc)
        logger.info("Recorded %s %s for %s", doc.document_type.value, doc.number, doc.recipient_name)
        return doc

    def reconstruct(self, document_id: str) -> Optional[DraftDocument]:
        doc = self.store.get_document(document_id)
        if doc is None:
            return None
        return reconstruct(
            doc,
            firms=self.store.get_firms(),
            shoots=self.store.get_shoots(),
            talent=self.store.get_talent(),
            crew=self.store.get_crew(),
        )

    def search(self, text: str = "") -> list[Document]:
        """Documents matching number or recipient name, newest first."""
        needle = text.strip().lower()
        matches = [
            doc for doc in self.documents()
            if not needle
            or needle in doc.number.lower()
            or needle in (doc.recipient_name or "").lower()
        ]
        return sorted(matches, key=lambda d: d.date, reverse=True)
