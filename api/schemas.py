"""Pydantic request and response models for the billing API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ExtraItemIn(BaseModel):
    description: str
    qty: float = 1
    rate: float = 0


class DraftRequest(BaseModel):
    shoot_id: str
    recipient_id: str
    billing_category: str = "Service"
    document_type: str = "PO"
    tax_rate: float | None = None
    firm_id: str | None = None
    extra_items: list[ExtraItemIn] = Field(default_factory=list)


class LedgerLine(BaseModel):
    id: str
    description: str
    category: str
    estimated_amount: float
    actual_amount: float
    paid_amount: float
    payment_status: str
    linked_id: str | None = None


class SyncResponse(BaseModel):
    success: bool
    message: str | None = None
    shoot_id: str | None = None
    expenses: list[LedgerLine] | None = None
    error_type: str | None = None
    errors: list[str] | None = None


class LineItem(BaseModel):
    description: str
    quantity: float
    rate: float
    amount: float


class DraftSummary(BaseModel):
    number: str
    issue_date: str
    document_type: str
    billing_category: str
    firm_id: str | None = None
    firm_name: str | None = None
    recipient_id: str | None = None
    recipient_name: str
    shoot_id: str
    items: list[LineItem]
    subtotal: float
    tax_rate: float
    tax_amount: float
    net_total: float
    is_historical: bool


class DocumentResponse(BaseModel):
    success: bool
    message: str | None = None
    document_id: str | None = None
    draft: DraftSummary | None = None
    error_type: str | None = None
    errors: list[str] | None = None


class DocumentListItem(BaseModel):
    id: str
    number: str
    date: str
    recipient_name: str
    firm_id: str
    total: float
    document_type: str
    billing_category: str


class DocumentListResponse(BaseModel):
    success: bool
    documents: list[DocumentListItem] = Field(default_factory=list)
    error_type: str | None = None
    errors: list[str] | None = None


class AuditResponse(BaseModel):
    success: bool
    audit: dict | None = None
    error_type: str | None = None
    errors: list[str] | None = None
