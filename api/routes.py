"""API routes for shoot ledgers and commercial documents."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends

from prodflow import config
from prodflow.actions import record_document, save_shoot
from prodflow.audit import generate_ledger_audit_dict
from prodflow.engine import compose_draft, resolve_firm_for_shoot
from prodflow.models import (
    BillingCategory,
    DocumentType,
    DraftDocument,
    ExtraItem,
    PersistenceFailure,
)
from prodflow.registry import DocumentRegistry
from prodflow.store import JsonStore

from api.schemas import (
    AuditResponse,
    DocumentListItem,
    DocumentListResponse,
    DocumentResponse,
    DraftRequest,
    DraftSummary,
    LedgerLine,
    LineItem,
    SyncResponse,
)

router = APIRouter(prefix="/api/v1")


def get_store() -> JsonStore:
    return JsonStore(config.store_path())


def _summary(draft: DraftDocument) -> DraftSummary:
    items = [LineItem(
        description=draft.base_description,
        quantity=1,
        rate=float(draft.base_amount),
        amount=float(draft.base_amount),
    )]
    items.extend(
        LineItem(
            description=item.description,
            quantity=float(item.qty),
            rate=float(item.rate),
            amount=float(item.amount),
        )
        for item in draft.extra_items
    )
    return DraftSummary(
        number=draft.number,
        issue_date=draft.issue_date,
        document_type=draft.document_type.value,
        billing_category=draft.billing_category.value,
        firm_id=draft.firm.id if draft.firm else None,
        firm_name=draft.firm.name if draft.firm else None,
        recipient_id=draft.recipient_id,
        recipient_name=draft.recipient.display_name if draft.recipient else draft.recipient_name,
        shoot_id=draft.shoot_id,
        items=items,
        subtotal=float(draft.subtotal),
        tax_rate=float(draft.tax_rate),
        tax_amount=float(draft.tax_amount),
        net_total=float(draft.net_total),
        is_historical=draft.is_historical,
    )


def _compose(store: JsonStore, request: DraftRequest) -> DraftDocument | None:
    billing_category = BillingCategory(request.billing_category)
    document_type = DocumentType(request.document_type)
    tax_rate = config.DEFAULT_TAX_RATE if request.tax_rate is None else Decimal(str(request.tax_rate))
    extras = [
        ExtraItem(description=e.description, qty=Decimal(str(e.qty)), rate=Decimal(str(e.rate)))
        for e in request.extra_items
    ]

    shoot = store.get_shoot(request.shoot_id)
    firms = store.get_firms()
    if request.firm_id:
        firm = next((f for f in firms if f.id == request.firm_id), None)
    elif shoot is not None:
        firm = resolve_firm_for_shoot(shoot, firms, store.get_page_firm_map())
    else:
        firm = None

    return compose_draft(
        shoot, request.recipient_id, firm, billing_category, document_type, tax_rate, extras,
        talent=store.get_talent(),
        crew=store.get_crew(),
        issued=store.get_documents(),
    )


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.post("/shoots/{shoot_id}/sync", response_model=SyncResponse)
async def sync_shoot(shoot_id: str, store: JsonStore = Depends(get_store)):
    """Regenerate the shoot ledger from its roster and save it."""
    try:
        shoot = store.get_shoot(shoot_id)
    except PersistenceFailure as e:
        return SyncResponse(success=False, error_type="persistence_error", errors=[str(e)])
    if shoot is None:
        return SyncResponse(success=False, error_type="not_found", errors=[f"Shoot not found: {shoot_id}"])

    updated, note = save_shoot(store, shoot)
    if not note.ok:
        return SyncResponse(success=False, error_type="sync_error", errors=[note.message])

    return SyncResponse(
        success=True,
        message=note.message,
        shoot_id=updated.id,
        expenses=[
            LedgerLine(
                id=line.id,
                description=line.description,
                category=line.category,
                estimated_amount=float(line.estimated_amount),
                actual_amount=float(line.actual_amount),
                paid_amount=float(line.paid_amount),
                payment_status=line.payment_status.value,
                linked_id=line.linked_id,
            )
            for line in updated.expenses
        ],
    )


@router.get("/shoots/{shoot_id}/audit", response_model=AuditResponse)
async def shoot_audit(shoot_id: str, store: JsonStore = Depends(get_store)):
    try:
        shoot = store.get_shoot(shoot_id)
    except PersistenceFailure as e:
        return AuditResponse(success=False, error_type="persistence_error", errors=[str(e)])
    if shoot is None:
        return AuditResponse(success=False, error_type="not_found", errors=[f"Shoot not found: {shoot_id}"])
    return AuditResponse(success=True, audit=generate_ledger_audit_dict(shoot))


@router.post("/documents/draft", response_model=DocumentResponse)
async def draft_document(request: DraftRequest, store: JsonStore = Depends(get_store)):
    """Compose a draft invoice/PO without recording it."""
    try:
        draft = _compose(store, request)
    except ValueError as e:
        return DocumentResponse(success=False, error_type="request_error", errors=[str(e)])
    except PersistenceFailure as e:
        return DocumentResponse(success=False, error_type="persistence_error", errors=[str(e)])

    if draft is None:
        return DocumentResponse(
            success=False,
            error_type="resolution_error",
            errors=["No draft produced: shoot, recipient or firm not found"],
        )
    return DocumentResponse(success=True, draft=_summary(draft))


@router.post("/documents", response_model=DocumentResponse)
async def create_document(request: DraftRequest, store: JsonStore = Depends(get_store)):
    """Compose a draft and record it in the registry."""
    try:
        draft = _compose(store, request)
    except ValueError as e:
        return DocumentResponse(success=False, error_type="request_error", errors=[str(e)])
    except PersistenceFailure as e:
        return DocumentResponse(success=False, error_type="persistence_error", errors=[str(e)])

    doc, note = record_document(DocumentRegistry(store), draft)
    if doc is None:
        error_type = "resolution_error" if draft is None else "persistence_error"
        return DocumentResponse(success=False, error_type=error_type, errors=[note.message])

    return DocumentResponse(
        success=True,
        message=note.message,
        document_id=doc.id,
        draft=_summary(draft),
    )


@router.get("/documents", response_model=DocumentListResponse)
async def list_documents(search: str = "", store: JsonStore = Depends(get_store)):
    try:
        docs = DocumentRegistry(store).search(search)
    except PersistenceFailure as e:
        return DocumentListResponse(success=False, error_type="persistence_error", errors=[str(e)])
    return DocumentListResponse(
        success=True,
        documents=[
            DocumentListItem(
                id=doc.id,
                number=doc.number,
                date=doc.date.isoformat(),
                recipient_name=doc.recipient_name,
                firm_id=doc.firm_id,
                total=float(doc.total),
                document_type=doc.document_type.value,
                billing_category=doc.billing_category.value,
            )
            for doc in docs
        ],
    )


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: str, store: JsonStore = Depends(get_store)):
    """Reconstruct an issued document exactly as it was recorded."""
    try:
        draft = DocumentRegistry(store).reconstruct(document_id)
    except PersistenceFailure as e:
        return DocumentResponse(success=False, error_type="persistence_error", errors=[str(e)])
    if draft is None:
        return DocumentResponse(
            success=False,
            error_type="not_found",
            errors=[f"Document not found: {document_id}"],
        )
    return DocumentResponse(success=True, document_id=document_id, draft=_summary(draft))
