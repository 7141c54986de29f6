"""User actions: the boundary where store failures become notifications.

Actions never raise for I/O problems. A failed action returns an error
notification and leaves the caller's objects exactly as they were.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from prodflow.engine import synchronize, validate_ledger
from prodflow.models import (
    Document,
    DocumentType,
    DraftDocument,
    HistoricalDocumentError,
    LedgerValidationError,
    PersistenceFailure,
    Shoot,
)
from prodflow.registry import DocumentRegistry
from prodflow.store import JsonStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    ok: bool
    message: str

    @property
    def level(self) -> str:
        return "success" if self.ok else "error"


def save_shoot(store: JsonStore, shoot: Shoot) -> tuple[Shoot, Notification]:
    """Synchronize the ledger against the current roster and save the shoot."""
    try:
        expenses = synchronize(shoot, store.get_talent(), store.get_crew())
        validate_ledger(expenses)
        updated = replace(shoot, expenses=expenses)
        is_new = store.get_shoot(shoot.id) is None
        store.save_shoot(updated)
    except PersistenceFailure as e:
        logger.error("Saving shoot %s failed: %s", shoot.id, e)
        return shoot, Notification(False, f"Could not save production: {e}")
    except LedgerValidationError as e:
        logger.error("Shoot %s ledger rejected: %s", shoot.id, e)
        return shoot, Notification(False, "; ".join(e.errors))

    if is_new:
        return updated, Notification(True, "New production project initialized")
    return updated, Notification(True, "Production ledger updated")


def delete_shoot(store: JsonStore, shoot_id: str) -> Notification:
    try:
        store.delete_shoot(shoot_id)
    except PersistenceFailure as e:
        logger.error("Deleting shoot %s failed: %s", shoot_id, e)
        return Notification(False, f"Could not delete production: {e}")
    return Notification(True, "Production project deleted")


def record_document(
    registry: DocumentRegistry,
    draft: Optional[DraftDocument],
) -> tuple[Optional[Document], Notification]:
    """Record a composed draft in the registry."""
    if draft is None:
        return None, Notification(False, "Nothing to record: shoot, recipient or firm not found")
    try:
        doc = registry.record(draft)
    except HistoricalDocumentError as e:
        logger.warning("%s", e)
        return None, Notification(False, str(e))
    except PersistenceFailure as e:
        logger.error("Recording %s failed: %s", draft.number, e)
        return None, Notification(False, "Error recording document. Please check connection.")
    label = "Invoice" if doc.document_type == DocumentType.INVOICE else "PO"
    return doc, Notification(True, f"{label} successfully recorded in ledger as {doc.number}")
