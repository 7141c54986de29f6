"""Tests for user actions and their notifications."""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from prodflow.actions import Notification, delete_shoot, record_document, save_shoot
from prodflow.constants import INITIAL_FIRMS
from prodflow.engine.composer import compose_draft
from prodflow.models import (
    BillingCategory,
    DocumentType,
    PersistenceFailure,
    Shoot,
    ShootType,
    TalentCharges,
    TalentMember,
)
from prodflow.registry import DocumentRegistry
from prodflow.store import JsonStore


def _make_shoot(**kwargs) -> Shoot:
    defaults = dict(id="s1", title="Festive Reels", date=date(2026, 3, 14),
                    shoot_type=ShootType.STUDIO_REELS, talent_ids=["t1"])
    defaults.update(kwargs)
    return Shoot(**defaults)


@pytest.fixture
def store(tmp_path):
    store = JsonStore(tmp_path / "store.json")
    store.save_talent(TalentMember(
        id="t1", name="Asha",
        charges=TalentCharges(studio_reels=Decimal("2000")),
        travel_charges=Decimal("300"),
    ))
    return store


def _draft(store, document_type=DocumentType.INVOICE):
    return compose_draft(
        store.get_shoot("s1") or _make_shoot(), "t1", INITIAL_FIRMS[0],
        BillingCategory.SERVICE, document_type, Decimal("10"),
        talent=store.get_talent(), crew=[], issued=store.get_documents(),
    )


def _failing(*args, **kwargs):
    raise PersistenceFailure("connection lost")


class TestSaveShoot:
    def test_new_shoot(self, store):
        shoot, note = save_shoot(store, _make_shoot())
        assert note == Notification(True, "New production project initialized")
        assert note.level == "success"
        assert [e.category for e in shoot.expenses] == ["Talent", "Travelling"]
        assert store.get_shoot("s1") == shoot

    def test_existing_shoot(self, store):
        first, _ = save_shoot(store, _make_shoot())
        second, note = save_shoot(store, first)
        assert note.message == "Production ledger updated"
        assert second.expenses == first.expenses

    def test_input_not_mutated(self, store):
        shoot = _make_shoot()
        save_shoot(store, shoot)
        assert shoot.expenses == []

    def test_persistence_failure_keeps_original(self, store, monkeypatch):
        shoot = _make_shoot()
        monkeypatch.setattr(store, "save_shoot", _failing)
        result, note = save_shoot(store, shoot)
        assert result is shoot
        assert not note.ok
        assert note.level == "error"
        assert "connection lost" in note.message
        assert store.get_shoot("s1") is None


class TestDeleteShoot:
    def test_delete(self, store):
        save_shoot(store, _make_shoot())
        note = delete_shoot(store, "s1")
        assert note.ok
        assert store.get_shoot("s1") is None

    def test_delete_failure(self, store, monkeypatch):
        monkeypatch.setattr(store, "delete_shoot", _failing)
        assert not delete_shoot(store, "s1").ok


class TestRecordDocument:
    def test_invoice_recorded(self, store):
        save_shoot(store, _make_shoot())
        doc, note = record_document(DocumentRegistry(store), _draft(store))
        assert note.ok
        assert note.message == f"Invoice successfully recorded in ledger as {doc.number}"
        assert store.get_document(doc.id) == doc

    def test_po_label(self, store):
        save_shoot(store, _make_shoot())
        _, note = record_document(DocumentRegistry(store), _draft(store, DocumentType.PO))
        assert note.message.startswith("PO successfully recorded")

    def test_no_draft(self, store):
        doc, note = record_document(DocumentRegistry(store), None)
        assert doc is None
        assert not note.ok

    def test_historical_draft_refused(self, store):
        registry = DocumentRegistry(store)
        doc, _ = record_document(registry, _draft(store))
        view = registry.reconstruct(doc.id)
        again, note = record_document(registry, view)
        assert again is None
        assert not note.ok
        assert len(store.get_documents()) == 1

    def test_persistence_failure(self, store, monkeypatch):
        draft = _draft(store)
        monkeypatch.setattr(store, "append_document", _failing)
        doc, note = record_document(DocumentRegistry(store), draft)
        assert doc is None
        assert note.message == "Error recording document. Please check connection."

    def test_historical_flag_blocks_copy(self, store):
        draft = replace(_draft(store), is_historical=True)
        doc, note = record_document(DocumentRegistry(store), draft)
        assert doc is None
        assert "historical" in note.message
