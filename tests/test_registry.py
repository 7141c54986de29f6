"""Tests for recording and reconstructing issued documents."""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from prodflow.constants import INITIAL_FIRMS
from prodflow.engine.composer import compose_draft
from prodflow.models import (
    BillingCategory,
    CrewMember,
    Document,
    DocumentType,
    ExtraItem,
    HistoricalDocumentError,
    InvoiceItem,
    Shoot,
    ShootType,
    TalentCharges,
    TalentMember,
)
from prodflow.registry import DocumentRegistry, document_from_draft, reconstruct
from prodflow.store import JsonStore


def _make_talent(studio="2000") -> TalentMember:
    return TalentMember(id="t1", name="Asha", charges=TalentCharges(studio_reels=Decimal(studio)))


def _make_shoot() -> Shoot:
    return Shoot(id="s1", title="Festive Reels", date=date(2026, 3, 14),
                 shoot_type=ShootType.STUDIO_REELS, talent_ids=["t1"], crew_ids=["c1"])


def _make_draft(registry=None, recipient_id="t1", category=BillingCategory.SERVICE,
                tax_rate="10", extras=(), talent=None):
    issued = registry.documents() if registry else []
    return compose_draft(
        _make_shoot(), recipient_id, INITIAL_FIRMS[0], category, DocumentType.INVOICE,
        Decimal(tax_rate), extras,
        talent=talent or [_make_talent()],
        crew=[CrewMember(id="c1", name="Ravi", role="DOP", rate=Decimal("1200"))],
        issued=issued,
        issued_on=date(2026, 3, 20),
    )


@pytest.fixture
def registry(tmp_path):
    store = JsonStore(tmp_path / "store.json")
    store.save_talent(_make_talent())
    store.save_shoot(_make_shoot())
    return DocumentRegistry(store)


class TestDocumentFromDraft:
    def test_items_and_total(self):
        extras = [ExtraItem(description="Styling kit", qty=Decimal("2"), rate=Decimal("250"))]
        doc = document_from_draft(_make_draft(extras=extras), issued_on=date(2026, 3, 20))
        assert len(doc.items) == 2
        assert doc.items[0].description == "Studio Reels"
        assert doc.items[0].quantity == Decimal("1")
        assert doc.items[0].amount == Decimal("2000")
        assert doc.items[1].amount == Decimal("500")
        assert doc.total == Decimal("2250.00")
        assert doc.firm_id == INITIAL_FIRMS[0].id
        assert doc.recipient_name == "Asha"

    def test_historical_draft_rejected(self):
        historical = replace(_make_draft(), is_historical=True)
        with pytest.raises(HistoricalDocumentError):
            document_from_draft(historical)


class TestReconstruction:
    def test_stored_values_win_over_current_rates(self):
        doc = document_from_draft(_make_draft(), issued_on=date(2026, 3, 20))
        repriced = [_make_talent(studio="9999")]
        view = reconstruct(doc, INITIAL_FIRMS, [_make_shoot()], repriced, [])
        assert view.is_historical
        assert view.base_amount == Decimal("2000")
        assert view.subtotal == Decimal("2000")
        assert view.tax_amount == Decimal("200.00")
        assert view.tax_rate == Decimal("10")
        assert view.net_total == doc.total
        assert view.number == doc.number
        assert view.issue_date == "20-03-2026"

    def test_fee_and_extra_back_compute_ten_percent(self):
        doc = Document(
            id="d1", number="INV-03/0001/SRV", date=date(2026, 3, 20), shoot_id="s1",
            firm_id=INITIAL_FIRMS[0].id, recipient_id="t1", recipient_name="Asha",
            billing_category=BillingCategory.SERVICE,
            items=(
                InvoiceItem("Fee", Decimal("1"), Decimal("1000"), Decimal("1000")),
                InvoiceItem("Extra", Decimal("2"), Decimal("50"), Decimal("100")),
            ),
            total=Decimal("990"),
            document_type=DocumentType.INVOICE,
        )
        view = reconstruct(doc, INITIAL_FIRMS, [], [], [])
        assert view.subtotal == Decimal("1100")
        assert view.tax_amount == Decimal("110")
        assert view.tax_rate == Decimal("10.0")
        assert view.base_amount == Decimal("1000")
        assert view.net_total == Decimal("990")

    def test_non_round_amount_keeps_exact_rate(self):
        talent = [_make_talent(studio="333.33")]
        draft = _make_draft(talent=talent)
        view = reconstruct(document_from_draft(draft), INITIAL_FIRMS, [], talent, [])
        assert view.tax_rate == draft.tax_rate
        assert view.tax_amount == draft.tax_amount
        assert view.net_total == draft.net_total

    def test_extras_restored(self):
        extras = [ExtraItem(description="Overtime", qty=Decimal("3"), rate=Decimal("100"))]
        doc = document_from_draft(_make_draft(extras=extras, tax_rate="0"))
        view = reconstruct(doc, INITIAL_FIRMS, [], [_make_talent()], [])
        assert [(e.description, e.qty, e.rate) for e in view.extra_items] == [
            ("Overtime", Decimal("3"), Decimal("100")),
        ]
        assert view.tax_rate == Decimal("0")

    def test_travel_rate_is_zero(self):
        shoot = _make_shoot()
        draft = compose_draft(
            shoot, "t1", INITIAL_FIRMS[0], BillingCategory.TRAVEL, DocumentType.PO, Decimal("10"),
            talent=[_make_talent()], crew=[], issued=[],
        )
        view = reconstruct(document_from_draft(draft), INITIAL_FIRMS, [shoot], [_make_talent()], [])
        assert view.tax_rate == Decimal("0")
        assert view.billing_category == BillingCategory.TRAVEL

    def test_deleted_recipient_uses_frozen_name(self):
        doc = document_from_draft(_make_draft())
        view = reconstruct(doc, INITIAL_FIRMS, [], [], [])
        assert view.recipient is None
        assert view.recipient_name == "Asha"
        assert view.shoot is None

    def test_unknown_firm_falls_back_to_first(self):
        doc = replace(document_from_draft(_make_draft()), firm_id="firm_gone")
        view = reconstruct(doc, INITIAL_FIRMS, [], [], [])
        assert view.firm.id == INITIAL_FIRMS[0].id

    def test_renamed_recipient_shows_live_name(self):
        doc = document_from_draft(_make_draft())
        renamed = [replace(_make_talent(), name="Asha K")]
        view = reconstruct(doc, INITIAL_FIRMS, [], renamed, [])
        assert view.recipient_name == "Asha K"


class TestDocumentRegistry:
    def test_record_and_reconstruct(self, registry):
        doc = registry.record(_make_draft(registry))
        assert registry.documents() == [doc]
        view = registry.reconstruct(doc.id)
        assert view.net_total == doc.total
        assert view.shoot.id == "s1"

    def test_recorded_date_is_compose_date(self, registry):
        draft = compose_draft(
            _make_shoot(), "t1", INITIAL_FIRMS[0], BillingCategory.SERVICE, DocumentType.INVOICE,
            Decimal("10"), talent=[_make_talent()], crew=[], issued=[],
            issued_on=date(2026, 3, 31),
        )
        doc = registry.record(draft)
        assert doc.number == "INV-03/0001/SRV"
        assert doc.date == date(2026, 3, 31)
        assert registry.reconstruct(doc.id).issue_date == "31-03-2026"

    def test_sequence_advances(self, registry):
        first = registry.record(_make_draft(registry))
        second = registry.record(_make_draft(registry))
        assert first.number == "INV-03/0001/SRV"
        assert second.number == "INV-03/0002/SRV"
        assert registry.next_sequence(INITIAL_FIRMS[0].id) == 3
        assert registry.next_sequence(INITIAL_FIRMS[1].id) == 1

    def test_recording_historical_view_raises(self, registry):
        doc = registry.record(_make_draft(registry))
        view = registry.reconstruct(doc.id)
        with pytest.raises(HistoricalDocumentError):
            registry.record(view)
        assert len(registry.documents()) == 1

    def test_reconstruct_unknown(self, registry):
        assert registry.reconstruct("missing") is None

    def test_search(self, registry):
        crew_doc = registry.record(_make_draft(registry, recipient_id="c1"))
        talent_doc = registry.record(_make_draft(registry))
        assert [d.id for d in registry.search("ravi")] == [crew_doc.id]
        assert [d.id for d in registry.search("0002")] == [talent_doc.id]
        assert len(registry.search("")) == 2
        assert registry.search("nothing-like-this") == []

    def test_search_newest_first(self, registry):
        older = replace(document_from_draft(_make_draft(registry)), id="old", date=date(2026, 1, 1))
        newer = replace(document_from_draft(_make_draft(registry)), id="new", date=date(2026, 5, 1))
        registry.store.append_document(older)
        registry.store.append_document(newer)
        assert [d.id for d in registry.search()] == ["new", "old"]
