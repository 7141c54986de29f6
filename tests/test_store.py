"""Tests for the JSON document store."""

import json
import pytest
from datetime import date
from decimal import Decimal

from prodflow.constants import INITIAL_FIRMS, KS_TRADING, PAGE_TO_FIRM_MAP
from prodflow.models import (
    BankDetails,
    BillingCategory,
    CrewCharges,
    CrewMember,
    Document,
    DocumentType,
    ExpenseLine,
    InvoiceItem,
    LocationType,
    PaymentStatus,
    PersistenceFailure,
    Shoot,
    ShootType,
    TalentCharges,
    TalentMember,
)
from prodflow.store import JsonStore


def _make_shoot() -> Shoot:
    return Shoot(
        id="s1",
        title="Monsoon Lookbook",
        date=date(2026, 7, 2),
        shoot_type=ShootType.OUTDOOR_REELS,
        location_type=LocationType.OUTDOOR,
        page="G3Mens",
        talent_ids=["t1"],
        budget=Decimal("25000"),
        expenses=[
            ExpenseLine(
                id="e1", description="MODEL: Asha", category="Talent", date=date(2026, 7, 2),
                estimated_amount=Decimal("2500.50"), payment_status=PaymentStatus.ADVANCE,
                paid_amount=Decimal("1000"), attachments=["advance.jpg"], linked_id="t1",
            ),
            ExpenseLine(id="m1", description="Tea", category="Tea-Coffee",
                        estimated_amount=Decimal("120")),
        ],
    )


def _make_document(doc_id="d1") -> Document:
    return Document(
        id=doc_id,
        number="PO-07/0001/SRV",
        date=date(2026, 7, 3),
        shoot_id="s1",
        firm_id=KS_TRADING,
        recipient_id="t1",
        recipient_name="Asha",
        billing_category=BillingCategory.SERVICE,
        items=(InvoiceItem("Outdoor Reels", Decimal("1"), Decimal("2500.50"), Decimal("2500.50")),),
        total=Decimal("2250.45"),
        document_type=DocumentType.PO,
    )


@pytest.fixture
def store(tmp_path):
    return JsonStore(tmp_path / "store.json")


class TestSeeding:
    def test_missing_file_is_seeded(self, store):
        assert [f.id for f in store.get_firms()] == [f.id for f in INITIAL_FIRMS]
        assert store.get_page_firm_map() == PAGE_TO_FIRM_MAP
        assert store.get_shoots() == []
        assert store.get_documents() == []

    def test_unseeded_store_is_empty(self, tmp_path):
        store = JsonStore(tmp_path / "empty.json", seed=False)
        assert store.get_firms() == []
        assert store.get_page_firm_map() == {}

    def test_first_write_persists_seed(self, store):
        store.save_shoot(_make_shoot())
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert set(data["firms"]) == {f.id for f in INITIAL_FIRMS}


class TestRoundTrip:
    def test_shoot(self, store):
        shoot = _make_shoot()
        store.save_shoot(shoot)
        assert store.get_shoot("s1") == shoot

    def test_money_written_as_strings(self, store):
        store.save_shoot(_make_shoot())
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data["shoots"]["s1"]["expenses"][0]["estimated_amount"] == "2500.50"
        assert data["shoots"]["s1"]["type"] == "Outdoor Reels"

    def test_talent(self, store):
        member = TalentMember(
            id="t1", name="Asha", billing_name="Asha Agency",
            charges=TalentCharges(live=Decimal("4000"), custom=Decimal("900")),
            travel_charges=Decimal("350"),
            bank_details=BankDetails(bank_name="HDFC", account_number="001", ifsc_code="HDFC0001"),
        )
        store.save_talent(member)
        assert store.get_talent() == [member]

    def test_crew(self, store):
        member = CrewMember(
            id="c1", name="Ravi", role="DOP", rate=Decimal("1500"),
            charges=CrewCharges(outdoor=Decimal("2000")),
        )
        store.save_crew(member)
        assert store.get_crew() == [member]

    def test_document(self, store):
        doc = _make_document()
        store.append_document(doc)
        assert store.get_document("d1") == doc
        assert store.get_documents() == [doc]

    def test_save_shoot_is_upsert(self, store):
        shoot = _make_shoot()
        store.save_shoot(shoot)
        shoot.title = "Monsoon Lookbook II"
        shoot.expenses = shoot.expenses[:1]
        store.save_shoot(shoot)
        assert len(store.get_shoots()) == 1
        assert store.get_shoot("s1").title == "Monsoon Lookbook II"
        assert len(store.get_shoot("s1").expenses) == 1

    def test_page_mapping_update(self, store):
        store.update_page_mapping("G3Kids", "firm_ss_sales")
        assert store.get_page_firm_map()["G3Kids"] == "firm_ss_sales"


class TestDeletion:
    def test_delete_shoot_keeps_documents(self, store):
        store.save_shoot(_make_shoot())
        store.append_document(_make_document())
        store.delete_shoot("s1")
        assert store.get_shoot("s1") is None
        assert store.get_document("d1") is not None

    def test_delete_missing_shoot_is_noop(self, store):
        store.delete_shoot("nope")
        assert store.get_shoots() == []


class TestFailures:
    def test_corrupt_file_raises(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(PersistenceFailure):
            JsonStore(path).get_shoots()

    @pytest.mark.parametrize("field,value", [
        ("total", "abc"),
        ("total", None),
        ("total", "NaN"),
        ("date", "yesterday"),
    ])
    def test_unreadable_document_field_raises(self, store, field, value):
        store.append_document(_make_document())
        data = json.loads(store.path.read_text(encoding="utf-8"))
        data["documents"]["d1"][field] = value
        store.path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(PersistenceFailure):
            store.get_documents()

    def test_unreadable_item_amount_raises(self, store):
        store.append_document(_make_document())
        data = json.loads(store.path.read_text(encoding="utf-8"))
        data["documents"]["d1"]["items"][0]["amount"] = "12,50"
        store.path.write_text(json.dumps(data), encoding="utf-8")
        with pytest.raises(PersistenceFailure, match="amount"):
            store.get_document("d1")

    def test_failed_write_leaves_previous_state(self, tmp_path, monkeypatch):
        store = JsonStore(tmp_path / "store.json")
        store.save_shoot(_make_shoot())
        before = store.path.read_text(encoding="utf-8")

        def boom(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr("prodflow.store.os.replace", boom)
        with pytest.raises(PersistenceFailure, match="disk full"):
            store.append_document(_make_document())
        assert store.path.read_text(encoding="utf-8") == before
        assert list(tmp_path.glob("*.tmp")) == []
