"""Tests for canonical data models."""

import pytest
from decimal import Decimal

from prodflow.models import (
    CrewCharges,
    CrewMember,
    ExpenseLine,
    ExtraItem,
    LedgerValidationError,
    LocationType,
    Recipient,
    RecipientKind,
    ShootType,
    TalentCharges,
    TalentMember,
)


class TestTalentCharges:
    def test_defaults_are_zero(self):
        charges = TalentCharges()
        assert charges.live == Decimal("0")
        assert charges.custom == Decimal("0")

    def test_negative_rate_raises(self):
        with pytest.raises(ValueError, match="must not be negative"):
            TalentCharges(live=Decimal("-1"))


class TestCrewMember:
    def test_negative_base_rate_raises(self):
        with pytest.raises(ValueError, match="must not be negative"):
            CrewMember(id="c1", name="Ravi", role="Helper", rate=Decimal("-5"))

    def test_negative_secondary_rate_raises(self):
        with pytest.raises(ValueError, match="must not be negative"):
            CrewCharges(outdoor=Decimal("-10"))


class TestExpenseLine:
    def test_manual_when_unlinked(self):
        line = ExpenseLine(id="e1", description="Lunch", category="Food")
        assert line.is_manual

    def test_linked_line_is_not_manual(self):
        line = ExpenseLine(id="e2", description="MODEL: Asha", category="Talent", linked_id="t1")
        assert not line.is_manual


class TestExtraItem:
    def test_amount(self):
        item = ExtraItem(description="Props", qty=Decimal("3"), rate=Decimal("250"))
        assert item.amount == Decimal("750")


class TestRecipient:
    def test_talent_display_name_with_billing_alias(self):
        member = TalentMember(id="t1", name="Riya", billing_name="Meena Shah")
        recipient = Recipient.talent(member)
        assert recipient.kind is RecipientKind.TALENT
        assert recipient.display_name == "Riya (C/O Meena Shah)"
        assert recipient.name == "Riya"

    def test_crew_display_name(self):
        recipient = Recipient.crew(CrewMember(id="c1", name="Ravi", role="DOP"))
        assert recipient.display_name == "Ravi"

    def test_rate_for_dispatches_on_kind(self):
        talent = Recipient.talent(TalentMember(
            id="t1", name="Riya", charges=TalentCharges(live=Decimal("4000")),
        ))
        crew = Recipient.crew(CrewMember(
            id="c1", name="Ravi", role="DOP", rate=Decimal("1500"),
            charges=CrewCharges(live=Decimal("2500")),
        ))
        assert talent.rate_for(ShootType.LIVE, LocationType.STUDIO) == Decimal("4000")
        assert crew.rate_for(ShootType.LIVE, LocationType.STUDIO) == Decimal("2500")

    def test_travel_allowance(self):
        recipient = Recipient.talent(TalentMember(id="t1", name="Riya", travel_charges=Decimal("300")))
        assert recipient.travel_allowance == Decimal("300")


class TestLedgerValidationError:
    def test_error_message(self):
        e = LedgerValidationError(["err1", "err2"])
        assert "2 error(s)" in str(e)
        assert "err1" in str(e)
        assert "err2" in str(e)
        assert e.errors == ["err1", "err2"]
