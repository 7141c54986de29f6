"""Financial synchronization of a shoot's ledger with its roster.

Roster-linked lines are regenerated from current rates on every pass.
A non-zero existing estimate is treated as a manual override and kept,
as are payment fields, descriptions and line ids. Lines without a
linked_id always pass through. Linked lines that were not regenerated
pass through only while their member is still assigned to the shoot;
unassigning a member drops its lines.
"""

from __future__ import annotations

import logging
import uuid
from decimal import Decimal
from typing import Callable, Iterable, Optional

from prodflow.constants import PER_TALENT_ROLES
from prodflow.engine.rates import resolve_crew_rate, resolve_talent_rate
from prodflow.models import (
    TALENT_CATEGORY,
    TRAVEL_CATEGORY,
    CrewMember,
    ExpenseLine,
    PaymentStatus,
    Shoot,
    TalentMember,
)

logger = logging.getLogger(__name__)


TRAVEL_SUFFIX = "_travel"


def travel_link(member_id: str) -> str:
    return f"{member_id}{TRAVEL_SUFFIX}"


def linked_member_id(linked_id: str) -> str:
    """Roster member behind a linked_id, with any travel suffix removed."""
    if linked_id.endswith(TRAVEL_SUFFIX):
        return linked_id[: -len(TRAVEL_SUFFIX)]
    return linked_id


def _unique(ids: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for member_id in ids:
        if member_id not in seen:
            seen.add(member_id)
            result.append(member_id)
    return result


def _find(
    expenses: list[ExpenseLine],
    predicate: Callable[[ExpenseLine], bool],
) -> Optional[ExpenseLine]:
    return next((e for e in expenses if predicate(e)), None)


def _build_line(
    existing: Optional[ExpenseLine],
    *,
    shoot: Shoot,
    linked_id: str,
    category: str,
    description: str,
    fresh_amount: Decimal,
) -> ExpenseLine:
    if existing is None:
        return ExpenseLine(
            id=str(uuid.uuid4()),
            description=description,
            category=category,
            date=shoot.date,
            estimated_amount=fresh_amount,
            linked_id=linked_id,
        )

    estimate = existing.estimated_amount if existing.estimated_amount > 0 else fresh_amount
    return ExpenseLine(
        id=existing.id,
        description=existing.description or description,
        category=category,
        date=shoot.date,
        estimated_amount=estimate,
        actual_amount=existing.actual_amount,
        payment_status=existing.payment_status or PaymentStatus.PENDING,
        paid_amount=existing.paid_amount,
        remark=existing.remark,
        attachments=list(existing.attachments),
        linked_id=linked_id,
    )


def _travel_line(shoot: Shoot, member_id: str, name: str, allowance: Decimal) -> ExpenseLine:
    link = travel_link(member_id)
    existing = _find(shoot.expenses, lambda e: e.linked_id == link)
    return _build_line(
        existing,
        shoot=shoot,
        linked_id=link,
        category=TRAVEL_CATEGORY,
        description=f"Travel: {name}",
        fresh_amount=allowance,
    )


def synchronize(
    shoot: Shoot,
    talent: Iterable[TalentMember],
    crew: Iterable[CrewMember],
) -> list[ExpenseLine]:
    """Return the shoot's new ledger for its current roster.

    Order: talent lines, crew lines, then preserved manual/orphaned lines.
    The shoot itself is not modified.
    """
    talent_by_id = {m.id: m for m in talent}
    crew_by_id = {m.id: m for m in crew}
    talent_ids = _unique(shoot.talent_ids)
    crew_ids = _unique(shoot.crew_ids)
    talent_count = len(talent_ids)

    generated: list[ExpenseLine] = []

    for member_id in talent_ids:
        member = talent_by_id.get(member_id)
        if member is None:
            logger.warning("Shoot %s: talent %s not found in roster, skipped", shoot.id, member_id)
            continue

        existing = _find(
            shoot.expenses,
            lambda e: e.linked_id == member.id and e.category == TALENT_CATEGORY,
        )
        generated.append(_build_line(
            existing,
            shoot=shoot,
            linked_id=member.id,
            category=TALENT_CATEGORY,
            description=f"MODEL: {member.name}",
            fresh_amount=resolve_talent_rate(member, shoot.shoot_type),
        ))

        if member.travel_charges > 0:
            generated.append(_travel_line(shoot, member.id, member.name, member.travel_charges))

    for member_id in crew_ids:
        member = crew_by_id.get(member_id)
        if member is None:
            logger.warning("Shoot %s: crew %s not found in roster, skipped", shoot.id, member_id)
            continue

        per_talent = member.role in PER_TALENT_ROLES
        multiplier = max(1, talent_count) if per_talent else 1
        rate = resolve_crew_rate(member, shoot.shoot_type, shoot.location_type)

        description = f"{member.role.upper()}: {member.name}"
        if per_talent:
            description += f" ({talent_count} Models)"

        existing = _find(
            shoot.expenses,
            lambda e: e.linked_id == member.id and e.category != TRAVEL_CATEGORY,
        )
        generated.append(_build_line(
            existing,
            shoot=shoot,
            linked_id=member.id,
            category=member.role,
            description=description,
            fresh_amount=rate * multiplier,
        ))

        if member.travel_charges > 0:
            generated.append(_travel_line(shoot, member.id, member.name, member.travel_charges))

    generated_links = {line.linked_id for line in generated}
    assigned = set(talent_ids) | set(crew_ids)
    preserved = [
        e for e in shoot.expenses
        if e.is_manual
        or (e.linked_id not in generated_links and linked_member_id(e.linked_id) in assigned)
    ]

    logger.debug(
        "Shoot %s synchronized: %d generated, %d preserved",
        shoot.id, len(generated), len(preserved),
    )
    return generated + preserved
