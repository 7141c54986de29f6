"""Ledger audit.

Generates full traceability JSON output for a shoot's expense ledger.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path

from prodflow.engine.synchronizer import linked_member_id
from prodflow.engine.validator import ledger_totals
from prodflow.models import TRAVEL_CATEGORY, Shoot


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal values."""
    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        return super().default(obj)


def generate_ledger_audit_dict(shoot: Shoot) -> dict:
    """Build audit dictionary from a shoot ledger (no file I/O)."""
    lines = []
    for line in shoot.expenses:
        lines.append({
            "id": line.id,
            "description": line.description,
            "category": line.category,
            "date": line.date.isoformat() if line.date else None,
            "linked_id": line.linked_id,
            "member_id": linked_member_id(line.linked_id) if line.linked_id else None,
            "kind": "manual" if line.is_manual else (
                "travel" if line.category == TRAVEL_CATEGORY else "roster"
            ),
            "estimated": float(line.estimated_amount),
            "actual": float(line.actual_amount),
            "paid": float(line.paid_amount),
            "outstanding": float(line.actual_amount - line.paid_amount),
            "payment_status": line.payment_status.value,
            "attachments": len(line.attachments),
        })

    linked = [e for e in shoot.expenses if not e.is_manual]
    manual = [e for e in shoot.expenses if e.is_manual]
    totals = ledger_totals(shoot.expenses)

    by_category: dict[str, float] = {}
    for line in shoot.expenses:
        by_category[line.category] = by_category.get(line.category, 0.0) + float(line.estimated_amount)

    return {
        "shoot_id": shoot.id,
        "title": shoot.title,
        "date": shoot.date.isoformat() if shoot.date else None,
        "type": shoot.shoot_type.value,
        "location_type": shoot.location_type.value,
        "status": shoot.status.value,
        "roster": {
            "talent_ids": list(shoot.talent_ids),
            "crew_ids": list(shoot.crew_ids),
        },
        "lines": lines,
        "estimated_by_category": by_category,
        "summary": {
            "total_lines": len(shoot.expenses),
            "linked_lines": len(linked),
            "manual_lines": len(manual),
            "estimated_total": float(totals["estimated"]),
            "actual_total": float(totals["actual"]),
            "paid_total": float(totals["paid"]),
            "budget": float(shoot.budget),
            "budget_variance": float(shoot.budget - totals["estimated"]),
        },
    }


def generate_ledger_audit(shoot: Shoot, output_path: str | Path) -> Path:
    """Generate audit JSON file for a shoot ledger."""
    output_path = Path(output_path)
    audit = generate_ledger_audit_dict(shoot)
    output_path.write_text(json.dumps(audit, indent=2, cls=DecimalEncoder), encoding='utf-8')
    return output_path
