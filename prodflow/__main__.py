"""CLI entry point.

Usage:
    python -m prodflow --store prodflow.json sync SHOOT_ID
    python -m prodflow draft SHOOT_ID RECIPIENT_ID \
        --category Service --type PO --tax-rate 10 \
        --extra "Styling kit:1:500" --record --xlsx PO.xlsx
    python -m prodflow history --search INV
    python -m prodflow show DOCUMENT_ID --xlsx Copy.xlsx
    python -m prodflow audit SHOOT_ID --out Audit.json
    python -m prodflow talent add talent.json
    python -m prodflow crew add crew.json
    python -m prodflow firm map G3Kids firm_ss_sales
    python -m prodflow shoot add shoot.json
"""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Callable, List, Optional

import typer

from prodflow import config, records
from prodflow.logging_config import configure_logging
from prodflow.models import BillingCategory, DocumentType, DraftDocument, ExtraItem, PersistenceFailure
from prodflow.store import JsonStore

app = typer.Typer(help="Shoot ledgers, invoices and purchase orders.")

_state: dict = {}


def _store() -> JsonStore:
    return _state["store"]


@app.callback()
def main(
    store: str = typer.Option(None, "--store", help="Path to the JSON store (default: $PRODFLOW_STORE)"),
    log_level: str = typer.Option(config.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    configure_logging(log_level)
    _state["store"] = JsonStore(store or config.store_path())


def _parse_extra(raw: str) -> ExtraItem:
    """Parse DESCRIPTION:QTY:RATE."""
    try:
        description, qty, rate = raw.rsplit(":", 2)
        return ExtraItem(description=description, qty=Decimal(qty), rate=Decimal(rate))
    except (ValueError, InvalidOperation):
        raise typer.BadParameter(f"Extra item must be DESCRIPTION:QTY:RATE, got {raw!r}")


def _echo_draft(draft: DraftDocument) -> None:
    kind = "HISTORICAL" if draft.is_historical else "DRAFT"
    recipient = draft.recipient.display_name if draft.recipient else draft.recipient_name
    typer.echo(f"{kind} {draft.document_type.value} {draft.number} ({draft.issue_date})")
    typer.echo(f"  Firm:      {draft.firm.name if draft.firm else '-'}")
    typer.echo(f"  Recipient: {recipient}")
    typer.echo(f"  Category:  {draft.billing_category.value}")
    typer.echo(f"  {draft.base_description}: {draft.base_amount}")
    for item in draft.extra_items:
        typer.echo(f"  {item.description}: {item.qty} x {item.rate} = {item.amount}")
    typer.echo(f"  Subtotal:  {draft.subtotal}")
    typer.echo(f"  Tax ({draft.tax_rate}%): {draft.tax_amount}")
    typer.echo(f"  NET TOTAL: {draft.net_total}")


@app.command()
def sync(shoot_id: str = typer.Argument(..., help="Shoot to synchronize")) -> None:
    """Regenerate a shoot's ledger from its roster and save it."""
    from prodflow.actions import save_shoot

    store = _store()
    shoot = store.get_shoot(shoot_id)
    if shoot is None:
        typer.echo(f"ERROR: Shoot not found: {shoot_id}", err=True)
        raise typer.Exit(1)

    updated, note = save_shoot(store, shoot)
    if not note.ok:
        typer.echo(f"ERROR: {note.message}", err=True)
        raise typer.Exit(1)

    typer.echo(note.message)
    for line in updated.expenses:
        link = line.linked_id or "manual"
        typer.echo(f"  [{line.category}] {line.description}: {line.estimated_amount} ({link})")


@app.command()
def draft(
    shoot_id: str = typer.Argument(..., help="Shoot being billed"),
    recipient_id: str = typer.Argument(..., help="Talent or crew id"),
    category: BillingCategory = typer.Option(BillingCategory.SERVICE, "--category", help="Billing category"),
    doc_type: DocumentType = typer.Option(DocumentType.PO, "--type", help="Document type"),
    tax_rate: str = typer.Option(str(config.DEFAULT_TAX_RATE), "--tax-rate", help="Tax deduction percent"),
    extra: Optional[List[str]] = typer.Option(None, "--extra", help="Extra item DESCRIPTION:QTY:RATE"),
    firm_id: str = typer.Option(None, "--firm", help="Issue from this firm instead of the page mapping"),
    record: bool = typer.Option(False, "--record", help="Record the document in the registry"),
    xlsx: str = typer.Option(None, "--xlsx", help="Write a printable Excel copy"),
) -> None:
    """Compose an invoice or PO for one shoot recipient."""
    from prodflow.actions import record_document
    from prodflow.engine import compose_draft, resolve_firm_for_shoot
    from prodflow.excel import generate_document_xlsx
    from prodflow.registry import DocumentRegistry

    store = _store()
    registry = DocumentRegistry(store)
    extras = [_parse_extra(raw) for raw in extra or []]
    try:
        rate = Decimal(tax_rate)
    except InvalidOperation:
        raise typer.BadParameter(f"Invalid tax rate: {tax_rate}")

    shoot = store.get_shoot(shoot_id)
    firms = store.get_firms()
    if firm_id:
        firm = next((f for f in firms if f.id == firm_id), None)
    elif shoot is not None:
        firm = resolve_firm_for_shoot(shoot, firms, store.get_page_firm_map())
    else:
        firm = None

    result = compose_draft(
        shoot, recipient_id, firm, category, doc_type, rate, extras,
        talent=store.get_talent(),
        crew=store.get_crew(),
        issued=registry.documents(),
    )
    if result is None:
        typer.echo("ERROR: No draft produced (shoot, recipient or firm not found)", err=True)
        raise typer.Exit(1)

    _echo_draft(result)

    if xlsx:
        generate_document_xlsx(result, xlsx)
        typer.echo(f"  Excel copy saved to: {xlsx}")

    if record:
        doc, note = record_document(registry, result)
        if doc is None:
            typer.echo(f"ERROR: {note.message}", err=True)
            raise typer.Exit(1)
        typer.echo(note.message)
        typer.echo(f"  Document id: {doc.id}")


@app.command()
def history(search: str = typer.Option("", "--search", help="Filter by number or recipient")) -> None:
    """List issued documents, newest first."""
    from prodflow.registry import DocumentRegistry

    docs = DocumentRegistry(_store()).search(search)
    if not docs:
        typer.echo("No documents found.")
        return
    for doc in docs:
        typer.echo(
            f"{doc.date.isoformat()}  {doc.number:<18} {doc.recipient_name:<24} "
            f"{doc.total:>12}  {doc.id}"
        )


@app.command()
def show(
    document_id: str = typer.Argument(..., help="Issued document id"),
    xlsx: str = typer.Option(None, "--xlsx", help="Write a printable Excel copy"),
) -> None:
    """Show an issued document exactly as it was recorded."""
    from prodflow.excel import generate_document_xlsx
    from prodflow.registry import DocumentRegistry

    result = DocumentRegistry(_store()).reconstruct(document_id)
    if result is None:
        typer.echo(f"ERROR: Document not found: {document_id}", err=True)
        raise typer.Exit(1)

    _echo_draft(result)
    if xlsx:
        generate_document_xlsx(result, xlsx)
        typer.echo(f"  Excel copy saved to: {xlsx}")


@app.command()
def audit(
    shoot_id: str = typer.Argument(..., help="Shoot to audit"),
    out: str = typer.Option("Audit.json", "--out", help="Output audit JSON file path"),
) -> None:
    """Write a JSON audit of a shoot's ledger."""
    from prodflow.audit import generate_ledger_audit

    shoot = _store().get_shoot(shoot_id)
    if shoot is None:
        typer.echo(f"ERROR: Shoot not found: {shoot_id}", err=True)
        raise typer.Exit(1)
    path = generate_ledger_audit(shoot, out)
    typer.echo(f"Audit file saved to: {path}")


# --- Roster, firm and shoot management ---

talent_app = typer.Typer(help="Manage the talent roster.")
crew_app = typer.Typer(help="Manage the crew roster.")
firm_app = typer.Typer(help="Manage billing firms and the page mapping.")
shoot_app = typer.Typer(help="Create and delete shoots.")
app.add_typer(talent_app, name="talent")
app.add_typer(crew_app, name="crew")
app.add_typer(firm_app, name="firm")
app.add_typer(shoot_app, name="shoot")


def _read_json_records(path: Path) -> list[dict]:
    """Read one JSON object or a list of objects from a file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"ERROR: Cannot read {path}: {e}", err=True)
        raise typer.Exit(1)
    items = data if isinstance(data, list) else [data]
    if not all(isinstance(item, dict) for item in items):
        typer.echo(f"ERROR: {path} must hold a JSON object or a list of objects", err=True)
        raise typer.Exit(1)
    return items


def _import_records(path: Path, decode: Callable[[dict], Any], save: Callable[[Any], None], label: str) -> None:
    try:
        members = [decode(item) for item in _read_json_records(path)]
    except (KeyError, TypeError, ValueError) as e:
        typer.echo(f"ERROR: Invalid {label} record in {path}: {e}", err=True)
        raise typer.Exit(1)
    try:
        for member in members:
            save(member)
    except PersistenceFailure as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)
    for member in members:
        typer.echo(f"Saved {label} {member.id}: {member.name}")


@talent_app.command("add")
def talent_add(path: Path = typer.Argument(..., help="JSON file with one or more talent records")) -> None:
    """Add or update talent members."""
    _import_records(path, records.talent_from_dict, _store().save_talent, "talent")


@talent_app.command("list")
def talent_list() -> None:
    for member in _store().get_talent():
        typer.echo(f"{member.id:<16} {member.name:<24} travel {member.travel_charges}")


@crew_app.command("add")
def crew_add(path: Path = typer.Argument(..., help="JSON file with one or more crew records")) -> None:
    """Add or update crew members."""
    _import_records(path, records.crew_from_dict, _store().save_crew, "crew")


@crew_app.command("list")
def crew_list() -> None:
    for member in _store().get_crew():
        typer.echo(f"{member.id:<16} {member.name:<24} {member.role:<18} {member.rate}")


@firm_app.command("add")
def firm_add(path: Path = typer.Argument(..., help="JSON file with one or more firm records")) -> None:
    """Add or update billing firms."""
    _import_records(path, records.firm_from_dict, _store().save_firm, "firm")


@firm_app.command("list")
def firm_list() -> None:
    """List firms and the brand pages mapped to each."""
    store = _store()
    page_map = store.get_page_firm_map()
    for firm in store.get_firms():
        pages = ", ".join(sorted(p for p, f in page_map.items() if f == firm.id)) or "-"
        typer.echo(f"{firm.id:<18} {firm.name:<20} pages: {pages}")


@firm_app.command("map")
def firm_map(
    page: str = typer.Argument(..., help="Brand page"),
    firm_id: str = typer.Argument(..., help="Firm that bills for the page"),
) -> None:
    """Point a brand page at a billing firm."""
    store = _store()
    if not any(f.id == firm_id for f in store.get_firms()):
        typer.echo(f"ERROR: Firm not found: {firm_id}", err=True)
        raise typer.Exit(1)
    try:
        store.update_page_mapping(page, firm_id)
    except PersistenceFailure as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Page {page} now billed by {firm_id}")


@shoot_app.command("add")
def shoot_add(path: Path = typer.Argument(..., help="JSON file with one or more shoot records")) -> None:
    """Create or replace shoots; each ledger is synchronized before saving."""
    from prodflow.actions import save_shoot

    try:
        shoots = [records.shoot_from_dict(item) for item in _read_json_records(path)]
    except (KeyError, TypeError, ValueError) as e:
        typer.echo(f"ERROR: Invalid shoot record in {path}: {e}", err=True)
        raise typer.Exit(1)

    store = _store()
    for shoot in shoots:
        saved, note = save_shoot(store, shoot)
        if not note.ok:
            typer.echo(f"ERROR: {shoot.id}: {note.message}", err=True)
            raise typer.Exit(1)
        typer.echo(f"{note.message}: {saved.id} ({len(saved.expenses)} ledger lines)")


@shoot_app.command("delete")
def shoot_delete(shoot_id: str = typer.Argument(..., help="Shoot to delete")) -> None:
    """Delete a shoot and its ledger. Issued documents are kept."""
    from prodflow.actions import delete_shoot

    note = delete_shoot(_store(), shoot_id)
    if not note.ok:
        typer.echo(f"ERROR: {note.message}", err=True)
        raise typer.Exit(1)
    typer.echo(note.message)


if __name__ == "__main__":
    app()
