"""Streamlit billing desk.

Calls the same core engine as the CLI. No business logic here.
"""

from __future__ import annotations

import tempfile
from decimal import Decimal
from pathlib import Path

import streamlit as st

from prodflow import config
from prodflow.actions import record_document
from prodflow.engine import compose_draft, resolve_firm_for_shoot
from prodflow.excel import generate_document_xlsx
from prodflow.models import (
    BillingCategory,
    DocumentType,
    DraftDocument,
    ExtraItem,
    PersistenceFailure,
)
from prodflow.registry import DocumentRegistry
from prodflow.store import JsonStore


def _show_draft(draft: DraftDocument, key: str) -> None:
    recipient = draft.recipient.display_name if draft.recipient else draft.recipient_name
    st.subheader(f"{draft.document_type.value} {draft.number}")
    st.write(f"Issued by **{draft.firm.name if draft.firm else '-'}** on {draft.issue_date}")
    st.write(f"Billed to **{recipient}** ({draft.billing_category.value})")

    rows = [{"Description": draft.base_description, "Qty": 1.0,
             "Rate": float(draft.base_amount), "Amount": float(draft.base_amount)}]
    rows.extend(
        {"Description": i.description, "Qty": float(i.qty),
         "Rate": float(i.rate), "Amount": float(i.amount)}
        for i in draft.extra_items
    )
    st.table(rows)

    st.write(f"Subtotal: {draft.subtotal:,.2f}")
    if draft.tax_amount != 0:
        st.write(f"Less: Taxes / Deductions ({draft.tax_rate:.1f}%): {draft.tax_amount:,.2f}")
    st.success(f"Net Payable: {draft.net_total:,.2f}")

    with tempfile.TemporaryDirectory() as tmpdir:
        out_path = Path(tmpdir) / "document.xlsx"
        generate_document_xlsx(draft, out_path)
        st.download_button(
            "Download Excel Copy",
            data=out_path.read_bytes(),
            file_name=f"{draft.number.replace('/', '-')}.xlsx",
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            key=f"download-{key}",
        )


def main() -> None:
    st.set_page_config(page_title="ProdFlow Billing", layout="wide")
    st.title("Billing & Commercials")
    st.markdown("Document generation and automatic rate calculation.")

    store = JsonStore(config.store_path())
    registry = DocumentRegistry(store)

    try:
        shoots = store.get_shoots()
        talent = store.get_talent()
        crew = store.get_crew()
        firms = store.get_firms()
        page_firm_map = store.get_page_firm_map()
        issued = registry.documents()
    except PersistenceFailure as e:
        st.error(f"Store unavailable: {e}")
        return

    generator_tab, registry_tab = st.tabs(["Generator", "Registry"])

    with generator_tab:
        if not shoots:
            st.info("No productions yet.")
        else:
            col1, col2 = st.columns(2)
            with col1:
                shoot = st.selectbox("Production", shoots, format_func=lambda s: f"{s.title} ({s.id})")
                assigned = [m for m in talent if m.id in shoot.talent_ids]
                assigned_crew = [m for m in crew if m.id in shoot.crew_ids]
                options = {f"Model: {m.name}": m.id for m in assigned}
                options.update({f"Crew: {m.name}": m.id for m in assigned_crew})
                recipient_label = st.selectbox("Beneficiary", list(options) or ["-"])
                recipient_id = options.get(recipient_label)

            with col2:
                document_type = DocumentType(st.radio("Document", ["PO", "INVOICE"], horizontal=True))
                category = BillingCategory(st.radio("Category", ["Service", "Travel"], horizontal=True))
                tax_rate = st.number_input(
                    "Tax / deduction %",
                    value=0.0 if category == BillingCategory.TRAVEL else float(config.DEFAULT_TAX_RATE),
                    disabled=category == BillingCategory.TRAVEL,
                )

            st.markdown("**Extra items**")
            extra_rows = st.data_editor(
                [{"description": "", "qty": 1.0, "rate": 0.0}],
                num_rows="dynamic",
                key="extras",
            )
            extras = [
                ExtraItem(
                    description=str(row.get("description") or ""),
                    qty=Decimal(str(row.get("qty") or 0)),
                    rate=Decimal(str(row.get("rate") or 0)),
                )
                for row in extra_rows
            ]

            firm = resolve_firm_for_shoot(shoot, firms, page_firm_map)
            draft = compose_draft(
                shoot, recipient_id, firm, category, document_type, Decimal(str(tax_rate)), extras,
                talent=talent, crew=crew, issued=issued,
            )
            if draft is None:
                st.warning("Select a production and beneficiary to build a draft.")
            else:
                _show_draft(draft, key="draft")
                if st.button("Record Document", type="primary"):
                    _, note = record_document(registry, draft)
                    if note.ok:
                        st.success(note.message)
                    else:
                        st.error(note.message)

    with registry_tab:
        search = st.text_input("Search by number or recipient")
        for doc in registry.search(search):
            with st.expander(f"{doc.number} | {doc.recipient_name} | {doc.date.isoformat()}"):
                historical = registry.reconstruct(doc.id)
                if historical is not None:
                    _show_draft(historical, key=doc.id)


if __name__ == "__main__":
    main()
