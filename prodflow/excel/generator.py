"""Printable Excel rendering of an invoice or purchase order.

Writes a fresh single-sheet workbook from a computed DraftDocument.
Excel formulas are NOT relied upon. All values are pre-computed in Python.
"""

from __future__ import annotations

from pathlib import Path

import openpyxl
from openpyxl.styles import Alignment, Border, Font, Side

from prodflow.models import DocumentType, DraftDocument

# Layout constants
TITLE_ROW = 1
FIRM_ROW = 2
META_ROW = 6
RECIPIENT_ROW = 10
ITEMS_HEADER_ROW = 14
ITEMS_START_ROW = 15

LAST_COL = 4

THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin'),
)

HEADER_FONT = Font(name='Calibri', size=11, bold=True)
DATA_FONT = Font(name='Calibri', size=11)
TITLE_FONT = Font(name='Calibri', size=14, bold=True)
CENTER_ALIGN = Alignment(horizontal='center', vertical='center')
WRAP_ALIGN = Alignment(wrap_text=True, vertical='top')
NUMBER_FORMAT = '#,##0.00'

DOCUMENT_TITLES = {
    DocumentType.INVOICE: 'TAX INVOICE',
    DocumentType.PO: 'PURCHASE ORDER',
}


def _label(ws, row: int, col: int, text: str) -> None:
    cell = ws.cell(row=row, column=col)
    cell.value = text
    cell.font = HEADER_FONT


def _amount(ws, row: int, col: int, value, bold: bool = False) -> None:
    cell = ws.cell(row=row, column=col)
    cell.value = float(value)
    cell.number_format = NUMBER_FORMAT
    cell.font = HEADER_FONT if bold else DATA_FONT
    cell.border = THIN_BORDER


def generate_document_xlsx(draft: DraftDocument, output_path: str | Path) -> Path:
    """Render the draft (fresh or historical) to a printable worksheet."""
    output_path = Path(output_path)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = draft.number.replace('/', '-')[:31]

    # --- Title ---
    ws.merge_cells(start_row=TITLE_ROW, start_column=1, end_row=TITLE_ROW, end_column=LAST_COL)
    title = ws.cell(row=TITLE_ROW, column=1)
    title.value = DOCUMENT_TITLES[draft.document_type]
    title.font = TITLE_FONT
    title.alignment = CENTER_ALIGN

    # --- Issuing firm ---
    firm = draft.firm
    if firm is not None:
        _label(ws, FIRM_ROW, 1, firm.name)
        ws.cell(row=FIRM_ROW + 1, column=1).value = firm.address
        ws.cell(row=FIRM_ROW + 1, column=1).alignment = WRAP_ALIGN
        ws.cell(row=FIRM_ROW + 2, column=1).value = f"Phone: {firm.phone}"
        ws.cell(row=FIRM_ROW + 3, column=1).value = f"GSTIN: {firm.gstin or 'NOT PROVIDED'}"

    # --- Document meta ---
    _label(ws, META_ROW, 1, 'Document #')
    ws.cell(row=META_ROW, column=2).value = draft.number
    _label(ws, META_ROW + 1, 1, 'Date')
    ws.cell(row=META_ROW + 1, column=2).value = draft.issue_date
    _label(ws, META_ROW + 2, 1, 'Production')
    ws.cell(row=META_ROW + 2, column=2).value = draft.shoot.title if draft.shoot else draft.shoot_id

    # --- Recipient ---
    recipient = draft.recipient
    _label(ws, RECIPIENT_ROW, 1, 'Billed To')
    ws.cell(row=RECIPIENT_ROW, column=2).value = (
        recipient.display_name if recipient else draft.recipient_name
    )
    if recipient is not None:
        member = recipient.member
        ws.cell(row=RECIPIENT_ROW + 1, column=2).value = member.address or None
        tax_id = member.pan or member.gstin or 'N/A'
        ws.cell(row=RECIPIENT_ROW + 2, column=2).value = f"PAN/TAX ID: {tax_id}"

    # --- Line items ---
    for col, header in enumerate(['Description', 'Qty', 'Rate', 'Amount'], start=1):
        cell = ws.cell(row=ITEMS_HEADER_ROW, column=col)
        cell.value = header
        cell.font = HEADER_FONT
        cell.alignment = CENTER_ALIGN
        cell.border = THIN_BORDER

    rows = [(draft.base_description, 1, draft.base_amount, draft.base_amount)]
    rows.extend((item.description, item.qty, item.rate, item.amount) for item in draft.extra_items)

    row = ITEMS_START_ROW
    for description, qty, rate, amount in rows:
        desc_cell = ws.cell(row=row, column=1)
        desc_cell.value = description
        desc_cell.font = DATA_FONT
        desc_cell.border = THIN_BORDER
        qty_cell = ws.cell(row=row, column=2)
        qty_cell.value = float(qty)
        qty_cell.alignment = CENTER_ALIGN
        qty_cell.border = THIN_BORDER
        _amount(ws, row, 3, rate)
        _amount(ws, row, 4, amount)
        row += 1

    # --- Totals ---
    row += 1
    _label(ws, row, 3, 'Subtotal')
    _amount(ws, row, 4, draft.subtotal)
    if draft.tax_amount != 0:
        row += 1
        _label(ws, row, 3, f"Less: Taxes / Deductions ({float(draft.tax_rate):.1f}%)")
        _amount(ws, row, 4, -draft.tax_amount)
    row += 1
    _label(ws, row, 3, 'Net Payable')
    _amount(ws, row, 4, draft.net_total, bold=True)

    ws.column_dimensions['A'].width = 48
    ws.column_dimensions['B'].width = 24
    ws.column_dimensions['C'].width = 34
    ws.column_dimensions['D'].width = 16

    wb.save(str(output_path))
    return output_path
