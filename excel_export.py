"""
Excel export functionality for Warikan Ledger
"""
from __future__ import annotations
import logging
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from computations import compute_balances, compute_settlements, compute_summary
from config import AppSettings
from models import Ledger, Settlement

logger = logging.getLogger(__name__)


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="4F46E5")
    align = Alignment(horizontal="center", vertical="center")
    thin = Side(style="thin", color="A0A0A0")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    for cell in ws[row]:
        cell.font = header_font
        cell.fill = fill
        cell.alignment = align
        cell.border = border


def _autosize_columns(ws, min_width=10, max_width=45):
    """Auto-size columns based on content"""
    for col in range(1, ws.max_column + 1):
        letter = get_column_letter(col)
        max_len = 0
        for cell in ws[letter]:
            v = cell.value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def _money_format(decimals: int) -> str:
    return "#,##0" if decimals == 0 else "#,##0." + "0" * decimals


def export_excel(
    ledger: Ledger,
    filepath: str,
    settings: Optional[AppSettings] = None,
    settlements: Optional[List[Settlement]] = None,
) -> None:
    """
    Export a settlement report to an Excel file with three sheets:
    - Participants: weight, share of total, expected, paid, balance
    - Expenses: one row per expense plus a total
    - Settlements: who pays whom
    Settlements are recomputed from the ledger unless passed in.
    """
    settings = settings or AppSettings()
    money = _money_format(settings.decimals)

    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    # Participants sheet
    ws = wb.create_sheet("Participants")
    ws.append(["Participant", "Weight", "Share", "Expected", "Paid", "Balance"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    summary = compute_summary(ledger)
    for p in ledger.participant_names():
        s = summary[p]
        ws.append([p, s["weight"], s["ratio"], s["expected"], s["paid"], s["balance"]])
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 2).number_format = "0.0#"
        ws.cell(r, 3).number_format = "0%"
        for c in range(4, 7):
            ws.cell(r, c).number_format = money
    _autosize_columns(ws)

    # Expenses sheet
    ws = wb.create_sheet("Expenses")
    ws.append(["Payer", "Description", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for e in ledger.expenses:
        ws.append([e.payer, e.description, e.amount])
    if ledger.expenses:
        last_row = ws.max_row
        ws.append(["TOTAL", None, f"=SUM(C2:C{last_row})"])
        ws.cell(ws.max_row, 1).font = Font(bold=True)
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 3).number_format = money
    _autosize_columns(ws)

    # Settlements sheet
    ws = wb.create_sheet("Settlements")
    ws.append(["From (Debtor)", "To (Creditor)", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    if settlements is None:
        balances = compute_balances(ledger.participants, ledger.expenses)
        settlements = compute_settlements(balances, settings.decimals, settings.tolerance)
    for s in settlements:
        ws.append([s.from_person, s.to_person, s.amount])
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 3).number_format = money
    _autosize_columns(ws)

    wb.save(filepath)
    logger.info("Exported %d participants, %d expenses, %d settlements to %s",
                len(ledger.participants), len(ledger.expenses), len(settlements), filepath)
