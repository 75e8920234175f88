"""
Excel export of a group's results, for sharing
"""
from __future__ import annotations
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill, Border, Side
from openpyxl.utils import get_column_letter

from models import Group, GroupError
from computations import settle_group, sorted_balances, total_spent
from utils import balance_status

logger = logging.getLogger(__name__)

MONEY_FORMAT = '"$"#,##0.00'
STATUS_COLORS = {"positive": "1E7B34", "negative": "B02A37", "neutral": "606060"}


def _style_header(ws, row=1):
    """Apply header styling to worksheet row"""
    header_font = Font(bold=True, color="FFFFFF")
    fill = PatternFill("solid", fgColor="3841F2")
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
        max_len = max((len(str(c.value)) for c in ws[letter] if c.value is not None), default=0)
        ws.column_dimensions[letter].width = max(min_width, min(max_width, max_len + 2))


def export_share_report(group: Group, filepath: str) -> None:
    """
    Export group results to Excel file with sheets:
    - Settlements (who pays whom)
    - Balances
    - Expenses, with a total row
    """
    result = settle_group(group)
    if result is None or not result[1]:
        raise GroupError("No settlements to share.")
    balances, settlements = result

    wb = Workbook()
    # remove default sheet
    wb.remove(wb.active)

    ws = wb.create_sheet("Settlements")
    ws.append(["From", "To", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for s in settlements:
        ws.append([s.from_member, s.to_member, float(s.amount)])
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 3).number_format = MONEY_FORMAT
    _autosize_columns(ws)

    ws = wb.create_sheet("Balances")
    ws.append(["Member", "Balance", "Status"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for name, balance in sorted_balances(balances):
        status = balance_status(balance)
        ws.append([name, float(balance), status])
        ws.cell(ws.max_row, 2).font = Font(color=STATUS_COLORS[status])
        ws.cell(ws.max_row, 2).number_format = MONEY_FORMAT
    _autosize_columns(ws)

    ws = wb.create_sheet("Expenses")
    ws.append(["Description", "Paid by", "Split among", "Amount"])
    _style_header(ws, 1)
    ws.freeze_panes = "A2"
    for e in group.expenses:
        n = len(e.participants)
        ws.append([e.description, e.payer, f"{n} {'person' if n == 1 else 'people'}", float(e.amount)])
    last = ws.max_row
    ws.append(["TOTAL", "", "", f"=SUM(D2:D{last})"])
    ws.cell(ws.max_row, 1).font = Font(bold=True)
    for r in range(2, ws.max_row + 1):
        ws.cell(r, 4).number_format = MONEY_FORMAT
    _autosize_columns(ws)

    wb.properties.title = f"{group.name} Financing"
    wb.save(filepath)
    logger.info("share report for %r (%d settlements, total %s) written to %s",
                group.name, len(settlements), total_spent(group.expenses), filepath)
