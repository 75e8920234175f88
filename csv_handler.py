"""
CSV export and import functionality for Friends Financing
"""
from __future__ import annotations
import csv
import logging
from typing import List

from models import Expense, Group, GroupError
from group_actions import add_expense

logger = logging.getLogger(__name__)

CSV_COLUMNS = ['id', 'description', 'amount', 'payer', 'participants']


def export_expenses_to_csv(expenses: List[Expense], filepath: str) -> None:
    """
    Export expenses list to CSV file
    CSV columns: id, description, amount, payer, participants (';'-separated)
    """
    with open(filepath, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for e in expenses:
            writer.writerow([
                e.id,
                e.description,
                f"{e.amount:.2f}",
                e.payer,
                ';'.join(e.participants),
            ])
    logger.info("exported %d expense(s) to %s", len(expenses), filepath)


def read_expense_rows(filepath: str) -> List[dict]:
    """Read raw rows from CSV file: description, amount, payer, participants list"""
    rows = []
    with open(filepath, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            participants = [p.strip() for p in (row.get('participants') or '').split(';') if p.strip()]
            rows.append({
                'description': row.get('description', ''),
                'amount': row.get('amount', ''),
                'payer': (row.get('payer') or '').strip(),
                'participants': participants,
            })
    return rows


def import_expenses_from_csv(group: Group, filepath: str) -> List[Expense]:
    """
    Append expenses from CSV file to the group.
    Ids in the file are ignored; each row gets the group's next id.
    Every row is validated before any is added.
    """
    rows = read_expense_rows(filepath)

    # validate against a scratch copy so a bad row leaves the group untouched
    scratch = Group(name=group.name, members=list(group.members),
                    expenses=list(group.expenses), next_expense_id=group.next_expense_id)
    for line, row in enumerate(rows, start=2):
        try:
            add_expense(scratch, row['description'], row['amount'], row['payer'], row['participants'])
        except GroupError as ex:
            raise GroupError(f"{filepath}, line {line}: {ex}") from ex

    added = scratch.expenses[len(group.expenses):]
    group.expenses = scratch.expenses
    group.next_expense_id = scratch.next_expense_id
    logger.info("imported %d expense(s) from %s", len(added), filepath)
    return added
