"""
Member and expense management for a group.

These functions mutate the Group in place and keep it consistent with the
preconditions of compute_balances: every payer and participant is a member,
amounts are positive, participant lists are non-empty. They raise GroupError
with a message suitable for showing to the user.
"""
from __future__ import annotations
import logging
from typing import Iterable, List

from models import Expense, Group, GroupError
from computations import round_cents
from utils import parse_amount

logger = logging.getLogger(__name__)


def find_member(group: Group, name: str):
    """Return the stored spelling of name (case-insensitive), or None"""
    key = name.strip().lower()
    for m in group.members:
        if m.lower() == key:
            return m
    return None


def resolve_member(group: Group, name: str) -> str:
    """Stored spelling of a member name; GroupError if there is no such member"""
    found = find_member(group, name or "")
    if found is None:
        raise GroupError(f"{name} is not a member of this group.")
    return found


def add_member(group: Group, name: str) -> str:
    """Add a member; names are unique ignoring case"""
    name = (name or "").strip()
    if not name:
        raise GroupError("Please enter a member name.")
    if find_member(group, name) is not None:
        raise GroupError("This member already exists.")
    group.members.append(name)
    logger.info("group %r: added member %r", group.name, name)
    return name


def member_has_expenses(group: Group, name: str) -> bool:
    name = find_member(group, name) or name
    return any(e.payer == name or name in e.participants for e in group.expenses)


def remove_member(group: Group, name: str) -> List[Expense]:
    """
    Remove a member together with every expense they paid or took part in.
    Returns the removed expenses.
    """
    name = resolve_member(group, name)
    removed = [e for e in group.expenses if e.payer == name or name in e.participants]
    group.expenses = [e for e in group.expenses if not (e.payer == name or name in e.participants)]
    group.members = [m for m in group.members if m != name]
    logger.info("group %r: removed member %r and %d expense(s)", group.name, name, len(removed))
    return removed


def add_expense(
    group: Group,
    description: str,
    amount,
    payer: str,
    participants: Iterable[str],
) -> Expense:
    """Validate input and append a new expense with the next id"""
    description = (description or "").strip()
    if not description:
        raise GroupError("Please enter a description.")

    value = parse_amount(amount)
    if value is not None:
        value = round_cents(value)
    if value is None or value <= 0:
        raise GroupError("Please enter a valid amount greater than 0.")

    if not payer:
        raise GroupError("Please select who paid.")
    payer = resolve_member(group, payer)

    chosen = []
    for p in participants:
        p = resolve_member(group, p)
        if p not in chosen:
            chosen.append(p)
    if not chosen:
        raise GroupError("Please select at least one person who benefited.")

    expense = Expense(
        id=group.next_expense_id,
        description=description,
        amount=value,
        payer=payer,
        participants=chosen,
    )
    group.next_expense_id += 1
    group.expenses.append(expense)
    logger.info("group %r: added expense %d (%s, %s)", group.name, expense.id, description, value)
    return expense


def remove_expense(group: Group, expense_id: int) -> Expense:
    for i, e in enumerate(group.expenses):
        if e.id == expense_id:
            del group.expenses[i]
            logger.info("group %r: removed expense %d", group.name, expense_id)
            return e
    raise GroupError(f"No expense with id {expense_id}.")


def reset_expenses(group: Group) -> None:
    """Drop all expenses and restart ids at 1"""
    group.expenses = []
    group.next_expense_id = 1
    logger.info("group %r: expenses reset", group.name)
