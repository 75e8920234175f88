"""
Settlement computations for Friends Financing
"""
from __future__ import annotations
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models import Expense, Group, Settlement
from utils import CENT, TOLERANCE

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def round_cents(value: Decimal) -> Decimal:
    """Round to currency precision, ties away from zero"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def check_expense(e: Expense, members: Iterable[str]) -> None:
    """Raise ValueError if the expense cannot be applied to these members"""
    known = set(members)
    if e.amount <= 0:
        raise ValueError(f"expense {e.id}: amount must be positive, got {e.amount}")
    if not e.participants:
        raise ValueError(f"expense {e.id}: no participants")
    if e.payer not in known:
        raise ValueError(f"expense {e.id}: payer {e.payer!r} is not a member")
    for p in e.participants:
        if p not in known:
            raise ValueError(f"expense {e.id}: participant {p!r} is not a member")


def compute_balances(members: Sequence[str], expenses: Sequence[Expense]) -> Dict[str, Decimal]:
    """
    Compute each member's net balance from the full expense list.
    Positive -> is owed money; negative -> owes money.
    The result keeps member order and is rounded to cents.
    """
    balances = {m: ZERO for m in members}

    for e in expenses:
        check_expense(e, balances)
        amount = Decimal(e.amount)
        share = amount / len(e.participants)
        balances[e.payer] += amount
        for p in e.participants:
            balances[p] -= share

    rounded = {m: round_cents(v) for m, v in balances.items()}
    logger.debug("balances for %d members over %d expenses: %s",
                 len(rounded), len(expenses), rounded)
    return rounded


def compute_settlements(balances: Dict[str, Decimal]) -> List[Settlement]:
    """
    Greedy largest-to-largest matching of debtors with creditors.
    Returns transfers in emission order; empty when everyone is settled.
    """
    creditors = []
    debtors = []
    for name, balance in balances.items():
        balance = Decimal(balance)
        if balance > TOLERANCE:
            creditors.append([name, balance])
        elif balance < -TOLERANCE:
            debtors.append([name, -balance])  # stored as positive

    # stable: equal amounts keep member order
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    settlements = []
    while creditors and debtors:
        creditor = creditors[0]
        debtor = debtors[0]

        amount = min(creditor[1], debtor[1])
        rounded = round_cents(amount)
        if rounded > 0:
            settlements.append(Settlement(from_member=debtor[0], to_member=creditor[0], amount=rounded))

        creditor[1] -= amount
        debtor[1] -= amount

        if creditor[1] < TOLERANCE:
            creditors.pop(0)
        if debtor[1] < TOLERANCE:
            debtors.pop(0)

    logger.debug("%d settlements: %s", len(settlements), settlements)
    return settlements


def settle_group(group: Group) -> Optional[Tuple[Dict[str, Decimal], List[Settlement]]]:
    """Balances and settlements for a group, or None until it has 2 members and an expense"""
    if len(group.members) < 2 or not group.expenses:
        return None
    balances = compute_balances(group.members, group.expenses)
    return balances, compute_settlements(balances)


def total_spent(expenses: Iterable[Expense]) -> Decimal:
    """Sum of all expense amounts"""
    return sum((Decimal(e.amount) for e in expenses), ZERO)


def sorted_balances(balances: Dict[str, Decimal]) -> List[Tuple[str, Decimal]]:
    """Balances ordered from most owed to most owing"""
    return sorted(balances.items(), key=lambda kv: kv[1], reverse=True)
