from decimal import Decimal

import pytest

from models import Expense, Group


def make_expense(id, amount, payer, participants, description="item"):
    return Expense(id=id, description=description, amount=Decimal(str(amount)),
                   payer=payer, participants=list(participants))


@pytest.fixture
def trip():
    """Three friends, two expenses"""
    return Group(
        name="Trip",
        members=["Alice", "Bob", "Carol"],
        expenses=[
            make_expense(1, "90", "Alice", ["Alice", "Bob", "Carol"], "Dinner"),
            make_expense(2, "30", "Bob", ["Bob", "Carol"], "Taxi"),
        ],
        next_expense_id=3,
    )
