from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from utils import balance_status, format_balance, format_money, format_relative_date, parse_amount


@pytest.mark.parametrize("raw, expected", [
    ("12.5", Decimal("12.5")),
    (" 3 ", Decimal("3")),
    (7, Decimal("7")),
    ("", None),
    ("ten", None),
    ("inf", None),
])
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("balance, text, status", [
    (Decimal("10"), "+$10.00", "positive"),
    (Decimal("-5.25"), "-$5.25", "negative"),
    (Decimal("0.01"), "$0.00", "neutral"),
    (Decimal("-0.01"), "$0.00", "neutral"),
    (Decimal("0"), "$0.00", "neutral"),
])
def test_format_balance(balance, text, status):
    assert format_balance(balance) == text
    assert balance_status(balance) == status


def test_format_money():
    assert format_money(Decimal("1234.5")) == "$1234.50"


NOW = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("ago, text", [
    (timedelta(seconds=20), "Just now"),
    (timedelta(minutes=5), "5 min ago"),
    (timedelta(hours=1), "1 hour ago"),
    (timedelta(hours=3), "3 hours ago"),
    (timedelta(days=1, hours=2), "Yesterday"),
    (timedelta(days=4), "4 days ago"),
    (timedelta(days=30), "2024-04-10"),
])
def test_format_relative_date(ago, text):
    assert format_relative_date((NOW - ago).isoformat(), now=NOW) == text


def test_format_relative_date_empty():
    assert format_relative_date(None) == ""
