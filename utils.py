"""
Utility functions for Friends Financing
"""
from __future__ import annotations
import os
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

CENT = Decimal("0.01")
TOLERANCE = Decimal("0.01")  # balances within this of zero are settled


def now_iso() -> str:
    """Current UTC time as ISO string"""
    return datetime.now(timezone.utc).isoformat()


def parse_amount(s) -> Optional[Decimal]:
    """Parse a money amount, returning None if it is not a finite number"""
    try:
        d = Decimal(str(s).strip())
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d


def format_money(amount: Decimal) -> str:
    """e.g. $12.50"""
    return f"${Decimal(amount):.2f}"


def balance_status(balance: Decimal) -> str:
    """positive, negative or neutral, using the settlement tolerance"""
    if balance > TOLERANCE:
        return "positive"
    if balance < -TOLERANCE:
        return "negative"
    return "neutral"


def format_balance(balance: Decimal) -> str:
    """Signed display: +$10.00, -$5.25, or $0.00 within tolerance"""
    status = balance_status(balance)
    if status == "positive":
        return f"+{format_money(balance)}"
    if status == "negative":
        return f"-{format_money(abs(balance))}"
    return "$0.00"


def format_relative_date(iso: Optional[str], now: Optional[datetime] = None) -> str:
    """Human-readable age of an ISO timestamp ("3 min ago", "Yesterday", ...)"""
    if not iso:
        return ""
    then = datetime.fromisoformat(iso)
    if then.tzinfo is None:
        then = then.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    secs = (now - then).total_seconds()
    mins = int(secs // 60)
    hours = int(secs // 3600)
    days = int(secs // 86400)

    if mins < 1:
        return "Just now"
    if mins < 60:
        return f"{mins} min ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    return then.date().isoformat()


def app_dir() -> str:
    """
    Get application data directory: $FRIENDS_FINANCING_HOME, or
    ~/.local/share/FriendsFinancing. Creates directory if it doesn't exist.
    """
    path = os.environ.get("FRIENDS_FINANCING_HOME")
    if not path:
        base = os.path.expanduser("~/.local/share")
        path = os.path.join(base, "FriendsFinancing")
    os.makedirs(path, exist_ok=True)
    return path
