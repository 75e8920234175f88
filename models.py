"""
Data models for Friends Financing
"""
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class Expense:
    """Single shared payment: payer covered amount for the participants"""
    id: int
    description: str
    amount: Decimal
    payer: str
    participants: List[str]  # non-empty, members only


@dataclass
class Settlement:
    """Instruction: from_member pays to_member this amount"""
    from_member: str
    to_member: str
    amount: Decimal


@dataclass
class Group:
    """Named group of members and their expenses"""
    name: str
    members: List[str] = field(default_factory=list)
    expenses: List[Expense] = field(default_factory=list)
    next_expense_id: int = 1
    saved_at: Optional[str] = None  # ISO timestamp of last save


class GroupError(ValueError):
    """Invalid user input or group operation"""
