"""
Group store: loading/saving named groups for Friends Financing
"""
from __future__ import annotations
import json
import logging
import os
from dataclasses import asdict
from decimal import Decimal
from typing import Dict, Optional

from models import Expense, Group, GroupError
from utils import app_dir, now_iso

logger = logging.getLogger(__name__)

STORE_FILENAME = "groups.json"


def default_store_path() -> str:
    return os.path.join(app_dir(), STORE_FILENAME)


def expense_to_dict(e: Expense) -> dict:
    d = asdict(e)
    d["amount"] = str(e.amount)
    return d


def dict_to_expense(d: dict) -> Expense:
    return Expense(
        id=int(d["id"]),
        description=str(d.get("description", "")),
        amount=Decimal(str(d["amount"])),
        payer=d["payer"],
        participants=list(d.get("participants", [])),
    )


def group_to_dict(group: Group) -> dict:
    """Convert Group object to dictionary for JSON serialization"""
    return {
        "members": list(group.members),
        "expenses": [expense_to_dict(e) for e in group.expenses],
        "nextExpenseId": group.next_expense_id,
        "savedAt": group.saved_at,
    }


def dict_to_group(name: str, d: dict) -> Group:
    """Convert dictionary from JSON to Group object"""
    exps = [dict_to_expense(e) for e in d.get("expenses") or []]
    next_id = d.get("nextExpenseId")
    if not next_id:
        next_id = max(e.id for e in exps) + 1 if exps else 1
    return Group(
        name=name,
        members=list(d.get("members", [])),
        expenses=exps,
        next_expense_id=int(next_id),
        saved_at=d.get("savedAt"),
    )


def load_groups(path: Optional[str] = None) -> Dict[str, Group]:
    """Load all saved groups; a missing or unreadable store yields no groups"""
    path = path or default_store_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as ex:
        logger.warning("could not read group store %s: %s", path, ex)
        return {}
    if not isinstance(data, dict):
        logger.warning("group store %s is not a JSON object, ignoring", path)
        return {}
    try:
        return {name: dict_to_group(name, d) for name, d in data.items()}
    except (KeyError, TypeError, AttributeError, ValueError, ArithmeticError) as ex:
        logger.warning("group store %s is malformed (%s: %s), ignoring", path, type(ex).__name__, ex)
        return {}


def save_groups(groups: Dict[str, Group], path: Optional[str] = None) -> None:
    """Write all groups to the store, replacing the file only once fully written"""
    path = path or default_store_path()
    data = {name: group_to_dict(g) for name, g in groups.items()}
    tmp = path + ".tmp"
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)
    except OSError:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise
    logger.debug("saved %d group(s) to %s", len(groups), path)


def create_group(groups: Dict[str, Group], name: str) -> Group:
    """
    Start a new group. It is not added to the store until it has members
    (see store_group).
    """
    name = (name or "").strip()
    if not name:
        raise GroupError("Please enter a group name.")
    if name in groups:
        raise GroupError(f'A group named "{name}" already exists. Please choose a different name.')
    return Group(name=name)


def get_group(groups: Dict[str, Group], name: str) -> Group:
    try:
        return groups[name]
    except KeyError:
        raise GroupError("Group not found.") from None


def store_group(groups: Dict[str, Group], group: Group) -> None:
    """Put group in the mapping, stamped with the save time; drop it if it has no members"""
    if group.members:
        group.saved_at = now_iso()
        groups[group.name] = group
    else:
        groups.pop(group.name, None)


def delete_group(groups: Dict[str, Group], name: str) -> Group:
    get_group(groups, name)
    return groups.pop(name)
