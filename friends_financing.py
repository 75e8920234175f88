#!/usr/bin/env python3
"""
Friends Financing
- Keep named groups of friends, record who paid what for whom.
- Show each member's balance and the fewest payments that settle everyone up.
- Export expenses as CSV and the results as an Excel workbook to share.

Usage:
    friends-financing create Trip
    friends-financing add-member Trip Alice
    friends-financing add-member Trip Bob
    friends-financing add-expense Trip "Dinner" 100 --payer Alice
    friends-financing settle Trip
    friends-financing share Trip trip.xlsx
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import Dict, List, Optional

from models import Group, GroupError
from config import (
    create_group,
    default_store_path,
    delete_group,
    get_group,
    load_groups,
    save_groups,
    store_group,
)
from computations import settle_group, sorted_balances, total_spent
from group_actions import (
    add_expense,
    add_member,
    member_has_expenses,
    remove_expense,
    remove_member,
    reset_expenses,
)
from csv_handler import export_expenses_to_csv, import_expenses_from_csv
from excel_export import export_share_report
from utils import format_balance, format_money, format_relative_date

logger = logging.getLogger(__name__)


class App:
    """Loaded group store plus the command handlers"""

    def __init__(self, store_path: str, out=None):
        self.store_path = store_path
        self.groups: Dict[str, Group] = load_groups(store_path)
        self.out = out or sys.stdout

    def echo(self, text: str = "") -> None:
        print(text, file=self.out)

    def save(self, group: Group) -> None:
        store_group(self.groups, group)
        save_groups(self.groups, self.store_path)

    # ---------- Groups ----------
    def cmd_groups(self, args) -> None:
        if not self.groups:
            self.echo("No groups yet. Create one with: friends-financing create NAME")
            return
        for name, g in self.groups.items():
            preview = ", ".join(g.members[:4]) + ("..." if len(g.members) > 4 else "")
            self.echo(f"{name}  ({len(g.members)} members: {preview})  {format_relative_date(g.saved_at)}")

    def cmd_create(self, args) -> None:
        group = create_group(self.groups, args.name)
        for member in args.members:
            add_member(group, member)
        if group.members:
            self.save(group)
            self.echo(f"Created group {group.name} with {len(group.members)} member(s).")
        else:
            self.echo(f"Group {group.name} will be saved once it has members.")

    def cmd_delete(self, args) -> None:
        delete_group(self.groups, args.name)
        save_groups(self.groups, self.store_path)
        self.echo(f"Deleted group {args.name}.")

    def _group(self, name: str) -> Group:
        if name in self.groups:
            return get_group(self.groups, name)
        # a group created without members lives only until its first member
        return create_group(self.groups, name)

    # ---------- Members ----------
    def cmd_add_member(self, args) -> None:
        group = self._group(args.group)
        for name in args.names:
            add_member(group, name)
        self.save(group)
        self.echo(f"{group.name}: {', '.join(group.members)}")

    def cmd_remove_member(self, args) -> None:
        group = get_group(self.groups, args.group)
        if member_has_expenses(group, args.name) and not args.yes:
            raise GroupError(f"{args.name} has expenses. Removing them will delete related expenses. "
                             "Re-run with --yes to continue.")
        removed = remove_member(group, args.name)
        self.save(group)
        self.echo(f"Removed {args.name}" + (f" and {len(removed)} expense(s)." if removed else "."))

    # ---------- Expenses ----------
    def cmd_add_expense(self, args) -> None:
        group = get_group(self.groups, args.group)
        participants = args.participants or list(group.members)
        e = add_expense(group, args.description, args.amount, args.payer, participants)
        self.save(group)
        self.echo(f"#{e.id} {e.description}: {format_money(e.amount)} paid by {e.payer}")

    def cmd_remove_expense(self, args) -> None:
        group = get_group(self.groups, args.group)
        e = remove_expense(group, args.id)
        self.save(group)
        self.echo(f"Removed #{e.id} {e.description}.")

    def cmd_reset(self, args) -> None:
        group = get_group(self.groups, args.group)
        if not args.yes:
            raise GroupError("Resetting deletes all expenses. Re-run with --yes to continue.")
        reset_expenses(group)
        self.save(group)
        self.echo(f"All expenses of {group.name} deleted.")

    # ---------- Results ----------
    def cmd_show(self, args) -> None:
        group = get_group(self.groups, args.group)
        self.echo(f"{group.name} Financing")
        self.echo(f"Members ({len(group.members)}): {', '.join(group.members)}")
        self.echo()
        if not group.expenses:
            self.echo("No expenses yet.")
        for e in group.expenses:
            n = len(e.participants)
            self.echo(f"#{e.id:<4} {e.description:<30} {format_money(e.amount):>10}  "
                      f"Paid by {e.payer} · Split among {n} {'person' if n == 1 else 'people'}")
        if group.expenses:
            self.echo(f"{'Total':<36}{format_money(total_spent(group.expenses)):>10}")
        self.echo()
        self._print_results(group)

    def cmd_settle(self, args) -> None:
        self._print_results(get_group(self.groups, args.group))

    def _print_results(self, group: Group) -> None:
        result = settle_group(group)
        if result is None:
            self.echo("Add at least two members and one expense to see who owes whom.")
            return
        balances, settlements = result
        self.echo("Balances:")
        for name, balance in sorted_balances(balances):
            self.echo(f"  {name:<20} {format_balance(balance):>12}")
        self.echo("Settlements:")
        if not settlements:
            self.echo("  Everyone is settled up!")
        for s in settlements:
            self.echo(f"  {s.from_member} >> {s.to_member}  {format_money(s.amount)}")

    # ---------- Import/Export ----------
    def cmd_export_csv(self, args) -> None:
        group = get_group(self.groups, args.group)
        if not group.expenses:
            raise GroupError("No expenses to export.")
        export_expenses_to_csv(group.expenses, args.path)
        self.echo(f"Exported {len(group.expenses)} expenses to {args.path}")

    def cmd_import_csv(self, args) -> None:
        group = get_group(self.groups, args.group)
        added = import_expenses_from_csv(group, args.path)
        self.save(group)
        self.echo(f"Appended {len(added)} expenses.")

    def cmd_share(self, args) -> None:
        group = get_group(self.groups, args.group)
        export_share_report(group, args.path)
        self.echo(f"Exported: {args.path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="friends-financing",
        description="Group expense calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--store", help="group store JSON file (default: in the app data directory)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log what is being done")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("groups", help="list saved groups")
    p.set_defaults(handler=App.cmd_groups)

    p = sub.add_parser("create", help="create a new group")
    p.add_argument("name")
    p.add_argument("members", nargs="*", help="initial members")
    p.set_defaults(handler=App.cmd_create)

    p = sub.add_parser("delete", help="delete a group")
    p.add_argument("name")
    p.set_defaults(handler=App.cmd_delete)

    p = sub.add_parser("show", help="show members, expenses and results")
    p.add_argument("group")
    p.set_defaults(handler=App.cmd_show)

    p = sub.add_parser("settle", help="show balances and who pays whom")
    p.add_argument("group")
    p.set_defaults(handler=App.cmd_settle)

    p = sub.add_parser("add-member", help="add members to a group")
    p.add_argument("group")
    p.add_argument("names", nargs="+")
    p.set_defaults(handler=App.cmd_add_member)

    p = sub.add_parser("remove-member", help="remove a member and their expenses")
    p.add_argument("group")
    p.add_argument("name")
    p.add_argument("--yes", action="store_true", help="also delete the member's expenses")
    p.set_defaults(handler=App.cmd_remove_member)

    p = sub.add_parser("add-expense", help="record an expense")
    p.add_argument("group")
    p.add_argument("description")
    p.add_argument("amount")
    p.add_argument("--payer", "-p", required=True)
    p.add_argument("--for", dest="participants", nargs="+", metavar="MEMBER",
                   help="who benefited (default: everyone)")
    p.set_defaults(handler=App.cmd_add_expense)

    p = sub.add_parser("remove-expense", help="delete an expense by id")
    p.add_argument("group")
    p.add_argument("id", type=int)
    p.set_defaults(handler=App.cmd_remove_expense)

    p = sub.add_parser("reset", help="delete all expenses of a group")
    p.add_argument("group")
    p.add_argument("--yes", action="store_true")
    p.set_defaults(handler=App.cmd_reset)

    p = sub.add_parser("export-csv", help="write expenses to a CSV file")
    p.add_argument("group")
    p.add_argument("path")
    p.set_defaults(handler=App.cmd_export_csv)

    p = sub.add_parser("import-csv", help="append expenses from a CSV file")
    p.add_argument("group")
    p.add_argument("path")
    p.set_defaults(handler=App.cmd_import_csv)

    p = sub.add_parser("share", help="export results as an Excel workbook")
    p.add_argument("group")
    p.add_argument("path")
    p.set_defaults(handler=App.cmd_share)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        app = App(args.store or default_store_path())
        args.handler(app, args)
    except (ValueError, OSError) as ex:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {ex}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
