import pytest

from config import load_groups
from friends_financing import main


@pytest.fixture
def run(tmp_path, capsys):
    store = str(tmp_path / "groups.json")

    def _run(*argv):
        code = main(["--store", store] + list(argv))
        out, err = capsys.readouterr()
        return code, out, err

    _run.store = store
    return _run


def test_full_session(run, tmp_path):
    assert run("create", "Trip", "A", "B", "C")[0] == 0
    code, out, _ = run("add-expense", "Trip", "Dinner", "90", "--payer", "A")
    assert code == 0
    assert "#1 Dinner: $90.00 paid by A" in out

    code, out, _ = run("settle", "Trip")
    assert code == 0
    assert out.splitlines() == [
        "Balances:",
        f"  {'A':<20} {'+$60.00':>12}",
        f"  {'B':<20} {'-$30.00':>12}",
        f"  {'C':<20} {'-$30.00':>12}",
        "Settlements:",
        "  B >> A  $30.00",
        "  C >> A  $30.00",
    ]

    code, out, _ = run("show", "Trip")
    assert "Split among 3 people" in out
    assert "Total" in out and "$90.00" in out

    assert run("share", "Trip", str(tmp_path / "trip.xlsx"))[0] == 0
    assert (tmp_path / "trip.xlsx").exists()

    code, out, _ = run("groups")
    assert out.startswith("Trip  (3 members: A, B, C)")


def test_offsetting_expenses_are_all_settled(run):
    run("create", "Pair", "A", "B")
    run("add-expense", "Pair", "item 1", "20", "-p", "A", "--for", "B")
    run("add-expense", "Pair", "item 2", "20", "-p", "B", "--for", "A")
    _, out, _ = run("settle", "Pair")
    assert "Everyone is settled up!" in out


def test_group_saved_once_it_has_members(run):
    code, out, _ = run("create", "Flat")
    assert code == 0
    assert load_groups(run.store) == {}
    run("add-member", "Flat", "A", "B")
    assert load_groups(run.store)["Flat"].members == ["A", "B"]


def test_remove_member_needs_confirmation(run):
    run("create", "Trip", "A", "B", "C")
    run("add-expense", "Trip", "Fuel", "30", "-p", "A", "--for", "A", "B")

    code, _, err = run("remove-member", "Trip", "B")
    assert code == 1
    assert "--yes" in err
    assert load_groups(run.store)["Trip"].members == ["A", "B", "C"]

    code, out, _ = run("remove-member", "Trip", "B", "--yes")
    assert code == 0
    assert "1 expense(s)" in out
    g = load_groups(run.store)["Trip"]
    assert g.members == ["A", "C"]
    assert g.expenses == []


def test_errors_are_reported(run):
    code, _, err = run("settle", "Nope")
    assert code == 1
    assert err.strip() == "error: Group not found."

    run("create", "Trip", "A", "B")
    code, _, err = run("add-expense", "Trip", "Lunch", "-4", "-p", "A")
    assert code == 1
    assert "valid amount" in err

    code, _, err = run("add-member", "Trip", "a")
    assert code == 1
    assert "already exists" in err

    code, _, err = run("share", "Trip", "out.xlsx")
    assert "No settlements to share." in err


def test_reset_and_remove_expense(run):
    run("create", "Trip", "A", "B")
    run("add-expense", "Trip", "One", "10", "-p", "A")
    run("add-expense", "Trip", "Two", "10", "-p", "B")
    assert run("remove-expense", "Trip", "1")[0] == 0
    assert [e.id for e in load_groups(run.store)["Trip"].expenses] == [2]

    assert run("reset", "Trip")[0] == 1
    assert run("reset", "Trip", "--yes")[0] == 0
    g = load_groups(run.store)["Trip"]
    assert g.expenses == [] and g.next_expense_id == 1


def test_csv_round_trip(run, tmp_path):
    path = str(tmp_path / "expenses.csv")
    run("create", "Trip", "A", "B")
    run("add-expense", "Trip", "Dinner", "50", "-p", "A")
    assert run("export-csv", "Trip", path)[0] == 0

    run("create", "Copy", "A", "B")
    code, out, _ = run("import-csv", "Copy", path)
    assert code == 0
    assert "Appended 1 expenses." in out
    assert load_groups(run.store)["Copy"].expenses[0].description == "Dinner"


def test_delete_group(run):
    run("create", "Trip", "A", "B")
    assert run("delete", "Trip")[0] == 0
    assert load_groups(run.store) == {}


def test_malformed_store_does_not_crash(run):
    with open(run.store, "w", encoding="utf-8") as f:
        f.write('{"Trip": {"members": ["A"], "expenses": [{"id": 1}]}}')
    code, out, _ = run("groups")
    assert code == 0
    assert out.startswith("No groups yet.")


def test_member_names_ignore_case(run):
    run("create", "Trip", "Alice", "Bob")
    code, out, _ = run("add-expense", "Trip", "Fuel", "30", "-p", "alice", "--for", "ALICE", "bob")
    assert code == 0
    assert "paid by Alice" in out

    code, _, err = run("remove-member", "Trip", "bob")
    assert code == 1 and "--yes" in err
    assert run("remove-member", "Trip", "bob", "--yes")[0] == 0
    assert load_groups(run.store)["Trip"].members == ["Alice"]


def test_expense_in_single_member_group(run):
    run("create", "Solo", "A")
    code, out, _ = run("add-expense", "Solo", "Coffee", "4", "-p", "A")
    assert code == 0
    assert len(load_groups(run.store)["Solo"].expenses) == 1
    _, out, _ = run("settle", "Solo")
    assert "Add at least two members" in out
