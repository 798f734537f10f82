import logging

import ledger.settlement
from ledger.domain import ROUND_PER_EXPENSE, Expense, MoneyExchange, creditor, debtor
from ledger.functional import Left, Right
from ledger.services import SettlementService
from ledger.validation import validate_expense


def make_expense(amount, *participants):
    return Expense(participants=tuple(participants), amount=amount)


def test_report_settles_valid_expenses():
    svc = SettlementService()
    rpt = svc.report([make_expense(300, creditor("A"), debtor("a"), debtor("B"), debtor("c"))])

    assert rpt["validation"] == []
    assert rpt["balances"] == {"a": 200, "b": -100, "c": -100}
    assert rpt["exchanges"] == [MoneyExchange("b", "a", 100), MoneyExchange("c", "a", 100)]
    assert rpt["residue"] == {}


def test_report_skips_invalid_expenses(caplog):
    svc = SettlementService()
    expenses = [
        make_expense(300, creditor("a"), debtor("b")),
        make_expense(300, debtor("b")),
    ]
    with caplog.at_level(logging.INFO, logger="ledger.services"):
        rpt = svc.report(expenses)

    assert len(rpt["validation"]) == 1
    assert rpt["validation"][0]["index"] == 1
    assert rpt["validation"][0]["messages"][0]["error"] == "no_creditors"
    assert rpt["validation"][0]["messages"][0]["validator"] == "validate_expense"
    assert rpt["exchanges"] == [MoneyExchange("b", "a", 150)]
    assert "rejected 1 expense(s)" in caplog.text


def test_validator_error_handling():
    def bad_validator(expense):
        raise RuntimeError("oops")

    svc = SettlementService(validators=[validate_expense, bad_validator])
    rpt = svc.report([make_expense(300, creditor("a"), debtor("b"))])

    assert "validator_error" in rpt["validation"][0]["messages"][0]["message"]
    assert rpt["exchanges"] == []


def test_custom_validators_run_in_order():
    seen = []

    def small_only(expense):
        seen.append(expense.participants[0].name)
        if expense.amount > 1000:
            return Left({"error": "too_big", "message": "too big"})
        return Right(expense)

    svc = SettlementService(validators=[validate_expense, small_only])
    rpt = svc.report([
        make_expense(300, creditor("A"), debtor("b")),
        make_expense(5000, creditor("a"), debtor("b")),
    ])

    assert seen == ["a", "a"]
    assert rpt["validation"][0]["messages"] == [{"validator": "small_only", "error": "too_big", "message": "too big"}]
    assert rpt["balances"] == {"a": 150, "b": -150}


def test_per_expense_rounding():
    svc = SettlementService(rounding=ROUND_PER_EXPENSE)
    rpt = svc.report([make_expense(1000, creditor("a"), debtor("b"), debtor("c"))])
    assert rpt["exchanges"] == [MoneyExchange("b", "a", 333), MoneyExchange("c", "a", 334)]


def test_empty_report():
    rpt = SettlementService().report([])
    assert rpt == {"validation": [], "balances": {}, "exchanges": [], "residue": {}}


def test_report_matches_balances_once(monkeypatch, caplog):
    calls = []
    match_balances = ledger.settlement.match_balances

    def counting(balances):
        calls.append(balances)
        return match_balances(balances)

    monkeypatch.setattr(ledger.settlement, "match_balances", counting)
    svc = SettlementService(rounding=ROUND_PER_EXPENSE)
    expenses = [make_expense(100, creditor("a"), debtor("b"), debtor("c")) for _ in range(10)]
    with caplog.at_level(logging.WARNING, logger="ledger.settlement"):
        rpt = svc.report(expenses)

    assert len(calls) == 1
    assert rpt["exchanges"] == [MoneyExchange("b", "a", 330), MoneyExchange("c", "a", 330)]
    assert rpt["residue"] == {"a": 10}
    assert len(caplog.records) == 1
