"""Sanity checks run on an expense before it reaches the balance accumulator.

Each check returns ``Right(expense)`` or a ``Left`` holding an error dict with
``error`` (a stable code), ``message`` and any extra context. The accumulator
relies on these checks and does not repeat them.
"""
from collections import Counter
from dataclasses import replace
from typing import Iterable, List, Tuple

from ledger.domain import ROLES, Expense, Participant
from ledger.functional import Either, Left, Right, partition_results


def normalize_name(name: str) -> str:
    return name.strip().lower()


def normalize_expense(expense: Expense) -> Expense:
    return replace(
        expense,
        participants=tuple(replace(p, name=normalize_name(p.name)) for p in expense.participants),
    )


def _invalid(error: str, message: str, **context) -> Left:
    return Left({"error": error, "message": message, **context})


def at_least_one_participant(e: Expense) -> Either[dict, Expense]:
    if not e.participants:
        return _invalid("no_participants", "there are neither debtors nor creditors in this expense")
    return Right(e)


def names_not_empty(e: Expense) -> Either[dict, Expense]:
    for p in e.participants:
        if not p.name:
            return _invalid("invalid_name", "participant names cannot be empty")
    return Right(e)


def known_roles(e: Expense) -> Either[dict, Expense]:
    for p in e.participants:
        if p.role not in ROLES:
            return _invalid("invalid_role", f"{p.name} has unknown role {p.role!r}", name=p.name, role=p.role)
    return Right(e)


def positive_amount(e: Expense) -> Either[dict, Expense]:
    if isinstance(e.amount, bool) or not isinstance(e.amount, int) or e.amount <= 0:
        return _invalid(
            "invalid_amount",
            f"expense amount must be a positive number of cents, got {e.amount!r}",
            amount=e.amount,
        )
    return Right(e)


def fixed_amounts_not_negative(e: Expense) -> Either[dict, Expense]:
    for p in e.participants:
        if p.is_fixed and p.amount < 0:
            return _invalid(
                "invalid_fixed_amount",
                f"{p.name} has a negative amount",
                name=p.name,
                amount=p.amount,
            )
    return Right(e)


def at_least_one_creditor(e: Expense) -> Either[dict, Expense]:
    if not any(p.is_creditor for p in e.participants):
        return _invalid("no_creditors", "there are no creditors in this expense")
    return Right(e)


def no_duplicate_participants(e: Expense) -> Either[dict, Expense]:
    counts = Counter((p.name, p.role) for p in e.participants)
    duplicates = sorted(key for key, n in counts.items() if n > 1)
    if duplicates:
        name, role = duplicates[0]
        return _invalid(
            "duplicate_participant",
            f"{name} appears more than once as {role}",
            name=name,
            role=role,
        )
    return Right(e)


def _fixed_total(participants: Iterable[Participant]) -> int:
    return sum(p.amount for p in participants if p.is_fixed)


def fixed_credit_in_range(e: Expense) -> Either[dict, Expense]:
    creditors = [p for p in e.participants if p.is_creditor]
    total = _fixed_total(creditors)
    if total > e.amount:
        return _invalid(
            "fixed_credit_exceeds_total",
            "the money that people paid is more than the total expense amount",
            fixed=total,
            amount=e.amount,
        )
    if total < e.amount and all(p.is_fixed for p in creditors):
        return _invalid(
            "fixed_credit_below_total",
            "all creditors paid a fixed amount and the total is less than the expense amount",
            fixed=total,
            amount=e.amount,
        )
    return Right(e)


def all_debtors_fixed(participants: Iterable[Participant]) -> bool:
    """Whether nobody is left to share the remainder of the debt.

    A creditor is a debtor too, so all debtors are fixed only when every
    debtor has an amount and every creditor also appears as a debtor.
    """
    participants = tuple(participants)
    debtors = [p for p in participants if p.is_debtor]
    debtor_names = {p.name for p in debtors}
    return all(p.is_fixed for p in debtors) and all(
        p.name in debtor_names for p in participants if p.is_creditor
    )


def fixed_debt_in_range(e: Expense) -> Either[dict, Expense]:
    total = _fixed_total(p for p in e.participants if p.is_debtor)
    if total > e.amount:
        return _invalid(
            "fixed_debt_exceeds_total",
            "the money owed by people is more than the total expense amount",
            fixed=total,
            amount=e.amount,
        )
    if total < e.amount and all_debtors_fixed(e.participants):
        return _invalid(
            "fixed_debt_below_total",
            "all debtors owe a fixed amount and the total is less than the expense amount",
            fixed=total,
            amount=e.amount,
        )
    return Right(e)


CHECKS = (
    at_least_one_participant,
    names_not_empty,
    known_roles,
    positive_amount,
    fixed_amounts_not_negative,
    at_least_one_creditor,
    no_duplicate_participants,
    fixed_credit_in_range,
    fixed_debt_in_range,
)


def validate_expense(expense: Expense) -> Either[dict, Expense]:
    result: Either[dict, Expense] = Right(normalize_expense(expense))
    for check in CHECKS:
        result = result.bind(check)
    return result


def validate_expenses(expenses: Iterable[Expense]) -> Tuple[List[Expense], List[dict]]:
    return partition_results(validate_expense(e) for e in expenses)
