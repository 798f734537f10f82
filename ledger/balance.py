from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from ledger.domain import (
    ROUND_FINAL,
    ROUND_PER_EXPENSE,
    ROUNDING_POLICIES,
    Expense,
    Participant,
    UnsplittableExpenseError,
    to_money,
)


def distinct_participants(expense: Expense) -> Tuple[Participant, ...]:
    """Collapse repeated (name, role) entries, the last one wins."""
    by_key = {(p.name, p.role): p for p in expense.participants}
    return tuple(by_key.values())


def split_quota(remaining: float, names: List[str], rounding: str) -> float:
    if not names:
        if remaining != 0:
            raise UnsplittableExpenseError(
                f"{remaining} left to split with no participant to split it among"
            )
        return 0
    quota = remaining / len(names)
    if rounding == ROUND_PER_EXPENSE:
        return to_money(quota)
    return quota


def apply_debts(expense: Expense, balance: Dict[str, float], rounding: str) -> None:
    participants = distinct_participants(expense)
    remaining = expense.amount

    fixed = [p for p in participants if p.is_debtor and p.is_fixed]
    fixed_names = {p.name for p in fixed}
    # creditors owe their part too, unless they were given a fixed debt (even zero)
    others = list(dict.fromkeys(p.name for p in participants if p.name not in fixed_names))

    for p in fixed:
        balance[p.name] -= p.amount
        remaining -= p.amount

    quota = split_quota(remaining, others, rounding)
    for name in others:
        balance[name] -= quota


def apply_credits(expense: Expense, balance: Dict[str, float], rounding: str) -> None:
    participants = distinct_participants(expense)
    remaining = expense.amount

    fixed = [p for p in participants if p.is_creditor and p.is_fixed]
    others = [p.name for p in participants if p.is_creditor and not p.is_fixed]

    for p in fixed:
        balance[p.name] += p.amount
        remaining -= p.amount

    quota = split_quota(remaining, others, rounding)
    for name in others:
        balance[name] += quota


def accumulate_balances(
    expenses: Iterable[Expense], rounding: str = ROUND_FINAL
) -> Dict[str, float]:
    """Fold expenses into a name -> net balance mapping.

    Positive balances are owed money, negative balances owe money.

    With ROUND_FINAL the values stay fractional and are only rounded when an
    exchange or a report is produced. With ROUND_PER_EXPENSE every quota is
    rounded to whole cents as soon as it is computed and the values are ints.
    """
    if rounding not in ROUNDING_POLICIES:
        raise ValueError(f"unknown rounding policy: {rounding!r}")

    balance: Dict[str, float] = defaultdict(int if rounding == ROUND_PER_EXPENSE else float)
    for e in expenses:
        apply_debts(e, balance, rounding)
        apply_credits(e, balance, rounding)

    return {name: balance[name] for name in sorted(balance)}


def compute_balances(
    expenses: Iterable[Expense], rounding: str = ROUND_FINAL
) -> Dict[str, int]:
    return {
        name: to_money(value)
        for name, value in accumulate_balances(expenses, rounding).items()
    }
