import math
from dataclasses import dataclass
from typing import Optional, Tuple

Money = int  # minor currency units (cents)

CREDITOR = "creditor"
DEBTOR = "debtor"
ROLES = (CREDITOR, DEBTOR)

# balances closer than this are considered equal
TOLERANCE = 1

# rounding policies for the balance accumulator
ROUND_FINAL = "final"
ROUND_PER_EXPENSE = "per_expense"
ROUNDING_POLICIES = (ROUND_FINAL, ROUND_PER_EXPENSE)


class UnsplittableExpenseError(ValueError):
    """An expense left an amount to split but nobody to split it among."""


@dataclass(frozen=True)
class Participant:
    name: str                     # already normalized (lowercase)
    role: str                     # CREDITOR or DEBTOR
    amount: Optional[int] = None  # fixed share, None for an even split

    @property
    def is_creditor(self) -> bool:
        return self.role == CREDITOR

    @property
    def is_debtor(self) -> bool:
        return self.role == DEBTOR

    @property
    def is_fixed(self) -> bool:
        return self.amount is not None


@dataclass(frozen=True)
class Expense:
    participants: Tuple[Participant, ...]
    amount: int
    message: str = ""


@dataclass(frozen=True)
class MoneyExchange:
    debtor: str
    creditor: str
    amount: int  # always positive


def creditor(name: str, amount: Optional[int] = None) -> Participant:
    return Participant(name=name, role=CREDITOR, amount=amount)


def debtor(name: str, amount: Optional[int] = None) -> Participant:
    return Participant(name=name, role=DEBTOR, amount=amount)


def is_settled(balance: float) -> bool:
    return abs(balance) <= TOLERANCE


def amounts_equal(debt: float, credit: float) -> bool:
    # some debts cannot be split exactly, one cent of error is accepted
    return abs(debt - credit) <= TOLERANCE


def to_money(value: float) -> Money:
    # half away from zero
    return int(math.copysign(math.floor(abs(value) + 0.5), value))
