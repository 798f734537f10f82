"""Turn balances into the money exchanges that settle them.

Debtors and creditors are paired in name order: the first debtor pays the
first creditor as much as one of them needs, whoever is left over is paired
with the next one, and so on until a side runs out.

The result is correct but not always minimal. Finding the fewest exchanges
is NP-complete and this greedy pairing is good enough for small groups.

Balances may be fractional. Before pairing they are rounded to whole cents
so that their total is kept, which means every exchange is exact and nobody
ends up more than a cent away from zero.
"""
import logging
import math
from functools import partial
from typing import Dict, Iterable, List, Mapping, Tuple

from ledger.balance import accumulate_balances
from ledger.domain import (
    ROUND_FINAL,
    Expense,
    MoneyExchange,
    amounts_equal,
    is_settled,
    to_money,
)
from ledger.functional import pipe

logger = logging.getLogger(__name__)


def whole_cents(balances: Mapping[str, float]) -> Dict[str, int]:
    """Round each balance to cents while keeping the rounded total.

    Everyone is rounded down, then the missing cents go to the balances with
    the largest fractional part (ties by name). No value moves by a cent or more.
    """
    cents = {name: math.floor(value) for name, value in balances.items()}
    missing = to_money(sum(balances.values())) - sum(cents.values())
    by_remainder = sorted(balances, key=lambda name: (-round(balances[name] - cents[name], 6), name))
    for name in by_remainder[:missing]:
        cents[name] += 1
    return cents


def split_balances(
    balances: Mapping[str, float]
) -> Tuple[List[Tuple[str, int]], List[Tuple[str, int]]]:
    """Return (debtors, creditors) sorted by name, amounts as positive cents."""
    open_balances = {name: value for name, value in balances.items() if not is_settled(value)}
    cents = whole_cents(open_balances)
    debtors = sorted((name, -value) for name, value in cents.items() if value < 0)
    creditors = sorted((name, value) for name, value in cents.items() if value > 0)
    return debtors, creditors


def match_balances(
    balances: Mapping[str, float]
) -> Tuple[List[MoneyExchange], Dict[str, int]]:
    """Pair debtors with creditors; return the exchanges and any unmatched balances."""
    debtors, creditors = split_balances(balances)
    exchanges: List[MoneyExchange] = []

    i = j = 0
    while i < len(debtors) and j < len(creditors):
        dname, debt = debtors[i]
        cname, credit = creditors[j]
        # a one-cent gap only closes a pair when nobody is left to pass it on to
        last_pair = i == len(debtors) - 1 or j == len(creditors) - 1
        if debt == credit or (last_pair and amounts_equal(debt, credit)):
            exchanges.append(MoneyExchange(dname, cname, credit))
            i += 1
            j += 1
        elif debt < credit:
            exchanges.append(MoneyExchange(dname, cname, debt))
            creditors[j] = (cname, credit - debt)
            i += 1
        else:
            exchanges.append(MoneyExchange(dname, cname, credit))
            debtors[i] = (dname, debt - credit)
            j += 1

    residue = {name: -debt for name, debt in debtors[i:]}
    residue.update((name, credit) for name, credit in creditors[j:])
    return exchanges, {name: value for name, value in residue.items() if not is_settled(value)}


def log_drift(balances: Mapping[str, float]) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    total = sum(to_money(v) for v in balances.values())
    if not is_settled(total):
        logger.debug("balances should sum to 0 (or +-1), got %d: %s", total, dict(balances))


def settle_balances(
    balances: Mapping[str, float]
) -> Tuple[List[MoneyExchange], Dict[str, int]]:
    """Like match_balances, but reports leftover balances to the log."""
    log_drift(balances)
    exchanges, residue = match_balances(balances)
    if residue:
        side = "creditors" if next(iter(residue.values())) > 0 else "debtors"
        logger.warning("ran out of counterparts but %s are left unsettled: %s", side, residue)
    return exchanges, residue


def plan_settlement(balances: Mapping[str, float]) -> List[MoneyExchange]:
    exchanges, _ = settle_balances(balances)
    return exchanges


def settlement_residue(balances: Mapping[str, float]) -> Dict[str, int]:
    _, residue = match_balances(balances)
    return residue


def compute_settlement(
    expenses: Iterable[Expense], rounding: str = ROUND_FINAL
) -> List[MoneyExchange]:
    """Exchanges settling every debt in ``expenses``, sorted by debtor then creditor."""
    return pipe(expenses, partial(accumulate_balances, rounding=rounding), plan_settlement)
