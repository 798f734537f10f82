from functools import lru_cache
from typing import Tuple

from ledger.domain import ROUND_FINAL, Expense, MoneyExchange
from ledger.settlement import compute_settlement


@lru_cache(maxsize=128)
def cached_settlement(
    expenses: Tuple[Expense, ...], rounding: str = ROUND_FINAL
) -> Tuple[MoneyExchange, ...]:
    return tuple(compute_settlement(expenses, rounding))
