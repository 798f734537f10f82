from ledger.domain import ROUND_PER_EXPENSE, Expense, MoneyExchange, creditor, debtor
from ledger.memo import cached_settlement


def make_expenses():
    return (
        Expense(participants=(creditor("a"), debtor("b"), debtor("c")), amount=300),
        Expense(participants=(creditor("b"), debtor("c")), amount=100),
    )


def test_cached_settlement_result():
    cached_settlement.cache_clear()
    assert cached_settlement(make_expenses()) == (
        MoneyExchange("b", "a", 50),
        MoneyExchange("c", "a", 150),
    )


def test_cached_settlement_hits_cache():
    cached_settlement.cache_clear()
    first = cached_settlement(make_expenses())
    second = cached_settlement(make_expenses())

    assert first is second
    assert cached_settlement.cache_info().hits == 1


def test_rounding_is_part_of_the_key():
    cached_settlement.cache_clear()
    expenses = tuple(Expense(participants=(creditor("a"), debtor("b"), debtor("c")), amount=100) for _ in range(10))

    assert cached_settlement(expenses) == (MoneyExchange("b", "a", 333), MoneyExchange("c", "a", 334))
    assert cached_settlement(expenses, ROUND_PER_EXPENSE) == (MoneyExchange("b", "a", 330), MoneyExchange("c", "a", 330))
    assert cached_settlement.cache_info().misses == 2
