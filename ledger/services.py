import logging
from typing import Any, Callable, Dict, Iterable, Sequence

from ledger.balance import accumulate_balances
from ledger.domain import ROUND_FINAL, Expense, to_money
from ledger.functional import Either
from ledger.settlement import settle_balances
from ledger.validation import validate_expense

logger = logging.getLogger(__name__)


class SettlementService:
    """Facade that validates expenses and settles the ones that pass.

    validators: sequence of functions taking an Expense -> Either[dict, Expense].
    Each validator sees the output of the previous one, so a normalizing
    validator should come first.
    """

    def __init__(
        self,
        validators: Sequence[Callable[[Expense], Either]] = (validate_expense,),
        rounding: str = ROUND_FINAL,
    ):
        self.validators = validators
        self.rounding = rounding

    def check(self, expense: Expense) -> Dict[str, Any]:
        messages = []
        for v in self.validators:
            name = getattr(v, "__name__", str(v))
            try:
                result = v(expense)
            except Exception as e:
                messages.append({"validator": name, "error": "validator_error", "message": f"validator_error: {e}"})
                continue
            if result.is_left():
                messages.append({"validator": name, **result.get_error()})
            else:
                expense = result.get_or_else(expense)
        return {"expense": expense, "messages": messages}

    def report(self, expenses: Iterable[Expense]) -> Dict[str, Any]:
        """Validate, then compute balances and exchanges for the valid expenses."""
        report = {
            "validation": [],
            "balances": {},
            "exchanges": [],
            "residue": {},
        }

        accepted = []
        for index, e in enumerate(expenses):
            checked = self.check(e)
            if checked["messages"]:
                report["validation"].append({"index": index, "messages": checked["messages"]})
            else:
                accepted.append(checked["expense"])

        if report["validation"]:
            logger.info("rejected %d expense(s)", len(report["validation"]))

        balances = accumulate_balances(accepted, self.rounding)
        report["balances"] = {name: to_money(v) for name, v in balances.items()}
        report["exchanges"], report["residue"] = settle_balances(balances)
        return report
