import json
import math
from typing import List, Optional, Tuple

from ledger.domain import Expense, Participant


def participant_from_dict(d: dict) -> Participant:
    return Participant(name=d["name"], role=d["role"], amount=d.get("amount"))


def expense_from_dict(d: dict) -> Expense:
    return Expense(
        participants=tuple(participant_from_dict(p) for p in d["participants"]),
        amount=d["amount"],
        message=d.get("message", ""),
    )


def expense_to_dict(e: Expense) -> dict:
    participants = []
    for p in e.participants:
        item = {"name": p.name, "role": p.role}
        if p.is_fixed:
            item["amount"] = p.amount
        participants.append(item)
    return {"participants": participants, "amount": e.amount, "message": e.message}


def load_expenses(path: str) -> Tuple[Expense, ...]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return tuple(expense_from_dict(e) for e in data["expenses"])


def add_expense(expenses: Tuple[Expense, ...], e: Expense) -> Tuple[Expense, ...]:
    return expenses + (e,)


def remove_expense(expenses: Tuple[Expense, ...], index: int) -> Tuple[Expense, ...]:
    return tuple(e for i, e in enumerate(expenses) if i != index)


def parse_cents(text: str) -> Optional[int]:
    """Read an amount like '12.50' or '12,5' as cents; empty text is None."""
    text = text.strip()
    if not text:
        return None
    cents = float(text.replace(",", ".")) * 100
    if not math.isfinite(cents):
        raise ValueError(f"amount out of range: {text!r}")
    return int(round(cents))


def parse_participants(text: str, role: str) -> List[Participant]:
    """Read 'name' or 'name/12.50' entries separated by spaces."""
    participants = []
    for token in text.split():
        name, _, amount = token.partition("/")
        participants.append(Participant(name=name, role=role, amount=parse_cents(amount)))
    return participants
