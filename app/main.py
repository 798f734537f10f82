import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import streamlit as st
import pandas as pd
import plotly.express as px

from ledger.config import load_config, configure_logging
from ledger.domain import CREDITOR, DEBTOR, Expense
from ledger.services import SettlementService
from ledger.transforms import (
    add_expense,
    expense_to_dict,
    load_expenses,
    parse_cents,
    parse_participants,
    remove_expense,
)
from ledger.validation import validate_expense

config = load_config()
configure_logging(config.LOG_LEVEL)

st.set_page_config(page_title="Shared Expenses", layout="wide")


def fmt_money(cents: int) -> str:
    return f"{cents / 100:,.2f} {config.CURRENCY}"


if "expenses" not in st.session_state:
    try:
        st.session_state.expenses = load_expenses(config.SEED_PATH)
    except FileNotFoundError:
        st.session_state.expenses = ()

service = SettlementService(rounding=config.ROUNDING)

st.sidebar.markdown("### ➕ New expense")
with st.sidebar.form("new_expense", clear_on_submit=True):
    paid_by = st.text_input("Paid by", help="e.g. `anna` or `anna/20 bob/10`")
    owed_by = st.text_input("Owed by", help="leave empty to split among payers only")
    amount = st.text_input("Amount", value="0.00")
    message = st.text_input("Note")
    submitted = st.form_submit_button("Add")

if submitted:
    try:
        expense = Expense(
            participants=tuple(parse_participants(paid_by, CREDITOR) + parse_participants(owed_by, DEBTOR)),
            amount=parse_cents(amount) or 0,
            message=message,
        )
    except (ValueError, OverflowError):
        st.sidebar.error("❌ Amounts must be numbers like 12.50")
    else:
        result = validate_expense(expense)
        if result.is_right():
            st.session_state.expenses = add_expense(st.session_state.expenses, result.get_or_else(expense))
            st.sidebar.success("✅ Expense added")
        else:
            st.sidebar.error(f"❌ {result.get_error()['message']}")

report = service.report(st.session_state.expenses)

st.title("💸 Who owes whom")

k1, k2, k3 = st.columns(3)
with k1:
    st.metric("Expenses", len(st.session_state.expenses))
with k2:
    st.metric("Participants", len(report["balances"]))
with k3:
    st.metric("Exchanges", len(report["exchanges"]))

if report["validation"]:
    for item in report["validation"]:
        for msg in item["messages"]:
            st.warning(f"⚠️ Expense #{item['index'] + 1} ignored: {msg['message']}")

if report["residue"]:
    st.error("🔴 Balances do not add up, some amounts could not be settled.")

col_bal, col_ex = st.columns([3, 2])
with col_bal:
    st.subheader("📊 Balances")
    if report["balances"]:
        df_bal = pd.DataFrame(
            [{"Participant": name, "Balance": cents / 100} for name, cents in report["balances"].items()]
        )
        fig_bal = px.bar(
            df_bal,
            x="Participant",
            y="Balance",
            color=df_bal["Balance"].map(lambda v: "owed" if v > 0 else "owes"),
            labels={"Balance": f"Balance ({config.CURRENCY})"},
            template="plotly_dark",
        )
        st.plotly_chart(fig_bal, use_container_width=True)
    else:
        st.info("No expenses yet.")

with col_ex:
    st.subheader("🤝 Settlement")
    if report["exchanges"]:
        df_ex = pd.DataFrame(
            [
                {"From": ex.debtor, "To": ex.creditor, "Amount": fmt_money(ex.amount)}
                for ex in report["exchanges"]
            ]
        )
        st.table(df_ex)
        st.download_button("⬇ Download CSV", df_ex.to_csv(index=False), file_name="settlement.csv")
    else:
        st.success("All clean!")

st.subheader("🧾 Expenses")
if st.session_state.expenses:
    rows = []
    for e in st.session_state.expenses:
        d = expense_to_dict(e)
        rows.append({
            "Note": d["message"],
            "Amount": fmt_money(d["amount"]),
            "Paid by": ", ".join(p["name"] for p in d["participants"] if p["role"] == CREDITOR),
            "Owed by": ", ".join(
                f"{p['name']}/{p['amount'] / 100:.2f}" if "amount" in p else p["name"]
                for p in d["participants"] if p["role"] == DEBTOR
            ),
        })
    st.dataframe(pd.DataFrame(rows), use_container_width=True)

    to_remove = st.selectbox(
        "Remove expense",
        options=list(range(len(st.session_state.expenses))),
        format_func=lambda i: f"#{i + 1} {rows[i]['Note'] or rows[i]['Amount']}",
    )
    if st.button("🗑 Remove"):
        st.session_state.expenses = remove_expense(st.session_state.expenses, to_remove)
        st.rerun()
