# app/utils/analytics.py
"""
Dashboard analytics over a user's ledger.

The compute_* functions are pure: they take an already owner-scoped list of
transactions plus a reference instant and return the derived view. The async
entry points load the rows and delegate, so nothing here is cached between
requests.
"""
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.transaction import get_transactions_for_user
from app.models.transaction import Transaction, TransactionType
from app.schemas.dashboard import CategoryBreakdownItem, DashboardStats, SpendingTrendPoint
from app.schemas.transaction import TransactionFilters
from app.utils.money import ZERO, money_to_float, percent_change, percentage_of, sum_money, to_decimal
from app.utils.timestamp import (
    iter_months,
    month_key,
    previous_month_bounds,
    shift_months,
    short_month_name,
    start_of_month,
    utcnow,
)

# Colors cycle in output order, which is alphabetical by category
CATEGORY_PALETTE: Tuple[str, ...] = (
    "hsl(221 83% 53%)",
    "hsl(142 71% 45%)",
    "hsl(0 84% 60%)",
    "hsl(47 96% 53%)",
    "hsl(271 81% 56%)",
)

DEFAULT_TREND_MONTHS = 6


# ────────────────────────────────────────────────────────────────────────────────
# MAIN ENTRY
# ────────────────────────────────────────────────────────────────────────────────
async def get_dashboard_stats(
    user_id: uuid.UUID,
    db: AsyncSession,
    reference: Optional[datetime] = None,
) -> DashboardStats:
    reference = reference or utcnow()
    previous_start, _ = previous_month_bounds(reference)
    transactions = await get_transactions_for_user(
        user_id, db, TransactionFilters(start_date=previous_start)
    )
    return compute_dashboard_stats(transactions, reference)


async def get_category_breakdown(
    user_id: uuid.UUID,
    db: AsyncSession,
    start_date: datetime,
    end_date: datetime,
) -> List[CategoryBreakdownItem]:
    transactions = await get_transactions_for_user(
        user_id,
        db,
        TransactionFilters(type=TransactionType.expense, start_date=start_date, end_date=end_date),
    )
    return compute_category_breakdown(transactions, start_date, end_date)


async def get_spending_trends(
    user_id: uuid.UUID,
    db: AsyncSession,
    months_back: int = DEFAULT_TREND_MONTHS,
    reference: Optional[datetime] = None,
) -> List[SpendingTrendPoint]:
    reference = reference or utcnow()
    transactions = await get_transactions_for_user(
        user_id, db, TransactionFilters(start_date=shift_months(reference, -months_back))
    )
    return compute_spending_trends(transactions, months_back, reference)


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS – COMMON
# ────────────────────────────────────────────────────────────────────────────────
def _is_expense(tx: Transaction) -> bool:
    return tx.type == TransactionType.expense


def _is_income(tx: Transaction) -> bool:
    return tx.type == TransactionType.income


def _total(transactions: Iterable[Transaction], start: datetime, end: Optional[datetime] = None) -> Decimal:
    """Sum of amounts with start <= date (< end when given)"""
    return sum_money(
        tx.amount
        for tx in transactions
        if tx.transaction_date >= start and (end is None or tx.transaction_date < end)
    )


# ────────────────────────────────────────────────────────────────────────────────
# DASHBOARD STATS
# ────────────────────────────────────────────────────────────────────────────────
def compute_dashboard_stats(transactions: Sequence[Transaction], reference: datetime) -> DashboardStats:
    """
    Month-to-date totals and the change against the previous calendar month.

    The current month has no upper bound, so future-dated entries of this
    month count. The previous month is [first instant, first instant of the
    current month), which covers its whole last day.
    """
    current_start = start_of_month(reference)
    previous_start, previous_end = previous_month_bounds(reference)

    expenses = [tx for tx in transactions if _is_expense(tx)]
    income = [tx for tx in transactions if _is_income(tx)]

    this_month_expenses = _total(expenses, current_start)
    this_month_income = _total(income, current_start)
    last_month_expenses = _total(expenses, previous_start, previous_end)
    last_month_income = _total(income, previous_start, previous_end)

    net = this_month_income - this_month_expenses

    return DashboardStats(
        total_balance=money_to_float(net),
        this_month_expenses=money_to_float(this_month_expenses),
        this_month_income=money_to_float(this_month_income),
        savings_rate=percentage_of(net, this_month_income),
        expense_change_pct=percent_change(this_month_expenses, last_month_expenses),
        income_change_pct=percent_change(this_month_income, last_month_income),
    )


# ────────────────────────────────────────────────────────────────────────────────
# CATEGORY BREAKDOWN
# ────────────────────────────────────────────────────────────────────────────────
def compute_category_breakdown(
    transactions: Sequence[Transaction],
    start_date: datetime,
    end_date: datetime,
) -> List[CategoryBreakdownItem]:
    """
    Expense totals per category within [start_date, end_date].

    Every category present gets its own row; rows are sorted by name
    (case-insensitive) and colored by position.
    """
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for tx in transactions:
        if _is_expense(tx) and start_date <= tx.transaction_date <= end_date:
            totals[tx.category] += to_decimal(tx.amount)

    grand_total = sum_money(totals.values())

    breakdown = []
    for index, category in enumerate(sorted(totals, key=lambda name: (name.lower(), name))):
        amount = totals[category]
        breakdown.append(
            CategoryBreakdownItem(
                category=category,
                amount=money_to_float(amount),
                percentage=percentage_of(amount, grand_total),
                color_index=index % len(CATEGORY_PALETTE),
                color=CATEGORY_PALETTE[index % len(CATEGORY_PALETTE)],
            )
        )
    return breakdown


# ────────────────────────────────────────────────────────────────────────────────
# SPENDING TRENDS
# ────────────────────────────────────────────────────────────────────────────────
def compute_spending_trends(
    transactions: Sequence[Transaction],
    months_back: int,
    reference: datetime,
) -> List[SpendingTrendPoint]:
    """
    Monthly income/expense totals from `months_back` calendar months before
    `reference` onwards, oldest first.

    Buckets are keyed by (year, month). Months without activity are emitted as
    zero rows so charts stay continuous.
    """
    if months_back < 0:
        raise ValueError("months_back must be non-negative")

    window_start = shift_months(reference, -months_back)
    in_window = [tx for tx in transactions if tx.transaction_date >= window_start]

    last_key = max([month_key(reference)] + [month_key(tx.transaction_date) for tx in in_window])
    buckets: Dict[Tuple[int, int], Dict[str, Decimal]] = {
        key: {"income": ZERO, "expenses": ZERO}
        for key in iter_months(month_key(window_start), last_key)
    }

    for tx in in_window:
        bucket = buckets[month_key(tx.transaction_date)]
        if _is_expense(tx):
            bucket["expenses"] += to_decimal(tx.amount)
        elif _is_income(tx):
            bucket["income"] += to_decimal(tx.amount)

    return [
        SpendingTrendPoint(
            month=short_month_name(month),
            year=year,
            total_amount=money_to_float(bucket["income"] + bucket["expenses"]),
            income=money_to_float(bucket["income"]),
            expenses=money_to_float(bucket["expenses"]),
        )
        for (year, month), bucket in buckets.items()
    ]
