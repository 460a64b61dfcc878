"""Tests for the dashboard aggregations (pure functions, no database)."""
import calendar
from datetime import datetime
from decimal import Decimal

import pytest

from app.models.transaction import Transaction, TransactionType
from app.utils.analytics import (
    CATEGORY_PALETTE,
    compute_category_breakdown,
    compute_dashboard_stats,
    compute_spending_trends,
)


def make_tx(amount, when, type=TransactionType.expense, category="food"):
    return Transaction(
        amount=Decimal(str(amount)),
        type=type,
        category=category,
        description="test",
        transaction_date=when,
        tags=[],
    )


def expense(amount, when, category="food"):
    return make_tx(amount, when, TransactionType.expense, category)


def income(amount, when, category="salary"):
    return make_tx(amount, when, TransactionType.income, category)


REFERENCE = datetime(2024, 3, 20, 15, 0)


class TestDashboardStats:
    def test_balance_is_income_minus_expenses(self):
        txs = [
            income(1000, datetime(2024, 3, 1, 9, 0)),
            expense(250, datetime(2024, 3, 5)),
            expense(50.5, datetime(2024, 3, 6)),
        ]
        stats = compute_dashboard_stats(txs, REFERENCE)

        assert stats.this_month_income == 1000.0
        assert stats.this_month_expenses == 300.5
        assert stats.total_balance == stats.this_month_income - stats.this_month_expenses
        assert stats.savings_rate == pytest.approx(69.95)

    def test_expense_change_against_last_month(self):
        txs = [
            expense(100, datetime(2024, 2, 10)),
            expense(150, datetime(2024, 3, 10)),
        ]
        stats = compute_dashboard_stats(txs, REFERENCE)

        assert stats.expense_change_pct == pytest.approx(50.0)

    def test_no_spending_last_month_reports_zero_change(self):
        stats = compute_dashboard_stats([expense(80, datetime(2024, 3, 2))], REFERENCE)

        assert stats.expense_change_pct == 0.0
        assert stats.income_change_pct == 0.0

    def test_no_income_gives_zero_savings_rate(self):
        stats = compute_dashboard_stats([expense(80, datetime(2024, 3, 2))], REFERENCE)

        assert stats.savings_rate == 0.0
        assert stats.total_balance == -80.0

    def test_last_day_of_previous_month_is_counted(self):
        txs = [
            expense(40, datetime(2024, 2, 29, 23, 30)),
            expense(60, datetime(2024, 3, 1, 0, 0)),
        ]
        stats = compute_dashboard_stats(txs, REFERENCE)

        # 60 vs 40 last month
        assert stats.this_month_expenses == 60.0
        assert stats.expense_change_pct == pytest.approx(50.0)

    def test_future_dated_entries_in_current_month_count(self):
        stats = compute_dashboard_stats([expense(20, datetime(2024, 3, 30))], REFERENCE)

        assert stats.this_month_expenses == 20.0

    def test_older_months_are_ignored(self):
        stats = compute_dashboard_stats([expense(500, datetime(2024, 1, 15))], REFERENCE)

        assert stats.this_month_expenses == 0.0
        assert stats.expense_change_pct == 0.0

    def test_january_compares_with_december_of_previous_year(self):
        reference = datetime(2025, 1, 10)
        txs = [
            expense(200, datetime(2024, 12, 31, 12, 0)),
            expense(100, datetime(2025, 1, 2)),
        ]
        stats = compute_dashboard_stats(txs, reference)

        assert stats.expense_change_pct == pytest.approx(-50.0)


class TestCategoryBreakdown:
    START = datetime(2024, 3, 1)
    END = datetime(2024, 3, 31, 23, 59, 59)

    def test_two_categories(self):
        txs = [
            expense(50, datetime(2024, 3, 5), "food"),
            expense(30, datetime(2024, 3, 8), "transport"),
        ]
        breakdown = compute_category_breakdown(txs, self.START, self.END)

        assert [(row.category, row.amount, row.percentage) for row in breakdown] == [
            ("food", 50.0, 62.5),
            ("transport", 30.0, 37.5),
        ]

    def test_percentages_sum_to_one_hundred(self):
        txs = [
            expense(10, datetime(2024, 3, 2), "a"),
            expense(20, datetime(2024, 3, 3), "b"),
            expense(33.33, datetime(2024, 3, 4), "c"),
        ]
        breakdown = compute_category_breakdown(txs, self.START, self.END)

        assert sum(row.percentage for row in breakdown) == pytest.approx(100.0)

    def test_rows_are_alphabetical_and_colors_cycle(self):
        names = ["zoo", "Books", "apple", "cafe", "dining", "energy"]
        txs = [expense(5, datetime(2024, 3, 10), name) for name in names]
        breakdown = compute_category_breakdown(txs, self.START, self.END)

        assert [row.category for row in breakdown] == ["apple", "Books", "cafe", "dining", "energy", "zoo"]
        assert [row.color_index for row in breakdown] == [0, 1, 2, 3, 4, 0]
        assert breakdown[5].color == CATEGORY_PALETTE[0]

    def test_income_and_out_of_range_rows_are_excluded(self):
        txs = [
            expense(50, datetime(2024, 3, 5), "food"),
            income(900, datetime(2024, 3, 1), "salary"),
            expense(70, datetime(2024, 2, 28), "food"),
            expense(15, datetime(2024, 4, 1), "food"),
        ]
        breakdown = compute_category_breakdown(txs, self.START, self.END)

        assert len(breakdown) == 1
        assert breakdown[0].amount == 50.0
        assert breakdown[0].percentage == 100.0

    def test_boundaries_are_inclusive(self):
        txs = [
            expense(1, self.START, "first"),
            expense(1, self.END, "last"),
        ]
        breakdown = compute_category_breakdown(txs, self.START, self.END)

        assert [row.category for row in breakdown] == ["first", "last"]

    def test_no_expenses_gives_empty_list(self):
        assert compute_category_breakdown([], self.START, self.END) == []


class TestSpendingTrends:
    def test_empty_months_are_zero_rows(self):
        txs = [expense(25, datetime(2024, 2, 10))]
        trends = compute_spending_trends(txs, 2, REFERENCE)

        assert [(row.month, row.year) for row in trends] == [("Jan", 2024), ("Feb", 2024), ("Mar", 2024)]
        assert [row.expenses for row in trends] == [0.0, 25.0, 0.0]

    def test_income_expenses_and_total(self):
        txs = [
            income(1000, datetime(2024, 3, 1)),
            expense(300, datetime(2024, 3, 2)),
            expense(200, datetime(2024, 3, 3)),
        ]
        trends = compute_spending_trends(txs, 1, REFERENCE)

        assert len(trends) == 2
        row = trends[-1]
        assert (row.income, row.expenses, row.total_amount) == (1000.0, 500.0, 1500.0)

    def test_same_month_in_different_years_are_separate(self):
        reference = datetime(2025, 1, 20)
        txs = [
            expense(10, datetime(2024, 1, 25)),
            expense(20, datetime(2025, 1, 5)),
        ]
        trends = compute_spending_trends(txs, 12, reference)

        assert len(trends) == 13
        assert (trends[0].month, trends[0].year, trends[0].expenses) == ("Jan", 2024, 10.0)
        assert (trends[-1].month, trends[-1].year, trends[-1].expenses) == ("Jan", 2025, 20.0)

    def test_rows_before_window_start_are_excluded(self):
        # Window starts 2024-01-20; the 10th is outside it
        txs = [expense(99, datetime(2024, 1, 10))]
        trends = compute_spending_trends(txs, 2, REFERENCE)

        assert trends[0].expenses == 0.0

    def test_future_transaction_extends_the_range(self):
        txs = [expense(5, datetime(2024, 5, 2))]
        trends = compute_spending_trends(txs, 1, REFERENCE)

        assert [row.month for row in trends] == ["Feb", "Mar", "Apr", "May"]
        assert trends[-1].expenses == 5.0

    def test_month_end_reference_clamps_window_start(self):
        trends = compute_spending_trends([], 1, datetime(2024, 3, 31))

        assert [row.month for row in trends] == ["Feb", "Mar"]

    def test_negative_months_rejected(self):
        with pytest.raises(ValueError):
            compute_spending_trends([], -1, REFERENCE)

    def test_month_labels_do_not_follow_the_locale(self, monkeypatch):
        localized = ["", "janv.", "févr.", "mars", "avr.", "mai", "juin",
                     "juil.", "août", "sept.", "oct.", "nov.", "déc."]
        monkeypatch.setattr(calendar, "month_abbr", localized)

        trends = compute_spending_trends([], 2, REFERENCE)

        assert [row.month for row in trends] == ["Jan", "Feb", "Mar"]
