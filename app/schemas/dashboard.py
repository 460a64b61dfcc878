# app/schemas/dashboard.py
from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_balance: float
    this_month_expenses: float
    this_month_income: float
    savings_rate: float
    expense_change_pct: float
    income_change_pct: float


class CategoryBreakdownItem(BaseModel):
    category: str
    amount: float
    percentage: float
    color_index: int
    color: str


class SpendingTrendPoint(BaseModel):
    month: str
    year: int
    total_amount: float
    income: float
    expenses: float
