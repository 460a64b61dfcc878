# app/models/__init__.py
# Importing the modules registers every table on Base.metadata
from app.core.auth import User
from app.models.transaction import Transaction, TransactionType, Mood
from app.models.budget import Budget, BudgetPeriod
from app.models.goal import Goal
from app.models.category import Category
from app.models.notification import Notification, NotificationType

__all__ = [
    "User",
    "Transaction",
    "TransactionType",
    "Mood",
    "Budget",
    "BudgetPeriod",
    "Goal",
    "Category",
    "Notification",
    "NotificationType",
]
