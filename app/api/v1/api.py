from fastapi import APIRouter

from app.api.v1.routes import ai, budgets, categories, currencies, dashboard, goals, notifications, transactions, users

api_router = APIRouter()

api_router.include_router(users.router)
api_router.include_router(transactions.router)
api_router.include_router(dashboard.router)
api_router.include_router(budgets.router)
api_router.include_router(goals.router)
api_router.include_router(categories.router)
api_router.include_router(notifications.router)
api_router.include_router(ai.router)
api_router.include_router(currencies.router)
