"""
Main API router.
"""

from fastapi import APIRouter
from curio_finance.api import chat, cron, debug, insights, recurring, settings, transactions

api_router = APIRouter()

api_router.include_router(transactions.router)
api_router.include_router(recurring.router)
api_router.include_router(insights.router)
api_router.include_router(chat.router)
api_router.include_router(cron.router)
api_router.include_router(settings.router)
api_router.include_router(debug.router)
