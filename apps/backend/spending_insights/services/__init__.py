"""
Services package

Storage access and request orchestration for spending insights.
"""

from .transaction_repository import TransactionRepository, MerchantTotal, CategoryTotal
from .insights_service import InsightsService

__all__ = [
    "TransactionRepository",
    "MerchantTotal",
    "CategoryTotal",
    "InsightsService",
]
