"""
Base services module.

Provides the base service class and the transaction manager shared by all
domain services.
"""

from app.services.base.base_service import BaseService
from app.services.base.transaction_manager import TransactionContext, TransactionManager

__all__ = ["BaseService", "TransactionContext", "TransactionManager"]
