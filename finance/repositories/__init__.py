"""
Repositories do app finance.

Localização: finance/repositories/
"""
from .transaction_repository import TransactionRepository

__all__ = ['TransactionRepository']
