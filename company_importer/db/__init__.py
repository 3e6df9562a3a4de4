"""Database models, sessions and the company store."""

from .session import SessionManager
from .store import CompanyStore, StoreError, get_store, init_db

__all__ = ['SessionManager', 'CompanyStore', 'StoreError', 'get_store', 'init_db']
