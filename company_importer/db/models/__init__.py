"""SQLAlchemy models for database tables."""

from .base import Base
from .company import Company

__all__ = [
    'Base',
    'Company'
]
