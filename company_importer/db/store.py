"""Company record store backed by SQLAlchemy.

Every operation runs in its own session and is committed before returning,
so a batch of operations is not transactional: a failure leaves earlier
writes in place.
"""
from datetime import datetime
from functools import lru_cache
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar
import logging

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Base, Company
from .session import SessionManager
from ..utils.merging import merge_fields

logger = logging.getLogger(__name__)

R = TypeVar('R')

MAX_LIST_LIMIT = 500

# Columns usable in equality filters
FILTER_COLUMNS = ('id', 'name', 'domain', 'country', 'city', 'employee_size_bucket')


class StoreError(RuntimeError):
    """Raised when a store query or write fails."""


def init_db(engine: Engine) -> None:
    """Create the company table if it does not exist."""
    Base.metadata.create_all(engine)


class CompanyStore:
    """Find, insert, update, upsert and clear company records."""

    def __init__(self, session_manager: SessionManager, debug: bool = False):
        self.session_manager = session_manager
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_url(cls, database_url: str, debug: bool = False) -> 'CompanyStore':
        return cls(SessionManager(database_url), debug=debug)

    @property
    def engine(self) -> Engine:
        return self.session_manager.engine

    def _run(self, operation: str, fn: Callable[[Session], R]) -> R:
        """Run fn in a committed session, translating database errors."""
        try:
            with self.session_manager as session:
                return fn(session)
        except SQLAlchemyError as e:
            message = str(getattr(e, 'orig', None) or e)
            self.logger.error(f"Store {operation} failed: {message}")
            raise StoreError(message) from e

    def find(
        self,
        filters: Mapping[str, Any],
        domainless: bool = False,
        limit: int = 1
    ) -> List[Dict[str, Any]]:
        """Find companies by equality filters, oldest first.

        Args:
            filters: Column to value; None values are ignored
            domainless: Only match companies without a domain
            limit: Maximum number of records to return

        Returns:
            Matching records as dictionaries
        """
        unknown = [k for k in filters if k not in FILTER_COLUMNS]
        if unknown:
            raise ValueError(f"Unsupported filter columns: {unknown}")

        def query(session: Session) -> List[Dict[str, Any]]:
            q = session.query(Company)
            if domainless:
                q = q.filter(Company.domain.is_(None))
            for column, value in filters.items():
                if value is not None:
                    q = q.filter(getattr(Company, column) == value)
            q = q.order_by(Company.createdAt.asc(), Company.id.asc()).limit(limit)
            return [company.to_dict() for company in q.all()]

        return self._run('find', query)

    def insert(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert a new company record."""
        def write(session: Session) -> Dict[str, Any]:
            company = Company.create(**record)
            session.add(company)
            session.flush()
            return company.to_dict()

        return self._run('insert', write)

    def update(self, company_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Set the given fields on an existing company.

        Args:
            company_id: Identity of the company to update
            fields: Column to new value

        Raises:
            StoreError: If the company does not exist or the write fails
        """
        def write(session: Session) -> Dict[str, Any]:
            company = session.get(Company, company_id)
            if company is None:
                raise StoreError(f"Company {company_id} not found")
            for column, value in fields.items():
                if column in Company.WRITABLE_FIELDS:
                    setattr(company, column, value)
            company.modifiedAt = datetime.utcnow()
            session.flush()
            return company.to_dict()

        return self._run('update', write)

    def upsert(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert a company or overwrite the one with the same (domain, name).

        A missing name is part of the key, so (domain, None) only matches
        another nameless record for the same domain. When overwriting, the
        incoming non-null values win and null values keep what is stored.
        """
        domain = record.get('domain')
        name = record.get('name')

        def write(session: Session) -> Dict[str, Any]:
            q = session.query(Company).filter(Company.domain == domain)
            q = q.filter(Company.name.is_(None) if name is None else Company.name == name)
            company = q.order_by(Company.createdAt.asc(), Company.id.asc()).first()

            if company is None:
                company = Company.create(**record)
                session.add(company)
                if self.debug:
                    self.logger.debug(f"Upsert inserted new company {domain} ({name})")
            else:
                stored = company.to_dict()
                merged = merge_fields(record, stored, Company.WRITABLE_FIELDS)
                for column, value in merged.items():
                    setattr(company, column, value)
                company.modifiedAt = datetime.utcnow()
                if self.debug:
                    self.logger.debug(f"Upsert overwrote company {company.id} for {domain} ({name})")
            session.flush()
            return company.to_dict()

        return self._run('upsert', write)

    def delete_all(self) -> int:
        """Delete every company record.

        Returns:
            Number of deleted records
        """
        return self._run('delete', lambda session: session.query(Company).delete())

    def count(self) -> int:
        return self._run('count', lambda session: session.query(Company).count())

    def list_companies(
        self,
        country: Optional[str] = None,
        employee_size: Optional[str] = None,
        domain: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Dict[str, Any]], int]:
        """List companies newest first with optional filters.

        Args:
            country: Exact country name
            employee_size: Exact employee size bucket
            domain: Case-insensitive domain substring, ignored if shorter than 2 characters
            limit: Page size, capped at MAX_LIST_LIMIT
            offset: Number of records to skip

        Returns:
            Tuple of (records, total matching count)
        """
        limit = max(min(limit, MAX_LIST_LIMIT), 0)
        offset = max(offset, 0)

        def query(session: Session) -> Tuple[List[Dict[str, Any]], int]:
            q = session.query(Company)
            if country:
                q = q.filter(Company.country == country)
            if employee_size:
                q = q.filter(Company.employee_size_bucket == employee_size)
            if domain and len(domain) >= 2:
                q = q.filter(Company.domain.ilike(f"%{domain}%"))
            total = q.count()
            rows = q.order_by(Company.createdAt.desc(), Company.id.desc()).offset(offset).limit(limit).all()
            return [company.to_dict() for company in rows], total

        return self._run('list', query)


@lru_cache(maxsize=None)
def get_store(database_url: str) -> CompanyStore:
    """Return the process-wide store for a database URL, created on first use."""
    logger.debug("Creating company store")
    return CompanyStore.from_url(database_url)
