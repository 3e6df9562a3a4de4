"""Company model for storing company information."""
from datetime import datetime
from typing import Any, Dict
import uuid
from sqlalchemy import Column, String, DateTime, JSON, UniqueConstraint
from .base import Base

class Company(Base):
    """Company model.

    Domain-bearing companies are unique on (domain, name). Domainless
    companies have no uniqueness constraint and are matched by name.
    """
    
    __tablename__ = 'Company'
    __table_args__ = (
        UniqueConstraint('domain', 'name', name='uq_company_domain_name'),
    )
    
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String)
    domain = Column(String, index=True)
    country = Column(String, index=True)
    city = Column(String)
    employee_size_bucket = Column(String, index=True)
    raw_json = Column(JSON, nullable=False, default=dict)
    createdAt = Column(DateTime, nullable=False, default=datetime.utcnow)
    modifiedAt = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Columns a caller may set
    WRITABLE_FIELDS = ('name', 'domain', 'country', 'city', 'employee_size_bucket', 'raw_json')
    
    @classmethod
    def create(cls, **fields: Any) -> 'Company':
        """Create a new company record from canonical fields."""
        now = datetime.utcnow()
        values = {k: v for k, v in fields.items() if k in cls.WRITABLE_FIELDS}
        values.setdefault('raw_json', {})
        return cls(id=str(uuid.uuid4()), createdAt=now, modifiedAt=now, **values)

    def to_dict(self) -> Dict[str, Any]:
        """Return the record as a plain dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'domain': self.domain,
            'country': self.country,
            'city': self.city,
            'employee_size_bucket': self.employee_size_bucket,
            'raw_json': self.raw_json,
            'createdAt': self.createdAt,
            'modifiedAt': self.modifiedAt
        }
    
    def __repr__(self):
        """String representation."""
        return f"<Company(domain='{self.domain}', name='{self.name}', city='{self.city}')>"
