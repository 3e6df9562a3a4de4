"""Utility functions and helpers."""

from .merging import merge_fields
from .normalization import (
    EMPLOYEE_BUCKETS,
    bucket_employee_size,
    normalize_city,
    normalize_country,
    normalize_domain,
)

__all__ = [
    'EMPLOYEE_BUCKETS',
    'bucket_employee_size',
    'normalize_city',
    'normalize_country',
    'normalize_domain',
    'merge_fields'
]
