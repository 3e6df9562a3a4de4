"""Company CSV importer package."""

from .importer import CompanyImporter, ImportValidationError
from .processors import CompanyProcessor, EnrichmentAdapter, RowCleaner

__all__ = ['CompanyImporter', 'ImportValidationError', 'CompanyProcessor', 'EnrichmentAdapter', 'RowCleaner']
