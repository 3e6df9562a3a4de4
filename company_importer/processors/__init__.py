"""
Processors package for cleaning, enriching and persisting company records.
"""

from .cleaner import CleanCompany, RowCleaner
from .company import CompanyProcessor
from .enrichment import EnrichmentAdapter, InferenceService, OpenAIInferenceService

__all__ = [
    'CleanCompany',
    'RowCleaner',
    'CompanyProcessor',
    'EnrichmentAdapter',
    'InferenceService',
    'OpenAIInferenceService'
]
