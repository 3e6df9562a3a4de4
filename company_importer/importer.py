from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

import pandas as pd

from .db.store import CompanyStore, get_store
from .processors.cleaner import CleanCompany, RowCleaner
from .processors.company import CompanyProcessor
from .processors.enrichment import EnrichmentAdapter, OpenAIInferenceService
from .utils.merging import merge_fields
from .utils.csv_normalization import read_csv_rows
from .utils.normalization import (
    bucket_employee_size,
    normalize_city,
    normalize_country,
    normalize_domain,
)

logger = logging.getLogger(__name__)


class ImportValidationError(ValueError):
    """Raised when an upload is missing or cannot be read."""


class CompanyImporter:
    """Runs an upload through cleaning, enrichment and deduplication."""

    def __init__(
        self,
        store: CompanyStore,
        enrichment: Optional[EnrichmentAdapter] = None,
        max_workers: int = 4,
        debug: bool = False
    ):
        self.store = store
        self.enrichment = enrichment
        self.max_workers = max_workers
        self.debug = debug
        self.cleaner = RowCleaner(debug=debug)

    @classmethod
    def from_config(cls, config, debug: bool = False) -> 'CompanyImporter':
        """Build an importer from CLI configuration."""
        enrichment = None
        if config.enrichment_enabled:
            service = OpenAIInferenceService(
                api_key=config.openai_api_key,
                model=config.openai_model,
                timeout=config.enrichment_timeout
            )
            enrichment = EnrichmentAdapter(service, debug=debug)
        return cls(
            get_store(config.database_url),
            enrichment=enrichment,
            max_workers=config.max_workers,
            debug=debug
        )

    def read_file(self, file_path: Union[str, Path]) -> pd.DataFrame:
        """Read and validate an uploaded CSV file.

        Raises:
            ImportValidationError: If the file is missing, unreadable or has no columns
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            raise ImportValidationError(f"Input file not found: {file_path}")

        try:
            df = read_csv_rows(file_path)
        except pd.errors.EmptyDataError:
            raise ImportValidationError(f"Input file is empty: {file_path}")
        except (pd.errors.ParserError, UnicodeDecodeError) as e:
            raise ImportValidationError(f"Could not parse {file_path}: {e}")

        critical_issues, warnings = self.cleaner.validate_columns(df.columns)
        for warning in warnings:
            logger.warning(warning)
        if critical_issues:
            raise ImportValidationError("; ".join(critical_issues))
        return df

    @staticmethod
    def finalize(company: CleanCompany, hints: Dict[str, str]) -> CleanCompany:
        """Fill gaps from enrichment hints and normalize the merged fields again."""
        merged = merge_fields(company.fields(), hints)
        return CleanCompany(
            name=merged['name'].strip() if merged['name'] else None,
            domain=normalize_domain(merged['domain']),
            country=normalize_country(merged['country']),
            city=normalize_city(merged['city']),
            employee_size_bucket=bucket_employee_size(merged['employee_size_bucket']),
            raw_json=company.raw_json
        )

    def enrich_records(self, records: List[CleanCompany]) -> List[CleanCompany]:
        """Enrich records concurrently; every call completes before returning."""
        if self.enrichment is None or not self.enrichment.enabled:
            return records

        needs_enrichment = sum(1 for r in records if r.missing_fields())
        logger.info(f"Enriching {needs_enrichment} of {len(records)} records")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            all_hints = list(executor.map(self.enrichment.enrich, records))

        return [self.finalize(record, hints) for record, hints in zip(records, all_hints)]

    def import_dataframe(self, df: pd.DataFrame, use_ai: bool = False) -> Dict[str, Any]:
        """Clean, optionally enrich and persist every row of a DataFrame.

        Returns:
            Summary with the number of rows processed and per-action counts

        Raises:
            StoreError: On the first failed store operation
        """
        records = self.cleaner.clean_frame(df)
        if use_ai:
            records = self.enrich_records(records)

        processor = CompanyProcessor(self.store, debug=self.debug)
        stats = processor.process(records)

        summary = {'rows_processed': len(records)}
        summary.update(stats)
        return summary

    def import_file(self, file_path: Union[str, Path], use_ai: bool = False) -> Dict[str, Any]:
        """Import a CSV file of company records."""
        logger.info(f"Processing {file_path}")
        df = self.read_file(file_path)
        return self.import_dataframe(df, use_ai=use_ai)
