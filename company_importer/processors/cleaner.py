"""Row cleaning: map arbitrary spreadsheet rows onto canonical company fields."""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging
import re

import pandas as pd

from ..utils.csv_normalization import dataframe_records, normalize_column_name, validate_json_data
from ..utils.normalization import (
    bucket_employee_size,
    domain_label,
    normalize_city,
    normalize_country,
    normalize_domain,
)

logger = logging.getLogger(__name__)

# Fields that cleaning and enrichment can fill
COMPANY_FIELDS = ('name', 'domain', 'country', 'city', 'employee_size_bucket')


@dataclass
class CleanCompany:
    """A company record with canonical fields."""

    name: Optional[str] = None
    domain: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    employee_size_bucket: Optional[str] = None
    raw_json: Dict[str, Any] = field(default_factory=dict)

    def fields(self) -> Dict[str, Optional[str]]:
        """Return the fillable fields as a dictionary."""
        return {name: getattr(self, name) for name in COMPANY_FIELDS}

    def missing_fields(self) -> List[str]:
        """Return the names of fillable fields that are still empty."""
        return [name for name in COMPANY_FIELDS if not getattr(self, name)]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RowCleaner:
    """Cleans raw rows with unknown column names into CleanCompany records."""

    # Candidate column names per field, in priority order
    NAME_ALIASES = ['name', 'company', 'company name', 'company_name', 'organization', 'org']
    DOMAIN_ALIASES = ['domain', 'website', 'url', 'website url', 'website_url']
    COUNTRY_ALIASES = ['country', 'country code', 'country_code', 'location']
    CITY_ALIASES = ['city', 'town']
    EMPLOYEE_ALIASES = [
        'employees',
        'employee_size',
        'employee range',
        'size',
        'headcount',
        'number of employees'
    ]

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def all_aliases(cls) -> List[str]:
        return (cls.NAME_ALIASES + cls.DOMAIN_ALIASES + cls.COUNTRY_ALIASES
                + cls.CITY_ALIASES + cls.EMPLOYEE_ALIASES)

    @staticmethod
    def _column_index(columns: Iterable[Any]) -> Dict[str, Any]:
        """Build a lowercase lookup of column names, first occurrence wins."""
        index = {}
        for column in columns:
            key = normalize_column_name(column).lower()
            index.setdefault(key, column)
        return index

    def validate_columns(self, columns: Iterable[Any]) -> Tuple[List[str], List[str]]:
        """Validate the header of an upload before processing.

        Args:
            columns: Column names found in the file

        Returns:
            Tuple of (critical_issues, warnings)
        """
        critical_issues = []
        warnings = []

        index = self._column_index(columns)
        if not index:
            critical_issues.append("File has no columns")
            return critical_issues, warnings

        if not any(alias in index for alias in self.all_aliases()):
            warnings.append(
                "No recognised company columns found - rows will only keep their raw data"
            )
        elif not any(alias in index for alias in self.NAME_ALIASES + self.DOMAIN_ALIASES):
            warnings.append("No name or domain columns found - deduplication will be limited")

        return critical_issues, warnings

    @staticmethod
    def _pick(row: Mapping[str, Any], index: Dict[str, Any], aliases: List[str]) -> Optional[Any]:
        """Return the first non-empty value among the alias columns."""
        for alias in aliases:
            key = index.get(alias)
            if key is None:
                continue
            value = row.get(key)
            if value is not None and not pd.isna(value) and str(value).strip() != '':
                return value
        return None

    @staticmethod
    def name_from_domain(domain: str) -> Optional[str]:
        """Derive a display name from a domain ("open-ai.com" -> "Open ai")."""
        label = domain_label(domain)
        if not label:
            return None
        name = re.sub(r'[-_]+', ' ', label)
        name = ' '.join(name.split())
        return name[0].upper() + name[1:] if name else None

    def clean(self, row: Mapping[str, Any]) -> CleanCompany:
        """Clean a single raw row.

        Args:
            row: Mapping of column name to raw value

        Returns:
            CleanCompany with normalized fields and the raw row attached
        """
        index = self._column_index(row.keys())

        domain = normalize_domain(self._pick(row, index, self.DOMAIN_ALIASES))

        raw_name = self._pick(row, index, self.NAME_ALIASES)
        name = str(raw_name).strip() if raw_name is not None else None
        if not name and domain:
            name = self.name_from_domain(domain)
            if self.debug:
                self.logger.debug(f"Derived name '{name}' from domain {domain}")

        country_raw = self._pick(row, index, self.COUNTRY_ALIASES)
        city_raw = self._pick(row, index, self.CITY_ALIASES)
        employees_raw = self._pick(row, index, self.EMPLOYEE_ALIASES)

        country = normalize_country(country_raw)

        city = normalize_city(city_raw)
        if not city and country_raw is not None and ',' in str(country_raw):
            # Locations like "San Francisco, USA"
            city = normalize_city(str(country_raw).split(',')[0].strip())

        return CleanCompany(
            name=name or None,
            domain=domain,
            country=country,
            city=city,
            employee_size_bucket=bucket_employee_size(employees_raw),
            raw_json=validate_json_data(dict(row))
        )

    def clean_frame(self, df: pd.DataFrame) -> List[CleanCompany]:
        """Clean every row of a DataFrame."""
        return [self.clean(row) for row in dataframe_records(df)]
