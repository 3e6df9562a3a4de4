"""Company processor deciding how each cleaned record is persisted."""
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..db.store import CompanyStore
from ..utils.merging import merge_fields
from .base import BaseProcessor
from .cleaner import CleanCompany

# Fields copied onto a domainless record when it is promoted
PROMOTION_FIELDS = ('domain', 'country', 'city', 'employee_size_bucket', 'raw_json')

# Fields refreshed on a domainless record matched by a domainless row
DOMAINLESS_UPDATE_FIELDS = ('country', 'city', 'employee_size_bucket', 'raw_json')


class CompanyProcessor(BaseProcessor[CleanCompany]):
    """Deduplicates cleaned companies against the store.

    Records with a domain are written first, then records without one. For
    each record:

    - domain and name: promote the first domainless record matching
      (name, city) or (name), then upsert on (domain, name)
    - domain only: upsert on (domain, None)
    - name only: update the first domainless match, else insert
    - neither: insert

    Name and city matching is exact. When several records match, the oldest
    one is used.
    """

    def __init__(self, store: CompanyStore, debug: bool = False):
        super().__init__(store, debug)

        # Add company-specific stats
        self.stats.companies_promoted = 0
        self.stats.companies_upserted = 0
        self.stats.companies_updated = 0
        self.stats.companies_inserted = 0

    def validate_data(self, records: List[CleanCompany]) -> Tuple[List[str], List[str]]:
        critical_issues = []
        warnings = []

        unidentified = [i for i, r in enumerate(records) if not r.name and not r.domain]
        if unidentified:
            warnings.append(
                f"Found {len(unidentified)} records without name or domain that will be inserted "
                f"without deduplication. First few row numbers: {', '.join(map(str, unidentified[:3]))}"
            )
        return critical_issues, warnings

    def order_records(self, records: List[CleanCompany]) -> Iterable[CleanCompany]:
        """Domain-bearing records first, then domainless ones, each in input order."""
        with_domain = [r for r in records if r.domain]
        without_domain = [r for r in records if not r.domain]
        if self.debug:
            self.logger.debug(f"{len(with_domain)} records with domain, {len(without_domain)} without")
        return with_domain + without_domain

    def find_domainless_match(self, name: str, city: Optional[str]) -> Optional[Dict[str, Any]]:
        """Find the first domainless company by (name, city), then by name alone."""
        if city:
            matches = self.store.find({'name': name, 'city': city}, domainless=True, limit=1)
            if matches:
                return matches[0]

        matches = self.store.find({'name': name}, domainless=True, limit=1)
        return matches[0] if matches else None

    @staticmethod
    def _payload(company: CleanCompany) -> Dict[str, Any]:
        payload = company.fields()
        payload['raw_json'] = company.raw_json
        return payload

    def _process_record(self, company: CleanCompany) -> str:
        payload = self._payload(company)

        if company.domain:
            # An existing (domain, name) record would collide with the promoted one
            if company.name and not self.store.find({'domain': company.domain, 'name': company.name}):
                match = self.find_domainless_match(company.name, company.city)
                if match:
                    self.store.update(
                        match['id'],
                        merge_fields(payload, match, PROMOTION_FIELDS)
                    )
                    self.stats.companies_promoted += 1
                    if self.debug:
                        self.logger.debug(f"Promoted domainless company {match['id']} to {company.domain}")

            self.store.upsert(payload)
            return 'companies_upserted'

        if company.name:
            match = self.find_domainless_match(company.name, company.city)
            if match:
                self.store.update(
                    match['id'],
                    merge_fields(payload, match, DOMAINLESS_UPDATE_FIELDS)
                )
                if self.debug:
                    self.logger.debug(f"Updated domainless company {match['id']} ({company.name})")
                return 'companies_updated'

        self.store.insert(payload)
        return 'companies_inserted'
