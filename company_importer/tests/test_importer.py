"""End-to-end tests for CSV imports."""

import pandas as pd
import pytest

from ..importer import CompanyImporter, ImportValidationError
from ..processors.enrichment import EnrichmentAdapter
from .conftest import FakeInferenceService, create_test_csv


def test_import_file_cleans_and_persists(store):
    csv_file = create_test_csv([
        {'Company Name': 'Acme GmbH', 'Website': 'https://www.acme.de/about', 'Country': 'DE', 'City': 'Berlin 10115', 'Employees': '45'},
        {'Company Name': 'Globex', 'Website': '', 'Country': 'Remote, US', 'City': 'Springfield', 'Employees': '1,200'},
        {'Company Name': '', 'Website': 'initech.com', 'Country': '', 'City': '', 'Employees': ''},
    ])
    try:
        summary = CompanyImporter(store).import_file(csv_file)
    finally:
        csv_file.unlink()

    assert summary['rows_processed'] == 3
    assert summary['companies_upserted'] == 2
    assert summary['companies_inserted'] == 1

    rows, total = store.list_companies()
    assert total == 3
    by_domain = {r['domain']: r for r in rows}

    acme = by_domain['acme.de']
    assert acme['name'] == 'Acme GmbH'
    assert acme['country'] == 'Germany'
    assert acme['city'] == 'Berlin'
    assert acme['employee_size_bucket'] == '11-50'
    assert acme['raw_json']['Company Name'] == 'Acme GmbH'

    assert by_domain['initech.com']['name'] == 'Initech'

    globex = by_domain[None]
    assert globex['country'] == 'United States'
    assert globex['employee_size_bucket'] == '1 001-5 000'


def test_reimport_promotes_domainless_company(store):
    importer = CompanyImporter(store)
    importer.import_dataframe(pd.DataFrame([{'name': 'Airbnb', 'city': 'San Francisco'}]))
    summary = importer.import_dataframe(pd.DataFrame([{'name': 'Airbnb', 'domain': 'airbnb.com'}]))

    assert summary['companies_promoted'] == 1
    rows, total = store.list_companies()
    assert total == 1
    assert rows[0]['domain'] == 'airbnb.com'
    assert rows[0]['city'] == 'San Francisco'


def test_enrichment_fills_only_missing_fields(store):
    service = FakeInferenceService({
        'domain': 'https://airbnb.com',
        'country': 'USA',
        'city': 'Somewhere Else',
        'employee_size_bucket': '5001-10000',
    })
    importer = CompanyImporter(store, enrichment=EnrichmentAdapter(service), max_workers=2)

    summary = importer.import_dataframe(
        pd.DataFrame([{'name': 'Airbnb', 'city': 'San Francisco'}]),
        use_ai=True
    )

    assert summary['companies_upserted'] == 1
    rows, _ = store.list_companies()
    assert rows[0]['domain'] == 'airbnb.com'
    assert rows[0]['country'] == 'United States'
    assert rows[0]['city'] == 'San Francisco'
    assert rows[0]['employee_size_bucket'] == '5 001-10 000'
    assert service.calls[0]['missing'] == ['domain', 'country', 'employee_size_bucket']


def test_enrichment_skipped_without_flag(store):
    service = FakeInferenceService({'domain': 'airbnb.com'})
    importer = CompanyImporter(store, enrichment=EnrichmentAdapter(service))

    importer.import_dataframe(pd.DataFrame([{'name': 'Airbnb'}]), use_ai=False)

    assert service.calls == []
    rows, _ = store.list_companies()
    assert rows[0]['domain'] is None


def test_enrichment_failures_do_not_block_import(store):
    service = FakeInferenceService(error=TimeoutError('too slow'))
    importer = CompanyImporter(store, enrichment=EnrichmentAdapter(service))

    summary = importer.import_dataframe(pd.DataFrame([{'name': 'Airbnb'}, {'name': 'Globex'}]), use_ai=True)

    assert summary['companies_inserted'] == 2
    assert len(service.calls) == 2


def test_missing_file(store, tmp_path):
    with pytest.raises(ImportValidationError, match='not found'):
        CompanyImporter(store).import_file(tmp_path / 'missing.csv')


def test_empty_file(store, tmp_path):
    empty = tmp_path / 'empty.csv'
    empty.write_text('')
    with pytest.raises(ImportValidationError, match='empty'):
        CompanyImporter(store).import_file(empty)


def test_unrecognised_columns_still_import(store, tmp_path):
    csv_file = tmp_path / 'other.csv'
    csv_file.write_text('Foo,Bar\n1,2\n')

    summary = CompanyImporter(store).import_file(csv_file)

    assert summary['companies_inserted'] == 1
    rows, _ = store.list_companies()
    assert rows[0]['raw_json'] == {'Foo': '1', 'Bar': '2'}
