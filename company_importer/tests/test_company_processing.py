"""Integration tests for company deduplication and persistence."""

import pytest

from ..db.store import StoreError
from ..processors.cleaner import CleanCompany
from ..processors.company import CompanyProcessor


def company(name=None, domain=None, country=None, city=None, size=None, raw=None):
    return CleanCompany(name, domain, country, city, size, raw if raw is not None else {})


@pytest.fixture
def processor(store):
    return CompanyProcessor(store, debug=True)


def all_companies(store):
    rows, _ = store.list_companies(limit=500)
    return rows


def test_domainless_record_is_promoted(store):
    CompanyProcessor(store).process([company(name='Acme', city='Berlin', raw={'row': 1})])

    stats = CompanyProcessor(store).process([company(name='Acme', domain='acme.com', country='Germany')])

    rows = all_companies(store)
    assert len(rows) == 1
    assert rows[0]['domain'] == 'acme.com'
    assert rows[0]['city'] == 'Berlin'
    assert rows[0]['country'] == 'Germany'
    assert stats['companies_promoted'] == 1
    assert stats['companies_upserted'] == 1


def test_promotion_prefers_matching_city(store):
    store.insert({'name': 'Acme', 'city': 'Paris'})
    store.insert({'name': 'Acme', 'city': 'Berlin'})

    CompanyProcessor(store).process([company(name='Acme', domain='acme.com', city='Berlin')])

    rows = all_companies(store)
    promoted = [r for r in rows if r['domain'] == 'acme.com']
    assert len(rows) == 2
    assert len(promoted) == 1
    assert promoted[0]['city'] == 'Berlin'


def test_promotion_skipped_when_domain_record_exists(store):
    existing = store.insert({'name': 'Acme', 'domain': 'acme.com', 'city': 'Berlin'})
    domainless = store.insert({'name': 'Acme', 'city': 'Paris'})

    stats = CompanyProcessor(store).process([company(name='Acme', domain='acme.com', size='11-50')])

    assert stats['companies_promoted'] == 0
    assert stats['companies_upserted'] == 1

    rows = {r['id']: r for r in all_companies(store)}
    assert len(rows) == 2
    assert rows[existing['id']]['employee_size_bucket'] == '11-50'
    assert rows[existing['id']]['city'] == 'Berlin'
    assert rows[domainless['id']] == domainless


def test_same_domain_and_name_is_upserted(processor, store):
    processor.process([
        company(name='Acme', domain='acme.com', country='Germany', city='Berlin', size='11-50'),
        company(name='Acme', domain='acme.com', city='Munich', size='51-200'),
    ])

    rows = all_companies(store)
    assert len(rows) == 1
    assert rows[0]['city'] == 'Munich'
    assert rows[0]['employee_size_bucket'] == '51-200'
    # Null incoming values keep what is stored
    assert rows[0]['country'] == 'Germany'
    assert processor.get_stats()['companies_upserted'] == 2


def test_domain_without_name_is_keyed_on_domain(processor, store):
    processor.process([
        company(domain='globex.io', size='1-10'),
        company(domain='globex.io', size='11-50'),
    ])

    rows = all_companies(store)
    assert len(rows) == 1
    assert rows[0]['name'] is None
    assert rows[0]['employee_size_bucket'] == '11-50'


def test_domainless_match_is_updated(store):
    CompanyProcessor(store).process([company(name='Initech', city='Austin', size='1-10')])

    stats = CompanyProcessor(store).process([company(name='Initech', city='Austin', size='201-500', raw={'v': 2})])

    rows = all_companies(store)
    assert len(rows) == 1
    assert rows[0]['employee_size_bucket'] == '201-500'
    assert rows[0]['raw_json'] == {'v': 2}
    assert stats['companies_updated'] == 1
    assert stats['companies_inserted'] == 0


def test_domainless_match_falls_back_to_name(store):
    CompanyProcessor(store).process([company(name='Initech', city='Austin')])

    CompanyProcessor(store).process([company(name='Initech', city='Dallas', country='United States')])

    rows = all_companies(store)
    assert len(rows) == 1
    assert rows[0]['city'] == 'Dallas'
    assert rows[0]['country'] == 'United States'


def test_unidentified_records_are_always_inserted(processor, store):
    stats = processor.process([company(city='Oslo'), company(city='Oslo')])

    assert len(all_companies(store)) == 2
    assert stats['companies_inserted'] == 2


def test_domain_records_are_written_first(processor, store):
    # Within one batch the domainless row is written after the domain row,
    # so it does not find a domainless match and is inserted separately
    stats = processor.process([
        company(name='Acme', city='Berlin'),
        company(name='Acme', domain='acme.com'),
    ])

    rows = all_companies(store)
    assert len(rows) == 2
    assert stats['companies_promoted'] == 0
    assert stats['companies_upserted'] == 1
    assert stats['companies_inserted'] == 1
    assert [r['domain'] for r in rows if r['domain']] == ['acme.com']


def test_order_records_keeps_input_order_within_groups(processor):
    records = [
        company(name='a'),
        company(name='b', domain='b.com'),
        company(name='c'),
        company(name='d', domain='d.com'),
    ]
    ordered = processor.order_records(records)
    assert [r.name for r in ordered] == ['b', 'd', 'a', 'c']


def test_store_error_stops_processing(store, monkeypatch):
    processor = CompanyProcessor(store)
    original_insert = store.insert
    calls = []

    def failing_insert(record):
        calls.append(record)
        if len(calls) == 2:
            raise StoreError('disk full')
        return original_insert(record)

    monkeypatch.setattr(store, 'insert', failing_insert)

    with pytest.raises(StoreError, match='disk full'):
        processor.process([company(name='One'), company(name='Two'), company(name='Three')])

    rows = all_companies(store)
    assert [r['name'] for r in rows] == ['One']
    assert processor.get_stats()['total_errors'] == 1
    assert len(calls) == 2


def test_validate_data_warns_about_unidentified_rows(processor):
    critical, warnings = processor.validate_data([company(name='Acme'), company(city='Oslo')])
    assert critical == []
    assert len(warnings) == 1


def test_delete_all_after_import(processor, store):
    processor.process([company(name='Acme', domain='acme.com'), company(name='Initech')])

    assert store.delete_all() == 2
    assert all_companies(store) == []
