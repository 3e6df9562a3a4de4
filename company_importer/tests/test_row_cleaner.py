"""Tests for mapping raw rows onto canonical company fields."""
import pandas as pd
import pytest

from ..processors.cleaner import CleanCompany, RowCleaner

@pytest.fixture
def cleaner():
    return RowCleaner()

def test_clean_basic_row(cleaner):
    row = {
        'Company Name': '  Acme Inc ',
        'Website': 'https://www.acme.com/about',
        'Country': 'US',
        'City': 'San Francisco, CA 94105',
        'Employees': '250'
    }
    company = cleaner.clean(row)

    assert company.name == 'Acme Inc'
    assert company.domain == 'acme.com'
    assert company.country == 'United States'
    assert company.city == 'San Francisco'
    assert company.employee_size_bucket == '201-500'
    assert company.raw_json == row

def test_aliases_are_case_insensitive(cleaner):
    company = cleaner.clean({'ORGANIZATION': 'Globex', 'WEBSITE_URL': 'globex.io', 'HeadCount': '12'})
    assert company.name == 'Globex'
    assert company.domain == 'globex.io'
    assert company.employee_size_bucket == '11-50'

def test_alias_priority_skips_empty_values(cleaner):
    row = {'name': '   ', 'company': 'Initech', 'domain': '', 'website': 'initech.com'}
    company = cleaner.clean(row)
    assert company.name == 'Initech'
    assert company.domain == 'initech.com'

def test_name_derived_from_domain(cleaner):
    assert cleaner.clean({'url': 'https://blue-sky_labs.co.uk'}).name == 'Blue sky labs'
    assert cleaner.clean({'domain': 'airbnbcom'}).name == 'Airbnb'

def test_city_from_location_column(cleaner):
    company = cleaner.clean({'name': 'Hooli', 'location': 'Palo Alto, USA'})
    assert company.city == 'Palo Alto'
    assert company.country == 'United States'

def test_unparseable_fields_are_absent(cleaner):
    company = cleaner.clean({'name': 'Nowhere', 'country': 'Atlantis', 'city': 'www.x.com', 'size': 'n/a'})
    assert company.country is None
    assert company.city is None
    assert company.employee_size_bucket is None
    assert company.domain is None

def test_unknown_columns_only_in_raw_json(cleaner):
    row = {'name': 'Umbrella', 'Notes': 'call back', 'Revenue': 12}
    company = cleaner.clean(row)
    assert company.raw_json['Notes'] == 'call back'
    assert company.raw_json['Revenue'] == 12
    assert company.fields() == {
        'name': 'Umbrella',
        'domain': None,
        'country': None,
        'city': None,
        'employee_size_bucket': None
    }

def test_missing_fields():
    company = CleanCompany(name='Acme', domain='acme.com')
    assert company.missing_fields() == ['country', 'city', 'employee_size_bucket']

def test_validate_columns(cleaner):
    critical, warnings = cleaner.validate_columns([])
    assert critical == ['File has no columns']

    critical, warnings = cleaner.validate_columns(['Company', 'City'])
    assert critical == [] and warnings == []

    critical, warnings = cleaner.validate_columns(['Foo', 'Bar'])
    assert critical == [] and len(warnings) == 1

    critical, warnings = cleaner.validate_columns(['Country', 'Employees'])
    assert critical == [] and len(warnings) == 1

def test_clean_frame_handles_missing_values(cleaner):
    df = pd.DataFrame([
        {'name': 'Acme', 'employees': None},
        {'name': None, 'employees': 40.0}
    ])
    companies = cleaner.clean_frame(df)
    assert companies[0].name == 'Acme'
    assert companies[0].employee_size_bucket is None
    assert companies[0].raw_json == {'name': 'Acme', 'employees': None}
    assert companies[1].name is None
    assert companies[1].employee_size_bucket == '11-50'

def test_bare_suffix_website_is_ignored(cleaner):
    company = cleaner.clean({'website': 'https://co.uk/', 'name': ''})
    assert company.domain is None
    assert company.name is None
