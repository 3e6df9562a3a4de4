"""Company field normalization utilities.

This module provides pure functions that turn messy free-text values from
uploaded spreadsheets into canonical company fields. Every function is total:
it returns the canonical value, or None when the input cannot be normalized.
"""

import logging
import math
import re
from functools import lru_cache
from typing import Dict, List, Optional, Union

import pycountry
from tld import get_tld
from tld.exceptions import TldBadUrl, TldDomainNotFound

logger = logging.getLogger(__name__)

EMPLOYEE_BUCKETS = (
    "1-10",
    "11-50",
    "51-200",
    "201-500",
    "501-1 000",
    "1 001-5 000",
    "5 001-10 000",
    "10 000+",
)

# Inclusive upper bound for each bucket except the last one
_BUCKET_LIMITS = (10, 50, 200, 500, 1000, 5000, 10000)

GLOBAL_COUNTRY = "Global"

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://")
_GLUED_TLD_RE = re.compile(r"^(.*)(com|net|org|io|ai|co|app|dev)$")
_HOST_LABEL_RE = re.compile(r"^[a-z0-9-]+$")

_GLOBAL_RE = re.compile(r"\b(global|worldwide)\b", re.IGNORECASE)
_PAREN_RE = re.compile(r"\(.*?\)")
_COUNTRY_CODE_ALIASES = {"UK": "GB"}

_URL_RE = re.compile(r"https?://", re.IGNORECASE)
_DOMAIN_SUFFIX_RE = re.compile(r"\.[a-z]{2,}$", re.IGNORECASE)
_DIGIT_RUN_RE = re.compile(r"\d{3,}")
_TRAILING_PAREN_RE = re.compile(r"\s*\(.*?\)$")
_POSTAL_CODE_RE = re.compile(r"\b\d{4,6}(?:-\d{4})?$")
_CODE_TOKEN_RE = re.compile(r"^[A-Z]{2,3}$")

_SIZE_BOUND = r"(\d+(?:\.\d+)?)(k?)"
_SIZE_RANGE_RE = re.compile(_SIZE_BOUND + r"(?:-" + _SIZE_BOUND + r"|\+)?")


def normalize_domain(value: Optional[str]) -> Optional[str]:
    """Extract the registrable (apex) domain from a website-like value.

    Handles full URLs, subdomains, country-specific TLDs and domains that
    lost their dot somewhere along the way:
    - https://www.Example.com/about?x=1 -> example.com
    - sub.example.co.uk -> example.co.uk
    - airbnbcom -> airbnb.com

    Args:
        value: Raw website, URL or domain text

    Returns:
        The apex domain, or None if no registrable domain can be found
    """
    if value is None:
        return None

    host = str(value).strip().lower()
    host = _SCHEME_RE.sub("", host)
    host = re.sub(r"^www\.", "", host)
    host = re.sub(r"[#?].*$", "", host)
    host = re.sub(r"/.*$", "", host)
    host = re.sub(r"\s+", "", host)
    host = host.split(":")[0].strip(".")

    if not host or "@" in host:
        return None

    registrable = _registrable(host)
    if registrable is not None:
        return registrable.fld

    if "." not in host and _HOST_LABEL_RE.match(host):
        match = _GLUED_TLD_RE.match(host)
        if match and len(match.group(1)) >= 2:
            return f"{match.group(1)}.{match.group(2)}"

    logger.debug(f"Could not normalize domain: {value}")
    return None


def _registrable(host: str):
    """Parse a host against the public suffix list, None if it has no registrable part."""
    try:
        result = get_tld(host, fix_protocol=True, as_object=True)
    except (TldDomainNotFound, TldBadUrl, ValueError):
        return None
    # A bare public suffix such as "co.uk" parses with the suffix as its own fld
    if not result.domain or result.fld == result.tld:
        return None
    return result


def domain_label(domain: str) -> Optional[str]:
    """Return the registrable label of an apex domain ("example" for "example.co.uk")."""
    registrable = _registrable(domain)
    if registrable is not None:
        return registrable.domain
    return domain.split(".")[0] or None


def _country_display_name(country) -> str:
    return getattr(country, "common_name", None) or country.name


@lru_cache(maxsize=None)
def _names_without_notes() -> Dict[str, object]:
    """Country names with their parenthetical notes removed ("falkland islands")."""
    names = {}
    for country in pycountry.countries:
        for attr in ("name", "common_name", "official_name"):
            value = getattr(country, attr, None)
            if value:
                names.setdefault(_PAREN_RE.sub("", value).strip().lower(), country)
    return names


def _lookup_country(text: str):
    text = text.strip()
    # Numeric ISO codes are not accepted
    if not text or text.isdigit():
        return None
    try:
        return pycountry.countries.lookup(text)
    except LookupError:
        return _names_without_notes().get(text.lower())


def normalize_country(value: Optional[str]) -> Optional[str]:
    """Resolve free-text country information to an English country name.

    Applies the following rules in order:
    1. Any mention of "global" or "worldwide" resolves to "Global"
    2. A value that already is a known country name, with or without its
       parenthetical note, is kept as that country
    3. Otherwise parenthetical content is dropped and the last comma-separated
       segment is used ("Remote, US" -> "US")
    4. Two-letter segments are ISO alpha-2 codes, three-letter segments are
       alpha-3 codes, anything else is looked up by name

    Args:
        value: Raw country, location or country code text

    Returns:
        The country name, "Global", or None if nothing resolves

    Examples:
        >>> normalize_country("Remote, US")
        'United States'
        >>> normalize_country("worldwide operations")
        'Global'
    """
    if value is None:
        return None
    raw = str(value).strip()
    if not raw:
        return None

    if _GLOBAL_RE.search(raw):
        return GLOBAL_COUNTRY

    # Canonical names may carry commas or notes, e.g. "Cocos (Keeling) Islands"
    country = _lookup_country(raw)
    if country is not None:
        return _country_display_name(country)

    without_parens = _PAREN_RE.sub("", raw).strip()
    country = _lookup_country(without_parens)
    if country is not None:
        return _country_display_name(country)

    segment = without_parens.split(",")[-1].strip()
    segment = re.sub(r"[._-]+", " ", segment).strip()
    if not segment:
        return None

    code = segment.replace(" ", "").upper()
    code = _COUNTRY_CODE_ALIASES.get(code, code)

    if re.fullmatch(r"[A-Z]{2}", code):
        country = pycountry.countries.get(alpha_2=code)
        return _country_display_name(country) if country else None

    if re.fullmatch(r"[A-Z]{3}", code):
        country = pycountry.countries.get(alpha_3=code)
        if country is not None:
            return _country_display_name(country)

    country = _lookup_country(segment)
    return _country_display_name(country) if country else None


def _is_country_token(token: str) -> bool:
    if _CODE_TOKEN_RE.match(token):
        return True
    return _lookup_country(token) is not None


def normalize_city(value: Optional[str]) -> Optional[str]:
    """Reduce a location string to a short city name.

    Values that look like URLs or domains are rejected. Only the first
    comma-separated segment is kept, with trailing parenthetical notes,
    postal codes and country or state codes removed. A value that is
    nothing but a country or code ("Singapore", "NYC") has no city left.

    Args:
        value: Raw city or location text

    Returns:
        The city name, or None if the value does not look like a city

    Examples:
        >>> normalize_city("San Francisco, CA 94105")
        'San Francisco'
        >>> normalize_city("Berlin 10115 DE")
        'Berlin'
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text or _URL_RE.search(text) or _DOMAIN_SUFFIX_RE.search(text):
        return None

    city = text.split(",")[0]
    city = _TRAILING_PAREN_RE.sub("", city).strip()
    city = _POSTAL_CODE_RE.sub("", city).strip()

    tokens = city.split()
    if tokens and _is_country_token(tokens[-1]):
        tokens.pop()
        city = " ".join(tokens)
        city = _POSTAL_CODE_RE.sub("", city).strip()

    # Street addresses and phone numbers rather than a city
    if _DIGIT_RUN_RE.search(city):
        return None

    return city if len(city) >= 2 else None


def _size_bound(number: str, multiplier: str) -> float:
    return float(number) * (1000 if multiplier else 1)


def _bucket_for(count: float) -> str:
    for limit, bucket in zip(_BUCKET_LIMITS, EMPLOYEE_BUCKETS):
        if count <= limit:
            return bucket
    return EMPLOYEE_BUCKETS[-1]


def bucket_employee_size(value: Union[str, int, float, None]) -> Optional[str]:
    """Map an employee count or range onto one of the fixed size buckets.

    Ranges are bucketed by their upper bound, and a trailing "k" means
    thousands:
    - "250" -> "201-500"
    - "5k" -> "1 001-5 000"
    - "10,001+" -> "10 000+"

    Args:
        value: Raw employee count, range or bucket

    Returns:
        One of EMPLOYEE_BUCKETS, or None if no number can be parsed
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str) and value in EMPLOYEE_BUCKETS:
        return value

    text = re.sub(r"[,\s]", "", str(value)).lower()
    if not text:
        return None

    match = _SIZE_RANGE_RE.search(text)
    if match:
        count = _size_bound(match.group(1), match.group(2))
        if match.group(3):
            count = max(count, _size_bound(match.group(3), match.group(4)))
        return _bucket_for(count)

    try:
        count = float(text[:-1]) * 1000 if text.endswith("k") else float(text)
    except ValueError:
        return None
    if not math.isfinite(count) or count < 0:
        return None
    return _bucket_for(count)


def country_names() -> List[str]:
    """Return every known country name, sorted alphabetically."""
    return sorted(_country_display_name(country) for country in pycountry.countries)
