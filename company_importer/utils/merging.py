"""Conservative field merging shared by enrichment and store updates."""

from typing import Any, Dict, Iterable, Mapping, Optional


def merge_fields(
    primary: Mapping[str, Any],
    fallback: Mapping[str, Any],
    fields: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """Merge two partial records field by field.

    The primary value is kept whenever it is present (not None); otherwise
    the fallback value is used. A present value is never replaced by None.

    Args:
        primary: Values that win when present
        fallback: Values used to fill gaps in primary
        fields: Fields to merge, defaults to the union of both key sets

    Returns:
        Dictionary containing one entry per merged field

    Examples:
        >>> merge_fields({'domain': 'acme.com', 'city': None}, {'domain': 'x.com', 'city': 'Oslo'})
        {'domain': 'acme.com', 'city': 'Oslo'}
    """
    if fields is None:
        fields = list(primary.keys()) + [k for k in fallback.keys() if k not in primary]

    merged = {}
    for field in fields:
        value = primary.get(field)
        merged[field] = value if value is not None else fallback.get(field)
    return merged
