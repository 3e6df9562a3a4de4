"""Reading uploaded CSV files and making their rows JSON-safe."""

from pathlib import Path
from typing import Any, Dict, List, Union
import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def normalize_column_name(name: Any) -> str:
    """Collapse runs of whitespace in a header, keeping case and punctuation.

    Examples:
        >>> normalize_column_name(" Website  URL ")
        'Website URL'
    """
    return ' '.join(str(name).split())


def normalize_json_value(value: Any) -> Any:
    """Turn a pandas/numpy cell into a value ``json.dumps`` accepts.

    Missing cells (NaN, NaT, pd.NA, None) become None and numpy scalars
    become their Python equivalents.
    """
    if isinstance(value, np.ndarray):
        return value.tolist()
    if pd.isna(value):
        return None
    if isinstance(value, np.generic):
        return value.item()
    return value


def validate_json_data(data: Dict[Any, Any]) -> Dict[str, Any]:
    """Return a copy of a row with string keys and JSON-safe values."""
    return {str(k): normalize_json_value(v) for k, v in data.items()}


def read_csv_rows(source: Union[str, Path]) -> pd.DataFrame:
    """Read a header-labelled CSV file with every cell as text.

    Reading as strings keeps values such as "1-10" or "007" intact, and
    empty cells stay empty strings rather than NaN.

    Raises:
        pandas.errors.EmptyDataError: If the file has no header
        pandas.errors.ParserError: If the file is not valid CSV
    """
    df = pd.read_csv(
        source,
        dtype=str,
        keep_default_na=False,
        skipinitialspace=True,
        skip_blank_lines=True
    )
    df = df.rename(columns=normalize_column_name)
    logger.debug(f"Read {len(df)} rows with columns: {df.columns.tolist()}")
    return df


def dataframe_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Convert a DataFrame into JSON-safe row dictionaries."""
    return [validate_json_data(row) for row in df.to_dict(orient='records')]
