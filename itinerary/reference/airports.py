"""
Airport Reference: Code to airport-name lookup table.

The table is built once from a CSV with a header row naming (in any order,
case-insensitively, surrounding whitespace ignored) the columns ``name``,
``iata_code`` and ``icao_code``. Every row registers both of its codes.
Construction is all-or-nothing: a missing column or a blank required cell
fails the whole load.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Union

import pandas as pd

from itinerary.core.errors import LookupMalformedError
from itinerary.core.logging import LogChannel, get_logger

log = get_logger(LogChannel.LOOKUP)

# Reported in this order when absent
REQUIRED_COLUMNS = ("iata_code", "icao_code", "name")


class AirportLookup(Mapping[str, str]):
    """Read-only mapping of IATA/ICAO code to airport name."""

    def __init__(self, entries: Mapping[str, str]):
        for code, name in entries.items():
            if not name:
                raise LookupMalformedError(f"airport lookup malformed. empty name for code {code}")
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, code: str) -> str:
        return self._entries[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AirportLookup({len(self)} codes)"


def _column_indices(header: Sequence[str]) -> dict[str, int]:
    indices: dict[str, int] = {}
    for i, col in enumerate(header):
        key = str(col).strip().lower()
        if key in REQUIRED_COLUMNS:
            indices[key] = i
    return indices


def build_airport_lookup(header: Sequence[str], rows: Iterable[Sequence[str]]) -> AirportLookup:
    """
    Build the lookup table from a header and data rows.

    Args:
        header: Column names of the reference table
        rows: Data rows; cells are taken verbatim (no trimming)

    Returns:
        AirportLookup with one entry per IATA and per ICAO code

    Raises:
        LookupMalformedError: If a required column is missing, or any row
            has a blank value in a required column
    """
    indices = _column_indices(header)

    missing = [col for col in REQUIRED_COLUMNS if col not in indices]
    if missing:
        log.error("lookup_columns_missing", missing=missing)
        raise LookupMalformedError(
            f"airport lookup malformed. {', '.join(missing)}",
            missing_columns=missing,
        )

    iata_i = indices["iata_code"]
    icao_i = indices["icao_code"]
    name_i = indices["name"]

    entries: dict[str, str] = {}
    row_count = 0
    for row_no, row in enumerate(rows, start=1):
        cells = [row[i] if i < len(row) else "" for i in (iata_i, icao_i, name_i)]
        iata, icao, name = ("" if cell is None else str(cell) for cell in cells)
        if not iata or not icao or not name:
            log.error("lookup_blank_field", row=row_no)
            raise LookupMalformedError("airport lookup malformed")

        entries[iata] = name
        entries[icao] = name
        row_count += 1

    log.verbose("lookup_built", rows=row_count, codes=len(entries))
    return AirportLookup(entries)


def load_airport_lookup(path: Union[str, Path]) -> AirportLookup:
    """
    Load the airport lookup table from a CSV file.

    Raises:
        FileNotFoundError: If the file does not exist
        LookupMalformedError: If the CSV is unreadable or violates the
            table invariants
    """
    csv_path = Path(path)
    try:
        # Rows are read by header position: extra trailing fields are
        # dropped instead of being promoted to an index column
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                csv_path,
                dtype=str,
                keep_default_na=False,
                index_col=False,
                engine="python",
            )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise LookupMalformedError(f"airport lookup malformed. {e}") from e

    # Short rows are padded with NaN even without NA conversion
    df = df.fillna("")

    lookup = build_airport_lookup(
        list(df.columns),
        df.itertuples(index=False, name=None),
    )
    log.info("lookup_loaded", path=str(csv_path), codes=len(lookup))
    return lookup
