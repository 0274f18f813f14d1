import csv
import io
import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import pandas as pd

from errors import AccessError, FormatError
from logger import get_logger
from models import ContactRecord

logger = get_logger(__name__)

# owner_name, owner_phone, contact_name, contact_phone, owner_location
LEAK_COLUMNS = ("owner_name", "owner_phone", "contact_name", "contact_phone", "owner_location")
MIN_COLUMNS = len(LEAK_COLUMNS)


@dataclass
class LeakFile:
    """Everything the graph builder needs from one leak file."""
    source: str
    rows: int                                   # data rows read, header excluded
    records: List[ContactRecord] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return self.rows - len(self.records)


def find_bare_quote(text: str) -> Optional[int]:
    """
    Return the 1-based line of the first misplaced quote, or None.

    A quote may only open a field or close it right before a separator or
    line end. The csv module keeps a quote inside an unquoted field as
    data; a leak file that has one is treated as broken.
    """
    line = 1
    field_start = True
    quoted = False
    closed = False
    i, n = 0, len(text)
    while i < n:
        c = text[i]
        if quoted:
            if c == '"':
                if i + 1 < n and text[i + 1] == '"':
                    i += 1
                else:
                    quoted = False
                    closed = True
            elif c == "\n":
                line += 1
        elif c in ",\r\n":
            field_start = True
            closed = False
            if c == "\n":
                line += 1
        elif closed or (c == '"' and not field_start):
            return line
        elif c == '"':
            quoted = True
            field_start = False
        else:
            field_start = False
        i += 1
    return None


def load_rows(path: str) -> List[List[str]]:
    """
    Read the whole CSV into memory as lists of raw string fields.

    Rows keep their real width: short rows are not padded and extra
    columns beyond the fifth are dropped. Empty lines are not rows, a
    whitespace-only line is a one-field row.
    """
    try:
        f = open(path, "r", encoding="utf-8", newline="")
    except OSError as err:
        raise AccessError(f"failed to open leak file: {path}: {err}") from err

    with f:
        try:
            text = f.read()
        except UnicodeDecodeError as err:
            raise FormatError(f"failed to read csv: {path}: {err}") from err

    bad_line = find_bare_quote(text)
    if bad_line is not None:
        raise FormatError(f'failed to read csv: {path}: misplaced " on line {bad_line}')

    try:
        with warnings.catch_warnings():
            # pandas warns when rows are wider than the five named columns
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(text),
                header=None,
                names=list(range(MIN_COLUMNS)),
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=False,
                engine="python",
            )
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, csv.Error) as err:
        raise FormatError(f"failed to read csv: {path}: {err}") from err

    # Missing trailing fields come back as NA; only real strings are fields,
    # so an empty line comes back with none and is dropped.
    rows = (
        [v for v in row if isinstance(v, str)]
        for row in df.itertuples(index=False, name=None)
    )
    return [row for row in rows if row]


def extract_record(row: Sequence[str]) -> Optional[ContactRecord]:
    """
    Validate one data row and return its trimmed fields.
    Returns None if the row is unusable (too short or missing a phone).
    """
    if len(row) < MIN_COLUMNS:
        return None

    owner_name, owner_phone, contact_name, contact_phone, owner_location = (
        str(v).strip() for v in row[:MIN_COLUMNS]
    )
    if not owner_phone or not contact_phone:
        return None

    return ContactRecord(owner_name, owner_phone, contact_name, contact_phone, owner_location)


def read_leak(path: str) -> LeakFile:
    """Load a leak file, skip its header row and keep every usable record."""
    rows = load_rows(path)

    records = []
    for row in rows[1:]:
        record = extract_record(row)
        if record is not None:
            records.append(record)

    leak = LeakFile(source=path, rows=max(len(rows) - 1, 0), records=records)
    logger.debug(f"{len(leak.records)} usable rows, {leak.skipped} skipped, from {leak.rows} data rows")
    return leak
