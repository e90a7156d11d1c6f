"""CSV import/export for transactions.

Decoding is tolerant: blank lines are dropped, header names are trimmed,
extra columns are carried through untouched and short rows are padded
with empty strings.  Only document-level problems (no data rows, missing
required headers, unbalanced quotes) raise :class:`MalformedInput`;
row-level validation is left to :mod:`budgetpro.normalizer`.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Dict, Iterable, List

from .models import Transaction

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['type', 'description', 'amount', 'category', 'date']
EXPORT_COLUMNS = ['id', 'type', 'description', 'amount', 'category', 'date']

_BOM = "\ufeff"


class MalformedInput(ValueError):
    """The CSV document is structurally unusable; nothing should be imported."""


def _is_blank_line(row: List[str]) -> bool:
    return not row or (len(row) == 1 and not row[0].strip())


def decode_csv(text: str) -> List[Dict[str, str]]:
    """Decode CSV text into one mapping per data row.

    Each mapping is keyed by the (trimmed) header names.  Quoted fields
    may contain commas, doubled quotes and line breaks.  A line of empty
    cells such as ``,,,,`` is still a data row; only blank lines are
    dropped.  An unterminated quote raises :class:`MalformedInput`.
    """
    if text.startswith(_BOM):
        text = text[len(_BOM):]

    reader = csv.reader(io.StringIO(text, newline=''), strict=True)
    try:
        records = [row for row in reader if not _is_blank_line(row)]
    except csv.Error as exc:
        raise MalformedInput(f"Unable to parse CSV: {exc}") from exc
    if len(records) < 2:
        raise MalformedInput("CSV file must have a header and at least one data row.")

    headers = [name.strip() for name in records[0]]
    missing = [col for col in REQUIRED_COLUMNS if col not in headers]
    if missing:
        raise MalformedInput(f"Missing required column in CSV: {', '.join(missing)}")

    # first occurrence wins when a header repeats
    col_indices: Dict[str, int] = {}
    for idx, name in enumerate(headers):
        col_indices.setdefault(name, idx)

    rows: List[Dict[str, str]] = []
    for values in records[1:]:
        row = {
            name: (values[idx] if idx < len(values) else '')
            for name, idx in col_indices.items()
        }
        rows.append(row)

    logger.debug("Decoded %d CSV rows with columns %s", len(rows), headers)
    return rows


def format_amount(amount: float) -> str:
    """Render an amount as a plain number, without a trailing ``.0``."""
    value = float(amount)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def encode_csv(transactions: Iterable[Transaction]) -> str:
    """Encode transactions in store order.

    Fields containing a comma, quote or line break are quote-wrapped with
    internal quotes doubled; everything else is written raw.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n', quoting=csv.QUOTE_MINIMAL)
    writer.writerow(EXPORT_COLUMNS)
    for t in transactions:
        writer.writerow([
            t.id,
            t.type,
            t.description,
            format_amount(t.amount),
            t.category,
            t.date,
        ])
    content = buffer.getvalue()
    return content[:-1] if content.endswith('\n') else content
