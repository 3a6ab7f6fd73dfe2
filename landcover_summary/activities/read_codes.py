"""Code lookup source — load a two-column ``code,label`` text table.

The conventional source is a small CSV shipped next to a land-cover
product (e.g. NLCD class codes).  A first row whose code column is not
numeric is treated as a header.  Blank lines are ignored.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from landcover_summary.core.constants import DEFAULT_LOOKUP_DELIMITER
from landcover_summary.core.exceptions import LookupFormatError, SourceReadError
from landcover_summary.models.summary import CodeLookup

logger = logging.getLogger("landcover_summary.activities.read_codes")

STAGE = "read_codes"


def read_code_lookup(path: Path | str, *, delimiter: str = DEFAULT_LOOKUP_DELIMITER) -> CodeLookup:
    """Read a code → label lookup table from a delimited text file.

    Args:
        path: Path of the lookup file.
        delimiter: Single-character column delimiter.

    Returns:
        A ``CodeLookup`` with one entry per data row.

    Raises:
        SourceReadError: If the file cannot be read.
        LookupFormatError: If a row does not have exactly a numeric code
            and a label, or a code appears twice.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8-sig")
    except OSError as exc:
        msg = f"Cannot read code lookup {source}: {exc}"
        raise SourceReadError(msg, stage=STAGE) from exc

    lookup = parse_code_lookup(text.splitlines(), delimiter=delimiter, source=str(source))
    logger.info("Code lookup read | path=%s | codes=%d", source, len(lookup))
    return lookup


def parse_code_lookup(
    lines: list[str],
    *,
    delimiter: str = DEFAULT_LOOKUP_DELIMITER,
    source: str = "<lines>",
) -> CodeLookup:
    """Parse lookup rows already split into lines.

    Raises:
        LookupFormatError: On malformed rows or duplicate codes.
    """
    labels: dict[int, str] = {}
    for line_no, row in enumerate(csv.reader(lines, delimiter=delimiter), start=1):
        if not row or all(not cell.strip() for cell in row):
            continue
        if len(row) != 2:
            msg = f"{source}:{line_no}: expected 2 columns (code, label), got {len(row)}"
            raise LookupFormatError(msg)

        code_raw, label = row[0].strip(), row[1].strip()
        code = _parse_code(code_raw)
        if code is None:
            if not labels and line_no == _first_row(lines):
                logger.debug("Skipping lookup header | source=%s | row=%s", source, row)
                continue
            msg = f"{source}:{line_no}: code {code_raw!r} is not an integer"
            raise LookupFormatError(msg)

        if code in labels:
            msg = f"{source}:{line_no}: duplicate code {code}"
            raise LookupFormatError(msg)
        labels[code] = label

    return CodeLookup(labels=labels)


def _parse_code(raw: str) -> int | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    if not value.is_integer():
        return None
    return int(value)


def _first_row(lines: list[str]) -> int:
    """1-based index of the first non-blank line."""
    for idx, line in enumerate(lines, start=1):
        if line.strip():
            return idx
    return 0
