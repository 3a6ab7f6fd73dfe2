"""Code resolver — attach labels to frequency-table codes.

Output rows are ordered by descending percentage, ties broken by
ascending code so the order is deterministic.

Missing-code policy (``CodePolicy``):
- ``STRICT``  — any unresolved code fails the stage with
  ``MissingCodeError``; nothing is returned.
- ``LENIENT`` — the raw code becomes the label and the row is flagged
  ``resolved=False``.
"""

from __future__ import annotations

import logging

from landcover_summary.core.constants import DEFAULT_CODE_POLICY, CodePolicy
from landcover_summary.core.exceptions import MissingCodeError
from landcover_summary.models.summary import CodeLookup, FrequencyTable, LabeledCategory

logger = logging.getLogger("landcover_summary.activities.resolve_codes")


def resolve_codes(
    table: FrequencyTable,
    lookup: CodeLookup,
    *,
    policy: CodePolicy = DEFAULT_CODE_POLICY,
) -> list[LabeledCategory]:
    """Label every category in ``table`` using ``lookup``.

    Raises:
        MissingCodeError: Under ``STRICT`` when a code has no label.
    """
    missing = [code for code in table.values if code not in lookup]
    if missing and policy is CodePolicy.STRICT:
        msg = f"No label for code(s) {', '.join(_format_code(c) for c in missing)}"
        raise MissingCodeError(msg, missing_codes=missing)
    if missing:
        logger.warning(
            "Unresolved codes labelled with raw value | codes=%s",
            [_format_code(c) for c in missing],
        )

    percentages = table.percentages
    rows = [
        LabeledCategory(
            code=code,
            label=lookup.get(code) if code in lookup else _format_code(code),  # type: ignore[arg-type]
            count=count,
            percentage=percentages[code],
            resolved=code in lookup,
        )
        for code, count in table.counts.items()
    ]
    rows.sort(key=lambda row: (-row.percentage, row.code))

    logger.info(
        "Codes resolved | categories=%d | unresolved=%d | policy=%s",
        len(rows),
        len(missing),
        policy.value,
    )
    return rows


def _format_code(code: int | float) -> str:
    if isinstance(code, float) and code.is_integer():
        return str(int(code))
    return str(code)
