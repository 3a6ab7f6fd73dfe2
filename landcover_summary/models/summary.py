"""Data models for the categorical summary stages.

- FrequencyTable: per-value cell counts with derived percentages
- CodeLookup: numeric category code → descriptive label
- LabeledCategory: one resolved row of the final summary
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from landcover_summary.core.constants import PERCENT_DECIMALS


@dataclass(frozen=True, slots=True)
class FrequencyTable:
    """Occurrence count of each distinct valid cell value.

    Attributes:
        counts: Cell value → number of valid cells holding it.
    """

    counts: dict[int | float, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        """Number of valid (non-no-data) cells counted."""
        return sum(self.counts.values())

    @property
    def percentages(self) -> dict[int | float, float]:
        """Value → ``round(100 * count / total, 1)``.  Empty when total is 0."""
        total = self.total
        if total == 0:
            return {}
        return {
            value: round(100.0 * count / total, PERCENT_DECIMALS)
            for value, count in self.counts.items()
        }

    @property
    def values(self) -> list[int | float]:
        """Distinct values in ascending order."""
        return sorted(self.counts)

    def __len__(self) -> int:
        return len(self.counts)

    def to_dict(self) -> dict[str, object]:
        percentages = self.percentages
        return {
            "total": self.total,
            "categories": [
                {"value": v, "count": self.counts[v], "percentage": percentages[v]}
                for v in self.values
            ],
        }


@dataclass(frozen=True, slots=True)
class CodeLookup:
    """Mapping from numeric category code to human-readable label.

    Codes are unique by construction (mapping keys); loaders reject
    duplicates before building one.
    """

    labels: dict[int, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[int, str]) -> CodeLookup:
        return cls(labels={int(k): str(v) for k, v in mapping.items()})

    def __contains__(self, code: object) -> bool:
        return code in self.labels

    def __len__(self) -> int:
        return len(self.labels)

    def get(self, code: int) -> str | None:
        return self.labels.get(code)


@dataclass(frozen=True, slots=True)
class LabeledCategory:
    """A category present in the clipped raster, with its label.

    Attributes:
        code: Numeric category code (the raster cell value).
        label: Resolved label (or the raw code under the lenient policy).
        count: Number of cells with this code.
        percentage: Share of valid cells, rounded to one decimal.
        resolved: False when the label fell back to the raw code.
    """

    code: int | float
    label: str
    count: int
    percentage: float
    resolved: bool = True

    def as_pair(self) -> tuple[str, float]:
        """Return the ``(label, percentage)`` pair."""
        return (self.label, self.percentage)

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "label": self.label,
            "count": self.count,
            "percentage": self.percentage,
            "resolved": self.resolved,
        }
