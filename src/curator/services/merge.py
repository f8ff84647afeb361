"""Merge, sort and filter unified rows from several sources."""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from curator.observability import get_logger
from curator.observability.constants import LogEvents
from curator.schemas.internal import ExecutionResult, Row
from curator.schemas.queries import Requirements
from curator.services.transformation import to_number

logger = get_logger(__name__)

NO_SORT = "none"


class FilterOp(str, Enum):
    """Range filter operations; anything else compiles to NOOP."""

    MIN = "min"
    MAX = "max"
    NOOP = "noop"


@dataclass(frozen=True)
class RowFilter:
    """A compiled ``field:operation:value`` filter."""

    field: str
    op: FilterOp
    threshold: float = 0.0

    def passes(self, row: Row) -> bool:
        if self.op is FilterOp.NOOP:
            return True
        value = comparable(row.get(self.field))
        # NaN fails both comparisons
        if self.op is FilterOp.MIN:
            return value >= self.threshold
        return value <= self.threshold


NOOP_FILTER = RowFilter(field="", op=FilterOp.NOOP)


def comparable(value: Any) -> float:
    """Numeric reading of a row value: missing is 0, non-numeric is NaN."""
    if value is None:
        return 0.0
    if isinstance(value, str) and not value.strip():
        return 0.0
    number = to_number(value)
    return math.nan if number is None else number


def compile_filter(expression: str) -> RowFilter:
    """Compile one filter string.

    Accepts ``field:min:value`` / ``field:max:value`` and the shorthand
    ``min_field:value`` / ``max_field:value``. Anything unrecognised becomes a
    filter that always passes.
    """
    parts = [part.strip() for part in expression.split(":")]

    if len(parts) == 2:
        prefix, _, field = parts[0].partition("_")
        if field and prefix in (FilterOp.MIN.value, FilterOp.MAX.value):
            parts = [field, prefix, parts[1]]

    if len(parts) != 3 or not parts[0]:
        return NOOP_FILTER

    field, op_name, raw_value = parts
    try:
        op = FilterOp(op_name.lower())
    except ValueError:
        return NOOP_FILTER
    if op is FilterOp.NOOP:
        return NOOP_FILTER

    threshold = to_number(raw_value)
    if threshold is None:
        return NOOP_FILTER
    return RowFilter(field=field, op=op, threshold=threshold)


def compile_filters(expressions: Iterable[str]) -> list[RowFilter]:
    compiled = [compile_filter(e) for e in expressions]
    return [f for f in compiled if f.op is not FilterOp.NOOP]


def apply_filters(rows: Iterable[Row], filters: Sequence[RowFilter]) -> list[Row]:
    """Keep rows that pass every filter."""
    if not filters:
        return list(rows)
    return [row for row in rows if all(f.passes(row) for f in filters)]


def sort_rows(rows: list[Row], sort_by: str) -> list[Row]:
    """Stable descending sort on ``sort_by``; NaN values sink to the end."""

    def key(row: Row) -> tuple[int, float]:
        value = comparable(row.get(sort_by))
        if math.isnan(value):
            return (1, 0.0)
        return (0, -value)

    return sorted(rows, key=key)


def concatenate(results: Sequence[ExecutionResult]) -> list[Row]:
    """Rows of successful results in source order, then row order."""
    successful = [r for r in results if r.succeeded]
    total = sum(len(r.rows) for r in successful)
    merged: list[Row] = [{}] * total
    offset = 0
    for result in successful:
        count = len(result.rows)
        merged[offset : offset + count] = result.rows
        offset += count
    return merged


class MergeEngine:
    """Concatenates, sorts and filters rows according to requirements."""

    def merge(self, results: Sequence[ExecutionResult], requirements: Requirements) -> list[Row]:
        rows = concatenate(results)

        sort_by = (requirements.sort_by or NO_SORT).strip()
        if sort_by and sort_by.lower() != NO_SORT:
            rows = sort_rows(rows, sort_by)

        if requirements.additional_filters:
            filters = compile_filters(requirements.additional_filters)
            rows = apply_filters(rows, filters)

        logger.debug(
            LogEvents.MERGE_COMPLETED,
            rows=len(rows),
            sort_by=sort_by,
            filters=len(requirements.additional_filters),
        )
        return rows
