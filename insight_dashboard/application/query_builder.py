"""
Query Builder.

Constructs the structured ``{where, aggregate, select}`` requests sent to the
backend's query endpoints. Construction is pure: nothing is sent until the
request is handed to a backend client.

Ordering is significant to the backend's display semantics (which label pairs
with which aggregation), so every sequence is kept exactly as given: no
deduplication, no sorting.
"""
from __future__ import annotations

import json
import math
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ..domain.errors import ValidationError
from ..domain.models import AggregateSpec, AggregateType, FilterClause, OrderSpec, QueryRequest, QueryResult


def where(field: str, operator: str, value: Any = None) -> FilterClause:
    """Build a filter clause; the operator is passed through as given (upper-cased)."""
    name = (field or "").strip()
    op = (operator or "").strip().upper()
    if not name:
        raise ValidationError("Filter field cannot be empty")
    if not op:
        raise ValidationError(f"Filter on '{name}' needs an operator")
    if not _is_json_finite(value):
        raise ValidationError(f"Filter on '{name}' has a non-finite number (NaN/Infinity)")
    return FilterClause(field=name, operator=op, value=value)


def _is_json_finite(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, (list, tuple)):
        return all(_is_json_finite(v) for v in value)
    if isinstance(value, dict):
        return all(_is_json_finite(v) for v in value.values())
    return True


def aggregate(field: str, type: str, alias: str) -> AggregateSpec:
    """Build an aggregate spec, checking the aggregation type name."""
    name = (field or "").strip()
    label = (alias or "").strip()
    if not name or not label:
        raise ValidationError("Aggregate needs both a field and an alias")
    try:
        agg_type = AggregateType(str(type).strip().upper())
    except ValueError:
        allowed = ", ".join(t.value for t in AggregateType)
        raise ValidationError(f"Unknown aggregate type '{type}' (expected one of {allowed})") from None
    return AggregateSpec(field=name, type=agg_type, alias=label)


def validate_aliases(aggregates: Iterable[AggregateSpec]) -> None:
    """Raise ValidationError when two aggregates share an alias."""
    seen: set[str] = set()
    for spec in aggregates:
        if spec.alias in seen:
            raise ValidationError(f"Duplicate aggregate alias '{spec.alias}'")
        seen.add(spec.alias)


def build_query(
    filters: Sequence[FilterClause],
    aggregates: Sequence[AggregateSpec],
    select_fields: Sequence[str],
    order_by: Optional[Sequence[OrderSpec]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> QueryRequest:
    """Assemble a QueryRequest from operator choices.

    Args:
        filters: Where clauses; empty means no filter.
        aggregates: Aggregations; aliases must be distinct.
        select_fields: Grouping/projection fields.
        order_by: Optional sort keys.
        limit: Optional non-negative row limit.
        offset: Optional non-negative row offset.

    Returns:
        QueryRequest preserving the order and identity of every input item.

    Raises:
        ValidationError: Duplicate aliases or negative limit/offset.
    """
    aggregates = list(aggregates or [])
    validate_aliases(aggregates)
    for label, value in (("limit", limit), ("offset", offset)):
        if value is not None and int(value) < 0:
            raise ValidationError(f"{label} cannot be negative")
    return QueryRequest(
        where=list(filters or []),
        aggregate=aggregates,
        select=list(select_fields or []),
        order_by=list(order_by or []),
        limit=None if limit is None else int(limit),
        offset=None if offset is None else int(offset),
    )


def _decode_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def parse_filter(text: str) -> FilterClause:
    """Parse ``field:OPERATOR:value`` (value JSON-decoded when possible)."""
    parts = (text or "").split(":", 2)
    if len(parts) < 2:
        raise ValidationError(f"Invalid filter '{text}'; expected field:OPERATOR[:value]")
    value = _decode_value(parts[2]) if len(parts) == 3 else None
    return where(parts[0], parts[1], value)


def parse_aggregate(text: str) -> AggregateSpec:
    """Parse ``field:TYPE:alias``."""
    parts = (text or "").split(":")
    if len(parts) != 3:
        raise ValidationError(f"Invalid aggregate '{text}'; expected field:TYPE:alias")
    return aggregate(parts[0], parts[1], parts[2])


def parse_order(text: str) -> OrderSpec:
    """Parse ``field`` or ``field:ASC|DESC``."""
    name, _, direction = (text or "").partition(":")
    name = name.strip()
    if not name:
        raise ValidationError("Order field cannot be empty")
    direction = direction.strip().upper() or "ASC"
    if direction not in ("ASC", "DESC"):
        raise ValidationError(f"Invalid sort order '{direction}'")
    return OrderSpec(field=name, descending=direction == "DESC")


def broadcast_aggregate(result: QueryResult, label_field: str, alias: str) -> List[Tuple[Any, Any]]:
    """Pair every row label with the single global aggregate value.

    An aggregation without a grouping field yields one scalar; each label from
    ``select`` is shown next to that same value. The value is never divided or
    recomputed per label.
    """
    value = result.aggregations.get(alias)
    return [(row.get(label_field), value) for row in result.rows]
