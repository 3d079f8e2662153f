"""
Group-and-sum over payroll or employee records.

Every report is the same computation: pick a group key for each record, count
the records per key and sum a handful of decimal fields. Groups keep the order
in which their first record was seen.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple, Union

from app.payrolls.calculator import ZERO, to_decimal

# A field is read off the record by name, or computed by a (name, callable) pair
FieldSpec = Union[str, Tuple[str, Callable[[Any], Any]]]

CENTS = Decimal("0.01")


@dataclass
class GroupTotals:
    count: int = 0
    totals: Dict[str, Decimal] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Decimal:
        return self.totals[name]


def _resolve(fields: Sequence[FieldSpec]) -> List[Tuple[str, Callable[[Any], Any]]]:
    resolved = []
    for spec in fields:
        if isinstance(spec, str):
            resolved.append((spec, lambda record, name=spec: getattr(record, name)))
        else:
            resolved.append(spec)
    return resolved


def empty_totals(fields: Sequence[FieldSpec]) -> GroupTotals:
    return GroupTotals(count=0, totals={name: ZERO for name, _ in _resolve(fields)})


def aggregate(
    records: Iterable[Any],
    key_fn: Callable[[Any], Optional[Hashable]],
    fields: Sequence[FieldSpec]
) -> Dict[Hashable, GroupTotals]:
    """Count and sum records per key; records whose key is None are left out."""
    resolved = _resolve(fields)
    groups: Dict[Hashable, GroupTotals] = {}

    for record in records:
        key = key_fn(record)
        if key is None:
            continue

        group = groups.get(key)
        if group is None:
            group = groups[key] = empty_totals(fields)

        group.count += 1
        for name, value_fn in resolved:
            group.totals[name] += to_decimal(value_fn(record))

    return groups


def aggregate_by_month(records: Iterable[Any], fields: Sequence[FieldSpec]) -> Dict[int, GroupTotals]:
    """Per-month totals for months 1 through 12, months without records are zero."""
    groups = aggregate(records, lambda record: record.month, fields)
    return {month: groups.get(month) or empty_totals(fields) for month in range(1, 13)}


def overall(records: Iterable[Any], fields: Sequence[FieldSpec]) -> GroupTotals:
    """Totals over all records as a single group."""
    return aggregate(records, lambda record: True, fields).get(True) or empty_totals(fields)


def average(total: Decimal, count: int) -> Decimal:
    if count == 0:
        return ZERO
    return (to_decimal(total) / count).quantize(CENTS, rounding=ROUND_HALF_UP)
