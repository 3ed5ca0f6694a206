from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .accessors import resolve
from .paths import SEP
from .values import parse_float, parse_int, value_to_text

OPERATORS: List[Tuple[str, str]] = [
    ('contains', 'contains'),
    ('equals', 'equals'),
    ('>', '>'),
    ('<', '<'),
    ('between', 'between'),
    ('is_empty', 'is empty'),
    ('is_not_empty', 'is not empty'),
    ('length_equals', 'length ='),
    ('length_gt', 'length >'),
    ('length_lt', 'length <'),
]

NO_OPERAND_OPERATORS = ('is_empty', 'is_not_empty')
RANGE_OPERATORS = ('between',)


def needs_operand1(operator: str) -> bool:
    return operator not in NO_OPERAND_OPERATORS


def needs_operand2(operator: str) -> bool:
    return operator in RANGE_OPERATORS


@dataclass(frozen=True)
class FilterSpec:
    """One per-column filter: ``field <operator> operand1 [operand2]``."""

    id: str
    field: str
    operator: str = 'contains'
    operand1: str = ''
    operand2: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FilterSpec':
        """Build a filter from a plain mapping.

        ``val1``/``val2`` are accepted as aliases for the operands.
        """
        return cls(
            id=str(data.get('id', '')),
            field=str(data.get('field', '')),
            operator=str(data.get('operator', 'contains')),
            operand1=str(data.get('operand1', data.get('val1', '')) or ''),
            operand2=str(data.get('operand2', data.get('val2', '')) or ''),
        )


def _match_length(length: int, operator: str, operand1: str) -> bool:
    if operator == 'is_empty':
        return length == 0
    if operator == 'is_not_empty':
        return length != 0
    if operator in ('length_equals', 'length_gt', 'length_lt'):
        bound = parse_int(operand1)
        if bound is None:
            return False
        if operator == 'length_equals':
            return length == bound
        if operator == 'length_gt':
            return length > bound
        return length < bound
    # Value operators do not apply to a whole array.
    return True


def _compare_number(number: Optional[float], operator: str, operand1: str, operand2: str) -> bool:
    if number is None:
        return False
    if operator == 'between':
        low, high = parse_float(operand1), parse_float(operand2)
        if low is None or high is None:
            return False
        return low <= number <= high
    bound = parse_float(operand1)
    if bound is None:
        return False
    if operator == '>':
        return number > bound
    return number < bound


def _match_value(value: Any, operator: str, operand1: str, operand2: str) -> bool:
    text = value_to_text(value)

    if operator == 'contains':
        return operand1.lower() in text.lower()
    if operator == 'equals':
        return text == operand1
    if operator in ('>', '<', 'between'):
        return _compare_number(parse_float(text), operator, operand1, operand2)
    if operator == 'is_empty':
        return text.strip() == ''
    if operator == 'is_not_empty':
        return text.strip() != ''
    return False


def matches(record: Any, spec: FilterSpec) -> bool:
    """Test one record against one filter.

    An undotted field whose direct value is an array is tested on the array's
    length. Otherwise the filter matches when any resolved, non-null value
    satisfies the operator; a record where the path resolves to nothing is
    rejected.
    """
    field = spec.field
    operand1 = spec.operand1 or ''
    operand2 = spec.operand2 or ''

    if SEP not in field and isinstance(record, dict) and isinstance(record.get(field), list):
        return _match_length(len(record[field]), spec.operator, operand1)

    for value in resolve(record, field):
        if value is None:
            continue
        if _match_value(value, spec.operator, operand1, operand2):
            return True
    return False


def matches_all(record: Any, specs: List[FilterSpec]) -> bool:
    return all(matches(record, spec) for spec in specs)
