"""Tolerant time comparison and merge ordering for RTTM records.

RTTM times are decimal text with rounding noise, so every comparison the
consistency checks make goes through the three predicates below. They are
deliberately independent: close to the boundary a pair of values can be
neither less, greater nor equal, and callers rely on that.
"""

from functools import cmp_to_key
from typing import Iterable, List

from ..core.data_classes import RTTMRecord
from ..core.enums import RecordType

EPSILON = 0.000999999


def less_than(a: float, b: float) -> bool:
    return a + EPSILON < b


def greater_than(a: float, b: float) -> bool:
    return a > b + EPSILON


def equal_to(a: float, b: float) -> bool:
    return abs(a - b) < EPSILON


def compare_records(a: RTTMRecord, b: RTTMRecord) -> int:
    """Order two records chronologically, then by type priority.

    Begin times closer than EPSILON count as simultaneous, in which case
    the RecordType declaration order decides.
    """
    if a.begin < b.begin - EPSILON:
        return -1
    if a.begin > b.begin + EPSILON:
        return 1
    return (a.kind.priority > b.kind.priority) - (a.kind.priority < b.kind.priority)


merge_order_key = cmp_to_key(compare_records)


def merge_records(groups: Iterable[List[RTTMRecord]]) -> List[RTTMRecord]:
    """Merge per-kind record lists into one chronological stream.

    SPKR-INFO records carry no time and are left out.

    Args:
        groups: Record lists of a single partition

    Returns:
        List[RTTMRecord]: Records sorted with compare_records; the sort is
        stable, so equal records keep the order of the input lists.
    """
    stream = [
        record
        for records in groups
        for record in records
        if record.kind is not RecordType.SPKR_INFO
    ]
    return sorted(stream, key=merge_order_key)
