# rttmlib/core/__init__.py

"""Core components of the RTTMLib package."""

from .data_classes import (
    NOT_APPLICABLE,
    NUM_FIELDS,
    KindGroups,
    PartitionKey,
    RTTMDocument,
    RTTMRecord,
)
from .enums import Domain, RecordType

__all__ = [
    "NOT_APPLICABLE",
    "NUM_FIELDS",
    "KindGroups",
    "PartitionKey",
    "RTTMDocument",
    "RTTMRecord",
    "Domain",
    "RecordType",
]
