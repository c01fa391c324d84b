"""
Validation components of the RTTMLib package.
"""

from .issues import ValidationIssue, ValidationSeverity, has_errors
from .tolerance import (
    EPSILON,
    compare_records,
    equal_to,
    greater_than,
    less_than,
    merge_records,
)
from .consistency import (
    AdjacencyState,
    check_consistency,
    check_content,
    check_ip_adjacency,
    check_overlap,
    check_partial_coverage,
    check_word_coverage,
    find_ip,
    find_partial_coverage,
    has_content,
    is_contained,
    sort_partitions,
)
from .validators import (
    validate_begin,
    validate_channel,
    validate_confidence,
    validate_duration,
    validate_field_count,
    validate_orthography,
    validate_record,
    validate_rttm,
    validate_speaker,
    validate_subtype,
    validate_syntax,
)

__all__ = [
    # Core Classes
    "ValidationSeverity",
    "ValidationIssue",
    "has_errors",
    # Main Validation
    "validate_rttm",
    "validate_syntax",
    "check_consistency",
    # Tolerant Comparison and Ordering
    "EPSILON",
    "less_than",
    "greater_than",
    "equal_to",
    "compare_records",
    "merge_records",
    # Consistency Checks
    "sort_partitions",
    "check_overlap",
    "check_content",
    "check_partial_coverage",
    "check_word_coverage",
    "check_ip_adjacency",
    "AdjacencyState",
    "is_contained",
    "has_content",
    "find_partial_coverage",
    "find_ip",
    # Field Validation
    "validate_record",
    "validate_field_count",
    "validate_channel",
    "validate_begin",
    "validate_duration",
    "validate_orthography",
    "validate_subtype",
    "validate_confidence",
    "validate_speaker",
]
