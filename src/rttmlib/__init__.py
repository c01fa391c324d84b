# src/rttmlib/__init__.py

"""
RTTMLib: Rich Transcription Time-Marked File Validator.

This package loads RTTM annotation files and checks both the syntax of
every record and the temporal consistency between records.
"""

from .rttm import (
    RichTranscriptionTimeMarked,
    RTTMError,
    ValidationError,
)
from .config import ValidationConfig, load_config
from .core.data_classes import PartitionKey, RTTMDocument, RTTMRecord
from .core.enums import Domain, RecordType
from .validation import ValidationIssue, ValidationSeverity, validate_rttm

__all__ = [
    "RichTranscriptionTimeMarked",
    "RTTMError",
    "ValidationError",
    "ValidationConfig",
    "load_config",
    "PartitionKey",
    "RTTMDocument",
    "RTTMRecord",
    "Domain",
    "RecordType",
    "ValidationIssue",
    "ValidationSeverity",
    "validate_rttm",
]

__version__ = "0.1.0"
