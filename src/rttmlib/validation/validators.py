"""
RTTMLib validation module for Rich Transcription Time-Marked files.

This module validates RTTM documents in two stages:
    1. Syntax Validation - field count, type, channel, times, orthography,
       subtype, confidence and speaker declarations of every record
    2. Consistency Validation - temporal relationships between records
       (see rttmlib.validation.consistency)

The consistency stage only runs on a document free of syntax errors, since
it parses time fields without checking them. Syntax warnings do not block it.

Example:
    ```python
    from rttmlib.core import RTTMDocument
    from rttmlib.validation import validate_rttm

    document = RTTMDocument.from_string(text)
    for issue in validate_rttm(document):
        print(f"{issue.severity.value}: {issue}")
    ```

Note:
    All validation functions return a list of ValidationIssue objects. Each
    issue includes a message, the location tag of the offending record, a
    severity level and an error code.
"""

import re
from typing import Dict, FrozenSet, List, Optional, Set

from ..config import ValidationConfig
from ..core.data_classes import NOT_APPLICABLE, NUM_FIELDS, RTTMDocument, RTTMRecord
from ..core.enums import Domain, RecordType
from .consistency import check_consistency
from .issues import ValidationIssue, ValidationSeverity, has_errors

# Regular expression patterns
NUMBER_PATTERN = re.compile(r"^(-?\d+\.?\d*|-?\.\d+)$")
TIME_PATTERN = re.compile(r"^(-?\d+\.?\d*|-?\.\d+)\**$")
CHANNEL_PATTERN = re.compile(r"^(1|2)$")
ALPHA_ORTHOGRAPHY_PATTERN = re.compile(r"^([A-Z]\.|[A-Z]\.'*s)$", re.IGNORECASE)
ORTHOGRAPHY_PATTERN = re.compile(r"^[\[\]a-zA-Z.\-']+$")

# Error codes
FIELD_COUNT = "FIELD_COUNT"
INVALID_TYPE = "INVALID_TYPE"
INVALID_CHANNEL = "INVALID_CHANNEL"
INVALID_BEGIN = "INVALID_BEGIN"
INVALID_DURATION = "INVALID_DURATION"
INVALID_ORTHOGRAPHY = "INVALID_ORTHOGRAPHY"
INVALID_SUBTYPE = "INVALID_SUBTYPE"
INVALID_CONFIDENCE = "INVALID_CONFIDENCE"
UNKNOWN_SPEAKER = "UNKNOWN_SPEAKER"

# Valid subtypes per record type
VALID_SUBTYPES: Dict[RecordType, FrozenSet[str]] = {
    RecordType.SEGMENT: frozenset({"eval", "<na>"}),
    RecordType.NOSCORE: frozenset({"<na>"}),
    RecordType.NO_RT_METADATA: frozenset({"<na>"}),
    RecordType.SPEAKER: frozenset({"<na>"}),
    RecordType.A_P: frozenset({"other"}),
    RecordType.LEXEME: frozenset(
        {
            "lex",
            "fp",
            "frag",
            "un-lex",
            "for-lex",
            "alpha",
            "acronym",
            "interjection",
            "propernoun",
            "other",
        }
    ),
    RecordType.NON_LEX: frozenset(
        {"laugh", "breath", "lipsmack", "cough", "sneeze", "other"}
    ),
    RecordType.NON_SPEECH: frozenset({"noise", "music", "other"}),
    RecordType.FILLER: frozenset(
        {"filled_pause", "discourse_marker", "explicit_editing_term", "other"}
    ),
    RecordType.EDIT: frozenset(
        {"repetition", "restart", "revision", "simple", "complex", "other"}
    ),
    RecordType.SU: frozenset(
        {
            "statement",
            "question",
            "incomplete",
            "backchannel",
            "unannotated",
            "discourse_response",
            "other",
        }
    ),
    RecordType.IP: frozenset({"edit", "filler", "edit&filler", "other"}),
    RecordType.CB: frozenset({"coordinating", "clausal", "other"}),
    RecordType.SPKR_INFO: frozenset(
        {"adult_male", "adult_female", "child", "unknown"}
    ),
}

# Subtypes of these types are matched case-sensitively
CASE_SENSITIVE_SUBTYPES = frozenset(
    {RecordType.NON_LEX, RecordType.NON_SPEECH, RecordType.SPKR_INFO}
)

# Only these types carry an orthography
ORTHOGRAPHIC_TYPES = frozenset({RecordType.LEXEME, RecordType.NON_LEX})

# Records of these types need not name a declared speaker
UNDECLARED_SPEAKER_TYPES = frozenset(
    {RecordType.SPKR_INFO, RecordType.NOSCORE, RecordType.NON_SPEECH}
)


def _is_na(value: str) -> bool:
    return value.upper() == NOT_APPLICABLE


def _error(record: RTTMRecord, message: str, error_code: str) -> ValidationIssue:
    return ValidationIssue.for_record(record, message, error_code)


def validate_field_count(record: RTTMRecord) -> List[ValidationIssue]:
    """Validate that a record has exactly nine fields."""
    if record.field_count != NUM_FIELDS:
        return [
            _error(
                record,
                f"This record has {record.field_count} fields instead of the "
                f"required {NUM_FIELDS} fields",
                FIELD_COUNT,
            )
        ]
    return []


def validate_channel(record: RTTMRecord, domain: Domain) -> List[ValidationIssue]:
    """Validate the channel id; broadcast news only has channel 1."""
    if not CHANNEL_PATTERN.match(record.channel):
        return [_error(record, "Invalid channel ID; see field (3)", INVALID_CHANNEL)]
    if domain is Domain.BROADCAST_NEWS and record.channel != "1":
        return [
            _error(
                record,
                "Expected channel ID to be 1 for BN data; see field (3)",
                INVALID_CHANNEL,
            )
        ]
    return []


def validate_begin(record: RTTMRecord) -> List[ValidationIssue]:
    """Validate the start time field.

    SPKR-INFO records have no start time; every other record needs a
    non-negative number, optionally followed by ``*`` markers.
    """
    kind = record.kind
    value = record.begin_text

    if kind is RecordType.SPKR_INFO:
        if not _is_na(value):
            return [
                _error(
                    record,
                    f"{record.type} should not have any start time; see field (4)",
                    INVALID_BEGIN,
                )
            ]
        return []

    if not TIME_PATTERN.match(value):
        return [
            _error(record, "Expected start time to be a number; see field (4)", INVALID_BEGIN)
        ]
    if float(value.replace("*", "")) < 0:
        return [_error(record, "Negative start time; see field (4)", INVALID_BEGIN)]
    return []


def validate_duration(record: RTTMRecord) -> List[ValidationIssue]:
    """Validate the duration field.

    SPKR-INFO, IP and CB records have no duration; every other record needs
    a non-negative number, optionally followed by ``*`` markers.
    """
    kind = record.kind
    value = record.duration_text

    if kind is not None and kind.is_point:
        if not _is_na(value):
            return [
                _error(
                    record,
                    f"{record.type} should not have any duration; see field (5)",
                    INVALID_DURATION,
                )
            ]
        return []

    if not TIME_PATTERN.match(value):
        return [
            _error(record, "Expected duration to be a number; see field (5)", INVALID_DURATION)
        ]
    if float(value.replace("*", "")) < 0:
        return [_error(record, "Negative duration; see field (5)", INVALID_DURATION)]
    return []


def validate_orthography(record: RTTMRecord) -> List[ValidationIssue]:
    """Validate the orthography field.

    Only LEXEME and NON-LEX records carry text. Alpha LEXEMEs must spell a
    letter ("B.", "B.s"); other unusual LEXEME spellings are warnings.
    """
    issues = []
    kind = record.kind

    if kind is None:
        return issues

    if kind not in ORTHOGRAPHIC_TYPES:
        if not _is_na(record.orthography):
            issues.append(
                _error(
                    record,
                    f"Value for the orthography field for {record.type} should "
                    f"be {NOT_APPLICABLE}; see field (6)",
                    INVALID_ORTHOGRAPHY,
                )
            )
        return issues

    if kind is RecordType.LEXEME:
        if record.subtype.lower() == "alpha" and not ALPHA_ORTHOGRAPHY_PATTERN.match(
            record.orthography
        ):
            issues.append(
                _error(
                    record,
                    f"Invalid orthography for alpha {record.type}; see field (6)",
                    INVALID_ORTHOGRAPHY,
                )
            )
        if not ORTHOGRAPHY_PATTERN.match(record.orthography):
            issues.append(
                ValidationIssue.for_record(
                    record,
                    f"Invalid orthography for {record.type}; see field (6)",
                    INVALID_ORTHOGRAPHY,
                    severity=ValidationSeverity.WARNING,
                )
            )

    return issues


def validate_subtype(record: RTTMRecord) -> List[ValidationIssue]:
    """Validate the subtype against the values allowed for the record type."""
    kind = record.kind
    if kind is None:
        return []

    subtype = record.subtype
    if kind not in CASE_SENSITIVE_SUBTYPES:
        subtype = subtype.lower()
    if subtype not in VALID_SUBTYPES[kind]:
        return [
            _error(
                record,
                f"Invalid {record.type} subtype; see field (7)",
                INVALID_SUBTYPE,
            )
        ]
    return []


def validate_confidence(record: RTTMRecord) -> List[ValidationIssue]:
    """Validate that the confidence is <NA> or a number in [0, 1]."""
    value = record.confidence
    if _is_na(value):
        return []
    if not NUMBER_PATTERN.match(value):
        return [
            _error(
                record,
                f"Expected confidence value to be a number or {NOT_APPLICABLE}; "
                "see field (9)",
                INVALID_CONFIDENCE,
            )
        ]
    if not (0.0 <= float(value) <= 1.0):
        return [
            _error(
                record,
                "Expected confidence value to be [0,1]; see field (9)",
                INVALID_CONFIDENCE,
            )
        ]
    return []


def validate_speaker(
    record: RTTMRecord, declared_speakers: Set[str]
) -> List[ValidationIssue]:
    """Validate that the record's speaker is declared by a SPKR-INFO record."""
    if record.kind in UNDECLARED_SPEAKER_TYPES:
        return []
    if record.speaker.lower() not in declared_speakers:
        return [
            _error(
                record,
                f"Speaker {record.speaker} doesn't match any of the speaker IDs "
                "in SPKR-INFO objects",
                UNKNOWN_SPEAKER,
            )
        ]
    return []


def validate_record(
    record: RTTMRecord,
    domain: Domain = Domain.UNKNOWN,
    declared_speakers: Optional[Set[str]] = None,
) -> List[ValidationIssue]:
    """Validate the fields of a single record.

    Args:
        record: Record to validate
        domain: Domain of the enclosing document
        declared_speakers: Lower-cased speaker ids from SPKR-INFO records;
            the speaker check is skipped when None

    Returns:
        List[ValidationIssue]: Issues found. Field checks only run when all
        nine fields are present.
    """
    issues = validate_field_count(record)
    if not record.has_all_fields:
        return issues

    if record.kind is None:
        issues.append(
            _error(record, "Invalid RTTM type; see field (1)", INVALID_TYPE)
        )

    issues.extend(validate_channel(record, domain))
    issues.extend(validate_begin(record))
    issues.extend(validate_duration(record))
    issues.extend(validate_orthography(record))
    issues.extend(validate_subtype(record))
    issues.extend(validate_confidence(record))
    if declared_speakers is not None:
        issues.extend(validate_speaker(record, declared_speakers))

    return issues


def validate_syntax(document: RTTMDocument) -> List[ValidationIssue]:
    """Validate the fields of every record of a document.

    Args:
        document: Parsed RTTM document

    Returns:
        List[ValidationIssue]: Issues in record order. Empty list if valid.
    """
    issues = []
    declared_speakers = document.speaker_ids()
    for record in document.records:
        issues.extend(validate_record(record, document.domain, declared_speakers))
    return issues


def validate_rttm(
    document: RTTMDocument, config: Optional[ValidationConfig] = None
) -> List[ValidationIssue]:
    """Performs complete validation of an RTTM document.

    Executes the validation sequence:
    1. Syntax Validation - every field of every record
    2. Consistency Validation - overlap, content, partial coverage, then the
       optional coverage and IP adjacency checks

    Args:
        document: Parsed RTTM document
        config: Switches for the optional consistency checks

    Returns:
        List[ValidationIssue]: All issues found. The document is valid when
        none of them is an ERROR.

    Example:
        ```python
        issues = validate_rttm(document, ValidationConfig(check_filler_ip=False))
        if not has_errors(issues):
            print("RTTM file is valid")
        ```

    Note:
        - Consistency checks are skipped when syntax validation reports an error
        - Syntax warnings are kept in front of the consistency issues
    """
    issues = validate_syntax(document)
    if has_errors(issues):
        return issues

    issues.extend(check_consistency(document, config))
    return issues
