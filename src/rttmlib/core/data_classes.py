"""RTTMLib core data classes for Rich Transcription Time-Marked files.

IMPORTANT: This module only defines data structures and parsing.
All validation is handled separately in rttmlib.validation.
Data classes should NOT perform validation - they keep every field exactly
as it was read so that the syntax validator can report on it later.

Key Components:
    * RTTMRecord - One line of an RTTM file, nine raw text fields
    * PartitionKey - The (source, channel, speaker) scope of consistency checks
    * RTTMDocument - All records of a file plus the announced data domain

Example:
    ```python
    from rttmlib.core.data_classes import RTTMDocument

    document = RTTMDocument.from_string(
        "SPKR-INFO f1 1 <NA> <NA> <NA> adult_male spk1 <NA>\\n"
        "LEXEME f1 1 0.50 0.20 hello lex spk1 <NA>\\n"
    )
    for key, groups in document.partitions().items():
        print(key.speaker, [kind.value for kind in groups])
    ```

Note:
    Numeric properties (begin, duration, end) parse the raw text on access
    and are only meaningful for records that passed syntax validation.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Set

from .enums import Domain, RecordType

NUM_FIELDS = 9
NOT_APPLICABLE = "<NA>"

COMMENT_PATTERN = re.compile(r"^\s*;;")
EXP_ID_PATTERN = re.compile(r"^\s*;;\s*EXP-ID:\s*(.*)")


def _parse_time(text: Optional[str]) -> Optional[float]:
    """Convert an RTTM time field to seconds.

    A trailing ``*`` marks an approximate time and is ignored; ``<NA>``
    yields None.
    """
    if text is None or text.upper() == NOT_APPLICABLE:
        return None
    return float(text.replace("*", ""))


@dataclass(frozen=True)
class RTTMRecord:
    """A single RTTM record.

    Attributes:
        type (Optional[str]): Raw type field (field 1)
        source (Optional[str]): Source file identifier (field 2)
        channel (Optional[str]): Channel id, "1" or "2" (field 3)
        begin_text (Optional[str]): Start time in seconds or <NA> (field 4)
        duration_text (Optional[str]): Duration in seconds or <NA> (field 5)
        orthography (Optional[str]): Word text for LEXEME/NON-LEX (field 6)
        subtype (Optional[str]): Type-specific subtype (field 7)
        speaker (Optional[str]): Speaker id (field 8)
        confidence (Optional[str]): Confidence in [0, 1] or <NA> (field 9)
        field_count (int): Number of fields found on the line
        location (str): Diagnostic tag, e.g. "line 12"

    Note:
        Fields missing from a short line are None; extra fields on a long
        line are dropped but still counted in field_count.
    """

    type: Optional[str]
    source: Optional[str]
    channel: Optional[str]
    begin_text: Optional[str]
    duration_text: Optional[str]
    orthography: Optional[str] = NOT_APPLICABLE
    subtype: Optional[str] = NOT_APPLICABLE
    speaker: Optional[str] = None
    confidence: Optional[str] = NOT_APPLICABLE
    field_count: int = NUM_FIELDS
    location: str = field(default="", compare=False)

    @classmethod
    def from_line(cls, line: str, line_number: int = 0) -> "RTTMRecord":
        """Split one RTTM line into its nine fields.

        Args:
            line: A non-comment, non-blank RTTM line
            line_number: 1-based line number used for the location tag

        Returns:
            RTTMRecord: The record, with None for every missing field
        """
        fields_ = line.split()
        padded = fields_[:NUM_FIELDS] + [None] * (NUM_FIELDS - len(fields_))
        return cls(
            *padded,
            field_count=len(fields_),
            location=f"line {line_number}",
        )

    def to_line(self) -> str:
        """Render the record as a single RTTM line."""
        values = [
            self.type,
            self.source,
            self.channel,
            self.begin_text,
            self.duration_text,
            self.orthography,
            self.subtype,
            self.speaker,
            self.confidence,
        ]
        return " ".join(value for value in values if value is not None)

    @property
    def has_all_fields(self) -> bool:
        return all(
            value is not None
            for value in (
                self.type,
                self.source,
                self.channel,
                self.begin_text,
                self.duration_text,
                self.orthography,
                self.subtype,
                self.speaker,
                self.confidence,
            )
        )

    @property
    def kind(self) -> Optional[RecordType]:
        return RecordType.from_text(self.type)

    @property
    def begin(self) -> Optional[float]:
        return _parse_time(self.begin_text)

    @property
    def duration(self) -> Optional[float]:
        return _parse_time(self.duration_text)

    @property
    def end(self) -> Optional[float]:
        """End time; equal to begin for records without a duration."""
        begin = self.begin
        duration = self.duration
        if begin is None or duration is None:
            return begin
        return begin + duration

    @property
    def partition_key(self) -> "PartitionKey":
        return PartitionKey(self.source, self.channel, self.speaker)


class PartitionKey(NamedTuple):
    """Scope of every consistency check: one speaker on one channel of one source."""

    source: str
    channel: str
    speaker: str

    def __str__(self) -> str:
        return f"{self.source}/{self.channel}/{self.speaker}"


# Per-partition index: kind -> records of that kind
KindGroups = Dict[RecordType, List[RTTMRecord]]


@dataclass
class RTTMDocument:
    """All records of one RTTM file.

    Attributes:
        records (List[RTTMRecord]): Records in file order
        domain (Domain): Domain announced by the last EXP-ID comment

    Example:
        ```python
        with open("file.rttm", encoding="utf-8") as f:
            document = RTTMDocument.from_lines(f)
        print(len(document.records), document.domain)
        ```
    """

    records: List[RTTMRecord] = field(default_factory=list)
    domain: Domain = Domain.UNKNOWN

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "RTTMDocument":
        """Parse RTTM lines, skipping blanks and ``;;`` comments.

        An ``;; EXP-ID:`` comment naming "bnews" or "cts" sets the domain.
        """
        records = []
        domain = Domain.UNKNOWN
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            match = EXP_ID_PATTERN.match(line)
            if match:
                exp_id = match.group(1).lower()
                if "bnews" in exp_id:
                    domain = Domain.BROADCAST_NEWS
                elif "cts" in exp_id:
                    domain = Domain.TELEPHONE
            elif not COMMENT_PATTERN.match(line) and line.strip():
                records.append(RTTMRecord.from_line(line, line_number))
        return cls(records=records, domain=domain)

    @classmethod
    def from_string(cls, text: str) -> "RTTMDocument":
        return cls.from_lines(text.splitlines())

    def to_string(self) -> str:
        return "".join(record.to_line() + "\n" for record in self.records)

    def partitions(self) -> Dict[PartitionKey, KindGroups]:
        """Group records by (source, channel, speaker), then by kind.

        Returns:
            Dict[PartitionKey, KindGroups]: Partitions in sorted key order.
            Each partition maps kinds, in RecordType declaration order, to
            their records in file order. Records of unknown type, or with
            missing identity fields, are left out.
        """
        grouped: Dict[PartitionKey, Dict[RecordType, List[RTTMRecord]]] = {}
        for record in self.records:
            kind = record.kind
            key = record.partition_key
            if kind is None or None in key:
                continue
            grouped.setdefault(key, {}).setdefault(kind, []).append(record)

        partitions = {}
        for key in sorted(grouped):
            groups = grouped[key]
            partitions[key] = {kind: groups[kind] for kind in RecordType if kind in groups}
        return partitions

    def speaker_ids(self) -> Set[str]:
        """Speaker ids declared by SPKR-INFO records, lower-cased."""
        return {
            record.speaker.lower()
            for record in self.records
            if record.kind is RecordType.SPKR_INFO and record.speaker is not None
        }
