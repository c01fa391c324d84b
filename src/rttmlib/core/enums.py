# rttmlib/core/enums.py

"""RTTMLib enumerations for Rich Transcription Time-Marked files.

This module provides enumeration classes that define the valid values of
the RTTM type field and the data domain announced by an EXP-ID comment.

Available Enums:
    * RecordType - The closed set of RTTM record types
    * Domain - Broadcast news, conversational telephone speech or unknown

Example:
    ```python
    from rttmlib.core.enums import RecordType

    kind = RecordType.from_text("lexeme")  # RecordType.LEXEME
    if kind in RecordType.metadata_kinds():
        print("needs content")
    ```

Note:
    The declaration order of RecordType is significant: it is the tie-break
    priority used when records of a partition are merged into a single
    chronological stream.
"""

from enum import Enum
from typing import FrozenSet, Optional


class RecordType(Enum):
    """RTTM record types, declared in merge priority order.

    Values:
        NOSCORE, NO_RT_METADATA, SEGMENT: Scoring and evaluation regions.
        SPEAKER: A speaker turn.
        SU: A sentence unit.
        A/P, CB, IP: Asides/parentheticals, clausal breaks and interruption points.
        EDIT, FILLER: Disfluency spans.
        NON-SPEECH, NON-LEX, LEXEME: Acoustic events and words.
        SPKR-INFO: Speaker declaration, carries no time.
    """

    NOSCORE = "NOSCORE"
    NO_RT_METADATA = "NO_RT_METADATA"
    SEGMENT = "SEGMENT"
    SPEAKER = "SPEAKER"
    SU = "SU"
    A_P = "A/P"
    CB = "CB"
    IP = "IP"
    EDIT = "EDIT"
    FILLER = "FILLER"
    NON_SPEECH = "NON-SPEECH"
    NON_LEX = "NON-LEX"
    LEXEME = "LEXEME"
    SPKR_INFO = "SPKR-INFO"

    @classmethod
    def from_text(cls, text: Optional[str]) -> Optional["RecordType"]:
        """Look up a type by its RTTM spelling, ignoring case.

        Returns:
            Optional[RecordType]: The matching type, or None if unknown.
        """
        if text is None:
            return None
        try:
            return cls(text.upper())
        except ValueError:
            return None

    @property
    def priority(self) -> int:
        """Tie-break rank used by the merge ordering (lower sorts first)."""
        return _PRIORITY[self]

    @property
    def is_point(self) -> bool:
        """True for kinds whose duration field must be <NA>."""
        return self in _POINT_KINDS

    @classmethod
    def overlap_exempt(cls) -> FrozenSet["RecordType"]:
        return _OVERLAP_EXEMPT

    @classmethod
    def metadata_kinds(cls) -> FrozenSet["RecordType"]:
        """Kinds that must hold words and must not cut words in half."""
        return _METADATA_KINDS


_PRIORITY = {kind: rank for rank, kind in enumerate(RecordType)}

_POINT_KINDS = frozenset({RecordType.SPKR_INFO, RecordType.IP, RecordType.CB})

_OVERLAP_EXEMPT = frozenset({RecordType.SPKR_INFO, RecordType.IP, RecordType.CB})

_METADATA_KINDS = frozenset({RecordType.SU, RecordType.EDIT, RecordType.FILLER})


class Domain(Enum):
    """Data domain announced by an ``;; EXP-ID:`` comment.

    Values:
        BROADCAST_NEWS: EXP-ID mentions "bnews"; only channel 1 is allowed.
        TELEPHONE: EXP-ID mentions "cts".
        UNKNOWN: No EXP-ID, or one naming neither domain.
    """

    BROADCAST_NEWS = "bn"
    TELEPHONE = "cts"
    UNKNOWN = ""
