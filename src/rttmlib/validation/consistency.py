"""
RTTMLib temporal consistency checks.

These checks reason about relationships between records of one partition
(source, channel, speaker) and never compare records across partitions:

    1. Overlap - spans of one kind must not overlap
    2. Content - every SU, EDIT and FILLER holds at least one word
    3. Partial coverage - no word straddles an SU, EDIT or FILLER boundary
    4. Coverage - every word lies inside some SU and some SPEAKER turn
    5. IP adjacency - every EDIT and FILLER sits next to a matching IP

Checks 1-3 form the first phase. Later checks assume the first phase holds
(non-overlapping SUs in particular), so any first-phase error ends the run.
The second-phase checks are independently switchable and always run to
completion.

Example:
    ```python
    from rttmlib.core import RTTMDocument
    from rttmlib.validation.consistency import check_consistency

    issues = check_consistency(RTTMDocument.from_string(text))
    for issue in issues:
        print(issue)
    ```

Note:
    All checks assume the records passed syntax validation; they parse the
    time fields without further checking.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import ValidationConfig
from ..core.data_classes import KindGroups, PartitionKey, RTTMDocument, RTTMRecord
from ..core.enums import RecordType
from .issues import ValidationIssue
from .tolerance import EPSILON, equal_to, greater_than, less_than, merge_records

logger = logging.getLogger(__name__)

Partitions = Dict[PartitionKey, KindGroups]

# Error codes
OVERLAP = "OVERLAP"
NO_CONTENT = "NO_CONTENT"
PARTIAL_COVERAGE = "PARTIAL_COVERAGE"
NOT_COVERED = "NOT_COVERED"
MISSING_IP = "MISSING_IP"
BAD_IP_SUBTYPE = "BAD_IP_SUBTYPE"

COVERAGE_KINDS = (RecordType.SU, RecordType.SPEAKER)


def _format_time(value: float) -> str:
    return f"{value:.3f}"


def sort_partitions(partitions: Partitions) -> Partitions:
    """Sort the records of every timed kind by begin time.

    The sort is stable. SPKR-INFO lists are carried over untouched. The
    input mapping and its lists are not modified.
    """
    sorted_partitions = {}
    for key, groups in partitions.items():
        sorted_partitions[key] = {
            kind: list(records)
            if kind is RecordType.SPKR_INFO
            else sorted(records, key=lambda record: record.begin)
            for kind, records in groups.items()
        }
    return sorted_partitions


#
# Span predicates
#
def is_contained(spans: Sequence[RTTMRecord], start: float, end: float) -> bool:
    """True if [start, end] lies, within tolerance, inside one of spans."""
    for span in spans:
        if start + EPSILON >= span.begin and end - EPSILON <= span.end:
            return True
    return False


def has_content(words: Sequence[RTTMRecord], start: float, end: float) -> bool:
    """True if one of words lies, within tolerance, inside [start, end]."""
    for word in words:
        if word.begin + EPSILON >= start and word.end - EPSILON <= end:
            return True
    return False


def find_partial_coverage(
    spans: Sequence[RTTMRecord], start: float, end: float
) -> Optional[RTTMRecord]:
    """Find the first span that the word [start, end] straddles.

    A word is fine against a span when it ends before the span begins,
    begins after the span ends, or lies completely inside it. Anything else
    cuts across a span boundary.

    Returns:
        Optional[RTTMRecord]: The straddled span, or None.
    """
    for span in spans:
        span_begin = span.begin
        span_end = span.end
        if less_than(end, span_begin) or equal_to(end, span_begin):
            continue
        if greater_than(start, span_end) or equal_to(start, span_end):
            continue
        if (greater_than(start, span_begin) or equal_to(start, span_begin)) and (
            less_than(end, span_end) or equal_to(end, span_end)
        ):
            continue
        return span
    return None


def find_ip(
    ips: Sequence[RTTMRecord], su: Optional[RTTMRecord], target: float
) -> Optional[RTTMRecord]:
    """Find an IP inside the SU at the target time.

    The IP must fall inside [su.begin, su.end] and begin within tolerance of
    target. Without an enclosing SU there is nothing to search.
    """
    if su is None:
        return None
    su_begin = su.begin
    su_end = su.end
    for ip in ips:
        if su_begin <= ip.begin <= su_end and equal_to(ip.begin, target):
            return ip
    return None


#
# Phase one
#
def check_overlap(partitions: Partitions) -> List[ValidationIssue]:
    """Report spans that start before the previous span of their kind ended.

    Only consecutive spans are compared, and the running end is the end of
    the previous span, not the largest end seen so far. IP, CB and SPKR-INFO
    records are not checked.
    """
    issues = []
    exempt = RecordType.overlap_exempt()

    for key, groups in partitions.items():
        for kind, records in groups.items():
            if kind in exempt:
                continue
            prev_end = 0.0
            for record in records:
                if prev_end - record.begin > EPSILON:
                    issues.append(
                        ValidationIssue.for_record(
                            record,
                            f"Speaker {key.speaker} has {kind.value}s ending at "
                            f"{_format_time(prev_end)} and starting at "
                            f"{record.begin_text}; {kind.value}s overlap",
                            OVERLAP,
                        )
                    )
                prev_end = record.end

    return issues


def check_content(partitions: Partitions) -> List[ValidationIssue]:
    """Report SU, EDIT and FILLER spans that contain no word."""
    issues = []
    metadata_kinds = RecordType.metadata_kinds()

    for groups in partitions.values():
        words = groups.get(RecordType.LEXEME, [])
        for kind, records in groups.items():
            if kind not in metadata_kinds:
                continue
            for record in records:
                if not has_content(words, record.begin, record.end):
                    issues.append(
                        ValidationIssue.for_record(
                            record,
                            f"{kind.value} at {record.begin_text} contains no words",
                            NO_CONTENT,
                        )
                    )

    return issues


def check_partial_coverage(partitions: Partitions) -> List[ValidationIssue]:
    """Report words that straddle an SU, EDIT or FILLER boundary.

    At most one issue is produced per word and metadata kind.
    """
    issues = []
    metadata_kinds = RecordType.metadata_kinds()

    for groups in partitions.values():
        for word in groups.get(RecordType.LEXEME, []):
            for kind, spans in groups.items():
                if kind not in metadata_kinds:
                    continue
                if find_partial_coverage(spans, word.begin, word.end) is not None:
                    issues.append(
                        ValidationIssue.for_record(
                            word,
                            f"word at {word.begin_text} is partially covered by "
                            f"{kind.value} object",
                            PARTIAL_COVERAGE,
                        )
                    )

    return issues


#
# Phase two
#
def check_word_coverage(
    partitions: Partitions, kind: RecordType
) -> List[ValidationIssue]:
    """Report words that lie outside every span of the given kind.

    Args:
        partitions: Sorted partitions
        kind: RecordType.SU or RecordType.SPEAKER

    Raises:
        ValueError: If kind is not a coverage kind
    """
    if kind not in COVERAGE_KINDS:
        raise ValueError(f"Word coverage cannot be checked against {kind.value}")

    issues = []
    for groups in partitions.values():
        spans = groups.get(kind, [])
        for word in groups.get(RecordType.LEXEME, []):
            if not is_contained(spans, word.begin, word.end):
                issues.append(
                    ValidationIssue.for_record(
                        word,
                        f"word at {word.begin_text} doesn't belong to any "
                        f"{kind.value} object",
                        NOT_COVERED,
                    )
                )
    return issues


@dataclass(frozen=True)
class AdjacencyState:
    """State threaded through the IP-adjacency walk of one partition.

    Attributes:
        current_su: The most recent SU in the merged stream
        pending_edit: The most recent EDIT whose IP has subtype
            "edit&filler"; a following FILLER may share that IP
    """

    current_su: Optional[RTTMRecord] = None
    pending_edit: Optional[RTTMRecord] = None


def _describe(record: RTTMRecord) -> str:
    return f"{record.kind.value} ({_format_time(record.begin)}, {_format_time(record.end)})"


def _resolve_edit(
    state: AdjacencyState, edit: RTTMRecord, ips: Sequence[RTTMRecord]
) -> Tuple[AdjacencyState, Optional[ValidationIssue]]:
    # An EDIT is followed by its IP, so the IP sits at the EDIT's end.
    edit_end = edit.end
    ip = find_ip(ips, state.current_su, edit_end)
    if ip is None:
        return state, ValidationIssue.for_record(
            edit,
            f"{_describe(edit)} doesn't have any IP at {_format_time(edit_end)}",
            MISSING_IP,
        )

    subtype = ip.subtype.lower()
    if subtype == "edit":
        logger.debug("Got IP (%s) for %s", ip.begin_text, _describe(edit))
        return state, None
    if subtype == "edit&filler":
        logger.debug("Got IP (%s) for %s, pending filler", ip.begin_text, _describe(edit))
        return replace(state, pending_edit=edit), None
    return state, ValidationIssue.for_record(
        edit,
        f"{_describe(edit)} has an IP at {_format_time(edit_end)} with a bad subtype",
        BAD_IP_SUBTYPE,
    )


def _resolve_filler(
    state: AdjacencyState, filler: RTTMRecord, ips: Sequence[RTTMRecord]
) -> Optional[ValidationIssue]:
    # A FILLER is preceded by its IP, or shares the IP of a pending EDIT.
    pending = state.pending_edit
    ip = find_ip(ips, state.current_su, filler.begin)
    if ip is not None:
        subtype = ip.subtype.lower()
        if subtype == "filler":
            logger.debug("Got IP (%s) for %s", ip.begin_text, _describe(filler))
            return None
        if (
            subtype == "edit&filler"
            and pending is not None
            and equal_to(ip.begin, pending.end)
        ):
            logger.debug("Got shared IP (%s) for %s", ip.begin_text, _describe(filler))
            return None
        return ValidationIssue.for_record(
            filler,
            f"{_describe(filler)} has an IP at {_format_time(filler.begin)} "
            "with a bad subtype",
            BAD_IP_SUBTYPE,
        )

    if pending is not None:
        ip = find_ip(ips, state.current_su, pending.end)
        if ip is not None:
            logger.debug(
                "Got IP (%s) of preceding EDIT for %s", ip.begin_text, _describe(filler)
            )
            return None

    return ValidationIssue.for_record(
        filler,
        f"{_describe(filler)} doesn't have any IP at {_format_time(filler.begin)}",
        MISSING_IP,
    )


def check_ip_adjacency(
    partitions: Partitions, check_edits: bool = True, check_fillers: bool = True
) -> List[ValidationIssue]:
    """Check that every EDIT and FILLER has a structurally valid IP.

    Each partition is walked once in merge order. An SU becomes the
    enclosing SU for the records after it; an EDIT whose IP is an
    "edit&filler" IP becomes the pending edit a later FILLER may lean on.

    Args:
        partitions: Sorted partitions
        check_edits: Report issues for EDIT records
        check_fillers: Report issues for FILLER records

    Note:
        EDITs are resolved even when check_edits is False, so the pending
        edit seen by FILLERs does not depend on the switches.
    """
    issues = []

    for key, groups in partitions.items():
        ips = groups.get(RecordType.IP, [])
        state = AdjacencyState()
        for record in merge_records(groups.values()):
            kind = record.kind
            if kind is RecordType.SU:
                logger.debug("Start of SU (%s) in %s", record.begin_text, key)
                state = replace(state, current_su=record)
            elif kind is RecordType.EDIT:
                state, issue = _resolve_edit(state, record, ips)
                if issue is not None and check_edits:
                    issues.append(issue)
            elif kind is RecordType.FILLER and check_fillers:
                issue = _resolve_filler(state, record, ips)
                if issue is not None:
                    issues.append(issue)

    return issues


def check_consistency(
    document: RTTMDocument, config: Optional[ValidationConfig] = None
) -> List[ValidationIssue]:
    """Run every consistency check over a document.

    Args:
        document: A document whose records passed syntax validation
        config: Switches for the optional checks, all enabled by default

    Returns:
        List[ValidationIssue]: Issues in check order; empty if consistent.
    """
    config = config or ValidationConfig()
    partitions = sort_partitions(document.partitions())
    logger.debug("Checking consistency of %d partition(s)", len(partitions))

    for check in (check_overlap, check_content, check_partial_coverage):
        issues = check(partitions)
        if issues:
            logger.info(
                "%s found %d issue(s); skipping remaining checks",
                check.__name__,
                len(issues),
            )
            return issues

    if config.check_su_coverage:
        issues.extend(check_word_coverage(partitions, RecordType.SU))
    if config.check_speaker_coverage:
        issues.extend(check_word_coverage(partitions, RecordType.SPEAKER))
    if config.check_edit_ip or config.check_filler_ip:
        issues.extend(
            check_ip_adjacency(
                partitions,
                check_edits=config.check_edit_ip,
                check_fillers=config.check_filler_ip,
            )
        )

    return issues
