# tests/test_consistency.py

"""
Unit tests for the temporal consistency checks.

The tests verify each check on its own, the IP adjacency walk for EDIT and
FILLER records, and the two-phase orchestration in check_consistency.
"""

import random

import pytest
from deepdiff import DeepDiff

from rttmlib.config import ValidationConfig
from rttmlib.core.data_classes import PartitionKey, RTTMDocument
from rttmlib.core.enums import RecordType
from rttmlib.validation.consistency import (
    BAD_IP_SUBTYPE,
    MISSING_IP,
    NO_CONTENT,
    NOT_COVERED,
    OVERLAP,
    PARTIAL_COVERAGE,
    check_consistency,
    check_content,
    check_ip_adjacency,
    check_overlap,
    check_partial_coverage,
    check_word_coverage,
    find_partial_coverage,
    sort_partitions,
)


def _document(*lines):
    return RTTMDocument.from_string("\n".join(lines) + "\n")


def _partitions(*lines):
    return sort_partitions(_document(*lines).partitions())


def _su(begin, duration, speaker="spk1"):
    return f"SU f1 1 {begin} {duration} <NA> statement {speaker} <NA>"


def _word(begin, duration, speaker="spk1"):
    return f"LEXEME f1 1 {begin} {duration} word lex {speaker} <NA>"


def _edit(begin, duration):
    return f"EDIT f1 1 {begin} {duration} <NA> repetition spk1 <NA>"


def _filler(begin, duration):
    return f"FILLER f1 1 {begin} {duration} <NA> filled_pause spk1 <NA>"


def _ip(begin, subtype):
    return f"IP f1 1 {begin} <NA> <NA> {subtype} spk1 <NA>"


def _codes(issues):
    return [issue.error_code for issue in issues]


#
# Overlap
#
def test_overlapping_spans_of_one_kind():
    issues = check_overlap(_partitions(_su(0, 5), _su(4, 2)))
    assert _codes(issues) == [OVERLAP]
    assert issues[0].location == "line 2"
    assert "SUs overlap" in issues[0].message


def test_overlap_uses_sorted_order():
    """Records are compared in begin-time order, not file order."""
    issues = check_overlap(_partitions(_su(4, 2), _su(0, 5)))
    assert _codes(issues) == [OVERLAP]
    assert issues[0].location == "line 1"


def test_overlap_within_half_epsilon_is_accepted():
    assert check_overlap(_partitions(_su(0, "1.0"), _su("0.9995", 1))) == []


def test_overlap_of_two_epsilon_is_flagged():
    assert _codes(check_overlap(_partitions(_su(0, "1.0"), _su("0.998", 1)))) == [
        OVERLAP
    ]


def test_overlap_compares_against_previous_span_only():
    """The running end is the previous span's end, not the largest end seen."""
    issues = check_overlap(_partitions(_su(0, 10), _su(1, 1), _su(3, 1)))
    assert len(issues) == 1
    assert issues[0].location == "line 2"


def test_touching_spans_do_not_overlap():
    assert check_overlap(_partitions(_word(0, 1), _word(1, 1), _word(2, 1))) == []


def test_overlap_is_scoped_to_speaker():
    assert check_overlap(_partitions(_su(0, 5, "spk1"), _su(1, 3, "spk2"))) == []


def test_point_records_are_exempt_from_overlap():
    assert check_overlap(_partitions(_ip(4, "edit"), _ip(4, "filler"))) == []


#
# Content
#
def test_span_without_words_has_no_content():
    issues = check_content(
        _partitions(_su(0, 5), _word(1, 1), _su(6, 2), _edit(7, 1))
    )
    assert _codes(issues) == [NO_CONTENT, NO_CONTENT]
    assert issues[0].message == "SU at 6 contains no words"
    assert issues[1].message == "EDIT at 7 contains no words"


def test_word_touching_span_edges_counts_as_content():
    assert check_content(_partitions(_su("1.0", "1.0"), _word("0.9995", "1.001"))) == []


def test_span_without_any_words_in_partition():
    assert _codes(check_content(_partitions(_filler(0, 1)))) == [NO_CONTENT]


#
# Partial coverage
#
def test_word_straddling_su_end_is_partially_covered():
    issues = check_partial_coverage(_partitions(_su(0, 5), _word(4, 2)))
    assert _codes(issues) == [PARTIAL_COVERAGE]
    assert issues[0].message == "word at 4 is partially covered by SU object"


def test_word_straddling_su_start_is_partially_covered():
    assert _codes(check_partial_coverage(_partitions(_su(2, 5), _word(1, 2)))) == [
        PARTIAL_COVERAGE
    ]


@pytest.mark.parametrize(
    "word",
    [
        _word(1, 1),  # nested
        _word(0, 2),  # nested, sharing the start
        _word(5, 1),  # after, touching
        _word(7, 1),  # after
        _word("4.0", "1.0005"),  # nested within tolerance
    ],
)
def test_nested_or_disjoint_word_is_not_partially_covered(word):
    assert check_partial_coverage(_partitions(_su(0, 5), word)) == []


def test_one_issue_per_word_and_kind():
    issues = check_partial_coverage(
        _partitions(_su(0, 5), _edit(3, "2.5"), _word(4, 2))
    )
    assert [issue.message for issue in issues] == [
        "word at 4 is partially covered by SU object",
        "word at 4 is partially covered by EDIT object",
    ]


def test_find_partial_coverage_returns_straddled_span():
    partitions = _partitions(_su(0, 2), _su(3, 2))
    spans = partitions[PartitionKey("f1", "1", "spk1")][RecordType.SU]
    assert find_partial_coverage(spans, 4.0, 6.0) is spans[1]
    assert find_partial_coverage(spans, 2.0, 3.0) is None


#
# Word coverage
#
def test_word_outside_every_su_is_not_covered():
    issues = check_word_coverage(
        _partitions(_su(0, 2), _word("0.5", "0.5"), _word(3, 1)), RecordType.SU
    )
    assert _codes(issues) == [NOT_COVERED]
    assert issues[0].message == "word at 3 doesn't belong to any SU object"


def test_word_coverage_without_any_span_of_kind():
    issues = check_word_coverage(_partitions(_word(0, 1)), RecordType.SPEAKER)
    assert issues[0].message == "word at 0 doesn't belong to any SPEAKER object"


def test_word_coverage_rejects_other_kinds():
    with pytest.raises(ValueError):
        check_word_coverage({}, RecordType.LEXEME)


#
# IP adjacency
#
def test_edit_with_edit_ip_passes():
    assert check_ip_adjacency(_partitions(_su(0, 10), _edit(2, 2), _ip(4, "edit"))) == []


def test_edit_with_other_ip_has_bad_subtype():
    issues = check_ip_adjacency(_partitions(_su(0, 10), _edit(2, 2), _ip(4, "other")))
    assert _codes(issues) == [BAD_IP_SUBTYPE]


def test_edit_without_ip():
    issues = check_ip_adjacency(_partitions(_su(0, 10), _edit(2, 2), _ip(6, "edit")))
    assert _codes(issues) == [MISSING_IP]
    assert issues[0].location == "line 2"


def test_edit_ip_must_lie_inside_current_su():
    issues = check_ip_adjacency(_partitions(_su(0, 3), _edit(2, 2), _ip(4, "edit")))
    assert _codes(issues) == [MISSING_IP]


def test_edit_before_any_su_has_no_ip():
    issues = check_ip_adjacency(_partitions(_edit(2, 2), _ip(4, "edit"), _su(5, 5)))
    assert _codes(issues) == [MISSING_IP]


def test_filler_with_filler_ip_passes():
    assert (
        check_ip_adjacency(_partitions(_su(0, 10), _ip(4, "filler"), _filler(4, 1)))
        == []
    )


def test_filler_shares_edit_and_filler_ip_with_pending_edit():
    partitions = _partitions(
        _su(0, 10), _edit(2, 2), _ip(4, "edit&filler"), _filler(4, 1)
    )
    assert check_ip_adjacency(partitions) == []


def test_filler_falls_back_to_pending_edit_ip():
    """A FILLER with no IP of its own leans on the pending EDIT's IP."""
    partitions = _partitions(
        _su(0, 10), _edit(2, 2), _ip(4, "edit&filler"), _filler(5, 1)
    )
    assert check_ip_adjacency(partitions) == []


def test_filler_without_ip_or_pending_edit():
    partitions = _partitions(_su(0, 10), _edit(2, 2), _ip(4, "edit"), _filler(5, 1))
    issues = check_ip_adjacency(partitions)
    assert _codes(issues) == [MISSING_IP]
    assert issues[0].message == "FILLER (5.000, 6.000) doesn't have any IP at 5.000"


def test_filler_with_edit_and_filler_ip_needs_pending_edit():
    partitions = _partitions(_su(0, 10), _ip(4, "edit&filler"), _filler(4, 1))
    assert _codes(check_ip_adjacency(partitions)) == [BAD_IP_SUBTYPE]


def test_filler_with_edit_ip_has_bad_subtype():
    partitions = _partitions(_su(0, 10), _ip(4, "edit"), _filler(4, 1))
    assert _codes(check_ip_adjacency(partitions)) == [BAD_IP_SUBTYPE]


def test_ip_subtype_is_case_insensitive():
    partitions = _partitions(_su(0, 10), _edit(2, 2), _ip(4, "EDIT"))
    assert check_ip_adjacency(partitions) == []


def test_disabled_edit_check_still_tracks_pending_edit():
    partitions = _partitions(
        _su(0, 10), _edit(2, 2), _ip(4, "edit&filler"), _filler(5, 1), _edit(7, 1)
    )
    assert check_ip_adjacency(partitions, check_edits=False) == []
    assert _codes(check_ip_adjacency(partitions)) == [MISSING_IP]


def test_disabled_filler_check():
    partitions = _partitions(_su(0, 10), _filler(4, 1))
    assert check_ip_adjacency(partitions, check_fillers=False) == []
    assert _codes(check_ip_adjacency(partitions)) == [MISSING_IP]


#
# Orchestration
#
def _clean_lines():
    return [
        "SPEAKER f1 1 0 10 <NA> <NA> spk1 <NA>",
        _su(0, 10),
        _word(1, 1),
        _edit(2, 2),
        _word(2, 2),
        _ip(4, "edit&filler"),
        _filler(4, 1),
        _word(4, 1),
    ]


def test_consistent_document_has_no_issues():
    assert check_consistency(_document(*_clean_lines())) == []


def test_phase_one_failure_skips_phase_two():
    document = _document(
        _su(0, 5), _word(1, 1), _su(4, 3), _word("4.5", "0.5"), _edit(8, 1)
    )
    assert _codes(check_consistency(document)) == [OVERLAP]


def test_content_failure_skips_partial_coverage():
    """The first failing structural check is the only one reported."""
    document = _document(_su(0, 5), _word(1, 1), _word(4, 2), _edit(8, 1))
    assert _codes(check_partial_coverage(sort_partitions(document.partitions()))) == [
        PARTIAL_COVERAGE
    ]
    assert _codes(check_consistency(document)) == [NO_CONTENT]


def test_partial_coverage_failure_skips_phase_two():
    document = _document(_su(0, 5), _word(1, 1), _word(4, 2))
    assert _codes(check_consistency(document)) == [PARTIAL_COVERAGE]


def test_phase_two_failures_are_aggregated():
    document = _document(
        _su(0, 2), _word("0.5", "0.5"), _edit(1, "0.5"), _word(1, "0.5"), _word(3, 1)
    )
    issues = check_consistency(document)
    assert _codes(issues) == [NOT_COVERED, NOT_COVERED, NOT_COVERED, NOT_COVERED, MISSING_IP]


def test_config_disables_optional_checks():
    document = _document(
        _su(0, 2), _word("0.5", "0.5"), _edit(1, "0.5"), _word(1, "0.5"), _word(3, 1)
    )
    config = ValidationConfig(
        check_su_coverage=False,
        check_speaker_coverage=False,
        check_edit_ip=False,
        check_filler_ip=False,
    )
    assert check_consistency(document, config) == []

    su_only = ValidationConfig(check_speaker_coverage=False, check_edit_ip=False)
    assert _codes(check_consistency(document, su_only)) == [NOT_COVERED]


def test_validation_is_repeatable():
    document = _document(*_clean_lines(), _word(3, 2), _su(12, 1))
    first = [issue.to_dict() for issue in check_consistency(document)]
    second = [issue.to_dict() for issue in check_consistency(document)]
    assert first
    assert DeepDiff(first, second) == {}


def test_issues_do_not_depend_on_line_order():
    lines = _clean_lines() + [_su(12, 1), _word(20, 1, "spk2"), _su(30, 1, "spk2")]
    shuffled = list(lines)
    random.Random(7).shuffle(shuffled)

    first = [issue.to_dict() for issue in check_consistency(_document(*lines))]
    second = [issue.to_dict() for issue in check_consistency(_document(*shuffled))]

    assert first
    assert (
        DeepDiff(first, second, exclude_regex_paths=[r"root\[\d+\]\['location'\]"])
        == {}
    )


def test_sort_partitions_leaves_document_untouched():
    document = _document(_su(5, 1), _su(0, 1))
    partitions = document.partitions()
    sort_partitions(partitions)
    assert [su.begin for su in partitions[PartitionKey("f1", "1", "spk1")][RecordType.SU]] == [
        5.0,
        0.0,
    ]
