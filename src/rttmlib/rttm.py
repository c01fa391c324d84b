"""
RTTMLib: Rich Transcription Time-Marked File Validator

Loads RTTM annotation files and validates them before they are handed to a
scoring pipeline.

Module Organization:
    * Exception classes for error handling
    * Main RTTM handler class

Example:
    ```python
    from rttmlib import RichTranscriptionTimeMarked, ValidationConfig

    rttm = RichTranscriptionTimeMarked.from_file("meeting.rttm")
    issues = rttm.validate(
        ValidationConfig(check_filler_ip=False), raise_exception=False
    )
    for issue in issues or []:
        print(f"{issue.severity.value}: {issue}")
    ```

Format Structure:
    Each non-comment line holds nine whitespace-separated fields:

        TYPE SOURCE CHANNEL BEGIN DURATION ORTHOGRAPHY SUBTYPE SPEAKER CONFIDENCE

    Lines starting with ``;;`` are comments; ``;; EXP-ID: <id>`` names the
    experiment and, through it, the data domain.
"""

from typing import Dict, List, Optional

from .config import ValidationConfig
from .core.data_classes import KindGroups, PartitionKey, RTTMDocument, RTTMRecord
from .core.enums import Domain
from .validation import ValidationIssue, has_errors, validate_rttm

ValidationIssues = List[ValidationIssue]


class RTTMError(Exception):
    """Base class for exceptions in the RTTM module.

    Example:
        ```python
        try:
            RichTranscriptionTimeMarked.from_file("broken.rttm").validate()
        except RTTMError as e:
            print(f"RTTM error occurred: {e}")
        ```
    """

    pass


class ValidationError(RTTMError):
    """Exception raised when RTTM validation fails.

    Attributes:
        issues (List[ValidationIssue]): All issues found, warnings included
    """

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        super().__init__(self.__str__())

    def __str__(self) -> str:
        return "Validation failed with the following issues:\n" + "\n".join(
            str(issue) for issue in self.issues
        )


class RichTranscriptionTimeMarked:
    """Handler for Rich Transcription Time-Marked (RTTM) files.

    Features:
        - Load RTTM files or strings
        - Access records and their (source, channel, speaker) partitions
        - Validate syntax and temporal consistency
        - Save records back to a file

    Example:
        >>> rttm = RichTranscriptionTimeMarked.from_string(
        ...     "SPKR-INFO f1 1 <NA> <NA> <NA> unknown spk1 <NA>\\n"
        ... )
        >>> rttm.is_valid()
        True
    """

    def __init__(self, document: Optional[RTTMDocument] = None):
        self._document = document or RTTMDocument()

    def validate(
        self,
        config: Optional[ValidationConfig] = None,
        raise_exception: bool = True,
    ) -> Optional[ValidationIssues]:
        """Validates the RTTM data.

        Args:
            config: Switches for the optional consistency checks.
            raise_exception: If True, raises ValidationError when an ERROR
                issue is found.

        Returns:
            Optional[ValidationIssues]: List of issues if found, None if none.

        Raises:
            ValidationError: If validation fails and raise_exception is True.
        """
        issues = validate_rttm(self._document, config)
        if raise_exception and has_errors(issues):
            raise ValidationError(issues)
        return issues if issues else None

    def is_valid(self, config: Optional[ValidationConfig] = None) -> bool:
        return not has_errors(validate_rttm(self._document, config))

    #
    # File operations
    #
    @classmethod
    def from_file(cls, filename: str) -> "RichTranscriptionTimeMarked":
        """Creates an instance from an RTTM file.

        Bytes that are not valid UTF-8 are kept as surrogate escapes, so they
        surface as field validation issues rather than decoding errors.

        Args:
            filename: Path to the RTTM file to load

        Returns:
            RichTranscriptionTimeMarked: New instance with loaded data

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        try:
            with open(
                filename, "r", encoding="utf-8-sig", errors="surrogateescape"
            ) as f:
                document = RTTMDocument.from_lines(f)
        except FileNotFoundError as e:
            raise FileNotFoundError(f"File not found: {filename}") from e
        return cls(document)

    @classmethod
    def from_string(cls, text: str) -> "RichTranscriptionTimeMarked":
        return cls(RTTMDocument.from_string(text))

    def to_file(self, filename: str) -> None:
        """Saves the records to an RTTM file, one record per line.

        Comments are not preserved.

        Raises:
            IOError: If there's an error writing to the file
        """
        try:
            with open(filename, "w", encoding="utf-8", errors="surrogateescape") as f:
                f.write(self._document.to_string())
        except IOError as e:
            raise IOError(f"Error writing to file {filename}: {e}")

    #
    # Properties
    #
    @property
    def document(self) -> RTTMDocument:
        return self._document

    @property
    def records(self) -> List[RTTMRecord]:
        return self._document.records

    @property
    def domain(self) -> Domain:
        return self._document.domain

    def partitions(self) -> Dict[PartitionKey, KindGroups]:
        """Records grouped by (source, channel, speaker), then by type."""
        return self._document.partitions()
