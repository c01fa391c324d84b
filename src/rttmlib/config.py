"""Validation configuration."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ValidationConfig:
    """Switches for the optional consistency checks.

    Overlap, content and partial-coverage checks always run; the four
    checks below can be turned off one by one.
    """

    check_su_coverage: bool = True  # every LEXEME inside some SU
    check_speaker_coverage: bool = True  # every LEXEME inside some SPEAKER turn
    check_edit_ip: bool = True  # every EDIT followed by an IP
    check_filler_ip: bool = True  # every FILLER preceded by an IP

    def with_overrides(self, **flags: bool) -> ValidationConfig:
        return replace(self, **flags)


DEFAULT_CONFIG_PATH = Path("rttmlib.toml")


def _checks_from_dict(data: Dict[str, Any]) -> Dict[str, bool]:
    known = {f.name for f in fields(ValidationConfig)}
    checks = data.get("checks", {})
    unknown = sorted(set(checks) - known)
    if unknown:
        raise ValueError(f"Unknown check(s) in [checks]: {', '.join(unknown)}")
    for name, value in checks.items():
        if not isinstance(value, bool):
            raise ValueError(f"[checks] {name} must be true or false")
    return checks


def load_config(path: Optional[Path] = None) -> ValidationConfig:
    """Load check switches from a TOML file.

    With no path, ``rttmlib.toml`` in the working directory is used when it
    exists and the defaults otherwise. An explicit path must exist.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ValidationConfig()
        path = DEFAULT_CONFIG_PATH
    with Path(path).open("rb") as handle:
        data = tomllib.load(handle)
    return ValidationConfig(**_checks_from_dict(data))
