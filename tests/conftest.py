import os
import sys

import pytest


def _add_src_to_path() -> None:
    """Ensure the local src directory is importable when running pytest."""
    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    src_path = os.path.join(repo_root, "src")
    if os.path.isdir(src_path) and src_path not in sys.path:
        try:
            __import__("rttmlib")
        except ModuleNotFoundError:
            sys.path.insert(0, src_path)


_add_src_to_path()


SPKR_INFO = "SPKR-INFO f1 1 <NA> <NA> <NA> adult_male spk1 <NA>\n"


@pytest.fixture
def valid_rttm_text():
    """A small, fully consistent RTTM file with an edit/filler chain."""
    return (
        ";; EXP-ID: test_2004_mde_cts_eng\n"
        + SPKR_INFO
        + "SPEAKER f1 1 0.00 10.00 <NA> <NA> spk1 <NA>\n"
        "SU f1 1 0.00 10.00 <NA> statement spk1 <NA>\n"
        "LEXEME f1 1 1.00 1.00 so lex spk1 <NA>\n"
        "EDIT f1 1 2.00 2.00 <NA> repetition spk1 <NA>\n"
        "LEXEME f1 1 2.00 2.00 i lex spk1 <NA>\n"
        "IP f1 1 4.00 <NA> <NA> edit&filler spk1 <NA>\n"
        "FILLER f1 1 4.00 1.00 <NA> filled_pause spk1 <NA>\n"
        "LEXEME f1 1 4.00 1.00 uh fp spk1 <NA>\n"
        "LEXEME f1 1 5.00 1.00 i lex spk1 <NA>\n"
    )
