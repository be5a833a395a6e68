"""Tests for title heuristics on wiki pages."""

import pytest

from glooscap.wiki.models import detect_template, extract_language_from_title


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Feature Completion Template (EN)", "EN"),
        ("Guide (FRA)", "FRA"),
        ("Guide ( DE )", "DE"),
        ("Guide (fr)", ""),
        ("Guide (ENGLISH)", ""),
        ("Guide (E)", ""),
        ("Release (v2) notes", ""),
        ("Plain title", ""),
        ("", ""),
    ],
)
def test_extract_language_from_title(title: str, expected: str) -> None:
    """Test only a trailing 2-3 letter uppercase marker counts as language."""
    assert extract_language_from_title(title) == expected


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Feature Completion Template (EN)", "Feature Completion Template"),
        ("Meeting Template", "Meeting Template"),
        ("Runbook (EN)", None),
        ("template in lower case", None),
    ],
)
def test_detect_template(title: str, expected: str | None) -> None:
    """Test templates are recognised from their title."""
    assert detect_template(title) == expected
