# ABOUTME: Tests for canonical identifier derivation from element display names
# ABOUTME: Covers punctuation collapsing, trimming, idempotence and names with no usable characters

import pytest

from alchemy_scribe.core.identifiers import normalize_identifier


class TestNormalizeIdentifier:
    """Test slug-form identifiers."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Fire", "fire"),
            ("Philosopher's Stone", "philosopher-s-stone"),
            ("  Big  Boom!  ", "big-boom"),
            ("Tier 3 Thing", "tier-3-thing"),
            ("Hay--bale", "hay-bale"),
            ("Café", "caf"),
        ],
    )
    def test_normalizes_names(self, name, expected):
        assert normalize_identifier(name) == expected

    def test_idempotent(self):
        once = normalize_identifier("Philosopher's Stone")
        assert normalize_identifier(once) == once

    def test_name_without_ascii_alphanumerics_is_empty(self):
        assert normalize_identifier("???") == ""
        assert normalize_identifier("") == ""

    def test_case_insensitive(self):
        assert normalize_identifier("FIRE") == normalize_identifier("fire")
