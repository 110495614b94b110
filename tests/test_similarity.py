"""
Tests for string similarity.
"""

import pytest
from invoice_matcher.utils.similarity import string_similarity


def test_identical_strings_score_one():
    assert string_similarity("Acme Corporation", "Acme Corporation") == 1.0


def test_case_insensitive():
    assert string_similarity("ACME CORPORATION", "acme corporation") == 1.0


def test_empty_input_scores_zero():
    assert string_similarity("", "Acme") == 0.0
    assert string_similarity("Acme", "") == 0.0
    assert string_similarity("", "") == 0.0
    assert string_similarity(None, "Acme") == 0.0


def test_symmetric():
    pairs = [
        ("Widget A", "Widget Alphas"),
        ("Acme Corporation", "Acme Corp"),
        ("Office Supplies", "Software License"),
    ]
    for first, second in pairs:
        assert string_similarity(first, second) == string_similarity(second, first)


def test_prefix_ratio():
    # 8 shared characters out of 8 + 13
    assert string_similarity("Widget A", "Widget Alphas") == pytest.approx(16 / 21)


def test_unrelated_strings_score_low():
    assert string_similarity("Office Supplies", "Software License") < 0.7


def test_range():
    for first, second in [("a", "b"), ("abc", "abd"), ("Tech Solutions Ltd", "Acme Corporation")]:
        assert 0.0 <= string_similarity(first, second) <= 1.0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
