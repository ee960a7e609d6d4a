"""Unit tests for receipt text normalization

Tests cover:
- Case, whitespace and punctuation folding
- Unit/packaging abbreviation canonicalization
- Idempotency
- Empty input
- Store line code extraction
"""

import pytest

from shelfmatch.domain.matching.normalizer import ABBREVIATIONS, extract_line_code, normalize


class TestNormalize:
    """Test normalize() canonical form"""

    def test_case_and_whitespace_insensitive(self):
        """Test surrounding/internal whitespace and case are folded"""
        assert normalize("  Coca-Cola  2L ") == normalize("coca-cola 2l")
        assert normalize("coca-cola 2l") == "coca-cola 2 l"

    def test_count_abbreviations_equal(self):
        """Test '12ct' and '12 count' normalize identically"""
        assert normalize("12ct") == normalize("12 count") == "12 ct"
        assert normalize("12 CT.") == "12 ct"

    def test_glued_units_are_split(self):
        """Test quantity+unit tokens are split"""
        assert normalize("HEINZ KETCHUP 32OZ") == "heinz ketchup 32 oz"
        assert normalize("2.5KG flour") == "2.5 kg flour"
        assert normalize("6pack water") == "6 pk water"

    def test_unit_words_canonicalized(self):
        """Test long unit words map to short canonical tokens"""
        assert normalize("1 Gallon Milk") == "1 gal milk"
        assert normalize("2 Liters") == "2 l"
        assert normalize("5 lbs potatoes") == "5 lb potatoes"

    def test_punctuation_stripped(self):
        """Test periods, commas and symbols are removed"""
        assert normalize("HEINZ KETCHUP, 32 OZ.") == "heinz ketchup 32 oz"
        assert normalize("Tomatoes (Roma)*") == "tomatoes roma"
        assert normalize("Chk. Brst!!") == "chk brst"

    def test_intra_word_hyphen_preserved(self):
        """Test hyphens inside product codes survive, loose hyphens do not"""
        assert normalize("ABC-123 widget -") == "abc-123 widget"
        assert normalize("- coca-cola -") == "coca-cola"

    def test_decimal_point_preserved(self):
        """Test prices/decimals keep their decimal point"""
        assert normalize("$9.49") == "9.49"
        assert normalize("1,000 ct") == "1000 ct"

    def test_non_word_tokens_untouched(self):
        """Test letters glued to numbers that are not units stay together"""
        assert normalize("2x milk") == "2x milk"
        assert normalize("AB1234 sponges") == "ab1234 sponges"

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None, "!!!", "$ - ."])
    def test_empty_input(self, value):
        """Test unmatchable input normalizes to empty string"""
        assert normalize(value) == ""

    @pytest.mark.parametrize("value", [
        "  Coca-Cola  2L ",
        "HEINZ KETCHUP, 32 OZ.",
        "12 Count Eggs",
        "5523795 TERRA DATES $9.49",
        "2.5KG flour -- bulk",
        "8floz cream",
        "Café Crème 1.5L",
        "a.1 1.a x-.5",
    ])
    def test_idempotent(self, value):
        """Test normalize(normalize(x)) == normalize(x)"""
        once = normalize(value)
        assert normalize(once) == once

    def test_abbreviation_values_are_fixed_points(self):
        """Test canonical tokens never map to something else"""
        for canonical in ABBREVIATIONS.values():
            assert ABBREVIATIONS.get(canonical, canonical) == canonical


class TestExtractLineCode:
    """Test store line code extraction"""

    def test_numeric_code(self):
        """Test numeric item code at the start of a line"""
        assert extract_line_code("5523795 TERRA DATES $9.49") == "5523795"

    def test_alphanumeric_code(self):
        """Test alphanumeric code is lowercased"""
        assert extract_line_code("AB1234 SPONGES 2PK 4.99") == "ab1234"

    def test_quantity_is_not_a_code(self):
        """Test short quantities are not treated as codes"""
        assert extract_line_code("2 X MILK") is None

    def test_word_without_digit_is_not_a_code(self):
        """Test a plain word is not a code"""
        assert extract_line_code("MILK 2L") is None

    def test_requires_description(self):
        """Test code followed only by a price is rejected"""
        assert extract_line_code("5523795 9.49") is None
        assert extract_line_code("5523795") is None

    def test_empty(self):
        """Test empty input"""
        assert extract_line_code("") is None
        assert extract_line_code(None) is None
