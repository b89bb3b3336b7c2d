"""
Unit tests for normalization modules.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from linkverify.normalize.phonetic_encoder import PhoneticEncoder
from linkverify.normalize.fuzzy_matcher import FuzzyMatcher
from linkverify.normalize.field_normalizer import FieldNormalizer


class TestPhoneticEncoder:
    """Test cases for phonetic encoding."""

    def setup_method(self):
        """Setup test fixtures."""
        self.encoder = PhoneticEncoder()

    @pytest.mark.parametrize("name,expected", [
        ("", ""),
        ("John", "J500"),
        ("Smith", "S530"),
        ("Johnson", "J525"),
        ("Williams", "W452"),
        ("Brown", "B650"),
        ("Davis", "D120"),
        ("Miller", "M460"),
        ("Wilson", "W425"),
        ("Moore", "M600"),
        ("Taylor", "T460"),
        ("Anderson", "A536"),
        ("Thomas", "T520"),
        ("Jackson", "J250"),
        ("White", "W300"),
        ("Jane", "J500"),
        ("Tymczak", "T520"),
        ("Ashcraft", "A261"),
    ])
    def test_encode(self, name, expected):
        """Test encoding against known codes."""
        assert self.encoder.encode(name) == expected

    def test_robert_rupert_collide(self):
        """Test the classic Soundex collision."""
        assert self.encoder.encode("Robert") == "R163"
        assert self.encoder.encode("Rupert") == "R163"

    def test_first_letter_digit_not_suppressed(self):
        """Test that the first letter does not suppress a matching digit."""
        assert self.encoder.encode("Pfister") == "P123"

    def test_non_alpha_input(self):
        """Test inputs with no A-Z letters."""
        assert self.encoder.encode("1234 !?") == ""
        assert self.encoder.encode("o'brien") == "O165"
        assert self.encoder.encode("john doe") == "J530"

    def test_always_four_characters(self):
        """Test output length for non-empty codes."""
        for name in ["A", "Lee", "Washington", "Zzzzzz"]:
            assert len(self.encoder.encode(name)) == 4


class TestFuzzyMatcher:
    """Test cases for fuzzy matching."""

    def setup_method(self):
        """Setup test fixtures."""
        self.matcher = FuzzyMatcher()

    @pytest.mark.parametrize("str1,str2,expected", [
        ("", "", 0.0),
        ("hello", "", 0.0),
        ("", "world", 0.0),
        ("abc", "abc", 1.0),
        ("hello", "hello", 1.0),
        ("hello", "helo", 0.8),
        ("hello", "world", 0.2),
        ("john", "jon", 0.75),
        ("smith", "smyth", 0.8),
        ("kitten", "sitting", 0.5714),
    ])
    def test_calculate_similarity(self, str1, str2, expected):
        """Test normalized edit-distance similarity."""
        assert self.matcher.calculate_similarity(str1, str2) == pytest.approx(expected, abs=1e-3)

    def test_similarity_is_case_insensitive(self):
        """Test case folding before comparison."""
        assert self.matcher.calculate_similarity("JOHN", "john") == 1.0

    @pytest.mark.parametrize("str1,str2,expected", [
        ("", "", 0),
        ("hello", "", 5),
        ("", "world", 5),
        ("hello", "hello", 0),
        ("hello", "helo", 1),
        ("hello", "world", 4),
        ("kitten", "sitting", 3),
        ("saturday", "sunday", 3),
    ])
    def test_levenshtein_distance(self, str1, str2, expected):
        """Test raw edit distance."""
        assert self.matcher.levenshtein_distance(str1, str2) == expected

    @pytest.mark.parametrize("name1,name2,expected", [
        ("John", "Jon", True),
        ("Smith", "Smyth", True),
        ("Johnson", "Jonson", True),
        ("John", "Jane", True),
        ("Smith", "Brown", False),
    ])
    def test_is_phonetically_similar(self, name1, name2, expected):
        """Test phonetic equality."""
        assert self.matcher.is_phonetically_similar(name1, name2) is expected

    def test_get_phonetic_code(self):
        """Test delegation to the phonetic encoder."""
        assert self.matcher.get_phonetic_code("Williams") == "W452"

    def test_compare(self):
        """Test the similarity metric bundle."""
        sim = self.matcher.compare("John Smith", "John Smith")
        assert sim["exact_match"] == 1.0
        assert sim["levenshtein_similarity"] == 1.0
        assert sim["fuzz_ratio"] == 1.0
        assert sim["jaro_winkler"] == pytest.approx(1.0)
        assert sim["phonetic_match"] == 1.0

        sim = self.matcher.compare("John Smith", "Jane Doe")
        assert sim["exact_match"] == 0.0
        assert sim["fuzz_ratio"] < 1.0
        assert sim["levenshtein_similarity"] < 1.0

        sim = self.matcher.compare("", "Jane Doe")
        assert all(value == 0.0 for value in sim.values())


class TestFieldNormalizer:
    """Test cases for sensitive field normalization."""

    def setup_method(self):
        """Setup test fixtures."""
        self.normalizer = FieldNormalizer()

    def test_normalize_exact(self):
        """Test trim and lowercase."""
        assert self.normalizer.normalize_exact("  John.Doe@Example.COM ") == "john.doe@example.com"

    @pytest.mark.parametrize("value,expected", [
        ("Mr John Doe", "john doe"),
        ("  MRS   Jane   Smith ", "jane smith"),
        ("ms jane smith", "jane smith"),
        ("Dr Who", "who"),
        ("Mary-Jane O'Neil", "mary jane oneil"),
        ("mr dr smith", "smith"),
        ("Dr. John Doe", "dr john doe"),
        ("John\tDoe", "johndoe"),
        ("Mario 2nd", "mario 2nd"),
        ("!!!", ""),
    ])
    def test_normalize_fuzzy(self, value, expected):
        """Test fuzzy normalization."""
        assert self.normalizer.normalize_fuzzy(value) == expected

    def test_normalize_phonetic(self):
        """Test phonetic normalization."""
        assert self.normalizer.normalize_phonetic("  Robert ") == "R163"
        assert self.normalizer.normalize_phonetic("Rupert") == "R163"

    def test_custom_honorifics(self):
        """Test configurable honorific list."""
        normalizer = FieldNormalizer(honorifics=["Prof"])
        assert normalizer.normalize_fuzzy("Prof Ada Lovelace") == "ada lovelace"
        assert normalizer.normalize_fuzzy("Mr Ada Lovelace") == "mr ada lovelace"


if __name__ == "__main__":
    pytest.main([__file__])
