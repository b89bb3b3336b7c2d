"""
Fuzzy string matching for LinkVerify.

Edit-distance similarity and phonetic equality checks used to decide
whether two names are near-duplicates.
"""

import logging
from typing import Dict, Optional

from jellyfish import jaro_winkler_similarity
from Levenshtein import distance as levenshtein_distance
from thefuzz import fuzz

from .phonetic_encoder import PhoneticEncoder

logger = logging.getLogger(__name__)


class FuzzyMatcher:
    """
    Compares names by normalized Levenshtein similarity and phonetic code.
    """

    def __init__(self, encoder: Optional[PhoneticEncoder] = None):
        """
        Initialize fuzzy matcher.

        Args:
            encoder: Phonetic encoder to delegate to (a new one if omitted)
        """
        self.encoder = encoder or PhoneticEncoder()

    def levenshtein_distance(self, str1: str, str2: str) -> int:
        """Unit-cost insert/delete/substitute edit distance."""
        return levenshtein_distance(str1, str2)

    def calculate_similarity(self, str1: str, str2: str) -> float:
        """
        Calculate case-insensitive similarity between two strings.

        Two empty strings carry no information and score 0.0, not 1.0.

        Args:
            str1: First string
            str2: Second string

        Returns:
            1 - distance / max(len(str1), len(str2)), in [0, 1]
        """
        if str1 == str2:
            return 0.0 if str1 == "" else 1.0

        if not str1 or not str2:
            return 0.0

        str1 = str1.lower()
        str2 = str2.lower()

        distance = self.levenshtein_distance(str1, str2)
        max_len = max(len(str1), len(str2))

        return 1.0 - distance / max_len

    def get_phonetic_code(self, name: str) -> str:
        return self.encoder.encode(name)

    def is_phonetically_similar(self, name1: str, name2: str) -> bool:
        """True iff both names have the same phonetic code."""
        return self.encoder.encode(name1) == self.encoder.encode(name2)

    def compare(self, str1: str, str2: str) -> Dict[str, float]:
        """
        Calculate several similarity metrics between two names.

        Args:
            str1: First name
            str2: Second name

        Returns:
            Dictionary with similarity scores, each in [0, 1]
        """
        if not str1 or not str2:
            return {
                "exact_match": 0.0,
                "levenshtein_similarity": 0.0,
                "jaro_winkler": 0.0,
                "fuzz_ratio": 0.0,
                "phonetic_match": 0.0
            }

        return {
            "exact_match": 1.0 if str1.lower() == str2.lower() else 0.0,
            "levenshtein_similarity": self.calculate_similarity(str1, str2),
            "jaro_winkler": jaro_winkler_similarity(str1.lower(), str2.lower()),
            "fuzz_ratio": fuzz.ratio(str1.lower(), str2.lower()) / 100.0,
            "phonetic_match": 1.0 if self.is_phonetically_similar(str1, str2) else 0.0
        }
