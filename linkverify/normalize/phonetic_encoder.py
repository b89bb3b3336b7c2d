"""
Phonetic encoding for LinkVerify.

Soundex-like encoder that clusters names with similar pronunciation so that
spelling variants hash to the same digest.
"""

import re
import logging

logger = logging.getLogger(__name__)

CODE_LENGTH = 4

SOUND_MAP = {
    **dict.fromkeys("BFPV", "1"),
    **dict.fromkeys("CGJKQSXZ", "2"),
    **dict.fromkeys("DT", "3"),
    "L": "4",
    **dict.fromkeys("MN", "5"),
    "R": "6",
}


class PhoneticEncoder:
    """
    Encodes names to a four character code: the first letter followed by
    three digits.

    Unlike classic Soundex, letters outside the sound map (vowels, H, W, Y)
    are skipped without separating repeated digits, and the first letter's
    own digit does not suppress an identical following digit.
    """

    def __init__(self):
        self.non_alpha_pattern = re.compile(r'[^A-Z]')

    def encode(self, name: str) -> str:
        """
        Encode a name.

        Args:
            name: Raw name

        Returns:
            Four character phonetic code, or "" if the name has no A-Z letters
        """
        if not name:
            return ""

        letters = self.non_alpha_pattern.sub('', name.upper())
        if not letters:
            return ""

        encoded = letters[0]
        prev_digit = ""
        for char in letters[1:]:
            digit = SOUND_MAP.get(char)
            if digit and digit != prev_digit:
                encoded += digit
                prev_digit = digit
            if len(encoded) >= CODE_LENGTH:
                break

        return encoded.ljust(CODE_LENGTH, "0")
