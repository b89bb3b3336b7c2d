"""
Sensitive field normalization for LinkVerify.

Applies the cleanup for each field type before a value is hashed, so that
formatting differences between data providers do not change the digest.
"""

import re
import logging
from typing import List, Optional

from .phonetic_encoder import PhoneticEncoder

logger = logging.getLogger(__name__)

DEFAULT_HONORIFICS = ["mr", "mrs", "ms", "dr"]


class FieldNormalizer:
    """
    Normalizes raw sensitive values for exact, fuzzy, and phonetic fields.
    """

    def __init__(self, honorifics: Optional[List[str]] = None,
                 encoder: Optional[PhoneticEncoder] = None):
        """
        Initialize field normalizer.

        Args:
            honorifics: Leading titles stripped from fuzzy values
            encoder: Phonetic encoder for phonetic fields
        """
        if honorifics is None:
            honorifics = DEFAULT_HONORIFICS
        self.honorific_prefixes = [f"{h.strip().lower()} " for h in honorifics if h.strip()]
        self.encoder = encoder or PhoneticEncoder()

        self.disallowed_pattern = re.compile(r'[^a-z0-9 -]')

    def normalize_base(self, value: str) -> str:
        """Trim surrounding whitespace and lowercase."""
        return value.strip().lower()

    def normalize_exact(self, value: str) -> str:
        return self.normalize_base(value)

    def normalize_fuzzy(self, value: str) -> str:
        """
        Normalize a value for fuzzy matching.

        Strips leading honorifics, drops punctuation, turns hyphens into
        spaces, and collapses whitespace.

        Args:
            value: Raw value

        Returns:
            Normalized value
        """
        value = self.normalize_base(value)

        # Each honorific is trimmed at most once, in configured order
        for prefix in self.honorific_prefixes:
            if value.startswith(prefix):
                value = value[len(prefix):]

        value = self.disallowed_pattern.sub('', value)
        value = value.replace('-', ' ')

        return ' '.join(value.split())

    def normalize_phonetic(self, value: str) -> str:
        return self.encoder.encode(self.normalize_base(value))
