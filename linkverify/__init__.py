"""
LinkVerify - Privacy-Preserving Record Linkage Engine

Decides whether a query record and a candidate data provider record refer
to the same person using salted digests packed into Bloom filters, so raw
identifiers never leave the process that holds them.
"""

from .bloom.bloom_filter import BloomFilter, optimal_bloom_parameters
from .errors import DecodeError, LinkVerifyError, ValidationError
from .match.models import (
    DataProviderRecord,
    FieldType,
    PPRLRequest,
    PPRLResponse,
    SensitiveField,
)
from .match.pprl_service import PPRLConfig, PPRLService
from .normalize.fuzzy_matcher import FuzzyMatcher
from .normalize.phonetic_encoder import PhoneticEncoder

__version__ = "1.0.0"
__author__ = "LinkVerify Team"

__all__ = [
    "BloomFilter",
    "DataProviderRecord",
    "DecodeError",
    "FieldType",
    "FuzzyMatcher",
    "LinkVerifyError",
    "PPRLConfig",
    "PPRLRequest",
    "PPRLResponse",
    "PPRLService",
    "PhoneticEncoder",
    "SensitiveField",
    "ValidationError",
    "optimal_bloom_parameters",
]
