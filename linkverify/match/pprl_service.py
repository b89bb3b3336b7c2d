"""
Privacy-preserving record linkage service for LinkVerify.

Hashes sensitive fields with a shared salt, encodes each record's digests
into a Bloom filter, and scores candidate records against a query by the
Jaccard similarity of their filters. Raw values are never logged or
returned.
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..bloom.bloom_filter import BloomFilter
from ..config import load_config, validate_config, DEFAULT_CONFIG_PATH
from ..errors import DecodeError, ValidationError
from ..normalize.field_normalizer import FieldNormalizer
from .models import (
    DataProviderRecord,
    FieldType,
    MatchResult,
    PPRLRequest,
    PPRLResponse,
    SensitiveField,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PPRLConfig:
    """Bloom filter calibration and the shared salt."""

    bloom_filter_size: int = 1000000
    bloom_filter_hash_count: int = 7
    bloom_filter_false_positive_rate: float = 0.01
    salt: str = ""
    hash_algorithm: str = "SHA-256"

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "PPRLConfig":
        """
        Build PPRL configuration from the "pprl" config section.

        Args:
            config: Either the full configuration or its "pprl" section

        Returns:
            PPRLConfig
        """
        if "pprl" in config:
            config = config["pprl"]

        defaults = cls()
        return cls(
            bloom_filter_size=config.get("bloom_filter_size", defaults.bloom_filter_size),
            bloom_filter_hash_count=config.get("bloom_filter_hash_count", defaults.bloom_filter_hash_count),
            bloom_filter_false_positive_rate=config.get("bloom_filter_false_positive_rate",
                                                        defaults.bloom_filter_false_positive_rate),
            salt=config.get("salt", defaults.salt),
            hash_algorithm=config.get("hash_algorithm", defaults.hash_algorithm),
        )


class PPRLService:
    """
    Links a query record to the best matching provider record.

    Every call builds fresh Bloom filters and discards them on return; the
    service itself holds only immutable configuration, so one instance can
    be shared across threads.
    """

    def __init__(self, config: PPRLConfig, normalizer: Optional[FieldNormalizer] = None):
        """
        Initialize PPRL service.

        Args:
            config: Bloom filter calibration and salt
            normalizer: Field normalizer (default honorifics if omitted)
        """
        if config.hash_algorithm.upper().replace("-", "") != "SHA256":
            raise ValueError(f"Unsupported hash algorithm: {config.hash_algorithm}")

        self.config = config
        self.normalizer = normalizer or FieldNormalizer()

        logger.info(f"Initialized PPRLService (size={config.bloom_filter_size}, "
                    f"hash_count={config.bloom_filter_hash_count})")

    def normalize_field_value(self, field: SensitiveField) -> str:
        """
        Normalize a field value according to its type.

        Types outside exact, fuzzy, and phonetic are normalized as exact;
        validate_pprl_request rejects them on the query side.

        Args:
            field: Sensitive field

        Returns:
            Normalized value
        """
        try:
            field_type = FieldType.parse(field.type)
        except ValidationError:
            logger.debug(f"Unknown field type {field.type!r} for {field.name}, normalizing as exact")
            field_type = FieldType.EXACT

        if field_type is FieldType.FUZZY:
            return self.normalizer.normalize_fuzzy(field.value)
        elif field_type is FieldType.PHONETIC:
            return self.normalizer.normalize_phonetic(field.value)
        else:
            return self.normalizer.normalize_exact(field.value)

    def hash_sensitive_field(self, field: SensitiveField, salt: Optional[str] = None) -> str:
        """
        Hash a sensitive field with SHA-256.

        The digest covers "{name}:{normalized_value}:{salt}", so identical
        inputs give identical digests across service instances sharing a
        salt.

        Args:
            field: Sensitive field to hash
            salt: Salt override (the configured salt if omitted)

        Returns:
            Lowercase hex SHA-256 digest
        """
        if salt is None:
            salt = self.config.salt

        normalized_value = self.normalize_field_value(field)
        data_to_hash = f"{field.name}:{normalized_value}:{salt}"

        return hashlib.sha256(data_to_hash.encode("utf-8")).hexdigest()

    def _new_bloom_filter(self) -> BloomFilter:
        return BloomFilter(self.config.bloom_filter_size, self.config.bloom_filter_hash_count)

    def _build_bloom_filter(self, fields: Dict[str, SensitiveField]) -> BloomFilter:
        bloom_filter = self._new_bloom_filter()

        for field_name, field in fields.items():
            hashed_value = self.hash_sensitive_field(field)
            bloom_filter.add(hashed_value)
            # Keyed copy of the digest
            bloom_filter.add(f"{field_name}:{hashed_value}")

        return bloom_filter

    def create_bloom_filter_for_record(self, record: DataProviderRecord) -> BloomFilter:
        """
        Create a Bloom filter for a data provider record.

        Args:
            record: Provider record

        Returns:
            BloomFilter holding every field digest, alone and keyed by field
        """
        return self._build_bloom_filter(record.fields)

    def create_query_bloom_filter(self, request: PPRLRequest) -> BloomFilter:
        return self._build_bloom_filter(request.query_fields)

    def calculate_bloom_filter_similarity(self, bf1: BloomFilter, bf2: BloomFilter) -> float:
        """Jaccard similarity of two filters' set bits."""
        return bf1.similarity(bf2)

    def find_matched_fields(self, query_bloom_filter: BloomFilter,
                            record: DataProviderRecord) -> List[str]:
        """
        Identify which fields of a record appear in the query filter.

        This is a best-effort explanation and is subject to the query
        filter's false positive rate.

        Args:
            query_bloom_filter: Filter built from the query fields
            record: Candidate record

        Returns:
            Field keys of the record, in record order
        """
        return [
            field_name for field_name, field in record.fields.items()
            if query_bloom_filter.contains(self.hash_sensitive_field(field))
        ]

    def find_best_match(self, query_bloom_filter: BloomFilter,
                        provider_records: List[DataProviderRecord],
                        threshold: float) -> Optional[MatchResult]:
        """
        Scan candidate records for the best match at or above threshold.

        Only a strictly greater similarity replaces the current best, so
        the first record seen wins ties.

        Args:
            query_bloom_filter: Filter built from the query fields
            provider_records: Candidate records in scan order
            threshold: Minimum similarity for a candidate to qualify

        Returns:
            MatchResult for the best qualifying record, or None
        """
        best_match = None

        for record in provider_records:
            record_bloom_filter = self.create_bloom_filter_for_record(record)
            similarity = self.calculate_bloom_filter_similarity(query_bloom_filter, record_bloom_filter)

            if similarity >= threshold and (best_match is None or similarity > best_match.confidence):
                best_match = MatchResult(record=record, confidence=similarity)

        if best_match is not None:
            best_match.matched_fields = self.find_matched_fields(query_bloom_filter, best_match.record)

        return best_match

    def perform_pprl(self, request: PPRLRequest,
                     provider_records: List[DataProviderRecord]) -> PPRLResponse:
        """
        Perform privacy-preserving record linkage.

        The request is not validated here; call validate_pprl_request first.

        Args:
            request: Query fields, provider id, and threshold
            provider_records: Candidate records from the provider

        Returns:
            PPRLResponse describing the best match, if any
        """
        query_bloom_filter = self.create_query_bloom_filter(request)
        best_match = self.find_best_match(query_bloom_filter, provider_records, request.threshold)

        response = PPRLResponse(
            match_found=best_match is not None,
            confidence=0.0,
            provider_id=request.provider_id,
            matched_fields=[],
            bloom_filter_hex=query_bloom_filter.to_hex(),
            metadata={
                "query_fields_count": len(request.query_fields),
                "provider_records_count": len(provider_records),
                "false_positive_rate": query_bloom_filter.false_positive_rate(),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

        if best_match is not None:
            response.confidence = best_match.confidence
            response.matched_fields = best_match.matched_fields
            response.metadata["matched_record_id"] = best_match.record.id
            response.metadata["matched_provider"] = best_match.record.provider_id

            logger.info(f"PPRL matched record {best_match.record.id} for provider "
                        f"{request.provider_id} with confidence {best_match.confidence:.3f}")
        else:
            logger.info(f"PPRL found no match among {len(provider_records)} records "
                        f"for provider {request.provider_id}")

        return response

    def validate_pprl_request(self, request: PPRLRequest):
        """
        Validate a PPRL request.

        Args:
            request: Request to validate

        Raises:
            ValidationError: If the request is malformed
        """
        if not request.query_fields:
            raise ValidationError("query fields cannot be empty")

        if not request.provider_id:
            raise ValidationError("provider ID is required")

        threshold = request.threshold
        if (isinstance(threshold, bool) or not isinstance(threshold, (int, float))
                or not 0 < threshold <= 1):
            raise ValidationError("threshold must be greater than 0 and at most 1")

        for field_name, field in request.query_fields.items():
            if not field.name:
                raise ValidationError(f"field name cannot be empty for field {field_name}")

            if not isinstance(field.value, str) or not field.value:
                raise ValidationError(f"field value cannot be empty for field {field_name}")

            try:
                FieldType.parse(field.type)
            except ValidationError:
                raise ValidationError(f"invalid field type {field.type!r} for field {field_name}") from None

    def get_pprl_stats(self) -> Dict[str, Any]:
        """
        Report the service's Bloom filter calibration.

        Returns:
            Dictionary with filter size, hash count, target false positive
            rate, hash algorithm, and current false positive rate
        """
        return {
            "bloom_filter_size": self.config.bloom_filter_size,
            "bloom_filter_hash_count": self.config.bloom_filter_hash_count,
            "bloom_filter_false_positive_rate": self.config.bloom_filter_false_positive_rate,
            "hash_algorithm": self.config.hash_algorithm,
            # Filters are per call, so the service itself never holds set bits
            "current_false_positive_rate": 0.0,
        }

    def export_bloom_filter(self, bloom_filter: BloomFilter) -> Dict[str, Any]:
        """
        Export a Bloom filter to a portable format.

        Args:
            bloom_filter: Filter to export

        Returns:
            Dictionary with bloom_filter (hex), size, hash_count, and metadata
        """
        return {
            "bloom_filter": bloom_filter.to_hex(),
            "size": bloom_filter.size,
            "hash_count": bloom_filter.hash_count,
            "metadata": {
                "exported_at": datetime.now(timezone.utc).isoformat(),
                "false_positive_rate": bloom_filter.false_positive_rate(),
            },
        }

    def import_bloom_filter(self, data: Dict[str, Any]) -> BloomFilter:
        """
        Import a Bloom filter from the portable format.

        Args:
            data: Output of export_bloom_filter()

        Returns:
            Reconstructed BloomFilter
        """
        bloom_filter_hex = data.get("bloom_filter")
        if not isinstance(bloom_filter_hex, str):
            raise DecodeError("invalid bloom filter data")

        size = data.get("size")
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            raise DecodeError("invalid size data")

        hash_count = data.get("hash_count")
        if isinstance(hash_count, bool) or not isinstance(hash_count, int) or hash_count <= 0:
            raise DecodeError("invalid hash count data")

        return BloomFilter.from_hex(bloom_filter_hex, size, hash_count)


def create_pprl_service(config_path: str = DEFAULT_CONFIG_PATH) -> PPRLService:
    """
    Convenience function to create a PPRL service from a YAML config file.

    Args:
        config_path: Path to configuration file

    Returns:
        Initialized PPRL service

    Raises:
        ValueError: If the configuration fails validation
    """
    config = load_config(config_path)
    if not validate_config(config):
        raise ValueError(f"Invalid LinkVerify configuration: {config_path}")

    honorifics = config.get("normalization", {}).get("honorifics")

    return PPRLService(PPRLConfig.from_dict(config), FieldNormalizer(honorifics))
