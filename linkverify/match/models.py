"""
Record and request types for the LinkVerify matching engine.

Raw sensitive values live only in SensitiveField instances held in memory
by the caller; nothing here serializes them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List

from ..errors import ValidationError


class FieldType(str, Enum):
    """How a sensitive value is normalized before hashing."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    PHONETIC = "phonetic"

    @classmethod
    def parse(cls, value: Any) -> "FieldType":
        """
        Resolve a field type from its name.

        Args:
            value: FieldType member or one of "exact", "fuzzy", "phonetic"

        Returns:
            Matching FieldType
        """
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"invalid field type {value!r}") from None


@dataclass
class SensitiveField:
    """A named secret value plus the normalization applied to it."""

    name: str
    value: str = field(repr=False)
    type: str = FieldType.EXACT.value

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SensitiveField":
        return cls(
            name=data.get("name", ""),
            value=data.get("value", ""),
            type=data.get("type", FieldType.EXACT.value),
        )


def _parse_fields(data: Dict[str, Any]) -> Dict[str, SensitiveField]:
    return {
        key: value if isinstance(value, SensitiveField) else SensitiveField.from_dict(value)
        for key, value in (data or {}).items()
    }


@dataclass
class DataProviderRecord:
    """A candidate record supplied by a data provider."""

    id: str
    provider_id: str
    fields: Dict[str, SensitiveField] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataProviderRecord":
        """
        Build a record from a JSON-like dictionary.

        Args:
            data: Dictionary with id, provider_id (or provider), fields, and
                an optional ISO-8601 created_at

        Returns:
            DataProviderRecord
        """
        created_at = data.get("created_at") or data.get("created")
        if isinstance(created_at, str):
            if created_at.endswith("Z"):
                created_at = created_at[:-1] + "+00:00"
            created_at = datetime.fromisoformat(created_at)
        elif created_at is None:
            created_at = datetime.now(timezone.utc)

        return cls(
            id=data.get("id", ""),
            provider_id=data.get("provider_id", data.get("provider", "")),
            fields=_parse_fields(data.get("fields", {})),
            created_at=created_at,
        )


@dataclass
class PPRLRequest:
    """A query record to link against one data provider's candidates."""

    query_fields: Dict[str, SensitiveField]
    provider_id: str
    threshold: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PPRLRequest":
        return cls(
            query_fields=_parse_fields(data.get("query_fields", {})),
            provider_id=data.get("provider_id", ""),
            threshold=data.get("threshold", 0.0),
        )


@dataclass
class PPRLResponse:
    """Outcome of a linkage run."""

    match_found: bool
    confidence: float
    provider_id: str
    matched_fields: List[str] = field(default_factory=list)
    bloom_filter_hex: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the JSON-serializable response structure.

        Returns:
            Dictionary with match_found, confidence, provider_id,
            matched_fields, bloom_filter, and metadata
        """
        return {
            "match_found": self.match_found,
            "confidence": self.confidence,
            "provider_id": self.provider_id,
            "matched_fields": list(self.matched_fields),
            "bloom_filter": self.bloom_filter_hex,
            "metadata": dict(self.metadata),
        }


@dataclass
class MatchResult:
    """Best candidate seen so far during a scan."""

    record: DataProviderRecord
    confidence: float
    matched_fields: List[str] = field(default_factory=list)
