"""Data models for published and pending facts."""

from dataclasses import asdict, dataclass, field
from typing import Any

# Collection names, shared by every storage backend
FACTS = "facts"
SUBMISSIONS = "submitted_facts"

CATEGORIES = [
    "Science",
    "History",
    "Geography",
    "Animals",
    "Space",
    "Technology",
    "Food",
    "Sports",
    "Anime",
]

# Serialized (camelCase) names for attributes that differ from Python names
_WIRE_NAMES = {
    "submitted_by": "submittedBy",
    "created_at": "createdAt",
}
_PY_NAMES = {wire: py for py, wire in _WIRE_NAMES.items()}


def _to_wire(data: dict[str, Any]) -> dict[str, Any]:
    """Rename attributes to their serialized names, dropping unset optionals."""
    return {
        _WIRE_NAMES.get(key, key): value
        for key, value in data.items()
        if value is not None
    }


def _from_wire(data: dict[str, Any], allowed: set[str]) -> dict[str, Any]:
    """Rename serialized keys to attribute names, ignoring unknown columns."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        name = _PY_NAMES.get(key, key)
        if name in allowed:
            result[name] = value
    if "id" in result and result["id"] is not None:
        result["id"] = str(result["id"])
    return result


@dataclass(frozen=True)
class Fact:
    """A published fact.

    Attributes:
        id: Unique id within the facts collection.
        text: The fact itself.
        category: One of CATEGORIES.
        submitted_by: Name of the submitter, if it came from a submission.
        source: Optional reference for the fact.
        created_at: ISO timestamp when created. Seed facts may have none.
        approved: Always True for published facts.
    """

    id: str
    text: str
    category: str
    submitted_by: str | None = None
    source: str | None = None
    created_at: str | None = None
    approved: bool = field(default=True, init=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the serialized form used by storage and the HTTP API."""
        return _to_wire(asdict(self))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Fact":
        """Create from a serialized record."""
        return cls(**_from_wire(data, {"id", "text", "category", "submitted_by", "source", "created_at"}))


@dataclass(frozen=True)
class SubmittedFact:
    """A fact submitted by the public, waiting for moderation.

    ``approved`` is always False while the record is pending; promotion
    creates a separate Fact instead of flipping this flag.
    """

    id: str
    text: str
    category: str
    submitted_by: str
    source: str | None = None
    created_at: str | None = None
    approved: bool = field(default=False, init=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the serialized form used by storage and the HTTP API."""
        return _to_wire(asdict(self))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SubmittedFact":
        """Create from a serialized record."""
        return cls(**_from_wire(data, {"id", "text", "category", "submitted_by", "source", "created_at"}))
