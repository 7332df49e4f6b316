"""Analysis result models.

Pure data structures for the reports returned by the assessment service.
``from_dict`` is strict: any payload that does not match the declared shape
raises ``ValueError`` instead of being partially interpreted.
"""

from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from typing import Any


def _require_str(data: dict[str, Any], key: str, source: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Field '{key}' is required and must be a non-empty string in {source}")
    return value


def _require_score(data: dict[str, Any], key: str, source: str) -> int:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{key}' must be a number in {source}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"Field '{key}' must be a whole number in {source}")
    score = int(value)
    if not 0 <= score <= 100:
        raise ValueError(f"Field '{key}' must be between 0 and 100 in {source}, got {score}")
    return score


def _require_list(data: dict[str, Any], key: str, source: str) -> list[dict[str, Any]]:
    value = data.get(key)
    if not isinstance(value, list) or not value:
        raise ValueError(f"Field '{key}' must be a non-empty list in {source}")
    for item in value:
        if not isinstance(item, dict):
            raise ValueError(f"Every entry of '{key}' must be an object in {source}")
    return value


def _require_object(data: Any, source: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object for {source}")
    return data


@dataclass(frozen=True)
class Trait:
    """One scored personality trait."""
    label: str
    score: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "score": self.score, "description": self.description}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Trait":
        source = "trait"
        return cls(
            label=_require_str(data, "label", source),
            score=_require_score(data, "score", source),
            description=_require_str(data, "description", source),
        )


@dataclass(frozen=True)
class PersonalityResult:
    """Individual-mode report."""
    archetype: str
    summary: str
    detailed_analysis: str
    traits: tuple[Trait, ...] = dataclass_field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire format."""
        return {
            "archetype": self.archetype,
            "summary": self.summary,
            "traits": [t.to_dict() for t in self.traits],
            "detailedAnalysis": self.detailed_analysis,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PersonalityResult":
        """Create from the camelCase wire format, validating every field."""
        source = "personality result"
        data = _require_object(data, source)
        return cls(
            archetype=_require_str(data, "archetype", source),
            summary=_require_str(data, "summary", source),
            detailed_analysis=_require_str(data, "detailedAnalysis", source),
            traits=tuple(Trait.from_dict(t) for t in _require_list(data, "traits", source)),
        )


@dataclass(frozen=True)
class Dimension:
    """One axis of comparison between two participants."""
    label: str
    score_user1: int
    score_user2: int
    insight: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "scoreUser1": self.score_user1,
            "scoreUser2": self.score_user2,
            "insight": self.insight,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Dimension":
        source = "dimension"
        return cls(
            label=_require_str(data, "label", source),
            score_user1=_require_score(data, "scoreUser1", source),
            score_user2=_require_score(data, "scoreUser2", source),
            insight=_require_str(data, "insight", source),
        )


@dataclass(frozen=True)
class CompatibilityResult:
    """Comparison-mode report."""
    compatibility_score: int
    relationship_archetype: str
    synergy_analysis: str
    challenges: str
    dimensions: tuple[Dimension, ...] = dataclass_field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase wire format."""
        return {
            "compatibilityScore": self.compatibility_score,
            "relationshipArchetype": self.relationship_archetype,
            "synergyAnalysis": self.synergy_analysis,
            "challenges": self.challenges,
            "dimensions": [d.to_dict() for d in self.dimensions],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "CompatibilityResult":
        """Create from the camelCase wire format, validating every field."""
        source = "compatibility result"
        data = _require_object(data, source)
        return cls(
            compatibility_score=_require_score(data, "compatibilityScore", source),
            relationship_archetype=_require_str(data, "relationshipArchetype", source),
            synergy_analysis=_require_str(data, "synergyAnalysis", source),
            challenges=_require_str(data, "challenges", source),
            dimensions=tuple(Dimension.from_dict(d) for d in _require_list(data, "dimensions", source)),
        )
