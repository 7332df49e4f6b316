"""Participant profile model.

Pure data structures with no business logic.
These can be safely used by any module.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

CATEGORY_OPTIONS: tuple[str, ...] = (
    "Male",
    "Female",
    "Non-binary",
    "Prefer not to say",
)

PROFILE_FIELDS: tuple[str, ...] = ("name", "age", "category")


@dataclass(frozen=True)
class Profile:
    """Demographic input for one participant."""
    name: str = ""
    age: str = ""
    category: str = ""

    @property
    def is_complete(self) -> bool:
        """True when every required field has been filled in."""
        return bool(self.name.strip()) and bool(self.age) and bool(self.category)

    def with_field(self, field: str, value: str) -> "Profile":
        """Return a copy with one field replaced."""
        if field not in PROFILE_FIELDS:
            raise ValueError(f"Unknown profile field '{field}'")
        return replace(self, **{field: value})

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "age": self.age,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        """Create from dictionary."""
        return cls(
            name=data.get("name", ""),
            age=str(data.get("age", "") or ""),
            category=data.get("category", ""),
        )
