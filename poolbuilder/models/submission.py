from dataclasses import dataclass, field
from typing import Any


@dataclass
class Submission:
    """
    A deck submitted to a daily challenge.

    Attributes:
        id: Short opaque token
        name: Player display name
        fingerprint: Client-generated dedup key, never exposed to other players
        submitted_at: ISO-8601 UTC timestamp
        card_ids: Non-basic card ids in deck order (repeats allowed)
        basics: Basic land counts by color
        colors: Colors of the non-basic cards
    """

    id: str
    name: str
    fingerprint: str
    submitted_at: str
    card_ids: list[str] = field(default_factory=list)
    basics: dict[str, int] = field(default_factory=dict)
    colors: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Submission":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            fingerprint=data.get("fingerprint", ""),
            submitted_at=data.get("submittedAt", ""),
            card_ids=list(data.get("cardIds") or []),
            basics=dict(data.get("basics") or {}),
            colors=list(data.get("colors") or []),
        )

    def to_dict(self, include_fingerprint: bool = True) -> dict[str, Any]:
        """Serialize with the camelCase keys clients and storage use."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "submittedAt": self.submitted_at,
            "cardIds": list(self.card_ids),
            "basics": dict(self.basics),
            "colors": list(self.colors),
        }
        if include_fingerprint:
            data["fingerprint"] = self.fingerprint
        return data

    def deck_size(self) -> int:
        """Non-basic cards plus basic lands."""
        return len(self.card_ids) + sum(self.basics.values())


@dataclass
class DayMeta:
    """Per-day metadata: submission count and the moderated featured list."""

    count: int = 0
    featured: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "DayMeta":
        if not data:
            return cls()
        return cls(count=int(data.get("count") or 0), featured=list(data.get("featured") or []))

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "featured": list(self.featured)}

    def set_featured(self, submission_id: str, featured: bool) -> None:
        """Add or remove an id, keeping the list ordered and free of repeats."""
        if featured:
            if submission_id not in self.featured:
                self.featured.append(submission_id)
        else:
            self.featured = [sid for sid in self.featured if sid != submission_id]
