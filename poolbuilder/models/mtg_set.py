from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class SetInfo:
    """
    An entry in the set catalog.

    Attributes:
        code: Set code (e.g., "DMU")
        name: Display name
        released: Release date as YYYY-MM-DD, if known
    """

    code: str
    name: str
    released: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SetInfo":
        return cls(
            code=str(data["code"]),
            name=data.get("name", ""),
            released=data.get("released") or None,
        )

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "name": self.name}
