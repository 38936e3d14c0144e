from dataclasses import dataclass, field
from typing import Any

VALID_RARITIES = frozenset({"common", "uncommon", "rare", "mythic"})

COLOR_ORDER = ("W", "U", "B", "R", "G")


@dataclass(frozen=True, slots=True)
class ImageUris:
    """Small and normal image URLs for a card or card face."""

    small: str | None = None
    normal: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ImageUris | None":
        if not data:
            return None
        return cls(small=data.get("small"), normal=data.get("normal"))

    def to_dict(self) -> dict[str, str]:
        trimmed: dict[str, str] = {}
        if self.small is not None:
            trimmed["small"] = self.small
        if self.normal is not None:
            trimmed["normal"] = self.normal
        return trimmed


@dataclass(frozen=True, slots=True)
class CardFace:
    """One face of a multi-faced card."""

    name: str | None = None
    image_uris: ImageUris | None = None


@dataclass(frozen=True, slots=True)
class Card:
    """
    A single printing of a card, as returned by the card catalog.

    Attributes:
        id: Catalog identifier, stable across requests
        name: Card name
        rarity: One of common, uncommon, rare, mythic
        cmc: Mana value
        colors: Color symbols (W, U, B, R, G)
        type_line: Full type line, e.g. "Basic Land — Forest"
        collector_number: Collector number within the set (may be non-numeric)
        promo_types: Promo tags used to spot collector-exclusive prints
        frame_effects: Frame tags used to spot collector-exclusive prints
        booster: Whether the catalog says this print appears in boosters
        image_uris: Image URLs for single-faced cards
        card_faces: Per-face data for multi-faced cards
    """

    id: str
    name: str
    rarity: str
    cmc: float = 0.0
    colors: tuple[str, ...] = ()
    type_line: str = ""
    collector_number: str = ""
    promo_types: frozenset[str] = field(default_factory=frozenset)
    frame_effects: frozenset[str] = field(default_factory=frozenset)
    booster: bool = False
    image_uris: ImageUris | None = None
    card_faces: tuple[CardFace, ...] = ()

    @classmethod
    def from_scryfall(cls, data: dict[str, Any]) -> "Card":
        """Build a Card from a Scryfall card object or a trimmed snapshot card."""
        faces = tuple(
            CardFace(
                name=face.get("name"),
                image_uris=ImageUris.from_dict(face.get("image_uris")),
            )
            for face in data.get("card_faces") or []
        )
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            rarity=data.get("rarity", ""),
            cmc=float(data.get("cmc") or 0),
            colors=tuple(data.get("colors") or ()),
            type_line=data.get("type_line") or "",
            collector_number=str(data.get("collector_number") or ""),
            promo_types=frozenset(data.get("promo_types") or ()),
            frame_effects=frozenset(data.get("frame_effects") or ()),
            booster=bool(data.get("booster", False)),
            image_uris=ImageUris.from_dict(data.get("image_uris")),
            card_faces=faces,
        )

    @property
    def is_land(self) -> bool:
        return "Land" in self.type_line

    @property
    def is_basic_land(self) -> bool:
        return "Basic" in self.type_line and self.is_land

    def _face_image(self) -> ImageUris | None:
        if self.image_uris is not None:
            return self.image_uris
        if self.card_faces:
            return self.card_faces[0].image_uris
        return None

    @property
    def small_image_url(self) -> str:
        images = self._face_image()
        return (images.small if images else None) or ""

    @property
    def normal_image_url(self) -> str:
        images = self._face_image()
        return (images.normal if images else None) or ""

    def trim(self) -> dict[str, Any]:
        """
        Reduce the card to the fields clients need for deck building.

        Face images are kept only when the first face carries its own images,
        which is how the catalog marks double-faced layouts.
        """
        trimmed: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "rarity": self.rarity,
            "cmc": self.cmc,
            "colors": list(self.colors),
            "type_line": self.type_line,
            "collector_number": self.collector_number,
        }
        if self.image_uris is not None:
            trimmed["image_uris"] = self.image_uris.to_dict()
        if self.card_faces and self.card_faces[0].image_uris is not None:
            trimmed["card_faces"] = [
                {"image_uris": face.image_uris.to_dict() if face.image_uris else {}}
                for face in self.card_faces
            ]
        return trimmed
