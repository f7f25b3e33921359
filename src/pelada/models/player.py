"""Canonical player models shared across ingestion, rating and storage layers."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class Position(str, Enum):
    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"


_POSITION_ALIASES: Dict[str, Position] = {
    "GK": Position.GK,
    "GOLEIRO": Position.GK,
    "DEF": Position.DEF,
    "ZAGUEIRO": Position.DEF,
    "DEFENSOR": Position.DEF,
    "MID": Position.MID,
    "MEIO": Position.MID,
    "MEIA": Position.MID,
    "FWD": Position.FWD,
    "ATACANTE": Position.FWD,
}


def parse_position(value: Any) -> Optional[Position]:
    """Map a canonical code or a legacy roster label onto a ``Position``.

    Unrecognized values return ``None`` so callers fall back to the
    position-agnostic Overall formula instead of failing.
    """

    if value is None:
        return None
    if isinstance(value, Position):
        return value
    label = str(value).strip().upper()
    if not label:
        return None
    if label in _POSITION_ALIASES:
        return _POSITION_ALIASES[label]
    # Loose abbreviations seen in roster sync payloads.
    if "GOL" in label or label == "GL":
        return Position.GK
    if "ZAG" in label or label in {"CB", "Z"}:
        return Position.DEF
    if "MEI" in label or label == "CM" or "ME" in label:
        return Position.MID
    if "ATA" in label or label in {"ST", "A"}:
        return Position.FWD
    return None


class FutStats(BaseModel):
    """Card-style projection of the six rating attributes."""

    pac: int = 50
    sho: int = 50
    pas: int = 50
    dri: int = 50
    def_: int = Field(default=50, alias="def")
    phy: int = 50

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AttributeRatings(BaseModel):
    """The six bounded attribute scores produced by the rating engine."""

    fin_rating: int = Field(default=50, ge=0, le=99)
    vis_rating: int = Field(default=50, ge=0, le=99)
    dec_rating: int = Field(default=50, ge=0, le=99)
    def_rating: int = Field(default=50, ge=0, le=99)
    vit_rating: int = Field(default=50, ge=0, le=99)
    exp_rating: int = Field(default=50, ge=0, le=99)

    model_config = ConfigDict(frozen=True)

    def to_fut_stats(self) -> FutStats:
        return FutStats(
            sho=self.fin_rating,
            pas=self.vis_rating,
            dri=self.dec_rating,
            pac=self.vit_rating,
            phy=self.exp_rating,
            def_=self.def_rating,
        )


class PlayerRecord(BaseModel):
    """Normalized player payload consumed by the rating engine and storage."""

    player_id: str = Field(..., min_length=1, validation_alias=AliasChoices("player_id", "id", "playerId"))
    name: str = ""
    position: Optional[Position] = None
    rating: Optional[float] = Field(default=None, validation_alias=AliasChoices("rating", "overall"))
    base_overall: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("base_overall", "baseOverall"),
    )
    fin_rating: Optional[int] = Field(default=None, validation_alias=AliasChoices("fin_rating", "finRating"))
    vis_rating: Optional[int] = Field(default=None, validation_alias=AliasChoices("vis_rating", "visRating"))
    dec_rating: Optional[int] = Field(default=None, validation_alias=AliasChoices("dec_rating", "decRating"))
    def_rating: Optional[int] = Field(default=None, validation_alias=AliasChoices("def_rating", "defRating"))
    vit_rating: Optional[int] = Field(default=None, validation_alias=AliasChoices("vit_rating", "vitRating"))
    exp_rating: Optional[int] = Field(default=None, validation_alias=AliasChoices("exp_rating", "expRating"))
    fut_stats: Optional[FutStats] = Field(default=None, validation_alias=AliasChoices("fut_stats", "futStats"))
    goals: int = 0
    assists: int = 0
    matches: int = 0
    wins: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("position", mode="before")
    @classmethod
    def _normalize_position(cls, value: Any) -> Optional[Position]:
        return parse_position(value)

    def attributes(self, default: int = 50) -> AttributeRatings:
        """Stored attributes, with absent values defaulted."""

        def pick(value: Optional[int]) -> int:
            return default if value is None else max(0, min(99, value))

        return AttributeRatings(
            fin_rating=pick(self.fin_rating),
            vis_rating=pick(self.vis_rating),
            dec_rating=pick(self.dec_rating),
            def_rating=pick(self.def_rating),
            vit_rating=pick(self.vit_rating),
            exp_rating=pick(self.exp_rating),
        )
