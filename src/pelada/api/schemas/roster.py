from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field

from pelada.models import MatchEvent, MatchStatus


class PlayerCreateRequest(BaseModel):
    player_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("player_id", "id", "playerId"))
    name: str = Field(..., min_length=1)
    position: Optional[str] = None
    rating: Optional[float] = Field(default=None, ge=0.0, le=99.0, validation_alias=AliasChoices("rating", "overall"))
    base_overall: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=99.0,
        validation_alias=AliasChoices("base_overall", "baseOverall"),
    )
    metadata: Dict[str, Any] = Field(default_factory=dict)


class MatchCreateRequest(BaseModel):
    match_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("match_id", "id", "matchId"))
    date: str = ""
    status: MatchStatus = MatchStatus.SCHEDULED
    team_a: List[str] = Field(default_factory=list, validation_alias=AliasChoices("team_a", "teamA"))
    team_b: List[str] = Field(default_factory=list, validation_alias=AliasChoices("team_b", "teamB"))
    score_a: int = Field(default=0, ge=0, validation_alias=AliasChoices("score_a", "scoreA"))
    score_b: int = Field(default=0, ge=0, validation_alias=AliasChoices("score_b", "scoreB"))
    shootout_score_a: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("shootout_score_a", "shootoutScoreA"),
    )
    shootout_score_b: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("shootout_score_b", "shootoutScoreB"),
    )
    events: List[MatchEvent] = Field(default_factory=list)
    # Per-match position labels and goals-conceded overrides, keyed by player id.
    positions: Dict[str, str] = Field(default_factory=dict)
    conceded_overrides: Dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("conceded_overrides", "concededOverrides"),
    )
