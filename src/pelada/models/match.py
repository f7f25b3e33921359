"""Match records as stored by the league and read by the rating engine."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from .player import Position, parse_position


class MatchStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    LIVE = "LIVE"
    HALF_TIME = "HALF_TIME"
    FINISHED = "FINISHED"


class EventType(str, Enum):
    GOAL = "GOAL"
    ASSIST = "ASSIST"
    CARD_YELLOW = "CARD_YELLOW"
    CARD_RED = "CARD_RED"
    OWN_GOAL = "OWN_GOAL"


Side = Literal["A", "B"]


class MatchEvent(BaseModel):
    type: EventType
    player_id: str = Field(..., validation_alias=AliasChoices("player_id", "playerId"))
    team_id: Optional[Side] = Field(default=None, validation_alias=AliasChoices("team_id", "teamId"))
    period: int = Field(default=1, ge=1, le=2)
    timestamp: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class MatchRecord(BaseModel):
    """A single pickup match: two rosters of player ids, a score and its events.

    ``positions`` and ``conceded_overrides`` are only populated for matches
    converted from the legacy red/white format, which recorded the position
    each player played and an optional manual goals-conceded figure.
    """

    match_id: str = Field(..., min_length=1, validation_alias=AliasChoices("match_id", "id", "matchId"))
    date: str = ""
    status: MatchStatus = MatchStatus.SCHEDULED
    team_a: List[str] = Field(default_factory=list, validation_alias=AliasChoices("team_a", "teamA"))
    team_b: List[str] = Field(default_factory=list, validation_alias=AliasChoices("team_b", "teamB"))
    score_a: int = Field(default=0, validation_alias=AliasChoices("score_a", "scoreA"))
    score_b: int = Field(default=0, validation_alias=AliasChoices("score_b", "scoreB"))
    shootout_score_a: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("shootout_score_a", "shootoutScoreA"),
    )
    shootout_score_b: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("shootout_score_b", "shootoutScoreB"),
    )
    events: List[MatchEvent] = Field(default_factory=list)
    positions: Dict[str, Position] = Field(default_factory=dict)
    conceded_overrides: Dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("conceded_overrides", "concededOverrides"),
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("score_a", "score_b", mode="before")
    @classmethod
    def _non_negative_score(cls, value: Any) -> int:
        if value is None:
            return 0
        return max(0, int(value))

    @field_validator("positions", mode="before")
    @classmethod
    def _normalize_positions(cls, value: Any) -> Dict[str, Position]:
        if not value:
            return {}
        normalized: Dict[str, Position] = {}
        for player_id, label in dict(value).items():
            position = parse_position(label)
            if position is not None:
                normalized[str(player_id)] = position
        return normalized

    @property
    def is_finished(self) -> bool:
        return self.status == MatchStatus.FINISHED

    def side_of(self, player_id: str) -> Optional[Side]:
        if player_id in self.team_a:
            return "A"
        if player_id in self.team_b:
            return "B"
        return None

    def roster(self, side: Side) -> List[str]:
        return self.team_a if side == "A" else self.team_b

    def score(self, side: Side) -> int:
        return self.score_a if side == "A" else self.score_b

    def shootout_score(self, side: Side) -> Optional[int]:
        return self.shootout_score_a if side == "A" else self.shootout_score_b


def opposite(side: Side) -> Side:
    return "B" if side == "A" else "A"
