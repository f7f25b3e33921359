from __future__ import annotations

from datetime import datetime
from typing import Dict, List

from pydantic import BaseModel, Field


class AggregateResponse(BaseModel):
    weighted_goals: float
    weighted_assists: float
    weighted_conceded: float
    subset_wins: int
    matches_count: int
    total_finished: int


class PlayerRatingResponse(BaseModel):
    player_id: str
    overall: float
    has_data: bool
    fin_rating: int
    vis_rating: int
    dec_rating: int
    def_rating: int
    vit_rating: int
    exp_rating: int
    fut_stats: Dict[str, int]
    aggregate: AggregateResponse


class RecalculateRequest(BaseModel):
    strict_position_match: bool | None = None
    count_shootout_wins: bool | None = None
    record_history: bool = True


class RecalculationResponse(BaseModel):
    total_players: int
    total_matches: int
    updated: List[str]
    failed: Dict[str, str] = Field(default_factory=dict)
    no_data: List[str] = Field(default_factory=list)
    ratings: List[PlayerRatingResponse] = Field(default_factory=list)


class HistoryEntryResponse(BaseModel):
    recorded_at: datetime
    overall: float
    has_match: bool
