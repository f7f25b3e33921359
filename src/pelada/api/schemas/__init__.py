"""Pydantic models for API I/O."""

from .rating import (
    AggregateResponse,
    HistoryEntryResponse,
    PlayerRatingResponse,
    RecalculateRequest,
    RecalculationResponse,
)
from .roster import MatchCreateRequest, PlayerCreateRequest

__all__ = [
    "AggregateResponse",
    "HistoryEntryResponse",
    "MatchCreateRequest",
    "PlayerCreateRequest",
    "PlayerRatingResponse",
    "RecalculateRequest",
    "RecalculationResponse",
]
