"""Canonical league models shared across ingestion, rating and storage."""

from .match import EventType, MatchEvent, MatchRecord, MatchStatus
from .player import AttributeRatings, FutStats, PlayerRecord, Position, parse_position

__all__ = [
    "AttributeRatings",
    "EventType",
    "FutStats",
    "MatchEvent",
    "MatchRecord",
    "MatchStatus",
    "PlayerRecord",
    "Position",
    "parse_position",
]
