"""Rating engine: match aggregation, attribute scoring and Overall synthesis."""

from .aggregator import MatchAggregate, aggregate_matches, difficulty_ratio, qualifying_matches
from .attributes import calculate_attributes, confidence_divisor
from .overall import performance_average, synthesize_overall
from .service import (
    PlayerRating,
    RecalculationReport,
    calculate_player_rating,
    calculate_ratings,
    rating_updates,
    recalculate_all,
)

__all__ = [
    "MatchAggregate",
    "PlayerRating",
    "RecalculationReport",
    "aggregate_matches",
    "calculate_attributes",
    "calculate_player_rating",
    "calculate_ratings",
    "confidence_divisor",
    "difficulty_ratio",
    "performance_average",
    "qualifying_matches",
    "rating_updates",
    "recalculate_all",
    "synthesize_overall",
]
