"""Position-weighted synthesis of attributes into a single Overall."""

from __future__ import annotations

from typing import Optional, Union

from pelada.config import RatingOptions
from pelada.config.positions import get_profile_by_key
from pelada.models import AttributeRatings, PlayerRecord, Position

from .numeric import clamp, round_half_up

OVERALL_BOUNDS = (1, 99)


def performance_average(attributes: AttributeRatings, position: Optional[Position]) -> float:
    profile = get_profile_by_key(position)
    weighted = sum(getattr(attributes, field) * weight for field, weight in profile.overall_weights)
    return weighted / profile.weight_divisor


def base_value(player: PlayerRecord, options: Optional[RatingOptions] = None) -> float:
    """The anchor an Overall re-centers around: base, else current, else default.

    A stored 0 is treated as unset.
    """

    options = options or RatingOptions()
    return player.base_overall or player.rating or float(options.default_rating)


def as_rating(value: float) -> Union[int, float]:
    return int(value) if float(value).is_integer() else value


def synthesize_overall(
    player: PlayerRecord,
    attributes: AttributeRatings,
    options: Optional[RatingOptions] = None,
) -> int:
    avg_performance = performance_average(attributes, player.position)
    calculated = round_half_up(base_value(player, options) + (avg_performance / 2) - 25)
    return int(clamp(calculated, *OVERALL_BOUNDS))


def baseline_overall(player: PlayerRecord, options: Optional[RatingOptions] = None) -> Union[int, float]:
    """Overall for a player with no qualifying matches."""

    return as_rating(clamp(base_value(player, options), *OVERALL_BOUNDS))
