"""Conversion of aggregated match tallies into the six bounded attributes."""

from __future__ import annotations

from typing import Optional

from pelada.config import RatingOptions
from pelada.config.positions import DEF_MULTIPLIER_BOUNDS, PositionProfile, get_profile_by_key
from pelada.models import AttributeRatings, PlayerRecord

from .aggregator import MatchAggregate
from .numeric import bounded_round, clamp, round_half_up

MIN_CONFIDENT_MATCHES = 5
# Reference rating a defensive unit is compared against.
TEAM_DEF_REFERENCE = 75.0


def confidence_divisor(matches_count: int) -> int:
    return max(matches_count, MIN_CONFIDENT_MATCHES)


def rate_score(total: float, matches_count: int, scale: float) -> int:
    return bounded_round((total / confidence_divisor(matches_count) / scale) * 99)


def tempered_def_multiplier(
    profile: PositionProfile,
    partner_ratings: tuple[float, ...],
    *,
    default: float = 75.0,
) -> float:
    """Soften or sharpen the concession penalty by the strength of the back line."""

    multiplier = profile.def_multiplier
    if not profile.defensive_partners:
        return multiplier
    team_def_avg = sum(partner_ratings) / len(partner_ratings) if partner_ratings else default
    multiplier = multiplier * (2 - team_def_avg / TEAM_DEF_REFERENCE)
    return clamp(multiplier, *DEF_MULTIPLIER_BOUNDS)


def defense_score(
    aggregate: MatchAggregate,
    profile: PositionProfile,
    *,
    default: float = 75.0,
) -> int:
    avg_conceded = aggregate.weighted_conceded / max(1, aggregate.matches_count)
    multiplier = tempered_def_multiplier(profile, aggregate.partner_ratings, default=default)
    base_def = bounded_round(99 - (avg_conceded - profile.def_baseline) * multiplier)
    return round_half_up(base_def * profile.def_scale)


def calculate_attributes(
    player: PlayerRecord,
    aggregate: MatchAggregate,
    options: Optional[RatingOptions] = None,
) -> AttributeRatings:
    options = options or RatingOptions()
    profile = get_profile_by_key(player.position)
    matches_count = aggregate.matches_count

    fin = rate_score(aggregate.weighted_goals, matches_count, 5.0)
    vis = rate_score(aggregate.weighted_assists, matches_count, 5.0)
    dec = rate_score(aggregate.weighted_goals + aggregate.weighted_assists, matches_count, 8.0)
    defense = defense_score(aggregate, profile, default=float(options.default_rating))
    vit = bounded_round((aggregate.subset_wins / matches_count) * 100) if matches_count > 0 else 0
    exp = bounded_round((matches_count / max(1, aggregate.total_finished)) * 99)

    return AttributeRatings(
        fin_rating=fin,
        vis_rating=vis,
        dec_rating=dec,
        def_rating=defense,
        vit_rating=vit,
        exp_rating=exp,
    )
