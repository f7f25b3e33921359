"""Per-position rating profiles used by the attribute and Overall stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from pelada.models import Position


@dataclass(frozen=True)
class PositionProfile:
    position: Optional[Position]
    # (attribute field, weight) pairs, summed in this order.
    overall_weights: Tuple[Tuple[str, float], ...]
    # Published divisor of the weighted sum. Not always the sum of the weights.
    weight_divisor: float
    def_baseline: float
    def_multiplier: float
    def_scale: float
    # Teammate positions whose ratings temper the DEF multiplier. Empty means
    # no contextual adjustment for this position.
    defensive_partners: FrozenSet[Position]


_PROFILES: Dict[Position, PositionProfile] = {
    Position.FWD: PositionProfile(
        position=Position.FWD,
        overall_weights=(
            ("fin_rating", 6.5),
            ("dec_rating", 2.0),
            ("vis_rating", 1.5),
            ("vit_rating", 1.0),
            ("exp_rating", 0.5),
        ),
        weight_divisor=11.5,
        def_baseline=2.0,
        def_multiplier=4.0,
        def_scale=0.2,
        defensive_partners=frozenset(),
    ),
    Position.GK: PositionProfile(
        position=Position.GK,
        overall_weights=(
            ("def_rating", 8.0),
            ("exp_rating", 2.0),
            ("vit_rating", 1.0),
        ),
        weight_divisor=11.0,
        def_baseline=1.0,
        def_multiplier=6.0,
        def_scale=1.0,
        defensive_partners=frozenset({Position.DEF}),
    ),
    Position.MID: PositionProfile(
        position=Position.MID,
        overall_weights=(
            ("vis_rating", 3.5),
            ("dec_rating", 2.5),
            ("vit_rating", 2.0),
            ("fin_rating", 1.5),
            ("exp_rating", 1.0),
            ("def_rating", 1.0),
        ),
        weight_divisor=11.5,
        def_baseline=2.0,
        def_multiplier=4.0,
        def_scale=0.4,
        defensive_partners=frozenset(),
    ),
    Position.DEF: PositionProfile(
        position=Position.DEF,
        overall_weights=(
            ("def_rating", 6.0),
            ("vit_rating", 2.0),
            ("dec_rating", 1.5),
            ("vis_rating", 1.0),
            ("fin_rating", 1.0),
            ("exp_rating", 0.5),
        ),
        weight_divisor=11.5,
        def_baseline=2.0,
        def_multiplier=4.0,
        def_scale=1.0,
        defensive_partners=frozenset({Position.GK, Position.DEF}),
    ),
}

# Players without a recognized position: simple mean, untempered DEF.
FALLBACK_PROFILE = PositionProfile(
    position=None,
    overall_weights=tuple(
        (field, 1.0)
        for field in ("fin_rating", "dec_rating", "vis_rating", "def_rating", "vit_rating", "exp_rating")
    ),
    weight_divisor=6.0,
    def_baseline=2.0,
    def_multiplier=4.0,
    def_scale=1.0,
    defensive_partners=frozenset(),
)

DEF_MULTIPLIER_BOUNDS: Tuple[float, float] = (2.0, 10.0)


def iter_profiles() -> Iterable[PositionProfile]:
    """Return an iterator of all configured position profiles."""

    return _PROFILES.values()


def get_profile(position: Union[Position, str]) -> PositionProfile:
    """Fetch the profile for a position, raising KeyError if missing."""

    key = position if isinstance(position, Position) else str(position).upper()
    try:
        return _PROFILES[Position(key)]
    except ValueError:
        raise KeyError(f"No rating profile configured for position={position!r}") from None


def get_profile_by_key(position: Optional[Position]) -> PositionProfile:
    """Resolve the profile for an optional position, using the fallback for ``None``."""

    if position is None:
        return FALLBACK_PROFILE
    return get_profile(position)


# Read-only view keyed by position code.
POSITION_PROFILES: Mapping[str, PositionProfile] = {
    position.value: profile for position, profile in _PROFILES.items()
}
