"""Difficulty-weighted tallies of a player's finished matches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from pelada.config import RatingOptions
from pelada.config.positions import get_profile_by_key
from pelada.models import EventType, MatchRecord, PlayerRecord
from pelada.models.match import Side, opposite

from .numeric import clamp

DIFFICULTY_BOUNDS: Tuple[float, float] = (0.6, 1.5)


@dataclass(frozen=True)
class MatchAggregate:
    weighted_goals: float = 0.0
    weighted_assists: float = 0.0
    weighted_conceded: float = 0.0
    subset_wins: int = 0
    matches_count: int = 0
    # League-wide FINISHED match count, the EXP denominator.
    total_finished: int = 0
    # Ratings of defensive teammates, one entry per shared appearance.
    partner_ratings: Tuple[float, ...] = ()

    @property
    def has_data(self) -> bool:
        return self.matches_count > 0


def rating_lookup(players: Iterable[PlayerRecord]) -> dict[str, PlayerRecord]:
    return {player.player_id: player for player in players}


def team_average(
    player_ids: Sequence[str],
    roster: Mapping[str, PlayerRecord],
    *,
    default: float = 75.0,
) -> float:
    """Mean current rating of a side.

    Unknown players and players whose rating is unset or 0 count as ``default``.
    """

    if not player_ids:
        return default
    total = 0.0
    for player_id in player_ids:
        member = roster.get(player_id)
        rating = member.rating if member is not None else None
        total += rating or default
    return total / len(player_ids)


def difficulty_ratio(my_team_ovr: float, opp_team_ovr: float) -> float:
    ratio = opp_team_ovr / max(1.0, my_team_ovr)
    return clamp(ratio, *DIFFICULTY_BOUNDS)


def is_win(match: MatchRecord, side: Side, *, count_shootout_wins: bool = False) -> bool:
    mine = match.score(side)
    theirs = match.score(opposite(side))
    if mine != theirs or not count_shootout_wins:
        return mine > theirs
    my_shootout = match.shootout_score(side)
    opp_shootout = match.shootout_score(opposite(side))
    if my_shootout is None or opp_shootout is None:
        return False
    return my_shootout > opp_shootout


def qualifying_matches(
    player: PlayerRecord,
    matches: Iterable[MatchRecord],
    *,
    strict_position_match: bool = False,
) -> List[MatchRecord]:
    """Finished matches the player appeared in.

    In strict mode a match only counts when the position recorded for the
    player in that match equals their current position.
    """

    selected: List[MatchRecord] = []
    for match in matches:
        if not match.is_finished or match.side_of(player.player_id) is None:
            continue
        if strict_position_match:
            played = match.positions.get(player.player_id)
            if played is None or played != player.position:
                continue
        selected.append(match)
    return selected


def _count_events(match: MatchRecord, player_id: str, event_type: EventType) -> int:
    return sum(1 for event in match.events if event.player_id == player_id and event.type == event_type)


def defensive_partner_ratings(
    player: PlayerRecord,
    matches: Iterable[MatchRecord],
    roster: Mapping[str, PlayerRecord],
    *,
    default: float = 75.0,
) -> Tuple[float, ...]:
    """Ratings of defensive teammates, one entry per shared appearance.

    Drawn from every finished match the player appeared in, whatever position
    they played there, so strict position matching does not thin the sample.
    """

    partners = get_profile_by_key(player.position).defensive_partners
    if not partners:
        return ()
    ratings: List[float] = []
    for match in qualifying_matches(player, matches):
        side = match.side_of(player.player_id)
        if side is None:  # pragma: no cover - filtered above
            continue
        for teammate_id in match.roster(side):
            if teammate_id == player.player_id:
                continue
            teammate = roster.get(teammate_id)
            if teammate is None or teammate.position not in partners:
                continue
            ratings.append(teammate.rating or default)
    return tuple(ratings)


def aggregate_matches(
    player: PlayerRecord,
    matches: Sequence[MatchRecord],
    all_players: Sequence[PlayerRecord],
    options: Optional[RatingOptions] = None,
) -> MatchAggregate:
    options = options or RatingOptions()
    default = float(options.default_rating)
    roster = rating_lookup(all_players)

    weighted_goals = 0.0
    weighted_assists = 0.0
    weighted_conceded = 0.0
    wins = 0

    selected = qualifying_matches(
        player,
        matches,
        strict_position_match=options.strict_position_match,
    )
    for match in selected:
        side = match.side_of(player.player_id)
        if side is None:  # pragma: no cover - filtered above
            continue
        my_ids = match.roster(side)
        opp_ids = match.roster(opposite(side))

        ratio = difficulty_ratio(
            team_average(my_ids, roster, default=default),
            team_average(opp_ids, roster, default=default),
        )
        goals = _count_events(match, player.player_id, EventType.GOAL)
        assists = _count_events(match, player.player_id, EventType.ASSIST)
        conceded = match.conceded_overrides.get(player.player_id, match.score(opposite(side)))

        weighted_goals += goals * ratio
        weighted_assists += assists * ratio
        weighted_conceded += conceded * (1 / ratio)

        if is_win(match, side, count_shootout_wins=options.count_shootout_wins):
            wins += 1

    return MatchAggregate(
        weighted_goals=weighted_goals,
        weighted_assists=weighted_assists,
        weighted_conceded=weighted_conceded,
        subset_wins=wins,
        matches_count=len(selected),
        total_finished=sum(1 for match in matches if match.is_finished),
        partner_ratings=defensive_partner_ratings(player, matches, roster, default=default),
    )
