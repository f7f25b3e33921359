"""Per-player rating pipeline and roster-wide recalculation."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from pelada.config import RatingOptions
from pelada.config.options import write_retries
from pelada.models import AttributeRatings, FutStats, MatchRecord, PlayerRecord

from .aggregator import MatchAggregate, aggregate_matches
from .attributes import calculate_attributes
from .overall import baseline_overall, synthesize_overall


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

_RETRY_DELAY_SECONDS = 0.2

UpdatePlayer = Callable[[str, Dict[str, Any]], Any]


@dataclass(frozen=True)
class PlayerRating:
    player_id: str
    overall: Union[int, float]
    attributes: AttributeRatings
    aggregate: MatchAggregate
    has_data: bool

    @property
    def fut_stats(self) -> FutStats:
        return self.attributes.to_fut_stats()


@dataclass
class RecalculationReport:
    updated: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    no_data: List[str] = field(default_factory=list)
    ratings: Dict[str, PlayerRating] = field(default_factory=dict)

    @property
    def total_players(self) -> int:
        return len(self.ratings)


def calculate_player_rating(
    player: PlayerRecord,
    matches: Sequence[MatchRecord],
    all_players: Sequence[PlayerRecord],
    options: Optional[RatingOptions] = None,
) -> PlayerRating:
    """Run aggregation, attribute scoring and Overall synthesis for one player.

    Pure over its inputs: the roster is only read for rating lookups. A
    player without qualifying matches keeps their anchor rating and neutral
    attributes.
    """

    options = options or RatingOptions()
    aggregate = aggregate_matches(player, matches, all_players, options)
    if not aggregate.has_data:
        neutral = options.neutral_attribute
        return PlayerRating(
            player_id=player.player_id,
            overall=baseline_overall(player, options),
            attributes=AttributeRatings(
                fin_rating=neutral,
                vis_rating=neutral,
                dec_rating=neutral,
                def_rating=neutral,
                vit_rating=neutral,
                exp_rating=neutral,
            ),
            aggregate=aggregate,
            has_data=False,
        )

    attributes = calculate_attributes(player, aggregate, options)
    return PlayerRating(
        player_id=player.player_id,
        overall=synthesize_overall(player, attributes, options),
        attributes=attributes,
        aggregate=aggregate,
        has_data=True,
    )


def calculate_ratings(
    players: Sequence[PlayerRecord],
    matches: Sequence[MatchRecord],
    options: Optional[RatingOptions] = None,
) -> List[PlayerRating]:
    """Rate every player against the same roster and match snapshot."""

    snapshot = tuple(players)
    history = tuple(matches)
    return [calculate_player_rating(player, history, snapshot, options) for player in snapshot]


def rating_updates(rating: PlayerRating) -> Dict[str, Any]:
    """Partial-update payload for the storage write contract."""

    payload: Dict[str, Any] = {"rating": rating.overall}
    payload.update(rating.attributes.model_dump())
    payload["fut_stats"] = rating.fut_stats.model_dump(by_alias=True)
    return {key: value for key, value in payload.items() if value is not None}


def _write_with_retry(
    update_player: UpdatePlayer,
    player_id: str,
    updates: Dict[str, Any],
    retries: int,
) -> Optional[str]:
    attempt = 0
    while True:
        try:
            update_player(player_id, updates)
            return None
        except Exception as exc:  # each write fails independently
            if attempt >= retries:
                logger.warning("Failed to persist rating for %s after %d attempts: %s", player_id, attempt + 1, exc)
                return str(exc) or exc.__class__.__name__
            attempt += 1
            time.sleep(_RETRY_DELAY_SECONDS * attempt)


def recalculate_all(
    players: Sequence[PlayerRecord],
    matches: Sequence[MatchRecord],
    update_player: UpdatePlayer,
    *,
    options: Optional[RatingOptions] = None,
    retries: Optional[int] = None,
    parallel_writes: int = 1,
) -> RecalculationReport:
    """Compute ratings for the whole roster and persist each one.

    Writes are independent: a failure for one player is retried, then
    recorded in the report, and never prevents other players from being
    written.
    """

    started = time.perf_counter()
    retries = write_retries() if retries is None else max(0, retries)
    ratings = calculate_ratings(players, matches, options)
    report = RecalculationReport(ratings={rating.player_id: rating for rating in ratings})
    report.no_data = [rating.player_id for rating in ratings if not rating.has_data]

    jobs = [(rating.player_id, rating_updates(rating)) for rating in ratings]
    workers = max(1, parallel_writes)
    if workers == 1 or len(jobs) <= 1:
        outcomes = [_write_with_retry(update_player, player_id, updates, retries) for player_id, updates in jobs]
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(
                pool.map(
                    lambda job: _write_with_retry(update_player, job[0], job[1], retries),
                    jobs,
                )
            )

    for (player_id, _), error in zip(jobs, outcomes):
        if error is None:
            report.updated.append(player_id)
        else:
            report.failed[player_id] = error

    logger.info(
        "Recalculated %s players against %s matches in %.3fs (%s updated, %s failed, %s without data)",
        len(ratings),
        len(matches),
        time.perf_counter() - started,
        len(report.updated),
        len(report.failed),
        len(report.no_data),
    )
    return report
