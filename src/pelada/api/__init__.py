"""REST API for the pelada league."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import Body, FastAPI, HTTPException
from pydantic import ValidationError

from pelada.api.schemas import (
    AggregateResponse,
    HistoryEntryResponse,
    MatchCreateRequest,
    PlayerCreateRequest,
    PlayerRatingResponse,
    RecalculateRequest,
    RecalculationResponse,
)
from pelada.config import RatingOptions
from pelada.models import MatchRecord, MatchStatus, PlayerRecord
from pelada.persistence import LeagueStore
from pelada.rating import PlayerRating, calculate_player_rating, recalculate_all


def rating_to_response(rating: PlayerRating) -> PlayerRatingResponse:
    aggregate = rating.aggregate
    return PlayerRatingResponse(
        player_id=rating.player_id,
        overall=rating.overall,
        has_data=rating.has_data,
        **rating.attributes.model_dump(),
        fut_stats=rating.fut_stats.model_dump(by_alias=True),
        aggregate=AggregateResponse(
            weighted_goals=aggregate.weighted_goals,
            weighted_assists=aggregate.weighted_assists,
            weighted_conceded=aggregate.weighted_conceded,
            subset_wins=aggregate.subset_wins,
            matches_count=aggregate.matches_count,
            total_finished=aggregate.total_finished,
        ),
    )


def _resolve_options(base: RatingOptions, request: RecalculateRequest | None) -> RatingOptions:
    if request is None:
        return base
    overrides: Dict[str, Any] = {}
    if request.strict_position_match is not None:
        overrides["strict_position_match"] = request.strict_position_match
    if request.count_shootout_wins is not None:
        overrides["count_shootout_wins"] = request.count_shootout_wins
    return replace(base, **overrides) if overrides else base


def recalculate_store(
    store: LeagueStore,
    options: RatingOptions,
    *,
    record_history: bool = True,
) -> RecalculationResponse:
    players = store.list_players()
    matches = store.list_matches()
    report = recalculate_all(players, matches, store.update_player, options=options)
    if record_history:
        store.record_history(
            (player_id, report.ratings[player_id].overall, report.ratings[player_id].has_data)
            for player_id in report.updated
        )
    return RecalculationResponse(
        total_players=report.total_players,
        total_matches=len(matches),
        updated=report.updated,
        failed=report.failed,
        no_data=report.no_data,
        ratings=[rating_to_response(rating) for rating in report.ratings.values()],
    )


def create_app(store: LeagueStore | None = None, options: RatingOptions | None = None) -> FastAPI:
    app = FastAPI(title="pelada league")
    store = store or LeagueStore(Path(__file__).resolve().parent.parent / "pelada.sqlite")
    base_options = options or RatingOptions.from_env()
    app.state.league_store = store
    app.state.rating_options = base_options

    def _player_or_404(player_id: str) -> PlayerRecord:
        player = store.get_player(player_id)
        if player is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player

    def _match_or_404(match_id: str) -> MatchRecord:
        match = store.get_match(match_id)
        if match is None:
            raise HTTPException(status_code=404, detail="Match not found")
        return match

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/players", response_model=List[PlayerRecord])
    async def list_players():
        return store.list_players()

    @app.post("/players", response_model=PlayerRecord, status_code=201)
    async def create_player(payload: PlayerCreateRequest):
        player = PlayerRecord(
            player_id=payload.player_id or uuid4().hex,
            name=payload.name,
            position=payload.position,
            rating=payload.rating,
            base_overall=payload.base_overall,
            metadata=payload.metadata,
        )
        return store.save_player(player)

    @app.get("/players/{player_id}", response_model=PlayerRecord)
    async def get_player(player_id: str):
        return _player_or_404(player_id)

    @app.patch("/players/{player_id}", response_model=PlayerRecord)
    async def update_player(player_id: str, updates: Dict[str, Any] = Body(...)):
        try:
            return store.update_player(player_id, updates)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc
        except ValidationError as exc:
            raise HTTPException(status_code=422, detail=exc.errors()) from exc

    @app.delete("/players/{player_id}", status_code=204)
    async def delete_player(player_id: str):
        try:
            store.delete_player(player_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail="Player not found") from exc

    @app.get("/players/{player_id}/rating", response_model=PlayerRatingResponse)
    async def preview_rating(player_id: str):
        player = _player_or_404(player_id)
        rating = calculate_player_rating(player, store.list_matches(), store.list_players(), base_options)
        return rating_to_response(rating)

    @app.get("/players/{player_id}/history", response_model=List[HistoryEntryResponse])
    async def player_history(player_id: str, limit: int = 50):
        _player_or_404(player_id)
        return [
            HistoryEntryResponse(recorded_at=entry.recorded_at, overall=entry.overall, has_match=entry.has_match)
            for entry in store.list_history(player_id, limit=limit)
        ]

    @app.get("/matches", response_model=List[MatchRecord])
    async def list_matches(status: Optional[MatchStatus] = None):
        return store.list_matches(status=status)

    @app.post("/matches", response_model=MatchRecord, status_code=201)
    async def create_match(payload: MatchCreateRequest):
        overlap = set(payload.team_a) & set(payload.team_b)
        if overlap:
            raise HTTPException(
                status_code=400,
                detail=f"Players on both teams: {', '.join(sorted(overlap))}",
            )
        data = payload.model_dump()
        data["match_id"] = payload.match_id or uuid4().hex
        return store.save_match(MatchRecord.model_validate(data))

    @app.get("/matches/{match_id}", response_model=MatchRecord)
    async def get_match(match_id: str):
        return _match_or_404(match_id)

    @app.post("/matches/{match_id}/finish", response_model=RecalculationResponse)
    async def finish_match(match_id: str):
        _match_or_404(match_id)
        store.finish_match(match_id)
        return recalculate_store(store, base_options)

    @app.post("/ratings/recalculate", response_model=RecalculationResponse)
    async def recalculate(request: RecalculateRequest | None = None):
        options = _resolve_options(base_options, request)
        return recalculate_store(
            store,
            options,
            record_history=request.record_history if request is not None else True,
        )

    return app
