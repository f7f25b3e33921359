"""Adapters for the red/white, name-keyed match history format.

Older league data recorded each match as two lists of per-player stat lines
(``team_white`` / ``team_red``) keyed by display name, with the position the
player played in that match and an optional manual goals-conceded figure.
These helpers convert such payloads into canonical ``MatchRecord`` objects
keyed by player id.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from pelada.models import EventType, MatchEvent, MatchRecord, MatchStatus, PlayerRecord
from pelada.models.match import Side


logger = logging.getLogger(__name__)

# White played as side A, red as side B.
_SIDES: Tuple[Tuple[str, str, Side], ...] = (
    ("team_white", "score_white", "A"),
    ("team_red", "score_red", "B"),
)


class LegacyStatLine(BaseModel):
    name: str
    goals: int = 0
    assists: int = 0
    conceded: Optional[int] = None
    position: Optional[str] = None


class LegacyMatch(BaseModel):
    id: str
    date: str = ""
    winner: Optional[str] = None
    score_red: int = 0
    score_white: int = 0
    team_red: List[LegacyStatLine] = Field(default_factory=list)
    team_white: List[LegacyStatLine] = Field(default_factory=list)


@dataclass
class ConversionReport:
    total_matches: int = 0
    converted_matches: int = 0
    unmatched_names: List[str] = field(default_factory=list)


def normalize_name(value: str) -> str:
    """Case-, accent- and whitespace-insensitive key for display names."""

    decomposed = unicodedata.normalize("NFKD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", stripped).strip().casefold()


def _name_index(players: Iterable[PlayerRecord]) -> dict[str, str]:
    index: dict[str, str] = {}
    for player in players:
        key = normalize_name(player.name)
        if not key:
            continue
        # First occurrence wins so duplicate names stay deterministic.
        index.setdefault(key, player.player_id)
    return index


def _placeholder_id(name: str) -> str:
    return f"legacy:{normalize_name(name)}"


def convert_legacy_match(
    payload: Mapping[str, Any] | LegacyMatch,
    players: Sequence[PlayerRecord],
    *,
    report: Optional[ConversionReport] = None,
) -> MatchRecord:
    legacy = payload if isinstance(payload, LegacyMatch) else LegacyMatch.model_validate(payload)
    index = _name_index(players)

    rosters: dict[Side, List[str]] = {"A": [], "B": []}
    events: List[MatchEvent] = []
    positions: dict[str, str] = {}
    overrides: dict[str, int] = {}
    scores: dict[Side, int] = {}

    for team_attr, score_attr, side in _SIDES:
        scores[side] = getattr(legacy, score_attr)
        for line in getattr(legacy, team_attr):
            player_id = index.get(normalize_name(line.name))
            if player_id is None:
                player_id = _placeholder_id(line.name)
                if report is not None and line.name not in report.unmatched_names:
                    report.unmatched_names.append(line.name)
            rosters[side].append(player_id)
            events.extend(
                MatchEvent(type=EventType.GOAL, player_id=player_id, team_id=side) for _ in range(max(0, line.goals))
            )
            events.extend(
                MatchEvent(type=EventType.ASSIST, player_id=player_id, team_id=side)
                for _ in range(max(0, line.assists))
            )
            if line.position:
                positions[player_id] = line.position
            if line.conceded is not None:
                overrides[player_id] = line.conceded

    return MatchRecord(
        match_id=legacy.id,
        date=legacy.date,
        status=MatchStatus.FINISHED,
        team_a=rosters["A"],
        team_b=rosters["B"],
        score_a=scores["A"],
        score_b=scores["B"],
        events=events,
        positions=positions,
        conceded_overrides=overrides,
    )


def convert_legacy_matches(
    payloads: Iterable[Mapping[str, Any]],
    players: Sequence[PlayerRecord],
) -> Tuple[List[MatchRecord], ConversionReport]:
    report = ConversionReport()
    matches: List[MatchRecord] = []
    for payload in payloads:
        report.total_matches += 1
        matches.append(convert_legacy_match(payload, players, report=report))
        report.converted_matches += 1
    if report.unmatched_names:
        logger.warning(
            "Legacy matches reference %s unknown players: %s",
            len(report.unmatched_names),
            ", ".join(report.unmatched_names[:5]),
        )
    return matches, report
