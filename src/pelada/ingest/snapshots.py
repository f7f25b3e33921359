"""Load and write league snapshots (players plus match history) as JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from pelada.models import MatchRecord, PlayerRecord

from .legacy import ConversionReport, convert_legacy_matches


@dataclass
class LeagueSnapshot:
    players: List[PlayerRecord]
    matches: List[MatchRecord]
    conversion: Optional[ConversionReport] = None
    extra: dict = field(default_factory=dict)


def parse_snapshot(data: Mapping[str, Any], *, legacy: bool = False) -> LeagueSnapshot:
    """Validate a ``{"players": [...], "matches": [...]}`` payload."""

    if not isinstance(data, Mapping):
        raise ValueError("Snapshot must be a JSON object with 'players' and 'matches'")
    players = [PlayerRecord.model_validate(item) for item in data.get("players") or []]
    raw_matches = data.get("matches") or []
    if legacy:
        matches, report = convert_legacy_matches(raw_matches, players)
        return LeagueSnapshot(players=players, matches=matches, conversion=report)
    matches = [MatchRecord.model_validate(item) for item in raw_matches]
    return LeagueSnapshot(players=players, matches=matches)


def load_snapshot(path: Path, *, legacy: bool = False) -> LeagueSnapshot:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return parse_snapshot(data, legacy=legacy)


def write_players(
    path: Path,
    players: Iterable[PlayerRecord],
    *,
    generated_at: Optional[datetime] = None,
) -> None:
    generated_at = generated_at or datetime.now(timezone.utc)
    payload = {
        "generated_at": generated_at.isoformat(),
        "players": [player.model_dump(mode="json", by_alias=True) for player in players],
    }
    Path(path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
