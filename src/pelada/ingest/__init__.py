"""Input adapters that normalize league snapshots and legacy match data."""

from .legacy import ConversionReport, LegacyMatch, convert_legacy_match, convert_legacy_matches, normalize_name
from .snapshots import LeagueSnapshot, load_snapshot, parse_snapshot, write_players

__all__ = [
    "ConversionReport",
    "LeagueSnapshot",
    "LegacyMatch",
    "convert_legacy_match",
    "convert_legacy_matches",
    "load_snapshot",
    "normalize_name",
    "parse_snapshot",
    "write_players",
]
