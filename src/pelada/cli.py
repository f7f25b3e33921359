"""Command-line interface for recalculating player ratings."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path

from pydantic import ValidationError

from pelada.config import RatingOptions
from pelada.config_loader import OptionsProfile
from pelada.ingest import load_snapshot, write_players
from pelada.persistence import LeagueStore
from pelada.rating import RecalculationReport, recalculate_all


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recalculate pelada player ratings from match history")
    parser.add_argument("data", type=Path, nargs="?", default=None, help="Snapshot JSON with players and matches")
    parser.add_argument("--db", type=Path, default=None, help="SQLite league store to update in place")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("players_updated.json"),
        help="Where to write updated players when reading a snapshot file",
    )
    parser.add_argument(
        "--legacy",
        action="store_true",
        help="Snapshot matches use the red/white name-keyed format",
    )
    parser.add_argument(
        "--strict-position",
        action="store_true",
        default=None,
        help="Only count matches played in the player's current position",
    )
    parser.add_argument(
        "--shootout-wins",
        action="store_true",
        default=None,
        help="Count shootout wins of drawn matches as wins",
    )
    parser.add_argument("--load-options", type=Path, default=None, help="Load engine options JSON")
    parser.add_argument("--save-options", type=Path, default=None, help="Save engine options JSON")
    parser.add_argument("--no-history", action="store_true", help="Skip rating history entries (--db only)")
    parser.add_argument("--report", type=Path, default=None, help="Optional path to write a summary JSON")
    return parser.parse_args(argv)


def _resolve_options(args: argparse.Namespace) -> RatingOptions:
    options = RatingOptions.from_env()
    if args.load_options:
        options = OptionsProfile.load(args.load_options).options
    overrides = {}
    if args.strict_position is not None:
        overrides["strict_position_match"] = args.strict_position
    if args.shootout_wins is not None:
        overrides["count_shootout_wins"] = args.shootout_wins
    return replace(options, **overrides) if overrides else options


def _summary(report: RecalculationReport, total_matches: int) -> dict:
    return {
        "total_players": report.total_players,
        "total_matches": total_matches,
        "updated": len(report.updated),
        "failed": report.failed,
        "no_data": report.no_data,
    }


def _run_snapshot(args: argparse.Namespace, options: RatingOptions) -> dict:
    snapshot = load_snapshot(args.data, legacy=args.legacy)
    if snapshot.conversion and snapshot.conversion.unmatched_names:
        preview = ", ".join(snapshot.conversion.unmatched_names[:5])
        more = len(snapshot.conversion.unmatched_names) - 5
        suffix = f", +{more} more" if more > 0 else ""
        print(f"Players in matches without a roster entry: {preview}{suffix}")

    updated_players = {player.player_id: player for player in snapshot.players}

    def _apply(player_id: str, updates: dict) -> None:
        current = updated_players[player_id]
        merged = current.model_dump(by_alias=True)
        merged.update(updates)
        updated_players[player_id] = type(current).model_validate(merged)

    report = recalculate_all(snapshot.players, snapshot.matches, _apply, options=options)
    write_players(args.output, updated_players.values())
    print(f"Wrote {len(updated_players)} updated players to {args.output}")
    return _summary(report, len(snapshot.matches))


def _run_store(args: argparse.Namespace, options: RatingOptions) -> dict:
    store = LeagueStore(args.db)
    players = store.list_players()
    matches = store.list_matches()
    report = recalculate_all(players, matches, store.update_player, options=options)
    if not args.no_history:
        store.record_history(
            (player_id, report.ratings[player_id].overall, report.ratings[player_id].has_data)
            for player_id in report.updated
        )
    print(f"Updated {len(report.updated)}/{report.total_players} players in {args.db}")
    return _summary(report, len(matches))


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    if args.data is None and args.db is None:
        raise SystemExit("Provide a snapshot JSON file or --db to read the league store.")

    options = _resolve_options(args)
    if args.save_options:
        OptionsProfile(options).save(args.save_options)
        print(f"Saved engine options to {args.save_options}")

    try:
        summary = _run_store(args, options) if args.db else _run_snapshot(args, options)
    except (ValidationError, ValueError) as exc:
        print(f"Invalid league data: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    if summary["failed"]:
        print(f"Failed to persist {len(summary['failed'])} players: {', '.join(summary['failed'])}")
    if args.report:
        args.report.write_text(json.dumps(summary, indent=2), encoding="utf-8")
        print(f"Wrote recalculation summary to {args.report}")


if __name__ == "__main__":
    main()
