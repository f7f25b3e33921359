"""Lightweight REST client for the pelada API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pelada REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--list-players", action="store_true", help="List the roster and exit")
    parser.add_argument("--rating", metavar="PLAYER_ID", help="Preview a player's rating without saving it")
    parser.add_argument("--history", metavar="PLAYER_ID", help="Show a player's rating history")
    parser.add_argument("--finish", metavar="MATCH_ID", help="Mark a match finished and recalculate ratings")
    parser.add_argument("--recalculate", action="store_true", help="Recalculate and persist every rating")
    parser.add_argument("--strict-position", action="store_true", help="Only count matches in the current position")
    parser.add_argument("--import-snapshot", type=Path, help="Upload players and matches from a snapshot JSON")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.import_snapshot:
            data = json.loads(args.import_snapshot.read_text(encoding="utf-8"))
            for player in data.get("players", []):
                resp = client.post("/players", json=player)
                resp.raise_for_status()
            for match in data.get("matches", []):
                resp = client.post("/matches", json=match)
                resp.raise_for_status()
            print(f"Imported {len(data.get('players', []))} players and {len(data.get('matches', []))} matches")
        if args.list_players:
            resp = client.get("/players")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.rating:
            resp = client.get(f"/players/{args.rating}/rating")
            if resp.status_code == 404:
                raise SystemExit(f"player {args.rating} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.history:
            resp = client.get(f"/players/{args.history}/history")
            if resp.status_code == 404:
                raise SystemExit(f"player {args.history} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.finish:
            resp = client.post(f"/matches/{args.finish}/finish")
            if resp.status_code == 404:
                raise SystemExit(f"match {args.finish} not found")
            resp.raise_for_status()
            payload = resp.json()
            print(f"Updated {len(payload['updated'])}/{payload['total_players']} players")
        if args.recalculate:
            body = {"strict_position_match": True} if args.strict_position else {}
            resp = client.post("/ratings/recalculate", json=body)
            resp.raise_for_status()
            payload = resp.json()
            print(f"Updated {len(payload['updated'])}/{payload['total_players']} players")
            if payload["failed"]:
                print("Failed:", json.dumps(payload["failed"], indent=2))


if __name__ == "__main__":
    main()
