import pytest
from pydantic import ValidationError

from pelada.models import AttributeRatings, MatchRecord, PlayerRecord, Position, parse_position


def test_player_record_is_frozen():
    record = PlayerRecord(player_id="p1", name="Nicolas", position="FWD", rating=85)

    assert record.player_id == "p1"
    assert record.position is Position.FWD

    with pytest.raises((TypeError, ValidationError)):
        record.player_id = "p2"  # type: ignore[attr-defined]


def test_player_record_accepts_legacy_keys():
    record = PlayerRecord.model_validate(
        {
            "id": "7",
            "name": "Careg",
            "position": "ATACANTE",
            "overall": 83,
            "baseOverall": 80,
            "finRating": 61,
            "futStats": {"pac": 70, "sho": 61, "pas": 50, "dri": 40, "def": 12, "phy": 90},
        }
    )

    assert record.player_id == "7"
    assert record.position is Position.FWD
    assert record.rating == 83
    assert record.base_overall == 80
    assert record.fin_rating == 61
    assert record.fut_stats is not None
    assert record.fut_stats.def_ == 12


@pytest.mark.parametrize(
    "label, expected",
    [
        ("GK", Position.GK),
        ("Goleiro", Position.GK),
        ("gol", Position.GK),
        ("ZAGUEIRO", Position.DEF),
        ("Defensor", Position.DEF),
        ("cb", Position.DEF),
        ("Meia", Position.MID),
        ("MEIO", Position.MID),
        ("Atacante", Position.FWD),
        ("ST", Position.FWD),
        ("libero", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_position_labels(label, expected):
    assert parse_position(label) == expected


def test_unknown_position_is_tolerated():
    record = PlayerRecord(player_id="p1", name="Someone", position="SWEEPER-KEEPER")
    assert record.position is None


def test_fut_stats_projection_maps_attributes():
    attributes = AttributeRatings(
        fin_rating=10,
        vis_rating=20,
        dec_rating=30,
        def_rating=40,
        vit_rating=50,
        exp_rating=60,
    )
    stats = attributes.to_fut_stats()

    assert stats.sho == 10
    assert stats.pas == 20
    assert stats.dri == 30
    assert stats.def_ == 40
    assert stats.pac == 50
    assert stats.phy == 60
    assert stats.model_dump(by_alias=True)["def"] == 40


def test_stored_attributes_default_to_neutral():
    record = PlayerRecord(player_id="p1", name="New", vis_rating=77)
    attributes = record.attributes()
    assert attributes.vis_rating == 77
    assert attributes.fin_rating == 50


def test_match_record_normalizes_scores_and_positions():
    match = MatchRecord.model_validate(
        {
            "id": "m1",
            "status": "FINISHED",
            "teamA": ["p1"],
            "teamB": ["p2"],
            "scoreA": -2,
            "scoreB": 3,
            "positions": {"p1": "Meia", "p2": "???"},
        }
    )

    assert match.score_a == 0
    assert match.score_b == 3
    assert match.positions == {"p1": Position.MID}
    assert match.side_of("p2") == "B"
    assert match.side_of("nobody") is None
    assert match.is_finished
