import pytest

from pelada.config import RatingOptions
from pelada.models import EventType, MatchEvent, MatchRecord, MatchStatus, PlayerRecord
from pelada.rating import (
    aggregate_matches,
    calculate_attributes,
    calculate_player_rating,
    confidence_divisor,
    difficulty_ratio,
    performance_average,
)
from pelada.rating.numeric import round_half_up


def _player(player_id: str, position: str | None = "MID", rating: float | None = 75, **extra) -> PlayerRecord:
    return PlayerRecord(player_id=player_id, name=player_id.title(), position=position, rating=rating, **extra)


def _events(player_id: str, side: str, goals: int = 0, assists: int = 0) -> list[MatchEvent]:
    events = [MatchEvent(type=EventType.GOAL, player_id=player_id, team_id=side) for _ in range(goals)]
    events += [MatchEvent(type=EventType.ASSIST, player_id=player_id, team_id=side) for _ in range(assists)]
    return events


def _match(
    match_id: str,
    team_a: list[str],
    team_b: list[str],
    score_a: int,
    score_b: int,
    events: list[MatchEvent] | None = None,
    status: MatchStatus = MatchStatus.FINISHED,
    **extra,
) -> MatchRecord:
    return MatchRecord(
        match_id=match_id,
        status=status,
        team_a=team_a,
        team_b=team_b,
        score_a=score_a,
        score_b=score_b,
        events=events or [],
        **extra,
    )


def _roster() -> list[PlayerRecord]:
    return [
        _player("striker", "FWD", base_overall=75),
        _player("mate"),
        _player("opp1"),
        _player("opp2"),
    ]


def test_single_match_forward_scenario():
    roster = _roster()
    match = _match(
        "m1",
        ["striker", "mate"],
        ["opp1", "opp2"],
        3,
        1,
        events=_events("striker", "A", goals=2, assists=1),
    )

    rating = calculate_player_rating(roster[0], [match], roster)
    aggregate = rating.aggregate

    assert aggregate.weighted_goals == pytest.approx(2.0)
    assert aggregate.weighted_assists == pytest.approx(1.0)
    assert aggregate.weighted_conceded == pytest.approx(1.0)
    assert aggregate.subset_wins == 1
    assert aggregate.matches_count == 1
    assert confidence_divisor(aggregate.matches_count) == 5

    attributes = rating.attributes
    assert attributes.fin_rating == 8
    assert attributes.vis_rating == 4
    assert attributes.dec_rating == 7
    assert attributes.def_rating == 20
    assert attributes.vit_rating == 99
    assert attributes.exp_rating == 99
    assert performance_average(attributes, roster[0].position) == pytest.approx(220.5 / 11.5)
    assert rating.overall == 60
    assert rating.has_data


def test_no_finished_matches_returns_baseline():
    anchored = _player("anchored", "DEF", rating=70, base_overall=81)
    rated = _player("rated", "GK", rating=70)
    unrated = _player("unrated", None, rating=None)
    live = _match("live", ["anchored", "rated", "unrated"], ["x"], 1, 0, status=MatchStatus.LIVE)
    roster = [anchored, rated, unrated]

    results = [calculate_player_rating(player, [live], roster) for player in roster]

    assert [result.overall for result in results] == [81, 70, 75]
    for result in results:
        assert not result.has_data
        assert set(result.attributes.model_dump().values()) == {50}


def test_difficulty_ratio_is_clamped():
    assert difficulty_ratio(40, 90) == 1.5
    assert difficulty_ratio(90, 40) == 0.6
    assert difficulty_ratio(0, 50) == 1.5
    assert difficulty_ratio(80, 80) == 1.0


def test_underdog_contribution_uses_clamped_ratio():
    roster = [
        _player("hero", "FWD", rating=40),
        _player("mate", rating=40),
        _player("star1", rating=90),
        _player("star2", rating=90),
    ]
    match = _match("m1", ["hero", "mate"], ["star1", "star2"], 1, 2, events=_events("hero", "A", goals=1))

    aggregate = aggregate_matches(roster[0], [match], roster)

    assert aggregate.weighted_goals == pytest.approx(1.5)
    assert aggregate.weighted_conceded == pytest.approx(2 / 1.5)


def test_favourite_contribution_uses_clamped_ratio():
    roster = [
        _player("star", "FWD", rating=90),
        _player("mate", rating=90),
        _player("weak1", rating=40),
        _player("weak2", rating=40),
    ]
    match = _match("m1", ["star", "mate"], ["weak1", "weak2"], 1, 0, events=_events("star", "A", goals=1))

    aggregate = aggregate_matches(roster[0], [match], roster)

    assert aggregate.weighted_goals == pytest.approx(0.6)


def test_unknown_roster_entries_default_to_75():
    roster = [_player("p1", "FWD"), _player("opp", rating=None)]
    match = _match("m1", ["p1", "ghost"], ["opp", "phantom"], 1, 0, events=_events("p1", "A", goals=1))

    aggregate = aggregate_matches(roster[0], [match], roster)

    assert aggregate.weighted_goals == pytest.approx(1.0)


def test_position_weights_change_overall():
    roster = [_player("fwd", "FWD"), _player("def", "DEF"), _player("o1"), _player("o2")]
    events = _events("fwd", "A", goals=1) + _events("def", "A", goals=1)
    match = _match("m1", ["fwd", "def"], ["o1", "o2"], 2, 0, events=events)

    forward = calculate_player_rating(roster[0], [match], roster)
    defender = calculate_player_rating(roster[1], [match], roster)

    assert forward.aggregate == defender.aggregate
    assert forward.attributes.def_rating == 20
    assert defender.attributes.def_rating == 99
    assert forward.overall == 58
    assert defender.overall == 87


def test_confidence_divisor_dampens_small_samples():
    newcomer = _player("newcomer", "FWD")
    regular = _player("regular", "FWD")
    roster = [newcomer, regular, _player("o1"), _player("o2")]
    matches = [_match("debut", ["newcomer"], ["o1"], 1, 0, events=_events("newcomer", "A", goals=1))]
    matches += [
        _match(f"m{i}", ["regular"], ["o2"], 1, 0, events=_events("regular", "A", goals=1))
        for i in range(5)
    ]

    newcomer_fin = calculate_player_rating(newcomer, matches, roster).attributes.fin_rating
    regular_fin = calculate_player_rating(regular, matches, roster).attributes.fin_rating

    assert newcomer_fin == 4
    assert regular_fin == 20
    assert newcomer_fin < regular_fin


def test_attributes_and_overall_stay_in_bounds():
    roster = [
        _player("machine", "FWD", base_overall=99),
        _player("keeper", "GK", base_overall=1),
        _player("mate"),
    ]
    blowout = _match(
        "m1",
        ["machine", "mate"],
        ["keeper"],
        100,
        0,
        events=_events("machine", "A", goals=100, assists=100),
    )
    leaky = _match("m2", ["mate"], ["keeper"], 30, 0)

    machine = calculate_player_rating(roster[0], [blowout, leaky], roster)
    keeper = calculate_player_rating(roster[1], [blowout, leaky], roster)

    for result in (machine, keeper):
        for value in result.attributes.model_dump().values():
            assert 0 <= value <= 99
        assert 1 <= result.overall <= 99
    assert machine.attributes.fin_rating == 99
    assert machine.overall == 99
    assert keeper.attributes.def_rating == 0
    assert keeper.overall == 1


def test_goalkeeper_defense_tempered_by_back_line():
    def keeper_def(keeper_rating: float, defender_rating: float) -> int:
        roster = [
            _player("gk", "GK", rating=keeper_rating),
            _player("cb", "DEF", rating=defender_rating),
            _player("o1"),
            _player("o2"),
        ]
        match = _match("m1", ["gk", "cb"], ["o1", "o2"], 0, 2)
        return calculate_player_rating(roster[0], [match], roster).attributes.def_rating

    assert keeper_def(60, 90) == 94
    assert keeper_def(90, 60) == 92


def test_goalkeeper_without_defenders_uses_default_back_line():
    roster = [_player("gk", "GK"), _player("mid"), _player("o1")]
    match = _match("m1", ["gk", "mid"], ["o1"], 0, 2)

    aggregate = aggregate_matches(roster[0], [match], roster)
    attributes = calculate_attributes(roster[0], aggregate)

    assert aggregate.partner_ratings == ()
    assert attributes.def_rating == 93


def test_strict_position_match_filters_history():
    player = _player("p1", "MID")
    roster = [player, _player("o1")]
    matches = [
        _match("m1", ["p1"], ["o1"], 1, 0, positions={"p1": "Meia"}),
        _match("m2", ["p1"], ["o1"], 1, 0, positions={"p1": "Atacante"}),
        _match("m3", ["p1"], ["o1"], 1, 0),
    ]

    relaxed = aggregate_matches(player, matches, roster)
    strict = aggregate_matches(player, matches, roster, RatingOptions(strict_position_match=True))

    assert relaxed.matches_count == 3
    assert strict.matches_count == 1


def test_shootout_wins_only_count_when_enabled():
    player = _player("p1", "MID")
    roster = [player, _player("o1")]
    match = _match("m1", ["p1"], ["o1"], 2, 2, shootout_score_a=5, shootout_score_b=4)

    default = calculate_player_rating(player, [match], roster)
    counted = calculate_player_rating(player, [match], roster, RatingOptions(count_shootout_wins=True))

    assert default.attributes.vit_rating == 0
    assert counted.attributes.vit_rating == 99


def test_conceded_override_replaces_opposing_score():
    keeper = _player("gk", "GK")
    roster = [keeper, _player("o1")]
    match = _match("m1", ["gk"], ["o1"], 0, 3, conceded_overrides={"gk": 0})

    aggregate = aggregate_matches(keeper, [match], roster)

    assert aggregate.weighted_conceded == 0


def test_exp_counts_only_finished_league_matches():
    player = _player("p1", "MID")
    roster = [player, _player("o1"), _player("o2")]
    matches = [
        _match("m1", ["p1"], ["o1"], 1, 0),
        _match("m2", ["o1"], ["o2"], 1, 0),
        _match("m3", ["o1"], ["o2"], 0, 0, status=MatchStatus.SCHEDULED),
    ]

    rating = calculate_player_rating(player, matches, roster)

    assert rating.aggregate.total_finished == 2
    assert rating.attributes.exp_rating == 50


def test_pipeline_is_idempotent():
    roster = _roster()
    match = _match("m1", ["striker", "mate"], ["opp1", "opp2"], 3, 1, events=_events("striker", "A", goals=2))

    first = calculate_player_rating(roster[0], [match], roster)
    second = calculate_player_rating(roster[0], [match], roster)

    assert first == second


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(7.425) == 7
    assert round_half_up(-0.5) == 0


def test_zero_rating_counts_as_unrated():
    roster = [
        _player("p1", "FWD", rating=0),
        _player("mate", rating=0),
        _player("o1"),
        _player("o2"),
    ]
    match = _match("m1", ["p1", "mate"], ["o1", "o2"], 1, 0, events=_events("p1", "A", goals=1))

    aggregate = aggregate_matches(roster[0], [match], roster)
    idle = calculate_player_rating(_player("idle", rating=0, base_overall=0), [], roster)

    assert aggregate.weighted_goals == pytest.approx(1.0)
    assert idle.overall == 75


def test_strict_mode_keeps_every_appearance_for_defensive_partners():
    keeper = _player("gk", "GK")
    roster = [keeper, _player("cb1", "DEF", rating=90), _player("cb2", "DEF", rating=60), _player("o1")]
    matches = [
        _match("m1", ["gk", "cb1"], ["o1"], 0, 1, positions={"gk": "Goleiro"}),
        _match("m2", ["gk", "cb2"], ["o1"], 0, 1, positions={"gk": "Atacante"}),
    ]

    aggregate = aggregate_matches(keeper, matches, roster, RatingOptions(strict_position_match=True))

    assert aggregate.matches_count == 1
    assert aggregate.partner_ratings == (90, 60)
