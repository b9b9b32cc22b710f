"""Store-backed tests for duel generation."""

from __future__ import annotations

import random
from datetime import datetime

import pytest

import domain.duels.matchmaker as matchmaker_module
from domain.common import DuelStatus
from domain.duels.candidates import pair_key
from domain.duels.config import DuelParameters
from domain.duels.errors import (
    DuelAlreadyExists,
    DuelGenerationError,
    InsufficientConfirmedPlayers,
    InsufficientMemberData,
    MatchHasNoLeague,
    MatchNotFound,
    NoCompatiblePairs,
)
from domain.duels.matchmaker import DuelMatchmaker
from domain.duels.notifications import DuelNotification, NotificationKind


def _selected_key(generated) -> str:
    return pair_key(generated.duel.challenger_id, generated.duel.rival_id)


def _seed_previous_duel(seed, match_id: str, first: str, second: str, played_on: datetime) -> None:
    seed.match(match_id, status="COMPLETED", date_time=played_on)
    seed.duel(match_id, first, second, status="COMPLETED", winner_id=first)


def test_unknown_match_raises_match_not_found(session_factory) -> None:
    with pytest.raises(MatchNotFound) as exc_info:
        DuelMatchmaker(session_factory).generate("missing")
    assert exc_info.value.code == "MATCH_NOT_FOUND"


def test_generates_pending_duel_with_details(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", 6.0, match_id="m1", team="A", full_name="Ana")
    seed.player("u2", 7.25, match_id="m1", team="B", full_name="Beto")

    generated = DuelMatchmaker(session_factory, rng=random.Random(3)).generate("m1")

    assert generated.duel.status == DuelStatus.PENDING.value
    assert generated.duel.match_id == "m1"
    assert generated.duel.winner_id is None
    assert (generated.duel.challenger_id, generated.duel.rival_id) == ("u1", "u2")
    assert generated.details.challenger.full_name == "Ana"
    assert generated.details.rival.full_name == "Beto"
    assert generated.details.rating_diff == "1.25"

    stored = seed.load_duel("m1")
    assert stored is not None
    assert stored.id == generated.duel.duel_id
    assert stored.status == "PENDING"
    assert seed.count_duels() == 1


def test_second_generation_raises_duel_already_exists(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", 5.0, match_id="m1")
    seed.player("u2", 5.0, match_id="m1")
    matchmaker = DuelMatchmaker(session_factory)
    matchmaker.generate("m1")

    with pytest.raises(DuelAlreadyExists):
        matchmaker.generate("m1")
    assert seed.count_duels() == 1


def test_fewer_than_two_confirmed_players_persists_nothing(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", 5.0, match_id="m1")
    seed.user("u2")
    seed.member("u2", 6.0)
    seed.roster("m1", "u2", confirmed=False)

    with pytest.raises(InsufficientConfirmedPlayers) as exc_info:
        DuelMatchmaker(session_factory).generate("m1")

    assert exc_info.value.message == "At least 2 confirmed players are needed to create a duel."
    assert seed.count_duels() == 0


def test_friendly_match_raises_match_has_no_league(session_factory, seed) -> None:
    seed.match("m1", league_id=None)
    seed.user("u1")
    seed.user("u2")
    seed.roster("m1", "u1")
    seed.roster("m1", "u2")

    with pytest.raises(MatchHasNoLeague):
        DuelMatchmaker(session_factory).generate("m1")
    assert seed.count_duels() == 0


def test_confirmed_players_without_standings_raise_insufficient_member_data(
    session_factory, seed
) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", 5.0, match_id="m1")
    seed.user("u2")
    seed.roster("m1", "u2")
    seed.user("u3")
    seed.roster("m1", "u3")

    with pytest.raises(InsufficientMemberData):
        DuelMatchmaker(session_factory).generate("m1")
    assert seed.count_duels() == 0


def test_repeating_last_league_duel_is_rejected(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("x", 5.0, match_id="m1")
    seed.player("y", 5.5, match_id="m1")
    _seed_previous_duel(seed, "m0", "y", "x", datetime(2026, 3, 1, 20, 0))

    with pytest.raises(NoCompatiblePairs):
        DuelMatchmaker(session_factory).generate("m1")
    assert seed.count_duels() == 1


def test_only_the_latest_completed_match_constrains_pairing(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("x", 5.0, match_id="m1")
    seed.player("y", 5.5, match_id="m1")
    seed.user("z")
    _seed_previous_duel(seed, "m-old", "x", "y", datetime(2026, 2, 1, 20, 0))
    _seed_previous_duel(seed, "m-new", "x", "z", datetime(2026, 3, 1, 20, 0))
    seed.match("m-open", status="OPEN", date_time=datetime(2026, 3, 8, 20, 0))

    generated = DuelMatchmaker(session_factory).generate("m1")

    assert _selected_key(generated) == "x,y"


def test_previous_pair_is_never_repeated(session_factory, seed) -> None:
    seed.league()
    _seed_previous_duel(seed, "m0", "x", "y", datetime(2026, 3, 1, 20, 0))
    seed.user("x")
    seed.user("y")
    seed.user("z")
    seed.member("x", 5.0)
    seed.member("y", 5.0)
    seed.member("z", 8.0)

    for index in range(15):
        match_id = f"m{index + 1}"
        seed.match(match_id)
        for user_id in ("x", "y", "z"):
            seed.roster(match_id, user_id)

        generated = DuelMatchmaker(session_factory, rng=random.Random(index)).generate(match_id)

        assert _selected_key(generated) != "x,y"


def test_cross_side_pairs_are_preferred(session_factory, seed) -> None:
    seed.league()
    for user_id, rating in (("a1", 5.0), ("a2", 5.0), ("b1", 9.0)):
        seed.user(user_id)
        seed.member(user_id, rating)

    for index in range(20):
        match_id = f"m{index}"
        seed.match(match_id)
        seed.roster(match_id, "a1", team="a ")
        seed.roster(match_id, "a2", team=" A")
        seed.roster(match_id, "b1", team="B")

        generated = DuelMatchmaker(session_factory, rng=random.Random(index)).generate(match_id)

        assert "b1" in (generated.duel.challenger_id, generated.duel.rival_id)


def test_same_side_pairs_are_used_when_no_cross_side_pair_exists(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", 5.0, match_id="m1", team="A")
    seed.player("u2", 6.0, match_id="m1", team="a")

    generated = DuelMatchmaker(session_factory).generate("m1")

    assert _selected_key(generated) == "u1,u2"


def test_pool_size_one_picks_the_most_balanced_cross_side_pair(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("p1", 5.0, match_id="m1", team="A")
    seed.player("p2", 8.0, match_id="m1", team="A")
    seed.player("p3", 5.4, match_id="m1", team="B")
    seed.player("p4", 9.0, match_id="m1", team="B")

    generated = DuelMatchmaker(
        session_factory,
        parameters=DuelParameters(candidate_pool_size=1),
        rng=random.Random(99),
    ).generate("m1")

    assert (generated.duel.challenger_id, generated.duel.rival_id) == ("p1", "p3")
    assert generated.details.rating_diff == "0.40"


def test_missing_league_rating_counts_as_zero(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", None, match_id="m1")
    seed.player("u2", 3.25, match_id="m1")

    generated = DuelMatchmaker(session_factory).generate("m1")

    assert generated.details.rating_diff == "3.25"


def test_unconfirmed_players_are_never_drawn(session_factory, seed) -> None:
    seed.league()
    seed.user("bench")
    seed.member("bench", 5.0)
    seed.user("u1")
    seed.member("u1", 5.0)
    seed.user("u2")
    seed.member("u2", 9.0)

    for index in range(10):
        match_id = f"m{index}"
        seed.match(match_id)
        seed.roster(match_id, "u1")
        seed.roster(match_id, "u2")
        seed.roster(match_id, "bench", confirmed=False)

        generated = DuelMatchmaker(session_factory, rng=random.Random(index)).generate(match_id)

        assert _selected_key(generated) == "u1,u2"


def test_participants_are_notified_after_commit(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", 6.0, match_id="m1", full_name="Ana")
    seed.player("u2", 6.5, match_id="m1", full_name="Beto")
    sent: list[DuelNotification] = []

    generated = DuelMatchmaker(session_factory, notify=sent.append).generate("m1")

    assert [notification.user_id for notification in sent] == ["u1", "u2"]
    assert {notification.kind for notification in sent} == {NotificationKind.DUEL_PARTICIPANT}
    assert sent[0].body == "Ana vs Beto. Play well."
    assert sent[0].data == {"matchId": "m1", "duelId": generated.duel.duel_id}


def test_failing_notification_sink_does_not_undo_the_duel(session_factory, seed) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", 6.0, match_id="m1")
    seed.player("u2", 6.5, match_id="m1")

    def broken_sink(notification: DuelNotification) -> None:
        raise ConnectionError("push gateway down")

    generated = DuelMatchmaker(session_factory, notify=broken_sink).generate("m1")

    assert seed.load_duel("m1").id == generated.duel.duel_id


def test_concurrent_insert_is_reported_as_duel_already_exists(
    session_factory, seed, monkeypatch: pytest.MonkeyPatch
) -> None:
    seed.league()
    seed.match("m1")
    seed.player("u1", 6.0, match_id="m1")
    seed.player("u2", 6.5, match_id="m1")
    seed.duel("m1", "u1", "u2")
    monkeypatch.setattr(matchmaker_module, "duel_exists_for_match", lambda session, match_id: False)

    with pytest.raises(DuelAlreadyExists):
        DuelMatchmaker(session_factory).generate("m1")
    assert seed.count_duels() == 1


def test_generation_errors_share_a_base_class() -> None:
    error = NoCompatiblePairs("m1", "excluded_pair=x,y")
    assert isinstance(error, DuelGenerationError)
    assert error.match_id == "m1"
    assert "NO_COMPATIBLE_PAIRS" in str(error)
