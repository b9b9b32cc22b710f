"""Rivalry duel generation for a match's confirmed roster."""

from __future__ import annotations

import logging
import random

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from domain.common import Participant
from domain.duels.candidates import (
    CandidatePair,
    draw_candidate,
    enumerate_candidates,
    exclude_pair,
    rank_by_balance,
    selection_pool,
)
from domain.duels.config import DuelParameters
from domain.duels.errors import (
    DuelAlreadyExists,
    InsufficientConfirmedPlayers,
    InsufficientMemberData,
    MatchHasNoLeague,
    MatchNotFound,
    NoCompatiblePairs,
    PairSelectionFailed,
)
from domain.duels.notifications import (
    NotificationSink,
    dispatch_notifications,
    participant_notifications,
)
from domain.duels.records import GeneratedDuel, PairingDetails, PlayerIdentity
from repositories.duel_repository import (
    duel_exists_for_match,
    fetch_previous_duel_pair_key,
    insert_duel,
)
from repositories.roster_repository import (
    fetch_confirmed_roster,
    fetch_match,
    fetch_rated_members,
)

logger = logging.getLogger(__name__)

MIN_DUEL_PLAYERS = 2


class DuelMatchmaker:
    """Pick and persist one duel per match.

    Every precondition is checked before the single insert, so a failed call
    leaves the store untouched. The final uniform draw is the only random step.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        parameters: DuelParameters | None = None,
        rng: random.Random | None = None,
        notify: NotificationSink | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.parameters = parameters or DuelParameters()
        self.rng = rng or random.Random()
        self.notify = notify

    def generate(self, match_id: str) -> GeneratedDuel:
        with self.session_factory() as session:
            match = fetch_match(session, match_id)
            if match is None:
                raise MatchNotFound(match_id)

            if duel_exists_for_match(session, match_id):
                raise DuelAlreadyExists(match_id)

            roster = fetch_confirmed_roster(session, match_id)
            if len(roster) < MIN_DUEL_PLAYERS:
                raise InsufficientConfirmedPlayers(match_id, f"confirmed={len(roster)}")

            if match.league_id is None:
                raise MatchHasNoLeague(match_id)

            side_by_user = {entry.user_id: entry.side for entry in roster}
            previous_key = fetch_previous_duel_pair_key(
                session,
                league_id=match.league_id,
                exclude_match_id=match_id,
            )

            members = fetch_rated_members(
                session,
                league_id=match.league_id,
                user_ids=list(side_by_user),
            )
            if len(members) < MIN_DUEL_PLAYERS:
                raise InsufficientMemberData(match_id, f"rated_members={len(members)}")

            participants = [
                Participant(
                    id=member.user_id,
                    rating=member.rating,
                    side=side_by_user.get(member.user_id, ""),
                )
                for member in members
            ]
            identities = {
                member.user_id: PlayerIdentity(
                    full_name=member.full_name,
                    profile_photo_url=member.profile_photo_url,
                )
                for member in members
            }

            selected = self._select_pair(match_id, participants, previous_key)

            try:
                record = insert_duel(
                    session,
                    match_id=match_id,
                    challenger_id=selected.first.id,
                    rival_id=selected.second.id,
                )
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuelAlreadyExists(match_id, "concurrent duel insert") from exc

        generated = GeneratedDuel(
            duel=record,
            details=PairingDetails(
                challenger=identities[selected.first.id],
                rival=identities[selected.second.id],
                rating_diff=f"{selected.rating_diff:.2f}",
            ),
        )
        logger.info(
            "duel generated match_id=%s duel_id=%s challenger_id=%s rival_id=%s rating_diff=%s",
            match_id,
            record.duel_id,
            record.challenger_id,
            record.rival_id,
            generated.details.rating_diff,
        )
        dispatch_notifications(participant_notifications(generated), self.notify)
        return generated

    def _select_pair(
        self,
        match_id: str,
        participants: list[Participant],
        previous_key: str | None,
    ) -> CandidatePair:
        candidates = exclude_pair(enumerate_candidates(participants), previous_key)
        if not candidates:
            raise NoCompatiblePairs(match_id, f"excluded_pair={previous_key}")

        pool = selection_pool(rank_by_balance(candidates), self.parameters.candidate_pool_size)
        logger.debug(
            "duel candidates match_id=%s participants=%d candidates=%d pool=%d excluded_pair=%s",
            match_id,
            len(participants),
            len(candidates),
            len(pool),
            previous_key,
        )

        selected = draw_candidate(pool, self.rng)
        if selected is None:
            raise PairSelectionFailed(match_id)
        return selected


__all__ = ["DuelMatchmaker", "MIN_DUEL_PLAYERS"]
