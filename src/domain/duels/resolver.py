"""Resolve a match's duel from post-match performance ratings."""

from __future__ import annotations

import logging

from sqlalchemy import event
from sqlalchemy.orm import Session, SessionTransaction, sessionmaker

from domain.common import DuelStatus
from domain.duels.config import DuelParameters
from domain.duels.notifications import (
    DuelNotification,
    NotificationSink,
    dispatch_notifications,
    result_notifications,
)
from domain.duels.records import DuelOutcome, DuelRecord
from repositories.duel_repository import fetch_open_duel, reward_duel_winner, update_duel_outcome
from repositories.roster_repository import fetch_match, fetch_match_ratings

logger = logging.getLogger(__name__)


def decide_outcome(
    challenger_id: str,
    challenger_score: float,
    rival_id: str,
    rival_score: float,
) -> tuple[DuelStatus, str | None]:
    """Strictly higher performance wins; an exact tie is a draw."""
    if challenger_score > rival_score:
        return DuelStatus.COMPLETED, challenger_id
    if rival_score > challenger_score:
        return DuelStatus.COMPLETED, rival_id
    return DuelStatus.DRAW, None


_PENDING_NOTIFICATIONS_KEY = "duel_pending_notifications"


def _defer_until_commit(
    session: Session,
    notifications: list[DuelNotification],
    sink: NotificationSink,
) -> None:
    """Queue notifications on the session until its root transaction ends."""
    session.info.setdefault(_PENDING_NOTIFICATIONS_KEY, []).append((notifications, sink))
    if not event.contains(session, "after_commit", _send_pending_notifications):
        event.listen(session, "after_commit", _send_pending_notifications)
        event.listen(session, "after_transaction_end", _drop_pending_notifications)


def _send_pending_notifications(session: Session) -> None:
    for notifications, sink in session.info.pop(_PENDING_NOTIFICATIONS_KEY, []):
        dispatch_notifications(notifications, sink)


def _drop_pending_notifications(session: Session, transaction: SessionTransaction) -> None:
    # after_commit has already drained the queue when the root transaction committed.
    if transaction.parent is not None:
        return
    dropped = session.info.pop(_PENDING_NOTIFICATIONS_KEY, [])
    if dropped:
        logger.debug("dropped %d duel notification batches after rollback", len(dropped))


class DuelResolver:
    """Best-effort duel resolution that never raises to its caller.

    ``resolve`` returns None ("no decision") when there is no open duel or when
    anything goes wrong; the fault is logged instead.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session] | None = None,
        *,
        parameters: DuelParameters | None = None,
        notify: NotificationSink | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.parameters = parameters or DuelParameters()
        self.notify = notify

    def resolve(self, match_id: str, session: Session | None = None) -> DuelOutcome | None:
        try:
            if session is not None:
                return self._resolve_in_transaction(session, match_id)
            return self._resolve_standalone(match_id)
        except Exception:
            logger.exception("duel resolution failed match_id=%s", match_id)
            return None

    def _resolve_in_transaction(self, session: Session, match_id: str) -> DuelOutcome | None:
        # Savepoint: a fault here rolls back only the duel writes, not the caller's work.
        with session.begin_nested():
            outcome = self._decide_and_record(session, match_id)
            if outcome is None:
                return None
            if outcome.winner_id is not None:
                self._reward(session, outcome)

        notifications = result_notifications(outcome)
        if notifications and self.notify is not None:
            _defer_until_commit(session, notifications, self.notify)
        return outcome

    def _resolve_standalone(self, match_id: str) -> DuelOutcome | None:
        if self.session_factory is None:
            raise RuntimeError("DuelResolver needs a session factory or a caller session")

        with self.session_factory() as session:
            outcome = self._decide_and_record(session, match_id)
            if outcome is None:
                return None
            session.commit()

            if outcome.winner_id is not None:
                try:
                    self._reward(session, outcome)
                    session.commit()
                except Exception:
                    session.rollback()
                    logger.warning(
                        "duel resolved but standings not updated match_id=%s duel_id=%s winner_id=%s",
                        match_id,
                        outcome.duel_id,
                        outcome.winner_id,
                        exc_info=True,
                    )

        dispatch_notifications(result_notifications(outcome), self.notify)
        return outcome

    def _decide_and_record(self, session: Session, match_id: str) -> DuelOutcome | None:
        duel = fetch_open_duel(session, match_id)
        if duel is None:
            logger.debug("no open duel to resolve match_id=%s", match_id)
            return None

        outcome = self._decide(session, duel)
        update_duel_outcome(
            session,
            duel_id=duel.duel_id,
            status=DuelStatus(outcome.status),
            winner_id=outcome.winner_id,
        )
        logger.info(
            "duel resolved match_id=%s duel_id=%s status=%s winner_id=%s scores=%.2f/%.2f",
            match_id,
            duel.duel_id,
            outcome.status,
            outcome.winner_id,
            outcome.challenger_score,
            outcome.rival_score,
        )
        return outcome

    def _decide(self, session: Session, duel: DuelRecord) -> DuelOutcome:
        scores = fetch_match_ratings(
            session,
            match_id=duel.match_id,
            user_ids=[duel.challenger_id, duel.rival_id],
        )
        challenger_score = scores.get(duel.challenger_id, 0.0)
        rival_score = scores.get(duel.rival_id, 0.0)
        status, winner_id = decide_outcome(
            duel.challenger_id,
            challenger_score,
            duel.rival_id,
            rival_score,
        )
        return DuelOutcome(
            duel_id=duel.duel_id,
            match_id=duel.match_id,
            challenger_id=duel.challenger_id,
            rival_id=duel.rival_id,
            status=status.value,
            winner_id=winner_id,
            challenger_score=challenger_score,
            rival_score=rival_score,
        )

    def _reward(self, session: Session, outcome: DuelOutcome) -> None:
        match = fetch_match(session, outcome.match_id)
        if match is None or match.league_id is None or outcome.winner_id is None:
            return

        updated = reward_duel_winner(
            session,
            league_id=match.league_id,
            user_id=outcome.winner_id,
            honors_increment=self.parameters.honors_reward,
            overall_increment=self.parameters.overall_reward,
        )
        if not updated:
            logger.warning(
                "duel winner has no league standing league_id=%s user_id=%s",
                match.league_id,
                outcome.winner_id,
            )


__all__ = ["DuelResolver", "decide_outcome"]
