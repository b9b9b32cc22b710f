"""Player notifications emitted after duel writes have committed."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from domain.duels.records import DuelOutcome, GeneratedDuel

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    DUEL_PARTICIPANT = "DUEL_PARTICIPANT"
    DUEL_RESULT_WIN = "DUEL_RESULT_WIN"
    DUEL_RESULT_LOSS = "DUEL_RESULT_LOSS"


@dataclass(frozen=True)
class DuelNotification:
    user_id: str
    kind: NotificationKind
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)


NotificationSink = Callable[[DuelNotification], None]


def participant_notifications(generated: GeneratedDuel) -> list[DuelNotification]:
    """One "you are in the duel" message for each of the two players."""
    duel = generated.duel
    challenger_name = generated.details.challenger.full_name or "Rival"
    rival_name = generated.details.rival.full_name or "Rival"
    body = f"{challenger_name} vs {rival_name}. Play well."
    data = {"matchId": duel.match_id, "duelId": duel.duel_id}
    return [
        DuelNotification(
            user_id=user_id,
            kind=NotificationKind.DUEL_PARTICIPANT,
            title="You are in the duel",
            body=body,
            data=dict(data),
        )
        for user_id in (duel.challenger_id, duel.rival_id)
    ]


def result_notifications(outcome: DuelOutcome) -> list[DuelNotification]:
    """Win/loss messages; a draw notifies nobody."""
    if outcome.winner_id is None or outcome.loser_id is None:
        return []

    data = {"matchId": outcome.match_id, "duelId": outcome.duel_id}
    return [
        DuelNotification(
            user_id=outcome.winner_id,
            kind=NotificationKind.DUEL_RESULT_WIN,
            title="You won the duel",
            body="You won this match's duel.",
            data=dict(data),
        ),
        DuelNotification(
            user_id=outcome.loser_id,
            kind=NotificationKind.DUEL_RESULT_LOSS,
            title="Duel result",
            body="You lost this match's duel.",
            data=dict(data),
        ),
    ]


def dispatch_notifications(
    notifications: Iterable[DuelNotification],
    sink: NotificationSink | None,
) -> int:
    """Hand each notification to the sink; a failing send never propagates."""
    if sink is None:
        return 0

    delivered = 0
    for notification in notifications:
        try:
            sink(notification)
        except Exception:
            logger.exception(
                "notification delivery failed kind=%s user_id=%s",
                notification.kind.value,
                notification.user_id,
            )
            continue
        delivered += 1
    return delivered


__all__ = [
    "DuelNotification",
    "NotificationKind",
    "NotificationSink",
    "dispatch_notifications",
    "participant_notifications",
    "result_notifications",
]
