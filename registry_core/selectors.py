# registry_core/selectors.py
"""
Read-only queue and reporting projections over Submission + LedgerEntry.

Nothing here locks or writes. Every counter is derived from rows at query
time, so results may trail the latest commit slightly and can always be
recomputed from scratch.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, Optional

from django.db.models import Count, Q, QuerySet
from django.utils import timezone

from registry_core.models import LedgerEntry, Submission
from registry_core.workflows import (
    ACTION_APPROVE,
    ACTION_REJECT,
    ACTION_RETURN,
    ACTION_SEND_TO_VERIFICATION,
    PENDING_VERIFICATION,
    SUBMISSION_STATES,
    SUBMITTED,
    TERMINAL_STATES,
    is_operator_class,
    is_verifier_class,
    normalize_role,
    normalize_state,
)
from registry_core.workflows.exceptions import WorkflowValidationError
from registry_core.workflows.ledger import history_for


PERIODS: Dict[str, Optional[timedelta]] = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
    "all": None,
}

OPERATOR_COMPLETIONS = (ACTION_SEND_TO_VERIFICATION, ACTION_RETURN)
VERIFIER_COMPLETIONS = (ACTION_APPROVE, ACTION_REJECT)


# ===============================================================
# Queues
# ===============================================================

def fifo(qs: QuerySet) -> QuerySet:
    """First submitted, first served; identical timestamps fall back to id."""
    return qs.order_by("created_at", "id")


def incoming_statuses(role: str) -> tuple:
    r = normalize_role(role)
    if is_verifier_class(r):
        return (SUBMITTED, PENDING_VERIFICATION)
    if is_operator_class(r):
        return (SUBMITTED,)
    return ()


def incoming_queue(role: str) -> QuerySet:
    statuses = incoming_statuses(role)
    if not statuses:
        return Submission.objects.none()
    return fifo(
        Submission.objects
        .filter(status__in=statuses, current_assignee__isnull=True)
        .select_related("created_by")
    )


def my_work(user) -> QuerySet:
    return fifo(
        Submission.objects
        .filter(current_assignee=user)
        .exclude(status__in=sorted(TERMINAL_STATES))
        .select_related("created_by", "current_assignee")
    )


def acted_on(user, statuses: Optional[Iterable[str]] = None) -> QuerySet:
    """
    Submissions the user has at least one ledger entry on (history pages).
    """
    qs = Submission.objects.filter(ledger_entries__actor=user).distinct()
    wanted = [normalize_state(s) for s in (statuses or []) if s]
    if wanted:
        qs = qs.filter(status__in=wanted)
    return fifo(qs.select_related("created_by", "current_assignee"))


def origin_submissions(user) -> QuerySet:
    return fifo(Submission.objects.filter(created_by=user).select_related("current_assignee"))


def submission_history(submission_id) -> QuerySet:
    return history_for(submission_id)


# ===============================================================
# Counters and reports
# ===============================================================

def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    key = (period or "month").strip().lower()
    if key not in PERIODS:
        raise WorkflowValidationError(
            "period",
            f"'period' must be one of {', '.join(PERIODS)}; got '{period}'.",
        )
    span = PERIODS[key]
    if span is None:
        return None
    return (now or timezone.now()) - span


def start_of_day(now: Optional[datetime] = None) -> datetime:
    local = timezone.localtime(now or timezone.now())
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def completion_actions(role: str) -> tuple:
    if is_verifier_class(role):
        return VERIFIER_COMPLETIONS
    if is_operator_class(role):
        return OPERATOR_COMPLETIONS
    return ()


def queue_counters(user, role: str, now: Optional[datetime] = None) -> Dict[str, int]:
    actions = completion_actions(role)
    completed_today = 0
    if actions:
        completed_today = LedgerEntry.objects.filter(
            actor=user,
            action__in=actions,
            created_at__gte=start_of_day(now),
        ).count()

    return {
        "queue_depth": incoming_queue(role).count(),
        "in_progress": my_work(user).count(),
        "completed_today": completed_today,
    }


def _entries_in_period(user, actions, period: str, now: Optional[datetime]):
    qs = LedgerEntry.objects.filter(actor=user, action__in=actions)
    start = period_start(period, now)
    if start is not None:
        qs = qs.filter(created_at__gte=start)
    return qs


def operator_report(user, period: str = "month", now: Optional[datetime] = None) -> Dict[str, Any]:
    totals = _entries_in_period(user, OPERATOR_COMPLETIONS, period, now).aggregate(
        total=Count("id"),
        sent=Count("id", filter=Q(action=ACTION_SEND_TO_VERIFICATION)),
        returned=Count("id", filter=Q(action=ACTION_RETURN)),
    )
    counters = queue_counters(user, "OPERATOR", now)

    return {
        "period": period,
        "user_id": user.pk,
        "total_processed": totals["total"],
        "sent_to_verification": totals["sent"],
        "returned_to_origin": totals["returned"],
        "queue": counters["queue_depth"],
        "processing": counters["in_progress"],
        "completed_today": counters["completed_today"],
    }


def verifier_report(user, period: str = "month", now: Optional[datetime] = None) -> Dict[str, Any]:
    totals = _entries_in_period(user, VERIFIER_COMPLETIONS, period, now).aggregate(
        total=Count("id"),
        approved=Count("id", filter=Q(action=ACTION_APPROVE)),
        rejected=Count("id", filter=Q(action=ACTION_REJECT)),
    )
    counters = queue_counters(user, "VERIFIER", now)

    return {
        "period": period,
        "user_id": user.pk,
        "total_decided": totals["total"],
        "approved": totals["approved"],
        "rejected": totals["rejected"],
        "queue": counters["queue_depth"],
        "in_progress": counters["in_progress"],
        "completed_today": counters["completed_today"],
    }


def status_summary() -> Dict[str, int]:
    summary = {state: 0 for state in SUBMISSION_STATES}
    for row in Submission.objects.values("status").annotate(total=Count("id")).order_by():
        summary[row["status"]] = row["total"]
    return summary
