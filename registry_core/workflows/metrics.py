from datetime import timedelta
from typing import Dict

from django.utils.timezone import now as tz_now

from registry_core.models import LedgerEntry
from registry_core.workflows import TERMINAL_STATES


def compute_time_in_states(*, submission_id, now=None) -> Dict[str, timedelta]:
    """
    Returns time spent in each workflow state, derived from the ledger.

    Example output:
    {
        "SUBMITTED": timedelta(hours=2),
        "PROCESSING": timedelta(days=1),
        "PENDING_VERIFICATION": timedelta(hours=3),
    }

    Terminal states accumulate no time.
    """
    entries = list(
        LedgerEntry.objects
        .filter(submission_id=submission_id)
        .order_by("created_at", "id")
    )

    durations: Dict[str, timedelta] = {}

    if not entries:
        return durations

    current_time = now or tz_now()

    for i, current in enumerate(entries):
        if current.new_status in TERMINAL_STATES:
            continue

        start = current.created_at

        if i + 1 < len(entries):
            end = entries[i + 1].created_at
        else:
            end = current_time

        durations[current.new_status] = (
            durations.get(current.new_status, timedelta()) + (end - start)
        )

    return durations


def compute_total_cycle_time(*, submission_id, now=None) -> timedelta:
    """
    Time from first ledger entry to the terminal decision (or now).
    """
    qs = LedgerEntry.objects.filter(submission_id=submission_id).order_by("created_at", "id")

    first = qs.first()
    last = qs.last()

    if not first:
        return timedelta()

    if last.new_status in TERMINAL_STATES:
        return last.created_at - first.created_at
    return (now or tz_now()) - first.created_at
