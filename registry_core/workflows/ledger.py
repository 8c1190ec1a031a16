# registry_core/workflows/ledger.py
from __future__ import annotations

from django.utils import timezone

from registry_core.models import LedgerEntry


def append_entry(
    *,
    submission,
    actor,
    actor_role: str,
    action: str,
    previous_status: str,
    new_status: str,
    notes: str = "",
    now=None,
) -> LedgerEntry:
    """
    Write one ledger row. Callers run this inside the same transaction as the
    submission update it describes.
    """
    return LedgerEntry.objects.create(
        submission=submission,
        actor=actor,
        actor_role=actor_role,
        action=action,
        previous_status=previous_status,
        new_status=new_status,
        notes=notes or "",
        created_at=now or timezone.now(),
    )


def history_for(submission_id):
    return (
        LedgerEntry.objects
        .filter(submission_id=submission_id)
        .select_related("actor")
        .order_by("created_at", "id")
    )
