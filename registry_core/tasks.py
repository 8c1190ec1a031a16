# registry_core/tasks.py
from __future__ import annotations

from datetime import timedelta

from celery import shared_task

from registry_core.workflows.claim_monitor import check_stale_claims


@shared_task
def scan_stale_claims(threshold_hours: int | None = None) -> int:
    threshold = timedelta(hours=threshold_hours) if threshold_hours else None
    return check_stale_claims(threshold=threshold)
