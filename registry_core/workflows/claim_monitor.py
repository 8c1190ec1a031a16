# registry_core/workflows/claim_monitor.py
from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from registry_core.models import StaleClaimAlert, Submission
from registry_core.workflows import LOCKABLE_STATES

logger = logging.getLogger(__name__)


def stale_claim_threshold() -> timedelta:
    return timedelta(hours=getattr(settings, "REGISTRY_STALE_CLAIM_HOURS", 24))


def check_stale_claims(*, now=None, threshold: timedelta | None = None) -> int:
    """
    Scan claimed, non-terminal submissions and raise an alert for every claim
    held longer than the threshold.

    Claims are never released here; an administrator decides what to do.

    Returns:
        int: number of newly created alerts
    """
    now = now or timezone.now()
    threshold = threshold or stale_claim_threshold()
    cutoff = now - threshold
    created_count = 0

    qs = Submission.objects.filter(
        status__in=sorted(LOCKABLE_STATES),
        current_assignee__isnull=False,
        claimed_at__isnull=False,
        claimed_at__lt=cutoff,
    )

    for submission in qs.iterator():
        age = int((now - submission.claimed_at).total_seconds())

        # One alert per claim window
        with transaction.atomic():
            alert, created = StaleClaimAlert.objects.get_or_create(
                submission=submission,
                claimed_at=submission.claimed_at,
                defaults={
                    "holder_id": submission.current_assignee_id,
                    "state": submission.status,
                    "threshold_seconds": int(threshold.total_seconds()),
                    "age_seconds": max(age, 0),
                    "triggered_at": now,
                },
            )

        if created:
            created_count += 1
            logger.warning(
                "Stale claim on %s: held by user %s in %s for %ss",
                submission,
                submission.current_assignee_id,
                submission.status,
                age,
            )

    return created_count


def resolve_open_alerts(*, submission_id, now=None) -> int:
    """
    Close open stale-claim alerts once the claim is released or decided.
    Returns number of rows updated.
    """
    now = now or timezone.now()
    return StaleClaimAlert.objects.filter(
        submission_id=submission_id,
        resolved_at__isnull=True,
    ).update(resolved_at=now)
